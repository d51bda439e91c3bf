from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from capital_flow.infrastructure.db.database import get_db

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready(db: AsyncSession = Depends(get_db)):
    from capital_flow.main import config_engine

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception:
        db_connected = False

    config_loaded = config_engine is not None
    return {
        "status": "ready" if db_connected and config_loaded else "not_ready",
        "db_connected": db_connected,
        "config_loaded": config_loaded,
    }
