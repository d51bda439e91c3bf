from datetime import date, datetime, timedelta
from pathlib import Path
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from capital_flow.infrastructure.db.database import Base, get_db
from capital_flow.infrastructure.db import models  # noqa: F401
from capital_flow.api.routes import flow, scenarios, health
from capital_flow.domain.models import HistoryEntry, SignalVector
from capital_flow.domain.services.config_engine import ConfigEngine
import capital_flow.main as app_main


CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


def _vector(btc="flat", gold="flat", usdjpy="flat", eurusd="flat") -> SignalVector:
    return SignalVector.from_mapping(
        {"btc": btc, "gold": gold, "usdjpy": usdjpy, "eurusd": eurusd}
    )


def _history(*scenario_ids, signals=None, start=date(2026, 3, 2)):
    signals = signals or [_vector()] * len(scenario_ids)
    return [
        HistoryEntry(
            date=start + timedelta(days=i),
            timestamp=datetime(2026, 3, 2, 12, 0) + timedelta(days=i),
            signals=sig,
            scenario_id=sid,
            scenario_name=f"Scenario {sid}",
            confidence=100,
        )
        for i, (sid, sig) in enumerate(zip(scenario_ids, signals))
    ]


@pytest.fixture
def make_vector():
    """Factory for complete signal vectors (unset assets are flat)"""
    return _vector


@pytest.fixture
def make_history():
    """Factory for history entries, oldest first, one per day"""
    return _history


@pytest.fixture
def config_engine() -> ConfigEngine:
    engine = ConfigEngine(CONFIG_DIR)
    engine.load_all()
    return engine


@pytest.fixture
def catalog(config_engine):
    return config_engine.catalog


@pytest.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
async def app(db_session, config_engine) -> FastAPI:
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(flow.router, prefix="/api/v1/flow")
    app.include_router(scenarios.router, prefix="/api/v1/scenarios")

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    app_main.config_engine = config_engine
    app_main.classification_service = app_main.build_service(config_engine)
    yield app
    app_main.config_engine = None
    app_main.classification_service = None


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
