"""
Classification API Routes
Classify today's signals, re-open today's analysis, manage history
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
import logging

from capital_flow.infrastructure.db.database import get_db
from capital_flow.infrastructure.db.repositories.history_repository import FlowHistoryRepository
from capital_flow.domain.models import InvalidSignalVector, SignalVector
from capital_flow.domain.schemas.flow import (
    HistoryRecord,
    MatchResultRecord,
    RegimeContextRecord,
)
from capital_flow.services.classification_service import Classification
from capital_flow.utils.time import now_local, today_local

logger = logging.getLogger(__name__)
router = APIRouter()


# Request / response models
class ClassifyRequest(BaseModel):
    # Extra keys reach SignalVector.from_mapping, which rejects unknown assets
    model_config = ConfigDict(extra="allow")

    btc: Optional[str] = None
    gold: Optional[str] = None
    usdjpy: Optional[str] = None
    eurusd: Optional[str] = None


class ClassificationResponse(BaseModel):
    date: date
    signals: dict
    match: MatchResultRecord
    context: RegimeContextRecord


class ClearHistoryResponse(BaseModel):
    deleted: int


def _service():
    from capital_flow.main import classification_service

    if classification_service is None:
        raise HTTPException(status_code=500, detail="Configuration not loaded")
    return classification_service


def _to_response(result: Classification) -> ClassificationResponse:
    return ClassificationResponse(
        date=result.date,
        signals=result.signals.to_dict(),
        match=MatchResultRecord.from_domain(result.match),
        context=RegimeContextRecord.from_domain(result.context),
    )


@router.post("/classify", response_model=ClassificationResponse)
async def classify(request: ClassifyRequest, db: AsyncSession = Depends(get_db)):
    """
    Classify today's signals and record them in history

    A second classification on the same day replaces the first.
    """
    service = _service()
    try:
        signals = SignalVector.from_mapping(request.model_dump())
    except InvalidSignalVector as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    result = await service.classify_and_record(
        FlowHistoryRepository(db),
        signals,
        on_date=today_local(),
        timestamp=now_local(),
    )
    return _to_response(result)


@router.get("/today", response_model=ClassificationResponse)
async def get_today(db: AsyncSession = Depends(get_db)):
    """
    Re-run today's analysis from the stored signals
    """
    result = await _service().analyze_day(FlowHistoryRepository(db), today_local())
    if result is None:
        raise HTTPException(status_code=404, detail="No classification recorded today")
    return _to_response(result)


@router.get("/history", response_model=List[HistoryRecord])
async def get_history(limit: Optional[int] = None, db: AsyncSession = Depends(get_db)):
    """
    Get recorded days, newest first
    """
    if limit is not None and limit < 1:
        raise HTTPException(status_code=422, detail="limit must be at least 1")

    entries = await _service().get_history(FlowHistoryRepository(db), limit)
    return [HistoryRecord.from_domain(e) for e in reversed(entries)]


@router.delete("/history", response_model=ClearHistoryResponse)
async def clear_history(db: AsyncSession = Depends(get_db)):
    """
    Delete all recorded history
    """
    deleted = await _service().clear_history(FlowHistoryRepository(db))
    return ClearHistoryResponse(deleted=deleted)
