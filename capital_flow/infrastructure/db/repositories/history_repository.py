"""
Flow History Repository
Rolling window of classified days (one per date, oldest evicted first)
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from capital_flow.domain.models import HistoryEntry, InvalidSignalVector, SignalVector
from capital_flow.infrastructure.db.models import FlowHistoryModel
from capital_flow.utils.time import to_utc_naive

logger = logging.getLogger(__name__)


class FlowHistoryRepository:
    """Repository for daily classification history"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(self, entry: HistoryEntry, retention: int) -> int:
        """
        Save a classified day

        A same-day reclassification replaces the existing record and
        becomes the newest one. Records beyond `retention` are evicted.
        """
        if retention < 1:
            raise ValueError("Retention must be at least 1")

        await self.session.execute(
            delete(FlowHistoryModel).where(FlowHistoryModel.date == entry.date)
        )

        signals = entry.signals.to_dict()
        model = FlowHistoryModel(
            date=entry.date,
            timestamp=to_utc_naive(entry.timestamp),
            btc=signals["btc"],
            gold=signals["gold"],
            usdjpy=signals["usdjpy"],
            eurusd=signals["eurusd"],
            scenario_id=entry.scenario_id,
            scenario_name=entry.scenario_name,
            confidence=entry.confidence,
        )
        self.session.add(model)
        await self.session.flush()

        await self._evict_beyond(retention)
        return model.id

    async def _evict_beyond(self, retention: int) -> int:
        keep_ids = (
            select(FlowHistoryModel.id)
            .order_by(FlowHistoryModel.timestamp.desc(), FlowHistoryModel.id.desc())
            .limit(retention)
        )
        result = await self.session.execute(
            delete(FlowHistoryModel).where(FlowHistoryModel.id.not_in(keep_ids))
        )
        evicted = result.rowcount or 0
        if evicted:
            logger.info("Evicted %d history records beyond retention of %d", evicted, retention)
        return evicted

    async def get_recent(self, limit: int) -> List[HistoryEntry]:
        """Newest `limit` records, returned oldest first"""
        result = await self.session.execute(
            select(FlowHistoryModel)
            .order_by(FlowHistoryModel.timestamp.desc(), FlowHistoryModel.id.desc())
            .limit(limit)
        )
        rows = list(reversed(result.scalars().all()))
        return [entry for entry in (self._to_entry(row) for row in rows) if entry is not None]

    async def get_for_date(self, on_date: date) -> Optional[HistoryEntry]:
        result = await self.session.execute(
            select(FlowHistoryModel).where(FlowHistoryModel.date == on_date)
        )
        row = result.scalars().first()
        return self._to_entry(row) if row is not None else None

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(FlowHistoryModel.id)))
        return int(result.scalar_one())

    async def clear(self) -> int:
        """Delete all history"""
        result = await self.session.execute(delete(FlowHistoryModel))
        return result.rowcount or 0

    @staticmethod
    def _to_entry(row: FlowHistoryModel) -> Optional[HistoryEntry]:
        try:
            signals = SignalVector.from_mapping({
                "btc": row.btc,
                "gold": row.gold,
                "usdjpy": row.usdjpy,
                "eurusd": row.eurusd,
            })
        except InvalidSignalVector as exc:
            logger.warning("Skipping history record for %s: %s", row.date, exc)
            return None

        return HistoryEntry(
            date=row.date,
            timestamp=row.timestamp,
            signals=signals,
            scenario_id=row.scenario_id,
            scenario_name=row.scenario_name,
            confidence=row.confidence,
        )
