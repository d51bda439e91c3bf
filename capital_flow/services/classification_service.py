"""
Flow Classification Service
Glue between the pure engines and the history store
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from capital_flow.domain.models import (
    AnalyzerSettings,
    HistoryEntry,
    MatchResult,
    RegimeContext,
    SignalVector,
)
from capital_flow.domain.services.regime_context_engine import RegimeContextEngine
from capital_flow.domain.services.scenario_matcher import ScenarioMatcher
from capital_flow.infrastructure.db.repositories.history_repository import FlowHistoryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Match plus regime context for one day"""
    date: date
    signals: SignalVector
    match: MatchResult
    context: RegimeContext


class FlowClassificationService:
    """
    Classify -> persist -> re-read history -> context

    Each call works on its own history snapshot read through the
    repository it is given.
    """

    def __init__(
        self,
        matcher: ScenarioMatcher,
        context_engine: RegimeContextEngine,
        settings: AnalyzerSettings,
    ):
        self.matcher = matcher
        self.context_engine = context_engine
        self.retention_days = settings.retention_days

    async def classify_and_record(
        self,
        repo: FlowHistoryRepository,
        signals: SignalVector,
        on_date: date,
        timestamp: datetime,
    ) -> Classification:
        match = self.matcher.match(signals)
        best = match.best_match

        await repo.record(
            HistoryEntry(
                date=on_date,
                timestamp=timestamp,
                signals=signals,
                scenario_id=best.scenario.id,
                scenario_name=best.scenario.name,
                confidence=best.percentage,
            ),
            retention=self.retention_days,
        )

        history = await repo.get_recent(self.retention_days)
        context = self.context_engine.compute_context(history, best.scenario.id)

        logger.info(
            "Classified %s as scenario %s (%s%%), day %s of regime",
            on_date, best.scenario.id, best.percentage, context.consecutive_days
        )
        return Classification(date=on_date, signals=signals, match=match, context=context)

    async def analyze_day(
        self,
        repo: FlowHistoryRepository,
        on_date: date,
    ) -> Optional[Classification]:
        """Re-run the analysis for a day already in history"""
        entry = await repo.get_for_date(on_date)
        if entry is None:
            return None

        match = self.matcher.match(entry.signals)
        history = await repo.get_recent(self.retention_days)
        context = self.context_engine.compute_context(history, match.best_match.scenario.id)
        return Classification(date=on_date, signals=entry.signals, match=match, context=context)

    async def get_history(self, repo: FlowHistoryRepository, limit: Optional[int] = None) -> List[HistoryEntry]:
        limit = self.retention_days if limit is None else min(limit, self.retention_days)
        return await repo.get_recent(limit)

    async def clear_history(self, repo: FlowHistoryRepository) -> int:
        deleted = await repo.clear()
        logger.info("Cleared %d history records", deleted)
        return deleted
