"""
REGIME CONTEXT ENGINE (ENGINE-2)
Describe where today's scenario sits in recent history

RESPONSIBILITIES:
- Count consecutive days in the current scenario
- Identify the previous regime
- Attribute lead/lag between assets
- Classify regime volatility
- Suggest likely next scenarios out of transitional states

RULES:
❌ No history writes
❌ No matching
✅ Pure calculation over a history snapshot
✅ Unknown scenario ids are skipped, never fatal
"""

import logging
from typing import List, Optional, Sequence, Tuple

from capital_flow.domain.models import (
    ASSETS,
    AnalyzerSettings,
    Asset,
    HistoryEntry,
    LeadLag,
    LeadLagKind,
    RegimeContext,
    ScenarioDefinition,
    ScenarioRef,
    TransitionCandidate,
    TransitionGuidance,
    Volatility,
)
from capital_flow.domain.services.scenario_catalog import ScenarioCatalog

logger = logging.getLogger(__name__)


LEAD_LAG_MIN_ENTRIES = 2
VOLATILITY_MIN_ENTRIES = 3

VOLATILITY_LABELS = {
    Volatility.INSUFFICIENT_DATA: "Insufficient data",
    Volatility.VERY_STABLE: "Very stable - same scenario throughout",
    Volatility.MODERATE: "Moderate - one transition occurred",
    Volatility.HIGH: "High - multiple regime changes",
}

TRANSITION_RECOMMENDATION = (
    "Use small position sizes (30% max) or wait for clear alignment "
    "before committing capital."
)


class RegimeContextEngine:
    """
    Regime Context Engine
    Reads history, does NOT write it
    """

    def __init__(
        self,
        catalog: ScenarioCatalog,
        settings: AnalyzerSettings = AnalyzerSettings(),
    ):
        self.catalog = catalog
        self.window_size = settings.window_size

    def compute_context(
        self,
        history: Sequence[HistoryEntry],
        best_match_scenario_id: int,
    ) -> RegimeContext:
        """
        Build regime context for the current best match

        Args:
            history: Classified days, oldest first (today included once saved)
            best_match_scenario_id: Scenario id of today's best match

        Returns:
            RegimeContext
        """
        window = self.recent_window(history)
        streak = self.consecutive_days(window, best_match_scenario_id)
        volatility = self.volatility(window)

        return RegimeContext(
            scenario_id=best_match_scenario_id,
            window_size=self.window_size,
            history_length=len(window),
            consecutive_days=streak,
            duration_label=self._duration_label(streak, best_match_scenario_id),
            volatility=volatility,
            volatility_label=VOLATILITY_LABELS[volatility],
            previous_regime=self.previous_regime(window, streak),
            lead_lag=self.lead_lag(window),
            transition=self.transition_guidance(best_match_scenario_id),
        )

    def recent_window(self, history: Sequence[HistoryEntry]) -> List[HistoryEntry]:
        """Most recent window_size entries, oldest first"""
        return list(history)[-self.window_size:]

    @staticmethod
    def consecutive_days(window: Sequence[HistoryEntry], scenario_id: int) -> int:
        """
        Count days the current scenario has held

        Walks newest to oldest, stops at the first different scenario.
        """
        streak = 0
        for entry in reversed(window):
            if entry.scenario_id != scenario_id:
                break
            streak += 1
        return streak

    def previous_regime(
        self,
        window: Sequence[HistoryEntry],
        streak: int,
    ) -> Optional[ScenarioRef]:
        """Scenario immediately before the current streak"""
        if streak >= len(window):
            return None

        previous_id = window[len(window) - streak - 1].scenario_id
        scenario = self.catalog.get(previous_id)
        if scenario is None:
            logger.warning("History references unknown scenario %s", previous_id)
            return None
        return ScenarioRef(id=scenario.id, name=scenario.name)

    @staticmethod
    def lead_lag(window: Sequence[HistoryEntry]) -> Optional[LeadLag]:
        """
        Attribute the latest move to the assets that changed

        Logic:
        - 0 changed: regime stable
        - 1 changed: that asset is leading
        - 2 changed: partial confirmation
        - 3+ changed: full regime change
        """
        if len(window) < LEAD_LAG_MIN_ENTRIES:
            return None

        today = window[-1].signals
        yesterday = window[-2].signals
        changed: Tuple[Asset, ...] = tuple(
            asset for asset in ASSETS if today.get(asset) != yesterday.get(asset)
        )
        labels = [asset.label for asset in changed]

        if not changed:
            return LeadLag(
                kind=LeadLagKind.STABLE,
                changed_assets=changed,
                summary="All assets holding steady - regime stable",
            )
        if len(changed) == 1:
            return LeadLag(
                kind=LeadLagKind.LEADER,
                changed_assets=changed,
                summary=f"{labels[0]} leading the move - watch for other assets to confirm",
            )
        if len(changed) == 2:
            return LeadLag(
                kind=LeadLagKind.PARTIAL,
                changed_assets=changed,
                summary=f"{' and '.join(labels)} shifting - partial confirmation",
            )
        return LeadLag(
            kind=LeadLagKind.FULL_CHANGE,
            changed_assets=changed,
            summary="All assets moving - strong regime change signal",
        )

    @staticmethod
    def volatility(window: Sequence[HistoryEntry]) -> Volatility:
        """Classify by number of distinct scenarios in the window"""
        if len(window) < VOLATILITY_MIN_ENTRIES:
            return Volatility.INSUFFICIENT_DATA

        distinct = len({entry.scenario_id for entry in window})
        if distinct == 1:
            return Volatility.VERY_STABLE
        if distinct == 2:
            return Volatility.MODERATE
        return Volatility.HIGH

    def transition_guidance(self, scenario_id: int) -> Optional[TransitionGuidance]:
        """Likely next scenarios when the current one is transitional"""
        if not self.catalog.is_transitional(scenario_id):
            return None

        candidates = []
        for candidate_id in self.catalog.transition_candidates(scenario_id):
            scenario = self.catalog.get(candidate_id)
            if scenario is None:
                logger.warning(
                    "Transition from %s references unknown scenario %s",
                    scenario_id, candidate_id
                )
                continue
            candidates.append(TransitionCandidate(
                scenario_id=scenario.id,
                name=scenario.name,
                watch_for=self.watch_for(scenario),
            ))

        return TransitionGuidance(
            scenario_id=scenario_id,
            candidates=tuple(candidates),
            recommendation=TRANSITION_RECOMMENDATION,
        )

    @staticmethod
    def watch_for(scenario: ScenarioDefinition) -> str:
        """Render must-have signals, e.g. 'BTC down, USDJPY up/flat'"""
        return ", ".join(
            f"{asset.label} {requirement.describe('/')}"
            for asset, requirement in scenario.must_have
        )

    @staticmethod
    def _duration_label(streak: int, scenario_id: int) -> str:
        if streak == 0:
            return "New scenario starting today"
        return f"Day {streak} of Scenario {scenario_id}"
