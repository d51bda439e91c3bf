"""
SCENARIO MATCHER (ENGINE-1)
Score a signal vector against every scenario in the catalog

RESPONSIBILITIES:
- Score must-have and confluence constraints
- Rank scenarios by confidence
- Select best match and alternatives

RULES:
❌ No history access
❌ No partial vectors
✅ Pure calculation
✅ Deterministic output (ties keep catalog id order)
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple

from capital_flow.domain.models import (
    AnalyzerSettings,
    ConfidenceLevel,
    InvalidSignalVector,
    MatchResult,
    MatchScore,
    ScenarioDefinition,
    SignalVector,
)
from capital_flow.domain.services.scenario_catalog import ScenarioCatalog

logger = logging.getLogger(__name__)


MUST_HAVE_POINTS = 10
CONFLUENCE_POINTS = 3
HIGH_CONFIDENCE_MIN = 80
MEDIUM_CONFIDENCE_MIN = 60


class ScenarioMatcher:
    """
    Scenario Matcher
    Classifies a day's signals, does NOT persist anything
    """

    def __init__(
        self,
        catalog: ScenarioCatalog,
        settings: AnalyzerSettings = AnalyzerSettings(),
    ):
        self.catalog = catalog
        self.alternative_min_percentage = settings.alternative_min_percentage
        self.max_alternatives = settings.max_alternatives
        self.high_confidence_min = settings.high_confidence_min
        self.medium_confidence_min = settings.medium_confidence_min

    def match(self, signals: SignalVector) -> MatchResult:
        """
        Classify a signal vector

        Args:
            signals: Today's complete signal vector

        Returns:
            MatchResult with best match, alternatives and all scores

        Raises:
            InvalidSignalVector: input is not a complete SignalVector
        """
        if not isinstance(signals, SignalVector):
            raise InvalidSignalVector("Matcher requires a complete SignalVector")

        scores = [
            self.score_scenario(
                scenario, signals,
                high_min=self.high_confidence_min,
                medium_min=self.medium_confidence_min,
            )
            for scenario in self.catalog.all()
        ]
        ranked = self._rank(scores)

        alternatives = tuple(
            s for s in ranked[1:1 + self.max_alternatives]
            if s.percentage > self.alternative_min_percentage
        )

        logger.debug(
            "Matched %s -> scenario %s (%s%%)",
            signals.to_dict(), ranked[0].scenario.id, ranked[0].percentage
        )
        return MatchResult(
            best_match=ranked[0],
            alternative_matches=alternatives,
            all_scores=ranked,
        )

    @staticmethod
    def score_scenario(
        scenario: ScenarioDefinition,
        signals: SignalVector,
        high_min: int = HIGH_CONFIDENCE_MIN,
        medium_min: int = MEDIUM_CONFIDENCE_MIN,
    ) -> MatchScore:
        """
        Score one scenario

        Must-have: 10 points each, misses are reported.
        Confluence: 3 points each, misses are silent.
        Confidence: high at >= high_min, medium at >= medium_min, else low.
        """
        raw_score = 0
        max_score = 0
        missing: List[str] = []

        for asset, requirement in scenario.must_have:
            max_score += MUST_HAVE_POINTS
            if requirement.satisfies(signals.get(asset)):
                raw_score += MUST_HAVE_POINTS
            else:
                missing.append(f"{asset.label} should be {requirement.describe(' or ')}")

        for asset, requirement in scenario.confluence:
            max_score += CONFLUENCE_POINTS
            if requirement.satisfies(signals.get(asset)):
                raw_score += CONFLUENCE_POINTS

        percentage = ScenarioMatcher._calculate_percentage(raw_score, max_score)
        return MatchScore(
            scenario=scenario,
            raw_score=raw_score,
            max_score=max_score,
            percentage=percentage,
            confidence_level=ConfidenceLevel.from_percentage(percentage, high_min, medium_min),
            missing_signals=tuple(missing),
        )

    @staticmethod
    def _calculate_percentage(raw_score: int, max_score: int) -> int:
        """
        Calculate confidence percentage

        Formula: round_half_up(100 * raw / max)
        """
        if max_score <= 0:
            raise ValueError("Max score must be positive")

        pct = Decimal(100 * raw_score) / Decimal(max_score)
        return int(pct.quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    @staticmethod
    def _rank(scores: List[MatchScore]) -> Tuple[MatchScore, ...]:
        """Stable sort by percentage descending over id-ascending input"""
        by_id = sorted(scores, key=lambda s: s.scenario.id)
        return tuple(sorted(by_id, key=lambda s: s.percentage, reverse=True))
