"""
Transport records for classification results
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from capital_flow.domain.models import (
    ConfidenceLevel,
    HistoryEntry,
    MatchResult,
    MatchScore,
    RegimeContext,
    ScenarioDefinition,
)
from capital_flow.domain.services.scenario_catalog import ScenarioCatalog


class TradeRecord(BaseModel):
    action: str
    type: str
    details: str
    risk: str


class ScenarioRecord(BaseModel):
    id: int
    name: str
    must_have: Dict[str, List[str]]
    confluence: Dict[str, List[str]]
    description: str
    hold_time: str
    risk_level: str
    trades: Dict[str, TradeRecord] = {}
    key_points: List[str] = []
    playbook: str = ""
    confluence_notes: Dict[str, List[str]] = {}

    @classmethod
    def from_domain(cls, scenario: ScenarioDefinition) -> "ScenarioRecord":
        return cls(
            id=scenario.id,
            name=scenario.name,
            must_have={a.value: [s.value for s in r.signals] for a, r in scenario.must_have},
            confluence={a.value: [s.value for s in r.signals] for a, r in scenario.confluence},
            description=scenario.description,
            hold_time=scenario.hold_time,
            risk_level=scenario.risk_level,
            trades={
                a.value: TradeRecord(action=t.action, type=t.type, details=t.details, risk=t.risk)
                for a, t in scenario.trades
            },
            key_points=list(scenario.key_points),
            playbook=scenario.playbook,
            confluence_notes={a.value: list(notes) for a, notes in scenario.confluence_notes},
        )


class MatchScoreRecord(BaseModel):
    scenario_id: int
    scenario_name: str
    raw_score: int
    max_score: int
    percentage: int
    confidence_level: ConfidenceLevel
    confidence_label: str
    missing_signals: List[str] = []

    @classmethod
    def from_domain(cls, score: MatchScore) -> "MatchScoreRecord":
        return cls(
            scenario_id=score.scenario.id,
            scenario_name=score.scenario.name,
            raw_score=score.raw_score,
            max_score=score.max_score,
            percentage=score.percentage,
            confidence_level=score.confidence_level,
            confidence_label=score.confidence_label,
            missing_signals=list(score.missing_signals),
        )

    def to_domain(self, catalog: ScenarioCatalog) -> MatchScore:
        """Re-attach the scenario definition (raises ScenarioNotFound)"""
        return MatchScore(
            scenario=catalog.by_id(self.scenario_id),
            raw_score=self.raw_score,
            max_score=self.max_score,
            percentage=self.percentage,
            confidence_level=self.confidence_level,
            missing_signals=tuple(self.missing_signals),
        )


class MatchResultRecord(BaseModel):
    best_match: MatchScoreRecord
    alternative_matches: List[MatchScoreRecord]
    all_scores: List[MatchScoreRecord]

    @classmethod
    def from_domain(cls, result: MatchResult) -> "MatchResultRecord":
        return cls(
            best_match=MatchScoreRecord.from_domain(result.best_match),
            alternative_matches=[MatchScoreRecord.from_domain(s) for s in result.alternative_matches],
            all_scores=[MatchScoreRecord.from_domain(s) for s in result.all_scores],
        )

    def to_domain(self, catalog: ScenarioCatalog) -> MatchResult:
        return MatchResult(
            best_match=self.best_match.to_domain(catalog),
            alternative_matches=tuple(s.to_domain(catalog) for s in self.alternative_matches),
            all_scores=tuple(s.to_domain(catalog) for s in self.all_scores),
        )


class ScenarioRefRecord(BaseModel):
    id: int
    name: str


class LeadLagRecord(BaseModel):
    kind: str
    changed_assets: List[str]
    summary: str


class TransitionCandidateRecord(BaseModel):
    scenario_id: int
    name: str
    watch_for: str


class TransitionRecord(BaseModel):
    scenario_id: int
    candidates: List[TransitionCandidateRecord]
    recommendation: str


class RegimeContextRecord(BaseModel):
    scenario_id: int
    window_size: int
    history_length: int
    consecutive_days: int
    duration_label: str
    status_label: str
    volatility: str
    volatility_label: str
    previous_regime: Optional[ScenarioRefRecord] = None
    lead_lag: Optional[LeadLagRecord] = None
    transition: Optional[TransitionRecord] = None

    @classmethod
    def from_domain(cls, context: RegimeContext) -> "RegimeContextRecord":
        previous = context.previous_regime
        lead_lag = context.lead_lag
        transition = context.transition
        return cls(
            scenario_id=context.scenario_id,
            window_size=context.window_size,
            history_length=context.history_length,
            consecutive_days=context.consecutive_days,
            duration_label=context.duration_label,
            status_label=context.status_label,
            volatility=context.volatility.value,
            volatility_label=context.volatility_label,
            previous_regime=(
                ScenarioRefRecord(id=previous.id, name=previous.name) if previous else None
            ),
            lead_lag=(
                LeadLagRecord(
                    kind=lead_lag.kind.value,
                    changed_assets=[a.value for a in lead_lag.changed_assets],
                    summary=lead_lag.summary,
                ) if lead_lag else None
            ),
            transition=(
                TransitionRecord(
                    scenario_id=transition.scenario_id,
                    candidates=[
                        TransitionCandidateRecord(
                            scenario_id=c.scenario_id, name=c.name, watch_for=c.watch_for
                        )
                        for c in transition.candidates
                    ],
                    recommendation=transition.recommendation,
                ) if transition else None
            ),
        )


class HistoryRecord(BaseModel):
    date: date
    timestamp: datetime
    btc: str
    gold: str
    usdjpy: str
    eurusd: str
    scenario_id: int
    scenario_name: str
    confidence: int

    @classmethod
    def from_domain(cls, entry: HistoryEntry) -> "HistoryRecord":
        return cls(
            date=entry.date,
            timestamp=entry.timestamp,
            scenario_id=entry.scenario_id,
            scenario_name=entry.scenario_name,
            confidence=entry.confidence,
            **entry.signals.to_dict(),
        )
