"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from capital_flow.domain.models.errors import InvalidSignalVector


class Asset(str, Enum):
    """Tracked asset (display order)"""
    BTC = "btc"
    GOLD = "gold"
    USDJPY = "usdjpy"
    EURUSD = "eurusd"

    @property
    def label(self) -> str:
        return self.value.upper()


class Signal(str, Enum):
    """Daily directional state of an asset"""
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


ASSETS: Tuple[Asset, ...] = tuple(Asset)


class LeadLagKind(str, Enum):
    """Day-over-day change pattern"""
    STABLE = "STABLE"
    LEADER = "LEADER"
    PARTIAL = "PARTIAL"
    FULL_CHANGE = "FULL_CHANGE"


class Volatility(str, Enum):
    """Regime volatility across the history window"""
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    VERY_STABLE = "VERY_STABLE"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


class ConfidenceLevel(str, Enum):
    """How much weight a best match deserves"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_percentage(cls, percentage: int, high_min: int, medium_min: int) -> "ConfidenceLevel":
        if percentage >= high_min:
            return cls.HIGH
        if percentage >= medium_min:
            return cls.MEDIUM
        return cls.LOW


NO_HISTORY_STATUS = "No historical data yet. Start tracking daily to build context."


@dataclass(frozen=True)
class SignalVector:
    """One signal per asset - Immutable, always total"""
    btc: Signal
    gold: Signal
    usdjpy: Signal
    eurusd: Signal

    def __post_init__(self):
        for asset in ASSETS:
            if not isinstance(getattr(self, asset.value), Signal):
                raise InvalidSignalVector(
                    f"{asset.label} must be one of: up, down, flat"
                )

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "SignalVector":
        """
        Build a vector from raw asset -> signal values

        Raises:
            InvalidSignalVector: missing asset, unknown asset or bad signal
        """
        if data is None:
            raise InvalidSignalVector("Signal vector is required")

        unknown = sorted(str(k) for k in data.keys() if k not in {a.value for a in ASSETS})
        if unknown:
            raise InvalidSignalVector(f"Unknown assets: {', '.join(unknown)}")

        missing = [a.label for a in ASSETS if data.get(a.value) in (None, "")]
        if missing:
            raise InvalidSignalVector(
                f"Please select all four assets before analyzing (missing: {', '.join(missing)})"
            )

        values = {}
        for asset in ASSETS:
            raw = data[asset.value]
            try:
                values[asset.value] = Signal(raw)
            except ValueError:
                raise InvalidSignalVector(
                    f"{asset.label} has invalid signal {raw!r}; expected up, down or flat"
                ) from None
        return cls(**values)

    def get(self, asset: Asset) -> Signal:
        return getattr(self, asset.value)

    def to_dict(self) -> Dict[str, str]:
        return {asset.value: self.get(asset).value for asset in ASSETS}


@dataclass(frozen=True)
class Requirement:
    """
    Signal constraint on one asset

    Either a single required signal or an ordered set of acceptable
    signals (disjunction). Order is kept for display only.
    """
    signals: Tuple[Signal, ...]

    def __post_init__(self):
        if not self.signals:
            raise ValueError("Requirement needs at least one signal")
        if len(set(self.signals)) != len(self.signals):
            raise ValueError("Requirement contains duplicate signals")

    @classmethod
    def parse(cls, value) -> "Requirement":
        """Accept a signal string or a list of signal strings"""
        if isinstance(value, (list, tuple)):
            return cls(signals=tuple(Signal(v) for v in value))
        return cls(signals=(Signal(value),))

    @property
    def is_disjunction(self) -> bool:
        return len(self.signals) > 1

    def satisfies(self, signal: Signal) -> bool:
        return signal in self.signals

    def describe(self, separator: str = " or ") -> str:
        return separator.join(s.value for s in self.signals)


@dataclass(frozen=True)
class AssetTrade:
    """Per-asset trade guidance - opaque payload"""
    action: str
    type: str
    details: str
    risk: str


@dataclass(frozen=True)
class ScenarioDefinition:
    """Scenario Definition - Immutable"""
    id: int
    name: str
    must_have: Tuple[Tuple[Asset, Requirement], ...]
    confluence: Tuple[Tuple[Asset, Requirement], ...] = ()
    description: str = ""
    hold_time: str = ""
    risk_level: str = ""
    trades: Tuple[Tuple[Asset, AssetTrade], ...] = ()
    key_points: Tuple[str, ...] = ()
    playbook: str = ""
    # Guidance for when a confluence asset disagrees, keyed by that asset
    confluence_notes: Tuple[Tuple[Asset, Tuple[str, ...]], ...] = ()

    def __post_init__(self):
        if self.id < 1:
            raise ValueError("Scenario id must be a positive integer")
        if not self.name:
            raise ValueError("Scenario name cannot be empty")

    @property
    def max_score(self) -> int:
        return 10 * len(self.must_have) + 3 * len(self.confluence)

    def trade_for(self, asset: Asset) -> Optional[AssetTrade]:
        for trade_asset, trade in self.trades:
            if trade_asset == asset:
                return trade
        return None

    def notes_for(self, asset: Asset) -> Tuple[str, ...]:
        for note_asset, notes in self.confluence_notes:
            if note_asset == asset:
                return notes
        return ()


@dataclass(frozen=True)
class MatchScore:
    """Score of one scenario against a signal vector - Immutable"""
    scenario: ScenarioDefinition
    raw_score: int
    max_score: int
    percentage: int
    confidence_level: ConfidenceLevel
    missing_signals: Tuple[str, ...] = ()

    def __post_init__(self):
        if not 0 <= self.raw_score <= self.max_score:
            raise ValueError("Raw score must be between 0 and max score")
        if not 0 <= self.percentage <= 100:
            raise ValueError("Percentage must be between 0 and 100")

    @property
    def confidence_label(self) -> str:
        """Badge text, e.g. '84% Match' or '45% Match - Mixed Signals'"""
        if self.confidence_level == ConfidenceLevel.LOW:
            return f"{self.percentage}% Match - Mixed Signals"
        return f"{self.percentage}% Match"


@dataclass(frozen=True)
class MatchResult:
    """Ranked classification - Immutable"""
    best_match: MatchScore
    alternative_matches: Tuple[MatchScore, ...]
    all_scores: Tuple[MatchScore, ...]


@dataclass(frozen=True)
class HistoryEntry:
    """One classified day - Immutable snapshot"""
    date: date
    timestamp: datetime
    signals: SignalVector
    scenario_id: int
    scenario_name: str
    confidence: int


@dataclass(frozen=True)
class ScenarioRef:
    """Lightweight scenario reference"""
    id: int
    name: str


@dataclass(frozen=True)
class LeadLag:
    """Which assets moved between the last two days"""
    kind: LeadLagKind
    changed_assets: Tuple[Asset, ...]
    summary: str


@dataclass(frozen=True)
class TransitionCandidate:
    """Likely next scenario out of a transitional one"""
    scenario_id: int
    name: str
    watch_for: str


@dataclass(frozen=True)
class TransitionGuidance:
    """Guidance while the market sits in a transitional scenario"""
    scenario_id: int
    candidates: Tuple[TransitionCandidate, ...]
    recommendation: str


@dataclass(frozen=True)
class RegimeContext:
    """Historical regime context for the current best match - Immutable"""
    scenario_id: int
    window_size: int
    history_length: int
    consecutive_days: int
    duration_label: str
    volatility: Volatility
    volatility_label: str
    previous_regime: Optional[ScenarioRef] = None
    lead_lag: Optional[LeadLag] = None
    transition: Optional[TransitionGuidance] = None

    @property
    def has_history(self) -> bool:
        return self.history_length > 0

    @property
    def is_transitional(self) -> bool:
        return self.transition is not None

    @property
    def status_label(self) -> str:
        """Headline for the context panel"""
        if not self.has_history:
            return NO_HISTORY_STATUS
        return self.duration_label


@dataclass(frozen=True)
class AnalyzerSettings:
    """Window and retention limits"""
    window_size: int = 7
    retention_days: int = 30
    alternative_min_percentage: int = 40
    max_alternatives: int = 3
    high_confidence_min: int = 80
    medium_confidence_min: int = 60

    def __post_init__(self):
        if self.window_size < 1:
            raise ValueError("Window size must be at least 1")
        if self.retention_days < self.window_size:
            raise ValueError("Retention must cover at least one window")
        if not 0 <= self.alternative_min_percentage <= 100:
            raise ValueError("Alternative threshold must be between 0 and 100")
        if self.max_alternatives < 0:
            raise ValueError("Max alternatives cannot be negative")
        if not 0 <= self.medium_confidence_min <= self.high_confidence_min <= 100:
            raise ValueError("Confidence thresholds must satisfy 0 <= medium <= high <= 100")
