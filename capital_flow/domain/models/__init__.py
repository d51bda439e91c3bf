"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    Asset,
    ConfidenceLevel,
    LeadLagKind,
    Signal,
    Volatility,

    # Entities
    ASSETS,
    NO_HISTORY_STATUS,
    AnalyzerSettings,
    AssetTrade,
    HistoryEntry,
    LeadLag,
    MatchResult,
    MatchScore,
    RegimeContext,
    Requirement,
    ScenarioDefinition,
    ScenarioRef,
    SignalVector,
    TransitionCandidate,
    TransitionGuidance,
)
from .errors import (
    CatalogConfigError,
    DegenerateScenarioError,
    InvalidSignalVector,
    ScenarioNotFound,
)

__all__ = [
    # Enums
    "Asset",
    "ConfidenceLevel",
    "LeadLagKind",
    "Signal",
    "Volatility",

    # Entities
    "ASSETS",
    "NO_HISTORY_STATUS",
    "AnalyzerSettings",
    "AssetTrade",
    "HistoryEntry",
    "LeadLag",
    "MatchResult",
    "MatchScore",
    "RegimeContext",
    "Requirement",
    "ScenarioDefinition",
    "ScenarioRef",
    "SignalVector",
    "TransitionCandidate",
    "TransitionGuidance",

    # Errors
    "CatalogConfigError",
    "DegenerateScenarioError",
    "InvalidSignalVector",
    "ScenarioNotFound",
]
