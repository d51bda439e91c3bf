"""
CONFIG ENGINE (ENGINE-0)
Load, validate, and expose system configuration

RESPONSIBILITIES:
- Load YAML configuration files
- Validate configuration integrity
- Expose read-only typed objects

RULES:
❌ No defaults if config missing
❌ No hardcoded scenarios
✅ Fail fast on invalid config
✅ Deterministic output
"""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, List, Tuple

from capital_flow.domain.models import (
    AnalyzerSettings,
    Asset,
    AssetTrade,
    CatalogConfigError,
    Requirement,
    ScenarioDefinition,
)
from capital_flow.domain.services.scenario_catalog import ScenarioCatalog

logger = logging.getLogger(__name__)


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for all system configuration
    """

    def __init__(self, config_dir: Path):
        """Initialize with config directory"""
        self.config_dir = Path(config_dir)
        self._catalog: ScenarioCatalog = None
        self._analyzer_settings: AnalyzerSettings = None
        self._rules: Dict = None

    def load_all(self) -> None:
        """Load all configuration files"""
        self._load_rules()
        self._load_scenarios()
        logger.info(
            "Loaded %d scenarios (%d transitional)",
            len(self._catalog), len(self._catalog.transitions)
        )

    def _read_yaml(self, name: str) -> Dict:
        path = self.config_dir / name
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise CatalogConfigError(f"Invalid config format in {path}. Expected a mapping.")
        return data

    def _load_rules(self) -> None:
        """Load window, retention and matcher rules from rules.yml"""
        self._rules = self._read_yaml("rules.yml")
        try:
            matcher = self._rules['matcher']
            self._analyzer_settings = AnalyzerSettings(
                window_size=int(self._rules['analyzer']['window_size']),
                retention_days=int(self._rules['history']['retention_days']),
                alternative_min_percentage=int(matcher['alternative_min_percentage']),
                max_alternatives=int(matcher['max_alternatives']),
                high_confidence_min=int(matcher['high_confidence_min']),
                medium_confidence_min=int(matcher['medium_confidence_min']),
            )
        except KeyError as exc:
            raise CatalogConfigError(f"Missing rule in rules.yml: {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise CatalogConfigError(f"Invalid rule in rules.yml: {exc}") from exc

    def _load_scenarios(self) -> None:
        """Load scenario catalog and transition table from scenarios.yml"""
        data = self._read_yaml("scenarios.yml")

        scenarios = [self._parse_scenario(raw) for raw in data.get('scenarios') or []]

        transitions: Dict[int, List[int]] = {}
        for raw in data.get('transitions') or []:
            source, candidates = self._parse_transition(raw)
            if source in transitions:
                raise CatalogConfigError(f"Duplicate transition entry for scenario {source}")
            transitions[source] = candidates

        self._catalog = ScenarioCatalog.build(scenarios, transitions)

    @staticmethod
    def _parse_transition(raw: Any) -> Tuple[int, List[int]]:
        if not isinstance(raw, dict):
            raise CatalogConfigError(f"Invalid transition entry {raw!r}. Expected a mapping.")
        try:
            return int(raw['from']), [int(t) for t in raw['candidates']]
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogConfigError(f"Invalid transition entry {raw!r}: {exc}") from exc

    @staticmethod
    def _parse_constraints(scenario_id: Any, raw: Dict) -> Tuple[Tuple[Asset, Requirement], ...]:
        constraints = []
        for asset_name, value in (raw or {}).items():
            try:
                constraints.append((Asset(asset_name), Requirement.parse(value)))
            except ValueError as exc:
                raise CatalogConfigError(
                    f"Scenario {scenario_id}: invalid constraint {asset_name}={value!r} ({exc})"
                ) from exc
        return tuple(constraints)

    @staticmethod
    def _parse_notes(scenario_id: Any, raw: Dict) -> Tuple[Tuple[Asset, Tuple[str, ...]], ...]:
        notes = []
        for asset_name, lines in (raw or {}).items():
            try:
                asset = Asset(asset_name)
            except ValueError as exc:
                raise CatalogConfigError(
                    f"Scenario {scenario_id}: confluence notes for unknown asset {asset_name!r}"
                ) from exc
            if isinstance(lines, str):
                lines = [lines]
            notes.append((asset, tuple(str(line).strip() for line in lines)))
        return tuple(notes)

    def _parse_scenario(self, raw: Any) -> ScenarioDefinition:
        if not isinstance(raw, dict):
            raise CatalogConfigError(f"Invalid scenario entry {raw!r}. Expected a mapping.")

        scenario_id = raw.get('id')
        try:
            trades = tuple(
                (Asset(asset_name), AssetTrade(
                    action=trade['action'],
                    type=trade['type'],
                    details=trade['details'],
                    risk=trade['risk'],
                ))
                for asset_name, trade in (raw.get('trades') or {}).items()
            )
            return ScenarioDefinition(
                id=int(scenario_id),
                name=raw['name'],
                must_have=self._parse_constraints(scenario_id, raw.get('must_have')),
                confluence=self._parse_constraints(scenario_id, raw.get('confluence')),
                description=raw.get('description', ''),
                hold_time=raw.get('hold_time', ''),
                risk_level=raw.get('risk_level', ''),
                trades=trades,
                key_points=tuple(raw.get('key_points') or ()),
                playbook=(raw.get('playbook') or '').strip(),
                confluence_notes=self._parse_notes(scenario_id, raw.get('confluence_notes')),
            )
        except CatalogConfigError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise CatalogConfigError(f"Invalid scenario {scenario_id}: {exc}") from exc

    # Public getters

    @property
    def catalog(self) -> ScenarioCatalog:
        """Get scenario catalog"""
        if self._catalog is None:
            raise RuntimeError("Config not loaded. Call load_all() first")
        return self._catalog

    @property
    def analyzer_settings(self) -> AnalyzerSettings:
        """Get window, retention and matcher settings"""
        if self._analyzer_settings is None:
            raise RuntimeError("Config not loaded. Call load_all() first")
        return self._analyzer_settings

    def get_rule(self, *keys) -> Any:
        """Get rule value by nested keys"""
        if self._rules is None:
            raise RuntimeError("Config not loaded. Call load_all() first")

        value = self._rules
        for key in keys:
            value = value[key]
        return value
