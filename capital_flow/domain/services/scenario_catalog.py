"""
SCENARIO CATALOG
Immutable, validated collection of scenario definitions

RESPONSIBILITIES:
- Hold scenario definitions in canonical id order
- Lookup by id
- Hold the transition table for transitional scenarios

RULES:
❌ No mutation after construction
❌ No degenerate scenarios (nothing to score)
✅ Validate once, at load time
✅ Deterministic order (id ascending)
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from capital_flow.domain.models import (
    CatalogConfigError,
    DegenerateScenarioError,
    ScenarioDefinition,
    ScenarioNotFound,
)


MAX_TRANSITION_CANDIDATES = 3


@dataclass(frozen=True)
class ScenarioCatalog:
    """Collection of all scenario definitions"""
    scenarios: Tuple[ScenarioDefinition, ...]
    transitions: Tuple[Tuple[int, Tuple[int, ...]], ...] = ()

    @classmethod
    def build(
        cls,
        scenarios: Iterable[ScenarioDefinition],
        transitions: Optional[Mapping[int, Sequence[int]]] = None,
    ) -> "ScenarioCatalog":
        """
        Validate definitions and build a catalog

        Raises:
            CatalogConfigError: duplicate ids, overlapping constraints,
                notes for non-confluence assets, unknown transition ids
            DegenerateScenarioError: scenario without must-have constraints
        """
        ordered = tuple(sorted(scenarios, key=lambda s: s.id))
        if not ordered:
            raise CatalogConfigError("Scenario catalog cannot be empty")

        ids = [s.id for s in ordered]
        if len(ids) != len(set(ids)):
            raise CatalogConfigError("Duplicate scenario ids found in configuration")

        for scenario in ordered:
            cls._validate_scenario(scenario)

        table = tuple(
            (int(source), tuple(int(t) for t in targets))
            for source, targets in sorted((transitions or {}).items())
        )
        catalog = cls(scenarios=ordered, transitions=table)
        catalog._validate_transitions()
        return catalog

    @staticmethod
    def _validate_scenario(scenario: ScenarioDefinition) -> None:
        if not scenario.must_have or scenario.max_score == 0:
            raise DegenerateScenarioError(
                f"Scenario {scenario.id} has no must-have signals and can never match"
            )

        for label, constraints in (("must_have", scenario.must_have), ("confluence", scenario.confluence)):
            assets = [asset for asset, _ in constraints]
            if len(assets) != len(set(assets)):
                raise CatalogConfigError(
                    f"Scenario {scenario.id} lists an asset twice in {label}"
                )

        overlap = {a for a, _ in scenario.must_have} & {a for a, _ in scenario.confluence}
        if overlap:
            names = ", ".join(sorted(a.label for a in overlap))
            raise CatalogConfigError(
                f"Scenario {scenario.id} uses {names} in both must_have and confluence"
            )

        stray = {a for a, _ in scenario.confluence_notes} - {a for a, _ in scenario.confluence}
        if stray:
            names = ", ".join(sorted(a.label for a in stray))
            raise CatalogConfigError(
                f"Scenario {scenario.id} has confluence notes for {names} outside its confluence"
            )

    def _validate_transitions(self) -> None:
        for source, targets in self.transitions:
            if not self.contains(source):
                raise CatalogConfigError(f"Unknown transitional scenario: {source}")
            if not targets:
                raise CatalogConfigError(f"Transitional scenario {source} has no candidates")
            if len(targets) > MAX_TRANSITION_CANDIDATES:
                raise CatalogConfigError(
                    f"Transitional scenario {source} lists more than "
                    f"{MAX_TRANSITION_CANDIDATES} candidates"
                )
            for target in targets:
                if not self.contains(target):
                    raise CatalogConfigError(
                        f"Transition from {source} references unknown scenario {target}"
                    )

    def all(self) -> Tuple[ScenarioDefinition, ...]:
        """All scenarios, id ascending"""
        return self.scenarios

    def by_id(self, scenario_id: int) -> ScenarioDefinition:
        """Get scenario by id"""
        scenario = self.get(scenario_id)
        if scenario is None:
            raise ScenarioNotFound(scenario_id)
        return scenario

    def get(self, scenario_id: int) -> Optional[ScenarioDefinition]:
        for scenario in self.scenarios:
            if scenario.id == scenario_id:
                return scenario
        return None

    def contains(self, scenario_id: int) -> bool:
        return self.get(scenario_id) is not None

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(s.id for s in self.scenarios)

    @property
    def transition_table(self) -> Dict[int, Tuple[int, ...]]:
        """Transitional scenario id -> likely next scenario ids"""
        return dict(self.transitions)

    def is_transitional(self, scenario_id: int) -> bool:
        return scenario_id in self.transition_table

    def transition_candidates(self, scenario_id: int) -> Tuple[int, ...]:
        return self.transition_table.get(scenario_id, ())

    def __len__(self) -> int:
        return len(self.scenarios)
