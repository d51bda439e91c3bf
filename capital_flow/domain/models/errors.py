"""
Domain Errors
"""


class InvalidSignalVector(ValueError):
    """Signal vector is partial or holds a value outside up/down/flat"""


class ScenarioNotFound(LookupError):
    """Scenario id is not present in the catalog"""

    def __init__(self, scenario_id: int):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario not found: {scenario_id}")


class CatalogConfigError(ValueError):
    """Scenario catalog configuration is invalid"""


class DegenerateScenarioError(CatalogConfigError):
    """Scenario can never score (no must-have constraints)"""
