from __future__ import annotations


class ScenarioError(Exception):
    """Base class for scenario analysis errors."""


class InvalidInputError(ScenarioError, ValueError):
    """Caller supplied a malformed scenario request."""


class SchemaViolationError(ScenarioError):
    """An impact assessment broke the output contract."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class CollaboratorUnavailableError(ScenarioError):
    """The text-generation collaborator could not produce a response."""


class ScenarioNotFoundError(ScenarioError, LookupError):
    def __init__(self, scenario_id: int):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario {scenario_id} not found")
