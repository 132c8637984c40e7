class SimulationError(Exception):
    """Base class for every error raised by the combat engine."""


class MapParseError(SimulationError, ValueError):
    """Map text contains something other than walls, floor and units."""

    def __init__(self, message: str, row: int = -1, column: int = -1):
        super().__init__(message)
        self.row = row
        self.column = column


class UnitNotFoundError(SimulationError, KeyError):
    def __init__(self, unit_id: int):
        super().__init__(unit_id)
        self.unit_id = unit_id

    def __str__(self) -> str:
        return f"No unit with id {self.unit_id}"


class InvariantViolation(SimulationError):
    """Internal state the turn rules should make impossible."""


class CombatStalledError(SimulationError):
    def __init__(self, rounds: int):
        super().__init__(f"Combat still running after {rounds} rounds")
        self.rounds = rounds


class SearchBoundExceeded(SimulationError):
    def __init__(self, ceiling: int):
        super().__init__(f"No winning attack power found up to {ceiling}")
        self.ceiling = ceiling
