"""Error types raised by the simulation core and its order boundary."""


class SimulationInvariantError(RuntimeError):
    """A caller or scheduler bug. Never caught inside the core."""


class SearchWindowError(SimulationInvariantError):
    """Raised when a short move is asked to span more than its search window."""


class UnknownTargetError(SimulationInvariantError):
    """Raised when the scheduler meets a target variant it cannot dispatch."""


class OrderError(Exception):
    """Recoverable domain failure reported back to whoever issued the request."""


class PlacementError(OrderError):
    """Footprint is out of bounds or overlaps an existing occupant."""


class HouseNotFoundError(OrderError):
    """Referenced house is neither planned nor built."""


class UnknownCharacterError(OrderError):
    """No character with the requested id exists."""


class UnknownFactionError(OrderError):
    """Faction index is out of range."""


class UnknownHouseTypeError(OrderError):
    """House type name is not in the world catalog."""


class UnknownCharacterTypeError(OrderError):
    """Character type name is not in the world catalog."""
