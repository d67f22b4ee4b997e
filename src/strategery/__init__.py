"""Tick-based strategy simulation: movement planning, resource work and house lifecycles."""

from .errors import OrderError, PlacementError, SimulationInvariantError
from .models import (
    Character,
    CharacterType,
    Culture,
    House,
    HouseState,
    HouseTarget,
    HouseType,
    Location,
    LocationTarget,
    Region,
)
from .scheduler import tick
from .world import World, add_character, add_faction, create_world, plan_house, unplan_house

__all__ = [
    "Character",
    "CharacterType",
    "Culture",
    "House",
    "HouseState",
    "HouseTarget",
    "HouseType",
    "Location",
    "LocationTarget",
    "OrderError",
    "PlacementError",
    "Region",
    "SimulationInvariantError",
    "World",
    "add_character",
    "add_faction",
    "create_world",
    "plan_house",
    "tick",
    "unplan_house",
]
