"""Tile grid and world state."""

from .grid import OccupancyGrid
from .state import (
    MAX_PLANNED_HOUSES,
    World,
    add_character,
    add_faction,
    create_world,
    plan_house,
    unplan_house,
)

__all__ = [
    "MAX_PLANNED_HOUSES",
    "OccupancyGrid",
    "World",
    "add_character",
    "add_faction",
    "create_world",
    "plan_house",
    "unplan_house",
]
