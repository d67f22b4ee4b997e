"""Resource transfer between characters and houses, and the house lifecycle.

Houses move through three states, derived from their faction's sets:

    planned  -- no footprint on the grid, resources_left == 0
    built    -- footprint on the grid, resources_left > 0
    gone     -- in neither set, footprint cleared

``rerank`` is the only transition function and runs after every transfer.
Transfers clamp to what both sides can give or take and never raise.
"""

from __future__ import annotations

import logging

from strategery.models import Character, House
from strategery.world.grid import OccupancyGrid

WORK_SHADOW_MARGIN = 1

_logger = logging.getLogger("strategery.economy")


def in_work_shadow(character: Character, house: House, margin: int = WORK_SHADOW_MARGIN) -> bool:
    """True when the character's footprint touches the house footprint grown by ``margin``."""
    return character.footprint.overlaps(house.footprint.expanded(margin))


def mine(character: Character, house: House, dt: float) -> float:
    if not house.culture.owns(house):
        return 0.0

    transfer = min(
        character.type.work_rate * dt,
        house.resources_left,
        character.type.max_carry - character.carrying,
    )
    transfer = max(transfer, 0.0)
    house.resources_left -= transfer
    character.carrying += transfer
    return transfer


def build(character: Character, house: House, grid: OccupancyGrid, dt: float) -> float:
    """Move carried resources into ``house``.

    A house that is not built yet must have a free footprint before any work
    lands on it; otherwise nothing happens this tick. A builder standing on
    the site therefore blocks its own work until it is moved away.
    Unplanned or evicted houses take nothing.
    """
    culture = house.culture
    if not culture.owns(house):
        return 0.0
    if house not in culture.built and not grid.is_clear(house.footprint):
        return 0.0

    transfer = min(
        character.type.work_rate * dt,
        house.type.max_resources - house.resources_left,
        character.carrying,
    )
    transfer = max(transfer, 0.0)
    house.resources_left += transfer
    character.carrying -= transfer
    return transfer


def rerank(house: House, grid: OccupancyGrid) -> None:
    culture = house.culture
    if house.resources_left == 0:
        if house in culture.built:
            del culture.built[house]
            grid.clear(house.footprint)
            _logger.info("house_demolished", extra={"house_id": house.id, "culture": culture.index})
    elif house in culture.planned:
        del culture.planned[house]
        culture.built[house] = None
        grid.place(house, house.footprint)
        _logger.info(
            "house_built",
            extra={"house_id": house.id, "culture": culture.index, "tile": house.location.tile},
        )
