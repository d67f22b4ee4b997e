"""Per-tick update of every character in every faction."""

from __future__ import annotations

import logging

from strategery.economy import build, in_work_shadow, mine, rerank
from strategery.errors import UnknownTargetError
from strategery.models import Character, HouseTarget, LocationTarget
from strategery.movement import move_toward, work_anchor
from strategery.targeting import house_exists, reevaluate
from strategery.world.state import World

DEFAULT_MAX_TICK_SECONDS = 1.0

_logger = logging.getLogger("strategery.scheduler")


def clamp_dt(dt: float, max_tick_seconds: float = DEFAULT_MAX_TICK_SECONDS) -> float:
    """Bound a caller-supplied timestep to ``[0, max_tick_seconds]``."""
    clamped = min(max(dt, 0.0), max_tick_seconds)
    if clamped != dt:
        _logger.warning("dt_clamped", extra={"dt": dt, "clamped": clamped})
    return clamped


def update_character(world: World, character: Character, dt: float) -> None:
    target = character.target
    if target is None:
        pass
    elif isinstance(target, LocationTarget):
        move_toward(character, world.grid, target.location, character.type.move_rate * dt)
    elif isinstance(target, HouseTarget):
        house = target.house
        if not house_exists(house):
            pass
        elif in_work_shadow(character, house):
            if house.culture is character.culture:
                build(character, house, world.grid, dt)
            else:
                mine(character, house, dt)
            rerank(house, world.grid)
        else:
            move_toward(
                character,
                world.grid,
                work_anchor(house),
                character.type.move_rate * dt,
                avoid=house.footprint,
            )
    else:
        raise UnknownTargetError(f"Unexpected target {target!r} on character {character.id}")

    reevaluate(character)


def tick(world: World, dt: float, *, max_tick_seconds: float = DEFAULT_MAX_TICK_SECONDS) -> None:
    """Advance the world by ``dt`` seconds.

    Factions are visited in index order, so earlier factions get first claim
    on contested tiles and resources within a tick.
    """
    dt = clamp_dt(dt, max_tick_seconds)
    for culture in world.cultures:
        for character in list(culture.characters):
            update_character(world, character, dt)
    world.tick_count += 1
