"""Bounded local pathfinding with fractional distance carried across ticks.

Long journeys are chained out of short moves. Each short move searches an
8×8 window of tiles around the character, biased toward the goal, with a
4-connected breadth-first expansion limited to the whole number of tiles the
distance budget allows. The reachable tile nearest the goal wins, so a
character is never left further from its goal than it started.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from strategery.errors import SearchWindowError
from strategery.models import Character, House, Location, Region
from strategery.world.grid import OccupancyGrid

SHORT_MOVE_SIDE = 8

# +x, +y, -x, -y
_NEIGHBOURS = ((1, 0), (0, 1), (-1, 0), (0, -1))

_EPSILON = 1e-9

_logger = logging.getLogger("strategery.movement")


@dataclass(frozen=True, slots=True)
class SearchWindow:
    """Square block of tiles a single short move may explore."""

    x: int
    y: int
    side: int = SHORT_MOVE_SIDE

    @classmethod
    def around(cls, start: tuple[int, int], aim: tuple[int, int], side: int = SHORT_MOVE_SIDE) -> SearchWindow:
        """Window containing ``start`` and ``aim``, split evenly around the span between them.

        ``aim`` must lie fewer than ``side`` tiles from ``start`` on each axis.
        """
        dx = aim[0] - start[0]
        dy = aim[1] - start[1]
        if abs(dx) >= side or abs(dy) >= side:
            raise SearchWindowError(
                f"Short move from {start} to {aim} spans ({dx}, {dy}), window side is {side}"
            )
        return cls(_axis_origin(start[0], aim[0], side), _axis_origin(start[1], aim[1], side), side)

    def slot(self, x: int, y: int) -> int | None:
        local_x = x - self.x
        local_y = y - self.y
        if not (0 <= local_x < self.side and 0 <= local_y < self.side):
            return None
        return local_x * self.side + local_y


def _axis_origin(start: int, aim: int, side: int) -> int:
    span = aim - start
    if span < 0:
        return aim - (side + span) // 2
    return start - (side - span) // 2


def _clip_toward(start: int, goal: int, side: int) -> int:
    reach = side - 1
    return start + max(-reach, min(reach, goal - start))


def _expand(
    character: Character,
    grid: OccupancyGrid,
    window: SearchWindow,
    step_count: int,
    avoid: Region | None,
) -> list[tuple[int, int, int]]:
    """Breadth-first reachability inside ``window``, at most ``step_count`` steps deep.

    Returns ``(x, y, steps)`` for every reached anchor tile in discovery order,
    starting with the character's own tile.
    """
    start = character.location.tile
    capacity = window.side * window.side
    steps_at = [-1] * capacity
    arena = [start] * capacity
    length = 1
    head = 0
    steps_at[window.slot(*start)] = 0

    width = character.type.width
    height = character.type.height
    while head < length:
        x, y = arena[head]
        head += 1
        steps = steps_at[window.slot(x, y)]
        if steps >= step_count:
            continue
        for dx, dy in _NEIGHBOURS:
            next_x, next_y = x + dx, y + dy
            slot = window.slot(next_x, next_y)
            if slot is None or steps_at[slot] >= 0:
                continue
            footprint = Region(next_x, next_y, width, height)
            if not grid.is_clear(footprint, exempt=character):
                continue
            if avoid is not None and avoid.overlaps(footprint):
                continue
            steps_at[slot] = steps + 1
            arena[length] = (next_x, next_y)
            length += 1

    return [(x, y, steps_at[window.slot(x, y)]) for x, y in arena[:length]]


def short_move(
    character: Character,
    grid: OccupancyGrid,
    goal: Location,
    budget: float,
    *,
    avoid: Region | None = None,
) -> float:
    """Take one bounded search-and-commit step toward ``goal``.

    Returns the distance consumed: whole tiles walked plus the change in the
    character's sub-tile offset. The value can be zero or negative when the
    character could not advance.
    """
    start = character.location
    total = budget + start.offset
    step_count = math.floor(total)

    aim = (
        _clip_toward(start.x, goal.x, SHORT_MOVE_SIDE),
        _clip_toward(start.y, goal.y, SHORT_MOVE_SIDE),
    )
    window = SearchWindow.around(start.tile, aim)
    reached = _expand(character, grid, window, step_count, avoid)

    best_x, best_y, steps = min(
        reached,
        key=lambda tile: (tile[0] - goal.x) ** 2 + (tile[1] - goal.y) ** 2,
    )
    if (best_x, best_y) == goal.tile:
        offset = min(total - steps, goal.offset)
    else:
        offset = total - step_count

    grid.clear(character.footprint)
    character.location = Location(best_x, best_y, offset)
    grid.place(character, character.footprint)

    consumed = steps + (offset - start.offset)
    _logger.debug(
        "short_move",
        extra={
            "character_id": character.id,
            "from": start.tile,
            "to": (best_x, best_y),
            "goal": goal.tile,
            "steps": steps,
            "consumed": consumed,
        },
    )
    return consumed


def arrived(character: Character, goal: Location) -> bool:
    location = character.location
    return location.tile == goal.tile and location.offset == goal.offset


def move_toward(
    character: Character,
    grid: OccupancyGrid,
    goal: Location,
    budget: float,
    *,
    avoid: Region | None = None,
) -> float:
    """Spend up to ``budget`` tiles of movement getting ``character`` to ``goal``.

    Stops early when the goal is reached or a short move makes no progress.
    Returns the distance actually consumed.
    """
    if budget < 0:
        raise ValueError(f"Distance budget must be non-negative, got {budget}")

    consumed_total = 0.0
    remaining = budget
    while remaining > _EPSILON and not arrived(character, goal):
        consumed = short_move(character, grid, goal, remaining, avoid=avoid)
        if consumed <= 0:
            _logger.debug(
                "move_stuck",
                extra={"character_id": character.id, "at": character.location.tile, "goal": goal.tile},
            )
            break
        consumed_total += consumed
        remaining -= consumed
    return consumed_total


def work_anchor(house: House) -> Location:
    """Tile at the center of a house footprint."""
    return Location(
        house.location.x + house.type.width // 2,
        house.location.y + house.type.height // 2,
    )
