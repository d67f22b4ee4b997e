"""Occupancy grid: the only component that touches tile storage."""

from __future__ import annotations

from typing import Any

from strategery.models import Region


class OccupancyGrid:
    """W×H board where each cell holds at most one occupant reference."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._board: list[list[Any]] = [[None] * height for _ in range(width)]

    def in_bounds(self, region: Region) -> bool:
        return (
            region.x >= 0
            and region.y >= 0
            and region.x + region.width <= self.width
            and region.y + region.height <= self.height
        )

    def is_clear(self, region: Region, exempt: Any = None) -> bool:
        """True iff every cell is in bounds and empty or held by ``exempt``."""
        if not self.in_bounds(region):
            return False
        for x, y in region.cells():
            occupant = self._board[x][y]
            if occupant is not None and occupant is not exempt:
                return False
        return True

    def place(self, occupant: Any, region: Region) -> None:
        """Write ``occupant`` into every cell. Callers validate with ``is_clear`` first."""
        for x, y in region.cells():
            self._board[x][y] = occupant

    def clear(self, region: Region) -> None:
        for x, y in region.cells():
            self._board[x][y] = None

    def occupant_at(self, x: int, y: int) -> Any:
        return self._board[x][y]

    def occupied_cells(self) -> dict[tuple[int, int], Any]:
        return {
            (x, y): occupant
            for x, column in enumerate(self._board)
            for y, occupant in enumerate(column)
            if occupant is not None
        }
