from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union


@dataclass(frozen=True, slots=True)
class Location:
    """Tile coordinates plus sub-tile progress toward the next tile."""

    x: int
    y: int
    offset: float = 0.0

    @property
    def tile(self) -> tuple[int, int]:
        return self.x, self.y

    def distance_to(self, other: Location) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True, slots=True)
class Region:
    """Half-open rectangle of tiles anchored at its top-left corner."""

    x: int
    y: int
    width: int
    height: int

    def cells(self) -> Iterator[tuple[int, int]]:
        for cell_x in range(self.x, self.x + self.width):
            for cell_y in range(self.y, self.y + self.height):
                yield cell_x, cell_y

    def expanded(self, margin: int) -> Region:
        return Region(
            x=self.x - margin,
            y=self.y - margin,
            width=self.width + 2 * margin,
            height=self.height + 2 * margin,
        )

    def overlaps(self, other: Region) -> bool:
        return (
            self.x < other.x + other.width
            and other.x < self.x + self.width
            and self.y < other.y + other.height
            and other.y < self.y + self.height
        )


@dataclass(frozen=True, slots=True)
class CharacterType:
    name: str
    move_rate: float
    work_rate: float
    max_carry: float
    width: int = 1
    height: int = 1


@dataclass(frozen=True, slots=True)
class HouseType:
    name: str
    max_resources: float
    width: int = 1
    height: int = 1


class HouseState(str, Enum):
    """Lifecycle of a house, derived from its faction's plan/built sets."""

    PLANNED = "planned"
    BUILT = "built"
    GONE = "gone"


@dataclass(slots=True, eq=False)
class Character:
    type: CharacterType
    culture: Culture
    location: Location
    carrying: float = 0.0
    target: Target = None
    id: int = 0

    @property
    def footprint(self) -> Region:
        return Region(self.location.x, self.location.y, self.type.width, self.type.height)

    def __repr__(self) -> str:
        return f"Character(id={self.id}, type={self.type.name}, culture={self.culture.index}, at={self.location.tile})"


@dataclass(slots=True, eq=False)
class House:
    type: HouseType
    culture: Culture
    location: Location
    resources_left: float = 0.0
    id: int = 0

    @property
    def footprint(self) -> Region:
        return Region(self.location.x, self.location.y, self.type.width, self.type.height)

    @property
    def state(self) -> HouseState:
        if self in self.culture.built:
            return HouseState.BUILT
        if self in self.culture.planned:
            return HouseState.PLANNED
        return HouseState.GONE

    def __repr__(self) -> str:
        return f"House(id={self.id}, type={self.type.name}, culture={self.culture.index}, at={self.location.tile})"


@dataclass(slots=True, eq=False)
class Culture:
    """A faction: its characters in update order plus planned and built houses.

    ``planned`` and ``built`` are dicts used as insertion-ordered sets. A house
    is a key of at most one of them.

    ``ids`` hands out character and house ids; every culture of a world
    shares the same counter.
    """

    index: int
    characters: list[Character] = field(default_factory=list)
    planned: dict[House, None] = field(default_factory=dict)
    built: dict[House, None] = field(default_factory=dict)
    ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def owns(self, house: House) -> bool:
        return house in self.planned or house in self.built


@dataclass(frozen=True, slots=True)
class LocationTarget:
    location: Location


@dataclass(frozen=True, slots=True)
class HouseTarget:
    house: House


Target = Union[LocationTarget, HouseTarget, None]
