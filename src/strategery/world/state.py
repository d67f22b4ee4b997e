"""World aggregate and the factory operations the boundary layer calls."""

from __future__ import annotations

import itertools
import logging
from typing import Iterator

from strategery.errors import (
    HouseNotFoundError,
    PlacementError,
    UnknownCharacterError,
    UnknownCharacterTypeError,
    UnknownFactionError,
    UnknownHouseTypeError,
)
from strategery.models import Character, CharacterType, Culture, House, HouseType, Location, Region
from strategery.world.grid import OccupancyGrid

MAX_PLANNED_HOUSES = 16

_logger = logging.getLogger("strategery.world")


class World:
    """Factions, the occupancy grid and the type catalogs orders refer to."""

    def __init__(
        self,
        grid: OccupancyGrid,
        *,
        character_types: dict[str, CharacterType] | None = None,
        house_types: dict[str, HouseType] | None = None,
        max_planned_houses: int = MAX_PLANNED_HOUSES,
    ) -> None:
        self.grid = grid
        self.cultures: list[Culture] = []
        self.character_types: dict[str, CharacterType] = dict(character_types or {})
        self.house_types: dict[str, HouseType] = dict(house_types or {})
        self.max_planned_houses = max_planned_houses
        self.tick_count = 0
        self.ids: Iterator[int] = itertools.count(1)

    def culture(self, index: int) -> Culture:
        if not 0 <= index < len(self.cultures):
            raise UnknownFactionError(f"No faction with index {index} (have {len(self.cultures)})")
        return self.cultures[index]

    def character_type(self, name: str) -> CharacterType:
        try:
            return self.character_types[name]
        except KeyError:
            raise UnknownCharacterTypeError(f"Unknown character type: {name}") from None

    def house_type(self, name: str) -> HouseType:
        try:
            return self.house_types[name]
        except KeyError:
            raise UnknownHouseTypeError(f"Unknown house type: {name}") from None

    def characters(self) -> Iterator[Character]:
        for culture in self.cultures:
            yield from culture.characters

    def houses(self) -> Iterator[House]:
        for culture in self.cultures:
            yield from culture.planned
            yield from culture.built

    def find_character(self, character_id: int) -> Character:
        for character in self.characters():
            if character.id == character_id:
                return character
        raise UnknownCharacterError(f"Unknown character id: {character_id}")

    def find_house(self, house_id: int) -> House:
        for house in self.houses():
            if house.id == house_id:
                return house
        raise HouseNotFoundError(f"No planned or built house with id {house_id}")


def create_world(
    faction_count: int,
    width: int,
    height: int,
    *,
    character_types: dict[str, CharacterType] | None = None,
    house_types: dict[str, HouseType] | None = None,
    max_planned_houses: int = MAX_PLANNED_HOUSES,
) -> World:
    world = World(
        OccupancyGrid(width, height),
        character_types=character_types,
        house_types=house_types,
        max_planned_houses=max_planned_houses,
    )
    for _ in range(faction_count):
        add_faction(world)
    return world


def add_faction(world: World) -> Culture:
    culture = Culture(index=len(world.cultures), ids=world.ids)
    world.cultures.append(culture)
    return culture


def add_character(
    grid: OccupancyGrid,
    culture: Culture,
    character_type: CharacterType,
    location: Location,
) -> Character:
    """Place a new character and append it to its faction's update order.

    Raises ``PlacementError`` when the footprint is out of bounds or overlaps
    anything already on the grid.
    """
    footprint = Region(location.x, location.y, character_type.width, character_type.height)
    if not grid.is_clear(footprint):
        raise PlacementError(
            f"Can't place {character_type.name} at {location.tile}: position is occupied or out of bounds"
        )

    character = Character(type=character_type, culture=culture, location=location, id=next(culture.ids))
    grid.place(character, character.footprint)
    culture.characters.append(character)
    _logger.debug(
        "character_added",
        extra={"character_id": character.id, "culture": culture.index, "tile": location.tile},
    )
    return character


def plan_house(
    culture: Culture,
    house_type: HouseType,
    location: Location,
    *,
    max_planned: int = MAX_PLANNED_HOUSES,
) -> House:
    """Add a planned house. Planned houses do not occupy the grid.

    When the faction already holds ``max_planned`` plans the oldest one is
    evicted, so the new plan is always kept.
    """
    while culture.planned and len(culture.planned) >= max_planned:
        evicted = next(iter(culture.planned))
        del culture.planned[evicted]
        _logger.info("plan_evicted", extra={"house_id": evicted.id, "culture": culture.index})

    house = House(type=house_type, culture=culture, location=location, id=next(culture.ids))
    culture.planned[house] = None
    _logger.debug(
        "house_planned",
        extra={"house_id": house.id, "culture": culture.index, "tile": location.tile},
    )
    return house


def unplan_house(house: House) -> None:
    house.culture.planned.pop(house, None)
