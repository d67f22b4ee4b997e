"""Read-only snapshot of a world for publishing outside the simulation thread."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from strategery.models import Character, House, HouseTarget
from strategery.world.state import World


@dataclass(frozen=True, slots=True)
class CharacterStatus:
    id: int
    type: str
    x: int
    y: int
    offset: float
    carrying: float
    target: dict | None


@dataclass(frozen=True, slots=True)
class HouseStatus:
    id: int
    type: str
    x: int
    y: int
    resources_left: float
    max_resources: float
    state: str


@dataclass(frozen=True, slots=True)
class FactionStatus:
    index: int
    characters: tuple[CharacterStatus, ...]
    planned: tuple[HouseStatus, ...]
    built: tuple[HouseStatus, ...]


@dataclass(frozen=True, slots=True)
class WorldStatus:
    tick: int
    width: int
    height: int
    factions: tuple[FactionStatus, ...]

    def to_dict(self) -> dict:
        return asdict(self)


def _target_status(character: Character) -> dict | None:
    target = character.target
    if target is None:
        return None
    if isinstance(target, HouseTarget):
        return {"kind": "house", "house_id": target.house.id}
    location = target.location
    return {"kind": "location", "x": location.x, "y": location.y, "offset": location.offset}


def _house_status(house: House) -> HouseStatus:
    return HouseStatus(
        id=house.id,
        type=house.type.name,
        x=house.location.x,
        y=house.location.y,
        resources_left=house.resources_left,
        max_resources=house.type.max_resources,
        state=house.state.value,
    )


def read_status(world: World) -> WorldStatus:
    factions = []
    for culture in world.cultures:
        characters = tuple(
            CharacterStatus(
                id=character.id,
                type=character.type.name,
                x=character.location.x,
                y=character.location.y,
                offset=character.location.offset,
                carrying=character.carrying,
                target=_target_status(character),
            )
            for character in culture.characters
        )
        factions.append(
            FactionStatus(
                index=culture.index,
                characters=characters,
                planned=tuple(_house_status(house) for house in culture.planned),
                built=tuple(_house_status(house) for house in culture.built),
            )
        )
    return WorldStatus(
        tick=world.tick_count,
        width=world.grid.width,
        height=world.grid.height,
        factions=tuple(factions),
    )
