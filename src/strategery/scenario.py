"""JSON scenario files: world size, type catalogs, starting units and orders."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from strategery.economy import rerank
from strategery.errors import OrderError, PlacementError
from strategery.models import CharacterType, HouseType, Location
from strategery.orders import AnyOrder
from strategery.world.state import MAX_PLANNED_HOUSES, World, add_character, create_world, plan_house

DEFAULT_CHARACTER_TYPES: dict[str, CharacterType] = {
    "worker": CharacterType(name="worker", move_rate=1.0, work_rate=1.0, max_carry=2.0, width=2, height=2),
}
DEFAULT_HOUSE_TYPES: dict[str, HouseType] = {
    "hut": HouseType(name="hut", max_resources=100.0, width=1, height=1),
}


class CharacterTypeSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    move_rate: float = Field(ge=0)
    work_rate: float = Field(ge=0)
    max_carry: float = Field(ge=0)
    width: int = Field(default=1, gt=0)
    height: int = Field(default=1, gt=0)


class HouseTypeSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_resources: float = Field(gt=0)
    width: int = Field(default=1, gt=0)
    height: int = Field(default=1, gt=0)


class CharacterSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    faction: int = Field(ge=0)
    type: str = "worker"
    x: int
    y: int
    carrying: float = Field(default=0.0, ge=0)


class HouseSpec(BaseModel):
    """A starting house; ``resources`` above zero starts it already built."""

    model_config = ConfigDict(extra="forbid")

    faction: int = Field(ge=0)
    type: str = "hut"
    x: int
    y: int
    resources: float = Field(default=0.0, ge=0)


class Scenario(BaseModel):
    model_config = ConfigDict(extra="forbid")

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    factions: int = Field(default=2, ge=0)
    max_planned_houses: int = Field(default=MAX_PLANNED_HOUSES, gt=0)
    character_types: dict[str, CharacterTypeSpec] = Field(default_factory=dict)
    house_types: dict[str, HouseTypeSpec] = Field(default_factory=dict)
    characters: list[CharacterSpec] = Field(default_factory=list)
    houses: list[HouseSpec] = Field(default_factory=list)
    orders: list[AnyOrder] = Field(default_factory=list)


def load_scenario(path: str | Path) -> Scenario:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return Scenario.model_validate(payload)


def build_world(scenario: Scenario) -> tuple[World, list[OrderError]]:
    """Create the world a scenario describes and apply its starting orders.

    Houses are created first, then characters, each taking the next id from
    1 in file order; starting orders refer to those ids. Placement failures
    raise; order failures are collected and returned.
    """
    character_types = dict(DEFAULT_CHARACTER_TYPES)
    character_types.update(
        {name: CharacterType(name=name, **spec.model_dump()) for name, spec in scenario.character_types.items()}
    )
    house_types = dict(DEFAULT_HOUSE_TYPES)
    house_types.update(
        {name: HouseType(name=name, **spec.model_dump()) for name, spec in scenario.house_types.items()}
    )

    world = create_world(
        scenario.factions,
        scenario.width,
        scenario.height,
        character_types=character_types,
        house_types=house_types,
        max_planned_houses=scenario.max_planned_houses,
    )

    for spec in scenario.houses:
        house_type = world.house_type(spec.type)
        house = plan_house(
            world.culture(spec.faction),
            house_type,
            Location(spec.x, spec.y),
            max_planned=world.max_planned_houses,
        )
        if spec.resources > 0:
            if not world.grid.is_clear(house.footprint):
                raise PlacementError(f"Can't build {spec.type} at {(spec.x, spec.y)}: footprint is blocked")
            house.resources_left = min(spec.resources, house_type.max_resources)
            rerank(house, world.grid)

    for spec in scenario.characters:
        character = add_character(
            world.grid,
            world.culture(spec.faction),
            world.character_type(spec.type),
            Location(spec.x, spec.y),
        )
        character.carrying = min(spec.carrying, character.type.max_carry)

    errors = [error for order in scenario.orders if (error := order.apply(world)) is not None]
    return world, errors
