"""Orders the boundary layer queues and applies to a world between ticks."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from strategery.errors import HouseNotFoundError, OrderError
from strategery.models import HouseTarget, Location, LocationTarget
from strategery.world.state import World, plan_house, unplan_house


class Order(Protocol):
    """Anything that can change a world and report a recoverable failure."""

    kind: str

    def apply(self, world: World) -> OrderError | None:
        """Apply to ``world``; return the failure instead of raising it."""


class _OrderModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class MoveOrder(_OrderModel):
    """Send a character to a tile and keep it there."""

    kind: Literal["move"] = "move"
    character_id: int
    x: int
    y: int
    offset: float = Field(default=0.0, ge=0.0, lt=1.0)

    def apply(self, world: World) -> OrderError | None:
        try:
            character = world.find_character(self.character_id)
        except OrderError as exc:
            return exc
        character.target = LocationTarget(Location(self.x, self.y, self.offset))
        return None


class WorkOrder(_OrderModel):
    """Send a character to build an own house or mine a rival one."""

    kind: Literal["work"] = "work"
    character_id: int
    house_id: int

    def apply(self, world: World) -> OrderError | None:
        try:
            character = world.find_character(self.character_id)
            house = world.find_house(self.house_id)
        except OrderError as exc:
            return exc
        character.target = HouseTarget(house)
        return None


class PlanHouseOrder(_OrderModel):
    kind: Literal["plan_house"] = "plan_house"
    faction: int
    house_type: str
    x: int
    y: int

    def apply(self, world: World) -> OrderError | None:
        try:
            culture = world.culture(self.faction)
            house_type = world.house_type(self.house_type)
        except OrderError as exc:
            return exc
        plan_house(culture, house_type, Location(self.x, self.y), max_planned=world.max_planned_houses)
        return None


class UnplanHouseOrder(_OrderModel):
    kind: Literal["unplan_house"] = "unplan_house"
    house_id: int

    def apply(self, world: World) -> OrderError | None:
        for house in world.houses():
            if house.id == self.house_id and house in house.culture.planned:
                unplan_house(house)
                return None
        return HouseNotFoundError(f"No planned house with id {self.house_id}")


AnyOrder = Annotated[
    Union[MoveOrder, WorkOrder, PlanHouseOrder, UnplanHouseOrder],
    Field(discriminator="kind"),
]

_orders_adapter = TypeAdapter(list[AnyOrder])


def parse_orders(payload: Any) -> list[Order]:
    """Validate decoded JSON (a list of order objects) into orders.

    Raises ``pydantic.ValidationError`` on malformed input.
    """
    return list(_orders_adapter.validate_python(payload))
