from __future__ import annotations

import pytest
from pydantic import ValidationError

from strategery.errors import (
    HouseNotFoundError,
    UnknownCharacterError,
    UnknownFactionError,
    UnknownHouseTypeError,
)
from strategery.models import HouseState, HouseTarget, HouseType, Location, LocationTarget
from strategery.orders import MoveOrder, PlanHouseOrder, UnplanHouseOrder, WorkOrder, parse_orders
from strategery.scenario import DEFAULT_CHARACTER_TYPES
from strategery.world import add_character, create_world, plan_house

HUT = HouseType(name="hut", max_resources=100.0)


@pytest.fixture()
def world():
    return create_world(2, 8, 8, house_types={"hut": HUT})


def test_parse_orders_dispatches_on_kind() -> None:
    orders = parse_orders(
        [
            {"kind": "move", "character_id": 1, "x": 2, "y": 3},
            {"kind": "work", "character_id": 1, "house_id": 2},
            {"kind": "plan_house", "faction": 0, "house_type": "hut", "x": 4, "y": 4},
            {"kind": "unplan_house", "house_id": 2},
        ]
    )

    assert [type(order) for order in orders] == [MoveOrder, WorkOrder, PlanHouseOrder, UnplanHouseOrder]
    assert orders[0].offset == 0.0


@pytest.mark.parametrize(
    "payload",
    [
        [{"kind": "teleport", "character_id": 1}],
        [{"kind": "move", "character_id": 1, "x": 2}],
        [{"kind": "move", "character_id": 1, "x": 2, "y": 3, "offset": 1.5}],
        [{"kind": "work", "character_id": 1, "house_id": 2, "priority": "high"}],
        {"kind": "move", "character_id": 1, "x": 2, "y": 3},
    ],
)
def test_parse_orders_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(ValidationError):
        parse_orders(payload)


def test_move_order_sets_location_target(world) -> None:
    character = add_character(world.grid, world.cultures[0], DEFAULT_CHARACTER_TYPES["worker"], Location(0, 0))

    error = MoveOrder(character_id=character.id, x=5, y=6, offset=0.5).apply(world)

    assert error is None
    assert character.target == LocationTarget(Location(5, 6, 0.5))


def test_work_order_sets_house_target(world) -> None:
    house = plan_house(world.cultures[1], HUT, Location(6, 6))
    character = add_character(world.grid, world.cultures[0], DEFAULT_CHARACTER_TYPES["worker"], Location(0, 0))

    assert WorkOrder(character_id=character.id, house_id=house.id).apply(world) is None
    assert character.target == HouseTarget(house)


def test_orders_report_unknown_references(world) -> None:
    house = plan_house(world.cultures[0], HUT, Location(6, 6))

    assert isinstance(MoveOrder(character_id=99, x=0, y=0).apply(world), UnknownCharacterError)
    assert isinstance(WorkOrder(character_id=99, house_id=house.id).apply(world), UnknownCharacterError)
    assert isinstance(
        PlanHouseOrder(faction=5, house_type="hut", x=0, y=0).apply(world),
        UnknownFactionError,
    )
    assert isinstance(
        PlanHouseOrder(faction=0, house_type="castle", x=0, y=0).apply(world),
        UnknownHouseTypeError,
    )


def test_work_order_on_missing_house(world) -> None:
    character = add_character(world.grid, world.cultures[0], DEFAULT_CHARACTER_TYPES["worker"], Location(0, 0))

    error = WorkOrder(character_id=character.id, house_id=42).apply(world)

    assert isinstance(error, HouseNotFoundError)
    assert character.target is None


def test_plan_and_unplan_house(world) -> None:
    assert PlanHouseOrder(faction=1, house_type="hut", x=3, y=3).apply(world) is None
    (house,) = world.cultures[1].planned

    assert house.location == Location(3, 3)
    assert UnplanHouseOrder(house_id=house.id).apply(world) is None
    assert house.state is HouseState.GONE
    assert isinstance(UnplanHouseOrder(house_id=house.id).apply(world), HouseNotFoundError)
