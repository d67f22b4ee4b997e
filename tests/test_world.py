from __future__ import annotations

import pytest

from strategery.errors import HouseNotFoundError, PlacementError, UnknownCharacterError, UnknownFactionError
from strategery.models import CharacterType, HouseState, HouseType, Location
from strategery.world import MAX_PLANNED_HOUSES, add_character, add_faction, create_world, plan_house, unplan_house

WORKER = CharacterType(name="worker", move_rate=1.0, work_rate=1.0, max_carry=2.0, width=2, height=2)
HUT = HouseType(name="hut", max_resources=100.0)


@pytest.mark.parametrize("x, y", [(0, 0), (1, 1), (2, 2)])
def test_add_character_claims_exactly_its_footprint(x: int, y: int) -> None:
    world = create_world(1, 4, 4)

    character = add_character(world.grid, world.cultures[0], WORKER, Location(x, y))

    for cell_x in range(4):
        for cell_y in range(4):
            inside = x <= cell_x < x + 2 and y <= cell_y < y + 2
            expected = character if inside else None
            assert world.grid.occupant_at(cell_x, cell_y) is expected, (cell_x, cell_y)
    assert world.cultures[0].characters == [character]


def test_add_character_rejects_overlap() -> None:
    world = create_world(1, 4, 4)
    add_character(world.grid, world.cultures[0], WORKER, Location(1, 1))
    before = world.grid.occupied_cells()

    for x, y in [(0, 0), (0, 1), (1, 0), (1, 1), (0, 2), (2, 0), (2, 2)]:
        with pytest.raises(PlacementError):
            add_character(world.grid, world.cultures[0], WORKER, Location(x, y))

    assert world.grid.occupied_cells() == before
    assert len(world.cultures[0].characters) == 1


@pytest.mark.parametrize(
    "x, y",
    [(-1, -1), (-1, 0), (0, -1), (3, 3), (3, 0), (0, 3), (4, 4), (4, 0), (0, 4), (-1, 3)],
)
def test_add_character_rejects_out_of_bounds(x: int, y: int) -> None:
    world = create_world(1, 4, 4)

    with pytest.raises(PlacementError):
        add_character(world.grid, world.cultures[0], WORKER, Location(x, y))

    assert world.grid.occupied_cells() == {}


def test_ids_are_shared_across_factions_in_creation_order() -> None:
    world = create_world(2, 8, 8)

    house = plan_house(world.cultures[1], HUT, Location(6, 6))
    first = add_character(world.grid, world.cultures[0], WORKER, Location(0, 0))
    second = add_character(world.grid, world.cultures[1], WORKER, Location(3, 3))

    assert [house.id, first.id, second.id] == [1, 2, 3]
    assert world.find_character(3) is second
    assert world.find_house(1) is house


def test_lookups_report_missing_entities() -> None:
    world = create_world(1, 4, 4)

    with pytest.raises(UnknownCharacterError):
        world.find_character(7)
    with pytest.raises(HouseNotFoundError):
        world.find_house(7)
    with pytest.raises(UnknownFactionError):
        world.culture(1)


def test_add_faction_appends_new_culture() -> None:
    world = create_world(0, 4, 4)

    culture = add_faction(world)

    assert culture.index == 0
    assert world.cultures == [culture]


def test_planned_house_does_not_touch_grid() -> None:
    world = create_world(1, 4, 4)

    house = plan_house(world.cultures[0], HUT, Location(0, 0))

    assert house.state is HouseState.PLANNED
    assert world.grid.occupied_cells() == {}


def test_plan_cap_evicts_an_existing_plan() -> None:
    world = create_world(1, 8, 8)
    culture = world.cultures[0]

    houses = [plan_house(culture, HUT, Location(i, 0), max_planned=3) for i in range(4)]

    assert len(culture.planned) == 3
    assert houses[-1] in culture.planned
    assert houses[0].state is HouseState.GONE


def test_default_plan_cap() -> None:
    world = create_world(1, 32, 32)
    culture = world.cultures[0]

    for i in range(MAX_PLANNED_HOUSES):
        plan_house(culture, HUT, Location(i, 0))
    newest = plan_house(culture, HUT, Location(0, 1))

    assert len(culture.planned) == MAX_PLANNED_HOUSES
    assert newest in culture.planned


def test_unplan_house_removes_plan() -> None:
    world = create_world(1, 4, 4)
    house = plan_house(world.cultures[0], HUT, Location(0, 0))

    unplan_house(house)
    unplan_house(house)

    assert house.state is HouseState.GONE
    assert world.cultures[0].planned == {}
