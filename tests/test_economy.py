from __future__ import annotations

from strategery.economy import build, in_work_shadow, mine, rerank
from strategery.models import CharacterType, HouseState, HouseType, Location
from strategery.world import add_character, create_world, plan_house, unplan_house

LABORER = CharacterType(name="laborer", move_rate=1.0, work_rate=4.0, max_carry=10.0)
HUT = HouseType(name="hut", max_resources=100.0)


def _world_with_built_house(resources: float):
    world = create_world(2, 6, 6)
    house = plan_house(world.cultures[0], HUT, Location(2, 2))
    house.resources_left = resources
    rerank(house, world.grid)
    return world, house


def test_mine_is_limited_by_house_resources() -> None:
    world, house = _world_with_built_house(3.0)
    miner = add_character(world.grid, world.cultures[1], LABORER, Location(1, 2))

    assert mine(miner, house, 1.0) == 3.0
    assert house.resources_left == 0
    assert miner.carrying == 3.0


def test_mine_is_limited_by_carry_capacity() -> None:
    world, house = _world_with_built_house(50.0)
    miner = add_character(world.grid, world.cultures[1], LABORER, Location(1, 2))
    miner.carrying = 9.0

    assert mine(miner, house, 1.0) == 1.0
    assert miner.carrying == 10.0
    assert house.resources_left == 49.0


def test_mine_with_zero_dt_moves_nothing() -> None:
    world, house = _world_with_built_house(50.0)
    miner = add_character(world.grid, world.cultures[1], LABORER, Location(1, 2))

    assert mine(miner, house, 0.0) == 0
    assert house.resources_left == 50.0


def test_build_is_limited_by_max_resources() -> None:
    world, house = _world_with_built_house(98.0)
    builder = add_character(world.grid, world.cultures[0], LABORER, Location(1, 2))
    builder.carrying = 10.0

    assert build(builder, house, world.grid, 1.0) == 2.0
    assert house.resources_left == 100.0
    assert builder.carrying == 8.0


def test_build_is_limited_by_carried_amount() -> None:
    world, house = _world_with_built_house(10.0)
    builder = add_character(world.grid, world.cultures[0], LABORER, Location(1, 2))
    builder.carrying = 1.0

    assert build(builder, house, world.grid, 1.0) == 1.0
    assert builder.carrying == 0
    assert house.resources_left == 11.0


def test_build_on_obstructed_plan_is_a_no_op() -> None:
    world = create_world(2, 6, 6)
    house = plan_house(world.cultures[0], HUT, Location(2, 2))
    add_character(world.grid, world.cultures[1], LABORER, Location(2, 2))
    builder = add_character(world.grid, world.cultures[0], LABORER, Location(1, 2))
    builder.carrying = 10.0

    assert build(builder, house, world.grid, 1.0) == 0
    rerank(house, world.grid)

    assert house.resources_left == 0
    assert builder.carrying == 10.0
    assert house.state is HouseState.PLANNED


def test_rerank_moves_plan_with_resources_onto_grid() -> None:
    world = create_world(1, 6, 6)
    house = plan_house(world.cultures[0], HouseType(name="hall", max_resources=20.0, width=2, height=1), Location(1, 1))

    rerank(house, world.grid)
    assert house.state is HouseState.PLANNED
    assert world.grid.occupied_cells() == {}

    house.resources_left = 1.0
    rerank(house, world.grid)

    assert house.state is HouseState.BUILT
    assert house not in world.cultures[0].planned
    assert world.grid.occupied_cells() == {(1, 1): house, (2, 1): house}


def test_rerank_demolishes_empty_built_house() -> None:
    world, house = _world_with_built_house(5.0)

    rerank(house, world.grid)
    assert house.state is HouseState.BUILT

    house.resources_left = 0.0
    rerank(house, world.grid)

    assert house.state is HouseState.GONE
    assert house not in world.cultures[0].planned
    assert world.grid.occupied_cells() == {}


def test_transfers_keep_resources_within_bounds() -> None:
    world, house = _world_with_built_house(6.0)
    builder = add_character(world.grid, world.cultures[0], LABORER, Location(1, 2))
    miner = add_character(world.grid, world.cultures[1], LABORER, Location(3, 2))
    builder.carrying = 10.0

    for dt in (0.5, 3.0, 1.0, 7.5, 0.25, 2.0):
        mine(miner, house, dt)
        assert 0 <= house.resources_left <= HUT.max_resources
        assert 0 <= miner.carrying <= LABORER.max_carry
        build(builder, house, world.grid, dt)
        assert 0 <= house.resources_left <= HUT.max_resources
        assert 0 <= builder.carrying <= LABORER.max_carry


def test_work_shadow_is_footprint_plus_one_tile() -> None:
    world = create_world(2, 8, 8)
    house = plan_house(world.cultures[0], HUT, Location(3, 3))

    near = add_character(world.grid, world.cultures[0], LABORER, Location(2, 2))
    diagonal = add_character(world.grid, world.cultures[0], LABORER, Location(4, 4))
    far = add_character(world.grid, world.cultures[0], LABORER, Location(5, 3))
    wide = add_character(
        world.grid,
        world.cultures[1],
        CharacterType(name="cart", move_rate=1.0, work_rate=1.0, max_carry=1.0, width=2, height=2),
        Location(0, 0),
    )

    assert in_work_shadow(near, house)
    assert in_work_shadow(diagonal, house)
    assert not in_work_shadow(far, house)
    assert not in_work_shadow(wide, house)


def test_removed_house_takes_and_gives_nothing() -> None:
    world, house = _world_with_built_house(20.0)
    planned = plan_house(world.cultures[0], HUT, Location(4, 4))
    builder = add_character(world.grid, world.cultures[0], LABORER, Location(3, 4))
    miner = add_character(world.grid, world.cultures[1], LABORER, Location(1, 2))
    builder.carrying = 10.0

    unplan_house(planned)
    house.resources_left = 0.0
    rerank(house, world.grid)

    assert build(builder, planned, world.grid, 1.0) == 0
    assert mine(miner, house, 1.0) == 0
    assert builder.carrying == 10.0
    assert planned.resources_left == 0
    assert miner.carrying == 0
