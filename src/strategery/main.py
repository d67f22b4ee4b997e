"""CLI startup entrypoint for strategery."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict
from pathlib import Path

import typer
from rich import print

from strategery.cli import CliOrderHandler
from strategery.config import settings
from strategery.game_loop import GameLoop, InMemoryOrderLog, JsonlOrderLog, OrderLog, OrderStatus
from strategery.scenario import DEFAULT_CHARACTER_TYPES, DEFAULT_HOUSE_TYPES, build_world, load_scenario
from strategery.telemetry import LoggingTelemetry, configure_logging
from strategery.world import World, create_world

app = typer.Typer(help="Tick-based strategy simulation")


def _build_order_log() -> OrderLog:
    if settings.order_log_path:
        return JsonlOrderLog(settings.order_log_path)
    return InMemoryOrderLog()


def _build_world(scenario_file: Path | None) -> World:
    if scenario_file is None:
        return create_world(
            settings.faction_count,
            settings.world_width,
            settings.world_height,
            character_types=DEFAULT_CHARACTER_TYPES,
            house_types=DEFAULT_HOUSE_TYPES,
            max_planned_houses=settings.max_planned_houses,
        )

    world, errors = build_world(load_scenario(scenario_file))
    for error in errors:
        print({"scenario_order_rejected": f"{type(error).__name__}: {error}"})
    return world


def _build_loop(scenario_file: Path | None) -> GameLoop:
    configure_logging(settings.log_level)
    world = _build_world(scenario_file)

    return GameLoop(
        world,
        tick_interval_seconds=settings.tick_interval_seconds,
        max_tick_seconds=settings.max_tick_seconds,
        order_log=_build_order_log(),
        telemetry=LoggingTelemetry() if settings.telemetry_enabled else None,
    )


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(settings.model_dump())


@app.command()
def run(
    scenario_file: Path = typer.Argument(
        None, exists=True, dir_okay=False, help="Scenario JSON file; an empty world from settings when omitted"
    ),
    ticks: int = typer.Option(10, min=0, help="How many ticks to simulate"),
    dt: float = typer.Option(1.0, help="Seconds of game time per tick"),
) -> None:
    """Simulate a scenario for a fixed number of ticks and print the final status."""
    loop = _build_loop(scenario_file)
    status = loop.read_latest_status()
    for _ in range(ticks):
        status = loop.step(dt)
    print(status.to_dict())


@app.command()
def serve(
    scenario_file: Path = typer.Argument(
        None, exists=True, dir_okay=False, help="Scenario JSON file; an empty world from settings when omitted"
    ),
    seconds: float = typer.Option(5.0, min=0, help="Wall-clock seconds to keep the loop running"),
    orders_file: Path = typer.Option(None, exists=True, dir_okay=False, help="JSON list of orders to submit"),
    rejected_only: bool = typer.Option(False, "--rejected-only", help="List only rejected orders"),
) -> None:
    """Run the real-time loop for a while, feeding it optional orders."""
    loop = _build_loop(scenario_file)
    handler = CliOrderHandler(loop)

    async def _run() -> None:
        await loop.start()
        if orders_file is not None:
            handler.submit_orders(json.loads(orders_file.read_text(encoding="utf-8")))
        await asyncio.sleep(seconds)
        await loop.stop()

    asyncio.run(_run())
    records = handler.list_recent_orders(status=OrderStatus.REJECTED if rejected_only else None)
    print(
        {
            "status": handler.read_status().to_dict(),
            "orders": [asdict(record) for record in records],
        }
    )


if __name__ == "__main__":
    app()
