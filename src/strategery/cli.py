"""CLI-side handler wrappers over the game loop."""

from __future__ import annotations

from typing import Any

from strategery.game_loop import GameLoop, OrderRecord, OrderStatus
from strategery.orders import parse_orders
from strategery.status import WorldStatus


class CliOrderHandler:
    """Simple sync-friendly facade over the game loop."""

    def __init__(self, loop: GameLoop) -> None:
        self._loop = loop

    def submit_orders(self, payload: Any) -> list[str]:
        """Validate decoded JSON orders and queue them for the next tick."""
        return self._loop.submit_orders(parse_orders(payload))

    def get_order(self, record_id: str) -> OrderRecord:
        return self._loop.get_order(record_id)

    def list_recent_orders(self, limit: int = 20, status: OrderStatus | None = None) -> list[OrderRecord]:
        return self._loop.list_recent_orders(limit=limit, status=status)

    def orders_for_tick(self, tick: int) -> list[OrderRecord]:
        return self._loop.orders_for_tick(tick)

    def read_status(self) -> WorldStatus:
        return self._loop.read_latest_status()
