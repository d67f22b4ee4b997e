"""Asynchronous game loop that relays queued orders into a world and publishes status."""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import queue
import threading
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol, Sequence
from uuid import uuid4

from strategery.errors import SimulationInvariantError
from strategery.orders import Order
from strategery.scheduler import DEFAULT_MAX_TICK_SECONDS, tick
from strategery.status import WorldStatus, read_status
from strategery.telemetry.logging import Telemetry
from strategery.world.state import World


class OrderStatus(str, Enum):
    """Lifecycle states for submitted orders."""

    QUEUED = "queued"
    APPLIED = "applied"
    REJECTED = "rejected"


@dataclass(slots=True)
class OrderRecord:
    """Tracks one submitted order and how applying it went."""

    id: str
    kind: str
    submitted_at: datetime
    status: OrderStatus
    applied_tick: int | None = None
    error: str | None = None


class OrderLog(Protocol):
    """Journal of settled orders, queried by outcome and by the tick they landed on."""

    def append(self, record: OrderRecord) -> None:
        """Persist an applied or rejected order record."""

    def query(
        self,
        *,
        status: OrderStatus | None = None,
        tick: int | None = None,
        limit: int | None = 20,
    ) -> list[OrderRecord]:
        """Return up to ``limit`` matching records, newest first; all of them when ``limit`` is None."""


def _matches(record: OrderRecord, status: OrderStatus | None, tick: int | None) -> bool:
    if status is not None and record.status != status:
        return False
    return tick is None or record.applied_tick == tick


class InMemoryOrderLog:
    """Bounded in-memory order journal; the oldest settled orders fall off first."""

    def __init__(self, max_records: int = 1_000) -> None:
        self._records: deque[OrderRecord] = deque(maxlen=max_records)

    def append(self, record: OrderRecord) -> None:
        self._records.append(record)

    def query(
        self,
        *,
        status: OrderStatus | None = None,
        tick: int | None = None,
        limit: int | None = 20,
    ) -> list[OrderRecord]:
        matching = (record for record in reversed(self._records) if _matches(record, status, tick))
        return list(itertools.islice(matching, limit))


class JsonlOrderLog:
    """Order journal appended to a JSON lines file.

    Each line holds one settled order: its id and kind, the outcome, the tick
    it was applied before and, for rejections, the error text.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: OrderRecord) -> None:
        if record.status == OrderStatus.QUEUED:
            raise ValueError(f"Order {record.id} has not been applied yet")
        line = {
            "id": record.id,
            "kind": record.kind,
            "status": record.status.value,
            "applied_tick": record.applied_tick,
            "error": record.error,
            "submitted_at": record.submitted_at.isoformat(),
        }
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(line) + "\n")

    def query(
        self,
        *,
        status: OrderStatus | None = None,
        tick: int | None = None,
        limit: int | None = 20,
    ) -> list[OrderRecord]:
        if not self._path.exists():
            return []

        with self._path.open("r", encoding="utf-8") as handle:
            records = [_decode(line) for line in handle if line.strip()]

        matching = (record for record in reversed(records) if _matches(record, status, tick))
        return list(itertools.islice(matching, limit))


def _decode(line: str) -> OrderRecord:
    payload = json.loads(line)
    return OrderRecord(
        id=payload["id"],
        kind=payload["kind"],
        submitted_at=datetime.fromisoformat(payload["submitted_at"]),
        status=OrderStatus(payload["status"]),
        applied_tick=payload["applied_tick"],
        error=payload["error"],
    )


class GameLoop:
    """Runs a world tick by tick, applying queued orders before each tick.

    Orders may be submitted from any thread. The latest status snapshot is
    swapped in under a lock, so readers never wait on a tick in progress.
    """

    def __init__(
        self,
        world: World,
        *,
        tick_interval_seconds: float = 0.1,
        max_tick_seconds: float = DEFAULT_MAX_TICK_SECONDS,
        order_log: OrderLog | None = None,
        telemetry: Telemetry | None = None,
        max_pending_batches: int = 1_000,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._tick_interval_seconds = tick_interval_seconds
        self._max_tick_seconds = max_tick_seconds
        self._order_log = order_log or InMemoryOrderLog()
        self._telemetry = telemetry
        self._clock = clock
        self._logger = logger or logging.getLogger("strategery.game_loop")

        self._records: dict[str, OrderRecord] = {}
        self._pending: queue.Queue[list[tuple[OrderRecord, Order]]] = queue.Queue(maxsize=max_pending_batches)
        self._status_lock = threading.Lock()
        self._status = read_status(world)
        self._stopped = True
        self._task: asyncio.Task[None] | None = None

    @property
    def world(self) -> World:
        return self._world

    async def start(self) -> None:
        """Start ticking in real time once for this loop."""
        if self._task and not self._task.done():
            return

        self._stopped = False
        self._task = asyncio.create_task(self._run(), name="game-loop")
        self._logger.info("game_loop_started", extra={"tick_interval_seconds": self._tick_interval_seconds})

    async def stop(self) -> None:
        """Stop between ticks and wait for the loop task to finish."""
        self._stopped = True
        if not self._task:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

        self._logger.info("game_loop_stopped", extra={"tick": self._world.tick_count})

    def is_stopped(self) -> bool:
        return self._stopped

    def submit_orders(self, orders: Sequence[Order]) -> list[str]:
        """Queue a batch of orders for the next tick and return their record ids.

        Raises ``queue.Full`` when too many batches are already waiting.
        """
        batch: list[tuple[OrderRecord, Order]] = []
        for order in orders:
            record = OrderRecord(
                id=uuid4().hex,
                kind=getattr(order, "kind", type(order).__name__),
                submitted_at=datetime.now(timezone.utc),
                status=OrderStatus.QUEUED,
            )
            batch.append((record, order))

        self._pending.put_nowait(batch)
        for record, _ in batch:
            self._records[record.id] = record
        self._logger.info(
            "orders_submitted",
            extra={"count": len(batch), "pending_batches": self._pending.qsize()},
        )
        return [record.id for record, _ in batch]

    def get_order(self, record_id: str) -> OrderRecord:
        """Return the record for a submitted order."""
        if record_id not in self._records:
            raise KeyError(f"Unknown order id: {record_id}")
        return self._records[record_id]

    def list_recent_orders(self, limit: int = 20, *, status: OrderStatus | None = None) -> list[OrderRecord]:
        """Return the newest records, optionally only those with ``status``.

        Orders submitted to this loop come first; the journal tops the list up
        with orders settled by earlier runs.
        """
        in_memory = [record for record in self._records.values() if _matches(record, status, None)]
        in_memory.sort(key=lambda record: record.submitted_at, reverse=True)
        return _merge(in_memory, self._order_log.query(status=status, limit=limit), limit)

    def orders_for_tick(self, tick: int) -> list[OrderRecord]:
        """Return every order that was settled just before ``tick`` ran."""
        in_memory = [record for record in self._records.values() if _matches(record, None, tick)]
        return _merge(in_memory, self._order_log.query(tick=tick, limit=None), None)

    def read_latest_status(self) -> WorldStatus:
        """Return the most recently published, possibly stale, snapshot."""
        with self._status_lock:
            return self._status

    def step(self, dt: float) -> WorldStatus:
        """Apply pending orders, advance one tick and publish a fresh snapshot."""
        applied = self._drain_orders()
        tick(self._world, dt, max_tick_seconds=self._max_tick_seconds)

        status = read_status(self._world)
        with self._status_lock:
            self._status = status

        if self._telemetry is not None:
            self._telemetry.emit(
                "tick_completed",
                {"tick": self._world.tick_count, "dt": dt, "orders_applied": applied},
            )
        return status

    def _drain_orders(self) -> int:
        applied = 0
        while True:
            try:
                batch = self._pending.get_nowait()
            except queue.Empty:
                return applied

            for record, order in batch:
                error = order.apply(self._world)
                record.applied_tick = self._world.tick_count
                if error is None:
                    record.status = OrderStatus.APPLIED
                    applied += 1
                else:
                    record.status = OrderStatus.REJECTED
                    record.error = f"{type(error).__name__}: {error}"
                    self._logger.warning(
                        "order_rejected",
                        extra={"order_id": record.id, "kind": record.kind, "error": record.error},
                    )
                self._order_log.append(record)

    async def _run(self) -> None:
        last = self._clock()
        try:
            while not self._stopped:
                now = self._clock()
                dt = now - last
                last = now
                self.step(dt)
                await asyncio.sleep(self._tick_interval_seconds)
        except SimulationInvariantError:
            self._stopped = True
            self._logger.exception("game_loop_crashed", extra={"tick": self._world.tick_count})
            raise


def _merge(first: list[OrderRecord], second: list[OrderRecord], limit: int | None) -> list[OrderRecord]:
    merged: list[OrderRecord] = []
    seen: set[str] = set()
    for record in [*first, *second]:
        if record.id in seen:
            continue
        seen.add(record.id)
        merged.append(record)
        if limit is not None and len(merged) >= limit:
            break
    return merged
