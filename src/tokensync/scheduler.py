"""
Dual scheduler: a debounced trigger for style changes and a fixed-interval
poll for variables.

Both run on the event loop as plain asyncio tasks. Neither cancels a pass
that is already running; stopping only prevents new passes from starting.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from .context import SyncContext
from .ir.document import DocumentChange
from .reconcile import ReconciliationEngine
from .registry import EntityKind

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_POLL_INTERVAL_SECONDS = 3.0

PassCallback = Callable[[], Awaitable[object]]


class _PassRunner:
    """Tracks callback tasks still running so shutdown can wait for them."""

    def __init__(self, callback: PassCallback, name: str) -> None:
        self._callback = callback
        self._name = name
        self._inflight: set[asyncio.Task[None]] = set()

    def spawn(self) -> None:
        task = asyncio.create_task(self._run(), name=self._name)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self) -> None:
        try:
            await self._callback()
        except Exception:
            logger.exception("%s pass failed", self._name)

    async def drain(self) -> None:
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)


class DebouncedTrigger:
    """Collapses a burst of triggers into one callback after *delay* seconds of quiet.

    Each trigger re-arms the timer. Once the timer fires the callback runs
    as its own task, so a trigger arriving during the callback arms a fresh
    timer instead of cancelling the running pass.
    """

    def __init__(self, delay: float, callback: PassCallback, name: str = "debounce") -> None:
        self.delay = delay
        self._runner = _PassRunner(callback, name)
        self._timer: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def trigger(self) -> None:
        self.cancel()
        self._timer = asyncio.create_task(self._wait())

    async def _wait(self) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self._runner.spawn()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def close(self) -> None:
        """Cancel the pending timer and wait for a running callback to finish."""
        self.cancel()
        await self._runner.drain()


class IntervalPoller:
    """Runs *callback* every *interval* seconds while *should_run* holds.

    The predicate is checked before each tick; once it turns false the
    poller stops itself. The loop does not wait for the callback; a tick
    that lands on a still-running pass is refused by the callback's own
    busy guard.
    """

    def __init__(
        self,
        interval: float,
        callback: PassCallback,
        should_run: Callable[[], bool],
        name: str = "poll",
    ) -> None:
        self.interval = interval
        self._runner = _PassRunner(callback, name)
        self._should_run = should_run
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling; a no-op if already running."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Started %s every %ss", self._name, self.interval)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not self._should_run():
                logger.info("Stopped %s: nothing to track", self._name)
                self._task = None
                return
            self._runner.spawn()

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.info("Stopped %s", self._name)

    async def close(self) -> None:
        self.stop()
        await self._runner.drain()


class SyncScheduler:
    """Wires document change events and the variable poll to the engine."""

    def __init__(
        self,
        context: SyncContext,
        engine: ReconciliationEngine,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self._context = context
        self._engine = engine
        self.debounce = DebouncedTrigger(
            debounce_seconds, engine.reconcile_styles, name="style sync"
        )
        self.poller = IntervalPoller(
            poll_interval_seconds,
            engine.reconcile_variables,
            self._tracking_variables,
            name="variable poll",
        )

    def _tracking_variables(self) -> bool:
        return self._context.active and self._context.registry.count(EntityKind.VARIABLE) > 0

    def handle_document_change(self, changes: Iterable[DocumentChange]) -> bool:
        """Arm the style pass if any change touches a style.

        Returns True if the trigger was (re)armed. Changes are ignored while
        sync is inactive or a style pass is already running.
        """
        if not self._context.active or self._engine.styles_busy:
            return False
        if not any(change.is_style_change for change in changes):
            return False
        self.debounce.trigger()
        return True

    def start_polling(self) -> None:
        if self._tracking_variables():
            self.poller.start()

    def stop_polling(self) -> None:
        self.poller.stop()

    async def shutdown(self) -> None:
        """Cancel both timers and let any running pass complete."""
        await self.debounce.close()
        await self.poller.close()
