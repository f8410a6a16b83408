"""Background sweeper that periodically removes expired carts.

The sweeper is an asyncio task owned by the web application's lifespan.
Each run executes ``remove_expired_carts`` on a worker thread inside a fresh
domain context, so request handling never waits on it. The next run is
scheduled one full interval after the previous one *finishes*, which keeps
runs from overlapping. A failed run is logged and left to the next tick.

Usage:
    sweeper = CartExpirationSweeper()
    sweeper.start()      # inside a running event loop
    ...
    await sweeper.stop() # returns once the current run, if any, is done
"""

import asyncio
from datetime import timedelta

import structlog
from protean.domain import Domain

from bookshop import config
from bookshop.cart.expiration import remove_expired_carts
from bookshop.domain import bookshop

logger = structlog.get_logger(__name__)


class CartExpirationSweeper:
    def __init__(self, domain: Domain | None = None, interval: timedelta | None = None) -> None:
        self.domain = domain if domain is not None else bookshop
        self.interval = interval if interval is not None else config.sweep_interval()
        self.runs = 0
        self.failures = 0
        self._run_lock = asyncio.Lock()
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _sweep(self) -> int:
        with self.domain.domain_context():
            return remove_expired_carts()

    async def run_once(self) -> int | None:
        """Run one expiry pass. Returns the number of carts removed, or None on failure."""
        async with self._run_lock:
            try:
                removed = await asyncio.to_thread(self._sweep)
            except Exception:
                self.failures += 1
                logger.exception("Cart expiry run failed; retrying at the next interval")
                return None

            self.runs += 1
            logger.info("Cart expiry run completed", removed=removed)
            return removed

    async def _loop(self) -> None:
        while not self._stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval.total_seconds())
            except TimeoutError:
                pass

    def start(self) -> None:
        if self.running:
            return

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._loop(), name="cart-expiration-sweeper")
        logger.info("Cart expiry sweeper started", interval_seconds=self.interval.total_seconds())

    async def stop(self) -> None:
        if self._task is None:
            return

        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("Cart expiry sweeper stopped", runs=self.runs, failures=self.failures)
