"""Background index refresh - periodic rebuild with an overlap guard."""

from __future__ import annotations

import asyncio
from contextlib import suppress

import structlog

from skyflix.domain.entities.video import IndexStats
from skyflix.infrastructure.index.builder import IndexBuilder

log = structlog.get_logger(__name__)


class IndexRefreshScheduler:
    """Rebuilds the video index at a fixed interval.

    Call :meth:`start` during app lifespan and :meth:`stop` on shutdown.
    At most one rebuild runs at a time: a trigger that arrives while a
    rebuild is in flight is skipped, not queued.
    """

    def __init__(
        self,
        builder: IndexBuilder,
        *,
        interval_seconds: float,
        build_on_startup: bool = True,
    ) -> None:
        self._builder = builder
        self._interval = interval_seconds
        self._build_on_startup = build_on_startup
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._manual_task: asyncio.Task[IndexStats | None] | None = None

    @property
    def is_rebuilding(self) -> bool:
        manual_pending = self._manual_task is not None and not self._manual_task.done()
        return self._lock.locked() or manual_pending

    async def trigger(self) -> IndexStats | None:
        """Run one rebuild now. Returns None when skipped or failed."""
        if self._lock.locked():
            log.info("index_rebuild_skipped", reason="rebuild_in_flight")
            return None
        async with self._lock:
            try:
                return await self._builder.rebuild()
            except Exception:
                # Previous index stays live.
                log.error("index_rebuild_failed", exc_info=True)
                return None

    def trigger_in_background(self) -> bool:
        """Start a rebuild task; False if one is already running."""
        if self.is_rebuilding:
            log.info("index_rebuild_skipped", reason="rebuild_in_flight")
            return False
        self._manual_task = asyncio.create_task(self.trigger())
        return True

    async def run_forever(self) -> None:
        """Main loop: optional initial build, then rebuild every interval."""
        log.info(
            "index_refresh_started",
            interval_seconds=self._interval,
            build_on_startup=self._build_on_startup,
        )
        try:
            if self._build_on_startup:
                await self.trigger()
            while True:
                await asyncio.sleep(self._interval)
                log.info("index_refresh_triggered")
                await self.trigger()
        except asyncio.CancelledError:
            log.info("index_refresh_cancelled")
            raise

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever())
        return self._task

    async def stop(self) -> None:
        for task in (self._task, self._manual_task):
            if task is not None and not task.done():
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
        self._task = None
        self._manual_task = None
