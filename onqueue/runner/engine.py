"""RunnerEngine — APScheduler lifecycle for the runner tick."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from onqueue.config import settings

if TYPE_CHECKING:
    from onqueue.runner.runner import Runner

logger = logging.getLogger(__name__)

TICK_JOB_ID = "runner-tick"


class RunnerEngine:
    """Fires ``Runner.tick`` on a fixed interval.

    The job runs with ``max_instances=1`` so ticks never overlap: a tick
    that comes due while a pass is still running is skipped. The first
    tick runs at startup so tasks restored from the snapshot do not wait a
    full interval. Nothing but the timer triggers a tick.

    Args:
        runner: Runner whose ``tick`` is scheduled.
        interval_seconds: Tick interval (default from settings).
    """

    def __init__(self, runner: Runner, interval_seconds: float | None = None) -> None:
        self._runner = runner
        self._interval = interval_seconds or settings.tick_interval_seconds
        self._scheduler = AsyncIOScheduler()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> float:
        return self._interval

    # -- Lifecycle -------------------------------------------------------------

    async def start(self) -> None:
        """Add the tick job and start the scheduler."""
        self._scheduler.add_job(
            self._runner.tick,
            trigger=IntervalTrigger(seconds=self._interval),
            id=TICK_JOB_ID,
            name="Drain task queue",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
            next_run_time=datetime.now(UTC),
            replace_existing=True,
        )
        self._scheduler.start()
        self._running = True
        logger.info("Runner started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        """Shut down the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Runner stopped")
