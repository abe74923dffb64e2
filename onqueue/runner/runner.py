"""Runner — drains the store, executes queued tasks with retry, persists."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import TYPE_CHECKING

from onqueue.config import settings
from onqueue.queue.models import TaskStatus, utc_now
from onqueue.runner.executor import CommandResult

if TYPE_CHECKING:
    from onqueue.queue.models import TaskRecord
    from onqueue.queue.shared import TaskQueue
    from onqueue.queue.store import OrderedPendingStore
    from onqueue.runner.executor import CommandExecutor

logger = logging.getLogger(__name__)


class Runner:
    """Single consumer of the task queue.

    Each tick takes the queue lock for a full drain pass: every record is
    popped exactly once, queued ones are executed one at a time, and all of
    them are pushed into a replacement store that becomes the live store.
    Subprocess waits and retry sleeps happen while the lock is held, so
    enqueue and list requests wait for the pass to finish.

    Args:
        queue: Shared TaskQueue.
        executor: CommandExecutor used to spawn commands.
        max_retries: Attempts per task (default from settings).
        retry_delay: Seconds to sleep after each failed attempt (default from settings).
    """

    def __init__(
        self,
        queue: TaskQueue,
        executor: CommandExecutor,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ) -> None:
        self._queue = queue
        self._executor = executor
        self._max_retries = max_retries if max_retries is not None else settings.max_retries
        self._retry_delay = retry_delay if retry_delay is not None else settings.retry_delay_seconds

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def retry_delay(self) -> float:
        return self._retry_delay

    async def tick(self) -> None:
        """Run one drain pass under the queue lock and persist the result."""
        async with self._queue.lock:
            try:
                self._queue.store = await self.drain(self._queue.store)
            except Exception:
                logger.exception("Drain pass failed; unfinished tasks stay queued")
            self._queue.persist()

    async def drain(self, store: OrderedPendingStore) -> OrderedPendingStore:
        """Pop every record, execute the queued ones, return the rebuilt store.

        *store* is left empty only if the pass completes. If the pass is
        interrupted, every popped record goes back into *store*: finished
        records keep their new state, the interrupted one is restored to the
        state it had before the pass.
        """
        replacement = store.spawn_empty()
        held: list[TaskRecord] = []
        while (record := store.pop_max()) is not None:
            held.append(record)

        executed = 0
        for index, record in enumerate(held):
            if record.is_queued:
                before = copy.copy(record)
                try:
                    await self.run_task(record)
                except BaseException:
                    held[index] = before
                    for restored in held:
                        store.push(restored)
                    raise
                executed += 1
            replacement.push(record)

        if executed:
            logger.info("Drain pass executed %d of %d task(s)", executed, len(held))
        else:
            logger.debug("Drain pass: nothing queued (%d task(s) stored)", len(held))
        return replacement

    async def run_task(self, record: TaskRecord) -> None:
        """Execute a queued record with bounded retry, mutating it in place."""
        record.status = TaskStatus.RUNNING
        record.start_time = utc_now()
        logger.info("Running task '%s': %s", record.name, record.command)

        for attempt in range(1, self._max_retries + 1):
            try:
                result = await self._executor.run(record.command)
            except Exception as exc:
                logger.exception("Executor error for task '%s'", record.name)
                result = CommandResult(returncode=None, stderr=str(exc) or type(exc).__name__)

            if result.ok:
                record.status = TaskStatus.COMPLETED
                record.end_time = utc_now()
                logger.info("Task '%s' completed (attempt %d/%d)", record.name, attempt, self._max_retries)
                return

            record.retries += 1
            record.error_message = result.error_text
            logger.warning(
                "Task '%s' failed (attempt %d/%d): %s",
                record.name,
                attempt,
                self._max_retries,
                record.error_message,
            )
            await asyncio.sleep(self._retry_delay)

        record.status = TaskStatus.FAILED
        record.end_time = utc_now()
        logger.warning("Task '%s' gave up after %d attempt(s)", record.name, record.retries)
