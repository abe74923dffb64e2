"""TaskQueue — the lock-guarded store shared by the gateway and the runner."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import TYPE_CHECKING

from onqueue.queue.models import TaskRecord, TaskStatus
from onqueue.queue.store import OrderedPendingStore, PopOrder

if TYPE_CHECKING:
    from onqueue.queue.snapshot import SnapshotStore

logger = logging.getLogger(__name__)


class TaskQueue:
    """Owns the live store, its snapshot and the lock that serializes both.

    Every store operation (push, drain, listing, save, load) runs while
    holding ``lock``. The runner takes the lock directly for a whole drain
    pass; the gateway only goes through ``enqueue`` and ``list_tasks``.

    Args:
        snapshot: SnapshotStore used for persistence.
        order: Ordering key for pop and listing order.
    """

    def __init__(self, snapshot: SnapshotStore, order: PopOrder = PopOrder.FIFO) -> None:
        self._snapshot = snapshot
        self._order = PopOrder(order)
        self._lock = asyncio.Lock()
        self.store = OrderedPendingStore(self._order)

    @classmethod
    async def open(cls, snapshot: SnapshotStore, order: PopOrder = PopOrder.FIFO) -> TaskQueue:
        """Create a queue and load its snapshot."""
        queue = cls(snapshot, order)
        await queue.reload()
        return queue

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    @property
    def order(self) -> PopOrder:
        return self._order

    # -- Gateway operations ----------------------------------------------------

    async def enqueue(self, name: str, command: str) -> TaskRecord:
        """Append a new queued record and persist the store."""
        async with self._lock:
            record = TaskRecord(
                name=name,
                command=command,
                status=TaskStatus.QUEUED,
                seq=self.store.next_seq(),
            )
            self.store.push(record)
            self.persist()
        logger.info("Queued task '%s' (seq=%d): %s", name, record.seq, command)
        return copy.copy(record)

    async def list_tasks(self) -> list[TaskRecord]:
        """Return copies of all records, greatest-key-first."""
        async with self._lock:
            return [copy.copy(record) for record in self.store.to_sorted_list()]

    # -- Persistence (caller must hold the lock for persist) -------------------

    def persist(self) -> bool:
        """Save the live store. Must be called while holding ``lock``."""
        return self._snapshot.save(self.store)

    async def reload(self) -> None:
        """Replace the live store with the snapshot contents."""
        async with self._lock:
            self.store = self._snapshot.load(self._order)
