"""Task queue — records, ordering, persistence and the shared handle."""

from onqueue.queue.models import TaskRecord, TaskStatus
from onqueue.queue.shared import TaskQueue
from onqueue.queue.snapshot import SnapshotStore
from onqueue.queue.store import OrderedPendingStore, PopOrder, fifo_key, legacy_key

__all__ = [
    "TaskRecord",
    "TaskStatus",
    "OrderedPendingStore",
    "PopOrder",
    "fifo_key",
    "legacy_key",
    "SnapshotStore",
    "TaskQueue",
]
