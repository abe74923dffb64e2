"""OrderedPendingStore — max-priority multiset of TaskRecords."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from onqueue.queue.models import TaskRecord

OrderingKey = Callable[[TaskRecord], Any]


def _optional(value: str | None) -> tuple[int, str]:
    # Absent values order before any present value.
    return (0, "") if value is None else (1, value)


def legacy_key(record: TaskRecord) -> tuple:
    """Composite key over every field, in declaration order.

    The greatest record pops first, so tasks run in name-descending order.
    """
    return (
        record.name,
        record.command,
        str(record.status),
        _optional(record.start_time),
        _optional(record.end_time),
        _optional(record.error_message),
        record.retries,
    )


def fifo_key(record: TaskRecord) -> int:
    """The earliest submission is the greatest, so tasks run in submission order."""
    return -record.seq


class PopOrder(StrEnum):
    FIFO = "fifo"
    LEGACY = "legacy"

    @property
    def key(self) -> OrderingKey:
        return fifo_key if self is PopOrder.FIFO else legacy_key


class _Entry:
    """Heap entry that inverts comparison so heapq behaves as a max-heap."""

    __slots__ = ("key", "tiebreak", "record")

    def __init__(self, key: Any, tiebreak: int, record: TaskRecord) -> None:
        self.key = key
        self.tiebreak = tiebreak
        self.record = record

    def __lt__(self, other: _Entry) -> bool:
        if self.key != other.key:
            return self.key > other.key
        return self.tiebreak < other.tiebreak


class OrderedPendingStore:
    """Holds every TaskRecord, pending and terminal, ordered for removal.

    ``pop_max`` always yields the greatest record under the ordering key.
    There is no in-place update: a drain pass pops records out, mutates them
    and pushes them into a replacement store.

    Args:
        order: Which ordering key to use (default FIFO by submission sequence).
    """

    def __init__(self, order: PopOrder = PopOrder.FIFO) -> None:
        self._order = PopOrder(order)
        self._key = self._order.key
        self._heap: list[_Entry] = []
        self._counter = itertools.count()
        self._next_seq = 0

    @property
    def order(self) -> PopOrder:
        return self._order

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, record: TaskRecord) -> None:
        """Insert a record, keeping the heap ordering."""
        heapq.heappush(self._heap, _Entry(self._key(record), next(self._counter), record))
        self._next_seq = max(self._next_seq, record.seq + 1)

    def pop_max(self) -> TaskRecord | None:
        """Remove and return the greatest record, or None when empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap).record

    def to_sorted_list(self) -> list[TaskRecord]:
        """Return all records greatest-first without modifying the store."""
        return [entry.record for entry in sorted(self._heap)]

    def next_seq(self) -> int:
        """Return the next unused submission sequence number."""
        return self._next_seq

    def spawn_empty(self) -> OrderedPendingStore:
        """Return an empty store with the same ordering and sequence counter."""
        store = OrderedPendingStore(self._order)
        store._next_seq = self._next_seq
        return store
