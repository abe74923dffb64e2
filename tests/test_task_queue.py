"""Tests for TaskQueue — the shared, lock-guarded store."""

import asyncio

import yaml

from onqueue.queue.models import TaskStatus
from onqueue.queue.shared import TaskQueue
from onqueue.queue.snapshot import SnapshotStore
from onqueue.queue.store import PopOrder

# -- enqueue -----------------------------------------------------------------------


async def test_enqueue_adds_queued_record(queue: TaskQueue) -> None:
    record = await queue.enqueue("job1", "echo hi")

    assert record.name == "job1"
    assert record.command == "echo hi"
    assert record.status == TaskStatus.QUEUED
    assert record.retries == 0
    assert len(queue.store) == 1


async def test_enqueue_assigns_increasing_seq(queue: TaskQueue) -> None:
    first = await queue.enqueue("a", "true")
    second = await queue.enqueue("b", "true")
    assert second.seq == first.seq + 1


async def test_enqueue_persists_snapshot(queue: TaskQueue, snapshot: SnapshotStore) -> None:
    await queue.enqueue("job1", "true")

    document = yaml.safe_load(snapshot.path.read_text(encoding="utf-8"))
    assert [t["name"] for t in document["tasks"]] == ["job1"]


async def test_enqueue_allows_duplicate_names(queue: TaskQueue) -> None:
    await queue.enqueue("same", "true")
    await queue.enqueue("same", "false")
    assert len(await queue.list_tasks()) == 2


# -- list_tasks --------------------------------------------------------------------


async def test_list_fifo_order(queue: TaskQueue) -> None:
    for name in ("b", "a", "c"):
        await queue.enqueue(name, "true")
    assert [r.name for r in await queue.list_tasks()] == ["b", "a", "c"]


async def test_list_legacy_order(snapshot: SnapshotStore) -> None:
    queue = await TaskQueue.open(snapshot, PopOrder.LEGACY)
    for name in ("b", "a", "c"):
        await queue.enqueue(name, "true")
    assert [r.name for r in await queue.list_tasks()] == ["c", "b", "a"]


async def test_list_returns_copies(queue: TaskQueue) -> None:
    await queue.enqueue("job1", "true")
    listed = await queue.list_tasks()
    listed[0].status = TaskStatus.FAILED

    assert (await queue.list_tasks())[0].status == TaskStatus.QUEUED


async def test_growth_by_exactly_n(queue: TaskQueue) -> None:
    before = len(await queue.list_tasks())
    for i in range(10):
        await queue.enqueue(f"job{i}", "true")
    assert len(await queue.list_tasks()) == before + 10


# -- open / reload -----------------------------------------------------------------


async def test_open_restores_previous_queue(snapshot: SnapshotStore) -> None:
    first = await TaskQueue.open(snapshot)
    for i in range(5):
        await first.enqueue(f"job{i}", "true")

    second = await TaskQueue.open(snapshot)
    assert [r.name for r in await second.list_tasks()] == [f"job{i}" for i in range(5)]
    # Sequence numbering continues after a restart.
    record = await second.enqueue("job5", "true")
    assert record.seq == 5


async def test_concurrent_enqueues_lose_nothing(queue: TaskQueue, snapshot: SnapshotStore) -> None:
    await asyncio.gather(*(queue.enqueue(f"job{i}", "true") for i in range(50)))

    records = await queue.list_tasks()
    assert len(records) == 50
    assert len({r.seq for r in records}) == 50
    assert len(snapshot.load()) == 50
