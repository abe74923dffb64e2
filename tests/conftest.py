"""Shared test fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from onqueue.queue.shared import TaskQueue
from onqueue.queue.snapshot import SnapshotStore
from onqueue.queue.store import PopOrder
from onqueue.runner.executor import CommandResult


@pytest.fixture
def snapshot(tmp_path: Path) -> SnapshotStore:
    """SnapshotStore backed by a temporary file."""
    return SnapshotStore(tmp_path / "queue.yml")


@pytest.fixture
async def queue(snapshot: SnapshotStore) -> TaskQueue:
    """Empty FIFO TaskQueue persisted to the temporary snapshot."""
    return await TaskQueue.open(snapshot, PopOrder.FIFO)


@pytest.fixture
def ok_executor() -> AsyncMock:
    """Executor whose every command succeeds."""
    executor = AsyncMock()
    executor.run = AsyncMock(return_value=CommandResult(returncode=0))
    return executor


@pytest.fixture
def failing_executor() -> AsyncMock:
    """Executor whose every command exits 1 with stderr."""
    executor = AsyncMock()
    executor.run = AsyncMock(return_value=CommandResult(returncode=1, stderr="boom\n"))
    return executor
