"""Onqueue entry point."""

import asyncio
import contextlib
import logging

from onqueue.config import settings
from onqueue.gateway.server import GatewayServer
from onqueue.queue.shared import TaskQueue
from onqueue.queue.snapshot import SnapshotStore
from onqueue.queue.store import PopOrder
from onqueue.runner.engine import RunnerEngine
from onqueue.runner.executor import CommandExecutor
from onqueue.runner.runner import Runner

logger = logging.getLogger(__name__)


async def build_services() -> tuple[TaskQueue, RunnerEngine, GatewayServer]:
    """Load the queue and wire the runner and gateway to it."""
    queue = await TaskQueue.open(SnapshotStore(settings.queue_file), PopOrder(settings.pop_order))
    runner = Runner(queue, CommandExecutor(shell=settings.get_shell()))
    engine = RunnerEngine(runner)
    server = GatewayServer(queue)
    return queue, engine, server


async def serve() -> None:
    """Start the runner and the HTTP server, and run until cancelled."""
    _, engine, server = await build_services()
    await engine.start()
    try:
        await server.start()
        await asyncio.Event().wait()
    finally:
        await server.stop()
        await engine.stop()


def main() -> None:
    """Start Onqueue."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )
    logger.info(
        "Starting Onqueue (queue_file=%s, order=%s, tick=%ss)",
        settings.queue_file,
        settings.pop_order,
        settings.tick_interval_seconds,
    )
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve())
    logger.info("Onqueue stopped")


if __name__ == "__main__":
    main()
