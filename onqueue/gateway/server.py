"""HTTP gateway — enqueue and list tasks over aiohttp.

Uses aiohttp's AppRunner/TCPSite so the server shares the event loop with
the runner's scheduler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aiohttp import web

from onqueue.config import settings

if TYPE_CHECKING:
    from onqueue.queue.models import TaskRecord
    from onqueue.queue.shared import TaskQueue

logger = logging.getLogger(__name__)

QUEUE_KEY: web.AppKey[TaskQueue] = web.AppKey("queue")

USAGE_TEXT = (
    "Onqueue is running.\n"
    "Try:\n"
    "  - GET /add?name=job1&cmd=echo+hi\n"
    "  - GET /list\n"
    "  - GET /list?format=text\n"
)


def render_task_line(record: TaskRecord) -> str:
    """Render one task as ``name | command | status | start | end``."""
    return " | ".join(
        (
            record.name,
            record.command,
            str(record.status),
            record.start_time or "N/A",
            record.end_time or "N/A",
        )
    )


async def _root(request: web.Request) -> web.Response:
    """GET / — usage text."""
    return web.Response(text=USAGE_TEXT)


async def _health(request: web.Request) -> web.Response:
    """GET /health — basic liveness check."""
    return web.json_response({"status": "ok"})


async def _handle_add(request: web.Request) -> web.Response:
    """GET /add?name=...&cmd=... — enqueue a shell command."""
    name = request.query.get("name", "")
    command = request.query.get("cmd", "")

    missing = [param for param, value in (("name", name), ("cmd", command)) if not value.strip()]
    if missing:
        logger.warning("Rejected /add: missing %s", ", ".join(missing))
        return web.json_response(
            {"error": f"missing required query parameter(s): {', '.join(missing)}"},
            status=400,
        )

    queue = request.app[QUEUE_KEY]
    await queue.enqueue(name, command)
    return web.json_response({"queued": name, "cmd": command})


async def _handle_list(request: web.Request) -> web.Response:
    """GET /list — all tasks, greatest-key-first, as JSON or plain text."""
    queue = request.app[QUEUE_KEY]
    records = await queue.list_tasks()

    fmt = request.query.get("format", "json")
    if fmt == "text":
        body = "\n".join(render_task_line(record) for record in records)
        return web.Response(text=body + "\n" if body else "")
    if fmt != "json":
        return web.json_response({"error": f"unknown format: {fmt}"}, status=400)
    return web.json_response([record.to_dict() for record in records])


def _create_web_app(queue: TaskQueue) -> web.Application:
    """Build the aiohttp Application with routes bound to *queue*."""
    app = web.Application()
    app[QUEUE_KEY] = queue
    app.router.add_get("/", _root)
    app.router.add_get("/health", _health)
    app.router.add_get("/add", _handle_add)
    app.router.add_get("/list", _handle_list)
    return app


class GatewayServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(self, queue: TaskQueue, host: str | None = None, port: int | None = None) -> None:
        self._queue = queue
        self.host = host or settings.http_host
        self.port = port if port is not None else settings.http_port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start listening for HTTP requests."""
        app = _create_web_app(self._queue)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("Server running on http://%s:%d", self.host, self.port)

    async def stop(self) -> None:
        """Shut down the server gracefully."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Server stopped")
