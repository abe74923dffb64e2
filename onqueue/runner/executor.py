"""CommandExecutor — runs one shell command as a child process."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single attempt.

    Attributes:
        returncode: Process exit code, or None if the process never started.
        stderr: Captured standard error (decoded), or the spawn failure text.
    """

    returncode: int | None
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error_text(self) -> str:
        """Human-readable failure description for a non-successful attempt."""
        text = self.stderr.strip()
        if text:
            return text
        if self.returncode is None:
            return "failed to start"
        return f"exited with code {self.returncode}"


class CommandExecutor:
    """Spawns commands through a shell and waits for them to exit.

    No sandboxing, no timeout: the child inherits the environment, working
    directory and privileges of the server process.

    Args:
        shell: Shell executable invoked as ``<shell> -c <command>``. When None,
            the platform default shell is used (``/bin/sh`` or ``cmd.exe``).
    """

    def __init__(self, shell: str | None = None) -> None:
        self._shell = shell

    @property
    def shell(self) -> str | None:
        return self._shell

    async def run(self, command: str) -> CommandResult:
        """Run *command* to completion. Never raises for process failures."""
        try:
            process = await self._spawn(command)
        except OSError as exc:
            logger.debug("Spawn failed for %r: %s", command, exc)
            return CommandResult(returncode=None, stderr=str(exc))

        _, stderr = await process.communicate()
        return CommandResult(
            returncode=process.returncode,
            stderr=stderr.decode("utf-8", errors="replace") if stderr else "",
        )

    async def _spawn(self, command: str) -> asyncio.subprocess.Process:
        if self._shell:
            return await asyncio.create_subprocess_exec(
                self._shell,
                "-c",
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        return await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
