"""Background execution — shell executor, drain/retry runner, and tick scheduling."""

from onqueue.runner.engine import RunnerEngine
from onqueue.runner.executor import CommandExecutor, CommandResult
from onqueue.runner.runner import Runner

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "Runner",
    "RunnerEngine",
]
