"""TaskRecord data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status.

    Transitions only go ``queued -> running -> completed | failed``.
    """

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


_REQUIRED_FIELDS = ("name", "command", "status")


@dataclass
class TaskRecord:
    """One submitted shell command and its execution state.

    Attributes:
        name: Human-readable name (not required to be unique).
        command: Shell text, passed verbatim to the shell.
        status: Lifecycle status.
        start_time: ISO 8601 timestamp of the first attempt.
        end_time: ISO 8601 timestamp of the terminal transition.
        error_message: Error text captured from the last failed attempt.
        retries: Number of failed attempts.
        seq: Submission sequence number, assigned by the store on enqueue.
    """

    name: str
    command: str
    status: TaskStatus = TaskStatus.QUEUED
    start_time: str | None = None
    end_time: str | None = None
    error_message: str | None = None
    retries: int = 0
    seq: int = 0

    # -- Convenience properties ------------------------------------------------

    @property
    def is_queued(self) -> bool:
        return self.status == TaskStatus.QUEUED

    # -- Serialization ---------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain mapping with every field present."""
        return {
            "name": self.name,
            "command": self.command,
            "status": str(self.status),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "error_message": self.error_message,
            "retries": self.retries,
            "seq": self.seq,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, default_seq: int = 0) -> TaskRecord:
        """Deserialize from a snapshot mapping.

        Raises ValueError when a required field is missing or the status is unknown.
        """
        if not isinstance(data, dict):
            msg = f"Task entry must be a mapping, got {type(data).__name__}"
            raise ValueError(msg)
        missing = [key for key in _REQUIRED_FIELDS if data.get(key) is None]
        if missing:
            msg = f"Task entry missing field(s): {', '.join(missing)}"
            raise ValueError(msg)

        seq = data.get("seq")
        return cls(
            name=str(data["name"]),
            command=str(data["command"]),
            status=TaskStatus(data["status"]),
            start_time=_optional_str(data.get("start_time")),
            end_time=_optional_str(data.get("end_time")),
            error_message=_optional_str(data.get("error_message")),
            retries=int(data.get("retries") or 0),
            seq=int(seq) if seq is not None else default_seq,
        )


def _optional_str(value: Any) -> str | None:
    # YAML may hand back datetimes for unquoted timestamps written by hand
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def utc_now() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()
