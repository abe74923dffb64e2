"""SnapshotStore — YAML persistence for the whole task store."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from onqueue.config import settings
from onqueue.queue.models import TaskRecord
from onqueue.queue.store import OrderedPendingStore, PopOrder

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Reads and writes the complete queue to a single YAML file.

    Writes overwrite the file in place and are not crash-atomic. Failures on
    either side are logged and swallowed: a failed save persists nothing this
    cycle, a failed load starts from an empty queue.

    Args:
        path: Snapshot file path (default from settings).
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else settings.queue_file

    @property
    def path(self) -> Path:
        return self._path

    def dump(self, store: OrderedPendingStore) -> str:
        """Render the store as a YAML document, greatest-first."""
        document = {"tasks": [record.to_dict() for record in store.to_sorted_list()]}
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)

    def save(self, store: OrderedPendingStore) -> bool:
        """Overwrite the snapshot with every record. Returns True on success."""
        try:
            text = self.dump(store)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8")
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Failed to save queue snapshot to %s: %s", self._path, exc)
            return False
        logger.debug("Saved %d task(s) to %s", len(store), self._path)
        return True

    def load(self, order: PopOrder = PopOrder.FIFO) -> OrderedPendingStore:
        """Read the snapshot into a new store; empty on any failure."""
        store = OrderedPendingStore(order)
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            logger.info("No queue snapshot at %s, starting empty", self._path)
            return store
        except OSError as exc:
            logger.warning("Failed to read queue snapshot %s: %s", self._path, exc)
            return store

        try:
            records = self.parse(raw.decode("utf-8"))
        except (UnicodeDecodeError, yaml.YAMLError, ValueError, TypeError) as exc:
            logger.warning("Ignoring unreadable queue snapshot %s: %s", self._path, exc)
            return store

        for record in records:
            store.push(record)
        logger.info("Loaded %d task(s) from %s", len(store), self._path)
        return store

    @staticmethod
    def parse(text: str) -> list[TaskRecord]:
        """Parse a snapshot document into records.

        Raises yaml.YAMLError or ValueError on a malformed document.
        """
        document = yaml.safe_load(text)
        if document is None:
            return []
        if not isinstance(document, dict):
            msg = "Snapshot root must be a mapping"
            raise ValueError(msg)
        entries = document.get("tasks") or []
        if not isinstance(entries, list):
            msg = "Snapshot 'tasks' must be a list"
            raise ValueError(msg)
        # Entries without a seq are numbered in document order after the largest seq present.
        present = [entry["seq"] for entry in entries if isinstance(entry, dict) and entry.get("seq") is not None]
        next_seq = max((int(seq) for seq in present), default=-1) + 1
        records = []
        for entry in entries:
            record = TaskRecord.from_dict(entry, default_seq=next_seq)
            if entry.get("seq") is None:
                next_seq += 1
            records.append(record)
        return records
