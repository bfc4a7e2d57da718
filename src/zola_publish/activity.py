"""Activity log persistence.

Keeps a capped, newest-first record of what zola_publish did (syncs,
publishes, previews) so the user can see what changed and undo it by hand.
Entries live in the configuration document under the reserved ``logs``
key; everything else in that document is left untouched on rewrite.

Key design choices:

* **Append-only** -- callers can add entries or clear the whole log; no
  entry is ever edited.
* **Capped** -- at most ``limit`` entries are kept; the oldest are dropped.
* **Injected store** -- ``ActivityLog`` only talks to a ``LogStore``, so the
  engine can be given a log backed by the config file or by memory.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from zola_publish.config_loader import load_document, save_document
from zola_publish.config_schema import LOGS_KEY

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


class LogEntry(BaseModel):
    """One activity log record.

    Attributes:
        timestamp: ISO 8601 UTC timestamp.
        action: Kind of operation, e.g. ``sync-push``, ``publish``.
        summary: One-line human summary.
        details: Ordered detail lines.
    """

    timestamp: str
    action: str
    summary: str
    details: list[str] = []

    model_config = {"frozen": True}


class LogStore(Protocol):
    """Where activity log entries are persisted."""

    def load(self) -> list[dict]: ...  # pragma: no cover

    def save(self, entries: list[dict]) -> None: ...  # pragma: no cover


class MemoryLogStore:
    """``LogStore`` that keeps entries in memory only."""

    def __init__(self, entries: list[dict] | None = None) -> None:
        self.entries: list[dict] = list(entries or [])

    def load(self) -> list[dict]:
        return list(self.entries)

    def save(self, entries: list[dict]) -> None:
        self.entries = list(entries)


class DocumentLogStore:
    """``LogStore`` backed by the ``logs`` key of a YAML config document.

    Args:
        path: Config document to read and rewrite.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[dict]:
        raw = load_document(self.path).get(LOGS_KEY)
        if not isinstance(raw, list):
            return []
        return raw

    def save(self, entries: list[dict]) -> None:
        document = load_document(self.path)
        document[LOGS_KEY] = entries
        save_document(self.path, document)


class ActivityLog:
    """Capped, newest-first activity log.

    Args:
        store: Persistence backend.
        limit: Maximum number of entries kept.
    """

    def __init__(self, store: LogStore, limit: int = DEFAULT_LIMIT) -> None:
        self._store = store
        self._limit = limit
        self._entries: list[LogEntry] = self._load()

    def _load(self) -> list[LogEntry]:
        entries: list[LogEntry] = []
        for raw in self._store.load():
            try:
                entries.append(LogEntry.model_validate(raw))
            except ValidationError:
                logger.warning("Dropping malformed activity log entry: %r", raw)
        return entries[: self._limit]

    def _save(self) -> None:
        self._store.save([entry.model_dump() for entry in self._entries])

    def append(
        self,
        action: str,
        summary: str,
        details: list[str] | None = None,
    ) -> LogEntry:
        """Record an operation and persist the log.

        Returns:
            The stored entry.
        """
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            action=action,
            summary=summary,
            details=list(details or []),
        )
        self._entries.insert(0, entry)
        del self._entries[self._limit :]
        self._save()
        logger.debug("Activity logged: %s -- %s", action, summary)
        return entry

    def entries(self) -> list[LogEntry]:
        """All entries, newest first."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []
        self._save()

    def __len__(self) -> int:
        return len(self._entries)
