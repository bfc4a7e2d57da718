"""Pydantic models for the vault/site sync engine.

Defines the core data contracts used across all sync modules:

- ``SyncDirection``: push (vault -> site) or pull (site -> vault).
- ``SyncPhase``: the engine's per-invocation state.
- ``ChangeStatus``: result of comparing a body with its destination.
- ``FileKind``: article or image.
- ``SyncAction``: what was (or would be) done for one file.
- ``SyncResult``: outcome of syncing one file.
- ``SyncReport``: aggregate results for a full sync run.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SyncDirection(str, Enum):
    """Direction of a sync batch."""

    PUSH = "push"
    PULL = "pull"


class SyncPhase(str, Enum):
    """States of one ``SyncEngine.run`` call, in order."""

    IDLE = "idle"
    VALIDATING = "validating"
    ENUMERATING = "enumerating"
    PER_FILE_SYNC = "per_file_sync"
    SUMMARIZING = "summarizing"


class ChangeStatus(str, Enum):
    """How a destination file relates to the body about to be written."""

    ABSENT = "absent"
    IDENTICAL = "identical"
    CHANGED = "changed"


class FileKind(str, Enum):
    ARTICLE = "article"
    IMAGE = "image"


class SyncAction(str, Enum):
    """Possible outcomes for a single file."""

    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"


class SyncResult(BaseModel):
    """Result of syncing one file.

    Attributes:
        name: File name (the join key between the two trees).
        kind: Article or image.
        action: Action that was performed (or planned, in a dry run).
        status: Change status of the destination, when it was determined.
        success: Whether the operation succeeded.
        error: Error message if the operation failed.
        destination: Absolute destination path.
    """

    name: str
    kind: FileKind
    action: SyncAction
    status: ChangeStatus | None = None
    success: bool = True
    error: str | None = None
    destination: str = ""

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Aggregate report for a full sync run.

    Attributes:
        direction: Push or pull.
        dry_run: Whether this was a dry-run (no changes applied).
        results: List of individual sync results, articles first.
        started_at: ISO 8601 timestamp when sync started.
        completed_at: ISO 8601 timestamp when sync completed.
    """

    direction: SyncDirection
    dry_run: bool = False
    results: list[SyncResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def articles(self) -> list[SyncResult]:
        return [r for r in self.results if r.kind == FileKind.ARTICLE]

    @property
    def images(self) -> list[SyncResult]:
        return [r for r in self.results if r.kind == FileKind.IMAGE]

    @property
    def created(self) -> list[SyncResult]:
        """Successful results where action is CREATE."""
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.CREATE
        ]

    @property
    def updated(self) -> list[SyncResult]:
        """Successful results where action is UPDATE."""
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.UPDATE
        ]

    @property
    def skipped(self) -> list[SyncResult]:
        """Successful results where action is SKIP."""
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.SKIP
        ]

    @property
    def written(self) -> list[SyncResult]:
        """Results that wrote (or would write) a destination file."""
        return self.created + self.updated

    @property
    def errors(self) -> list[SyncResult]:
        """Results where success is False."""
        return [r for r in self.results if not r.success]

    @property
    def succeeded(self) -> int:
        return len(self.results) - len(self.errors)

    @property
    def failed(self) -> int:
        return len(self.errors)

    def summary(self) -> str:
        """Format a human-readable summary of the sync run.

        Returns:
            Multi-line summary string with counts by action.
        """
        lines = [
            f"Sync report ({self.direction.value})"
            + (" (dry run)" if self.dry_run else ""),
            f"  Created:   {len(self.created)}",
            f"  Updated:   {len(self.updated)}",
            f"  Unchanged: {len(self.skipped)}",
            f"  Errors:    {len(self.errors)}",
            f"  Total:     {len(self.results)}",
        ]
        return "\n".join(lines)
