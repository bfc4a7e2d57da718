"""Reconciliation engine that runs one push or pull batch.

A ``SyncEngine`` is built per invocation from a settings snapshot.  Its
``run`` walks through these phases:

1. **Validating** -- required paths are configured and the sync policy
   allows the direction.  Nothing on disk is touched before this passes.
2. **Enumerating** -- the site posts folder must exist; candidates are
   listed by the ``TreeEnumerator``.
3. **Per-file sync** -- each candidate is read, transcoded, compared with
   its destination and written when absent or different.
4. **Summarizing** -- a ``SyncReport`` is built and, for real runs, one
   entry is appended to the activity log.

Error handling is per-file: a single failure is recorded in the report
and does not abort the batch.  Only configuration and enumeration errors
propagate.  Destination files are never deleted.

The engine is not re-entrant; callers must not run two batches against the
same tree at once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from zola_publish.activity import ActivityLog
from zola_publish.config import Settings
from zola_publish.converters.links import site_to_vault, vault_to_site
from zola_publish.errors import ConfigurationError
from zola_publish.file_handler import FileSystem, LocalFileSystem
from zola_publish.sync.detector import (
    detect_binary_change,
    detect_text_change,
    needs_write,
)
from zola_publish.sync.enumerator import TreeEnumerator
from zola_publish.sync.models import (
    ChangeStatus,
    FileKind,
    SyncAction,
    SyncDirection,
    SyncPhase,
    SyncReport,
    SyncResult,
)

logger = logging.getLogger(__name__)

_ACTION_FOR_STATUS = {
    ChangeStatus.ABSENT: SyncAction.CREATE,
    ChangeStatus.CHANGED: SyncAction.UPDATE,
    ChangeStatus.IDENTICAL: SyncAction.SKIP,
}


class SyncEngine:
    """Run a push or pull batch between the vault and the site.

    Args:
        settings: Configuration snapshot for this session.
        fs: Filesystem to operate on (defaults to the local disk).
        activity_log: Log that receives one entry per completed batch.
    """

    def __init__(
        self,
        settings: Settings,
        fs: FileSystem | None = None,
        activity_log: ActivityLog | None = None,
    ) -> None:
        self.settings = settings
        self.fs = fs or LocalFileSystem()
        self.activity_log = activity_log
        self.enumerator = TreeEnumerator(self.fs, settings)
        self.phase = SyncPhase.IDLE

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(
        self, direction: SyncDirection | str, dry_run: bool = False
    ) -> SyncReport:
        """Execute one sync batch.

        Args:
            direction: ``push`` (vault -> site) or ``pull`` (site -> vault).
            dry_run: If ``True``, compute actions but do not write anything.

        Returns:
            A ``SyncReport`` summarising what was (or would be) done.

        Raises:
            ConfigurationError: If settings do not allow the batch.
            EnumerationError: If the site posts folder is missing.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        try:
            self._enter(SyncPhase.VALIDATING)
            direction = self._validate(direction)

            self._enter(SyncPhase.ENUMERATING)
            self.enumerator.ensure_site_root()

            self._enter(SyncPhase.PER_FILE_SYNC)
            if direction is SyncDirection.PUSH:
                results = self._push(dry_run)
            else:
                results = self._pull(dry_run)

            self._enter(SyncPhase.SUMMARIZING)
            report = SyncReport(
                direction=direction,
                dry_run=dry_run,
                results=results,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc).isoformat(),
            )
            self._record(report)
        finally:
            self._enter(SyncPhase.IDLE)

        logger.info(
            "%s complete: %d succeeded, %d failed%s",
            direction.value.capitalize(),
            report.succeeded,
            report.failed,
            " (dry run)" if dry_run else "",
        )
        return report

    def push(self, dry_run: bool = False) -> SyncReport:
        return self.run(SyncDirection.PUSH, dry_run=dry_run)

    def pull(self, dry_run: bool = False) -> SyncReport:
        return self.run(SyncDirection.PULL, dry_run=dry_run)

    # ------------------------------------------------------------------
    # Validating
    # ------------------------------------------------------------------

    def _validate(self, direction: SyncDirection | str) -> SyncDirection:
        try:
            direction = SyncDirection(direction)
        except ValueError:
            raise ConfigurationError(
                f"Unknown sync direction '{direction}': use push or pull"
            ) from None

        if not self.settings.site_posts_path.strip():
            raise ConfigurationError(
                "Site posts path is not configured. Set site_posts_path "
                "in the publish section of config.yml."
            )
        if not self.settings.vault_root.strip():
            raise ConfigurationError(
                "Vault root is not configured. Set vault_root in the "
                "publish section of config.yml or pass --vault-root."
            )
        if direction is SyncDirection.PULL and not self.settings.two_way:
            raise ConfigurationError(
                "Sync strategy is one-way; pulling from the site is disabled."
            )
        return direction

    # ------------------------------------------------------------------
    # Push: vault -> site
    # ------------------------------------------------------------------

    def _push(self, dry_run: bool) -> list[SyncResult]:
        results: list[SyncResult] = []
        site_dir = self.enumerator.site_posts_dir

        for source in self.enumerator.vault_articles():
            results.append(
                self._guarded(
                    source.name,
                    FileKind.ARTICLE,
                    site_dir / source.name,
                    lambda src=source: self._sync_article(
                        src, site_dir / src.name, vault_to_site, dry_run
                    ),
                )
            )

        if self.enumerator.images_configured:
            image_dir = self.enumerator.site_images_dir
            for source in self.enumerator.vault_images():
                results.append(
                    self._guarded(
                        source.name,
                        FileKind.IMAGE,
                        image_dir / source.name,
                        lambda src=source: self._copy_new_image(
                            src, image_dir / src.name, dry_run
                        ),
                    )
                )
        return results

    def _copy_new_image(
        self, source: Path, destination: Path, dry_run: bool
    ) -> SyncResult:
        """Copy an image only if the site has no file of that name yet."""
        if self.fs.exists(destination):
            logger.debug("Image already on site, keeping it: %s", destination)
            return SyncResult(
                name=source.name,
                kind=FileKind.IMAGE,
                action=SyncAction.SKIP,
                destination=str(destination),
            )
        data = self.fs.read_bytes(source)
        if not dry_run:
            self.fs.write_bytes(destination, data)
        return SyncResult(
            name=source.name,
            kind=FileKind.IMAGE,
            action=SyncAction.CREATE,
            status=ChangeStatus.ABSENT,
            destination=str(destination),
        )

    # ------------------------------------------------------------------
    # Pull: site -> vault
    # ------------------------------------------------------------------

    def _pull(self, dry_run: bool) -> list[SyncResult]:
        results: list[SyncResult] = []
        vault_dir = self.enumerator.vault_posts_dir

        for source in self.enumerator.site_articles():
            results.append(
                self._guarded(
                    source.name,
                    FileKind.ARTICLE,
                    vault_dir / source.name,
                    lambda src=source: self._sync_article(
                        src, vault_dir / src.name, site_to_vault, dry_run
                    ),
                )
            )

        if self.enumerator.images_configured:
            image_dir = self.enumerator.vault_images_dir
            for source in self.enumerator.site_images():
                results.append(
                    self._guarded(
                        source.name,
                        FileKind.IMAGE,
                        image_dir / source.name,
                        lambda src=source: self._sync_image(
                            src, image_dir / src.name, dry_run
                        ),
                    )
                )
        return results

    def _sync_image(
        self, source: Path, destination: Path, dry_run: bool
    ) -> SyncResult:
        """Copy an image when the destination is absent or different."""
        data = self.fs.read_bytes(source)
        status = detect_binary_change(self.fs, destination, data)
        if needs_write(status) and not dry_run:
            self.fs.write_bytes(destination, data)
        return SyncResult(
            name=source.name,
            kind=FileKind.IMAGE,
            action=_ACTION_FOR_STATUS[status],
            status=status,
            destination=str(destination),
        )

    # ------------------------------------------------------------------
    # Shared per-file steps
    # ------------------------------------------------------------------

    def _sync_article(
        self,
        source: Path,
        destination: Path,
        transcode: Callable[[str], str],
        dry_run: bool,
    ) -> SyncResult:
        """Transcode one article and write it unless already identical."""
        content = transcode(self.fs.read_text(source))
        status = detect_text_change(self.fs, destination, content)
        if needs_write(status) and not dry_run:
            self.fs.write_text(destination, content)
            logger.debug("Wrote %s (%s)", destination, status.value)
        return SyncResult(
            name=source.name,
            kind=FileKind.ARTICLE,
            action=_ACTION_FOR_STATUS[status],
            status=status,
            destination=str(destination),
        )

    def _guarded(
        self,
        name: str,
        kind: FileKind,
        destination: Path,
        operation: Callable[[], SyncResult],
    ) -> SyncResult:
        """Run one per-file operation, turning any failure into a result."""
        try:
            return operation()
        except Exception as exc:
            logger.error("Error syncing %s %s: %s", kind.value, name, exc)
            return SyncResult(
                name=name,
                kind=kind,
                action=SyncAction.SKIP,
                success=False,
                error=str(exc) or type(exc).__name__,
                destination=str(destination),
            )

    # ------------------------------------------------------------------
    # Summarizing
    # ------------------------------------------------------------------

    def _record(self, report: SyncReport) -> None:
        """Append the batch outcome to the activity log (real runs only)."""
        if report.dry_run or self.activity_log is None:
            return

        if report.direction is SyncDirection.PUSH:
            verb, target = "Pushed", "to site"
        else:
            verb, target = "Pulled", "from site"

        articles = report.articles
        ok = [r for r in articles if r.success]
        summary = f"{verb} {len(ok)} articles {target}"
        if report.failed:
            summary += f" ({report.failed} failed)"

        details = [f"{verb}: {Path(r.name).stem}" for r in ok]
        details += [
            f"Copied image: {r.name}"
            for r in report.images
            if r.success and r.action is not SyncAction.SKIP
        ]
        details += [f"Failed: {r.name} ({r.error})" for r in report.errors]

        try:
            self.activity_log.append(
                f"sync-{report.direction.value}", summary, details
            )
        except Exception as exc:
            # files are already written; the batch result stands
            logger.error("Failed to save activity log: %s", exc)

    def _enter(self, phase: SyncPhase) -> None:
        logger.debug("Sync phase: %s -> %s", self.phase.value, phase.value)
        self.phase = phase
