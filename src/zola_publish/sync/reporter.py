"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync operations:

- ``format_sync_report`` -- full post-sync summary.
- ``format_dry_run_preview`` -- dry-run preview grouped by action.
- ``report_to_json`` -- structured dict for ``--json`` output.
- ``format_activity_log`` -- the activity log for display.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zola_publish.activity import LogEntry

    from .models import SyncReport

from .models import FileKind, SyncAction, SyncDirection

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def _arrow(direction: SyncDirection) -> str:
    return "vault -> site" if direction is SyncDirection.PUSH else "site -> vault"


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Sections are only included when they contain at least one result.
    Unchanged files are summarised by count only to avoid excessive output.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = f"Sync report: {report.direction.value} ({_arrow(report.direction)})"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append(
        f"Success: {report.succeeded}, Failed: {report.failed} "
        f"({len(report.articles)} articles, {len(report.images)} images; "
        f"{len(report.created)} created, {len(report.updated)} updated, "
        f"{len(report.skipped)} unchanged)"
    )
    lines.append("")

    if report.created:
        lines.append("Created:")
        for r in report.created:
            lines.append(f"  {r.name} -> {r.destination}")
        lines.append("")

    if report.updated:
        lines.append("Updated:")
        for r in report.updated:
            lines.append(f"  {r.name} -> {r.destination}")
        lines.append("")

    if report.errors:
        lines.append("Errors:")
        for r in report.errors:
            lines.append(f"  {r.name}: {r.error}")
        lines.append("")

    if report.skipped:
        lines.append(f"Unchanged: {len(report.skipped)} files")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# Dry-run preview
# ------------------------------------------------------------------


def format_dry_run_preview(report: SyncReport) -> str:
    """Format a dry-run preview grouped by action type.

    Each proposed action is shown as ``[ACTION] kind name -> destination``.

    Args:
        report: A dry-run sync report (``dry_run=True``).

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []
    lines.append("DRY RUN -- No changes will be made")
    lines.append(f"Direction: {report.direction.value} ({_arrow(report.direction)})")
    lines.append("")

    groups: dict[SyncAction, list[tuple[FileKind, str, str]]] = defaultdict(list)
    for r in report.results:
        if r.success:
            groups[r.action].append((r.kind, r.name, r.destination))

    for action in (SyncAction.CREATE, SyncAction.UPDATE):
        if action not in groups:
            continue
        lines.append(f"[{action.value.upper()}]")
        for kind, name, destination in groups[action]:
            lines.append(f"  {kind.value} {name} -> {destination}")
        lines.append("")

    if report.errors:
        lines.append("[ERROR]")
        for r in report.errors:
            lines.append(f"  {r.kind.value} {r.name}: {r.error}")
        lines.append("")

    skip_count = len(groups.get(SyncAction.SKIP, []))
    if skip_count > 0:
        lines.append(f"Skipped: {skip_count} files (unchanged)")
        lines.append("")

    if not report.written and not report.errors:
        lines.append("No changes needed.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with run info, counts, and per-result details.
    """
    results_list = []
    for r in report.results:
        entry: dict = {
            "name": r.name,
            "kind": r.kind.value,
            "action": r.action.value,
            "success": r.success,
            "destination": r.destination,
        }
        if r.status is not None:
            entry["status"] = r.status.value
        if r.error:
            entry["error"] = r.error
        results_list.append(entry)

    return {
        "direction": report.direction.value,
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "succeeded": report.succeeded,
            "failed": report.failed,
            "created": len(report.created),
            "updated": len(report.updated),
            "skipped": len(report.skipped),
            "articles": len(report.articles),
            "images": len(report.images),
        },
        "results": results_list,
    }


# ------------------------------------------------------------------
# Activity log
# ------------------------------------------------------------------


def format_timestamp(timestamp: str) -> str:
    """Render an ISO 8601 timestamp as local ``YYYY-MM-DD HH:MM``.

    Unparseable values are returned unchanged.
    """
    try:
        dt = datetime.fromisoformat(timestamp)
    except ValueError:
        return timestamp
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%Y-%m-%d %H:%M")


def format_activity_log(entries: list[LogEntry], verbose: bool = False) -> str:
    """Format activity log entries, newest first.

    Args:
        entries: Entries as returned by ``ActivityLog.entries()``.
        verbose: Include each entry's detail lines.
    """
    if not entries:
        return "No activity recorded."

    lines: list[str] = []
    for entry in entries:
        lines.append(
            f"{format_timestamp(entry.timestamp)}  [{entry.action}] {entry.summary}"
        )
        if verbose:
            for detail in entry.details:
                lines.append(f"    {detail}")
    return "\n".join(lines)
