"""Vault/site sync engine.

Public API for reconciling an Obsidian vault with a Zola site tree.

Architecture
------------
Each batch compares a transcoded source body with its destination byte for
byte and writes only when the destination is absent or different.  There
is no sync archive: the file name is the only link between the two trees,
and the engine never renames or deletes.

Modules:

- ``engine``     -- ``SyncEngine``: runs one push or pull batch.
- ``enumerator`` -- ``TreeEnumerator``: candidate discovery and vault path
  normalisation.
- ``detector``   -- absent / identical / changed decisions.
- ``models``     -- ``SyncDirection``, ``SyncAction``, ``SyncResult``,
  ``SyncReport`` and friends.
- ``reporter``   -- human-readable and JSON report formatting.
- ``status``     -- what a push would write, without writing it.

Usage example
-------------
::

    from zola_publish.config import Settings
    from zola_publish.sync import SyncEngine, format_sync_report

    settings = Settings(
        vault_root="/home/me/Vault",
        vault_posts_path="/posts",
        site_posts_path="/home/me/blog/content/posts",
    )

    # Dry-run first to preview changes
    preview = SyncEngine(settings).push(dry_run=True)
    print(format_sync_report(preview))

    # Execute the sync
    report = SyncEngine(settings).push()
    print(format_sync_report(report))
"""

from .detector import detect_binary_change, detect_text_change
from .engine import SyncEngine
from .enumerator import TreeEnumerator, normalize_vault_path
from .models import (
    ChangeStatus,
    FileKind,
    SyncAction,
    SyncDirection,
    SyncPhase,
    SyncReport,
    SyncResult,
)
from .reporter import (
    format_activity_log,
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)
from .status import SyncStatus, compute_sync_status

__all__ = [
    "ChangeStatus",
    "FileKind",
    "SyncAction",
    "SyncDirection",
    "SyncEngine",
    "SyncPhase",
    "SyncReport",
    "SyncResult",
    "SyncStatus",
    "TreeEnumerator",
    "compute_sync_status",
    "detect_binary_change",
    "detect_text_change",
    "format_activity_log",
    "format_dry_run_preview",
    "format_sync_report",
    "normalize_vault_path",
    "report_to_json",
]
