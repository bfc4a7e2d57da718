"""Pending-push status for the vault and site trees.

Counts what a push would write without writing it: articles whose site
copy is missing or differs after link conversion, and images the site
does not have yet.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from zola_publish.config import Settings
from zola_publish.converters.links import vault_to_site
from zola_publish.file_handler import FileSystem, LocalFileSystem
from zola_publish.sync.detector import detect_text_change, needs_write
from zola_publish.sync.enumerator import TreeEnumerator

logger = logging.getLogger(__name__)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


class SyncStatus(BaseModel):
    """Snapshot of what is waiting to be pushed."""

    configured: bool = True
    site_exists: bool = True
    articles_pending: int = 0
    images_pending: int = 0
    unreadable: int = 0

    model_config = {"frozen": True}

    @property
    def in_sync(self) -> bool:
        return (
            self.configured
            and self.site_exists
            and self.articles_pending == 0
            and self.images_pending == 0
        )

    def message(self) -> str:
        if not self.configured:
            return "Configure the site posts path and vault root in settings"
        if not self.site_exists:
            return "Site posts path does not exist"
        parts = []
        if self.articles_pending:
            parts.append(_plural(self.articles_pending, "article"))
        if self.images_pending:
            parts.append(_plural(self.images_pending, "image"))
        if not parts:
            return "All synced"
        return ", ".join(parts) + " waiting to sync"


def compute_sync_status(
    settings: Settings, fs: FileSystem | None = None
) -> SyncStatus:
    """Compare the vault with the site the way a push would."""
    fs = fs or LocalFileSystem()
    if not settings.site_posts_path or not settings.vault_root:
        return SyncStatus(configured=False)

    enumerator = TreeEnumerator(fs, settings)
    if not fs.is_dir(enumerator.site_posts_dir):
        return SyncStatus(site_exists=False)

    articles = 0
    unreadable = 0
    for source in enumerator.vault_articles():
        destination = enumerator.site_posts_dir / source.name
        try:
            content = vault_to_site(fs.read_text(source))
            if needs_write(detect_text_change(fs, destination, content)):
                articles += 1
        except OSError as exc:
            logger.warning("Cannot compare %s: %s", source, exc)
            unreadable += 1

    images = 0
    if enumerator.images_configured:
        for source in enumerator.vault_images():
            if not fs.exists(enumerator.site_images_dir / source.name):
                images += 1

    return SyncStatus(
        articles_pending=articles,
        images_pending=images,
        unreadable=unreadable,
    )
