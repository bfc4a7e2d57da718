"""Candidate discovery for the vault and site trees.

Vault locations are configured relative to the vault root (``/posts``,
``posts``) or as absolute paths under it (``/home/me/Vault/posts``).
They are normalised to a vault-relative POSIX path and re-joined onto
``vault_root``, so every path the engine touches is derived from
configuration rather than from what the other tree happens to contain.

Discovery rules:

1. **Articles** -- ``.md`` files, minus the reserved section files
   (``_index.md``, ``index.md``).  The vault posts folder is searched
   recursively; the site posts folder is a single flat directory.
2. **Images** -- files whose suffix is on the image allow-list, matched
   case-insensitively.  Same recursion rule as articles.
3. **Hidden** -- names starting with ``.`` are never candidates, and
   nothing below a hidden vault folder (``.obsidian``, ``.trash``) is.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from zola_publish.config import Settings
from zola_publish.errors import EnumerationError
from zola_publish.file_handler import FileSystem

logger = logging.getLogger(__name__)

RESERVED_NAMES = frozenset({"_index.md", "index.md", "_index", "index"})
IMAGE_EXTENSIONS = frozenset(
    {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico"}
)
ARTICLE_EXTENSION = ".md"
HIDDEN_PREFIX = "."


# ------------------------------------------------------------------
# Name and path rules
# ------------------------------------------------------------------


def normalize_separators(value: str) -> str:
    """Use ``/`` regardless of the platform the value was written on."""
    return value.replace("\\", "/")


def normalize_vault_path(value: str, vault_root: str = "") -> str:
    """Turn a configured vault location into a vault-relative path.

    Args:
        value: Configured location, e.g. ``"/posts"``, ``"posts/"`` or
            ``"/home/me/Vault/posts"``.
        vault_root: Absolute vault path.  When *value* lies under it the
            prefix is removed.

    Returns:
        Relative POSIX path without leading or trailing ``/``.  ``""``
        means the vault root itself.
    """
    path = normalize_separators(value.strip())
    root = normalize_separators(vault_root.strip()).rstrip("/")

    if root and (path == root or path.startswith(root + "/")):
        path = path[len(root):]
    return path.strip("/")


def is_reserved_name(name: str, case_sensitive: bool = False) -> bool:
    """True for Zola section files that must never be synced."""
    if case_sensitive:
        return name in RESERVED_NAMES
    return name.lower() in RESERVED_NAMES


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def is_article(name: str) -> bool:
    """Markdown file that is neither hidden nor a reserved section file."""
    return (
        name.endswith(ARTICLE_EXTENSION)
        and not is_hidden(name)
        and not is_reserved_name(name)
    )


def is_image(name: str) -> bool:
    return PurePosixPath(name).suffix.lower() in IMAGE_EXTENSIONS


# ------------------------------------------------------------------
# Enumerator
# ------------------------------------------------------------------


class TreeEnumerator:
    """List sync candidates in both trees.

    Args:
        fs: Filesystem to enumerate.
        settings: Configuration snapshot of the current session.
    """

    def __init__(self, fs: FileSystem, settings: Settings) -> None:
        self.fs = fs
        self.settings = settings

    # ------------------------------------------------------------------
    # Derived locations
    # ------------------------------------------------------------------

    def vault_dir(self, configured: str) -> Path:
        """Absolute vault path for a configured vault location."""
        rel = normalize_vault_path(configured, self.settings.vault_root)
        root = Path(normalize_separators(self.settings.vault_root))
        return root / rel if rel else root

    @property
    def vault_posts_dir(self) -> Path:
        return self.vault_dir(self.settings.vault_posts_path)

    @property
    def vault_images_dir(self) -> Path:
        return self.vault_dir(self.settings.vault_images_path)

    @property
    def site_posts_dir(self) -> Path:
        return Path(normalize_separators(self.settings.site_posts_path))

    @property
    def site_images_dir(self) -> Path:
        return Path(normalize_separators(self.settings.site_images_path))

    @property
    def images_configured(self) -> bool:
        return bool(
            self.settings.vault_images_path.strip()
            and self.settings.site_images_path.strip()
        )

    def ensure_site_root(self) -> None:
        """Fail fast when the site posts folder is missing.

        Raises:
            EnumerationError: If the folder does not exist.
        """
        if not self.fs.is_dir(self.site_posts_dir):
            raise EnumerationError(
                f"Site posts path does not exist: {self.site_posts_dir}"
            )

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def _walk_vault(self, root: Path) -> list[Path]:
        """All files below *root* that are not under a hidden component."""
        if not self.fs.is_dir(root):
            logger.debug("Vault folder not found: %s", root)
            return []
        result: list[Path] = []
        for path in self.fs.walk_files(root):
            rel_parts = path.relative_to(root).parts
            if any(is_hidden(part) for part in rel_parts):
                continue
            result.append(path)
        return sorted(result)

    def _list_flat(self, root: Path) -> list[Path]:
        """Files directly in *root*, hidden entries excluded."""
        if not self.fs.is_dir(root):
            logger.debug("Site folder not found: %s", root)
            return []
        return [
            root / name
            for name in self.fs.list_dir(root)
            if not is_hidden(name) and self.fs.is_file(root / name)
        ]

    def vault_articles(self) -> list[Path]:
        """Articles anywhere below the vault posts folder."""
        return [
            p
            for p in self._walk_vault(self.vault_posts_dir)
            if is_article(p.name)
        ]

    def site_articles(self) -> list[Path]:
        """Articles directly in the site posts folder."""
        return [
            p for p in self._list_flat(self.site_posts_dir) if is_article(p.name)
        ]

    def vault_images(self) -> list[Path]:
        """Images anywhere below the vault image folder."""
        return [
            p
            for p in self._walk_vault(self.vault_images_dir)
            if is_image(p.name)
        ]

    def site_images(self) -> list[Path]:
        """Images directly in the site image folder."""
        return [
            p for p in self._list_flat(self.site_images_dir) if is_image(p.name)
        ]
