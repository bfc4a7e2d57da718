"""Article listings, tag views and the new-article helper.

Works on the vault posts folder only.  Articles without a ``+++`` block
are left out of every view here but are still synced by the engine.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from pathlib import Path

from zola_publish.config import Settings
from zola_publish.errors import ConfigurationError
from zola_publish.file_handler import FileSystem, LocalFileSystem
from zola_publish.frontmatter import ArticleInfo, parse_article
from zola_publish.sync.enumerator import TreeEnumerator

logger = logging.getLogger(__name__)

NEW_ARTICLE_TEMPLATE = """\
+++
title = "New Article"
date = {date}
description = "Brief description for SEO"
authors = ["Your Name"]
draft = true

[taxonomies]
tags = []

[extra]
toc = true
+++

# New Article

Start writing here...
"""


class ArticleCatalog:
    """Metadata views over the vault's articles.

    Args:
        settings: Configuration snapshot.
        fs: Filesystem to read (defaults to the local disk).
    """

    def __init__(
        self, settings: Settings, fs: FileSystem | None = None
    ) -> None:
        self.settings = settings
        self.fs = fs or LocalFileSystem()
        self.enumerator = TreeEnumerator(self.fs, settings)

    def list_articles(self) -> list[ArticleInfo]:
        """Articles with frontmatter, newest ``date`` first."""
        if not self.settings.vault_root:
            raise ConfigurationError("Vault root is not configured.")

        articles: list[ArticleInfo] = []
        for path in self.enumerator.vault_articles():
            try:
                info = parse_article(path, self.fs.read_text(path))
            except OSError as exc:
                logger.error("Failed to read article %s: %s", path, exc)
                continue
            if info is None:
                logger.debug("No frontmatter, not listed: %s", path)
                continue
            articles.append(info)

        articles.sort(key=lambda a: a.date, reverse=True)
        return articles

    def tag_counts(self) -> dict[str, int]:
        """Tag name -> number of articles carrying it, most used first."""
        counts: Counter[str] = Counter()
        for article in self.list_articles():
            counts.update(article.tags)
        return dict(counts.most_common())

    def articles_by_tag(self, tag: str) -> list[ArticleInfo]:
        return [a for a in self.list_articles() if tag in a.tags]


def new_article(
    settings: Settings,
    fs: FileSystem | None = None,
    today: date | None = None,
) -> Path:
    """Create ``<date>-new-article.md`` in the vault posts folder.

    Returns:
        Path of the new file.

    Raises:
        ConfigurationError: If the vault or posts path is not configured.
        FileExistsError: If today's new article already exists.
    """
    fs = fs or LocalFileSystem()
    if not settings.vault_root or not settings.vault_posts_path:
        raise ConfigurationError(
            "Vault root and posts path must be configured to create an article."
        )

    day = (today or date.today()).isoformat()
    posts_dir = TreeEnumerator(fs, settings).vault_posts_dir
    path = posts_dir / f"{day}-new-article.md"
    if fs.exists(path):
        raise FileExistsError(f"Article already exists: {path}")

    fs.write_text(path, NEW_ARTICLE_TEMPLATE.format(date=day))
    logger.info("Article created: %s", path.name)
    return path
