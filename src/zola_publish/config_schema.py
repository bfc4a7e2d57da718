"""Unified configuration schema for zola_publish.

Defines Pydantic models for the YAML configuration document: a ``publish``
section holding the sync settings and a ``logging`` section.  The activity
log shares the same document under the reserved ``logs`` key; that key is
owned by ``zola_publish.activity`` and ignored here.

Usage:
    from zola_publish.config_loader import load_hierarchical_config
    from zola_publish.config_schema import build_config

    unified = build_config(load_hierarchical_config())
    fallbacks = unified.publish.model_dump()
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

SyncStrategy = Literal["one-way", "two-way"]
LogFormat = Literal["text", "json"]

#: Reserved top-level key holding the activity log in the config document.
LOGS_KEY = "logs"


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class PublishConfig(BaseModel):
    """Vault and site tree settings.

    All fields have defaults so a config file may name only what it needs;
    env vars and CLI args can supply the rest at runtime.
    """

    vault_root: str = Field(
        default="", description="Absolute path of the Obsidian vault"
    )
    vault_posts_path: str = Field(
        default="/posts",
        description="Posts folder, vault-relative or absolute under the vault",
    )
    site_posts_path: str = Field(
        default="", description="Absolute path of the site's posts folder"
    )
    sync_strategy: SyncStrategy = Field(
        default="two-way",
        description="'two-way' allows pulling from the site, 'one-way' does not",
    )
    repo_url: str = Field(default="", description="Remote repository URL")
    branch: str = Field(default="main", description="Branch to push to")
    dashboard_url: str = Field(
        default="", description="Optional deployment dashboard URL"
    )
    vault_images_path: str = Field(
        default="/images/posts/",
        description="Image folder, vault-relative or absolute under the vault",
    )
    site_images_path: str = Field(
        default="/static/images/",
        description="Absolute path of the site's image folder",
    )
    site_root: str = Field(
        default="",
        description="Site project root for preview and publish",
    )

    model_config = {"frozen": True, "extra": "ignore"}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: "text" or "json" (one JSON object per record).
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: LogFormat = Field(default="text", description="Log record format")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has defaults, so ``UnifiedConfig()`` (zero-config) is
    always valid.  Unknown top-level keys, including ``logs``, are ignored.
    """

    publish: PublishConfig = Field(default_factory=PublishConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True, "extra": "ignore"}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Missing sections get defaults.  A section that is present but empty
    (``publish:`` with no body loads as ``None``) is treated as missing.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    sections = {
        key: value
        for key, value in raw_data.items()
        if key in UnifiedConfig.model_fields and value is not None
    }
    return UnifiedConfig(**sections)
