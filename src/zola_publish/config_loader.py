"""
Hierarchical configuration loader for zola_publish.

Provides convention-based config file discovery, env var interpolation,
hierarchical merge with "project wins" semantics, and atomic rewrite of a
single configuration document (the activity log is persisted inside it).

Usage:
    from zola_publish.config_loader import load_hierarchical_config

    config = load_hierarchical_config()
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ZOLA_PUBLISH_CONFIG"

# ---------------------------------------------------------------------------
# 1. Env var interpolation
# ---------------------------------------------------------------------------

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` patterns with env values.

    * ``${VAR}`` is replaced with ``os.environ.get(VAR, "")``.
    * ``${VAR:-default}`` uses *default* when VAR is unset or empty.
    * Literal ``${`` with no closing ``}`` is left untouched.
    """

    def _replace(match: re.Match) -> str:
        var_name = match.group(1)
        default = match.group(2)  # None when no :- clause
        env_val = os.environ.get(var_name)
        if env_val is not None and env_val != "":
            return env_val
        if default is not None:
            return default
        return ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Walk a nested dict/list and interpolate env vars in all strings."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate_recursive(item) for item in obj]
    return obj


# ---------------------------------------------------------------------------
# 2. Single-document read / atomic write
# ---------------------------------------------------------------------------


def load_document(path: Path) -> dict[str, Any]:
    """Load one YAML config document.

    Returns an empty dict when the file is missing or empty.

    Raises:
        ValueError: If the document root is not a mapping.
        yaml.YAMLError: If the file is not valid YAML.
    """
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {path} has non-dict root ({type(data).__name__})"
        )
    return data


def save_document(path: Path, data: dict[str, Any]) -> None:
    """Rewrite a YAML config document atomically.

    Writes to a temporary file in the same directory then replaces the
    target, so readers never see partial data.  Key order is preserved.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            yaml.safe_dump(
                data,
                fh,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# ---------------------------------------------------------------------------
# 3. Convention-based file discovery
# ---------------------------------------------------------------------------


def discover_config_files(explicit: str | None = None) -> list[Path]:
    """Return existing config file paths in precedence order (highest first).

    Search order:
        1. *explicit* path (``--config`` CLI option), when given.
        2. ``ZOLA_PUBLISH_CONFIG`` env var (explicit single path).
        3. ``.zola_publish/config.yml`` in CWD (project-level)
        4. ``.zola_publish/config.yaml`` in CWD (alternate extension)
        5. ``~/.config/zola_publish/config.yml`` (XDG global)

    Only paths that exist on disk are returned.
    """
    candidates: list[Path] = []

    if explicit:
        candidates.append(Path(explicit).expanduser().resolve())

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())

    cwd = Path.cwd()
    candidates.append(cwd / ".zola_publish" / "config.yml")
    candidates.append(cwd / ".zola_publish" / "config.yaml")

    candidates.append(
        Path.home() / ".config" / "zola_publish" / "config.yml"
    )

    return [p for p in candidates if p.exists()]


# ---------------------------------------------------------------------------
# 3a. Config bootstrapping
# ---------------------------------------------------------------------------

_STARTER_CONFIG = """\
# zola-publish configuration
#
# This file is rewritten when the activity log changes; comments are not kept.
# Values may reference environment variables: ${HOME}, ${VAR:-default}.
publish:
  vault_root: ""
  vault_posts_path: /posts
  site_posts_path: ""
  sync_strategy: two-way
  repo_url: ""
  branch: main
  dashboard_url: ""
  vault_images_path: /images/posts/
  site_images_path: /static/images/
  site_root: ""
logging:
  level: INFO
  file: null
  format: text
logs: []
"""


def resolve_config_path(explicit: str | None = None) -> Path:
    """Return the single config file path that should be used.

    If config files already exist (per ``discover_config_files()``), return
    the highest-precedence one.  An explicit path always wins, even when it
    does not exist yet.  Otherwise return the default project-level path
    ``CWD / .zola_publish / config.yml``.

    This does NOT create the file -- use ``ensure_config()`` for that.
    """
    if explicit:
        return Path(explicit).expanduser().resolve()
    existing = discover_config_files()
    if existing:
        return existing[0]
    return Path.cwd() / ".zola_publish" / "config.yml"


def ensure_config(target: Path | None = None) -> Path:
    """Ensure a config file exists, creating directory and starter file if needed.

    Args:
        target: Explicit path to create.  If ``None``, uses
            ``resolve_config_path()``.

    Returns:
        Path to the config file (existing or newly created).
    """
    config_path = target or resolve_config_path()
    if config_path.exists():
        logger.debug("Config file already exists: %s", config_path)
        return config_path

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", config_path)

    return config_path


# ---------------------------------------------------------------------------
# 4. Hierarchical merge
# ---------------------------------------------------------------------------


def load_hierarchical_config(explicit: str | None = None) -> dict[str, Any]:
    """Load and merge all discovered config files.

    Merge strategy ("project wins"):
        Files are loaded from lowest precedence to highest.  Each file's
        top-level keys **replace** (not deep-merge) those from earlier files.

    After merging, env var interpolation is applied to all string values.

    Returns an empty dict when no config files exist (zero-config).
    """
    paths = discover_config_files(explicit)

    if not paths:
        logger.debug(
            "No config files found -- using zero-config defaults"
        )
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        try:
            data = load_document(path)
        except ValueError as exc:
            logger.warning("%s -- skipping", exc)
            continue
        except Exception:
            logger.exception("Failed to load config file %s", path)
            raise
        merged.update(data)

    merged = _interpolate_recursive(merged)  # type: ignore[assignment]

    return merged
