"""Runtime settings for zola_publish.

Reads vault/site settings from CLI args, environment variables, .env
files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    ZOLA_PUBLISH_VAULT_ROOT: Absolute path of the Obsidian vault
    ZOLA_PUBLISH_VAULT_POSTS_PATH: Vault posts folder (default: /posts)
    ZOLA_PUBLISH_SITE_POSTS_PATH: Site posts folder
    ZOLA_PUBLISH_SYNC_STRATEGY: one-way | two-way (default: two-way)
    ZOLA_PUBLISH_REPO_URL: Remote repository URL
    ZOLA_PUBLISH_BRANCH: Branch to push (default: main)
    ZOLA_PUBLISH_DASHBOARD_URL: Deployment dashboard URL
    ZOLA_PUBLISH_VAULT_IMAGES_PATH: Vault image folder (default: /images/posts/)
    ZOLA_PUBLISH_SITE_IMAGES_PATH: Site image folder (default: /static/images/)
    ZOLA_PUBLISH_SITE_ROOT: Site project root (default: derived from posts path)
"""

import logging
import os
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

ENV_PREFIX = "ZOLA_PUBLISH_"
SYNC_STRATEGIES = ("one-way", "two-way")

# Site-side paths are real filesystem paths and get ``~`` expanded.
# Vault-side paths are addressed relative to ``vault_root`` and are left
# as written.
_FS_PATH_FIELDS = ("vault_root", "site_posts_path", "site_images_path", "site_root")


@dataclass
class Settings:
    vault_root: str = ""
    vault_posts_path: str = "/posts"
    site_posts_path: str = ""
    sync_strategy: str = "two-way"
    repo_url: str = ""
    branch: str = "main"
    dashboard_url: str = ""
    vault_images_path: str = "/images/posts/"
    site_images_path: str = "/static/images/"
    site_root: str = ""

    @property
    def two_way(self) -> bool:
        return self.sync_strategy == "two-way"


def validate_settings(settings: Settings) -> None:
    """Normalise settings in place and raise ValueError if invalid.

    Only checks values that are wrong regardless of the operation.  Paths
    an operation needs (e.g. the site posts path for a sync) are checked
    by that operation, so ``status`` and ``init`` work on a partial config.

    Raises:
        ValueError: If the sync strategy is unknown.
    """
    for f in fields(settings):
        value = getattr(settings, f.name)
        if isinstance(value, str):
            setattr(settings, f.name, value.strip())

    for name in _FS_PATH_FIELDS:
        value = getattr(settings, name)
        if value.startswith("~"):
            setattr(settings, name, os.path.expanduser(value))

    if settings.sync_strategy not in SYNC_STRATEGIES:
        raise ValueError(
            f"Invalid sync strategy '{settings.sync_strategy}': "
            f"must be one of {', '.join(SYNC_STRATEGIES)}"
        )

    if settings.branch == "":
        settings.branch = "main"


def load_settings(
    overrides: dict | None = None,
    yaml_fallbacks: dict | None = None,
) -> Settings:
    """Load settings with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI override > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        overrides: Dict of CLI values keyed by ``Settings`` field name.
            ``None`` values are treated as unset.
        yaml_fallbacks: Dict of values from the YAML ``publish`` section.

    Returns:
        Validated Settings instance.

    Raises:
        ValueError: If a resolved value is invalid.
    """
    cli = overrides or {}
    fb = yaml_fallbacks or {}
    defaults = Settings()

    values: dict[str, str] = {}
    for f in fields(Settings):
        cli_value = cli.get(f.name)
        env_value = os.getenv(ENV_PREFIX + f.name.upper())
        if cli_value is not None:
            values[f.name] = str(cli_value)
        elif env_value is not None:
            values[f.name] = env_value
        elif fb.get(f.name) is not None:
            values[f.name] = str(fb[f.name])
        else:
            values[f.name] = getattr(defaults, f.name)

    settings = Settings(**values)
    validate_settings(settings)

    logger.debug(
        "Settings resolved: vault_root=%r site_posts_path=%r strategy=%s",
        settings.vault_root,
        settings.site_posts_path,
        settings.sync_strategy,
    )
    return settings
