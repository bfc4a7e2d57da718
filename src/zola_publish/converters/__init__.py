"""Link syntax conversion between vault and site Markdown."""

from .links import site_to_vault, vault_to_site

__all__ = [
    "site_to_vault",
    "vault_to_site",
]
