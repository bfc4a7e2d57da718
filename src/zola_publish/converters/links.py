"""Image link rewriting between vault and site syntax.

Vault (Obsidian) embeds images with wiki links relative to the note::

    ![[../post_imgs/Mapper.png]]

The site (Zola) uses standard Markdown images rooted at ``static/``::

    ![](/post_imgs/Mapper.png)

Both rewrites are plain pattern substitutions over the whole document.
Every matched span is rewritten, including spans inside code blocks, and
every other byte is returned unchanged.

Known asymmetry: ``vault_to_site`` drops only one leading ``../`` (and one
``./``), while ``site_to_vault`` always restores exactly one ``../``.
``![[../../a.png]]`` therefore pushes as ``![](/../a.png)``, and
``![[a.png]]`` or ``![[./a.png]]`` pull back as ``![[../a.png]]``.
"""

from __future__ import annotations

import re

# =============================================================================
# Patterns
# =============================================================================

# ![[path]] -- Obsidian embed
WIKI_IMAGE_RE = re.compile(r"!\[\[([^\]]+)\]\]")

# ![alt](path) -- standard Markdown image
MARKDOWN_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")


# =============================================================================
# Vault -> site
# =============================================================================


def vault_image_to_site(path: str) -> str:
    """Convert one vault image path to a site-rooted path.

    Examples:
        >>> vault_image_to_site("../post_imgs/Mapper.png")
        '/post_imgs/Mapper.png'
        >>> vault_image_to_site("img.png")
        '/img.png'
    """
    if path.startswith("../"):
        path = path[3:]
    if path.startswith("./"):
        path = path[2:]
    if not path.startswith("/"):
        path = "/" + path
    return path


def _to_site(match: re.Match) -> str:
    return f"![]({vault_image_to_site(match.group(1))})"


def vault_to_site(content: str) -> str:
    """Rewrite every ``![[path]]`` embed as ``![](/path)``."""
    return WIKI_IMAGE_RE.sub(_to_site, content)


# =============================================================================
# Site -> vault
# =============================================================================


def is_site_rooted(path: str) -> bool:
    """True for ``/static``-relative paths; protocol-relative URLs are external."""
    return path.startswith("/") and not path.startswith("//")


def _to_vault(match: re.Match) -> str:
    path = match.group(2)
    if not is_site_rooted(path):
        return match.group(0)
    return f"![[../{path[1:]}]]"


def site_to_vault(content: str) -> str:
    """Rewrite ``![alt](/path)`` images as ``![[../path]]``.

    Relative paths and external URLs are left as they are.  Alt text of a
    rewritten image is dropped; the wiki embed has nowhere to keep it.
    """
    return MARKDOWN_IMAGE_RE.sub(_to_vault, content)
