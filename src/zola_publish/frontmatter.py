"""Restricted parser for Zola ``+++`` TOML frontmatter.

Only what the article views need is understood: top-level and one-level
``[section]`` assignments of booleans, double-quoted strings, flat arrays
and bare values.  It is deliberately not a TOML parser -- dates stay
strings so they sort lexicographically, and malformed lines are skipped
instead of failing the whole article.
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel

DELIMITER = "+++"

# Opening "+++" must be the very first line; the block ends at the next
# line that is exactly "+++".
_BLOCK_RE = re.compile(
    r"\A\+\+\+\r?\n(.*?)\r?\n\+\+\+(?=\r?\n|\Z)", re.DOTALL
)
_SECTION_RE = re.compile(r"\[\s*([\w-]+)\s*\]")
_ASSIGN_RE = re.compile(r"([\w-]+)\s*=\s*(.+)")
_QUOTED_RE = re.compile(r'"(.*)"')


class ArticleInfo(BaseModel):
    """Metadata view of one article.

    Attributes:
        name: File name, the join key between vault and site.
        path: Absolute path the article was read from.
        title: ``title`` field, or the file stem when absent.
        date: ``date`` field as written (sortable string), ``""`` if absent.
        tags: Tag names in declaration order.
        draft: True only when ``draft = true``.
    """

    name: str
    path: str
    title: str
    date: str = ""
    tags: list[str] = []
    draft: bool = False

    model_config = {"frozen": True}


def parse_value(raw: str) -> Any:
    """Type a raw right-hand side.

    Rules, first match wins: ``true``/``false`` -> bool; ``"..."`` ->
    str without the quotes; ``[...]`` -> list of trimmed, unquoted,
    non-empty items; anything else -> the trimmed string.
    """
    value = raw.strip()
    if value == "true":
        return True
    if value == "false":
        return False
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    if value.startswith("[") and value.endswith("]"):
        items = []
        for item in value[1:-1].split(","):
            item = item.strip()
            quoted = _QUOTED_RE.fullmatch(item)
            if quoted:
                item = quoted.group(1)
            if item:
                items.append(item)
        return items
    return value


def parse_frontmatter(text: str) -> dict[str, Any] | None:
    """Parse the leading ``+++`` block of *text*.

    Returns:
        Mapping of top-level keys, with ``[section]`` keys nested one level
        under the section name, or ``None`` when the document does not
        start with a delimited block.
    """
    match = _BLOCK_RE.match(text)
    if not match:
        return None

    result: dict[str, Any] = {}
    section: str | None = None

    for line in match.group(1).splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if stripped.startswith("["):
            header = _SECTION_RE.fullmatch(stripped)
            if header:
                section = header.group(1)
                if not isinstance(result.get(section), dict):
                    result[section] = {}
            continue

        assign = _ASSIGN_RE.fullmatch(stripped)
        if not assign:
            continue

        key, value = assign.group(1), parse_value(assign.group(2))
        if section is not None:
            result[section][key] = value
        else:
            result[key] = value

    taxonomies = result.get("taxonomies")
    if isinstance(taxonomies, dict) and "tags" in taxonomies:
        result["tags"] = taxonomies["tags"]

    return result


def _as_tags(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, str) and value:
        return [value]
    return []


def parse_article(path: str | PurePath, text: str) -> ArticleInfo | None:
    """Build the metadata view for the article at *path*.

    Returns ``None`` when the article has no frontmatter block; such
    articles are left out of listings but still sync normally.
    """
    meta = parse_frontmatter(text)
    if meta is None:
        return None

    p = PurePath(path)
    title = meta.get("title")
    date = meta.get("date")
    return ArticleInfo(
        name=p.name,
        path=str(p),
        title=title if isinstance(title, str) and title else p.stem,
        date=date if isinstance(date, str) else "",
        tags=_as_tags(meta.get("tags")),
        draft=meta.get("draft") is True,
    )
