"""Tests for zola_publish.frontmatter -- the restricted +++ block parser."""

import textwrap

from zola_publish.frontmatter import parse_article, parse_frontmatter, parse_value


def _doc(block: str, body: str = "Body text.\n") -> str:
    return "+++\n" + textwrap.dedent(block).strip("\n") + "\n+++\n\n" + body


# -------------------------------------------------------------------------
# Value typing
# -------------------------------------------------------------------------


class TestParseValue:
    def test_booleans(self):
        assert parse_value("true") is True
        assert parse_value(" false ") is False

    def test_quoted_string_unwrapped(self):
        assert parse_value('"Hello, world"') == "Hello, world"

    def test_quoted_true_stays_string(self):
        assert parse_value('"true"') == "true"

    def test_list_items_trimmed_and_unquoted(self):
        assert parse_value('[ "a", b ,"c d" ]') == ["a", "b", "c d"]

    def test_list_drops_empty_items(self):
        assert parse_value('["a", , ""]') == ["a"]

    def test_empty_list(self):
        assert parse_value("[]") == []

    def test_bare_value_is_trimmed_string(self):
        assert parse_value("  2024-01-15  ") == "2024-01-15"
        assert parse_value("42") == "42"


# -------------------------------------------------------------------------
# Block detection and sections
# -------------------------------------------------------------------------


class TestParseFrontmatter:
    def test_no_block_returns_none(self):
        assert parse_frontmatter("# Just a heading\n") is None

    def test_block_must_be_first_line(self):
        text = "\n" + _doc('title = "x"')
        assert parse_frontmatter(text) is None

    def test_unclosed_block_returns_none(self):
        assert parse_frontmatter('+++\ntitle = "x"\n\nBody\n') is None

    def test_top_level_keys(self):
        meta = parse_frontmatter(
            _doc(
                """
                title = "First Post"
                date = 2024-01-15
                draft = true
                """
            )
        )
        assert meta == {"title": "First Post", "date": "2024-01-15", "draft": True}

    def test_section_keys_nest_one_level(self):
        meta = parse_frontmatter(
            _doc(
                """
                title = "x"

                [extra]
                toc = true
                """
            )
        )
        assert meta["extra"] == {"toc": True}
        assert "toc" not in meta

    def test_taxonomy_tags_promoted(self):
        meta = parse_frontmatter(
            _doc(
                """
                [taxonomies]
                tags = ["a", "b"]
                """
            )
        )
        assert meta["tags"] == ["a", "b"]
        assert meta["taxonomies"] == {"tags": ["a", "b"]}

    def test_other_taxonomies_not_promoted(self):
        meta = parse_frontmatter(
            _doc(
                """
                [taxonomies]
                categories = ["rust"]
                """
            )
        )
        assert "categories" not in meta

    def test_malformed_lines_and_comments_skipped(self):
        meta = parse_frontmatter(
            _doc(
                """
                # a comment
                title = "ok"
                this line has no equals sign
                = orphan value
                [not a section
                """
            )
        )
        assert meta == {"title": "ok"}

    def test_crlf_line_endings(self):
        text = '+++\r\ntitle = "Win"\r\n+++\r\nBody\r\n'
        assert parse_frontmatter(text) == {"title": "Win"}

    def test_body_after_block_ignored(self):
        meta = parse_frontmatter(_doc('title = "x"', body="key = value\n"))
        assert meta == {"title": "x"}


# -------------------------------------------------------------------------
# Article metadata view
# -------------------------------------------------------------------------


class TestParseArticle:
    def test_full_article(self):
        info = parse_article(
            "/vault/posts/first.md",
            _doc(
                """
                title = "First"
                date = 2024-02-01
                draft = true

                [taxonomies]
                tags = ["python", "zola"]
                """
            ),
        )
        assert info.name == "first.md"
        assert info.title == "First"
        assert info.date == "2024-02-01"
        assert info.tags == ["python", "zola"]
        assert info.draft is True

    def test_title_defaults_to_stem(self):
        info = parse_article("/vault/posts/untitled.md", _doc("date = 2024-01-01"))
        assert info.title == "untitled"
        assert info.tags == []
        assert info.draft is False

    def test_draft_string_is_not_draft(self):
        info = parse_article("/p/a.md", _doc('draft = "true"'))
        assert info.draft is False

    def test_single_string_tag(self):
        info = parse_article("/p/a.md", _doc('tags = "solo"'))
        assert info.tags == ["solo"]

    def test_no_frontmatter_returns_none(self):
        assert parse_article("/p/a.md", "No metadata here.\n") is None
