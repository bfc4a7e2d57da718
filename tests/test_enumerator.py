"""Tests for zola_publish.sync.enumerator -- candidate discovery."""

from pathlib import Path

import pytest

from zola_publish.errors import EnumerationError
from zola_publish.sync.enumerator import (
    TreeEnumerator,
    is_article,
    is_image,
    is_reserved_name,
    normalize_separators,
    normalize_vault_path,
)

from conftest import SITE_IMAGES, SITE_POSTS, VAULT, MemoryFileSystem


def _names(paths):
    return [p.name for p in paths]


# -------------------------------------------------------------------------
# Path normalisation
# -------------------------------------------------------------------------


class TestNormalizeVaultPath:
    @pytest.mark.parametrize(
        "value, root, expected",
        [
            ("/posts", "/vault", "posts"),
            ("posts/", "/vault", "posts"),
            ("posts", "", "posts"),
            ("/vault/posts", "/vault", "posts"),
            ("/vault/posts/", "/vault/", "posts"),
            ("/vault", "/vault", ""),
            ("/vaultx/posts", "/vault", "vaultx/posts"),
            ("/images/posts/", "/vault", "images/posts"),
        ],
    )
    def test_forms(self, value, root, expected):
        assert normalize_vault_path(value, root) == expected

    def test_windows_separators(self):
        assert (
            normalize_vault_path("C:\\Vault\\posts\\", "C:\\Vault") == "posts"
        )

    def test_normalize_separators(self):
        assert normalize_separators("a\\b/c") == "a/b/c"


class TestNameRules:
    @pytest.mark.parametrize(
        "name", ["_index.md", "index.md", "Index.md", "_INDEX.MD", "_index", "INDEX"]
    )
    def test_reserved_case_insensitive(self, name):
        assert is_reserved_name(name)

    def test_reserved_case_sensitive_mode(self):
        assert is_reserved_name("index.md", case_sensitive=True)
        assert not is_reserved_name("Index.md", case_sensitive=True)

    def test_is_article(self):
        assert is_article("post.md")
        assert not is_article("post.txt")
        assert not is_article(".draft.md")
        assert not is_article("_index.md")

    @pytest.mark.parametrize(
        "name", ["a.png", "b.JPG", "c.jpeg", "d.gif", "e.webp", "f.svg", "g.ico"]
    )
    def test_image_allow_list(self, name):
        assert is_image(name)

    def test_non_image(self):
        assert not is_image("notes.pdf")
        assert not is_image("png")


# -------------------------------------------------------------------------
# Enumeration
# -------------------------------------------------------------------------


class TestTreeEnumerator:
    def test_reserved_files_excluded(self, memory_fs, settings):
        for name in ("_index.md", "Index.md", "post.md"):
            memory_fs.add(f"{VAULT}/posts/{name}", "x")
        enum = TreeEnumerator(memory_fs, settings)
        assert _names(enum.vault_articles()) == ["post.md"]

    def test_vault_recursive_and_hidden_excluded(self, memory_fs, settings):
        memory_fs.add(f"{VAULT}/posts/a.md", "a")
        memory_fs.add(f"{VAULT}/posts/2024/b.md", "b")
        memory_fs.add(f"{VAULT}/posts/.hidden.md", "h")
        memory_fs.add(f"{VAULT}/posts/.trash/c.md", "c")
        memory_fs.add(f"{VAULT}/posts/notes.txt", "n")
        memory_fs.add(f"{VAULT}/other/d.md", "d")
        enum = TreeEnumerator(memory_fs, settings)
        assert _names(enum.vault_articles()) == ["b.md", "a.md"]

    def test_site_listing_is_flat(self, memory_fs, settings):
        memory_fs.add(f"{SITE_POSTS}/a.md", "a")
        memory_fs.add(f"{SITE_POSTS}/_index.md", "i")
        memory_fs.add(f"{SITE_POSTS}/.draft.md", "d")
        memory_fs.add(f"{SITE_POSTS}/series/b.md", "b")
        enum = TreeEnumerator(memory_fs, settings)
        assert _names(enum.site_articles()) == ["a.md"]

    def test_images(self, memory_fs, settings):
        memory_fs.add(f"{VAULT}/images/posts/a.PNG", b"1")
        memory_fs.add(f"{VAULT}/images/posts/nested/b.svg", b"2")
        memory_fs.add(f"{VAULT}/images/posts/c.txt", b"3")
        memory_fs.add(f"{SITE_IMAGES}/d.webp", b"4")
        memory_fs.add(f"{SITE_IMAGES}/.e.png", b"5")
        enum = TreeEnumerator(memory_fs, settings)
        assert _names(enum.vault_images()) == ["a.PNG", "b.svg"]
        assert _names(enum.site_images()) == ["d.webp"]

    def test_absolute_vault_posts_path(self, memory_fs, make_settings):
        memory_fs.add(f"{VAULT}/posts/a.md", "a")
        settings = make_settings(vault_posts_path=f"{VAULT}/posts")
        enum = TreeEnumerator(memory_fs, settings)
        assert enum.vault_posts_dir == Path(VAULT) / "posts"
        assert _names(enum.vault_articles()) == ["a.md"]

    def test_missing_vault_folder_yields_nothing(self, memory_fs, settings):
        enum = TreeEnumerator(memory_fs, settings)
        assert enum.vault_articles() == []
        assert enum.vault_images() == []

    def test_images_not_configured(self, memory_fs, make_settings):
        enum = TreeEnumerator(memory_fs, make_settings(site_images_path=" "))
        assert enum.images_configured is False

    def test_ensure_site_root_missing(self, make_settings):
        enum = TreeEnumerator(MemoryFileSystem(), make_settings())
        with pytest.raises(EnumerationError, match="does not exist"):
            enum.ensure_site_root()

    def test_ensure_site_root_present(self, memory_fs, settings):
        TreeEnumerator(memory_fs, settings).ensure_site_root()
