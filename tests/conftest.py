"""Shared pytest fixtures for zola-publish tests."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from zola_publish.config import Settings

load_dotenv()

VAULT = "/vault"
SITE_POSTS = "/site/content/posts"
SITE_IMAGES = "/site/static/images"


class MemoryFileSystem:
    """In-memory ``FileSystem`` with failure injection.

    Paths listed in ``fail_writes`` / ``fail_reads`` raise ``PermissionError``.
    Every successful write is recorded in ``writes``.
    """

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = set()
        self.fail_writes: set[str] = set()
        self.fail_reads: set[str] = set()
        self.writes: list[str] = []

    # -- setup helpers ------------------------------------------------

    def mkdir(self, path) -> None:
        p = Path(path)
        self.dirs.add(str(p))
        for parent in p.parents:
            self.dirs.add(str(parent))

    def add(self, path, content) -> Path:
        p = Path(path)
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[str(p)] = content
        self.mkdir(p.parent)
        return p

    def text(self, path) -> str:
        return self.files[str(Path(path))].decode("utf-8")

    # -- FileSystem ---------------------------------------------------

    def exists(self, path) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def is_dir(self, path) -> bool:
        return str(Path(path)) in self.dirs

    def is_file(self, path) -> bool:
        return str(Path(path)) in self.files

    def list_dir(self, path) -> list[str]:
        prefix = str(Path(path)).rstrip("/") + "/"
        names = set()
        for key in list(self.files) + list(self.dirs):
            if key.startswith(prefix):
                names.add(key[len(prefix):].split("/")[0])
        return sorted(names)

    def walk_files(self, path) -> list[Path]:
        prefix = str(Path(path)).rstrip("/") + "/"
        return sorted(Path(k) for k in self.files if k.startswith(prefix))

    def read_bytes(self, path) -> bytes:
        key = str(Path(path))
        if key in self.fail_reads:
            raise PermissionError(f"Permission denied: '{key}'")
        try:
            return self.files[key]
        except KeyError:
            raise FileNotFoundError(f"No such file: '{key}'") from None

    def read_text(self, path) -> str:
        return self.read_bytes(path).decode("utf-8")

    def write_bytes(self, path, data: bytes) -> int:
        key = str(Path(path))
        if key in self.fail_writes:
            raise PermissionError(f"Permission denied: '{key}'")
        self.add(key, data)
        self.writes.append(key)
        return len(data)

    def write_text(self, path, content: str) -> int:
        return self.write_bytes(path, content.encode("utf-8"))


@pytest.fixture
def memory_fs():
    """Empty in-memory filesystem with the site posts folder present."""
    fs = MemoryFileSystem()
    fs.mkdir(SITE_POSTS)
    return fs


@pytest.fixture
def make_settings():
    """Factory fixture for ``Settings`` pointing at the in-memory layout."""

    def _create(**overrides):
        values = {
            "vault_root": VAULT,
            "vault_posts_path": "/posts",
            "site_posts_path": SITE_POSTS,
            "vault_images_path": "/images/posts/",
            "site_images_path": SITE_IMAGES,
        }
        values.update(overrides)
        return Settings(**values)

    return _create


@pytest.fixture
def settings(make_settings):
    return make_settings()
