"""File handler module: filesystem capability interface and encoding-aware I/O.

The sync engine, enumerator and catalog never touch ``pathlib`` directly;
they go through a ``FileSystem`` so the same code runs against the real
disk (``LocalFileSystem``) and against an in-memory fake in tests.
"""

from pathlib import Path
from typing import Protocol

from charset_normalizer import from_bytes

# =============================================================================
# Capability interface
# =============================================================================


class FileSystem(Protocol):
    """Operations the sync core needs from a file tree.

    All paths are absolute.  ``write_*`` creates parent directories and
    replaces the whole file.
    """

    def exists(self, path: Path) -> bool: ...  # pragma: no cover

    def is_dir(self, path: Path) -> bool: ...  # pragma: no cover

    def is_file(self, path: Path) -> bool: ...  # pragma: no cover

    def list_dir(self, path: Path) -> list[str]: ...  # pragma: no cover

    def walk_files(self, path: Path) -> list[Path]: ...  # pragma: no cover

    def read_text(self, path: Path) -> str: ...  # pragma: no cover

    def read_bytes(self, path: Path) -> bytes: ...  # pragma: no cover

    def write_text(self, path: Path, content: str) -> int: ...  # pragma: no cover

    def write_bytes(self, path: Path, data: bytes) -> int: ...  # pragma: no cover


# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    try:
        return (raw.decode("utf-8"), "utf-8")
    except UnicodeDecodeError:
        pass

    result = from_bytes(raw).best()
    if result is None:
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def write_file(
    path: Path, content: str, encoding: str = "utf-8"
) -> int:
    """Write content to a file, creating parent directories as needed.

    Args:
        path: Path to the output file.
        content: String content to write.
        encoding: Encoding to use (default: utf-8).

    Returns:
        Number of bytes written.
    """
    return write_binary(path, content.encode(encoding))


def write_binary(path: Path, data: bytes) -> int:
    """Write bytes to a file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return len(data)


# =============================================================================
# Real filesystem
# =============================================================================


class LocalFileSystem:
    """``FileSystem`` backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def list_dir(self, path: Path) -> list[str]:
        return sorted(entry.name for entry in Path(path).iterdir())

    def walk_files(self, path: Path) -> list[Path]:
        root = Path(path)
        if not root.is_dir():
            return []
        return sorted(p for p in root.rglob("*") if p.is_file())

    def read_text(self, path: Path) -> str:
        content, _ = read_file_with_encoding(Path(path))
        return content

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def write_text(self, path: Path, content: str) -> int:
        return write_file(Path(path), content)

    def write_bytes(self, path: Path, data: bytes) -> int:
        return write_binary(Path(path), data)
