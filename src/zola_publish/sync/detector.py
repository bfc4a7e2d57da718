"""Change detection by full-content comparison.

Both trees are small and local, so the destination is always read in full
and compared byte for byte.  There is no hash cache and no size or mtime
shortcut: a file is ``identical`` only when every byte matches.
"""

from __future__ import annotations

from pathlib import Path

from zola_publish.file_handler import FileSystem
from zola_publish.sync.models import ChangeStatus


def detect_binary_change(
    fs: FileSystem, destination: Path, data: bytes
) -> ChangeStatus:
    """Compare *data* with the file at *destination*.

    Returns:
        ``ABSENT`` if there is no file, ``IDENTICAL`` if its bytes equal
        *data*, ``CHANGED`` otherwise.
    """
    if not fs.is_file(destination):
        return ChangeStatus.ABSENT
    if fs.read_bytes(destination) == data:
        return ChangeStatus.IDENTICAL
    return ChangeStatus.CHANGED


def detect_text_change(
    fs: FileSystem, destination: Path, text: str
) -> ChangeStatus:
    """Compare already-transcoded *text* with the file at *destination*.

    The text is compared in the encoding it will be written with (UTF-8),
    so a ``IDENTICAL`` result guarantees the write would be a no-op.
    """
    return detect_binary_change(fs, destination, text.encode("utf-8"))


def needs_write(status: ChangeStatus) -> bool:
    """Only ``IDENTICAL`` destinations are left alone."""
    return status is not ChangeStatus.IDENTICAL
