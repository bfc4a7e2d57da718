"""Tests for zola_publish.sync.detector."""

from pathlib import Path

from zola_publish.sync.detector import (
    detect_binary_change,
    detect_text_change,
    needs_write,
)
from zola_publish.sync.models import ChangeStatus

DEST = Path("/site/content/posts/a.md")


class TestDetectChange:
    def test_absent(self, memory_fs):
        assert detect_text_change(memory_fs, DEST, "x") is ChangeStatus.ABSENT

    def test_identical_text(self, memory_fs):
        memory_fs.add(DEST, "héllo\n")
        assert detect_text_change(memory_fs, DEST, "héllo\n") is ChangeStatus.IDENTICAL

    def test_changed_text(self, memory_fs):
        memory_fs.add(DEST, "hello\n")
        assert detect_text_change(memory_fs, DEST, "hello") is ChangeStatus.CHANGED

    def test_line_endings_count_as_change(self, memory_fs):
        memory_fs.add(DEST, "a\r\nb\r\n")
        assert detect_text_change(memory_fs, DEST, "a\nb\n") is ChangeStatus.CHANGED

    def test_same_size_different_bytes(self, memory_fs):
        memory_fs.add(DEST, b"\x00\x01\x02")
        assert (
            detect_binary_change(memory_fs, DEST, b"\x00\x01\x03")
            is ChangeStatus.CHANGED
        )

    def test_directory_is_absent(self, memory_fs):
        memory_fs.mkdir(DEST)
        assert detect_binary_change(memory_fs, DEST, b"") is ChangeStatus.ABSENT


class TestNeedsWrite:
    def test_only_identical_skips(self):
        assert needs_write(ChangeStatus.ABSENT)
        assert needs_write(ChangeStatus.CHANGED)
        assert not needs_write(ChangeStatus.IDENTICAL)
