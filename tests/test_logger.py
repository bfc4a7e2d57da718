"""Tests for logger.py -- setup_logging() and JsonFormatter.

Strategy: Mock logging.basicConfig to verify setup_logging passes correct args,
since pytest's log capture plugin interferes with actual basicConfig calls.
"""

import json
import logging
import sys
from unittest.mock import patch

from zola_publish.logger import JsonFormatter, setup_logging

# ---------------------------------------------------------------------------
# setup_logging tests
# ---------------------------------------------------------------------------


class TestSetupLogging:
    """Tests for setup_logging()."""

    @patch("zola_publish.logger.logging.basicConfig")
    def test_logs_to_stderr(self, mock_basic):
        setup_logging()

        mock_basic.assert_called_once()
        handlers = mock_basic.call_args[1]["handlers"]
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    @patch("zola_publish.logger.logging.basicConfig")
    def test_default_level_is_info(self, mock_basic, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logging()

        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("zola_publish.logger.logging.basicConfig")
    def test_config_level_used(self, mock_basic, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logging(level="warning")

        assert mock_basic.call_args[1]["level"] == logging.WARNING

    @patch("zola_publish.logger.logging.basicConfig")
    def test_env_beats_config_level(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(level="DEBUG")

        assert mock_basic.call_args[1]["level"] == logging.ERROR

    @patch("zola_publish.logger.logging.basicConfig")
    def test_debug_beats_env(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(debug=True)

        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("zola_publish.logger.logging.basicConfig")
    def test_log_file_adds_handler(self, mock_basic, tmp_path):
        setup_logging(log_file=str(tmp_path / "cli.log"))

        handlers = mock_basic.call_args[1]["handlers"]
        file_handlers = [h for h in handlers if isinstance(h, logging.FileHandler)]
        assert len(handlers) == 2
        assert len(file_handlers) == 1
        for h in file_handlers:
            h.close()

    @patch("zola_publish.logger.logging.basicConfig")
    def test_json_format_uses_json_formatter(self, mock_basic):
        setup_logging(debug_format="json")

        handlers = mock_basic.call_args[1]["handlers"]
        assert any(isinstance(h.formatter, JsonFormatter) for h in handlers)

    @patch("zola_publish.logger.logging.basicConfig")
    def test_encoding_detector_silenced(self, _mock_basic, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logging()

        assert logging.getLogger("charset_normalizer").level == logging.WARNING


# ---------------------------------------------------------------------------
# JsonFormatter tests
# ---------------------------------------------------------------------------


class TestJsonFormatter:
    def test_basic_output(self):
        formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        record = logging.LogRecord(
            name="zola_publish.sync.engine",
            level=logging.INFO,
            pathname="engine.py",
            lineno=1,
            msg="Push complete: %d succeeded",
            args=(3,),
            exc_info=None,
        )

        data = json.loads(formatter.format(record))

        assert "ts" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "zola_publish.sync.engine"
        assert data["msg"] == "Push complete: 3 succeeded"
        assert "exc" not in data

    def test_includes_exception(self):
        formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        try:
            raise ValueError("bad path")
        except ValueError:
            exc_info = sys.exc_info()

        record = logging.LogRecord(
            name="test",
            level=logging.ERROR,
            pathname="test.py",
            lineno=1,
            msg="failed",
            args=(),
            exc_info=exc_info,
        )

        data = json.loads(formatter.format(record))
        assert "ValueError: bad path" in data["exc"]
