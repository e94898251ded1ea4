"""
Tests for logging setup.
"""

import json
import logging
from pathlib import Path
from typing import Iterator

import pytest

from voicenotes.utils.logger import (
    TEXT_FORMAT,
    ContextFormatter,
    JSONFormatter,
    get_contextual_logger,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Remove handlers installed by setup_logging."""
    yield
    logger = logging.getLogger("voicenotes")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True


def make_record(**extra) -> logging.LogRecord:
    """Build a routing record with optional extra fields."""
    record = logging.LogRecord(
        "voicenotes.routing", logging.INFO, __file__, 1, "Routed", None, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogger:
    """Test suite for logging helpers."""

    def test_component_names(self) -> None:
        """Test component loggers live under the package logger."""
        assert get_logger().name == "voicenotes"
        assert get_logger("routing").name == "voicenotes.routing"
        assert get_logger("openai").name == "voicenotes.openai"

    def test_contextual_logger_adds_extra(self) -> None:
        """Test context travels as extra fields without touching the message."""
        adapter = get_contextual_logger("pipeline", placeholder_id="n_1")

        msg, kwargs = adapter.process("Transcribing", {"extra": {"stage": "x"}})

        assert msg == "Transcribing"
        assert kwargs["extra"] == {"placeholder_id": "n_1", "stage": "x"}

    def test_text_format_shows_placeholder(self) -> None:
        """Test the text format has a placeholder column."""
        formatter = ContextFormatter(TEXT_FORMAT)

        assert "| n_1 | Routed" in formatter.format(make_record(placeholder_id="n_1"))
        assert "| - | Routed" in formatter.format(make_record())

    def test_json_formatter_includes_extra(self) -> None:
        """Test extra fields are serialized."""
        data = json.loads(JSONFormatter().format(make_record(placeholder_id="n_1")))

        assert data["message"] == "Routed"
        assert data["level"] == "INFO"
        assert data["logger"] == "voicenotes.routing"
        assert data["placeholder_id"] == "n_1"
        assert "lineno" not in data

    def test_file_logging(self, tmp_path: Path) -> None:
        """Test the run log gets everything and the error log only errors."""
        setup_logging(level="INFO", log_dir=tmp_path, console_output=False)

        get_contextual_logger("pipeline", placeholder_id="n_7").info("pipeline line")
        get_logger("routing").error("routing failure")
        for handler in logging.getLogger("voicenotes").handlers:
            handler.flush()

        run_log = (tmp_path / "voicenotes.log").read_text()
        errors = (tmp_path / "errors.log").read_text()
        assert "n_7 | pipeline line" in run_log
        assert "routing failure" in run_log
        assert "routing failure" in errors
        assert "pipeline line" not in errors

    def test_setup_replaces_handlers(self, tmp_path: Path) -> None:
        """Test repeated setup does not stack handlers."""
        setup_logging(level="DEBUG", log_dir=tmp_path, json_format=True)
        setup_logging(level="WARNING", console_output=True)

        logger = logging.getLogger("voicenotes")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert not logger.propagate
