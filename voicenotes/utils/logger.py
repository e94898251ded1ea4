"""
Logging for the voice note routing pipeline.

Every component logs under the ``voicenotes`` logger. Console output goes
to stderr so command output on stdout stays machine-readable. With a log
directory configured, a run log and an errors-only log are written too.
Records logged through a contextual logger carry the placeholder id of the
run they belong to, in both the text and the JSON format.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

ROOT_LOGGER = "voicenotes"
RUN_LOG = "voicenotes.log"
ERROR_LOG = "errors.log"

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(placeholder_id)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else arrived through ``extra``
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class ContextFormatter(logging.Formatter):
    """Text formatter with a placeholder id column ("-" outside a run)."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "placeholder_id"):
            record.placeholder_id = "-"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, including any ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        data.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS
        )
        return json.dumps(data, default=str)


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    json_format: bool = False,
    console_output: bool = True,
) -> None:
    """
    Configure the ``voicenotes`` logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Log level name
        log_dir: Directory for voicenotes.log and errors.log; None disables files
        json_format: Emit JSON lines instead of text
        console_output: Log to stderr
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter: logging.Formatter = (
        JSONFormatter() if json_format else ContextFormatter(TEXT_FORMAT, datefmt=DATE_FORMAT)
    )

    handlers: list[logging.Handler] = []
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / RUN_LOG, encoding="utf-8"))

        error_handler = logging.FileHandler(log_dir / ERROR_LOG, encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Get the package logger, or the child logger for a component."""
    if component is None:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


class ContextAdapter(logging.LoggerAdapter):
    """Attaches run context to every record as ``extra`` fields."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_contextual_logger(component: str, **context: Any) -> ContextAdapter:
    """
    Get a component logger that tags records with context.

    Example:
        log = get_contextual_logger("pipeline", placeholder_id="n_123")
        log.info("Transcribing")  # record.placeholder_id == "n_123"
    """
    return ContextAdapter(get_logger(component), context)


def setup_logging_from_settings() -> None:
    """Configure logging from application settings."""
    # Imported lazily: config.py is imported by modules that import this one.
    from voicenotes.utils.config import get_settings

    settings = get_settings()
    setup_logging(
        level=settings.logging.level.value,
        log_dir=settings.logging.dir,
        json_format=settings.logging.json_format,
    )
