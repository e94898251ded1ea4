"""
Utility modules for the voice note routing pipeline.

This package contains:
- config: Configuration management with Pydantic
- logger: Structured logging setup
- exceptions: Custom exception classes
- text: Transcript cleaning helpers
"""

from voicenotes.utils.config import get_settings, Settings
from voicenotes.utils.logger import get_logger, setup_logging
from voicenotes.utils.exceptions import (
    VoiceNotesError,
    UpstreamAPIError,
    TranscriptionError,
    ClassificationError,
    StoreError,
    RateLimitError,
    RoutingError,
    ConfigurationError,
)
from voicenotes.utils.text import clean_content, normalize_folder_name

__all__ = [
    "get_settings",
    "Settings",
    "get_logger",
    "setup_logging",
    "VoiceNotesError",
    "UpstreamAPIError",
    "TranscriptionError",
    "ClassificationError",
    "StoreError",
    "RateLimitError",
    "RoutingError",
    "ConfigurationError",
    "clean_content",
    "normalize_folder_name",
]
