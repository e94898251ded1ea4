"""
Text helpers shared by the classifiers and the folder resolver.
"""

import re

# Verbal fillers dropped from persisted content, with an optional trailing comma
FILLER_PATTERN = re.compile(
    r"(?<![\w'])(?:u+h+m*|u+m+|e+r+m+|hm+)(?![\w'])\s*,?",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")


def clean_content(text: str) -> str:
    """
    Remove verbal fillers and collapse whitespace.

    Args:
        text: Raw or model-produced note text

    Returns:
        Cleaned text with no leading or trailing whitespace.
    """
    if not text:
        return ""
    cleaned = FILLER_PATTERN.sub(" ", text)
    cleaned = _WHITESPACE.sub(" ", cleaned)
    cleaned = _SPACE_BEFORE_PUNCT.sub(r"\1", cleaned)
    return cleaned.strip().lstrip(",").strip()


def normalize_folder_name(name: str) -> str:
    """Trim a folder name and collapse inner whitespace, keeping its casing."""
    return _WHITESPACE.sub(" ", name or "").strip()


def folder_key(name: str) -> str:
    """Key used for case-insensitive folder matching."""
    return normalize_folder_name(name).casefold()
