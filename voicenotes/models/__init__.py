"""
Data models for the voice note routing pipeline.

This package contains Pydantic models for:
- decision: Classification output
- records: Notes, todos and folders held by the collection store
- notion: Notion page property mappings
"""

from voicenotes.models.decision import (
    Decision,
    NoteKind,
    RoutingAction,
)
from voicenotes.models.records import (
    PLACEHOLDER_CONTENT,
    Folder,
    Note,
    NoteFinalization,
    NoteType,
    RoutingOutcome,
    Todo,
)

__all__ = [
    # Decision models
    "Decision",
    "NoteKind",
    "RoutingAction",
    # Record models
    "PLACEHOLDER_CONTENT",
    "Folder",
    "Note",
    "NoteFinalization",
    "NoteType",
    "RoutingOutcome",
    "Todo",
]
