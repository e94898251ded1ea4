"""
Data models for persisted records.

These models represent what the collection store holds:
notes (including pending placeholders), todos and folders.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from voicenotes.models.decision import NoteKind

# Sentinel content held by a placeholder until routing completes
PLACEHOLDER_CONTENT = "Processing…"


def utc_now() -> datetime:
    """Timezone-aware creation timestamp."""
    return datetime.now(timezone.utc)


class NoteType(str, Enum):
    """Committed type of a finalized note."""

    NOTE = "note"


class Folder(BaseModel):
    """An organizational folder for notes."""

    id: str = Field(description="Store-assigned identifier")
    name: str = Field(description="Display name with the creator's casing")
    created_at: datetime = Field(default_factory=utc_now)


class Note(BaseModel):
    """
    A note record.

    A note without a committed type is a placeholder that is still
    waiting for its pipeline run to finish.
    """

    id: str = Field(description="Store-assigned identifier")
    content: str = Field(default=PLACEHOLDER_CONTENT)
    type: Optional[NoteType] = Field(
        default=None,
        description="None while the note is a pending placeholder",
    )
    folder_id: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_pending(self) -> bool:
        """Check if the note is still a placeholder."""
        return self.type is None


class Todo(BaseModel):
    """A todo item, always created fresh."""

    id: str = Field(description="Store-assigned identifier")
    text: str
    done: bool = False
    created_at: datetime = Field(default_factory=utc_now)


class NoteFinalization(BaseModel):
    """The single terminal update applied to a placeholder."""

    content: str
    type: NoteType = NoteType.NOTE
    folder_id: Optional[str] = None


class RoutingOutcome(BaseModel):
    """
    What a routing call committed.

    Exactly one of note_id / todo_id is set.
    """

    placeholder_id: str
    kind: NoteKind
    note_id: Optional[str] = None
    todo_id: Optional[str] = None
    folder_id: Optional[str] = None
    folder_created: bool = False
