"""
Data models for classification decisions.

A Decision is the structured output of the classification engine and
the only input the router needs besides the placeholder id.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from voicenotes.utils.text import normalize_folder_name


class NoteKind(str, Enum):
    """Whether an utterance is a task or a note."""

    NOTE = "note"
    TODO = "todo"


class RoutingAction(str, Enum):
    """How a note should be organised."""

    CREATE_FOLDER = "create_folder"
    CATEGORIZE_NOTE = "categorize_note"
    NONE = "none"

    @property
    def needs_folder(self) -> bool:
        """Check if this action targets a folder."""
        return self in (RoutingAction.CREATE_FOLDER, RoutingAction.CATEGORIZE_NOTE)


class Decision(BaseModel):
    """
    Structured classification of a single transcript.

    Field aliases match the wire schema sent to the decision capability,
    so a tool-call payload validates directly into this model. Unknown
    keys are rejected.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        frozen=True,
    )

    kind: NoteKind = Field(description="Task or note")
    routing_action: RoutingAction = Field(
        default=RoutingAction.NONE,
        alias="routingAction",
        description="Folder routing for notes; ignored for todos",
    )
    folder_name: Optional[str] = Field(
        default=None,
        alias="folderName",
        description="Target folder for create_folder / categorize_note",
    )
    content: str = Field(description="Cleaned canonical text to persist")

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        """Strip leading/trailing whitespace from content."""
        return v.strip()

    @field_validator("folder_name")
    @classmethod
    def normalize_folder(cls, v: Optional[str]) -> Optional[str]:
        """Trim folder names; blank names count as absent."""
        if v is None:
            return None
        return normalize_folder_name(v) or None

    @model_validator(mode="after")
    def check_folder_requirement(self) -> "Decision":
        """Notes routed to a folder must name it."""
        if (
            self.kind == NoteKind.NOTE
            and self.routing_action.needs_folder
            and not self.folder_name
        ):
            raise ValueError(
                f"folderName is required when routingAction is {self.routing_action.value}"
            )
        return self

    @property
    def is_todo(self) -> bool:
        """Check if the decision routes to the todo collection."""
        return self.kind == NoteKind.TODO

    @property
    def target_folder(self) -> Optional[str]:
        """Folder the router should resolve, if any."""
        if self.is_todo or not self.routing_action.needs_folder:
            return None
        return self.folder_name

    @classmethod
    def empty(cls) -> "Decision":
        """Decision for an empty transcript: a blank, unfiled note."""
        return cls(kind=NoteKind.NOTE, routing_action=RoutingAction.NONE, content="")

    def to_payload(self) -> dict[str, Any]:
        """Serialize using the wire schema field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
