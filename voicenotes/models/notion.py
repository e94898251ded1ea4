"""
Data models for the Notion-backed collection store.

These models handle the mapping between notes, todos and folders
and Notion page properties in three separate databases.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from voicenotes.models.records import Folder, Note, NoteType, Todo, utc_now

# Notion rejects rich text objects longer than this
MAX_TEXT_LENGTH = 2000


def _text(content: str) -> list[dict[str, Any]]:
    return [{"text": {"content": content[:MAX_TEXT_LENGTH]}}]


def _plain_text(prop: dict[str, Any]) -> str:
    """Join the plain text of a title or rich_text property."""
    items = prop.get("title") or prop.get("rich_text") or []
    return "".join(
        item.get("plain_text") or item.get("text", {}).get("content", "")
        for item in items
    )


def _created_at(page: dict[str, Any], props: dict[str, Any]) -> datetime:
    start = (props.get("Created", {}).get("date") or {}).get("start")
    raw = start or page.get("created_time")
    if not raw:
        return utc_now()
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


class NotionNoteProperties(BaseModel):
    """Properties for a page in the notes database."""

    content: str
    type: Optional[NoteType] = None
    folder_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    def to_notion_properties(self, include_created: bool = True) -> dict[str, Any]:
        """
        Convert to Notion API property format.

        An unset type or folder is written as an explicit empty value so
        an update never leaves stale data behind.
        """
        properties: dict[str, Any] = {
            "Content": {"title": _text(self.content)},
            "Type": {"select": {"name": self.type.value} if self.type else None},
            "Folder": {"rich_text": _text(self.folder_id) if self.folder_id else []},
        }
        if include_created:
            properties["Created"] = {"date": {"start": self.created_at.isoformat()}}
        return properties

    @staticmethod
    def to_note(page: dict[str, Any]) -> Note:
        """Build a Note from a Notion page."""
        props = page.get("properties", {})
        select = props.get("Type", {}).get("select")
        folder_id = _plain_text(props.get("Folder", {})) or None
        return Note(
            id=page.get("id", ""),
            content=_plain_text(props.get("Content", {})),
            type=NoteType(select["name"]) if select else None,
            folder_id=folder_id,
            created_at=_created_at(page, props),
        )


class NotionTodoProperties(BaseModel):
    """Properties for a page in the todos database."""

    text: str
    done: bool = False
    created_at: datetime = Field(default_factory=utc_now)

    def to_notion_properties(self) -> dict[str, Any]:
        """Convert to Notion API property format."""
        return {
            "Text": {"title": _text(self.text)},
            "Done": {"checkbox": self.done},
            "Created": {"date": {"start": self.created_at.isoformat()}},
        }

    @staticmethod
    def to_todo(page: dict[str, Any]) -> Todo:
        """Build a Todo from a Notion page."""
        props = page.get("properties", {})
        return Todo(
            id=page.get("id", ""),
            text=_plain_text(props.get("Text", {})),
            done=bool(props.get("Done", {}).get("checkbox", False)),
            created_at=_created_at(page, props),
        )


class NotionFolderProperties(BaseModel):
    """Properties for a page in the folders database."""

    name: str
    created_at: datetime = Field(default_factory=utc_now)

    def to_notion_properties(self) -> dict[str, Any]:
        """Convert to Notion API property format."""
        return {
            "Name": {"title": _text(self.name)},
            "Created": {"date": {"start": self.created_at.isoformat()}},
        }

    @staticmethod
    def to_folder(page: dict[str, Any]) -> Folder:
        """Build a Folder from a Notion page."""
        props = page.get("properties", {})
        return Folder(
            id=page.get("id", ""),
            name=_plain_text(props.get("Name", {})),
            created_at=_created_at(page, props),
        )


class NotionDatabaseSchema(BaseModel):
    """
    Expected Notion database schemas for validation.

    Used to verify the three target databases have the required properties.
    """

    notes: dict[str, str] = Field(
        default={
            "Content": "title",
            "Type": "select",
            "Folder": "rich_text",
            "Created": "date",
        }
    )
    todos: dict[str, str] = Field(
        default={
            "Text": "title",
            "Done": "checkbox",
            "Created": "date",
        }
    )
    folders: dict[str, str] = Field(
        default={
            "Name": "title",
            "Created": "date",
        }
    )

    def validate_database(
        self,
        collection: str,
        database_properties: dict[str, Any],
    ) -> tuple[bool, list[str]]:
        """
        Validate a Notion database has the properties a collection needs.

        Args:
            collection: notes, todos or folders
            database_properties: Properties from Notion databases.retrieve()

        Returns:
            Tuple of (is_valid, list_of_missing_properties)
        """
        required: dict[str, str] = getattr(self, collection)
        missing = []

        for prop_name, prop_type in required.items():
            if prop_name not in database_properties:
                missing.append(f"{prop_name} ({prop_type})")
            elif database_properties[prop_name].get("type") != prop_type:
                actual_type = database_properties[prop_name].get("type")
                missing.append(
                    f"{prop_name} (expected {prop_type}, got {actual_type})"
                )

        return len(missing) == 0, missing
