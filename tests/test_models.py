"""
Tests for decision and record models.
"""

import pytest
from pydantic import ValidationError

from voicenotes.models.decision import Decision, NoteKind, RoutingAction
from voicenotes.models.notion import (
    NotionDatabaseSchema,
    NotionFolderProperties,
    NotionNoteProperties,
    NotionTodoProperties,
)
from voicenotes.models.records import PLACEHOLDER_CONTENT, Note, NoteType


class TestDecision:
    """Test suite for the Decision model."""

    def test_validate_wire_payload(self) -> None:
        """Test that a tool-call payload validates through the aliases."""
        decision = Decision.model_validate(
            {
                "kind": "note",
                "routingAction": "create_folder",
                "folderName": "Groceries",
                "content": "I need eggs",
            }
        )

        assert decision.kind == NoteKind.NOTE
        assert decision.routing_action == RoutingAction.CREATE_FOLDER
        assert decision.folder_name == "Groceries"
        assert decision.target_folder == "Groceries"

    def test_rejects_unknown_kind(self) -> None:
        """Test that enum values outside the schema are rejected."""
        with pytest.raises(ValidationError):
            Decision.model_validate({"kind": "reminder", "routingAction": "none", "content": "x"})

    def test_rejects_unknown_action(self) -> None:
        """Test that unknown routing actions are rejected."""
        with pytest.raises(ValidationError):
            Decision.model_validate({"kind": "note", "routingAction": "archive", "content": "x"})

    def test_rejects_extra_keys(self) -> None:
        """Test that keys outside the schema are rejected."""
        with pytest.raises(ValidationError):
            Decision.model_validate(
                {"kind": "note", "routingAction": "none", "content": "x", "priority": "high"}
            )

    def test_rejects_missing_content(self) -> None:
        """Test that content is mandatory."""
        with pytest.raises(ValidationError):
            Decision.model_validate({"kind": "note", "routingAction": "none"})

    @pytest.mark.parametrize("action", ["create_folder", "categorize_note"])
    def test_folder_action_requires_name(self, action: str) -> None:
        """Test that folder actions on notes need a folder name."""
        with pytest.raises(ValidationError):
            Decision.model_validate({"kind": "note", "routingAction": action, "content": "x"})

    def test_blank_folder_name_counts_as_missing(self) -> None:
        """Test that a whitespace-only folder name is rejected for folder actions."""
        with pytest.raises(ValidationError):
            Decision.model_validate(
                {
                    "kind": "note",
                    "routingAction": "categorize_note",
                    "folderName": "   ",
                    "content": "x",
                }
            )

    def test_none_action_without_folder(self) -> None:
        """Test that a missing folder name is fine when routingAction is none."""
        decision = Decision.model_validate(
            {"kind": "note", "routingAction": "none", "content": "the sky is blue"}
        )
        assert decision.folder_name is None
        assert decision.target_folder is None

    def test_todo_ignores_routing(self) -> None:
        """Test that a todo never targets a folder."""
        decision = Decision(
            kind=NoteKind.TODO,
            routing_action=RoutingAction.CATEGORIZE_NOTE,
            content="buy spinach",
        )
        assert decision.is_todo
        assert decision.target_folder is None

    def test_content_and_folder_trimmed(self) -> None:
        """Test that content and folder names are trimmed."""
        decision = Decision(
            kind=NoteKind.NOTE,
            routing_action=RoutingAction.CATEGORIZE_NOTE,
            folder_name="  Book  Ideas ",
            content="  a story about a lighthouse  ",
        )
        assert decision.content == "a story about a lighthouse"
        assert decision.folder_name == "Book Ideas"

    def test_empty(self) -> None:
        """Test the empty-transcript decision."""
        decision = Decision.empty()
        assert decision.kind == NoteKind.NOTE
        assert decision.routing_action == RoutingAction.NONE
        assert decision.content == ""

    def test_to_payload_uses_wire_names(self) -> None:
        """Test serialization with schema field names."""
        payload = Decision(kind=NoteKind.TODO, content="buy milk").to_payload()
        assert payload == {"kind": "todo", "routingAction": "none", "content": "buy milk"}


class TestNote:
    """Test suite for note records."""

    def test_new_note_is_pending(self) -> None:
        """Test that a note without a type is a placeholder."""
        note = Note(id="n1")
        assert note.is_pending
        assert note.content == PLACEHOLDER_CONTENT
        assert note.folder_id is None

    def test_typed_note_is_not_pending(self) -> None:
        """Test that a committed note is no longer pending."""
        note = Note(id="n1", content="hello", type=NoteType.NOTE)
        assert not note.is_pending


class TestNotionProperties:
    """Test suite for Notion property mapping."""

    def test_note_round_trip(self) -> None:
        """Test mapping a note to properties and back from a page."""
        props = NotionNoteProperties(
            content="I need eggs", type=NoteType.NOTE, folder_id="folder_1"
        ).to_notion_properties()
        page = {
            "id": "page_1",
            "created_time": "2026-01-06T10:00:00.000Z",
            "properties": props,
        }

        note = NotionNoteProperties.to_note(page)

        assert note.id == "page_1"
        assert note.content == "I need eggs"
        assert note.type == NoteType.NOTE
        assert note.folder_id == "folder_1"

    def test_placeholder_page(self) -> None:
        """Test that a page without a type maps to a pending note."""
        props = NotionNoteProperties(content=PLACEHOLDER_CONTENT).to_notion_properties()
        assert props["Type"] == {"select": None}
        assert props["Folder"] == {"rich_text": []}

        note = NotionNoteProperties.to_note({"id": "p", "properties": props})
        assert note.is_pending

    def test_finalize_properties_skip_created(self) -> None:
        """Test that updates leave the creation date alone."""
        props = NotionNoteProperties(content="x", type=NoteType.NOTE).to_notion_properties(
            include_created=False
        )
        assert "Created" not in props

    def test_long_text_truncated(self) -> None:
        """Test that text is cut to the Notion rich text limit."""
        props = NotionTodoProperties(text="a" * 3000).to_notion_properties()
        assert len(props["Text"]["title"][0]["text"]["content"]) == 2000

    def test_todo_and_folder_pages(self) -> None:
        """Test mapping todo and folder pages."""
        todo_page = {
            "id": "t1",
            "properties": NotionTodoProperties(text="buy milk", done=True).to_notion_properties(),
        }
        folder_page = {
            "id": "f1",
            "properties": NotionFolderProperties(name="Groceries").to_notion_properties(),
        }

        todo = NotionTodoProperties.to_todo(todo_page)
        folder = NotionFolderProperties.to_folder(folder_page)

        assert todo.text == "buy milk"
        assert todo.done is True
        assert folder.name == "Groceries"

    def test_validate_database(self) -> None:
        """Test schema validation reports missing properties."""
        schema = NotionDatabaseSchema()
        valid, missing = schema.validate_database(
            "folders", {"Name": {"type": "title"}}
        )
        assert not valid
        assert any("Created" in gap for gap in missing)
