"""
Tests for the table-backed collection stores.
"""

import json
from pathlib import Path

import pytest

from voicenotes.models.records import PLACEHOLDER_CONTENT, NoteFinalization
from voicenotes.store import InMemoryStore, JsonFileStore, build_store
from voicenotes.store.memory import TableStore
from voicenotes.utils.config import get_settings
from voicenotes.utils.exceptions import StoreError


@pytest.fixture(params=["memory", "json"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> TableStore:
    """Run each test against both table-backed stores."""
    if request.param == "memory":
        return InMemoryStore()
    return JsonFileStore(tmp_path / "data")


class TestTableStore:
    """Behaviour shared by the memory and JSON stores."""

    def test_placeholder_is_pending(self, store: TableStore) -> None:
        """Test a new placeholder holds the sentinel content."""
        note_id = store.create_placeholder()

        note = store.get_note(note_id)
        assert note.content == PLACEHOLDER_CONTENT
        assert note.is_pending
        assert [n.id for n in store.list_pending()] == [note_id]

    def test_finalize_once(self, store: TableStore) -> None:
        """Test a placeholder is finalized once and never again."""
        note_id = store.create_placeholder()
        store.finalize_note(note_id, NoteFinalization(content="hello", folder_id="f1"))

        note = store.get_note(note_id)
        assert note.content == "hello"
        assert note.folder_id == "f1"
        assert not note.is_pending

        with pytest.raises(StoreError) as exc_info:
            store.finalize_note(note_id, NoteFinalization(content="again"))
        assert exc_info.value.error_code == "conflict"
        assert store.get_note(note_id).content == "hello"

    def test_unknown_ids(self, store: TableStore) -> None:
        """Test operations on unknown ids raise not-found errors."""
        with pytest.raises(StoreError) as exc_info:
            store.get_note("missing")
        assert exc_info.value.is_not_found

        with pytest.raises(StoreError):
            store.finalize_note("missing", NoteFinalization(content="x"))
        with pytest.raises(StoreError):
            store.delete_note("missing")
        with pytest.raises(StoreError):
            store.toggle_todo("missing")
        with pytest.raises(StoreError):
            store.delete_todo("missing")

    def test_todos(self, store: TableStore) -> None:
        """Test creating, toggling and deleting todos."""
        first = store.create_todo("buy milk")
        second = store.create_todo("call mom")

        assert [t.id for t in store.list_todos()] == [second, first]
        assert store.toggle_todo(first).done is True
        assert store.toggle_todo(first).done is False

        store.delete_todo(first)
        assert [t.id for t in store.list_todos()] == [second]

    def test_folders_newest_first(self, store: TableStore) -> None:
        """Test folders keep their casing and list newest first."""
        older = store.create_folder("Groceries")
        newer = store.create_folder("Book Ideas")

        folders = store.list_folders()
        assert [f.id for f in folders] == [newer, older]
        assert folders[1].name == "Groceries"

    def test_list_notes_by_folder(self, store: TableStore) -> None:
        """Test filtering notes by folder."""
        in_folder = store.create_placeholder()
        unfiled = store.create_placeholder()
        store.finalize_note(in_folder, NoteFinalization(content="eggs", folder_id="f1"))
        store.finalize_note(unfiled, NoteFinalization(content="sky"))

        assert [n.id for n in store.list_notes("f1")] == [in_folder]
        assert {n.id for n in store.list_notes()} == {in_folder, unfiled}

    def test_delete_note(self, store: TableStore) -> None:
        """Test deleting a placeholder."""
        note_id = store.create_placeholder()
        store.delete_note(note_id)

        assert store.list_notes() == []

    def test_delete_placeholder_only_when_pending(self, store: TableStore) -> None:
        """Test a finalized note is never deleted as a placeholder."""
        pending = store.create_placeholder()
        final = store.create_placeholder()
        store.finalize_note(final, NoteFinalization(content="keep me"))

        store.delete_placeholder(pending)
        with pytest.raises(StoreError) as exc_info:
            store.delete_placeholder(final)

        assert exc_info.value.error_code == "conflict"
        assert [n.id for n in store.list_notes()] == [final]
        with pytest.raises(StoreError) as exc_info:
            store.delete_placeholder("missing")
        assert exc_info.value.is_not_found


class TestJsonFileStore:
    """JSON-specific behaviour."""

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        """Test data survives reopening the store."""
        todo_id = JsonFileStore(tmp_path).create_todo("buy milk")

        reopened = JsonFileStore(tmp_path)

        assert [t.id for t in reopened.list_todos()] == [todo_id]
        data = json.loads((tmp_path / "todos.json").read_text(encoding="utf-8"))
        assert data[0]["text"] == "buy milk"
        assert data[0]["done"] is False

    def test_missing_directory_reads_empty(self, tmp_path: Path) -> None:
        """Test an unused data directory behaves as empty."""
        store = JsonFileStore(tmp_path / "nowhere")
        assert store.list_folders() == []
        assert not (tmp_path / "nowhere").exists()

    def test_corrupt_file(self, tmp_path: Path) -> None:
        """Test unreadable tables raise StoreError."""
        (tmp_path / "folders.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError) as exc_info:
            JsonFileStore(tmp_path).list_folders()

        assert exc_info.value.collection == "folders"


class TestBuildStore:
    """Store selection from settings."""

    def test_memory_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test selecting the memory store."""
        monkeypatch.setenv("STORE_BACKEND", "memory")
        assert isinstance(build_store(get_settings()), InMemoryStore)

    def test_json_backend(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test selecting the JSON store and its data directory."""
        monkeypatch.setenv("STORE_BACKEND", "json")
        monkeypatch.setenv("STORE_DATA_DIR", str(tmp_path))

        store = build_store(get_settings())

        assert isinstance(store, JsonFileStore)
        assert store.base_dir == tmp_path
