"""
Table-backed collection stores.

TableStore implements every operation on top of two primitives,
_read_table and _write_table. InMemoryStore keeps tables in a dict;
JsonFileStore (see json_file.py) keeps one JSON file per collection.
"""

import threading
from typing import Any, Optional
from uuid import uuid4

from voicenotes.models.records import (
    PLACEHOLDER_CONTENT,
    Folder,
    Note,
    NoteFinalization,
    Todo,
    utc_now,
)
from voicenotes.store.base import CollectionStore
from voicenotes.utils.exceptions import StoreError
from voicenotes.utils.logger import get_logger

logger = get_logger("store")

NOTES = "notes"
TODOS = "todos"
FOLDERS = "folders"


class TableStore(CollectionStore):
    """
    Collection store over whole-table reads and writes.

    A lock serialises each read-modify-write so single-record operations
    stay atomic within one process.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def _read_table(self, name: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    def _write_table(self, name: str, items: list[dict[str, Any]]) -> None:
        raise NotImplementedError

    def _insert(self, name: str, record: dict[str, Any]) -> None:
        with self._lock:
            items = self._read_table(name)
            items.append(record)
            self._write_table(name, items)

    def _find(self, items: list[dict[str, Any]], name: str, record_id: str) -> dict[str, Any]:
        for item in items:
            if item.get("id") == record_id:
                return item
        raise StoreError(
            f"Record {record_id} not found in {name}",
            collection=name,
            record_id=record_id,
            status_code=404,
        )

    def _remove(self, name: str, record_id: str) -> None:
        with self._lock:
            items = self._read_table(name)
            self._find(items, name, record_id)
            self._write_table(name, [i for i in items if i.get("id") != record_id])

    @staticmethod
    def _newest_first(records: list[Any]) -> list[Any]:
        # Records sharing a timestamp come back in reverse insertion order
        return sorted(records, key=lambda r: r.created_at)[::-1]

    # Folders

    def list_folders(self) -> list[Folder]:
        folders = [Folder.model_validate(item) for item in self._read_table(FOLDERS)]
        return self._newest_first(folders)

    def create_folder(self, name: str) -> str:
        folder = Folder(id=uuid4().hex, name=name)
        self._insert(FOLDERS, folder.model_dump(mode="json"))
        logger.info(f"Created folder {folder.id} ({name!r})")
        return folder.id

    # Todos

    def create_todo(self, text: str) -> str:
        todo = Todo(id=uuid4().hex, text=text)
        self._insert(TODOS, todo.model_dump(mode="json"))
        logger.info(f"Created todo {todo.id}")
        return todo.id

    def list_todos(self) -> list[Todo]:
        todos = [Todo.model_validate(item) for item in self._read_table(TODOS)]
        return self._newest_first(todos)

    def toggle_todo(self, todo_id: str) -> Todo:
        with self._lock:
            items = self._read_table(TODOS)
            item = self._find(items, TODOS, todo_id)
            item["done"] = not item.get("done", False)
            self._write_table(TODOS, items)
            return Todo.model_validate(item)

    def delete_todo(self, todo_id: str) -> None:
        self._remove(TODOS, todo_id)
        logger.info(f"Deleted todo {todo_id}")

    # Notes and placeholders

    def create_placeholder(self) -> str:
        note = Note(id=uuid4().hex, content=PLACEHOLDER_CONTENT, created_at=utc_now())
        self._insert(NOTES, note.model_dump(mode="json"))
        logger.debug(f"Created placeholder {note.id}")
        return note.id

    def get_note(self, note_id: str) -> Note:
        return Note.model_validate(self._find(self._read_table(NOTES), NOTES, note_id))

    def list_notes(self, folder_id: Optional[str] = None) -> list[Note]:
        notes = [Note.model_validate(item) for item in self._read_table(NOTES)]
        if folder_id is not None:
            notes = [note for note in notes if note.folder_id == folder_id]
        return self._newest_first(notes)

    def finalize_note(self, note_id: str, finalization: NoteFinalization) -> None:
        with self._lock:
            items = self._read_table(NOTES)
            item = self._find_pending(items, note_id)
            item.update(
                content=finalization.content,
                type=finalization.type.value,
                folder_id=finalization.folder_id,
            )
            self._write_table(NOTES, items)
        logger.info(f"Finalized note {note_id} (folder={finalization.folder_id})")

    def delete_note(self, note_id: str) -> None:
        self._remove(NOTES, note_id)
        logger.info(f"Deleted note {note_id}")

    def delete_placeholder(self, note_id: str) -> None:
        with self._lock:
            items = self._read_table(NOTES)
            self._find_pending(items, note_id)
            self._write_table(NOTES, [i for i in items if i.get("id") != note_id])
        logger.info(f"Deleted placeholder {note_id}")

    def _find_pending(self, items: list[dict[str, Any]], note_id: str) -> dict[str, Any]:
        item = self._find(items, NOTES, note_id)
        if item.get("type") is not None:
            raise StoreError(
                f"Note {note_id} is already finalized",
                collection=NOTES,
                record_id=note_id,
                error_code="conflict",
            )
        return item


class InMemoryStore(TableStore):
    """Process-local store, used by tests and the memory backend."""

    def __init__(self) -> None:
        super().__init__()
        self._tables: dict[str, list[dict[str, Any]]] = {
            NOTES: [],
            TODOS: [],
            FOLDERS: [],
        }

    def _read_table(self, name: str) -> list[dict[str, Any]]:
        return [dict(item) for item in self._tables[name]]

    def _write_table(self, name: str, items: list[dict[str, Any]]) -> None:
        self._tables[name] = [dict(item) for item in items]
