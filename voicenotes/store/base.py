"""
Collection store contract.

The pipeline only ever talks to persistence through this interface.
Every operation is atomic for a single record; nothing spans records.
"""

from abc import ABC, abstractmethod
from typing import Optional

from voicenotes.models.records import Folder, Note, NoteFinalization, Todo


class CollectionStore(ABC):
    """Create/read/update/delete access to notes, todos and folders."""

    # Folders

    @abstractmethod
    def list_folders(self) -> list[Folder]:
        raise NotImplementedError

    @abstractmethod
    def create_folder(self, name: str) -> str:
        raise NotImplementedError

    # Todos

    @abstractmethod
    def create_todo(self, text: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def list_todos(self) -> list[Todo]:
        raise NotImplementedError

    @abstractmethod
    def toggle_todo(self, todo_id: str) -> Todo:
        raise NotImplementedError

    @abstractmethod
    def delete_todo(self, todo_id: str) -> None:
        raise NotImplementedError

    # Notes and placeholders

    @abstractmethod
    def create_placeholder(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def get_note(self, note_id: str) -> Note:
        raise NotImplementedError

    @abstractmethod
    def list_notes(self, folder_id: Optional[str] = None) -> list[Note]:
        raise NotImplementedError

    @abstractmethod
    def finalize_note(self, note_id: str, finalization: NoteFinalization) -> None:
        """Commit a placeholder; raises StoreError if it is not pending."""
        raise NotImplementedError

    @abstractmethod
    def delete_note(self, note_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_placeholder(self, note_id: str) -> None:
        """Delete a placeholder; raises StoreError if it is not pending."""
        raise NotImplementedError

    def list_pending(self) -> list[Note]:
        """Placeholders that were never finalized or deleted."""
        return [note for note in self.list_notes() if note.is_pending]
