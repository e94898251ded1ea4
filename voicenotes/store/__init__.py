"""
Collection store backends.

This package provides:
- CollectionStore: the contract the pipeline depends on
- InMemoryStore: process-local tables
- JsonFileStore: one JSON file per collection
- NotionStore: three Notion databases
"""

from typing import Optional

from voicenotes.store.base import CollectionStore
from voicenotes.store.json_file import JsonFileStore
from voicenotes.store.memory import InMemoryStore
from voicenotes.store.notion import NotionStore
from voicenotes.utils.config import Settings, StoreBackend, get_settings


def build_store(settings: Optional[Settings] = None) -> CollectionStore:
    """Create the store selected by STORE_BACKEND."""
    settings = settings or get_settings()
    backend = settings.store.backend

    if backend == StoreBackend.NOTION:
        return NotionStore(
            api_key=settings.notion.api_key,
            notes_database_id=settings.notion.notes_database_id,
            todos_database_id=settings.notion.todos_database_id,
            folders_database_id=settings.notion.folders_database_id,
        )
    if backend == StoreBackend.MEMORY:
        return InMemoryStore()
    return JsonFileStore(settings.store.data_dir)


__all__ = [
    "CollectionStore",
    "InMemoryStore",
    "JsonFileStore",
    "NotionStore",
    "build_store",
]
