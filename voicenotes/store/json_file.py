"""
JSON file collection store.

Keeps notes.json, todos.json and folders.json in a data directory.
"""

import json
import os
from pathlib import Path
from typing import Any, Union

from voicenotes.store.memory import TableStore
from voicenotes.utils.exceptions import StoreError


class JsonFileStore(TableStore):
    """Collection store persisted as one JSON array per collection."""

    def __init__(self, base_dir: Union[str, Path] = "data") -> None:
        super().__init__()
        self.base_dir = Path(base_dir)

    def _read_table(self, name: str) -> list[dict[str, Any]]:
        path = self._table_path(name)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(
                f"Failed to read {path}",
                collection=name,
                cause=e,
            ) from e

    def _write_table(self, name: str, items: list[dict[str, Any]]) -> None:
        path = self._table_path(name)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(items, handle, indent=2)
            # Replace in one step so a crash never leaves a half-written table
            os.replace(tmp_path, path)
        except OSError as e:
            raise StoreError(
                f"Failed to write {path}",
                collection=name,
                cause=e,
            ) from e

    def _table_path(self, name: str) -> Path:
        return self.base_dir / f"{name}.json"
