"""
Folder resolution.

Maps a spoken folder name onto an existing folder by case-insensitive
exact match, creating the folder on first use.
"""

from typing import NamedTuple

from voicenotes.store.base import CollectionStore
from voicenotes.utils.exceptions import StoreError
from voicenotes.utils.logger import get_logger
from voicenotes.utils.text import folder_key, normalize_folder_name

logger = get_logger("folders")


class ResolvedFolder(NamedTuple):
    """Result of a folder lookup."""

    folder_id: str
    created: bool


class FolderResolver:
    """
    Looks up or lazily creates folders by name.

    The lookup and the create are two separate store calls. Two runs
    resolving the same new name at the same time can both miss and both
    create, leaving duplicate folders. Later resolutions match whichever
    duplicate the store lists first (the newest).
    """

    def __init__(self, store: CollectionStore) -> None:
        self.store = store

    def resolve(self, name: str) -> str:
        """
        Return the id of the folder called `name`, creating it if needed.

        Args:
            name: Folder name as spoken; surrounding whitespace is ignored

        Returns:
            Folder id

        Raises:
            StoreError: If the name is blank or the store fails
        """
        return self.resolve_with_status(name).folder_id

    def resolve_with_status(self, name: str) -> ResolvedFolder:
        """Like resolve(), also reporting whether the folder was created."""
        display_name = normalize_folder_name(name)
        if not display_name:
            raise StoreError("Folder name is empty", collection="folders")

        key = folder_key(display_name)
        for folder in self.store.list_folders():
            if folder_key(folder.name) == key:
                logger.debug(f"Reusing folder {folder.id} ({folder.name!r})")
                return ResolvedFolder(folder.id, False)

        folder_id = self.store.create_folder(display_name)
        logger.info(f"Created folder {folder_id} ({display_name!r})")
        return ResolvedFolder(folder_id, True)
