"""
Notion-backed collection store.

Notes, todos and folders live in three Notion databases. Provides:
- Page creation, update and archival per collection
- Paginated database queries
- Database schema validation
"""

from typing import Any, Iterator, Optional

from notion_client import Client as NotionSDKClient
from notion_client.errors import APIResponseError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from voicenotes.models.notion import (
    NotionDatabaseSchema,
    NotionFolderProperties,
    NotionNoteProperties,
    NotionTodoProperties,
)
from voicenotes.models.records import (
    PLACEHOLDER_CONTENT,
    Folder,
    Note,
    NoteFinalization,
    Todo,
)
from voicenotes.store.base import CollectionStore
from voicenotes.utils.config import get_settings
from voicenotes.utils.exceptions import RateLimitError, StoreError
from voicenotes.utils.logger import get_logger

logger = get_logger("store")

# A 429 is rejected before any side effect, so retrying it cannot duplicate a write
rate_limit_retry = retry(
    retry=retry_if_exception_type(RateLimitError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=60),
    reraise=True,
)


class NotionStore(CollectionStore):
    """
    Collection store backed by the Notion API.

    Deletion archives the page, which is how Notion removes records.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        notes_database_id: Optional[str] = None,
        todos_database_id: Optional[str] = None,
        folders_database_id: Optional[str] = None,
    ) -> None:
        """
        Initialize the Notion store.

        Args:
            api_key: Notion integration token. Defaults to config value.
            notes_database_id: Notes database ID. Defaults to config value.
            todos_database_id: Todos database ID. Defaults to config value.
            folders_database_id: Folders database ID. Defaults to config value.
        """
        settings = get_settings()
        self.api_key = api_key or settings.notion.api_key
        self.notes_database_id = notes_database_id or settings.notion.notes_database_id
        self.todos_database_id = todos_database_id or settings.notion.todos_database_id
        self.folders_database_id = (
            folders_database_id or settings.notion.folders_database_id
        )

        if not self.api_key:
            logger.warning("Notion API key not configured")

        self._client = NotionSDKClient(auth=self.api_key)
        self._schema = NotionDatabaseSchema()

    def _handle_api_error(
        self,
        e: APIResponseError,
        collection: str,
        context: str = "",
        record_id: Optional[str] = None,
    ) -> None:
        """
        Convert Notion API errors to our exception types.

        Raises:
            RateLimitError: If rate limited
            StoreError: For other API errors
        """
        status = e.status
        code = e.code
        message = str(e)

        if status == 429:
            logger.warning(f"Notion rate limited: {context}")
            raise RateLimitError(
                "Notion API rate limit exceeded",
                service="notion",
                retry_after=60,
                collection=collection,
                record_id=record_id,
            )

        logger.error(f"Notion API error ({context}): {code} - {message}")
        raise StoreError(
            message,
            collection=collection,
            record_id=record_id,
            status_code=status,
            error_code=code,
            cause=e,
        )

    def _query_all(self, database_id: str, collection: str) -> Iterator[dict[str, Any]]:
        """Yield every page of a database, newest first."""
        cursor: Optional[str] = None
        while True:
            kwargs: dict[str, Any] = {
                "database_id": database_id,
                "page_size": 100,
                "sorts": [{"timestamp": "created_time", "direction": "descending"}],
            }
            if cursor:
                kwargs["start_cursor"] = cursor
            try:
                response = self._client.databases.query(**kwargs)
            except APIResponseError as e:
                self._handle_api_error(e, collection, f"query({collection})")
                raise
            yield from response.get("results", [])
            if not response.get("has_more"):
                return
            cursor = response.get("next_cursor")

    def _create_page(
        self, database_id: str, collection: str, properties: dict[str, Any]
    ) -> str:
        try:
            response = self._client.pages.create(
                parent={"database_id": database_id},
                properties=properties,
            )
        except APIResponseError as e:
            self._handle_api_error(e, collection, f"create({collection})")
            raise
        page_id = response.get("id", "")
        logger.info(f"Created {collection} page: {page_id}")
        return page_id

    def _retrieve_page(self, page_id: str, collection: str) -> dict[str, Any]:
        try:
            return self._client.pages.retrieve(page_id=page_id)
        except APIResponseError as e:
            self._handle_api_error(e, collection, f"retrieve({page_id})", page_id)
            raise

    def _update_page(self, page_id: str, collection: str, **fields: Any) -> dict[str, Any]:
        try:
            return self._client.pages.update(page_id=page_id, **fields)
        except APIResponseError as e:
            self._handle_api_error(e, collection, f"update({page_id})", page_id)
            raise

    def _archive_page(self, page_id: str, collection: str) -> None:
        logger.info(f"Archiving {collection} page: {page_id}")
        self._update_page(page_id, collection, archived=True)

    # Folders

    @rate_limit_retry
    def list_folders(self) -> list[Folder]:
        return [
            NotionFolderProperties.to_folder(page)
            for page in self._query_all(self.folders_database_id, "folders")
        ]

    @rate_limit_retry
    def create_folder(self, name: str) -> str:
        properties = NotionFolderProperties(name=name).to_notion_properties()
        return self._create_page(self.folders_database_id, "folders", properties)

    # Todos

    @rate_limit_retry
    def create_todo(self, text: str) -> str:
        properties = NotionTodoProperties(text=text).to_notion_properties()
        return self._create_page(self.todos_database_id, "todos", properties)

    @rate_limit_retry
    def list_todos(self) -> list[Todo]:
        return [
            NotionTodoProperties.to_todo(page)
            for page in self._query_all(self.todos_database_id, "todos")
        ]

    @rate_limit_retry
    def toggle_todo(self, todo_id: str) -> Todo:
        todo = NotionTodoProperties.to_todo(self._retrieve_page(todo_id, "todos"))
        response = self._update_page(
            todo_id,
            "todos",
            properties={"Done": {"checkbox": not todo.done}},
        )
        return NotionTodoProperties.to_todo(response)

    @rate_limit_retry
    def delete_todo(self, todo_id: str) -> None:
        self._archive_page(todo_id, "todos")

    # Notes and placeholders

    @rate_limit_retry
    def create_placeholder(self) -> str:
        properties = NotionNoteProperties(content=PLACEHOLDER_CONTENT).to_notion_properties()
        return self._create_page(self.notes_database_id, "notes", properties)

    @rate_limit_retry
    def get_note(self, note_id: str) -> Note:
        return NotionNoteProperties.to_note(self._retrieve_page(note_id, "notes"))

    @rate_limit_retry
    def list_notes(self, folder_id: Optional[str] = None) -> list[Note]:
        notes = [
            NotionNoteProperties.to_note(page)
            for page in self._query_all(self.notes_database_id, "notes")
        ]
        if folder_id is not None:
            notes = [note for note in notes if note.folder_id == folder_id]
        return notes

    @rate_limit_retry
    def finalize_note(self, note_id: str, finalization: NoteFinalization) -> None:
        self._require_pending(note_id)
        properties = NotionNoteProperties(
            content=finalization.content,
            type=finalization.type,
            folder_id=finalization.folder_id,
        ).to_notion_properties(include_created=False)
        self._update_page(note_id, "notes", properties=properties)
        logger.info(f"Finalized note {note_id} (folder={finalization.folder_id})")

    @rate_limit_retry
    def delete_note(self, note_id: str) -> None:
        self._archive_page(note_id, "notes")

    @rate_limit_retry
    def delete_placeholder(self, note_id: str) -> None:
        self._require_pending(note_id)
        self._archive_page(note_id, "notes")
        logger.info(f"Archived placeholder {note_id}")

    def _require_pending(self, note_id: str) -> None:
        # Notion has no conditional update; the pending check is best-effort
        if not self.get_note(note_id).is_pending:
            raise StoreError(
                f"Note {note_id} is already finalized",
                collection="notes",
                record_id=note_id,
                error_code="conflict",
            )

    def validate_database_schemas(self) -> tuple[bool, list[str]]:
        """
        Verify the three databases have the required properties.

        Returns:
            Tuple of (is_valid, list_of_missing_properties)

        Raises:
            StoreError: On API errors
        """
        missing: list[str] = []
        databases = {
            "notes": self.notes_database_id,
            "todos": self.todos_database_id,
            "folders": self.folders_database_id,
        }
        for collection, database_id in databases.items():
            logger.info(f"Validating {collection} database schema: {database_id}")
            try:
                response = self._client.databases.retrieve(database_id=database_id)
            except APIResponseError as e:
                self._handle_api_error(e, collection, f"validate({collection})")
                raise
            _, gaps = self._schema.validate_database(
                collection, response.get("properties", {})
            )
            missing.extend(f"{collection}: {gap}" for gap in gaps)

        if missing:
            logger.warning(f"Missing properties: {missing}")
        return len(missing) == 0, missing
