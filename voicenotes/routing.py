"""
Routing engine.

Commits a classification Decision against a pending placeholder note.
Each call performs exactly one terminal action on the placeholder:
the todo path deletes it, every note path finalizes it in place.
"""

from typing import Optional

from voicenotes.folders import FolderResolver
from voicenotes.models.decision import Decision, NoteKind
from voicenotes.models.records import NoteFinalization, NoteType, RoutingOutcome
from voicenotes.store.base import CollectionStore
from voicenotes.utils.exceptions import RoutingError, StoreError
from voicenotes.utils.logger import get_contextual_logger

# Routing stages, reported on RoutingError
STAGE_CHECK_PLACEHOLDER = "check_placeholder"
STAGE_CREATE_TODO = "create_todo"
STAGE_DELETE_PLACEHOLDER = "delete_placeholder"
STAGE_RESOLVE_FOLDER = "resolve_folder"
STAGE_FINALIZE = "finalize"


class Router:
    """
    Moves placeholders out of their pending state.

    The router is the only writer that finalizes or deletes a placeholder.
    A placeholder that is no longer pending is refused before anything is
    written, and the store's pending-only finalize and delete refuse a
    second terminal action from a concurrent run. A failed route leaves the
    placeholder pending, so it can be routed again.
    """

    def __init__(
        self,
        store: CollectionStore,
        resolver: Optional[FolderResolver] = None,
    ) -> None:
        self.store = store
        self.resolver = resolver or FolderResolver(store)

    def route(self, placeholder_id: str, decision: Decision) -> RoutingOutcome:
        """
        Commit a decision against a placeholder.

        Todos are created before the placeholder is deleted, and folders
        are resolved before the placeholder is finalized, so a failure
        never loses the transcript content.

        Args:
            placeholder_id: Pending note created by the caller
            decision: Validated classification result

        Returns:
            RoutingOutcome describing what was committed

        Raises:
            RoutingError: If the placeholder is missing or already routed,
                or a store step fails. The placeholder keeps its last
                reached state.
        """
        log = get_contextual_logger("routing", placeholder_id=placeholder_id)
        self._check_pending(placeholder_id, log)

        if decision.kind == NoteKind.TODO:
            return self._route_todo(placeholder_id, decision, log)
        return self._route_note(placeholder_id, decision, log)

    def _check_pending(self, placeholder_id, log) -> None:
        try:
            note = self.store.get_note(placeholder_id)
        except StoreError as e:
            log.error(f"Placeholder lookup failed: {e}")
            raise RoutingError(
                f"Placeholder {placeholder_id} could not be read",
                placeholder_id=placeholder_id,
                stage=STAGE_CHECK_PLACEHOLDER,
                cause=e,
            ) from e

        if not note.is_pending:
            log.warning("Placeholder is no longer pending")
            raise RoutingError(
                f"Placeholder {placeholder_id} has already been routed",
                placeholder_id=placeholder_id,
                stage=STAGE_CHECK_PLACEHOLDER,
            )

    def _route_todo(self, placeholder_id, decision, log) -> RoutingOutcome:
        try:
            todo_id = self.store.create_todo(decision.content)
        except StoreError as e:
            log.error(f"Todo creation failed: {e}")
            raise RoutingError(
                "Failed to create todo",
                placeholder_id=placeholder_id,
                stage=STAGE_CREATE_TODO,
                cause=e,
            ) from e

        try:
            self.store.delete_placeholder(placeholder_id)
        except StoreError as e:
            # The todo exists; the placeholder stays pending and shows up in list_pending()
            log.error(f"Placeholder deletion failed after creating todo {todo_id}: {e}")
            raise RoutingError(
                "Failed to delete placeholder",
                placeholder_id=placeholder_id,
                stage=STAGE_DELETE_PLACEHOLDER,
                details={"todo_id": todo_id},
                cause=e,
            ) from e

        log.info(f"Routed to todo {todo_id}")
        return RoutingOutcome(
            placeholder_id=placeholder_id,
            kind=NoteKind.TODO,
            todo_id=todo_id,
        )

    def _route_note(self, placeholder_id, decision, log) -> RoutingOutcome:
        folder_id = None
        created = False
        target = decision.target_folder

        if target:
            try:
                folder_id, created = self.resolver.resolve_with_status(target)
            except StoreError as e:
                log.error(f"Folder resolution failed for {target!r}: {e}")
                raise RoutingError(
                    f"Failed to resolve folder {target!r}",
                    placeholder_id=placeholder_id,
                    stage=STAGE_RESOLVE_FOLDER,
                    cause=e,
                ) from e

        finalization = NoteFinalization(
            content=decision.content,
            type=NoteType.NOTE,
            folder_id=folder_id,
        )
        try:
            self.store.finalize_note(placeholder_id, finalization)
        except StoreError as e:
            log.error(f"Finalization failed: {e}")
            raise RoutingError(
                "Failed to finalize placeholder",
                placeholder_id=placeholder_id,
                stage=STAGE_FINALIZE,
                cause=e,
            ) from e

        log.info(
            f"Finalized note (action={decision.routing_action.value}, "
            f"folder={folder_id}, created={created})"
        )
        return RoutingOutcome(
            placeholder_id=placeholder_id,
            kind=NoteKind.NOTE,
            note_id=placeholder_id,
            folder_id=folder_id,
            folder_created=created,
        )
