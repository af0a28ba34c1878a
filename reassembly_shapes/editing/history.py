"""Linear undo/redo history of edit commands."""

import logging
from typing import List, Optional

from ..config import DEFAULT_CONFIG, EditorConfig
from ..shapes.shape import ShapeCollection
from .base import EditCommand, EditError, EditErrorKind

logger = logging.getLogger(__name__)


class EditHistory:
    """
    Owns the current shape collection and the commands that produced it.

    Commands before the cursor have been applied, commands after it have
    been undone and can be redone. Applying a new command discards the
    undone ones. When more than ``max_entries`` commands are kept, the
    oldest is forgotten and can no longer be undone.
    """

    def __init__(self, collection: Optional[ShapeCollection] = None, config: Optional[EditorConfig] = None):
        self._collection = collection if collection is not None else ShapeCollection.empty()
        self._entries: List[EditCommand] = []
        self._cursor = 0
        self.max_entries = (config or DEFAULT_CONFIG).max_undo_history

    @property
    def collection(self) -> ShapeCollection:
        """The current collection. It is immutable, so it can be handed out as is."""
        return self._collection

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    def apply(self, command: EditCommand) -> ShapeCollection:
        """
        Apply a command and record it.

        Returns:
            The new collection

        Raises:
            EditError: If the command is rejected; nothing changes then
        """
        if any(entry is command for entry in self._entries):
            raise EditError(
                EditErrorKind.INVALID_TARGET,
                f"{command.describe()} is already in the history; create a new command",
            )

        self._collection = command.apply(self._collection)

        del self._entries[self._cursor:]
        self._entries.append(command)
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            self._entries.pop(0)
        self._cursor = len(self._entries)

        logger.debug(f"Applied {command.describe()} ({self._cursor} undoable)")
        return self._collection

    def undo(self) -> ShapeCollection:
        """
        Revert the most recent applied command.

        Raises:
            EditError: NOTHING_TO_UNDO at the start of the history
        """
        if not self.can_undo():
            raise EditError(EditErrorKind.NOTHING_TO_UNDO, "nothing to undo")
        command = self._entries[self._cursor - 1]
        self._collection = command.revert(self._collection)
        self._cursor -= 1
        logger.debug(f"Undid {command.describe()}")
        return self._collection

    def redo(self) -> ShapeCollection:
        """
        Re-apply the most recently undone command.

        Raises:
            EditError: NOTHING_TO_REDO at the end of the history
        """
        if not self.can_redo():
            raise EditError(EditErrorKind.NOTHING_TO_REDO, "nothing to redo")
        command = self._entries[self._cursor]
        self._collection = command.apply(self._collection)
        self._cursor += 1
        logger.debug(f"Redid {command.describe()}")
        return self._collection

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries)

    def undo_label(self) -> Optional[str]:
        """Get the description of the command undo() would revert."""
        return self._entries[self._cursor - 1].describe() if self.can_undo() else None

    def redo_label(self) -> Optional[str]:
        return self._entries[self._cursor].describe() if self.can_redo() else None

    def clear(self) -> None:
        """Forget all commands, keeping the current collection."""
        self._entries.clear()
        self._cursor = 0

    def reset(self, collection: ShapeCollection) -> None:
        """Replace the collection and forget all commands."""
        self._collection = collection
        self.clear()
