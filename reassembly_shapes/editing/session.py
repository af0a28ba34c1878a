"""Editing session: one shape collection plus its edit history."""

import logging
from typing import List, Optional

from ..config import DEFAULT_CONFIG, EditorConfig
from ..shapes.builder import parse_and_build
from ..shapes.errors import ShapeWarning
from ..shapes.serializer import render
from ..shapes.shape import Shape, ShapeCollection
from .base import EditCommand
from .commands import AddShape
from .history import EditHistory

logger = logging.getLogger(__name__)


class EditSession:
    """
    The state a shape editor works on.

    Hosts read ``collection`` to draw the current shapes and change it only
    by applying commands. Importing replaces the collection and starts a
    fresh history; a failed import changes nothing.
    """

    def __init__(self, config: Optional[EditorConfig] = None, collection: Optional[ShapeCollection] = None):
        self.config = config or DEFAULT_CONFIG
        self.history = EditHistory(collection, self.config)

    @property
    def collection(self) -> ShapeCollection:
        return self.history.collection

    def import_text(self, text: str) -> List[ShapeWarning]:
        """
        Replace the session's shapes with the contents of a shapes file.

        Returns:
            Warnings found while building

        Raises:
            ParseError: If the text is not a well-formed literal
            SchemaError: If the literal does not describe valid shapes
        """
        collection, warnings = parse_and_build(text, self.config)
        self.history.reset(collection)
        logger.info(f"Imported {len(collection)} shape(s)")
        return warnings

    def export_text(self) -> str:
        return render(self.collection, self.config)

    def new(self) -> None:
        """Start over with an empty collection."""
        self.history.reset(ShapeCollection.empty())

    def next_shape_id(self) -> int:
        return self.collection.next_free_id()

    def add_new_shape(self) -> Shape:
        """Add a one-grid-cell square under the next free id, as an undoable edit."""
        shape_id = self.next_shape_id()
        shape = Shape.square(shape_id, self.config.grid_size, self.config.default_name(shape_id))
        self.apply(AddShape(shape))
        return shape

    def apply(self, command: EditCommand) -> ShapeCollection:
        return self.history.apply(command)

    def undo(self) -> ShapeCollection:
        return self.history.undo()

    def redo(self) -> ShapeCollection:
        return self.history.redo()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()
