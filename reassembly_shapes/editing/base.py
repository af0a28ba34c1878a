"""Base edit command interface."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum, auto
from typing import Iterator, Optional, Tuple

from ..shapes.errors import InvariantViolation
from ..shapes.shape import ScaleVariant, Shape, ShapeCollection


class EditErrorKind(Enum):
    """Reasons an edit can be rejected."""
    INVARIANT_VIOLATION = "InvariantViolation"
    INVALID_TARGET = "InvalidTarget"
    NOTHING_TO_UNDO = "NothingToUndo"
    NOTHING_TO_REDO = "NothingToRedo"


class EditError(Exception):
    """
    A rejected edit. The collection is unchanged when this is raised.

    Attributes:
        kind: Why the edit was rejected
        violation: The broken invariant, for INVARIANT_VIOLATION
    """

    def __init__(self, kind: EditErrorKind, message: str, violation: Optional[InvariantViolation] = None):
        self.kind = kind
        self.violation = violation
        super().__init__(f"{kind.value}: {message}")


class CommandType(Enum):
    """Types of edits available in the shape editor."""
    ADD_SHAPE = auto()
    REMOVE_SHAPE = auto()
    RENAME_SHAPE = auto()
    SET_LAUNCHER_RADIAL = auto()
    ADD_SCALE_VARIANT = auto()
    REMOVE_SCALE_VARIANT = auto()
    ADD_VERTEX = auto()
    REMOVE_VERTEX = auto()
    MOVE_VERTEX = auto()
    ADD_PORT = auto()
    REMOVE_PORT = auto()
    MODIFY_PORT = auto()


class EditCommand(ABC):
    """
    Abstract base class for all edit commands.

    A command is applied to a collection and returns the edited collection.
    While applying, it records whatever it needs to compute its inverse, so
    ``revert(apply(c)) == c``. Commands never modify the collection they are
    given; they are used once, by one history.
    """

    @property
    @abstractmethod
    def command_type(self) -> CommandType:
        """Get the type of this command."""
        pass

    @abstractmethod
    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        """
        Apply the command.

        Args:
            collection: The current collection

        Returns:
            The edited collection

        Raises:
            EditError: If the command cannot be applied to this collection
        """
        pass

    @abstractmethod
    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        """Undo the command on the collection its apply() returned."""
        pass

    def describe(self) -> str:
        """Get a short label for menus and logs."""
        return self.command_type.name.replace("_", " ").capitalize()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.describe()}>"


@contextmanager
def invariant_guard(action: str) -> Iterator[None]:
    """Turn model exceptions raised inside the block into EditErrors."""
    try:
        yield
    except InvariantViolation as e:
        raise EditError(EditErrorKind.INVARIANT_VIOLATION, f"{action}: {e}", violation=e) from e
    except (IndexError, KeyError) as e:
        raise EditError(EditErrorKind.INVALID_TARGET, f"{action}: {e}") from e


def locate_shape(collection: ShapeCollection, shape_id: int) -> Tuple[int, Shape]:
    """Get the position and value of a shape, raising EditError if it is absent."""
    if shape_id not in collection:
        raise EditError(EditErrorKind.INVALID_TARGET, f"no shape with id {shape_id}")
    index = collection.index_of(shape_id)
    return index, collection.shapes[index]


def locate_scale(shape: Shape, scale_index: int) -> ScaleVariant:
    """Get a scale variant of a shape, raising EditError if it is absent."""
    variant = shape.get_scale(scale_index)
    if variant is None:
        raise EditError(
            EditErrorKind.INVALID_TARGET,
            f"shape {shape.shape_id} has no scale variant {scale_index}",
        )
    return variant
