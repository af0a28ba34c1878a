"""Shape validation utilities implementing the shape file invariants."""

import math
import re
from numbers import Integral, Real
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence, Tuple

from .errors import InvariantViolation, SchemaErrorKind

if TYPE_CHECKING:
    from .shape import Port, ScaleVariant, Shape, Vertex


IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


class ShapeValidator:
    """
    Validator for the structural rules of shape definitions.

    The rules are:
        1. shape ids are unique within a collection
        2. every scale variant has at least 3 vertices
        3. every port lies on an existing edge (edge < vertex count)
        4. every port position is within [0.0, 1.0]
        5. every shape has at least one scale variant

    Each check returns an InvariantViolation (or None) instead of raising,
    so callers decide how to report it. Model constructors raise it; the
    builder wraps it into a SchemaError with the shape's location.
    """

    MIN_VERTICES = 3

    @classmethod
    def check_shape_id(cls, shape_id: object) -> Optional[InvariantViolation]:
        """Check that an id is a non-negative integer."""
        if isinstance(shape_id, bool) or not isinstance(shape_id, Integral) or shape_id < 0:
            return InvariantViolation(
                SchemaErrorKind.INVALID_ID, "id",
                f"shape id must be a non-negative integer, got {shape_id!r}",
            )
        return None

    @classmethod
    def check_name(cls, name: object) -> Optional[InvariantViolation]:
        """Check that a name can be written back as a line comment."""
        if not isinstance(name, str) or not name.strip():
            return InvariantViolation(
                SchemaErrorKind.INVALID_NAME, "name", "shape name must be a non-empty string"
            )
        # Any line boundary str.splitlines knows about, not only \n and \r
        if len(name.strip().splitlines()) != 1:
            return InvariantViolation(
                SchemaErrorKind.INVALID_NAME, "name", "shape name must fit on one line"
            )
        return None

    @classmethod
    def check_coordinates(cls, x: object, y: object) -> Optional[InvariantViolation]:
        """Check that vertex coordinates are finite numbers."""
        for axis, value in (("x", x), ("y", y)):
            if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
                return InvariantViolation(
                    SchemaErrorKind.INVALID_VERTEX, axis,
                    f"coordinate must be a finite number, got {value!r}",
                )
        return None

    @classmethod
    def check_port(cls, edge: object, position: object) -> Optional[InvariantViolation]:
        """Check a port's edge index type and position range."""
        if isinstance(edge, bool) or not isinstance(edge, Integral) or edge < 0:
            return InvariantViolation(
                SchemaErrorKind.INVALID_PORT, "edge",
                f"edge index must be a non-negative integer, got {edge!r}",
            )
        if isinstance(position, bool) or not isinstance(position, Real) or math.isnan(position):
            return InvariantViolation(
                SchemaErrorKind.INVALID_PORT, "position",
                f"port position must be a number, got {position!r}",
            )
        if not 0.0 <= position <= 1.0:
            return InvariantViolation(
                SchemaErrorKind.PORT_POSITION_OUT_OF_RANGE, "position",
                f"port position {position} is outside [0, 1]",
            )
        return None

    @classmethod
    def check_type_name(cls, type_name: object) -> Optional[InvariantViolation]:
        """Check that an unknown port type can be written back as a bare identifier."""
        if not isinstance(type_name, str) or not IDENTIFIER_RE.match(type_name):
            return InvariantViolation(
                SchemaErrorKind.INVALID_PORT, "type",
                f"port type must be an identifier, got {type_name!r}",
            )
        return None

    @classmethod
    def check_scale_variant(
        cls, vertices: Sequence["Vertex"], ports: Sequence["Port"]
    ) -> Optional[InvariantViolation]:
        """Check vertex count and that every port sits on an existing edge."""
        if len(vertices) < cls.MIN_VERTICES:
            return InvariantViolation(
                SchemaErrorKind.TOO_FEW_VERTICES, "verts",
                f"a polygon needs at least {cls.MIN_VERTICES} vertices, got {len(vertices)}",
            )
        for i, port in enumerate(ports):
            if port.edge >= len(vertices):
                return InvariantViolation(
                    SchemaErrorKind.PORT_EDGE_OUT_OF_RANGE, f"ports[{i}].edge",
                    f"edge {port.edge} does not exist on a {len(vertices)}-vertex polygon",
                )
        return None

    @classmethod
    def check_shape(
        cls, shape_id: object, name: object, variants: Sequence["ScaleVariant"]
    ) -> Optional[InvariantViolation]:
        """Check a shape's own fields (its variants validate themselves)."""
        violation = cls.check_shape_id(shape_id) or cls.check_name(name)
        if violation is not None:
            return violation
        if not variants:
            return InvariantViolation(
                SchemaErrorKind.NO_SCALE_VARIANTS, "scales",
                "a shape needs at least one scale variant",
            )
        return None

    @classmethod
    def find_duplicate_id(cls, shapes: Iterable["Shape"]) -> Optional[Tuple[int, int, int]]:
        """
        Find the first id used twice.

        Returns:
            (shape_id, first_index, second_index), or None if ids are unique
        """
        seen: Dict[int, int] = {}
        for index, shape in enumerate(shapes):
            if shape.shape_id in seen:
                return shape.shape_id, seen[shape.shape_id], index
            seen[shape.shape_id] = index
        return None
