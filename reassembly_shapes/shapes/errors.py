"""Schema errors and warnings for shape definitions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SchemaErrorKind(Enum):
    """Ways a well-formed literal can fail to describe valid shapes."""
    INVALID_STRUCTURE = "InvalidStructure"
    INVALID_ID = "InvalidId"
    DUPLICATE_ID = "DuplicateId"
    INVALID_NAME = "InvalidName"
    NO_SCALE_VARIANTS = "NoScaleVariants"
    MISSING_VERTS = "MissingVerts"
    INVALID_VERTEX = "InvalidVertex"
    TOO_FEW_VERTICES = "TooFewVertices"
    INVALID_PORT = "InvalidPort"
    PORT_EDGE_OUT_OF_RANGE = "PortEdgeOutOfRange"
    PORT_POSITION_OUT_OF_RANGE = "PortPositionOutOfRange"


class InvariantViolation(ValueError):
    """
    Raised by model constructors when a value would break a shape invariant.

    Attributes:
        kind: Which rule was broken
        field: Path of the offending field relative to the value being built
        detail: Human-readable description
    """

    def __init__(self, kind: SchemaErrorKind, field: str, detail: str):
        self.kind = kind
        self.field = field
        self.detail = detail
        super().__init__(f"{field}: {detail}" if field else detail)

    def prefixed(self, prefix: str) -> "InvariantViolation":
        """Get a copy whose field path is nested under ``prefix``."""
        field = f"{prefix}.{self.field}" if self.field else prefix
        return InvariantViolation(self.kind, field, self.detail)


class SchemaError(ValueError):
    """
    A structurally valid literal that does not describe valid shapes.

    Attributes:
        kind: What went wrong
        shape_id: Id of the offending shape, when it is known
        field: Path of the offending field inside the shape
        positions: Indices of the top-level entries involved
        lines: Source lines of those entries
        detail: Description without the shape/field prefix
    """

    def __init__(
        self,
        kind: SchemaErrorKind,
        detail: str,
        shape_id: Optional[int] = None,
        field: Optional[str] = None,
        positions: Tuple[int, ...] = (),
        lines: Tuple[int, ...] = (),
    ):
        self.kind = kind
        self.detail = detail
        self.shape_id = shape_id
        self.field = field
        self.positions = positions
        self.lines = lines

        where = []
        if shape_id is not None:
            where.append(f"shape {shape_id}")
        elif positions:
            where.append(f"entry {positions[0]}")
        if field:
            where.append(field)
        prefix = f"{kind.value} in {', '.join(where)}" if where else kind.value
        super().__init__(f"{prefix}: {detail}")

    @classmethod
    def from_violation(
        cls,
        violation: InvariantViolation,
        shape_id: Optional[int],
        position: int,
        line: int = 0,
    ) -> "SchemaError":
        """Wrap a model invariant violation with the location it came from."""
        return cls(
            violation.kind,
            violation.detail,
            shape_id=shape_id,
            field=violation.field,
            positions=(position,),
            lines=(line,) if line else (),
        )


class WarningKind(Enum):
    """Recoverable anomalies found while building shapes."""
    UNKNOWN_PORT_TYPE = "UnknownPortType"
    IGNORED_FIELD = "IgnoredField"


@dataclass(frozen=True)
class ShapeWarning:
    """A non-fatal finding reported alongside a successful build."""
    kind: WarningKind
    message: str
    shape_id: Optional[int] = None
    field: Optional[str] = None
    text: Optional[str] = None

    def __str__(self) -> str:
        where = f"shape {self.shape_id}" if self.shape_id is not None else "file"
        if self.field:
            where = f"{where}, {self.field}"
        return f"{self.kind.value} in {where}: {self.message}"
