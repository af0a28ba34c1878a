"""Shape model, building and serialization module."""

from .shape import Port, PortType, ScaleVariant, Shape, ShapeCollection, Vertex
from .errors import InvariantViolation, SchemaError, SchemaErrorKind, ShapeWarning, WarningKind
from .validator import ShapeValidator
from .builder import ShapeModelBuilder, build, parse_and_build
from .serializer import ShapeSerializer, format_number, render

__all__ = [
    "Port",
    "PortType",
    "ScaleVariant",
    "Shape",
    "ShapeCollection",
    "Vertex",
    "InvariantViolation",
    "SchemaError",
    "SchemaErrorKind",
    "ShapeWarning",
    "WarningKind",
    "ShapeValidator",
    "ShapeModelBuilder",
    "build",
    "parse_and_build",
    "ShapeSerializer",
    "format_number",
    "render",
]
