"""Core shape data structures."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from ..config import DEFAULT_CONFIG
from .errors import InvariantViolation, SchemaErrorKind
from .validator import ShapeValidator


class PortType(Enum):
    """Port types understood by Reassembly."""
    DEFAULT = "DEFAULT"
    THRUSTER_IN = "THRUSTER_IN"
    THRUSTER_OUT = "THRUSTER_OUT"
    WEAPON_IN = "WEAPON_IN"
    WEAPON_OUT = "WEAPON_OUT"
    MISSILE = "MISSILE"
    LAUNCHER = "LAUNCHER"
    ROOT = "ROOT"
    NONE = "NONE"
    UNKNOWN = "UNKNOWN"  # Game-side type this editor does not know; see Port.type_name

    @classmethod
    def from_code(cls, code: str) -> "PortType":
        """Parse a port type from its identifier (case-insensitive)."""
        upper = code.upper()
        for port_type in cls:
            if port_type is not cls.UNKNOWN and port_type.value == upper:
                return port_type
        raise ValueError(f"Unknown port type code: {code}")


KNOWN_PORT_CODES = frozenset(t.value for t in PortType if t is not PortType.UNKNOWN)


@dataclass(frozen=True)
class Vertex:
    """A polygon corner in shape-local coordinates."""
    x: float
    y: float

    def __post_init__(self):
        violation = ShapeValidator.check_coordinates(self.x, self.y)
        if violation is not None:
            raise violation
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Port:
    """
    A connection point on a polygon edge.

    Edge ``k`` runs from vertex ``k`` to vertex ``k + 1`` (wrapping around),
    ``position`` is the normalized distance along it. For ports of a type
    the editor does not know, ``port_type`` is UNKNOWN and ``type_name``
    holds the identifier exactly as it appeared in the file.
    """
    edge: int
    position: float
    port_type: PortType = PortType.DEFAULT
    type_name: Optional[str] = None

    def __post_init__(self):
        violation = ShapeValidator.check_port(self.edge, self.position)
        if violation is not None:
            raise violation
        object.__setattr__(self, "edge", int(self.edge))
        object.__setattr__(self, "position", float(self.position))

        if self.port_type is PortType.UNKNOWN:
            violation = ShapeValidator.check_type_name(self.type_name)
            if violation is not None:
                raise violation
            if self.type_name.upper() in KNOWN_PORT_CODES:
                raise InvariantViolation(
                    SchemaErrorKind.INVALID_PORT, "type",
                    f"{self.type_name} is a known port type, not an unknown one",
                )
        else:
            # Known types are identified by the enum alone
            object.__setattr__(self, "type_name", None)

    @classmethod
    def from_code(cls, edge: int, position: float, code: Optional[str]) -> "Port":
        """Create a port from a type identifier, keeping unknown identifiers verbatim."""
        if code is None:
            return cls(edge, position)
        try:
            return cls(edge, position, PortType.from_code(code))
        except ValueError as e:
            if isinstance(e, InvariantViolation):
                raise
            return cls(edge, position, PortType.UNKNOWN, code)

    @property
    def type_code(self) -> str:
        """Get the identifier used for this port's type in shape files."""
        if self.port_type is PortType.UNKNOWN:
            return self.type_name
        return self.port_type.value

    def with_edge(self, edge: int) -> "Port":
        """Create a copy of this port on another edge."""
        return replace(self, edge=edge)


@dataclass(frozen=True)
class ScaleVariant:
    """One concrete polygon of a shape: its vertices (in winding order) and ports."""
    vertices: Tuple[Vertex, ...]
    ports: Tuple[Port, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "vertices", tuple(self.vertices))
        object.__setattr__(self, "ports", tuple(self.ports))
        violation = ShapeValidator.check_scale_variant(self.vertices, self.ports)
        if violation is not None:
            raise violation

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_edges(self) -> int:
        """Get the number of edges (equal to the vertex count of a closed polygon)."""
        return len(self.vertices)

    def ports_on_edge(self, edge: int) -> List[Port]:
        """Get the ports lying on an edge."""
        return [port for port in self.ports if port.edge == edge]

    def insert_vertex(self, index: int, vertex: Vertex) -> "ScaleVariant":
        """
        Insert a vertex before ``index`` (``index == num_vertices`` appends).

        The edge being split keeps its ports; ports on later edges move up
        one edge index so they stay on the same physical edge.
        """
        if not 0 <= index <= len(self.vertices):
            raise IndexError(f"vertex index {index} out of range")
        vertices = self.vertices[:index] + (vertex,) + self.vertices[index:]
        ports = tuple(
            port.with_edge(port.edge + 1) if port.edge >= index else port
            for port in self.ports
        )
        return ScaleVariant(vertices, ports)

    def remove_vertex(self, index: int) -> Tuple["ScaleVariant", List[Tuple[int, Port]]]:
        """
        Remove a vertex, merging its two edges into one.

        Ports on the edge starting at the removed vertex are dropped; ports
        on later edges move down one edge index.

        Returns:
            The new variant and the dropped ports as (port_index, port) pairs
        """
        if not 0 <= index < len(self.vertices):
            raise IndexError(f"vertex index {index} out of range")
        vertices = self.vertices[:index] + self.vertices[index + 1:]
        kept = []
        dropped = []
        for i, port in enumerate(self.ports):
            if port.edge == index:
                dropped.append((i, port))
            elif port.edge > index:
                kept.append(port.with_edge(port.edge - 1))
            else:
                kept.append(port)
        return ScaleVariant(vertices, kept), dropped

    def move_vertex(self, index: int, vertex: Vertex) -> "ScaleVariant":
        """Replace the vertex at ``index``."""
        if not 0 <= index < len(self.vertices):
            raise IndexError(f"vertex index {index} out of range")
        vertices = self.vertices[:index] + (vertex,) + self.vertices[index + 1:]
        return replace(self, vertices=vertices)

    def insert_port(self, index: int, port: Port) -> "ScaleVariant":
        """Insert a port before ``index`` in the port list."""
        if not 0 <= index <= len(self.ports):
            raise IndexError(f"port index {index} out of range")
        return replace(self, ports=self.ports[:index] + (port,) + self.ports[index:])

    def remove_port(self, index: int) -> "ScaleVariant":
        if not 0 <= index < len(self.ports):
            raise IndexError(f"port index {index} out of range")
        return replace(self, ports=self.ports[:index] + self.ports[index + 1:])

    def replace_port(self, index: int, port: Port) -> "ScaleVariant":
        if not 0 <= index < len(self.ports):
            raise IndexError(f"port index {index} out of range")
        return replace(self, ports=self.ports[:index] + (port,) + self.ports[index + 1:])


@dataclass(frozen=True)
class Shape:
    """
    A named polygon definition with one or more scale variants.

    ``shape_id`` is what block definitions refer to. ``launcher_radial`` is
    the optional shape-level flag of the same name (None when the file does
    not set it).
    """
    shape_id: int
    name: str
    scale_variants: Tuple[ScaleVariant, ...]
    launcher_radial: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "scale_variants", tuple(self.scale_variants))
        violation = ShapeValidator.check_shape(self.shape_id, self.name, self.scale_variants)
        if violation is not None:
            raise violation
        object.__setattr__(self, "shape_id", int(self.shape_id))
        object.__setattr__(self, "name", self.name.strip())

    @classmethod
    def square(cls, shape_id: int, size: float = 10.0, name: Optional[str] = None) -> "Shape":
        """
        Create a square shape with a default port in the middle of every edge.

        This is the starting point for a freshly added shape.
        """
        half = size / 2
        vertices = (
            Vertex(half, half),
            Vertex(half, -half),
            Vertex(-half, -half),
            Vertex(-half, half),
        )
        ports = tuple(Port(edge, 0.5) for edge in range(4))
        if name is None:
            name = DEFAULT_CONFIG.default_name(shape_id)
        return cls(shape_id, name, (ScaleVariant(vertices, ports),))

    @property
    def num_scales(self) -> int:
        return len(self.scale_variants)

    def get_scale(self, index: int) -> Optional[ScaleVariant]:
        """Get a scale variant by index (0 = smallest)."""
        if 0 <= index < len(self.scale_variants):
            return self.scale_variants[index]
        return None

    def renamed(self, name: str) -> "Shape":
        return replace(self, name=name)

    def with_launcher_radial(self, value: Optional[bool]) -> "Shape":
        return replace(self, launcher_radial=value)

    def with_scale(self, index: int, variant: ScaleVariant) -> "Shape":
        """Create a copy with the scale variant at ``index`` replaced."""
        if not 0 <= index < len(self.scale_variants):
            raise IndexError(f"scale index {index} out of range")
        variants = self.scale_variants[:index] + (variant,) + self.scale_variants[index + 1:]
        return replace(self, scale_variants=variants)

    def insert_scale(self, index: int, variant: ScaleVariant) -> "Shape":
        if not 0 <= index <= len(self.scale_variants):
            raise IndexError(f"scale index {index} out of range")
        variants = self.scale_variants[:index] + (variant,) + self.scale_variants[index:]
        return replace(self, scale_variants=variants)

    def remove_scale(self, index: int) -> "Shape":
        if not 0 <= index < len(self.scale_variants):
            raise IndexError(f"scale index {index} out of range")
        variants = self.scale_variants[:index] + self.scale_variants[index + 1:]
        return replace(self, scale_variants=variants)


@dataclass(frozen=True)
class ShapeCollection:
    """
    All shapes of one shapes file, in file order.

    Collections are immutable values: editing produces a new collection
    that shares the untouched shapes with the old one.
    """
    shapes: Tuple[Shape, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "shapes", tuple(self.shapes))
        duplicate = ShapeValidator.find_duplicate_id(self.shapes)
        if duplicate is not None:
            shape_id, first, second = duplicate
            raise InvariantViolation(
                SchemaErrorKind.DUPLICATE_ID, f"shapes[{second}].id",
                f"shape id {shape_id} is already used by shapes[{first}]",
            )

    @classmethod
    def empty(cls) -> "ShapeCollection":
        return cls(())

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.shapes)

    def __contains__(self, shape_id: object) -> bool:
        return any(shape.shape_id == shape_id for shape in self.shapes)

    @property
    def ids(self) -> List[int]:
        return [shape.shape_id for shape in self.shapes]

    def index_of(self, shape_id: int) -> int:
        """Get the position of a shape, raising KeyError if it is absent."""
        for index, shape in enumerate(self.shapes):
            if shape.shape_id == shape_id:
                return index
        raise KeyError(shape_id)

    def find(self, shape_id: int) -> Optional[Shape]:
        """Get a shape by id, or None."""
        for shape in self.shapes:
            if shape.shape_id == shape_id:
                return shape
        return None

    def next_free_id(self) -> int:
        """Get an id one above the highest id in use (1 for an empty collection)."""
        return max(self.ids, default=0) + 1

    def insert(self, index: int, shape: Shape) -> "ShapeCollection":
        if not 0 <= index <= len(self.shapes):
            raise IndexError(f"shape index {index} out of range")
        return ShapeCollection(self.shapes[:index] + (shape,) + self.shapes[index:])

    def remove(self, index: int) -> "ShapeCollection":
        if not 0 <= index < len(self.shapes):
            raise IndexError(f"shape index {index} out of range")
        return ShapeCollection(self.shapes[:index] + self.shapes[index + 1:])

    def replace(self, index: int, shape: Shape) -> "ShapeCollection":
        if not 0 <= index < len(self.shapes):
            raise IndexError(f"shape index {index} out of range")
        return ShapeCollection(self.shapes[:index] + (shape,) + self.shapes[index + 1:])
