"""Shape file rendering utilities."""

from typing import List, Optional

from ..config import DEFAULT_CONFIG, EditorConfig
from .shape import Port, PortType, ScaleVariant, Shape, ShapeCollection


def format_number(value: float) -> str:
    """
    Format a number for a shapes file.

    Integral values are written without a fractional part, everything else
    with the shortest digit string that reads back as the same float.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class ShapeSerializer:
    """Renders shape collections as shapes file text."""

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def render(self, collection: ShapeCollection) -> str:
        """
        Render a collection as a single table literal.

        Args:
            collection: The shapes to write, in order

        Returns:
            The file text, ending with a newline
        """
        lines = ["{"]
        for index, shape in enumerate(collection):
            last = index == len(collection) - 1
            lines.extend(self._render_shape(shape, depth=1, last=last))
        lines.append("}")
        return "\n".join(lines) + "\n"

    def _pad(self, depth: int) -> str:
        return self.config.indent * depth

    def _render_shape(self, shape: Shape, depth: int, last: bool) -> List[str]:
        pad = self._pad(depth)
        lines = [f"{pad}{{{shape.shape_id},  --{shape.name}"]

        inner = self._pad(depth + 1)
        lines.append(f"{inner}{{")
        for index, variant in enumerate(shape.scale_variants):
            last_variant = index == len(shape.scale_variants) - 1
            lines.extend(self._render_variant(variant, depth + 2, last_variant))
        if shape.launcher_radial is None:
            lines.append(f"{inner}}}")
        else:
            lines.append(f"{inner}}},")
            flag = "true" if shape.launcher_radial else "false"
            lines.append(f"{inner}launcher_radial={flag}")

        lines.append(f"{pad}}}" + ("" if last else ","))
        return lines

    def _render_variant(self, variant: ScaleVariant, depth: int, last: bool) -> List[str]:
        pad = self._pad(depth)
        inner = self._pad(depth + 1)
        item = self._pad(depth + 2)

        lines = [f"{pad}{{", f"{inner}verts={{"]
        for i, vertex in enumerate(variant.vertices):
            sep = "," if i < len(variant.vertices) - 1 else ""
            lines.append(f"{item}{{{format_number(vertex.x)}, {format_number(vertex.y)}}}{sep}")
        lines.append(f"{inner}}},")

        if not variant.ports:
            lines.append(f"{inner}ports={{}}")
        else:
            lines.append(f"{inner}ports={{")
            for i, port in enumerate(variant.ports):
                sep = "," if i < len(variant.ports) - 1 else ""
                lines.append(f"{item}{self._render_port(port)}{sep}")
            lines.append(f"{inner}}}")

        lines.append(f"{pad}}}" + ("" if last else ","))
        return lines

    @staticmethod
    def _render_port(port: Port) -> str:
        fields = [str(port.edge), format_number(port.position)]
        if port.port_type is not PortType.DEFAULT:
            fields.append(port.type_code)
        return "{" + ", ".join(fields) + "}"


def render(collection: ShapeCollection, config: Optional[EditorConfig] = None) -> str:
    """Render a collection as shapes file text. See ShapeSerializer.render."""
    return ShapeSerializer(config).render(collection)
