"""Build typed shape collections from parsed literal value trees."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from ..config import DEFAULT_CONFIG, EditorConfig
from ..literal import Identifier, Number, Table, TableEntry, Value, parse
from ..literal.values import describe
from .errors import InvariantViolation, SchemaError, SchemaErrorKind, ShapeWarning, WarningKind
from .shape import Port, PortType, ScaleVariant, Shape, ShapeCollection, Vertex

logger = logging.getLogger(__name__)

LAUNCHER_RADIAL_KEY = "launcher_radial"


@dataclass
class _VariantDraft:
    """Raw contents of one scale-variant table."""
    vertices: List[Tuple[float, float]] = field(default_factory=list)
    ports: List[Tuple[Union[int, float], float, Optional[str]]] = field(default_factory=list)


@dataclass
class _ShapeDraft:
    """Raw contents of one shape entry, before invariants are checked."""
    position: int
    line: int
    shape_id: Union[int, float]
    name: str
    variants: List[_VariantDraft] = field(default_factory=list)
    launcher_radial: Optional[bool] = None


def _as_number(value: Number) -> Union[int, float]:
    """Get a number as int when it is integral, so integer checks can apply."""
    if value.is_integral():
        return int(value.value)
    return value.value


def _first_line(comment: Optional[str]) -> Optional[str]:
    if comment is None:
        return None
    for line in comment.splitlines():
        if line.strip():
            return line.strip()
    return None


class ShapeModelBuilder:
    """
    Turns the value tree of a shapes file into a ShapeCollection.

    A shapes file is a table of shape entries:

        {
          {101,  --Name
            { {verts={...}, ports={...}}, ... },
            launcher_radial=true
          },
          ...
        }

    Building runs in two phases. The first walks the tree and extracts a
    draft of every shape, failing on entries of the wrong kind. The second
    constructs the model objects in file order, which checks the shape
    invariants; the first violation aborts the whole build.
    """

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._warnings: List[ShapeWarning] = []

    def build(self, value: Value) -> Tuple[ShapeCollection, List[ShapeWarning]]:
        """
        Build a shape collection.

        Args:
            value: The parsed document

        Returns:
            A tuple of (collection, warnings)

        Raises:
            SchemaError: If the tree does not describe a valid collection
        """
        self._warnings = []
        if not isinstance(value, Table):
            raise SchemaError(
                SchemaErrorKind.INVALID_STRUCTURE,
                f"the document must be a table of shapes, got {describe(value)}",
            )

        drafts = []
        for position, entry in enumerate(value.entries):
            if not entry.is_positional:
                self._warn(
                    WarningKind.IGNORED_FIELD,
                    f"top-level entry {entry.key!r} is not a shape and will not be kept",
                    field=str(entry.key),
                )
                continue
            drafts.append(self._extract_shape(entry, position))

        shapes = self._assemble(drafts)
        collection = ShapeCollection(shapes)
        logger.debug(
            f"Built {len(collection)} shape(s) with {len(self._warnings)} warning(s)"
        )
        return collection, list(self._warnings)

    def _warn(
        self,
        kind: WarningKind,
        message: str,
        shape_id: Optional[int] = None,
        field: Optional[str] = None,
        text: Optional[str] = None,
    ) -> None:
        warning = ShapeWarning(kind, message, shape_id=shape_id, field=field, text=text)
        logger.warning(str(warning))
        self._warnings.append(warning)

    # -- phase 1: structure --------------------------------------------

    def _extract_shape(self, entry: TableEntry, position: int) -> _ShapeDraft:
        def fail(kind: SchemaErrorKind, detail: str, shape_id=None, field=None):
            return SchemaError(
                kind, detail, shape_id=shape_id, field=field,
                positions=(position,), lines=(entry.line,) if entry.line else (),
            )

        table = entry.value
        if not isinstance(table, Table):
            raise fail(
                SchemaErrorKind.INVALID_STRUCTURE,
                f"a shape entry must be a table, got {describe(table)}",
            )

        positional = table.positional()
        if not positional:
            raise fail(SchemaErrorKind.INVALID_ID, "shape entry has no id", field="id")
        id_entry = positional[0]
        if not isinstance(id_entry.value, Number):
            raise fail(
                SchemaErrorKind.INVALID_ID,
                f"shape id must be a number, got {describe(id_entry.value)}",
                field="id",
            )
        shape_id = _as_number(id_entry.value)
        known_id = shape_id if isinstance(shape_id, int) and shape_id >= 0 else None

        name = _first_line(id_entry.comment) or _first_line(entry.comment)
        if name is None:
            name = self.config.default_name(shape_id)

        draft = _ShapeDraft(position=position, line=entry.line, shape_id=shape_id, name=name)

        if len(positional) < 2:
            raise fail(
                SchemaErrorKind.NO_SCALE_VARIANTS,
                "shape entry has no scale table",
                shape_id=known_id, field="scales",
            )
        scales = positional[1].value
        if not isinstance(scales, Table):
            raise fail(
                SchemaErrorKind.INVALID_STRUCTURE,
                f"scale list must be a table, got {describe(scales)}",
                shape_id=known_id, field="scales",
            )

        for extra in positional[2:]:
            if isinstance(extra.value, Identifier) and extra.value.name == LAUNCHER_RADIAL_KEY:
                draft.launcher_radial = True
            else:
                self._warn(
                    WarningKind.IGNORED_FIELD,
                    f"unexpected {describe(extra.value)} will not be kept",
                    shape_id=known_id,
                )

        for keyed in table.keyed():
            if keyed.key == LAUNCHER_RADIAL_KEY:
                flag = self._read_flag(keyed.value)
                if flag is None:
                    raise fail(
                        SchemaErrorKind.INVALID_STRUCTURE,
                        f"launcher_radial must be true or false, got {describe(keyed.value)}",
                        shape_id=known_id, field=LAUNCHER_RADIAL_KEY,
                    )
                draft.launcher_radial = flag
            else:
                self._warn(
                    WarningKind.IGNORED_FIELD,
                    f"unknown field {keyed.key!r} will not be kept",
                    shape_id=known_id, field=str(keyed.key),
                )

        for index, scale_entry in enumerate(scales.entries):
            path = f"scales[{index}]"
            if not scale_entry.is_positional or not isinstance(scale_entry.value, Table):
                raise fail(
                    SchemaErrorKind.INVALID_STRUCTURE,
                    f"a scale variant must be a table, got {describe(scale_entry.value)}",
                    shape_id=known_id, field=path,
                )
            try:
                draft.variants.append(self._extract_variant(scale_entry.value, path, known_id))
            except InvariantViolation as e:
                raise SchemaError.from_violation(e, known_id, position, entry.line)

        return draft

    @staticmethod
    def _read_flag(value: Value) -> Optional[bool]:
        if isinstance(value, Identifier) and value.name in ("true", "false"):
            return value.name == "true"
        if isinstance(value, Number) and value.value in (0, 1):
            return value.value == 1
        return None

    def _extract_variant(self, table: Table, path: str, shape_id: Optional[int]) -> _VariantDraft:
        """Extract verts/ports of one scale table. Structural problems raise InvariantViolation."""
        draft = _VariantDraft()

        verts = table.get("verts")
        if verts is None:
            raise InvariantViolation(
                SchemaErrorKind.MISSING_VERTS, f"{path}.verts", "scale variant has no verts table"
            )
        if not isinstance(verts, Table):
            raise InvariantViolation(
                SchemaErrorKind.INVALID_STRUCTURE, f"{path}.verts",
                f"verts must be a table, got {describe(verts)}",
            )
        for i, vert in enumerate(verts.values()):
            pair = vert.values() if isinstance(vert, Table) else []
            if len(pair) != 2 or not all(isinstance(v, Number) for v in pair):
                raise InvariantViolation(
                    SchemaErrorKind.INVALID_VERTEX, f"{path}.verts[{i}]",
                    f"a vertex must be a pair of numbers, got {describe(vert)}",
                )
            draft.vertices.append((pair[0].value, pair[1].value))

        ports = table.get("ports")
        if ports is not None and not isinstance(ports, Table):
            raise InvariantViolation(
                SchemaErrorKind.INVALID_STRUCTURE, f"{path}.ports",
                f"ports must be a table, got {describe(ports)}",
            )
        for i, port in enumerate(ports.values() if ports is not None else []):
            items = port.values() if isinstance(port, Table) else []
            if (
                len(items) not in (2, 3)
                or not isinstance(items[0], Number)
                or not isinstance(items[1], Number)
                or (len(items) == 3 and not isinstance(items[2], Identifier))
            ):
                raise InvariantViolation(
                    SchemaErrorKind.INVALID_PORT, f"{path}.ports[{i}]",
                    "a port must be {edge, position[, TYPE]}, "
                    f"got {describe(port)}",
                )
            code = items[2].name if len(items) == 3 else None
            draft.ports.append((_as_number(items[0]), items[1].value, code))

        for entry in table.entries:
            if entry.key not in ("verts", "ports"):
                label = describe(entry.value) if entry.is_positional else entry.key
                self._warn(
                    WarningKind.IGNORED_FIELD,
                    f"{label!s} in a scale variant will not be kept",
                    shape_id=shape_id, field=path,
                )

        return draft

    # -- phase 2: invariants -------------------------------------------

    def _assemble(self, drafts: List[_ShapeDraft]) -> List[Shape]:
        shapes = []
        seen: Dict[int, _ShapeDraft] = {}

        for draft in drafts:
            try:
                shape = self._make_shape(draft)
            except InvariantViolation as e:
                shape_id = draft.shape_id
                if not isinstance(shape_id, int) or shape_id < 0:
                    shape_id = None
                raise SchemaError.from_violation(e, shape_id, draft.position, draft.line)

            first = seen.get(shape.shape_id)
            if first is not None:
                raise SchemaError(
                    SchemaErrorKind.DUPLICATE_ID,
                    f"shape id {shape.shape_id} is used by the entries at positions "
                    f"{first.position} and {draft.position}",
                    shape_id=shape.shape_id,
                    field="id",
                    positions=(first.position, draft.position),
                    lines=(first.line, draft.line),
                )
            seen[shape.shape_id] = draft
            shapes.append(shape)

        return shapes

    def _make_shape(self, draft: _ShapeDraft) -> Shape:
        variants = []
        for index, variant in enumerate(draft.variants):
            path = f"scales[{index}]"
            vertices = []
            for i, (x, y) in enumerate(variant.vertices):
                try:
                    vertices.append(Vertex(x, y))
                except InvariantViolation as e:
                    raise e.prefixed(f"{path}.verts[{i}]")

            ports = []
            for i, (edge, position, code) in enumerate(variant.ports):
                try:
                    port = Port.from_code(edge, position, code)
                except InvariantViolation as e:
                    raise e.prefixed(f"{path}.ports[{i}]")
                if port.port_type is PortType.UNKNOWN:
                    self._warn(
                        WarningKind.UNKNOWN_PORT_TYPE,
                        f"unknown port type {code}, kept as written",
                        shape_id=draft.shape_id, field=f"{path}.ports[{i}]", text=code,
                    )
                ports.append(port)

            try:
                variants.append(ScaleVariant(vertices, ports))
            except InvariantViolation as e:
                raise e.prefixed(path)

        return Shape(draft.shape_id, draft.name, variants, draft.launcher_radial)


def build(value: Value, config: Optional[EditorConfig] = None) -> Tuple[ShapeCollection, List[ShapeWarning]]:
    """Build a shape collection from a parsed document. See ShapeModelBuilder.build."""
    return ShapeModelBuilder(config).build(value)


def parse_and_build(
    text: str, config: Optional[EditorConfig] = None
) -> Tuple[ShapeCollection, List[ShapeWarning]]:
    """
    Parse shapes file text and build its collection.

    Raises:
        ParseError: If the text is not a well-formed literal
        SchemaError: If the literal does not describe valid shapes
    """
    config = config or DEFAULT_CONFIG
    return ShapeModelBuilder(config).build(parse(text, config.max_parse_depth))
