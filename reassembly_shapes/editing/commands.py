"""Invertible edit commands for shape collections."""

from typing import Callable, List, Optional, Tuple

from ..shapes.shape import Port, ScaleVariant, Shape, ShapeCollection, Vertex
from .base import (
    CommandType,
    EditCommand,
    invariant_guard,
    locate_scale,
    locate_shape,
)


class AddShape(EditCommand):
    """Add a shape at ``index`` (default: at the end)."""

    def __init__(self, shape: Shape, index: Optional[int] = None):
        self.shape = shape
        self.index = index
        self._inserted_at: Optional[int] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.ADD_SHAPE

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        index = len(collection) if self.index is None else self.index
        with invariant_guard(f"add shape {self.shape.shape_id}"):
            result = collection.insert(index, self.shape)
        self._inserted_at = index
        return result

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return collection.remove(self._inserted_at)

    def describe(self) -> str:
        return f"Add shape {self.shape.shape_id}"


class RemoveShape(EditCommand):
    def __init__(self, shape_id: int):
        self.shape_id = shape_id
        self._removed: Optional[Tuple[int, Shape]] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.REMOVE_SHAPE

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        index, shape = locate_shape(collection, self.shape_id)
        self._removed = (index, shape)
        return collection.remove(index)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        index, shape = self._removed
        return collection.insert(index, shape)

    def describe(self) -> str:
        return f"Remove shape {self.shape_id}"


class _ShapeCommand(EditCommand):
    """Base for commands that replace one shape with an edited copy."""

    def __init__(self, shape_id: int):
        self.shape_id = shape_id

    def _edit(self, collection: ShapeCollection, edit: Callable[[Shape], Shape]) -> ShapeCollection:
        index, shape = locate_shape(collection, self.shape_id)
        with invariant_guard(self.describe()):
            return collection.replace(index, edit(shape))


class RenameShape(_ShapeCommand):
    def __init__(self, shape_id: int, name: str):
        super().__init__(shape_id)
        self.name = name
        self._old_name: Optional[str] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.RENAME_SHAPE

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def rename(shape: Shape) -> Shape:
            self._old_name = shape.name
            return shape.renamed(self.name)
        return self._edit(collection, rename)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit(collection, lambda shape: shape.renamed(self._old_name))

    def describe(self) -> str:
        return f"Rename shape {self.shape_id}"


class SetLauncherRadial(_ShapeCommand):
    """Set or clear (None) a shape's launcher_radial flag."""

    def __init__(self, shape_id: int, value: Optional[bool]):
        super().__init__(shape_id)
        self.value = value
        self._old_value: Optional[bool] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.SET_LAUNCHER_RADIAL

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def update(shape: Shape) -> Shape:
            self._old_value = shape.launcher_radial
            return shape.with_launcher_radial(self.value)
        return self._edit(collection, update)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit(collection, lambda shape: shape.with_launcher_radial(self._old_value))


class AddScaleVariant(_ShapeCommand):
    def __init__(self, shape_id: int, variant: ScaleVariant, index: Optional[int] = None):
        super().__init__(shape_id)
        self.variant = variant
        self.index = index
        self._inserted_at: Optional[int] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.ADD_SCALE_VARIANT

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def insert(shape: Shape) -> Shape:
            self._inserted_at = shape.num_scales if self.index is None else self.index
            return shape.insert_scale(self._inserted_at, self.variant)
        return self._edit(collection, insert)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit(collection, lambda shape: shape.remove_scale(self._inserted_at))


class RemoveScaleVariant(_ShapeCommand):
    """Remove a scale variant. A shape's last variant cannot be removed."""

    def __init__(self, shape_id: int, scale_index: int):
        super().__init__(shape_id)
        self.scale_index = scale_index
        self._removed: Optional[ScaleVariant] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.REMOVE_SCALE_VARIANT

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def remove(shape: Shape) -> Shape:
            self._removed = locate_scale(shape, self.scale_index)
            return shape.remove_scale(self.scale_index)
        return self._edit(collection, remove)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit(collection, lambda shape: shape.insert_scale(self.scale_index, self._removed))


class _VariantCommand(_ShapeCommand):
    """Base for commands that edit one scale variant of a shape."""

    def __init__(self, shape_id: int, scale_index: int):
        super().__init__(shape_id)
        self.scale_index = scale_index

    def _edit_variant(
        self, collection: ShapeCollection, edit: Callable[[ScaleVariant], ScaleVariant]
    ) -> ShapeCollection:
        def update(shape: Shape) -> Shape:
            variant = locate_scale(shape, self.scale_index)
            return shape.with_scale(self.scale_index, edit(variant))
        return self._edit(collection, update)


class AddVertex(_VariantCommand):
    """
    Insert a vertex before ``vertex_index`` (default: at the end).

    The edge being split keeps its ports, so the new vertex starts an edge
    with no ports and removing it again restores the variant exactly.
    """

    def __init__(self, shape_id: int, scale_index: int, vertex: Vertex, vertex_index: Optional[int] = None):
        super().__init__(shape_id, scale_index)
        self.vertex = vertex
        self.vertex_index = vertex_index
        self._inserted_at: Optional[int] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.ADD_VERTEX

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def insert(variant: ScaleVariant) -> ScaleVariant:
            self._inserted_at = variant.num_vertices if self.vertex_index is None else self.vertex_index
            return variant.insert_vertex(self._inserted_at, self.vertex)
        return self._edit_variant(collection, insert)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit_variant(collection, lambda variant: variant.remove_vertex(self._inserted_at)[0])


class RemoveVertex(_VariantCommand):
    """
    Remove a vertex, merging its two edges.

    Ports on the edge that started at the removed vertex are dropped and
    restored by revert at their original positions in the port list.
    """

    def __init__(self, shape_id: int, scale_index: int, vertex_index: int):
        super().__init__(shape_id, scale_index)
        self.vertex_index = vertex_index
        self._removed: Optional[Vertex] = None
        self._dropped_ports: List[Tuple[int, Port]] = []

    @property
    def command_type(self) -> CommandType:
        return CommandType.REMOVE_VERTEX

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def remove(variant: ScaleVariant) -> ScaleVariant:
            result, dropped = variant.remove_vertex(self.vertex_index)
            self._removed = variant.vertices[self.vertex_index]
            self._dropped_ports = dropped
            return result
        return self._edit_variant(collection, remove)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        def restore(variant: ScaleVariant) -> ScaleVariant:
            variant = variant.insert_vertex(self.vertex_index, self._removed)
            for port_index, port in self._dropped_ports:
                variant = variant.insert_port(port_index, port)
            return variant
        return self._edit_variant(collection, restore)


class MoveVertex(_VariantCommand):
    def __init__(self, shape_id: int, scale_index: int, vertex_index: int, vertex: Vertex):
        super().__init__(shape_id, scale_index)
        self.vertex_index = vertex_index
        self.vertex = vertex
        self._old: Optional[Vertex] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.MOVE_VERTEX

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def move(variant: ScaleVariant) -> ScaleVariant:
            result = variant.move_vertex(self.vertex_index, self.vertex)
            self._old = variant.vertices[self.vertex_index]
            return result
        return self._edit_variant(collection, move)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit_variant(collection, lambda variant: variant.move_vertex(self.vertex_index, self._old))


class AddPort(_VariantCommand):
    def __init__(self, shape_id: int, scale_index: int, port: Port, port_index: Optional[int] = None):
        super().__init__(shape_id, scale_index)
        self.port = port
        self.port_index = port_index
        self._inserted_at: Optional[int] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.ADD_PORT

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def insert(variant: ScaleVariant) -> ScaleVariant:
            self._inserted_at = len(variant.ports) if self.port_index is None else self.port_index
            return variant.insert_port(self._inserted_at, self.port)
        return self._edit_variant(collection, insert)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit_variant(collection, lambda variant: variant.remove_port(self._inserted_at))


class RemovePort(_VariantCommand):
    def __init__(self, shape_id: int, scale_index: int, port_index: int):
        super().__init__(shape_id, scale_index)
        self.port_index = port_index
        self._removed: Optional[Port] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.REMOVE_PORT

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def remove(variant: ScaleVariant) -> ScaleVariant:
            result = variant.remove_port(self.port_index)
            self._removed = variant.ports[self.port_index]
            return result
        return self._edit_variant(collection, remove)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit_variant(collection, lambda variant: variant.insert_port(self.port_index, self._removed))


class ModifyPort(_VariantCommand):
    """Replace a port (edge, position and type at once)."""

    def __init__(self, shape_id: int, scale_index: int, port_index: int, port: Port):
        super().__init__(shape_id, scale_index)
        self.port_index = port_index
        self.port = port
        self._old: Optional[Port] = None

    @property
    def command_type(self) -> CommandType:
        return CommandType.MODIFY_PORT

    def apply(self, collection: ShapeCollection) -> ShapeCollection:
        def modify(variant: ScaleVariant) -> ScaleVariant:
            result = variant.replace_port(self.port_index, self.port)
            self._old = variant.ports[self.port_index]
            return result
        return self._edit_variant(collection, modify)

    def revert(self, collection: ShapeCollection) -> ShapeCollection:
        return self._edit_variant(collection, lambda variant: variant.replace_port(self.port_index, self._old))

