"""Polygon geometry helpers for shape variants."""

from typing import Sequence, Tuple

import numpy as np

from .shape import Port, ScaleVariant, Vertex

EPSILON = 1e-9


def vertex_array(vertices: Sequence[Vertex]) -> np.ndarray:
    """Get vertices as an (n, 2) float array."""
    return np.array([(v.x, v.y) for v in vertices], dtype=float).reshape(-1, 2)


def edge_endpoints(variant: ScaleVariant, edge: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Get the start and end points of an edge.

    Edge ``k`` runs from vertex ``k`` to vertex ``k + 1``, the last edge
    closing the polygon back to vertex 0.
    """
    if not 0 <= edge < variant.num_edges:
        raise IndexError(f"edge {edge} out of range")
    points = vertex_array(variant.vertices)
    return points[edge], points[(edge + 1) % len(points)]


def port_point(variant: ScaleVariant, port: Port) -> np.ndarray:
    """Get the point where a port sits on its edge."""
    start, end = edge_endpoints(variant, port.edge)
    return start + (end - start) * port.position


def signed_area(vertices: Sequence[Vertex]) -> float:
    """
    Get the signed polygon area (shoelace formula).

    Positive for counter-clockwise winding in a y-up coordinate system.
    """
    points = vertex_array(vertices)
    x, y = points[:, 0], points[:, 1]
    return float(0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def area(vertices: Sequence[Vertex]) -> float:
    return abs(signed_area(vertices))


def is_clockwise(vertices: Sequence[Vertex]) -> bool:
    return signed_area(vertices) < 0


def bounding_box(vertices: Sequence[Vertex]) -> Tuple[float, float, float, float]:
    """
    Get the axis-aligned bounds of a polygon.

    Returns:
        (min_x, min_y, max_x, max_y)
    """
    points = vertex_array(vertices)
    if len(points) == 0:
        raise ValueError("bounding_box of an empty polygon")
    min_x, min_y = points.min(axis=0)
    max_x, max_y = points.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


def round_to(value: float, step: float) -> float:
    """Round a value to the nearest multiple of ``step`` (halves away from zero)."""
    if abs(step) < EPSILON:
        return value
    scaled = value / step
    return float(step * np.sign(scaled) * np.floor(abs(scaled) + 0.5))


def snap_vertex(vertex: Vertex, step: float) -> Vertex:
    """Snap a vertex to a grid with spacing ``step``."""
    return Vertex(round_to(vertex.x, step), round_to(vertex.y, step))
