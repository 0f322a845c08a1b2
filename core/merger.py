"""
Convex Merger - Greedy fusion of triangles into convex fixtures.

A single left-to-right pass keeps one growing accumulator. Each following
triangle is spliced onto it when they share exactly one edge and the result
stays convex within the vertex cap; otherwise the accumulator is emitted and
the triangle starts a new one.

The result depends on triangle order, so callers keep the triangulator's
emission order to get reproducible output.
"""

from typing import List, Optional, Sequence

from config import MergerConfig
from .polygon import Polygon


class ConvexMerger:
    """
    Greedy triangle merger.

    Example:
        merger = ConvexMerger(MergerConfig(max_vertices=8))
        pieces = merger.merge_all(triangles)
    """

    def __init__(self, config: MergerConfig = None):
        self.config = config or MergerConfig()

    def merge(self, current: Polygon, triangle: Polygon) -> Optional[Polygon]:
        """
        Try to grow `current` by one triangle.

        Returns:
            The merged polygon, or None if they do not share exactly one edge,
            the result would exceed the vertex cap, or it would not be convex
        """
        candidate = current.add(triangle)
        if candidate is None:
            return None
        if candidate.n_vertices > self.config.max_vertices:
            return None
        if not candidate.is_convex():
            return None
        return candidate

    def merge_all(self, triangles: Sequence[Polygon]) -> List[Polygon]:
        """
        Fuse a triangle sequence into convex polygons.

        Args:
            triangles: Triangles in emission order. Non-triangles pass
                through untouched.

        Returns:
            Convex polygons in emission order
        """
        if not triangles:
            return []

        pieces = []
        current = Polygon.from_triangle(triangles[0])

        for triangle in triangles[1:]:
            merged = self.merge(current, triangle)
            if merged is not None:
                current = merged
            else:
                pieces.append(current)
                current = Polygon.from_triangle(triangle)

        pieces.append(current)
        return pieces


def merge_triangles(triangles: Sequence[Polygon], max_vertices: int = 8) -> List[Polygon]:
    """Merge triangles into convex polygons of at most `max_vertices`."""
    return ConvexMerger(MergerConfig(max_vertices=max_vertices)).merge_all(triangles)
