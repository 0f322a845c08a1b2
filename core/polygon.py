"""
Polygon geometry - Value types and Numba-accelerated predicates.

This module defines the Polygon and Triangle value types used by the
triangulator and the merger, plus the small numeric kernels they share:
signed area, turn direction, point-in-triangle, convexity and bounds.

Every polygon vertex carries a key. Two vertices are the same point for
merging purposes iff their keys are equal. The triangulator uses the index of
the vertex in the input loop as its key; polygons built straight from
coordinates use the exact (x, y) pair, which is bitwise coordinate equality.
"""

import numpy as np
from numba import njit
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidInput


# =============================================================================
# NUMBA KERNELS
# =============================================================================

@njit(cache=True)
def signed_area(vertices: np.ndarray) -> float:
    """
    Signed area via the shoelace formula. Positive => counter-clockwise.

    Coordinates are taken relative to the first vertex so that shapes far
    from the origin keep their precision.
    """
    n = len(vertices)
    x0 = vertices[0, 0]
    y0 = vertices[0, 1]
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += (vertices[i, 0] - x0) * (vertices[j, 1] - y0)
        area -= (vertices[j, 0] - x0) * (vertices[i, 1] - y0)
    return area / 2.0


@njit(cache=True)
def turn_cross(ax: float, ay: float, bx: float, by: float, cx: float, cy: float) -> float:
    """Cross product of the incoming edge (b - a) and outgoing edge (c - b)."""
    return (bx - ax) * (cy - by) - (cx - bx) * (by - ay)


@njit(cache=True)
def point_in_triangle(
    px: float, py: float,
    ax: float, ay: float,
    bx: float, by: float,
    cx: float, cy: float
) -> bool:
    """
    True if p lies inside triangle abc or on its boundary (either winding).

    Points on the line through an edge but beyond its ends are outside.
    """
    d1 = (bx - ax) * (py - ay) - (by - ay) * (px - ax)
    d2 = (cx - bx) * (py - by) - (cy - by) * (px - bx)
    d3 = (ax - cx) * (py - cy) - (ay - cy) * (px - cx)

    has_neg = d1 < 0.0 or d2 < 0.0 or d3 < 0.0
    has_pos = d1 > 0.0 or d2 > 0.0 or d3 > 0.0
    return not (has_neg and has_pos)


@njit(cache=True)
def is_convex_loop(vertices: np.ndarray) -> bool:
    """
    Check that every turn of the loop has the same strict sign.

    A zero cross product (collinear turn) counts as a mismatch, so loops with
    collinear vertices are never convex.
    """
    n = len(vertices)
    first_sign = 0
    for i in range(n):
        lower = n - 1 if i == 0 else i - 1
        upper = 0 if i == n - 1 else i + 1
        cross = turn_cross(
            vertices[lower, 0], vertices[lower, 1],
            vertices[i, 0], vertices[i, 1],
            vertices[upper, 0], vertices[upper, 1]
        )
        if cross > 0.0:
            sign = 1
        elif cross < 0.0:
            sign = -1
        else:
            return False

        if i == 0:
            first_sign = sign
        elif sign != first_sign:
            return False
    return True


@njit(cache=True)
def get_bounds(vertices: np.ndarray) -> Tuple[float, float, float, float]:
    """
    Get axis-aligned bounding box for vertices.

    Returns:
        (min_x, min_y, max_x, max_y)
    """
    min_x = vertices[0, 0]
    max_x = vertices[0, 0]
    min_y = vertices[0, 1]
    max_y = vertices[0, 1]

    for i in range(1, len(vertices)):
        x = vertices[i, 0]
        y = vertices[i, 1]

        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x

        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y

    return min_x, min_y, max_x, max_y


# =============================================================================
# HELPERS
# =============================================================================

def as_vertex_array(vertices) -> np.ndarray:
    """
    Copy arbitrary vertex input into a fresh (N, 2) float64 array.

    Raises:
        InvalidInput: if the input cannot be read as a list of (x, y) pairs
    """
    try:
        array = np.array(vertices, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Vertices must be a sequence of (x, y) pairs: {e}")

    if array.size == 0:
        return array.reshape(0, 2)
    if array.ndim != 2 or array.shape[1] != 2:
        raise InvalidInput(
            f"Vertices must have shape (N, 2), got {array.shape}"
        )
    return array


def orientation_of(area: float) -> int:
    """Sign of a signed area: +1 CCW, -1 CW, 0 degenerate."""
    if area > 0.0:
        return 1
    if area < 0.0:
        return -1
    return 0


# =============================================================================
# POLYGON
# =============================================================================

class Polygon:
    """
    Immutable closed loop of vertices in a single orientation.

    Attributes:
        vertices: Read-only (N, 2) float64 array, N >= 3
        keys: Per-vertex identity keys used to detect shared edges

    Polygons compare equal when their vertex coordinates are equal in order.
    """

    __slots__ = ['_vertices', '_keys']

    def __init__(self, vertices, keys: Optional[Iterable[Hashable]] = None):
        verts = as_vertex_array(vertices)
        if len(verts) < 3:
            raise InvalidInput(f"A polygon needs at least 3 vertices, got {len(verts)}")
        verts.setflags(write=False)

        if keys is None:
            keys = tuple((float(x), float(y)) for x, y in verts)
        else:
            keys = tuple(keys)
            if len(keys) != len(verts):
                raise InvalidInput(
                    f"Got {len(keys)} keys for {len(verts)} vertices"
                )

        self._vertices = verts
        self._keys = keys

    @classmethod
    def from_triangle(cls, triangle: 'Triangle') -> 'Polygon':
        """Copy a triangle's three vertices into a plain polygon."""
        return cls(triangle.vertices, triangle.keys)

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    @property
    def keys(self) -> Tuple[Hashable, ...]:
        return self._keys

    @property
    def n_vertices(self) -> int:
        return len(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    @property
    def signed_area(self) -> float:
        return signed_area(self._vertices)

    @property
    def area(self) -> float:
        return abs(signed_area(self._vertices))

    @property
    def orientation(self) -> int:
        """+1 for counter-clockwise, -1 for clockwise, 0 if degenerate."""
        return orientation_of(signed_area(self._vertices))

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return get_bounds(self._vertices)

    def is_convex(self) -> bool:
        """All turns share one strict sign; collinear turns fail."""
        return is_convex_loop(self._vertices)

    def add(self, triangle: 'Polygon') -> Optional['Polygon']:
        """
        Try to splice a triangle onto this polygon along one shared edge.

        The triangle's tip vertex (the one off the shared edge) is inserted
        right after the first shared vertex. Neither polygon is modified.

        Returns:
            The grown polygon, or None if the argument is not a triangle or
            does not share exactly one edge with this polygon. Convexity and
            the vertex cap are left to the caller.
        """
        if triangle.n_vertices != 3:
            return None

        tri_keys = triangle.keys
        matches = []
        for i, key in enumerate(self._keys):
            for j in range(3):
                if key == tri_keys[j]:
                    matches.append((i, j))
                    break

        if len(matches) != 2:
            return None

        (first_p, first_t), (second_p, second_t) = matches
        if first_t == second_t:
            return None

        n = self.n_vertices
        if first_p == 0 and second_p == n - 1:
            # Shared edge is the closing edge of the loop
            first_p, second_p = second_p, first_p
        elif second_p != first_p + 1:
            return None

        tip_t = 3 - first_t - second_t

        vertices = np.insert(self._vertices, first_p + 1, triangle.vertices[tip_t], axis=0)
        keys = self._keys[:first_p + 1] + (tri_keys[tip_t],) + self._keys[first_p + 1:]
        return Polygon(vertices, keys)

    def reversed(self) -> 'Polygon':
        """Same loop in the opposite winding."""
        return Polygon(self._vertices[::-1], self._keys[::-1])

    def same_vertex_set(self, other: 'Polygon') -> bool:
        """True if both polygons use exactly the same coordinates, in any order."""
        mine = sorted(map(tuple, self._vertices.tolist()))
        theirs = sorted(map(tuple, other.vertices.tolist()))
        return mine == theirs

    def to_list(self) -> List[Tuple[float, float]]:
        """Return vertices as a list of (x, y) tuples."""
        return [(float(x), float(y)) for x, y in self._vertices]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return np.array_equal(self._vertices, other.vertices)

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self.n_vertices}, vertices={self.to_list()})"


class Triangle(Polygon):
    """Polygon with exactly three vertices, as emitted by ear clipping."""

    __slots__ = []

    def __init__(self, vertices, keys: Optional[Iterable[Hashable]] = None):
        super().__init__(vertices, keys)
        if self.n_vertices != 3:
            raise InvalidInput(f"A triangle has 3 vertices, got {self.n_vertices}")


def total_area(polygons: Sequence[Polygon]) -> float:
    """Sum of unsigned areas."""
    return float(sum(p.area for p in polygons))
