"""
Triangulator - Ear clipping for simple polygons.

Each pass scans the remaining loop in ascending order for the first ear:
three consecutive vertices (prev, cur, next) that turn with the polygon's
orientation and whose triangle holds no other remaining vertex, inside or
on its boundary. The ear is emitted, cur is dropped from the loop, and the
scan starts over until three vertices remain.

Triangles keep the input's winding and carry the input indices of their
vertices as keys, so the merger can find shared edges by index.
"""

import numpy as np
from numba import njit
from typing import List

from config import TriangulatorConfig
from .errors import TriangulationStuck
from .polygon import Triangle, turn_cross, point_in_triangle, orientation_of
from .validation import validate_vertices


# =============================================================================
# NUMBA KERNELS
# =============================================================================

@njit(cache=True)
def find_ear(vertices: np.ndarray, remaining: np.ndarray, orientation: int) -> int:
    """
    Find the first ear of the remaining loop.

    Args:
        vertices: (N, 2) input vertices
        remaining: Input indices still in the loop, in loop order
        orientation: +1 for a CCW polygon, -1 for CW

    Returns:
        Position in `remaining` of the ear tip, or -1 if there is none
    """
    m = len(remaining)
    for k in range(m):
        i_prev = remaining[k - 1] if k > 0 else remaining[m - 1]
        i_cur = remaining[k]
        i_next = remaining[k + 1] if k < m - 1 else remaining[0]

        ax = vertices[i_prev, 0]
        ay = vertices[i_prev, 1]
        bx = vertices[i_cur, 0]
        by = vertices[i_cur, 1]
        cx = vertices[i_next, 0]
        cy = vertices[i_next, 1]

        # Reflex or collinear corner
        if turn_cross(ax, ay, bx, by, cx, cy) * orientation <= 0.0:
            continue

        is_ear = True
        for other in range(m):
            idx = remaining[other]
            if idx == i_prev or idx == i_cur or idx == i_next:
                continue
            px = vertices[idx, 0]
            py = vertices[idx, 1]
            # A vertex touching the ear also blocks it, unless it sits on a corner
            if (px == ax and py == ay) or (px == bx and py == by) or (px == cx and py == cy):
                continue
            if point_in_triangle(px, py, ax, ay, bx, by, cx, cy):
                is_ear = False
                break

        if is_ear:
            return k

    return -1


# =============================================================================
# TRIANGULATOR
# =============================================================================

class Triangulator:
    """
    Ear clipping triangulator.

    Example:
        triangles = Triangulator().triangulate([(0, 0), (4, 0), (4, 4), (0, 4)])
        len(triangles)  # 2
    """

    def __init__(self, config: TriangulatorConfig = None):
        self.config = config or TriangulatorConfig()

    def triangulate(self, vertices) -> List[Triangle]:
        """
        Triangulate a simple polygon into N - 2 triangles.

        Args:
            vertices: Sequence of (x, y) pairs in a single winding

        Returns:
            Triangles in emission order

        Raises:
            InvalidInput: malformed or self-intersecting loop
            DegeneratePolygon: near-zero area
            TriangulationStuck: no ear found (corrupt winding or non-simple)
        """
        verts, area = validate_vertices(vertices, self.config)
        return self.clip_ears(verts, orientation_of(area))

    def clip_ears(self, vertices: np.ndarray, orientation: int) -> List[Triangle]:
        """Run ear clipping on an already validated (N, 2) array."""
        remaining = np.arange(len(vertices), dtype=np.int64)
        triangles = []

        while len(remaining) > 3:
            k = find_ear(vertices, remaining, orientation)
            if k < 0:
                raise TriangulationStuck(
                    f"No ear found among {len(remaining)} remaining vertices",
                    remaining
                )

            m = len(remaining)
            ear = (remaining[(k - 1) % m], remaining[k], remaining[(k + 1) % m])
            triangles.append(self._make_triangle(vertices, ear))
            remaining = np.delete(remaining, k)

        last = tuple(remaining)
        a, b, c = (vertices[i] for i in last)
        if turn_cross(a[0], a[1], b[0], b[1], c[0], c[1]) * orientation <= 0.0:
            raise TriangulationStuck(
                f"Final vertices {[int(i) for i in last]} do not form a valid triangle", last
            )
        triangles.append(self._make_triangle(vertices, last))

        return triangles

    @staticmethod
    def _make_triangle(vertices: np.ndarray, indices) -> Triangle:
        indices = [int(i) for i in indices]
        return Triangle(vertices[indices], keys=indices)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def triangulate(vertices, config: TriangulatorConfig = None) -> List[Triangle]:
    """
    Triangulate a simple polygon with ear clipping.

    Args:
        vertices: Sequence of (x, y) pairs
        config: Triangulator settings

    Returns:
        List of N - 2 triangles
    """
    return Triangulator(config).triangulate(vertices)
