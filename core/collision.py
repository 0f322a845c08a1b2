"""
Overlap Detection - Interior overlap tests between convex pieces.

Decomposition pieces must tile the input without overlapping. Pieces that
share an edge touch along it but do not overlap, so every test here reports
interior overlap only:
1. AABB pre-check - Ultra-fast bounding box filter
2. SAT (Separating Axis Theorem) - Exact for the convex pieces we emit
"""

import numpy as np
from numba import njit
from typing import List, Sequence, Tuple
import math

from .polygon import Polygon, get_bounds


# =============================================================================
# AXIS-ALIGNED BOUNDING BOX (AABB) CHECKS
# =============================================================================

@njit(cache=True)
def bounds_overlap(
    b1_min_x: float, b1_min_y: float, b1_max_x: float, b1_max_y: float,
    b2_min_x: float, b2_min_y: float, b2_max_x: float, b2_max_y: float
) -> bool:
    """
    Check if two AABBs overlap or touch.

    Returns True if overlapping, False if separated.
    """
    return not (
        b1_max_x < b2_min_x or b2_max_x < b1_min_x or
        b1_max_y < b2_min_y or b2_max_y < b1_min_y
    )


# =============================================================================
# SEPARATING AXIS THEOREM (SAT)
# =============================================================================

@njit(cache=True)
def project_polygon(vertices: np.ndarray, axis_x: float, axis_y: float) -> Tuple[float, float]:
    """
    Project polygon onto axis, return (min, max) projection.
    """
    min_proj = math.inf
    max_proj = -math.inf

    for i in range(len(vertices)):
        proj = vertices[i, 0] * axis_x + vertices[i, 1] * axis_y
        if proj < min_proj:
            min_proj = proj
        if proj > max_proj:
            max_proj = proj

    return min_proj, max_proj


@njit(cache=True)
def _separated_on_edges(verts1: np.ndarray, verts2: np.ndarray, eps: float) -> bool:
    """True if some edge normal of verts1 separates the two polygons."""
    n1 = len(verts1)
    for i in range(n1):
        edge_x = verts1[(i + 1) % n1, 0] - verts1[i, 0]
        edge_y = verts1[(i + 1) % n1, 1] - verts1[i, 1]

        axis_x = -edge_y
        axis_y = edge_x

        length = math.sqrt(axis_x * axis_x + axis_y * axis_y)
        if length <= 0.0:
            continue
        axis_x /= length
        axis_y /= length

        min1, max1 = project_polygon(verts1, axis_x, axis_y)
        min2, max2 = project_polygon(verts2, axis_x, axis_y)

        # Touching projections still separate the interiors
        if max1 <= min2 + eps or max2 <= min1 + eps:
            return True
    return False


@njit(cache=True)
def sat_overlap(verts1: np.ndarray, verts2: np.ndarray, eps: float) -> bool:
    """
    Check if the interiors of two convex polygons overlap.

    Returns True if overlapping, False if separated or only touching.
    """
    if _separated_on_edges(verts1, verts2, eps):
        return False
    if _separated_on_edges(verts2, verts1, eps):
        return False
    return True


# =============================================================================
# MAIN OVERLAP CHECKING FUNCTIONS
# =============================================================================

def overlap_tolerance(polygons: Sequence[Polygon], rtol: float = 1e-9) -> float:
    """Absolute touching tolerance scaled to the extent of the pieces."""
    if not polygons:
        return rtol
    stacked = np.vstack([p.vertices for p in polygons])
    extent = float(np.max(np.abs(stacked)))
    return rtol * max(1.0, extent)


def polygons_overlap(p1: Polygon, p2: Polygon, eps: float = 1e-9) -> bool:
    """
    Check if two convex polygons overlap in their interiors.

    Args:
        p1: First convex polygon
        p2: Second convex polygon
        eps: Projections closer than this count as touching

    Returns:
        True if overlapping, False otherwise
    """
    b1 = p1.bounds
    b2 = p2.bounds
    if not bounds_overlap(b1[0], b1[1], b1[2], b1[3], b2[0], b2[1], b2[2], b2[3]):
        return False
    return sat_overlap(p1.vertices, p2.vertices, eps)


def check_all_overlaps(
    polygons: Sequence[Polygon],
    eps: float = None
) -> List[Tuple[int, int]]:
    """
    Find ALL overlapping pairs of pieces.

    Args:
        polygons: Convex pieces
        eps: Touching tolerance (scaled to the pieces when None)

    Returns:
        List of (i, j) tuples for overlapping pairs
    """
    if eps is None:
        eps = overlap_tolerance(polygons)

    n = len(polygons)
    all_bounds = [get_bounds(p.vertices) for p in polygons]
    overlaps = []

    for i in range(n):
        for j in range(i + 1, n):
            b1 = all_bounds[i]
            b2 = all_bounds[j]
            if bounds_overlap(b1[0], b1[1], b1[2], b1[3], b2[0], b2[1], b2[2], b2[3]):
                if sat_overlap(polygons[i].vertices, polygons[j].vertices, eps):
                    overlaps.append((i, j))

    return overlaps
