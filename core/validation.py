"""
Validation - Input checks before triangulation and output checks after.

Input checks reject loops the ear clipper cannot handle: too few vertices,
non-finite coordinates, repeated adjacent points, zero area and
self-intersections. Output checks re-derive every post-condition of a
decomposition from scratch and report what does not hold.
"""

import numpy as np
from shapely.geometry import LinearRing, LineString
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.ops import unary_union
from typing import List, Optional, Tuple

from config import TriangulatorConfig, VerifyConfig, MergerConfig
from .errors import InvalidInput, DegeneratePolygon
from .polygon import as_vertex_array, signed_area, get_bounds
from .collision import check_all_overlaps, overlap_tolerance


# =============================================================================
# INPUT VALIDATION
# =============================================================================

def find_duplicate_adjacent(vertices: np.ndarray) -> Optional[Tuple[int, int]]:
    """Return the first (i, i + 1) pair of identical neighbours, wrapping."""
    n = len(vertices)
    for i in range(n):
        j = (i + 1) % n
        if vertices[i, 0] == vertices[j, 0] and vertices[i, 1] == vertices[j, 1]:
            return i, j
    return None


def find_self_intersection(vertices: np.ndarray) -> Optional[Tuple[int, int]]:
    """
    Locate a pair of loop edges that intersect improperly.

    Edge i runs from vertex i to vertex i + 1. Adjacent edges may only share
    their common vertex; any other contact is reported.

    Returns:
        (i, j) edge indices, or None if the loop is simple
    """
    n = len(vertices)
    edges = [LineString([vertices[i], vertices[(i + 1) % n]]) for i in range(n)]

    for i in range(n):
        for j in range(i + 1, n):
            adjacent = (j == i + 1) or (i == 0 and j == n - 1)
            contact = edges[i].intersection(edges[j])
            if contact.is_empty:
                continue
            if adjacent and contact.geom_type == 'Point':
                continue
            return i, j
    return None


def is_degenerate_area(vertices: np.ndarray, area: float, tolerance: float) -> bool:
    """Area is negligible relative to the squared bounding-box extent."""
    min_x, min_y, max_x, max_y = get_bounds(vertices)
    extent = max(max_x - min_x, max_y - min_y)
    if extent <= 0.0:
        return True
    return abs(area) <= tolerance * extent * extent


def validate_vertices(
    vertices,
    config: TriangulatorConfig = None
) -> Tuple[np.ndarray, float]:
    """
    Validate a vertex loop before triangulation.

    Args:
        vertices: Sequence of (x, y) pairs, or (N, 2) array
        config: Tolerances (defaults to TriangulatorConfig())

    Returns:
        (vertices as a fresh (N, 2) float64 array, signed area)

    Raises:
        InvalidInput: fewer than 3 vertices, non-finite coordinates,
            duplicate adjacent vertices or a self-intersecting loop
        DegeneratePolygon: near-zero total signed area
    """
    cfg = config or TriangulatorConfig()
    verts = as_vertex_array(vertices)
    n = len(verts)

    if n < 3:
        raise InvalidInput(f"Polygon needs at least 3 vertices, got {n}", range(n))

    bad = np.flatnonzero(~np.isfinite(verts).all(axis=1))
    if len(bad) > 0:
        raise InvalidInput(f"Non-finite coordinates at vertices {bad.tolist()}", bad)

    duplicate = find_duplicate_adjacent(verts)
    if duplicate is not None:
        i, j = duplicate
        raise InvalidInput(
            f"Vertices {i} and {j} are identical: {tuple(verts[i])}", duplicate
        )

    # Area before simplicity: collinear loops fold back on themselves and
    # should be reported as degenerate, not self-intersecting
    area = signed_area(verts)
    if is_degenerate_area(verts, area, cfg.area_tolerance):
        raise DegeneratePolygon(f"Polygon area {area:.3g} is degenerate", range(n))

    if cfg.check_simple and not LinearRing(verts).is_simple:
        crossing = find_self_intersection(verts)
        if crossing is None:
            raise InvalidInput("Polygon loop is not simple")
        i, j = crossing
        raise InvalidInput(
            f"Edges {i}-{(i + 1) % n} and {j}-{(j + 1) % n} intersect",
            (i, (i + 1) % n, j, (j + 1) % n)
        )

    return verts, area


# =============================================================================
# OUTPUT VERIFICATION
# =============================================================================

def verify_decomposition(
    result,
    verify_config: VerifyConfig = None,
    merger_config: MergerConfig = None
) -> List[str]:
    """
    Check a DecompositionResult against its post-conditions.

    Args:
        result: DecompositionResult to check
        verify_config: Area tolerances
        merger_config: Vertex cap

    Returns:
        List of issues (empty if the decomposition is sound)
    """
    vcfg = verify_config or VerifyConfig()
    mcfg = merger_config or MergerConfig()

    issues = []
    source = result.source
    orientation = 1 if result.source_area > 0 else -1
    expected_area = abs(result.source_area)

    if len(result.triangles) != len(source) - 2:
        issues.append(
            f"Expected {len(source) - 2} triangles, got {len(result.triangles)}"
        )

    for i, tri in enumerate(result.triangles):
        if tri.orientation != orientation:
            issues.append(f"Triangle {i} has the wrong winding")

    for i, piece in enumerate(result.polygons):
        if not 3 <= piece.n_vertices <= mcfg.max_vertices:
            issues.append(
                f"Piece {i} has {piece.n_vertices} vertices "
                f"(allowed 3-{mcfg.max_vertices})"
            )
        if not piece.is_convex():
            issues.append(f"Piece {i} is not convex")
        if piece.orientation != orientation:
            issues.append(f"Piece {i} has the wrong winding")

    pieces_area = result.area
    if abs(pieces_area - expected_area) > vcfg.area_rtol * max(expected_area, 1.0):
        issues.append(
            f"Pieces cover area {pieces_area:.12g}, polygon has {expected_area:.12g}"
        )

    if vcfg.check_overlaps:
        eps = overlap_tolerance(result.polygons)
        for i, j in check_all_overlaps(result.polygons, eps)[:5]:
            issues.append(f"Pieces {i} and {j} overlap")

    union = unary_union([ShapelyPolygon(p.vertices) for p in result.polygons])
    outline = ShapelyPolygon(source)
    mismatch = union.symmetric_difference(outline).area
    if mismatch > vcfg.coverage_rtol * max(expected_area, 1.0):
        issues.append(f"Pieces differ from the polygon by area {mismatch:.3g}")

    return issues
