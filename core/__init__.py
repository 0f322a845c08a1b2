"""
Core module - Polygon geometry, ear clipping, and convex merging.
"""

from .errors import (
    DecompositionError,
    InvalidInput,
    DegeneratePolygon,
    TriangulationStuck,
    VerificationFailed,
)

from .polygon import (
    Polygon,
    Triangle,
    signed_area,
    total_area,
)

from .triangulator import Triangulator, triangulate
from .merger import ConvexMerger, merge_triangles

from .decomposition import (
    Decomposer,
    DecompositionResult,
    ShapeOutcome,
    decompose,
    decompose_many,
)

from .validation import validate_vertices, verify_decomposition
from .collision import polygons_overlap, check_all_overlaps

__all__ = [
    'DecompositionError',
    'InvalidInput',
    'DegeneratePolygon',
    'TriangulationStuck',
    'VerificationFailed',
    'Polygon',
    'Triangle',
    'signed_area',
    'total_area',
    'Triangulator',
    'triangulate',
    'ConvexMerger',
    'merge_triangles',
    'Decomposer',
    'DecompositionResult',
    'ShapeOutcome',
    'decompose',
    'decompose_many',
    'validate_vertices',
    'verify_decomposition',
    'polygons_overlap',
    'check_all_overlaps',
]
