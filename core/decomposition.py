"""
Decomposition - Polygon to convex fixtures in one call.

    vertex loop -> validation -> Triangulator -> ConvexMerger -> convex pieces

Each stage is a pure transform over fresh arrays; independent polygons can be
decomposed concurrently.
"""

import time
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from config import DecompositionConfig, get_config
from .errors import DecompositionError, VerificationFailed
from .merger import ConvexMerger
from .polygon import Polygon, Triangle, total_area
from .triangulator import Triangulator
from .validation import validate_vertices, verify_decomposition


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class DecompositionResult:
    """Convex pieces of one polygon, plus what produced them."""
    polygons: List[Polygon]
    triangles: List[Triangle]
    source: np.ndarray          # (N, 2) validated input loop
    source_area: float          # signed, sign gives the winding

    @property
    def n_pieces(self) -> int:
        return len(self.polygons)

    @property
    def area(self) -> float:
        return total_area(self.polygons)

    @property
    def orientation(self) -> int:
        return 1 if self.source_area > 0 else -1

    def to_lists(self, force_ccw: bool = False) -> List[List[List[float]]]:
        """Pieces as nested [[x, y], ...] lists, optionally re-wound CCW."""
        pieces = []
        for piece in self.polygons:
            if force_ccw and piece.orientation < 0:
                piece = piece.reversed()
            pieces.append(piece.vertices.tolist())
        return pieces

    def to_dict(self, force_ccw: bool = False) -> Dict:
        return {
            'fixtures': self.to_lists(force_ccw),
            'triangles': len(self.triangles),
            'area': abs(self.source_area),
        }


@dataclass
class ShapeOutcome:
    """Result or error for one shape of a batch."""
    name: str
    result: Optional[DecompositionResult] = None
    error: Optional[DecompositionError] = None
    time_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# DECOMPOSER
# =============================================================================

class Decomposer:
    """
    Runs validation, ear clipping and greedy merging for one polygon at a time.

    Example:
        result = Decomposer().decompose([(0, 0), (4, 0), (4, 2), (2, 2), (2, 4), (0, 4)])
        result.n_pieces  # 2
    """

    def __init__(self, config: DecompositionConfig = None):
        self.config = get_config(config)
        self.triangulator = Triangulator(self.config.triangulator)
        self.merger = ConvexMerger(self.config.merger)

    def decompose(self, vertices) -> DecompositionResult:
        """
        Decompose a simple polygon into convex pieces.

        Raises:
            InvalidInput, DegeneratePolygon, TriangulationStuck: see errors
            VerificationFailed: only with verification enabled
        """
        source, area = validate_vertices(vertices, self.config.triangulator)
        orientation = 1 if area > 0 else -1

        triangles = self.triangulator.clip_ears(source, orientation)
        polygons = self.merger.merge_all(triangles)

        source.setflags(write=False)
        result = DecompositionResult(
            polygons=polygons,
            triangles=triangles,
            source=source,
            source_area=area,
        )

        if self.config.verify.enabled:
            issues = verify_decomposition(result, self.config.verify, self.config.merger)
            if issues:
                raise VerificationFailed(issues)

        return result

    def decompose_named(self, name: str, vertices) -> ShapeOutcome:
        """
        Decompose one shape of a batch, recording a failure instead of raising.

        Returns:
            ShapeOutcome with either the result or the DecompositionError
        """
        start_time = time.time()

        try:
            outcome = ShapeOutcome(name=name, result=self.decompose(vertices))
        except DecompositionError as e:
            outcome = ShapeOutcome(name=name, error=e)

        outcome.time_seconds = time.time() - start_time
        return outcome


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def decompose(vertices, config: DecompositionConfig = None) -> DecompositionResult:
    """
    Decompose a simple polygon into convex polygons of at most 8 vertices.

    Args:
        vertices: Sequence of (x, y) pairs in a single winding
        config: Decomposition settings (global CONFIG if None)

    Returns:
        DecompositionResult
    """
    return Decomposer(config).decompose(vertices)


def decompose_many(
    shapes: Union[Sequence, Dict[str, Sequence]],
    config: DecompositionConfig = None
) -> List[ShapeOutcome]:
    """
    Decompose several polygons in order, collecting failures per shape.

    Args:
        shapes: List of vertex loops, or dict name -> vertex loop

    Returns:
        One ShapeOutcome per shape, in input order
    """
    if isinstance(shapes, dict):
        items = list(shapes.items())
    else:
        items = [(str(i), verts) for i, verts in enumerate(shapes)]

    decomposer = Decomposer(config)
    return [decomposer.decompose_named(name, verts) for name, verts in items]
