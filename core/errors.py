"""
Decomposition errors.

Every error is terminal for the polygon being processed. Callers decide
whether to skip the shape, report it, or abort the whole operation.
"""

from typing import Iterable, Tuple


class DecompositionError(Exception):
    """Base class for all decomposition failures."""

    kind = "DecompositionError"

    def __init__(self, message: str, indices: Iterable[int] = ()):
        super().__init__(message)
        self.indices: Tuple[int, ...] = tuple(int(i) for i in indices)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'message': str(self),
            'indices': list(self.indices),
        }

    def __reduce__(self):
        return type(self), (str(self), self.indices)


class InvalidInput(DecompositionError, ValueError):
    """Too few vertices, duplicate adjacent vertices, or a non-simple loop."""
    kind = "InvalidInput"


class DegeneratePolygon(DecompositionError):
    """Total signed area is (nearly) zero."""
    kind = "DegeneratePolygon"


class TriangulationStuck(DecompositionError):
    """Ear clipping found no valid ear with more than 3 vertices left."""
    kind = "TriangulationStuck"


class VerificationFailed(DecompositionError):
    """Decomposition output broke one of its post-conditions."""
    kind = "VerificationFailed"

    def __init__(self, issues):
        self.issues = list(issues)
        super().__init__("; ".join(self.issues) or "verification failed")

    def __reduce__(self):
        return type(self), (self.issues,)
