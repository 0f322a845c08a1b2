"""
Convex Decomposition - Global Configuration
All tolerances and settings in one place.
"""

from dataclasses import dataclass, field
import os

# Project paths
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
OUTPUT_DIR = os.path.join(PROJECT_ROOT, "output")


@dataclass
class TriangulatorConfig:
    """Ear clipping configuration."""
    # Polygon is degenerate when |area| <= area_tolerance * bbox_extent^2
    area_tolerance: float = 1e-12

    # Reject self-intersecting loops before clipping
    check_simple: bool = True


@dataclass
class MergerConfig:
    """Greedy triangle merging configuration."""
    # Physics engine limit for a single convex fixture
    max_vertices: int = 8


@dataclass
class VerifyConfig:
    """Post-decomposition verification."""
    enabled: bool = False
    area_rtol: float = 1e-9
    coverage_rtol: float = 1e-6
    check_overlaps: bool = True


@dataclass
class BatchConfig:
    """Batch processing configuration."""
    n_workers: int = None  # None / 1 = run in-process
    verbose: bool = True
    progress_bar: bool = True


@dataclass
class ExportConfig:
    """Fixture export settings."""
    force_ccw: bool = False
    indent: int = 2


@dataclass
class DecompositionConfig:
    """Master configuration combining all sub-configs."""
    triangulator: TriangulatorConfig = field(default_factory=TriangulatorConfig)
    merger: MergerConfig = field(default_factory=MergerConfig)
    verify: VerifyConfig = field(default_factory=VerifyConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


# Global configuration instance
CONFIG = DecompositionConfig()


def get_config(config: DecompositionConfig = None) -> DecompositionConfig:
    """Return the given config or the global default."""
    return config if config is not None else CONFIG
