"""
Utilities module - Visualization and fixture import/export.
"""

from .visualization import plot_outline, plot_decomposition, plot_result, plot_shape_file
from .shape_io import load_shapes, parse_shapes, save_fixtures, load_fixtures, validate_fixtures

__all__ = [
    'plot_outline',
    'plot_decomposition',
    'plot_result',
    'plot_shape_file',
    'load_shapes',
    'parse_shapes',
    'save_fixtures',
    'load_fixtures',
    'validate_fixtures',
]
