"""
Runners module - Batch decomposition of many shapes.
"""

from .batch_runner import BatchDecomposer, decompose_shape, run_batch

__all__ = [
    'BatchDecomposer',
    'decompose_shape',
    'run_batch',
]
