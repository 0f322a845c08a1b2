"""
Batch Runner - Decompose many shapes, in parallel when asked.

Each shape is an independent job:
1. Shapes are validated, triangulated and merged on their own
2. A failing shape is reported (error kind + vertex indices) and skipped
3. The rest of the batch keeps going
4. A summary covers pieces, triangles, failures and time

Parallelization:
- n_workers > 1 uses ProcessPoolExecutor, one job per shape
- n_workers None / 1 runs in-process, in input order
"""

import time
import numpy as np
from dataclasses import replace
from concurrent.futures import ProcessPoolExecutor, as_completed
from multiprocessing import cpu_count
from typing import Dict, List, Sequence, Tuple, Union
from tqdm import tqdm

from config import DecompositionConfig, get_config
from core.decomposition import Decomposer, ShapeOutcome
from core.errors import DecompositionError


# =============================================================================
# SINGLE SHAPE WORKER
# =============================================================================

def decompose_shape(args: Tuple) -> ShapeOutcome:
    """
    Decompose a single named shape.

    This function is called by the process pool worker.

    Args:
        args: (name, vertices, config)

    Returns:
        ShapeOutcome with either a result or the decomposition error
    """
    name, vertices, config = args
    return Decomposer(config).decompose_named(name, vertices)


def describe_error(outcome: ShapeOutcome) -> str:
    """One-line report for a failed shape."""
    error = outcome.error
    where = f" at vertices {list(error.indices)}" if error.indices else ""
    return f"{outcome.name}: {error.kind}{where}: {error}"


# =============================================================================
# BATCH DECOMPOSER
# =============================================================================

class BatchDecomposer:
    """
    Decomposes a collection of shapes and collects per-shape outcomes.

    Example:
        runner = BatchDecomposer()
        outcomes = runner.run({'square': [(0, 0), (4, 0), (4, 4), (0, 4)]})
        runner.print_summary()
    """

    def __init__(self, config: DecompositionConfig = None):
        self.config = get_config(config)
        self.outcomes: Dict[str, ShapeOutcome] = {}
        self.start_time = None
        self.elapsed = 0.0

    @property
    def n_workers(self) -> int:
        n = self.config.batch.n_workers
        if n is None:
            return 1
        if n <= 0:
            return cpu_count()
        return n

    def run(self, shapes: Union[Sequence, Dict[str, Sequence]]) -> Dict[str, ShapeOutcome]:
        """
        Decompose every shape.

        Args:
            shapes: Dict name -> vertex loop, or a list of vertex loops
                (named by their position)

        Returns:
            Dict mapping name -> ShapeOutcome, in input order
        """
        cfg = self.config.batch
        self.start_time = time.time()

        if isinstance(shapes, dict):
            items = [(str(name), verts) for name, verts in shapes.items()]
        else:
            items = [(str(i), verts) for i, verts in enumerate(shapes)]

        if cfg.verbose:
            print(f"\n{'='*70}")
            print(f"  CONVEX DECOMPOSITION")
            print(f"{'='*70}")
            print(f"  Shapes: {len(items)}")
            print(f"  Workers: {self.n_workers}")
            print(f"  Max vertices per piece: {self.config.merger.max_vertices}")
            print(f"{'='*70}")

        tasks = [(name, verts, self.config) for name, verts in items]
        collected: Dict[str, ShapeOutcome] = {}

        pbar = None
        if cfg.progress_bar and tasks:
            pbar = tqdm(total=len(tasks), desc="Decomposing", disable=not cfg.verbose)

        if self.n_workers > 1 and len(tasks) > 1:
            with ProcessPoolExecutor(max_workers=self.n_workers) as executor:
                future_to_name = {
                    executor.submit(decompose_shape, task): task[0]
                    for task in tasks
                }
                for future in as_completed(future_to_name):
                    self._collect(future.result(), collected, pbar)
        else:
            for task in tasks:
                self._collect(decompose_shape(task), collected, pbar)

        if pbar is not None:
            pbar.close()

        # Keep input order regardless of completion order
        self.outcomes = {name: collected[name] for name, _ in items}
        self.elapsed = time.time() - self.start_time

        if cfg.verbose:
            self.print_summary()

        return self.outcomes

    def _collect(self, outcome: ShapeOutcome, collected: Dict[str, ShapeOutcome], pbar):
        collected[outcome.name] = outcome

        if not outcome.ok and self.config.batch.verbose:
            message = f"  ❌ {describe_error(outcome)}"
            if pbar is not None:
                pbar.write(message)
            else:
                print(message)

        if pbar is not None:
            pbar.update(1)
            pbar.set_postfix({'shape': outcome.name, 'failed': len(self.failed_names(collected))})

    @staticmethod
    def failed_names(outcomes: Dict[str, ShapeOutcome]) -> List[str]:
        return [name for name, o in outcomes.items() if not o.ok]

    @property
    def failures(self) -> Dict[str, DecompositionError]:
        return {name: o.error for name, o in self.outcomes.items() if not o.ok}

    @property
    def results(self) -> Dict:
        return {name: o.result for name, o in self.outcomes.items() if o.ok}

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        if not self.outcomes:
            return {}

        ok = [o for o in self.outcomes.values() if o.ok]
        pieces = [o.result.n_pieces for o in ok]
        sizes = [p.n_vertices for o in ok for p in o.result.polygons]

        return {
            'n_shapes': len(self.outcomes),
            'n_ok': len(ok),
            'n_failed': len(self.outcomes) - len(ok),
            'total_pieces': int(sum(pieces)),
            'total_triangles': int(sum(len(o.result.triangles) for o in ok)),
            'avg_piece_vertices': float(np.mean(sizes)) if sizes else 0.0,
            'total_time': self.elapsed,
        }

    def print_summary(self):
        summary = self.get_summary()
        if not summary:
            print("\n  No shapes processed")
            return

        print(f"\n{'='*70}")
        print(f"  ✅ DECOMPOSITION COMPLETE")
        print(f"     Shapes: {summary['n_ok']}/{summary['n_shapes']} ok")
        print(f"     Pieces: {summary['total_pieces']} "
              f"(from {summary['total_triangles']} triangles)")
        print(f"     Avg vertices per piece: {summary['avg_piece_vertices']:.2f}")
        print(f"     Time: {summary['total_time']:.2f}s")
        if summary['n_failed']:
            print(f"     ⚠️  Failed: {summary['n_failed']}")
            for name in self.failed_names(self.outcomes):
                print(f"       - {describe_error(self.outcomes[name])}")
        print(f"{'='*70}")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def run_batch(
    shapes: Union[Sequence, Dict[str, Sequence]],
    n_workers: int = None,
    verbose: bool = True
) -> Dict[str, ShapeOutcome]:
    """
    Decompose a batch of shapes with the global config.

    Args:
        shapes: Dict name -> vertex loop, or list of vertex loops
        n_workers: Process count (None = in-process)
        verbose: Print progress and summary

    Returns:
        Dict mapping name -> ShapeOutcome
    """
    base = get_config()
    config = replace(
        base,
        batch=replace(base.batch, n_workers=n_workers, verbose=verbose, progress_bar=verbose),
    )
    return BatchDecomposer(config).run(shapes)
