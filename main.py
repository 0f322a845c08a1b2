#!/usr/bin/env python3
"""
CONVEX DECOMPOSITION - Polygon to physics fixtures

This is the MAIN ENTRY POINT for decomposing editor-authored polygons into
convex pieces a physics engine can use as collision fixtures.

Usage:
    python main.py --decompose shapes.json              # Decompose a shape file
    python main.py --decompose shapes.json --output fixtures.json
    python main.py --demo                               # Built-in sample shapes
    python main.py --visualize shapes.json --shape L    # Plot one shape

Pipeline:
    vertex loop -> ear clipping -> greedy merge -> convex pieces (3-8 vertices)
"""

import argparse
import os
import sys
import traceback
from dataclasses import replace

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)


# =============================================================================
# SAMPLE SHAPES
# =============================================================================

def demo_shapes() -> dict:
    """Small set of shapes covering convex, concave, clockwise and invalid input."""
    import numpy as np

    angles = np.linspace(0.0, 2.0 * np.pi, 20, endpoint=False)
    circle = [(float(np.cos(a)) * 5.0, float(np.sin(a)) * 5.0) for a in angles]

    star = []
    for i in range(10):
        r = 5.0 if i % 2 == 0 else 2.0
        a = np.pi / 2 + i * np.pi / 5
        star.append((float(r * np.cos(a)), float(r * np.sin(a))))

    return {
        'square': [(0, 0), (4, 0), (4, 4), (0, 4)],
        'L': [(0, 0), (4, 0), (4, 2), (2, 2), (2, 4), (0, 4)],
        'L_clockwise': [(0, 4), (2, 4), (2, 2), (4, 2), (4, 0), (0, 0)],
        'comb': [(0, 0), (6, 0), (6, 3), (5, 3), (5, 1), (4, 1), (4, 3),
                 (3, 3), (3, 1), (2, 1), (2, 3), (1, 3), (1, 1), (0, 1)],
        'star': star,
        'circle20': circle,
        'bow_tie': [(0, 0), (4, 4), (4, 0), (0, 2)],
        'collinear': [(0, 0), (1, 1), (2, 2)],
    }


# =============================================================================
# CONFIG
# =============================================================================

def build_config(args):
    """Apply command line overrides to the global config."""
    from config import CONFIG

    return replace(
        CONFIG,
        merger=replace(CONFIG.merger, max_vertices=args.max_vertices),
        verify=replace(CONFIG.verify, enabled=not args.no_verify),
        batch=replace(
            CONFIG.batch,
            n_workers=args.workers,
            verbose=not args.quiet,
            progress_bar=not args.quiet,
        ),
        export=replace(CONFIG.export, force_ccw=args.force_ccw),
    )


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_decompose(args) -> int:
    """Decompose every shape of a JSON file."""
    from runners.batch_runner import BatchDecomposer
    from utils.shape_io import load_shapes, save_fixtures

    config = build_config(args)
    shapes = load_shapes(args.decompose)

    runner = BatchDecomposer(config)
    outcomes = runner.run(shapes)

    if args.output:
        save_fixtures(outcomes, args.output, config.export, verbose=not args.quiet)
    elif not args.quiet:
        for name, outcome in outcomes.items():
            if outcome.ok:
                sizes = [p.n_vertices for p in outcome.result.polygons]
                print(f"  {name}: {outcome.result.n_pieces} pieces {sizes}")

    return 1 if runner.failures else 0


def cmd_demo(args) -> int:
    """Run the built-in sample shapes."""
    from runners.batch_runner import BatchDecomposer
    from utils.shape_io import save_fixtures

    config = build_config(args)
    runner = BatchDecomposer(config)
    outcomes = runner.run(demo_shapes())

    if not args.quiet:
        print("\n📐 Pieces per shape:")
        for name, outcome in outcomes.items():
            if outcome.ok:
                sizes = [p.n_vertices for p in outcome.result.polygons]
                print(f"   {name:12s}: {outcome.result.n_pieces} pieces, vertices {sizes}")
            else:
                print(f"   {name:12s}: {outcome.error.kind} (expected for this sample)")

    if args.output:
        save_fixtures(outcomes, args.output, config.export, verbose=not args.quiet)

    # Two samples are invalid on purpose
    return 0


def cmd_visualize(args) -> int:
    """Plot one shape's decomposition."""
    from core.decomposition import Decomposer
    from runners.batch_runner import describe_error
    from utils.shape_io import load_shapes
    from utils.visualization import plot_result

    config = build_config(args)
    shapes = load_shapes(args.visualize) if args.visualize != 'demo' else demo_shapes()

    name = args.shape if args.shape is not None else next(iter(shapes))
    if name not in shapes:
        print(f"\n❌ No shape named {name!r}. Available: {', '.join(shapes)}")
        return 1

    outcome = Decomposer(config).decompose_named(name, shapes[name])
    if not outcome.ok:
        print(f"\n❌ {describe_error(outcome)}")
        return 1
    result = outcome.result

    print(f"\n🎨 Visualizing {name}")
    print(f"   Pieces: {result.n_pieces}")
    print(f"   Triangles: {len(result.triangles)}")

    plot_result(result, save_path=args.save, show=args.save is None,
                title=name, show_indices=True)
    return 0


# =============================================================================
# MAIN
# =============================================================================

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Decompose simple polygons into convex physics fixtures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --decompose shapes.json --output fixtures.json
    python main.py --demo
    python main.py --visualize shapes.json --shape L --save L.png
    python main.py --visualize demo --shape comb
        """
    )

    # Commands
    cmd_group = parser.add_mutually_exclusive_group(required=True)
    cmd_group.add_argument('--decompose', type=str, metavar='PATH', help='Decompose a shape file')
    cmd_group.add_argument('--demo', action='store_true', help='Decompose built-in sample shapes')
    cmd_group.add_argument('--visualize', type=str, metavar='PATH', help='Plot a shape ("demo" for samples)')

    # Options
    parser.add_argument('--output', type=str, metavar='PATH', help='Write fixtures JSON')
    parser.add_argument('--shape', type=str, metavar='NAME', help='Shape to plot with --visualize')
    parser.add_argument('--save', type=str, metavar='PATH', help='Save visualization to file')
    parser.add_argument('--max-vertices', type=int, default=8, help='Vertex cap per piece')
    parser.add_argument('--workers', type=int, default=None, help='Number of parallel workers (0 = all CPUs)')
    parser.add_argument('--no-verify', action='store_true', help='Skip post-decomposition checks')
    parser.add_argument('--force-ccw', action='store_true', help='Export fixtures counter-clockwise')
    parser.add_argument('--quiet', action='store_true', help='Only report errors')

    args = parser.parse_args(argv)

    if args.max_vertices < 3:
        parser.error("--max-vertices must be at least 3")

    # Route to command
    try:
        if args.decompose:
            return cmd_decompose(args)
        elif args.demo:
            return cmd_demo(args)
        elif args.visualize:
            return cmd_visualize(args)

    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        return 1

    except Exception as e:
        print(f"\n❌ Error: {e}")
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
