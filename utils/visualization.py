"""
Visualization - Plotting outlines, triangulations and convex pieces.

Provides tools for debugging and understanding decompositions.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as MplPolygon
from matplotlib.collections import PatchCollection
from typing import Optional, Tuple


def plot_outline(vertices, ax=None, color='black', show_indices: bool = False):
    """
    Plot a polygon outline.

    Args:
        vertices: (N, 2) vertex loop
        ax: Matplotlib axes (creates new if None)
        color: Line color
        show_indices: Label each vertex with its index
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 8))

    verts = np.asarray(vertices, dtype=np.float64)
    closed = np.vstack([verts, verts[0]])

    ax.plot(closed[:, 0], closed[:, 1], color=color, linewidth=2)

    if show_indices:
        for i, (x, y) in enumerate(verts):
            ax.annotate(str(i), (x, y), textcoords='offset points', xytext=(4, 4), fontsize=8)

    ax.set_aspect('equal')
    return ax


def plot_decomposition(
    result,
    ax=None,
    title: str = None,
    show_triangles: bool = True,
    show_indices: bool = False,
    figsize: Tuple[int, int] = (10, 10)
):
    """
    Plot a decomposition: filled convex pieces over the input outline.

    Args:
        result: DecompositionResult
        ax: Matplotlib axes
        title: Plot title
        show_triangles: Draw the ear clipping diagonals
        show_indices: Label input vertices
        figsize: Figure size if creating new figure

    Returns:
        ax: Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)

    n = result.n_pieces
    cmap = plt.get_cmap('tab20')

    patches = []
    colors = []
    for i, piece in enumerate(result.polygons):
        patches.append(MplPolygon(piece.vertices, closed=True))
        colors.append(cmap(i % 20))

    collection = PatchCollection(
        patches,
        facecolors=colors,
        edgecolors='dimgray',
        linewidths=1.0,
        alpha=0.6
    )
    ax.add_collection(collection)

    if show_triangles:
        for tri in result.triangles:
            closed = np.vstack([tri.vertices, tri.vertices[0]])
            ax.plot(closed[:, 0], closed[:, 1], color='gray', linewidth=0.5, linestyle=':')

    plot_outline(result.source, ax=ax, show_indices=show_indices)

    min_x, min_y = result.source.min(axis=0)
    max_x, max_y = result.source.max(axis=0)
    padding = 0.05 * max(max_x - min_x, max_y - min_y)
    ax.set_xlim(min_x - padding, max_x + padding)
    ax.set_ylim(min_y - padding, max_y + padding)
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)

    if title is None:
        title = "Decomposition"
    title += f" | {n} pieces from {len(result.triangles)} triangles"
    title += f" | area {abs(result.source_area):.4g}"

    ax.set_title(title)
    ax.set_xlabel('x')
    ax.set_ylabel('y')

    return ax


def plot_result(
    result,
    save_path: Optional[str] = None,
    show: bool = True,
    **kwargs
):
    """
    Plot a decomposition and optionally save to file.

    Args:
        result: DecompositionResult
        save_path: Path to save figure (None = don't save)
        show: Open a window
        **kwargs: Passed to plot_decomposition
    """
    fig, ax = plt.subplots(1, 1, figsize=kwargs.pop('figsize', (10, 10)))
    plot_decomposition(result, ax=ax, **kwargs)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved figure to {save_path}")

    if show:
        plt.show()
    else:
        plt.close(fig)

    return fig


def plot_shape_file(
    filepath: str,
    names=None,
    config=None,
    save_path: Optional[str] = None,
    show: bool = True,
    cols: int = 3
):
    """
    Decompose the shapes of a JSON file and plot them side by side.

    Shapes that fail to decompose are drawn as bare outlines with the error
    kind in the title.

    Args:
        filepath: Shapes file (see utils.shape_io)
        names: Shapes to plot (all if None)
        config: DecompositionConfig
        save_path: Path to save figure (None = don't save)
        show: Open a window
        cols: Subplots per row
    """
    from core.decomposition import decompose_many
    from .shape_io import load_shapes

    shapes = load_shapes(filepath)
    if names is not None:
        shapes = {name: shapes[name] for name in names}

    outcomes = decompose_many(shapes, config)

    n = max(len(outcomes), 1)
    cols = min(cols, n)
    rows = (n + cols - 1) // cols
    fig, axes = plt.subplots(rows, cols, figsize=(5 * cols, 5 * rows), squeeze=False)

    for ax, outcome in zip(axes.flat, outcomes):
        if outcome.ok:
            plot_decomposition(outcome.result, ax=ax, title=outcome.name)
        else:
            plot_outline(shapes[outcome.name], ax=ax, color='red', show_indices=True)
            ax.set_title(f"{outcome.name} | {outcome.error.kind}")

    for ax in list(axes.flat)[len(outcomes):]:
        ax.axis('off')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved figure to {save_path}")

    if show:
        plt.show()
    else:
        plt.close(fig)

    return fig
