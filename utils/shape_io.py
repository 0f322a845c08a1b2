"""
Shape I/O - Read vertex loops and write physics fixtures as JSON.

Input files hold vertex loops in any of these layouts:
- [[[x, y], ...], ...]                  list of loops, named "0", "1", ...
- {"shapes": {"name": [[x, y], ...]}}   named loops
- {"name": [[x, y], ...]}               named loops, no wrapper

Output files hold the convex fixtures of every shape that decomposed and the
error report of every shape that did not:
    {
      "shapes": {"name": {"fixtures": [[[x, y], ...], ...],
                          "triangles": 4, "area": 12.0}},
      "errors": {"name": {"kind": "InvalidInput", "message": "...",
                          "indices": [3, 4]}}
    }
"""

import json
import os
import numpy as np
from typing import Dict, List, Tuple

from config import ExportConfig, MergerConfig
from core.decomposition import ShapeOutcome


def parse_shapes(data) -> Dict[str, List[Tuple[float, float]]]:
    """
    Normalize decoded JSON into a dict name -> list of (x, y).

    Raises:
        ValueError: if the layout is not one of the supported ones
    """
    if isinstance(data, dict) and 'shapes' in data:
        data = data['shapes']

    if isinstance(data, list):
        items = [(str(i), loop) for i, loop in enumerate(data)]
    elif isinstance(data, dict):
        items = [(str(name), loop) for name, loop in data.items()]
    else:
        raise ValueError(f"Unsupported shape file layout: {type(data).__name__}")

    shapes = {}
    for name, loop in items:
        if not isinstance(loop, list):
            raise ValueError(f"Shape {name!r}: expected a list of [x, y] pairs")
        shapes[name] = [tuple(point) for point in loop]
    return shapes


def load_shapes(filepath: str) -> Dict[str, List[Tuple[float, float]]]:
    """
    Load vertex loops from a JSON file.

    Args:
        filepath: Path to the shapes file

    Returns:
        Dict mapping shape name -> vertex loop
    """
    with open(filepath, 'r') as f:
        data = json.load(f)
    return parse_shapes(data)


def build_export(
    outcomes: Dict[str, ShapeOutcome],
    config: ExportConfig = None
) -> Dict:
    """
    Build the export document for a batch of outcomes.

    Args:
        outcomes: Dict name -> ShapeOutcome
        config: Export settings (winding)

    Returns:
        JSON-ready dict with "shapes" and "errors"
    """
    cfg = config or ExportConfig()

    shapes = {}
    errors = {}
    for name, outcome in outcomes.items():
        if outcome.ok:
            shapes[name] = outcome.result.to_dict(force_ccw=cfg.force_ccw)
        else:
            errors[name] = outcome.error.to_dict()

    return {'shapes': shapes, 'errors': errors}


def validate_fixtures(
    fixtures: List[List[List[float]]],
    max_vertices: int = None
) -> List[str]:
    """
    Check exported fixtures before handing them to a shape builder.

    Args:
        fixtures: List of [[x, y], ...] convex loops
        max_vertices: Vertex cap (MergerConfig default if None)

    Returns:
        List of issues (empty when every fixture is usable)
    """
    from core.polygon import Polygon

    cap = max_vertices or MergerConfig().max_vertices
    issues = []

    for i, loop in enumerate(fixtures):
        if not 3 <= len(loop) <= cap:
            issues.append(f"Fixture {i}: {len(loop)} vertices (allowed 3-{cap})")
            continue
        if not np.isfinite(np.asarray(loop, dtype=np.float64)).all():
            issues.append(f"Fixture {i}: non-finite coordinates")
            continue
        if not Polygon(loop).is_convex():
            issues.append(f"Fixture {i}: not convex")

    return issues


def save_fixtures(
    outcomes: Dict[str, ShapeOutcome],
    output_path: str,
    config: ExportConfig = None,
    verbose: bool = True
) -> Dict:
    """
    Write the fixtures of a batch to a JSON file.

    Args:
        outcomes: Dict name -> ShapeOutcome
        output_path: Destination JSON path
        config: Export settings
        verbose: Print what was written

    Returns:
        The exported document
    """
    cfg = config or ExportConfig()
    document = build_export(outcomes, cfg)

    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump(document, f, indent=cfg.indent)

    if verbose:
        n_fixtures = sum(len(s['fixtures']) for s in document['shapes'].values())
        print(f"✅ Fixtures saved: {output_path}")
        print(f"   - Shapes: {len(document['shapes'])}")
        print(f"   - Fixtures: {n_fixtures}")
        if document['errors']:
            print(f"   - ⚠️ Failed shapes: {len(document['errors'])}")

    return document


def load_fixtures(filepath: str) -> Dict[str, List[List[List[float]]]]:
    """
    Read fixtures back from an export file.

    Returns:
        Dict mapping shape name -> list of fixtures
    """
    with open(filepath, 'r') as f:
        document = json.load(f)
    return {name: entry['fixtures'] for name, entry in document.get('shapes', {}).items()}
