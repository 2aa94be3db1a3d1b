"""
Fit an embedding into the unit box [-0.5, 0.5]³.

One global scale (the largest bounding-box extent) keeps aspect ratios.
The longest axis spans the full box; shorter axes start at -0.5.
"""

import numpy as np
from typing import Dict, Any

from eigensolve.errors import MatrixShapeError


def normalize_to_unit_box(points, min_scale: float = 1e-12) -> Dict[str, Any]:
    """
    Rescale and shift points into [-0.5, 0.5] per axis.

    Parameters
    ----------
    points : array-like
        (n, 3) coordinates.
    min_scale : float
        Floor on the scale so coincident points do not divide by zero.

    Returns
    -------
    dict with:
        points : np.ndarray, (n, 3) normalized
        scale : float, divisor applied
        min : np.ndarray, (3,) bounding-box minimum of the input
        max : np.ndarray, (3,) bounding-box maximum of the input
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape in ((0,), (0, 3)):
        return {
            'points': np.zeros((0, 3)),
            'scale': 1.0,
            'min': np.zeros(3),
            'max': np.zeros(3),
        }
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise MatrixShapeError(f"points must have shape (n, 3), got {pts.shape}")

    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    scale = float(max(min_scale, np.max(hi - lo)))

    return {
        'points': (pts - lo) / scale - 0.5,
        'scale': scale,
        'min': lo,
        'max': hi,
    }
