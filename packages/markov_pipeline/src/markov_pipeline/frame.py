"""
Tabular views of a pipeline run.

One row per state for the layout, one row per eigenvalue for the spectrum.
"""

import numpy as np
import polars as pl
from typing import Dict, Any


def embedding_frame(analysis: Dict[str, Any], normalized: bool = True) -> pl.DataFrame:
    """
    Per-state coordinates.

    Columns: state, x, y, z, and stationary when a spectral triple ran.
    Uses unit-box coordinates when available and normalized=True.
    """
    if normalized and 'normalized' in analysis:
        points = analysis['normalized']['points']
    else:
        points = analysis['embedding']

    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    data = {
        'state': np.arange(len(points), dtype=np.int64),
        'x': points[:, 0],
        'y': points[:, 1],
        'z': points[:, 2],
    }
    if 'triple' in analysis:
        data['stationary'] = np.asarray(analysis['triple'].stationary, dtype=np.float64)
    return pl.DataFrame(data)


def spectrum_frame(analysis: Dict[str, Any]) -> pl.DataFrame:
    """Eigenvalues of the symmetrized transition matrix, descending."""
    eigenvalues = np.asarray(analysis['decomposition']['eigenvalues'], dtype=np.float64)
    return pl.DataFrame({
        'k': np.arange(len(eigenvalues), dtype=np.int64),
        'eigenvalue': eigenvalues,
    })
