"""
Flatten decompose() results to scalar rows.

decompose() returns arrays (eigenvalues) and matrices (eigenvectors).
This module flattens them into dicts of scalars suitable for a table row.
"""

import numpy as np
from typing import Dict, Any

from eigensolve.spectrum import spectrum_summary


def flatten_result(
    result: Dict[str, Any],
    max_eigenvalues: int = 5,
    include_vectors: bool = False,
) -> Dict[str, float]:
    """
    Flatten a decompose() result dict to scalar key-value pairs.

    Parameters
    ----------
    result : dict
        Output from decompose().
    max_eigenvalues : int
        Number of eigenvalues to include.
    include_vectors : bool
        If True, include the top 3 eigenvectors entry by entry.

    Returns
    -------
    dict of {str: float | int | bool}.
    """
    row = {}

    eigenvalues = result['eigenvalues']
    row['n'] = int(len(eigenvalues))
    row['sweeps'] = int(result.get('sweeps', 0))
    row['converged'] = bool(result.get('converged', True))
    row['off_diagonal_norm'] = float(result.get('off_diagonal_norm', 0.0))

    summary = spectrum_summary(eigenvalues)
    for key in ['trace', 'spectral_gap', 'mixing_time']:
        row[key] = float(summary[key])

    for i in range(min(max_eigenvalues, len(eigenvalues))):
        row[f'eigenvalue_{i}'] = float(eigenvalues[i])

    if include_vectors:
        vectors = result['eigenvectors']
        for k in range(min(3, vectors.shape[1])):
            for i in range(vectors.shape[0]):
                row[f'v{k}_{i}'] = float(vectors[i, k])

    return row


def flatten_batch(
    results: list,
    max_eigenvalues: int = 5,
    include_vectors: bool = False,
) -> list:
    """Flatten a list of decompose() results."""
    return [flatten_result(r, max_eigenvalues, include_vectors) for r in results]
