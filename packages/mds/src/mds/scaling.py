"""
Classical (Torgerson) multidimensional scaling.

Distances → squared distances → double-centered Gram matrix → top
eigenpairs → coordinates sqrt(λ)·v.

Exact when the distances come from points in ≤ n_components dimensions.
Otherwise a least-distortion approximation. Directions with λ ≤ 0 (the
distances are not Euclidean-embeddable there) get coordinate 0.

The result is determined only up to rigid motion and reflection.
"""

import numpy as np
from typing import Dict, Any, Optional

from eigensolve.validation import as_square_matrix
from mds.power import top_eigenpairs


def double_center(distances) -> np.ndarray:
    """
    Gram matrix B = −½·(D² − rowMean − colMean + grandMean).

    Parameters
    ----------
    distances : array-like
        (n, n) distance matrix.
    """
    D2 = as_square_matrix(distances, name="distances") ** 2
    if D2.shape[0] == 0:
        return D2
    row_mean = D2.mean(axis=1)
    col_mean = D2.mean(axis=0)
    grand_mean = D2.mean()
    return -0.5 * (D2 - row_mean[:, None] - col_mean[None, :] + grand_mean)


def classical_mds(
    distances,
    n_components: int = 3,
    max_iter: int = 256,
    tolerance: float = 1e-9,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Embed a distance matrix into n_components dimensions.

    Parameters
    ----------
    distances : array-like
        (n, n) symmetric, non-negative. Symmetry is not checked.
    n_components : int
        Output dimensionality.
    max_iter, tolerance, seed
        Passed to the power-iteration extractor.

    Returns
    -------
    dict with:
        points : np.ndarray, (n, n_components), row i ↔ input row i
        eigenvalues : np.ndarray, (min(n_components, n),) Gram eigenvalues
        iterations : list of int, power iterations per component
    """
    B = double_center(distances)
    n = B.shape[0]
    points = np.zeros((n, n_components))

    if n == 0:
        return {
            'points': points,
            'eigenvalues': np.zeros(0),
            'iterations': [],
        }

    pairs = top_eigenpairs(B, k=n_components, max_iter=max_iter,
                           tolerance=tolerance, seed=seed)
    eigenvalues = pairs['eigenvalues']
    vectors = pairs['eigenvectors']

    for k, lam in enumerate(eigenvalues):
        if lam > 0:
            points[:, k] = np.sqrt(lam) * vectors[:, k]

    return {
        'points': points,
        'eigenvalues': eigenvalues,
        'iterations': pairs['iterations'],
    }


def embed_3d(distances, seed: Optional[int] = None) -> np.ndarray:
    """(n, 3) classical-MDS coordinates for a distance matrix."""
    return classical_mds(distances, n_components=3, seed=seed)['points']
