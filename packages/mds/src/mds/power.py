"""
Top-k eigenpairs by power iteration with deflation.

Cheaper than a full decomposition when k ≪ n. Finds the eigenpair of
largest |λ|, removes it (M ← M − λ·v·vᵗ), and repeats.

The start vector is random. With degenerate or near-degenerate leading
eigenvalues, different seeds give different (equally valid) vectors in
the shared eigenspace. Pass seed for reproducible runs.
"""

import logging

import numpy as np
from typing import Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)


def _dominant_eigenpair(
    M: np.ndarray,
    rng: np.random.Generator,
    max_iter: int,
    tolerance: float,
) -> Tuple[float, np.ndarray, int]:
    n = M.shape[0]
    v = rng.random(n) - 0.5
    vn = np.linalg.norm(v)
    if vn == 0:
        v = np.zeros(n)
        v[0] = 1.0
        vn = 1.0
    v = v / vn

    iterations = 0
    for iterations in range(1, max_iter + 1):
        y = M @ v
        yn = np.linalg.norm(y)
        if yn == 0:
            # v lies in the null space: nothing left to extract
            return 0.0, v, iterations
        y = y / yn
        # Sign-insensitive: a negative dominant eigenvalue flips v each step
        change = min(np.linalg.norm(y - v), np.linalg.norm(y + v))
        v = y
        if change < tolerance:
            break
    else:
        logger.warning("power iteration stopped after %d iterations without converging", max_iter)

    rayleigh = float(v @ M @ v)
    return rayleigh, v, iterations


def top_eigenpairs(
    matrix: np.ndarray,
    k: int = 3,
    max_iter: int = 256,
    tolerance: float = 1e-9,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Extract the k eigenpairs of largest magnitude from a symmetric matrix.

    Parameters
    ----------
    matrix : np.ndarray
        (n, n) symmetric matrix. Not modified.
    k : int
        Number of pairs; clipped to n.
    max_iter : int
        Iteration cap per pair. Reaching it returns the current estimate.
    tolerance : float
        Stop when the unit vector moves less than this between steps.
    seed : int, optional
        Seed for the random start vectors.

    Returns
    -------
    dict with:
        eigenvalues : np.ndarray, (k,), Rayleigh quotients in extraction order
        eigenvectors : np.ndarray, (n, k), unit columns
        iterations : list of int, iterations spent per pair
    """
    M = np.array(matrix, dtype=np.float64)
    n = M.shape[0]
    k = min(k, n)
    rng = np.random.default_rng(seed)

    eigenvalues = np.zeros(k)
    eigenvectors = np.zeros((n, k))
    iterations = []

    for j in range(k):
        lam, v, its = _dominant_eigenpair(M, rng, max_iter, tolerance)
        eigenvalues[j] = lam
        eigenvectors[:, j] = v
        iterations.append(its)
        M -= lam * np.outer(v, v)

    return {
        'eigenvalues': eigenvalues,
        'eigenvectors': eigenvectors,
        'iterations': iterations,
    }
