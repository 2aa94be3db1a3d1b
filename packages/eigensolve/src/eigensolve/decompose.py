"""
Symmetric eigendecomposition by cyclic Jacobi rotations.

Each rotation zeroes one off-diagonal pair (p, q). Sweeping all pairs
repeatedly drives the off-diagonal norm to zero; the diagonal converges
to the eigenvalues and the accumulated rotations to the eigenvectors.

O(n³) per sweep, typically 5-10 sweeps for the n ≤ ~50 matrices this
engine sees. Hitting max_sweeps is not an error: the off-diagonal norm
decreases monotonically, so a partial result is still an approximation.
"""

import logging

import numpy as np
from typing import Dict, Any, Tuple

from eigensolve.validation import as_square_matrix, check_symmetric

logger = logging.getLogger(__name__)


def off_diagonal_norm(matrix: np.ndarray) -> float:
    """Frobenius norm of the strictly upper triangle."""
    return float(np.sqrt(np.sum(np.triu(matrix, k=1) ** 2)))


def _rotation(app: float, aqq: float, apq: float) -> Tuple[float, float]:
    """(c, s) of the rotation that zeroes apq."""
    tau = (aqq - app) / (2.0 * apq)
    sign = 1.0 if tau >= 0 else -1.0
    # hypot keeps 1 + tau² from overflowing when apq is tiny
    t = sign / (abs(tau) + np.hypot(1.0, tau))
    c = 1.0 / np.sqrt(1.0 + t * t)
    return c, t * c


def _rotate(A: np.ndarray, V: np.ndarray, p: int, q: int, c: float, s: float) -> None:
    """Apply rotation (p, q) to A in place and accumulate it into V."""
    app, aqq, apq = A[p, p], A[q, q], A[p, q]
    app_new = c * c * app - 2.0 * s * c * apq + s * s * aqq
    aqq_new = s * s * app + 2.0 * s * c * apq + c * c * aqq

    col_p = A[:, p].copy()
    col_q = A[:, q].copy()
    A[:, p] = c * col_p - s * col_q
    A[:, q] = s * col_p + c * col_q
    A[p, :] = A[:, p]
    A[q, :] = A[:, q]
    A[p, p] = app_new
    A[q, q] = aqq_new
    A[p, q] = 0.0
    A[q, p] = 0.0

    v_p = V[:, p].copy()
    v_q = V[:, q].copy()
    V[:, p] = c * v_p - s * v_q
    V[:, q] = s * v_p + c * v_q


def _sweep(A: np.ndarray, V: np.ndarray, tolerance: float) -> int:
    """One cyclic pass over all pairs p<q. Returns number of rotations applied."""
    n = A.shape[0]
    rotations = 0
    for p in range(n - 1):
        for q in range(p + 1, n):
            apq = A[p, q]
            if abs(apq) <= tolerance * np.hypot(A[p, p], A[q, q]):
                continue
            c, s = _rotation(A[p, p], A[q, q], apq)
            _rotate(A, V, p, q, c, s)
            rotations += 1
    return rotations


def decompose(
    matrix,
    tolerance: float = 1e-12,
    max_sweeps: int = 100,
    symmetry_tolerance: float = 1e-9,
) -> Dict[str, Any]:
    """
    Full eigendecomposition of a real symmetric matrix.

    Parameters
    ----------
    matrix : array-like
        (n, n) symmetric matrix. Copied; never modified.
    tolerance : float
        Relative threshold for rotating a pair, and absolute threshold on
        the off-diagonal Frobenius norm for early exit.
    max_sweeps : int
        Upper bound on full sweeps.
    symmetry_tolerance : float
        Maximum allowed |A[i][j] - A[j][i]|.

    Returns
    -------
    dict with:
        eigenvalues : np.ndarray, (n,), sorted descending
        eigenvectors : np.ndarray, (n, n), column k pairs with eigenvalues[k]
        sweeps : int, sweeps actually run
        off_diagonal_norm : float, residual off-diagonal norm at exit
        converged : bool, False only when max_sweeps was exhausted

    Raises
    ------
    NotSymmetricError
        Input asymmetric beyond symmetry_tolerance.
    MatrixShapeError, NonFiniteMatrixError
        Malformed input.
    """
    A = as_square_matrix(matrix)
    check_symmetric(A, symmetry_tolerance)
    n = A.shape[0]
    V = np.eye(n)

    sweeps = 0
    converged = n < 2
    while not converged and sweeps < max_sweeps:
        sweeps += 1
        rotations = _sweep(A, V, tolerance)
        residual = off_diagonal_norm(A)
        logger.debug("sweep %d: %d rotations, off-diagonal norm %.3e",
                     sweeps, rotations, residual)
        if rotations == 0 or residual < tolerance:
            converged = True

    residual = off_diagonal_norm(A)
    if not converged:
        logger.warning(
            "Jacobi stopped after %d sweeps without converging "
            "(off-diagonal norm %.3e); returning best-effort decomposition",
            sweeps, residual,
        )

    eigenvalues = np.diag(A).copy()

    # Numerical hygiene against drift in the accumulated rotations
    norms = np.linalg.norm(V, axis=0)
    norms[norms == 0] = 1.0
    V = V / norms

    order = np.argsort(-eigenvalues, kind="stable")

    return {
        'eigenvalues': eigenvalues[order],
        'eigenvectors': V[:, order],
        'sweeps': sweeps,
        'off_diagonal_norm': residual,
        'converged': converged,
    }
