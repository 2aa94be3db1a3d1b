"""
Matrix input validation.

Every public entry point copies its input through as_square_matrix(),
so callers keep ownership of what they pass in.
"""

import numpy as np

from eigensolve.errors import (
    MatrixShapeError,
    NonFiniteMatrixError,
    NotSymmetricError,
)


def as_square_matrix(matrix, name: str = "matrix") -> np.ndarray:
    """
    Copy input into a float64 (n, n) array.

    Parameters
    ----------
    matrix : array-like
        numpy array or sequence of equal-length rows.
    name : str
        Used in error messages.

    Returns
    -------
    np.ndarray
        Fresh (n, n) float64 array. n may be 0.

    Raises
    ------
    MatrixShapeError
        Ragged rows, wrong dimensionality, or non-square shape.
    NonFiniteMatrixError
        Any NaN or inf entry.
    """
    if isinstance(matrix, np.ndarray):
        arr = np.array(matrix, dtype=np.float64)
        if arr.shape in ((0,), (0, 0)):
            return np.zeros((0, 0), dtype=np.float64)
    else:
        rows = list(matrix)
        n = len(rows)
        for i, row in enumerate(rows):
            if np.ndim(row) != 1:
                raise MatrixShapeError(f"{name} row {i} is not a flat sequence")
            if len(row) != n:
                raise MatrixShapeError(
                    f"{name} row {i} has {len(row)} entries, expected {n} "
                    f"for a {n}x{n} matrix"
                )
        arr = np.array(rows, dtype=np.float64).reshape(n, n)

    if arr.ndim != 2:
        raise MatrixShapeError(f"{name} must be 2-D, got {arr.ndim}-D")
    if arr.shape[0] != arr.shape[1]:
        raise MatrixShapeError(
            f"{name} must be square (got {arr.shape[0]}x{arr.shape[1]})"
        )
    if not np.all(np.isfinite(arr)):
        bad = np.argwhere(~np.isfinite(arr))[0]
        raise NonFiniteMatrixError(
            f"{name} has non-finite entry at [{bad[0]},{bad[1]}]"
        )
    return arr


def check_symmetric(matrix: np.ndarray, tolerance: float = 1e-9) -> None:
    """Raise NotSymmetricError on the first pair i<j with |A_ij - A_ji| > tolerance."""
    diff = np.abs(matrix - matrix.T)
    offending = np.argwhere(np.triu(diff > tolerance, k=1))
    if len(offending) > 0:
        i, j = (int(x) for x in offending[0])
        raise NotSymmetricError(i, j, float(diff[i, j]), tolerance)
