"""
Input contract violations for the matrix engine.

Only caller mistakes raise. Non-convergence and degenerate geometry are
reported through result fields, never through exceptions.
"""


class MatrixError(ValueError):
    """Base class for malformed matrix input."""


class MatrixShapeError(MatrixError):
    """Ragged, non-2-D, or non-square input."""


class NonFiniteMatrixError(MatrixError):
    """Input contains NaN or inf."""


class NotSymmetricError(MatrixError):
    """
    Matrix is asymmetric beyond tolerance.

    Carries the first offending pair (row < col, row-major order) and the
    measured |A[row][col] - A[col][row]|.
    """

    def __init__(self, row: int, col: int, asymmetry: float, tolerance: float):
        self.row = row
        self.col = col
        self.asymmetry = asymmetry
        self.tolerance = tolerance
        super().__init__(
            f"matrix not symmetric: |A[{row},{col}] - A[{col},{row}]| = "
            f"{asymmetry:.3e} exceeds {tolerance:.1e}"
        )
