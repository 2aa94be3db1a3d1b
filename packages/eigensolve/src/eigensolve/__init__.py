"""
Symmetric eigensolver package for the Markov spectral engine.

Decomposes real symmetric matrices by cyclic Jacobi rotations.
Input: (n, n) symmetric matrix.
Output: eigenvalues (descending), orthonormal eigenvectors (columns),
sweep count and convergence flag.

Also carries the spectral diagnostics shown next to a spectrum:
spectral gap, mixing time, and a coarse mixing regime.
"""

from eigensolve.decompose import decompose, off_diagonal_norm
from eigensolve.errors import (
    MatrixError,
    MatrixShapeError,
    NonFiniteMatrixError,
    NotSymmetricError,
)
from eigensolve.validation import as_square_matrix, check_symmetric
from eigensolve.spectrum import (
    symmetrize,
    spectral_gap,
    mixing_time,
    mixing_regime,
    spectrum_summary,
    reconstruct,
    orthonormality_error,
)
from eigensolve.flatten import flatten_result, flatten_batch

__all__ = [
    'decompose',
    'off_diagonal_norm',
    'MatrixError',
    'MatrixShapeError',
    'NonFiniteMatrixError',
    'NotSymmetricError',
    'as_square_matrix',
    'check_symmetric',
    'symmetrize',
    'spectral_gap',
    'mixing_time',
    'mixing_regime',
    'spectrum_summary',
    'reconstruct',
    'orthonormality_error',
    'flatten_result',
    'flatten_batch',
]
