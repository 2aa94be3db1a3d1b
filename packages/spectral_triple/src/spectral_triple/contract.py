"""
Data contract between the numeric engine and a spectral-triple provider.

The provider accepts a row-stochastic transition matrix P (flattened
row-major), its size n and a regularizer ε, and returns stationary
distribution, Laplacian spectrum, Dirac operator, Connes distances and a
conditioning record. The engine consumes only this structure, never the
provider's internals.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Protocol, Sequence, runtime_checkable

import numpy as np


@dataclass(frozen=True)
class Conditioning:
    """How much to trust a spectral triple."""
    spectral_gap: float
    epsilon: float
    max_commutator_norm: float
    ill_conditioned: bool


@dataclass(frozen=True, eq=False)
class SpectralTripleResult:
    """Everything a provider returns for one transition matrix."""
    n: int
    stationary: np.ndarray     # (n,), non-negative, sums to 1
    eigenvalues: np.ndarray    # (n,) Laplacian spectrum, ascending
    dirac: np.ndarray          # (n*n,) row-major
    distances: np.ndarray      # (n*n,) row-major Connes distances
    conditioning: Conditioning

    def distance_matrix(self) -> np.ndarray:
        return unpack_square(self.distances, self.n)

    def dirac_matrix(self) -> np.ndarray:
        return unpack_square(self.dirac, self.n)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-Python view (lists, floats, bools)."""
        return {
            'n': self.n,
            'stationary': [float(x) for x in self.stationary],
            'eigenvalues': [float(x) for x in self.eigenvalues],
            'dirac': [float(x) for x in self.dirac],
            'distances': [float(x) for x in self.distances],
            'conditioning': asdict(self.conditioning),
        }


def unpack_square(flat: Sequence[float], n: int) -> np.ndarray:
    """Row-major flat sequence of length n*n → (n, n) array."""
    arr = np.asarray(flat, dtype=np.float64)
    if arr.size != n * n:
        raise ValueError(f"expected {n * n} entries for a {n}x{n} matrix, got {arr.size}")
    return arr.reshape(n, n).copy()


@runtime_checkable
class SpectralTripleProvider(Protocol):
    """Anything that can turn a transition matrix into a SpectralTripleResult."""

    def compute_spectral_triple(
        self,
        transition: Sequence[float],
        n: int,
        epsilon: float,
    ) -> SpectralTripleResult:
        ...
