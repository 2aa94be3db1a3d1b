"""
Reference spectral-triple provider.

Builds a spectral triple (A, H, D) for a finite Markov chain, made
self-adjoint by symmetrizing its generator in ℓ²(π):

    L       generator, P − I for a transition matrix
    π       stationary distribution (null space of Pᵗ − I)
    Lsym    ½(Π^½ L Π^-½ + Π^-½ Lᵗ Π^½), self-adjoint in ℓ²(π)
    D       Σ 1/(ε + λ_k) u_k u_kᵗ over the spectrum λ_k of −Lsym

and the Connes distance between states i and j

    d(i, j) = sup { |f_i − f_j| : ‖[D, diag(f)]‖ ≤ 1 }

approximated by projected subgradient ascent on the spectral norm of the
commutator. Small ε sharpens D towards the slow modes of the chain.
"""

import logging

import numpy as np
import scipy.linalg
from typing import Optional, Tuple

from spectral_triple.contract import Conditioning, SpectralTripleResult
from spectral_triple.errors import (
    SpectralTripleError,
    InvalidTransitionError,
    InvalidStationaryError,
    StateOutOfRangeError,
)

logger = logging.getLogger(__name__)

ROW_SUM_TOLERANCE = 1e-9
STATIONARY_FLOOR = 1e-15


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _as_square(matrix) -> np.ndarray:
    arr = np.array(matrix, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        shape = arr.shape if arr.ndim == 2 else (arr.size, 1)
        raise InvalidTransitionError(
            f"matrix must be square (got {shape[0]}x{shape[1]})"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidTransitionError("matrix has non-finite entries")
    return arr


def _validate_transition(P: np.ndarray) -> None:
    max_abs = float(np.max(np.abs(P.sum(axis=1) - 1.0))) if P.size else 0.0
    if max_abs > ROW_SUM_TOLERANCE:
        raise InvalidTransitionError(
            f"rows must sum to ~1 for transition P (max |row-sum-1| = {max_abs:.3e})"
        )
    if np.any(P < 0):
        i, j = np.argwhere(P < 0)[0]
        raise InvalidTransitionError(f"transition P has negative entry at [{i},{j}]")


def _validate_generator(L: np.ndarray) -> None:
    max_abs = float(np.max(np.abs(L.sum(axis=1)))) if L.size else 0.0
    if max_abs > ROW_SUM_TOLERANCE:
        raise InvalidTransitionError(
            f"rows must sum to ~0 for generator L (max |row-sum| = {max_abs:.3e})"
        )


def _validate_stationary(pi: np.ndarray) -> None:
    if np.any(pi <= 0):
        raise InvalidStationaryError("stationary distribution must be strictly positive")
    total = float(pi.sum())
    if abs(total - 1.0) > ROW_SUM_TOLERANCE:
        raise InvalidStationaryError(
            f"stationary distribution must sum to 1 (got {total})"
        )


def _null_space_probability(A: np.ndarray) -> np.ndarray:
    """Probability vector spanning (approximately) the null space of A."""
    _, _, vh = scipy.linalg.svd(A)
    # singular values come back descending: last row pairs with the smallest
    v = vh[-1].copy()
    if v.sum() < 0:
        v = -v
    v = np.maximum(v, STATIONARY_FLOOR)
    pi = v / v.sum()
    _validate_stationary(pi)
    return pi


# ---------------------------------------------------------------------------
# Commutator norms
# ---------------------------------------------------------------------------

def _commutator(D: np.ndarray, f: np.ndarray) -> np.ndarray:
    """[D, diag(f)] = D·diag(f) − diag(f)·D."""
    return D * f[None, :] - f[:, None] * D


def _lipschitz(D: np.ndarray, f: np.ndarray) -> Tuple[float, np.ndarray]:
    m = _commutator(D, f)
    return float(np.linalg.norm(m, 2)), m


def _lipschitz_subgradient(D: np.ndarray, m: np.ndarray) -> np.ndarray:
    """Subgradient of f ↦ ‖[D, diag(f)]‖₂ given the current commutator m."""
    u, _, vh = np.linalg.svd(m)
    u1 = u[:, 0]
    v1 = vh[0]
    return (u1 @ D) * v1 - u1 * (D @ v1)


# ---------------------------------------------------------------------------
# Spectral triple
# ---------------------------------------------------------------------------

class SpectralTriple:
    """
    Spectral triple of a finite Markov chain.

    Parameters
    ----------
    generator : array-like
        (n, n) generator L, rows summing to 0.
    stationary : array-like
        (n,) strictly positive distribution summing to 1.
    epsilon : float
        Regularizer > 0 added to the Laplacian spectrum in D.
    """

    def __init__(self, generator, stationary, epsilon: float):
        L = _as_square(generator)
        _validate_generator(L)
        pi = np.asarray(stationary, dtype=np.float64).ravel()
        if len(pi) != L.shape[0]:
            raise InvalidStationaryError(
                f"stationary distribution has {len(pi)} entries, expected {L.shape[0]}"
            )
        _validate_stationary(pi)
        if not epsilon > 0:
            raise SpectralTripleError(f"epsilon must be > 0 (got {epsilon})")

        self.generator = L
        self.stationary = pi
        self.epsilon = float(epsilon)
        self._spectrum = None
        self._dirac = None

    @classmethod
    def from_generator(cls, generator, epsilon: float) -> "SpectralTriple":
        L = _as_square(generator)
        _validate_generator(L)
        pi = _null_space_probability(L.T)
        return cls(L, pi, epsilon)

    @classmethod
    def from_transition(cls, transition, epsilon: float) -> "SpectralTriple":
        P = _as_square(transition)
        _validate_transition(P)
        identity = np.eye(P.shape[0])
        pi = _null_space_probability(P.T - identity)
        return cls(P - identity, pi, epsilon)

    @property
    def n(self) -> int:
        return self.generator.shape[0]

    def symmetrized_generator(self) -> np.ndarray:
        s = np.sqrt(self.stationary)
        L = self.generator
        l1 = s[:, None] * L / s[None, :]
        l2 = L.T * s[None, :] / s[:, None]
        return 0.5 * (l1 + l2)

    def laplacian_spectrum(self) -> Tuple[np.ndarray, np.ndarray]:
        """Ascending eigenvalues and eigenvectors of −Lsym."""
        if self._spectrum is None:
            self._spectrum = scipy.linalg.eigh(-self.symmetrized_generator())
        return self._spectrum

    def dirac_operator(self) -> np.ndarray:
        if self._dirac is None:
            eigenvalues, U = self.laplacian_spectrum()
            weights = 1.0 / (self.epsilon + np.maximum(eigenvalues, 0.0))
            self._dirac = (U * weights) @ U.T
        return self._dirac

    def connes_distance(
        self,
        state_i: int,
        state_j: int,
        restarts: int = 8,
        iterations: int = 600,
        learning_rate: float = 0.5,
        seed: int = 42,
    ) -> float:
        """
        Connes distance between two states.

        Lower bound from the test function f = δ_i − δ_j, improved by
        subgradient ascent on |f_i − f_j| / ‖[D, f]‖ from random starts.
        Deterministic for a fixed seed.
        """
        n = self.n
        for idx in (state_i, state_j):
            if not 0 <= idx < n:
                raise StateOutOfRangeError(idx, n)
        if state_i == state_j:
            return 0.0

        D = self.dirac_operator()
        c = np.zeros(n)
        c[state_i] = 1.0
        c[state_j] = -1.0

        lc, _ = _lipschitz(D, c)
        best = abs(c @ c / lc) if lc > 1e-15 else 0.0

        rng = np.random.default_rng(seed)
        for _ in range(restarts):
            f = rng.random(n) * 2.0 - 1.0
            lf, m = _lipschitz(D, f)
            if lf < 1e-12:
                f = f + (np.arange(n) + 1.0) * 1e-3
                lf, m = _lipschitz(D, f)

            for _ in range(iterations):
                if lf <= 1e-15:
                    break
                g = _lipschitz_subgradient(D, m)
                num = c @ f
                grad = (c * lf - g * num) / (lf * lf)
                f = f + learning_rate * grad
                lf, m = _lipschitz(D, f)
                # the commutator is linear in f: rescaling lands exactly on the unit ball
                if lf > 1.0:
                    f = f / lf
                    m = m / lf
                    lf = 1.0

            lf_final, _ = _lipschitz(D, f)
            val = abs(c @ f) / max(lf_final, 1.0)
            if val > best:
                best = val

        return float(best)

    def distance_matrix(self, **kwargs) -> np.ndarray:
        """All pairwise Connes distances; computed for i<j and mirrored."""
        n = self.n
        dist = np.zeros((n, n))
        for i in range(n):
            for j in range(i + 1, n):
                dist[i, j] = dist[j, i] = self.connes_distance(i, j, **kwargs)
        return dist

    def max_commutator_norm(self) -> float:
        """max over states i of ‖[D, δ_i]‖₂."""
        D = self.dirac_operator()
        n = self.n
        norms = [_lipschitz(D, np.eye(n)[i])[0] for i in range(n)]
        return float(max(norms)) if norms else 0.0

    def conditioning(self) -> Conditioning:
        eigenvalues, _ = self.laplacian_spectrum()
        lambda_0 = float(eigenvalues[0]) if len(eigenvalues) > 0 else 0.0
        lambda_1 = float(eigenvalues[1]) if len(eigenvalues) > 1 else 0.0
        gap = max(lambda_1 - lambda_0, 0.0)
        ill = abs(lambda_0) > 1e-8 or gap < 1e-8 or gap < 1e-2 * self.epsilon
        if ill:
            logger.warning(
                "ill-conditioned spectral triple: lambda_0=%.3e gap=%.3e epsilon=%.1e",
                lambda_0, gap, self.epsilon,
            )
        return Conditioning(
            spectral_gap=gap,
            epsilon=self.epsilon,
            max_commutator_norm=self.max_commutator_norm(),
            ill_conditioned=ill,
        )

    def result(self, **kwargs) -> SpectralTripleResult:
        eigenvalues, _ = self.laplacian_spectrum()
        return SpectralTripleResult(
            n=self.n,
            stationary=self.stationary.copy(),
            eigenvalues=eigenvalues.copy(),
            dirac=self.dirac_operator().ravel().copy(),
            distances=self.distance_matrix(**kwargs).ravel(),
            conditioning=self.conditioning(),
        )


class ReferenceSpectralTripleProvider:
    """
    numpy/scipy implementation of the spectral-triple provider contract.

    Parameters
    ----------
    restarts, iterations, learning_rate, seed
        Connes-distance optimizer settings.
    """

    def __init__(
        self,
        restarts: int = 8,
        iterations: int = 600,
        learning_rate: float = 0.5,
        seed: int = 42,
    ):
        self.restarts = restarts
        self.iterations = iterations
        self.learning_rate = learning_rate
        self.seed = seed

    def compute_spectral_triple(self, transition, n: int, epsilon: float) -> SpectralTripleResult:
        flat = np.asarray(transition, dtype=np.float64).ravel()
        if flat.size != n * n:
            raise InvalidTransitionError(
                f"expected {n * n} entries for a {n}x{n} transition matrix, got {flat.size}"
            )
        triple = SpectralTriple.from_transition(flat.reshape(n, n), epsilon)
        logger.debug("spectral triple n=%d epsilon=%.1e", n, epsilon)
        return triple.result(
            restarts=self.restarts,
            iterations=self.iterations,
            learning_rate=self.learning_rate,
            seed=self.seed,
        )


def compute_spectral_triple(
    transition,
    n: int,
    epsilon: float = 1e-3,
    provider: Optional[ReferenceSpectralTripleProvider] = None,
) -> SpectralTripleResult:
    """Module-level entry point using the reference provider."""
    provider = provider or ReferenceSpectralTripleProvider()
    return provider.compute_spectral_triple(transition, n, epsilon)
