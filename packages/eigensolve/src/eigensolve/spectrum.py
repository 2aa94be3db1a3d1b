"""
Spectral diagnostics for finite Markov systems.

The spectral gap λ₀ − λ₁ of a (symmetrized) transition matrix governs how
fast the chain forgets its starting state: mixing time ≈ 1 / gap steps.
"""

import numpy as np
from typing import Dict, Any


def symmetrize(matrix) -> np.ndarray:
    """(A + Aᵗ) / 2."""
    A = np.asarray(matrix, dtype=np.float64)
    return 0.5 * (A + A.T)


def spectral_gap(eigenvalues) -> float:
    """λ₀ − λ₁ of a descending spectrum, floored at 0. Zero for n < 2."""
    ev = np.asarray(eigenvalues, dtype=np.float64)
    if len(ev) < 2:
        return 0.0
    return float(max(ev[0] - ev[1], 0.0))


def mixing_time(gap: float) -> float:
    if gap <= 0:
        return float('inf')
    return 1.0 / gap


def mixing_regime(
    gap: float,
    fast_gap: float = 0.1,
    moderate_gap: float = 0.01,
) -> str:
    """'fast', 'moderate', or 'slow' (metastable basins)."""
    if gap > fast_gap:
        return 'fast'
    if gap > moderate_gap:
        return 'moderate'
    return 'slow'


def spectrum_summary(
    eigenvalues,
    gap: float = None,
    fast_gap: float = 0.1,
    moderate_gap: float = 0.01,
) -> Dict[str, Any]:
    """
    Diagnostic scalars for a spectrum.

    Parameters
    ----------
    eigenvalues : array-like
        Spectrum sorted descending.
    gap : float, optional
        Externally supplied spectral gap (e.g. from a conditioning record).
        Computed from eigenvalues when None.

    Returns
    -------
    dict with:
        n : int
        trace : float, sum of eigenvalues
        spectral_gap : float
        mixing_time : float, inf when the gap is zero
        mixing_regime : str
    """
    ev = np.asarray(eigenvalues, dtype=np.float64)
    if gap is None:
        gap = spectral_gap(ev)
    return {
        'n': len(ev),
        'trace': float(np.sum(ev)),
        'spectral_gap': float(gap),
        'mixing_time': mixing_time(gap),
        'mixing_regime': mixing_regime(gap, fast_gap, moderate_gap),
    }


def reconstruct(result: Dict[str, Any]) -> np.ndarray:
    """V · diag(λ) · Vᵗ from a decompose() result."""
    V = result['eigenvectors']
    return (V * result['eigenvalues']) @ V.T


def orthonormality_error(result: Dict[str, Any]) -> float:
    """max |VᵗV − I| over all entries."""
    V = result['eigenvectors']
    if V.size == 0:
        return 0.0
    return float(np.max(np.abs(V.T @ V - np.eye(V.shape[1]))))
