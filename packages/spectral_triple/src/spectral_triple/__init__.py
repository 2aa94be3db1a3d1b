"""
Spectral triple package for the Markov spectral engine.

Defines the boundary between the numeric engine and whatever derives a
Dirac-operator structure from a Markov chain:

    SpectralTripleProvider.compute_spectral_triple(P, n, ε) → SpectralTripleResult

The engine depends only on this contract. ReferenceSpectralTripleProvider
is a numpy/scipy implementation; any conforming object (a test stub, a
compiled module) can stand in for it.
"""

from spectral_triple.contract import (
    Conditioning,
    SpectralTripleResult,
    SpectralTripleProvider,
    unpack_square,
)
from spectral_triple.errors import (
    SpectralTripleError,
    InvalidTransitionError,
    InvalidStationaryError,
    StateOutOfRangeError,
)
from spectral_triple.reference import (
    SpectralTriple,
    ReferenceSpectralTripleProvider,
    compute_spectral_triple,
)

__all__ = [
    'Conditioning',
    'SpectralTripleResult',
    'SpectralTripleProvider',
    'unpack_square',
    'SpectralTripleError',
    'InvalidTransitionError',
    'InvalidStationaryError',
    'StateOutOfRangeError',
    'SpectralTriple',
    'ReferenceSpectralTripleProvider',
    'compute_spectral_triple',
]
