"""Errors raised while building a spectral triple from a Markov chain."""


class SpectralTripleError(ValueError):
    """Base class. Also raised directly for a non-positive epsilon."""


class InvalidTransitionError(SpectralTripleError):
    """Non-square matrix, or rows not summing to 1 (transition) / 0 (generator)."""


class InvalidStationaryError(SpectralTripleError):
    """Stationary distribution not strictly positive or not normalized."""


class StateOutOfRangeError(SpectralTripleError):

    def __init__(self, idx: int, n: int):
        self.idx = idx
        self.n = n
        super().__init__(f"state index out of range: {idx} (n={n})")
