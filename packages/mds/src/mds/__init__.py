"""
Classical MDS package for the Markov spectral engine.

Lays out n states in 3-D so that Euclidean distances approximate a given
distance matrix (typically Connes distances between Markov states).
Input: (n, n) distance matrix.
Output: (n, 3) coordinates, plus unit-box normalization for display.
"""

from mds.power import top_eigenpairs
from mds.scaling import double_center, classical_mds, embed_3d
from mds.normalize import normalize_to_unit_box

__all__ = [
    'top_eigenpairs',
    'double_center',
    'classical_mds',
    'embed_3d',
    'normalize_to_unit_box',
]
