"""Tests for the spectral_triple package."""
import numpy as np
import pytest


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def preset_p():
    """3-state birth-death chain; π = (2, 5, 4) / 11."""
    return np.array([
        [0.95, 0.05, 0.00],
        [0.02, 0.94, 0.04],
        [0.00, 0.05, 0.95],
    ])


@pytest.fixture
def triple(preset_p):
    from spectral_triple.reference import SpectralTriple
    return SpectralTriple.from_transition(preset_p, 1e-3)


@pytest.fixture
def fast_provider():
    from spectral_triple.reference import ReferenceSpectralTripleProvider
    return ReferenceSpectralTripleProvider(restarts=2, iterations=50)


# ---------------------------------------------------------------------------
# Construction and validation
# ---------------------------------------------------------------------------

class TestConstruction:

    def test_stationary_matches_expected(self, triple):
        expected = np.array([2.0, 5.0, 4.0]) / 11.0
        assert np.allclose(triple.stationary, expected, atol=1e-8)

    def test_stationary_is_invariant(self, triple, preset_p):
        pi = triple.stationary
        assert np.allclose(pi @ preset_p, pi, atol=1e-10)
        assert pi.sum() == pytest.approx(1.0)

    def test_generator_is_p_minus_identity(self, triple, preset_p):
        assert np.allclose(triple.generator, preset_p - np.eye(3))

    def test_from_generator_agrees(self, preset_p):
        from spectral_triple.reference import SpectralTriple
        a = SpectralTriple.from_transition(preset_p, 1e-3)
        b = SpectralTriple.from_generator(preset_p - np.eye(3), 1e-3)
        assert np.allclose(a.stationary, b.stationary, atol=1e-10)

    def test_rows_not_stochastic(self):
        from spectral_triple.reference import SpectralTriple
        from spectral_triple.errors import InvalidTransitionError
        with pytest.raises(InvalidTransitionError, match="sum to ~1"):
            SpectralTriple.from_transition([[0.5, 0.4], [0.5, 0.5]], 1e-3)

    def test_negative_entry(self):
        from spectral_triple.reference import SpectralTriple
        from spectral_triple.errors import InvalidTransitionError
        with pytest.raises(InvalidTransitionError, match="negative"):
            SpectralTriple.from_transition([[1.2, -0.2], [0.5, 0.5]], 1e-3)

    def test_not_square(self):
        from spectral_triple.reference import SpectralTriple
        from spectral_triple.errors import InvalidTransitionError
        with pytest.raises(InvalidTransitionError, match="square"):
            SpectralTriple.from_transition(np.ones((2, 3)) / 3.0, 1e-3)

    def test_generator_rows_must_vanish(self):
        from spectral_triple.reference import SpectralTriple
        from spectral_triple.errors import InvalidTransitionError
        with pytest.raises(InvalidTransitionError, match="sum to ~0"):
            SpectralTriple.from_generator([[-1.0, 0.5], [0.5, -0.5]], 1e-3)

    def test_non_positive_epsilon(self, preset_p):
        from spectral_triple.reference import SpectralTriple
        from spectral_triple.errors import SpectralTripleError
        with pytest.raises(SpectralTripleError, match="epsilon"):
            SpectralTriple.from_transition(preset_p, 0.0)

    def test_stationary_must_be_positive(self):
        from spectral_triple.reference import SpectralTriple
        from spectral_triple.errors import InvalidStationaryError
        L = np.array([[-0.5, 0.5], [0.5, -0.5]])
        with pytest.raises(InvalidStationaryError):
            SpectralTriple(L, [1.0, 0.0], 1e-3)

    def test_stationary_must_be_normalized(self):
        from spectral_triple.reference import SpectralTriple
        from spectral_triple.errors import InvalidStationaryError
        L = np.array([[-0.5, 0.5], [0.5, -0.5]])
        with pytest.raises(InvalidStationaryError, match="sum to 1"):
            SpectralTriple(L, [0.6, 0.6], 1e-3)

    def test_errors_are_value_errors(self):
        from spectral_triple.errors import SpectralTripleError, StateOutOfRangeError
        assert issubclass(SpectralTripleError, ValueError)
        assert issubclass(StateOutOfRangeError, SpectralTripleError)


# ---------------------------------------------------------------------------
# Operators and spectrum
# ---------------------------------------------------------------------------

class TestOperators:

    def test_symmetrized_generator_symmetric(self, triple):
        lsym = triple.symmetrized_generator()
        assert np.allclose(lsym, lsym.T, atol=1e-12)

    def test_dirac_is_symmetric(self, triple):
        d = triple.dirac_operator()
        assert np.allclose(d, d.T, atol=1e-10)

    def test_laplacian_spectrum(self, triple):
        # Reversible chain: spectrum of −Lsym is 1 − eig(P) = {0, 0.05, 0.11}
        eigenvalues, _ = triple.laplacian_spectrum()
        assert np.allclose(eigenvalues, [0.0, 0.05, 0.11], atol=1e-9)

    def test_dirac_weights(self, triple):
        eigenvalues, U = triple.laplacian_spectrum()
        d = triple.dirac_operator()
        for k in range(3):
            expected = 1.0 / (1e-3 + max(eigenvalues[k], 0.0))
            assert U[:, k] @ d @ U[:, k] == pytest.approx(expected, rel=1e-8)

    def test_conditioning(self, triple):
        cond = triple.conditioning()
        assert cond.spectral_gap == pytest.approx(0.05, abs=1e-9)
        assert cond.epsilon == 1e-3
        assert not cond.ill_conditioned
        assert np.isfinite(cond.max_commutator_norm)
        assert cond.max_commutator_norm > 0

    def test_tiny_gap_is_ill_conditioned(self):
        from spectral_triple.reference import SpectralTriple
        P = np.array([[1.0 - 1e-10, 1e-10], [1e-10, 1.0 - 1e-10]])
        cond = SpectralTriple.from_transition(P, 1e-3).conditioning()
        assert cond.ill_conditioned


# ---------------------------------------------------------------------------
# Connes distance
# ---------------------------------------------------------------------------

class TestConnesDistance:

    def test_self_distance_zero(self, triple):
        assert triple.connes_distance(1, 1) == 0.0

    def test_positive_and_finite(self, triple):
        d = triple.connes_distance(0, 1, restarts=2, iterations=50)
        assert np.isfinite(d)
        assert d > 0

    def test_at_least_indicator_bound(self, triple):
        from spectral_triple.reference import _lipschitz
        c = np.array([1.0, -1.0, 0.0])
        bound = 2.0 / _lipschitz(triple.dirac_operator(), c)[0]
        d = triple.connes_distance(0, 1, restarts=2, iterations=50)
        assert d >= bound - 1e-12

    def test_deterministic(self, triple):
        a = triple.connes_distance(0, 2, restarts=2, iterations=50, seed=7)
        b = triple.connes_distance(0, 2, restarts=2, iterations=50, seed=7)
        assert a == b

    def test_out_of_range(self, triple):
        from spectral_triple.errors import StateOutOfRangeError
        with pytest.raises(StateOutOfRangeError) as exc:
            triple.connes_distance(0, 3)
        assert exc.value.idx == 3
        assert exc.value.n == 3

    def test_distance_matrix_symmetric(self, triple):
        dist = triple.distance_matrix(restarts=2, iterations=50)
        assert np.allclose(dist, dist.T)
        assert np.allclose(np.diag(dist), 0.0)
        assert np.all(dist >= 0)


# ---------------------------------------------------------------------------
# Provider contract
# ---------------------------------------------------------------------------

class TestProvider:

    def test_satisfies_protocol(self, fast_provider):
        from spectral_triple.contract import SpectralTripleProvider
        assert isinstance(fast_provider, SpectralTripleProvider)

    def test_result_shapes(self, fast_provider, preset_p):
        result = fast_provider.compute_spectral_triple(preset_p.ravel(), 3, 1e-3)
        assert result.n == 3
        assert result.stationary.shape == (3,)
        assert result.eigenvalues.shape == (3,)
        assert result.dirac.shape == (9,)
        assert result.distances.shape == (9,)
        assert result.stationary.sum() == pytest.approx(1.0)
        assert np.all(result.stationary >= 0)

    def test_distance_matrix_unpacks(self, fast_provider, preset_p):
        result = fast_provider.compute_spectral_triple(preset_p.ravel(), 3, 1e-3)
        dist = result.distance_matrix()
        assert dist.shape == (3, 3)
        assert np.allclose(dist, dist.T)
        assert np.allclose(result.dirac_matrix(), result.dirac_matrix().T, atol=1e-10)

    def test_to_dict(self, fast_provider, preset_p):
        result = fast_provider.compute_spectral_triple(preset_p.ravel(), 3, 1e-3)
        d = result.to_dict()
        assert set(d) == {'n', 'stationary', 'eigenvalues', 'dirac', 'distances', 'conditioning'}
        assert set(d['conditioning']) == {
            'spectral_gap', 'epsilon', 'max_commutator_norm', 'ill_conditioned',
        }
        assert isinstance(d['distances'][0], float)

    def test_size_mismatch(self, fast_provider):
        from spectral_triple.errors import InvalidTransitionError
        with pytest.raises(InvalidTransitionError, match="expected 9"):
            fast_provider.compute_spectral_triple([1.0, 0.0, 0.0, 1.0], 3, 1e-3)

    def test_module_entry_point(self, fast_provider, preset_p):
        from spectral_triple.reference import compute_spectral_triple
        result = compute_spectral_triple(preset_p, 3, provider=fast_provider)
        assert result.conditioning.epsilon == 1e-3

    def test_unpack_square(self):
        from spectral_triple.contract import unpack_square
        m = unpack_square([1, 2, 3, 4], 2)
        assert np.array_equal(m, [[1.0, 2.0], [3.0, 4.0]])
        with pytest.raises(ValueError):
            unpack_square([1, 2, 3], 2)
