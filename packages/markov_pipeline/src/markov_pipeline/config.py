"""
Engine Configuration
====================
All numeric defaults for the solver, the embedder and the spectral-triple
provider. Single source of truth for the pipeline; the leaf packages take
the same values as plain keyword defaults.

Usage:
    from markov_pipeline.config import ENGINE_CONFIG, get_setting
    tol = get_setting('solver.tolerance')
"""

ENGINE_CONFIG = {

    # =================================================================
    # Jacobi eigensolver
    # =================================================================
    'solver': {
        'tolerance': 1e-12,
        'max_sweeps': 100,
        'symmetry_tolerance': 1e-9,
    },

    # =================================================================
    # Classical MDS / power iteration
    # =================================================================
    'mds': {
        'n_components': 3,
        'max_iter': 256,
        'tolerance': 1e-9,
    },

    # =================================================================
    # Unit-box normalization
    # =================================================================
    'normalize': {
        'min_scale': 1e-12,
    },

    # =================================================================
    # Spectral triple (reference provider)
    # =================================================================
    'spectral_triple': {
        'epsilon': 1e-3,
        'restarts': 8,
        'iterations': 600,
        'learning_rate': 0.5,
        'seed': 42,
    },

    # =================================================================
    # Mixing regimes by spectral gap
    # =================================================================
    'mixing': {
        'fast_gap': 0.1,
        'moderate_gap': 0.01,
    },
}


def get_setting(path: str, default=None):
    """
    Get a setting by dot-notation path.

    Example:
        get_setting('solver.max_sweeps')        # Returns 100
        get_setting('mixing.fast_gap')          # Returns 0.1
    """
    keys = path.split('.')
    value = ENGINE_CONFIG
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def validate_config():
    """Check config for internal consistency."""
    errors = []

    if ENGINE_CONFIG['solver']['tolerance'] <= 0:
        errors.append("solver.tolerance must be > 0")
    if ENGINE_CONFIG['solver']['max_sweeps'] < 1:
        errors.append("solver.max_sweeps must be >= 1")

    if ENGINE_CONFIG['mds']['n_components'] < 1:
        errors.append("mds.n_components must be >= 1")
    if ENGINE_CONFIG['mds']['max_iter'] < 1:
        errors.append("mds.max_iter must be >= 1")

    if ENGINE_CONFIG['normalize']['min_scale'] <= 0:
        errors.append("normalize.min_scale must be > 0")

    if ENGINE_CONFIG['spectral_triple']['epsilon'] <= 0:
        errors.append("spectral_triple.epsilon must be > 0")

    # Fast mixing must be a stricter gate than moderate mixing
    if ENGINE_CONFIG['mixing']['fast_gap'] <= ENGINE_CONFIG['mixing']['moderate_gap']:
        errors.append("mixing.fast_gap should be > mixing.moderate_gap")

    return errors
