"""
Pipeline package for the Markov spectral engine.

Runs the engine in correct order for one transition matrix:
spectral_triple → spectrum → decomposition → embedding → normalization

This package imports and sequences the other packages.
No math lives here. Only wiring, configuration and tabular views.
"""

from markov_pipeline.config import ENGINE_CONFIG, get_setting, validate_config
from markov_pipeline.pipeline import Pipeline, PipelineStage, STAGES, analyze_transition
from markov_pipeline.frame import embedding_frame, spectrum_frame

__all__ = [
    'ENGINE_CONFIG',
    'get_setting',
    'validate_config',
    'Pipeline',
    'PipelineStage',
    'STAGES',
    'analyze_transition',
    'embedding_frame',
    'spectrum_frame',
]
