"""
Pipeline runner: composes the engine packages for one transition matrix.

Defines the DAG of stages with the context keys they read and write.
Runs stages in dependency order, passing one in-memory context dict.

No math lives here. Only wiring.
"""

import importlib
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from eigensolve import (
    as_square_matrix,
    decompose,
    flatten_result,
    spectrum_summary,
    symmetrize,
)
from mds import classical_mds, normalize_to_unit_box
from spectral_triple import ReferenceSpectralTripleProvider, SpectralTripleProvider
from markov_pipeline.config import get_setting

logger = logging.getLogger(__name__)


@dataclass
class PipelineStage:
    """Definition of a compute stage."""
    name: str
    function: str  # dotted path: 'markov_pipeline.pipeline.run_decomposition'
    inputs: List[str]  # context keys consumed
    outputs: List[str]  # context keys produced
    optional: bool = False
    depends_on: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Stage functions: (context, pipeline) -> dict of new context entries
# ---------------------------------------------------------------------------

def run_spectral_triple(context: Dict[str, Any], pipeline: "Pipeline") -> Dict[str, Any]:
    P = context['transition']
    n = P.shape[0]
    triple = pipeline.provider.compute_spectral_triple(P.ravel(), n, context['epsilon'])
    return {'triple': triple}


def run_spectrum(context: Dict[str, Any], pipeline: "Pipeline") -> Dict[str, Any]:
    triple = context['triple']
    summary = spectrum_summary(
        triple.eigenvalues,
        gap=triple.conditioning.spectral_gap,
        fast_gap=get_setting('mixing.fast_gap'),
        moderate_gap=get_setting('mixing.moderate_gap'),
    )
    summary['ill_conditioned'] = triple.conditioning.ill_conditioned
    return {'spectrum': summary}


def run_decomposition(context: Dict[str, Any], pipeline: "Pipeline") -> Dict[str, Any]:
    result = decompose(
        symmetrize(context['transition']),
        tolerance=get_setting('solver.tolerance'),
        max_sweeps=get_setting('solver.max_sweeps'),
        symmetry_tolerance=get_setting('solver.symmetry_tolerance'),
    )
    return {
        'decomposition': result,
        'decomposition_row': flatten_result(result),
    }


def run_embedding(context: Dict[str, Any], pipeline: "Pipeline") -> Dict[str, Any]:
    result = classical_mds(
        context['triple'].distance_matrix(),
        n_components=get_setting('mds.n_components'),
        max_iter=get_setting('mds.max_iter'),
        tolerance=get_setting('mds.tolerance'),
        seed=pipeline.seed,
    )
    return {'embedding': result['points'], 'embedding_eigenvalues': result['eigenvalues']}


def run_normalization(context: Dict[str, Any], pipeline: "Pipeline") -> Dict[str, Any]:
    return {
        'normalized': normalize_to_unit_box(
            context['embedding'],
            min_scale=get_setting('normalize.min_scale'),
        ),
    }


# Canonical stage ordering
STAGES: List[PipelineStage] = [
    PipelineStage(
        name='spectral_triple',
        function='markov_pipeline.pipeline.run_spectral_triple',
        inputs=['transition', 'epsilon'],
        outputs=['triple'],
    ),
    PipelineStage(
        name='spectrum',
        function='markov_pipeline.pipeline.run_spectrum',
        inputs=['triple'],
        outputs=['spectrum'],
        depends_on=['spectral_triple'],
    ),
    PipelineStage(
        name='decomposition',
        function='markov_pipeline.pipeline.run_decomposition',
        inputs=['transition'],
        outputs=['decomposition', 'decomposition_row'],
    ),
    PipelineStage(
        name='embedding',
        function='markov_pipeline.pipeline.run_embedding',
        inputs=['triple'],
        outputs=['embedding', 'embedding_eigenvalues'],
        depends_on=['spectral_triple'],
    ),
    PipelineStage(
        name='normalization',
        function='markov_pipeline.pipeline.run_normalization',
        inputs=['embedding'],
        outputs=['normalized'],
        depends_on=['embedding'],
        optional=True,
    ),
]


class Pipeline:
    """
    Orchestrates execution of all compute stages.

    Usage:
        pipeline = Pipeline(seed=0)
        analysis = pipeline.run(P)
        analysis = pipeline.run(P, include=['decomposition'])
    """

    def __init__(
        self,
        provider: Optional[SpectralTripleProvider] = None,
        stages: Optional[List[PipelineStage]] = None,
        seed: Optional[int] = None,
    ):
        self.provider = provider or ReferenceSpectralTripleProvider(
            restarts=get_setting('spectral_triple.restarts'),
            iterations=get_setting('spectral_triple.iterations'),
            learning_rate=get_setting('spectral_triple.learning_rate'),
            seed=get_setting('spectral_triple.seed'),
        )
        self.stages = stages or STAGES
        self.seed = seed
        self._stage_map = {s.name: s for s in self.stages}

    def get_execution_order(
        self,
        include: Optional[List[str]] = None,
        skip_optional: bool = False,
    ) -> List[PipelineStage]:
        """
        Get topologically sorted execution order.

        Parameters
        ----------
        include : list of str, optional
            Only include these stages (plus dependencies).
        skip_optional : bool
            Skip optional stages.

        Returns
        -------
        list of PipelineStage in execution order.
        """
        if include:
            unknown = [name for name in include if name not in self._stage_map]
            if unknown:
                raise KeyError(f"unknown stages: {unknown}")
            # Resolve dependencies recursively
            needed = set()
            to_process = list(include)
            while to_process:
                name = to_process.pop()
                if name in needed:
                    continue
                needed.add(name)
                to_process.extend(self._stage_map[name].depends_on)
            stages = [s for s in self.stages if s.name in needed]
        else:
            stages = list(self.stages)

        if skip_optional:
            stages = [s for s in stages if not s.optional]

        return stages

    def run_stage(self, stage: PipelineStage, context: Dict[str, Any]) -> Dict[str, Any]:
        """Run a single stage and merge its outputs into context."""
        missing = [key for key in stage.inputs if key not in context]
        if missing:
            raise KeyError(f"stage {stage.name!r} is missing inputs: {missing}")

        module_path, func_name = stage.function.rsplit('.', 1)
        func = getattr(importlib.import_module(module_path), func_name)

        t0 = time.perf_counter()
        outputs = func(context, self)
        elapsed = time.perf_counter() - t0

        context.update(outputs)
        context['timings'][stage.name] = elapsed
        logger.debug("stage %s finished in %.4fs", stage.name, elapsed)
        return context

    def run(
        self,
        transition,
        epsilon: Optional[float] = None,
        include: Optional[List[str]] = None,
        skip_optional: bool = False,
    ) -> Dict[str, Any]:
        """
        Run the pipeline on one transition matrix.

        Parameters
        ----------
        transition : array-like
            (n, n) row-stochastic matrix.
        epsilon : float, optional
            Spectral-triple regularizer. Defaults to config.
        include : list of str, optional
            Only run these stages (plus dependencies).

        Returns
        -------
        dict with 'transition', 'epsilon', 'timings' and the outputs
        of every stage that ran.
        """
        P = as_square_matrix(transition, name="transition")
        if epsilon is None:
            epsilon = get_setting('spectral_triple.epsilon')

        context: Dict[str, Any] = {
            'transition': P,
            'epsilon': float(epsilon),
            'timings': {},
        }
        for stage in self.get_execution_order(include, skip_optional):
            self.run_stage(stage, context)
        return context

    def list_stages(self) -> List[Dict[str, Any]]:
        """List all stages with their metadata."""
        return [
            {
                'name': s.name,
                'function': s.function,
                'inputs': s.inputs,
                'outputs': s.outputs,
                'optional': s.optional,
            }
            for s in self.stages
        ]


def analyze_transition(
    transition,
    epsilon: Optional[float] = None,
    provider: Optional[SpectralTripleProvider] = None,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Run every stage on a transition matrix."""
    return Pipeline(provider=provider, seed=seed).run(transition, epsilon=epsilon)
