"""Critical-locus tracing for binary mixtures."""

import jax

# Directional derivatives up to fourth order lose too much precision in float32.
jax.config.update("jax_enable_x64", True)

from .algorithms import (ContinuationOptions, ContinuationResult,  # noqa: E402
                         CriticalLocusTracer, TracePoint, TraceStatus,
                         build_model, canonical_PR, canonical_SRK,
                         critical_polish_fixedrho, critical_polish_fixedT,
                         critical_polish_molefrac, eigen_problem,
                         get_criticality_conditions, get_derivs,
                         get_drhovec_dT_crit, trace_critical_arclength_binary,
                         vdWEOS, vdWEOS1)

__version__ = "0.1.0"

__all__ = [
    "ContinuationOptions",
    "ContinuationResult",
    "CriticalLocusTracer",
    "TracePoint",
    "TraceStatus",
    "build_model",
    "canonical_PR",
    "canonical_SRK",
    "critical_polish_fixedrho",
    "critical_polish_fixedT",
    "critical_polish_molefrac",
    "eigen_problem",
    "get_criticality_conditions",
    "get_derivs",
    "get_drhovec_dT_crit",
    "trace_critical_arclength_binary",
    "vdWEOS",
    "vdWEOS1",
]
