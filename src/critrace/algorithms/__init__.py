""" Public API for the :mod:`~critrace.algorithms` package.
"""

from .continuation import (ContinuationOptions, ContinuationResult,
                           CriticalLocusTracer, TracePoint, TraceStatus,
                           trace_critical_arclength_binary)
from .corrector import (critical_polish_fixedrho, critical_polish_fixedT,
                        critical_polish_molefrac)
from .criticality import (get_criticality_conditions, get_derivs,
                          get_drhovec_dT_crit)
from .linalg import eigen_problem
from .models import (build_model, canonical_PR, canonical_SRK, vdWEOS,
                     vdWEOS1)

__all__ = [
    "ContinuationOptions",
    "ContinuationResult",
    "CriticalLocusTracer",
    "TracePoint",
    "TraceStatus",
    "trace_critical_arclength_binary",
    "critical_polish_fixedrho",
    "critical_polish_fixedT",
    "critical_polish_molefrac",
    "get_criticality_conditions",
    "get_derivs",
    "get_drhovec_dT_crit",
    "eigen_problem",
    "build_model",
    "canonical_PR",
    "canonical_SRK",
    "vdWEOS",
    "vdWEOS1",
]
