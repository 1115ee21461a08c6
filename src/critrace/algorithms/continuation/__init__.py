"""Arclength continuation of binary critical loci."""

from .base import CriticalLocusTracer, trace_critical_arclength_binary
from .config import ContinuationOptions
from .types import JSON_KEYS, ContinuationResult, TracePoint, TraceStatus

__all__ = [
    "ContinuationOptions",
    "ContinuationResult",
    "CriticalLocusTracer",
    "JSON_KEYS",
    "TracePoint",
    "TraceStatus",
    "trace_critical_arclength_binary",
]
