"""Criticality conditions and the tangent of the critical locus."""

from .derivatives import DerivativeSet, get_criticality_conditions, get_derivs
from .slope import get_drhovec_dT_crit

__all__ = [
    "DerivativeSet",
    "get_derivs",
    "get_criticality_conditions",
    "get_drhovec_dT_crit",
]
