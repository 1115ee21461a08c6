"""Root-finding used to re-converge points onto the critical locus."""

from .backends.newton import _NewtonBackend
from .polish import (critical_polish_fixedrho, critical_polish_fixedT,
                     critical_polish_molefrac)
from .types import NewtonResult

__all__ = [
    "NewtonResult",
    "critical_polish_molefrac",
    "critical_polish_fixedrho",
    "critical_polish_fixedT",
]
