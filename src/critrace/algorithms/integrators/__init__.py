"""Steppers used by the critical-locus continuation."""

from .base import StepResult, _Stepper
from .rk import _CashKarp54, _ExplicitEuler, make_stepper

__all__ = [
    "StepResult",
    "make_stepper",
]
