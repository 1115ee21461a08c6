"""Provide the configuration of the critical-locus continuation."""

from dataclasses import dataclass

from critrace.algorithms.types.core import _CritraceBaseConfig
from critrace.algorithms.types.exceptions import InvalidInputError


@dataclass(frozen=True)
class ContinuationOptions(_CritraceBaseConfig):
    """Options of the arclength continuation of a binary critical locus.

    Parameters
    ----------
    abs_err, rel_err : float, default 1e-6
        Absolute and relative error tolerances of the controlled stepper.
    init_dt : float, default 10
        Initial step in pseudo-time. Pseudo-time is an arclength in
        concentration space, so the unit is mol/m^3.
    max_dt : float, default 1e10
        Upper bound of the step after each accepted step.
    T_tol : float, default 1e-6
        A step that changes the temperature by less than this (K) counts
        as a small step.
    init_c : float, default 1
        Initial sign of the search direction, +1 or -1. It is flipped
        automatically when the first step would make a concentration
        negative.
    small_T_count : int, default 5
        The trace has converged once more than this many consecutive steps
        were small.
    integration_order : {1, 5}, default 5
        1 for fixed-step explicit Euler, 5 for the controlled Cash-Karp
        5(4) pair.
    max_step_count : int, default 1000
        Maximum number of accepted steps.
    skip_dircheck_count : int, default 1
        Number of initial steps that do not update the reference direction
        used for the direction-continuity check.
    polish : bool, default False
        Re-converge every accepted point at fixed mole fraction.
    min_dt : float, default 1e-12
        Smallest step the controller may retry with after rejections.
    verbose : bool, default False
        Log a progress line for every recorded point.
    """

    abs_err: float = 1.0e-6
    rel_err: float = 1.0e-6
    init_dt: float = 10.0
    max_dt: float = 1.0e10
    T_tol: float = 1.0e-6
    init_c: float = 1.0
    small_T_count: int = 5
    integration_order: int = 5
    max_step_count: int = 1000
    skip_dircheck_count: int = 1
    polish: bool = False
    min_dt: float = 1.0e-12
    verbose: bool = False

    def _validate(self) -> None:
        """Validate the configuration."""
        if self.abs_err <= 0 or self.rel_err < 0:
            raise ValueError("abs_err must be positive and rel_err non-negative")
        if self.init_dt <= 0 or self.max_dt <= 0:
            raise ValueError("init_dt and max_dt must be positive")
        if self.min_dt <= 0 or self.min_dt > self.init_dt:
            raise ValueError("min_dt must be positive and not larger than init_dt")
        if self.T_tol < 0:
            raise ValueError("T_tol must be non-negative")
        if self.init_c not in (1, -1):
            raise ValueError(f"init_c must be +1 or -1, got {self.init_c}")
        if self.small_T_count < 0:
            raise ValueError("small_T_count must be non-negative")
        if self.max_step_count < 0:
            raise ValueError("max_step_count must be non-negative")
        if self.skip_dircheck_count < 0:
            raise ValueError("skip_dircheck_count must be non-negative")
        if self.integration_order not in (1, 5):
            raise InvalidInputError(
                f"integration order is invalid: {self.integration_order}. Must be 1 or 5."
            )
