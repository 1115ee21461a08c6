"""Provide abstract interfaces for single-step ODE integration.

The continuation advances its state one step at a time and inspects the
state between steps, so the integrators here expose a ``try_step`` call
instead of integrating over a whole interval.

References
----------
Hairer, E., Norsett, S. P., & Wanner, G. (1993). "Solving Ordinary
Differential Equations I: Non-stiff Problems".
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

import numpy as np

#: Right-hand side ``f(t, y) -> dy/dt``.
RHSFn = Callable[[float, np.ndarray], np.ndarray]


@dataclass(frozen=True, eq=False)
class StepResult:
    """Outcome of one attempted step.

    Parameters
    ----------
    accepted : bool
        Whether the step was taken. A rejected step leaves ``y`` and ``t``
        unchanged and only proposes a smaller ``dt``.
    y : np.ndarray
        State after the step (the input state on rejection).
    t : float
        Independent variable after the step.
    dt : float
        Step size proposed for the next attempt.
    error : float
        Scaled error estimate; 0 for steppers without an estimate.
    """

    accepted: bool
    y: np.ndarray
    t: float
    dt: float
    error: float = 0.0


class _Stepper(ABC):
    """Define the minimal interface of a single-step integrator.

    Parameters
    ----------
    name : str
        Human-readable identifier of the method.
    """

    def __init__(self, name: str):
        self.name = name

    @property
    @abstractmethod
    def order(self) -> int:
        """Formal order of accuracy of the method."""
        pass

    @abstractmethod
    def try_step(self, f: RHSFn, y: np.ndarray, t: float, dt: float) -> StepResult:
        """Attempt one step of size ``dt`` from ``(t, y)``."""
        pass
