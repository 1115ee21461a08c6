"""
Types for the corrector module.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np

#: Residual function ``R(x)``; the solver drives it to zero.
ResidualFn = Callable[[np.ndarray], np.ndarray]

#: Jacobian function ``dR/dx(x)`` with shape ``(m, n)``.
JacobianFn = Callable[[np.ndarray], np.ndarray]


@dataclass(frozen=True, eq=False)
class NewtonResult:
    """Outcome of a converged Newton solve.

    Parameters
    ----------
    x : np.ndarray
        Converged argument.
    iterations : int
        Number of Newton updates taken.
    step_norm : float
        Infinity norm of the last update.
    residual : np.ndarray
        Residual at ``x``.
    """

    x: np.ndarray
    iterations: int
    step_norm: float
    residual: np.ndarray
