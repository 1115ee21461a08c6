"""Re-converge points onto the critical locus.

Each routine solves the two criticality conditions together with one
constraint that removes the remaining degree of freedom:

* :func:`critical_polish_molefrac` holds the overall mole fraction,
* :func:`critical_polish_fixedrho` holds one molar concentration,
* :func:`critical_polish_fixedT` holds the temperature.

The direction ``v0`` at the starting point is used to orient the
eigenvector at every iterate, so that the odd-order condition keeps its
sign while the solver moves.
"""

from typing import Tuple

import numpy as np

from critrace.algorithms.corrector.backends.newton import _NewtonBackend
from critrace.algorithms.criticality.derivatives import get_derivs
from critrace.algorithms.models.protocols import ThermoModel
from critrace.algorithms.types.exceptions import (InvalidInputError,
                                                  NonFiniteResultError)
from critrace.algorithms.utils.config import TOL

_NEWTON = _NewtonBackend()


def _check_finite(x: np.ndarray) -> None:
    if not np.all(np.isfinite(x)):
        raise NonFiniteResultError(f"Something not finite; aborting polishing: {x}")


def critical_polish_molefrac(
    model: ThermoModel,
    T: float,
    rhovec: np.ndarray,
    z0: float,
    *,
    tol: float = TOL,
) -> Tuple[float, np.ndarray]:
    """Polish at fixed mole fraction ``z0``, solving for ``T`` and the total concentration.

    Returns
    -------
    T : float
        Polished temperature in K.
    rhovec : np.ndarray
        Polished molar concentrations ``[z0 rho, (1 - z0) rho]``.
    """
    rhovec = np.asarray(rhovec, dtype=np.float64)
    v0 = get_derivs(model, T, rhovec).ei.v0

    def residual(x):
        rho = np.array([z0 * x[1], (1.0 - z0) * x[1]])
        return get_derivs(model, x[0], rho, v0).conditions

    x0 = np.array([float(T), float(rhovec.sum())])
    x = _NEWTON.run(x0, residual, tol=tol).x
    _check_finite(x)
    return float(x[0]), np.array([x[1] * z0, x[1] * (1.0 - z0)])


def critical_polish_fixedrho(
    model: ThermoModel,
    T: float,
    rhovec: np.ndarray,
    i: int,
    *,
    tol: float = TOL,
) -> Tuple[float, np.ndarray]:
    """Polish with the concentration of component ``i`` held fixed.

    Returns
    -------
    T : float
        Polished temperature in K.
    rhovec : np.ndarray
        Polished molar concentrations; entry ``i`` is unchanged.
    """
    rhovec = np.asarray(rhovec, dtype=np.float64)
    if not 0 <= i < rhovec.size:
        raise InvalidInputError(f"component index {i} out of range")
    rhoval = float(rhovec[i])
    v0 = get_derivs(model, T, rhovec).ei.v0

    def residual(x):
        rho = x[1:]
        cond = get_derivs(model, x[0], rho, v0).conditions
        return np.array([cond[0], cond[1], rho[i] - rhoval])

    x0 = np.concatenate(([float(T)], rhovec))
    x = _NEWTON.run(x0, residual, tol=tol).x
    _check_finite(x)
    return float(x[0]), x[1:].copy()


def critical_polish_fixedT(
    model: ThermoModel,
    T: float,
    rhovec: np.ndarray,
    *,
    tol: float = TOL,
) -> np.ndarray:
    """Polish at fixed temperature, solving for the molar concentrations."""
    rhovec = np.asarray(rhovec, dtype=np.float64)
    v0 = get_derivs(model, T, rhovec).ei.v0

    def residual(x):
        return get_derivs(model, T, x, v0).conditions

    x = _NEWTON.run(rhovec, residual, tol=tol).x
    _check_finite(x)
    return x
