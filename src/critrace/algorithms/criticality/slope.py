"""Tangent of the critical locus.

Differentiating the two criticality conditions along the locus gives a
2x2 linear system for :math:`d\\rho/dT`. Its coefficients are the
temperature derivatives of the directional derivatives (centred finite
difference in ``T``) and their derivatives along the secondary eigenvector
:math:`v_1` (finite difference in the concentrations).
"""

import numpy as np
import scipy.linalg

from critrace.algorithms.criticality.derivatives import get_derivs
from critrace.algorithms.models.protocols import ThermoModel
from critrace.algorithms.types.exceptions import InvalidInputError
from critrace.utils.log_config import logger

DT_STEP = 1e-7
"""Temperature step (K) of the centred difference in ``T``."""

SIGMA2_SCALE = 2e-5
"""Secondary perturbation relative to the total molar concentration."""


def _stencil(rhovec: np.ndarray, v1: np.ndarray, sigma2: float) -> str:
    """Pick ``'centred'``, ``'forward'`` or ``'backward'`` so that no perturbed ``rhovec`` is negative."""
    plus_ok = bool(np.all(rhovec + v1 * sigma2 >= 0))
    minus_ok = bool(np.all(rhovec - v1 * sigma2 >= 0))
    if plus_ok and minus_ok:
        return "centred"
    if plus_ok:
        return "forward"
    if minus_ok:
        return "backward"
    raise InvalidInputError(
        f"Cannot perturb {rhovec} along v1={v1} without a negative concentration"
    )


def _sigma2_derivative(model: ThermoModel, T: float, rhovec: np.ndarray, base, ei) -> np.ndarray:
    """Derivative of ``tot`` along ``v1`` using a stencil that keeps ``rhovec >= 0``."""
    sigma2 = SIGMA2_SCALE * float(np.sum(rhovec))
    v0, v1 = ei.v0, ei.v1

    def tot(k):
        return get_derivs(model, T, rhovec + k * v1 * sigma2, v0).tot

    stencil = _stencil(rhovec, v1, sigma2)
    logger.debug("sigma2 derivative: %s", stencil)
    if stencil == "centred":
        return (tot(1) - tot(-1)) / (2.0 * sigma2)
    if stencil == "forward":
        return (-3.0 * base + 4.0 * tot(1) - tot(2)) / (2.0 * sigma2)
    return (-3.0 * base + 4.0 * tot(-1) - tot(-2)) / (-2.0 * sigma2)


def get_drhovec_dT_crit(model: ThermoModel, T: float, rhovec: np.ndarray) -> np.ndarray:
    """Derivative of the molar concentrations along the critical locus.

    Parameters
    ----------
    model : :class:`~critrace.algorithms.models.protocols.ThermoModel`
        Thermodynamic model.
    T : float
        Temperature in K, on the critical locus.
    rhovec : np.ndarray
        Molar concentrations in mol/m^3, on the critical locus.

    Returns
    -------
    np.ndarray
        :math:`d\\rho_i/dT` along the locus, in mol/(m^3 K).

    Raises
    ------
    :class:`~critrace.algorithms.types.exceptions.InvalidInputError`
        If the secondary perturbation cannot be taken or the linear system
        is numerically singular.
    """
    rhovec = np.asarray(rhovec, dtype=np.float64)
    T = float(T)

    all_derivs = get_derivs(model, T, rhovec)
    derivs = all_derivs.tot
    ei = all_derivs.ei

    plusT = get_derivs(model, T + DT_STEP, rhovec, ei.v0).tot
    minusT = get_derivs(model, T - DT_STEP, rhovec, ei.v0).tot
    derivT = (plusT - minusT) / (2.0 * DT_STEP)

    deriv_sigma2 = _sigma2_derivative(model, T, rhovec, derivs, ei)

    b = np.array([
        [derivs[3], derivs[4]],
        [deriv_sigma2[2], deriv_sigma2[3]],
    ])
    LHS = (ei.eigenvectorscols @ b).T
    RHS = np.array([-derivT[2], -derivT[3]])

    if not (np.all(np.isfinite(LHS)) and np.all(np.isfinite(RHS))):
        raise InvalidInputError(f"Non-finite tangent system at T={T}, rhovec={rhovec}")
    cond = np.linalg.cond(LHS)
    if not np.isfinite(cond) or cond > 1.0 / np.finfo(float).eps:
        raise InvalidInputError(f"Singular tangent system at T={T}, rhovec={rhovec}")

    return scipy.linalg.solve(LHS, RHS)
