"""Directional derivatives of the Helmholtz energy density.

Along the eigenvector :math:`v_0` of the smallest eigenvalue the total
energy density is a function of one variable,
:math:`\\sigma_1 \\mapsto \\Psi(T, \\rho + \\sigma_1 v_0)`. A point is critical
when its second and third derivatives vanish simultaneously.

The ideal-gas part has closed-form derivatives; the residual part is
handed to the derivative oracle.
"""

from dataclasses import dataclass

import numba
import numpy as np

from critrace.algorithms.derivatives.isochoric import isochoric
from critrace.algorithms.linalg.backend import eigen_problem
from critrace.algorithms.linalg.types import EigenResult
from critrace.algorithms.models.protocols import ThermoModel
from critrace.algorithms.utils.config import FASTMATH


@numba.njit(cache=False, fastmath=FASTMATH)
def _ideal_sigma_derivs(RT, rhovec, v0):
    out = np.zeros(5, dtype=np.float64)
    # orders 0 and 1 are not used
    out[0] = -1.0
    out[1] = -1.0
    for i in range(rhovec.size):
        rho = rhovec[i]
        if rho != 0.0:
            v = v0[i]
            out[2] += RT * v ** 2 / rho
            out[3] += -RT * v ** 3 / rho ** 2
            out[4] += 2.0 * RT * v ** 4 / rho ** 3
    return out


@dataclass(frozen=True, eq=False)
class DerivativeSet:
    """Derivatives of orders 0-4 of :math:`\\Psi` along ``v0``.

    Parameters
    ----------
    psi0 : np.ndarray, shape (5,)
        Ideal-gas part. Entries 0 and 1 are placeholders.
    psir : np.ndarray, shape (5,)
        Residual part.
    tot : np.ndarray, shape (5,)
        ``psi0 + psir``. Only entries 2-4 are meaningful.
    ei : :class:`~critrace.algorithms.linalg.types.EigenResult`
        Eigen decomposition that defined the direction.
    """

    psi0: np.ndarray
    psir: np.ndarray
    tot: np.ndarray
    ei: EigenResult

    @property
    def conditions(self) -> np.ndarray:
        """The two criticality residuals ``[tot[2], tot[3]]``."""
        return np.array([self.tot[2], self.tot[3]])


def get_derivs(
    model: ThermoModel,
    T: float,
    rhovec: np.ndarray,
    alignment_v0: np.ndarray | None = None,
) -> DerivativeSet:
    """Derivatives of :math:`\\Psi` along the minimum-eigenvalue direction.

    Parameters
    ----------
    model : :class:`~critrace.algorithms.models.protocols.ThermoModel`
        Thermodynamic model.
    T : float
        Temperature in K.
    rhovec : np.ndarray
        Molar concentrations in mol/m^3.
    alignment_v0 : np.ndarray or None, optional
        Reference direction forwarded to
        :func:`~critrace.algorithms.linalg.backend.eigen_problem`.

    Returns
    -------
    :class:`DerivativeSet`

    Notes
    -----
    ``tot[2]`` equals the smallest eigenvalue of the Hessian of
    :math:`\\Psi` up to round-off.
    """
    rhovec = np.asarray(rhovec, dtype=np.float64)
    R = float(model.R(rhovec / rhovec.sum()))

    ei = eigen_problem(model, T, rhovec, alignment_v0)
    v0 = np.ascontiguousarray(ei.v0)

    psi0 = _ideal_sigma_derivs(R * float(T), rhovec, v0)
    psir = isochoric(model).psir_sigma_derivs(T, rhovec, v0)

    return DerivativeSet(psi0=psi0, psir=psir, tot=psi0 + psir, ei=ei)


def get_criticality_conditions(
    model: ThermoModel,
    T: float,
    rhovec: np.ndarray,
    alignment_v0: np.ndarray | None = None,
) -> np.ndarray:
    """Return the two criticality residuals at ``(T, rhovec)``."""
    return get_derivs(model, T, rhovec, alignment_v0).conditions
