"""Isochoric derivatives of a thermodynamic model.

The natural variables here are the temperature and the vector of molar
concentrations ``rhovec``. The residual Helmholtz energy density is

.. math::

    \\Psi^r(T, \\boldsymbol{\\rho}) = \\alpha^r(T, \\rho, \\mathbf{x})\\, R\\, T\\, \\rho,
    \\qquad \\rho = \\sum_i \\rho_i, \\qquad \\mathbf{x} = \\boldsymbol{\\rho} / \\rho .

All kernels are compiled with :func:`jax.jit` once per model instance. The
model is closed over, so it is treated as a compile-time constant.
"""

import jax
import jax.numpy as jnp
import numpy as np

from critrace.algorithms.derivatives.oracle import (DerivativeOracle,
                                                    JaxDerivativeOracle)
from critrace.algorithms.models.protocols import ThermoModel


class IsochoricDerivatives:
    """Compiled derivative kernels of one model.

    Parameters
    ----------
    model : :class:`~critrace.algorithms.models.protocols.ThermoModel`
        Model to differentiate.
    oracle : :class:`~critrace.algorithms.derivatives.oracle.DerivativeOracle`, optional
        Oracle used for the directional derivatives. Defaults to
        :class:`~critrace.algorithms.derivatives.oracle.JaxDerivativeOracle`.
    """

    def __init__(self, model: ThermoModel, oracle: DerivativeOracle | None = None):
        self._model = model
        self._oracle = oracle if oracle is not None else JaxDerivativeOracle()

        def alphar_rhovec(T, rhovec):
            rhotot = jnp.sum(rhovec)
            return model.alphar(T, rhotot, rhovec / rhotot)

        def psir(T, rhovec):
            rhotot = jnp.sum(rhovec)
            molefrac = rhovec / rhotot
            return model.alphar(T, rhotot, molefrac) * model.R(molefrac) * T * rhotot

        def pr(T, rhovec):
            rhotot = jnp.sum(rhovec)
            grad = jax.grad(alphar_rhovec, argnums=1)(T, rhovec)
            return jnp.dot(rhovec, grad) * rhotot * model.R(rhovec / rhotot) * T

        def splus(T, rhovec):
            dalphar_dT = jax.grad(alphar_rhovec, argnums=0)(T, rhovec)
            return alphar_rhovec(T, rhovec) - T * dalphar_dT

        oracle_ = self._oracle

        def psir_sigma(T, rhovec, v):
            return oracle_.derivatives(lambda sigma: psir(T, rhovec + sigma * v), 0.0, 4)

        self._alphar = jax.jit(alphar_rhovec)
        self._psir = jax.jit(psir)
        self._hessian = jax.jit(jax.hessian(psir, argnums=1))
        self._pr = jax.jit(pr)
        self._splus = jax.jit(splus)
        self._psir_sigma = jax.jit(psir_sigma)

    @property
    def model(self) -> ThermoModel:
        return self._model

    def get_alphar(self, T: float, rhovec: np.ndarray) -> float:
        return float(self._alphar(float(T), _vec(rhovec)))

    def get_Psir(self, T: float, rhovec: np.ndarray) -> float:
        """Residual Helmholtz energy density in J/m^3."""
        return float(self._psir(float(T), _vec(rhovec)))

    def build_Psir_Hessian(self, T: float, rhovec: np.ndarray) -> np.ndarray:
        """Hessian of :math:`\\Psi^r` with respect to the molar concentrations."""
        return np.array(self._hessian(float(T), _vec(rhovec)), dtype=np.float64)

    def get_pr(self, T: float, rhovec: np.ndarray) -> float:
        """Residual pressure in Pa."""
        return float(self._pr(float(T), _vec(rhovec)))

    def get_splus(self, T: float, rhovec: np.ndarray) -> float:
        """Reduced residual entropy ``s^+ = alphar - T dalphar/dT``."""
        return float(self._splus(float(T), _vec(rhovec)))

    def get_pressure(self, T: float, rhovec: np.ndarray) -> float:
        """Total pressure (ideal gas plus residual) in Pa."""
        rhovec = _vec(rhovec)
        rhotot = float(np.sum(rhovec))
        R = float(self._model.R(rhovec / rhotot))
        return rhotot * R * float(T) + self.get_pr(T, rhovec)

    def psir_sigma_derivs(self, T: float, rhovec: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Derivatives of orders 0-4 of :math:`\\Psi^r(T, \\rho + \\sigma v)` at ``sigma = 0``."""
        out = self._psir_sigma(float(T), _vec(rhovec), _vec(v))
        return np.asarray(out, dtype=np.float64)


def _vec(x) -> np.ndarray:
    return np.asarray(x, dtype=np.float64)


_CACHE_ATTR = "_critrace_isochoric"


def isochoric(model: ThermoModel) -> IsochoricDerivatives:
    """Return the cached :class:`IsochoricDerivatives` of ``model``.

    The instance is stored on the model itself so that the compiled kernels
    live exactly as long as the model does. Models without an instance
    ``__dict__`` get a fresh, uncached instance.
    """
    ider = getattr(model, "__dict__", {}).get(_CACHE_ATTR)
    if ider is None:
        ider = IsochoricDerivatives(model)
        if hasattr(model, "__dict__"):
            model.__dict__[_CACHE_ATTR] = ider
    return ider
