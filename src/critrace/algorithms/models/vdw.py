"""Van der Waals equations of state.

:class:`vdWEOS1` takes the attraction and co-volume parameters directly and
is mostly useful for pure fluids. :class:`vdWEOS` builds the parameters of
each component from its critical temperature and pressure and combines them
with the classical one-fluid mixing rules

.. math::

    a = \\sum_i \\sum_j x_i x_j \\sqrt{a_i a_j}, \\qquad b = \\sum_i x_i b_i .
"""

import jax.numpy as jnp
import numpy as np

from critrace.algorithms.models.base import (R_CODATA, _as_vector,
                                             _ConstantRModel)
from critrace.algorithms.models.factory import register_model
from critrace.algorithms.types.exceptions import InvalidInputError


@register_model("vdW1")
class vdWEOS1(_ConstantRModel):
    """Single-parameter-set van der Waals fluid.

    Parameters
    ----------
    a : float
        Attraction parameter in Pa m^6/mol^2.
    b : float
        Co-volume in m^3/mol.
    """

    def __init__(self, a: float, b: float):
        if a <= 0 or b <= 0:
            raise InvalidInputError("vdW parameters a and b must be positive")
        self.a = float(a)
        self.b = float(b)

    @classmethod
    def from_spec(cls, spec: dict) -> "vdWEOS1":
        return cls(spec["a"], spec["b"])

    def alphar(self, T, rhotot, molefrac):
        return -jnp.log(1.0 - self.b * rhotot) - self.a * rhotot / (R_CODATA * T)

    def critical_point(self) -> tuple[float, float]:
        """Return the analytic critical temperature and molar concentration."""
        Tc = 8.0 * self.a / (27.0 * self.b * R_CODATA)
        rhoc = 1.0 / (3.0 * self.b)
        return Tc, rhoc


@register_model("vdW")
class vdWEOS(_ConstantRModel):
    """Van der Waals mixture built from pure-component critical points.

    Parameters
    ----------
    Tcrit : array_like
        Critical temperatures in K.
    pcrit : array_like
        Critical pressures in Pa.
    """

    def __init__(self, Tcrit, pcrit):
        self.Tcrit = _as_vector(Tcrit, "Tcrit")
        self.pcrit = _as_vector(pcrit, "pcrit")
        if self.Tcrit.shape != self.pcrit.shape:
            raise InvalidInputError("Tcrit and pcrit must have the same length")
        self.ai = 27.0 / 64.0 * (R_CODATA * self.Tcrit) ** 2 / self.pcrit
        self.bi = 1.0 / 8.0 * R_CODATA * self.Tcrit / self.pcrit
        self._amat = np.sqrt(np.outer(self.ai, self.ai))

    @classmethod
    def from_spec(cls, spec: dict) -> "vdWEOS":
        return cls(spec["Tcrit / K"], spec["pcrit / Pa"])

    @property
    def n_components(self) -> int:
        return self.Tcrit.size

    def alphar(self, T, rhotot, molefrac):
        x = jnp.asarray(molefrac)
        a = jnp.dot(x, jnp.dot(self._amat, x))
        b = jnp.dot(x, self.bi)
        return -jnp.log(1.0 - b * rhotot) - a * rhotot / (R_CODATA * T)

    def pure_critical_point(self, i: int) -> tuple[float, np.ndarray]:
        """Critical point of pure component ``i`` as ``(T, rhovec)``.

        The returned concentration vector is zero everywhere except at ``i``,
        which is the natural starting point of a critical-locus trace.
        """
        if not 0 <= i < self.n_components:
            raise InvalidInputError(f"component index {i} out of range")
        rhovec = np.zeros(self.n_components)
        rhovec[i] = 8.0 * self.pcrit[i] / (3.0 * R_CODATA * self.Tcrit[i])
        return float(self.Tcrit[i]), rhovec
