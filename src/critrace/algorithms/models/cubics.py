"""Two-parameter cubic equations of state.

All cubics share the residual Helmholtz energy

.. math::

    \\alpha^r = -\\ln(1 - b\\rho)
        - \\frac{a}{R T b (\\Delta_1 - \\Delta_2)}
          \\ln\\frac{1 + \\Delta_1 b \\rho}{1 + \\Delta_2 b \\rho}

and differ only in the constants :math:`\\Delta_1`, :math:`\\Delta_2`,
:math:`\\Omega_a`, :math:`\\Omega_b` and the :math:`\\kappa(\\omega)`
correlation of the Soave alpha function.
"""

from typing import Callable

import jax.numpy as jnp
import numpy as np

from critrace.algorithms.models.base import (R_CODATA, _as_vector,
                                             _ConstantRModel, _square_matrix)
from critrace.algorithms.models.factory import register_model
from critrace.algorithms.types.exceptions import InvalidInputError


class GenericCubic(_ConstantRModel):
    """Cubic equation of state with Soave-type temperature dependence.

    Parameters
    ----------
    Tcrit, pcrit, acentric : array_like
        Critical temperatures (K), critical pressures (Pa) and acentric
        factors of the components.
    Delta1, Delta2 : float
        Constants of the cubic denominator.
    OmegaA, OmegaB : float
        Universal constants of the attraction and co-volume parameters.
    kappa : callable
        Correlation ``kappa(acentric)`` of the alpha function.
    kmat : array_like or None
        Binary interaction parameters ``k_ij``; zero when omitted.
    """

    def __init__(
        self,
        Tcrit,
        pcrit,
        acentric,
        *,
        Delta1: float,
        Delta2: float,
        OmegaA: float,
        OmegaB: float,
        kappa: Callable[[np.ndarray], np.ndarray],
        kmat=None,
    ):
        self.Tcrit = _as_vector(Tcrit, "Tcrit")
        self.pcrit = _as_vector(pcrit, "pcrit")
        self.acentric = _as_vector(acentric, "acentric")
        if not (self.Tcrit.shape == self.pcrit.shape == self.acentric.shape):
            raise InvalidInputError("Tcrit, pcrit and acentric must have the same length")
        if Delta1 == Delta2:
            raise InvalidInputError("Delta1 and Delta2 must differ")
        self.Delta1 = float(Delta1)
        self.Delta2 = float(Delta2)
        self.kmat = _square_matrix(kmat, self.Tcrit.size)
        self.kappa = np.asarray(kappa(self.acentric), dtype=np.float64)
        self.ai0 = OmegaA * (R_CODATA * self.Tcrit) ** 2 / self.pcrit
        self.bi = OmegaB * R_CODATA * self.Tcrit / self.pcrit

    @property
    def n_components(self) -> int:
        return self.Tcrit.size

    def get_ai(self, T):
        alpha = (1.0 + self.kappa * (1.0 - jnp.sqrt(T / self.Tcrit))) ** 2
        return self.ai0 * alpha

    def get_a(self, T, molefrac):
        ai = self.get_ai(T)
        amat = jnp.sqrt(jnp.outer(ai, ai)) * (1.0 - self.kmat)
        x = jnp.asarray(molefrac)
        return jnp.dot(x, jnp.dot(amat, x))

    def get_b(self, molefrac):
        return jnp.dot(jnp.asarray(molefrac), self.bi)

    def alphar(self, T, rhotot, molefrac):
        a = self.get_a(T, molefrac)
        b = self.get_b(molefrac)
        brho = b * rhotot
        return (
            -jnp.log(1.0 - brho)
            - a / (R_CODATA * T * b * (self.Delta1 - self.Delta2))
            * jnp.log((1.0 + self.Delta1 * brho) / (1.0 + self.Delta2 * brho))
        )


def _pr_kappa(acentric):
    return 0.37464 + 1.54226 * acentric - 0.26992 * acentric ** 2


def _srk_kappa(acentric):
    return 0.48 + 1.574 * acentric - 0.176 * acentric ** 2


def canonical_PR(Tcrit, pcrit, acentric, kmat=None) -> GenericCubic:
    """Peng-Robinson equation of state."""
    return GenericCubic(
        Tcrit, pcrit, acentric,
        Delta1=1.0 + np.sqrt(2.0),
        Delta2=1.0 - np.sqrt(2.0),
        OmegaA=0.45724,
        OmegaB=0.07780,
        kappa=_pr_kappa,
        kmat=kmat,
    )


def canonical_SRK(Tcrit, pcrit, acentric, kmat=None) -> GenericCubic:
    """Soave-Redlich-Kwong equation of state."""
    return GenericCubic(
        Tcrit, pcrit, acentric,
        Delta1=1.0,
        Delta2=0.0,
        OmegaA=0.42748,
        OmegaB=0.08664,
        kappa=_srk_kappa,
        kmat=kmat,
    )


def _cubic_builder(make: Callable[..., GenericCubic]):
    def build(spec: dict) -> GenericCubic:
        return make(spec["Tcrit / K"], spec["pcrit / Pa"], spec["acentric"], kmat=spec.get("kmat"))
    return build


register_model("PR", builder=_cubic_builder(canonical_PR))
register_model("SRK", builder=_cubic_builder(canonical_SRK))
