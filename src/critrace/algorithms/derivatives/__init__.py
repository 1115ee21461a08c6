"""Derivatives of the Helmholtz energy with respect to molar concentrations."""

from .isochoric import IsochoricDerivatives, isochoric
from .oracle import DerivativeOracle, JaxDerivativeOracle

__all__ = [
    "DerivativeOracle",
    "JaxDerivativeOracle",
    "IsochoricDerivatives",
    "isochoric",
]
