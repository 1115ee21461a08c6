"""Equations of state that can be traced.

Every model implements :class:`~critrace.algorithms.models.protocols.ThermoModel`.
New models are registered with
:func:`~critrace.algorithms.models.factory.register_model` and become
available to :func:`~critrace.algorithms.models.factory.build_model`.
"""

from .cubics import GenericCubic, canonical_PR, canonical_SRK
from .factory import available_models, build_model, register_model
from .protocols import ThermoModel
from .vdw import vdWEOS, vdWEOS1

__all__ = [
    "ThermoModel",
    "vdWEOS1",
    "vdWEOS",
    "GenericCubic",
    "canonical_PR",
    "canonical_SRK",
    "build_model",
    "register_model",
    "available_models",
]
