"""Abstract base for corrector backends."""

from abc import abstractmethod

import numpy as np

from critrace.algorithms.corrector.types import NewtonResult, ResidualFn
from critrace.algorithms.types.core import _CritraceBaseBackend


class _CorrectorBackend(_CritraceBaseBackend[NewtonResult]):
    """Root-finder for square or over-determined nonlinear systems."""

    @abstractmethod
    def run(self, x0: np.ndarray, residual_fn: ResidualFn, **kwargs) -> NewtonResult:
        """Solve ``residual_fn(x) = 0`` starting from ``x0``."""
        ...
