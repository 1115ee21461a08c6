"""User-facing facade for tracing critical loci.

The facade assembles the engine, backend and interface and provides a
simple API taking a model and a starting critical point.
"""

from dataclasses import replace
from typing import Iterator, Optional

import numpy as np

from critrace.algorithms.continuation.config import ContinuationOptions
from critrace.algorithms.continuation.types import (ContinuationResult,
                                                    TracePoint,
                                                    _ContinuationProblem)
from critrace.algorithms.models.protocols import ThermoModel
from critrace.algorithms.types.core import _CritraceBaseFacade


class CriticalLocusTracer(
    _CritraceBaseFacade[ContinuationOptions, _ContinuationProblem, ContinuationResult]
):
    """Trace the critical locus of a binary mixture.

    Use :meth:`with_default_engine` to build a tracer wired with the
    arclength backend.

    Examples
    --------
    >>> from critrace import CriticalLocusTracer, vdWEOS
    >>> model = vdWEOS([150.687, 190.564], [4.863e6, 4.5992e6])
    >>> T0, rhovec0 = model.pure_critical_point(0)
    >>> tracer = CriticalLocusTracer.with_default_engine()
    >>> result = tracer.trace(model, T0, rhovec0, max_step_count=50)
    """

    def __init__(self, config: ContinuationOptions, interface, engine) -> None:
        super().__init__(config, interface, engine)
        self._results: Optional[ContinuationResult] = None

    @classmethod
    def with_default_engine(cls, *, config: ContinuationOptions | None = None) -> "CriticalLocusTracer":
        """Create a tracer with the default arclength engine."""
        from critrace.algorithms.continuation.backends.arclength import \
            _ArclengthBackend
        from critrace.algorithms.continuation.engine import \
            _ContinuationEngine
        from critrace.algorithms.continuation.interfaces import \
            _CriticalLocusInterface

        backend = _ArclengthBackend()
        intf = _CriticalLocusInterface()
        engine = _ContinuationEngine(backend=backend, interface=intf)
        return cls(config if config is not None else ContinuationOptions(), intf, engine)

    @property
    def results(self) -> Optional[ContinuationResult]:
        """Result of the last call to :meth:`trace`."""
        return self._results

    def _problem(self, model, T0, rhovec0, filename, overrides) -> _ContinuationProblem:
        options = replace(self._config, **overrides) if overrides else self._config
        return self._create_problem(config=options, model=model, T0=T0, rhovec0=rhovec0, filename=filename)

    def trace(
        self,
        model: ThermoModel,
        T0: float,
        rhovec0: np.ndarray,
        filename: Optional[str] = None,
        **overrides,
    ) -> ContinuationResult:
        """Trace the locus from a critical point.

        Parameters
        ----------
        model : :class:`~critrace.algorithms.models.protocols.ThermoModel`
            Thermodynamic model.
        T0 : float
            Temperature of the starting critical point in K.
        rhovec0 : array_like
            Molar concentrations of the starting critical point in mol/m^3.
        filename : str, optional
            CSV progress file written while tracing.
        **overrides
            Fields of :class:`~critrace.algorithms.continuation.config.ContinuationOptions`
            that apply to this call only.

        Returns
        -------
        :class:`~critrace.algorithms.continuation.types.ContinuationResult`

        Raises
        ------
        :class:`~critrace.algorithms.types.exceptions.CritraceError`
            If the starting point cannot be evaluated. Failures after the
            first step are reported through the result status instead.
        """
        problem = self._problem(model, T0, rhovec0, filename, overrides)
        self._results = self._get_engine().solve(problem)
        return self._results

    def iter_trace(
        self,
        model: ThermoModel,
        T0: float,
        rhovec0: np.ndarray,
        filename: Optional[str] = None,
        **overrides,
    ) -> Iterator[TracePoint]:
        """Return a lazy iterator over the points of the locus.

        The iterator exposes ``status``, ``error``, ``accepted_count`` and
        ``rejected_count`` once exhausted.
        """
        problem = self._problem(model, T0, rhovec0, filename, overrides)
        call = self._interface.to_backend_inputs(problem)
        return self._backend.iterate(*call.args, **call.kwargs)


def trace_critical_arclength_binary(
    model: ThermoModel,
    T0: float,
    rhovec0: np.ndarray,
    filename: Optional[str] = None,
    options: Optional[ContinuationOptions] = None,
) -> list[dict]:
    """Trace a binary critical locus and return its points as JSON records.

    See :meth:`CriticalLocusTracer.trace`; the keys of the records are
    listed in :data:`~critrace.algorithms.continuation.types.JSON_KEYS`.
    """
    tracer = CriticalLocusTracer.with_default_engine(config=options)
    return tracer.trace(model, T0, rhovec0, filename=filename).to_json()
