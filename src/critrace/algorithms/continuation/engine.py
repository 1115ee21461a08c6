"""Engine orchestrating the critical-locus trace."""

from critrace.algorithms.continuation.backends.base import _ContinuationBackend
from critrace.algorithms.continuation.interfaces import \
    _CriticalLocusInterface
from critrace.algorithms.continuation.types import (ContinuationResult,
                                                    TracePoint,
                                                    _ContinuationProblem)
from critrace.algorithms.types.core import _BackendCall, _CritraceBaseEngine
from critrace.algorithms.types.exceptions import CritraceError, EngineError


class _ContinuationEngine(
    _CritraceBaseEngine[_ContinuationProblem, ContinuationResult, tuple[list[TracePoint], dict]]
):
    """Run the backend on a problem and package the points.

    Library errors raised while the trace starts reach the caller
    unchanged; anything else is wrapped in
    :class:`~critrace.algorithms.types.exceptions.EngineError`.
    """

    def __init__(
        self,
        *,
        backend: _ContinuationBackend,
        interface: _CriticalLocusInterface | None = None,
    ) -> None:
        super().__init__(backend=backend, interface=interface)

    def _handle_backend_failure(self, exc: Exception, *, problem: _ContinuationProblem, call: _BackendCall) -> None:
        if isinstance(exc, CritraceError):
            return
        raise EngineError("Critical-locus continuation failed") from exc
