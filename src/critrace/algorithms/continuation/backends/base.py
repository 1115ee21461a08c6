"""Abstract base class for continuation backends."""

from abc import abstractmethod

from critrace.algorithms.continuation.types import TracePoint
from critrace.algorithms.types.core import _CritraceBaseBackend


class _ContinuationBackend(_CritraceBaseBackend[tuple[list[TracePoint], dict]]):
    """Backends trace a locus and return ``(points, info)``.

    ``info`` holds at least the keys ``status``, ``accepted_count``,
    ``rejected_count`` and ``error``.
    """

    @abstractmethod
    def run(self, **kwargs) -> tuple[list[TracePoint], dict]:
        ...
