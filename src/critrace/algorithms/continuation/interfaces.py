"""Interface between the critical-locus facade and its backends."""

from typing import Optional

import numpy as np

from critrace.algorithms.continuation.config import ContinuationOptions
from critrace.algorithms.continuation.types import (ContinuationResult,
                                                    TracePoint,
                                                    _ContinuationProblem)
from critrace.algorithms.models.protocols import ThermoModel
from critrace.algorithms.types.core import (_BackendCall,
                                            _CritraceBaseInterface)
from critrace.algorithms.types.exceptions import InvalidInputError


class _CriticalLocusInterface(
    _CritraceBaseInterface[
        ContinuationOptions,
        _ContinuationProblem,
        ContinuationResult,
        tuple[list[TracePoint], dict],
    ]
):
    """Adapter wiring binary critical loci to continuation backends."""

    def create_problem(
        self,
        *,
        config: ContinuationOptions,
        model: ThermoModel,
        T0: float,
        rhovec0,
        filename: Optional[str] = None,
    ) -> _ContinuationProblem:
        """Validate the starting point and build the problem.

        Raises
        ------
        :class:`~critrace.algorithms.types.exceptions.InvalidInputError`
            If the model does not implement the model protocol, if ``T0`` is
            not a positive number, or if ``rhovec0`` is not a non-negative
            pair of concentrations with a positive sum.
        """
        if not isinstance(model, ThermoModel):
            raise InvalidInputError(f"{type(model).__name__} does not provide alphar(T, rhotot, molefrac) and R(molefrac)")

        T0 = float(T0)
        if not np.isfinite(T0) or T0 <= 0:
            raise InvalidInputError(f"T0 must be a positive temperature, got {T0}")

        rhovec0 = np.array(rhovec0, dtype=np.float64)
        if rhovec0.shape != (2,):
            raise InvalidInputError(f"rhovec0 must hold two concentrations, got shape {rhovec0.shape}")
        if not np.all(np.isfinite(rhovec0)) or np.any(rhovec0 < 0) or rhovec0.sum() <= 0:
            raise InvalidInputError(f"rhovec0 must be non-negative with a positive sum, got {rhovec0}")

        return _ContinuationProblem(
            model=model,
            T0=T0,
            rhovec0=rhovec0,
            options=config,
            filename=None if filename is None else str(filename),
        )

    def to_backend_inputs(self, problem: _ContinuationProblem) -> _BackendCall:
        return _BackendCall(
            kwargs={
                "model": problem.model,
                "T0": problem.T0,
                "rhovec0": problem.rhovec0,
                "options": problem.options,
                "filename": problem.filename,
            }
        )

    def to_results(self, outputs: tuple[list[TracePoint], dict], *, problem: _ContinuationProblem) -> ContinuationResult:
        points, info = outputs
        return ContinuationResult(
            points=tuple(points),
            status=info["status"],
            accepted_count=int(info.get("accepted_count", 0)),
            rejected_count=int(info.get("rejected_count", 0)),
            error=info.get("error"),
        )
