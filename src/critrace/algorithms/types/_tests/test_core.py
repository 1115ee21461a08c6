import numpy as np
import pytest

from critrace.algorithms.continuation import ContinuationOptions, CriticalLocusTracer
from critrace.algorithms.continuation.types import _ContinuationProblem
from critrace.algorithms.models import vdWEOS
from critrace.algorithms.types.core import (_BackendCall, _CritraceBaseBackend,
                                            _CritraceBaseProblem)


class _EchoBackend(_CritraceBaseBackend[tuple]):

    def run(self, *args, **kwargs):
        return args, kwargs


def test_backend_without_run_cannot_be_instantiated():

    class _Incomplete(_CritraceBaseBackend[None]):
        pass

    with pytest.raises(TypeError):
        _Incomplete()
    assert _EchoBackend().run(1, a=2) == ((1,), {"a": 2})


def test_backend_call_defaults():
    call = _BackendCall()
    assert call.args == ()
    assert call.kwargs == {}


def test_facade_creates_problems_from_its_config():
    model = vdWEOS([150.687, 190.564], [4.863e6, 4.5992e6])
    T0, rhovec0 = model.pure_critical_point(0)
    tracer = CriticalLocusTracer.with_default_engine(config=ContinuationOptions(max_step_count=7))

    problem = tracer._create_problem(model=model, T0=T0, rhovec0=rhovec0)
    assert isinstance(problem, _ContinuationProblem)
    assert isinstance(problem, _CritraceBaseProblem)
    assert problem.options.max_step_count == 7
    np.testing.assert_allclose(problem.rhovec0, rhovec0)

    other = tracer._create_problem(config=ContinuationOptions(max_step_count=2), model=model, T0=T0, rhovec0=rhovec0)
    assert other.options.max_step_count == 2
    assert tracer.config.max_step_count == 7
