import json
import logging

import numpy as np
import pytest

from critrace.algorithms.continuation import (JSON_KEYS, ContinuationOptions,
                                              ContinuationResult,
                                              CriticalLocusTracer, TracePoint,
                                              TraceStatus,
                                              trace_critical_arclength_binary)
from critrace.algorithms.criticality import get_criticality_conditions
from critrace.algorithms.derivatives import isochoric
from critrace.algorithms.models import build_model, vdWEOS
from critrace.algorithms.models.base import R_CODATA
from critrace.algorithms.types.exceptions import (EngineError,
                                                  InvalidInputError)

TC = [150.687, 190.564]
PC = [4.863e6, 4.5992e6]


@pytest.fixture(scope="module")
def model():
    return vdWEOS(TC, PC)


@pytest.fixture(scope="module")
def start(model):
    return model.pure_critical_point(0)


@pytest.fixture(scope="module")
def tracer():
    return CriticalLocusTracer.with_default_engine()


@pytest.fixture(scope="module")
def long_trace(model, start, tracer):
    T0, rhovec0 = start
    return tracer.trace(model, T0, rhovec0, max_step_count=200)


def test_zero_steps_returns_starting_point(model, start):
    T0, rhovec0 = start
    records = trace_critical_arclength_binary(model, T0, rhovec0, options=ContinuationOptions(max_step_count=0))
    assert len(records) == 1
    rec = records[0]
    assert list(rec) == list(JSON_KEYS)
    assert rec["t"] == 0.0
    assert rec["T / K"] == pytest.approx(TC[0])
    assert rec["rho0 / mol/m^3"] == pytest.approx(rhovec0[0])
    assert rec["rho1 / mol/m^3"] == 0.0
    assert abs(rec["lambda1"]) <= 1e-6
    assert abs(rec["dirderiv(lambda1)/dalpha"]) <= 1e-6
    # p_c = 3/8 rho_c R T_c for the van der Waals fluid
    assert rec["p / Pa"] == pytest.approx(PC[0], rel=1e-9)
    json.dumps(records)


def test_zero_steps_status_is_exhausted(model, start, tracer):
    T0, rhovec0 = start
    result = tracer.trace(model, T0, rhovec0, max_step_count=0)
    assert result.status is TraceStatus.EXHAUSTED
    assert len(result) == 1
    assert result.accepted_count == 0


def test_overrides_do_not_change_config(model, start, tracer):
    T0, rhovec0 = start
    tracer.trace(model, T0, rhovec0, max_step_count=0)
    assert tracer.config.max_step_count == 1000


@pytest.mark.parametrize("init_c", [1.0, -1.0])
def test_initial_direction_keeps_concentrations_positive(model, start, tracer, init_c):
    T0, rhovec0 = start
    result = tracer.trace(model, T0, rhovec0, max_step_count=0, init_c=init_c)
    point = result[0]
    assert point.dxdt[2] >= 0
    assert abs(point.c) == 1.0
    assert np.linalg.norm(point.dxdt[1:]) == pytest.approx(1.0, rel=1e-10)


def test_initial_sign_independent_of_init_c(model, start, tracer):
    T0, rhovec0 = start
    plus = tracer.trace(model, T0, rhovec0, max_step_count=0, init_c=1.0)
    minus = tracer.trace(model, T0, rhovec0, max_step_count=0, init_c=-1.0)
    assert plus[0].c == minus[0].c
    np.testing.assert_allclose(plus[0].dxdt, minus[0].dxdt)


def test_max_step_count(model, start, tracer):
    T0, rhovec0 = start
    result = tracer.trace(model, T0, rhovec0, max_step_count=5)
    assert result.status is TraceStatus.EXHAUSTED
    assert len(result) == 6
    assert result.accepted_count == 5
    t = [p.t for p in result]
    assert all(b > a for a, b in zip(t, t[1:]))


def test_long_trace_is_monotone_in_composition(long_trace):
    z0 = long_trace.molefractions
    assert len(z0) > 10
    assert np.all((z0 >= 0) & (z0 <= 1))
    assert np.all(np.diff(z0) <= 1e-9)


def test_long_trace_reaches_other_pure_fluid(long_trace):
    assert long_trace.status is not TraceStatus.INTEGRATION_ERROR
    assert long_trace.error is None
    assert long_trace.molefractions[-1] < 5e-3
    assert long_trace.rejected_count > 0


def test_long_trace_points_are_consistent(model, long_trace):
    ider = isochoric(model)
    for point in long_trace.points[::10]:
        assert point.p == pytest.approx(ider.get_pressure(point.T, point.rhovec), rel=1e-12)
        np.testing.assert_allclose(
            point.conditions, get_criticality_conditions(model, point.T, point.rhovec), rtol=1e-8, atol=1e-14
        )
        rhotot = point.rhovec.sum()
        assert point.p > 0
        assert point.p < 2.0 * rhotot * R_CODATA * point.T


def test_long_trace_stays_near_locus(long_trace):
    for point in long_trace.points:
        if not 0.02 < point.z0 < 0.98:
            continue
        assert abs(point.conditions[0]) < 1e-3


def test_polish_keeps_points_on_locus(model, start, tracer):
    T0, rhovec0 = start
    result = tracer.trace(model, T0, rhovec0, max_step_count=10, polish=True)
    assert result.status in (TraceStatus.EXHAUSTED, TraceStatus.OUT_OF_DOMAIN)
    for point in result.points[1:]:
        np.testing.assert_allclose(point.conditions, 0.0, atol=1e-6)


def test_failed_polish_keeps_unpolished_point(model, start, tracer, monkeypatch, caplog):
    from critrace.algorithms.continuation.backends import arclength
    from critrace.algorithms.types.exceptions import ConvergenceError

    def failing(model_, T, rhovec, z0):
        raise ConvergenceError("no polish")

    T0, rhovec0 = start
    plain = tracer.trace(model, T0, rhovec0, max_step_count=3)
    monkeypatch.setattr(arclength, "critical_polish_molefrac", failing)
    with caplog.at_level(logging.WARNING, logger="critrace"):
        result = tracer.trace(model, T0, rhovec0, max_step_count=3, polish=True)

    assert result.status is TraceStatus.EXHAUSTED
    assert result.error is None
    assert len(result) == len(plain) == 4
    for got, expected in zip(result, plain):
        assert got.T == expected.T
        np.testing.assert_array_equal(got.rhovec, expected.rhovec)
    assert caplog.text.count("Polishing failed") == 3
    assert "no polish" in caplog.text


def test_euler_integration(model, start, tracer):
    T0, rhovec0 = start
    result = tracer.trace(model, T0, rhovec0, max_step_count=5, integration_order=1, init_dt=5.0)
    assert len(result) == 6
    t = [p.t for p in result]
    np.testing.assert_allclose(t, 5.0 * np.arange(6))
    assert result.rejected_count == 0


def test_iter_trace_is_lazy(model, start, tracer):
    T0, rhovec0 = start
    it = tracer.iter_trace(model, T0, rhovec0, max_step_count=3)
    first = next(it)
    assert isinstance(first, TracePoint)
    assert first.t == 0.0
    rest = list(it)
    assert len(rest) == 3
    assert it.status is TraceStatus.EXHAUSTED
    assert list(it) == []


def test_from_json_description(start):
    desc = {"kind": "vdW", "model": {"Tcrit / K": TC, "pcrit / Pa": PC}}
    T0, rhovec0 = start
    records = trace_critical_arclength_binary(build_model(desc), T0, rhovec0, options=ContinuationOptions(max_step_count=2))
    assert len(records) == 3


def test_bad_starting_points_raise(model, start, tracer):
    T0, rhovec0 = start
    with pytest.raises(InvalidInputError):
        tracer.trace(model, T0, np.array([1.0, 2.0, 3.0]))
    with pytest.raises(InvalidInputError):
        tracer.trace(model, T0, np.array([-1.0, 2.0]))
    with pytest.raises(InvalidInputError):
        tracer.trace(model, T0, np.array([0.0, 0.0]))
    with pytest.raises(InvalidInputError):
        tracer.trace(model, -5.0, rhovec0)
    with pytest.raises(InvalidInputError):
        tracer.trace(object(), T0, rhovec0)


def test_initialization_errors_propagate(model, start, tracer, monkeypatch):
    from critrace.algorithms.continuation.backends import arclength
    from critrace.algorithms.types.exceptions import NonFiniteResultError

    def failing(model_, T, rhovec):
        raise NonFiniteResultError("no tangent")

    T0, rhovec0 = start
    monkeypatch.setattr(arclength, "get_drhovec_dT_crit", failing)
    with pytest.raises(NonFiniteResultError, match="no tangent"):
        tracer.trace(model, T0, rhovec0)
    with pytest.raises(NonFiniteResultError):
        tracer.iter_trace(model, T0, rhovec0)


def test_unexpected_initialization_errors_are_wrapped(model, start, tracer, monkeypatch):
    from critrace.algorithms.continuation.backends import arclength

    def failing(model_, T, rhovec):
        raise RuntimeError("unexpected")

    T0, rhovec0 = start
    monkeypatch.setattr(arclength, "get_drhovec_dT_crit", failing)
    with pytest.raises(EngineError):
        tracer.trace(model, T0, rhovec0)


def test_stepping_error_ends_trace(model, start, tracer, monkeypatch, caplog):
    from critrace.algorithms.continuation.backends import arclength
    from critrace.algorithms.types.exceptions import NonFiniteResultError

    T0, rhovec0 = start
    real = arclength.get_drhovec_dT_crit
    calls = {"n": 0}

    def failing(model_, T, rhovec):
        calls["n"] += 1
        if calls["n"] > 12:
            raise NonFiniteResultError("boom")
        return real(model_, T, rhovec)

    monkeypatch.setattr(arclength, "get_drhovec_dT_crit", failing)
    with caplog.at_level(logging.WARNING, logger="critrace"):
        result = tracer.trace(model, T0, rhovec0, max_step_count=50)
    assert result.status is TraceStatus.INTEGRATION_ERROR
    assert isinstance(result.error, NonFiniteResultError)
    assert len(result) >= 1
    assert "boom" in caplog.text


def test_progress_file(model, start, tracer, tmp_path):
    T0, rhovec0 = start
    path = tmp_path / "progress.csv"
    result = tracer.trace(model, T0, rhovec0, filename=str(path), max_step_count=4)
    lines = path.read_text().strip().splitlines()
    assert lines[0] == "z0,rho0,rho1,T,p,c,dt,condition(1),condition(2)"
    assert len(lines) == len(result) + 1
    first = [float(v) for v in lines[1].split(",")]
    assert first[0] == pytest.approx(1.0)
    assert first[3] == pytest.approx(TC[0])


def test_verbose_logs_progress(model, start, tracer, caplog):
    T0, rhovec0 = start
    with caplog.at_level(logging.INFO, logger="critrace"):
        tracer.trace(model, T0, rhovec0, max_step_count=1, verbose=True)
    assert "z0=" in caplog.text


def test_result_repr_and_accessors(long_trace):
    assert "ContinuationResult" in repr(long_trace)
    assert long_trace.rhovecs.shape == (len(long_trace), 2)
    assert long_trace.temperatures.shape == (len(long_trace),)
    assert isinstance(long_trace, ContinuationResult)
