import numpy as np
import pytest

from critrace.algorithms.continuation import CriticalLocusTracer
from critrace.algorithms.corrector import (critical_polish_fixedrho,
                                           critical_polish_fixedT,
                                           critical_polish_molefrac)
from critrace.algorithms.corrector.backends.newton import _NewtonBackend
from critrace.algorithms.criticality import get_criticality_conditions
from critrace.algorithms.models import vdWEOS
from critrace.algorithms.models.base import R_CODATA
from critrace.algorithms.types.exceptions import (ConvergenceError,
                                                  InvalidInputError,
                                                  NonFiniteResultError)

TC = [150.687, 190.564]
PC = [4.863e6, 4.5992e6]


def test_newton_solves_simple_system():
    def residual(x):
        return np.array([x[0] ** 2 + x[1] ** 2 - 4.0, x[0] - x[1]])

    result = _NewtonBackend().run(np.array([1.0, 2.0]), residual)
    np.testing.assert_allclose(result.x, [np.sqrt(2.0), np.sqrt(2.0)], rtol=1e-12)
    assert result.iterations < 10
    assert np.max(np.abs(result.residual)) < 1e-10


def test_newton_uses_given_jacobian():
    calls = []

    def jac(x):
        calls.append(1)
        return np.array([[3.0 * x[0] ** 2]])

    result = _NewtonBackend().run(np.array([2.0]), lambda x: x ** 3 - 8.0, jacobian_fn=jac)
    assert result.x[0] == pytest.approx(2.0)
    assert len(calls) >= 1


def test_newton_raises_convergence_error():
    # x^2 + 1 has no real root
    with pytest.raises(ConvergenceError):
        _NewtonBackend().run(np.array([0.5]), lambda x: x ** 2 + 1.0, max_attempts=5)


def test_newton_raises_on_non_finite_residual():
    with pytest.raises(NonFiniteResultError):
        _NewtonBackend().run(np.array([1.0]), lambda x: np.array([np.nan]))


class _CountingNewton(_NewtonBackend):
    def __init__(self):
        super().__init__()
        self.iterations = 0
        self.accepted = False

    def on_iteration(self, k, x, r_norm):
        self.iterations += 1

    def on_accept(self, x, *, iterations, residual_norm):
        self.accepted = True


def test_newton_hooks():
    backend = _CountingNewton()
    backend.run(np.array([3.0]), lambda x: x - 1.0)
    assert backend.iterations >= 1
    assert backend.accepted


def test_polish_molefrac_identical_components():
    # with identical components every composition is critical at the pure-fluid point
    Tc, pc = 150.0, 4.8e6
    model = vdWEOS([Tc, Tc], [pc, pc])
    rhoc = 8.0 * pc / (3.0 * R_CODATA * Tc)
    z0 = 0.3
    guess = np.array([z0, 1.0 - z0]) * rhoc * 0.98
    T, rhovec = critical_polish_molefrac(model, Tc + 0.5, guess, z0)
    assert T == pytest.approx(Tc, rel=1e-8)
    np.testing.assert_allclose(rhovec, [z0 * rhoc, (1.0 - z0) * rhoc], rtol=1e-8)


@pytest.fixture(scope="module")
def interior_point():
    model = vdWEOS(TC, PC)
    T0, rhovec0 = model.pure_critical_point(0)
    result = CriticalLocusTracer.with_default_engine().trace(model, T0, rhovec0, max_step_count=3)
    last = result.points[-1]
    T, rhovec = critical_polish_molefrac(model, last.T, last.rhovec, last.z0)
    return model, T, rhovec


def test_polished_point_is_critical(interior_point):
    model, T, rhovec = interior_point
    assert np.all(rhovec > 0)
    np.testing.assert_allclose(get_criticality_conditions(model, T, rhovec), 0.0, atol=1e-8)


def test_polish_is_idempotent(interior_point):
    model, T, rhovec = interior_point
    z0 = rhovec[0] / rhovec.sum()

    T1, rhovec1 = critical_polish_molefrac(model, T, rhovec, z0)
    assert T1 == pytest.approx(T, rel=1e-9)
    np.testing.assert_allclose(rhovec1, rhovec, rtol=1e-8)

    T2, rhovec2 = critical_polish_fixedrho(model, T, rhovec, 0)
    assert T2 == pytest.approx(T, rel=1e-9)
    assert rhovec2[0] == pytest.approx(rhovec[0], rel=1e-12)
    np.testing.assert_allclose(rhovec2, rhovec, rtol=1e-8)

    rhovec3 = critical_polish_fixedT(model, T, rhovec)
    np.testing.assert_allclose(rhovec3, rhovec, rtol=1e-8)


def test_polish_fixedrho_bad_index(interior_point):
    model, T, rhovec = interior_point
    with pytest.raises(InvalidInputError):
        critical_polish_fixedrho(model, T, rhovec, 2)
