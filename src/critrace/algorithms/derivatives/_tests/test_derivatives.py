import jax.numpy as jnp
import numpy as np
import pytest

from critrace.algorithms.derivatives import (IsochoricDerivatives,
                                             JaxDerivativeOracle, isochoric)
from critrace.algorithms.models import canonical_PR, vdWEOS, vdWEOS1
from critrace.algorithms.models.base import R_CODATA

TC = [150.687, 190.564]
PC = [4.863e6, 4.5992e6]


def test_oracle_quartic():
    out = np.asarray(JaxDerivativeOracle().derivatives(lambda s: s ** 4, 1.0, 4))
    np.testing.assert_allclose(out, [1.0, 4.0, 12.0, 24.0, 24.0], rtol=1e-14)


def test_oracle_exponential():
    out = np.asarray(JaxDerivativeOracle().derivatives(jnp.exp, 0.5, 3))
    np.testing.assert_allclose(out, np.full(4, np.exp(0.5)), rtol=1e-14)


def test_oracle_negative_order():
    with pytest.raises(ValueError):
        JaxDerivativeOracle().derivatives(jnp.sin, 0.0, -1)


def test_vdw1_pressure_matches_analytic():
    a, b = 0.13, 3.0e-5
    model = vdWEOS1(a=a, b=b)
    T, rho = 180.0, 4000.0
    p = isochoric(model).get_pressure(T, np.array([rho]))
    expected = rho * R_CODATA * T / (1 - b * rho) - a * rho ** 2
    assert p == pytest.approx(expected, rel=1e-12)


def test_vdw1_splus_matches_analytic():
    a, b = 0.13, 3.0e-5
    model = vdWEOS1(a=a, b=b)
    T, rho = 180.0, 4000.0
    expected = -np.log(1 - b * rho) - 2 * a * rho / (R_CODATA * T)
    assert isochoric(model).get_splus(T, np.array([rho])) == pytest.approx(expected, rel=1e-12)


def test_psir_and_hessian_symmetric():
    model = vdWEOS(TC, PC)
    ider = IsochoricDerivatives(model)
    rhovec = np.array([3000.0, 2000.0])
    psir = ider.get_Psir(170.0, rhovec)
    alphar = ider.get_alphar(170.0, rhovec)
    assert psir == pytest.approx(alphar * R_CODATA * 170.0 * rhovec.sum(), rel=1e-12)

    H = ider.build_Psir_Hessian(170.0, rhovec)
    assert H.shape == (2, 2)
    assert H.flags.writeable
    np.testing.assert_allclose(H, H.T, rtol=1e-12)


def test_psir_sigma_derivs_consistent_with_hessian():
    model = canonical_PR(TC, PC, [0.0, 0.01])
    ider = isochoric(model)
    T, rhovec = 170.0, np.array([3000.0, 2000.0])
    v = np.array([0.6, 0.8])
    derivs = ider.psir_sigma_derivs(T, rhovec, v)
    H = ider.build_Psir_Hessian(T, rhovec)
    assert derivs.shape == (5,)
    assert derivs[0] == pytest.approx(ider.get_Psir(T, rhovec), rel=1e-12)
    assert derivs[2] == pytest.approx(v @ H @ v, rel=1e-10)


def test_isochoric_is_cached_per_model():
    model = vdWEOS(TC, PC)
    assert isochoric(model) is isochoric(model)
    assert isochoric(model) is not isochoric(vdWEOS(TC, PC))
