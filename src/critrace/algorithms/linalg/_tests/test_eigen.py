import numpy as np
import pytest

from critrace.algorithms.linalg import (build_Psi_Hessian, eigen_problem,
                                        get_minimum_eigenvalue_Psi_Hessian,
                                        sorted_eigen)
from critrace.algorithms.linalg.backend import _EigenBackend
from critrace.algorithms.models import vdWEOS
from critrace.algorithms.types.exceptions import InvalidInputError

TC = [150.687, 190.564]
PC = [4.863e6, 4.5992e6]


@pytest.fixture(scope="module")
def model():
    return vdWEOS(TC, PC)


def test_sorted_eigen_ascending():
    H = np.array([[2.0, 1.0], [1.0, -3.0]])
    w, V = sorted_eigen(H)
    assert w[0] < w[1]
    np.testing.assert_allclose(H @ V, V * w, atol=1e-12)


def test_eigen_problem_orthonormal(model):
    rhovec = np.array([3000.0, 2000.0])
    ei = eigen_problem(model, 170.0, rhovec)
    U = ei.eigenvectorscols
    np.testing.assert_allclose(U.T @ U, np.eye(2), atol=1e-12)
    assert ei.eigenvalues[0] <= ei.eigenvalues[1]
    H = build_Psi_Hessian(model, 170.0, rhovec)
    np.testing.assert_allclose(H @ ei.v0, ei.min_eigenvalue * ei.v0, rtol=1e-8, atol=1e-10)


def test_sign_convention_at_most_dilute_species(model):
    rhovec = np.array([3000.0, 200.0])
    ei = eigen_problem(model, 170.0, rhovec)
    assert ei.v0[1] >= 0


def test_alignment_flips_v0(model):
    rhovec = np.array([3000.0, 2000.0])
    ei = eigen_problem(model, 170.0, rhovec)
    flipped = eigen_problem(model, 170.0, rhovec, alignment_v0=-ei.v0)
    np.testing.assert_allclose(flipped.v0, -ei.v0)
    np.testing.assert_allclose(flipped.v1, ei.v1)


def test_one_zero_concentration(model):
    rhovec = np.array([0.0, 5000.0])
    ei = eigen_problem(model, 170.0, rhovec)
    U = ei.eigenvectorscols
    np.testing.assert_allclose(U[:, -1], [1.0, 0.0])
    assert U[0, 0] == 0.0
    assert abs(U[1, 0]) == pytest.approx(1.0)
    assert ei.eigenvalues.size == 1


def test_more_than_one_zero_raises():
    with pytest.raises(InvalidInputError):
        _EigenBackend().run(np.eye(3), np.array([1.0, 0.0, 0.0]))


def test_minimum_eigenvalue_matches_decomposition(model):
    rhovec = np.array([3000.0, 2000.0])
    lam = get_minimum_eigenvalue_Psi_Hessian(model, 170.0, rhovec)
    H = build_Psi_Hessian(model, 170.0, rhovec)
    assert lam == pytest.approx(np.linalg.eigvalsh(H)[0], rel=1e-10)
