"""Eigen decomposition of the Hessian of the Helmholtz energy density."""

from .backend import (build_Psi_Hessian, eigen_problem,
                      get_minimum_eigenvalue_Psi_Hessian, sorted_eigen)
from .types import EigenResult

__all__ = [
    "EigenResult",
    "eigen_problem",
    "build_Psi_Hessian",
    "sorted_eigen",
    "get_minimum_eigenvalue_Psi_Hessian",
]
