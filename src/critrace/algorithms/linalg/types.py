"""Types for the eigen decomposition of the Helmholtz-energy Hessian."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class EigenResult:
    """Sorted eigen decomposition of the Hessian of :math:`\\Psi`.

    Parameters
    ----------
    eigenvalues : np.ndarray
        Eigenvalues in ascending order. In the infinitely dilute case only
        the ``N - 1`` eigenvalues of the reduced matrix are available.
    eigenvectorscols : np.ndarray, shape (N, N)
        Orthonormal eigenvectors stored as columns, in the same order as the
        eigenvalues. In the infinitely dilute case the last column is the
        unit vector of the absent species.
    """

    eigenvalues: np.ndarray
    eigenvectorscols: np.ndarray

    @property
    def v0(self) -> np.ndarray:
        """Eigenvector of the smallest eigenvalue."""
        return self.eigenvectorscols[:, 0]

    @property
    def v1(self) -> np.ndarray:
        """Eigenvector of the second-smallest eigenvalue."""
        return self.eigenvectorscols[:, 1]

    @property
    def min_eigenvalue(self) -> float:
        return float(self.eigenvalues[0])
