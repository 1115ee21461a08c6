"""Eigen decomposition of the Hessian of the Helmholtz energy density.

The Hessian of :math:`\\Psi = \\Psi^0 + \\Psi^r` with respect to the molar
concentrations is the residual Hessian plus the ideal-gas diagonal
:math:`R T / \\rho_i`. At infinite dilution the ideal-gas term of the absent
species diverges, so the decomposition is carried out on the reduced matrix
and the basis is completed with the unit vector of that species.
"""

from typing import Tuple

import numpy as np

from critrace.algorithms.derivatives.isochoric import isochoric
from critrace.algorithms.linalg.types import EigenResult
from critrace.algorithms.models.protocols import ThermoModel
from critrace.algorithms.types.core import _CritraceBaseBackend
from critrace.algorithms.types.exceptions import InvalidInputError


def sorted_eigen(H: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Eigenvalues (ascending) and column eigenvectors of a symmetric matrix."""
    eigenvalues, eigenvectors = np.linalg.eigh(np.asarray(H, dtype=np.float64))
    order = np.argsort(eigenvalues)
    return eigenvalues[order], eigenvectors[:, order]


class _EigenBackend(_CritraceBaseBackend[EigenResult]):
    """Decompose a total Hessian with the dilute-limit special case."""

    def run(self, H: np.ndarray, rhovec: np.ndarray, alignment_v0: np.ndarray | None = None) -> EigenResult:
        """Decompose ``H`` evaluated at ``rhovec``.

        Parameters
        ----------
        H : np.ndarray, shape (N, N)
            Total Hessian. Rows and columns of absent species are ignored.
        rhovec : np.ndarray, shape (N,)
            Molar concentrations at which ``H`` was evaluated.
        alignment_v0 : np.ndarray or None
            Reference direction. When given and anti-parallel to the first
            eigenvector, that eigenvector is negated.

        Returns
        -------
        :class:`~critrace.algorithms.linalg.types.EigenResult`

        Raises
        ------
        :class:`~critrace.algorithms.types.exceptions.InvalidInputError`
            If more than one concentration is exactly zero.
        """
        rhovec = np.asarray(rhovec, dtype=np.float64)
        N = rhovec.size
        mask = rhovec != 0
        zero_count = N - int(np.count_nonzero(mask))

        if zero_count == 0:
            eigenvalues, vectors = sorted_eigen(H)
            # make v0 non-negative at the most dilute species
            ind = int(np.argmin(rhovec))
            if vectors[ind, 0] < 0:
                vectors = -vectors

        elif zero_count == 1:
            keep = np.flatnonzero(mask)
            badindex = int(np.flatnonzero(~mask)[0])
            eigenvalues, reduced = sorted_eigen(H[np.ix_(keep, keep)])

            vectors = np.zeros((N, N))
            vectors[np.ix_(keep, np.arange(N - 1))] = reduced
            vectors[badindex, N - 1] = 1.0

        else:
            raise InvalidInputError(
                f"More than one zero concentration value found in {rhovec}; not supported"
            )

        if alignment_v0 is not None and np.dot(vectors[:, 0], alignment_v0) < 0:
            vectors[:, 0] *= -1.0

        return EigenResult(eigenvalues=eigenvalues, eigenvectorscols=vectors)


_BACKEND = _EigenBackend()


def build_Psi_Hessian(model: ThermoModel, T: float, rhovec: np.ndarray) -> np.ndarray:
    """Hessian of the total :math:`\\Psi` restricted to the non-zero species.

    Entries of absent species only carry the residual contribution.
    """
    rhovec = np.asarray(rhovec, dtype=np.float64)
    H = isochoric(model).build_Psir_Hessian(T, rhovec)
    R = float(model.R(rhovec / rhovec.sum()))
    nonzero = np.flatnonzero(rhovec)
    H[nonzero, nonzero] += R * T / rhovec[nonzero]
    return H


def eigen_problem(
    model: ThermoModel,
    T: float,
    rhovec: np.ndarray,
    alignment_v0: np.ndarray | None = None,
) -> EigenResult:
    """Sorted eigen decomposition of the Hessian of :math:`\\Psi` at ``(T, rhovec)``.

    Parameters
    ----------
    model : :class:`~critrace.algorithms.models.protocols.ThermoModel`
        Thermodynamic model.
    T : float
        Temperature in K.
    rhovec : np.ndarray
        Molar concentrations in mol/m^3. At most one entry may be zero.
    alignment_v0 : np.ndarray or None, optional
        Reference direction for the sign of ``v0``.

    Returns
    -------
    :class:`~critrace.algorithms.linalg.types.EigenResult`
    """
    H = build_Psi_Hessian(model, T, rhovec)
    return _BACKEND.run(H, rhovec, alignment_v0)


def get_minimum_eigenvalue_Psi_Hessian(model: ThermoModel, T: float, rhovec: np.ndarray) -> float:
    return eigen_problem(model, T, rhovec).min_eigenvalue
