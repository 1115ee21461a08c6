"""Shared pieces of the bundled equations of state."""

import numpy as np

from critrace.algorithms.types.exceptions import InvalidInputError

R_CODATA = 8.31446261815324
"""Molar gas constant in J/(mol K) (CODATA 2018)."""


def _as_vector(values, name: str) -> np.ndarray:
    arr = np.atleast_1d(np.asarray(values, dtype=np.float64))
    if arr.ndim != 1:
        raise InvalidInputError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"{name} must be finite")
    return arr


def _square_matrix(kmat, n: int) -> np.ndarray:
    """Return a validated ``n x n`` interaction matrix (zeros if not given)."""
    if kmat is None:
        return np.zeros((n, n))
    rows = [list(np.atleast_1d(row)) for row in kmat]
    if len(rows) == 0:
        return np.zeros((n, n))
    if any(len(row) != len(rows) for row in rows):
        raise InvalidInputError("provided matrix is not square")
    mat = np.asarray(rows, dtype=np.float64)
    if mat.shape != (n, n):
        raise InvalidInputError(f"kmat must have shape ({n}, {n}), got {mat.shape}")
    return mat


class _ConstantRModel:
    """Mixin for models whose gas constant does not depend on composition."""

    def R(self, molefrac):
        return R_CODATA
