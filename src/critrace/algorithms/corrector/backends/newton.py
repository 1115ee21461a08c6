"""Provide a Newton-Raphson root-finder with finite-difference Jacobians.

The residuals handled here are themselves built from automatic derivatives,
so the Jacobian is taken by centred finite differences of the residual
rather than by differentiating once more.
"""

import numpy as np

from critrace.algorithms.corrector.backends.base import _CorrectorBackend
from critrace.algorithms.corrector.types import (JacobianFn, NewtonResult,
                                                 ResidualFn)
from critrace.algorithms.types.exceptions import (ConvergenceError,
                                                  NonFiniteResultError)
from critrace.algorithms.utils.config import TOL
from critrace.utils.log_config import logger


class _NewtonBackend(_CorrectorBackend):
    """Implement the Newton-Raphson iteration.

    Convergence is declared on the update step: the iteration stops once
    ``max|dx| < tol``. An update that is already below the floating-point
    resolution of ``x`` also stops the iteration since it cannot change
    the iterate any more.
    """

    def run(
        self,
        x0: np.ndarray,
        residual_fn: ResidualFn,
        *,
        jacobian_fn: JacobianFn | None = None,
        tol: float = TOL,
        max_attempts: int = 50,
        fd_step: float = 1e-6,
    ) -> NewtonResult:
        """Solve a nonlinear system using the Newton-Raphson method.

        Parameters
        ----------
        x0 : np.ndarray
            Initial guess.
        residual_fn : :class:`~critrace.algorithms.corrector.types.ResidualFn`
            Function to compute the residual vector R(x).
        jacobian_fn : :class:`~critrace.algorithms.corrector.types.JacobianFn` or None, optional
            Function to compute the Jacobian dR/dx. Uses centred finite
            differences if None.
        tol : float, default=1e-10
            Absolute tolerance on the infinity norm of the update step.
        max_attempts : int, default=50
            Maximum number of Newton iterations.
        fd_step : float, default=1e-6
            Relative step of the finite-difference Jacobian.

        Returns
        -------
        :class:`~critrace.algorithms.corrector.types.NewtonResult`

        Raises
        ------
        :class:`~critrace.algorithms.types.exceptions.NonFiniteResultError`
            If the residual or the iterate becomes non-finite.
        :class:`~critrace.algorithms.types.exceptions.ConvergenceError`
            If the method does not converge within ``max_attempts``.
        """
        x = np.array(x0, dtype=np.float64)
        step_norm = float("inf")

        for k in range(max_attempts):
            r = self._compute_residual(x, residual_fn)
            J = jacobian_fn(x) if jacobian_fn is not None else self._fd_jacobian(x, r, residual_fn, fd_step)
            delta = self._solve_delta(J, r)

            x_new = x + delta
            if not np.all(np.isfinite(x_new)):
                raise NonFiniteResultError(f"Newton produced a non-finite iterate at iter {k}: {x_new}")

            step_norm = float(np.max(np.abs(delta)))
            self.on_iteration(k, x_new, float(np.linalg.norm(r)))
            x = x_new

            resolution = 4.0 * np.finfo(float).eps * np.maximum(np.abs(x), 1.0)
            if step_norm < tol or np.all(np.abs(delta) <= resolution):
                r_final = self._compute_residual(x, residual_fn)
                logger.info("Newton converged after %d iterations (|dx|=%.2e)", k + 1, step_norm)
                self.on_accept(x, iterations=k + 1, residual_norm=float(np.linalg.norm(r_final)))
                return NewtonResult(x=x, iterations=k + 1, step_norm=step_norm, residual=r_final)

        self.on_failure(x, iterations=max_attempts, residual_norm=float("nan"))
        raise ConvergenceError(
            f"Newton did not converge after {max_attempts} iterations (|dx|={step_norm:.2e})."
        )

    @staticmethod
    def _compute_residual(x: np.ndarray, residual_fn: ResidualFn) -> np.ndarray:
        r = np.atleast_1d(np.asarray(residual_fn(x), dtype=np.float64))
        if not np.all(np.isfinite(r)):
            raise NonFiniteResultError(f"Residual is not finite at x={x}: {r}")
        return r

    @staticmethod
    def _fd_jacobian(x: np.ndarray, r: np.ndarray, residual_fn: ResidualFn, fd_step: float) -> np.ndarray:
        n = x.size
        J = np.empty((r.size, n))
        for j in range(n):
            h = fd_step * max(1.0, abs(x[j]))
            xp = x.copy()
            xm = x.copy()
            xp[j] += h
            xm[j] -= h
            rp = np.atleast_1d(np.asarray(residual_fn(xp), dtype=np.float64))
            rm = np.atleast_1d(np.asarray(residual_fn(xm), dtype=np.float64))
            J[:, j] = (rp - rm) / (2.0 * h)
        if not np.all(np.isfinite(J)):
            raise NonFiniteResultError(f"Finite-difference Jacobian is not finite at x={x}")
        return J

    @staticmethod
    def _solve_delta(J: np.ndarray, r: np.ndarray) -> np.ndarray:
        if J.shape[0] == J.shape[1]:
            try:
                cond = np.linalg.cond(J)
            except np.linalg.LinAlgError:
                cond = np.inf
            if np.isfinite(cond) and cond < 1e12:
                return np.linalg.solve(J, -r)
            logger.debug("Ill-conditioned Jacobian (cond=%.2e); using least squares", cond)
        delta, *_ = np.linalg.lstsq(J, -r, rcond=None)
        return delta
