"""Provide the explicit steppers used by the continuation.

Two schemes are available: the explicit Euler method with a fixed step and
the Cash-Karp 5(4) embedded pair with a controlled step. The controller
follows the classical error-checker formulation

.. math::

    \\mathrm{err} = \\max_i \\frac{|e_i|}{\\epsilon_{abs} + \\epsilon_{rel}
        (|y_i| + |h|\\,|y'_i|)}

rejecting the step when ``err > 1``.

References
----------
Press, W. H. et al. (2007). "Numerical Recipes", section 17.2.
"""

import numba
import numpy as np

from critrace.algorithms.integrators.base import RHSFn, StepResult, _Stepper
from critrace.algorithms.integrators.coefficients.cash_karp import A as CK_A
from critrace.algorithms.integrators.coefficients.cash_karp import \
    B_HIGH as CK_B_HIGH
from critrace.algorithms.integrators.coefficients.cash_karp import C as CK_C
from critrace.algorithms.integrators.coefficients.cash_karp import E as CK_E
from critrace.algorithms.integrators.coefficients.cash_karp import \
    ERROR_ORDER as CK_ERROR_ORDER
from critrace.algorithms.integrators.coefficients.cash_karp import \
    ORDER as CK_ORDER
from critrace.algorithms.types.exceptions import (IntegrationError,
                                                  InvalidInputError,
                                                  NonFiniteResultError)
from critrace.algorithms.utils.config import FASTMATH
from critrace.utils.log_config import logger

# Raised by a right-hand side evaluated outside its domain; such a stage
# rejects the step instead of aborting the integration.
_STAGE_ERRORS = (InvalidInputError, NonFiniteResultError, ArithmeticError, np.linalg.LinAlgError)


@numba.njit(cache=False, fastmath=FASTMATH)
def _weighted_increment(y, h, weights, k, n_stages):
    out = y.copy()
    for j in range(n_stages):
        w = weights[j]
        if w != 0.0:
            out += h * w * k[j]
    return out


@numba.njit(cache=False, fastmath=FASTMATH)
def _max_scaled_error(y, dydt, err_vec, h, abs_err, rel_err):
    max_err = 0.0
    for i in range(y.size):
        scale = abs_err + rel_err * (np.abs(y[i]) + np.abs(h) * np.abs(dydt[i]))
        e = np.abs(err_vec[i]) / scale
        if not np.isfinite(e):
            return np.inf
        if e > max_err:
            max_err = e
    return max_err


def _rhs(f: RHSFn, t: float, y: np.ndarray) -> np.ndarray:
    return np.asarray(f(t, y), dtype=np.float64)


class _ExplicitEuler(_Stepper):
    """First-order explicit Euler stepper. Every step is accepted."""

    def __init__(self):
        super().__init__("ExplicitEuler")

    @property
    def order(self) -> int:
        return 1

    def do_step(self, f: RHSFn, y: np.ndarray, t: float, dt: float) -> np.ndarray:
        """Return ``y + dt f(t, y)``."""
        y = np.asarray(y, dtype=np.float64)
        return y + dt * _rhs(f, t, y)

    def try_step(self, f: RHSFn, y: np.ndarray, t: float, dt: float) -> StepResult:
        return StepResult(accepted=True, y=self.do_step(f, y, t, dt), t=t + dt, dt=dt)


class _CashKarp54(_Stepper):
    """Cash-Karp 5(4) stepper with step-size control.

    Parameters
    ----------
    abs_err, rel_err : float, default 1e-6
        Absolute and relative error tolerances.
    min_dt : float, default 1e-12
        Smallest step the controller may propose after a rejection. Going
        below it raises :class:`~critrace.algorithms.types.exceptions.IntegrationError`
        instead of retrying forever.

    Attributes
    ----------
    SAFETY, MIN_FACTOR : float
        Safety factor and lower bound of the shrink factor on rejection.
    GROW_THRESHOLD : float
        Accepted steps with a scaled error below this value grow ``dt``.
    """

    SAFETY = 0.9
    MIN_FACTOR = 0.2
    GROW_THRESHOLD = 0.5

    _A = CK_A
    _B_HIGH = CK_B_HIGH
    _C = CK_C
    _E = CK_E

    def __init__(self, abs_err: float = 1e-6, rel_err: float = 1e-6, min_dt: float = 1e-12):
        super().__init__("CashKarp54")
        self._abs_err = float(abs_err)
        self._rel_err = float(rel_err)
        self._min_dt = float(min_dt)

    @property
    def order(self) -> int:
        return CK_ORDER

    def _embedded_step(self, f: RHSFn, t: float, y: np.ndarray, h: float, dydt: np.ndarray):
        s = self._B_HIGH.size
        k = np.empty((s, y.size), dtype=np.float64)
        k[0] = dydt
        for i in range(1, s):
            y_stage = _weighted_increment(y, h, self._A[i], k, i)
            k[i] = _rhs(f, t + self._C[i] * h, y_stage)
        y_high = _weighted_increment(y, h, self._B_HIGH, k, s)
        err_vec = _weighted_increment(np.zeros_like(y), h, self._E, k, s)
        return y_high, err_vec

    def try_step(self, f: RHSFn, y: np.ndarray, t: float, dt: float) -> StepResult:
        """Attempt one controlled step.

        Returns
        -------
        :class:`~critrace.algorithms.integrators.base.StepResult`
            On acceptance ``t`` is advanced by the attempted ``dt`` and the
            proposed step may grow (by at most ``0.9 * 5``). On rejection the
            state is unchanged and the proposed step is shrunk (by at least
            a factor 0.2). A stage whose right-hand side raises one of
            ``InvalidInputError``, ``NonFiniteResultError``,
            ``ArithmeticError`` or ``LinAlgError`` rejects the step with the
            smallest shrink factor.

        Raises
        ------
        :class:`~critrace.algorithms.types.exceptions.IntegrationError`
            If the proposed step after a rejection is smaller than ``min_dt``.
        Exception
            Whatever ``f`` raises at the starting point ``(t, y)``.
        """
        y = np.asarray(y, dtype=np.float64)
        dydt = _rhs(f, t, y)
        try:
            y_new, err_vec = self._embedded_step(f, t, y, dt, dydt)
        except _STAGE_ERRORS as exc:
            logger.debug("Stage evaluation failed at t=%g with dt=%g: %s", t, dt, exc)
            y_new, err_vec = None, None

        if y_new is not None and np.all(np.isfinite(y_new)):
            err = _max_scaled_error(y, dydt, err_vec, dt, self._abs_err, self._rel_err)
        else:
            err = np.inf

        if err > 1.0:
            factor = self.SAFETY * err ** (-1.0 / (CK_ERROR_ORDER - 1)) if np.isfinite(err) else 0.0
            dt_new = dt * max(factor, self.MIN_FACTOR)
            logger.debug("Step rejected at t=%g (err=%.3g); dt %g -> %g", t, err, dt, dt_new)
            if abs(dt_new) < self._min_dt:
                raise IntegrationError(
                    f"Step size {dt_new:.3e} fell below the minimum {self._min_dt:.3e} at t={t}"
                )
            return StepResult(accepted=False, y=y, t=t, dt=dt_new, error=err)

        dt_new = dt
        if err < self.GROW_THRESHOLD:
            err_floor = max(err, 5.0 ** (-CK_ORDER))
            dt_new = dt * self.SAFETY * err_floor ** (-1.0 / CK_ORDER)
        return StepResult(accepted=True, y=y_new, t=t + dt, dt=dt_new, error=err)


def make_stepper(order: int, *, abs_err: float = 1e-6, rel_err: float = 1e-6, min_dt: float = 1e-12) -> _Stepper:
    """Create the stepper for an integration order.

    Parameters
    ----------
    order : int
        1 for explicit Euler, 5 for the controlled Cash-Karp pair.

    Raises
    ------
    :class:`~critrace.algorithms.types.exceptions.InvalidInputError`
        For any other order.
    """
    if order == 5:
        return _CashKarp54(abs_err=abs_err, rel_err=rel_err, min_dt=min_dt)
    if order == 1:
        return _ExplicitEuler()
    raise InvalidInputError(f"integration order is invalid: {order}")
