"""Arclength continuation of the critical locus of a binary mixture.

The state ``x = [T, rho0, rho1]`` is advanced in a pseudo-time ``t`` that
measures arclength in concentration space:

.. math::

    \\frac{dT}{dt} = \\frac{c}{\\lVert d\\boldsymbol{\\rho}/dT \\rVert},
    \\qquad
    \\frac{d\\boldsymbol{\\rho}}{dt} = c\\,\\frac{d\\boldsymbol{\\rho}/dT}
        {\\lVert d\\boldsymbol{\\rho}/dT \\rVert},

where ``c = +1/-1`` picks the branch. The concentration rate is compared
with the one of the previous step and the whole derivative is reversed
when they point in opposite directions, so that the trace never turns
back on itself.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from critrace.algorithms.continuation.backends.base import _ContinuationBackend
from critrace.algorithms.continuation.config import ContinuationOptions
from critrace.algorithms.continuation.types import TracePoint, TraceStatus
from critrace.algorithms.corrector.polish import critical_polish_molefrac
from critrace.algorithms.criticality.derivatives import \
    get_criticality_conditions
from critrace.algorithms.criticality.slope import get_drhovec_dT_crit
from critrace.algorithms.derivatives.isochoric import isochoric
from critrace.algorithms.integrators.rk import make_stepper
from critrace.algorithms.models.protocols import ThermoModel
from critrace.algorithms.types.exceptions import CritraceError
from critrace.utils.io.progress import _ProgressWriter, format_progress_line
from critrace.utils.log_config import logger

# Exceptions that end a trace instead of propagating once stepping started.
_STEP_ERRORS = (CritraceError, ArithmeticError, ValueError, np.linalg.LinAlgError)


@dataclass(frozen=True, eq=False)
class _State:
    """A point of the locus as temperature and concentrations."""

    T: float
    rhovec: np.ndarray

    @classmethod
    def from_x(cls, x: np.ndarray) -> "_State":
        return cls(T=float(x[0]), rhovec=np.array(x[1:], dtype=np.float64))

    @property
    def x(self) -> np.ndarray:
        return np.concatenate(([self.T], self.rhovec))

    @property
    def z0(self) -> float:
        return float(self.rhovec[0] / np.sum(self.rhovec))


def _in_domain(z0: float) -> bool:
    return bool(np.isfinite(z0)) and 0.0 <= z0 <= 1.0


class _TraceIterator:
    """Lazy trace, yielding one :class:`TracePoint` per recorded point.

    The starting point is evaluated on construction so that a bad start
    raises immediately. Once stepping has begun, failures end the
    iteration and are kept in :attr:`error`. The iterator cannot be
    restarted.

    Parameters
    ----------
    backend : :class:`_ArclengthBackend`
        Backend whose hooks are notified.
    model : :class:`~critrace.algorithms.models.protocols.ThermoModel`
        Thermodynamic model.
    T0 : float
        Temperature of the starting critical point in K.
    rhovec0 : np.ndarray
        Molar concentrations of the starting critical point in mol/m^3.
    options : :class:`~critrace.algorithms.continuation.config.ContinuationOptions`
        Continuation options.
    filename : str or None
        Optional CSV progress file.
    """

    def __init__(
        self,
        backend: "_ArclengthBackend",
        model: ThermoModel,
        T0: float,
        rhovec0: np.ndarray,
        options: ContinuationOptions,
        filename: Optional[str] = None,
    ):
        self._backend = backend
        self._model = model
        self._options = options
        self._stepper = make_stepper(
            options.integration_order,
            abs_err=options.abs_err,
            rel_err=options.rel_err,
            min_dt=options.min_dt,
        )

        self._c = float(options.init_c)
        self._last_drhodt: Optional[np.ndarray] = None
        self._t = 0.0
        self._dt = float(options.init_dt)
        self._iter = 0
        self._small_steps = 0

        self.accepted_count = 0
        self.rejected_count = 0
        self.status: Optional[TraceStatus] = None
        self.error: Optional[BaseException] = None

        x0 = np.concatenate(([float(T0)], np.asarray(rhovec0, dtype=np.float64)))
        drhodt = self._xprime(self._t, x0)[1:]
        if np.any(x0[1:] + drhodt * options.init_dt < 0):
            self._c *= -1.0
        self._x = x0

        self._pending: Optional[TracePoint] = self._make_point(self._x)
        self._writer = _ProgressWriter(filename)
        self._record(self._pending)

    @property
    def c(self) -> float:
        """Current sign of the search direction."""
        return self._c

    @property
    def t(self) -> float:
        return self._t

    @property
    def dt(self) -> float:
        return self._dt

    def _xprime(self, t: float, x: np.ndarray) -> np.ndarray:
        drhodT = get_drhovec_dT_crit(self._model, x[0], x[1:])
        dTdt = 1.0 / np.linalg.norm(drhodT)
        drhodt = self._c * drhodT * dTdt
        dxdt = np.concatenate(([self._c * dTdt], drhodt))
        if self._last_drhodt is not None and np.dot(drhodt, self._last_drhodt) < 0:
            dxdt = -dxdt
        return dxdt

    def _make_point(self, x: np.ndarray) -> TracePoint:
        state = _State.from_x(x)
        derivs = isochoric(self._model)
        return TracePoint(
            t=self._t,
            T=state.T,
            rhovec=state.rhovec,
            c=self._c,
            splus=float(derivs.get_splus(state.T, state.rhovec)),
            p=float(derivs.get_pressure(state.T, state.rhovec)),
            dxdt=self._xprime(self._t, x),
            conditions=get_criticality_conditions(self._model, state.T, state.rhovec),
        )

    def _record(self, point: TracePoint) -> None:
        if self._writer.enabled:
            self._writer.write(format_progress_line(
                point.z0, point.rhovec[0], point.rhovec[1], point.T, point.p,
                point.c, self._dt, point.conditions[0], point.conditions[1],
            ))
        if self._options.verbose:
            logger.info(
                "t=%.6g T=%.6f K z0=%.6f p=%.6g Pa dt=%.3g cond=(%.3e, %.3e)",
                point.t, point.T, point.z0, point.p, self._dt,
                point.conditions[0], point.conditions[1],
            )

    def _take_step(self) -> np.ndarray:
        if self._options.integration_order == 5:
            while True:
                res = self._stepper.try_step(self._xprime, self._x, self._t, self._dt)
                if res.accepted:
                    break
                self.rejected_count += 1
                self._dt = res.dt
            self._t = res.t
            self._dt = min(res.dt, self._options.max_dt)
        else:
            res = self._stepper.try_step(self._xprime, self._x, self._t, self._dt)
            self._t = res.t
        self.accepted_count += 1
        return res.y

    def _polish(self, x: np.ndarray, z0: float) -> np.ndarray:
        state = _State.from_x(x)
        try:
            T, rhovec = critical_polish_molefrac(self._model, state.T, state.rhovec, z0)
        except _STEP_ERRORS as exc:
            logger.warning("Polishing failed at T=%.6f K, z0=%.6f: %s", state.T, z0, exc)
            return x
        return _State(T=T, rhovec=rhovec).x

    def _advance(self) -> Optional[TracePoint]:
        """Take one step; return the new point or ``None`` when the trace left the domain."""
        step_index = self._iter
        x_start = self._x.copy()

        x = self._take_step()
        self._iter += 1

        z0 = _State.from_x(x).z0
        if not _in_domain(z0):
            self.status = TraceStatus.OUT_OF_DOMAIN
            return None

        if self._options.polish:
            x = self._polish(x, z0)

        if step_index >= self._options.skip_dircheck_count:
            self._last_drhodt = self._xprime(self._t, x_start)[1:]

        if abs(x[0] - x_start[0]) < self._options.T_tol:
            self._small_steps += 1
        else:
            self._small_steps = 0

        self._x = x
        if not _in_domain(_State.from_x(x).z0):
            self.status = TraceStatus.OUT_OF_DOMAIN
            return None

        point = self._make_point(x)
        self._record(point)
        self._backend.on_iteration(self._iter, x, self._dt)

        if self._small_steps > self._options.small_T_count:
            self.status = TraceStatus.CONVERGED
            self._backend.on_accept(x, iterations=self._iter, residual_norm=float(np.max(np.abs(point.conditions))))
        return point

    def __iter__(self) -> "_TraceIterator":
        return self

    def __next__(self) -> TracePoint:
        if self._pending is not None:
            point, self._pending = self._pending, None
            return point

        if self.status is None and self._iter >= self._options.max_step_count:
            self.status = TraceStatus.EXHAUSTED
        if self.status is not None:
            self.close()
            raise StopIteration

        try:
            point = self._advance()
        except _STEP_ERRORS as exc:
            logger.warning("Critical-locus trace stopped at t=%g: %s", self._t, exc)
            self.status = TraceStatus.INTEGRATION_ERROR
            self.error = exc
            self._backend.on_failure(self._x, iterations=self._iter, residual_norm=float("nan"))
            point = None

        if point is None:
            self.close()
            raise StopIteration
        return point

    def info(self) -> dict:
        return {
            "status": self.status,
            "accepted_count": self.accepted_count,
            "rejected_count": self.rejected_count,
            "error": self.error,
        }

    def close(self) -> None:
        """Close the progress file."""
        self._writer.close()

    def __enter__(self) -> "_TraceIterator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class _ArclengthBackend(_ContinuationBackend):
    """Integrate the arclength ODE of a binary critical locus."""

    def iterate(
        self,
        *,
        model: ThermoModel,
        T0: float,
        rhovec0: np.ndarray,
        options: ContinuationOptions,
        filename: Optional[str] = None,
    ) -> _TraceIterator:
        """Return a lazy iterator over the points of the locus."""
        return _TraceIterator(self, model, T0, rhovec0, options, filename)

    def run(
        self,
        *,
        model: ThermoModel,
        T0: float,
        rhovec0: np.ndarray,
        options: ContinuationOptions,
        filename: Optional[str] = None,
    ) -> tuple[list[TracePoint], dict]:
        """Trace the locus to completion.

        Returns
        -------
        points : list[TracePoint]
            Recorded points, the starting point first.
        info : dict
            ``status``, ``accepted_count``, ``rejected_count`` and ``error``.
        """
        with self.iterate(model=model, T0=T0, rhovec0=rhovec0, options=options, filename=filename) as it:
            points = list(it)
        info = it.info()
        logger.info(
            "Critical-locus trace finished (%s) with %d points, %d accepted and %d rejected steps",
            info["status"], len(points), info["accepted_count"], info["rejected_count"],
        )
        return points, info
