"""Types for the continuation module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np
import pandas as pd

from critrace.algorithms.continuation.config import ContinuationOptions
from critrace.algorithms.types.core import _CritraceBaseProblem
from critrace.utils.log_config import logger

if TYPE_CHECKING:
    from critrace.algorithms.models.protocols import ThermoModel


class TraceStatus(Enum):
    """Terminal state of a trace.

    Parameters
    ----------
    CONVERGED : str
        The temperature stopped changing.
    EXHAUSTED : str
        The maximum number of steps was taken.
    OUT_OF_DOMAIN : str
        The mole fraction left the interval [0, 1].
    INTEGRATION_ERROR : str
        A step could not be completed; the error is kept on the result.
    """
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    OUT_OF_DOMAIN = "out_of_domain"
    INTEGRATION_ERROR = "integration_error"

    def __str__(self) -> str:
        return self.value


#: Keys of one JSON record, in output order.
JSON_KEYS = (
    "t",
    "T / K",
    "rho0 / mol/m^3",
    "rho1 / mol/m^3",
    "c",
    "s^+",
    "p / Pa",
    "dT/dt",
    "drho0/dt",
    "drho1/dt",
    "lambda1",
    "dirderiv(lambda1)/dalpha",
)


@dataclass(frozen=True, eq=False)
class TracePoint:
    """One recorded point of a critical locus.

    Parameters
    ----------
    t : float
        Pseudo-time (arclength in concentration space).
    T : float
        Temperature in K.
    rhovec : np.ndarray
        Molar concentrations in mol/m^3.
    c : float
        Sign of the search direction when the point was recorded.
    splus : float
        Reduced residual entropy.
    p : float
        Pressure in Pa.
    dxdt : np.ndarray
        ``[dT/dt, drho0/dt, drho1/dt]`` at the point.
    conditions : np.ndarray
        The two criticality residuals.
    """

    t: float
    T: float
    rhovec: np.ndarray
    c: float
    splus: float
    p: float
    dxdt: np.ndarray
    conditions: np.ndarray

    @property
    def z0(self) -> float:
        """Mole fraction of the first component."""
        return float(self.rhovec[0] / np.sum(self.rhovec))

    def to_json(self) -> dict:
        values = (
            self.t,
            self.T,
            self.rhovec[0],
            self.rhovec[1],
            self.c,
            self.splus,
            self.p,
            self.dxdt[0],
            self.dxdt[1],
            self.dxdt[2],
            self.conditions[0],
            self.conditions[1],
        )
        return {key: float(value) for key, value in zip(JSON_KEYS, values)}

    @classmethod
    def from_json(cls, record: dict) -> "TracePoint":
        return cls(
            t=float(record["t"]),
            T=float(record["T / K"]),
            rhovec=np.array([record["rho0 / mol/m^3"], record["rho1 / mol/m^3"]], dtype=float),
            c=float(record["c"]),
            splus=float(record["s^+"]),
            p=float(record["p / Pa"]),
            dxdt=np.array([record["dT/dt"], record["drho0/dt"], record["drho1/dt"]], dtype=float),
            conditions=np.array([record["lambda1"], record["dirderiv(lambda1)/dalpha"]], dtype=float),
        )


@dataclass(frozen=True, eq=False)
class ContinuationResult:
    """Standardized result of a critical-locus trace.

    Attributes
    ----------
    points : Tuple[TracePoint, ...]
        Recorded points, the initial point first.
    status : TraceStatus
        Why the trace stopped.
    accepted_count : int
        The number of accepted steps.
    rejected_count : int
        The number of rejected step attempts.
    error : Exception or None
        The exception that ended the trace when ``status`` is
        ``INTEGRATION_ERROR``.
    """

    points: Tuple[TracePoint, ...]
    status: TraceStatus
    accepted_count: int = 0
    rejected_count: int = 0
    error: Optional[BaseException] = None

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, idx):
        return self.points[idx]

    def __repr__(self) -> str:
        return f"ContinuationResult(n_points={len(self)}, status='{self.status}')"

    @property
    def temperatures(self) -> np.ndarray:
        return np.array([p.T for p in self.points])

    @property
    def rhovecs(self) -> np.ndarray:
        return np.array([p.rhovec for p in self.points]).reshape(-1, 2)

    @property
    def molefractions(self) -> np.ndarray:
        return np.array([p.z0 for p in self.points])

    @property
    def pressures(self) -> np.ndarray:
        return np.array([p.p for p in self.points])

    def to_json(self) -> list[dict]:
        """Return the points as a list of JSON-compatible records."""
        return [p.to_json() for p in self.points]

    def to_df(self) -> pd.DataFrame:
        """Return a DataFrame with one row per point and a ``z0`` column."""
        df = pd.DataFrame(self.to_json(), columns=list(JSON_KEYS))
        rho0 = df["rho0 / mol/m^3"]
        df.insert(1, "z0 / mole frac.", rho0 / (rho0 + df["rho1 / mol/m^3"]))
        return df

    def to_csv(self, filepath: str | Path) -> None:
        """Export the points to a CSV file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_df().to_csv(path, index=False)
        logger.info(f"Critical locus successfully exported to {path}")

    def save(self, filepath: str | Path, *, compression: str = "gzip", level: int = 4) -> None:
        """Save the result to an HDF5 file."""
        from critrace.utils.io.trace import save_trace
        save_trace(self, filepath, compression=compression, level=level)

    @classmethod
    def load(cls, filepath: str | Path) -> "ContinuationResult":
        """Load a result previously saved with :meth:`save`."""
        from critrace.utils.io.trace import load_trace
        return load_trace(filepath)

    def plot(self, *, save: bool = False, filepath: str = "critical_locus.svg", **kwargs):
        """Plot the locus in the T-z and p-T planes."""
        from critrace.utils.plots import plot_critical_locus
        return plot_critical_locus(self, save=save, filepath=filepath, **kwargs)


@dataclass(frozen=True, eq=False)
class _ContinuationProblem(_CritraceBaseProblem):
    """Defines the inputs for a trace.

    Attributes
    ----------
    model : ThermoModel
        Thermodynamic model.
    T0 : float
        Temperature of the starting critical point in K.
    rhovec0 : np.ndarray
        Molar concentrations of the starting critical point in mol/m^3.
    options : ContinuationOptions
        Continuation options.
    filename : str or None
        Optional CSV progress file.
    """

    model: "ThermoModel"
    T0: float
    rhovec0: np.ndarray
    options: ContinuationOptions = field(default_factory=ContinuationOptions)
    filename: Optional[str] = None
