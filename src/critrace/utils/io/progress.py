"""Human-readable progress file of a running trace."""

from pathlib import Path
from typing import Optional, TextIO

from critrace.utils.io.common import _ensure_dir

PROGRESS_HEADER = "z0,rho0,rho1,T,p,c,dt,condition(1),condition(2)"


def format_progress_line(z0, rho0, rho1, T, p, c, dt, cond1, cond2) -> str:
    return ",".join(f"{float(v):.12g}" for v in (z0, rho0, rho1, T, p, c, dt, cond1, cond2))


class _ProgressWriter:
    """Comma-separated progress file, one line per recorded point.

    A writer without a filename accepts lines and discards them.
    """

    def __init__(self, filename: Optional[str | Path] = None):
        self._fh: Optional[TextIO] = None
        if filename:
            path = Path(filename)
            _ensure_dir(path.parent)
            self._fh = open(path, "w")
            self._fh.write(PROGRESS_HEADER + "\n")

    @property
    def enabled(self) -> bool:
        return self._fh is not None

    def write(self, line: str) -> None:
        if self._fh is not None:
            self._fh.write(line + "\n")
            self._fh.flush()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "_ProgressWriter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
