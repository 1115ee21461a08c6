"""Input/output utilities for traced critical loci.

A trace is stored as one HDF5 file with the columns of the JSON records as
datasets and the termination status as file attributes.
"""

from pathlib import Path

import h5py
import numpy as np

from critrace.algorithms.continuation.types import (JSON_KEYS,
                                                    ContinuationResult,
                                                    TracePoint, TraceStatus)
from critrace.utils.io.common import _ensure_dir, _write_dataset
from critrace.utils.log_config import logger

HDF5_VERSION = "1.0"
"""HDF5 format version for critical-locus data."""

# HDF5 dataset names cannot contain '/'
_DATASET_NAMES = {key: key.replace("/", "|") for key in JSON_KEYS}


def save_trace(
    result: ContinuationResult,
    filepath: str | Path,
    *,
    compression: str = "gzip",
    level: int = 4,
) -> None:
    """Save a :class:`~critrace.algorithms.continuation.types.ContinuationResult` to HDF5."""
    path = Path(filepath)
    _ensure_dir(path.parent)

    records = result.to_json()
    with h5py.File(path, "w") as h5:
        h5.attrs["class"] = "ContinuationResult"
        h5.attrs["format_version"] = HDF5_VERSION
        h5.attrs["status"] = result.status.value
        h5.attrs["accepted_count"] = int(result.accepted_count)
        h5.attrs["rejected_count"] = int(result.rejected_count)
        if result.error is not None:
            h5.attrs["error"] = f"{type(result.error).__name__}: {result.error}"

        grp = h5.create_group("points")
        for key in JSON_KEYS:
            column = np.array([rec[key] for rec in records], dtype=np.float64)
            _write_dataset(grp, _DATASET_NAMES[key], column, compression=compression, level=level)

    logger.info("Saved critical locus with %d points to %s", len(records), path)


def load_trace(filepath: str | Path) -> ContinuationResult:
    """Load a result written by :func:`save_trace`.

    The error object itself is not restored; only its message is kept in
    the file attributes.
    """
    path = Path(filepath)
    with h5py.File(path, "r") as h5:
        if str(h5.attrs.get("class", "")) != "ContinuationResult":
            raise ValueError("File does not contain a ContinuationResult object")

        status = TraceStatus(str(h5.attrs["status"]))
        accepted = int(h5.attrs["accepted_count"])
        rejected = int(h5.attrs["rejected_count"])
        columns = {key: h5["points"][_DATASET_NAMES[key]][()] for key in JSON_KEYS}

    n = len(columns["t"])
    points = tuple(
        TracePoint.from_json({key: columns[key][i] for key in JSON_KEYS}) for i in range(n)
    )
    return ContinuationResult(points=points, status=status, accepted_count=accepted, rejected_count=rejected)
