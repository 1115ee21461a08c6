"""Shared helpers of the HDF5 writers."""

from pathlib import Path

import h5py
import numpy as np


def _ensure_dir(path: str | Path) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def _write_dataset(
    group: h5py.Group,
    name: str,
    data: np.ndarray,
    *,
    compression: str = "gzip",
    level: int = 4,
) -> h5py.Dataset:
    """Write ``data`` to ``group[name]``, compressing non-scalar arrays."""
    arr = np.asarray(data)
    if arr.ndim == 0 or arr.size < 2:
        return group.create_dataset(name, data=arr)
    return group.create_dataset(name, data=arr, compression=compression, compression_opts=level)
