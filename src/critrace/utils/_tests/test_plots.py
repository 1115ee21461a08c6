import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from critrace.algorithms.continuation.types import (ContinuationResult,
                                                    TracePoint, TraceStatus)
from critrace.utils.plots import plot_critical_locus


@pytest.fixture
def result():
    points = tuple(
        TracePoint(
            t=float(i),
            T=150.0 + 4.0 * i,
            rhovec=np.array([10000.0 - 1000.0 * i, 800.0 * i]),
            c=1.0,
            splus=-0.5,
            p=4.8e6 + 2e4 * i,
            dxdt=np.zeros(3),
            conditions=np.zeros(2),
        )
        for i in range(8)
    )
    return ContinuationResult(points=points, status=TraceStatus.EXHAUSTED)


def test_plot_returns_two_axes(result):
    fig, axes = plot_critical_locus(result)
    assert axes.shape == (2,)
    x, y = axes[0].lines[0].get_data()
    np.testing.assert_allclose(x, result.molefractions)
    np.testing.assert_allclose(y, result.temperatures)
    plt.close(fig)


def test_plot_dark_mode_and_save(result, tmp_path):
    path = tmp_path / "locus.png"
    fig, _ = result.plot(save=True, filepath=str(path), dark_mode=True)
    assert path.exists()
    plt.close(fig)
