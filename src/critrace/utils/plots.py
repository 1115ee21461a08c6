from typing import TYPE_CHECKING, Optional

import matplotlib.pyplot as plt
import numpy as np

from critrace.utils.log_config import logger

if TYPE_CHECKING:
    from critrace.algorithms.continuation.types import ContinuationResult


def plot_critical_locus(
    result: "ContinuationResult",
    *,
    dark_mode: bool = False,
    save: bool = False,
    filepath: str = "critical_locus.svg",
    figsize=(11, 4.5),
    color: str = "tab:blue",
    title: Optional[str] = None,
):
    """
    Plot a traced critical locus in the T-z0 and p-T planes.

    Parameters
    ----------
    result : ContinuationResult
        The traced locus.
    dark_mode : bool, default False
        Use a dark background colour scheme.
    save : bool, default False
        Whether to save the figure to ``filepath``.
    filepath : str, default 'critical_locus.svg'
        Output path used when ``save`` is True.
    figsize : tuple, default (11, 4.5)
        Figure size in inches.
    color : str, default 'tab:blue'
        Line colour.
    title : str, optional
        Figure title. Defaults to the termination status.

    Returns
    -------
    matplotlib.figure.Figure
        Figure handle.
    numpy.ndarray
        The two axes.
    """
    T = result.temperatures
    z0 = result.molefractions
    p = result.pressures

    fig, axes = plt.subplots(1, 2, figsize=figsize)
    ax_tz, ax_pt = axes

    ax_tz.plot(z0, T, "-", color=color, lw=1.5)
    ax_tz.plot(z0[:1], T[:1], "o", color=color, ms=5)
    ax_tz.set_xlabel(r"$z_0$ / mole frac.")
    ax_tz.set_ylabel(r"$T$ / K")
    ax_tz.set_xlim(0.0, 1.0)

    ax_pt.plot(T, p / 1e6, "-", color=color, lw=1.5)
    ax_pt.plot(T[:1], p[:1] / 1e6, "o", color=color, ms=5)
    ax_pt.set_xlabel(r"$T$ / K")
    ax_pt.set_ylabel(r"$p$ / MPa")

    suptitle = fig.suptitle(title if title is not None else f"Critical locus ({result.status}, {len(result)} points)")

    for ax in axes:
        if dark_mode:
            _set_dark_mode(fig, ax)
            suptitle.set_color("white")
        else:
            ax.grid(True, linestyle=":", linewidth=0.5)

    fig.tight_layout()
    if save:
        fig.savefig(filepath)
        logger.info(f"Critical locus plot saved to {filepath}")
    return fig, np.asarray(axes)


def _set_dark_mode(fig: plt.Figure, ax: plt.Axes, title: Optional[str] = None):
    """
    Apply dark mode styling to the figure and axes.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        The figure to apply dark mode styling to.
    ax : matplotlib.axes.Axes
        The axes to apply dark mode styling to.
    title : str, optional
        The title to set with appropriate dark mode styling.
    """
    text_color = 'white'
    grid_color = '#555555'

    fig.patch.set_facecolor('black')
    ax.set_facecolor('black')

    ax.xaxis.label.set_color(text_color)
    ax.yaxis.label.set_color(text_color)
    ax.tick_params(axis='x', colors=text_color, which='both')
    ax.tick_params(axis='y', colors=text_color, which='both')
    ax.grid(True, color=grid_color, linestyle=':', linewidth=0.5)

    for spine in ax.spines.values():
        spine.set_edgecolor(grid_color)

    if title:
        ax.set_title(title, color=text_color)
