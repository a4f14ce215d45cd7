"""Plotting utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

from clusterpt.grids.frequency import RealFrequencyGrid
from clusterpt.grids.momentum import MomentumPath

if TYPE_CHECKING:
    from typing import Any

    from matplotlib.axes import Axes
    from matplotlib.image import AxesImage
    from matplotlib.lines import Line2D

    from clusterpt.typing import Array


theme = {
    # Lines
    "lines.linewidth": 2.0,
    "lines.markersize": 8.0,
    # Font
    "font.size": 12,
    "font.family": "sans-serif",
    "font.weight": "medium",
    # Axes
    "axes.titlesize": 12,
    "axes.labelsize": 12,
    "axes.labelweight": "medium",
    "axes.linewidth": 1.5,
    "axes.unicode_minus": False,
    # Ticks
    "xtick.labelsize": 12,
    "xtick.major.pad": 7,
    "xtick.major.size": 7,
    "xtick.major.width": 1.2,
    "ytick.labelsize": 12,
    "ytick.major.pad": 7,
    "ytick.major.size": 7,
    "ytick.major.width": 1.2,
    # Image
    "image.cmap": "magma",
    "image.origin": "lower",
    "image.aspect": "auto",
    # Figure
    "figure.figsize": (8, 6),
    "figure.facecolor": "white",
    "figure.autolayout": True,
}

plt.rcParams.update(theme)


def _momentum_axis(path: MomentumPath | Array, nk: int) -> Array:
    """Get the horizontal coordinate of each momentum point."""
    if isinstance(path, MomentumPath):
        return path.distances
    return np.arange(nk, dtype=np.float64)


def _frequency_axis(grid: RealFrequencyGrid | Array) -> Array:
    """Get the frequency of each grid point."""
    if isinstance(grid, RealFrequencyGrid):
        return grid.points
    return np.asarray(grid, dtype=np.float64)


def plot_spectrum(
    spectrum: Array,
    grid: RealFrequencyGrid | Array,
    path: MomentumPath | Array,
    ax: Axes | None = None,
    normalise: bool = False,
    **kwargs: Any,
) -> AxesImage:
    """Plot a momentum-resolved spectral function as an image.

    Args:
        spectrum: Spectral function, with shape `(nfreq, nk)`.
        grid: Frequency grid of the spectral function.
        path: Momentum path of the spectral function.
        ax: The axes to plot on. If ``None``, a new figure and axes are created.
        normalise: If ``True``, the spectral function is normalised to have a maximum value of 1.
        **kwargs: Additional keyword arguments passed to ``ax.imshow``.

    Returns:
        The image of the spectral function.
    """
    if spectrum.ndim != 2:
        raise ValueError(
            f"Spectral function must have shape (nfreq, nk) to plot as an image, got "
            f"{spectrum.shape}. Use the trace reduction when computing the spectral function."
        )
    if ax is None:
        fig, ax = plt.subplots()
    frequencies = _frequency_axis(grid)
    distances = _momentum_axis(path, spectrum.shape[1])
    if normalise:
        spectrum = spectrum / np.max(np.abs(spectrum))
    extent = (distances[0], distances[-1], frequencies[0], frequencies[-1])
    image = ax.imshow(spectrum, extent=extent, **kwargs)
    format_axes_spectrum(path, ax=ax)
    return image


def plot_spectrum_slice(
    spectrum: Array,
    grid: RealFrequencyGrid | Array,
    index: int,
    ax: Axes | None = None,
    fmt: str = "k-",
    **kwargs: Any,
) -> list[Line2D]:
    """Plot the spectral function at a single momentum as a line plot.

    Args:
        spectrum: Spectral function, with shape `(nfreq, nk)`.
        grid: Frequency grid of the spectral function.
        index: Index of the momentum point.
        ax: The axes to plot on. If ``None``, a new figure and axes are created.
        fmt: The format string for the lines.
        **kwargs: Additional keyword arguments passed to ``ax.plot``.

    Returns:
        A list of Line2D objects representing the plotted spectral function.
    """
    if ax is None:
        fig, ax = plt.subplots()
    return ax.plot(_frequency_axis(grid), spectrum[:, index], fmt, **kwargs)


def format_axes_spectrum(
    path: MomentumPath | Array,
    ax: Axes | None = None,
    ylabel: str = "Frequency",
) -> None:
    """Format the axes for a momentum-resolved spectral function plot.

    Args:
        path: Momentum path of the spectral function.
        ax: The axes to format. If ``None``, the current axes are used.
        ylabel: The label for the y-axis.
    """
    if ax is None:
        ax = plt.gca()
    ax.set_ylabel(ylabel)
    if isinstance(path, MomentumPath) and path.ticks:
        distances = path.distances
        ax.set_xticks([distances[tick] for tick in path.ticks])
        ax.set_xticklabels(path.labels)
        for tick in path.ticks:
            ax.axvline(distances[tick], color="white", linewidth=0.8, alpha=0.5)
    else:
        ax.set_xlabel("Momentum")
