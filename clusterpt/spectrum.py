"""Single-particle spectral function along a momentum path."""

from __future__ import annotations

import multiprocessing as mp
from typing import TYPE_CHECKING

import numpy as np

from clusterpt import console, printing
from clusterpt.grids.frequency import RealFrequencyGrid
from clusterpt.grids.momentum import MomentumPath
from clusterpt.representations.enums import Reduction

if TYPE_CHECKING:
    from typing import Sequence

    from clusterpt.typing import Array
    from clusterpt.vca import VCA


def _spectrum_at_momentum(
    vca: VCA,
    k: Array,
    frequencies: Array,
    chempot: float,
    eta: float,
    reduction: Reduction,
) -> Array:
    """Get the spectral function at a single momentum for all frequencies."""
    spectrum = []
    for omega in frequencies:
        greens_function = vca.greens_function(k, omega, chempot=chempot, eta=eta)
        if reduction == Reduction.TRACE:
            spectrum.append(-np.trace(greens_function).imag / np.pi)
        elif reduction == Reduction.DIAG:
            spectrum.append(-np.diag(greens_function).imag / np.pi)
        elif reduction == Reduction.NONE:
            spectrum.append(
                -(greens_function - greens_function.T.conj()) / (2.0j * np.pi)
            )
        else:
            reduction.raise_invalid_representation()
    return np.array(spectrum)


def _spectrum_at_momentum_star(
    args: tuple[VCA, Array, Array, float, float, Reduction],
) -> Array:
    """Unpack the arguments of :func:`_spectrum_at_momentum` for a pool of processes."""
    return _spectrum_at_momentum(*args)


def single_particle_spectrum(
    vca: VCA,
    path: MomentumPath | Sequence[Array] | Array,
    grid: RealFrequencyGrid | Array,
    chempot: float = 0.0,
    eta: float | None = None,
    reduction: Reduction | str = Reduction.TRACE,
    processes: int = 1,
) -> Array:
    r"""Get the single-particle spectral function on a grid of frequencies and momenta.

    The spectral function is

    .. math::
        A(k, \omega) = -\frac{1}{\pi} \mathrm{Tr} \, \mathrm{Im} \, G(k, \omega),

    where :math:`G` is the lattice Green's function coarse-grained onto the unit cell.

    Args:
        vca: Cluster perturbation theory context.
        path: Momentum points.
        grid: Frequency points.
        chempot: Chemical potential.
        eta: Broadening factor. If `None`, use the broadening factor of the grid if it is a
            :class:`RealFrequencyGrid`, otherwise ``0.05``.
        reduction: Reduction of the Green's function. For ``"trace"`` the result has shape
            `(nfreq, nk)`, for ``"diag"`` the diagonal elements are kept along a final axis, and
            for ``"none"`` the full spectral function matrix is kept along two final axes.
        processes: Number of processes over which the momentum points are distributed.

    Returns:
        The spectral function, with the frequency as the first axis and the momentum as the
        second axis.
    """
    reduction = Reduction(reduction)

    # Get the frequencies and momenta
    if isinstance(grid, RealFrequencyGrid):
        frequencies = grid.points
        if eta is None:
            eta = grid.eta
    else:
        frequencies = np.asarray(grid, dtype=np.float64).ravel()
    if eta is None:
        eta = RealFrequencyGrid.eta
    if isinstance(path, MomentumPath):
        momenta = path.points
    else:
        momenta = np.asarray(path, dtype=np.float64).reshape(-1, vca.ndim)
    if momenta.shape[1] != vca.ndim:
        raise ValueError(
            f"Momenta of dimension {momenta.shape[1]} are incompatible with a lattice of "
            f"dimension {vca.ndim}."
        )

    console.print(
        f"Spectrum on [input]{len(frequencies)}[/input] frequencies and "
        f"[input]{len(momenta)}[/input] momenta."
    )

    # Evaluate the spectrum at each momentum
    arguments = [(vca, k, frequencies, chempot, eta, reduction) for k in momenta]
    if not arguments:
        trailing = (len(vca.perioder.groups),) * reduction.ndim
        return np.zeros((len(frequencies), 0) + trailing)
    if processes > 1:
        with mp.get_context().Pool(processes) as pool:
            results = pool.map(_spectrum_at_momentum_star, arguments)
    else:
        results = []
        with printing.ProgressPrinter(len(momenta), description="Momentum") as progress:
            for i, args in enumerate(arguments):
                results.append(_spectrum_at_momentum(*args))
                progress.update(i + 1)

    return np.stack(results, axis=1)
