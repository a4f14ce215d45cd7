"""Frequency grids."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from clusterpt.grids.grid import BaseGrid

if TYPE_CHECKING:
    from typing import Any

    from clusterpt.typing import Array


class RealFrequencyGrid(BaseGrid):
    """Real frequency grid, with a broadening factor shifting the frequencies above the axis."""

    eta: float = 0.05

    _options = {"eta"}

    def __init__(  # noqa: D417
        self, points: Array, weights: Array | None = None, **kwargs: Any
    ) -> None:
        """Initialise the grid.

        Args:
            points: Points of the grid.
            weights: Weights of the grid.
            eta: Broadening factor.
        """
        super().__init__(points, weights=weights, **kwargs)
        if self.points.ndim != 1:
            raise ValueError("Frequency grid points must be a 1D array.")
        if self.eta < 0:
            raise ValueError(f"Broadening factor must be non-negative, got {self.eta}.")

    @property
    def domain(self) -> str:
        """Get the domain of the grid.

        Returns:
            Domain of the grid.
        """
        return "frequency"

    @property
    def separation(self) -> float:
        """Get the separation of the grid.

        Returns:
            Separation of the grid.
        """
        if len(self) < 2:
            raise ValueError("Grid is too small to compute separation.")
        if not np.allclose(np.diff(self.points), self.points[1] - self.points[0]):
            raise ValueError("Grid is not uniformly spaced.")
        return float(np.abs(self.points[1] - self.points[0]))

    def resolvent(self, energies: Array, chempot: float = 0.0) -> Array:
        r"""Get the resolvent of the grid.

        For real frequency grids, the resolvent is given by

        .. math::
            R(\omega) = \frac{1}{\omega + \mu + i \eta - E},

        where :math:`\eta` is a small broadening factor, and :math:`E` are the pole energies.

        Args:
            energies: Energies of the poles.
            chempot: Chemical potential.

        Returns:
            Resolvent of the grid, with the frequency as the first axis.
        """
        energies = np.asarray(energies)
        grid = np.expand_dims(self.points, axis=tuple(range(1, energies.ndim + 1)))
        return 1.0 / (grid + chempot + 1.0j * self.eta - energies[None])

    @classmethod
    def from_uniform(
        cls, start: float, stop: float, num: int, eta: float | None = None
    ) -> RealFrequencyGrid:
        """Create a uniform real frequency grid.

        Args:
            start: Start of the grid.
            stop: End of the grid.
            num: Number of points in the grid.
            eta: Broadening factor.

        Returns:
            Uniform real frequency grid.
        """
        points = np.linspace(start, stop, num, endpoint=True)
        if eta is None:
            return cls(points)
        return cls(points, eta=eta)


GridRF = RealFrequencyGrid
