"""Momentum grids."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from clusterpt.grids.grid import BaseGrid

if TYPE_CHECKING:
    from typing import Any, Sequence

    from clusterpt.typing import Array


class MomentumPath(BaseGrid):
    """Path of momentum points through the Brillouin zone.

    Args:
        points: Momentum points, with shape `(nk, ndim)`.
        labels: Labels of the high-symmetry points along the path.
        ticks: Indices of the high-symmetry points along the path.
    """

    def __init__(  # noqa: D417
        self,
        points: Array,
        weights: Array | None = None,
        labels: Sequence[str] = (),
        ticks: Sequence[int] = (),
        **kwargs: Any,
    ) -> None:
        """Initialise the grid.

        Args:
            points: Momentum points.
            weights: Weights of the points.
            labels: Labels of the high-symmetry points along the path.
            ticks: Indices of the high-symmetry points along the path.
        """
        points = np.array(points, dtype=np.float64)
        if points.ndim == 1:
            points = points[:, None]
        super().__init__(points, weights=weights, **kwargs)
        if len(labels) != len(ticks):
            raise ValueError(f"Got {len(labels)} labels for {len(ticks)} ticks.")
        self._labels = tuple(labels)
        self._ticks = tuple(ticks)

    @classmethod
    def from_vertices(
        cls,
        vertices: Sequence[Array],
        labels: Sequence[str] | None = None,
        num: int = 32,
    ) -> MomentumPath:
        """Create a piecewise linear path through a sequence of vertices.

        Args:
            vertices: Momentum vectors of the vertices.
            labels: Labels of the vertices. If `None`, the vertices are left unlabelled.
            num: Number of points on each segment, excluding its final vertex.

        Returns:
            Momentum path, including the final vertex.
        """
        vertices = [np.atleast_1d(np.asarray(vertex, dtype=np.float64)) for vertex in vertices]
        if len(vertices) < 2:
            raise ValueError("At least two vertices are required for a path.")
        if labels is None:
            labels = [""] * len(vertices)
        if len(labels) != len(vertices):
            raise ValueError(f"Got {len(labels)} labels for {len(vertices)} vertices.")
        points = []
        for start, stop in zip(vertices[:-1], vertices[1:]):
            fractions = np.linspace(0.0, 1.0, num, endpoint=False)
            points.extend(start + fraction * (stop - start) for fraction in fractions)
        points.append(vertices[-1])
        ticks = [i * num for i in range(len(vertices))]
        return cls(np.array(points), labels=labels, ticks=ticks)

    @property
    def domain(self) -> str:
        """Get the domain of the grid."""
        return "momentum"

    @property
    def labels(self) -> tuple[str, ...]:
        """Get the labels of the high-symmetry points."""
        return self._labels

    @property
    def ticks(self) -> tuple[int, ...]:
        """Get the indices of the high-symmetry points."""
        return self._ticks

    @property
    def ndim(self) -> int:
        """Get the dimension of the momentum vectors."""
        return self.points.shape[1]

    @property
    def distances(self) -> Array:
        """Get the cumulative length of the path at each point."""
        steps = np.linalg.norm(np.diff(self.points, axis=0), axis=1)
        return np.concatenate([[0.0], np.cumsum(steps)])
