"""Lattice geometry."""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from typing import Sequence

    from clusterpt.typing import Array

"""Tolerance for comparing distances and coordinates."""
TOLERANCE: float = 1e-8


class Bond(NamedTuple):
    """Bond between points of a lattice.

    A one-point bond lies on a single site and has neighbour order zero. For a two-point bond, the
    second point is the image of the second site translated by `displacement`, which is an
    integer combination of the translation vectors of the lattice.
    """

    sites: tuple[int, ...]
    neighbour: int
    coordinates: Array
    displacement: Array

    @property
    def vector(self) -> Array:
        """Get the vector from the first to the last point of the bond."""
        return self.coordinates[-1] - self.coordinates[0]

    @property
    def is_intracell(self) -> bool:
        """Get a flag indicating if all points of the bond lie in the reference cell."""
        return bool(np.allclose(self.displacement, 0.0, atol=TOLERANCE))


def is_subordinate(displacement: Array, vectors: Array, tol: float = TOLERANCE) -> bool:
    """Check if a displacement is an integer combination of translation vectors.

    Args:
        displacement: Displacement vector.
        vectors: Translation vectors, stored as rows.
        tol: Tolerance for the residual and for the integrality of the coefficients.

    Returns:
        Whether the displacement is a lattice translation.
    """
    displacement = np.asarray(displacement, dtype=np.float64)
    vectors = np.asarray(vectors, dtype=np.float64).reshape(-1, displacement.size)
    if vectors.shape[0] == 0:
        return bool(np.allclose(displacement, 0.0, atol=tol))
    coefficients = np.linalg.lstsq(vectors.T, displacement, rcond=None)[0]
    if not np.allclose(vectors.T @ coefficients, displacement, atol=tol):
        return False
    return bool(np.allclose(coefficients, np.round(coefficients), atol=tol))


class Lattice:
    """Finite set of points, optionally periodically repeated by translation vectors.

    Args:
        name: Name of the lattice.
        coordinates: Coordinates of the sites, with shape `(nsite, ndim)`.
        vectors: Translation vectors, with shape `(nvec, ndim)`. If `None`, the lattice is a
            finite cluster without translations.
    """

    def __init__(self, name: str, coordinates: Array, vectors: Array | None = None):
        """Initialise the object.

        Args:
            name: Name of the lattice.
            coordinates: Coordinates of the sites.
            vectors: Translation vectors.
        """
        coordinates = np.array(coordinates, dtype=np.float64)
        if coordinates.ndim == 1:
            coordinates = coordinates[:, None]
        if coordinates.ndim != 2 or coordinates.shape[0] == 0:
            raise ValueError("coordinates must be a non-empty 2D array.")
        ndim = coordinates.shape[1]
        if vectors is None:
            vectors = np.zeros((0, ndim))
        vectors = np.array(vectors, dtype=np.float64).reshape(-1, ndim)
        if vectors.shape[0] > ndim or (
            vectors.shape[0] and np.linalg.matrix_rank(vectors) < vectors.shape[0]
        ):
            raise ValueError("vectors must be linearly independent.")

        self._name = name
        self._coordinates = coordinates
        self._vectors = vectors

    @classmethod
    def supercell(
        cls, unitcell: Lattice, shape: Sequence[int], name: str | None = None
    ) -> Lattice:
        """Create a cluster by repeating a unit cell.

        The sites of the cluster are ordered by cell, with the cells enumerated in lexicographic
        order of their integer coordinates, and by the site order of the unit cell within each
        cell. The translation vectors of the cluster are the scaled unit cell vectors.

        Args:
            unitcell: Unit cell to repeat.
            shape: Number of repetitions along each translation vector of the unit cell.
            name: Name of the cluster. If `None`, derive it from the unit cell.

        Returns:
            The cluster.
        """
        shape = tuple(shape)
        if len(shape) != unitcell.nvec:
            raise ValueError(
                f"shape must have one entry per unit cell vector ({unitcell.nvec}), got {shape}."
            )
        coordinates = []
        for cell in itertools.product(*(range(n) for n in shape)):
            origin = np.array(cell, dtype=np.float64) @ unitcell.vectors
            coordinates.extend(origin + unitcell.coordinates)
        vectors = np.array(shape, dtype=np.float64)[:, None] * unitcell.vectors
        if name is None:
            name = f"{unitcell.name}{''.join(str(n) for n in shape)}"
        return cls(name, np.array(coordinates).reshape(-1, unitcell.ndim), vectors)

    def bonds(self, neighbours: int = 1) -> list[Bond]:
        """Get the bonds of the lattice.

        The one-point bonds on every site are followed by the two-point bonds up to the given
        neighbour order. Neighbour orders are assigned by distance. Each bond is listed once, with
        the first point in the reference cell; bonds to periodic images are included.

        Args:
            neighbours: Maximum neighbour order.

        Returns:
            The bonds.
        """
        bonds = [
            Bond((site,), 0, self.coordinates[site][None], np.zeros((self.ndim,)))
            for site in range(self.nsite)
        ]
        if neighbours < 1:
            return bonds

        # Enumerate candidate pairs of sites and translations
        nimage = neighbours + 1
        candidates = []
        for cell in itertools.product(range(-nimage, nimage + 1), repeat=self.nvec):
            translation = np.array(cell, dtype=np.float64) @ self.vectors
            positive = tuple(cell) > (0,) * self.nvec
            for i in range(self.nsite):
                for j in range(i, self.nsite):
                    if i == j and not positive:
                        continue
                    point = self.coordinates[j] + translation
                    distance = np.linalg.norm(point - self.coordinates[i])
                    candidates.append((distance, i, j, point, translation))

        # Assign the neighbour orders by distance
        distances = sorted(candidate[0] for candidate in candidates)
        shells: list[float] = []
        for distance in distances:
            if distance < TOLERANCE:
                raise ValueError("Lattice contains overlapping sites.")
            if not shells or distance - shells[-1] > TOLERANCE:
                shells.append(distance)
        shells = shells[:neighbours]

        for distance, i, j, point, translation in candidates:
            for order, shell in enumerate(shells, start=1):
                if abs(distance - shell) < TOLERANCE:
                    coordinates = np.array([self.coordinates[i], point])
                    bonds.append(Bond((i, j), order, coordinates, translation))
                    break

        return bonds

    def reciprocal_vectors(self) -> Array:
        r"""Get the reciprocal translation vectors.

        Returns:
            Reciprocal vectors :math:`b_j` with :math:`a_i \cdot b_j = 2 \pi \delta_{ij}`.
        """
        if self.nvec == 0:
            raise ValueError(f"Lattice {self.name} has no translation vectors.")
        return 2.0 * np.pi * np.linalg.pinv(self.vectors).T

    @property
    def name(self) -> str:
        """Get the name of the lattice."""
        return self._name

    @property
    def coordinates(self) -> Array:
        """Get the coordinates of the sites."""
        return self._coordinates

    @property
    def vectors(self) -> Array:
        """Get the translation vectors."""
        return self._vectors

    @property
    def nsite(self) -> int:
        """Get the number of sites."""
        return self.coordinates.shape[0]

    @property
    def ndim(self) -> int:
        """Get the spatial dimension."""
        return self.coordinates.shape[1]

    @property
    def nvec(self) -> int:
        """Get the number of translation vectors."""
        return self.vectors.shape[0]

    def __repr__(self) -> str:
        """Get a string representation of the lattice."""
        return f"{self.__class__.__name__}({self.name!r}, nsite={self.nsite}, nvec={self.nvec})"
