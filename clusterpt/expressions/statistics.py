"""Particle statistics of the lattice models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np
import scipy.sparse

from clusterpt.expressions.fock import popcount

if TYPE_CHECKING:
    from clusterpt.expressions.fock import FockSector
    from clusterpt.typing import Array


class BaseStatistics(ABC):
    """Base class for particle statistics.

    The statistics determine the sign picked up when a mode is created or annihilated in an
    occupation string, the number of spin components, and the sign with which the particle
    removal branch enters the single-particle Green's function.
    """

    name: str
    nspin: int
    removal_sign: float

    @abstractmethod
    def sign(self, strings: Array, mode: int) -> Array:
        """Get the sign for creating or annihilating a mode.

        Args:
            strings: Occupation strings before the operation.
            mode: Mode index.

        Returns:
            Sign for each string.
        """
        pass

    def annihilation(self, sector: FockSector, mode: int) -> scipy.sparse.csr_matrix:
        """Get the matrix of an annihilation operator.

        Args:
            sector: Sector on which the operator acts.
            mode: Mode index.

        Returns:
            Sparse matrix mapping the sector to the sector with one particle fewer.
        """
        lower = sector.lower()
        strings = sector.strings
        cols = np.nonzero((strings >> mode) & 1)[0]
        rows = lower.index(strings[cols] ^ (1 << mode))
        data = self.sign(strings[cols], mode).astype(np.float64)
        return scipy.sparse.csr_matrix((data, (rows, cols)), shape=(lower.size, sector.size))

    def creation(self, sector: FockSector, mode: int) -> scipy.sparse.csr_matrix:
        """Get the matrix of a creation operator.

        Args:
            sector: Sector on which the operator acts.
            mode: Mode index.

        Returns:
            Sparse matrix mapping the sector to the sector with one particle more.
        """
        return self.annihilation(sector.upper(), mode).T.tocsr()

    def quadratic(
        self, sector: FockSector, create: int, annihilate: int
    ) -> tuple[Array, Array, Array]:
        """Get the matrix elements of a quadratic operator.

        Args:
            sector: Sector on which the operator acts.
            create: Mode index of the creation operator.
            annihilate: Mode index of the annihilation operator.

        Returns:
            Row indices, column indices and values of the nonzero elements.
        """
        strings = sector.strings
        cols = np.nonzero((strings >> annihilate) & 1)[0]
        sign = self.sign(strings[cols], annihilate)
        targets = strings[cols] ^ (1 << annihilate)
        if create != annihilate:
            mask = ((targets >> create) & 1) == 0
            cols, sign, targets = cols[mask], sign[mask], targets[mask]
        sign = sign * self.sign(targets, create)
        targets = targets | (1 << create)
        rows = sector.index(targets)
        return rows, cols, sign.astype(np.float64)

    def __repr__(self) -> str:
        """Get a string representation of the statistics."""
        return f"{self.__class__.__name__}()"


class Fermion(BaseStatistics):
    """Spin-half fermions, with Jordan--Wigner signs."""

    name = "fermion"
    nspin = 2
    removal_sign = 1.0

    def sign(self, strings: Array, mode: int) -> Array:
        """Get the sign for creating or annihilating a mode.

        The sign is :math:`(-1)^n`, where :math:`n` is the number of occupied modes with a lower
        index.

        Args:
            strings: Occupation strings before the operation.
            mode: Mode index.

        Returns:
            Sign for each string.
        """
        return 1 - 2 * (popcount(strings, mode) % 2)


class HardcoreBoson(BaseStatistics):
    """Hard-core bosons, without signs and with a single spin component."""

    name = "hardcore_boson"
    nspin = 1
    removal_sign = -1.0

    def sign(self, strings: Array, mode: int) -> Array:
        """Get the sign for creating or annihilating a mode."""
        return np.ones(np.shape(strings), dtype=np.int64)


STATISTICS: dict[str, type[BaseStatistics]] = {
    "fermion": Fermion,
    "hardcore_boson": HardcoreBoson,
}


def get_statistics(statistics: str | BaseStatistics) -> BaseStatistics:
    """Get the statistics from a name.

    Args:
        statistics: Name of the statistics, or the statistics themselves.

    Returns:
        Statistics.
    """
    if isinstance(statistics, BaseStatistics):
        return statistics
    if statistics not in STATISTICS:
        raise ValueError(
            f"Invalid statistics: {statistics}. Valid statistics are: {', '.join(STATISTICS)}"
        )
    return STATISTICS[statistics]()
