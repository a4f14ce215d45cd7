"""Spectral data of a cluster and its Green's function."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from clusterpt.expressions.statistics import get_statistics
from clusterpt.representations.enums import Ordering
from clusterpt.representations.lehmann import krylov_resolvent

if TYPE_CHECKING:
    from typing import Callable, Sequence

    from clusterpt.expressions.fock import BasisTable, FockSector
    from clusterpt.expressions.statistics import BaseStatistics
    from clusterpt.representations.krylov import KrylovResult
    from clusterpt.typing import Array, Operator


class ClusterSpectralData:
    r"""Krylov representation of the single-particle excitations of a cluster ground state.

    For every label of the basis table, the particle removal state :math:`c_i |\Psi_0\rangle`
    and the particle addition state :math:`c_i^\dagger |\Psi_0\rangle` are represented by
    their Krylov subspaces with respect to the Hamiltonian of the sector with one particle fewer
    or more, respectively.

    Args:
        energy: Ground state energy.
        removal: Krylov results of the particle removal states, in table order.
        addition: Krylov results of the particle addition states, in table order.
        statistics: Particle statistics.
        table: Basis table of the cluster.
    """

    def __init__(
        self,
        energy: float,
        removal: Sequence[KrylovResult],
        addition: Sequence[KrylovResult],
        statistics: BaseStatistics | str,
        table: BasisTable,
    ):
        """Initialise the object.

        Args:
            energy: Ground state energy.
            removal: Krylov results of the particle removal states.
            addition: Krylov results of the particle addition states.
            statistics: Particle statistics.
            table: Basis table of the cluster.
        """
        self._energy = float(energy)
        self._removal = tuple(removal)
        self._addition = tuple(addition)
        self._statistics = get_statistics(statistics)
        self._table = table

        # Check the input
        if len(self.removal) != len(table) or len(self.addition) != len(table):
            raise ValueError(
                f"Expected {len(table)} removal and addition results, got {len(self.removal)} and "
                f"{len(self.addition)}."
            )
        if table.nspin != self.statistics.nspin:
            raise ValueError(
                f"Basis table with {table.nspin} spin components is incompatible with "
                f"{self.statistics.name} statistics."
            )

    @classmethod
    def from_ground_state(
        cls,
        statistics: BaseStatistics | str,
        energy: float,
        vector: Array,
        sector: FockSector,
        removal_hamiltonian: Operator,
        addition_hamiltonian: Operator,
        table: BasisTable,
        max_cycle: int = 200,
        cross_projection: bool = True,
        callback: Callable[[int], None] | None = None,
    ) -> ClusterSpectralData:
        """Build the spectral data from a ground state.

        Args:
            statistics: Particle statistics.
            energy: Ground state energy.
            vector: Ground state vector.
            sector: Sector of the ground state.
            removal_hamiltonian: Hamiltonian of the sector with one particle fewer.
            addition_hamiltonian: Hamiltonian of the sector with one particle more.
            table: Basis table of the cluster.
            max_cycle: Maximum dimension of each Krylov subspace.
            cross_projection: Whether to store the projections of all starting states of a sector
                onto each Krylov basis, required for exact off-diagonal elements.
            callback: Function called with the number of completed labels after each label.

        Returns:
            Spectral data.
        """
        from clusterpt.solvers.lanczos import build_krylov  # noqa: PLC0415

        statistics = get_statistics(statistics)
        vector = np.asarray(vector)

        # Check the input
        if vector.shape != (sector.size,):
            raise ValueError(
                f"Ground state vector of shape {vector.shape} is incompatible with the sector "
                f"dimension {sector.size}."
            )
        if sector.nmodes != len(table):
            raise ValueError(
                f"Sector with {sector.nmodes} modes is incompatible with a basis table of "
                f"{len(table)} labels."
            )
        for name, matrix, other in [
            ("removal", removal_hamiltonian, sector.lower()),
            ("addition", addition_hamiltonian, sector.upper()),
        ]:
            if tuple(matrix.shape) != (other.size, other.size):
                raise ValueError(
                    f"{name.capitalize()} Hamiltonian of shape {tuple(matrix.shape)} is "
                    f"incompatible with the sector dimension {other.size}."
                )

        # Build the starting states
        removal_states = np.array(
            [statistics.annihilation(sector, index) @ vector for index in range(len(table))]
        ).reshape(len(table), sector.lower().size)
        addition_states = np.array(
            [statistics.creation(sector, index) @ vector for index in range(len(table))]
        ).reshape(len(table), sector.upper().size)

        # Build the Krylov subspaces
        removal = []
        addition = []
        for index in range(len(table)):
            removal.append(
                build_krylov(
                    removal_hamiltonian,
                    removal_states[index],
                    max_cycle=max_cycle,
                    vectors=removal_states if cross_projection else None,
                )
            )
            addition.append(
                build_krylov(
                    addition_hamiltonian,
                    addition_states[index],
                    max_cycle=max_cycle,
                    vectors=addition_states if cross_projection else None,
                )
            )
            if callback is not None:
                callback(index + 1)

        return cls(energy, removal, addition, statistics, table)

    @property
    def energy(self) -> float:
        """Get the ground state energy."""
        return self._energy

    @property
    def removal(self) -> tuple[KrylovResult, ...]:
        """Get the Krylov results of the particle removal states."""
        return self._removal

    @property
    def addition(self) -> tuple[KrylovResult, ...]:
        """Get the Krylov results of the particle addition states."""
        return self._addition

    @property
    def statistics(self) -> BaseStatistics:
        """Get the particle statistics."""
        return self._statistics

    @property
    def table(self) -> BasisTable:
        """Get the basis table."""
        return self._table

    @property
    def nphys(self) -> int:
        """Get the number of single-particle labels."""
        return len(self.table)


def _branch_matrix(
    energy: float,
    ordering: Ordering,
    results: Sequence[KrylovResult],
    omega: float,
    chempot: float,
    eta: float,
) -> Array:
    """Get the matrix of Lehmann elements of one branch, with the left label as the row."""
    matrix = np.zeros((len(results), len(results)), dtype=np.complex128)
    for right, result in enumerate(results):
        if result.empty:
            continue
        resolvent = krylov_resolvent(energy, ordering, result, omega, chempot=chempot, eta=eta)
        if result.overlaps is not None:
            matrix[:, right] = result.overlaps.conj().T @ resolvent
        else:
            for left, other in enumerate(results):
                size = min(other.size, result.size)
                matrix[left, right] = np.vdot(other.projection[:size], resolvent[:size])
    return matrix


def cluster_greens_function(
    data: ClusterSpectralData,
    omega: float,
    chempot: float = 0.0,
    eta: float = 0.05,
) -> Array:
    r"""Get the Green's function of the cluster at a frequency.

    The element :math:`(i, j)` is

    .. math::
        G_{ij}(\omega) = \langle \Psi_0 | c_i [z - (H - E_0)]^{-1} c_j^\dagger | \Psi_0 \rangle
        + s \langle \Psi_0 | c_j^\dagger [z + (H - E_0)]^{-1} c_i | \Psi_0 \rangle,

    with :math:`z = \omega + i \eta + \mu` and :math:`s` the removal sign of the statistics.

    Args:
        data: Spectral data of the cluster.
        omega: Frequency.
        chempot: Chemical potential.
        eta: Broadening factor.

    Returns:
        The Green's function matrix, indexed by the basis table.
    """
    addition = _branch_matrix(data.energy, Ordering.RETARDED, data.addition, omega, chempot, eta)
    removal = _branch_matrix(data.energy, Ordering.ADVANCED, data.removal, omega, chempot, eta)
    return addition + data.statistics.removal_sign * removal.T

