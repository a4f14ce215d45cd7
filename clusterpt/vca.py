r"""Cluster perturbation theory and the variational cluster approach.

The lattice is tiled by copies of a cluster, whose Green's function :math:`C(\omega)` is known
exactly. The terms of the lattice Hamiltonian that are not part of the reference Hamiltonian of
the cluster, most importantly the hopping between clusters, are treated as a perturbation
:math:`V(k)` in the momentum space of the superlattice, giving

.. math::
    G(k, \omega) = C(\omega) \left[I - V(k) C(\omega)\right]^{-1}.

The Green's function of the cluster basis is then periodised with the structure factor and
coarse-grained onto the unit cell of the original lattice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from clusterpt import util
from clusterpt.expressions.fock import BasisTable
from clusterpt.expressions.statistics import get_statistics
from clusterpt.expressions.terms import expand_quadratic
from clusterpt.lattice import is_subordinate
from clusterpt.representations.enums import Folding
from clusterpt.representations.spectral import cluster_greens_function

if TYPE_CHECKING:
    from typing import Any, Iterable, Sequence

    from clusterpt.expressions.statistics import BaseStatistics
    from clusterpt.expressions.terms import BaseTerm, QuadraticOperator
    from clusterpt.lattice import Lattice
    from clusterpt.representations.spectral import ClusterSpectralData
    from clusterpt.solvers.cluster import ClusterSolver
    from clusterpt.typing import Array


class Perioder:
    """Map from the labels of a unit cell to the equivalent labels of a cluster.

    Args:
        groups: For each unit cell label, the indices of the equivalent cluster labels.
        size: Number of cluster labels. If given, every cluster index must appear in exactly one
            group.
    """

    def __init__(self, groups: Sequence[Sequence[int]], size: int | None = None):
        """Initialise the object.

        Args:
            groups: For each unit cell label, the indices of the equivalent cluster labels.
            size: Number of cluster labels.
        """
        self._groups = tuple(tuple(int(index) for index in group) for group in groups)
        self._size = size

        # Check the input
        empty = [i for i, group in enumerate(self.groups) if not group]
        if empty:
            raise ValueError(f"Unit cell labels {empty} have no equivalent cluster labels.")
        if size is not None:
            counts = np.zeros((size,), dtype=np.int64)
            for group in self.groups:
                if any(not 0 <= index < size for index in group):
                    raise ValueError(f"Cluster indices must be between 0 and {size - 1}.")
                np.add.at(counts, list(group), 1)
            invalid = np.nonzero(counts != 1)[0]
            if invalid.size:
                raise ValueError(
                    f"Cluster indices {invalid.tolist()} do not belong to exactly one unit cell "
                    "label."
                )

    @classmethod
    def from_lattices(
        cls,
        statistics: BaseStatistics | str,
        cluster: Lattice,
        unitcell: Lattice,
        norb: int = 1,
    ) -> Perioder:
        """Build the map between a cluster and a unit cell.

        A cluster label is equivalent to a unit cell label if their spin and orbital indices
        agree and the displacement between their sites is a translation of the unit cell.

        Args:
            statistics: Particle statistics.
            cluster: Cluster lattice.
            unitcell: Unit cell lattice.
            norb: Number of orbitals per site.

        Returns:
            The map.
        """
        if unitcell.nvec == 0:
            raise ValueError(f"Unit cell {unitcell.name} has no translation vectors.")
        if unitcell.ndim != cluster.ndim:
            raise ValueError(
                f"Unit cell of dimension {unitcell.ndim} is incompatible with a cluster of "
                f"dimension {cluster.ndim}."
            )
        statistics = get_statistics(statistics)
        cluster_table = BasisTable.from_lattice(cluster, nspin=statistics.nspin, norb=norb)
        cell_table = BasisTable.from_lattice(unitcell, nspin=statistics.nspin, norb=norb)

        groups: list[list[int]] = [[] for _ in range(len(cell_table))]
        for label in cluster_table:
            for cell_label in cell_table:
                if label.spin != cell_label.spin or label.orbital != cell_label.orbital:
                    continue
                displacement = (
                    cluster.coordinates[label.site] - unitcell.coordinates[cell_label.site]
                )
                if is_subordinate(displacement, unitcell.vectors):
                    groups[cell_table[cell_label]].append(cluster_table[label])

        return cls(groups, size=len(cluster_table))

    @property
    def groups(self) -> tuple[tuple[int, ...], ...]:
        """Get the groups of cluster indices for each unit cell label."""
        return self._groups

    @property
    def size(self) -> int:
        """Get the number of cluster labels."""
        if self._size is None:
            return max(max(group) for group in self.groups) + 1
        return self._size

    @property
    def ncell(self) -> int:
        """Get the number of unit cell labels."""
        return len(self.groups)

    @property
    def projector(self) -> Array:
        """Get the matrix mapping cluster labels onto unit cell labels."""
        projector = np.zeros((self.ncell, self.size))
        for a, group in enumerate(self.groups):
            projector[a, list(group)] = 1.0
        return projector

    def average(self, matrix: Array) -> Array:
        r"""Coarse-grain a matrix of the cluster labels onto the unit cell labels.

        .. math::
            M_{ab} = \frac{1}{|a|} \sum_{p \in a, q \in b} M_{pq}

        Args:
            matrix: Matrix indexed by the cluster labels.

        Returns:
            Matrix indexed by the unit cell labels.
        """
        projector = self.projector
        sizes = np.array([len(group) for group in self.groups], dtype=np.float64)
        return util.einsum("ap,pq,bq->ab", projector, matrix, projector) / sizes[:, None]

    def __repr__(self) -> str:
        """Get a string representation of the map."""
        return f"{self.__class__.__name__}({self.groups})"


def quadratic_term_difference(
    original: Iterable[QuadraticOperator],
    reference: Iterable[QuadraticOperator],
    table: BasisTable,
    k: Array,
) -> Array:
    r"""Get the difference between the quadratic terms of the lattice and reference Hamiltonians.

    Each operator :math:`v c_a^\dagger c_b` with displacement :math:`\Delta r` contributes
    :math:`v f(k)` to the element :math:`(a, b)`, with :math:`f(k) = 1` for a vanishing
    displacement and :math:`f(k) = 2 e^{i k \cdot \Delta r}` otherwise. Operators of the
    reference Hamiltonian contribute with the opposite sign.

    Args:
        original: Quadratic operators of the lattice Hamiltonian.
        reference: Quadratic operators of the reference Hamiltonian.
        table: Basis table of the cluster.
        k: Momentum.

    Returns:
        The matrix :math:`V(k)`, indexed by the basis table.
    """
    k = np.atleast_1d(np.asarray(k, dtype=np.float64))
    matrix = np.zeros((len(table), len(table)), dtype=np.complex128)
    for sign, operators in [(1.0, original), (-1.0, reference)]:
        for operator in operators:
            displacement = np.asarray(operator.displacement, dtype=np.float64)
            if np.allclose(displacement, 0.0):
                phase = 1.0
            else:
                phase = 2.0 * np.exp(1.0j * np.dot(k, displacement))
            matrix[operator.create, operator.annihilate] += sign * operator.value * phase
    return matrix


def structure_factor(coordinates: Array, k: Array) -> Array:
    r"""Get the structure factor :math:`S_{pq} = e^{-i k \cdot (r_p - r_q)}`.

    Args:
        coordinates: Position of each label, with shape `(nlabel, ndim)`.
        k: Momentum.

    Returns:
        The structure factor.
    """
    k = np.atleast_1d(np.asarray(k, dtype=np.float64))
    phases = np.asarray(coordinates, dtype=np.float64) @ k
    return np.exp(-1.0j * (phases[:, None] - phases[None, :]))


class VCA:
    """Cluster perturbation theory for a lattice Hamiltonian with a cluster reference.

    The intracell part of the reference terms defines the cluster Hamiltonian, whose spectral
    data must be given. All quadratic terms of the lattice and reference Hamiltonians are
    expanded once, and the map from the cluster onto the unit cell is built once.

    Args:
        data: Spectral data of the cluster, computed with the reference terms.
        cluster: Cluster lattice, whose translation vectors define the superlattice.
        unitcell: Unit cell of the lattice.
        terms: Terms of the lattice Hamiltonian.
        reference_terms: Terms of the reference Hamiltonian.
    """

    def __init__(
        self,
        data: ClusterSpectralData,
        cluster: Lattice,
        unitcell: Lattice,
        terms: Sequence[BaseTerm],
        reference_terms: Sequence[BaseTerm],
        norb: int = 1,
        neighbours: int | None = None,
        folding: Folding | str = Folding.MATRIX,
    ):
        """Initialise the object.

        Args:
            data: Spectral data of the cluster, computed with the reference terms.
            cluster: Cluster lattice, whose translation vectors define the superlattice.
            unitcell: Unit cell of the lattice.
            terms: Terms of the lattice Hamiltonian.
            reference_terms: Terms of the reference Hamiltonian.
            norb: Number of orbitals per site.
            neighbours: Maximum neighbour order of the bonds. If `None`, the largest order of any
                term is used.
            folding: Folding of the structure factor into the Green's function. The default
                `"matrix"` takes the matrix product :math:`S G`, and `"elementwise"` the product
                :math:`S_{pq} G_{pq}` of the standard periodisation.
        """
        self._data = data
        self._cluster = cluster
        self._unitcell = unitcell
        self._terms = tuple(terms)
        self._reference_terms = tuple(reference_terms)
        self._folding = Folding(folding)

        # Check the input
        table = BasisTable.from_lattice(cluster, nspin=data.statistics.nspin, norb=norb)
        if table != data.table:
            raise ValueError(
                f"Spectral data with {len(data.table)} labels is incompatible with cluster "
                f"{cluster.name} of {len(table)} labels."
            )

        # Expand the quadratic terms
        if neighbours is None:
            neighbours = max(term.neighbour for term in self._terms + self._reference_terms)
        bonds = cluster.bonds(neighbours)
        self._operators = expand_quadratic(self._terms, bonds, table)
        self._reference_operators = expand_quadratic(
            self._reference_terms, [bond for bond in bonds if bond.is_intracell], table
        )

        # Build the map onto the unit cell
        self._perioder = Perioder.from_lattices(data.statistics, cluster, unitcell, norb=norb)

    @classmethod
    def from_solver(
        cls,
        solver: ClusterSolver,
        unitcell: Lattice,
        terms: Sequence[BaseTerm],
        **kwargs: Any,
    ) -> VCA:
        """Create the object from a cluster solver, running it if required.

        Args:
            solver: Cluster solver, whose terms are the reference terms.
            unitcell: Unit cell of the lattice.
            terms: Terms of the lattice Hamiltonian.
            kwargs: Additional keyword arguments.

        Returns:
            The object.
        """
        data = solver.result if solver.result is not None else solver.kernel()
        return cls(
            data,
            solver.cluster,
            unitcell,
            terms,
            solver.terms,
            norb=solver.norb,
            **kwargs,
        )

    @property
    def coordinates(self) -> Array:
        """Get the position of each label of the cluster."""
        return self.cluster.coordinates[self.table.sites]

    def quadratic_difference(self, k: Array) -> Array:
        """Get the difference between the quadratic terms of the lattice and reference.

        Args:
            k: Momentum.

        Returns:
            The matrix :math:`V(k)`.
        """
        return quadratic_term_difference(
            self._operators, self._reference_operators, self.table, k
        )

    def structure_factor(self, k: Array) -> Array:
        """Get the structure factor of the cluster.

        Args:
            k: Momentum.

        Returns:
            The structure factor.
        """
        return structure_factor(self.coordinates, k)

    def cluster_greens_function(
        self, omega: float, chempot: float = 0.0, eta: float = 0.05
    ) -> Array:
        """Get the Green's function of the cluster.

        Args:
            omega: Frequency.
            chempot: Chemical potential.
            eta: Broadening factor.

        Returns:
            The Green's function of the cluster.
        """
        return cluster_greens_function(self.data, omega, chempot=chempot, eta=eta)

    def periodised_greens_function(
        self, k: Array, omega: float, chempot: float = 0.0, eta: float = 0.05
    ) -> Array:
        """Get the Green's function in the cluster basis, folded with the structure factor.

        Args:
            k: Momentum.
            omega: Frequency.
            chempot: Chemical potential.
            eta: Broadening factor.

        Returns:
            The folded Green's function, indexed by the cluster labels.
        """
        coupling = self.quadratic_difference(k)
        cluster = self.cluster_greens_function(omega, chempot=chempot, eta=eta)

        # Solve the Dyson equation G = C (I - V C)^-1
        identity = np.eye(cluster.shape[0])
        greens_function = np.linalg.solve((identity - coupling @ cluster).T, cluster.T).T

        # Fold in the structure factor
        factor = self.structure_factor(k)
        periodised: Array
        if self.folding == Folding.ELEMENTWISE:
            periodised = factor * greens_function
        elif self.folding == Folding.MATRIX:
            periodised = factor @ greens_function
        else:
            self.folding.raise_invalid_representation()

        return periodised

    def greens_function(
        self, k: Array, omega: float, chempot: float = 0.0, eta: float = 0.05
    ) -> Array:
        """Get the lattice Green's function, coarse-grained onto the unit cell.

        Args:
            k: Momentum.
            omega: Frequency.
            chempot: Chemical potential.
            eta: Broadening factor.

        Returns:
            The lattice Green's function, indexed by the unit cell labels.
        """
        periodised = self.periodised_greens_function(k, omega, chempot=chempot, eta=eta)
        return self.perioder.average(periodised)

    @property
    def data(self) -> ClusterSpectralData:
        """Get the spectral data of the cluster."""
        return self._data

    @property
    def table(self) -> BasisTable:
        """Get the basis table of the cluster."""
        return self.data.table

    @property
    def cluster(self) -> Lattice:
        """Get the cluster lattice."""
        return self._cluster

    @property
    def unitcell(self) -> Lattice:
        """Get the unit cell lattice."""
        return self._unitcell

    @property
    def perioder(self) -> Perioder:
        """Get the map from the unit cell onto the cluster."""
        return self._perioder

    @property
    def folding(self) -> Folding:
        """Get the folding of the structure factor."""
        return self._folding

    @property
    def ndim(self) -> int:
        """Get the spatial dimension."""
        return self.cluster.ndim

    @property
    def operators(self) -> list[QuadraticOperator]:
        """Get the quadratic operators of the lattice Hamiltonian."""
        return self._operators

    @property
    def reference_operators(self) -> list[QuadraticOperator]:
        """Get the quadratic operators of the reference Hamiltonian."""
        return self._reference_operators


def lattice_greens_function(
    vca: VCA, k: Array, omega: float, chempot: float = 0.0, eta: float = 0.05
) -> Array:
    """Get the lattice Green's function at a momentum and frequency.

    Args:
        vca: Cluster perturbation theory context.
        k: Momentum.
        omega: Frequency.
        chempot: Chemical potential.
        eta: Broadening factor.

    Returns:
        The lattice Green's function, indexed by the unit cell labels.
    """
    return vca.greens_function(k, omega, chempot=chempot, eta=eta)
