"""Exact solution of a cluster."""

from __future__ import annotations

from typing import TYPE_CHECKING

from clusterpt import console, printing
from clusterpt.expressions.fock import BasisTable, FockSector
from clusterpt.expressions.hamiltonian import build_hamiltonian
from clusterpt.expressions.statistics import get_statistics
from clusterpt.representations.spectral import ClusterSpectralData
from clusterpt.solvers.ground_state import GroundState
from clusterpt.solvers.solver import BaseSolver

if TYPE_CHECKING:
    from typing import Any, Sequence

    from clusterpt.expressions.statistics import BaseStatistics
    from clusterpt.expressions.terms import BaseTerm
    from clusterpt.lattice import Bond, Lattice


class ClusterSolver(BaseSolver):
    """Exact diagonalisation of a cluster and Krylov representation of its excitations.

    The Hamiltonian of the cluster is built from the terms acting on its intracell bonds in the
    sectors with :math:`N - 1`, :math:`N` and :math:`N + 1` particles. The ground state is found
    in the :math:`N` particle sector, and the particle removal and addition states of every
    single-particle label are represented by their Krylov subspaces.

    Args:
        cluster: Cluster lattice.
        terms: Terms of the cluster Hamiltonian.
        nparticles: Number of particles in the ground state.
        statistics: Particle statistics.
    """

    norb: int = 1
    max_cycle: int = 200
    cross_projection: bool = True
    method: str = "davidson"
    conv_tol: float = 1e-10
    max_cycle_ground_state: int = 300
    _options: set[str] = {
        "norb",
        "max_cycle",
        "cross_projection",
        "method",
        "conv_tol",
        "max_cycle_ground_state",
    }

    result: ClusterSpectralData | None = None

    def __init__(  # noqa: D417
        self,
        cluster: Lattice,
        terms: Sequence[BaseTerm],
        nparticles: int,
        statistics: BaseStatistics | str = "fermion",
        **kwargs: Any,
    ):
        """Initialise the solver.

        Args:
            cluster: Cluster lattice.
            terms: Terms of the cluster Hamiltonian.
            nparticles: Number of particles in the ground state.
            statistics: Particle statistics, either ``"fermion"`` or ``"hardcore_boson"``.
            norb: Number of orbitals per site.
            max_cycle: Maximum dimension of each Krylov subspace.
            cross_projection: Whether to project all starting states of a sector onto each
                Krylov basis, required for exact off-diagonal elements.
            method: Method for the ground state, see :class:`GroundState`.
            conv_tol: Convergence tolerance for the ground state energy.
            max_cycle_ground_state: Maximum number of iterations for the ground state.
        """
        self._cluster = cluster
        self._terms = tuple(terms)
        self._nparticles = nparticles
        self._statistics = get_statistics(statistics)
        self.set_options(**kwargs)

    def __post_init__(self) -> None:
        """Hook called after :meth:`__init__`."""
        # Check the input
        if not self.terms:
            raise ValueError("At least one term is required.")
        if not 0 <= self.nparticles <= self.nmodes:
            raise ValueError(
                f"Number of particles must be between 0 and {self.nmodes}, got {self.nparticles}."
            )

        # Print the input information
        console.print(f"Cluster: [input]{self.cluster.name}[/input]")
        console.print(f"Statistics: [input]{self.statistics.name}[/input]")
        rows = [
            (name, sector.nparticles, sector.size)
            for name, sector in zip(("Removal", "Ground", "Addition"), self.sectors)
        ]
        printing.print_table(("Sector", "Particles", "Dimension"), rows)

    def __post_kernel__(self) -> None:
        """Hook called after :meth:`kernel`."""
        assert self.result is not None
        energy = printing.format_float(self.result.energy)
        console.print(f"Ground state energy: [output]{energy}[/output]")
        sizes = [result.size for result in self.result.removal + self.result.addition]
        console.print(
            f"Krylov subspaces of dimension [output]{min(sizes)}[/output] to "
            f"[output]{max(sizes)}[/output]."
        )

    @property
    def table(self) -> BasisTable:
        """Get the basis table of the cluster."""
        return BasisTable.from_lattice(self.cluster, nspin=self.statistics.nspin, norb=self.norb)

    @property
    def bonds(self) -> list[Bond]:
        """Get the intracell bonds of the cluster."""
        neighbours = max(term.neighbour for term in self.terms)
        return [bond for bond in self.cluster.bonds(neighbours) if bond.is_intracell]

    @property
    def sectors(self) -> tuple[FockSector, FockSector, FockSector]:
        """Get the removal, ground state and addition sectors."""
        sector = FockSector(self.nmodes, self.nparticles)
        return sector.lower(), sector, sector.upper()

    def kernel(self) -> ClusterSpectralData:
        """Run the solver.

        Returns:
            Spectral data of the cluster.
        """
        table = self.table
        bonds = self.bonds
        lower, sector, upper = self.sectors

        # Build the Hamiltonians
        hamiltonians = [
            build_hamiltonian(self.statistics, self.terms, bonds, table, other)
            for other in (lower, sector, upper)
        ]

        # Find the ground state
        ground_state = GroundState(
            hamiltonians[1],
            method=self.method,
            conv_tol=self.conv_tol,
            max_cycle=self.max_cycle_ground_state,
        )
        energy, vector = ground_state.kernel()

        # Build the Krylov subspaces
        with printing.ProgressPrinter(len(table), description="Label") as progress:
            result = ClusterSpectralData.from_ground_state(
                self.statistics,
                energy,
                vector,
                sector,
                hamiltonians[0],
                hamiltonians[2],
                table,
                max_cycle=self.max_cycle,
                cross_projection=self.cross_projection,
                callback=progress.update,
            )

        # Store the results
        self.result = result

        return result

    @property
    def cluster(self) -> Lattice:
        """Get the cluster lattice."""
        return self._cluster

    @property
    def terms(self) -> tuple[BaseTerm, ...]:
        """Get the terms of the cluster Hamiltonian."""
        return self._terms

    @property
    def nparticles(self) -> int:
        """Get the number of particles in the ground state."""
        return self._nparticles

    @property
    def statistics(self) -> BaseStatistics:
        """Get the particle statistics."""
        return self._statistics

    @property
    def nmodes(self) -> int:
        """Get the number of single-particle modes."""
        return self.cluster.nsite * self.norb * self.statistics.nspin
