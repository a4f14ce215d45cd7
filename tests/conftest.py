"""Configuration for :mod:`pytest`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

from clusterpt import (
    ClusterSolver,
    Hopping,
    Hubbard,
    Lattice,
    Onsite,
    build_hamiltonian,
)

if TYPE_CHECKING:
    from typing import Callable

    from clusterpt.expressions.terms import BaseTerm
    from clusterpt.typing import Array

    SolverGetter = Callable[[str], ClusterSolver]


UNITCELL_CACHE = {
    "chain": Lattice("chain", [[0.0]], [[1.0]]),
    "square": Lattice("square", [[0.0, 0.0]], [[1.0, 0.0], [0.0, 1.0]]),
}

CLUSTER_CACHE = {
    "chain2": Lattice.supercell(UNITCELL_CACHE["chain"], (2,)),
    "chain4": Lattice.supercell(UNITCELL_CACHE["chain"], (4,)),
    "square22": Lattice.supercell(UNITCELL_CACHE["square"], (2, 2)),
}


class Model:
    """Lattice model with a cluster reference, for tests."""

    def __init__(
        self,
        unitcell: str,
        cluster: str,
        terms: list[BaseTerm],
        nparticles: int,
        statistics: str = "fermion",
    ):
        self.unitcell = UNITCELL_CACHE[unitcell]
        self.cluster = CLUSTER_CACHE[cluster]
        self.terms = terms
        self.nparticles = nparticles
        self.statistics = statistics


MODEL_CACHE = {
    "chain2-free": Model("chain", "chain2", [Hopping("t", -1.0)], 2),
    "chain2-hubbard": Model("chain", "chain2", [Hopping("t", -1.0), Hubbard("U", 4.0)], 2),
    "chain4-hubbard": Model(
        "chain", "chain4", [Hopping("t", -1.0), Onsite("mu", -0.5), Hubbard("U", 2.0)], 4
    ),
    "square22-hubbard": Model("square", "square22", [Hopping("t", -1.0), Hubbard("U", 8.0)], 4),
    "chain2-boson": Model("chain", "chain2", [Hopping("t", -1.0)], 1, "hardcore_boson"),
}


def pytest_generate_tests(metafunc):  # type: ignore
    if "model" in metafunc.fixturenames:
        metafunc.parametrize("model", MODEL_CACHE.keys())


class Helper:
    """Helper class for tests."""

    @staticmethod
    def are_equal_arrays(array1: Array, array2: Array, tol: float = 1e-8) -> bool:
        """Check if two arrays are equal to within a threshold."""
        print(
            f"Error in {object.__repr__(array1)} and {object.__repr__(array2)}: "
            f"{np.max(np.abs(array1 - array2))}"
        )
        return np.allclose(array1, array2, atol=tol)

    @staticmethod
    def exact_cluster_greens_function(
        solver: ClusterSolver, omega: float, chempot: float = 0.0, eta: float = 0.05
    ) -> Array:
        """Get the Green's function of a cluster by dense diagonalisation."""
        table = solver.table
        bonds = solver.bonds
        lower, sector, upper = solver.sectors
        hamiltonians = [
            build_hamiltonian(solver.statistics, solver.terms, bonds, table, other).toarray()
            for other in (lower, sector, upper)
        ]
        eigvals, eigvecs = np.linalg.eigh(hamiltonians[1])
        energy, vector = eigvals[0], eigvecs[:, 0]
        z = omega + 1.0j * eta + chempot

        removal = np.array(
            [solver.statistics.annihilation(sector, i) @ vector for i in range(len(table))]
        ).reshape(len(table), lower.size)
        addition = np.array(
            [solver.statistics.creation(sector, i) @ vector for i in range(len(table))]
        ).reshape(len(table), upper.size)

        greens_function = np.zeros((len(table), len(table)), dtype=np.complex128)
        if upper.size:
            resolvent = np.linalg.inv((z + energy) * np.eye(upper.size) - hamiltonians[2])
            greens_function += addition.conj() @ resolvent @ addition.T
        if lower.size:
            resolvent = np.linalg.inv((z - energy) * np.eye(lower.size) + hamiltonians[0])
            greens_function += (
                solver.statistics.removal_sign * (removal.conj() @ resolvent @ removal.T).T
            )
        return greens_function

    @staticmethod
    def band_greens_function(
        dispersion: Array, omega: float, chempot: float = 0.0, eta: float = 0.05
    ) -> Array:
        """Get the Green's function of a single non-interacting band."""
        return 1.0 / (omega + 1.0j * eta + chempot - dispersion)


@pytest.fixture(scope="session")
def helper() -> Helper:
    """Fixture for the :class:`Helper` class."""
    return Helper()


_SOLVER_CACHE: dict[str, ClusterSolver] = {}


def get_solver(name: str) -> ClusterSolver:
    """Get the solved cluster solver for a given model."""
    if name not in _SOLVER_CACHE:
        model = MODEL_CACHE[name]
        solver = ClusterSolver(
            model.cluster, model.terms, model.nparticles, statistics=model.statistics
        )
        solver.kernel()
        _SOLVER_CACHE[name] = solver

    solver = _SOLVER_CACHE[name]
    assert solver.result is not None

    return solver


@pytest.fixture(scope="session")
def solver_cache() -> SolverGetter:
    """Fixture for a getter function for cached :class:`ClusterSolver` classes."""
    return get_solver
