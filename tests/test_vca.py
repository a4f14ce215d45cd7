"""Tests for :module:`~clusterpt.vca`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

from clusterpt import (
    VCA,
    BasisTable,
    ClusterSolver,
    Hopping,
    Hubbard,
    Lattice,
    Perioder,
    Weiss,
    lattice_greens_function,
    quadratic_term_difference,
    structure_factor,
)
from clusterpt.expressions.terms import QuadraticOperator
from clusterpt.representations import Folding

if TYPE_CHECKING:
    from clusterpt.lattice import Bond

    from .conftest import Helper, SolverGetter


CHAIN = Lattice("chain", [[0.0]], [[1.0]])
SQUARE = Lattice("square", [[0.0, 0.0]], [[1.0, 0.0], [0.0, 1.0]])


def _staggered(bond: Bond) -> float:
    """Get the staggered amplitude on a one-point bond."""
    return 1.0 if bond.sites[0] % 2 == 0 else -1.0


def test_perioder_from_lattices() -> None:
    """Test the map from a cluster onto its unit cell."""
    cluster = Lattice.supercell(CHAIN, (4,))
    perioder = Perioder.from_lattices("fermion", cluster, CHAIN)

    assert perioder.groups == ((0, 1, 2, 3), (4, 5, 6, 7))
    assert perioder.size == 8
    assert perioder.ncell == 2
    assert np.allclose(perioder.projector.sum(axis=0), 1.0)

    perioder = Perioder.from_lattices("hardcore_boson", cluster, CHAIN)
    assert perioder.groups == ((0, 1, 2, 3),)

    dimerised = Lattice("dimerised", [[0.0], [0.5]], [[1.0]])
    perioder = Perioder.from_lattices("fermion", Lattice.supercell(dimerised, (2,)), dimerised)
    assert perioder.groups == ((0, 2), (1, 3), (4, 6), (5, 7))


def test_perioder_average(helper: Helper) -> None:
    """Test the coarse-graining of a matrix onto the unit cell."""
    perioder = Perioder([[0, 1], [2, 3]], size=4)
    assert helper.are_equal_arrays(perioder.average(np.eye(4)), np.eye(2))

    matrix = np.arange(16.0).reshape(4, 4)
    expected = np.array(
        [
            [matrix[:2, :2].sum(), matrix[:2, 2:].sum()],
            [matrix[2:, :2].sum(), matrix[2:, 2:].sum()],
        ]
    )
    assert helper.are_equal_arrays(perioder.average(matrix), expected / 2.0)


def test_perioder_invalid() -> None:
    """Test the errors for invalid maps."""
    with pytest.raises(ValueError):
        Perioder([[0], []])
    with pytest.raises(ValueError):
        Perioder([[0], [0]], size=2)
    with pytest.raises(ValueError):
        Perioder([[0, 5]], size=2)
    with pytest.raises(ValueError):
        Perioder.from_lattices("fermion", Lattice("dimer", [[0.0], [1.0]]), Lattice("a", [[0.0]]))
    with pytest.raises(ValueError):
        Perioder.from_lattices("fermion", Lattice.supercell(CHAIN, (2,)), SQUARE)


def test_structure_factor() -> None:
    """Test the structure factor."""
    coordinates = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    assert np.allclose(structure_factor(coordinates, np.zeros(2)), 1.0)

    factor = structure_factor(coordinates, np.array([0.3, -1.2]))
    assert np.allclose(np.abs(factor), 1.0)
    assert np.allclose(factor, factor.T.conj())
    assert np.isclose(factor[1, 0], np.exp(-0.3j))


def test_quadratic_term_difference() -> None:
    """Test the matrix of the perturbation between the lattice and reference."""
    table = BasisTable(2, nspin=1)
    displacement = np.array([-2.0])
    original = [
        QuadraticOperator(-1.0, 0, 1, np.zeros(1)),
        QuadraticOperator(-1.0, 1, 0, np.zeros(1)),
        QuadraticOperator(-0.5, 0, 1, displacement),
        QuadraticOperator(-0.5, 1, 0, -displacement),
    ]
    reference = original[:2] + [QuadraticOperator(0.2, 0, 0, np.zeros(1))]

    for k in [0.0, 0.4, np.pi]:
        matrix = quadratic_term_difference(original, reference, table, np.array([k]))
        expected = np.array([[-0.2, -np.exp(-2.0j * k)], [-np.exp(2.0j * k), 0.0]])
        assert np.allclose(matrix, expected)
        assert np.allclose(matrix, matrix.T.conj())

    assert np.allclose(quadratic_term_difference(original, original, table, np.zeros(1)), 0.0)


@pytest.mark.parametrize("shape, nparticles", [((1,), 0), ((2,), 2), ((4,), 4)])
def test_free_chain(helper: Helper, shape: tuple[int, ...], nparticles: int) -> None:
    """Test that the non-interacting chain recovers the exact band."""
    cluster = Lattice.supercell(CHAIN, shape)
    terms = [Hopping("t", -1.0)]
    solver = ClusterSolver(cluster, terms, nparticles)
    vca = VCA.from_solver(solver, CHAIN, terms, folding="elementwise")

    for k in [0.0, 0.3, 1.7, np.pi]:
        for omega in [-1.5, 0.2, 2.1]:
            greens_function = vca.greens_function(np.array([k]), omega, chempot=0.1, eta=0.05)
            band = helper.band_greens_function(-2.0 * np.cos(k), omega, chempot=0.1, eta=0.05)
            assert greens_function.shape == (2, 2)
            assert helper.are_equal_arrays(greens_function, band * np.eye(2))


def test_free_square(helper: Helper) -> None:
    """Test that the non-interacting square lattice recovers the exact band."""
    cluster = Lattice.supercell(SQUARE, (2, 2))
    terms = [Hopping("t", -1.0)]
    solver = ClusterSolver(cluster, terms, 2)
    vca = VCA.from_solver(solver, SQUARE, terms, folding="elementwise")

    for k in [np.array([0.0, 0.0]), np.array([0.4, 1.1]), np.array([np.pi, 0.5 * np.pi])]:
        greens_function = vca.greens_function(k, 0.7)
        band = helper.band_greens_function(-2.0 * np.sum(np.cos(k)), 0.7)
        assert helper.are_equal_arrays(greens_function, band * np.eye(2))


def test_free_chain_weiss_reference(helper: Helper) -> None:
    """Test that a Weiss field in the reference is removed by the perturbation."""
    cluster = Lattice.supercell(CHAIN, (2,))
    terms = [Hopping("t", -1.0)]
    weiss = Weiss("h", 0.3, _staggered)
    solver = ClusterSolver(cluster, terms + [weiss], 2)
    vca = VCA.from_solver(solver, CHAIN, terms, folding="elementwise")

    k = np.array([0.9])
    coupling = vca.quadratic_difference(k)
    assert np.allclose(np.diag(coupling), [-0.3, 0.3, 0.3, -0.3])
    band = helper.band_greens_function(-2.0 * np.cos(0.9), 0.5)
    assert helper.are_equal_arrays(vca.greens_function(k, 0.5), band * np.eye(2))


def test_boson_vacuum(helper: Helper) -> None:
    """Test that hard-core bosons in the vacuum recover the exact band."""
    cluster = Lattice.supercell(CHAIN, (2,))
    terms = [Hopping("t", -1.0)]
    solver = ClusterSolver(cluster, terms, 0, statistics="hardcore_boson")
    vca = VCA.from_solver(solver, CHAIN, terms, folding="elementwise")

    for k in [0.0, 1.0, 2.5]:
        greens_function = vca.greens_function(np.array([k]), -0.4)
        band = helper.band_greens_function(-2.0 * np.cos(k), -0.4)
        assert greens_function.shape == (1, 1)
        assert helper.are_equal_arrays(greens_function, np.array([[band]]))


def test_interacting(helper: Helper, solver_cache: SolverGetter) -> None:
    """Test the periodised Green's function of the interacting chain."""
    solver = solver_cache("chain2-hubbard")
    terms = [Hopping("t", -1.0), Hubbard("U", 4.0)]
    vca = VCA.from_solver(solver, CHAIN, terms, folding="elementwise")

    k = np.array([0.6])
    greens_function = lattice_greens_function(vca, k, 0.8, eta=0.1)
    assert helper.are_equal_arrays(greens_function, vca.greens_function(k, 0.8, eta=0.1))
    assert helper.are_equal_arrays(greens_function, np.diag(np.diag(greens_function)))
    assert np.all(np.diag(greens_function).imag < 0.0)

    # Without inter-cluster terms the lattice Green's function is the averaged cluster one
    vca_local = VCA(
        solver.result,
        solver.cluster,
        CHAIN,
        [Hubbard("U", 4.0)],
        [Hubbard("U", 4.0)],
        folding="elementwise",
    )
    assert np.allclose(vca_local.quadratic_difference(k), 0.0)
    periodised = vca_local.periodised_greens_function(k, 0.8, eta=0.1)
    cluster = vca_local.cluster_greens_function(0.8, eta=0.1)
    assert helper.are_equal_arrays(periodised, vca_local.structure_factor(k) * cluster)


@pytest.mark.parametrize("k", [0.0, 0.7, 2.3])
def test_matrix_folding(helper: Helper, solver_cache: SolverGetter, k: float) -> None:
    """Test that the structure factor multiplies the Green's function as a matrix by default."""
    solver = solver_cache("chain2-hubbard")
    vca = VCA.from_solver(solver, CHAIN, [Hopping("t", -1.0), Hubbard("U", 4.0)])
    assert vca.folding == Folding.MATRIX

    momentum = np.array([k])
    coupling = vca.quadratic_difference(momentum)
    cluster = vca.cluster_greens_function(0.4)
    factor = structure_factor(vca.coordinates, momentum)
    expected = factor @ cluster @ np.linalg.inv(np.eye(4) - coupling @ cluster)

    assert helper.are_equal_arrays(vca.periodised_greens_function(momentum, 0.4), expected)
    greens_function = vca.greens_function(momentum, 0.4)
    assert greens_function.shape == (2, 2)
    assert helper.are_equal_arrays(greens_function, vca.perioder.average(expected))
    assert helper.are_equal_arrays(
        lattice_greens_function(vca, momentum, 0.4), greens_function
    )


def test_folding_at_zero_momentum(solver_cache: SolverGetter) -> None:
    """Test the two foldings against each other where the structure factor is uniform."""
    solver = solver_cache("chain2-hubbard")
    terms = [Hopping("t", -1.0), Hubbard("U", 4.0)]
    matrix = VCA.from_solver(solver, CHAIN, terms)
    elementwise = VCA.from_solver(solver, CHAIN, terms, folding="elementwise")
    assert elementwise.folding == Folding.ELEMENTWISE

    k = np.array([0.0])
    expected = np.ones((4, 4)) @ elementwise.periodised_greens_function(k, 0.3)
    assert np.allclose(matrix.periodised_greens_function(k, 0.3), expected)

    with pytest.raises(ValueError):
        VCA.from_solver(solver, CHAIN, terms, folding="outer")


def test_invalid_vca(solver_cache: SolverGetter) -> None:
    """Test the errors for an inconsistent cluster."""
    solver = solver_cache("chain2-hubbard")
    assert solver.result is not None
    with pytest.raises(ValueError):
        VCA(solver.result, solver.cluster, CHAIN, solver.terms, solver.terms, norb=2)
    with pytest.raises(ValueError):
        VCA(
            solver.result,
            Lattice.supercell(CHAIN, (4,)),
            CHAIN,
            solver.terms,
            solver.terms,
        )
