"""Tests for the Fock space and particle statistics."""

from __future__ import annotations

import numpy as np
import pytest
import scipy.sparse

from clusterpt import BasisLabel, BasisTable, FockSector, Fermion, HardcoreBoson, get_statistics
from clusterpt.expressions.fock import MAX_MODES, popcount


def test_basis_table() -> None:
    """Test the ordering and indexing of a basis table."""
    table = BasisTable(3, norb=2, nspin=2)

    assert len(table) == 12
    for index, label in enumerate(table):
        assert table.index(*label) == index
        assert table[label] == index
        assert label in table
    assert table.labels[0] == BasisLabel(0, 0, 0)
    assert table.labels[1] == BasisLabel(0, 1, 0)
    assert table.labels[2] == BasisLabel(1, 0, 0)
    assert table.labels[6] == BasisLabel(0, 0, 1)
    assert np.all(table.sites == [0, 0, 1, 1, 2, 2] * 2)
    assert table == BasisTable(3, norb=2, nspin=2)
    assert table != BasisTable(3, norb=1, nspin=2)
    assert BasisLabel(3, 0, 0) not in table

    with pytest.raises(KeyError):
        table.index(0, 0, 2)
    with pytest.raises(ValueError):
        BasisTable(0)


def test_popcount() -> None:
    """Test the count of set bits."""
    strings = np.array([0b0, 0b1011, 0b1111])
    assert np.all(popcount(strings, 0) == [0, 0, 0])
    assert np.all(popcount(strings, 2) == [0, 2, 2])
    assert np.all(popcount(strings, 4) == [0, 3, 4])


@pytest.mark.parametrize(
    "nmodes, nparticles, size",
    [(4, 0, 1), (4, 1, 4), (4, 2, 6), (4, 4, 1), (4, -1, 0), (4, 5, 0), (8, 4, 70)],
)
def test_sector_size(nmodes: int, nparticles: int, size: int) -> None:
    """Test the dimension of particle-number sectors."""
    sector = FockSector(nmodes, nparticles)
    assert sector.size == size
    assert np.all(np.diff(sector.strings) > 0)
    assert np.all(popcount(sector.strings, nmodes) == nparticles)
    assert sector.lower().nparticles == nparticles - 1
    assert sector.upper().nparticles == nparticles + 1


def test_sector_index() -> None:
    """Test the lookup of occupation strings in a sector."""
    sector = FockSector(5, 2)
    assert np.all(sector.index(sector.strings) == np.arange(sector.size))
    assert np.all(sector.occupations(0) == (sector.strings & 1))
    with pytest.raises(ValueError):
        sector.index(np.array([0b111]))
    with pytest.raises(ValueError):
        sector.index(np.array([1 << 6]))
    with pytest.raises(ValueError):
        FockSector(MAX_MODES + 1, 1)


@pytest.mark.parametrize("nparticles", [0, 1, 2, 3, 4])
def test_fermion_anticommutator(nparticles: int) -> None:
    """Test the canonical anticommutation relations of fermions."""
    statistics = Fermion()
    sector = FockSector(4, nparticles)
    identity = np.eye(sector.size)
    for i in range(4):
        for j in range(4):
            first = statistics.annihilation(sector.upper(), i) @ statistics.creation(sector, j)
            second = statistics.creation(sector.lower(), j) @ statistics.annihilation(sector, i)
            anticommutator = (first + second).toarray()
            assert np.allclose(anticommutator, identity if i == j else 0.0)


@pytest.mark.parametrize("nparticles", [0, 1, 2, 3])
def test_hardcore_boson_algebra(nparticles: int) -> None:
    """Test the algebra of hard-core bosons."""
    statistics = HardcoreBoson()
    sector = FockSector(3, nparticles)
    identity = np.eye(sector.size)
    for i in range(3):
        for j in range(3):
            first = statistics.annihilation(sector.upper(), i) @ statistics.creation(sector, j)
            second = statistics.creation(sector.lower(), j) @ statistics.annihilation(sector, i)
            if i == j:
                assert np.allclose((first + second).toarray(), identity)
            else:
                assert np.allclose((first - second).toarray(), 0.0)


def test_fermion_sign() -> None:
    """Test the Jordan--Wigner sign of fermionic operators."""
    statistics = Fermion()
    sector = FockSector(3, 2)
    strings = sector.strings
    matrix = statistics.annihilation(sector, 2).toarray()
    lower = sector.lower()

    # Annihilating mode 2 from 0b101 passes one occupied mode
    col = int(np.nonzero(strings == 0b101)[0][0])
    row = int(lower.index(np.array([0b001]))[0])
    assert matrix[row, col] == -1.0

    # Annihilating mode 2 from 0b110 passes one occupied mode
    col = int(np.nonzero(strings == 0b110)[0][0])
    row = int(lower.index(np.array([0b010]))[0])
    assert matrix[row, col] == -1.0

    # Annihilating mode 0 passes no occupied modes
    matrix = statistics.annihilation(sector, 0).toarray()
    assert np.all(matrix[matrix != 0.0] == 1.0)


@pytest.mark.parametrize("statistics", [Fermion(), HardcoreBoson()])
def test_quadratic(statistics: Fermion | HardcoreBoson) -> None:
    """Test that quadratic operators are products of creation and annihilation operators."""
    sector = FockSector(5, 2)
    for create in range(5):
        for annihilate in range(5):
            rows, cols, signs = statistics.quadratic(sector, create, annihilate)
            matrix = scipy.sparse.coo_matrix((signs, (rows, cols)), shape=(sector.size,) * 2)
            expected = statistics.creation(sector.lower(), create) @ statistics.annihilation(
                sector, annihilate
            )
            assert np.allclose(matrix.toarray(), expected.toarray())


def test_get_statistics() -> None:
    """Test the lookup of statistics by name."""
    assert isinstance(get_statistics("fermion"), Fermion)
    assert isinstance(get_statistics("hardcore_boson"), HardcoreBoson)
    fermion = Fermion()
    assert get_statistics(fermion) is fermion
    assert Fermion.nspin == 2 and Fermion.removal_sign == 1.0
    assert HardcoreBoson.nspin == 1 and HardcoreBoson.removal_sign == -1.0
    with pytest.raises(ValueError):
        get_statistics("anyon")
