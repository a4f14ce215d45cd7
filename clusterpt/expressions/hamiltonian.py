"""Sparse Hamiltonians of finite clusters in particle-number sectors."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import scipy.sparse

from clusterpt.expressions.terms import expand_quadratic

if TYPE_CHECKING:
    from typing import Iterable

    from clusterpt.expressions.fock import BasisTable, FockSector
    from clusterpt.expressions.statistics import BaseStatistics
    from clusterpt.expressions.terms import BaseTerm
    from clusterpt.lattice import Bond


def build_hamiltonian(
    statistics: BaseStatistics,
    terms: Iterable[BaseTerm],
    bonds: Iterable[Bond],
    table: BasisTable,
    sector: FockSector,
) -> scipy.sparse.csr_matrix:
    """Build the Hamiltonian of a cluster in a particle-number sector.

    Args:
        statistics: Particle statistics.
        terms: Terms of the Hamiltonian.
        bonds: Bonds of the cluster. All bonds must lie within the cluster.
        table: Basis table of the cluster.
        sector: Sector in which the Hamiltonian is built.

    Returns:
        Sparse Hermitian matrix of the Hamiltonian.
    """
    terms = list(terms)
    bonds = list(bonds)
    if any(not bond.is_intracell for bond in bonds):
        raise ValueError("Cluster Hamiltonian can only be built from intracell bonds.")
    if sector.nmodes != len(table):
        raise ValueError(
            f"Sector with {sector.nmodes} modes is incompatible with a basis table of "
            f"{len(table)} labels."
        )

    # Quadratic part
    operators = expand_quadratic(terms, bonds, table)
    rows, cols, data = [], [], []
    for operator in operators:
        row, col, sign = statistics.quadratic(sector, operator.create, operator.annihilate)
        rows.append(row)
        cols.append(col)
        data.append(sign * operator.value)

    # Diagonal part of the remaining terms
    diagonal = np.zeros((sector.size,))
    for term in terms:
        if term.quadratic:
            continue
        for bond in bonds:
            if term.applies_to(bond):
                diagonal += term.diagonal(bond, table, sector)
    rows.append(np.arange(sector.size))
    cols.append(np.arange(sector.size))
    data.append(diagonal)

    # Build the matrix, duplicate elements are summed
    data_array = np.concatenate(data)
    if np.all(np.abs(data_array.imag) < 1e-14):
        data_array = data_array.real
    hamiltonian = scipy.sparse.coo_matrix(
        (data_array, (np.concatenate(rows), np.concatenate(cols))),
        shape=(sector.size, sector.size),
    )
    return hamiltonian.tocsr()
