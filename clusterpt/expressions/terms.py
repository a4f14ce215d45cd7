"""Terms of lattice model Hamiltonians."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from typing import Callable, Iterable

    from clusterpt.expressions.fock import BasisTable, FockSector
    from clusterpt.lattice import Bond
    from clusterpt.typing import Array


class QuadraticOperator(NamedTuple):
    r"""Quadratic operator :math:`v c_a^\dagger c_b` between two cells.

    The created mode lies in the reference cell and the annihilated mode in the cell translated
    by `displacement`.
    """

    value: complex
    create: int
    annihilate: int
    displacement: Array

    @property
    def is_intracell(self) -> bool:
        """Get a flag indicating if the operator acts within a single cell."""
        return bool(np.allclose(self.displacement, 0.0))


class BaseTerm(ABC):
    """Base class for Hamiltonian terms.

    Args:
        id: Identifier of the term.
        value: Coupling constant of the term.
    """

    neighbour: int = 0
    quadratic: bool = True

    def __init__(self, id: str, value: complex):
        """Initialise the object.

        Args:
            id: Identifier of the term.
            value: Coupling constant of the term.
        """
        self._id = id
        self._value = value

    @property
    def id(self) -> str:
        """Get the identifier of the term."""
        return self._id

    @property
    def value(self) -> complex:
        """Get the coupling constant of the term."""
        return self._value

    def applies_to(self, bond: Bond) -> bool:
        """Check if the term acts on a bond."""
        return bond.neighbour == self.neighbour

    @abstractmethod
    def operators(self, bond: Bond, table: BasisTable) -> list[QuadraticOperator]:
        """Get the quadratic operators of the term on a bond.

        Args:
            bond: Bond on which the term acts.
            table: Basis table of the cluster.

        Returns:
            Quadratic operators.
        """
        pass

    def diagonal(self, bond: Bond, table: BasisTable, sector: FockSector) -> Array:
        """Get the diagonal of the non-quadratic part of the term on a bond.

        Args:
            bond: Bond on which the term acts.
            table: Basis table of the cluster.
            sector: Sector on which the term acts.

        Returns:
            Diagonal matrix elements in the sector.
        """
        return np.zeros((sector.size,))

    def __repr__(self) -> str:
        """Get a string representation of the term."""
        return f"{self.__class__.__name__}({self.id!r}, {self.value!r})"


class Onsite(BaseTerm):
    r"""Onsite energy :math:`\epsilon \sum_{i\sigma} n_{i\sigma}`.

    Args:
        id: Identifier of the term.
        value: Onsite energy.
        spin: If given, only the spin component with this index is shifted.
    """

    def __init__(self, id: str, value: complex, spin: int | None = None):
        """Initialise the object.

        Args:
            id: Identifier of the term.
            value: Onsite energy.
            spin: If given, only the spin component with this index is shifted.
        """
        super().__init__(id, value)
        self._spin = spin

    def operators(self, bond: Bond, table: BasisTable) -> list[QuadraticOperator]:
        """Get the quadratic operators of the term on a bond."""
        (site,) = bond.sites
        spins = range(table.nspin) if self._spin is None else [self._spin]
        operators = []
        for spin in spins:
            for orbital in range(table.norb):
                index = table.index(site, orbital, spin)
                operators.append(QuadraticOperator(self.value, index, index, bond.displacement))
        return operators


class Weiss(BaseTerm):
    r"""Spin-dependent onsite field :math:`h \sum_i f(i) (n_{i\uparrow} - n_{i\downarrow})`.

    This is the typical symmetry-breaking field of a reference system, for example a staggered
    magnetic field for antiferromagnetic order when the amplitude alternates in sign between
    sublattices. For a single spin component the field couples to the density.

    Args:
        id: Identifier of the term.
        value: Field strength.
        amplitude: Function returning the amplitude of the field on a one-point bond.
    """

    def __init__(self, id: str, value: complex, amplitude: Callable[[Bond], float]):
        """Initialise the object.

        Args:
            id: Identifier of the term.
            value: Field strength.
            amplitude: Function returning the amplitude of the field on a one-point bond.
        """
        super().__init__(id, value)
        self._amplitude = amplitude

    def operators(self, bond: Bond, table: BasisTable) -> list[QuadraticOperator]:
        """Get the quadratic operators of the term on a bond."""
        (site,) = bond.sites
        amplitude = self._amplitude(bond)
        operators = []
        for spin in range(table.nspin):
            sign = 1.0 if spin == 0 else -1.0
            for orbital in range(table.norb):
                index = table.index(site, orbital, spin)
                operators.append(
                    QuadraticOperator(
                        self.value * amplitude * sign, index, index, bond.displacement
                    )
                )
        return operators


class Hopping(BaseTerm):
    r"""Hopping :math:`t \sum_{\langle ij \rangle \sigma} c_{i\sigma}^\dagger c_{j\sigma} + h.c.`.

    The hopping is diagonal in the orbital and spin indices. A bond crossing the boundary of the
    cluster is shared with the neighbouring cluster, and its operators carry half the coupling.

    Args:
        id: Identifier of the term.
        value: Hopping amplitude.
        neighbour: Order of the neighbours connected by the hopping.
    """

    def __init__(self, id: str, value: complex, neighbour: int = 1):
        """Initialise the object.

        Args:
            id: Identifier of the term.
            value: Hopping amplitude.
            neighbour: Order of the neighbours connected by the hopping.
        """
        if neighbour < 1:
            raise ValueError(f"Hopping requires a neighbour order of at least 1, got {neighbour}.")
        super().__init__(id, value)
        self.neighbour = neighbour

    def operators(self, bond: Bond, table: BasisTable) -> list[QuadraticOperator]:
        """Get the quadratic operators of the term on a bond."""
        site_i, site_j = bond.sites
        value = self.value if bond.is_intracell else 0.5 * self.value
        operators = []
        for spin in range(table.nspin):
            for orbital in range(table.norb):
                i = table.index(site_i, orbital, spin)
                j = table.index(site_j, orbital, spin)
                operators.append(QuadraticOperator(value, i, j, bond.displacement))
                operators.append(QuadraticOperator(np.conj(value), j, i, -bond.displacement))
        return operators


class Hubbard(BaseTerm):
    r"""Hubbard interaction :math:`U \sum_i n_{i\uparrow} n_{i\downarrow}`.

    Args:
        id: Identifier of the term.
        value: Interaction strength.
    """

    quadratic = False

    def operators(self, bond: Bond, table: BasisTable) -> list[QuadraticOperator]:
        """Get the quadratic operators of the term on a bond."""
        return []

    def diagonal(self, bond: Bond, table: BasisTable, sector: FockSector) -> Array:
        """Get the diagonal of the interaction on a bond."""
        if table.nspin != 2:
            raise ValueError("Hubbard interaction requires two spin components.")
        (site,) = bond.sites
        diagonal = np.zeros((sector.size,))
        for orbital in range(table.norb):
            up = sector.occupations(table.index(site, orbital, 0))
            down = sector.occupations(table.index(site, orbital, 1))
            diagonal += self.value.real * up * down
        return diagonal


def expand_quadratic(
    terms: Iterable[BaseTerm], bonds: Iterable[Bond], table: BasisTable
) -> list[QuadraticOperator]:
    """Expand the quadratic terms of a Hamiltonian into operators.

    Args:
        terms: Terms of the Hamiltonian.
        bonds: Bonds on which the terms act.
        table: Basis table of the cluster.

    Returns:
        Quadratic operators of all terms on all bonds.
    """
    bonds = list(bonds)
    operators = []
    for term in terms:
        if not term.quadratic:
            continue
        for bond in bonds:
            if term.applies_to(bond):
                operators.extend(term.operators(bond, table))
    return operators
