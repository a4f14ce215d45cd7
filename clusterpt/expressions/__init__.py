r"""Expressions for lattice models in the Fock space.

The Fock space of a cluster is spanned by occupation strings of the single-particle modes listed
in a :class:`~clusterpt.expressions.fock.BasisTable`, and is divided into sectors of fixed
particle number. Hamiltonians are built from terms acting on the bonds of a lattice.

.. list-table::
    :header-rows: 1
    :widths: 20 80

    * - Term
      - Description
    * - :class:`~clusterpt.expressions.terms.Onsite`
      - Onsite energy.
    * - :class:`~clusterpt.expressions.terms.Hopping`
      - Hopping between neighbours of a given order.
    * - :class:`~clusterpt.expressions.terms.Weiss`
      - Spin-dependent onsite field, for symmetry-breaking reference systems.
    * - :class:`~clusterpt.expressions.terms.Hubbard`
      - Onsite Hubbard interaction.


Submodules
----------

.. autosummary::
    :toctree:

    fock
    statistics
    terms
    hamiltonian
"""

from clusterpt.expressions.fock import BasisLabel, BasisTable, FockSector
from clusterpt.expressions.statistics import BaseStatistics, Fermion, HardcoreBoson, get_statistics
from clusterpt.expressions.terms import (
    QuadraticOperator,
    BaseTerm,
    Onsite,
    Weiss,
    Hopping,
    Hubbard,
    expand_quadratic,
)
from clusterpt.expressions.hamiltonian import build_hamiltonian
