"""
******************************************************************************
clusterpt: cluster perturbation theory for lattice Green's functions
******************************************************************************

The single-particle Green's function of a lattice model is computed in :mod:`clusterpt` by
cluster perturbation theory (CPT) and the variational cluster approach (VCA) at fixed reference
parameters. The lattice is tiled by copies of a finite cluster, which is solved exactly, and the
terms of the lattice Hamiltonian not contained in the reference Hamiltonian of the cluster are
treated as a perturbation in momentum space.

The calculation proceeds in the following stages:

.. list-table::
   :header-rows: 1
   :widths: 20 80

   * - Stage
     - Description
   * - :class:`~clusterpt.solvers.cluster.ClusterSolver`
     - Exact ground state of the cluster reference Hamiltonian, and the Krylov subspaces of its
       particle removal and addition states.
   * - :class:`~clusterpt.representations.spectral.ClusterSpectralData`
     - Krylov representation of the cluster, from which the cluster Green's function is
       evaluated at any frequency by
       :func:`~clusterpt.representations.spectral.cluster_greens_function`.
   * - :class:`~clusterpt.vca.VCA`
     - Perturbation of the cluster Green's function by the difference between the lattice and
       reference Hamiltonians, periodisation and coarse-graining onto the unit cell.
   * - :func:`~clusterpt.spectrum.single_particle_spectrum`
     - Spectral function along a momentum path on a grid of frequencies.

The supported particle statistics are:

.. list-table::
   :header-rows: 1
   :widths: 20 80

   * - Statistics
     - Description
   * - :class:`~clusterpt.expressions.statistics.Fermion`
     - Spin-half fermions, with Jordan--Wigner signs and the anticommutator Green's function.
   * - :class:`~clusterpt.expressions.statistics.HardcoreBoson`
     - Hard-core bosons, with the commutator Green's function.

Console output is written with :mod:`rich`, and can be silenced by setting the environment
variable ``CLUSTERPT_QUIET=1`` or by calling :func:`clusterpt.quiet`.


Submodules
----------

.. autosummary::
    :toctree: _autosummary

    clusterpt.expressions
    clusterpt.grids
    clusterpt.representations
    clusterpt.solvers
    clusterpt.util
    clusterpt.lattice
    clusterpt.vca
    clusterpt.spectrum
    clusterpt.plotting

"""

__version__ = "0.1.0"

from clusterpt.printing import console, quiet
from clusterpt.lattice import Lattice, Bond, is_subordinate
from clusterpt.expressions import (
    BasisLabel,
    BasisTable,
    FockSector,
    Fermion,
    HardcoreBoson,
    get_statistics,
    Onsite,
    Hopping,
    Hubbard,
    Weiss,
    build_hamiltonian,
)
from clusterpt.representations import (
    KrylovResult,
    LehmannGreensFunction,
    ClusterSpectralData,
    cluster_greens_function,
)
from clusterpt.solvers import build_krylov, GroundState, ClusterSolver
from clusterpt.grids import RealFrequencyGrid, MomentumPath
from clusterpt.vca import (
    Perioder,
    VCA,
    quadratic_term_difference,
    structure_factor,
    lattice_greens_function,
)
from clusterpt.spectrum import single_particle_spectrum
