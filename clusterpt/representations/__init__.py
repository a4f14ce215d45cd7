r"""Representations of cluster Green's functions.

The single-particle Green's function of a cluster is represented by the Krylov subspaces of the
particle removal and addition states of its ground state.

.. list-table::
    :header-rows: 1
    :widths: 20 80

    * - Representation
      - Description
    * - :class:`~clusterpt.representations.krylov.KrylovResult`
      - Tridiagonal representation of a Hermitian operator in the Krylov subspace of a state.
    * - :class:`~clusterpt.representations.lehmann.LehmannGreensFunction`
      - Single Green's function element between two states in the Lehmann representation.
    * - :class:`~clusterpt.representations.spectral.ClusterSpectralData`
      - Krylov representation of all removal and addition states of a cluster ground state.


Submodules
----------

.. autosummary::
    :toctree:

    enums
    krylov
    lehmann
    spectral
"""

from clusterpt.representations.enums import Reduction, Ordering, Folding
from clusterpt.representations.krylov import KrylovResult
from clusterpt.representations.lehmann import LehmannGreensFunction, krylov_resolvent
from clusterpt.representations.spectral import ClusterSpectralData, cluster_greens_function
