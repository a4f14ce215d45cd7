r"""Solvers for the cluster problem.

.. list-table::
    :header-rows: 1
    :widths: 20 80

    * - Solver
      - Description
    * - :func:`~clusterpt.solvers.lanczos.build_krylov`
      - Lanczos construction of the Krylov subspace of a state with full reorthogonalisation.
    * - :class:`~clusterpt.solvers.ground_state.GroundState`
      - Lowest eigenpair of a Hermitian matrix via Davidson, ARPACK or dense diagonalisation.
    * - :class:`~clusterpt.solvers.cluster.ClusterSolver`
      - Exact diagonalisation of a cluster and Krylov representation of its excitations.


Submodules
----------

.. autosummary::
    :toctree:

    solver
    lanczos
    ground_state
    cluster
"""

from clusterpt.solvers.lanczos import build_krylov
from clusterpt.solvers.ground_state import GroundState
from clusterpt.solvers.cluster import ClusterSolver
