r"""Grids for lattice Green's functions.

Grids are arrays of points in either the frequency or momentum domain.


Submodules
----------

.. autosummary::
    :toctree:

    grid
    frequency
    momentum
"""

from clusterpt.grids.frequency import RealFrequencyGrid, GridRF
from clusterpt.grids.momentum import MomentumPath
