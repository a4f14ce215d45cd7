"""Reference system with a staggered Weiss field on the square lattice."""

import matplotlib.pyplot as plt
import numpy as np

from clusterpt import (
    VCA,
    ClusterSolver,
    Hopping,
    Hubbard,
    Lattice,
    MomentumPath,
    RealFrequencyGrid,
    Weiss,
    single_particle_spectrum,
)
from clusterpt.plotting import plot_spectrum


def staggered(bond):
    """Sign of the Weiss field on the two sublattices."""
    x, y = np.rint(bond.coordinates[0]).astype(int)
    return 1.0 if (x + y) % 2 == 0 else -1.0


# Define the square lattice and a 2x2 cluster
unitcell = Lattice("square", [[0.0, 0.0]], [[1.0, 0.0], [0.0, 1.0]])
cluster = Lattice.supercell(unitcell, (2, 2))

# The lattice Hamiltonian, and the reference Hamiltonian with a Weiss field. The field is only
# present in the cluster, and is removed again by the perturbation.
terms = [Hopping("t", -1.0), Hubbard("U", 8.0)]
reference_terms = terms + [Weiss("h", 0.2, staggered)]

# Solve the reference cluster at half filling
solver = ClusterSolver(cluster, reference_terms, cluster.nsite)
solver.kernel()

# Evaluate the spectral function along a high-symmetry path. The unit cell of the lattice is
# used for the periodisation, and the Weiss field breaks its translation symmetry in the cluster.
vca = VCA.from_solver(solver, unitcell, terms)
path = MomentumPath.from_vertices(
    [[0.0, 0.0], [np.pi, 0.0], [np.pi, np.pi], [0.0, 0.0]],
    labels=[r"$\Gamma$", "X", "M", r"$\Gamma$"],
    num=24,
)
grid = RealFrequencyGrid.from_uniform(-8.0, 8.0, 256, eta=0.15)
spectrum = single_particle_spectrum(vca, path, grid, chempot=4.0)

# Plot the results
plot_spectrum(spectrum, grid, path, normalise=True)
plt.show()
