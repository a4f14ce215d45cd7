"""Spectral function of the half-filled Hubbard chain from cluster perturbation theory."""

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
    single_particle_spectrum,
)
from clusterpt.plotting import plot_spectrum

# Define the unit cell of the chain and a cluster of six sites
unitcell = Lattice("chain", [[0.0]], [[1.0]])
cluster = Lattice.supercell(unitcell, (6,))

# Define the Hamiltonian, with the chemical potential of particle-hole symmetry
t, U = -1.0, 4.0
terms = [Hopping("t", t), Hubbard("U", U)]
chempot = 0.5 * U

# Solve the cluster at half filling
solver = ClusterSolver(cluster, terms, cluster.nsite, max_cycle=150)
solver.kernel()

# Perturb with the hopping between clusters, and evaluate the spectral function
vca = VCA.from_solver(solver, unitcell, terms)
path = MomentumPath.from_vertices([[0.0], [np.pi]], labels=[r"$\Gamma$", "X"], num=64)
grid = RealFrequencyGrid.from_uniform(-6.0, 6.0, 256, eta=0.1)
spectrum = single_particle_spectrum(vca, path, grid, chempot=chempot)

# Plot the results
plot_spectrum(spectrum, grid, path, normalise=True)
plt.show()
