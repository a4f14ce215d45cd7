"""Cluster Green's function and lattice spectrum of hard-core bosons."""

import matplotlib.pyplot as plt
import numpy as np

from clusterpt import (
    VCA,
    ClusterSolver,
    Hopping,
    Lattice,
    MomentumPath,
    RealFrequencyGrid,
    cluster_greens_function,
    single_particle_spectrum,
)
from clusterpt.plotting import plot_spectrum_slice

# Define the chain and a cluster of eight sites with four bosons
unitcell = Lattice("chain", [[0.0]], [[1.0]])
cluster = Lattice.supercell(unitcell, (8,))
terms = [Hopping("t", -1.0)]
solver = ClusterSolver(cluster, terms, 4, statistics="hardcore_boson")
data = solver.kernel()

# The Green's function of the cluster at a single frequency
greens_function = cluster_greens_function(data, 0.5, eta=0.1)
print("Local density of states of the cluster:", -greens_function.diagonal().imag / np.pi)

# The spectral function of the lattice at the zone centre and boundary
vca = VCA.from_solver(solver, unitcell, terms)
path = MomentumPath(np.array([[0.0], [np.pi]]))
grid = RealFrequencyGrid.from_uniform(-4.0, 4.0, 512, eta=0.05)
spectrum = single_particle_spectrum(vca, path, grid)

# Plot the results
fig, ax = plt.subplots()
plot_spectrum_slice(spectrum, grid, 0, ax=ax, fmt="C0-", label=r"$k = 0$")
plot_spectrum_slice(spectrum, grid, 1, ax=ax, fmt="C1-", label=r"$k = \pi$")
ax.set_xlabel("Frequency")
ax.set_ylabel("Spectral function")
ax.legend()
plt.show()
