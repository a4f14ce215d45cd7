"""Tests for :module:`~clusterpt.grids`."""

from __future__ import annotations

import numpy as np
import pytest

from clusterpt.grids import GridRF, MomentumPath, RealFrequencyGrid


def test_frequency_grid() -> None:
    """Test the uniform real frequency grid."""
    grid = RealFrequencyGrid.from_uniform(-2.0, 2.0, 5, eta=0.1)

    assert GridRF is RealFrequencyGrid
    assert len(grid) == 5
    assert grid.domain == "frequency"
    assert grid.eta == 0.1
    assert np.isclose(grid.separation, 1.0)
    assert np.allclose(grid.weights, 0.2)
    assert RealFrequencyGrid.from_uniform(0.0, 1.0, 3).eta == RealFrequencyGrid.eta


def test_frequency_resolvent() -> None:
    """Test the resolvent on a real frequency grid."""
    grid = RealFrequencyGrid(np.array([-1.0, 0.5]), eta=0.2)
    energies = np.array([0.0, 1.0, 2.0])

    resolvent = grid.resolvent(energies, chempot=0.3)

    assert resolvent.shape == (2, 3)
    assert np.isclose(resolvent[1, 2], 1.0 / (0.5 + 0.3 + 0.2j - 2.0))
    assert np.all(resolvent.imag < 0.0)


def test_frequency_grid_invalid() -> None:
    """Test the errors for invalid frequency grids."""
    with pytest.raises(ValueError):
        RealFrequencyGrid(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        RealFrequencyGrid(np.zeros(3), eta=-0.1)
    with pytest.raises(ValueError):
        RealFrequencyGrid(np.zeros(3), beta=10.0)
    with pytest.raises(ValueError):
        RealFrequencyGrid(np.array([0.0, 1.0, 3.0])).separation


def test_momentum_path() -> None:
    """Test a piecewise linear momentum path."""
    vertices = [[0.0, 0.0], [np.pi, 0.0], [np.pi, np.pi]]
    path = MomentumPath.from_vertices(vertices, labels=["G", "X", "M"], num=10)

    assert len(path) == 21
    assert path.ndim == 2
    assert path.domain == "momentum"
    assert path.ticks == (0, 10, 20)
    assert path.labels == ("G", "X", "M")
    for tick, vertex in zip(path.ticks, vertices):
        assert np.allclose(path.points[tick], vertex)
    assert np.isclose(path.distances[-1], 2.0 * np.pi)
    assert np.all(np.diff(path.distances) > 0.0)


def test_momentum_path_invalid() -> None:
    """Test the errors for invalid momentum paths."""
    with pytest.raises(ValueError):
        MomentumPath.from_vertices([[0.0]])
    with pytest.raises(ValueError):
        MomentumPath.from_vertices([[0.0], [1.0]], labels=["G"])
    with pytest.raises(ValueError):
        MomentumPath(np.zeros((3, 1)), labels=["G"], ticks=())
