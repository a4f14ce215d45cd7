"""Utility functions."""

from clusterpt.util.linalg import (
    einsum,
    is_orthonormal,
    unit_vector,
    tridiagonal_matrix,
    solve_tridiagonal,
)
