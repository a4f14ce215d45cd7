"""Linear algebra."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

import numpy as np
import scipy.linalg

if TYPE_CHECKING:
    from clusterpt.typing import Array

einsum = functools.partial(np.einsum, optimize=True)


def is_orthonormal(vectors_left: Array, vectors_right: Array | None = None) -> bool:
    """Check if a set of vectors is orthonormal.

    Args:
        vectors_left: The left set of vectors to be checked, stored as columns.
        vectors_right: The right set of vectors to be checked. If `None`, use the left vectors.

    Returns:
        Whether the overlap of the vectors is the identity.
    """
    if vectors_right is None:
        vectors_right = vectors_left
    if vectors_left.ndim == 1:
        vectors_left = vectors_left[:, None]
    if vectors_right.ndim == 1:
        vectors_right = vectors_right[:, None]
    overlap = einsum("ij,ik->jk", vectors_left.conj(), vectors_right)
    return np.allclose(overlap, np.eye(overlap.shape[0]), atol=1e-10, rtol=0.0)


def unit_vector(size: int, index: int, dtype: str = "float64") -> Array:
    """Return a unit vector of size `size` with a 1 at index `index`.

    Args:
        size: The size of the vector.
        index: The index of the vector.
        dtype: The data type of the vector.

    Returns:
        The unit vector.
    """
    return np.eye(1, size, k=index, dtype=dtype).ravel()


def tridiagonal_matrix(diagonal: Array, offdiagonal: Array) -> Array:
    """Build a dense symmetric tridiagonal matrix.

    Args:
        diagonal: The diagonal elements.
        offdiagonal: The elements of the first sub- and super-diagonal.

    Returns:
        The tridiagonal matrix.
    """
    matrix = np.diag(diagonal)
    if len(offdiagonal):
        matrix = matrix + np.diag(offdiagonal, k=1) + np.diag(offdiagonal, k=-1)
    return matrix


def solve_tridiagonal(diagonal: Array, offdiagonal: Array, rhs: Array) -> Array:
    """Solve a symmetric tridiagonal linear system.

    The system is solved in linear time using the banded solver in :mod:`scipy.linalg`.

    Args:
        diagonal: The diagonal elements of the matrix, of length `m`.
        offdiagonal: The elements of the first sub- and super-diagonal, of length `m - 1`.
        rhs: The right-hand side, of length `m`.

    Returns:
        The solution of the linear system.
    """
    size = len(diagonal)
    if len(offdiagonal) != size - 1:
        raise ValueError(
            f"Off-diagonal of length {len(offdiagonal)} is incompatible with diagonal of length "
            f"{size}."
        )
    dtype = np.result_type(diagonal, offdiagonal, rhs)
    banded = np.zeros((3, size), dtype=dtype)
    banded[0, 1:] = offdiagonal
    banded[1] = diagonal
    banded[2, :-1] = offdiagonal
    return scipy.linalg.solve_banded((1, 1), banded, rhs, check_finite=False)
