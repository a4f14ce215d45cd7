"""Lanczos construction of Krylov subspaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from clusterpt.representations.krylov import KrylovResult

if TYPE_CHECKING:
    from clusterpt.typing import Array, Operator

"""Ratio of the residual norm before and after orthogonalisation below which a second
orthogonalisation pass is performed."""
REORTHOGONALISATION_RATIO: float = 1.0 / np.sqrt(2.0)


def _orthogonalise(vector: Array, basis: Array) -> Array:
    """Orthogonalise a vector against a set of orthonormal vectors stored as rows.

    Modified Gram--Schmidt is applied, followed by a second pass if the norm of the vector is
    reduced substantially by the first pass.
    """
    norm = np.linalg.norm(vector)
    for _ in range(2):
        for basis_vector in basis:
            vector = vector - np.vdot(basis_vector, vector) * basis_vector
        norm_new = np.linalg.norm(vector)
        if norm_new > REORTHOGONALISATION_RATIO * norm:
            break
        norm = norm_new
    return vector


def build_krylov(
    matrix: Operator,
    vector: Array,
    max_cycle: int = 200,
    vectors: Array | None = None,
    breakdown_tol: float = 1e-12,
    zero_tol: float = 1e-14,
    return_basis: bool = False,
) -> KrylovResult | tuple[KrylovResult, Array]:
    r"""Build the Krylov subspace of a Hermitian operator starting from a vector.

    The Lanczos recursion

    .. math::
        \beta_i |v_{i+1}\rangle = H |v_i\rangle - \alpha_i |v_i\rangle
        - \beta_{i-1} |v_{i-1}\rangle

    is performed with full reorthogonalisation of each new vector against all previous basis
    vectors. The recursion stops after `max_cycle` vectors, once the dimension of the space is
    exhausted, or when the residual vanishes, in which case the subspace is invariant under the
    operator and the tridiagonal matrix is exact.

    Args:
        matrix: Hermitian operator, supporting the matrix-vector product via ``@``.
        vector: Starting vector.
        max_cycle: Maximum dimension of the Krylov subspace.
        vectors: Other vectors of the same space, stored as rows, whose projections onto the
            Krylov basis are stored in the result.
        breakdown_tol: Tolerance for the residual norm, relative to the norm of the operator
            applied to the current basis vector, below which the recursion stops.
        zero_tol: Tolerance for the norm of the starting vector below which it is considered to
            vanish.
        return_basis: Whether to also return the Krylov basis vectors, stored as rows.

    Returns:
        The Krylov representation of the starting vector, and optionally the basis vectors.
    """
    if max_cycle < 1:
        raise ValueError(f"max_cycle must be at least 1, got {max_cycle}.")
    vector = np.asarray(vector)
    size = vector.shape[0]
    nstates = np.shape(vectors)[0] if vectors is not None else None
    norm = np.linalg.norm(vector) if size else 0.0

    # A vanishing starting vector has no Krylov subspace
    if size == 0 or norm < zero_tol:
        result = KrylovResult.from_vanishing_state(nstates)
        if return_basis:
            return result, np.zeros((0, size), dtype=vector.dtype)
        return result

    # Initialise the basis
    dtype = np.result_type(vector.dtype, getattr(matrix, "dtype", np.float64), np.float64)
    max_cycle = min(max_cycle, size)
    basis = np.zeros((max_cycle, size), dtype=dtype)
    basis[0] = vector / norm
    diagonal: list[float] = []
    offdiagonal: list[float] = []

    for i in range(max_cycle):
        # Apply the operator
        residual = np.asarray(matrix @ basis[i]).ravel()
        scale = np.linalg.norm(residual)
        diagonal.append(np.vdot(basis[i], residual).real)
        if i == max_cycle - 1:
            break

        # Orthogonalise against the full basis
        residual = _orthogonalise(residual, basis[: i + 1])
        beta = np.linalg.norm(residual)
        if beta <= breakdown_tol * max(scale, 1.0):
            break

        offdiagonal.append(beta)
        basis[i + 1] = residual / beta

    basis = basis[: len(diagonal)]
    projection = basis.conj() @ vector
    overlaps = basis.conj() @ np.asarray(vectors).T if vectors is not None else None

    result = KrylovResult(
        np.array(diagonal),
        np.array(offdiagonal),
        norm,
        projection,
        overlaps=overlaps,
    )
    if return_basis:
        return result, basis
    return result
