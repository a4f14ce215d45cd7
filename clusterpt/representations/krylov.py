"""Krylov subspace representation of an excited state."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from clusterpt import util

if TYPE_CHECKING:
    from clusterpt.typing import Array


class KrylovResult:
    r"""Krylov subspace representation of a state with respect to a Hermitian operator.

    The Lanczos recursion started from a state :math:`|s\rangle` produces an orthonormal basis
    :math:`V` in which the operator is the real symmetric tridiagonal matrix

    .. math::
        T = \begin{pmatrix}
            \alpha_0 & \beta_0 & & \\
            \beta_0 & \alpha_1 & \ddots & \\
            & \ddots & \ddots & \beta_{m-2} \\
            & & \beta_{m-2} & \alpha_{m-1}
        \end{pmatrix}.

    Only :math:`T`, the norm of the starting state and the projections of starting states onto
    :math:`V` are kept, which is sufficient to evaluate resolvent matrix elements.

    Args:
        diagonal: The diagonal elements :math:`\alpha` of the tridiagonal matrix.
        offdiagonal: The off-diagonal elements :math:`\beta` of the tridiagonal matrix.
        norm: The norm of the starting state.
        projection: The projection :math:`V^\dagger |s\rangle` of the starting state onto the
            basis.
        overlaps: The projections of a set of other starting states of the same space onto the
            basis, stored as columns. If `None`, only the starting state is projected.
    """

    def __init__(
        self,
        diagonal: Array,
        offdiagonal: Array,
        norm: float,
        projection: Array,
        overlaps: Array | None = None,
    ):
        """Initialise the object.

        Args:
            diagonal: The diagonal elements of the tridiagonal matrix.
            offdiagonal: The off-diagonal elements of the tridiagonal matrix.
            norm: The norm of the starting state.
            projection: The projection of the starting state onto the basis.
            overlaps: The projections of other starting states onto the basis.
        """
        self._diagonal = np.asarray(diagonal, dtype=np.float64)
        self._offdiagonal = np.asarray(offdiagonal, dtype=np.float64)
        self._norm = float(norm)
        self._projection = np.asarray(projection, dtype=np.complex128)
        self._overlaps = np.asarray(overlaps, dtype=np.complex128) if overlaps is not None else None

        # Check the input
        if self.diagonal.ndim != 1 or self.diagonal.size == 0:
            raise ValueError("diagonal must be a non-empty 1D array.")
        if self.offdiagonal.shape != (self.size - 1,):
            raise ValueError(
                f"offdiagonal must have shape {(self.size - 1,)}, got {self.offdiagonal.shape}."
            )
        if self.projection.shape != (self.size,):
            raise ValueError(
                f"projection must have shape {(self.size,)}, got {self.projection.shape}."
            )
        if self.overlaps is not None and (
            self.overlaps.ndim != 2 or self.overlaps.shape[0] != self.size
        ):
            raise ValueError(f"overlaps must be a 2D array with {self.size} rows.")

        # Make the arrays read-only
        for array in (self._diagonal, self._offdiagonal, self._projection, self._overlaps):
            if array is not None:
                array.flags.writeable = False

    @classmethod
    def from_vanishing_state(cls, nstates: int | None = None) -> KrylovResult:
        """Get the result for a vanishing starting state.

        Args:
            nstates: Number of other starting states whose overlaps are stored. If `None`, no
                overlaps are stored.

        Returns:
            Degenerate Krylov result, which contributes nothing to a Green's function.
        """
        overlaps = np.zeros((1, nstates), dtype=np.complex128) if nstates is not None else None
        return cls(np.zeros((1,)), np.zeros((0,)), 0.0, np.zeros((1,)), overlaps=overlaps)

    @property
    def diagonal(self) -> Array:
        """Get the diagonal elements of the tridiagonal matrix."""
        return self._diagonal

    @property
    def offdiagonal(self) -> Array:
        """Get the off-diagonal elements of the tridiagonal matrix."""
        return self._offdiagonal

    @property
    def norm(self) -> float:
        """Get the norm of the starting state."""
        return self._norm

    @property
    def projection(self) -> Array:
        """Get the projection of the starting state onto the basis."""
        return self._projection

    @property
    def overlaps(self) -> Array | None:
        """Get the projections of other starting states onto the basis."""
        return self._overlaps

    @property
    def size(self) -> int:
        """Get the dimension of the Krylov subspace."""
        return self.diagonal.size

    @property
    def empty(self) -> bool:
        """Get a flag indicating if the starting state vanishes."""
        return self.norm == 0.0

    @property
    def tridiagonal(self) -> Array:
        """Get the dense tridiagonal matrix."""
        return util.tridiagonal_matrix(self.diagonal, self.offdiagonal)

    def __repr__(self) -> str:
        """Get a string representation of the result."""
        return f"{self.__class__.__name__}(size={self.size}, norm={self.norm:.6g})"
