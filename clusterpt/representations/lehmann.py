"""Lehmann representation of Green's function elements via Krylov subspaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from clusterpt import util
from clusterpt.representations.enums import Ordering

if TYPE_CHECKING:
    from clusterpt.representations.krylov import KrylovResult
    from clusterpt.typing import Array


def krylov_resolvent(
    energy: float,
    ordering: Ordering,
    krylov: KrylovResult,
    omega: complex,
    chempot: float = 0.0,
    eta: float = 0.05,
) -> Array:
    r"""Get the resolvent acting on a starting state, in the Krylov basis of that state.

    For the retarded (particle addition) branch the resolvent is

    .. math::
        x = \left[(z + E_0) I - T\right]^{-1} e_1 \lVert s \rVert,

    and for the advanced (particle removal) branch

    .. math::
        x = \left[(z - E_0) I + T\right]^{-1} e_1 \lVert s \rVert,

    where :math:`z = \omega + i \eta + \mu`, :math:`T` is the tridiagonal matrix and
    :math:`\lVert s \rVert` the norm of the starting state.

    Args:
        energy: Ground state energy.
        ordering: Branch of the Lehmann representation.
        krylov: Krylov representation of the starting state.
        omega: Frequency.
        chempot: Chemical potential.
        eta: Broadening factor.

    Returns:
        The resolvent applied to the starting state, in the Krylov basis.
    """
    if krylov.empty:
        return np.zeros((krylov.size,), dtype=np.complex128)

    ordering = Ordering(ordering)
    shift = omega + 1.0j * eta + chempot
    if ordering == Ordering.RETARDED:
        diagonal = (shift + energy) - krylov.diagonal
        offdiagonal = -krylov.offdiagonal
    elif ordering == Ordering.ADVANCED:
        diagonal = (shift - energy) + krylov.diagonal
        offdiagonal = krylov.offdiagonal
    else:
        ordering.raise_invalid_representation()

    rhs = util.unit_vector(krylov.size, 0, dtype="complex128") * krylov.norm
    return util.solve_tridiagonal(diagonal, offdiagonal.astype(np.complex128), rhs)


class LehmannGreensFunction:
    r"""Single element of a Green's function in the Lehmann representation.

    The element couples a left and right starting state, for example
    :math:`c_i^\dagger |\Psi_0\rangle` and :math:`c_j^\dagger |\Psi_0\rangle` for the retarded
    branch, and is evaluated as the overlap of the left state with the resolvent applied to the
    right state. The resolvent is represented in the Krylov basis of the right state.

    When the right Krylov result stores the projections of other starting states onto its basis,
    the projection of the left state is taken from these and the element is exact once the
    Krylov subspace of the right state is exhausted. Otherwise, the left state is approximated
    by its projection onto its own Krylov basis, which is exact only for diagonal elements.

    Args:
        energy: Ground state energy.
        ordering: Branch of the Lehmann representation.
        left: Krylov representation of the left state.
        right: Krylov representation of the right state.
        left_index: Index of the left state within the states projected onto the right Krylov
            basis.
    """

    def __init__(
        self,
        energy: float,
        ordering: Ordering | str,
        left: KrylovResult,
        right: KrylovResult,
        left_index: int | None = None,
    ):
        """Initialise the object.

        Args:
            energy: Ground state energy.
            ordering: Branch of the Lehmann representation.
            left: Krylov representation of the left state.
            right: Krylov representation of the right state.
            left_index: Index of the left state within the states projected onto the right
                Krylov basis.
        """
        self._energy = energy
        self._ordering = Ordering(ordering)
        self._left = left
        self._right = right
        self._left_index = left_index

    @property
    def energy(self) -> float:
        """Get the ground state energy."""
        return self._energy

    @property
    def ordering(self) -> Ordering:
        """Get the branch of the Lehmann representation."""
        return self._ordering

    @property
    def left(self) -> KrylovResult:
        """Get the Krylov representation of the left state."""
        return self._left

    @property
    def right(self) -> KrylovResult:
        """Get the Krylov representation of the right state."""
        return self._right

    @property
    def left_index(self) -> int | None:
        """Get the index of the left state within the projected states."""
        return self._left_index

    @property
    def bra(self) -> Array:
        """Get the projection of the left state onto the Krylov basis of the right state."""
        if self.left_index is not None and self.right.overlaps is not None:
            return self.right.overlaps[:, self.left_index]
        size = min(self.left.size, self.right.size)
        bra = np.zeros((self.right.size,), dtype=np.complex128)
        bra[:size] = self.left.projection[:size]
        return bra

    def resolvent(self, omega: complex, chempot: float = 0.0, eta: float = 0.05) -> Array:
        """Get the resolvent applied to the right state, in its Krylov basis.

        Args:
            omega: Frequency.
            chempot: Chemical potential.
            eta: Broadening factor.

        Returns:
            The resolvent applied to the right state.
        """
        return krylov_resolvent(self.energy, self.ordering, self.right, omega, chempot, eta)

    def __call__(self, omega: complex, chempot: float = 0.0, eta: float = 0.05) -> complex:
        """Evaluate the Green's function element.

        Args:
            omega: Frequency.
            chempot: Chemical potential.
            eta: Broadening factor.

        Returns:
            The value of the Green's function element.
        """
        if self.left.empty or self.right.empty:
            return 0.0j
        return complex(np.vdot(self.bra, self.resolvent(omega, chempot=chempot, eta=eta)))
