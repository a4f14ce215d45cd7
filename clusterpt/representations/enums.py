"""Enumerations for representations."""

from __future__ import annotations

from enum import Enum


class RepresentationEnum(Enum):
    """Base enumeration for representations."""

    def raise_invalid_representation(self) -> None:
        """Raise an error for invalid representation."""
        name = self.__class__.__name__.lower()
        valid = [r.name for r in self.__class__]
        raise ValueError(f"Invalid {name}: {self.name}. Valid {name}s are: {', '.join(valid)}")


class Reduction(RepresentationEnum):
    """Enumeration for the reduction of a matrix-valued Green's function.

    The valid reductions are:
    - `none`: No reduction, i.e. the full 2D array.
    - `diag`: Reduction to the diagonal, i.e. a 1D array of diagonal elements.
    - `trace`: Reduction to the trace, i.e. a scalar value.
    """

    NONE = "none"
    DIAG = "diag"
    TRACE = "trace"

    @property
    def ndim(self) -> int:
        """Get the number of dimensions of the array for this reduction."""
        return {Reduction.NONE: 2, Reduction.DIAG: 1, Reduction.TRACE: 0}[self]


class Ordering(RepresentationEnum):
    """Enumeration for the branch of a Lehmann representation.

    The valid orderings are:
    - `advanced`: Particle removal branch, with excitation energies :math:`E_0 - E_n`.
    - `retarded`: Particle addition branch, with excitation energies :math:`E_n - E_0`.
    """

    ADVANCED = "advanced"
    RETARDED = "retarded"


class Folding(RepresentationEnum):
    """Enumeration for the folding of the structure factor into the lattice Green's function.

    The valid foldings are:
    - `elementwise`: Elementwise product of the structure factor and the Green's function.
    - `matrix`: Matrix product of the structure factor and the Green's function.
    """

    ELEMENTWISE = "elementwise"
    MATRIX = "matrix"
