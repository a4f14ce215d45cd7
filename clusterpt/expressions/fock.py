"""Basis tables and particle-number sectors of the Fock space."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, NamedTuple

import numpy as np
from pyscf.fci import cistring

if TYPE_CHECKING:
    from typing import Iterator

    from clusterpt.lattice import Lattice
    from clusterpt.typing import Array

"""Maximum number of modes representable by 64-bit occupation strings."""
MAX_MODES: int = 63


class BasisLabel(NamedTuple):
    """Label of a single-particle basis state."""

    site: int
    orbital: int
    spin: int


class BasisTable:
    """Ordered table of single-particle basis labels.

    The labels are ordered with the spin index slowest, then the site index, then the orbital
    index. The index of a label in the table is also the index of the corresponding mode in the
    occupation strings of :class:`FockSector`.

    Args:
        nsite: Number of sites.
        norb: Number of orbitals per site.
        nspin: Number of spin components.
    """

    def __init__(self, nsite: int, norb: int = 1, nspin: int = 2):
        """Initialise the object.

        Args:
            nsite: Number of sites.
            norb: Number of orbitals per site.
            nspin: Number of spin components.
        """
        if nsite < 1 or norb < 1 or nspin < 1:
            raise ValueError(
                f"Basis table requires positive sizes, got nsite={nsite}, norb={norb}, "
                f"nspin={nspin}."
            )
        self._nsite = nsite
        self._norb = norb
        self._nspin = nspin
        self._labels = tuple(
            BasisLabel(site, orbital, spin)
            for spin in range(nspin)
            for site in range(nsite)
            for orbital in range(norb)
        )

    @classmethod
    def from_lattice(cls, lattice: Lattice, nspin: int = 2, norb: int = 1) -> BasisTable:
        """Create a table for the sites of a lattice.

        Args:
            lattice: Lattice whose sites are labelled.
            nspin: Number of spin components.
            norb: Number of orbitals per site.

        Returns:
            Basis table.
        """
        return cls(lattice.nsite, norb=norb, nspin=nspin)

    def index(self, site: int, orbital: int, spin: int) -> int:
        """Get the index of a label.

        Args:
            site: Site index.
            orbital: Orbital index.
            spin: Spin index.

        Returns:
            Index of the label in the table.
        """
        if not (0 <= site < self.nsite and 0 <= orbital < self.norb and 0 <= spin < self.nspin):
            raise KeyError(BasisLabel(site, orbital, spin))
        return (spin * self.nsite + site) * self.norb + orbital

    def __getitem__(self, label: BasisLabel) -> int:
        """Get the index of a label."""
        return self.index(*label)

    def __contains__(self, label: object) -> bool:
        """Check if a label is in the table."""
        return label in self._labels

    def __iter__(self) -> Iterator[BasisLabel]:
        """Iterate over the labels in order."""
        return iter(self._labels)

    def __len__(self) -> int:
        """Get the number of labels."""
        return len(self._labels)

    def __eq__(self, other: object) -> bool:
        """Check if two tables are equal."""
        if not isinstance(other, BasisTable):
            return NotImplemented
        return (self.nsite, self.norb, self.nspin) == (other.nsite, other.norb, other.nspin)

    def __hash__(self) -> int:
        """Get the hash of the table."""
        return hash((self.nsite, self.norb, self.nspin))

    @property
    def labels(self) -> tuple[BasisLabel, ...]:
        """Get the labels in order."""
        return self._labels

    @property
    def nsite(self) -> int:
        """Get the number of sites."""
        return self._nsite

    @property
    def norb(self) -> int:
        """Get the number of orbitals per site."""
        return self._norb

    @property
    def nspin(self) -> int:
        """Get the number of spin components."""
        return self._nspin

    @property
    def sites(self) -> Array:
        """Get the site index of each label."""
        return np.array([label.site for label in self._labels], dtype=np.int64)


def popcount(strings: Array, nbits: int) -> Array:
    """Count the set bits of occupation strings.

    Args:
        strings: Occupation strings.
        nbits: Number of low bits to count.

    Returns:
        Number of set bits among the lowest `nbits` bits of each string.
    """
    strings = np.asarray(strings, dtype=np.int64)
    count = np.zeros(strings.shape, dtype=np.int64)
    for bit in range(nbits):
        count += (strings >> bit) & 1
    return count


class FockSector:
    """Sector of the Fock space with a fixed number of particles.

    Basis states are occupation strings, in which bit `p` is set if mode `p` is occupied. The
    strings are stored in ascending order.

    Args:
        nmodes: Number of modes.
        nparticles: Number of particles.
    """

    def __init__(self, nmodes: int, nparticles: int):
        """Initialise the object.

        Args:
            nmodes: Number of modes.
            nparticles: Number of particles.
        """
        if not 0 < nmodes <= MAX_MODES:
            raise ValueError(f"Number of modes must be between 1 and {MAX_MODES}, got {nmodes}.")
        self._nmodes = nmodes
        self._nparticles = nparticles

    @functools.cached_property
    def strings(self) -> Array:
        """Get the occupation strings of the sector."""
        if self.nparticles < 0 or self.nparticles > self.nmodes:
            return np.zeros((0,), dtype=np.int64)
        if self.nparticles == 0:
            return np.zeros((1,), dtype=np.int64)
        strings = cistring.make_strings(range(self.nmodes), self.nparticles)
        return np.sort(np.asarray(strings, dtype=np.int64))

    def index(self, strings: Array) -> Array:
        """Get the indices of occupation strings in the sector.

        Args:
            strings: Occupation strings.

        Returns:
            Indices of the strings.
        """
        strings = np.asarray(strings, dtype=np.int64)
        index = np.searchsorted(self.strings, strings)
        valid = index < self.size
        valid[valid] = self.strings[index[valid]] == strings[valid]
        if not np.all(valid):
            raise ValueError(
                f"Occupation strings are not in the sector with {self.nparticles} particles."
            )
        return index

    def occupations(self, mode: int) -> Array:
        """Get the occupation of a mode in each basis state.

        Args:
            mode: Mode index.

        Returns:
            Occupation numbers of the mode.
        """
        return (self.strings >> mode) & 1

    def lower(self) -> FockSector:
        """Get the sector with one particle fewer."""
        return FockSector(self.nmodes, self.nparticles - 1)

    def upper(self) -> FockSector:
        """Get the sector with one particle more."""
        return FockSector(self.nmodes, self.nparticles + 1)

    @property
    def nmodes(self) -> int:
        """Get the number of modes."""
        return self._nmodes

    @property
    def nparticles(self) -> int:
        """Get the number of particles."""
        return self._nparticles

    @property
    def size(self) -> int:
        """Get the dimension of the sector."""
        return self.strings.size

    def __repr__(self) -> str:
        """Get a string representation of the sector."""
        return f"{self.__class__.__name__}(nmodes={self.nmodes}, nparticles={self.nparticles})"
