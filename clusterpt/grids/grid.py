"""Base class for grids."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from clusterpt.representations.enums import RepresentationEnum

if TYPE_CHECKING:
    from typing import Any

    from clusterpt.typing import Array


class BaseGrid(ABC):
    """Base class for grids."""

    _options: set[str] = set()

    _points: Array
    _weights: Array | None = None

    def __init__(  # noqa: D417
        self, points: Array, weights: Array | None = None, **kwargs: Any
    ) -> None:
        """Initialise the grid.

        Args:
            points: Points of the grid.
            weights: Weights of the grid.
        """
        self._points = np.asarray(points)
        self._weights = np.asarray(weights) if weights is not None else None
        self.set_options(**kwargs)

    def set_options(self, **kwargs: Any) -> None:
        """Set options for the grid.

        Args:
            kwargs: Keyword arguments to set as options.
        """
        for key, val in kwargs.items():
            if key not in self._options:
                raise ValueError(f"Unknown option for {self.__class__.__name__}: {key}")
            if isinstance(getattr(self, key), RepresentationEnum):
                # Casts string to the appropriate enum type if the default value is an enum
                val = getattr(self, key).__class__(val)
            setattr(self, key, val)

    @property
    def points(self) -> Array:
        """Get the points of the grid.

        Returns:
            Points of the grid.
        """
        return self._points

    @property
    def weights(self) -> Array:
        """Get the weights of the grid.

        Returns:
            Weights of the grid.
        """
        if self._weights is None:
            return np.ones(len(self)) / len(self)
        return self._weights

    def __len__(self) -> int:
        """Get the size of the grid.

        Returns:
            Size of the grid.
        """
        return self.points.shape[0]

    @property
    @abstractmethod
    def domain(self) -> str:
        """Get the domain of the grid."""
        pass
