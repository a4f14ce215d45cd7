"""Typing."""

from __future__ import annotations

from typing import Any, Union

import numpy
import scipy.sparse
import scipy.sparse.linalg

Array = numpy.ndarray[Any, numpy.dtype[Any]]

Operator = Union[
    Array,
    scipy.sparse.spmatrix,
    scipy.sparse.sparray,
    scipy.sparse.linalg.LinearOperator,
]
