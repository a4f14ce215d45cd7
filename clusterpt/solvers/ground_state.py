"""Ground state of a sparse Hermitian Hamiltonian."""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

import numpy as np
import scipy.sparse
import scipy.sparse.linalg
from pyscf import lib

from clusterpt import console, printing, util
from clusterpt.solvers.solver import BaseSolver

if TYPE_CHECKING:
    from typing import Any

    from clusterpt.typing import Array, Operator


class GroundState(BaseSolver):
    """Lowest eigenpair of a Hermitian matrix.

    The available methods are the Davidson algorithm of :mod:`pyscf`, the implicitly restarted
    Lanczos algorithm of ARPACK, and dense diagonalisation. Matrices no larger than
    `dense_threshold` are always diagonalised densely.

    Args:
        matrix: Hermitian matrix, either dense or sparse.
    """

    method: str = "davidson"
    conv_tol: float = 1e-10
    max_cycle: int = 300
    max_space: int = 16
    dense_threshold: int = 128
    degeneracy_tol: float = 1e-8
    seed: int = 0
    _options: set[str] = {
        "method",
        "conv_tol",
        "max_cycle",
        "max_space",
        "dense_threshold",
        "degeneracy_tol",
        "seed",
    }

    energy: float | None = None
    vector: Array | None = None
    converged: bool | None = None

    def __init__(self, matrix: Operator, **kwargs: Any):  # noqa: D417
        """Initialise the solver.

        Args:
            matrix: Hermitian matrix, either dense or sparse.
            method: Method for the eigenvalue problem, one of ``"davidson"``, ``"arpack"`` or
                ``"dense"``.
            conv_tol: Convergence tolerance for the eigenvalue.
            max_cycle: Maximum number of iterations.
            max_space: Maximum size of the Davidson subspace.
            dense_threshold: Dimension up to which the matrix is diagonalised densely.
            degeneracy_tol: Tolerance for detecting a degenerate ground state in dense
                diagonalisation.
            seed: Seed for the random component of the initial guess.
        """
        self._matrix = matrix
        self.set_options(**kwargs)

    def __post_init__(self) -> None:
        """Hook called after :meth:`__init__`."""
        # Check the input
        if self.method not in {"davidson", "arpack", "dense"}:
            raise ValueError(
                f"Unknown method for {self.__class__.__name__}: {self.method}. Valid methods are: "
                "davidson, arpack, dense"
            )
        if len(self.matrix.shape) != 2 or self.matrix.shape[0] != self.matrix.shape[1]:
            raise ValueError("matrix must be a square 2D array.")
        if self.size == 0:
            raise ValueError("matrix must have a nonzero dimension.")

        # Print the input information
        console.print(f"Matrix shape: [input]{self.matrix.shape}[/input]")
        if scipy.sparse.issparse(self.matrix):
            console.print(f"Nonzero elements: [input]{self.matrix.nnz}[/input]")

    def __post_kernel__(self) -> None:
        """Hook called after :meth:`kernel`."""
        assert self.energy is not None
        console.print(f"Ground state energy: [output]{printing.format_float(self.energy)}[/output]")

    def get_guess(self) -> Array:
        """Get the initial guess for the eigenvector.

        Returns:
            Unit vector on the smallest diagonal element, with a small random admixture to avoid
            a guess confined to a symmetry sector.
        """
        dtype = np.result_type(self.matrix.dtype, np.float64)
        guess = util.unit_vector(self.size, int(np.argmin(self.diagonal)), dtype=dtype.name)
        rng = np.random.default_rng(self.seed)
        guess = guess + 0.1 * rng.standard_normal(self.size) / np.sqrt(self.size)
        return guess / np.linalg.norm(guess)

    def _kernel_dense(self) -> tuple[float, Array]:
        """Diagonalise the matrix densely."""
        matrix = self.matrix.toarray() if scipy.sparse.issparse(self.matrix) else self.matrix
        eigvals, eigvecs = np.linalg.eigh(np.asarray(matrix))
        if eigvals.size > 1 and eigvals[1] - eigvals[0] < self.degeneracy_tol:
            warnings.warn(
                f"Ground state is degenerate to within {self.degeneracy_tol:.1e}, the result "
                "depends on the choice of ground state vector.",
                UserWarning,
                stacklevel=3,
            )
        return eigvals[0], eigvecs[:, 0]

    def _kernel_davidson(self) -> tuple[float, Array]:
        """Find the ground state with the Davidson algorithm."""
        table = printing.GroundStateTable(self.conv_tol, np.sqrt(self.conv_tol))

        with printing.ProgressPrinter(self.max_cycle) as progress:

            def _callback(env: dict[str, Any]) -> None:
                """Callback function for the Davidson algorithm."""
                table.add_row(
                    env["icyc"] + 1,
                    env["e"][0],
                    np.max(np.abs(env["de"])),
                    np.max(env["dx_norm"]),
                )
                progress.update(env["icyc"] + 1)
                del env

            converged, eigvals, eigvecs = lib.linalg_helper.davidson1(
                lambda vectors: [self.matrix @ vector for vector in vectors],
                [self.get_guess()],
                self.diagonal,
                tol=self.conv_tol,
                max_cycle=self.max_cycle,
                max_space=self.max_space,
                nroots=1,
                callback=_callback,
                verbose=0,
            )

        table.print()

        if not np.all(converged):
            raise RuntimeError(
                f"{self.__class__.__name__} failed to converge in {self.max_cycle} iterations."
            )

        return np.array(eigvals)[0], np.array(eigvecs[0])

    def _kernel_arpack(self) -> tuple[float, Array]:
        """Find the ground state with the implicitly restarted Lanczos algorithm."""
        try:
            eigvals, eigvecs = scipy.sparse.linalg.eigsh(
                self.matrix,
                k=1,
                which="SA",
                v0=self.get_guess(),
                tol=self.conv_tol,
                maxiter=self.max_cycle,
            )
        except scipy.sparse.linalg.ArpackNoConvergence as e:
            raise RuntimeError(
                f"{self.__class__.__name__} failed to converge in {self.max_cycle} iterations."
            ) from e
        return eigvals[0], eigvecs[:, 0]

    def kernel(self) -> tuple[float, Array]:
        """Run the solver.

        Returns:
            The ground state energy and normalised eigenvector.
        """
        if self.method == "dense" or self.size <= max(self.dense_threshold, 2):
            energy, vector = self._kernel_dense()
        elif self.method == "davidson":
            energy, vector = self._kernel_davidson()
        else:
            energy, vector = self._kernel_arpack()

        # Store the results
        self.energy = float(np.real(energy))
        self.vector = vector / np.linalg.norm(vector)
        self.converged = True

        return self.energy, self.vector

    @property
    def matrix(self) -> Operator:
        """Get the matrix."""
        return self._matrix

    @property
    def diagonal(self) -> Array:
        """Get the diagonal of the matrix."""
        return np.real(np.asarray(self.matrix.diagonal())).ravel()

    @property
    def size(self) -> int:
        """Get the dimension of the matrix."""
        return self.matrix.shape[0]
