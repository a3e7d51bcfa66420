"""
Jacobi eigenvalue algorithm for real symmetric matrices.

The classical (largest-pivot) Jacobi method repeatedly applies a plane
rotation that zeroes the largest off-diagonal entry of a working copy of
the matrix. Each rotation strictly decreases the off-diagonal sum of
squares, so the working matrix converges to a diagonal matrix of
eigenvalues while the accumulated product of rotations converges to an
orthonormal matrix of eigenvectors.

The solver is intended for small dense matrices (tens of rows), such as
the adjacency and Laplacian matrices of hand-built graphs.
"""

import math
from dataclasses import dataclass
from typing import Any, Literal, Optional, Tuple

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from eigenspace.matrix import (
    as_square_matrix,
    check_symmetric,
    off_diagonal_residual,
    symmetrize,
)


@dataclass(frozen=True)
class JacobiConfig:
    """
    Configuration for the Jacobi eigensolver.

    Attributes:
        max_sweeps: Rotation budget in sweeps; one sweep is N(N-1)/2
            rotations, one per off-diagonal pair
        tolerance: Stop once the largest off-diagonal magnitude drops
            below this value
        symmetry: Policy for asymmetric input
            - 'raise': raise AsymmetricInputError
            - 'symmetrize': decompose (M + M^T) / 2 instead
        symmetry_atol: Tolerated |M[i, j] - M[j, i]| before the policy applies

    Each rotation costs O(N) plus an O(N^2) pivot scan, so the worst case
    is O(max_sweeps * N^4); in practice the tolerance ends the run after a
    few sweeps.
    """

    max_sweeps: int = 100
    tolerance: float = 1e-10
    symmetry: Literal["raise", "symmetrize"] = "raise"
    symmetry_atol: float = 1e-9

    def __post_init__(self):
        # YAML reads exponents without a dot (1e-10) as strings
        for name, kind in (("max_sweeps", int), ("tolerance", float), ("symmetry_atol", float)):
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, kind(value))
            except (TypeError, ValueError) as e:
                raise ValueError(
                    f"{name} must be {kind.__name__}-like, got {value!r}"
                ) from e

        if self.max_sweeps < 0:
            raise ValueError(f"max_sweeps must be >= 0, got {self.max_sweeps}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.symmetry not in ("raise", "symmetrize"):
            raise ValueError(f"Unknown symmetry policy: {self.symmetry}")

    def max_rotations(self, n: int) -> int:
        """Total rotation budget for an n x n matrix."""
        return self.max_sweeps * max(n * (n - 1) // 2, 1)


@dataclass(frozen=True)
class EigenResult:
    """
    Eigen-decomposition of a symmetric matrix.

    Attributes:
        values: Eigenvalues of shape (N,), sorted ascending
        vectors: Eigenvectors of shape (N, N); vectors[k] belongs to values[k]
        residual: Largest off-diagonal magnitude left in the working matrix
        converged: Whether the residual fell below the solver tolerance
        n_rotations: Number of Jacobi rotations applied
    """

    values: NDArray[np.floating]
    vectors: NDArray[np.floating]
    residual: float
    converged: bool
    n_rotations: int

    def __post_init__(self):
        # Read-only buffers
        self.values.setflags(write=False)
        self.vectors.setflags(write=False)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def eigenvector_matrix(self) -> NDArray[np.floating]:
        """Orthonormal matrix V whose columns are the eigenvectors."""
        return self.vectors.T

    def pairs(self) -> list[Tuple[float, NDArray[np.floating]]]:
        """List of (eigenvalue, eigenvector) pairs in ascending order."""
        return [(float(lam), vec) for lam, vec in zip(self.values, self.vectors)]

    def reconstruct(self) -> NDArray[np.floating]:
        """Compute V diag(values) V^T."""
        V = self.eigenvector_matrix
        return (V * self.values) @ V.T


class JacobiEigensolver:
    """
    Computes all eigenpairs of a small dense symmetric matrix.

    The input is copied on entry; the working matrix and the rotation
    accumulator are owned by a single ``decompose`` call.

    Attributes:
        config: JacobiConfig controlling termination and symmetry handling
    """

    def __init__(self, config: Optional[JacobiConfig] = None):
        """
        Initialize the solver.

        Args:
            config: Solver configuration. If None, uses JacobiConfig defaults.
        """
        self.config = config or JacobiConfig()

    def decompose(self, matrix: Any) -> EigenResult:
        """
        Compute eigenvalues and eigenvectors.

        Args:
            matrix: Symmetric matrix of shape (N, N)

        Returns:
            EigenResult with eigenpairs sorted by ascending eigenvalue
        """
        A = self._prepare(matrix)
        n = A.shape[0]
        V = np.eye(n)

        budget = self.config.max_rotations(n)
        n_rotations = 0
        converged = False

        while True:
            p, q, magnitude = self._find_pivot(A)
            if magnitude < self.config.tolerance or magnitude == 0.0:
                converged = True
                break
            if n_rotations >= budget:
                break
            self._rotate(A, V, p, q)
            n_rotations += 1

        residual = off_diagonal_residual(A)

        if converged:
            logger.debug(f"Jacobi converged after {n_rotations} rotations (n={n})")
        else:
            logger.warning(
                f"Jacobi stopped at rotation cap ({budget}) with residual {residual:.2e}"
            )

        eigenvalues = np.diag(A).copy()
        order = np.argsort(eigenvalues, kind="stable")

        return EigenResult(
            values=eigenvalues[order],
            vectors=V[:, order].T.copy(),
            residual=residual,
            converged=converged,
            n_rotations=n_rotations,
        )

    def _prepare(self, matrix: Any) -> NDArray[np.floating]:
        """Copy the input and apply the symmetry policy."""
        A = as_square_matrix(matrix)

        if self.config.symmetry == "symmetrize":
            A_sym = symmetrize(A)
            if not np.allclose(A, A_sym, rtol=0.0, atol=self.config.symmetry_atol):
                logger.warning("Asymmetric input symmetrized as (M + M^T) / 2")
            return A_sym

        check_symmetric(A, atol=self.config.symmetry_atol)
        return A

    @staticmethod
    def _find_pivot(A: NDArray[np.floating]) -> Tuple[int, int, float]:
        """
        Locate the largest off-diagonal entry in the strict upper triangle.

        Ties resolve to the first entry in row-major order, which keeps the
        rotation sequence deterministic for identical input.

        Returns:
            (p, q, |A[p, q]|) with p < q, or (0, 0, 0.0) when N < 2
        """
        n = A.shape[0]
        if n < 2:
            return 0, 0, 0.0

        upper = np.abs(np.triu(A, k=1))
        flat_idx = int(np.argmax(upper))
        p, q = divmod(flat_idx, n)
        return p, q, float(upper[p, q])

    @staticmethod
    def _rotate(
        A: NDArray[np.floating],
        V: NDArray[np.floating],
        p: int,
        q: int,
    ) -> None:
        """Apply the Jacobi rotation zeroing A[p, q] to A and V in place."""
        App, Aqq, Apq = A[p, p], A[q, q], A[p, q]

        theta = 0.5 * math.atan2(2.0 * Apq, App - Aqq)
        c, s = math.cos(theta), math.sin(theta)

        col_p = A[:, p].copy()
        col_q = A[:, q].copy()
        new_p = c * col_p + s * col_q
        new_q = -s * col_p + c * col_q

        A[:, p] = new_p
        A[p, :] = new_p
        A[:, q] = new_q
        A[q, :] = new_q

        A[p, p] = c * c * App + 2.0 * s * c * Apq + s * s * Aqq
        A[q, q] = s * s * App - 2.0 * s * c * Apq + c * c * Aqq
        A[p, q] = 0.0
        A[q, p] = 0.0

        V_p = V[:, p].copy()
        V_q = V[:, q].copy()
        V[:, p] = c * V_p + s * V_q
        V[:, q] = -s * V_p + c * V_q


def eigen_decompose(matrix: Any, config: Optional[JacobiConfig] = None) -> EigenResult:
    """
    Eigen-decompose a symmetric matrix with the Jacobi method.

    Args:
        matrix: Symmetric matrix of shape (N, N)
        config: Optional solver configuration

    Returns:
        EigenResult with values ascending and vectors[k] matching values[k]
    """
    return JacobiEigensolver(config).decompose(matrix)
