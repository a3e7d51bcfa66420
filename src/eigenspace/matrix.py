"""
Square-matrix validation and symmetric-read helpers.

Every entry point of the package converts its input through
``as_square_matrix`` so the numeric routines always work on an owned
``float64`` copy and never alias the caller's data.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import sparse


class SpectralError(ValueError):
    """Base exception for invalid spectral input."""

    pass


class InvalidShapeError(SpectralError):
    """Raised when a matrix is not two-dimensional and square."""

    pass


class AsymmetricInputError(SpectralError):
    """Raised when a matrix that must be symmetric is not."""

    pass


def as_square_matrix(matrix: Any) -> NDArray[np.floating]:
    """
    Convert input to a fresh square float64 array.

    Args:
        matrix: Nested sequences, ndarray or scipy sparse matrix

    Returns:
        Owned copy of shape (N, N)

    Raises:
        InvalidShapeError: If the input is not a square 2-D matrix
        ValueError: If the input has non-numeric, NaN or infinite entries
    """
    if sparse.issparse(matrix):
        M = matrix.toarray().astype(np.float64)
    else:
        try:
            M = np.array(matrix, dtype=np.float64, copy=True)
        except (TypeError, ValueError) as e:
            if _is_ragged(matrix):
                raise InvalidShapeError(f"Matrix rows have inconsistent lengths: {e}") from e
            raise ValueError(f"Matrix entries must be numeric: {e}") from e

    if M.ndim != 2:
        raise InvalidShapeError(f"Matrix must be 2-D, got {M.ndim} dimension(s)")
    if M.shape[0] != M.shape[1]:
        raise InvalidShapeError(f"Matrix must be square, got shape {M.shape}")
    if not np.all(np.isfinite(M)):
        raise ValueError("Matrix contains NaN or infinite entries")

    return M


def _is_ragged(matrix: Any) -> bool:
    """Whether nested rows fail to form a rectangular 2-D grid."""
    try:
        grid = np.array(matrix, dtype=object)
    except ValueError:
        return True
    return grid.ndim < 2


def asymmetry(M: NDArray[np.floating]) -> float:
    """Largest absolute difference between M and its transpose."""
    if M.size == 0:
        return 0.0
    return float(np.max(np.abs(M - M.T)))


def check_symmetric(M: NDArray[np.floating], atol: float = 1e-9) -> None:
    """
    Raise if M is not symmetric within tolerance.

    Args:
        M: Square matrix
        atol: Largest tolerated |M[i, j] - M[j, i]|

    Raises:
        AsymmetricInputError: If the deviation exceeds atol
    """
    deviation = asymmetry(M)
    if deviation > atol:
        raise AsymmetricInputError(
            f"Matrix is not symmetric. Max deviation: {deviation:.2e} (atol={atol:.0e})"
        )


def symmetrize(M: NDArray[np.floating]) -> NDArray[np.floating]:
    """Return (M + M^T) / 2."""
    return (M + M.T) / 2


def off_diagonal_residual(M: NDArray[np.floating]) -> float:
    """
    Largest absolute off-diagonal entry.

    This is the quantity the Jacobi solver drives towards zero; a value
    below the solver tolerance means M is numerically diagonal.
    """
    n = M.shape[0]
    if n < 2:
        return 0.0
    upper = np.abs(np.triu(M, k=1))
    return float(upper.max())


def trace(M: NDArray[np.floating]) -> float:
    """Sum of the diagonal."""
    return float(np.trace(M))
