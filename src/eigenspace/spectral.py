"""
Spectral embedding of graphs from Laplacian eigenvectors.

Each node is mapped to a point whose coordinates are its components in
the low-frequency eigenvectors of the graph Laplacian. Connected nodes end
up close together, and community structure shows up as clusters.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from eigenspace.graph import build_laplacian
from eigenspace.jacobi import EigenResult, JacobiConfig, JacobiEigensolver


@dataclass(frozen=True)
class EmbeddingResult:
    """
    Per-node coordinates of a spectral embedding.

    Attributes:
        coordinates: Matrix of shape (N, d); row i holds node i's coordinates
        eigenvalues: Laplacian eigenvalues of the selected axes, shape (d,)
        indices: Positions of the selected eigenvectors in the sorted spectrum
        scale: Factor applied to the eigenvector components
        eigen: Full eigen-decomposition of the Laplacian
    """

    coordinates: NDArray[np.floating]
    eigenvalues: NDArray[np.floating]
    indices: Tuple[int, ...]
    scale: float
    eigen: EigenResult

    def __post_init__(self):
        self.coordinates.setflags(write=False)
        self.eigenvalues.setflags(write=False)

    @property
    def n_nodes(self) -> int:
        return self.coordinates.shape[0]

    @property
    def dims(self) -> int:
        return self.coordinates.shape[1]

    def points(self) -> list[Tuple[float, ...]]:
        """Coordinates as one tuple per node."""
        return [tuple(float(x) for x in row) for row in self.coordinates]


class SpectralEmbedding:
    """
    Computes spectral embeddings from adjacency matrices.

    The pipeline is adjacency -> Laplacian -> Jacobi eigenpairs -> selected
    eigenvectors. For a connected graph the smallest Laplacian eigenvalue is
    0 with a constant eigenvector that carries no positional information,
    so it is skipped by default.

    Attributes:
        dims: Number of coordinate axes to produce
        skip_trivial: Whether to skip the first (constant) eigenvector
        scale: Factor applied to every coordinate
        solver: JacobiEigensolver used for the decomposition
    """

    def __init__(
        self,
        dims: int = 2,
        skip_trivial: bool = True,
        scale: float = 1.0,
        solver_config: Optional[JacobiConfig] = None,
    ):
        """
        Initialize spectral embedding.

        Args:
            dims: Number of coordinate axes (eigenvectors) to use
            skip_trivial: Whether to skip the eigenvector of the smallest
                eigenvalue. With several connected components more than one
                eigenvalue is ~0 and the next eigenvector is trivial too;
                that case is left to the caller.
            scale: Factor applied to the eigenvector components
            solver_config: Configuration for the Jacobi eigensolver
        """
        if dims < 0:
            raise ValueError(f"dims must be >= 0, got {dims}")

        self.dims = dims
        self.skip_trivial = skip_trivial
        self.scale = scale
        self.solver = JacobiEigensolver(solver_config)

    def embed(self, adjacency: Any) -> EmbeddingResult:
        """
        Compute the spectral embedding of a graph.

        Args:
            adjacency: Symmetric non-negative weight matrix of shape (N, N)

        Returns:
            EmbeddingResult with coordinates of shape (N, d), where d is
            dims clamped to the number of available eigenvectors
        """
        L = build_laplacian(adjacency)
        eigen = self.solver.decompose(L)
        return self.embed_from_eigen(eigen)

    def embed_from_eigen(self, eigen: EigenResult) -> EmbeddingResult:
        """
        Select embedding axes from a precomputed Laplacian decomposition.

        Args:
            eigen: Eigen-decomposition of a graph Laplacian

        Returns:
            EmbeddingResult built from eigen.vectors[start : start + dims]
        """
        n = len(eigen)
        start = 1 if self.skip_trivial else 0
        stop = min(start + self.dims, n)
        indices = tuple(range(start, stop))

        n_zero = count_zero_eigenvalues(eigen.values)
        if n_zero > 1:
            logger.debug(
                f"Laplacian has {n_zero} near-zero eigenvalues; "
                f"graph is disconnected and low axes may be trivial"
            )

        if indices:
            coordinates = self.scale * eigen.vectors[list(indices)].T
        else:
            coordinates = np.zeros((n, 0))

        return EmbeddingResult(
            coordinates=np.ascontiguousarray(coordinates),
            eigenvalues=eigen.values[list(indices)].copy(),
            indices=indices,
            scale=self.scale,
            eigen=eigen,
        )


def embed(
    adjacency: Any,
    dims: int = 2,
    skip_trivial: bool = True,
    scale: float = 1.0,
    config: Optional[JacobiConfig] = None,
) -> EmbeddingResult:
    """
    Spectral embedding of a graph in a single call.

    Args:
        adjacency: Symmetric non-negative weight matrix of shape (N, N)
        dims: Number of coordinate axes
        skip_trivial: Start at eigenvector 1 instead of 0
        scale: Factor applied to the coordinates
        config: Optional Jacobi solver configuration

    Returns:
        EmbeddingResult
    """
    embedder = SpectralEmbedding(
        dims=dims,
        skip_trivial=skip_trivial,
        scale=scale,
        solver_config=config,
    )
    return embedder.embed(adjacency)


def count_zero_eigenvalues(
    eigenvalues: NDArray[np.floating],
    atol: float = 1e-6,
) -> int:
    """
    Count eigenvalues within atol of zero.

    For a graph Laplacian this is the number of connected components.
    """
    return int(np.sum(np.abs(eigenvalues) < atol))


def algebraic_connectivity(eigen: EigenResult) -> float:
    """
    Fiedler value: the second-smallest Laplacian eigenvalue.

    It is ~0 exactly when the graph is disconnected.
    """
    if len(eigen) < 2:
        raise ValueError("Algebraic connectivity needs at least 2 nodes")
    return float(eigen.values[1])


def fiedler_vector(eigen: EigenResult) -> NDArray[np.floating]:
    """Eigenvector of the second-smallest Laplacian eigenvalue."""
    if len(eigen) < 2:
        raise ValueError("Fiedler vector needs at least 2 nodes")
    return eigen.vectors[1]


def compute_eigenvalue_gaps(eigenvalues: NDArray[np.floating]) -> NDArray[np.floating]:
    """
    Compute gaps between consecutive eigenvalues.

    Large gaps indicate natural boundaries between geometric scales.

    Args:
        eigenvalues: Array of eigenvalues

    Returns:
        gaps: Array of gaps (length n-1)
    """
    return np.diff(eigenvalues)
