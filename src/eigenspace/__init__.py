"""
Eigenspace: spectral analysis of small graphs.

A Jacobi eigensolver for dense symmetric matrices and the graph-Laplacian
spectral-embedding pipeline built on it.

Key concepts:
- Builds the combinatorial Laplacian L = D - W from a weighted adjacency matrix
- Decomposes symmetric matrices into sorted, orthonormal eigenpairs (Jacobi rotations)
- Reports convergence explicitly instead of silently returning a capped estimate
- Embeds nodes using the low-frequency Laplacian eigenvectors
- Exposes connectivity through the spectrum (zero multiplicity, Fiedler value)
"""

__version__ = "0.1.0"

from eigenspace.graph import (
    bridge_nodes,
    build_laplacian,
    connected_components,
    edge_count,
    toggle_edge,
)
from eigenspace.jacobi import EigenResult, JacobiConfig, JacobiEigensolver, eigen_decompose
from eigenspace.matrix import AsymmetricInputError, InvalidShapeError, SpectralError
from eigenspace.spectral import (
    EmbeddingResult,
    SpectralEmbedding,
    algebraic_connectivity,
    count_zero_eigenvalues,
    embed,
    fiedler_vector,
)

__all__ = [
    # Core
    "build_laplacian",
    "eigen_decompose",
    "embed",
    "JacobiEigensolver",
    "JacobiConfig",
    "EigenResult",
    "SpectralEmbedding",
    "EmbeddingResult",
    # Errors
    "SpectralError",
    "InvalidShapeError",
    "AsymmetricInputError",
    # Graph utilities
    "connected_components",
    "edge_count",
    "toggle_edge",
    "bridge_nodes",
    # Spectrum analysis
    "algebraic_connectivity",
    "fiedler_vector",
    "count_zero_eigenvalues",
]
