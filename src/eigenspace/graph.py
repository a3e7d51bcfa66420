"""
Graph Laplacian construction and adjacency utilities.

This module turns a weighted adjacency matrix into the combinatorial
Laplacian L = D - W, whose spectrum encodes the graph's connectivity: the
multiplicity of the eigenvalue 0 equals the number of connected components
and the second-smallest eigenvalue (Fiedler value) measures how well
connected the graph is.
"""

from typing import Any, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import sparse
from scipy.sparse.csgraph import connected_components as _csgraph_components

from eigenspace.matrix import as_square_matrix, check_symmetric


def validate_adjacency(
    adjacency: Any,
    atol: float = 1e-9,
) -> NDArray[np.floating]:
    """
    Validate an undirected weighted adjacency matrix.

    Args:
        adjacency: Matrix of shape (N, N)
        atol: Symmetry tolerance

    Returns:
        Owned float64 copy of the adjacency matrix

    Raises:
        InvalidShapeError: If the matrix is not square
        AsymmetricInputError: If the matrix is not symmetric
        ValueError: If any weight is negative
    """
    W = as_square_matrix(adjacency)
    check_symmetric(W, atol=atol)

    if np.any(W < 0):
        i, j = np.argwhere(W < 0)[0]
        raise ValueError(f"Edge weights must be non-negative, got W[{i}, {j}] = {W[i, j]}")

    return W


def build_laplacian(adjacency: Any) -> NDArray[np.floating]:
    """
    Compute the combinatorial graph Laplacian L = D - W.

    Off-diagonal entries are the negated edge weights and each diagonal
    entry is the weighted degree of its node. Self loops on the diagonal of
    the adjacency matrix are ignored, so every row of L sums to zero.

    Args:
        adjacency: Symmetric non-negative weight matrix of shape (N, N)

    Returns:
        L: Laplacian matrix of shape (N, N)
    """
    W = validate_adjacency(adjacency)
    np.fill_diagonal(W, 0.0)

    # L = D - W
    D = np.diag(W.sum(axis=1))
    L = D - W

    return L


def degrees(adjacency: Any) -> NDArray[np.floating]:
    """Weighted degree of every node, excluding self loops."""
    W = validate_adjacency(adjacency)
    np.fill_diagonal(W, 0.0)
    return W.sum(axis=1)


def connected_components(adjacency: Any) -> Tuple[int, NDArray[np.integer]]:
    """
    Label the connected components of an undirected graph.

    Args:
        adjacency: Symmetric weight matrix of shape (N, N)

    Returns:
        n_components: Number of connected components
        labels: Component label of each node, shape (N,)
    """
    W = validate_adjacency(adjacency)
    n_components, labels = _csgraph_components(
        sparse.csr_matrix(W), directed=False, return_labels=True
    )
    return int(n_components), labels


def edge_count(adjacency: Any) -> int:
    """Number of undirected edges (non-zero upper-triangle entries)."""
    W = as_square_matrix(adjacency)
    return int(np.count_nonzero(np.triu(W, k=1)))


def toggle_edge(
    adjacency: Any,
    i: int,
    j: int,
    min_edges: int = 8,
    weight: float = 1.0,
) -> NDArray[np.floating]:
    """
    Add or remove the undirected edge (i, j).

    An existing edge is only removed while the graph holds more than
    ``min_edges`` edges, so repeated random toggling cannot thin the graph
    out indefinitely. Toggling a node with itself does nothing.

    Args:
        adjacency: Symmetric weight matrix of shape (N, N)
        i: First endpoint
        j: Second endpoint
        min_edges: Edge count at or below which removals are refused
        weight: Weight given to a newly added edge

    Returns:
        New adjacency matrix; the input is never modified
    """
    W = validate_adjacency(adjacency)
    n = W.shape[0]
    if not (0 <= i < n and 0 <= j < n):
        raise IndexError(f"Node indices ({i}, {j}) out of range for {n} nodes")

    if i == j:
        return W

    if W[i, j]:
        if edge_count(W) <= min_edges:
            return W
        W[i, j] = W[j, i] = 0.0
    else:
        W[i, j] = W[j, i] = weight

    return W


def bridge_nodes(adjacency: Any, communities: Sequence[int]) -> NDArray[np.integer]:
    """
    Find nodes whose neighbours span more than one community.

    Args:
        adjacency: Symmetric weight matrix of shape (N, N)
        communities: Community label of each node

    Returns:
        Sorted indices of bridge nodes
    """
    W = validate_adjacency(adjacency)
    labels = np.asarray(communities)
    if labels.shape != (W.shape[0],):
        raise ValueError(
            f"Expected {W.shape[0]} community labels, got shape {labels.shape}"
        )

    bridges = []
    for i in range(W.shape[0]):
        neighbours = np.flatnonzero(W[i])
        neighbours = neighbours[neighbours != i]
        if len(np.unique(labels[neighbours])) > 1:
            bridges.append(i)

    return np.array(bridges, dtype=int)
