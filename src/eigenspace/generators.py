"""
Adjacency generators for example graphs.

Provides the small graphs used to demonstrate Laplacian spectra: rings
(Fourier-mode eigenvectors), disjoint cliques (repeated zero eigenvalue)
and planted-partition community graphs (clustered spectral embedding).
"""

from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray


def cycle_adjacency(n_nodes: int) -> NDArray[np.floating]:
    """
    Create a ring graph adjacency matrix.

    Ring graphs have well-known spectral properties:
    - Laplacian eigenvalues: lambda_k = 2 - 2*cos(2*pi*k/n)
    - Eigenvectors: Fourier modes
    """
    if n_nodes < 3:
        raise ValueError(f"A cycle needs at least 3 nodes, got {n_nodes}")

    W = np.zeros((n_nodes, n_nodes))
    for i in range(n_nodes):
        j = (i + 1) % n_nodes
        W[i, j] = W[j, i] = 1.0
    return W


def path_adjacency(n_nodes: int) -> NDArray[np.floating]:
    """Create a path graph 0-1-...-(n-1)."""
    if n_nodes < 1:
        raise ValueError(f"n_nodes must be positive, got {n_nodes}")

    W = np.zeros((n_nodes, n_nodes))
    for i in range(n_nodes - 1):
        W[i, i + 1] = W[i + 1, i] = 1.0
    return W


def complete_adjacency(n_nodes: int) -> NDArray[np.floating]:
    """Create a complete graph (clique)."""
    if n_nodes < 1:
        raise ValueError(f"n_nodes must be positive, got {n_nodes}")
    return np.ones((n_nodes, n_nodes)) - np.eye(n_nodes)


def disjoint_cliques_adjacency(sizes: Sequence[int]) -> NDArray[np.floating]:
    """
    Create a block-diagonal union of cliques with no edges between them.

    The Laplacian of the result has eigenvalue 0 with multiplicity
    len(sizes).
    """
    n_total = int(sum(sizes))
    W = np.zeros((n_total, n_total))

    start = 0
    for size in sizes:
        W[start : start + size, start : start + size] = complete_adjacency(size)
        start += size
    return W


def planted_partition_adjacency(
    community_sizes: Sequence[int] = (8, 8, 8),
    p_intra: float = 0.55,
    p_inter: float = 0.06,
    seed: Optional[int] = None,
) -> Tuple[NDArray[np.floating], NDArray[np.integer]]:
    """
    Generate a random graph with planted community structure.

    Each pair of nodes is joined with probability ``p_intra`` when both
    belong to the same community and ``p_inter`` otherwise. Nodes left
    isolated are then connected to the first other member of their own
    community, so no node has degree zero.

    Args:
        community_sizes: Number of nodes in each community
        p_intra: Edge probability within a community
        p_inter: Edge probability between communities
        seed: Random seed for reproducibility

    Returns:
        adjacency: Symmetric 0/1 matrix of shape (N, N)
        communities: Community label of each node, shape (N,)
    """
    for name, p in (("p_intra", p_intra), ("p_inter", p_inter)):
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"{name} must be in [0, 1], got {p}")

    rng = np.random.default_rng(seed)
    communities = np.repeat(np.arange(len(community_sizes)), community_sizes)
    n = len(communities)

    W = np.zeros((n, n))
    for i in range(n):
        for j in range(i + 1, n):
            p = p_intra if communities[i] == communities[j] else p_inter
            if rng.random() < p:
                W[i, j] = W[j, i] = 1.0

    # Connect isolated nodes to a member of their own community
    for i in range(n):
        if W[i].sum() == 0:
            peers = np.flatnonzero((communities == communities[i]) & (np.arange(n) != i))
            if len(peers) > 0:
                j = peers[0]
                W[i, j] = W[j, i] = 1.0

    return W, communities
