"""Configuration dataclasses for graph construction and embedding runs."""

from dataclasses import dataclass, field, fields
from typing import Any, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from eigenspace.generators import (
    cycle_adjacency,
    disjoint_cliques_adjacency,
    path_adjacency,
    planted_partition_adjacency,
)
from eigenspace.jacobi import JacobiConfig


GRAPH_KINDS = ("cycle", "path", "cliques", "communities", "matrix")


@dataclass
class GraphConfig:
    """Which graph to build."""

    kind: str = "cycle"
    n_nodes: int = 8

    # cliques / communities
    sizes: list[int] = field(default_factory=lambda: [8, 8, 8])
    p_intra: float = 0.55
    p_inter: float = 0.06
    seed: Optional[int] = 42

    # explicit adjacency
    adjacency: Optional[list[list[float]]] = None


@dataclass
class EmbeddingConfig:
    """Configuration for a spectral embedding run."""

    dims: int = 2
    skip_trivial: bool = True
    scale: float = 1.0


def _from_section(cls, section: Optional[dict]) -> Any:
    """Build a dataclass from a config section, rejecting unknown keys."""
    section = section or {}
    known = {f.name for f in fields(cls)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**section)


def parse_config(cfg: dict) -> Tuple[GraphConfig, JacobiConfig, EmbeddingConfig]:
    """
    Split a loaded YAML document into typed configs.

    Expected top-level sections are ``graph``, ``solver`` and ``embedding``;
    each is optional and falls back to defaults.
    """
    cfg = cfg or {}
    return (
        _from_section(GraphConfig, cfg.get("graph")),
        _from_section(JacobiConfig, cfg.get("solver")),
        _from_section(EmbeddingConfig, cfg.get("embedding")),
    )


def build_graph(config: GraphConfig) -> Tuple[NDArray[np.floating], Optional[NDArray]]:
    """
    Build the adjacency matrix described by a GraphConfig.

    Returns:
        adjacency: Matrix of shape (N, N)
        communities: Community labels for 'cliques' and 'communities', else None
    """
    if config.kind == "cycle":
        return cycle_adjacency(config.n_nodes), None
    elif config.kind == "path":
        return path_adjacency(config.n_nodes), None
    elif config.kind == "cliques":
        communities = np.repeat(np.arange(len(config.sizes)), config.sizes)
        return disjoint_cliques_adjacency(config.sizes), communities
    elif config.kind == "communities":
        return planted_partition_adjacency(
            community_sizes=config.sizes,
            p_intra=config.p_intra,
            p_inter=config.p_inter,
            seed=config.seed,
        )
    elif config.kind == "matrix":
        if config.adjacency is None:
            raise ValueError("graph.kind 'matrix' requires graph.adjacency")
        return np.asarray(config.adjacency, dtype=np.float64), None
    else:
        raise ValueError(f"Unknown graph kind: {config.kind} (expected one of {GRAPH_KINDS})")
