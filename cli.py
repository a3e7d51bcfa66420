#!/usr/bin/env python3
"""
CLI for Eigenspace.

Usage:
    python cli.py decompose --config config.yaml
    python cli.py decompose --config config.yaml --target adjacency
    python cli.py embed --config config.yaml
    python cli.py info
"""

from typing import Optional

import fire
import numpy as np
import yaml
from loguru import logger

from eigenspace.config import build_graph, parse_config
from eigenspace.graph import bridge_nodes, build_laplacian, connected_components
from eigenspace.jacobi import eigen_decompose
from eigenspace.spectral import (
    SpectralEmbedding,
    algebraic_connectivity,
    count_zero_eigenvalues,
)


def load_config(config_path: Optional[str]) -> dict:
    """Load configuration from YAML file."""
    if config_path is None:
        return {}
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class CLI:
    """Eigenspace CLI."""

    def decompose(
        self,
        config: Optional[str] = "config.yaml",
        target: str = "laplacian",
    ) -> dict:
        """
        Eigen-decompose the configured graph.

        Args:
            config: Path to configuration YAML file (None for defaults)
            target: Matrix to decompose, 'laplacian' or 'adjacency'

        Returns:
            Dictionary with eigenvalues, residual and convergence flag
        """
        logger.info(f"Loading config from {config}")
        graph_cfg, solver_cfg, _ = parse_config(load_config(config))

        adjacency, _ = build_graph(graph_cfg)
        logger.info(f"Built {graph_cfg.kind} graph with {adjacency.shape[0]} nodes")

        if target == "laplacian":
            matrix = build_laplacian(adjacency)
        elif target == "adjacency":
            matrix = adjacency
        else:
            raise ValueError(f"Unknown target: {target}")

        result = eigen_decompose(matrix, solver_cfg)

        logger.info(f"Eigenvalues: {np.round(result.values, 6).tolist()}")
        logger.info(
            f"Converged: {result.converged} after {result.n_rotations} rotations "
            f"(residual {result.residual:.2e})"
        )
        if target == "laplacian" and len(result) > 1:
            n_components, _ = connected_components(adjacency)
            logger.info(f"Connected components: {n_components}")
            logger.info(f"Zero eigenvalues: {count_zero_eigenvalues(result.values)}")
            logger.info(f"Fiedler value: {algebraic_connectivity(result):.6f}")

        return {
            "values": result.values.tolist(),
            "residual": result.residual,
            "converged": result.converged,
        }

    def embed(self, config: Optional[str] = "config.yaml") -> list:
        """
        Compute the spectral embedding of the configured graph.

        Args:
            config: Path to configuration YAML file (None for defaults)

        Returns:
            Per-node coordinate lists
        """
        logger.info(f"Loading config from {config}")
        graph_cfg, solver_cfg, embed_cfg = parse_config(load_config(config))

        adjacency, communities = build_graph(graph_cfg)
        logger.info(f"Built {graph_cfg.kind} graph with {adjacency.shape[0]} nodes")

        embedder = SpectralEmbedding(
            dims=embed_cfg.dims,
            skip_trivial=embed_cfg.skip_trivial,
            scale=embed_cfg.scale,
            solver_config=solver_cfg,
        )
        result = embedder.embed(adjacency)

        logger.info(f"Embedding axes: eigenvectors {list(result.indices)}")
        logger.info(f"Axis eigenvalues: {np.round(result.eigenvalues, 6).tolist()}")
        if communities is not None:
            bridges = bridge_nodes(adjacency, communities)
            logger.info(f"Bridge nodes: {bridges.tolist()}")

        return [list(point) for point in result.points()]

    def info(self) -> None:
        """Print information about the package."""
        logger.info("Eigenspace")
        logger.info("=" * 40)
        logger.info("Jacobi eigensolver and graph-Laplacian spectral embedding")
        logger.info("")
        logger.info("Commands:")
        logger.info("  decompose - Eigenvalues of the configured graph's Laplacian or adjacency")
        logger.info("  embed     - Spectral embedding coordinates of the configured graph")
        logger.info("  info      - Print this information")


def main():
    """Main entry point."""
    fire.Fire(CLI)


if __name__ == "__main__":
    main()
