"""Randomize mode: branch rewired variants from a baseline graph."""

from __future__ import annotations

import logging
from pathlib import Path
import random
from typing import Any, Mapping, Optional

from grid_stress.config.schema import RandomizeConfig
from grid_stress.graphs.analytics import run_analytics
from grid_stress.graphs.components import component_count
from grid_stress.graphs.randomize import randomize_edges, randomize_nodes
from grid_stress.graphs.store import GraphStore, read_graph, write_graph
from grid_stress.registry import register_mode
from grid_stress.tasks.base import TaskContext

logger = logging.getLogger(__name__)


def variant_path(directory: Path, index: int) -> Path:
    return directory / f"random{index}.graph"


def generate_variant(
    baseline: GraphStore,
    config: RandomizeConfig,
    *,
    rng: random.Random,
) -> Optional[GraphStore]:
    """Return a randomized copy of ``baseline``, or None if every attempt failed.

    With ``require_connected`` a variant is only accepted when it forms a
    single component; rejected variants are discarded and redrawn.
    """
    swaps = config.number_edge_swaps
    if swaps is None:
        swaps = baseline.edge_count()
    for attempt in range(1, config.max_attempts + 1):
        variant = baseline.copy()
        randomize_edges(variant, swaps, rng=rng, strict=config.strict_swaps)
        if config.node_ranges is not None:
            ranges = config.node_ranges
            randomize_nodes(
                variant,
                ranges.min_prod,
                ranges.max_prod,
                ranges.min_cons,
                ranges.max_cons,
                rng=rng,
            )
        if not config.require_connected:
            return variant
        components = component_count(variant, max_components=2)
        if components <= 1:
            return variant
        logger.debug("Attempt %d rejected: variant is not connected.", attempt)
    return None


def randomize_graphs(config: RandomizeConfig, *, rng: random.Random) -> list[Path]:
    baseline = read_graph(config.graph_filename)
    analytics = run_analytics(baseline, config.max_components)
    logger.info(
        "Baseline %s: %d nodes, %d edges, %d components.",
        config.graph_filename,
        analytics.num_nodes,
        analytics.num_edges,
        analytics.num_components,
    )
    if config.require_connected and analytics.num_components > 1:
        logger.warning(
            "Baseline graph has %d components; variants must be connected.",
            analytics.num_components,
        )

    written: list[Path] = []
    for index in range(config.number_graphs):
        variant = generate_variant(baseline, config, rng=rng)
        if variant is None:
            logger.error(
                "Variant %d was not connected after %d attempts; skipping.",
                index,
                config.max_attempts,
            )
            continue
        path = write_graph(variant, variant_path(config.output_directory, index))
        logger.info("Wrote %s (%d edges).", path, variant.edge_count())
        written.append(path)
    return written


def run(settings: Mapping[str, Any], *, context: TaskContext) -> list[Path]:
    config = RandomizeConfig.from_settings(settings)
    return randomize_graphs(config, rng=context.rng)


register_mode("Randomize", run)

__all__ = ["generate_variant", "randomize_graphs", "run", "variant_path"]
