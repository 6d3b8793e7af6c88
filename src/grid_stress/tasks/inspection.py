"""Test mode: load a graph and report its baseline analytics."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from grid_stress.config.schema import InspectConfig
from grid_stress.graphs.analytics import GraphAnalytics, run_analytics
from grid_stress.graphs.store import read_graph
from grid_stress.registry import register_mode
from grid_stress.tasks.base import TaskContext

logger = logging.getLogger(__name__)


def inspect_graph(config: InspectConfig) -> GraphAnalytics:
    store = read_graph(config.graph_filename)
    analytics = run_analytics(store, config.max_components)
    logger.info(
        "Graph %s: %d nodes, %d edges, %d components (%d powered), "
        "%.2f%% average power supplied.",
        config.graph_filename,
        analytics.num_nodes,
        analytics.num_edges,
        analytics.num_components,
        analytics.num_components_powered,
        analytics.avg_power_percentage * 100,
    )
    if logger.isEnabledFor(logging.DEBUG):
        for index, (node, neighbors) in enumerate(zip(store.nodes, store.adjacency())):
            logger.debug(
                "Node%d Produces: %s Consumes: %s Neighbors: %s",
                index,
                node.produced,
                node.consumed,
                neighbors,
            )
    return analytics


def run(settings: Mapping[str, Any], *, context: TaskContext) -> GraphAnalytics:
    return inspect_graph(InspectConfig.from_settings(settings))


register_mode("Test", run)

__all__ = ["inspect_graph", "run"]
