"""Graph engine: storage, components, rewiring, analytics and stress runs."""

from grid_stress.graphs.analytics import GraphAnalytics, run_analytics
from grid_stress.graphs.components import find_components
from grid_stress.graphs.randomize import cut_edges, randomize_edges, randomize_nodes
from grid_stress.graphs.store import GraphStore, Node, read_graph, write_graph
from grid_stress.graphs.stress import StressResult, StressSummary, run_stress_test

__all__ = [
    "GraphAnalytics",
    "GraphStore",
    "Node",
    "StressResult",
    "StressSummary",
    "cut_edges",
    "find_components",
    "randomize_edges",
    "randomize_nodes",
    "read_graph",
    "run_analytics",
    "run_stress_test",
    "write_graph",
]
