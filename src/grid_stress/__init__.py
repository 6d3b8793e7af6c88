"""Power distribution graph randomization and stress testing."""

from grid_stress.graphs import (
    GraphAnalytics,
    GraphStore,
    Node,
    StressResult,
    find_components,
    read_graph,
    run_analytics,
    run_stress_test,
    write_graph,
)

__version__ = "0.1.0"

__all__ = [
    "GraphAnalytics",
    "GraphStore",
    "Node",
    "StressResult",
    "__version__",
    "find_components",
    "read_graph",
    "run_analytics",
    "run_stress_test",
    "write_graph",
]
