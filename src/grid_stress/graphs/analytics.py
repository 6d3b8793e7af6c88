"""Per-component supply adequacy analytics."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from grid_stress.graphs.components import find_components
from grid_stress.graphs.store import GraphStore


@dataclass(frozen=True)
class ComponentPower:
    nodes: tuple[int, ...]
    produced: float
    consumed: float

    @property
    def powered(self) -> bool:
        return self.produced >= self.consumed

    @property
    def adequacy(self) -> float:
        """``min(1, produced / consumed)``; consumed is never zero."""
        return min(1.0, self.produced / self.consumed)


@dataclass(frozen=True)
class GraphAnalytics:
    num_nodes: int
    num_edges: int
    num_components: int
    num_components_powered: int
    avg_power_percentage: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def component_power(store: GraphStore, component: Sequence[int]) -> ComponentPower:
    produced = 0.0
    consumed = 0.0
    for index in component:
        node = store.node(index)
        produced += node.produced
        consumed += node.consumed
    return ComponentPower(nodes=tuple(component), produced=produced, consumed=consumed)


def summarize_components(
    store: GraphStore,
    components: Sequence[Sequence[int]],
) -> GraphAnalytics:
    powers = [component_power(store, component) for component in components]
    # An empty graph has no components; its adequacy is reported as 0.
    average = sum(power.adequacy for power in powers) / len(powers) if powers else 0.0
    return GraphAnalytics(
        num_nodes=store.node_count(),
        num_edges=store.edge_count(),
        num_components=len(powers),
        num_components_powered=sum(1 for power in powers if power.powered),
        avg_power_percentage=average,
    )


def run_analytics(store: GraphStore, max_components: int = -1) -> GraphAnalytics:
    """Compute components and aggregate their produced/consumed totals."""
    components = find_components(store, max_components=max_components)
    return summarize_components(store, components)


__all__ = [
    "ComponentPower",
    "GraphAnalytics",
    "component_power",
    "run_analytics",
    "summarize_components",
]
