"""Connected-component discovery over the current edge set."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from grid_stress.graphs.store import GraphStore


def _bfs_component(
    seed: int,
    adjacency: Sequence[Sequence[int]],
    visited: list[bool],
) -> list[int]:
    component = [seed]
    visited[seed] = True
    queue = deque([seed])
    while queue:
        node = queue.popleft()
        for neighbor in adjacency[node]:
            if not visited[neighbor]:
                visited[neighbor] = True
                component.append(neighbor)
                queue.append(neighbor)
    return component


def find_components(store: GraphStore, max_components: int = -1) -> list[list[int]]:
    """Partition the nodes into connected components.

    Seeds are taken in ascending index order and each component lists its
    nodes in breadth-first visitation order. When ``max_components`` is
    positive, discovery stops once that many components have been found and
    the partial list is returned; ``max_components <= 0`` means no cap.
    """
    adjacency = store.adjacency()
    visited = [False] * store.node_count()
    components: list[list[int]] = []
    for seed in range(store.node_count()):
        if visited[seed]:
            continue
        components.append(_bfs_component(seed, adjacency, visited))
        if 0 < max_components <= len(components):
            break
    return components


def component_count(store: GraphStore, max_components: int = -1) -> int:
    return len(find_components(store, max_components=max_components))


def is_connected(store: GraphStore) -> bool:
    """True when the graph forms a single component (or is empty)."""
    return component_count(store, max_components=2) <= 1


__all__ = ["component_count", "find_components", "is_connected"]
