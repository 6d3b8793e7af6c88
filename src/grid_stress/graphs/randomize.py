"""Edge-set rewiring, node resampling and edge cutting primitives."""

from __future__ import annotations

import logging
import math
import numbers
import random
from typing import Optional

import networkx as nx

from grid_stress.errors import InvalidParameterError
from grid_stress.graphs.store import GraphStore, Node

logger = logging.getLogger(__name__)


def resolve_rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def _require_non_negative_int(value: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise InvalidParameterError(f"{label} must be a non-negative integer, got {value!r}.")
    return int(value)


def _ordered_range(low: float, high: float, label: str) -> tuple[float, float]:
    if low > high:
        logger.warning("%s range [%s, %s] is inverted; swapping bounds.", label, low, high)
        return high, low
    return low, high


def randomize_edges(
    store: GraphStore,
    num_swaps: int,
    *,
    rng: Optional[random.Random] = None,
    strict: bool = False,
) -> int:
    """Rewire the edge set in place and return the resulting edge count.

    The default procedure exchanges the lower ("column") endpoint of two
    uniformly chosen edges ``num_swaps`` times, choosing positions with
    replacement. It keeps the edge count approximately, not per-node degrees:
    a swap that turns a pair into a self-loop drops it and two pairs that
    collapse onto the same cell merge. With ``strict=True`` the textbook
    double-edge swap is used instead, which rejects such swaps and preserves
    every degree exactly.

    The matrix is only rewritten after all swaps are drawn, so the store is
    never left half-rewired.
    """
    num_swaps = _require_non_negative_int(num_swaps, "num_swaps")
    rng = resolve_rng(rng)
    if strict:
        return _double_edge_swap(store, num_swaps, rng)

    pairs = [[row, col] for row, col in store.edges()]
    if not pairs or num_swaps == 0:
        return len(pairs)

    for _ in range(num_swaps):
        first = rng.randrange(len(pairs))
        second = rng.randrange(len(pairs))
        pairs[first][1], pairs[second][1] = pairs[second][1], pairs[first][1]

    store.clear_edges()
    dropped = 0
    for row, col in pairs:
        if row == col:
            dropped += 1
            continue
        store.set_edge(row, col)
    edge_count = store.edge_count()
    logger.debug(
        "Rewired %d edges with %d swaps: %d self-loops dropped, %d merged.",
        len(pairs),
        num_swaps,
        dropped,
        len(pairs) - dropped - edge_count,
    )
    return edge_count


def _double_edge_swap(store: GraphStore, num_swaps: int, rng: random.Random) -> int:
    graph = store.to_networkx()
    if num_swaps == 0 or graph.number_of_edges() < 2 or graph.number_of_nodes() < 4:
        return graph.number_of_edges()
    try:
        nx.double_edge_swap(
            graph,
            nswap=num_swaps,
            max_tries=max(100, num_swaps * 10),
            seed=rng,
        )
    except nx.NetworkXAlgorithmError as exc:
        # Swaps completed before the limit stay valid.
        logger.warning("Double-edge swap stopped early: %s", exc)
    store.clear_edges()
    for u, v in graph.edges():
        store.set_edge(u, v)
    return store.edge_count()


def randomize_nodes(
    store: GraphStore,
    min_prod: float,
    max_prod: float,
    min_cons: float,
    max_cons: float,
    *,
    rng: Optional[random.Random] = None,
) -> None:
    """Resample every node's production and consumption uniformly."""
    rng = resolve_rng(rng)
    min_prod, max_prod = _ordered_range(float(min_prod), float(max_prod), "production")
    min_cons, max_cons = _ordered_range(float(min_cons), float(max_cons), "consumption")
    for index in range(store.node_count()):
        store.set_node(
            index,
            Node(
                produced=rng.uniform(min_prod, max_prod),
                consumed=rng.uniform(min_cons, max_cons),
            ),
        )


def validate_cut_percent(percent: float) -> float:
    try:
        value = float(percent)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"Edge cut percentage must be a number, got {percent!r}.") from exc
    if not 0.0 < value <= 1.0:
        raise InvalidParameterError(
            f"Edge cut percentage must be in (0, 1], got {value}.",
            context={"percent": value},
        )
    return value


def cut_edges(
    store: GraphStore,
    percent: float,
    *,
    rng: Optional[random.Random] = None,
) -> list[tuple[int, int]]:
    """Remove ``max(1, floor(edge_count * percent))`` distinct random edges.

    Returns the removed ``(row, col)`` pairs; an edgeless graph is left as is.
    """
    percent = validate_cut_percent(percent)
    rng = resolve_rng(rng)
    edges = list(store.edges())
    if not edges:
        return []
    cut_count = min(len(edges), max(1, math.floor(len(edges) * percent)))
    removed = rng.sample(edges, cut_count)
    for row, col in removed:
        store.set_edge(row, col, False)
    return removed


__all__ = [
    "cut_edges",
    "randomize_edges",
    "randomize_nodes",
    "resolve_rng",
    "validate_cut_percent",
]
