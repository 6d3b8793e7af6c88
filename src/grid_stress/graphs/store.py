"""Node and edge storage for power distribution graphs.

Edges live in a strictly lower-triangular boolean matrix: the unordered pair
``{i, j}`` is stored at ``(max(i, j), min(i, j))`` so every pair owns exactly
one cell. Nodes are addressed by their dense index, which is also their line
number in the graph file format::

    produced,consumed[,neighbor]*
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
import logging
import math
import operator
from pathlib import Path
from typing import Any, Optional, Union

import networkx as nx
import numpy as np

from grid_stress.errors import GraphFormatError, GraphIOError, InvalidEdgeError
from grid_stress.io_utils import read_text, write_text_atomic

CONSUMPTION_EPSILON = 1e-6

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """Production/consumption quantities carried by one node.

    ``consumed`` is always strictly positive (values <= 0 are clamped to
    ``CONSUMPTION_EPSILON``) and ``produced`` is never negative.
    """

    produced: float = 0.0
    consumed: float = CONSUMPTION_EPSILON

    def __post_init__(self) -> None:
        produced = float(self.produced)
        consumed = float(self.consumed)
        object.__setattr__(self, "produced", produced if produced > 0.0 else 0.0)
        object.__setattr__(
            self, "consumed", consumed if consumed > 0.0 else CONSUMPTION_EPSILON
        )


def _format_quantity(value: float) -> str:
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _parse_quantity(token: str, label: str, *, line: int) -> Optional[float]:
    text = token.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError as exc:
        raise GraphFormatError(f"{label} must be a number, got {token!r}.", line=line) from exc
    if not math.isfinite(value):
        raise GraphFormatError(f"{label} must be finite, got {token!r}.", line=line)
    return value


def _parse_neighbor(token: str, *, index: int, size: int, line: int) -> int:
    try:
        neighbor = int(token.strip())
    except ValueError as exc:
        raise GraphFormatError(
            f"neighbor index must be an integer, got {token!r}.", line=line
        ) from exc
    if neighbor < 0 or neighbor >= size:
        raise GraphFormatError(
            f"neighbor index {neighbor} is outside 0..{size - 1}.", line=line
        )
    if neighbor == index:
        raise GraphFormatError(f"node {index} lists itself as a neighbor.", line=line)
    return neighbor


class GraphStore:
    """Undirected simple graph with per-node production and consumption."""

    def __init__(self, nodes: Optional[Iterable[Node]] = None) -> None:
        self._nodes: list[Node] = list(nodes) if nodes is not None else []
        size = len(self._nodes)
        self._edges = np.zeros((size, size), dtype=bool)

    @classmethod
    def from_edges(
        cls,
        nodes: Iterable[Node],
        edges: Iterable[tuple[int, int]],
    ) -> "GraphStore":
        store = cls(nodes)
        for i, j in edges:
            store.set_edge(i, j)
        return store

    # -- nodes -----------------------------------------------------------

    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    def node(self, index: int) -> Node:
        return self._nodes[self._check_index(index)]

    def set_node(self, index: int, node: Node) -> None:
        self._nodes[self._check_index(index)] = node

    # -- edges -----------------------------------------------------------

    def _check_index(self, index: Any) -> int:
        try:
            value = operator.index(index)
        except TypeError as exc:
            raise InvalidEdgeError(f"Node index must be an integer, got {index!r}.") from exc
        if value < 0 or value >= len(self._nodes):
            raise InvalidEdgeError(
                f"Node index {value} is outside 0..{len(self._nodes) - 1}."
            )
        return value

    def _cell(self, i: int, j: int) -> tuple[int, int]:
        i = self._check_index(i)
        j = self._check_index(j)
        if i == j:
            raise InvalidEdgeError(f"Self-loop on node {i} is not allowed.")
        return (i, j) if i > j else (j, i)

    def edge(self, i: int, j: int) -> bool:
        return bool(self._edges[self._cell(i, j)])

    def set_edge(self, i: int, j: int, value: bool = True) -> None:
        self._edges[self._cell(i, j)] = bool(value)

    def edge_count(self) -> int:
        return int(np.count_nonzero(np.tril(self._edges, k=-1)))

    def edges(self) -> Iterator[tuple[int, int]]:
        """Yield every edge as ``(row, col)`` with ``row > col``, row-major."""
        rows, cols = np.nonzero(np.tril(self._edges, k=-1))
        for row, col in zip(rows.tolist(), cols.tolist()):
            yield row, col

    def clear_edges(self) -> None:
        self._edges[:] = False

    def adjacency(self) -> list[list[int]]:
        """Ascending neighbor lists for every node."""
        lower = np.tril(self._edges, k=-1)
        symmetric = lower | lower.T
        return [np.flatnonzero(row).tolist() for row in symmetric]

    def neighbors(self, index: int) -> list[int]:
        index = self._check_index(index)
        column = self._edges[index + 1 :, index]
        row = self._edges[index, :index]
        below = (np.flatnonzero(column) + index + 1).tolist()
        return np.flatnonzero(row).tolist() + below

    # -- copies and conversion ------------------------------------------

    def copy(self) -> "GraphStore":
        clone = GraphStore.__new__(GraphStore)
        clone._nodes = list(self._nodes)
        clone._edges = self._edges.copy()
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> "GraphStore":
        return self.copy()

    def __repr__(self) -> str:
        return f"GraphStore(nodes={self.node_count()}, edges={self.edge_count()})"

    def to_networkx(self) -> nx.Graph:
        graph = nx.Graph()
        for index, node in enumerate(self._nodes):
            graph.add_node(index, produced=node.produced, consumed=node.consumed)
        graph.add_edges_from(self.edges())
        return graph

    # -- text format -----------------------------------------------------

    @classmethod
    def loads(cls, text: str, *, source: Optional[str] = None) -> "GraphStore":
        """Parse the line-oriented graph format; node ``i`` is line ``i``."""
        lines = text.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        size = len(lines)
        nodes: list[Node] = []
        pending: list[list[int]] = []
        try:
            for index, raw in enumerate(lines):
                line = index + 1
                fields = raw.split(",")
                produced = _parse_quantity(fields[0], "produced", line=line)
                consumed = (
                    _parse_quantity(fields[1], "consumed", line=line)
                    if len(fields) > 1
                    else None
                )
                nodes.append(
                    Node(
                        produced=0.0 if produced is None else produced,
                        consumed=0.0 if consumed is None else consumed,
                    )
                )
                pending.append(
                    [
                        _parse_neighbor(token, index=index, size=size, line=line)
                        for token in fields[2:]
                        if token.strip()
                    ]
                )
        except GraphFormatError as exc:
            if source is None:
                raise
            raise GraphFormatError(exc.detail, line=exc.line, source=source) from exc

        store = cls(nodes)
        for index, neighbors in enumerate(pending):
            for neighbor in neighbors:
                store.set_edge(index, neighbor)
        return store

    def dumps(self) -> str:
        """Serialize with ascending neighbor lists and no trailing newline."""
        lines: list[str] = []
        for node, neighbors in zip(self._nodes, self.adjacency()):
            fields = [_format_quantity(node.produced), _format_quantity(node.consumed)]
            fields.extend(str(neighbor) for neighbor in neighbors)
            lines.append(",".join(fields))
        return "\n".join(lines)


def read_graph(path: Union[str, Path]) -> GraphStore:
    path = Path(path)
    try:
        text = read_text(path)
    except OSError as exc:
        raise GraphIOError(
            f"Unable to read graph file: {path}",
            context={"path": str(path), "reason": str(exc)},
        ) from exc
    except UnicodeDecodeError as exc:
        raise GraphFormatError(
            f"file is not valid UTF-8 text ({exc.reason} at byte {exc.start}).",
            source=str(path),
        ) from exc
    store = GraphStore.loads(text, source=str(path))
    logger.debug("Loaded %s from %s.", store, path)
    return store


def write_graph(store: GraphStore, path: Union[str, Path]) -> Path:
    path = Path(path)
    try:
        write_text_atomic(path, store.dumps())
    except OSError as exc:
        raise GraphIOError(
            f"Unable to write graph file: {path}",
            context={"path": str(path), "reason": str(exc)},
        ) from exc
    logger.debug("Wrote %s to %s.", store, path)
    return path


__all__ = [
    "CONSUMPTION_EPSILON",
    "GraphStore",
    "Node",
    "read_graph",
    "write_graph",
]
