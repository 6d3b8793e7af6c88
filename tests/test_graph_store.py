import random

import networkx as nx
import pytest

from grid_stress.errors import GraphFormatError, GraphIOError, InvalidEdgeError
from grid_stress.graphs.store import (
    CONSUMPTION_EPSILON,
    GraphStore,
    Node,
    read_graph,
    write_graph,
)

THREE_NODE_CHAIN = "5,5\n0,5,0\n0,5,1"


def _random_store(seed: int, size: int = 12, density: float = 0.3) -> GraphStore:
    rng = random.Random(seed)
    nodes = [Node(rng.randint(0, 9), rng.randint(1, 9)) for _ in range(size)]
    edges = [
        (i, j)
        for i in range(size)
        for j in range(i)
        if rng.random() < density
    ]
    return GraphStore.from_edges(nodes, edges)


def test_loads_three_node_chain() -> None:
    store = GraphStore.loads(THREE_NODE_CHAIN)

    assert store.node_count() == 3
    assert store.nodes == (Node(5, 5), Node(0, 5), Node(0, 5))
    assert store.edge_count() == 2
    assert store.edge(0, 1) and store.edge(1, 0)
    assert store.edge(1, 2) and store.edge(2, 1)
    assert not store.edge(0, 2)


def test_dumps_lists_both_directions_in_ascending_order() -> None:
    store = GraphStore.loads(THREE_NODE_CHAIN)

    assert store.dumps() == "5,5,1\n0,5,0,2\n0,5,1"


def test_consumption_is_clamped_to_epsilon() -> None:
    store = GraphStore.loads("3,0,1\n2,-1,0\n")

    assert store.node(0).consumed == CONSUMPTION_EPSILON
    assert store.node(1).consumed == CONSUMPTION_EPSILON
    assert store.node(1).produced == 2
    assert store.dumps() == "3,1e-06,1\n2,1e-06,0"


def test_negative_production_is_clamped_to_zero() -> None:
    assert Node(-4, 2).produced == 0.0
    assert Node(-4, 2).consumed == 2.0


def test_missing_fields_default_and_empty_tokens_are_ignored() -> None:
    store = GraphStore.loads("4\n\n1,2,0,,\n\n")

    assert store.node_count() == 3
    assert store.node(0) == Node(4, CONSUMPTION_EPSILON)
    assert store.node(1) == Node(0, CONSUMPTION_EPSILON)
    assert store.node(2) == Node(1, 2)
    assert list(store.edges()) == [(2, 0)]


def test_empty_text_gives_empty_graph() -> None:
    store = GraphStore.loads("")

    assert store.node_count() == 0
    assert store.edge_count() == 0
    assert store.dumps() == ""


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("abc,5", "produced must be a number"),
        ("1,xyz", "consumed must be a number"),
        ("1,2\n1,2,a", "neighbor index must be an integer"),
        ("1,2\n1,2,1.5", "neighbor index must be an integer"),
        ("1,2\n1,2,7", "outside 0..1"),
        ("1,2\n1,2,1", "lists itself"),
        ("inf,2", "must be finite"),
    ],
)
def test_malformed_records_raise_format_error(text: str, fragment: str) -> None:
    with pytest.raises(GraphFormatError) as exc:
        GraphStore.loads(text)

    assert fragment in str(exc.value)


def test_format_error_names_source_and_line_once() -> None:
    with pytest.raises(GraphFormatError) as exc:
        GraphStore.loads("1,2\n1,2,-1", source="grid.graph")

    message = str(exc.value)
    assert exc.value.line == 2
    assert exc.value.source == "grid.graph"
    assert message.startswith("grid.graph, line 2: ")
    assert message.count("line 2") == 1


def test_edges_are_symmetric_and_counted_once() -> None:
    store = GraphStore([Node() for _ in range(4)])
    store.set_edge(0, 3)
    store.set_edge(3, 0)
    store.set_edge(2, 1)

    assert store.edge_count() == 2
    assert list(store.edges()) == [(2, 1), (3, 0)]
    assert store.neighbors(0) == [3]
    assert store.neighbors(3) == [0]
    assert store.adjacency() == [[3], [2], [1], [0]]

    store.set_edge(0, 3, False)
    assert not store.edge(3, 0)
    assert store.edge_count() == 1


def test_self_loops_and_bad_indices_are_rejected() -> None:
    store = GraphStore([Node(), Node()])

    with pytest.raises(InvalidEdgeError):
        store.edge(1, 1)
    with pytest.raises(InvalidEdgeError):
        store.set_edge(0, 2)
    with pytest.raises(InvalidEdgeError):
        store.set_edge(-1, 0)
    with pytest.raises(ValueError):
        store.set_edge(0, 0)
    assert store.edge_count() == 0


def test_neighbors_match_adjacency() -> None:
    store = _random_store(3)

    adjacency = store.adjacency()
    for index in range(store.node_count()):
        assert store.neighbors(index) == adjacency[index]
        assert sorted(store.neighbors(index)) == store.neighbors(index)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_text_round_trip_preserves_graph(seed: int) -> None:
    store = _random_store(seed)

    loaded = GraphStore.loads(store.dumps())

    assert loaded.nodes == store.nodes
    assert set(loaded.edges()) == set(store.edges())


def test_copy_is_independent() -> None:
    store = GraphStore.loads(THREE_NODE_CHAIN)
    clone = store.copy()

    clone.set_edge(0, 1, False)
    clone.set_node(2, Node(9, 9))

    assert store.edge(0, 1)
    assert store.node(2) == Node(0, 5)
    assert clone.edge_count() == 1


def test_to_networkx_carries_quantities() -> None:
    store = _random_store(5)

    graph = store.to_networkx()

    assert graph.number_of_nodes() == store.node_count()
    assert graph.number_of_edges() == store.edge_count()
    assert graph.nodes[0]["produced"] == store.node(0).produced
    assert graph.nodes[0]["consumed"] == store.node(0).consumed
    assert not any(nx.selfloop_edges(graph))


def test_write_and_read_graph_file(tmp_path) -> None:
    store = GraphStore.loads(THREE_NODE_CHAIN)
    path = tmp_path / "nested" / "chain.graph"

    written = write_graph(store, path)

    assert written == path
    assert path.read_text(encoding="utf-8") == "5,5,1\n0,5,0,2\n0,5,1"
    loaded = read_graph(path)
    assert loaded.nodes == store.nodes
    assert set(loaded.edges()) == set(store.edges())


def test_read_missing_graph_raises_io_error(tmp_path) -> None:
    missing = tmp_path / "missing.graph"

    with pytest.raises(GraphIOError) as exc:
        read_graph(missing)

    message = str(exc.value)
    assert "Unable to read graph file" in message
    assert str(missing) in message


def test_read_malformed_file_names_the_file(tmp_path) -> None:
    path = tmp_path / "bad.graph"
    path.write_text("1,2\nx,1\n", encoding="utf-8")

    with pytest.raises(GraphFormatError) as exc:
        read_graph(path)

    assert str(path) in str(exc.value)
    assert exc.value.line == 2


def test_read_undecodable_file_raises_format_error(tmp_path) -> None:
    path = tmp_path / "binary.graph"
    path.write_bytes(b"\xff\xfe1,2\n")

    with pytest.raises(GraphFormatError) as exc:
        read_graph(path)

    message = str(exc.value)
    assert message.startswith(f"{path}: ")
    assert "not valid UTF-8" in message
