from __future__ import annotations

from math import inf

import pytest

from route_engine.errors import VertexNotFoundError
from route_engine.graph import Graph
from route_engine.path_tree import NodeState, PathTree


def _line() -> Graph:
    graph = Graph()
    a, b, c = (graph.add_vertex(name) for name in "ABC")
    graph.add_vertex("D")
    graph.add_edge(a, b, 2.0)
    graph.add_edge(b, c, 3.0)
    return graph


def test_path_tree_initial_state() -> None:
    graph = _line()
    b = graph.vertex_by_id("B")
    tree = PathTree(graph, b)

    assert len(tree) == 4
    assert tree.vertices() == list(graph.vertices())
    assert tree.cost(b) == 0.0
    assert tree.get_node(b).state is NodeState.REACHED
    for vertex in graph.vertices():
        node = tree.get_node(vertex)
        assert node.visited is False
        assert node.reaching_edge is None
        if vertex is not b:
            assert node.cost == inf
            assert node.state is NodeState.UNREACHED
    assert tree.visited_count == 0


def test_get_path_walks_reaching_edges_back_to_origin() -> None:
    graph = _line()
    a, b, c = (graph.vertex_by_id(name) for name in "ABC")
    ab, bc = graph.edges()
    tree = PathTree(graph, a)
    tree.get_node(b).reaching_edge = ab
    tree.get_node(b).cost = 2.0
    tree.get_node(c).reaching_edge = bc
    tree.get_node(c).cost = 5.0

    assert tree.get_path(c) == [ab, bc]
    assert tree.get_path(a) == []


def test_get_path_on_unreached_vertex_is_empty() -> None:
    graph = _line()
    tree = PathTree(graph, graph.vertex_by_id("A"))

    assert tree.get_path(graph.vertex_by_id("D")) == []


def test_get_node_rejects_foreign_vertex() -> None:
    graph = _line()
    tree = PathTree(graph, graph.vertex_by_id("A"))
    foreign = Graph().add_vertex("A")

    with pytest.raises(VertexNotFoundError) as exc:
        tree.get_node(foreign)
    assert exc.value.reason_code == "vertex_not_found"
    assert "path tree" in str(exc.value)

    with pytest.raises(VertexNotFoundError):
        PathTree(graph, foreign)


def test_each_tree_is_independent() -> None:
    graph = _line()
    a = graph.vertex_by_id("A")
    first = PathTree(graph, a)
    first.get_node(a).visited = True

    second = PathTree(graph, a)
    assert second.get_node(a).visited is False
    assert second.get_node(a).state is NodeState.REACHED
    assert first.get_node(a).state is NodeState.VISITED
