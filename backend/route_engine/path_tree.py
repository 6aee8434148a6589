from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import inf

from .errors import VertexNotFoundError
from .graph import Edge, Graph, Vertex


class NodeState(str, Enum):
    UNREACHED = "unreached"
    REACHED = "reached"
    VISITED = "visited"


@dataclass
class PathNode:
    vertex: Vertex
    cost: float = inf
    reaching_edge: Edge | None = None
    visited: bool = False

    @property
    def state(self) -> NodeState:
        if self.visited:
            return NodeState.VISITED
        if self.cost == inf:
            return NodeState.UNREACHED
        return NodeState.REACHED


class PathTree:
    """Search state for one origin: one PathNode per vertex of the graph.

    Nodes live in a list parallel to the graph's vertex arena, indexed by
    ``Vertex.index``. A tree belongs to a single search and is discarded
    afterwards.
    """

    def __init__(self, graph: Graph, origin: Vertex) -> None:
        if not graph.contains(origin):
            raise VertexNotFoundError.for_vertex(origin.id, where="graph")
        self._graph = graph
        self._nodes: list[PathNode] = [PathNode(vertex=vertex) for vertex in graph.vertices()]
        self._nodes[origin.index].cost = 0.0
        self.origin = origin

    def __len__(self) -> int:
        return len(self._nodes)

    def get_node(self, vertex: Vertex) -> PathNode:
        index = vertex.index
        if not (0 <= index < len(self._nodes)) or self._nodes[index].vertex is not vertex:
            raise VertexNotFoundError.for_vertex(vertex.id, where="path tree")
        return self._nodes[index]

    def node_at(self, index: int) -> PathNode:
        return self._nodes[index]

    def nodes(self) -> list[PathNode]:
        return self._nodes

    def cost(self, vertex: Vertex) -> float:
        return self.get_node(vertex).cost

    def vertices(self) -> list[Vertex]:
        return [node.vertex for node in self._nodes]

    @property
    def visited_count(self) -> int:
        return sum(1 for node in self._nodes if node.visited)

    def get_path(self, destination: Vertex) -> list[Edge]:
        """Edges from the origin to ``destination``, in travel order.

        Returns an empty list for the origin and also for an unreached
        vertex, so check the cost first when reachability matters.
        """
        edges: list[Edge] = []
        node = self.get_node(destination)
        while node.reaching_edge is not None:
            edges.append(node.reaching_edge)
            node = self._nodes[node.reaching_edge.source]
        edges.reverse()
        return edges
