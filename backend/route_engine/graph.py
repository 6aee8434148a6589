from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from .errors import GraphConsistencyError, VertexNotFoundError

Coordinate = tuple[float, float]


@dataclass(frozen=True, eq=False)
class Vertex:
    """A vertex of a Graph.

    ``id`` is only used for diagnostics; ``coordinate`` is carried for
    callers and never read by the search. Equality is identity so a
    vertex built by another graph never matches a slot of this one.
    """

    index: int
    id: str
    coordinate: Coordinate = (0.0, 0.0)


@dataclass(frozen=True, eq=False)
class Edge:
    index: int
    source: int
    target: int
    length: float

    def __repr__(self) -> str:
        return f"Edge({self.index}: {self.source}->{self.target}, length={self.length})"


class Graph:
    """Directed graph stored as two arenas.

    Vertices and edges refer to each other by integer index into the
    arenas, and per-vertex adjacency is a list of edge indices. Searches
    only read the graph, so one instance can be shared across threads as
    long as nobody adds vertices or edges meanwhile.
    """

    def __init__(self) -> None:
        self._vertices: list[Vertex] = []
        self._edges: list[Edge] = []
        self._out: list[list[int]] = []
        self._in: list[list[int]] = []
        self._by_id: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices)

    def __repr__(self) -> str:
        return f"Graph(vertices={len(self._vertices)}, edges={len(self._edges)})"

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def add_vertex(self, vertex_id: str, coordinate: Coordinate = (0.0, 0.0)) -> Vertex:
        key = str(vertex_id)
        if key in self._by_id:
            raise GraphConsistencyError(
                message=f"duplicate vertex id '{key}'",
                details={"vertex_id": key},
            )
        vertex = Vertex(
            index=len(self._vertices),
            id=key,
            coordinate=(float(coordinate[0]), float(coordinate[1])),
        )
        self._vertices.append(vertex)
        self._out.append([])
        self._in.append([])
        self._by_id[key] = vertex.index
        return vertex

    def add_edge(self, source: Vertex, target: Vertex, length: float) -> Edge:
        for endpoint in (source, target):
            if not self.contains(endpoint):
                raise GraphConsistencyError(
                    message=f"edge endpoint '{endpoint.id}' is not a vertex of this graph",
                    details={"vertex_id": endpoint.id},
                )
        try:
            value = float(length)
        except (TypeError, ValueError) as exc:
            raise GraphConsistencyError(
                message=f"edge {source.id}->{target.id} has a non-numeric length",
                details={"source": source.id, "target": target.id, "length": repr(length)},
            ) from exc
        # Relaxation is only correct for non-negative weights.
        if not math.isfinite(value) or value < 0.0:
            raise GraphConsistencyError(
                message=f"edge {source.id}->{target.id} has invalid length {value!r}",
                details={"source": source.id, "target": target.id, "length": value},
            )
        edge = Edge(index=len(self._edges), source=source.index, target=target.index, length=value)
        self._edges.append(edge)
        self._out[source.index].append(edge.index)
        self._in[target.index].append(edge.index)
        return edge

    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self._vertices)

    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    def vertex(self, index: int) -> Vertex:
        return self._vertices[index]

    def vertex_by_id(self, vertex_id: str) -> Vertex:
        index = self._by_id.get(str(vertex_id))
        if index is None:
            raise VertexNotFoundError.for_vertex(str(vertex_id), where="graph")
        return self._vertices[index]

    def contains(self, vertex: Vertex) -> bool:
        return 0 <= vertex.index < len(self._vertices) and self._vertices[vertex.index] is vertex

    def source(self, edge: Edge) -> Vertex:
        return self._vertices[edge.source]

    def target(self, edge: Edge) -> Vertex:
        return self._vertices[edge.target]

    def out_edges(self, vertex: Vertex) -> list[Edge]:
        self._require(vertex, what="graph")
        return [self._edges[i] for i in self._out[vertex.index]]

    def in_edges(self, vertex: Vertex) -> list[Edge]:
        self._require(vertex, what="graph")
        return [self._edges[i] for i in self._in[vertex.index]]

    def _require(self, vertex: Vertex, *, what: str) -> None:
        if not self.contains(vertex):
            raise VertexNotFoundError.for_vertex(vertex.id, where=what)
