from __future__ import annotations

import heapq
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from math import inf

from .errors import RouteNotFoundError, RouteSearchTimeoutError
from .graph import Edge, Graph, Vertex
from .logging_utils import log_event
from .path_tree import PathNode, PathTree
from .settings import SelectionStrategy, normalize_selection_strategy, settings

SELECTION_STRATEGIES: frozenset[str] = frozenset({"linear_scan", "heap"})


@dataclass(frozen=True)
class RouteResult:
    edges: tuple[Edge, ...]
    cost: float
    visited_count: int
    termination_reason: str


def route_cost(edges: Iterable[Edge]) -> float:
    return float(sum(edge.length for edge in edges))


class RoutingService:
    """Find routes using Dijkstra's algorithm.

    Every call builds its own PathTree, so one service (and one graph) can
    serve concurrent searches from several threads. The graph must not be
    mutated while searches are running.

    The default ``linear_scan`` selection walks every vertex to find the
    nearest unvisited one, O(V^2 + E) overall. ``heap`` keeps a binary
    heap keyed by ``(cost, vertex index)``; it settles ties in the same
    order as the scan.

    See https://en.wikipedia.org/wiki/Dijkstra%27s_algorithm
    """

    def __init__(
        self,
        graph: Graph,
        *,
        selection: SelectionStrategy | None = None,
        deadline_s: float | None = None,
    ) -> None:
        strategy = str(normalize_selection_strategy(selection or settings.route_selection_strategy))
        if strategy not in SELECTION_STRATEGIES:
            raise ValueError(f"unknown selection strategy '{strategy}'")
        self.graph = graph
        self.selection = strategy
        deadline = float(settings.route_search_deadline_s if deadline_s is None else deadline_s)
        if not deadline >= 0.0:
            raise ValueError(f"search deadline must be >= 0 seconds, got {deadline!r}")
        self.deadline_s = deadline

    def find_route(self, origin: Vertex, destination: Vertex) -> list[Edge]:
        """Find a route between an origin and a destination."""
        return list(self.find_route_with_stats(origin, destination).edges)

    def find_route_with_stats(self, origin: Vertex, destination: Vertex) -> RouteResult:
        t0 = time.perf_counter()
        deadline = time.monotonic() + self.deadline_s if self.deadline_s > 0 else None

        tree = PathTree(self.graph, origin)
        dest_node = tree.get_node(destination)

        try:
            if self.selection == "heap":
                self._run_heap(tree, dest_node, deadline)
            else:
                self._run_linear_scan(tree, dest_node, deadline)
        except RouteSearchTimeoutError:
            self._log(
                "route_search_timeout",
                origin,
                destination,
                tree,
                t0,
                level=logging.WARNING,
            )
            raise

        if not dest_node.visited:
            self._log("route_not_found", origin, destination, tree, t0)
            raise RouteNotFoundError.between(origin.id, destination.id)

        result = RouteResult(
            edges=tuple(tree.get_path(destination)),
            cost=dest_node.cost,
            visited_count=tree.visited_count,
            termination_reason="destination_settled",
        )
        self._log("route_found", origin, destination, tree, t0, cost=result.cost, edge_count=len(result.edges))
        return result

    def _run_linear_scan(self, tree: PathTree, dest_node: PathNode, deadline: float | None) -> None:
        while True:
            self._check_deadline(deadline, tree)
            current = self._find_next_node(tree)
            if current is None:
                return
            self._visit(tree, current)
            # A settled destination has its final cost; stop early.
            if dest_node.visited:
                return

    def _run_heap(self, tree: PathTree, dest_node: PathNode, deadline: float | None) -> None:
        origin_index = tree.origin.index
        heap: list[tuple[float, int]] = [(0.0, origin_index)]
        while heap:
            self._check_deadline(deadline, tree)
            cost, index = heapq.heappop(heap)
            current = tree.node_at(index)
            # Skip outdated entries.
            if current.visited or cost > current.cost:
                continue
            for reached in self._visit(tree, current):
                heapq.heappush(heap, (reached.cost, reached.vertex.index))
            if dest_node.visited:
                return

    def _find_next_node(self, tree: PathTree) -> PathNode | None:
        """The nearest reached vertex of the origin that is not visited yet."""
        candidate: PathNode | None = None
        for node in tree.nodes():
            if node.visited:
                continue
            if node.cost == inf:
                continue
            if candidate is None or node.cost < candidate.cost:
                candidate = node
        return candidate

    def _visit(self, tree: PathTree, current: PathNode) -> list[PathNode]:
        """Relax the out edges of ``current`` and mark it visited.

        Returns the nodes whose cost improved.
        """
        improved: list[PathNode] = []
        for out_edge in self.graph.out_edges(current.vertex):
            reached = tree.node_at(out_edge.target)
            if reached.visited:
                continue
            new_cost = current.cost + out_edge.length
            if new_cost < reached.cost:
                reached.cost = new_cost
                reached.reaching_edge = out_edge
                improved.append(reached)
        current.visited = True
        return improved

    @staticmethod
    def _check_deadline(deadline: float | None, tree: PathTree) -> None:
        if deadline is not None and time.monotonic() >= deadline:
            raise RouteSearchTimeoutError(
                details={"origin_id": tree.origin.id, "visited_count": tree.visited_count},
            )

    def _log(
        self,
        event: str,
        origin: Vertex,
        destination: Vertex,
        tree: PathTree,
        t0: float,
        *,
        level: int = logging.INFO,
        **fields: object,
    ) -> None:
        if not settings.route_log_searches:
            return
        log_event(
            event,
            level=level,
            origin_id=origin.id,
            destination_id=destination.id,
            selection=self.selection,
            visited_count=tree.visited_count,
            vertex_count=len(tree),
            duration_ms=round((time.perf_counter() - t0) * 1000, 3),
            **fields,
        )
