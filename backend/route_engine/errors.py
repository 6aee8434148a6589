from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "route_not_found",
        "route_search_timeout",
        "vertex_not_found",
        "graph_inconsistent",
        "graph_payload_invalid",
        "routing_error",
    }
)


@dataclass
class RoutingError(ValueError):
    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class RouteNotFoundError(RoutingError):
    """Destination is not reachable from origin. Expected and recoverable."""

    origin_id: str = ""
    destination_id: str = ""

    @classmethod
    def between(cls, origin_id: str, destination_id: str) -> RouteNotFoundError:
        return cls(
            reason_code="route_not_found",
            message=f"no route found from '{origin_id}' to '{destination_id}'",
            details={"origin_id": origin_id, "destination_id": destination_id},
            origin_id=origin_id,
            destination_id=destination_id,
        )


@dataclass
class VertexNotFoundError(RoutingError):
    """A vertex from a foreign graph was passed in. Programming error, never retried."""

    vertex_id: str = ""

    @classmethod
    def for_vertex(cls, vertex_id: str, *, where: str) -> VertexNotFoundError:
        return cls(
            reason_code="vertex_not_found",
            message=f"vertex '{vertex_id}' not found in {where}",
            details={"vertex_id": vertex_id, "where": where},
            vertex_id=vertex_id,
        )


@dataclass
class GraphConsistencyError(RoutingError):
    reason_code: str = "graph_inconsistent"
    message: str = "graph is inconsistent"
    details: dict[str, Any] | None = field(default=None)


@dataclass
class RouteSearchTimeoutError(RoutingError):
    reason_code: str = "route_search_timeout"
    message: str = "route search deadline exceeded"
    details: dict[str, Any] | None = field(default=None)


@dataclass
class GraphPayloadError(RoutingError):
    reason_code: str = "graph_payload_invalid"
    message: str = "graph payload is invalid"
    details: dict[str, Any] | None = field(default=None)


def normalize_reason_code(reason_code: str, *, default: str = "routing_error") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
