from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import GraphPayloadError
from .graph import Graph
from .logging_utils import log_event


class VertexPayload(BaseModel):
    id: str
    lat: float = Field(default=0.0, ge=-90, le=90)
    lon: float = Field(default=0.0, ge=-180, le=180)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: object) -> object:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class EdgePayload(BaseModel):
    u: str
    v: str
    length: float = Field(..., ge=0.0)
    oneway: bool = True

    @model_validator(mode="before")
    @classmethod
    def accept_list_and_aliases(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            if len(value) < 3:
                raise ValueError("edge list needs at least [u, v, length]")
            data: dict[str, Any] = {"u": value[0], "v": value[1], "length": value[2]}
            if len(value) > 3:
                data["oneway"] = value[3]
            value = data
        if not isinstance(value, dict):
            return value
        data = dict(value)
        if "length" not in data:
            for key in ("weight", "distance_m"):
                if key in data:
                    data["length"] = data[key]
                    break
        for key in ("u", "v"):
            raw = data.get(key)
            if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                data[key] = str(raw)
        return data

    @field_validator("length")
    @classmethod
    def finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("edge length must be finite")
        return v


class GraphPayload(BaseModel):
    version: str = ""
    source: str = ""
    vertices: list[VertexPayload] = Field(default_factory=list)
    edges: list[EdgePayload] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_nodes_alias(cls, value: object) -> object:
        if isinstance(value, dict) and "vertices" not in value and "nodes" in value:
            data = dict(value)
            data["vertices"] = data.pop("nodes")
            return data
        return value

    @model_validator(mode="after")
    def endpoints_known(self) -> GraphPayload:
        seen: set[str] = set()
        for vertex in self.vertices:
            if vertex.id in seen:
                raise ValueError(f"duplicate vertex id '{vertex.id}'")
            seen.add(vertex.id)
        for edge in self.edges:
            missing = [end for end in (edge.u, edge.v) if end not in seen]
            if missing:
                raise ValueError(f"edge {edge.u}->{edge.v} references unknown vertex '{missing[0]}'")
        return self


def build_graph(payload: GraphPayload | dict[str, Any]) -> Graph:
    """Build a Graph from a validated payload (or a raw mapping)."""
    if not isinstance(payload, GraphPayload):
        try:
            payload = GraphPayload.model_validate(payload)
        except ValidationError as exc:
            raise GraphPayloadError(
                message=f"invalid graph payload: {exc.error_count()} error(s)",
                details={"errors": exc.errors(include_url=False, include_context=False)},
            ) from exc

    graph = Graph()
    by_id = {v.id: graph.add_vertex(v.id, (v.lat, v.lon)) for v in payload.vertices}
    for e in payload.edges:
        graph.add_edge(by_id[e.u], by_id[e.v], e.length)
        if not e.oneway:
            graph.add_edge(by_id[e.v], by_id[e.u], e.length)
    return graph


def load_graph_json(path: str | Path) -> Graph:
    graph_path = Path(path)
    try:
        raw = json.loads(graph_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise GraphPayloadError(
            message=f"unable to read graph file '{graph_path}'",
            details={"path": str(graph_path), "error": str(exc)},
        ) from exc
    if not isinstance(raw, dict):
        raise GraphPayloadError(
            message=f"graph file '{graph_path}' must contain a JSON object",
            details={"path": str(graph_path)},
        )
    graph = build_graph(raw)
    log_event(
        "graph_loaded",
        path=str(graph_path),
        version=str(raw.get("version", "")),
        vertex_count=len(graph),
        edge_count=graph.edge_count,
    )
    return graph
