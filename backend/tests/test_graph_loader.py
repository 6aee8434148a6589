from __future__ import annotations

import json
from pathlib import Path

import pytest

from route_engine.errors import GraphPayloadError
from route_engine.graph_loader import GraphPayload, build_graph, load_graph_json
from route_engine.routing_service import RoutingService, route_cost


def _payload() -> dict[str, object]:
    return {
        "version": "pytest",
        "source": "fixture",
        "nodes": [
            {"id": "A", "lat": 52.5, "lon": -1.9},
            {"id": "B"},
            {"id": "C"},
            {"id": 4},
        ],
        "edges": [
            {"u": "A", "v": "B", "length": 1.0},
            {"u": "A", "v": "C", "weight": 4.0},
            ["B", "C", 1.0],
            {"u": "B", "v": 4, "distance_m": 5.0},
            ["C", "4", 1.0, False],
        ],
    }


def test_build_graph_accepts_aliases_and_list_edges() -> None:
    graph = build_graph(_payload())

    assert len(graph) == 4
    # The two-way edge adds its reverse.
    assert graph.edge_count == 6
    a = graph.vertex_by_id("A")
    d = graph.vertex_by_id("4")
    assert a.coordinate == (52.5, -1.9)
    assert [graph.target(e).id for e in graph.out_edges(d)] == ["C"]

    route = RoutingService(graph).find_route(a, d)
    assert route_cost(route) == 3.0


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p["edges"].append({"u": "A", "v": "Z", "length": 1.0}),
        lambda p: p["edges"].append({"u": "A", "v": "B", "length": -2.0}),
        lambda p: p["edges"].append(["A", "B"]),
        lambda p: p["nodes"].append({"id": "A"}),
        lambda p: p["nodes"].append({"id": "Y", "lat": 123.0}),
    ],
)
def test_build_graph_rejects_invalid_payloads(mutate) -> None:
    payload = _payload()
    mutate(payload)

    with pytest.raises(GraphPayloadError) as exc:
        build_graph(payload)
    assert exc.value.reason_code == "graph_payload_invalid"
    assert exc.value.details is not None
    assert exc.value.details["errors"]


def test_build_graph_accepts_validated_model() -> None:
    model = GraphPayload.model_validate(_payload())
    assert model.version == "pytest"
    assert len(build_graph(model)) == 4


def test_load_graph_json_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(_payload()), encoding="utf-8")

    graph = load_graph_json(path)
    assert graph.vertex_by_id("B").id == "B"

    with pytest.raises(GraphPayloadError):
        load_graph_json(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(GraphPayloadError, match="JSON object"):
        load_graph_json(bad)

    not_utf8 = tmp_path / "latin1.json"
    not_utf8.write_bytes(b'{"nodes": ["\xff\xfe"]}')
    with pytest.raises(GraphPayloadError, match="unable to read") as exc:
        load_graph_json(not_utf8)
    assert exc.value.details is not None
    assert exc.value.details["path"] == str(not_utf8)
