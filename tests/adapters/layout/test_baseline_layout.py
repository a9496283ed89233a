from __future__ import annotations

from adapters.layout.baseline import BaselineLayoutEngine, LayoutConfig
from domain.models import GraphDocument, SpacingOptions


def make_engine() -> BaselineLayoutEngine:
    return BaselineLayoutEngine(
        LayoutConfig(
            spacing=SpacingOptions(
                sibling_distance=10,
                sibling_pre_sep=1,
                sibling_post_sep=1,
                level_distance=20,
                level_pre_sep=0,
                level_post_sep=0,
            )
        )
    )


def test_plan_places_layers_by_baselines() -> None:
    payload = {
        "graph_id": "tree",
        "nodes": [
            {"node_id": "root", "rank": 0, "width": 30, "height": 40},
            {"node_id": "left", "rank": 1, "width": 30, "height": 10, "x": -20},
            {"node_id": "edge", "rank": 1, "kind": "dummy"},
            {"node_id": "right", "rank": 1, "width": 50, "height": 10, "x": 20},
            {"node_id": "leaf", "rank": 3, "width": 10, "height": 10},
        ],
    }
    plan = make_engine().build_plan(GraphDocument.model_validate(payload))

    # root bottom at +20, children tops at -5: 25 > level distance 20
    assert [layer.rank for layer in plan.layers] == [0, 1, 3]
    assert [layer.y for layer in plan.layers] == [0, 25, 45]
    assert plan.height == 45
    positions = {node.node_id: node.position for node in plan.nodes}
    assert positions["left"].y == positions["edge"].y == positions["right"].y == 25
    assert positions["left"].x == -20
    assert positions["right"].x == 20
    kinds = {node.node_id: node.kind for node in plan.nodes}
    assert kinds["edge"] == "dummy"
    assert kinds["root"] == "node"


def test_plan_reports_sibling_gaps_in_layer_order() -> None:
    payload = {
        "nodes": [
            {"node_id": "a", "rank": 0, "width": 30},
            {"node_id": "d", "rank": 0, "kind": "dummy"},
            {"node_id": "b", "rank": 0, "width": 30, "options": {"sibling pre sep": 6}},
            {"node_id": "c", "rank": 0, "width": 4},
        ],
    }
    plan = make_engine().build_plan(GraphDocument.model_validate(payload))

    gaps = [(gap.left_id, gap.right_id, gap.distance) for gap in plan.layers[0].sibling_gaps]
    assert gaps == [
        ("a", "d", 16),  # post sep 1 + half width 15
        ("d", "b", 21),  # pre sep 6 + half width 15
        ("b", "c", 19),  # 1 + 1 + 15 + 2
    ]


def test_plan_for_empty_document() -> None:
    plan = make_engine().build_plan(GraphDocument.model_validate({"graph_id": "empty"}))

    assert plan.layers == []
    assert plan.nodes == []
    assert plan.height == 0
    assert plan.to_dict() == {"graph_id": "empty", "height": 0.0, "nodes": [], "layers": []}


def test_plan_to_dict_lists_nodes_and_layers() -> None:
    payload = {"graph_id": "g", "nodes": [{"node_id": "a", "rank": 0}, {"node_id": "b", "rank": 0}]}
    plan_dict = make_engine().build_plan(GraphDocument.model_validate(payload)).to_dict()

    assert plan_dict["nodes"][0] == {"node_id": "a", "rank": 0, "kind": "node", "x": 0.0, "y": 0.0}
    assert plan_dict["layers"] == [
        {
            "rank": 0,
            "y": 0.0,
            "node_ids": ["a", "b"],
            "sibling_gaps": [{"left": "a", "right": "b", "distance": 10}],
        }
    ]
