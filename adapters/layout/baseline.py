from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import pairwise
from typing import List

from domain.models import (
    NODE_KIND_DUMMY,
    NODE_KIND_REAL,
    GraphDocument,
    Layer,
    LayerPlacement,
    LayoutGraph,
    LayoutPlan,
    LayoutRun,
    NodePlacement,
    SiblingGap,
    SpacingOptions,
)
from domain.ports.layout import LayoutEngine
from domain.services.build_layout_graph import build_layout_graph
from domain.services.node_distances import arrange_layers_by_baselines, ideal_sibling_distance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    spacing: SpacingOptions = field(default_factory=SpacingOptions)


class BaselineLayoutEngine(LayoutEngine):
    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def build_plan(self, document: GraphDocument) -> LayoutPlan:
        graph, run = build_layout_graph(document, self.config.spacing)
        logger.debug(
            "Laying out graph %s (%d nodes, run %s)",
            document.graph_id,
            len(graph.nodes),
            run.run_id,
        )
        layers = arrange_layers_by_baselines(run, graph)

        nodes = [
            NodePlacement(
                node_id=node.node_id,
                rank=node.rank,
                kind=NODE_KIND_REAL if node.is_real else NODE_KIND_DUMMY,
                position=node.position,
            )
            for node in graph.nodes
        ]
        layer_placements = [self._place_layer(run, graph, layer) for layer in layers]
        height = layer_placements[-1].y if layer_placements else 0.0
        return LayoutPlan(
            graph_id=document.graph_id,
            nodes=nodes,
            layers=layer_placements,
            height=height,
        )

    def _place_layer(self, run: LayoutRun, graph: LayoutGraph, layer: Layer) -> LayerPlacement:
        gaps: List[SiblingGap] = [
            SiblingGap(
                left_id=left.node_id,
                right_id=right.node_id,
                distance=ideal_sibling_distance(run, graph, left, right),
            )
            for left, right in pairwise(layer.nodes)
        ]
        return LayerPlacement(
            rank=layer.rank,
            y=layer.nodes[0].position.y,
            node_ids=[node.node_id for node in layer.nodes],
            sibling_gaps=gaps,
        )
