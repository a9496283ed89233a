from __future__ import annotations

import uuid

from domain.models import (
    NODE_KIND_DUMMY,
    GraphDocument,
    LayoutGraph,
    LayoutNode,
    LayoutRun,
    NodeExtents,
    PlaceholderNode,
    Point,
    RealNode,
    SpacingOptions,
)


def build_layout_graph(
    document: GraphDocument,
    defaults: SpacingOptions | None = None,
    run_id: str | None = None,
) -> tuple[LayoutGraph, LayoutRun]:
    base = defaults or SpacingOptions()
    graph = LayoutGraph(options=base.with_overrides(document.options))
    run = LayoutRun(run_id=run_id or uuid.uuid4().hex)

    for entry in document.nodes:
        position = Point(entry.x, 0.0)
        node: LayoutNode
        if entry.kind == NODE_KIND_DUMMY:
            node = PlaceholderNode(
                node_id=entry.node_id,
                rank=entry.rank,
                position=position,
                options=dict(entry.options),
            )
        else:
            size = entry.size()
            node = RealNode(
                node_id=entry.node_id,
                rank=entry.rank,
                position=position,
                options=dict(entry.options),
                size=size,
            )
            extents = NodeExtents.from_size(size)
            if entry.extents is not None:
                extents = entry.extents.apply_to(extents)
            run.extents[entry.node_id] = extents
        graph.nodes.append(node)
    return graph, run
