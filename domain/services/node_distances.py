from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Sequence

from domain.models import Layer, LayoutGraph, LayoutNode, LayoutRun
from domain.option_keys import OptionKey
from domain.ports.options import OptionResolver
from domain.services.option_resolution import resolve_option

logger = logging.getLogger(__name__)


def ideal_sibling_distance(
    run: LayoutRun,
    graph: LayoutGraph,
    n1: LayoutNode,
    n2: LayoutNode,
    *,
    resolver: OptionResolver = resolve_option,
) -> float:
    """Minimum center-to-center distance between two adjacent siblings.

    ``n1`` precedes ``n2`` in sibling order. Either node may be a placeholder.
    """
    if not n1.is_real and not n2.is_real:
        ideal_distance = resolver(OptionKey.SIBLING_DISTANCE, None, graph)
        sep = resolver(OptionKey.SIBLING_POST_SEP, None, graph) + resolver(
            OptionKey.SIBLING_PRE_SEP, None, graph
        )
        return max(ideal_distance, sep)

    source = n1 if n1.is_real else n2
    ideal_distance = resolver(OptionKey.SIBLING_DISTANCE, source, graph)
    sep = 0.0
    protrusion = 0.0
    if n1.is_real:
        sep += resolver(OptionKey.SIBLING_POST_SEP, n1, graph)
        protrusion += run.extents_for(n1).sibling_post
    if n2.is_real:
        sep += resolver(OptionKey.SIBLING_PRE_SEP, n2, graph)
        protrusion -= run.extents_for(n2).sibling_pre
    return max(ideal_distance, sep + protrusion)


def baseline_distance(
    run: LayoutRun,
    graph: LayoutGraph,
    layer1: Sequence[LayoutNode],
    layer2: Sequence[LayoutNode],
    *,
    resolver: OptionResolver = resolve_option,
) -> float:
    """Distance between the baselines of ``layer1`` and ``layer2`` below it.

    The layers are treated like two lines of text: normally they are the
    level distance apart, but the gap between the lowest extent of the upper
    layer and the highest extent of the lower layer must stay at least the
    level post sep plus the level pre sep. Every node may set its own values,
    so the strictest one of each layer wins.
    """
    if not layer1 or not layer2:
        return 0.0

    level_distance = -math.inf
    post_sep = -math.inf
    max_post = -math.inf
    for node in layer1:
        level_distance = max(level_distance, resolver(OptionKey.LEVEL_DISTANCE, node, graph))
        post_sep = max(post_sep, resolver(OptionKey.LEVEL_POST_SEP, node, graph))
        if node.is_real:
            max_post = max(max_post, run.extents_for(node).layer_post)

    pre_sep = -math.inf
    min_pre = math.inf
    for node in layer2:
        pre_sep = max(pre_sep, resolver(OptionKey.LEVEL_PRE_SEP, node, graph))
        if node.is_real:
            min_pre = min(min_pre, run.extents_for(node).layer_pre)

    # Placeholder-only layers have no shape to keep clear of.
    if math.isinf(max_post) or math.isinf(min_pre):
        return level_distance
    return max(level_distance, post_sep + pre_sep + max_post - min_pre)


def group_layers(graph: LayoutGraph) -> list[Layer]:
    """Split the graph into layers ordered by rank, keeping node order."""
    by_rank: dict[int, list[LayoutNode]] = defaultdict(list)
    for node in graph.nodes:
        by_rank[node.rank].append(node)
    return [Layer(rank=rank, nodes=tuple(by_rank[rank])) for rank in sorted(by_rank)]


def arrange_layers_by_baselines(
    run: LayoutRun,
    graph: LayoutGraph,
    *,
    resolver: OptionResolver = resolve_option,
) -> list[Layer]:
    """Assign the y coordinate of every node, stacking layers by baselines.

    The first layer sits at ``y = 0``. Returns the layers in the order they
    were stacked.
    """
    layers = group_layers(graph)
    if not layers:
        return layers

    height = 0.0
    previous: Layer | None = None
    for layer in layers:
        if previous is not None:
            height += baseline_distance(run, graph, previous.nodes, layer.nodes, resolver=resolver)
        for node in layer.nodes:
            node.move_to_y(height)
        logger.debug("Run %s: rank %s placed at y=%s", run.run_id, layer.rank, height)
        previous = layer
    return layers
