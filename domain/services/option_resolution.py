from __future__ import annotations

from domain.models import LayoutGraph, LayoutNode
from domain.option_keys import OptionKey


def resolve_option(key: OptionKey, node: LayoutNode | None, graph: LayoutGraph) -> float:
    """Return the effective value of ``key`` for ``node``.

    A value set on the node wins; otherwise the graph-level value is used.
    Passing ``node=None`` asks for the graph-level value directly.
    """
    if node is not None and key in node.options:
        return float(node.options[key])
    return graph.options.value(key)
