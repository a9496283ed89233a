from __future__ import annotations

from typing import Protocol

from domain.models import LayoutGraph, LayoutNode
from domain.option_keys import OptionKey


class OptionResolver(Protocol):
    def __call__(self, key: OptionKey, node: LayoutNode | None, graph: LayoutGraph) -> float:
        ...
