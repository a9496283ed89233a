from __future__ import annotations

from typing import Protocol

from domain.models import GraphDocument, LayoutPlan


class LayoutEngine(Protocol):
    def build_plan(self, document: GraphDocument) -> LayoutPlan:
        ...
