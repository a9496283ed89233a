from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import GraphDocument, LayoutPlan


class GraphRepository(Protocol):
    def load_by_path(self, path: Path) -> GraphDocument: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, GraphDocument]]: ...


class PlanRepository(Protocol):
    def save(self, plan: LayoutPlan, path: Path) -> None: ...
