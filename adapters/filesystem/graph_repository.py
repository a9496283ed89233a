from __future__ import annotations

from pathlib import Path
from typing import List

from adapters.filesystem.json_utils import load_json
from domain.models import GraphDocument
from domain.ports.repositories import GraphRepository


class FileSystemGraphRepository(GraphRepository):
    def load_by_path(self, path: Path) -> GraphDocument:
        return GraphDocument.model_validate(load_json(path))

    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, GraphDocument]]:
        return [(path, self.load_by_path(path)) for path in sorted(directory.glob("*.json"))]
