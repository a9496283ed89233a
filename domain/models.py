from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.option_keys import OptionKey, normalize_option_overrides

NODE_KIND_REAL = "node"
NODE_KIND_DUMMY = "dummy"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class NodeExtents:
    """How far a node's shape protrudes around its center.

    ``*_pre`` offsets point towards the left (sibling axis) or the top (layer
    axis) and are usually negative, ``*_post`` offsets point the other way.
    """

    sibling_pre: float = 0.0
    sibling_post: float = 0.0
    layer_pre: float = 0.0
    layer_post: float = 0.0

    @classmethod
    def from_size(cls, size: Size | None) -> NodeExtents:
        if size is None:
            return cls()
        half_width = size.width / 2
        half_height = size.height / 2
        return cls(
            sibling_pre=-half_width,
            sibling_post=half_width,
            layer_pre=-half_height,
            layer_post=half_height,
        )


class SpacingOptions(BaseModel):
    """Graph-level values of the spacing options."""

    model_config = ConfigDict(frozen=True)

    sibling_distance: float = 28.45
    sibling_pre_sep: float = 3.33
    sibling_post_sep: float = 3.33
    level_distance: float = 28.45
    level_pre_sep: float = 3.33
    level_post_sep: float = 3.33

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        overrides = normalize_option_overrides(data)
        return {key.field_name: value for key, value in overrides.items()}

    def value(self, key: OptionKey) -> float:
        return float(getattr(self, key.field_name))

    def with_overrides(self, overrides: Dict[OptionKey, float]) -> SpacingOptions:
        if not overrides:
            return self
        return self.model_copy(update={key.field_name: value for key, value in overrides.items()})


@dataclass(eq=False)
class LayoutNode(ABC):
    node_id: str
    rank: int
    position: Point = field(default_factory=lambda: Point(0.0, 0.0))
    options: Dict[OptionKey, float] = field(default_factory=dict)

    @property
    @abstractmethod
    def is_real(self) -> bool:
        ...

    def move_to_y(self, y: float) -> None:
        self.position = Point(self.position.x, y)


@dataclass(eq=False)
class RealNode(LayoutNode):
    size: Optional[Size] = None

    @property
    def is_real(self) -> bool:
        return True


@dataclass(eq=False)
class PlaceholderNode(LayoutNode):
    @property
    def is_real(self) -> bool:
        return False


@dataclass
class LayoutGraph:
    nodes: List[LayoutNode] = field(default_factory=list)
    options: SpacingOptions = field(default_factory=SpacingOptions)


@dataclass(frozen=True)
class Layer:
    rank: int
    nodes: tuple[LayoutNode, ...]


@dataclass
class LayoutRun:
    """Scratch storage of one layout run, keyed by node id."""

    run_id: str
    extents: Dict[str, NodeExtents] = field(default_factory=dict)

    def extents_for(self, node: LayoutNode) -> NodeExtents:
        if not node.is_real:
            return NodeExtents()
        return self.extents.get(node.node_id) or NodeExtents()


class ExtentsSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sibling_pre: Optional[float] = None
    sibling_post: Optional[float] = None
    layer_pre: Optional[float] = None
    layer_post: Optional[float] = None

    def apply_to(self, base: NodeExtents) -> NodeExtents:
        return NodeExtents(
            sibling_pre=base.sibling_pre if self.sibling_pre is None else self.sibling_pre,
            sibling_post=base.sibling_post if self.sibling_post is None else self.sibling_post,
            layer_pre=base.layer_pre if self.layer_pre is None else self.layer_pre,
            layer_post=base.layer_post if self.layer_post is None else self.layer_post,
        )


def _normalize_options(value: object) -> Dict[OptionKey, float]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = "options must be a JSON object"
        raise ValueError(msg)
    return normalize_option_overrides(value)


class NodeSpec(BaseModel):
    node_id: str = Field(..., min_length=1)
    rank: int
    kind: Literal["node", "dummy"] = NODE_KIND_REAL
    width: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)
    x: float = 0.0
    options: Dict[OptionKey, float] = Field(default_factory=dict)
    extents: Optional[ExtentsSpec] = None

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, value: object) -> Dict[OptionKey, float]:
        return _normalize_options(value)

    @model_validator(mode="after")
    def check_dummy_geometry(self) -> NodeSpec:
        if self.kind == NODE_KIND_DUMMY and (
            self.extents is not None or self.width is not None or self.height is not None
        ):
            msg = f"Dummy node {self.node_id} cannot carry a size or extents"
            raise ValueError(msg)
        return self

    def size(self) -> Optional[Size]:
        if self.width is None and self.height is None:
            return None
        return Size(self.width or 0.0, self.height or 0.0)


class GraphDocument(BaseModel):
    graph_id: str = "graph"
    options: Dict[OptionKey, float] = Field(default_factory=dict)
    nodes: List[NodeSpec] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, value: object) -> Dict[OptionKey, float]:
        return _normalize_options(value)

    @field_validator("nodes", mode="after")
    @classmethod
    def ensure_unique_node_ids(cls, nodes: List[NodeSpec]) -> List[NodeSpec]:
        seen: Set[str] = set()
        for node in nodes:
            if node.node_id in seen:
                msg = f"Duplicate node_id found: {node.node_id}"
                raise ValueError(msg)
            seen.add(node.node_id)
        return nodes

    def ranks(self) -> Set[int]:
        return {node.rank for node in self.nodes}


@dataclass(frozen=True)
class SiblingGap:
    left_id: str
    right_id: str
    distance: float


@dataclass(frozen=True)
class NodePlacement:
    node_id: str
    rank: int
    kind: str
    position: Point


@dataclass(frozen=True)
class LayerPlacement:
    rank: int
    y: float
    node_ids: List[str]
    sibling_gaps: List[SiblingGap]


@dataclass(frozen=True)
class LayoutPlan:
    graph_id: str
    nodes: List[NodePlacement]
    layers: List[LayerPlacement]
    height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "graph_id": self.graph_id,
            "height": self.height,
            "nodes": [
                {
                    "node_id": node.node_id,
                    "rank": node.rank,
                    "kind": node.kind,
                    "x": node.position.x,
                    "y": node.position.y,
                }
                for node in self.nodes
            ],
            "layers": [
                {
                    "rank": layer.rank,
                    "y": layer.y,
                    "node_ids": list(layer.node_ids),
                    "sibling_gaps": [
                        {"left": gap.left_id, "right": gap.right_id, "distance": gap.distance}
                        for gap in layer.sibling_gaps
                    ],
                }
                for layer in self.layers
            ],
        }
