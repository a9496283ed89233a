from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, LayoutSettings
from domain.models import (
    LayoutGraph,
    LayoutNode,
    LayoutRun,
    NodeExtents,
    PlaceholderNode,
    RealNode,
    SpacingOptions,
)
from domain.option_keys import OptionKey


def _clear_rankspace_env() -> None:
    for key in list(os.environ):
        if key.startswith("RANKSPACE_"):
            os.environ.pop(key, None)


_clear_rankspace_env()


@pytest.fixture(autouse=True)
def clear_rankspace_env() -> Generator[None, None, None]:
    _clear_rankspace_env()
    yield
    _clear_rankspace_env()


@pytest.fixture
def spacing() -> SpacingOptions:
    return SpacingOptions(
        sibling_distance=10,
        sibling_pre_sep=1,
        sibling_post_sep=1,
        level_distance=20,
        level_pre_sep=0,
        level_post_sep=0,
    )


@pytest.fixture
def run() -> LayoutRun:
    return LayoutRun(run_id="test-run")


@pytest.fixture
def graph(spacing: SpacingOptions) -> LayoutGraph:
    return LayoutGraph(options=spacing)


@pytest.fixture
def add_node(graph: LayoutGraph, run: LayoutRun) -> Callable[..., LayoutNode]:
    """Append a node to ``graph`` and record its extents in ``run``."""

    def _factory(
        node_id: str,
        rank: int = 0,
        *,
        real: bool = True,
        extents: NodeExtents | None = None,
        **options: float,
    ) -> LayoutNode:
        overrides = {OptionKey(name.replace("_", " ")): value for name, value in options.items()}
        node: LayoutNode
        if real:
            node = RealNode(node_id=node_id, rank=rank, options=overrides)
            if extents is not None:
                run.extents[node_id] = extents
        else:
            node = PlaceholderNode(node_id=node_id, rank=rank, options=overrides)
        graph.nodes.append(node)
        return node

    return _factory


@pytest.fixture
def app_settings(spacing: SpacingOptions) -> AppSettings:
    return AppSettings(layout=LayoutSettings(spacing=spacing))
