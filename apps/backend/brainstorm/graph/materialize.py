from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence
from uuid import uuid4

from brainstorm.agent.idea_tree.schema import IdeaLabel, IdeaNode, RoleThought
from brainstorm.config import MATERIALIZE_MAX_DEPTH
from brainstorm.services.errors import StructuralDepthError
from .model import GraphEdge, GraphNode, Position

logger = logging.getLogger(__name__)

AI_NODE_KIND = "AIGeneratedNode"


def _mint_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class LayoutConfig:
    sibling_step: float = 200.0
    depth_dx: float = 1000.0
    depth_dy: float = 700.0


DEFAULT_LAYOUT = LayoutConfig()


@dataclass(frozen=True)
class Materialized:
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    # Model-supplied id -> minted id, valid for this materialization only.
    source_ids: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


def _ai_node(
    node_id: str,
    *,
    label: str,
    content: str,
    helper: Optional[str],
    x: float,
    y: float,
    parent_id: str,
) -> GraphNode:
    return GraphNode(
        id=node_id,
        kind=AI_NODE_KIND,
        data={"label": label, "content": content, "helper_text": helper},
        position=Position(x=x, y=y),
        parent_id=parent_id,
    )


def materialize_tree(
    forest: Sequence[IdeaNode],
    anchor_id: str,
    start: tuple[float, float] = (0.0, 0.0),
    *,
    layout: LayoutConfig = DEFAULT_LAYOUT,
    max_depth: int | None = None,
    id_factory: Callable[[], str] = _mint_id,
) -> Materialized:
    """Turn a validated idea forest into new graph nodes and edges.

    A node at depth ``d`` with sibling index ``i`` sits at
    ``start + (d * depth_dx, d * depth_dy + i * sibling_step)`` relative to
    its parent. Every node gets a fresh id from ``id_factory`` and one edge
    from its parent's fresh id (the anchor for roots). The live graph is
    not touched.
    """
    limit = MATERIALIZE_MAX_DEPTH if max_depth is None else max_depth
    start_x, start_y = start
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    source_ids: dict[str, str] = {}

    def visit(siblings: Sequence[IdeaNode], parent_id: str, depth: int, path: str) -> None:
        if siblings and depth >= limit:
            raise StructuralDepthError(path, siblings[0].id, f"tree deeper than {limit} levels")
        x = start_x + depth * layout.depth_dx
        base_y = start_y + depth * layout.depth_dy
        for index, idea in enumerate(siblings):
            node_id = id_factory()
            source_ids.setdefault(idea.id, node_id)
            nodes.append(
                _ai_node(
                    node_id,
                    label=idea.label,
                    content=idea.content,
                    helper=idea.helper,
                    x=x,
                    y=base_y + index * layout.sibling_step,
                    parent_id=parent_id,
                )
            )
            edges.append(GraphEdge(id=id_factory(), source=parent_id, target=node_id))
            visit(idea.children, node_id, depth + 1, f"{path}[{index}].children")

    visit(forest, anchor_id, 0, "root")
    logger.debug("Materialized %d nodes under anchor %s", len(nodes), anchor_id)
    return Materialized(nodes=tuple(nodes), edges=tuple(edges), source_ids=MappingProxyType(source_ids))


def materialize_flat(
    items: Sequence[RoleThought],
    label: IdeaLabel,
    anchor_id: str,
    start: tuple[float, float] = (0.0, 0.0),
    *,
    layout: LayoutConfig = DEFAULT_LAYOUT,
    id_factory: Callable[[], str] = _mint_id,
) -> Materialized:
    """Attach each role-attributed opinion/question directly to the anchor."""
    start_x, start_y = start
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    for index, item in enumerate(items):
        node_id = id_factory()
        nodes.append(
            _ai_node(
                node_id,
                label=label,
                content=item.thoughts,
                helper=item.name,
                x=start_x,
                y=start_y + index * layout.sibling_step,
                parent_id=anchor_id,
            )
        )
        edges.append(GraphEdge(id=id_factory(), source=anchor_id, target=node_id))
    return Materialized(nodes=tuple(nodes), edges=tuple(edges))
