from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

NodeKind = Literal["MasterNode", "UserNode", "AIGeneratedNode"]

MASTER_KIND: NodeKind = "MasterNode"
MASTER_NODE_ID = "root"


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class GraphNode(BaseModel):
    id: str = Field(..., min_length=1)
    kind: NodeKind
    data: dict[str, Any] = Field(default_factory=dict)
    position: Position = Field(default_factory=Position)
    # Position is relative to this node when set.
    parent_id: Optional[str] = None


class GraphEdge(BaseModel):
    id: str = Field(..., min_length=1)
    source: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)


class Graph(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    @model_validator(mode="after")
    def _referential_integrity(self) -> "Graph":
        errors = integrity_errors(self.nodes, self.edges)
        if errors:
            raise ValueError("; ".join(errors))
        return self

    def node(self, node_id: str) -> Optional[GraphNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None


def integrity_errors(nodes: list[GraphNode], edges: list[GraphEdge]) -> list[str]:
    errors: list[str] = []
    node_ids = [n.id for n in nodes]
    if len(set(node_ids)) != len(node_ids):
        errors.append("nodes[].id must be unique")

    edge_ids = [e.id for e in edges]
    if len(set(edge_ids)) != len(edge_ids):
        errors.append("edges[].id must be unique")

    node_set = set(node_ids)
    for e in edges:
        if e.source not in node_set:
            errors.append(f"edge '{e.id}' has unknown source '{e.source}'")
        if e.target not in node_set:
            errors.append(f"edge '{e.id}' has unknown target '{e.target}'")
    return errors


def master_node(*, problem: str = "", goal: str = "", context: str = "") -> GraphNode:
    return GraphNode(
        id=MASTER_NODE_ID,
        kind=MASTER_KIND,
        data={"problem": problem, "goal": goal, "context": context},
    )


def initial_graph() -> Graph:
    return Graph(nodes=[master_node()])
