from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from brainstorm.graph.model import GraphEdge, GraphNode


class Role(BaseModel):
    role: str = Field(..., min_length=1)
    description: str = ""
    selected: bool = False


class RoleUpdate(BaseModel):
    description: Optional[str] = None
    selected: Optional[bool] = None


class SessionResponse(BaseModel):
    session_id: str


class SessionSnapshot(BaseModel):
    session_id: str
    busy: bool
    nodes: List[GraphNode]
    edges: List[GraphEdge]
    roles: List[Role]


class MasterUpdate(BaseModel):
    problem: str
    goal: str
    context: Optional[str] = None


class UserNodeCreate(BaseModel):
    parent_id: str
    x: float = 0.0
    y: float = 0.0


class NodeDataUpdate(BaseModel):
    data: Dict[str, Any]


class MaterializedResponse(BaseModel):
    nodes: List[GraphNode]
    edges: List[GraphEdge]


class MermaidResponse(BaseModel):
    mermaid: str
