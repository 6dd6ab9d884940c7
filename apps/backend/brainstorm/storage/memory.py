from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
from uuid import uuid4

from brainstorm.graph.materialize import Materialized
from brainstorm.graph.merge import merge
from brainstorm.graph.model import Graph, GraphEdge, GraphNode, Position, initial_graph
from brainstorm.schemas.sessions import Role
from brainstorm.services.errors import InvalidRequestError, RoleNotFoundError

logger = logging.getLogger(__name__)


def default_roles() -> List[Role]:
    return [
        Role(role="🏢 CEO", description="The CEO of a large company"),
        Role(role="📈 Marketing Manager", description="The marketing manager of a large company"),
    ]


@dataclass
class Session:
    id: str
    graph: Graph = field(default_factory=initial_graph)
    roles: List[Role] = field(default_factory=default_roles)
    _pending: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def busy(self) -> bool:
        return self._pending > 0

    @contextmanager
    def busy_while(self) -> Iterator[None]:
        """Mark a model call as outstanding; always cleared on exit."""
        with self._lock:
            self._pending += 1
        try:
            yield
        finally:
            with self._lock:
                self._pending -= 1

    def apply(self, materialized: Materialized) -> Graph:
        """Merge materialized elements as one swap of the session graph."""
        with self._lock:
            merged = merge(self.graph, materialized)
            self.graph = merged
        logger.info(
            "Session %s: merged %d nodes, %d edges",
            self.id,
            len(materialized.nodes),
            len(materialized.edges),
        )
        return merged

    def replace_node(self, node: GraphNode) -> Graph:
        with self._lock:
            nodes = [node if n.id == node.id else n for n in self.graph.nodes]
            self.graph = Graph.model_construct(nodes=nodes, edges=list(self.graph.edges))
            return self.graph

    def add_role(self, role: Role) -> Role:
        with self._lock:
            if any(r.role == role.role for r in self.roles):
                raise InvalidRequestError(f"role '{role.role}' already exists")
            self.roles = [*self.roles, role]
        return role

    def update_role(self, name: str, changes: Dict[str, Any]) -> Role:
        with self._lock:
            current = next((r for r in self.roles if r.role == name), None)
            if current is None:
                raise RoleNotFoundError(f"role '{name}' not found")
            updated = current.model_copy(update=changes)
            self.roles = [updated if r.role == name else r for r in self.roles]
        return updated


_SESSIONS: Dict[str, Session] = {}


def create_session() -> Session:
    session_id = str(uuid4())
    session = Session(id=session_id)
    _SESSIONS[session_id] = session
    return session


def get_session(session_id: str) -> Optional[Session]:
    return _SESSIONS.get(session_id)


def add_child_node(session: Session, parent_id: str, position: Dict[str, Any]) -> Materialized:
    node_id = uuid4().hex
    node = GraphNode(
        id=node_id,
        kind="UserNode",
        data={"label": ""},
        position=Position(**position),
        parent_id=parent_id,
    )
    edge = GraphEdge(id=uuid4().hex, source=parent_id, target=node_id)
    materialized = Materialized(nodes=(node,), edges=(edge,))
    session.apply(materialized)
    return materialized


def clear_sessions() -> None:
    _SESSIONS.clear()
