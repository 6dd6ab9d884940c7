from typing import Any, Dict, List

from brainstorm.graph.materialize import Materialized
from brainstorm.graph.model import MASTER_KIND, GraphNode
from brainstorm.schemas.sessions import MasterUpdate, Role, RoleUpdate
from brainstorm.services.errors import InvalidRequestError, NodeNotFoundError, SessionNotFoundError
from brainstorm.storage.memory import (
    Session,
    add_child_node as store_add_child_node,
    create_session as store_create_session,
    get_session as store_get_session,
)


def create_session() -> Session:
    return store_create_session()


def fetch_session(session_id: str) -> Session:
    session = store_get_session(session_id)
    if session is None:
        raise SessionNotFoundError(f"session '{session_id}' not found")
    return session


def _node(session: Session, node_id: str) -> GraphNode:
    node = session.graph.node(node_id)
    if node is None:
        raise NodeNotFoundError(f"node '{node_id}' not found")
    return node


def update_master(session: Session, payload: MasterUpdate) -> GraphNode:
    master = next((n for n in session.graph.nodes if n.kind == MASTER_KIND), None)
    if master is None:
        raise NodeNotFoundError("master node not found")
    updated = master.model_copy(update={"data": payload.model_dump()})
    session.replace_node(updated)
    return updated


def add_user_node(session: Session, parent_id: str, x: float, y: float) -> Materialized:
    _node(session, parent_id)
    return store_add_child_node(session, parent_id, {"x": x, "y": y})


def update_node_data(session: Session, node_id: str, data: Dict[str, Any]) -> GraphNode:
    node = _node(session, node_id)
    if node.kind == MASTER_KIND:
        raise InvalidRequestError("use the master endpoint to edit the master node")
    updated = node.model_copy(update={"data": dict(data)})
    session.replace_node(updated)
    return updated


def list_roles(session: Session) -> List[Role]:
    return list(session.roles)


def add_role(session: Session, role: Role) -> Role:
    return session.add_role(role)


def update_role(session: Session, name: str, payload: RoleUpdate) -> Role:
    return session.update_role(name, payload.model_dump(exclude_none=True))
