from typing import List

from fastapi import APIRouter, status

from brainstorm.graph.materialize import Materialized
from brainstorm.graph.mermaid import to_mermaid
from brainstorm.graph.model import GraphNode
from brainstorm.schemas.sessions import (
    MasterUpdate,
    MaterializedResponse,
    MermaidResponse,
    NodeDataUpdate,
    Role,
    RoleUpdate,
    SessionResponse,
    SessionSnapshot,
    UserNodeCreate,
)
from brainstorm.services import brainstorm as brainstorm_service
from brainstorm.services import sessions as session_service

sessions_router = APIRouter(prefix="/sessions", tags=["sessions"])


def _materialized(result: Materialized) -> MaterializedResponse:
    return MaterializedResponse(nodes=list(result.nodes), edges=list(result.edges))


@sessions_router.post("", status_code=status.HTTP_201_CREATED, response_model=SessionResponse)
def create_session():
    session = session_service.create_session()
    return SessionResponse(session_id=session.id)


@sessions_router.get("/{session_id}", response_model=SessionSnapshot)
def get_session(session_id: str):
    session = session_service.fetch_session(session_id)
    graph = session.graph
    return SessionSnapshot(
        session_id=session.id,
        busy=session.busy,
        nodes=graph.nodes,
        edges=graph.edges,
        roles=session.roles,
    )


@sessions_router.get("/{session_id}/mermaid", response_model=MermaidResponse)
def get_mermaid(session_id: str):
    session = session_service.fetch_session(session_id)
    return MermaidResponse(mermaid=to_mermaid(session.graph))


@sessions_router.put("/{session_id}/master", response_model=GraphNode)
def update_master(session_id: str, payload: MasterUpdate):
    session = session_service.fetch_session(session_id)
    return session_service.update_master(session, payload)


@sessions_router.post("/{session_id}/nodes", status_code=status.HTTP_201_CREATED, response_model=MaterializedResponse)
def add_user_node(session_id: str, payload: UserNodeCreate):
    session = session_service.fetch_session(session_id)
    return _materialized(session_service.add_user_node(session, payload.parent_id, payload.x, payload.y))


@sessions_router.patch("/{session_id}/nodes/{node_id}", response_model=GraphNode)
def update_node(session_id: str, node_id: str, payload: NodeDataUpdate):
    session = session_service.fetch_session(session_id)
    return session_service.update_node_data(session, node_id, payload.data)


@sessions_router.get("/{session_id}/roles", response_model=List[Role])
def list_roles(session_id: str):
    session = session_service.fetch_session(session_id)
    return session_service.list_roles(session)


@sessions_router.post("/{session_id}/roles", status_code=status.HTTP_201_CREATED, response_model=Role)
def add_role(session_id: str, payload: Role):
    session = session_service.fetch_session(session_id)
    return session_service.add_role(session, payload)


@sessions_router.put("/{session_id}/roles/{role}", response_model=Role)
def update_role(session_id: str, role: str, payload: RoleUpdate):
    session = session_service.fetch_session(session_id)
    return session_service.update_role(session, role, payload)


@sessions_router.post("/{session_id}/brainstorm", response_model=MaterializedResponse)
async def start_brainstorming(session_id: str):
    session = session_service.fetch_session(session_id)
    return _materialized(await brainstorm_service.start_brainstorming(session))


@sessions_router.post("/{session_id}/nodes/{node_id}/opinions", response_model=MaterializedResponse)
async def domain_expert_opinion(session_id: str, node_id: str):
    session = session_service.fetch_session(session_id)
    return _materialized(await brainstorm_service.request_peer_nodes(session, node_id, "opinions"))


@sessions_router.post("/{session_id}/nodes/{node_id}/questions", response_model=MaterializedResponse)
async def stimulating_question(session_id: str, node_id: str):
    session = session_service.fetch_session(session_id)
    return _materialized(await brainstorm_service.request_peer_nodes(session, node_id, "questions"))
