from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Literal

from langchain_core.messages import HumanMessage, SystemMessage

from brainstorm.agent import prompts
from brainstorm.agent.idea_tree.schema import (
    EXPERT_OPINION,
    STIMULATING_QUESTION,
    IdeaLabel,
    RoleThought,
)
from brainstorm.agent.idea_tree.validate import validate_idea_tree, validate_opinions, validate_questions
from brainstorm.agent.llm import call_llm_text
from brainstorm.graph.materialize import Materialized, materialize_flat, materialize_tree
from brainstorm.graph.mermaid import to_mermaid
from brainstorm.graph.model import MASTER_KIND, Graph, GraphNode
from brainstorm.schemas.sessions import Role
from brainstorm.services.errors import InvalidRequestError, NodeNotFoundError, ServiceError
from brainstorm.storage.memory import Session
from brainstorm.transcode import decode, encode

logger = logging.getLogger(__name__)

PeerKind = Literal["opinions", "questions"]

# Peer nodes sit to the right of the answer they comment on.
PEER_START = (400.0, 0.0)


@dataclass(frozen=True)
class PeerTask:
    system_prompt: Callable[[], str]
    validate: Callable[[Any], List[RoleThought]]
    label: IdeaLabel


PEER_TASKS: dict[str, PeerTask] = {
    "opinions": PeerTask(prompts.domain_expert_system_prompt, validate_opinions, EXPERT_OPINION),
    "questions": PeerTask(prompts.stimulating_question_system_prompt, validate_questions, STIMULATING_QUESTION),
}


def build_brainstorm_request(master: GraphNode) -> str:
    data = master.data
    return encode(
        {
            "problem": data.get("problem"),
            "goal": data.get("goal"),
            "context": data.get("context"),
        }
    )


def build_peer_request(*, roles: List[Role], graph: Graph, answer: str, answer_node_id: str) -> str:
    return encode(
        {
            "roles": [{"role": r.role, "description": r.description} for r in roles],
            "graph": to_mermaid(graph),
            "user_answer": answer,
            "user_answer_node_id": answer_node_id,
        }
    )


def _master(graph: Graph) -> GraphNode:
    for node in graph.nodes:
        if node.kind == MASTER_KIND:
            return node
    raise NodeNotFoundError("master node not found")


async def _run(session: Session, name: str, step: Callable[[], Any]) -> Materialized:
    logger.info("Session %s: %s started", session.id, name)
    with session.busy_while():
        try:
            materialized = await step()
        except ServiceError as exc:
            logger.warning("Session %s: %s failed: %s", session.id, name, exc.message)
            raise
        except Exception:
            logger.exception("Session %s: %s failed unexpectedly", session.id, name)
            raise
    logger.info("Session %s: %s added %d nodes", session.id, name, len(materialized.nodes))
    return materialized


async def start_brainstorming(session: Session) -> Materialized:
    """Ask the model for the initial idea tree and merge it under the master node."""
    master = _master(session.graph)
    messages = [
        SystemMessage(content=prompts.brainstorm_system_prompt()),
        HumanMessage(content=build_brainstorm_request(master)),
    ]

    async def step() -> Materialized:
        raw = await call_llm_text(messages)
        response = validate_idea_tree(decode(raw))
        materialized = materialize_tree(response.output.tree.root, master.id)
        session.apply(materialized)
        return materialized

    return await _run(session, "brainstorm", step)


async def request_peer_nodes(session: Session, node_id: str, kind: PeerKind) -> Materialized:
    """Ask the selected roles for opinions or questions about a user answer."""
    task = PEER_TASKS.get(kind)
    if task is None:
        raise InvalidRequestError(f"unknown peer request '{kind}'")

    graph = session.graph
    anchor = graph.node(node_id)
    if anchor is None:
        raise NodeNotFoundError(f"node '{node_id}' not found")
    if anchor.kind != "UserNode":
        raise InvalidRequestError("peer requests must target a user answer node")

    roles = [r for r in session.roles if r.selected]
    if not roles:
        raise InvalidRequestError("select at least one role first")

    messages = [
        SystemMessage(content=task.system_prompt()),
        HumanMessage(
            content=build_peer_request(
                roles=roles,
                graph=graph,
                answer=str(anchor.data.get("label") or ""),
                answer_node_id=anchor.id,
            )
        ),
    ]

    async def step() -> Materialized:
        raw = await call_llm_text(messages)
        items = task.validate(decode(raw))
        materialized = materialize_flat(items, task.label, anchor.id, PEER_START)
        session.apply(materialized)
        return materialized

    return await _run(session, kind, step)
