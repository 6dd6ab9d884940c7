import asyncio

import pytest

import brainstorm.services.brainstorm as brainstorm_service
from brainstorm.services.errors import (
    InvalidRequestError,
    LLMCallError,
    ShapeValidationError,
    StructuralDepthError,
    XmlParseError,
)
from brainstorm.storage.memory import add_child_node, create_session
from brainstorm.schemas.sessions import Role

TREE_REPLY = """Here is the tree.
<output>
  <thought>Start with the market.</thought>
  <tree>
    <root>
      <id>1</id>
      <label>AI Section Suggestion</label>
      <helper>Who is it for</helper>
      <content>Target Market</content>
      <children>
        <id>2</id>
        <label>AI Question</label>
        <helper></helper>
        <content>Who feels the pain most - and why?</content>
      </children>
      <children>
        <id>3</id>
        <label>AI Question</label>
        <helper></helper>
        <content>What do they use today?</content>
      </children>
    </root>
  </tree>
</output>"""

OPINIONS_REPLY = (
    "<output><opinions><opinion><name>🏢 CEO</name><thoughts>Your answer scales.</thoughts></opinion>"
    "</opinions></output>"
)


def _fake_llm(monkeypatch, reply=None, exc=None):
    calls = []

    async def fake_call_llm_text(messages, **kwargs):
        calls.append(messages)
        if exc is not None:
            raise exc
        return reply

    monkeypatch.setattr(brainstorm_service, "call_llm_text", fake_call_llm_text)
    return calls


def _session_with_answer():
    session = create_session()
    answer = add_child_node(session, "root", {"x": 0, "y": 300}).nodes[0]
    session.replace_node(answer.model_copy(update={"data": {"label": "Sell to schools"}}))
    return session, answer.id


def test_start_brainstorming_merges_tree(monkeypatch) -> None:
    calls = _fake_llm(monkeypatch, TREE_REPLY)
    session = create_session()
    session.replace_node(
        session.graph.nodes[0].model_copy(update={"data": {"problem": "A&B", "goal": "G", "context": None}})
    )

    result = asyncio.run(brainstorm_service.start_brainstorming(session))

    assert len(result.nodes) == 3
    assert len(session.graph.nodes) == 4
    assert len(session.graph.edges) == 3
    assert session.busy is False
    assert result.nodes[1].data["content"] == "Who feels the pain most - and why?"
    user_message = calls[0][1].content
    assert user_message == "<problem>A&amp;B</problem><goal>G</goal><context></context>"


@pytest.mark.parametrize(
    "reply, error",
    [
        ("<output><tree><root>broken</tree></output>", XmlParseError),
        ("<output><tree><root><id>1</id><label>Nope</label><content>c</content></root></tree></output>", ShapeValidationError),
        ("I could not help with that.", ShapeValidationError),
    ],
)
def test_failed_pipeline_leaves_graph_unchanged(monkeypatch, reply, error) -> None:
    _fake_llm(monkeypatch, reply)
    session = create_session()
    before = session.graph

    with pytest.raises(error):
        asyncio.run(brainstorm_service.start_brainstorming(session))

    assert session.graph is before
    assert session.busy is False


def test_too_deep_tree_is_a_validation_failure(monkeypatch) -> None:
    node = "<id>{0}</id><label>AI Question</label><content>c</content>"
    body = ""
    for i in range(12, 0, -1):
        body = f"<children>{node.format(i)}{body}</children>"
    reply = f"<output><tree><root>{node.format(0)}{body}</root></tree></output>"
    _fake_llm(monkeypatch, reply)
    session = create_session()

    with pytest.raises(StructuralDepthError):
        asyncio.run(brainstorm_service.start_brainstorming(session))
    assert len(session.graph.nodes) == 1
    assert session.busy is False


def test_llm_failure_clears_busy(monkeypatch) -> None:
    _fake_llm(monkeypatch, exc=LLMCallError("timed out"))
    session = create_session()

    with pytest.raises(LLMCallError):
        asyncio.run(brainstorm_service.start_brainstorming(session))
    assert session.busy is False
    assert len(session.graph.nodes) == 1


def test_peer_request_sends_selected_roles_and_graph(monkeypatch) -> None:
    calls = _fake_llm(monkeypatch, OPINIONS_REPLY)
    session, answer_id = _session_with_answer()
    session.roles = [r.model_copy(update={"selected": r.role == "🏢 CEO"}) for r in session.roles]

    result = asyncio.run(brainstorm_service.request_peer_nodes(session, answer_id, "opinions"))

    assert len(result.nodes) == 1
    assert result.edges[0].source == answer_id
    assert result.nodes[0].data == {
        "label": "Domain Expert Opinion",
        "content": "Your answer scales.",
        "helper_text": "🏢 CEO",
    }
    prompt = calls[0][1].content
    assert "<roles><role>🏢 CEO</role><description>The CEO of a large company</description></roles>" in prompt
    assert "Marketing Manager" not in prompt
    assert "<graph>graph TD\n" in prompt
    assert f"{answer_id}[Sell to schools-]:::UserNode" in prompt
    assert f"root --&gt; {answer_id}" in prompt
    assert "<user_answer>Sell to schools</user_answer>" in prompt
    assert f"<user_answer_node_id>{answer_id}</user_answer_node_id>" in prompt


def test_peer_questions_use_question_label(monkeypatch) -> None:
    reply = (
        "<output><questions><question><name>CFO</name><thoughts>Who pays?</thoughts></question>"
        "<question><name>CFO</name><thoughts>When?</thoughts></question></questions></output>"
    )
    _fake_llm(monkeypatch, reply)
    session, answer_id = _session_with_answer()
    session.roles = [Role(role="CFO", description="Money", selected=True)]

    result = asyncio.run(brainstorm_service.request_peer_nodes(session, answer_id, "questions"))

    assert [n.data["label"] for n in result.nodes] == ["AI Stimulating Question"] * 2
    assert [n.position.y for n in result.nodes] == [0.0, 200.0]
    assert len(session.graph.nodes) == 4


def test_peer_request_requires_selected_roles(monkeypatch) -> None:
    calls = _fake_llm(monkeypatch, OPINIONS_REPLY)
    session, answer_id = _session_with_answer()

    with pytest.raises(InvalidRequestError):
        asyncio.run(brainstorm_service.request_peer_nodes(session, answer_id, "opinions"))
    assert calls == []


def test_peer_request_rejects_master_anchor(monkeypatch) -> None:
    _fake_llm(monkeypatch, OPINIONS_REPLY)
    session = create_session()
    session.roles = [Role(role="CFO", selected=True)]

    with pytest.raises(InvalidRequestError):
        asyncio.run(brainstorm_service.request_peer_nodes(session, "root", "opinions"))


def test_reply_without_opinion_items_fails_instead_of_adding_nothing(monkeypatch) -> None:
    _fake_llm(monkeypatch, "<output><opinions><answer>Looks fine.</answer></opinions></output>")
    session, answer_id = _session_with_answer()
    session.roles = [Role(role="CFO", selected=True)]
    before = session.graph

    with pytest.raises(ShapeValidationError) as excinfo:
        asyncio.run(brainstorm_service.request_peer_nodes(session, answer_id, "opinions"))
    assert excinfo.value.path == "output.opinions.opinion"
    assert session.graph is before
    assert session.busy is False
