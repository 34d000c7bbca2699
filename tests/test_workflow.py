import asyncio

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from apps.persona.agents import decision_agent, response_agent
from apps.persona.graph.workflow import WorkflowManager
from tests.fakes import FailingChatModel, SlowChatModel, scripted_model


@pytest.fixture
def manager(fast_indexer):
    return WorkflowManager(indexer=fast_indexer)


def use_models(monkeypatch, decision_model, response_model):
    monkeypatch.setattr(decision_agent, "get_chat_model", lambda temperature=0.7: decision_model)
    monkeypatch.setattr(response_agent, "get_chat_model", lambda temperature=0.7: response_model)


async def test_prime_loads_and_indexes(manager, session, embeddings):
    progress = []

    async def record(session_id, percent):
        progress.append(percent)

    await manager.prime(session, on_progress=record)

    assert len(session.messages) == 3
    assert len(session.docs) == 3
    assert session.similarity_index is not None
    assert embeddings.calls == 2
    assert progress == [50, 100]
    assert session.current_query == ""


async def test_prime_is_idempotent(manager, session, embeddings):
    await manager.prime(session)
    index = session.similarity_index
    calls = embeddings.calls

    await manager.prime(session)

    assert embeddings.calls == calls
    assert session.similarity_index is index
    assert len(session.messages) == 3


async def test_turn_appends_question_and_reply(manager, session, embeddings, monkeypatch):
    decision_reply = AIMessage(content="hmm lemme think")
    use_models(
        monkeypatch,
        scripted_model(decision_reply),
        scripted_model("<think>keep it short</think>almost there!!")
    )
    await manager.prime(session)
    calls = embeddings.calls

    reply = await manager.run_turn(session, "where are you")

    assert reply == "almost there!!"
    assert embeddings.calls == calls
    assert [type(m) for m in session.messages[3:]] == [HumanMessage, AIMessage, AIMessage]
    assert session.messages[3].content == "where are you"
    assert session.messages[-1].content == "almost there!!"
    assert session.current_query == ""
    assert len(session.docs) == 3


async def test_failed_turn_leaves_session_unchanged(manager, session, monkeypatch):
    use_models(monkeypatch, scripted_model(AIMessage(content="ok")), FailingChatModel(messages=iter([])))
    await manager.prime(session)
    before = list(session.messages)

    with pytest.raises(RuntimeError):
        await manager.run_turn(session, "where are you")

    assert session.messages == before
    assert session.current_query == ""


async def test_turn_without_persona_lines_still_answers(manager, monkeypatch, embeddings):
    from apps.persona.sessions import Session

    session = Session(transcript_text="[1] Me: only me here", persona_name="Anju")
    use_models(monkeypatch, scripted_model(AIMessage(content="hey")), scripted_model("heyy"))

    await manager.prime(session)
    reply = await manager.run_turn(session, "hi")

    assert session.similarity_index is None
    assert embeddings.calls == 0
    assert reply == "heyy"


async def test_concurrent_turns_on_one_session_run_in_order(manager, session, monkeypatch):
    decision_model = SlowChatModel(messages=iter([AIMessage(content="a"), AIMessage(content="a")]))
    use_models(monkeypatch, decision_model, scripted_model("r1", "r2"))
    await manager.prime(session)

    replies = await asyncio.gather(
        manager.run_turn(session, "q1"),
        manager.run_turn(session, "q2"),
    )

    assert replies == ["r1", "r2"]
    assert [m.content for m in session.messages[3:]] == ["q1", "a", "r1", "q2", "a", "r2"]
    assert len(decision_model.received[1]) > len(decision_model.received[0])
