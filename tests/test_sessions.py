import time

import pytest
from langchain_core.vectorstores import InMemoryVectorStore

from apps.persona.sessions import Session, SessionRegistry
from tests.fakes import CountingEmbeddings


@pytest.fixture
def registry():
    return SessionRegistry()


def test_create_assigns_uuid_and_starts_processing(registry):
    session = registry.create("[1] Anju: hi", "Anju")

    assert len(session.id) == 36
    assert session.processing is True
    assert session.terminated is False
    assert registry.get(session.id) is session
    assert session.id in registry


def test_get_unknown_or_empty_id(registry):
    assert registry.get("missing") is None
    assert registry.get(None) is None


def test_last_connection_leaving_evicts_session(registry):
    session = registry.create("", "Anju")
    registry.bind(session.id, "conn-1")
    registry.bind(session.id, "conn-2")

    assert registry.release(session.id, "conn-1") is False
    assert session.id in registry

    assert registry.release(session.id, "conn-2") is True
    assert session.id not in registry
    assert session.terminated is True


def test_bind_unknown_session(registry):
    assert registry.bind("missing", "conn-1") is None


def test_sweep_evicts_only_old_unjoined_sessions():
    registry = SessionRegistry(orphan_timeout=60)
    stale = registry.create("", "Anju")
    stale.created_at = time.monotonic() - 120
    joined = registry.create("", "Anju")
    joined.created_at = time.monotonic() - 120
    registry.bind(joined.id, "conn-1")
    fresh = registry.create("", "Anju")

    assert stale.id not in registry
    assert stale.terminated is True
    assert joined.id in registry
    assert fresh.id in registry


def test_index_can_only_be_installed_once():
    session = Session(transcript_text="", persona_name="Anju")
    index = InMemoryVectorStore(embedding=CountingEmbeddings())
    session.install_index(index)

    with pytest.raises(ValueError):
        session.install_index(InMemoryVectorStore(embedding=CountingEmbeddings()))
    assert session.similarity_index is index


def test_to_state_copies_lists():
    session = Session(transcript_text="t", persona_name="Anju")
    state = session.to_state("hello")
    state["messages"].append("x")

    assert session.messages == []
    assert state["current_query"] == "hello"
    assert state["session_id"] == session.id
