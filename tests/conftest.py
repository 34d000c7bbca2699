"""Pytest configuration and fixtures."""
import pytest

from apps.persona.sessions import Session, session_registry
from apps.persona.tools.vector_embedding import ChatIndexer
from tests.fakes import CountingEmbeddings


SAMPLE_TRANSCRIPT = "\n".join([
    "[10/02/24, 9:14 PM] Anju: on my way, save me a seat",
    "[10/02/24, 9:15 PM] Me: ok hurry up",
    "[10/02/24, 9:20 PM] Anju: traffic is crazyyy",
    "[10/02/24, 9:22 PM] Me: lol as always",
    "[10/02/24, 9:31 PM] Anju: here!! where r u",
])


@pytest.fixture(autouse=True)
def clean_registry():
    """Each test starts and ends with an empty session registry."""
    session_registry.clear()
    yield
    session_registry.clear()


@pytest.fixture
def embeddings():
    return CountingEmbeddings()


@pytest.fixture
def fast_indexer(embeddings):
    """Indexer with the production policy shape but no real waiting."""
    return ChatIndexer(
        embeddings=embeddings,
        batch_size=2,
        concurrency=1,
        batch_delay=0,
        max_attempts=3,
        retry_base_delay=0,
        retry_factor=2
    )


@pytest.fixture
def session():
    return Session(transcript_text=SAMPLE_TRANSCRIPT, persona_name="Anju")
