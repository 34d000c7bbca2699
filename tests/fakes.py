"""Offline stand-ins for the embedding and chat providers."""
import asyncio
import hashlib
from typing import Any, List, Optional

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from pydantic import Field


class CountingEmbeddings(Embeddings):
    """Deterministic hash embeddings that count calls and can fail on demand."""

    def __init__(self, failures: int = 0, delay: float = 0.0, size: int = 16):
        self.failures = failures
        self.delay = delay
        self.size = size
        self.calls = 0
        self.batches: List[List[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _vector(self, text: str) -> List[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [byte / 255.0 + 0.01 for byte in digest[:self.size]]

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("embedding provider unavailable")
        self.batches.append(list(texts))
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> List[float]:
        return self._vector(text)

    async def aembed_documents(self, texts: List[str]) -> List[List[float]]:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return self.embed_documents(texts)
        finally:
            self.in_flight -= 1

    async def aembed_query(self, text: str) -> List[float]:
        return self.embed_query(text)


class ScriptedChatModel(GenericFakeChatModel):
    """Fake chat model that replays scripted replies and records its inputs."""

    received: List[Any] = Field(default_factory=list)

    def bind_tools(self, tools, **kwargs):
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(messages)
        return super()._generate(messages, stop=stop, run_manager=run_manager, **kwargs)


class SlowChatModel(ScriptedChatModel):
    """Scripted model that yields to the event loop before answering."""

    delay: float = 0.05

    async def _agenerate(self, messages, stop=None, run_manager=None, **kwargs):
        await asyncio.sleep(self.delay)
        return self._generate(messages, stop=stop, **kwargs)


class FailingChatModel(ScriptedChatModel):
    """Chat model whose provider is always down."""

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(messages)
        raise RuntimeError("chat provider unavailable")


class SpyRetriever:
    """Retriever that records searches and returns canned lines."""

    def __init__(self, lines: Optional[List[str]] = None):
        self.lines = lines or []
        self.searches = []

    async def search(self, query: str, k: int = 30) -> List[str]:
        self.searches.append((query, k))
        return self.lines[:k]


def scripted_model(*replies) -> ScriptedChatModel:
    return ScriptedChatModel(messages=iter(replies))
