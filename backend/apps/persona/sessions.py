"""
In-memory session registry.

A session is created by an upload, primed in the background (load + index),
and lives as long as at least one WebSocket connection is bound to it. When
the last connection leaves, the session is marked terminated (so in-flight
indexing stops at the next batch boundary) and evicted.
"""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from langchain_core.messages import BaseMessage
from langchain_core.vectorstores import InMemoryVectorStore

from apps.persona.graph.state import PersonaState
from apps.persona.retrievers.history_retriever import ChatHistoryRetriever
from settings import settings

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything one uploaded transcript needs across its turns."""
    transcript_text: str
    persona_name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    processing: bool = True
    terminated: bool = False
    priming_error: Optional[str] = None
    messages: List[BaseMessage] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)
    current_query: str = ""
    similarity_index: Optional[InMemoryVectorStore] = None
    connections: Set[str] = field(default_factory=set)
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    priming_task: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def retriever(self) -> ChatHistoryRetriever:
        return ChatHistoryRetriever(self.similarity_index)

    @property
    def failed(self) -> bool:
        return self.priming_error is not None

    def install_index(self, index: InMemoryVectorStore):
        """Attach the similarity index. It can be set once per session."""
        if self.similarity_index is not None:
            raise ValueError(f"Session {self.id} already has a similarity index")
        self.similarity_index = index

    def to_state(self, query: str = "") -> PersonaState:
        """Snapshot the session as workflow input.

        Lists are copied so a failed run leaves the session untouched.
        """
        return {
            "transcript_text": self.transcript_text,
            "persona_name": self.persona_name,
            "session_id": self.id,
            "current_query": query,
            "messages": list(self.messages),
            "docs": list(self.docs),
            "decision": None,
        }

    def apply(self, state: PersonaState):
        """Adopt the merged state of a successful workflow run."""
        self.messages = list(state.get("messages", []))
        self.docs = list(state.get("docs", []))
        self.current_query = state.get("current_query", "")


class SessionRegistry:
    """Process-wide map of session id to Session."""

    def __init__(self, orphan_timeout: Optional[float] = None):
        self._sessions: Dict[str, Session] = {}
        self.orphan_timeout = orphan_timeout

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self, transcript_text: str, persona_name: str) -> Session:
        """Register a new session for an uploaded transcript."""
        self.sweep_orphans()
        session = Session(transcript_text=transcript_text, persona_name=persona_name)
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id} for persona {persona_name}")
        return session

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def bind(self, session_id: str, connection_id: str) -> Optional[Session]:
        """Attach a connection to a session. Returns None for unknown ids."""
        session = self.get(session_id)
        if session is None:
            return None
        session.connections.add(connection_id)
        logger.info(f"Connection {connection_id} joined session {session_id} "
                    f"({len(session.connections)} connected)")
        return session

    def release(self, session_id: str, connection_id: str) -> bool:
        """
        Detach a connection from a session.

        Returns:
            True if this was the last connection and the session was evicted
        """
        session = self.get(session_id)
        if session is None:
            return False

        session.connections.discard(connection_id)
        if session.connections:
            return False

        self.terminate(session_id)
        return True

    def terminate(self, session_id: str) -> Optional[Session]:
        """Mark a session terminated and drop it from the registry."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None

        session.terminated = True
        logger.info(f"Session {session_id} terminated due to no active connections")
        return session

    def sweep_orphans(self) -> int:
        """Evict sessions that nobody joined within the orphan timeout."""
        if not self.orphan_timeout:
            return 0

        cutoff = time.monotonic() - self.orphan_timeout
        orphaned = [
            session_id for session_id, session in self._sessions.items()
            if not session.connections and session.created_at < cutoff
        ]
        for session_id in orphaned:
            self.terminate(session_id)

        if orphaned:
            logger.info(f"Swept {len(orphaned)} orphaned sessions")
        return len(orphaned)

    def clear(self):
        for session_id in list(self._sessions):
            self.terminate(session_id)


# Default instance
session_registry = SessionRegistry(orphan_timeout=settings.orphan_session_timeout)
