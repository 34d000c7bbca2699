import logging
from typing import Optional

from langchain_core.messages import HumanMessage
from langgraph.graph import StateGraph, END

from apps.persona.graph.state import PersonaState
from apps.persona.agents import (
    load_chat_history_node,
    index_chats_node,
    query_or_respond_node,
    generate_node
)
from apps.persona.tools.vector_embedding import ChatIndexer, ProgressCallback
from core.clients.gemini_client import message_text

logger = logging.getLogger(__name__)


class WorkflowManager:
    """Manages the LangGraph workflow for persona chat sessions."""

    def __init__(self, indexer: Optional[ChatIndexer] = None):
        self.indexer = indexer
        self.app = self._build_workflow_graph()
        logger.info("WorkflowManager initialized")

    def _build_workflow_graph(self):
        """Build and compile the LangGraph workflow."""

        workflow = StateGraph(PersonaState)

        # Add nodes
        workflow.add_node("load_chat_history", load_chat_history_node)
        workflow.add_node("index_chats", index_chats_node)
        workflow.add_node("query_or_respond", query_or_respond_node)
        workflow.add_node("generate", generate_node)

        # Fixed linear order, no branching
        workflow.set_entry_point("load_chat_history")
        workflow.add_edge("load_chat_history", "index_chats")
        workflow.add_edge("index_chats", "query_or_respond")
        workflow.add_edge("query_or_respond", "generate")
        workflow.add_edge("generate", END)

        # Compile
        return workflow.compile()

    async def _invoke(self, session, state: PersonaState, on_progress: Optional[ProgressCallback]):
        config = {
            "configurable": {
                "session": session,
                "on_progress": on_progress,
                "indexer": self.indexer,
            }
        }
        return await self.app.ainvoke(state, config=config)

    async def prime(self, session, on_progress: Optional[ProgressCallback] = None):
        """
        Load and index a session's transcript.

        Runs the full pipeline with no query; the decision and generate
        stages stay idle. Safe to call again: loading and indexing skip
        themselves once done.
        """
        async with session.lock:
            logger.info(f"Priming session {session.id}")
            result = await self._invoke(session, session.to_state(), on_progress)
            session.apply(result)
            logger.info(f"Session {session.id} primed with {len(session.docs)} chat lines")

    async def run_turn(
        self,
        session,
        text: str,
        on_progress: Optional[ProgressCallback] = None
    ) -> str:
        """
        Process one user message through the workflow.

        Turns for the same session run one at a time. The session only adopts
        the new state when the whole pipeline succeeds.

        Returns:
            Text of the last message in the conversation
        """
        async with session.lock:
            state = session.to_state(query=text)
            state["messages"].append(HumanMessage(content=text))

            logger.info(f"Processing turn for session {session.id}")
            result = await self._invoke(session, state, on_progress)
            session.apply(result)

        messages = result.get("messages", [])
        return message_text(messages[-1]) if messages else ""


# Default instance
workflow_manager = WorkflowManager()
