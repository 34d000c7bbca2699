import operator
from typing import Annotated, Any, Dict, List, Literal, Optional, TypedDict

from langchain_core.messages import AIMessage, BaseMessage
from pydantic import BaseModel, Field

from core.clients.gemini_client import message_text


class DecisionResult(BaseModel):
    """What the decision stage asked for: a direct answer or a tool call."""
    kind: Literal["answer", "tool_call"]
    text: str = ""
    name: Optional[str] = None
    arguments: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_message(cls, message: AIMessage) -> "DecisionResult":
        """Build from a model reply, preferring bound-tool calls over text."""
        tool_calls = getattr(message, "tool_calls", None) or []
        if tool_calls:
            call = tool_calls[0]
            return cls(
                kind="tool_call",
                name=call.get("name"),
                arguments=call.get("args") or {}
            )

        return cls(kind="answer", text=message_text(message))

    def search_query(self, fallback: str) -> str:
        """Query to run against chat history for this decision."""
        if self.kind == "tool_call":
            query = self.arguments.get("query")
            if isinstance(query, str) and query.strip():
                return query
        return fallback


class PersonaState(TypedDict, total=False):
    """State schema for the LangGraph workflow.

    List fields concatenate across node patches; scalar fields overwrite.
    """

    # Input
    transcript_text: str
    persona_name: str
    session_id: str
    current_query: str

    # Conversation (human/agent messages, oldest first)
    messages: Annotated[List[BaseMessage], operator.add]

    # Transcript lines handed to the indexer
    docs: Annotated[List[str], operator.add]

    # Routing
    decision: Optional[DecisionResult]
