import logging
from typing import Dict, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.runnables import RunnableConfig

from apps.persona.graph.state import DecisionResult, PersonaState
from apps.persona.tools.history_search import build_history_tool
from core.clients.gemini_client import get_chat_model, message_text
from settings import settings

logger = logging.getLogger(__name__)


DECISION_INSTRUCTION = (
    "Instruction: Respond in our chat style. Be accurate and do not reply with "
    "something that is irrelevant or does not make sense for the question. Give a "
    "proper reply, and if extra context is needed to answer accurately, call "
    "'retrieve_chat_history' with a search query."
)


def trim_messages(messages: List[BaseMessage], max_messages: int = 30) -> List[BaseMessage]:
    """Keep only the most recent ``max_messages`` messages."""
    if len(messages) > max_messages:
        logger.info(f"Trimming messages from {len(messages)} to {max_messages}.")
        return messages[-max_messages:]
    return messages


def _as_plain_message(message: BaseMessage) -> BaseMessage:
    """Render earlier tool-call requests as plain agent text."""
    if isinstance(message, AIMessage) and message.tool_calls:
        queries = ", ".join(
            str(call.get("args", {}).get("query", "")) for call in message.tool_calls
        )
        return AIMessage(content=f"[searched chat history for: {queries}]")
    return message


def build_decision_messages(
    history: List[BaseMessage],
    max_messages: int = 30
) -> List[BaseMessage]:
    """Instruction followed by the recent conversation."""
    recent = [_as_plain_message(message) for message in trim_messages(history, max_messages)]
    return [HumanMessage(content=DECISION_INSTRUCTION)] + recent


async def query_or_respond_node(state: PersonaState, config: RunnableConfig) -> Dict:
    """
    LangGraph node that lets the model answer or request a history lookup.

    The lookup itself is resolved by the generate node; here the model's
    reply is only recorded and classified.

    Returns:
        Dict with the agent message and its DecisionResult
    """
    query = state.get("current_query", "")
    if not query:
        logger.info("No current query. Skipping decision.")
        return {}

    session = config["configurable"]["session"]
    logger.info(f"Deciding how to answer: {query[:50]}...")

    tool = build_history_tool(session.retriever, k=settings.retrieval_k)
    llm = get_chat_model(temperature=settings.decision_temperature).bind_tools([tool])

    messages = build_decision_messages(state.get("messages", []), settings.history_window)
    try:
        response = await llm.ainvoke(messages)
    except Exception as e:
        logger.error(f"Decision generation failed: {str(e)}")
        raise

    decision = DecisionResult.from_message(response)
    if decision.kind == "tool_call":
        logger.info(f"Model requested {decision.name} with {decision.arguments}")
    else:
        logger.info(f"Model answered directly: {message_text(response)[:50]}...")

    return {
        "messages": [response],
        "decision": decision
    }
