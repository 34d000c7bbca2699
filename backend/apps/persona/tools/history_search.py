import logging
from typing import List

from langchain_core.tools import BaseTool, StructuredTool

from apps.persona.retrievers.history_retriever import ChatHistoryRetriever

logger = logging.getLogger(__name__)


HISTORY_TOOL_NAME = "retrieve_chat_history"
HISTORY_TOOL_DESCRIPTION = "Searches through past chat history to find relevant information"


def build_history_tool(retriever: ChatHistoryRetriever, k: int = 30) -> BaseTool:
    """
    Wrap a session's retriever as the tool offered to the decision model.

    Args:
        retriever: Retriever over the session's similarity index
        k: Number of chat lines the tool returns

    Returns:
        Tool named ``retrieve_chat_history`` taking a ``query`` string
    """

    async def retrieve_chat_history(query: str) -> List[str]:
        """Searches through past chat history to find relevant information.

        Args:
            query: The search query to look up in chat history
        """
        logger.info(f"Tool {HISTORY_TOOL_NAME} called with query: {query[:50]}")
        return await retriever.search(query, k=k)

    return StructuredTool.from_function(
        coroutine=retrieve_chat_history,
        name=HISTORY_TOOL_NAME,
        description=HISTORY_TOOL_DESCRIPTION,
    )
