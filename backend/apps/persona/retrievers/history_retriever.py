import logging
from typing import List, Optional

from langchain_core.vectorstores import VectorStore

logger = logging.getLogger(__name__)


class ChatHistoryRetriever:
    """Retriever for semantic search over a session's indexed chat lines."""

    def __init__(self, index: Optional[VectorStore] = None):
        self.index = index

    async def search(self, query: str, k: int = 30) -> List[str]:
        """
        Find the chat lines most similar to a query.

        Args:
            query: The search query
            k: Number of lines to return

        Returns:
            Matching line texts, best match first
        """
        if self.index is None:
            logger.warning("No similarity index available for retrieval")
            return []

        documents = await self.index.asimilarity_search(query, k=k)
        if not documents:
            logger.info(f"No similar chat lines found for query: {query[:50]}")
            return []

        logger.info(f"Retrieved {len(documents)} chat lines for query: {query[:50]}")
        return [doc.page_content for doc in documents]
