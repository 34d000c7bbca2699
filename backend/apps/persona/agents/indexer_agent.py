import logging
from typing import Dict

from langchain_core.runnables import RunnableConfig

from apps.persona.graph.state import PersonaState
from apps.persona.tools.vector_embedding import ChatIndexer

logger = logging.getLogger(__name__)


async def index_chats_node(state: PersonaState, config: RunnableConfig) -> Dict:
    """
    LangGraph node that builds the session's similarity index once.

    Indexes only the transcript lines produced by the loader, so later turns
    never add to the index. On failure the exception propagates and the
    session keeps no index.
    """
    configurable = config.get("configurable", {})
    session = configurable["session"]

    if session.similarity_index is not None:
        logger.info("Similarity index already exists. Skipping indexing.")
        return {}

    docs = state.get("docs", [])
    if not docs:
        logger.info("No documents to index.")
        return {}

    indexer = configurable.get("indexer") or ChatIndexer()
    index = await indexer.build(docs, session, on_progress=configurable.get("on_progress"))
    if index is not None:
        session.install_index(index)
    return {}
