import logging
from typing import Dict

from langchain_core.messages import HumanMessage

from apps.persona.graph.state import PersonaState
from apps.persona.tools.transcript_parser import filter_by_sender, parse_transcript

logger = logging.getLogger(__name__)


async def load_chat_history_node(state: PersonaState) -> Dict:
    """
    LangGraph node that turns the uploaded transcript into conversation history.

    Only the persona's own lines are kept. Skipped once the conversation has
    any messages, so turns never re-parse the transcript.

    Returns:
        Dict with messages and docs (one per persona line)
    """
    if state.get("messages"):
        logger.info("Chat history already loaded. Skipping.")
        return {}

    transcript_text = state.get("transcript_text") or ""
    if not transcript_text:
        logger.info("No transcript provided; returning empty history.")
        return {}

    persona_name = state.get("persona_name", "")
    records = filter_by_sender(parse_transcript(transcript_text), persona_name)
    logger.info(f"Filtered chat history: {len(records)} messages from {persona_name}.")

    messages = [HumanMessage(content=record.format()) for record in records]
    return {
        "messages": messages,
        "docs": [message.content for message in messages]
    }
