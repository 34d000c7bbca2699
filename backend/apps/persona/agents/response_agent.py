import logging
from typing import Dict

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableConfig

from apps.persona.graph.state import PersonaState
from apps.persona.tools.response_validator import strip_reasoning
from core.clients.gemini_client import get_chat_model, message_text
from settings import settings

logger = logging.getLogger(__name__)


PERSONA_PROMPT = """You are {persona_name}, who communicates exactly in the distinctive style found in our chats. I am the other person from our chats, texting you and expecting a reply that sounds like {persona_name}.

Guidelines:
- Use the retrieved context from our past chats to answer consistently with that style
- Match the tone, language, slang and message length you see in the context
- If there is not much context, make up something relevant in the same tone instead of refusing
- Never say you are an AI or that you lack context
- Keep your answer concise

Retrieved context:
{context}

User question:
{question}

Answer:"""


async def generate_node(state: PersonaState, config: RunnableConfig) -> Dict:
    """
    LangGraph node that writes the persona's reply.

    Retrieves matching chat lines (using the decision's tool-call query when
    there is one), renders the persona prompt and streams the completion.
    Idle when there is no current query.

    Returns:
        Dict with the reply message; current_query cleared
    """
    question = state.get("current_query", "")
    if not question:
        logger.info("No current query provided.")
        return {"current_query": "", "decision": None}

    session = config["configurable"]["session"]
    decision = state.get("decision")
    search_query = decision.search_query(question) if decision else question
    logger.info(f"Generating reply for: {question[:50]} (search: {search_query[:50]})")

    documents = await session.retriever.search(search_query, k=settings.retrieval_k)
    prompt = PERSONA_PROMPT.format(
        persona_name=state.get("persona_name", ""),
        context="\n".join(documents),
        question=question
    )

    try:
        llm = get_chat_model(temperature=settings.response_temperature)
        response = None
        async for chunk in llm.astream(prompt):
            response = chunk if response is None else response + chunk
    except Exception as e:
        logger.error(f"Reply generation failed: {str(e)}")
        raise

    answer = strip_reasoning(message_text(response))
    logger.info(f"Reply generated from {len(documents)} context lines.")

    return {
        "messages": [AIMessage(content=answer)],
        "current_query": "",
        "decision": None
    }
