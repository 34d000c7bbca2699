import logging
from functools import lru_cache
from typing import List

from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings

from settings import settings

logger = logging.getLogger(__name__)


@lru_cache
def get_embeddings_model() -> GoogleGenerativeAIEmbeddings:
    """Get cached Gemini embeddings model."""
    return GoogleGenerativeAIEmbeddings(
        model=settings.embedding_model,
        google_api_key=settings.google_api_key
    )


@lru_cache
def get_chat_model(temperature: float = 0.7) -> ChatGoogleGenerativeAI:
    """Get cached Gemini chat model."""
    return ChatGoogleGenerativeAI(
        model=settings.chat_model,
        google_api_key=settings.google_api_key,
        temperature=temperature
    )


async def embed_query(text: str) -> List[float]:
    """Embed a single query text."""
    try:
        model = get_embeddings_model()
        embedding = await model.aembed_query(text)
        logger.info(f"Generated embedding with {len(embedding)} dimensions")
        return embedding
    except Exception as e:
        logger.error(f"Error generating embedding: {str(e)}")
        raise


async def generate_response(prompt: str, temperature: float = 0.7) -> str:
    """Generate a response using Gemini chat model."""
    try:
        model = get_chat_model(temperature)
        response = await model.ainvoke(prompt)
        return message_text(response)
    except Exception as e:
        logger.error(f"Error generating response: {str(e)}")
        raise


def message_text(message) -> str:
    """Flatten message content into plain text.

    Gemini may return content as a list of parts; only text parts are kept.
    """
    if message is None:
        return ""
    content = message.content
    if isinstance(content, str):
        return content

    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)
