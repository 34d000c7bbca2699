import logging
import re

logger = logging.getLogger(__name__)


# Reasoning models wrap their scratchpad in <think>...</think>
REASONING_PATTERN = re.compile(r"<think>[\s\S]*?</think>", re.IGNORECASE)


def strip_reasoning(response: str) -> str:
    """
    Remove every ``<think>...</think>`` span from a model response.

    Matching is non-greedy and case-insensitive, so text between two
    separate spans survives. Everything outside the spans is kept verbatim.
    """
    if not response:
        return response

    cleaned, count = REASONING_PATTERN.subn("", response)
    if count:
        logger.info(f"Stripped {count} reasoning block(s) from response")
    return cleaned
