import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


# [timestamp] sender: message
CHAT_LINE_PATTERN = re.compile(r"^\[([^\]]+)\]\s+([^:]+):\s+(.*)$")
ZERO_WIDTH_PATTERN = re.compile("[\u200b-\u200d\ufeff]")
LINE_BREAK_PATTERN = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ChatRecord:
    """One parsed line of an exported chat."""
    timestamp: str
    sender: str
    message: str

    def format(self) -> str:
        return f"[{self.timestamp}] {self.sender}: {self.message}"


def parse_chat_line(line: str) -> Optional[ChatRecord]:
    """
    Parse a single transcript line.

    Exports often carry NFKC-foldable characters and zero-width marks
    around the sender name, so the line is normalized before matching.

    Returns:
        ChatRecord, or None when the line does not follow the
        ``[timestamp] sender: message`` grammar
    """
    normalized = ZERO_WIDTH_PATTERN.sub("", unicodedata.normalize("NFKC", line))
    match = CHAT_LINE_PATTERN.match(normalized)
    if not match:
        return None

    timestamp, sender, message = match.groups()
    return ChatRecord(
        timestamp=timestamp.strip(),
        sender=sender.strip(),
        message=message.strip()
    )


def parse_transcript(text: str) -> List[ChatRecord]:
    """Parse every well-formed line of a transcript, dropping the rest."""
    if not text:
        return []

    lines = [line for line in LINE_BREAK_PATTERN.split(text) if line.strip()]
    records = [record for record in map(parse_chat_line, lines) if record is not None]
    logger.info(f"Parsed {len(records)} of {len(lines)} non-blank transcript lines")
    return records


def filter_by_sender(records: List[ChatRecord], sender: str) -> List[ChatRecord]:
    """Keep records sent by ``sender`` (exact, case-sensitive)."""
    return [record for record in records if record.sender == sender]
