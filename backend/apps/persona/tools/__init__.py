from .transcript_parser import ChatRecord, parse_chat_line, parse_transcript, filter_by_sender
from .vector_embedding import ChatIndexer, batch_progress, split_batches
from .history_search import build_history_tool, HISTORY_TOOL_NAME
from .response_validator import strip_reasoning

__all__ = [
    'ChatRecord', 'parse_chat_line', 'parse_transcript', 'filter_by_sender',
    'ChatIndexer', 'batch_progress', 'split_batches',
    'build_history_tool', 'HISTORY_TOOL_NAME',
    'strip_reasoning'
]
