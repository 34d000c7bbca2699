from .loader_agent import load_chat_history_node
from .indexer_agent import index_chats_node
from .decision_agent import query_or_respond_node, build_decision_messages, trim_messages
from .response_agent import generate_node

__all__ = [
    'load_chat_history_node', 'index_chats_node',
    'query_or_respond_node', 'build_decision_messages', 'trim_messages',
    'generate_node'
]
