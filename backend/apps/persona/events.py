"""
Server-pushed events for a session's broadcast group.

Each session id doubles as its Channels group name. The ``type`` of a group
message selects the consumer handler (``session.ready`` -> ``session_ready``).
"""
import logging

from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


async def broadcast(session_id: str, event_type: str, **payload):
    """Send an event to every connection bound to the session."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"No channel layer configured; dropping {event_type} for {session_id}")
        return
    await channel_layer.group_send(session_id, {"type": event_type, **payload})


async def notify_ready(session_id: str):
    """Call this once priming has finished."""
    await broadcast(session_id, "session.ready", message="Chats are ready")


async def notify_index_progress(session_id: str, percent: int):
    """Call this after each indexed batch."""
    await broadcast(session_id, "index.progress", percent=percent)


async def notify_response(session_id: str, text: str):
    """Call this with the reply of a completed turn."""
    await broadcast(session_id, "chat.response", text=text)


async def notify_priming_failed(session_id: str, message: str):
    """Call this when priming could not complete."""
    await broadcast(session_id, "session.error", code="PRIMING_FAILED", message=message)
