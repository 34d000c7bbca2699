"""
WebSocket gateway for persona chat sessions.

Protocol:
    Client sends: { "type": "joinSession", "sessionId": "..." }
    Client sends: { "type": "message", "sessionId": "...", "text": "..." }
    Client sends: { "type": "ping", "timestamp": 1234567890 }
    Server sends: { "type": "ready", "message": "Chats are ready" }
    Server sends: { "type": "indexProgress", "percent": 67 }
    Server sends: { "type": "response", "text": "..." }
    Server sends: { "type": "error", "code": "...", "message": "..." }
    Server sends: { "type": "pong", "timestamp": 1234567890, "serverTime": "..." }
"""
import json
import logging
from datetime import datetime, timezone
from typing import Set

from channels.generic.websocket import AsyncWebsocketConsumer

from apps.persona.events import notify_index_progress, notify_response
from apps.persona.graph.workflow import workflow_manager
from apps.persona.priming import PRIMING_FAILED_TEXT
from apps.persona.sessions import session_registry

logger = logging.getLogger(__name__)


SESSION_NOT_FOUND_TEXT = "[Error: session not found]"
SESSION_BUSY_TEXT = "[Please wait, chats are still processing...]"
TURN_FAILED_TEXT = "[Error processing your message]"


class PersonaChatConsumer(AsyncWebsocketConsumer):
    """Binds a WebSocket connection to session groups and relays turns."""

    async def connect(self):
        self.joined_sessions: Set[str] = set()
        await self.accept()
        logger.info(f"Socket connected: {self.channel_name}")

    async def disconnect(self, code):
        logger.info(f"Socket disconnected: {self.channel_name}")
        for session_id in self.joined_sessions:
            await self.channel_layer.group_discard(session_id, self.channel_name)
            session_registry.release(session_id, self.channel_name)
        self.joined_sessions.clear()

    async def receive(self, text_data=None, bytes_data=None):
        try:
            message = json.loads(text_data or "")
        except json.JSONDecodeError:
            await self.send_error("INVALID_JSON", "Message must be valid JSON")
            return

        if not isinstance(message, dict):
            await self.send_error("INVALID_JSON", "Message must be a JSON object")
            return

        msg_type = message.get("type")
        if msg_type == "joinSession":
            await self.join_session(message.get("sessionId"))
        elif msg_type == "message":
            await self.handle_message(message.get("sessionId"), message.get("text"))
        elif msg_type == "ping":
            await self.send_event(
                "pong",
                timestamp=message.get("timestamp"),
                serverTime=datetime.now(timezone.utc).isoformat()
            )
        else:
            await self.send_error("UNKNOWN_MESSAGE_TYPE", f"Unknown message type: {msg_type}")

    async def join_session(self, session_id):
        if not session_id:
            logger.error(f"No sessionId provided by socket {self.channel_name}")
            await self.send_error("MISSING_SESSION_ID", "sessionId is required")
            return

        session = session_registry.bind(session_id, self.channel_name)
        if session is None:
            await self.send_event("response", text=SESSION_NOT_FOUND_TEXT)
            return

        await self.channel_layer.group_add(session_id, self.channel_name)
        self.joined_sessions.add(session_id)

        if session.failed:
            await self.send_error("PRIMING_FAILED", PRIMING_FAILED_TEXT)
        elif not session.processing:
            await self.send_event("ready", message="Chats are ready")

    async def handle_message(self, session_id, text: str):
        logger.info(f"Message for session {session_id}: {str(text)[:50]}")
        if not isinstance(text, str) or not text.strip():
            await self.send_error("EMPTY_MESSAGE", "text is required")
            return

        session = session_registry.get(session_id)
        if session is None:
            logger.error(f"No session found for {session_id}")
            await self.send_event("response", text=SESSION_NOT_FOUND_TEXT)
            return

        if session.failed:
            await self.send_event("response", text=PRIMING_FAILED_TEXT)
            return

        if session.processing:
            await self.send_event("response", text=SESSION_BUSY_TEXT)
            return

        try:
            reply = await workflow_manager.run_turn(
                session, text, on_progress=notify_index_progress
            )
        except Exception as e:
            logger.error(f"Error processing message with pipeline: {str(e)}")
            await self.send_event("response", text=TURN_FAILED_TEXT)
            return

        await notify_response(session.id, reply)

    # Group event handlers

    async def session_ready(self, event):
        await self.send_event("ready", message=event.get("message", "Chats are ready"))

    async def index_progress(self, event):
        await self.send_event("indexProgress", percent=event["percent"])

    async def chat_response(self, event):
        await self.send_event("response", text=event["text"])

    async def session_error(self, event):
        await self.send_error(event.get("code", "ERROR"), event.get("message", ""))

    # Helpers

    async def send_event(self, event_type: str, **payload):
        await self.send(text_data=json.dumps({"type": event_type, **payload}))

    async def send_error(self, code: str, message: str):
        await self.send_event("error", code=code, message=message)
