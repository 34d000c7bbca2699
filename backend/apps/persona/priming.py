import asyncio
import logging

from apps.persona.events import notify_index_progress, notify_priming_failed, notify_ready
from apps.persona.exceptions import SessionTerminated
from apps.persona.graph.workflow import workflow_manager
from apps.persona.sessions import Session

logger = logging.getLogger(__name__)


PRIMING_FAILED_TEXT = "[Error: chats could not be processed]"


async def prime_session(session: Session):
    """
    Load and index a session, then tell its connections the outcome.

    On success ``processing`` is cleared and a ready event goes out. On
    failure the error is recorded on the session and broadcast; the session
    stays in processing so turns keep being rejected.
    """
    try:
        await workflow_manager.prime(session, on_progress=notify_index_progress)
    except SessionTerminated:
        logger.info(f"Priming of session {session.id} stopped: session terminated")
        return
    except Exception as e:
        logger.error(f"Error during priming of session {session.id}: {str(e)}")
        session.priming_error = str(e)
        await notify_priming_failed(session.id, PRIMING_FAILED_TEXT)
        return

    session.processing = False
    logger.info(f"Processing complete for session {session.id}")
    await notify_ready(session.id)


def _log_priming_outcome(session: Session, task: asyncio.Task):
    if task.cancelled():
        logger.warning(f"Priming of session {session.id} was cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Priming task for session {session.id} crashed: {exc!r}")


def schedule_priming(session: Session) -> asyncio.Task:
    """Start priming in the background on the running event loop."""
    task = asyncio.create_task(prime_session(session), name=f"prime-{session.id}")
    task.add_done_callback(lambda t: _log_priming_outcome(session, t))
    session.priming_task = task
    return task


async def start_priming(session: Session):
    """Awaitable wrapper so sync views can schedule priming via async_to_sync."""
    schedule_priming(session)
