import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from langchain_core.embeddings import Embeddings
from langchain_core.vectorstores import InMemoryVectorStore
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from apps.persona.exceptions import IndexingError, SessionTerminated
from core.clients.gemini_client import get_embeddings_model
from settings import settings

logger = logging.getLogger(__name__)


# (session_id, percent_complete)
ProgressCallback = Callable[[str, int], Awaitable[None]]


# Rounds up, not to nearest: 25 docs in batches of 10 report 34, 67, 100.
def batch_progress(completed: int, total: int) -> int:
    """Percent of batches done, rounded up so the last batch reports 100."""
    return -(-completed * 100 // total)


def split_batches(documents: List[str], batch_size: int) -> List[List[str]]:
    """Partition documents into consecutive batches, keeping their order."""
    return [documents[i:i + batch_size] for i in range(0, len(documents), batch_size)]


class ChatIndexer:
    """
    Builds a session's similarity index from transcript lines.

    Batches are embedded under a semaphore (at most ``concurrency`` in flight),
    each retried with exponential backoff. Every attempt first checks whether
    the session was terminated; that abort is never retried.
    """

    def __init__(
        self,
        embeddings: Optional[Embeddings] = None,
        batch_size: Optional[int] = None,
        concurrency: Optional[int] = None,
        batch_delay: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_base_delay: Optional[float] = None,
        retry_factor: Optional[float] = None
    ):
        self.embeddings = embeddings
        self.batch_size = batch_size if batch_size is not None else settings.index_batch_size
        self.concurrency = concurrency if concurrency is not None else settings.index_concurrency
        self.batch_delay = batch_delay if batch_delay is not None else settings.index_batch_delay
        self.max_attempts = max_attempts if max_attempts is not None else settings.index_max_attempts
        self.retry_base_delay = (
            retry_base_delay if retry_base_delay is not None else settings.index_retry_base_delay
        )
        self.retry_factor = retry_factor if retry_factor is not None else settings.index_retry_factor

    async def build(
        self,
        documents: List[str],
        session,
        on_progress: Optional[ProgressCallback] = None
    ) -> Optional[InMemoryVectorStore]:
        """
        Embed all documents into a fresh in-memory index.

        Args:
            documents: Transcript lines, one document each
            session: Session being primed (checked for ``terminated``)
            on_progress: Awaited with (session_id, percent) after each batch

        Returns:
            The populated index, or None when there is nothing to index

        Raises:
            SessionTerminated: the session went away mid-indexing
            IndexingError: a batch exhausted its retries
        """
        if not documents:
            logger.info("No documents to index")
            return None

        embeddings = self.embeddings or get_embeddings_model()
        index = InMemoryVectorStore(embedding=embeddings)

        batches = split_batches(documents, self.batch_size)
        total = len(batches)
        semaphore = asyncio.Semaphore(self.concurrency)
        completed = 0

        logger.info(f"Indexing {len(documents)} documents in {total} batches "
                    f"(concurrency={self.concurrency}) for session {session.id}")

        async def _run_batch(number: int, batch: List[str]):
            nonlocal completed
            async with semaphore:
                start = (number - 1) * self.batch_size
                logger.info(f"Indexing batch {start} to {start + len(batch)}...")

                await self._add_batch(index, batch, session, number)

                completed += 1
                progress = batch_progress(completed, total)
                logger.info(f"Batch {number}/{total} added. Progress: {progress}%")
                if on_progress is not None:
                    await on_progress(session.id, progress)

                # Rate limit: hold the slot a little before the next batch
                if self.batch_delay:
                    await asyncio.sleep(self.batch_delay)

        tasks = [
            asyncio.create_task(_run_batch(number, batch))
            for number, batch in enumerate(batches, 1)
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.info(f"Finished indexing {len(documents)} documents for session {session.id}")
        return index

    async def _add_batch(self, index: InMemoryVectorStore, batch: List[str], session, number: int):
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_base_delay, exp_base=self.retry_factor),
            # CancelledError is a BaseException and is never retried
            retry=(
                retry_if_exception_type(Exception)
                & retry_if_not_exception_type(SessionTerminated)
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    if session.terminated:
                        logger.info(f"Session {session.id} terminated. Aborting indexing.")
                        raise SessionTerminated(session.id)
                    await index.aadd_texts(batch)
        except SessionTerminated:
            raise
        except Exception as e:
            logger.error(f"Batch {number} failed after {self.max_attempts} attempts: {str(e)}")
            raise IndexingError(f"Batch {number} could not be embedded: {str(e)}") from e
