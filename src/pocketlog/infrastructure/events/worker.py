"""Background persistence worker."""

import asyncio
import logging

from pocketlog.domain.entities.save_job import SaveJob

logger = logging.getLogger(__name__)


class PersistenceWorker:
    """Sequential background writer with per-collection coalescing.

    Features:
    - Coalescing: when a job for a collection is already pending, the newer
      job replaces it (the newest snapshot contains every earlier change).
    - Sequential processing: one job at a time, in scheduling order, so the
      last scheduled snapshot of a collection is the last one written.
    - Completion callbacks: success or failure is reported on the event loop.
    """

    def __init__(self) -> None:
        """Initialize the worker."""
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        # Pending jobs waiting in queue (identity_key -> SaveJob)
        self._pending: dict[str, SaveJob] = {}
        self._stop_event = asyncio.Event()
        self._stop_event.set()  # Initially stopped

    def schedule(self, job: SaveJob) -> None:
        """Schedule a save job without blocking.

        Args:
            job: The job to schedule.
        """
        identity_key = job.get_identity_key()
        if identity_key in self._pending:
            logger.debug(
                "Replacing pending save: key=%s, old=%s, new=%s",
                identity_key,
                self._pending[identity_key].created_at,
                job.created_at,
            )
            self._pending[identity_key] = job
            return

        self._pending[identity_key] = job
        self._queue.put_nowait(identity_key)

    async def start(self) -> None:
        """Start processing jobs.

        This method runs until stop() is called.
        """
        if not self._stop_event.is_set():
            logger.warning("PersistenceWorker already running")
            return

        self._stop_event.clear()
        logger.info("PersistenceWorker started")

        while not self._stop_event.is_set():
            try:
                # Use a timeout to periodically check stop_event
                try:
                    identity_key = await asyncio.wait_for(
                        self._queue.get(),
                        timeout=1.0,
                    )
                except asyncio.TimeoutError:
                    continue

                await self._process(identity_key)

            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Error in persistence worker")

        logger.info("PersistenceWorker stopped")

    async def stop(self) -> None:
        """Stop the worker loop.

        Jobs still pending are kept; drain() writes them.
        """
        logger.info("Stopping PersistenceWorker")
        self._stop_event.set()

    async def drain(self) -> None:
        """Wait until every scheduled job has completed.

        When the loop is not running, pending jobs are processed inline.
        """
        if self.is_running:
            await self._queue.join()
            return

        while not self._queue.empty():
            identity_key = self._queue.get_nowait()
            await self._process(identity_key)

    async def _process(self, identity_key: str) -> None:
        """Run the current job for a key and report its outcome.

        Args:
            identity_key: Key taken from the queue.
        """
        try:
            job = self._pending.pop(identity_key, None)
            if job is None:
                return

            error: BaseException | None = None
            try:
                await job.action()
                logger.debug("Save completed: %s", identity_key)
            except Exception as e:
                logger.warning("Save failed: %s (%s)", identity_key, e)
                error = e

            if job.on_complete is not None:
                try:
                    job.on_complete(error)
                except Exception:
                    logger.exception("Error in save completion callback")
        finally:
            self._queue.task_done()

    @property
    def pending_count(self) -> int:
        """Number of jobs waiting to be written."""
        return len(self._pending)

    @property
    def is_running(self) -> bool:
        """Check if the worker loop is running."""
        return not self._stop_event.is_set()
