"""Domain service protocols."""

from typing import Protocol

from pocketlog.domain.entities.save_job import SaveJob


class PersistenceScheduler(Protocol):
    """Background persistence abstraction.

    Record stores hand snapshots to the scheduler without awaiting the
    write; the outcome is delivered through ``SaveJob.on_complete``.
    """

    def schedule(self, job: SaveJob) -> None:
        """Schedule a job without blocking.

        A pending job for the same collection is replaced by the newer one.

        Args:
            job: The save job.
        """
        ...

    async def drain(self) -> None:
        """Wait until every scheduled job has completed."""
        ...
