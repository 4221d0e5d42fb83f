"""Background processing infrastructure."""

from pocketlog.infrastructure.events.worker import PersistenceWorker

__all__ = ["PersistenceWorker"]
