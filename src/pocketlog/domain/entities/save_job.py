"""Save job entity for background persistence."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

# Completion callback: receives None on success or the raised exception
CompletionCallback = Callable[[BaseException | None], None]


@dataclass(frozen=True)
class SaveJob:
    """A pending write of one collection snapshot.

    Attributes:
        collection: Collection name; jobs for the same collection coalesce.
        action: Coroutine factory performing the write.
        on_complete: Called on the event loop once the write finished.
        created_at: Job creation time.
    """

    collection: str
    action: Callable[[], Awaitable[None]]
    on_complete: CompletionCallback | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get_identity_key(self) -> str:
        """Get identity key for coalescing.

        Returns:
            Key shared by every job writing the same collection.
        """
        return f"save:{self.collection}"
