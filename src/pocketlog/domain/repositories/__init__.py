"""Domain repositories."""

from pocketlog.domain.repositories.record_storage import (
    LoadResult,
    RecordCodec,
    RecordStorage,
)

__all__ = [
    "LoadResult",
    "RecordCodec",
    "RecordStorage",
]
