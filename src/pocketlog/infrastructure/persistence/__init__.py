"""Persistence infrastructure."""

from pocketlog.infrastructure.persistence.codecs import (
    CustomCategoryCodec,
    DreamCodec,
    DreamTagCodec,
    GiftIdeaCodec,
    MoodEntryCodec,
    SeriesCodec,
)
from pocketlog.infrastructure.persistence.database import DatabaseManager
from pocketlog.infrastructure.persistence.document_storage import SQLiteRecordStorage
from pocketlog.infrastructure.persistence.exceptions import (
    DatabaseError,
    DecodeError,
    PersistenceError,
)
from pocketlog.infrastructure.persistence.memory_storage import InMemoryRecordStorage
from pocketlog.infrastructure.persistence.models import RecordDocumentModel

__all__ = [
    "CustomCategoryCodec",
    "DatabaseError",
    "DatabaseManager",
    "DecodeError",
    "DreamCodec",
    "DreamTagCodec",
    "GiftIdeaCodec",
    "InMemoryRecordStorage",
    "MoodEntryCodec",
    "PersistenceError",
    "RecordDocumentModel",
    "SeriesCodec",
    "SQLiteRecordStorage",
]
