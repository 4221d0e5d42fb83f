"""Persistence-related exceptions."""


class PersistenceError(Exception):
    """Base exception for persistence-related errors."""


class DatabaseError(PersistenceError):
    """Database operation error."""


class DecodeError(PersistenceError):
    """A stored document could not be converted back into a record."""
