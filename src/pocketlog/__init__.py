"""pocketlog: record stores, view queries and stats for personal journal apps."""

__version__ = "0.1.0"
