"""Storage adapters for book context data."""

from taleleaf.storage.base import BookContextStore
from taleleaf.storage.memory import BookData, InMemoryBookStore
from taleleaf.storage.postgres import PostgresBookStore

__all__ = ["BookContextStore", "BookData", "InMemoryBookStore", "PostgresBookStore"]
