"""TaleLeaf: spoiler-safe context windows for a reading companion."""

__version__ = "0.1.0"

# Domain entities
from taleleaf.domain.window import ChapterWindow, PageWindow, ResolvedWindow
from taleleaf.domain.summary import SummaryRecord
from taleleaf.domain.chunk import RawChunk

# Errors
from taleleaf.errors import BookNotFound, ContextWindowDataMissing

# Storage adapters
from taleleaf.storage.base import BookContextStore
from taleleaf.storage.memory import InMemoryBookStore

# Retrieval
from taleleaf.retrieval.assembler import ContextWindowAssembler
from taleleaf.retrieval.service import ContextWindowRequest, ContextWindowService

__all__ = [
    # Domain
    "ChapterWindow",
    "PageWindow",
    "ResolvedWindow",
    "SummaryRecord",
    "RawChunk",
    # Errors
    "BookNotFound",
    "ContextWindowDataMissing",
    # Storage
    "BookContextStore",
    "InMemoryBookStore",
    # Retrieval
    "ContextWindowAssembler",
    "ContextWindowRequest",
    "ContextWindowService",
]
