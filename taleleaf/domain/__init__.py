"""Domain entities for the TaleLeaf context window.

Chapter maps, summaries and chunks are produced by book preprocessing and
are read-only here.
"""

from taleleaf.domain.chunk import RawChunk
from taleleaf.domain.summary import (
    ChapterSummaryRow,
    PageSummaryRow,
    SummaryEntity,
    SummaryEvent,
    SummaryRecord,
    SummaryRelationship,
)
from taleleaf.domain.window import (
    ChapterBoundary,
    ChapterWindow,
    PageWindow,
    ResolvedWindow,
    WindowSelection,
)

__all__ = [
    "RawChunk",
    "ChapterSummaryRow",
    "PageSummaryRow",
    "SummaryEntity",
    "SummaryEvent",
    "SummaryRecord",
    "SummaryRelationship",
    "ChapterBoundary",
    "ChapterWindow",
    "PageWindow",
    "ResolvedWindow",
    "WindowSelection",
]
