"""Read-only access to a book's precomputed context-window data."""

from abc import ABC, abstractmethod

from taleleaf.domain.chunk import RawChunk
from taleleaf.domain.summary import ChapterSummaryRow, PageSummaryRow
from taleleaf.domain.window import ChapterBoundary


class BookContextStore(ABC):
    """Async lookups keyed by book id.

    Implementations return rows ordered the way the assembler consumes them:
    chapter map and chapter summaries by chapter index, page summaries by
    page number, chunks by page number then intra-page index.
    """

    @abstractmethod
    async def book_exists(self, book_id: str) -> bool:
        ...

    @abstractmethod
    async def get_chapter_map(self, book_id: str) -> list[ChapterBoundary]:
        ...

    @abstractmethod
    async def get_chapter_summaries(
        self, book_id: str, chapter_indices: list[int]
    ) -> list[ChapterSummaryRow]:
        ...

    @abstractmethod
    async def get_page_summaries_in_range(
        self, book_id: str, start: int, end: int
    ) -> list[PageSummaryRow]:
        ...

    @abstractmethod
    async def get_page_summaries(
        self, book_id: str, pages: list[int]
    ) -> list[PageSummaryRow]:
        ...

    @abstractmethod
    async def get_chunks_in_range(
        self, book_id: str, start: int, end: int, limit: int = 200
    ) -> list[RawChunk]:
        ...

    @abstractmethod
    async def get_page_chunks(
        self, book_id: str, page: int, limit: int = 1
    ) -> list[RawChunk]:
        ...

    async def close(self) -> None:
        """Release resources held by the store."""
