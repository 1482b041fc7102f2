"""Book context storage using psycopg3 (async pool).

Reads the tables written by book preprocessing; never writes.
"""

import json
from typing import Any

from psycopg_pool import AsyncConnectionPool

from taleleaf.domain.chunk import RawChunk
from taleleaf.domain.summary import ChapterSummaryRow, PageSummaryRow, SummaryRecord
from taleleaf.domain.window import ChapterBoundary
from taleleaf.errors import StoreNotInitialized
from taleleaf.storage.base import BookContextStore


def _summary(value: Any) -> SummaryRecord | None:
    # jsonb comes back decoded; text columns from older schemas do not
    if isinstance(value, str):
        value = json.loads(value)
    return SummaryRecord.from_dict(value)


class PostgresBookStore(BookContextStore):
    """PostgreSQL adapter for chapter maps, summaries and page chunks."""

    def __init__(self, database_url: str, min_size: int = 1, max_size: int = 10):
        """Initialize PostgresBookStore.

        Args:
            database_url: PostgreSQL connection URL
            min_size: Minimum pooled connections
            max_size: Maximum pooled connections
        """
        self._database_url = database_url
        self._min_size = min_size
        self._max_size = max_size
        self._pool: AsyncConnectionPool | None = None

    async def initialize(self) -> None:
        """Open the connection pool."""
        self._pool = AsyncConnectionPool(
            conninfo=self._database_url,
            min_size=self._min_size,
            max_size=self._max_size,
            open=False,
        )
        await self._pool.open()

    async def close(self) -> None:
        """Close connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    async def _fetch(self, query: str, params: tuple) -> list[tuple]:
        if not self._pool:
            raise StoreNotInitialized("PostgresBookStore not initialized")

        async with self._pool.connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()

    async def book_exists(self, book_id: str) -> bool:
        rows = await self._fetch("SELECT id FROM books WHERE id = %s", (book_id,))
        return bool(rows)

    async def get_chapter_map(self, book_id: str) -> list[ChapterBoundary]:
        rows = await self._fetch(
            """
            SELECT chapter_index, start_page, end_page
            FROM book_chapter_map
            WHERE book_id = %s
            ORDER BY chapter_index
            """,
            (book_id,),
        )
        return [
            ChapterBoundary(chapter_index=row[0], start_page=row[1], end_page=row[2])
            for row in rows
        ]

    async def get_chapter_summaries(
        self, book_id: str, chapter_indices: list[int]
    ) -> list[ChapterSummaryRow]:
        if not chapter_indices:
            return []
        rows = await self._fetch(
            """
            SELECT chapter_index, summary_json
            FROM book_chapter_summaries
            WHERE book_id = %s AND chapter_index = ANY(%s)
            ORDER BY chapter_index
            """,
            (book_id, list(chapter_indices)),
        )
        return [
            ChapterSummaryRow(chapter_index=row[0], summary=_summary(row[1]))
            for row in rows
        ]

    async def get_page_summaries_in_range(
        self, book_id: str, start: int, end: int
    ) -> list[PageSummaryRow]:
        rows = await self._fetch(
            """
            SELECT page_number, summary_json
            FROM book_page_summaries
            WHERE book_id = %s AND page_number BETWEEN %s AND %s
            ORDER BY page_number
            """,
            (book_id, start, end),
        )
        return [PageSummaryRow(page_number=row[0], summary=_summary(row[1])) for row in rows]

    async def get_page_summaries(
        self, book_id: str, pages: list[int]
    ) -> list[PageSummaryRow]:
        if not pages:
            return []
        rows = await self._fetch(
            """
            SELECT page_number, summary_json
            FROM book_page_summaries
            WHERE book_id = %s AND page_number = ANY(%s)
            ORDER BY page_number
            """,
            (book_id, list(pages)),
        )
        return [PageSummaryRow(page_number=row[0], summary=_summary(row[1])) for row in rows]

    async def get_chunks_in_range(
        self, book_id: str, start: int, end: int, limit: int = 200
    ) -> list[RawChunk]:
        rows = await self._fetch(
            """
            SELECT id, page_number, intra_index, raw_text
            FROM book_page_chunks
            WHERE book_id = %s AND page_number BETWEEN %s AND %s
            ORDER BY page_number, intra_index
            LIMIT %s
            """,
            (book_id, start, end, limit),
        )
        return [self._chunk(row) for row in rows]

    async def get_page_chunks(
        self, book_id: str, page: int, limit: int = 1
    ) -> list[RawChunk]:
        rows = await self._fetch(
            """
            SELECT id, page_number, intra_index, raw_text
            FROM book_page_chunks
            WHERE book_id = %s AND page_number = %s
            ORDER BY intra_index
            LIMIT %s
            """,
            (book_id, page, limit),
        )
        return [self._chunk(row) for row in rows]

    @staticmethod
    def _chunk(row: tuple) -> RawChunk:
        return RawChunk(
            id=str(row[0]),
            page_number=row[1],
            intra_index=row[2],
            raw_text=row[3] or "",
        )
