"""Dict-backed store, loadable from a JSON export of a book's context data."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from taleleaf.domain.chunk import RawChunk
from taleleaf.domain.summary import ChapterSummaryRow, PageSummaryRow, SummaryRecord
from taleleaf.domain.window import ChapterBoundary
from taleleaf.storage.base import BookContextStore


@dataclass
class BookData:
    """Everything preprocessing produced for one book."""

    chapter_map: list[ChapterBoundary] = field(default_factory=list)
    chapter_summaries: dict[int, SummaryRecord | None] = field(default_factory=dict)
    page_summaries: dict[int, SummaryRecord | None] = field(default_factory=dict)
    chunks: list[RawChunk] = field(default_factory=list)


class InMemoryBookStore(BookContextStore):
    """In-process implementation of :class:`BookContextStore`.

    JSON layout accepted by :meth:`from_dict`::

        {"books": {"<book_id>": {
            "chapter_map": [{"chapter_index": 0, "start_page": 1, "end_page": 10}],
            "chapter_summaries": {"0": {...summary_json...}},
            "page_summaries": {"3": {...summary_json...}},
            "chunks": [{"id": "c1", "page_number": 3, "intra_index": 0, "raw_text": "..."}]
        }}}
    """

    def __init__(self, books: dict[str, BookData] | None = None):
        self._books: dict[str, BookData] = dict(books or {})

    @classmethod
    def from_dict(cls, data: dict) -> "InMemoryBookStore":
        books: dict[str, BookData] = {}
        for book_id, raw in (data.get("books") or {}).items():
            books[str(book_id)] = BookData(
                chapter_map=[
                    ChapterBoundary(
                        chapter_index=int(row["chapter_index"]),
                        start_page=int(row["start_page"]),
                        end_page=int(row["end_page"]),
                    )
                    for row in raw.get("chapter_map") or []
                ],
                chapter_summaries={
                    int(idx): SummaryRecord.from_dict(summary)
                    for idx, summary in (raw.get("chapter_summaries") or {}).items()
                },
                page_summaries={
                    int(page): SummaryRecord.from_dict(summary)
                    for page, summary in (raw.get("page_summaries") or {}).items()
                },
                chunks=[
                    RawChunk(
                        id=str(row["id"]),
                        page_number=int(row["page_number"]),
                        intra_index=int(row.get("intra_index", 0)),
                        raw_text=row.get("raw_text") or "",
                    )
                    for row in raw.get("chunks") or []
                ],
            )
        return cls(books)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryBookStore":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Book data not found: {path}")
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))

    def add_book(self, book_id: str, data: BookData) -> None:
        self._books[book_id] = data

    def _book(self, book_id: str) -> BookData:
        return self._books.get(book_id) or BookData()

    async def book_exists(self, book_id: str) -> bool:
        return book_id in self._books

    async def get_chapter_map(self, book_id: str) -> list[ChapterBoundary]:
        return sorted(self._book(book_id).chapter_map, key=lambda ch: ch.chapter_index)

    async def get_chapter_summaries(
        self, book_id: str, chapter_indices: list[int]
    ) -> list[ChapterSummaryRow]:
        summaries = self._book(book_id).chapter_summaries
        wanted = set(chapter_indices)
        return [
            ChapterSummaryRow(chapter_index=idx, summary=summaries[idx])
            for idx in sorted(summaries)
            if idx in wanted
        ]

    async def get_page_summaries_in_range(
        self, book_id: str, start: int, end: int
    ) -> list[PageSummaryRow]:
        summaries = self._book(book_id).page_summaries
        return [
            PageSummaryRow(page_number=page, summary=summaries[page])
            for page in sorted(summaries)
            if start <= page <= end
        ]

    async def get_page_summaries(
        self, book_id: str, pages: list[int]
    ) -> list[PageSummaryRow]:
        summaries = self._book(book_id).page_summaries
        wanted = set(pages)
        return [
            PageSummaryRow(page_number=page, summary=summaries[page])
            for page in sorted(summaries)
            if page in wanted
        ]

    async def get_chunks_in_range(
        self, book_id: str, start: int, end: int, limit: int = 200
    ) -> list[RawChunk]:
        chunks = [
            c for c in self._book(book_id).chunks if start <= c.page_number <= end
        ]
        chunks.sort(key=lambda c: (c.page_number, c.intra_index))
        return chunks[:limit]

    async def get_page_chunks(
        self, book_id: str, page: int, limit: int = 1
    ) -> list[RawChunk]:
        chunks = [c for c in self._book(book_id).chunks if c.page_number == page]
        chunks.sort(key=lambda c: c.intra_index)
        return chunks[:limit]
