"""Tests for the dict-backed book store."""

import asyncio
import json

import pytest

from taleleaf.domain.chunk import RawChunk
from taleleaf.storage.memory import BookData, InMemoryBookStore


def _run(coro):
    return asyncio.run(coro)


class TestLoading:
    def test_from_dict_parses_all_sections(self, book_store):
        chapter_map = _run(book_store.get_chapter_map("book-1"))

        assert [(c.chapter_index, c.start_page, c.end_page) for c in chapter_map] == [
            (0, 1, 10),
            (1, 11, 25),
            (2, 26, 60),
        ]
        rows = _run(book_store.get_chapter_summaries("book-1", [0]))
        assert rows[0].summary.facts == ["Ana leaves the village"]

    def test_from_json_file(self, tmp_path, sample_book_data):
        path = tmp_path / "books.json"
        path.write_text(json.dumps(sample_book_data), encoding="utf-8")

        store = InMemoryBookStore.from_json_file(path)

        assert _run(store.book_exists("book-1")) is True

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            InMemoryBookStore.from_json_file(tmp_path / "absent.json")

    def test_null_summary_is_kept_as_none(self):
        store = InMemoryBookStore.from_dict(
            {"books": {"b": {"page_summaries": {"4": None}}}}
        )

        rows = _run(store.get_page_summaries("b", [4]))

        assert len(rows) == 1
        assert rows[0].summary is None


class TestQueries:
    def test_book_exists(self, book_store):
        assert _run(book_store.book_exists("book-1")) is True
        assert _run(book_store.book_exists("empty-book")) is True
        assert _run(book_store.book_exists("nope")) is False

    def test_unknown_book_reads_as_empty(self, book_store):
        assert _run(book_store.get_chapter_map("nope")) == []
        assert _run(book_store.get_chunks_in_range("nope", 1, 100)) == []

    def test_page_summaries_in_range_are_inclusive_and_sorted(self, book_store):
        rows = _run(book_store.get_page_summaries_in_range("book-1", 12, 30))

        assert [r.page_number for r in rows] == [12, 29, 30]

    def test_page_summaries_for_listed_pages(self, book_store):
        rows = _run(book_store.get_page_summaries("book-1", [30, 2, 29]))

        assert [r.page_number for r in rows] == [29, 30]

    def test_chapter_summaries_skip_missing_indices(self, book_store):
        rows = _run(book_store.get_chapter_summaries("book-1", [2, 7, 0]))

        assert [r.chapter_index for r in rows] == [0, 2]

    def test_chunks_in_range_reading_order_and_limit(self):
        store = InMemoryBookStore(
            {
                "b": BookData(
                    chunks=[
                        RawChunk(id="b", page_number=2, intra_index=1, raw_text="b"),
                        RawChunk(id="c", page_number=3, intra_index=0, raw_text="c"),
                        RawChunk(id="a", page_number=2, intra_index=0, raw_text="a"),
                    ]
                )
            }
        )

        chunks = _run(store.get_chunks_in_range("b", 1, 3, limit=2))

        assert [c.id for c in chunks] == ["a", "b"]

    def test_page_chunks_respect_limit(self, book_store):
        one = _run(book_store.get_page_chunks("book-1", 30))
        two = _run(book_store.get_page_chunks("book-1", 30, limit=2))

        assert [c.id for c in one] == ["c30-0"]
        assert [c.id for c in two] == ["c30-0", "c30-1"]

    def test_add_book(self, empty_store):
        empty_store.add_book("new", BookData(chunks=[RawChunk(id="x", page_number=1)]))

        assert _run(empty_store.book_exists("new")) is True
        assert [c.id for c in _run(empty_store.get_page_chunks("new", 1))] == ["x"]
