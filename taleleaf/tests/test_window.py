"""Unit tests for window resolution."""

import pytest

from taleleaf.domain.window import ChapterBoundary, ChapterWindow, PageWindow
from taleleaf.retrieval.window import resolve_window


@pytest.fixture
def chapter_map():
    return [
        ChapterBoundary(chapter_index=0, start_page=1, end_page=10),
        ChapterBoundary(chapter_index=1, start_page=11, end_page=25),
        ChapterBoundary(chapter_index=2, start_page=26, end_page=60),
    ]


class TestPageSelection:
    def test_inverted_range_clamps_end_to_start(self, chapter_map):
        resolved = resolve_window(PageWindow(start=10, end=5), chapter_map)

        assert resolved.start == 10
        assert resolved.end == 10
        assert resolved.chapter_indices == [0]

    def test_start_is_clamped_to_first_page(self, chapter_map):
        resolved = resolve_window(PageWindow(start=-3, end=5), chapter_map)

        assert resolved.start == 1
        assert resolved.end == 5
        assert resolved.chapter_indices == [0]

    def test_range_spanning_chapters(self, chapter_map):
        resolved = resolve_window(PageWindow(start=8, end=30), chapter_map)

        assert (resolved.start, resolved.end) == (8, 30)
        assert resolved.chapter_indices == [0, 1, 2]

    @pytest.mark.parametrize(
        "start,end",
        [(1, 1), (1, 10), (10, 11), (25, 26), (40, 90), (61, 70), (12, 3)],
    )
    def test_chapter_indices_are_exactly_the_overlapping_chapters(self, chapter_map, start, end):
        resolved = resolve_window(PageWindow(start=start, end=end), chapter_map)

        expected = [
            ch.chapter_index
            for ch in chapter_map
            if ch.start_page <= resolved.end and ch.end_page >= resolved.start
        ]
        assert resolved.chapter_indices == expected

    def test_empty_chapter_map(self):
        resolved = resolve_window(PageWindow(start=3, end=7), [])

        assert (resolved.start, resolved.end, resolved.chapter_indices) == (3, 7, [])


class TestChapterSelection:
    def test_single_chapter(self):
        chapter_map = [
            ChapterBoundary(chapter_index=0, start_page=1, end_page=10),
            ChapterBoundary(chapter_index=1, start_page=11, end_page=25),
        ]

        resolved = resolve_window(ChapterWindow(chapter_indices=[1]), chapter_map)

        assert (resolved.start, resolved.end, resolved.chapter_indices) == (11, 25, [1])

    def test_multiple_chapters_span_first_start_to_last_end(self, chapter_map):
        resolved = resolve_window(ChapterWindow(chapter_indices=[2, 0]), chapter_map)

        assert (resolved.start, resolved.end) == (1, 60)
        assert resolved.chapter_indices == [0, 2]

    def test_unknown_chapters_fall_back_to_first_page(self, chapter_map):
        resolved = resolve_window(ChapterWindow(chapter_indices=[7, 8]), chapter_map)

        assert (resolved.start, resolved.end, resolved.chapter_indices) == (1, 1, [])

    def test_empty_selection_falls_back_to_first_page(self, chapter_map):
        resolved = resolve_window(ChapterWindow(chapter_indices=[]), chapter_map)

        assert (resolved.start, resolved.end, resolved.chapter_indices) == (1, 1, [])


def test_unsupported_selection_raises_type_error(chapter_map):
    with pytest.raises(TypeError):
        resolve_window({"kind": "pages", "start": 1, "end": 2}, chapter_map)
