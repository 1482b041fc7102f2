"""Resolve a reader's window selection into a concrete page range."""

from typing import Sequence

from taleleaf.domain.window import (
    ChapterBoundary,
    ChapterWindow,
    PageWindow,
    ResolvedWindow,
    WindowSelection,
)


def resolve_window(
    selection: WindowSelection, chapter_map: Sequence[ChapterBoundary]
) -> ResolvedWindow:
    """Resolve ``selection`` against the book's chapter boundaries.

    Page selections are clamped (start to at least 1, end up to start) and
    annotated with every chapter overlapping the range. Chapter selections
    span from the first selected chapter's start to the last one's end; when
    none of the requested chapters exist the result is the degenerate
    ``ResolvedWindow(1, 1, [])``.
    """
    if isinstance(selection, PageWindow):
        start = max(1, selection.start)
        end = max(selection.start, selection.end)
        return ResolvedWindow(
            start=start,
            end=end,
            chapter_indices=[
                ch.chapter_index for ch in chapter_map if ch.overlaps(start, end)
            ],
        )

    if isinstance(selection, ChapterWindow):
        wanted = set(selection.chapter_indices)
        selected = [ch for ch in chapter_map if ch.chapter_index in wanted]
        if not selected:
            return ResolvedWindow(start=1, end=1, chapter_indices=[])
        return ResolvedWindow(
            start=min(ch.start_page for ch in selected),
            end=max(ch.end_page for ch in selected),
            chapter_indices=[ch.chapter_index for ch in selected],
        )

    raise TypeError(f"Unsupported window selection: {selection!r}")
