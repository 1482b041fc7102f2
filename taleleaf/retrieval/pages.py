"""Explicit page references in questions, and the out-of-window refusal."""

import re
from typing import Optional

from taleleaf.domain.window import PageWindow, ResolvedWindow, WindowSelection
from taleleaf.retrieval.types import ContextWindowResponse

_EXPLICIT_PAGE = re.compile(r"page\s+([0-9]{1,5})", re.IGNORECASE)

OUT_OF_WINDOW_MESSAGE = (
    "Page {page} is outside your current reading window ({start}–{end}), "
    "so I can't answer that yet. You can expand the window to include that "
    "page if you want more detail."
)


def detect_explicit_page(question: str) -> Optional[int]:
    """Return the page number of the first "page N" mention, if any.

    Later mentions are ignored: "compare page 5 and page 80" yields 5.
    """
    match = _EXPLICIT_PAGE.search(question)
    if not match:
        return None
    page = int(match.group(1))
    return page if page > 0 else None


def guard_out_of_window(
    page: Optional[int], selection: WindowSelection
) -> Optional[ContextWindowResponse]:
    """Refuse questions about pages beyond a page-range selection.

    Compares against the caller's raw start/end, before any resolution.
    Chapter selections always pass through.
    """
    if page is None or not isinstance(selection, PageWindow):
        return None

    start, end = selection.start, selection.end
    if start <= page <= end:
        return None

    return ContextWindowResponse(
        ready=True,
        result=None,
        context_text="",
        resolved_window=ResolvedWindow(start=start, end=end, chapter_indices=[]),
        message=OUT_OF_WINDOW_MESSAGE.format(page=page, start=start, end=end),
    )
