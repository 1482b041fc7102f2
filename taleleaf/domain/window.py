"""Reading-window entities: what the caller selected and what it resolved to."""

from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True, slots=True)
class PageWindow:
    """Explicit page range, 1-indexed and inclusive."""

    start: int
    end: int
    kind: Literal["pages"] = "pages"


@dataclass(frozen=True, slots=True)
class ChapterWindow:
    """Set of chapter indices the reader has finished."""

    chapter_indices: list[int] = field(default_factory=list)
    kind: Literal["chapters"] = "chapters"


WindowSelection = Union[PageWindow, ChapterWindow]


@dataclass(frozen=True, slots=True)
class ChapterBoundary:
    """Page span of one chapter, as produced by book preprocessing."""

    chapter_index: int
    start_page: int
    end_page: int

    def overlaps(self, start: int, end: int) -> bool:
        return self.start_page <= end and self.end_page >= start


@dataclass(frozen=True, slots=True)
class ResolvedWindow:
    """Concrete page range plus the chapters overlapping it.

    An empty ``chapter_indices`` from a chapter selection means nothing was
    resolved and the minimal default range (page 1) is in effect.
    """

    start: int
    end: int
    chapter_indices: list[int] = field(default_factory=list)

    def contains(self, page: int) -> bool:
        return self.start <= page <= self.end

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "chapter_indices": list(self.chapter_indices),
        }
