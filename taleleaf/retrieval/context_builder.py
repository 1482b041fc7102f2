"""Turn summaries and chunks into context parts, pack them, render them."""

from typing import List, Optional

from taleleaf.domain.chunk import RawChunk
from taleleaf.domain.summary import ChapterSummaryRow, PageSummaryRow
from taleleaf.retrieval.summaries import render_summary
from taleleaf.retrieval.tokens import estimate_tokens
from taleleaf.retrieval.types import Citation, ContextPart


def chapter_summary_part(row: ChapterSummaryRow) -> Optional[ContextPart]:
    text = render_summary(row.summary)
    if not text:
        return None
    return ContextPart(
        label="chapter-summary",
        chapter_index=row.chapter_index,
        text=text,
        citations=[],
        estimated_tokens=estimate_tokens(text),
    )


def page_summary_part(row: PageSummaryRow) -> Optional[ContextPart]:
    text = render_summary(row.summary)
    if not text:
        return None
    return ContextPart(
        label="page-summary",
        page=row.page_number,
        text=text,
        citations=[Citation(page=row.page_number)],
        estimated_tokens=estimate_tokens(text),
    )


def paragraph_part(chunk: RawChunk, max_chars: int = 900) -> Optional[ContextPart]:
    """Build a paragraph part, truncating long chunks with an ellipsis."""
    raw = (chunk.raw_text or "").strip()
    if not raw:
        return None
    text = f"{raw[:max_chars]}…" if len(raw) > max_chars else raw
    return ContextPart(
        label="paragraph",
        page=chunk.page_number,
        text=text,
        citations=[Citation(page=chunk.page_number, chunk_id=chunk.id)],
        estimated_tokens=estimate_tokens(text),
    )


class ContextBuilder:
    """Packs ordered context parts into a token budget and renders them.

    Parts must arrive most significant first. The first part is always kept,
    even when it alone exceeds the budget; packing stops at the first later
    part that does not fit, so only the least important tail is dropped.

    Attributes:
        max_tokens: Token budget for the packed parts
    """

    def __init__(self, max_tokens: int = 1800):
        self.max_tokens = max_tokens

    def pack(self, parts: List[ContextPart]) -> List[ContextPart]:
        included: List[ContextPart] = []
        remaining = self.max_tokens

        for part in parts:
            if part.estimated_tokens <= remaining or not included:
                included.append(part)
                remaining = max(0, remaining - part.estimated_tokens)
            else:
                break

        return included

    def build_context(self, parts: List[ContextPart]) -> str:
        """Render parts under markdown headers separated by blank lines."""
        return "\n\n".join(
            f"### {self._format_label(part)}\n{part.text.strip()}" for part in parts
        )

    def _format_label(self, part: ContextPart) -> str:
        if part.label == "chapter-summary":
            index = part.chapter_index if part.chapter_index is not None else "?"
            return f"Chapter {index} summary"
        page = part.page if part.page is not None else "?"
        if part.label == "page-summary":
            return f"Page {page} summary"
        return f"Paragraph (p{page})"
