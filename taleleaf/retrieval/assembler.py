"""Spoiler-safe context assembly for reading-window questions."""

import asyncio
import logging
from typing import List, Optional

from taleleaf.config import ContextWindowConfig
from taleleaf.domain.window import ResolvedWindow, WindowSelection
from taleleaf.errors import ContextWindowDataMissing
from taleleaf.retrieval import prompts
from taleleaf.retrieval.context_builder import (
    ContextBuilder,
    chapter_summary_part,
    page_summary_part,
    paragraph_part,
)
from taleleaf.retrieval.pages import detect_explicit_page
from taleleaf.retrieval.ranker import extract_query_tokens, rank_chunks
from taleleaf.retrieval.tokens import estimate_tokens
from taleleaf.retrieval.types import ContextPart, DesiredK, RetrievalResult, TokenEstimate
from taleleaf.retrieval.window import resolve_window
from taleleaf.storage.base import BookContextStore


class ContextWindowAssembler:
    """Builds prompt pairs grounded only in pages the reader has reached.

    Attributes:
        store: Read-only source of chapter maps, summaries and chunks
        config: Budgets and limits for assembly
    """

    def __init__(
        self,
        store: BookContextStore,
        config: ContextWindowConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.config = config or ContextWindowConfig()
        self._logger = logger or logging.getLogger(__name__)

    async def build_context_window_result(
        self,
        book_id: str,
        window: WindowSelection,
        question: str,
        max_context_tokens: Optional[int] = None,
        desired_k: Optional[DesiredK] = None,
        include_raw_paragraphs: bool = True,
    ) -> RetrievalResult:
        """Assemble context for the whole reading window.

        Parts are ordered chapter summaries, page summaries, the forced
        paragraph for an explicitly named in-window page, then ranked
        paragraphs, and packed greedily into ``max_context_tokens``.

        Raises:
            ContextWindowDataMissing: No summaries or chunks exist in range
        """
        budget = max_context_tokens or self.config.max_context_tokens
        k = desired_k or DesiredK(self.config.desired_k_min, self.config.desired_k_max)

        chapter_map = await self.store.get_chapter_map(book_id)
        resolved = resolve_window(window, chapter_map)

        chapter_rows, page_rows = await asyncio.gather(
            self._chapter_summaries(book_id, resolved),
            self.store.get_page_summaries_in_range(book_id, resolved.start, resolved.end),
        )

        chapter_parts = [p for p in map(chapter_summary_part, chapter_rows) if p]
        page_parts = [p for p in map(page_summary_part, page_rows) if p]

        paragraph_parts: List[ContextPart] = []
        if include_raw_paragraphs:
            paragraph_parts = await self._ranked_paragraphs(book_id, resolved, question, k)

        explicit_part = await self._explicit_page_part(book_id, resolved, question)
        if explicit_part is not None:
            forced_ids = {c.chunk_id for c in explicit_part.citations}
            paragraph_parts = [
                p for p in paragraph_parts
                if not forced_ids.intersection(c.chunk_id for c in p.citations)
            ]

        ordered = [
            *chapter_parts,
            *page_parts,
            *([explicit_part] if explicit_part else []),
            *paragraph_parts,
        ]
        if not ordered:
            raise ContextWindowDataMissing(book_id, resolved.start, resolved.end)

        builder = ContextBuilder(max_tokens=budget)
        included = builder.pack(ordered)
        context_text = builder.build_context(included)
        system_prompt = prompts.build_context_window_prompt(resolved, context_text)

        self._logger.debug(
            "Assembled context window",
            extra={
                "book_id": book_id,
                "window_start": resolved.start,
                "window_end": resolved.end,
                "chapters": len(chapter_parts),
                "page_summaries": len(page_parts),
                "paragraphs": len(paragraph_parts),
                "forced_page": explicit_part.page if explicit_part else None,
                "included": len(included),
                "candidates": len(ordered),
            },
        )

        return self._result(
            system_prompt, question, included, context_text, resolved, "context-window"
        )

    async def build_page_focused_context_window_result(
        self,
        book_id: str,
        page: int,
        question: str,
        max_context_tokens: Optional[int] = None,
    ) -> RetrievalResult:
        """Assemble a narrow context for a question about one in-window page.

        Uses summaries of the page and its immediate neighbours plus a
        couple of raw chunks from the page itself; no chapter material.

        Raises:
            ContextWindowDataMissing: Nothing is stored for the page
        """
        budget = max_context_tokens or self.config.page_focused_max_tokens
        neighbours = [p for p in (page - 1, page, page + 1) if p > 0]

        page_rows, chunks = await asyncio.gather(
            self.store.get_page_summaries(book_id, neighbours),
            self.store.get_page_chunks(
                book_id, page, limit=self.config.page_focused_chunk_limit
            ),
        )

        page_parts = [p for p in map(page_summary_part, page_rows) if p]
        paragraph_parts = [
            p
            for p in (paragraph_part(c, self.config.max_paragraph_chars) for c in chunks)
            if p
        ]

        resolved = ResolvedWindow(start=max(1, page - 1), end=page + 1, chapter_indices=[])
        ordered = [*page_parts, *paragraph_parts]
        if not ordered:
            raise ContextWindowDataMissing(book_id, resolved.start, resolved.end)

        builder = ContextBuilder(max_tokens=budget)
        included = builder.pack(ordered)
        context_text = builder.build_context(included)
        system_prompt = prompts.build_page_focused_prompt(page, resolved, context_text)

        self._logger.debug(
            "Assembled page-focused context",
            extra={
                "book_id": book_id,
                "page": page,
                "page_summaries": len(page_parts),
                "paragraphs": len(paragraph_parts),
                "included": len(included),
            },
        )

        return self._result(
            system_prompt,
            question,
            included,
            context_text,
            resolved,
            "context-window-page-focused",
        )

    async def _chapter_summaries(self, book_id: str, resolved: ResolvedWindow):
        if not resolved.chapter_indices:
            return []
        return await self.store.get_chapter_summaries(book_id, resolved.chapter_indices)

    async def _ranked_paragraphs(
        self, book_id: str, resolved: ResolvedWindow, question: str, k: DesiredK
    ) -> List[ContextPart]:
        chunks = await self.store.get_chunks_in_range(
            book_id, resolved.start, resolved.end, limit=self.config.chunk_fetch_limit
        )
        ranked = rank_chunks(chunks, extract_query_tokens(question))
        max_paragraphs = max(k.min, min(k.max, self.config.max_paragraphs_cap))

        parts = []
        for candidate in ranked[:max_paragraphs]:
            part = paragraph_part(candidate.chunk, self.config.max_paragraph_chars)
            if part:
                parts.append(part)
        return parts

    async def _explicit_page_part(
        self, book_id: str, resolved: ResolvedWindow, question: str
    ) -> Optional[ContextPart]:
        # Ground questions naming an in-window page even when ranking missed it
        page = detect_explicit_page(question)
        if page is None or not resolved.contains(page):
            return None

        chunks = await self.store.get_page_chunks(book_id, page, limit=1)
        if not chunks:
            return None
        return paragraph_part(chunks[0], self.config.max_paragraph_chars)

    def _result(
        self,
        system_prompt: str,
        question: str,
        included: List[ContextPart],
        context_text: str,
        resolved: ResolvedWindow,
        provider: str,
    ) -> RetrievalResult:
        estimated = estimate_tokens(system_prompt) + self.config.prompt_buffer_tokens
        output_tokens = self.config.estimated_output_tokens
        return RetrievalResult(
            system_prompt=system_prompt,
            user_prompt=question,
            parts=included,
            citations=[c for part in included for c in part.citations],
            estimated_tokens=estimated,
            token_estimate=TokenEstimate(
                input_tokens=estimated,
                estimated_output_tokens=output_tokens,
                total_tokens=estimated + output_tokens,
                provider=provider,
            ),
            context_text=context_text,
            resolved_window=resolved,
        )
