"""Request-level orchestration of the context window."""

import logging
from dataclasses import dataclass
from typing import Optional

from taleleaf.domain.window import PageWindow, WindowSelection
from taleleaf.errors import ContextWindowDataMissing
from taleleaf.retrieval.assembler import ContextWindowAssembler
from taleleaf.retrieval.pages import detect_explicit_page, guard_out_of_window
from taleleaf.retrieval.types import ContextWindowResponse, DesiredK


@dataclass(frozen=True)
class ContextWindowRequest:
    """Validated inbound request.

    Attributes:
        book_id: Book the question is about
        window: Pages or chapters the reader has reached
        question: Natural-language question, already stripped
        max_context_tokens: Budget override; defaults depend on the path taken
        desired_k: Requested number of raw paragraphs
        include_raw_paragraphs: Whether ranked paragraphs are considered
    """

    book_id: str
    window: WindowSelection
    question: str
    max_context_tokens: Optional[int] = None
    desired_k: Optional[DesiredK] = None
    include_raw_paragraphs: bool = True


class ContextWindowService:
    """Routes a question to the refusal, page-focused or full-window path."""

    def __init__(
        self,
        assembler: ContextWindowAssembler,
        logger: logging.Logger | None = None,
    ):
        self._assembler = assembler
        self._logger = logger or logging.getLogger(__name__)

    async def retrieve(self, request: ContextWindowRequest) -> ContextWindowResponse:
        """Build the context-window response for ``request``.

        Questions naming a page outside a page-range window get the fixed
        refusal without touching the store. Questions naming an in-window
        page of a page-range window take the page-focused path. Missing
        evidence yields ``ready=False``; store errors propagate.
        """
        explicit_page = detect_explicit_page(request.question)

        refusal = guard_out_of_window(explicit_page, request.window)
        if refusal is not None:
            self._logger.info(
                "Refused out-of-window page %s for book %s", explicit_page, request.book_id
            )
            return refusal

        try:
            if explicit_page is not None and isinstance(request.window, PageWindow):
                result = await self._assembler.build_page_focused_context_window_result(
                    request.book_id,
                    explicit_page,
                    request.question,
                    max_context_tokens=request.max_context_tokens,
                )
            else:
                result = await self._assembler.build_context_window_result(
                    request.book_id,
                    request.window,
                    request.question,
                    max_context_tokens=request.max_context_tokens,
                    desired_k=request.desired_k,
                    include_raw_paragraphs=request.include_raw_paragraphs,
                )
        except ContextWindowDataMissing as exc:
            self._logger.info("Context window not ready: %s", exc)
            return ContextWindowResponse(ready=False, reason=exc.code)

        return ContextWindowResponse(
            ready=True,
            result=result,
            context_text=result.context_text,
            resolved_window=result.resolved_window,
        )
