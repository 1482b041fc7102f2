"""Spoiler-safe retrieval over a reader's window."""

from taleleaf.retrieval.assembler import ContextWindowAssembler
from taleleaf.retrieval.pages import detect_explicit_page, guard_out_of_window
from taleleaf.retrieval.service import ContextWindowRequest, ContextWindowService
from taleleaf.retrieval.types import (
    Citation,
    ContextPart,
    ContextWindowResponse,
    DesiredK,
    RetrievalResult,
    TokenEstimate,
)
from taleleaf.retrieval.window import resolve_window

__all__ = [
    "ContextWindowAssembler",
    "ContextWindowRequest",
    "ContextWindowService",
    "Citation",
    "ContextPart",
    "ContextWindowResponse",
    "DesiredK",
    "RetrievalResult",
    "TokenEstimate",
    "detect_explicit_page",
    "guard_out_of_window",
    "resolve_window",
]
