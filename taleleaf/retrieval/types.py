"""Per-request retrieval types; nothing here is persisted."""

from dataclasses import dataclass, field
from typing import Literal, Optional

from taleleaf.domain.window import ResolvedWindow

PartLabel = Literal["chapter-summary", "page-summary", "paragraph"]


@dataclass(frozen=True, slots=True)
class Citation:
    page: int
    chunk_id: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"page": self.page}
        if self.chunk_id is not None:
            data["chunk_id"] = self.chunk_id
        return data


@dataclass(frozen=True, slots=True)
class ContextPart:
    """One rendered piece of evidence considered for the prompt.

    Attributes:
        label: Kind of evidence (chapter summary, page summary, paragraph)
        text: Rendered text, never empty once constructed by the assembler
        citations: Pages (and chunk ids) the text is drawn from
        estimated_tokens: Approximate token cost of ``text``
        page: Page number for page summaries and paragraphs
        chapter_index: Chapter index for chapter summaries
    """

    label: PartLabel
    text: str
    citations: list[Citation] = field(default_factory=list)
    estimated_tokens: int = 1
    page: Optional[int] = None
    chapter_index: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "page": self.page,
            "chapter_index": self.chapter_index,
            "text": self.text,
            "citations": [c.to_dict() for c in self.citations],
            "estimated_tokens": self.estimated_tokens,
        }


@dataclass(frozen=True, slots=True)
class DesiredK:
    """Requested range for the number of raw paragraphs."""

    min: int = 4
    max: int = 8


@dataclass(frozen=True, slots=True)
class TokenEstimate:
    input_tokens: int
    estimated_output_tokens: int
    total_tokens: int
    provider: str
    estimated_cost: float = 0.0

    def to_dict(self) -> dict:
        return {
            "input_tokens": self.input_tokens,
            "estimated_output_tokens": self.estimated_output_tokens,
            "total_tokens": self.total_tokens,
            "estimated_cost": self.estimated_cost,
            "provider": self.provider,
        }


@dataclass(frozen=True, slots=True)
class RetrievalResult:
    """Prompt pair plus the evidence it was built from."""

    system_prompt: str
    user_prompt: str
    parts: list[ContextPart]
    citations: list[Citation]
    estimated_tokens: int
    token_estimate: TokenEstimate
    context_text: str
    resolved_window: ResolvedWindow

    def to_dict(self) -> dict:
        return {
            "system_prompt": self.system_prompt,
            "user_prompt": self.user_prompt,
            "parts": [p.to_dict() for p in self.parts],
            "citations": [c.to_dict() for c in self.citations],
            "estimated_tokens": self.estimated_tokens,
            "token_estimate": self.token_estimate.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ContextWindowResponse:
    """Outcome of a context-window request.

    ``ready=False`` with ``reason`` set means evidence is not precomputed yet.
    ``ready=True`` with ``result=None`` and ``message`` set is the
    out-of-window refusal.
    """

    ready: bool
    result: Optional[RetrievalResult] = None
    context_text: str = ""
    resolved_window: Optional[ResolvedWindow] = None
    message: Optional[str] = None
    reason: Optional[str] = None
