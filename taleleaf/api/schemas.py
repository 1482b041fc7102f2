"""Pydantic schemas for API request/response models.

JSON uses camelCase keys; Python attributes stay snake_case.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from taleleaf.domain.window import ChapterWindow, PageWindow, WindowSelection
from taleleaf.retrieval.types import DesiredK


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# ========== Request Schemas ==========


class PageWindowModel(CamelModel):
    kind: Literal["pages"] = "pages"
    start: int = Field(default=1, description="First page (1-indexed, inclusive)")
    end: int = Field(default=1, description="Last page (inclusive)")


class ChapterWindowModel(CamelModel):
    kind: Literal["chapters"]
    chapter_indices: List[int] = Field(default_factory=list)


WindowModel = Annotated[
    Union[PageWindowModel, ChapterWindowModel], Field(discriminator="kind")
]


class DesiredKModel(CamelModel):
    min: int = Field(default=4, ge=0)
    max: int = Field(default=8, ge=0)


class ContextWindowRequestBody(CamelModel):
    """Request model for /books/{book_id}/context-window and /ask."""

    question: str = Field(..., min_length=1, description="Reader's question")
    window: WindowModel
    max_context_tokens: Optional[int] = Field(
        default=None, ge=1, description="Token budget for context excerpts"
    )
    desired_k: Optional[DesiredKModel] = None
    include_raw_paragraphs: bool = True

    @model_validator(mode="before")
    @classmethod
    def normalize_window(cls, data: Any) -> Any:
        """Accept legacy ``type`` discriminators and top-level start/end."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        window = data.get("window")
        window = dict(window) if isinstance(window, dict) else {}
        if "kind" not in window and window.get("type"):
            window["kind"] = window.pop("type")
        if "kind" not in window:
            window = {
                "kind": "pages",
                "start": window.get("start", data.pop("start", 1)),
                "end": window.get("end", data.pop("end", 1)),
            }
        data["window"] = window
        return data

    @field_validator("question")
    @classmethod
    def question_must_not_be_empty(cls, v: str) -> str:
        """Validate question is not just whitespace."""
        if not v.strip():
            raise ValueError("question cannot be empty or whitespace")
        return v.strip()

    def window_selection(self) -> WindowSelection:
        if isinstance(self.window, ChapterWindowModel):
            return ChapterWindow(chapter_indices=list(self.window.chapter_indices))
        return PageWindow(start=self.window.start, end=self.window.end)

    def desired_k_value(self) -> Optional[DesiredK]:
        if self.desired_k is None:
            return None
        return DesiredK(min=self.desired_k.min, max=self.desired_k.max)


# ========== Response Schemas ==========


class ResolvedWindowModel(CamelModel):
    start: int
    end: int
    chapter_indices: List[int] = Field(default_factory=list)


class CitationModel(CamelModel):
    page: int
    chunk_id: Optional[str] = None


class ContextPartModel(CamelModel):
    label: str
    page: Optional[int] = None
    chapter_index: Optional[int] = None
    text: str
    citations: List[CitationModel] = Field(default_factory=list)
    estimated_tokens: int


class TokenEstimateModel(CamelModel):
    input_tokens: int
    estimated_output_tokens: int
    total_tokens: int
    estimated_cost: float = 0.0
    provider: str


class RetrievalResultModel(CamelModel):
    system_prompt: str
    user_prompt: str
    parts: List[ContextPartModel] = Field(default_factory=list)
    citations: List[CitationModel] = Field(default_factory=list)
    estimated_tokens: int
    token_estimate: TokenEstimateModel


class ContextWindowResponseModel(CamelModel):
    """Response model for /books/{book_id}/context-window."""

    ready: bool
    result: Optional[RetrievalResultModel] = None
    context_text: str = ""
    resolved_window: Optional[ResolvedWindowModel] = None
    message: Optional[str] = Field(
        default=None, description="Out-of-window refusal, when applicable"
    )
    reason: Optional[str] = Field(
        default=None, description="Why the window is not ready, when applicable"
    )


class AskResponseModel(CamelModel):
    """Response model for /books/{book_id}/ask."""

    ready: bool
    answer: Optional[str] = None
    citations: List[CitationModel] = Field(default_factory=list)
    message: Optional[str] = None
    reason: Optional[str] = None
    model: Optional[str] = None
    tokens_used: Optional[int] = None
    generation_time_ms: int = 0
    resolved_window: Optional[ResolvedWindowModel] = None
