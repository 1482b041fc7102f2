"""Structured page/chapter summaries produced by the preprocessing step.

Stored as JSON; missing keys are tolerated and read as empty lists.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class SummaryEntity:
    name: str
    type: str = ""
    mentions: int = 0
    page_spans: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SummaryEvent:
    what: str
    who: list[str] = field(default_factory=list)
    where: Optional[str] = None
    when: Optional[str] = None
    page: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SummaryRelationship:
    a: str
    b: str
    relation: str
    evidence_pages: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SummaryRecord:
    """Read-only structured evidence for a page or a chapter."""

    entities: list[SummaryEntity] = field(default_factory=list)
    events: list[SummaryEvent] = field(default_factory=list)
    relationships: list[SummaryRelationship] = field(default_factory=list)
    facts: list[str] = field(default_factory=list)
    open_questions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional["SummaryRecord"]:
        """Build a record from stored ``summary_json``; ``None`` stays ``None``."""
        if data is None:
            return None
        return cls(
            entities=[
                SummaryEntity(
                    name=str(e.get("name", "")),
                    type=str(e.get("type", "")),
                    mentions=int(e.get("mentions") or 0),
                    page_spans=list(e.get("page_spans") or []),
                )
                for e in data.get("entities") or []
            ],
            events=[
                SummaryEvent(
                    what=str(evt.get("what", "")),
                    who=list(evt.get("who") or []),
                    where=evt.get("where"),
                    when=evt.get("when"),
                    page=evt.get("page"),
                )
                for evt in data.get("events") or []
            ],
            relationships=[
                SummaryRelationship(
                    a=str(r.get("a", "")),
                    b=str(r.get("b", "")),
                    relation=str(r.get("relation", "")),
                    evidence_pages=list(r.get("evidence_pages") or []),
                )
                for r in data.get("relationships") or []
            ],
            facts=[str(f) for f in data.get("facts") or []],
            open_questions=[str(q) for q in data.get("open_questions") or []],
        )


@dataclass(frozen=True, slots=True)
class ChapterSummaryRow:
    chapter_index: int
    summary: Optional[SummaryRecord]


@dataclass(frozen=True, slots=True)
class PageSummaryRow:
    page_number: int
    summary: Optional[SummaryRecord]
