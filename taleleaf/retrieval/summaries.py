"""Render structured summaries as compact prose lines."""

from typing import Optional

from taleleaf.domain.summary import SummaryEvent, SummaryRecord

MAX_ENTITIES = 5
MAX_EVENTS = 4
MAX_FACTS = 4
MAX_OPEN_QUESTIONS = 2


def _render_event(event: SummaryEvent) -> str:
    text = event.what
    if event.who:
        text += f" [{', '.join(event.who)}]"
    if event.page:
        text += f" (p{event.page})"
    return text


def render_summary(summary: Optional[SummaryRecord]) -> str:
    """Turn a summary record into at most four lines of text.

    Lists are truncated in their stored order; empty lists produce no line.
    Returns an empty string when there is no summary.
    """
    if summary is None:
        return ""

    lines: list[str] = []
    if summary.entities:
        lines.append(
            "Entities: "
            + "; ".join(f"{e.name} ({e.type})" for e in summary.entities[:MAX_ENTITIES])
        )
    if summary.events:
        lines.append(
            "Events: "
            + " | ".join(_render_event(evt) for evt in summary.events[:MAX_EVENTS])
        )
    if summary.facts:
        lines.append("Facts: " + " | ".join(summary.facts[:MAX_FACTS]))
    if summary.open_questions:
        lines.append(
            "Open questions: " + " | ".join(summary.open_questions[:MAX_OPEN_QUESTIONS])
        )
    return "\n".join(lines)
