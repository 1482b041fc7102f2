"""Unit tests for summary parsing and rendering."""

from taleleaf.domain.summary import SummaryEntity, SummaryEvent, SummaryRecord
from taleleaf.retrieval.summaries import render_summary


class TestRenderSummary:
    def test_missing_summary_renders_empty(self):
        assert render_summary(None) == ""

    def test_empty_lists_render_empty(self):
        record = SummaryRecord.from_dict(
            {"entities": [], "events": [], "facts": [], "open_questions": []}
        )
        assert render_summary(record) == ""

    def test_full_record(self):
        record = SummaryRecord(
            entities=[SummaryEntity(name="ana", type="character")],
            events=[SummaryEvent(what="Ana finds a map", who=["ana", "ben"], page=3)],
            facts=["The map is torn"],
            open_questions=["Who drew the map?"],
        )

        assert render_summary(record) == (
            "Entities: ana (character)\n"
            "Events: Ana finds a map [ana, ben] (p3)\n"
            "Facts: The map is torn\n"
            "Open questions: Who drew the map?"
        )

    def test_empty_sections_produce_no_line(self):
        record = SummaryRecord(facts=["Only a fact"])

        assert render_summary(record) == "Facts: Only a fact"

    def test_event_without_who_or_page(self):
        record = SummaryRecord(events=[SummaryEvent(what="A storm rolls in")])

        assert render_summary(record) == "Events: A storm rolls in"

    def test_lists_are_truncated_in_stored_order(self):
        record = SummaryRecord(
            entities=[SummaryEntity(name=f"e{i}", type="object") for i in range(8)],
            events=[SummaryEvent(what=f"ev{i}") for i in range(6)],
            facts=[f"f{i}" for i in range(6)],
            open_questions=[f"q{i}" for i in range(5)],
        )

        lines = render_summary(record).split("\n")

        assert lines[0] == "Entities: " + "; ".join(f"e{i} (object)" for i in range(5))
        assert lines[1] == "Events: ev0 | ev1 | ev2 | ev3"
        assert lines[2] == "Facts: f0 | f1 | f2 | f3"
        assert lines[3] == "Open questions: q0 | q1"


class TestSummaryRecordFromDict:
    def test_none_stays_none(self):
        assert SummaryRecord.from_dict(None) is None

    def test_missing_keys_read_as_empty(self):
        record = SummaryRecord.from_dict({"facts": ["x"]})

        assert record.entities == []
        assert record.events == []
        assert record.relationships == []
        assert record.facts == ["x"]
        assert record.open_questions == []

    def test_parses_nested_entries(self):
        record = SummaryRecord.from_dict(
            {
                "entities": [{"name": "ana", "type": "character", "mentions": 2, "page_spans": [3]}],
                "events": [{"who": ["ana"], "what": "runs", "where": "forest", "when": None, "page": 4}],
                "relationships": [{"a": "ana", "b": "ben", "relation": "siblings", "evidence_pages": [4]}],
                "facts": [],
                "open_questions": [],
            }
        )

        assert record.entities[0].mentions == 2
        assert record.events[0].where == "forest"
        assert record.events[0].page == 4
        assert record.relationships[0].relation == "siblings"
