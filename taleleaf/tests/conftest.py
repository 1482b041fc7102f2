"""Pytest configuration and shared fixtures for TaleLeaf tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from taleleaf.storage.memory import BookData, InMemoryBookStore  # noqa: E402


def _summary(page: int, name: str, what: str) -> dict:
    return {
        "entities": [{"name": name, "type": "character", "mentions": 1, "page_spans": [page]}],
        "events": [{"who": [name], "what": what, "page": page}],
        "relationships": [],
        "facts": [f"{name} is on page {page}"],
        "open_questions": [],
    }


@pytest.fixture
def sample_book_data() -> dict:
    """JSON-shaped context data for a three-chapter book."""
    return {
        "books": {
            "book-1": {
                "chapter_map": [
                    {"chapter_index": 0, "start_page": 1, "end_page": 10},
                    {"chapter_index": 1, "start_page": 11, "end_page": 25},
                    {"chapter_index": 2, "start_page": 26, "end_page": 60},
                ],
                "chapter_summaries": {
                    "0": {
                        "entities": [{"name": "ana", "type": "character"}],
                        "facts": ["Ana leaves the village"],
                    },
                    "1": {"facts": ["The river crossing fails"]},
                    "2": {"facts": ["Ben betrays the crew"]},
                },
                "page_summaries": {
                    "3": _summary(3, "ana", "Ana finds a map"),
                    "12": _summary(12, "ben", "Ben steals the boat"),
                    "29": _summary(29, "ana", "Ana reaches the tower"),
                    "30": _summary(30, "cora", "Cora opens the gate"),
                    "58": _summary(58, "ben", "Ben is unmasked"),
                },
                "chunks": [
                    {"id": "c3-0", "page_number": 3, "intra_index": 0,
                     "raw_text": "Ana unrolled the old map by candlelight."},
                    {"id": "c12-0", "page_number": 12, "intra_index": 0,
                     "raw_text": "Ben untied the boat while the others slept."},
                    {"id": "c30-0", "page_number": 30, "intra_index": 0,
                     "raw_text": "The iron gate groaned as Cora pushed it open."},
                    {"id": "c30-1", "page_number": 30, "intra_index": 1,
                     "raw_text": "Beyond it lay a courtyard full of ash."},
                    {"id": "c30-2", "page_number": 30, "intra_index": 2,
                     "raw_text": "Nobody spoke."},
                    {"id": "c58-0", "page_number": 58, "intra_index": 0,
                     "raw_text": "Ben's mask slipped, and the crew saw the traitor."},
                ],
            },
            "empty-book": {},
        }
    }


@pytest.fixture
def book_store(sample_book_data) -> InMemoryBookStore:
    return InMemoryBookStore.from_dict(sample_book_data)


@pytest.fixture
def empty_store() -> InMemoryBookStore:
    return InMemoryBookStore({"empty-book": BookData()})


@pytest.fixture(autouse=True)
def reset_taleleaf_logger():
    """Drop handlers installed by setup_logging so streams do not leak between tests."""
    yield
    logger = logging.getLogger("taleleaf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
