"""Lexical ranking of raw paragraph chunks.

Scores are plain token-overlap counts. With no lexical signal every chunk
scores 0 and the tie-break yields reading order.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List

from taleleaf.domain.chunk import RawChunk

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, slots=True)
class RankedChunk:
    chunk: RawChunk
    score: int


def extract_query_tokens(question: str) -> List[str]:
    """Lowercase, split on non-alphanumerics and keep tokens longer than 2."""
    return [t for t in _TOKEN_SPLIT.split(question.lower()) if len(t) > 2]


def score_chunk(chunk: RawChunk, query_tokens: Iterable[str]) -> int:
    """Count query tokens appearing as substrings of the chunk text."""
    text = (chunk.raw_text or "").lower()
    if not text:
        return 0
    return sum(1 for token in query_tokens if token in text)


def rank_chunks(chunks: Iterable[RawChunk], query_tokens: List[str]) -> List[RankedChunk]:
    """Order chunks by score, then page, then position within the page."""
    ranked = [RankedChunk(chunk=c, score=score_chunk(c, query_tokens)) for c in chunks]
    ranked.sort(key=lambda r: (-r.score, r.chunk.page_number, r.chunk.intra_index))
    return ranked
