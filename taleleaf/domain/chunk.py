"""Raw paragraph chunk entity."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RawChunk:
    """Immutable paragraph chunk of a book page.

    Attributes:
        id: Chunk identifier (UUID in the database)
        page_number: 1-indexed page the chunk was cut from
        intra_index: Position of the chunk within its page
        raw_text: Extracted text; may be empty for blank pages
    """

    id: str
    page_number: int
    intra_index: int = 0
    raw_text: str = ""
