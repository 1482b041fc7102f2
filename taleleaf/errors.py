"""Typed failure outcomes surfaced by the context-window service."""


class TaleLeafError(Exception):
    """Base class for errors with a stable, client-facing code."""

    code = "taleleaf-error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)


class ContextWindowDataMissing(TaleLeafError):
    """No precomputed evidence exists yet for the requested range.

    Callers should trigger preprocessing for the book and retry.
    """

    code = "context-window-data-missing"

    def __init__(self, book_id: str, start: int, end: int):
        super().__init__(
            f"No summaries or chunks for book {book_id} in pages {start}-{end}"
        )
        self.book_id = book_id
        self.start = start
        self.end = end


class BookNotFound(TaleLeafError):
    """Book does not exist (or is not visible to the caller)."""

    code = "not-found"

    def __init__(self, book_id: str):
        super().__init__(f"Book not found: {book_id}")
        self.book_id = book_id


class StoreNotInitialized(TaleLeafError):
    code = "store-not-initialized"
