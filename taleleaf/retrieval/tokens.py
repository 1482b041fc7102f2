"""Rough token estimation without a tokenizer."""

import math


def estimate_tokens(text: str) -> int:
    """Approximate token count as a quarter of the trimmed length, at least 1."""
    return max(1, math.ceil(len(text.strip()) / 4))
