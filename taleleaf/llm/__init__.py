"""Chat completion providers."""

from taleleaf.llm.base import BaseLLM, LLMResponse
from taleleaf.llm.factory import create_llm

__all__ = ["BaseLLM", "LLMResponse", "create_llm"]
