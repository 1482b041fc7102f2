"""LLM factory for creating chat model instances."""

from taleleaf.config import LLMConfig
from taleleaf.llm.base import BaseLLM
from taleleaf.llm.gemini import GeminiLLM


def create_llm(config: LLMConfig) -> BaseLLM:
    """Create LLM instance from configuration.

    Raises:
        ValueError: If provider is not supported or config is invalid
    """
    if not config.provider:
        raise ValueError("LLM config must specify 'provider'")

    if config.provider == "gemini":
        return GeminiLLM(
            model=config.model,
            api_key=config.api_key or "",
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    raise ValueError(f"Unsupported LLM provider: {config.provider}. Supported: gemini")
