"""Gemini chat model over the Generative Language REST API."""

import httpx
from typing import Optional

from taleleaf.llm.base import BaseLLM, LLMResponse


class GeminiLLM(BaseLLM):
    """Google Gemini LLM implementation.

    Sends the system prompt as ``systemInstruction`` and the question as the
    single user turn.
    """

    API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        api_key: str = "",
        temperature: float = 0.3,
        max_tokens: int = 1024,
        timeout: float = 60.0,
    ):
        """Initialize Gemini LLM.

        Args:
            model: Model name (e.g., "gemini-2.5-flash", "gemini-2.5-pro")
            api_key: Google API key
            temperature: Sampling temperature (0.0 - 1.0)
            max_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
        """
        super().__init__(model=model, temperature=temperature, max_tokens=max_tokens)
        self._api_key = api_key
        self._timeout = timeout

        if not self._api_key:
            raise ValueError("Google API key is required for Gemini LLM")

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        temp = temperature if temperature is not None else self.temperature
        max_tok = max_tokens if max_tokens is not None else self.max_tokens

        model_id = (
            f"models/{self.model}"
            if not self.model.startswith("models/")
            else self.model
        )
        url = f"{self.API_BASE}/{model_id}:generateContent?key={self._api_key}"

        data = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "temperature": temp,
                "maxOutputTokens": max_tok,
            },
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    url, json=data, headers={"Content-Type": "application/json"}
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            raise RuntimeError(
                f"Gemini API error: {e.response.status_code} - {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise RuntimeError(f"Gemini LLM generation failed: {str(e)}") from e

        return LLMResponse(
            content=self._extract_content(result),
            model=self.model,
            tokens_used=self._extract_tokens(result),
            finish_reason=self._extract_finish_reason(result),
        )

    def _extract_content(self, result: dict) -> str:
        try:
            return result["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError) as e:
            raise RuntimeError(
                f"Unexpected Gemini API response format: {result}"
            ) from e

    def _extract_tokens(self, result: dict) -> Optional[int]:
        return (result.get("usageMetadata") or {}).get("totalTokenCount")

    def _extract_finish_reason(self, result: dict) -> Optional[str]:
        try:
            return result["candidates"][0].get("finishReason")
        except (KeyError, IndexError):
            return None
