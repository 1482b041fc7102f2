"""Answer generation on top of an assembled context window."""

import time

from taleleaf.llm.base import BaseLLM
from taleleaf.retrieval import prompts
from taleleaf.retrieval.types import Citation, RetrievalResult


class AnswerGenerator:
    """Sends a retrieval's prompt pair to the chat model.

    Attributes:
        llm: Chat model used for completion
    """

    def __init__(self, llm: BaseLLM):
        self._llm = llm

    async def generate_answer(self, result: RetrievalResult) -> dict:
        """Generate an answer grounded in ``result``.

        Returns:
            Dictionary with:
                - answer: Generated answer text
                - citations: Retrieval citations whose page the answer cites
                - model: Model name used
                - tokens_used: Tokens consumed (if available)
                - generation_time_ms: Time spent on generation
        """
        start_time = time.time()

        response = await self._llm.generate(
            system_prompt=result.system_prompt,
            user_prompt=result.user_prompt,
        )

        generation_time_ms = int((time.time() - start_time) * 1000)

        return {
            "answer": response.content,
            "citations": self._cited(result.citations, response.content),
            "model": response.model,
            "tokens_used": response.tokens_used,
            "generation_time_ms": generation_time_ms,
        }

    def _cited(self, citations: list[Citation], answer: str) -> list[Citation]:
        """Keep citations for pages the answer refers to, in answer order.

        Pages the model cites that are not part of the context are dropped.
        """
        by_page: dict[int, list[Citation]] = {}
        for citation in citations:
            by_page.setdefault(citation.page, []).append(citation)

        cited: list[Citation] = []
        for page in prompts.extract_cited_pages(answer):
            cited.extend(by_page.get(page, []))
        return cited
