"""Ask endpoint: context-window retrieval followed by chat completion."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from taleleaf.api.dependencies import get_context_service, get_llm, get_store
from taleleaf.api.routes.context_window import to_service_request
from taleleaf.api.schemas import (
    AskResponseModel,
    CitationModel,
    ContextWindowRequestBody,
    ResolvedWindowModel,
)
from taleleaf.errors import BookNotFound
from taleleaf.llm.base import BaseLLM
from taleleaf.retrieval.answer import AnswerGenerator
from taleleaf.retrieval.service import ContextWindowService
from taleleaf.storage.base import BookContextStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["ask"])


@router.post("/{book_id}/ask", response_model=AskResponseModel)
async def ask(
    book_id: str,
    body: ContextWindowRequestBody,
    response: Response,
    store: BookContextStore = Depends(get_store),
    service: ContextWindowService = Depends(get_context_service),
    llm: BaseLLM = Depends(get_llm),
) -> AskResponseModel:
    """Answer a question using only pages within the reader's window.

    Out-of-window page questions are answered with the refusal message and
    never reach the model.
    """
    try:
        if not await store.book_exists(book_id):
            raise BookNotFound(book_id)
        outcome = await service.retrieve(to_service_request(book_id, body))

        resolved = (
            ResolvedWindowModel.model_validate(outcome.resolved_window)
            if outcome.resolved_window
            else None
        )

        if not outcome.ready:
            response.status_code = 202
            return AskResponseModel(ready=False, reason=outcome.reason)

        if outcome.result is None:
            return AskResponseModel(
                ready=True,
                answer=outcome.message,
                message=outcome.message,
                resolved_window=resolved,
            )

        generated = await AnswerGenerator(llm).generate_answer(outcome.result)
    except BookNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    except Exception as e:
        logger.exception("ask failed for book %s", book_id)
        raise HTTPException(status_code=500, detail=f"Ask request failed: {str(e)}") from e

    return AskResponseModel(
        ready=True,
        answer=generated["answer"],
        citations=[CitationModel.model_validate(c) for c in generated["citations"]],
        model=generated["model"],
        tokens_used=generated["tokens_used"],
        generation_time_ms=generated["generation_time_ms"],
        resolved_window=resolved,
    )
