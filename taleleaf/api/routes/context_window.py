"""Context-window endpoint: spoiler-safe prompt assembly without generation."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from taleleaf.api.dependencies import get_context_service, get_store
from taleleaf.api.schemas import ContextWindowRequestBody, ContextWindowResponseModel
from taleleaf.errors import BookNotFound
from taleleaf.retrieval.service import ContextWindowRequest, ContextWindowService
from taleleaf.storage.base import BookContextStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["context-window"])


def to_service_request(book_id: str, body: ContextWindowRequestBody) -> ContextWindowRequest:
    return ContextWindowRequest(
        book_id=book_id,
        window=body.window_selection(),
        question=body.question,
        max_context_tokens=body.max_context_tokens,
        desired_k=body.desired_k_value(),
        include_raw_paragraphs=body.include_raw_paragraphs,
    )


@router.post("/{book_id}/context-window", response_model=ContextWindowResponseModel)
async def context_window(
    book_id: str,
    body: ContextWindowRequestBody,
    response: Response,
    store: BookContextStore = Depends(get_store),
    service: ContextWindowService = Depends(get_context_service),
) -> ContextWindowResponseModel:
    """Assemble the prompt pair for a question within the reader's window.

    Returns 202 with ``ready: false`` while the book's context data is still
    being preprocessed.
    """
    logger.debug("context-window request for book %s", book_id)
    try:
        if not await store.book_exists(book_id):
            raise BookNotFound(book_id)
        outcome = await service.retrieve(to_service_request(book_id, body))
    except BookNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    except Exception as e:
        logger.exception("context-window build failed for book %s", book_id)
        raise HTTPException(status_code=500, detail="context-window-failed") from e

    if not outcome.ready:
        response.status_code = 202
    return ContextWindowResponseModel.model_validate(outcome)
