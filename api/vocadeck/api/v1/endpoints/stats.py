"""
Review statistics endpoint.
"""
from fastapi import APIRouter, Depends
from vocadeck.core.context import RequestContext, get_request_context
from vocadeck.core.database import get_store
from vocadeck.core.exceptions import NotFoundError
from vocadeck.core.record_store import RecordStore
from vocadeck.schemas.session import ReviewStatResponse
from vocadeck.services import card_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/cards/{card_id}", response_model=ReviewStatResponse)
def get_card_stat(
    card_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Get the caller's cumulative statistics for a card."""
    stat = card_service.get_review_stat(store, ctx, card_id)
    if stat is None:
        raise NotFoundError(f"No statistics for card {card_id}")
    return ReviewStatResponse.model_validate(stat)
