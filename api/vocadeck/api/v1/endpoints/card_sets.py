"""
Card sets endpoint.
"""
# pyright: reportAttributeAccessIssue=false
from fastapi import APIRouter, Depends, status
from vocadeck.core.context import RequestContext, get_request_context
from vocadeck.core.database import get_store
from vocadeck.core.record_store import RecordStore
from vocadeck.schemas.card import CardResponse
from vocadeck.schemas.card_set import (
    CardSetResponse,
    CardSetDetailResponse,
    CardSetsResponse,
    CreateCardSetRequest,
    UpdateCardSetRequest,
    ReorderRequest
)
from vocadeck.services import card_service, card_set_service

router = APIRouter(prefix="/card-sets", tags=["card-sets"])


@router.get("", response_model=CardSetsResponse)
def get_card_sets(
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Get the caller's card sets, most recent first, with card count and last accuracy."""
    summaries = card_set_service.list_card_sets(store, ctx)
    return CardSetsResponse(card_sets=[
        CardSetResponse.model_validate(summary.card_set).model_copy(update={
            "card_count": summary.card_count,
            "last_accuracy": summary.last_accuracy,
        })
        for summary in summaries
    ])


@router.post("", response_model=CardSetResponse, status_code=status.HTTP_201_CREATED)
def create_card_set(
    request: CreateCardSetRequest,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    card_set = card_set_service.create_card_set(store, ctx, request.title, request.description)
    return CardSetResponse.model_validate(card_set)


@router.get("/{card_set_id}", response_model=CardSetDetailResponse)
def get_card_set(
    card_set_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Get a card set with its cards in deck order."""
    card_set = card_set_service.get_owned_card_set(store, ctx, card_set_id)
    cards = card_service.list_cards(store, ctx, card_set_id)
    response = CardSetDetailResponse.model_validate(card_set)
    response.cards = [CardResponse.model_validate(card) for card in cards]
    response.card_count = len(cards)
    return response


@router.put("/{card_set_id}", response_model=CardSetResponse)
def update_card_set(
    card_set_id: int,
    request: UpdateCardSetRequest,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    card_set = card_set_service.update_card_set(
        store, ctx, card_set_id, title=request.title, description=request.description
    )
    return CardSetResponse.model_validate(card_set)


@router.delete("/{card_set_id}")
def delete_card_set(
    card_set_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """
    Delete a card set with its cards and their study statistics.

    Study sessions of the set are kept with card_set_id cleared.

    Returns:
        Dict with success status and deletion counts
    """
    counts = card_set_service.delete_card_set(store, ctx, card_set_id)
    return {"success": True, **counts}


@router.put("/{card_set_id}/order")
def reorder_card_set(
    card_set_id: int,
    request: ReorderRequest,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Persist a full target ordering of the deck."""
    keys = card_service.reorder_cards(store, ctx, card_set_id, request.card_ids)
    return {"card_set_id": card_set_id, "order": keys}


@router.post("/{card_set_id}/compact")
def compact_card_set(
    card_set_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    keys = card_service.compact_card_set(store, ctx, card_set_id)
    return {"card_set_id": card_set_id, "order": keys}
