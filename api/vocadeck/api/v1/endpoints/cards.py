"""
Cards endpoint.
"""
from fastapi import APIRouter, Depends, status
from vocadeck.core.context import RequestContext, get_request_context
from vocadeck.core.database import get_store
from vocadeck.core.record_store import RecordStore
from vocadeck.schemas.card import (
    CardDraft,
    CardResponse,
    CardsResponse,
    CreateCardRequest,
    UpdateCardRequest,
    MoveCardRequest
)
from vocadeck.services import card_service

router = APIRouter(prefix="/cards", tags=["cards"])


@router.get("", response_model=CardsResponse)
def get_cards(
    card_set_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Get the cards of a set in deck order."""
    cards = card_service.list_cards(store, ctx, card_set_id)
    return CardsResponse(cards=[CardResponse.model_validate(card) for card in cards])


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
def create_card(
    request: CreateCardRequest,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Add a card at the end of its set."""
    draft = CardDraft.model_validate(request.model_dump(exclude={"card_set_id"}))
    card = card_service.add_card(store, ctx, request.card_set_id, draft)
    return CardResponse.model_validate(card)


@router.get("/{card_id}", response_model=CardResponse)
def get_card(
    card_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    return CardResponse.model_validate(card_service.get_owned_card(store, ctx, card_id))


@router.put("/{card_id}", response_model=CardResponse)
def update_card(
    card_id: int,
    request: UpdateCardRequest,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Update a card. Only fields present in the body are changed."""
    changes = request.model_dump(exclude_unset=True)
    card = card_service.update_card(store, ctx, card_id, changes)
    return CardResponse.model_validate(card)


@router.delete("/{card_id}")
def delete_card(
    card_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    counts = card_service.delete_card(store, ctx, card_id)
    return {"success": True, **counts}


@router.post("/{card_id}/move")
def move_card(
    card_id: int,
    request: MoveCardRequest,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Move a card to a 0-based position in its deck."""
    keys = card_service.move_card(store, ctx, card_id, request.target_index)
    return {"card_id": card_id, "order": keys}
