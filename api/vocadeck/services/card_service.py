"""
Card service for business logic related to card operations.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from vocadeck.core.clock import utc_now
from vocadeck.core.context import RequestContext
from vocadeck.core.exceptions import MalformedRowError, NotFoundError, ValidationError, VocadeckException
from vocadeck.core.record_store import BatchOp, RecordStore
from vocadeck.models.card import Card
from vocadeck.models.card_progress import CardProgress
from vocadeck.models.user_card_stat import UserCardStat
from vocadeck.schemas.card import CardDraft
from vocadeck.services.card_set_service import get_owned_card_set
from vocadeck.services.csv_service import decode_cards_with_report, encode_cards
from vocadeck.services.ordering_service import OrderedDeck

logger = logging.getLogger(__name__)

FACE_FIELDS = (
    "front_word", "front_hint", "front_description",
    "back_word", "back_hint", "back_description",
)
REQUIRED_FIELDS = ("front_word", "back_word")


@dataclass
class ImportResult:
    """Outcome of importing a list of drafts. Partial success is normal."""
    imported: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    cards: List[Card] = field(default_factory=list)
    skipped_rows: List[MalformedRowError] = field(default_factory=list)


def _card_from_draft(draft: CardDraft) -> Card:
    return Card(**draft.model_dump())


def get_owned_card(store: RecordStore, ctx: RequestContext, card_id: int) -> Card:
    """Load a card whose set belongs to the caller."""
    card = store.get(Card, card_id)
    if card is None:
        raise NotFoundError(f"Card with id {card_id} not found")
    get_owned_card_set(store, ctx, card.card_set_id)
    return card


def list_cards(store: RecordStore, ctx: RequestContext, card_set_id: int) -> List[Card]:
    """Cards of a set in deck order."""
    get_owned_card_set(store, ctx, card_set_id)
    return OrderedDeck(store, card_set_id).cards()


def add_card(store: RecordStore, ctx: RequestContext, card_set_id: int, draft: CardDraft) -> Card:
    """Add one card at the end of the deck."""
    get_owned_card_set(store, ctx, card_set_id)
    card = OrderedDeck(store, card_set_id).add(_card_from_draft(draft))
    logger.info(f"Added card {card.id} to card set {card_set_id} with key {card.display_order}")
    return card


def update_card(store: RecordStore, ctx: RequestContext, card_id: int, changes: Dict[str, Any]) -> Card:
    """
    Update face fields of a card.

    Only keys present in changes are written. Words cannot be blanked;
    blank hints/descriptions are stored as None.
    """
    get_owned_card(store, ctx, card_id)
    patch: Dict[str, Any] = {}
    for name, value in changes.items():
        if name not in FACE_FIELDS:
            continue
        if name in REQUIRED_FIELDS:
            value = (value or "").strip()
            if not value:
                raise ValidationError(f"{name} must not be empty")
        elif value is not None:
            value = value.strip() or None
        patch[name] = value
    patch["updated_at"] = utc_now()
    return store.update(Card, card_id, patch)


def delete_card(store: RecordStore, ctx: RequestContext, card_id: int) -> Dict[str, int]:
    """Delete a card together with its review stats and progress rows."""
    get_owned_card(store, ctx, card_id)
    stats = store.list(UserCardStat, {"card_id": card_id})
    progress = store.list(CardProgress, {"card_id": card_id})

    ops = [BatchOp.delete(CardProgress, row.id) for row in progress]
    ops += [BatchOp.delete(UserCardStat, stat.id) for stat in stats]
    ops.append(BatchOp.delete(Card, card_id))
    store.batch(ops)

    logger.info(f"Deleted card {card_id} with {len(stats)} stats and {len(progress)} progress rows")
    return {'stats_deleted': len(stats), 'progress_deleted': len(progress)}


def import_cards(
    store: RecordStore,
    ctx: RequestContext,
    card_set_id: int,
    drafts: Iterable[CardDraft]
) -> ImportResult:
    """
    Insert drafts after the current last card, keeping their order.

    Each card is inserted on its own; rejected inserts are counted and the
    rest of the import continues.
    """
    get_owned_card_set(store, ctx, card_set_id)
    deck = OrderedDeck(store, card_set_id)
    key = deck.next_key()
    result = ImportResult()

    for index, draft in enumerate(drafts):
        card = _card_from_draft(draft)
        card.card_set_id = card_set_id
        card.display_order = key
        try:
            result.cards.append(store.insert(card))
            result.imported += 1
            key += deck.gap
        except (VocadeckException, SQLAlchemyError) as e:
            logger.error(f"Failed to import card #{index + 1} ({draft.front_word!r}): {e}")
            result.failed += 1
            result.errors.append(f"Card #{index + 1} ({draft.front_word}): {e}")

    logger.info(
        f"Imported {result.imported} card(s) into card set {card_set_id}, {result.failed} failed"
    )
    return result


def import_csv(store: RecordStore, ctx: RequestContext, card_set_id: int, text: str) -> ImportResult:
    """Decode CSV text and import the resulting drafts."""
    get_owned_card_set(store, ctx, card_set_id)
    decoded = decode_cards_with_report(text)
    result = import_cards(store, ctx, card_set_id, decoded.drafts)
    result.skipped_rows = decoded.skipped
    return result


def export_cards_csv(store: RecordStore, ctx: RequestContext, card_set_id: int) -> str:
    """CSV text of a card set in deck order."""
    return encode_cards(list_cards(store, ctx, card_set_id))


def reorder_cards(
    store: RecordStore,
    ctx: RequestContext,
    card_set_id: int,
    card_ids: List[int]
) -> Dict[int, int]:
    get_owned_card_set(store, ctx, card_set_id)
    return OrderedDeck(store, card_set_id).persist_reorder(card_ids)


def move_card(store: RecordStore, ctx: RequestContext, card_id: int, target_index: int) -> Dict[int, int]:
    card = get_owned_card(store, ctx, card_id)
    return OrderedDeck(store, card.card_set_id).move_to(card_id, target_index)


def compact_card_set(store: RecordStore, ctx: RequestContext, card_set_id: int) -> Dict[int, int]:
    get_owned_card_set(store, ctx, card_set_id)
    return OrderedDeck(store, card_set_id).compact()


def get_review_stat(
    store: RecordStore,
    ctx: RequestContext,
    card_id: int
) -> Optional[UserCardStat]:
    """Caller's statistic for a card, or None if it was never studied."""
    get_owned_card(store, ctx, card_id)
    stats = store.list(UserCardStat, {"user_id": ctx.user_id, "card_id": card_id})
    return stats[0] if stats else None
