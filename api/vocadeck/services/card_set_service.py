"""
Card set service for business logic related to card set operations.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from vocadeck.core.clock import utc_now
from vocadeck.core.context import RequestContext
from vocadeck.core.exceptions import NotFoundError, ValidationError
from vocadeck.core.record_store import BatchOp, RecordStore
from vocadeck.models.card import Card
from vocadeck.models.card_progress import CardProgress
from vocadeck.models.card_set import CardSet
from vocadeck.models.enums import SessionStatus
from vocadeck.models.learning_session import LearningSession
from vocadeck.models.user_card_stat import UserCardStat

logger = logging.getLogger(__name__)


@dataclass
class CardSetSummary:
    """A card set with the figures shown on the dashboard."""
    card_set: CardSet
    card_count: int
    last_accuracy: Optional[int]


def _clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    return title


def get_owned_card_set(store: RecordStore, ctx: RequestContext, card_set_id: int) -> CardSet:
    """Load a card set owned by the caller; other users' sets look missing."""
    card_set = store.get(CardSet, card_set_id)
    if card_set is None or card_set.user_id != ctx.user_id:
        raise NotFoundError(f"Card set with id {card_set_id} not found")
    return card_set


def create_card_set(
    store: RecordStore,
    ctx: RequestContext,
    title: Optional[str],
    description: Optional[str] = None
) -> CardSet:
    card_set = store.insert(CardSet(
        user_id=ctx.user_id,
        title=_clean_title(title),
        description=(description or "").strip() or None,
    ))
    logger.info(f"Created card set {card_set.id} for user {ctx.user_id}")
    return card_set


def list_card_sets(store: RecordStore, ctx: RequestContext) -> List[CardSetSummary]:
    """Caller's card sets, newest first, with card count and latest session accuracy."""
    card_sets = store.list(CardSet, {"user_id": ctx.user_id}, order_by=["-created_at", "-id"])
    if not card_sets:
        return []
    set_ids = [card_set.id for card_set in card_sets]

    card_counts: Dict[int, int] = {}
    for card in store.list(Card, {"card_set_id": set_ids}):
        card_counts[card.card_set_id] = card_counts.get(card.card_set_id, 0) + 1

    last_accuracy: Dict[int, int] = {}
    completed = store.list(
        LearningSession,
        {"card_set_id": set_ids, "user_id": ctx.user_id, "status": SessionStatus.COMPLETED.value},
        order_by=["completed_at", "id"],
    )
    for session in completed:
        # Later sessions overwrite earlier ones
        last_accuracy[session.card_set_id] = session.accuracy

    return [
        CardSetSummary(
            card_set=card_set,
            card_count=card_counts.get(card_set.id, 0),
            last_accuracy=last_accuracy.get(card_set.id),
        )
        for card_set in card_sets
    ]


def update_card_set(
    store: RecordStore,
    ctx: RequestContext,
    card_set_id: int,
    title: Optional[str] = None,
    description: Optional[str] = None
) -> CardSet:
    """Update title and/or description. Fields left as None are unchanged."""
    get_owned_card_set(store, ctx, card_set_id)
    patch: Dict[str, Any] = {"updated_at": utc_now()}
    if title is not None:
        patch["title"] = _clean_title(title)
    if description is not None:
        patch["description"] = description.strip() or None
    return store.update(CardSet, card_set_id, patch)


def delete_card_set(store: RecordStore, ctx: RequestContext, card_set_id: int) -> Dict[str, int]:
    """
    Delete a card set and everything it owns in one batch.

    Deletes in dependency order:
    1. Progress rows and review stats of its cards (all users)
    2. The cards
    3. The card set itself
    Study sessions are kept as history with card_set_id cleared.

    Returns:
        Dict with counts of deleted/detached rows
    """
    get_owned_card_set(store, ctx, card_set_id)

    cards = store.list(Card, {"card_set_id": card_set_id})
    card_ids = [card.id for card in cards]
    progress = store.list(CardProgress, {"card_id": card_ids}) if card_ids else []
    stats = store.list(UserCardStat, {"card_id": card_ids}) if card_ids else []
    sessions = store.list(LearningSession, {"card_set_id": card_set_id})

    ops = [BatchOp.delete(CardProgress, row.id) for row in progress]
    ops += [BatchOp.delete(UserCardStat, stat.id) for stat in stats]
    ops += [BatchOp.delete(Card, card_id) for card_id in card_ids]
    ops += [BatchOp.update(LearningSession, session.id, {"card_set_id": None}) for session in sessions]
    ops.append(BatchOp.delete(CardSet, card_set_id))
    store.batch(ops)

    logger.info(
        f"Deleted card set {card_set_id}: {len(card_ids)} cards, {len(stats)} stats, "
        f"{len(progress)} progress rows, {len(sessions)} sessions detached"
    )
    return {
        'cards_deleted': len(card_ids),
        'stats_deleted': len(stats),
        'progress_deleted': len(progress),
        'sessions_detached': len(sessions),
    }
