"""
Deck ordering service.

Cards carry an integer display_order and are listed by ascending key.
New cards go to the end with max + GAP. Any explicit reorder rewrites every
key to (index + 1) * GAP, so keys never degenerate after repeated moves and
stay readable integers with a fixed spacing.

A reorder touches many rows and is applied as one batch through the record
store: either every card gets its new key or none does.
"""
import logging
from typing import Dict, List, Optional, Sequence

from vocadeck.core.config import settings
from vocadeck.core.exceptions import ConflictError, NotFoundError, ValidationError
from vocadeck.core.record_store import BatchOp, RecordStore
from vocadeck.core.retry import retry_on_conflict
from vocadeck.models.card import Card

logger = logging.getLogger(__name__)

# Listing order; created_at and id only break ties left by legacy rows
CARD_ORDER = ["display_order", "created_at", "id"]


def next_order_key(existing_keys: Sequence[int], gap: int) -> int:
    """Key for a card appended after existing_keys (gap for an empty deck)."""
    if not existing_keys:
        return gap
    return max(existing_keys) + gap


def keys_for_order(ordered_ids: Sequence[int], gap: int) -> Dict[int, int]:
    """Assign (index + 1) * gap to each id in presentation order."""
    return {card_id: (index + 1) * gap for index, card_id in enumerate(ordered_ids)}


def move_in_sequence(ordered_ids: Sequence[int], card_id: int, target_index: int) -> List[int]:
    """
    Remove card_id and reinsert it at target_index.

    target_index is clamped to the valid range, so a large value moves the
    card to the end.
    """
    if card_id not in ordered_ids:
        raise NotFoundError(f"Card {card_id} is not in this deck")
    if target_index < 0:
        raise ValidationError("target_index must not be negative")
    sequence = [cid for cid in ordered_ids if cid != card_id]
    sequence.insert(min(target_index, len(sequence)), card_id)
    return sequence


def is_strictly_increasing(keys: Sequence[int]) -> bool:
    return all(a < b for a, b in zip(keys, keys[1:]))


class OrderedDeck:
    """Ordering operations for the cards of one card set."""

    def __init__(self, store: RecordStore, card_set_id: int, gap: Optional[int] = None):
        self.store = store
        self.card_set_id = card_set_id
        self.gap = gap or settings.order_gap

    def cards(self) -> List[Card]:
        """Cards of the set in presentation order."""
        return self.store.list(Card, {"card_set_id": self.card_set_id}, order_by=CARD_ORDER)

    def card_ids(self) -> List[int]:
        return [card.id for card in self.cards()]

    def next_key(self) -> int:
        return next_order_key([card.display_order for card in self.cards()], self.gap)

    def is_consistent(self) -> bool:
        """True when keys are unique and strictly increasing in listing order."""
        return is_strictly_increasing([card.display_order for card in self.cards()])

    def add(self, card: Card) -> Card:
        """Insert a new card at the end of the deck."""
        card.card_set_id = self.card_set_id
        card.display_order = self.next_key()
        stored = self.store.insert(card)
        if self._key_taken_by_other(stored.id, stored.display_order):
            # Another card was appended concurrently with the same key
            stored.display_order = self.append(stored.id)
        return stored

    def append(self, card_id: int) -> int:
        """Move an existing card to the end. Returns its new key."""

        def attempt() -> int:
            cards = self.cards()
            if not any(card.id == card_id for card in cards):
                raise NotFoundError(f"Card {card_id} is not in this deck")
            key = next_order_key([card.display_order for card in cards if card.id != card_id], self.gap)
            self.store.update(Card, card_id, {"display_order": key})
            if self._key_taken_by_other(card_id, key):
                raise ConflictError(f"Order key {key} was taken concurrently")
            return key

        key = retry_on_conflict(attempt, description=f"append card {card_id}")
        logger.info(f"Appended card {card_id} to card set {self.card_set_id} with key {key}")
        return key

    def move_to(self, card_id: int, target_index: int) -> Dict[int, int]:
        """Move a card to target_index in presentation order and rewrite every key."""

        def attempt() -> Dict[int, int]:
            ordered_ids = move_in_sequence(self.card_ids(), card_id, target_index)
            return self._apply_order(ordered_ids)

        keys = retry_on_conflict(attempt, description=f"move card {card_id}")
        logger.info(f"Moved card {card_id} to index {target_index} in card set {self.card_set_id}")
        return keys

    def persist_reorder(self, ordered_ids: Sequence[int]) -> Dict[int, int]:
        """
        Apply a full target ordering, as sent by a drag-and-drop editor.

        ordered_ids must name every card of the set exactly once. Keys become
        (index + 1) * GAP and are written in a single all-or-nothing batch.
        """
        ordered_ids = list(ordered_ids)
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValidationError("Card ids in a reorder must be unique")

        def attempt() -> Dict[int, int]:
            current = set(self.card_ids())
            unknown = [cid for cid in ordered_ids if cid not in current]
            if unknown:
                raise NotFoundError(f"Cards {unknown} are not in card set {self.card_set_id}")
            missing = current - set(ordered_ids)
            if missing:
                raise ValidationError(f"Reorder is missing cards {sorted(missing)}")
            return self._apply_order(ordered_ids)

        keys = retry_on_conflict(attempt, description=f"reorder card set {self.card_set_id}")
        logger.info(f"Reordered {len(keys)} card(s) in card set {self.card_set_id}")
        return keys

    def compact(self) -> Dict[int, int]:
        """Rewrite keys to (index + 1) * GAP keeping the current order."""
        return self.persist_reorder(self.card_ids())

    def _apply_order(self, ordered_ids: Sequence[int]) -> Dict[int, int]:
        keys = keys_for_order(ordered_ids, self.gap)
        current = {card.id: card.display_order for card in self.cards()}
        # Cards already holding their target key need no write
        ops = [
            BatchOp.update(Card, card_id, {"display_order": key})
            for card_id, key in keys.items()
            if current.get(card_id) != key
        ]
        self.store.batch(ops)
        return keys

    def _key_taken_by_other(self, card_id: int, key: int) -> bool:
        return any(card.display_order == key and card.id != card_id for card in self.cards())
