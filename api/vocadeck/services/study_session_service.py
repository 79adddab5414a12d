"""
Study session service.

A session is one pass over a snapshot of a card set:

    created -> in_progress -> completed
    created or in_progress -> cancelled

The play sequence (optionally shuffled once) and total_words are fixed at
start. Each answer must name the card at the cursor; the cursor is claimed
with a version compare-and-swap before the answer reaches the review
statistics, so a duplicated request is rejected instead of counted twice.
Summary fields (correct_words, accuracy, completed_at) are written once,
when the last card is answered. Cancelling keeps statistics already
recorded and leaves the summary unset.
"""
import logging
import random
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from vocadeck.core.clock import utc_now
from vocadeck.core.context import RequestContext
from vocadeck.core.exceptions import ConflictError, NotFoundError, SessionStateError, ValidationError
from vocadeck.core.record_store import RecordStore
from vocadeck.models.card import Card
from vocadeck.models.card_progress import CardProgress
from vocadeck.models.enums import SessionStatus
from vocadeck.models.learning_session import LearningSession
from vocadeck.models.user_card_stat import UserCardStat
from vocadeck.schemas.session import CardPrompt, FaceView
from vocadeck.services.card_set_service import get_owned_card_set
from vocadeck.services.ordering_service import OrderedDeck
from vocadeck.services.review_service import ReviewAccumulator

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {SessionStatus.COMPLETED.value, SessionStatus.CANCELLED.value}


def compute_accuracy(correct_words: int, total_words: int) -> int:
    """Percentage of correct answers rounded half up; 0 for an empty session."""
    if total_words <= 0:
        return 0
    return (200 * correct_words + total_words) // (2 * total_words)


def build_play_order(card_ids: Sequence[int], random_order: bool, rng: random.Random) -> List[int]:
    """Play sequence for a session. Shuffling is an unbiased Fisher-Yates pass."""
    order = list(card_ids)
    if random_order:
        rng.shuffle(order)
    return order


def present_card(card: Card, reversed_mode: bool) -> CardPrompt:
    """Pick prompt and answer faces. Reversed mode shows the back as the prompt."""
    front = FaceView(word=card.front_word, hint=card.front_hint, description=card.front_description)
    back = FaceView(word=card.back_word, hint=card.back_hint, description=card.back_description)
    if reversed_mode:
        return CardPrompt(card_id=card.id, prompt=back, answer=front)
    return CardPrompt(card_id=card.id, prompt=front, answer=back)


class StudySessionEngine:
    """Runs study sessions for the calling user."""

    def __init__(
        self,
        store: RecordStore,
        accumulator: Optional[ReviewAccumulator] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.store = store
        self.accumulator = accumulator or ReviewAccumulator(store, clock=clock)
        self.rng = rng or random.Random()
        self.clock = clock

    def start(
        self,
        ctx: RequestContext,
        card_set_id: int,
        is_reversed: bool = False,
        is_random_order: bool = True
    ) -> LearningSession:
        """Snapshot the card set and create a session. An empty set is rejected."""
        get_owned_card_set(self.store, ctx, card_set_id)
        card_ids = OrderedDeck(self.store, card_set_id).card_ids()
        if not card_ids:
            raise ValidationError("Cannot start a study session on an empty card set")

        order = build_play_order(card_ids, is_random_order, self.rng)
        session = self.store.insert(LearningSession(
            user_id=ctx.user_id,
            card_set_id=card_set_id,
            is_reversed=is_reversed,
            is_random_order=is_random_order,
            card_order=order,
            total_words=len(order),
            started_at=self.clock(),
        ))
        logger.info(
            f"Started session {session.id} for user {ctx.user_id} on card set {card_set_id} "
            f"({len(order)} card(s), reversed={is_reversed}, random={is_random_order})"
        )
        return session

    def get(self, ctx: RequestContext, session_id: int) -> LearningSession:
        session = self.store.get(LearningSession, session_id)
        if session is None or session.user_id != ctx.user_id:
            raise NotFoundError(f"Session with id {session_id} not found")
        return session

    def prompts(self, session: LearningSession) -> List[CardPrompt]:
        """Cards in play order. Cards deleted since the start are left out."""
        cards: Dict[int, Card] = {
            card.id: card for card in self.store.list(Card, {"id": list(session.card_order)})
        }
        return [
            present_card(cards[card_id], session.is_reversed)
            for card_id in session.card_order
            if card_id in cards
        ]

    def current_prompt(self, session: LearningSession) -> Optional[CardPrompt]:
        if session.status in TERMINAL_STATUSES or session.cursor >= len(session.card_order):
            return None
        card = self.store.get(Card, session.card_order[session.cursor])
        if card is None:
            return None
        return present_card(card, session.is_reversed)

    def answer(
        self,
        ctx: RequestContext,
        session_id: int,
        card_id: int,
        is_correct: bool,
        response_time_ms: Optional[int] = None
    ) -> Tuple[LearningSession, UserCardStat]:
        """Record the answer for the card at the cursor and advance."""
        session = self.get(ctx, session_id)
        if session.status in TERMINAL_STATUSES:
            raise SessionStateError(f"Session {session_id} is {session.status} and accepts no answers")

        expected = session.card_order[session.cursor]
        if card_id != expected:
            raise SessionStateError(f"Session {session_id} expects an answer for card {expected}, got {card_id}")
        if self.store.get(Card, card_id) is None:
            raise NotFoundError(f"Card with id {card_id} not found")

        now = self.clock()
        cursor = session.cursor + 1
        correct = session.correct_so_far + (1 if is_correct else 0)
        patch = {
            "cursor": cursor,
            "correct_so_far": correct,
            "status": SessionStatus.IN_PROGRESS.value,
        }
        if cursor >= session.total_words:
            patch.update({
                "status": SessionStatus.COMPLETED.value,
                "completed_at": now,
                "correct_words": correct,
                "accuracy": compute_accuracy(correct, session.total_words),
            })

        try:
            session = self.store.update(LearningSession, session.id, patch, expected_version=session.version)
        except ConflictError as e:
            raise SessionStateError(f"Session {session_id} advanced concurrently") from e

        self.store.insert(CardProgress(
            user_id=ctx.user_id,
            card_id=card_id,
            session_id=session.id,
            is_correct=is_correct,
            response_time_ms=response_time_ms,
            reviewed_at=now,
        ))
        stat = self.accumulator.record(ctx.user_id, card_id, is_correct)

        if session.status == SessionStatus.COMPLETED.value:
            logger.info(
                f"Completed session {session.id}: {session.correct_words}/{session.total_words} "
                f"correct ({session.accuracy}%)"
            )
        return session, stat

    def cancel(self, ctx: RequestContext, session_id: int) -> LearningSession:
        """Close a session before completion. Recorded statistics stay."""
        session = self.get(ctx, session_id)
        if session.status == SessionStatus.CANCELLED.value:
            return session
        if session.status == SessionStatus.COMPLETED.value:
            raise SessionStateError(f"Session {session_id} is already completed")
        try:
            session = self.store.update(
                LearningSession,
                session.id,
                {"status": SessionStatus.CANCELLED.value},
                expected_version=session.version,
            )
        except ConflictError as e:
            raise SessionStateError(f"Session {session_id} changed while cancelling") from e
        logger.info(f"Cancelled session {session.id} after {session.cursor}/{session.total_words} answer(s)")
        return session
