"""
Review statistics service.

Keeps a running tally per (user, card) from pass/fail observations:
score +1 for correct and -1 for incorrect with no cap or decay, plus
attempt counters. Updates are read-modify-write, so concurrent records for
the same pair are serialised: a striped lock inside the process and a
version compare-and-swap in the store across processes.

Recording is not idempotent. Callers deliver each observation once.
"""
import logging
from datetime import datetime
from threading import Lock
from typing import Callable, Dict, List, Optional, Sequence

from vocadeck.core.clock import utc_now
from vocadeck.core.record_store import RecordStore
from vocadeck.core.retry import retry_on_conflict
from vocadeck.models.user_card_stat import UserCardStat

logger = logging.getLogger(__name__)

# Bounded set of locks shared by all (user, card) keys
_LOCK_STRIPES = [Lock() for _ in range(64)]


def _lock_for(user_id: str, card_id: int) -> Lock:
    return _LOCK_STRIPES[hash((user_id, card_id)) % len(_LOCK_STRIPES)]


def new_stat(user_id: str, card_id: int, is_correct: bool, now: datetime) -> UserCardStat:
    """First observation for a pair."""
    return UserCardStat(
        user_id=user_id,
        card_id=card_id,
        score=1 if is_correct else -1,
        total_attempts=1,
        correct_count=1 if is_correct else 0,
        incorrect_count=0 if is_correct else 1,
        last_studied_at=now,
    )


def outcome_patch(stat: UserCardStat, is_correct: bool, now: datetime) -> Dict:
    """Field values after adding one observation to stat."""
    return {
        "score": stat.score + (1 if is_correct else -1),
        "total_attempts": stat.total_attempts + 1,
        "correct_count": stat.correct_count + (1 if is_correct else 0),
        "incorrect_count": stat.incorrect_count + (0 if is_correct else 1),
        "last_studied_at": now,
    }


class ReviewAccumulator:
    """Per-(user, card) cumulative study statistics."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def get(self, user_id: str, card_id: int) -> Optional[UserCardStat]:
        stats = self.store.list(UserCardStat, {"user_id": user_id, "card_id": card_id})
        return stats[0] if stats else None

    def stats_for_cards(self, user_id: str, card_ids: Sequence[int]) -> List[UserCardStat]:
        if not card_ids:
            return []
        return self.store.list(UserCardStat, {"user_id": user_id, "card_id": list(card_ids)})

    def record(self, user_id: str, card_id: int, is_correct: bool) -> UserCardStat:
        """Add one observation and return the updated statistic."""
        with _lock_for(user_id, card_id):
            stat = retry_on_conflict(
                lambda: self._record_once(user_id, card_id, is_correct),
                description=f"review stat for user {user_id} card {card_id}"
            )
        logger.debug(
            f"Recorded {'correct' if is_correct else 'incorrect'} for user {user_id} card {card_id}: "
            f"score={stat.score}, attempts={stat.total_attempts}"
        )
        return stat

    def _record_once(self, user_id: str, card_id: int, is_correct: bool) -> UserCardStat:
        now = self.clock()
        stat = self.get(user_id, card_id)
        if stat is None:
            # A concurrent first insert trips the unique key and is retried as an update
            return self.store.insert(new_stat(user_id, card_id, is_correct, now))
        return self.store.update(
            UserCardStat,
            stat.id,
            outcome_patch(stat, is_correct, now),
            expected_version=stat.version,
        )
