"""
UserCardStat model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, UniqueConstraint
from typing import Optional
from datetime import datetime

from vocadeck.core.clock import utc_now


class UserCardStat(SQLModel, table=True):
    """UserCardStat table - cumulative study tally per (user, card)."""
    __tablename__ = "user_card_stat"
    __table_args__ = (
        UniqueConstraint("user_id", "card_id", name="user_card_stat_user_card_key"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    # Weak reference: rows are removed by the card delete path, not by a FK cascade
    card_id: int = Field(index=True)
    score: int = Field(default=0)  # +1 per correct, -1 per incorrect, unbounded
    total_attempts: int = Field(default=0)
    correct_count: int = Field(default=0)
    incorrect_count: int = Field(default=0)
    last_studied_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    version: int = Field(default=0)  # Bumped on every write (compare-and-swap)
