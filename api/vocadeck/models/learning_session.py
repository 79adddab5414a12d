"""
LearningSession model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from typing import Optional, List
from datetime import datetime

from vocadeck.core.clock import utc_now
from vocadeck.models.enums import SessionStatus


class LearningSession(SQLModel, table=True):
    """LearningSession table - one study pass over a snapshot of a card set."""
    __tablename__ = "learning_session"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    # Cleared when the card set is deleted; the session stays as history
    card_set_id: Optional[int] = Field(default=None, index=True)
    is_reversed: bool = Field(default=False)
    is_random_order: bool = Field(default=True)

    # Snapshot taken at start: play sequence of card ids and its size
    card_order: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    total_words: int
    cursor: int = Field(default=0)  # Index of the next card to answer
    correct_so_far: int = Field(default=0)

    status: str = Field(default=SessionStatus.CREATED.value)
    started_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    # Written exactly once, at completion
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    correct_words: Optional[int] = None
    accuracy: Optional[int] = None

    version: int = Field(default=0)
