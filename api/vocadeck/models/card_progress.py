"""
CardProgress model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from typing import Optional
from datetime import datetime

from vocadeck.core.clock import utc_now


class CardProgress(SQLModel, table=True):
    """CardProgress table - one row per answer given inside a session."""
    __tablename__ = "card_progress"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    card_id: int = Field(index=True)
    session_id: Optional[int] = Field(default=None, index=True)
    is_correct: bool
    response_time_ms: Optional[int] = None
    reviewed_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
