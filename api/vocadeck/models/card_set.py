"""
CardSet model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from typing import Optional
from datetime import datetime

from vocadeck.core.clock import utc_now


class CardSet(SQLModel, table=True):
    """CardSet table - a user's named, ordered deck of cards."""
    __tablename__ = "card_set"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)  # Subject id issued by the auth provider
    title: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
