"""
Card model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from typing import Optional
from datetime import datetime

from vocadeck.core.clock import utc_now


class Card(SQLModel, table=True):
    """Card table - two faces (front/back) and a sparse display_order key."""
    __tablename__ = "card"

    id: Optional[int] = Field(default=None, primary_key=True)
    card_set_id: int = Field(foreign_key="card_set.id", index=True)

    front_word: str
    front_hint: Optional[str] = None
    front_description: Optional[str] = None
    back_word: str
    back_hint: Optional[str] = None
    back_description: Optional[str] = None

    # Listing order is ascending display_order, independent of created_at
    display_order: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
