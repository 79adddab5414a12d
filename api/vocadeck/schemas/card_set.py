"""
Card set schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from vocadeck.schemas.card import CardResponse


class CreateCardSetRequest(BaseModel):
    """Request schema for creating a card set."""
    title: str
    description: Optional[str] = None


class UpdateCardSetRequest(BaseModel):
    """Request schema for updating a card set."""
    title: Optional[str] = None
    description: Optional[str] = None


class CardSetResponse(BaseModel):
    """Card set response schema."""
    id: int
    title: str
    description: Optional[str] = None
    card_count: int = 0
    last_accuracy: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CardSetDetailResponse(CardSetResponse):
    """Card set with its cards in deck order."""
    cards: List[CardResponse] = []


class CardSetsResponse(BaseModel):
    """Response schema for card sets list."""
    card_sets: List[CardSetResponse]


class ReorderRequest(BaseModel):
    """Full target ordering of a deck, as produced by drag and drop."""
    card_ids: List[int] = Field(..., description="Every card id of the set, in the new order")


class CsvImportRequest(BaseModel):
    """CSV text to import into a card set."""
    csv: str = Field(..., description="CSV text with a header row and six columns")


class SkippedRow(BaseModel):
    """A CSV row that was left out of an import."""
    line_number: int
    reason: str


class ImportResponse(BaseModel):
    """Outcome of a card import. Partial success is reported, not raised."""
    imported: int
    failed: int
    skipped_rows: List[SkippedRow] = []
    errors: List[str] = []
