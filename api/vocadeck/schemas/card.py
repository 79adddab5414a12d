"""
Card schemas.
"""
from pydantic import BaseModel, Field, AliasChoices, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


def _clean_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class CardDraft(BaseModel):
    """
    Card content before it is stored: two faces, each with word, hint and description.

    Accepts both snake_case and legacy camelCase keys (frontWord, backHint, ...).
    Text is stripped; blank optional fields become None.
    """
    front_word: str = Field(..., validation_alias=AliasChoices("front_word", "frontWord"))
    front_hint: Optional[str] = Field(None, validation_alias=AliasChoices("front_hint", "frontHint"))
    front_description: Optional[str] = Field(
        None, validation_alias=AliasChoices("front_description", "frontDescription")
    )
    back_word: str = Field(..., validation_alias=AliasChoices("back_word", "backWord"))
    back_hint: Optional[str] = Field(None, validation_alias=AliasChoices("back_hint", "backHint"))
    back_description: Optional[str] = Field(
        None, validation_alias=AliasChoices("back_description", "backDescription")
    )

    @field_validator("front_word", "back_word")
    @classmethod
    def word_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("word must not be empty")
        return v

    @field_validator("front_hint", "front_description", "back_hint", "back_description")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _clean_optional(v)


class UpdateCardRequest(BaseModel):
    """Partial card update. Only fields that are sent are changed."""
    front_word: Optional[str] = Field(None, validation_alias=AliasChoices("front_word", "frontWord"))
    front_hint: Optional[str] = Field(None, validation_alias=AliasChoices("front_hint", "frontHint"))
    front_description: Optional[str] = Field(
        None, validation_alias=AliasChoices("front_description", "frontDescription")
    )
    back_word: Optional[str] = Field(None, validation_alias=AliasChoices("back_word", "backWord"))
    back_hint: Optional[str] = Field(None, validation_alias=AliasChoices("back_hint", "backHint"))
    back_description: Optional[str] = Field(
        None, validation_alias=AliasChoices("back_description", "backDescription")
    )


class CreateCardRequest(CardDraft):
    """Request schema for adding one card to a set."""
    card_set_id: int = Field(..., validation_alias=AliasChoices("card_set_id", "cardSetId"))


class MoveCardRequest(BaseModel):
    """Move a card to a position in the presentation order (0-based)."""
    target_index: int = Field(..., ge=0)


class CardResponse(BaseModel):
    """Card response schema."""
    id: int
    card_set_id: int
    front_word: str
    front_hint: Optional[str] = None
    front_description: Optional[str] = None
    back_word: str
    back_hint: Optional[str] = None
    back_description: Optional[str] = None
    display_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CardsResponse(BaseModel):
    """Response schema for a list of cards in deck order."""
    cards: List[CardResponse]


def card_from_record(record: Dict[str, Any]) -> CardDraft:
    """Map a raw card record (snake_case or camelCase keys) onto a CardDraft."""
    return CardDraft.model_validate(record)
