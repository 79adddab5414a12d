"""
Study session schemas.
"""
from pydantic import BaseModel, Field, AliasChoices
from typing import List, Optional
from datetime import datetime


class StartSessionRequest(BaseModel):
    """Request to start a study pass over a card set."""
    card_set_id: int = Field(..., validation_alias=AliasChoices("card_set_id", "cardSetId"))
    is_reversed: bool = Field(False, validation_alias=AliasChoices("is_reversed", "isReversed"))
    is_random_order: bool = Field(True, validation_alias=AliasChoices("is_random_order", "isRandomOrder"))


class FaceView(BaseModel):
    """One side of a card as shown to the learner."""
    word: str
    hint: Optional[str] = None
    description: Optional[str] = None


class CardPrompt(BaseModel):
    """A card in session order, with prompt and answer sides already chosen."""
    card_id: int
    prompt: FaceView
    answer: FaceView


class SessionResponse(BaseModel):
    """Study session state."""
    id: int
    card_set_id: Optional[int] = None
    is_reversed: bool
    is_random_order: bool
    status: str
    total_words: int
    answered: int
    correct_words: Optional[int] = None
    accuracy: Optional[int] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    current: Optional[CardPrompt] = None


class StartSessionResponse(BaseModel):
    """Started session and its fixed play sequence."""
    session: SessionResponse
    cards: List[CardPrompt]


class AnswerRequest(BaseModel):
    """Answer for the card at the session cursor."""
    card_id: int = Field(..., validation_alias=AliasChoices("card_id", "cardId"))
    is_correct: bool = Field(..., validation_alias=AliasChoices("is_correct", "isCorrect"))
    response_time_ms: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices("response_time_ms", "responseTime")
    )


class ReviewStatResponse(BaseModel):
    """Cumulative statistics for one (user, card) pair."""
    card_id: int
    score: int
    total_attempts: int
    correct_count: int
    incorrect_count: int
    last_studied_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AnswerResponse(BaseModel):
    """Result of recording one answer."""
    session: SessionResponse
    stat: ReviewStatResponse
