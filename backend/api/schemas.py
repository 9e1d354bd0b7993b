"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# --- Decks & cards ---


class DeckCreate(BaseModel):
    """Request to create a deck."""

    name: str = Field(min_length=1, max_length=200)
    type: Literal["language", "knowledge"] = "knowledge"
    user_id: str | None = None


class CardCreate(BaseModel):
    """Request to add a card to a deck."""

    front: str = Field(min_length=1)
    back: str = Field(min_length=1)
    context: str | None = None


class CardUpdate(BaseModel):
    """Request to edit a card's content. Scheduling fields are not editable."""

    front: str | None = Field(default=None, min_length=1)
    back: str | None = Field(default=None, min_length=1)
    context: str | None = None


class CardResponse(BaseModel):
    """A card with its scheduling state."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    deck_id: str
    front: str
    back: str
    context: str | None = None
    interval: int | None = None
    repetition: int | None = None
    ease_factor: float | None = None
    next_review: datetime | None = None


class DeckResponse(BaseModel):
    """A deck summary."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    user_id: str | None = None
    created_at: datetime
    last_reviewed: datetime | None = None
    card_count: int = 0


class DeckDetailResponse(DeckResponse):
    """A deck with its cards."""

    cards: list[CardResponse] = []


# --- Session ---


class SessionStartResponse(BaseModel):
    """Response when starting a new review session."""

    session_id: str
    deck_id: str | None
    total_cards: int


class ReviewCardResponse(BaseModel):
    """The next card to review."""

    card_id: int
    deck_id: str
    deck_name: str
    front: str
    back: str
    context: str | None = None
    repetition: int
    interval: int
    ease_factor: float
    next_review: datetime | None = None
    remaining: int


class GradeRequest(BaseModel):
    """Request to grade the current card."""

    card_id: int
    grade: int = Field(ge=0, le=5)  # 0=blackout .. 5=perfect


class GradeResponse(BaseModel):
    """Response after grading a card with its new schedule."""

    card_id: int
    grade: int
    interval: int
    repetition: int
    ease_factor: float
    next_review: datetime
    remaining: int
    session_complete: bool


class SessionStatsResponse(BaseModel):
    """Statistics for the current review session."""

    cards_reviewed: int
    passed: int
    failed: int
    new_cards_seen: int


# --- Stats ---


class DeckStatsResponse(BaseModel):
    """Aggregate statistics for a deck."""

    deck_id: str
    total_cards: int
    cards_due: int
    progress: int  # % mastered (ease_factor > 2.5)
    easy: int
    medium: int
    hard: int
    average_ease_factor: float
    retention_rate: int
    average_interval: int
    last_reviewed: datetime | None = None


class ForecastDay(BaseModel):
    day: date
    count: int
