"""API routes for deck statistics and review forecasts."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.api.schemas import DeckStatsResponse, ForecastDay
from backend.config import localnow
from backend.database import get_session
from backend.models.deck import Deck
from backend.srs import reporting
from backend.srs.queue import get_due_cards

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


async def _load_deck(db: AsyncSession, deck_id: str) -> Deck:
    stmt = select(Deck).where(Deck.id == deck_id).options(selectinload(Deck.cards))
    deck = (await db.execute(stmt)).scalar_one_or_none()
    if deck is None:
        raise HTTPException(status_code=404, detail="Deck not found")
    return deck


@router.get("/decks/{deck_id}", response_model=DeckStatsResponse)
async def get_deck_stats(
    deck_id: str,
    db: AsyncSession = Depends(get_session),
) -> DeckStatsResponse:
    """Get learning statistics for a deck."""
    deck = await _load_deck(db, deck_id)
    cards = list(deck.cards)
    buckets = reporting.cards_by_difficulty(cards)

    return DeckStatsResponse(
        deck_id=deck.id,
        total_cards=len(cards),
        cards_due=len(get_due_cards([deck], now=localnow())),
        progress=reporting.deck_progress(deck),
        easy=len(buckets.easy),
        medium=len(buckets.medium),
        hard=len(buckets.hard),
        average_ease_factor=reporting.average_ease_factor(cards),
        retention_rate=reporting.retention_rate(cards),
        average_interval=reporting.review_efficiency(cards),
        last_reviewed=deck.last_reviewed,
    )


@router.get("/decks/{deck_id}/forecast", response_model=list[ForecastDay])
async def get_deck_forecast(
    deck_id: str,
    days: int = Query(default=reporting.DEFAULT_FORECAST_DAYS, ge=1, le=365),
    db: AsyncSession = Depends(get_session),
) -> list[ForecastDay]:
    """Get how many cards come due on each of the next ``days`` days."""
    deck = await _load_deck(db, deck_id)
    forecast = reporting.review_forecast(list(deck.cards), days=days)
    return [ForecastDay(day=day, count=count) for day, count in forecast]
