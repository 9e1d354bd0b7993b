"""API routes for decks and their cards."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.api.schemas import (
    CardCreate,
    CardResponse,
    CardUpdate,
    DeckCreate,
    DeckDetailResponse,
    DeckResponse,
)
from backend.database import get_session
from backend.models.card import Card
from backend.models.deck import Deck

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/decks", tags=["decks"])


def _deck_summary(deck: Deck) -> DeckResponse:
    return DeckResponse(
        id=deck.id,
        name=deck.name,
        type=deck.type,
        user_id=deck.user_id,
        created_at=deck.created_at,
        last_reviewed=deck.last_reviewed,
        card_count=len(deck.cards),
    )


async def _get_deck(db: AsyncSession, deck_id: str) -> Deck:
    stmt = select(Deck).where(Deck.id == deck_id).options(selectinload(Deck.cards))
    deck = (await db.execute(stmt)).scalar_one_or_none()
    if deck is None:
        raise HTTPException(status_code=404, detail="Deck not found")
    return deck


async def _get_card(db: AsyncSession, deck_id: str, card_id: int) -> Card:
    card = await db.get(Card, card_id)
    if card is None or card.deck_id != deck_id:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@router.post("", response_model=DeckResponse, status_code=201)
async def create_deck(
    request: DeckCreate,
    db: AsyncSession = Depends(get_session),
) -> DeckResponse:
    """Create an empty deck."""
    deck = Deck(name=request.name, type=request.type, user_id=request.user_id, cards=[])
    db.add(deck)
    await db.commit()
    logger.info("Created deck %s (%s)", deck.id, deck.name)
    return _deck_summary(deck)


@router.get("", response_model=list[DeckResponse])
async def list_decks(
    user_id: str | None = None,
    db: AsyncSession = Depends(get_session),
) -> list[DeckResponse]:
    """List decks, optionally only those owned by ``user_id``."""
    stmt = select(Deck).options(selectinload(Deck.cards)).order_by(Deck.created_at.asc())
    if user_id is not None:
        stmt = stmt.where(Deck.user_id == user_id)
    decks = (await db.execute(stmt)).scalars().all()
    return [_deck_summary(deck) for deck in decks]


@router.get("/{deck_id}", response_model=DeckDetailResponse)
async def get_deck(
    deck_id: str,
    db: AsyncSession = Depends(get_session),
) -> DeckDetailResponse:
    """Get a deck with all of its cards."""
    deck = await _get_deck(db, deck_id)
    summary = _deck_summary(deck)
    return DeckDetailResponse(
        **summary.model_dump(),
        cards=[CardResponse.model_validate(card) for card in deck.cards],
    )


@router.delete("/{deck_id}", status_code=204)
async def delete_deck(
    deck_id: str,
    db: AsyncSession = Depends(get_session),
) -> None:
    """Delete a deck and its cards."""
    deck = await _get_deck(db, deck_id)
    await db.delete(deck)
    await db.commit()
    logger.info("Deleted deck %s", deck_id)


@router.post("/{deck_id}/cards", response_model=CardResponse, status_code=201)
async def add_card(
    deck_id: str,
    request: CardCreate,
    db: AsyncSession = Depends(get_session),
) -> CardResponse:
    """Add a new, never-reviewed card to a deck."""
    await _get_deck(db, deck_id)
    card = Card(
        deck_id=deck_id,
        front=request.front,
        back=request.back,
        context=request.context,
        source="api",
    )
    db.add(card)
    await db.commit()
    await db.refresh(card)
    return CardResponse.model_validate(card)


@router.patch("/{deck_id}/cards/{card_id}", response_model=CardResponse)
async def update_card(
    deck_id: str,
    card_id: int,
    request: CardUpdate,
    db: AsyncSession = Depends(get_session),
) -> CardResponse:
    """Edit a card's front, back or context."""
    card = await _get_card(db, deck_id, card_id)
    for name, value in request.model_dump(exclude_unset=True).items():
        if value is None and name != "context":
            continue
        setattr(card, name, value)
    await db.commit()
    await db.refresh(card)
    return CardResponse.model_validate(card)


@router.delete("/{deck_id}/cards/{card_id}", status_code=204)
async def delete_card(
    deck_id: str,
    card_id: int,
    db: AsyncSession = Depends(get_session),
) -> None:
    """Delete a card from a deck."""
    card = await _get_card(db, deck_id, card_id)
    await db.delete(card)
    await db.commit()
