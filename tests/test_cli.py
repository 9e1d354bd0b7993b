"""Tests for CLI commands (non-interactive paths)."""

from datetime import timedelta

import pytest

from backend.config import localnow
from backend.models.card import Card
from flashsnap.__main__ import add_card, count_due, create_deck, ensure_db


@pytest.mark.asyncio
async def test_ensure_db(db_engine) -> None:
    """Creating tables twice is harmless."""
    await ensure_db(db_engine)
    await ensure_db(db_engine)


@pytest.mark.asyncio
async def test_create_deck_and_add_cards(session_factory) -> None:
    async with session_factory() as db:
        deck = await create_deck(db, "Spanish", "language")
        assert deck.id
        assert deck.type == "language"

        card = await add_card(db, deck.id, "hola", "hello", context="¡Hola, amigo!")
        assert card is not None
        assert card.source == "cli"
        assert card.next_review is None

        assert await count_due(db, deck.id) == (1, 1)


@pytest.mark.asyncio
async def test_add_card_unknown_deck(session_factory) -> None:
    async with session_factory() as db:
        assert await add_card(db, "missing", "a", "b") is None


@pytest.mark.asyncio
async def test_count_due_skips_future_cards(session_factory) -> None:
    async with session_factory() as db:
        first = await create_deck(db, "First")
        second = await create_deck(db, "Second")
        await add_card(db, first.id, "new", "card")
        db.add(Card(deck_id=first.id, front="later", back="card",
                    next_review=localnow() + timedelta(days=3)))
        db.add(Card(deck_id=second.id, front="overdue", back="card",
                    next_review=localnow() - timedelta(days=1)))
        await db.commit()

        assert await count_due(db, first.id) == (1, 2)
        assert await count_due(db) == (2, 3)
