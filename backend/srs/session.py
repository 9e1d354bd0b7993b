"""Review session orchestrator.

Walks a queue of due cards, feeds each grade to the SM-2 scheduler and
persists the resulting state together with the deck's last review time.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import localnow
from backend.models.card import Card
from backend.models.deck import Deck
from backend.srs.queue import DueCard, QueueConfig, ReviewQueue, build_queue
from backend.srs.sm2 import PASSING_GRADE, SM2, SchedulingState, apply_schedule

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Statistics for a review session."""

    cards_reviewed: int = 0
    passed: int = 0
    failed: int = 0
    new_cards_seen: int = 0


@dataclass
class ReviewSession:
    """Manages an active review session."""

    queue: ReviewQueue
    scheduler: SM2 = field(default_factory=SM2)
    stats: SessionStats = field(default_factory=SessionStats)
    created_at: datetime = field(default_factory=localnow)
    _card_index: int = 0
    _cards: list[DueCard] = field(default_factory=list)
    # Serializes grading so a repeated answer can't skip the next card
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def __post_init__(self) -> None:
        """Initialize the card list from the queue."""
        self._cards = list(self.queue.due_cards)

    @property
    def remaining(self) -> int:
        """Return the number of cards left to review."""
        return max(0, len(self._cards) - self._card_index)

    @property
    def is_complete(self) -> bool:
        """Return True if all cards have been reviewed."""
        return self._card_index >= len(self._cards)

    @property
    def current(self) -> DueCard | None:
        """Return the current due card or None if the session is complete."""
        if self._card_index < len(self._cards):
            return self._cards[self._card_index]
        return None

    async def submit_grade(
        self,
        db: AsyncSession,
        card_id: int,
        grade: int,
        now: datetime | None = None,
    ) -> SchedulingState:
        """Grade the current card, persist its new schedule and advance.

        Args:
            db: Database session the card was loaded with.
            card_id: Id of the card being graded; must be the current card.
            grade: Recall quality 0-5.
            now: When the review happened (defaults to the local clock).

        Returns:
            The card's new scheduling state.

        Raises:
            LookupError: If the session has no cards left.
            ValueError: If ``card_id`` is not the current card.
        """
        async with self._lock:
            return await self._grade_current(db, card_id, grade, now)

    async def _grade_current(
        self,
        db: AsyncSession,
        card_id: int,
        grade: int,
        now: datetime | None,
    ) -> SchedulingState:
        due = self.current
        if due is None:
            raise LookupError("Review session is complete")

        card: Card = due.card
        if card.id != card_id:
            raise ValueError(f"Card {card_id} is not the current card ({card.id})")

        now = now or localnow()

        # The queue may have been loaded by another (closed) session
        stored = await db.get(Card, card.id)
        if stored is None:
            logger.error("Card %d no longer exists, scheduling in memory only", card.id)
            stored = card

        was_new = stored.next_review is None
        state = self.scheduler.schedule(stored, grade, now=now)
        apply_schedule(stored, state)
        if stored is not card:
            apply_schedule(card, state)

        deck = await db.get(Deck, due.deck_id)
        if deck is None:
            logger.error("Deck %s not found while saving card %d", due.deck_id, card.id)
        else:
            deck.last_reviewed = now

        await db.commit()

        self.stats.cards_reviewed += 1
        if was_new:
            self.stats.new_cards_seen += 1
        if grade >= PASSING_GRADE:
            self.stats.passed += 1
        else:
            self.stats.failed += 1

        self._card_index += 1
        logger.debug(
            "Card %d graded %s: interval=%d ef=%.2f next=%s",
            card.id,
            grade,
            state.interval,
            state.ease_factor,
            state.next_review.date(),
        )
        return state


async def start_session(
    db: AsyncSession,
    deck_id: str | None = None,
    user_id: str | None = None,
    config: QueueConfig | None = None,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> ReviewSession:
    """Start a new review session over the cards due now.

    Args:
        db: Database session.
        deck_id: Only review this deck.
        user_id: Only review decks owned by this user.
        config: Queue configuration.
        now: Current time (defaults to the local clock).
        rng: Random source for shuffling.

    Returns:
        A ReviewSession ready for use.
    """
    queue = await build_queue(db, deck_id=deck_id, user_id=user_id, config=config, now=now, rng=rng)
    session = ReviewSession(queue=queue)

    logger.info("Started session for deck %s: %d cards queued", deck_id or "all", queue.total)
    return session
