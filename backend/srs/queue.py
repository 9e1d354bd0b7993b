"""Due-card selection and queue building for review sessions.

A card is due when it has never been scheduled, when its stored review
date can't be read, or when its review day is today or earlier.
"""

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.config import localnow, settings
from backend.models.deck import Deck
from backend.srs.dates import is_same_day_or_earlier, local_midnight, parse_review_date
from backend.srs.records import read_field

logger = logging.getLogger(__name__)


@dataclass
class DueCard:
    """A due card with the deck it belongs to."""

    card: Any
    deck_id: Any
    deck_name: str


def is_card_due(card: Any, today: datetime) -> bool:
    """Return True if ``card`` should be reviewed on ``today``'s calendar day."""
    raw = read_field(card, "next_review")
    if raw is None or raw == "":
        return True

    review_date = parse_review_date(raw)
    if review_date is None:
        logger.warning(
            "Card %s has invalid next_review %r, treating as due",
            read_field(card, "id"),
            raw,
        )
        return True

    return is_same_day_or_earlier(review_date, today)


def get_due_cards(
    decks: Iterable[Any] | None,
    deck_id: Any = None,
    now: datetime | None = None,
) -> list[DueCard]:
    """Return every card due for review today or earlier.

    Args:
        decks: Decks to scan. Each needs ``id``, ``name`` and ``cards``.
        deck_id: Only scan the deck with this id.
        now: Current time (defaults to the local clock).

    Returns:
        One DueCard per due card. No particular order is promised.
    """
    decks = list(decks or [])
    if not decks:
        logger.warning("No decks available for review")
        return []

    today = local_midnight(now or localnow())

    if deck_id is not None:
        decks = [deck for deck in decks if read_field(deck, "id") == deck_id]
        if not decks:
            logger.warning("No matching decks found for deck_id %s", deck_id)
            return []

    logger.debug("Checking %d decks for cards due by %s", len(decks), today.date())

    due_cards: list[DueCard] = []
    for deck in decks:
        current_id = read_field(deck, "id")
        deck_name = read_field(deck, "name", "")
        cards = read_field(deck, "cards")
        if not isinstance(cards, (list, tuple)):
            logger.warning("Deck %s (%s) has no cards list", current_id, deck_name)
            continue

        for card in cards:
            try:
                if card is None or read_field(card, "id") is None:
                    logger.warning("Invalid card in deck %s, skipping", current_id)
                    continue
                if is_card_due(card, today):
                    due_cards.append(DueCard(card=card, deck_id=current_id, deck_name=deck_name))
            except Exception:
                logger.exception("Error checking card in deck %s", current_id)

    logger.debug("Found %d due cards", len(due_cards))
    return due_cards


@dataclass
class QueueConfig:
    """Configuration for queue building."""

    max_cards: int = settings.max_cards_per_session  # 0 = no limit
    shuffle: bool = settings.shuffle_reviews


@dataclass
class ReviewQueue:
    """A prepared queue of due cards for a review session."""

    due_cards: list[DueCard] = field(default_factory=list)
    total: int = 0

    def shuffled(self, rng: random.Random | None = None) -> list[DueCard]:
        """Return the due cards in random order so sessions don't repeat."""
        cards = list(self.due_cards)
        (rng or random).shuffle(cards)
        return cards


async def load_decks(
    session: AsyncSession,
    deck_id: str | None = None,
    user_id: str | None = None,
) -> list[Deck]:
    """Load decks with their cards, optionally narrowed to one deck or owner."""
    stmt = select(Deck).options(selectinload(Deck.cards)).order_by(Deck.created_at.asc())
    if deck_id is not None:
        stmt = stmt.where(Deck.id == deck_id)
    if user_id is not None:
        stmt = stmt.where(Deck.user_id == user_id)
    # Refresh card lists already held by this session
    result = await session.execute(stmt.execution_options(populate_existing=True))
    return list(result.scalars().all())


async def build_queue(
    session: AsyncSession,
    deck_id: str | None = None,
    user_id: str | None = None,
    config: QueueConfig | None = None,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> ReviewQueue:
    """Build a review queue from the stored decks.

    Args:
        session: Database session.
        deck_id: Restrict the queue to one deck.
        user_id: Restrict the queue to decks owned by this user.
        config: Queue configuration (shuffle, size cap).
        now: Current time (defaults to the local clock).
        rng: Random source for shuffling.

    Returns:
        A ReviewQueue holding the due cards.
    """
    config = config or QueueConfig()
    decks = await load_decks(session, deck_id=deck_id, user_id=user_id)
    due_cards = get_due_cards(decks, deck_id=deck_id, now=now)

    if config.shuffle:
        due_cards = ReviewQueue(due_cards=due_cards).shuffled(rng)
    if config.max_cards > 0:
        due_cards = due_cards[: config.max_cards]

    queue = ReviewQueue(due_cards=due_cards, total=len(due_cards))

    logger.info(
        "Built queue (deck=%s, user=%s): %d due cards",
        deck_id or "all",
        user_id or "any",
        queue.total,
    )
    return queue
