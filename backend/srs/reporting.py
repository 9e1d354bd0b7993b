"""Deck statistics computed from the SM-2 scheduling fields.

A card is "mastered" once its ease factor climbs above the starting 2.5.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from backend.config import localnow
from backend.srs.dates import align_to, parse_review_date
from backend.srs.records import read_field
from backend.srs.sm2 import INITIAL_EASE_FACTOR, MIN_EASE_FACTOR, round_half_up

MASTERED_EASE_FACTOR = INITIAL_EASE_FACTOR
HARD_EASE_FACTOR = 1.8
DEFAULT_FORECAST_DAYS = 30


@dataclass
class DifficultyBuckets:
    easy: list[Any]
    medium: list[Any]
    hard: list[Any]


def is_mastered(card: Any) -> bool:
    return read_field(card, "ease_factor", 0) > MASTERED_EASE_FACTOR


def deck_progress(deck: Any) -> int:
    """Percentage of a deck's cards that are mastered."""
    cards = read_field(deck, "cards", [])
    if not cards:
        return 0
    mastered = sum(1 for card in cards if is_mastered(card))
    return round_half_up(mastered / len(cards) * 100)


def cards_by_difficulty(cards: Sequence[Any]) -> DifficultyBuckets:
    """Split cards into easy / medium / hard by ease factor.

    Cards that have never been reviewed carry no ease factor and land in
    no bucket.
    """
    buckets = DifficultyBuckets(easy=[], medium=[], hard=[])
    for card in cards:
        ease_factor = read_field(card, "ease_factor")
        if not ease_factor:
            continue
        if ease_factor > MASTERED_EASE_FACTOR:
            buckets.easy.append(card)
        elif ease_factor >= HARD_EASE_FACTOR:
            buckets.medium.append(card)
        else:
            buckets.hard.append(card)
    return buckets


def average_ease_factor(cards: Sequence[Any]) -> float:
    if not cards:
        return 0.0
    total = sum(read_field(card, "ease_factor", INITIAL_EASE_FACTOR) for card in cards)
    return round(total / len(cards), 2)


def retention_rate(cards: Sequence[Any]) -> int:
    """Percentage of reviewed cards whose ease factor is above the floor.

    A card sitting on the 1.3 floor has mostly been failed; anything above
    it has mostly been recalled.
    """
    reviewed = [card for card in cards if read_field(card, "repetition", 0) > 0]
    if not reviewed:
        return 0
    good = sum(1 for card in reviewed if read_field(card, "ease_factor", 0) > MIN_EASE_FACTOR)
    return round_half_up(good / len(reviewed) * 100)


def review_efficiency(cards: Sequence[Any]) -> int:
    """Average interval in days among cards that have one."""
    intervals = [read_field(card, "interval", 0) for card in cards]
    intervals = [interval for interval in intervals if interval > 0]
    if not intervals:
        return 0
    return round_half_up(sum(intervals) / len(intervals))


def review_forecast(
    cards: Sequence[Any],
    days: int = DEFAULT_FORECAST_DAYS,
    now: datetime | None = None,
) -> list[tuple[date, int]]:
    """Count cards coming due on each of the next ``days`` days, today first.

    Overdue cards and cards with unreadable dates aren't counted.
    """
    now = now or localnow()
    today = now.date()
    counts: dict[date, int] = {today + timedelta(days=offset): 0 for offset in range(days)}

    for card in cards:
        review_date = parse_review_date(read_field(card, "next_review"))
        if review_date is None:
            continue
        day = align_to(review_date, now).date()
        if day in counts:
            counts[day] += 1

    return list(counts.items())
