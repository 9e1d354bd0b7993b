"""SM-2 spaced repetition scheduler.

Reference: https://super-memory.com/english/ol/sm2.htm

Key concepts:
- Grade: recall quality 0-5 (0 = total blackout, 5 = perfect recall).
  Anything below 3 is a failed recall.
- Repetition: consecutive successful reviews since the last failure.
- Interval: days until the next review.
- Ease factor (EF): how fast the interval grows. Starts at 2.5, never
  drops below 1.3.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from backend.config import localnow
from backend.srs.dates import midnight_after
from backend.srs.records import read_field

INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
PASSING_GRADE = 3

# Intervals for the first and second successful reviews
FIRST_INTERVAL = 1
SECOND_INTERVAL = 6


@dataclass(frozen=True)
class SchedulingState:
    """The scheduling fields of a card after a review."""

    interval: int  # Days until next review
    repetition: int  # Consecutive successful reviews
    ease_factor: float
    next_review: datetime  # Local midnight of the due day


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (13.5 -> 14)."""
    return math.floor(value + 0.5)


class SM2:
    """SuperMemo-2 scheduler."""

    def __init__(
        self,
        initial_ease_factor: float = INITIAL_EASE_FACTOR,
        min_ease_factor: float = MIN_EASE_FACTOR,
    ) -> None:
        self.initial_ease_factor = initial_ease_factor
        self.min_ease_factor = min_ease_factor

    def schedule(self, card: Any, grade: float, now: datetime | None = None) -> SchedulingState:
        """Compute a card's scheduling state after a review.

        Args:
            card: The reviewed card. Only ``interval``, ``repetition`` and
                ``ease_factor`` are read; missing or None values mean the
                card was never reviewed.
            grade: Recall quality 0-5. Not validated.
            now: When the review happened (defaults to the local clock).

        Returns:
            A new SchedulingState. The card itself is left untouched.
        """
        now = now or localnow()
        interval = read_field(card, "interval", 0)
        repetition = read_field(card, "repetition", 0)
        ease_factor = read_field(card, "ease_factor", self.initial_ease_factor)

        if grade < PASSING_GRADE:
            repetition = 0
            interval = FIRST_INTERVAL
        else:
            if repetition == 0:
                interval = FIRST_INTERVAL
            elif repetition == 1:
                interval = SECOND_INTERVAL
            else:
                interval = round_half_up(interval * ease_factor)
            repetition += 1

        ease_factor = self.next_ease_factor(ease_factor, grade)

        return SchedulingState(
            interval=interval,
            repetition=repetition,
            ease_factor=ease_factor,
            next_review=midnight_after(now, interval),
        )

    def next_ease_factor(self, ease_factor: float, grade: float) -> float:
        """Apply the SM-2 ease factor update, floored at ``min_ease_factor``.

        EF' = EF + 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)
        """
        miss = 5 - grade
        ease_factor = ease_factor + 0.1 - miss * (0.08 + miss * 0.02)
        # Written so a NaN grade also lands on the floor
        return ease_factor if ease_factor >= self.min_ease_factor else self.min_ease_factor


default_scheduler = SM2()


def schedule(card: Any, grade: float, now: datetime | None = None) -> SchedulingState:
    """Schedule ``card`` with the default SM-2 parameters."""
    return default_scheduler.schedule(card, grade, now=now)


def apply_schedule(card: Any, state: SchedulingState) -> None:
    """Write ``state`` onto a mutable card (ORM row or plain object)."""
    card.interval = state.interval
    card.repetition = state.repetition
    card.ease_factor = state.ease_factor
    card.next_review = state.next_review
