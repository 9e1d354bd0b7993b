"""Plain-text card rendering for the terminal."""

from __future__ import annotations

from typing import Any

from backend.srs.dates import parse_review_date
from backend.srs.records import read_field
from backend.srs.sm2 import INITIAL_EASE_FACTOR


def render_box(text: str, indent: str = "  ") -> str:
    """Draw ``text`` inside a rounded box, one box line per text line."""
    lines = text.splitlines() or [""]
    width = max(len(line) for line in lines) + 2
    body = [f"{indent}│ {line.ljust(width - 2)} │" for line in lines]
    return "\n".join([
        f"{indent}╭{'─' * width}╮",
        *body,
        f"{indent}╰{'─' * width}╯",
    ])


def render_card(front: str, back: str = "", context: str | None = None, indent: str = "  ") -> str:
    """Render a card's front, and its back and context when given."""
    parts = [render_box(front, indent=indent)]
    if back:
        parts.append(f"{indent}  {back}")
    if context:
        parts.append(f"{indent}  ({context})")
    return "\n".join(parts)


def format_card_stats(card: Any, indent: str = "  ") -> str:
    """Summarize a card's scheduling state."""
    next_review = parse_review_date(read_field(card, "next_review"))
    rows = [
        ("Repetitions:", str(read_field(card, "repetition", 0))),
        ("Interval:", f"{read_field(card, 'interval', 0)} days"),
        ("Ease factor:", f"{read_field(card, 'ease_factor', INITIAL_EASE_FACTOR):.2f}"),
        ("Next review:", next_review.date().isoformat() if next_review else "not scheduled"),
    ]
    return "\n".join(f"{indent}{label:<14}{value}" for label, value in rows)
