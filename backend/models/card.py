"""Flashcard model carrying SM-2 scheduling state."""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.models.base import Base, TimestampMixin


class Card(Base, TimestampMixin):
    """A flashcard inside a deck.

    The four scheduling columns are nullable: a card that has never been
    reviewed has no state yet and the scheduler fills in its defaults.
    """

    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    deck_id: Mapped[str] = mapped_column(ForeignKey("decks.id"), nullable=False, index=True)
    front: Mapped[str] = mapped_column(Text, nullable=False)
    back: Mapped[str] = mapped_column(Text, nullable=False)
    context: Mapped[str | None] = mapped_column(Text, nullable=True)  # Example sentence or note
    interval: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Days
    repetition: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ease_factor: Mapped[float | None] = mapped_column(Float, nullable=True)
    next_review: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    source: Mapped[str | None] = mapped_column(String(50), nullable=True)  # cli, api

    deck: Mapped["Deck"] = relationship(back_populates="cards")  # type: ignore[name-defined] # noqa: F821
