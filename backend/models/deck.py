import uuid
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.models.base import Base, TimestampMixin


def _new_deck_id() -> str:
    return uuid.uuid4().hex


class Deck(Base, TimestampMixin):
    __tablename__ = "decks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_deck_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="knowledge"
    )  # language, knowledge
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    last_reviewed: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    cards: Mapped[list["Card"]] = relationship(  # type: ignore[name-defined] # noqa: F821
        back_populates="deck",
        cascade="all, delete-orphan",
        order_by="Card.id",
    )
