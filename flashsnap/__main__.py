"""CLI interface for FlashSnap.

Usage:
    python -m flashsnap decks                        List decks
    python -m flashsnap new-deck "Spanish"           Create a deck
    python -m flashsnap add DECK_ID "hola" "hello"   Add a card to a deck
    python -m flashsnap due [--deck DECK_ID]         Show how many cards are due
    python -m flashsnap review [--deck DECK_ID]      Start a review session
    python -m flashsnap stats DECK_ID                Show deck statistics
"""

import argparse
import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import selectinload

from backend.config import localnow
from backend.database import async_session, engine
from backend.models import Base
from backend.models.card import Card
from backend.models.deck import Deck
from backend.srs import reporting
from backend.srs.queue import QueueConfig, get_due_cards, load_decks
from backend.srs.session import start_session
from flashsnap.display import format_card_stats, render_card


async def ensure_db(bind: AsyncEngine = engine) -> None:
    """Create tables if they don't exist."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def create_deck(db: AsyncSession, name: str, deck_type: str = "knowledge") -> Deck:
    """Create and return an empty deck."""
    deck = Deck(name=name, type=deck_type, cards=[])
    db.add(deck)
    await db.commit()
    return deck


async def add_card(
    db: AsyncSession,
    deck_id: str,
    front: str,
    back: str,
    context: str | None = None,
) -> Card | None:
    """Add a never-reviewed card to a deck. Returns None if the deck doesn't exist."""
    if await db.get(Deck, deck_id) is None:
        return None
    card = Card(deck_id=deck_id, front=front, back=back, context=context, source="cli")
    db.add(card)
    await db.commit()
    return card


async def count_due(db: AsyncSession, deck_id: str | None = None) -> tuple[int, int]:
    """Return (due cards, total cards) across all decks or one deck."""
    decks = await load_decks(db, deck_id=deck_id)
    total = sum(len(deck.cards) for deck in decks)
    return len(get_due_cards(decks, deck_id=deck_id, now=localnow())), total


async def cmd_decks(args: argparse.Namespace) -> None:
    """List decks."""
    await ensure_db()
    async with async_session() as db:
        decks = await load_decks(db)

    if not decks:
        print("  No decks yet. Create one with: flashsnap new-deck NAME")
        return

    print()
    for deck in decks:
        due = len(get_due_cards([deck], now=localnow()))
        print(f"  {deck.id}  {deck.name:<30} {len(deck.cards):>4} cards  {due:>4} due")
    print()


async def cmd_new_deck(args: argparse.Namespace) -> None:
    """Create a new deck."""
    await ensure_db()
    async with async_session() as db:
        deck = await create_deck(db, args.name, args.type)
    print(f"  Created deck '{deck.name}' (id={deck.id})")


async def cmd_add(args: argparse.Namespace) -> None:
    """Add a new card to a deck."""
    await ensure_db()
    async with async_session() as db:
        card = await add_card(db, args.deck_id, args.front, args.back, args.context)

    if card is None:
        print(f"  Deck '{args.deck_id}' not found.")
        return

    print("  Added (card ready for review):")
    print(render_card(card.front, card.back, card.context))


async def cmd_due(args: argparse.Namespace) -> None:
    """Show how many cards are due."""
    await ensure_db()
    async with async_session() as db:
        due, total = await count_due(db, args.deck)
    print(f"  {due} of {total} cards due for review")


async def cmd_review(args: argparse.Namespace) -> None:
    """Run an interactive review session."""
    await ensure_db()
    config = QueueConfig(max_cards=args.max_cards)

    async with async_session() as db:
        session = await start_session(db, deck_id=args.deck, config=config)

        if session.queue.total == 0:
            print("\nNo cards due for review. You're all caught up!")
            return

        print("\n  Review Session")
        print(f"  {session.queue.total} cards due\n")
        print("  Grades: 0=Blackout 1=Wrong 2=Wrong but familiar 3=Hard 4=Good 5=Perfect")
        print("  Type 'q' to quit\n")

        position = 0
        while (due := session.current) is not None:
            position += 1
            card = due.card
            label = f"  [{position}/{session.queue.total}] {due.deck_name}"
            if card.next_review is None:
                label += " (NEW)"
            print(label)
            print(render_card(card.front))

            if input("\n  Press Enter to show the answer ").strip().lower() == "q":
                print("\n  Session ended early.")
                break
            print(render_card(card.front, card.back, card.context))

            grade_input = input("  Grade [0-5]: ").strip()
            while not (grade_input.isdigit() and 0 <= int(grade_input) <= 5):
                if grade_input.lower() == "q":
                    break
                grade_input = input("  Grade [0-5]: ").strip()
            if grade_input.lower() == "q":
                print("\n  Session ended early.")
                break

            state = await session.submit_grade(db, card.id, int(grade_input))
            print(f"  Next review in {state.interval} days ({state.next_review.date()})\n")

    stats = session.stats
    accuracy = stats.passed / stats.cards_reviewed * 100 if stats.cards_reviewed else 0
    print("\n  Session Complete!")
    print(f"  Reviewed: {stats.cards_reviewed}  Passed: {stats.passed}  Accuracy: {accuracy:.0f}%\n")


async def cmd_stats(args: argparse.Namespace) -> None:
    """Show statistics for one deck."""
    await ensure_db()
    async with async_session() as db:
        stmt = select(Deck).where(Deck.id == args.deck_id).options(selectinload(Deck.cards))
        deck = (await db.execute(stmt)).scalar_one_or_none()

    if deck is None:
        print(f"  Deck '{args.deck_id}' not found.")
        return

    cards = list(deck.cards)
    buckets = reporting.cards_by_difficulty(cards)
    due = len(get_due_cards([deck], now=localnow()))
    upcoming = sum(count for _, count in reporting.review_forecast(cards, days=7))

    print(f"\n  {deck.name} Statistics")
    print(f"  {'Total cards:':<22} {len(cards)}")
    print(f"  {'Due now:':<22} {due}")
    print(f"  {'Due in next 7 days:':<22} {upcoming}")
    print(f"  {'Mastered:':<22} {reporting.deck_progress(deck)}%")
    print(f"  {'Easy/Medium/Hard:':<22} {len(buckets.easy)}/{len(buckets.medium)}/{len(buckets.hard)}")
    print(f"  {'Average ease factor:':<22} {reporting.average_ease_factor(cards):.2f}")
    print(f"  {'Retention:':<22} {reporting.retention_rate(cards)}%")
    print(f"  {'Average interval:':<22} {reporting.review_efficiency(cards)} days")
    if args.cards:
        for card in cards:
            print()
            print(render_card(card.front, card.back))
            print(format_card_stats(card, indent="    "))
    print()


def main() -> None:
    """Entry point for the FlashSnap CLI application."""
    parser = argparse.ArgumentParser(
        prog="flashsnap",
        description="FlashSnap flashcards with spaced repetition",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # decks
    subparsers.add_parser("decks", help="List decks")

    # new-deck
    deck_parser = subparsers.add_parser("new-deck", help="Create a deck")
    deck_parser.add_argument("name", help="Deck name")
    deck_parser.add_argument(
        "-t", "--type", choices=["knowledge", "language"], default="knowledge", help="Deck type"
    )

    # add
    add_parser = subparsers.add_parser("add", help="Add a card to a deck")
    add_parser.add_argument("deck_id", help="Deck ID")
    add_parser.add_argument("front", help="Question side")
    add_parser.add_argument("back", help="Answer side")
    add_parser.add_argument("-c", "--context", default=None, help="Example or note")

    # due
    due_parser = subparsers.add_parser("due", help="Show cards due for review")
    due_parser.add_argument("-d", "--deck", default=None, help="Only this deck")

    # review
    review_parser = subparsers.add_parser("review", help="Start a review session")
    review_parser.add_argument("-d", "--deck", default=None, help="Only review this deck")
    review_parser.add_argument("--max-cards", type=int, default=0, help="Max cards (0 = all due)")

    # stats
    stats_parser = subparsers.add_parser("stats", help="Show deck statistics")
    stats_parser.add_argument("deck_id", help="Deck ID")
    stats_parser.add_argument("--cards", action="store_true", help="Also list every card")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    cmd_map = {
        "decks": cmd_decks,
        "new-deck": cmd_new_deck,
        "add": cmd_add,
        "due": cmd_due,
        "review": cmd_review,
        "stats": cmd_stats,
    }

    asyncio.run(cmd_map[args.command](args))


if __name__ == "__main__":
    main()
