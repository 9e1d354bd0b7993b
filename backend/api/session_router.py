"""API routes for review sessions."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.schemas import (
    GradeRequest,
    GradeResponse,
    ReviewCardResponse,
    SessionStartResponse,
    SessionStatsResponse,
)
from backend.config import localnow, settings
from backend.database import get_session
from backend.srs.session import ReviewSession, start_session
from backend.srs.sm2 import INITIAL_EASE_FACTOR

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])

# In-memory session store, one process only
_active_sessions: dict[str, ReviewSession] = {}


def _evict_expired_sessions() -> None:
    """Remove sessions that have exceeded the TTL."""
    now = localnow()
    expired = [
        sid
        for sid, s in _active_sessions.items()
        if (now - s.created_at).total_seconds() > settings.session_ttl_seconds
    ]
    for sid in expired:
        logger.info("Evicting expired session %s", sid)
        _active_sessions.pop(sid, None)


def _get_active(session_id: str) -> ReviewSession:
    review_session = _active_sessions.get(session_id)
    if not review_session:
        raise HTTPException(status_code=404, detail="Session not found")
    return review_session


@router.post("/start", response_model=SessionStartResponse)
async def session_start(
    deck_id: str | None = None,
    user_id: str | None = None,
    db: AsyncSession = Depends(get_session),
) -> SessionStartResponse:
    """Start a new review session over all due cards, or one deck's."""
    _evict_expired_sessions()
    review_session = await start_session(db, deck_id=deck_id, user_id=user_id)

    if review_session.queue.total == 0:
        raise HTTPException(status_code=404, detail="No cards due for review")

    session_id = str(uuid.uuid4())
    _active_sessions[session_id] = review_session

    return SessionStartResponse(
        session_id=session_id,
        deck_id=deck_id,
        total_cards=review_session.queue.total,
    )


@router.get("/next/{session_id}", response_model=ReviewCardResponse)
async def session_next(session_id: str) -> ReviewCardResponse:
    """Get the next card in the session."""
    review_session = _get_active(session_id)

    due = review_session.current
    if due is None:
        raise HTTPException(status_code=410, detail="Session is complete")

    card = due.card
    return ReviewCardResponse(
        card_id=card.id,
        deck_id=due.deck_id,
        deck_name=due.deck_name,
        front=card.front,
        back=card.back,
        context=card.context,
        repetition=card.repetition or 0,
        interval=card.interval or 0,
        ease_factor=card.ease_factor or INITIAL_EASE_FACTOR,
        next_review=card.next_review,
        remaining=review_session.remaining,
    )


@router.post("/answer/{session_id}", response_model=GradeResponse)
async def session_answer(
    session_id: str,
    request: GradeRequest,
    db: AsyncSession = Depends(get_session),
) -> GradeResponse:
    """Grade the current card and reschedule it."""
    review_session = _get_active(session_id)

    try:
        state = await review_session.submit_grade(db, request.card_id, request.grade)
    except LookupError:
        raise HTTPException(status_code=410, detail="Session is complete") from None
    except ValueError:
        raise HTTPException(status_code=400, detail="Card ID mismatch") from None

    return GradeResponse(
        card_id=request.card_id,
        grade=request.grade,
        interval=state.interval,
        repetition=state.repetition,
        ease_factor=state.ease_factor,
        next_review=state.next_review,
        remaining=review_session.remaining,
        session_complete=review_session.is_complete,
    )


@router.get("/stats/{session_id}", response_model=SessionStatsResponse)
async def session_stats(session_id: str) -> SessionStatsResponse:
    """Get stats for the current session."""
    s = _get_active(session_id).stats
    return SessionStatsResponse(
        cards_reviewed=s.cards_reviewed,
        passed=s.passed,
        failed=s.failed,
        new_cards_seen=s.new_cards_seen,
    )


@router.post("/end/{session_id}")
async def session_end(session_id: str) -> dict:
    """End a session and clean up."""
    review_session = _active_sessions.pop(session_id, None)
    if not review_session:
        raise HTTPException(status_code=404, detail="Session not found")

    s = review_session.stats
    return {
        "status": "ended",
        "cards_reviewed": s.cards_reviewed,
        "passed": s.passed,
        "failed": s.failed,
    }
