"""
Service layer wiring the engine to the ORM collaborators and settings.

Views call these helpers; nothing here touches request objects.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

from django.utils import timezone

from .backends import DatabaseLexicon, DatabasePuzzleSource, DatabaseResultsSink, DatabaseSessionStore
from .conf import app_setting, configured_domain, puzzle_epoch, share_url
from .puzzles import (
    HttpResultsSink,
    NullResultsSink,
    Puzzle,
    PuzzleSession,
    PuzzleUnavailable,
    SessionEvents,
    number_for_date,
    open_session,
    render,
)
from .puzzles.collaborators import ResultsSink
from .puzzles.enrichment import LatestOnlyGuard, WikimediaImageLookup

logger = logging.getLogger(__name__)


def _log_event(event: str, payload: dict) -> None:
    logger.info("event=%s %s", event, payload)


session_events = SessionEvents()
session_events.subscribe_all(_log_event)


def build_results_sink() -> ResultsSink:
    kind = (app_setting("RESULTS_SINK") or "none").lower()
    if kind == "database":
        return DatabaseResultsSink()
    if kind == "http":
        url = app_setting("RESULTS_SINK_URL")
        if url:
            return HttpResultsSink(url, timeout=float(app_setting("RESULTS_SINK_TIMEOUT")))
        logger.warning("RESULTS_SINK is 'http' but RESULTS_SINK_URL is not set; results will not be reported")
    return NullResultsSink()


def resolve_day(day: Optional[date] = None) -> date:
    return day or timezone.localdate()


# PUBLIC_INTERFACE
def get_daily_puzzle(domain_name: str, day: Optional[date] = None) -> Puzzle:
    """Today's (or the given day's) puzzle for a domain.

    Raises:
        KeyError: unknown domain.
        PuzzleUnavailable: nothing scheduled for that day.
    """
    domain = configured_domain(domain_name)
    day = resolve_day(day)
    puzzle = DatabasePuzzleSource().get_puzzle_for_date(domain.name, day)
    if puzzle is None:
        raise PuzzleUnavailable(f"No {domain.name} puzzle is available for {day.isoformat()}.")
    return puzzle


# PUBLIC_INTERFACE
def load_session(
    domain_name: str,
    player_id: str,
    day: Optional[date] = None,
    hard_mode: bool = False,
) -> PuzzleSession:
    """Restore or start the player's session for the day's puzzle."""
    domain = configured_domain(domain_name)
    puzzle = get_daily_puzzle(domain.name, day)
    return open_session(
        puzzle,
        domain,
        store=DatabaseSessionStore(player_id),
        hard_mode=hard_mode,
        lexicon=DatabaseLexicon(),
        sink=build_results_sink(),
        events=session_events,
    )


def puzzle_number(puzzle: Puzzle) -> int:
    return number_for_date(puzzle.puzzle_date or timezone.localdate(), puzzle_epoch())


def describe_puzzle(puzzle: Puzzle) -> Dict[str, Any]:
    """Public view of a puzzle; never includes the answer."""
    return {
        "puzzle_id": puzzle.id,
        "domain": puzzle.domain,
        "puzzle_date": puzzle.puzzle_date,
        "puzzle_number": puzzle_number(puzzle),
        "answer_length": len(puzzle.answer),
        "hint_count": len(puzzle.hint_fields),
    }


def describe_attempt(session: PuzzleSession, attempt) -> Dict[str, Any]:
    data = attempt.as_dict()
    data["feedback"] = attempt.letter_statuses
    data["warmth"] = session.warmth(attempt)
    return data


# PUBLIC_INTERFACE
def describe_session(session: PuzzleSession) -> Dict[str, Any]:
    """Session state for API responses; the answer is only included once finished."""
    return {
        "domain": session.domain.name,
        "puzzle_id": session.puzzle_id,
        "status": session.status,
        "hard_mode": session.hard_mode,
        "attempts": [describe_attempt(session, a) for a in session.attempts],
        "attempts_used": len(session.attempts),
        "remaining_attempts": session.remaining_attempts,
        "hints": [h.as_dict() for h in session.visible_hints()],
        "hints_unlocked": len(session.revealed_hints()),
        "answer": session.puzzle.answer if session.is_terminal else None,
    }


# PUBLIC_INTERFACE
def share_text(session: PuzzleSession) -> str:
    """Share string for a finished session.

    Raises:
        ValueError: the session is still in progress.
    """
    return render(session, puzzle_number(session.puzzle), footer_url=share_url(session.domain))


_image_lookup: Optional[WikimediaImageLookup] = None


def image_lookup() -> WikimediaImageLookup:
    global _image_lookup
    if _image_lookup is None:
        _image_lookup = WikimediaImageLookup(timeout=float(app_setting("IMAGE_LOOKUP_TIMEOUT")))
    return _image_lookup


# PUBLIC_INTERFACE
def puzzle_image(puzzle: Puzzle, guard: Optional[LatestOnlyGuard] = None) -> Optional[str]:
    """Illustrative image URL for a puzzle, or None when the lookup comes up empty.

    The shared lookup keeps no per-player state; pass the caller's own guard
    to have results for a puzzle it already left dropped.
    """
    fields = puzzle.display_fields
    terms = [t for t in (fields.get("image_search"), puzzle.answer, fields.get("country")) if t]
    return image_lookup().image_for_puzzle(puzzle.id, *[str(t) for t in terms], guard=guard)
