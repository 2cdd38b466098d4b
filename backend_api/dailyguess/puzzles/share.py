from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from .entities import LOST, MAX_ATTEMPTS, PLAYING, WON, LetterFeedback

PUZZLE_EPOCH = date(2024, 1, 1)
DEFAULT_SHARE_BASE = "https://triviaah.com"

GLYPHS: Dict[LetterFeedback, str] = {
    "correct": "\U0001F7E9",  # green square
    "present": "\U0001F7E8",  # yellow square
    "absent": "⬜",  # white square
}


def number_for_date(day: date, epoch: date = PUZZLE_EPOCH) -> int:
    """Whole days elapsed since the epoch; the number players see in share text."""
    return (day - epoch).days


# PUBLIC_INTERFACE
def render(
    session,
    puzzle_number: int,
    title: Optional[str] = None,
    footer_url: Optional[str] = None,
) -> str:
    """Emoji-grid share text for a finished session.

    Layout (lines joined by "\\n", no trailing newline):
        Capitale #42 3/6
        <blank>
        one glyph row per attempt
        Answer: <answer>        (losses only)
        <blank>
        Play daily at <footer_url>

    Raises:
        ValueError: the session is still being played.
    """
    if session.status == PLAYING:
        raise ValueError("Cannot share a puzzle that is still being played.")

    title = title or session.domain.title
    if footer_url is None:
        footer_url = f"{DEFAULT_SHARE_BASE}/{session.domain.share_path}".rstrip("/")
    score = len(session.attempts) if session.status == WON else "X"

    lines = [f"{title} #{puzzle_number} {score}/{MAX_ATTEMPTS}", ""]
    for attempt in session.attempts:
        lines.append("".join(GLYPHS[status] for status in attempt.letter_statuses))
    if session.status == LOST:
        lines.append(f"Answer: {session.puzzle.answer}")
    lines.extend(["", f"Play daily at {footer_url}"])
    return "\n".join(lines)
