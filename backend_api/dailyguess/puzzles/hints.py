from __future__ import annotations

from typing import Any, List, Mapping, Protocol, Sequence, Tuple, runtime_checkable

from .domains import Domain
from .entities import LOST, MAX_ATTEMPTS, PLAYING, Attempt, HintField, Puzzle
from .errors import HintUnavailable

GIVEAWAY_LABELS = ("First letter", "Length")


# Light-weight protocol so the policy does not import the session module.
@runtime_checkable
class _SessionLike(Protocol):
    """Minimal interface required from PuzzleSession for hint computations."""

    puzzle: Puzzle
    attempts: Sequence[Attempt]
    status: str
    hard_mode: bool
    hints_requested: int


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


# PUBLIC_INTERFACE
def build_hint_fields(domain: Domain, display_fields: Mapping[str, Any]) -> Tuple[HintField, ...]:
    """Derive a puzzle's ordered hints from the domain's hint schema.

    Display fields that are missing or empty are skipped, so puzzles with
    sparse content simply unlock fewer hints.
    """
    fields: List[HintField] = []
    for label, key in domain.hint_schema:
        value = display_fields.get(key)
        if value is None or value == "" or value == [] or value == ():
            continue
        fields.append(HintField(label=label, value=_format_value(value)))
    return tuple(fields)


# PUBLIC_INTERFACE
def giveaway_fields(puzzle: Puzzle) -> Tuple[HintField, ...]:
    """First letter and length of the canonical answer."""
    answer = puzzle.answer.strip()
    return (
        HintField(label="First letter", value=answer[:1].upper()),
        HintField(label="Length", value=f"{len(answer)} characters"),
    )


# PUBLIC_INTERFACE
class HintProgressionPolicy:
    """Decides which hint fields a session has unlocked and which it may see.

    One field unlocks per submitted attempt, never re-hidden. The give-away
    (first letter + length) unlocks after the last attempt or on a loss.
    In hard mode unlocked fields stay hidden until explicitly requested.
    """

    def __init__(self, max_attempts: int = MAX_ATTEMPTS):
        self.max_attempts = max_attempts

    # PUBLIC_INTERFACE
    def revealed_fields(self, puzzle: Puzzle, attempt_count: int, lost: bool = False) -> List[HintField]:
        count = max(0, min(attempt_count, len(puzzle.hint_fields)))
        fields = list(puzzle.hint_fields[:count])
        if lost or attempt_count >= self.max_attempts:
            labels = {f.label for f in fields}
            fields.extend(f for f in giveaway_fields(puzzle) if f.label not in labels)
        return fields

    def unlocked_for(self, session: _SessionLike) -> List[HintField]:
        return self.revealed_fields(session.puzzle, len(session.attempts), lost=session.status == LOST)

    # PUBLIC_INTERFACE
    def visible_fields(self, session: _SessionLike) -> List[HintField]:
        """Fields the player can currently see."""
        unlocked = self.unlocked_for(session)
        if session.hard_mode and session.status == PLAYING:
            return unlocked[: session.hints_requested]
        return unlocked

    # PUBLIC_INTERFACE
    def next_requestable(self, session: _SessionLike) -> HintField:
        """Return the hint a hard-mode request would reveal.

        Raises:
            HintUnavailable: session finished, not in hard mode, or nothing
            further unlocked yet.
        """
        if session.status != PLAYING:
            raise HintUnavailable("Cannot request hints on a finished session.")
        if not session.hard_mode:
            raise HintUnavailable("Hints are revealed automatically outside hard mode.")
        unlocked = self.unlocked_for(session)
        if session.hints_requested >= len(unlocked):
            raise HintUnavailable("No further hints unlocked yet; make another guess.")
        return unlocked[session.hints_requested]
