"""Exceptions raised by the guessing engine.

Validation failures subclass ValueError so callers that only care about
"bad input" can catch that, while views can map each ``code`` to a response.
"""


class GuessRejected(ValueError):
    """A guess was refused; the session is unchanged."""

    code = "invalid_guess"


class EmptyGuess(GuessRejected):
    code = "empty_guess"


class DuplicateGuess(GuessRejected):
    code = "duplicate_guess"


class UnknownEntry(GuessRejected):
    code = "unknown_entry"


class SessionFinished(GuessRejected):
    code = "session_finished"


class AttemptLimitReached(GuessRejected):
    code = "attempt_limit_reached"


class HintUnavailable(ValueError):
    code = "hint_unavailable"


class PuzzleUnavailable(LookupError):
    """No puzzle is configured for the requested domain and date."""

    code = "puzzle_unavailable"
