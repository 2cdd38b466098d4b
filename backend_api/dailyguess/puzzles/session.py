from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from . import geo
from .collaborators import Lexicon, NullResultsSink, ResultsSink
from .domains import Domain
from .entities import LOST, MAX_ATTEMPTS, PLAYING, WON, Attempt, GeoHint, HintField, Puzzle, SessionStatus
from .errors import AttemptLimitReached, DuplicateGuess, EmptyGuess, SessionFinished, UnknownEntry
from .events import GUESS_SUBMITTED, SESSION_CREATED, SESSION_FINISHED, SessionEvents
from .hints import HintProgressionPolicy
from .engines import Engine
from .registry import get_engine
from .store import SessionStore, deserialize_session, serialize_session, session_key

logger = logging.getLogger(__name__)

_STATUSES = (PLAYING, WON, LOST)


# PUBLIC_INTERFACE
class PuzzleSession:
    """Bounded-attempt state machine for one player and one daily puzzle.

    States: playing -> won, playing -> lost. Terminal states accept nothing.
    Only submit_guess and request_hint mutate the session; each mutation is
    persisted to the store (when one is given). The results sink hears about
    the session exactly once, at the transition into a terminal state.
    """

    def __init__(
        self,
        puzzle: Puzzle,
        domain: Domain,
        *,
        attempts: Iterable[Attempt] = (),
        status: SessionStatus = PLAYING,
        hard_mode: bool = False,
        hints_requested: int = 0,
        lexicon: Optional[Lexicon] = None,
        store: Optional[SessionStore] = None,
        sink: Optional[ResultsSink] = None,
        events: Optional[SessionEvents] = None,
        policy: Optional[HintProgressionPolicy] = None,
        store_key: Optional[str] = None,
    ):
        attempts = list(attempts)
        if status not in _STATUSES:
            raise ValueError(f"Unknown session status: {status!r}")
        if len(attempts) > MAX_ATTEMPTS:
            raise ValueError(f"A session holds at most {MAX_ATTEMPTS} attempts.")

        self.puzzle = puzzle
        self.domain = domain
        self._attempts: List[Attempt] = attempts
        self.status: SessionStatus = status
        self.hard_mode = hard_mode
        self.hints_requested = max(0, int(hints_requested))

        self.lexicon = lexicon
        self.store = store
        self.sink = sink or NullResultsSink()
        self.events = events or SessionEvents()
        self.policy = policy or HintProgressionPolicy()
        self.store_key = store_key or session_key(domain.name, puzzle.id)

        self.engine: Engine = get_engine(domain)
        self._target = domain.normalize(puzzle.answer)
        self._accepted = {self._target} | {domain.normalize(a) for a in puzzle.valid_aliases}
        self._accepted.discard("")

    @property
    def puzzle_id(self) -> str:
        return self.puzzle.id

    @property
    def attempts(self) -> Tuple[Attempt, ...]:
        return tuple(self._attempts)

    @property
    def is_terminal(self) -> bool:
        return self.status != PLAYING

    @property
    def remaining_attempts(self) -> int:
        return 0 if self.is_terminal else MAX_ATTEMPTS - len(self._attempts)

    # PUBLIC_INTERFACE
    def submit_guess(self, raw: str) -> Attempt:
        """Evaluate and record a guess.

        Returns:
            The new Attempt.

        Raises:
            GuessRejected (SessionFinished, AttemptLimitReached, EmptyGuess,
            DuplicateGuess, UnknownEntry): nothing was recorded.
        """
        if self.status != PLAYING:
            raise SessionFinished("This puzzle is already finished.")
        if len(self._attempts) >= MAX_ATTEMPTS:
            raise AttemptLimitReached(f"No attempts remaining (maximum {MAX_ATTEMPTS}).")

        normalized = self._validate(raw)
        attempt = self._evaluate(raw.strip(), normalized)

        self._attempts.append(attempt)
        if attempt.is_correct:
            self.status = WON
        elif len(self._attempts) >= MAX_ATTEMPTS:
            self.status = LOST

        logger.info(
            "%s puzzle %s: attempt %d %s (status=%s)",
            self.domain.name,
            self.puzzle.id,
            len(self._attempts),
            "correct" if attempt.is_correct else "incorrect",
            self.status,
        )
        self.events.emit(
            GUESS_SUBMITTED,
            domain=self.domain.name,
            puzzle_id=self.puzzle.id,
            attempt_number=len(self._attempts),
            is_correct=attempt.is_correct,
        )
        if self.status != PLAYING:
            self._finish()
        self._persist()
        return attempt

    # PUBLIC_INTERFACE
    def request_hint(self) -> HintField:
        """Reveal the next unlocked hint in hard mode.

        Raises:
            HintUnavailable: not hard mode, session finished, or nothing unlocked.
        """
        hint = self.policy.next_requestable(self)
        self.hints_requested += 1
        self._persist()
        return hint

    def revealed_hints(self) -> List[HintField]:
        """Every hint unlocked so far, regardless of hard mode."""
        return self.policy.unlocked_for(self)

    def visible_hints(self) -> List[HintField]:
        return self.policy.visible_fields(self)

    def warmth(self, attempt: Attempt) -> Optional[str]:
        """Warm/cold feedback for free-text domains."""
        if attempt.similarity is None or attempt.is_correct:
            return None
        return self.domain.similarity_bands.label_for(attempt.similarity)

    def snapshot(self) -> Dict[str, Any]:
        return serialize_session(self)

    def _validate(self, raw: str) -> str:
        if not isinstance(raw, str) or not raw.strip():
            raise EmptyGuess("Please enter a guess.")
        normalized = self.domain.normalize(raw)
        if not normalized:
            raise EmptyGuess("Please enter a guess.")
        if any(a.guess_normalized == normalized for a in self._attempts):
            raise DuplicateGuess(f"You already guessed {raw.strip()!r}.")
        if normalized not in self._accepted and not self._is_known_entry(normalized):
            raise UnknownEntry(f"{raw.strip()!r} is not a recognized {self.domain.name}.")
        return normalized

    def _is_known_entry(self, normalized: str) -> bool:
        if not self.domain.validate_entries or self.lexicon is None:
            return True
        try:
            return bool(self.lexicon.is_valid_entry(self.domain.name, normalized))
        except Exception:
            logger.warning("Lexicon lookup failed for %s; accepting guess unvalidated", self.domain.name, exc_info=True)
            return True

    def _evaluate(self, raw: str, normalized: str) -> Attempt:
        result = self.engine.evaluate(self._target, normalized, self._accepted)
        is_correct = bool(result["is_correct"])
        return Attempt(
            guess_raw=raw,
            guess_normalized=normalized,
            letters=tuple(result["letters"]),
            is_correct=is_correct,
            similarity=result.get("similarity"),
            geo_hint=None if is_correct else self._geo_hint(normalized),
        )

    def _geo_hint(self, normalized: str) -> Optional[GeoHint]:
        target = self.puzzle.coordinate
        lookup = getattr(self.lexicon, "coordinate_for", None)
        if not self.domain.uses_geo or target is None or lookup is None:
            return None
        try:
            guessed = lookup(self.domain.name, normalized)
        except Exception:
            logger.warning("Coordinate lookup failed for %r", normalized, exc_info=True)
            return None
        if guessed is None:
            return None
        return geo.hint(guessed, target, self.domain.distance_bands)

    def _finish(self) -> None:
        won = self.status == WON
        try:
            self.sink.report_result(self.domain.name, won, len(self._attempts))
        except Exception:
            logger.exception("Reporting result for %s puzzle %s failed", self.domain.name, self.puzzle.id)
        self.events.emit(
            SESSION_FINISHED,
            domain=self.domain.name,
            puzzle_id=self.puzzle.id,
            success=won,
            attempt_count=len(self._attempts),
        )

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.store_key, self.snapshot())
        except Exception:
            logger.exception("Persisting session %s failed", self.store_key)


# PUBLIC_INTERFACE
def open_session(
    puzzle: Puzzle,
    domain: Domain,
    *,
    store: Optional[SessionStore] = None,
    hard_mode: bool = False,
    store_key: Optional[str] = None,
    **collaborators: Any,
) -> PuzzleSession:
    """Restore the stored session for this puzzle or start a new one.

    The store is read exactly once. An unreadable snapshot is logged and a
    fresh session is started in its place. New sessions are saved right
    away so the hard-mode choice survives a reload.
    """
    key = store_key or session_key(domain.name, puzzle.id)
    payload = None
    if store is not None:
        try:
            payload = store.load(key)
        except Exception:
            logger.exception("Loading session %s failed", key)

    if payload:
        try:
            state = deserialize_session(payload, domain.normalize)
            return PuzzleSession(puzzle, domain, store=store, store_key=key, **state, **collaborators)
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.warning("Discarding unreadable session snapshot %s", key, exc_info=True)

    session = PuzzleSession(puzzle, domain, store=store, store_key=key, hard_mode=hard_mode, **collaborators)
    session._persist()
    session.events.emit(SESSION_CREATED, domain=domain.name, puzzle_id=puzzle.id, hard_mode=hard_mode)
    return session
