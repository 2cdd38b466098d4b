"""
External collaborator interfaces and simple implementations.

The engine only talks to content, lexicon and results services through these
protocols. ORM-backed versions live in ``dailyguess.backends``.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import requests

from .entities import Coordinate, Puzzle

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECS = 5.0


# PUBLIC_INTERFACE
class PuzzleSource(Protocol):
    def get_puzzle_for_date(self, domain: str, day: date) -> Optional[Puzzle]:
        """Deterministic puzzle for (domain, calendar day), or None if none is configured."""


# PUBLIC_INTERFACE
class Lexicon(Protocol):
    def is_valid_entry(self, domain: str, normalized_guess: str) -> bool:
        """True when the guess names a real entry of the domain (a real capital, ...)."""

    def coordinate_for(self, domain: str, normalized_guess: str) -> Optional[Coordinate]:
        """Location of the guessed place, when known."""


# PUBLIC_INTERFACE
class ResultsSink(Protocol):
    def report_result(self, domain: str, success: bool, attempt_count: int) -> None:
        """Best-effort report of a finished session."""


# PUBLIC_INTERFACE
class InMemoryPuzzleSource:
    def __init__(self, puzzles: Iterable[Puzzle] = ()) -> None:
        self._puzzles: Dict[Tuple[str, date], Puzzle] = {}
        for puzzle in puzzles:
            self.add(puzzle)

    def add(self, puzzle: Puzzle) -> None:
        if puzzle.puzzle_date is None:
            raise ValueError("puzzle_date is required to schedule a puzzle")
        self._puzzles[(puzzle.domain, puzzle.puzzle_date)] = puzzle

    def get_puzzle_for_date(self, domain: str, day: date) -> Optional[Puzzle]:
        return self._puzzles.get((domain, day))


# PUBLIC_INTERFACE
class InMemoryLexicon:
    """Lexicon over pre-normalized entries, optionally with coordinates.

    Example:
        InMemoryLexicon({"capital": {"paris": Coordinate(48.85, 2.35), "rome": None}})
    """

    def __init__(self, entries: Mapping[str, Mapping[str, Optional[Coordinate]]]) -> None:
        self._entries = {domain: dict(items) for domain, items in entries.items()}

    def is_valid_entry(self, domain: str, normalized_guess: str) -> bool:
        return normalized_guess in self._entries.get(domain, {})

    def coordinate_for(self, domain: str, normalized_guess: str) -> Optional[Coordinate]:
        return self._entries.get(domain, {}).get(normalized_guess)


# PUBLIC_INTERFACE
class NullResultsSink:
    def report_result(self, domain: str, success: bool, attempt_count: int) -> None:
        return None


# PUBLIC_INTERFACE
class MemoryResultsSink:
    """Keeps reports in a list; useful for local play and tests."""

    def __init__(self) -> None:
        self.reports: List[Tuple[str, bool, int]] = []

    def report_result(self, domain: str, success: bool, attempt_count: int) -> None:
        self.reports.append((domain, success, attempt_count))


# PUBLIC_INTERFACE
class HttpResultsSink:
    """Fire-and-forget POST of results to a remote endpoint.

    The request runs on a daemon thread so the caller never waits on the
    network. Failures are logged and dropped; there is no retry.
    """

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT_SECS, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, payload: dict) -> None:
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Result report to %s failed: %s", self.url, exc)

    def report_result(self, domain: str, success: bool, attempt_count: int) -> threading.Thread:
        payload = {"category": domain, "success": success, "attempts": attempt_count}
        worker = threading.Thread(target=self._post, args=(payload,), daemon=True)
        worker.start()
        return worker
