"""
Session persistence.

Every store keeps one JSON-compatible payload per ``{domain}-{puzzle_id}`` key.
Payloads carry a schema ``version`` so older snapshots can be migrated on load.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from .entities import LOST, PLAYING, WON, Attempt, LetterResult

SCHEMA_VERSION = 2

_LEGACY_STATUS = {"playing": PLAYING, "won": WON, "lost": LOST}
LETTER_STATUSES = frozenset({"correct", "present", "absent"})


# PUBLIC_INTERFACE
def session_key(domain: str, puzzle_id: str) -> str:
    return f"{domain}-{puzzle_id}"


# PUBLIC_INTERFACE
class SessionStore(Protocol):
    """Durable key-value store for session snapshots."""

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored payload or None."""

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        """Persist the payload, replacing any previous one."""


# PUBLIC_INTERFACE
class InMemorySessionStore:
    """Process-local store; payloads are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        payload = self._data.get(key)
        return copy.deepcopy(payload) if payload is not None else None

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(payload)

    def __contains__(self, key: str) -> bool:
        return key in self._data


# PUBLIC_INTERFACE
def serialize_session(session) -> Dict[str, Any]:
    """Snapshot of the mutable part of a PuzzleSession."""
    return {
        "version": SCHEMA_VERSION,
        "puzzle_id": session.puzzle.id,
        "attempts": [a.as_dict() for a in session.attempts],
        "status": session.status,
        "hard_mode": session.hard_mode,
        "hints_requested": session.hints_requested,
    }


def _checked(attempts: List[Attempt]) -> List[Attempt]:
    for attempt in attempts:
        unknown = set(attempt.letter_statuses) - LETTER_STATUSES
        if unknown:
            raise ValueError(f"Unknown letter status in stored attempt: {sorted(unknown)!r}")
    return attempts


def _migrate_legacy_attempt(raw: Mapping[str, Any], normalize: Callable[[str], str]) -> Attempt:
    if not isinstance(raw, Mapping):
        raise ValueError(f"Stored attempt is not a mapping: {raw!r}")
    guess = raw.get("guess") or ""
    normalized = normalize(guess)
    feedback = raw.get("letterFeedback")
    if feedback is not None:
        letters = [
            LetterResult(letter=item.get("letter", ""), status=item.get("status", "absent"), position=i)
            for i, item in enumerate(feedback)
        ]
    else:
        statuses = raw.get("letterStatuses") or raw.get("statuses") or []
        letters = [
            LetterResult(letter=normalized[i] if i < len(normalized) else "", status=status, position=i)
            for i, status in enumerate(statuses)
        ]
    return Attempt(
        guess_raw=guess,
        guess_normalized=normalized,
        letters=tuple(letters),
        is_correct=bool(raw.get("isCorrect")),
        similarity=raw.get("similarityScore"),
    )


# PUBLIC_INTERFACE
def deserialize_session(
    payload: Mapping[str, Any],
    normalize: Callable[[str], str] = lambda s: s,
) -> Dict[str, Any]:
    """Turn a stored payload into PuzzleSession state keyword arguments.

    Version 1 payloads are the browser snapshots ``{attempts, gameState, hardMode}``.

    Raises:
        ValueError: unknown schema version or malformed attempts.
    """
    version = payload.get("version", 1)
    if version == 1:
        attempts = _checked([_migrate_legacy_attempt(a, normalize) for a in payload.get("attempts") or []])
        return {
            "attempts": attempts,
            "status": _LEGACY_STATUS.get(payload.get("gameState") or "playing", PLAYING),
            "hard_mode": bool(payload.get("hardMode")),
            "hints_requested": 0,
        }
    if version == SCHEMA_VERSION:
        return {
            "attempts": _checked([Attempt.from_dict(a) for a in payload.get("attempts") or []]),
            "status": payload.get("status", PLAYING),
            "hard_mode": bool(payload.get("hard_mode")),
            "hints_requested": int(payload.get("hints_requested") or 0),
        }
    raise ValueError(f"Unsupported session schema version: {version!r}")
