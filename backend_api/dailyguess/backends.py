"""
Django ORM implementations of the engine's collaborator interfaces.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from django.db.models import Avg, Count, Q

from .models import DailyPuzzle, LexiconEntry, PuzzleResult, StoredSession
from .puzzles import Coordinate, HintField, Puzzle, build_hint_fields, get_domain


def to_puzzle(row: DailyPuzzle) -> Puzzle:
    """Convert a DailyPuzzle row into the engine's immutable Puzzle."""
    if row.hint_fields:
        hints = tuple(HintField(label=h["label"], value=str(h["value"])) for h in row.hint_fields)
    else:
        hints = build_hint_fields(get_domain(row.domain), row.display_fields or {})
    return Puzzle(
        id=str(row.pk),
        domain=row.domain,
        answer=row.answer,
        display_fields=dict(row.display_fields or {}),
        valid_aliases=frozenset(row.valid_aliases or ()),
        hint_fields=hints,
        puzzle_date=row.puzzle_date,
    )


# PUBLIC_INTERFACE
class DatabasePuzzleSource:
    def get_puzzle_for_date(self, domain: str, day: date) -> Optional[Puzzle]:
        row = DailyPuzzle.objects.filter(domain=domain, puzzle_date=day).first()
        return to_puzzle(row) if row else None


# PUBLIC_INTERFACE
class DatabaseLexicon:
    def is_valid_entry(self, domain: str, normalized_guess: str) -> bool:
        return LexiconEntry.objects.filter(domain=domain, normalized=normalized_guess).exists()

    def coordinate_for(self, domain: str, normalized_guess: str) -> Optional[Coordinate]:
        row = (
            LexiconEntry.objects.filter(domain=domain, normalized=normalized_guess)
            .values_list("latitude", "longitude")
            .first()
        )
        if not row or row[0] is None or row[1] is None:
            return None
        return Coordinate(row[0], row[1])


# PUBLIC_INTERFACE
class DatabaseSessionStore:
    """SessionStore rows namespaced by player (guest) id."""

    def __init__(self, owner: str):
        self.owner = owner

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        row = StoredSession.objects.filter(owner=self.owner, key=key).values_list("payload", flat=True).first()
        return row or None

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        StoredSession.objects.update_or_create(owner=self.owner, key=key, defaults={"payload": payload})


# PUBLIC_INTERFACE
class DatabaseResultsSink:
    def report_result(self, domain: str, success: bool, attempt_count: int) -> None:
        PuzzleResult.objects.create(domain=domain, success=success, attempts=attempt_count)


# PUBLIC_INTERFACE
def result_stats(domain: str) -> Dict[str, Any]:
    """Player count, success rate (percent) and average attempts for a domain."""
    agg = PuzzleResult.objects.filter(domain=domain).aggregate(
        total=Count("id"),
        wins=Count("id", filter=Q(success=True)),
        avg_attempts=Avg("attempts"),
    )
    total = agg["total"] or 0
    return {
        "domain": domain,
        "total_players": total,
        "success_rate": round(100 * (agg["wins"] or 0) / total) if total else 0,
        "average_attempts": round(agg["avg_attempts"] or 0, 1),
    }
