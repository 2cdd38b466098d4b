from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, List, Literal, Mapping, NamedTuple, Optional, Tuple

LetterFeedback = Literal["correct", "present", "absent"]
SessionStatus = Literal["playing", "won", "lost"]

PLAYING: SessionStatus = "playing"
WON: SessionStatus = "won"
LOST: SessionStatus = "lost"

MAX_ATTEMPTS = 6


class Coordinate(NamedTuple):
    latitude: float
    longitude: float


@dataclass(frozen=True)
class HintField:
    label: str
    value: str

    def as_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class LetterResult:
    letter: str
    status: LetterFeedback
    position: int

    def as_dict(self) -> Dict[str, Any]:
        return {"letter": self.letter, "status": self.status, "position": self.position}


@dataclass(frozen=True)
class GeoHint:
    distance_km: float
    direction: str
    label: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return {"distance_km": self.distance_km, "direction": self.direction, "label": self.label}


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Puzzle:
    """One daily puzzle for a domain.

    Fields:
    - id: unique identifier from the content source
    - domain: domain name, e.g. "capital", "song"
    - answer: canonical answer string (display form)
    - display_fields: domain-specific attributes (country, latitude, artist, ...)
    - valid_aliases: alternate accepted spellings
    - hint_fields: ordered hints, broad to specific
    - puzzle_date: calendar day the puzzle is scheduled for
    """

    id: str
    domain: str
    answer: str
    display_fields: Mapping[str, Any] = field(default_factory=dict)
    valid_aliases: FrozenSet[str] = frozenset()
    hint_fields: Tuple[HintField, ...] = ()
    puzzle_date: Optional[date] = None

    @property
    def coordinate(self) -> Optional[Coordinate]:
        lat = self.display_fields.get("latitude")
        lon = self.display_fields.get("longitude")
        if lat is None or lon is None:
            return None
        return Coordinate(float(lat), float(lon))


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Attempt:
    """A single evaluated guess. Created once, never mutated."""

    guess_raw: str
    guess_normalized: str
    letters: Tuple[LetterResult, ...]
    is_correct: bool
    similarity: Optional[float] = None
    geo_hint: Optional[GeoHint] = None

    @property
    def letter_statuses(self) -> List[LetterFeedback]:
        return [r.status for r in self.letters]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "guess_raw": self.guess_raw,
            "guess_normalized": self.guess_normalized,
            "letters": [r.as_dict() for r in self.letters],
            "is_correct": self.is_correct,
            "similarity": self.similarity,
            "geo_hint": self.geo_hint.as_dict() if self.geo_hint else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Attempt":
        geo = data.get("geo_hint")
        return cls(
            guess_raw=data["guess_raw"],
            guess_normalized=data["guess_normalized"],
            letters=tuple(
                LetterResult(letter=r["letter"], status=r["status"], position=int(r["position"]))
                for r in data.get("letters") or []
            ),
            is_correct=bool(data.get("is_correct")),
            similarity=data.get("similarity"),
            geo_hint=GeoHint(**geo) if geo else None,
        )
