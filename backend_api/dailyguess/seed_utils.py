from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from .models import DailyPuzzle, LexiconEntry
from .puzzles import get_domain

# (name, latitude, longitude)
CAPITALS: List[Tuple[str, float, float]] = [
    ("Paris", 48.8566, 2.3522),
    ("Berlin", 52.52, 13.405),
    ("Madrid", 40.4168, -3.7038),
    ("Rome", 41.9028, 12.4964),
    ("Lisbon", 38.7223, -9.1393),
    ("Vienna", 48.2082, 16.3738),
    ("Athens", 37.9838, 23.7275),
    ("Cairo", 30.0444, 31.2357),
    ("Nairobi", -1.2921, 36.8219),
    ("Tokyo", 35.6762, 139.6503),
    ("Canberra", -35.2809, 149.13),
    ("Ottawa", 45.4215, -75.6972),
    ("Lima", -12.0464, -77.0428),
    ("Hanoi", 21.0278, 105.8342),
]

CITIES: List[Tuple[str, float, float]] = [
    ("Barcelona", 41.3874, 2.1686),
    ("Marseille", 43.2965, 5.3698),
    ("Munich", 48.1351, 11.582),
    ("Milan", 45.4642, 9.19),
    ("Porto", 41.1579, -8.6291),
    ("New York", 40.7128, -74.006),
    ("Saint Petersburg", 59.9311, 30.3609),
    ("Osaka", 34.6937, 135.5023),
    ("Sydney", -33.8688, 151.2093),
    ("Rio de Janeiro", -22.9068, -43.1729),
]

TRIVIA_TERMS: List[str] = ["quark", "sonnet", "delta", "fjord", "haiku", "comet"]

DEFAULT_PUZZLES: List[Dict[str, Any]] = [
    {
        "domain": "capital",
        "answer": "Lisbon",
        "display_fields": {
            "continent": "Europe",
            "country": "Portugal",
            "timezone": "WET (UTC+0)",
            "population": "0.5 million",
            "city_hint": "Built on seven hills beside the Tagus",
            "country_code": "PT",
            "latitude": 38.7223,
            "longitude": -9.1393,
        },
        "valid_aliases": ["Lisboa"],
    },
    {
        "domain": "city",
        "answer": "Saint Petersburg",
        "display_fields": {
            "continent": "Europe",
            "country": "Russia",
            "population": "5.6 million",
            "region": "Northwestern Russia",
            "famous_for": ["Hermitage Museum", "White nights"],
            "hint": "Founded by Peter the Great in 1703",
            "latitude": 59.9311,
            "longitude": 30.3609,
        },
        "valid_aliases": ["St Petersburg", "Leningrad"],
    },
    {
        "domain": "plant",
        "answer": "Sunflower",
        "display_fields": {
            "category": "Flowering plant",
            "native_region": "North America",
            "family": "Asteraceae",
            "flower_color": "Yellow",
            "uses": ["Seeds", "Oil"],
            "hint": "Its head follows the sun while young",
            "image_search": "Helianthus annuus",
        },
        "valid_aliases": ["Helianthus annuus", "Common sunflower"],
    },
    {
        "domain": "song",
        "answer": "Bohemian Rhapsody",
        "display_fields": {
            "decade": "1970s",
            "genre": "Rock",
            "release_year": 1975,
            "artist": "Queen",
            "album": "A Night at the Opera",
            "lyric": "Is this the real life?",
        },
    },
    {
        "domain": "date-event",
        "answer": "The Moon Landing",
        "display_fields": {
            "category": "Exploration",
            "type": "Space mission",
            "first_date": "1969",
            "last_date": "July 1969",
            "middle_date": "20 July 1969",
            "hint": "One small step",
        },
        "valid_aliases": ["Apollo 11"],
    },
    {
        "domain": "trivia-term",
        "answer": "fjord",
        "display_fields": {
            "category": "Geography",
            "definition": "A long, narrow inlet with steep sides, created by a glacier",
            "example": "Geirangerfjord in Norway",
            "hint": "Common along the Norwegian coast",
        },
    },
]


def _lexicon_rows(domain_name: str, entries) -> List[LexiconEntry]:
    domain = get_domain(domain_name)
    rows = []
    for entry in entries:
        name, lat, lng = entry if isinstance(entry, tuple) else (entry, None, None)
        rows.append(
            LexiconEntry(domain=domain.name, name=name, normalized=domain.normalize(name), latitude=lat, longitude=lng)
        )
    return rows


# PUBLIC_INTERFACE
def ensure_seed_lexicon() -> int:
    """Ensure the lexicon has the bundled capitals, cities and trivia terms.

    Returns number of entries inserted (0 if already present).
    """
    if LexiconEntry.objects.exists():
        return 0
    rows = (
        _lexicon_rows("capital", CAPITALS)
        + _lexicon_rows("city", CITIES)
        + _lexicon_rows("trivia-term", TRIVIA_TERMS)
    )
    with transaction.atomic():
        LexiconEntry.objects.bulk_create(rows, ignore_conflicts=True)
    return len(rows)


# PUBLIC_INTERFACE
def ensure_daily_puzzles(day: Optional[date] = None, puzzles: Optional[List[Dict[str, Any]]] = None) -> int:
    """Schedule the bundled puzzles on ``day`` for every domain that has none.

    Returns number of puzzles created.
    """
    day = day or timezone.localdate()
    created = 0
    with transaction.atomic():
        for entry in puzzles or DEFAULT_PUZZLES:
            _, was_created = DailyPuzzle.objects.get_or_create(
                domain=entry["domain"],
                puzzle_date=day,
                defaults={
                    "answer": entry["answer"],
                    "display_fields": entry.get("display_fields", {}),
                    "valid_aliases": entry.get("valid_aliases", []),
                    "hint_fields": entry.get("hint_fields", []),
                },
            )
            created += int(was_created)
    return created
