"""
Domain descriptors.

A Domain is the small configuration object each daily guessing game supplies
to the shared engine: which comparator to use, how to normalize answers, the
ordered hint schema, whether geo hints apply, and the tunable thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Tuple

from .geo import DEFAULT_DISTANCE_BANDS, DistanceBands
from .normalizer import (
    DEFAULT_PROFILE,
    PLACE_PROFILE,
    SONG_PROFILE,
    TITLE_PROFILE,
    NormalizationProfile,
    normalize,
)
from .similarity import DEFAULT_PARTIAL_MATCH_SCORE, SimilarityBands

ComparatorKind = Literal["letters", "free_text"]


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Domain:
    """Configuration of one guessing-game variant.

    Fields:
    - name: registry key, also the session-store key prefix
    - title: share-text title, e.g. "Capitale"
    - comparator: "letters" (letter diff only) or "free_text" (diff + similarity)
    - normalization: profile applied to guesses and answers
    - hint_schema: ordered (label, display field key) pairs, broad to specific
    - uses_geo: compute distance/direction hints from coordinates
    - validate_entries: reject guesses the domain lexicon does not know
    - partial_match_score, similarity_bands, distance_bands: tunable thresholds
    - share_path: path appended to the share base URL
    """

    name: str
    title: str
    comparator: ComparatorKind = "letters"
    normalization: NormalizationProfile = DEFAULT_PROFILE
    hint_schema: Tuple[Tuple[str, str], ...] = ()
    uses_geo: bool = False
    validate_entries: bool = True
    partial_match_score: float = DEFAULT_PARTIAL_MATCH_SCORE
    similarity_bands: SimilarityBands = SimilarityBands()
    distance_bands: DistanceBands = DEFAULT_DISTANCE_BANDS
    share_path: str = ""

    def normalize(self, text: str) -> str:
        return normalize(text, self.normalization)

    def with_overrides(self, **changes: Any) -> "Domain":
        if "similarity_bands" in changes and not isinstance(changes["similarity_bands"], SimilarityBands):
            changes["similarity_bands"] = SimilarityBands(bands=tuple(map(tuple, changes["similarity_bands"])))
        if "distance_bands" in changes and not isinstance(changes["distance_bands"], DistanceBands):
            changes["distance_bands"] = DistanceBands(bands=tuple(map(tuple, changes["distance_bands"])))
        return replace(self, **changes)


CAPITAL = Domain(
    name="capital",
    title="Capitale",
    comparator="letters",
    normalization=PLACE_PROFILE,
    hint_schema=(
        ("Continent", "continent"),
        ("Country", "country"),
        ("Timezone", "timezone"),
        ("Population", "population"),
        ("City hint", "city_hint"),
        ("Country code", "country_code"),
    ),
    uses_geo=True,
    share_path="brainwave/capitale",
)

CITY = Domain(
    name="city",
    title="Citadle",
    comparator="free_text",
    normalization=PLACE_PROFILE,
    hint_schema=(
        ("Continent", "continent"),
        ("Country", "country"),
        ("Population", "population"),
        ("Region", "region"),
        ("Famous for", "famous_for"),
        ("Hint", "hint"),
    ),
    uses_geo=True,
    share_path="brainwave/citadle",
)

PLANT = Domain(
    name="plant",
    title="Botanle",
    comparator="free_text",
    hint_schema=(
        ("Category", "category"),
        ("Native region", "native_region"),
        ("Family", "family"),
        ("Flower color", "flower_color"),
        ("Uses", "uses"),
        ("Hint", "hint"),
    ),
    validate_entries=False,
    share_path="brainwave/botanle",
)

SONG = Domain(
    name="song",
    title="Songle",
    comparator="free_text",
    normalization=SONG_PROFILE,
    hint_schema=(
        ("Decade", "decade"),
        ("Genre", "genre"),
        ("Release year", "release_year"),
        ("Artist", "artist"),
        ("Album", "album"),
        ("Lyric", "lyric"),
    ),
    validate_entries=False,
    share_path="brainwave/songle",
)

DATE_EVENT = Domain(
    name="date-event",
    title="Historidle",
    comparator="free_text",
    normalization=TITLE_PROFILE,
    hint_schema=(
        ("Category", "category"),
        ("Type", "type"),
        ("First date", "first_date"),
        ("Last date", "last_date"),
        ("Middle date", "middle_date"),
        ("Hint", "hint"),
    ),
    validate_entries=False,
    share_path="brainwave/historidle",
)

TRIVIA_TERM = Domain(
    name="trivia-term",
    title="Trordle",
    comparator="letters",
    hint_schema=(
        ("Category", "category"),
        ("Definition", "definition"),
        ("Example", "example"),
        ("Hint", "hint"),
    ),
    share_path="brainwave/trordle",
)

BUILTIN_DOMAINS: Tuple[Domain, ...] = (CAPITAL, CITY, PLANT, SONG, DATE_EVENT, TRIVIA_TERM)
