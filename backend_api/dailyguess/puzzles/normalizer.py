from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Mapping

_APOSTROPHES = re.compile(r"['‘’ʼ`]")
_NON_WORD = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")

ARTICLES = ("the", "a", "an")

PLACE_ABBREVIATIONS: Mapping[str, str] = {
    "st": "saint",
    "ste": "sainte",
    "ft": "fort",
}


@dataclass(frozen=True)
class NormalizationProfile:
    """Per-domain normalization switches.

    - abbreviations: whole-token replacements applied after punctuation removal
    - strip_articles: drop one leading "the"/"a"/"an"
    - drop_spaces: remove every space (used for titles compared letter by letter)
    """

    abbreviations: Mapping[str, str] = field(default_factory=dict)
    strip_articles: bool = False
    drop_spaces: bool = False


DEFAULT_PROFILE = NormalizationProfile()
PLACE_PROFILE = NormalizationProfile(abbreviations=PLACE_ABBREVIATIONS)
TITLE_PROFILE = NormalizationProfile(strip_articles=True)
SONG_PROFILE = NormalizationProfile(strip_articles=True, drop_spaces=True)


def strip_diacritics(text: str) -> str:
    """Remove combining marks after compatibility decomposition."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


# PUBLIC_INTERFACE
def normalize(text: str, profile: NormalizationProfile = DEFAULT_PROFILE) -> str:
    """Canonicalize a free-text answer before any comparison.

    Example:
        normalize("  São Tomé ") == "sao tome"
        normalize("St. George's", PLACE_PROFILE) == "saint georges"
    """
    value = strip_diacritics(text or "").casefold()
    value = _APOSTROPHES.sub("", value)
    value = _NON_WORD.sub(" ", value)
    tokens = value.split()

    if profile.abbreviations:
        tokens = [profile.abbreviations.get(tok, tok) for tok in tokens]
    if profile.strip_articles and len(tokens) > 1 and tokens[0] in ARTICLES:
        tokens = tokens[1:]

    joiner = "" if profile.drop_spaces else " "
    return _WHITESPACE.sub(" ", joiner.join(tokens)).strip()
