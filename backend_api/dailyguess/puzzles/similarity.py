from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

DEFAULT_PARTIAL_MATCH_SCORE = 0.8
MIN_TOKEN_LENGTH = 3


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


# PUBLIC_INTERFACE
def similarity(a: str, b: str) -> float:
    """Closeness of two normalized strings in [0, 1]; 1.0 means identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - edit_distance(a, b)) / longest


def _partial_token_match(guess: str, candidate: str) -> bool:
    for token in candidate.split():
        if len(token) < MIN_TOKEN_LENGTH or len(guess) < MIN_TOKEN_LENGTH:
            continue
        if token in guess or guess in token:
            return True
    return False


# PUBLIC_INTERFACE
def score_guess(
    guess: str,
    candidates: Iterable[str],
    partial_match_score: float = DEFAULT_PARTIAL_MATCH_SCORE,
) -> float:
    """Score a normalized guess against every accepted form of the answer.

    Exact match scores 1.0. A guess that is a word-level substring or
    superstring of any candidate token (e.g. the genus of a species) gets
    partial_match_score. Otherwise the best edit-distance similarity wins.
    """
    candidates = [c for c in candidates if c]
    if guess in candidates:
        return 1.0
    if any(_partial_token_match(guess, c) for c in candidates):
        return partial_match_score
    return max((similarity(guess, c) for c in candidates), default=0.0)


@dataclass(frozen=True)
class SimilarityBands:
    """Maps a similarity score to warm/cold feedback.

    Each band is (exclusive lower bound, label), checked from the top.
    """

    bands: Tuple[Tuple[float, str], ...] = (
        (0.9, "Very close! Check the spelling."),
        (0.7, "Close!"),
        (0.5, "Getting warmer."),
    )
    fallback: str = "Keep guessing!"

    def label_for(self, score: float) -> str:
        for threshold, label in sorted(self.bands, reverse=True):
            if score > threshold:
                return label
        return self.fallback
