from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from .entities import LetterFeedback, LetterResult
from .similarity import DEFAULT_PARTIAL_MATCH_SCORE, score_guess


@runtime_checkable
class Engine(Protocol):
    """Protocol for guess comparators."""

    # PUBLIC_INTERFACE
    def evaluate(self, target: str, guess: str, accepted: Iterable[str] = ()) -> Dict[str, Any]:
        """Evaluate a normalized guess against a normalized target.

        Returns a dict:
        {
            "letters": List[LetterResult],   # same length as guess
            "is_correct": bool,
            "similarity": Optional[float],
            "metadata": Dict[str, Any]
        }
        """


def _compute_letter_feedback(guess: str, target: str) -> List[LetterFeedback]:
    """Two-pass per-letter feedback that never over-claims repeated letters.

    - correct: same letter at the same position; that target slot is consumed
    - present: letter exists in an unconsumed target slot elsewhere; one slot consumed
    - absent: everything else, including guess positions past the end of the target
    """
    remaining: List[Optional[str]] = list(target)
    result: List[LetterFeedback] = ["absent"] * len(guess)

    for i, ch in enumerate(guess):
        if i < len(remaining) and remaining[i] == ch:
            result[i] = "correct"
            remaining[i] = None

    for i, ch in enumerate(guess):
        if result[i] == "correct":
            continue
        try:
            slot = remaining.index(ch)
        except ValueError:
            continue
        result[i] = "present"
        remaining[slot] = None

    return result


# PUBLIC_INTERFACE
def diff(guess: str, target: str) -> List[LetterResult]:
    """Per-character statuses between two pre-normalized strings of any length."""
    statuses = _compute_letter_feedback(guess, target)
    return [LetterResult(letter=ch, status=st, position=i) for i, (ch, st) in enumerate(zip(guess, statuses))]


@dataclass
class LetterDiffEngine:
    """Fixed-answer engine using Wordle-style letter feedback only."""

    # PUBLIC_INTERFACE
    def diff(self, guess: str, target: str) -> List[LetterResult]:
        return diff(guess, target)

    # PUBLIC_INTERFACE
    def evaluate(self, target: str, guess: str, accepted: Iterable[str] = ()) -> Dict[str, Any]:
        """Letter diff against the canonical target; correctness against any accepted form."""
        accepted_set = set(accepted) | {target}
        return {
            "letters": self.diff(guess, target),
            "is_correct": guess in accepted_set,
            "similarity": None,
            "metadata": {"engine": "letters"},
        }


@dataclass
class FreeTextEngine(LetterDiffEngine):
    """Engine for open-ended names (plants, songs, cities).

    Adds a closeness score on top of the letter diff so a near miss can be
    reported as warm or cold.
    """

    partial_match_score: float = DEFAULT_PARTIAL_MATCH_SCORE

    # PUBLIC_INTERFACE
    def evaluate(self, target: str, guess: str, accepted: Iterable[str] = ()) -> Dict[str, Any]:
        candidates = [target, *accepted]
        result = super().evaluate(target, guess, candidates)
        result["similarity"] = score_guess(guess, candidates, self.partial_match_score)
        result["metadata"] = {"engine": "free_text"}
        return result
