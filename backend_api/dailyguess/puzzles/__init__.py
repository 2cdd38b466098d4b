"""
Guess-evaluation engine, hint policy and session state machine.

Exports:
- normalize and the normalization profiles
- diff / LetterDiffEngine / FreeTextEngine comparators
- similarity and score_guess
- geo hint helpers
- Domain descriptors and registries
- HintProgressionPolicy
- PuzzleSession and open_session
- share text rendering
- session store helpers and collaborator implementations

These modules are framework-agnostic and can be reused by views or services
without importing Django.
"""

from .collaborators import (
    HttpResultsSink,
    InMemoryLexicon,
    InMemoryPuzzleSource,
    MemoryResultsSink,
    NullResultsSink,
)
from .domains import BUILTIN_DOMAINS, Domain
from .engines import FreeTextEngine, LetterDiffEngine, diff
from .entities import LOST, MAX_ATTEMPTS, PLAYING, WON, Attempt, Coordinate, GeoHint, HintField, LetterResult, Puzzle
from .errors import (
    AttemptLimitReached,
    DuplicateGuess,
    EmptyGuess,
    GuessRejected,
    HintUnavailable,
    PuzzleUnavailable,
    SessionFinished,
    UnknownEntry,
)
from .events import SessionEvents
from .geo import DistanceBands, haversine_km
from .hints import HintProgressionPolicy, build_hint_fields
from .normalizer import NormalizationProfile, normalize
from .registry import DomainRegistry, EngineRegistry, get_domain, get_engine
from .session import PuzzleSession, open_session
from .share import number_for_date, render
from .similarity import SimilarityBands, similarity, score_guess
from .store import InMemorySessionStore, session_key

__all__ = [
    "Attempt",
    "AttemptLimitReached",
    "BUILTIN_DOMAINS",
    "Coordinate",
    "DistanceBands",
    "Domain",
    "DomainRegistry",
    "DuplicateGuess",
    "EmptyGuess",
    "EngineRegistry",
    "FreeTextEngine",
    "GeoHint",
    "GuessRejected",
    "HintField",
    "HintProgressionPolicy",
    "HintUnavailable",
    "HttpResultsSink",
    "InMemoryLexicon",
    "InMemoryPuzzleSource",
    "InMemorySessionStore",
    "LOST",
    "LetterDiffEngine",
    "LetterResult",
    "MAX_ATTEMPTS",
    "MemoryResultsSink",
    "NormalizationProfile",
    "NullResultsSink",
    "PLAYING",
    "Puzzle",
    "PuzzleSession",
    "PuzzleUnavailable",
    "SessionEvents",
    "SessionFinished",
    "SimilarityBands",
    "UnknownEntry",
    "WON",
    "build_hint_fields",
    "diff",
    "get_domain",
    "get_engine",
    "haversine_km",
    "normalize",
    "number_for_date",
    "open_session",
    "render",
    "score_guess",
    "session_key",
    "similarity",
]
