"""
Daily guess app package initializer.

Re-exports the engine entry points so callers can import from dailyguess
directly, e.g.:

    from dailyguess import get_domain, open_session
"""

# PUBLIC_INTERFACE
from .puzzles import (
    Domain,
    DomainRegistry,
    PuzzleSession,
    get_domain,
    get_engine,
    open_session,
    render,
)

__all__ = [
    "Domain",
    "DomainRegistry",
    "PuzzleSession",
    "get_domain",
    "get_engine",
    "open_session",
    "render",
]
