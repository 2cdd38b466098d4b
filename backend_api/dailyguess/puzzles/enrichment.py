"""
Optional enrichment lookups (illustrative images).

Lookups are best-effort: every failure degrades to ``None``. A caller that
keeps its own LatestOnlyGuard has results for a puzzle it moved away from
discarded.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Optional

import requests

logger = logging.getLogger(__name__)

WIKIMEDIA_API_URL = "https://commons.wikimedia.org/w/api.php"
DEFAULT_CACHE_SIZE = 256


# PUBLIC_INTERFACE
class LatestOnlyGuard:
    """Tracks one caller's current puzzle id so stale lookup results can be dropped.

    Each player (or client connection) owns its own guard; a guard shared
    between unrelated callers would drop their valid results.

    Usage:
        guard.begin(puzzle_id)
        result = slow_lookup()
        if guard.accept(puzzle_id):
            use(result)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: Optional[str] = None

    def begin(self, puzzle_id: str) -> str:
        with self._lock:
            self._current = puzzle_id
            return puzzle_id

    def accept(self, puzzle_id: str) -> bool:
        with self._lock:
            return self._current == puzzle_id


# PUBLIC_INTERFACE
class WikimediaImageLookup:
    """First Wikimedia Commons image URL for a search term, or None.

    Safe to share across requests: it holds no per-caller state, and the
    result cache keeps at most ``cache_size`` terms (least recently used
    evicted first).
    """

    def __init__(
        self,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.cache_size = cache_size
        self._cache: "OrderedDict[str, Optional[str]]" = OrderedDict()
        self._cache_lock = threading.Lock()

    def _cached(self, term: str):
        with self._cache_lock:
            if term not in self._cache:
                return False, None
            self._cache.move_to_end(term)
            return True, self._cache[term]

    def _remember(self, term: str, url: Optional[str]) -> None:
        with self._cache_lock:
            self._cache[term] = url
            self._cache.move_to_end(term)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)

    def fetch(self, term: str) -> Optional[str]:
        hit, url = self._cached(term)
        if hit:
            return url
        params = {
            "action": "query",
            "generator": "search",
            "gsrsearch": term,
            "gsrnamespace": 6,
            "gsrlimit": 5,
            "prop": "imageinfo",
            "iiprop": "url",
            "format": "json",
        }
        try:
            response = self.session.get(WIKIMEDIA_API_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
            pages = (response.json().get("query") or {}).get("pages") or {}
        except (requests.RequestException, ValueError) as exc:
            logger.info("Image lookup for %r failed: %s", term, exc)
            return None

        url = None
        for page in sorted(pages.values(), key=lambda p: p.get("index", 0)):
            info = page.get("imageinfo") or []
            if info and info[0].get("url"):
                url = info[0]["url"]
                break
        self._remember(term, url)
        return url

    # PUBLIC_INTERFACE
    def image_for_puzzle(self, puzzle_id: str, *terms: str, guard: Optional[LatestOnlyGuard] = None) -> Optional[str]:
        """Try each search term in order.

        With a guard, the result is dropped when the guard's owner began a
        lookup for another puzzle meanwhile.
        """
        if guard is not None:
            guard.begin(puzzle_id)
        url = None
        for term in terms:
            url = self.fetch(term)
            if url:
                break
        if guard is not None and not guard.accept(puzzle_id):
            logger.debug("Discarding stale image result for puzzle %s", puzzle_id)
            return None
        return url
