from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

SESSION_CREATED = "session_created"
GUESS_SUBMITTED = "guess_submitted"
SESSION_FINISHED = "session_finished"

Listener = Callable[[str, dict], Any]


# PUBLIC_INTERFACE
class SessionEvents:
    """Synchronous event fan-out for session lifecycle transitions.

    Listeners receive (event_name, payload). A failing listener is logged and
    skipped; it never affects the session.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, event: str, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def subscribe_all(self, listener: Listener) -> None:
        for event in (SESSION_CREATED, GUESS_SUBMITTED, SESSION_FINISHED):
            self.subscribe(event, listener)

    def emit(self, event: str, **payload: Any) -> None:
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(event, payload)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event)
