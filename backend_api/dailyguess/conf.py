"""
App settings.

All options live in one ``DAILYGUESS`` dict in the Django settings module;
anything missing falls back to DEFAULTS.

    DAILYGUESS = {
        "RESULTS_SINK": "http",
        "RESULTS_SINK_URL": "https://results.example.com/puzzle_results",
        "DOMAIN_OVERRIDES": {"plant": {"partial_match_score": 0.7}},
    }
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict

from django.conf import settings

from .puzzles import Domain, get_domain

DEFAULTS: Dict[str, Any] = {
    # database | http | none
    "RESULTS_SINK": "database",
    "RESULTS_SINK_URL": None,
    "RESULTS_SINK_TIMEOUT": 5.0,
    "IMAGE_LOOKUP_TIMEOUT": 5.0,
    "SHARE_BASE_URL": "https://triviaah.com",
    "PUZZLE_EPOCH": "2024-01-01",
    "DOMAIN_OVERRIDES": {},
}


def app_setting(name: str) -> Any:
    user_settings = getattr(settings, "DAILYGUESS", None) or {}
    if name in user_settings:
        return user_settings[name]
    return DEFAULTS[name]


# PUBLIC_INTERFACE
def configured_domain(name: str) -> Domain:
    """Registered domain with any threshold overrides from settings applied.

    Raises:
        KeyError: unknown domain.
    """
    domain = get_domain(name)
    overrides = (app_setting("DOMAIN_OVERRIDES") or {}).get(domain.name)
    return domain.with_overrides(**overrides) if overrides else domain


def puzzle_epoch() -> date:
    value = app_setting("PUZZLE_EPOCH")
    return value if isinstance(value, date) else date.fromisoformat(value)


def share_url(domain: Domain) -> str:
    base = str(app_setting("SHARE_BASE_URL")).rstrip("/")
    return f"{base}/{domain.share_path}".rstrip("/")
