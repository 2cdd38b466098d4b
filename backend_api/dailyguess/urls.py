from django.urls import path
from .views import (
    health,
    list_domains,
    today_puzzle,
    puzzle_image,
    session_state,
    submit_guess,
    request_hint,
    share_text,
    domain_stats,
)

urlpatterns = [
    path('health/', health, name='Health'),
    path('domains', list_domains, name='domains'),
    path('puzzles/<str:domain>/today', today_puzzle, name='today-puzzle'),
    path('puzzles/<str:domain>/image', puzzle_image, name='puzzle-image'),
    path('sessions/<str:domain>', session_state, name='session-state'),
    path('guess', submit_guess, name='guess'),
    path('hint', request_hint, name='request-hint'),
    path('share/<str:domain>', share_text, name='share'),
    path('stats/<str:domain>', domain_stats, name='domain-stats'),
]
