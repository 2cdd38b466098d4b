from __future__ import annotations

from typing import Union

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from . import services
from .backends import result_stats
from .conf import configured_domain
from .puzzles import DomainRegistry, GuessRejected, HintUnavailable, Puzzle, PuzzleSession, PuzzleUnavailable
from .serializers import (
    DomainSerializer,
    GuessRequestSerializer,
    GuessResponseSerializer,
    HintRequestSerializer,
    HintResponseSerializer,
    ImageResponseSerializer,
    PuzzleQuerySerializer,
    PuzzleSerializer,
    SessionQuerySerializer,
    SessionStateSerializer,
    ShareResponseSerializer,
    StatsResponseSerializer,
)

_player_param = openapi.Parameter("player_id", openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True)
_date_param = openapi.Parameter(
    "date", openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE, required=False
)
_hard_mode_param = openapi.Parameter("hard_mode", openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN, required=False)


def _unknown_domain(name: str) -> Response:
    return Response(
        {"error": f"Unknown domain: {name}", "code": "unknown_domain"},
        status=status.HTTP_404_NOT_FOUND,
    )


def _unavailable(exc: PuzzleUnavailable) -> Response:
    return Response({"error": str(exc), "status": "UNAVAILABLE"}, status=status.HTTP_404_NOT_FOUND)


def _rejected(exc: ValueError) -> Response:
    return Response(
        {"error": str(exc), "code": getattr(exc, "code", "invalid_request")},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _known_domain(name: str) -> bool:
    try:
        configured_domain(name)
    except KeyError:
        return False
    return True


def _load(domain: str, vd) -> Union[PuzzleSession, Response]:
    """Resolve the session for validated request data or return an error response."""
    if not _known_domain(domain):
        return _unknown_domain(domain)
    try:
        return services.load_session(domain, vd["player_id"], vd.get("date"), vd.get("hard_mode", False))
    except PuzzleUnavailable as exc:
        return _unavailable(exc)


def _daily_puzzle(domain: str, request) -> Union[Puzzle, Response]:
    query = PuzzleQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    if not _known_domain(domain):
        return _unknown_domain(domain)
    try:
        return services.get_daily_puzzle(domain, query.validated_data.get("date"))
    except PuzzleUnavailable as exc:
        return _unavailable(exc)


# PUBLIC_INTERFACE
@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health(request):
    """Health check endpoint for the API.

    Returns:
    - 200 OK with {"message": "Server is up!"}
    """
    return Response({"message": "Server is up!"})


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="list_domains",
    operation_summary="List puzzle domains",
    operation_description="Returns every registered domain with its comparator and hint labels.",
    responses={200: DomainSerializer(many=True)},
    tags=["meta"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def list_domains(request):
    """List registered domains (capital, city, plant, song, date-event, trivia-term, ...)."""
    domains = [configured_domain(name) for name in DomainRegistry.names()]
    return Response(DomainSerializer(domains, many=True).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="today_puzzle",
    operation_summary="Get the daily puzzle",
    operation_description="""
Public information about the puzzle scheduled for a domain and day.
The answer is never included.

Query params:
- date (optional, YYYY-MM-DD): defaults to today

Response 404 with status UNAVAILABLE when nothing is scheduled.
""",
    manual_parameters=[_date_param],
    responses={200: PuzzleSerializer},
    tags=["puzzles"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def today_puzzle(request, domain: str):
    """Return the day's puzzle metadata for a domain."""
    puzzle = _daily_puzzle(domain, request)
    if isinstance(puzzle, Response):
        return puzzle
    return Response(PuzzleSerializer(services.describe_puzzle(puzzle)).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="puzzle_image",
    operation_summary="Get an illustrative image for the daily puzzle",
    operation_description="Best-effort Wikimedia Commons lookup; image_url is null when nothing is found.",
    manual_parameters=[_date_param],
    responses={200: ImageResponseSerializer},
    tags=["puzzles"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def puzzle_image(request, domain: str):
    """Return an image URL for the day's puzzle, or null."""
    puzzle = _daily_puzzle(domain, request)
    if isinstance(puzzle, Response):
        return puzzle
    resp = {"puzzle_id": puzzle.id, "image_url": services.puzzle_image(puzzle)}
    return Response(ImageResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="session_state",
    operation_summary="Restore or start a session",
    operation_description="""
Returns the player's session for the day's puzzle, creating it on first access.

Query params:
- player_id (required): guest identifier
- date (optional): puzzle day, defaults to today
- hard_mode (optional): applied only when the session is created
""",
    manual_parameters=[_player_param, _date_param, _hard_mode_param],
    responses={200: SessionStateSerializer},
    tags=["game"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def session_state(request, domain: str):
    """Restore-or-create the session and return its state."""
    query = SessionQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    session = _load(domain, query.validated_data)
    if isinstance(session, Response):
        return session
    return Response(SessionStateSerializer(services.describe_session(session)).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="submit_guess",
    operation_summary="Submit a guess",
    operation_description="""
Evaluate a guess against the day's puzzle and record it.

Request body:
- domain (string, required)
- player_id (string, required)
- guess (string, required)
- date (optional)

Response 400 with {"error", "code"} when the guess is rejected
(empty_guess, duplicate_guess, unknown_entry, session_finished, attempt_limit_reached).
""",
    request_body=GuessRequestSerializer,
    responses={200: GuessResponseSerializer},
    tags=["game"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def submit_guess(request):
    """Submit a guess for the player's session."""
    serializer = GuessRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    session = _load(vd["domain"], vd)
    if isinstance(session, Response):
        return session
    try:
        attempt = session.submit_guess(vd["guess"])
    except GuessRejected as exc:
        return _rejected(exc)

    resp = {
        "attempt": services.describe_attempt(session, attempt),
        "session": services.describe_session(session),
    }
    return Response(GuessResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="request_hint",
    operation_summary="Request a hint (hard mode)",
    operation_description="""
Reveal the next unlocked hint of a hard-mode session.

Request body:
- domain (string, required)
- player_id (string, required)
- date (optional)

Response 400 with code hint_unavailable when the session is not in hard mode,
is finished, or has no further unlocked hint.
""",
    request_body=HintRequestSerializer,
    responses={200: HintResponseSerializer},
    tags=["game", "hints"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def request_hint(request):
    """Reveal the next hint for a hard-mode session."""
    serializer = HintRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    session = _load(vd["domain"], vd)
    if isinstance(session, Response):
        return session
    try:
        hint = session.request_hint()
    except HintUnavailable as exc:
        return _rejected(exc)

    resp = {"hint": hint.as_dict(), "session": services.describe_session(session)}
    return Response(HintResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="share_text",
    operation_summary="Get share text for a finished session",
    operation_description="Emoji grid share text. Response 409 while the session is still being played.",
    manual_parameters=[_player_param, _date_param],
    responses={200: ShareResponseSerializer},
    tags=["game"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def share_text(request, domain: str):
    """Render the share text for the player's finished session."""
    query = SessionQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    session = _load(domain, query.validated_data)
    if isinstance(session, Response):
        return session
    try:
        text = services.share_text(session)
    except ValueError as exc:
        return Response({"error": str(exc), "code": "session_in_progress"}, status=status.HTTP_409_CONFLICT)

    resp = {"domain": session.domain.name, "puzzle_id": session.puzzle_id, "text": text}
    return Response(ShareResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="domain_stats",
    operation_summary="Get aggregate results for a domain",
    operation_description="Total reported sessions, success rate (percent) and average attempts.",
    responses={200: StatsResponseSerializer},
    tags=["meta"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def domain_stats(request, domain: str):
    """Aggregate results reported by the database results sink."""
    if not _known_domain(domain):
        return _unknown_domain(domain)
    name = configured_domain(domain).name
    return Response(StatsResponseSerializer(result_stats(name)).data, status=status.HTTP_200_OK)
