from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers


STATUS_CHOICES = ["playing", "won", "lost"]
FEEDBACK_CHOICES = ["correct", "present", "absent"]


def _normalize_player_id(value: str) -> str:
    """Guest ids are opaque; only surrounding whitespace is dropped."""
    return (value or "").strip()


# PUBLIC_INTERFACE
class SessionQuerySerializer(serializers.Serializer):
    """Query parameters identifying a player's session.

    Fields:
    - player_id: guest identifier the session is stored under
    - date (optional): puzzle day, defaults to today
    - hard_mode (optional): only applied when a new session is created
    """

    player_id = serializers.CharField(max_length=64)
    date = serializers.DateField(required=False)
    hard_mode = serializers.BooleanField(required=False, default=False)

    def validate_player_id(self, value: str) -> str:
        value = _normalize_player_id(value)
        if not value:
            raise serializers.ValidationError("player_id must not be blank.")
        return value


# PUBLIC_INTERFACE
class PuzzleQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


# PUBLIC_INTERFACE
class GuessRequestSerializer(SessionQuerySerializer):
    """Request payload to submit a guess.

    The guess itself is checked by the session (blank, duplicate, unknown
    entry); this serializer only ensures it is a string.
    """

    domain = serializers.CharField(max_length=32)
    guess = serializers.CharField(allow_blank=True, trim_whitespace=False, max_length=128)


# PUBLIC_INTERFACE
class HintRequestSerializer(SessionQuerySerializer):
    """Request payload for a hard-mode hint."""

    domain = serializers.CharField(max_length=32)


# PUBLIC_INTERFACE
class HintFieldSerializer(serializers.Serializer):
    label = serializers.CharField()
    value = serializers.CharField()


# PUBLIC_INTERFACE
class LetterResultSerializer(serializers.Serializer):
    letter = serializers.CharField()
    status = serializers.ChoiceField(choices=FEEDBACK_CHOICES)
    position = serializers.IntegerField()


# PUBLIC_INTERFACE
class GeoHintSerializer(serializers.Serializer):
    distance_km = serializers.FloatField()
    direction = serializers.CharField()
    label = serializers.CharField(allow_blank=True)


# PUBLIC_INTERFACE
class AttemptSerializer(serializers.Serializer):
    """One recorded attempt with its feedback."""

    guess_raw = serializers.CharField()
    guess_normalized = serializers.CharField()
    letters = LetterResultSerializer(many=True)
    feedback = serializers.ListField(child=serializers.ChoiceField(choices=FEEDBACK_CHOICES))
    is_correct = serializers.BooleanField()
    similarity = serializers.FloatField(allow_null=True, required=False)
    geo_hint = GeoHintSerializer(allow_null=True, required=False)
    warmth = serializers.CharField(allow_null=True, required=False)


# PUBLIC_INTERFACE
class SessionStateSerializer(serializers.Serializer):
    """Session state; answer is null until the session is finished."""

    domain = serializers.CharField()
    puzzle_id = serializers.CharField()
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    hard_mode = serializers.BooleanField()
    attempts = AttemptSerializer(many=True)
    attempts_used = serializers.IntegerField()
    remaining_attempts = serializers.IntegerField()
    hints = HintFieldSerializer(many=True)
    hints_unlocked = serializers.IntegerField()
    answer = serializers.CharField(allow_null=True)


# PUBLIC_INTERFACE
class GuessResponseSerializer(serializers.Serializer):
    attempt = AttemptSerializer()
    session = SessionStateSerializer()


# PUBLIC_INTERFACE
class HintResponseSerializer(serializers.Serializer):
    hint = HintFieldSerializer()
    session = SessionStateSerializer()


# PUBLIC_INTERFACE
class PuzzleSerializer(serializers.Serializer):
    """Public puzzle info; the answer is never included."""

    puzzle_id = serializers.CharField()
    domain = serializers.CharField()
    puzzle_date = serializers.DateField(allow_null=True)
    puzzle_number = serializers.IntegerField()
    answer_length = serializers.IntegerField()
    hint_count = serializers.IntegerField()


# PUBLIC_INTERFACE
class DomainSerializer(serializers.Serializer):
    name = serializers.CharField()
    title = serializers.CharField()
    comparator = serializers.CharField()
    uses_geo = serializers.BooleanField()
    hint_schema = serializers.ListField(child=serializers.CharField())

    def to_representation(self, instance: Any) -> Dict[str, Any]:
        if not isinstance(instance, dict):
            instance = {
                "name": instance.name,
                "title": instance.title,
                "comparator": instance.comparator,
                "uses_geo": instance.uses_geo,
                "hint_schema": [label for label, _ in instance.hint_schema],
            }
        return super().to_representation(instance)


# PUBLIC_INTERFACE
class ShareResponseSerializer(serializers.Serializer):
    domain = serializers.CharField()
    puzzle_id = serializers.CharField()
    text = serializers.CharField()


# PUBLIC_INTERFACE
class ImageResponseSerializer(serializers.Serializer):
    puzzle_id = serializers.CharField()
    image_url = serializers.URLField(allow_null=True)


# PUBLIC_INTERFACE
class StatsResponseSerializer(serializers.Serializer):
    """Aggregate results reported for a domain."""

    domain = serializers.CharField()
    total_players = serializers.IntegerField()
    success_rate = serializers.IntegerField(help_text="Percentage of reported sessions that were won.")
    average_attempts = serializers.FloatField()
