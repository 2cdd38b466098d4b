from __future__ import annotations

from django.db import models


# PUBLIC_INTERFACE
class TimeStampedModel(models.Model):
    """Abstract base model providing created/updated timestamps.

    Notes:
        Keep this abstract model free of any logic that would access the Django
        app registry or execute queries at module import time.
    """
    created_at = models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")
    updated_at = models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")

    class Meta:
        abstract = True


# PUBLIC_INTERFACE
class DailyPuzzle(TimeStampedModel):
    """A puzzle scheduled for one calendar day in one domain.

    Fields:
    - domain: domain name (capital, city, plant, song, date-event, trivia-term)
    - puzzle_date: the day this puzzle is served
    - answer: canonical answer in display form
    - display_fields: domain-specific attributes (country, latitude, artist, ...)
    - valid_aliases: list of alternate accepted spellings
    - hint_fields: optional explicit [{label, value}] list; derived from
      display_fields and the domain hint schema when empty
    """
    domain = models.CharField(max_length=32, db_index=True)
    puzzle_date = models.DateField(db_index=True)
    answer = models.CharField(max_length=128)
    display_fields = models.JSONField(default=dict, blank=True)
    valid_aliases = models.JSONField(default=list, blank=True)
    hint_fields = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["-puzzle_date", "domain"]
        unique_together = (("domain", "puzzle_date"),)
        verbose_name = "Daily Puzzle"
        verbose_name_plural = "Daily Puzzles"

    def save(self, *args, **kwargs):
        if self.domain:
            self.domain = self.domain.strip().lower()
        if self.answer:
            self.answer = self.answer.strip()
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.domain} {self.puzzle_date}: {self.answer}"


# PUBLIC_INTERFACE
class LexiconEntry(TimeStampedModel):
    """A recognized answer for a domain (a real capital, city, ...).

    Fields:
    - domain: domain name
    - name: display name
    - normalized: name after the domain's normalization, used for lookups
    - latitude/longitude: optional location for geo hints
    """
    domain = models.CharField(max_length=32, db_index=True)
    name = models.CharField(max_length=128)
    normalized = models.CharField(max_length=128, db_index=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    class Meta:
        ordering = ["domain", "normalized"]
        unique_together = (("domain", "normalized"),)
        verbose_name = "Lexicon Entry"
        verbose_name_plural = "Lexicon Entries"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.domain}: {self.name}"


# PUBLIC_INTERFACE
class StoredSession(TimeStampedModel):
    """Durable key-value row holding one serialized PuzzleSession.

    Fields:
    - owner: guest/player identifier namespacing the key
    - key: "{domain}-{puzzle_id}"
    - payload: versioned JSON snapshot {version, attempts, status, hard_mode, hints_requested}
    """
    owner = models.CharField(max_length=64, db_index=True)
    key = models.CharField(max_length=128)
    payload = models.JSONField(default=dict)

    class Meta:
        ordering = ["-updated_at"]
        unique_together = (("owner", "key"),)
        verbose_name = "Stored Session"
        verbose_name_plural = "Stored Sessions"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.owner}/{self.key}"


# PUBLIC_INTERFACE
class PuzzleResult(TimeStampedModel):
    """Outcome of a finished session as reported to the results sink."""
    domain = models.CharField(max_length=32, db_index=True)
    success = models.BooleanField(default=False)
    attempts = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Puzzle Result"
        verbose_name_plural = "Puzzle Results"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.domain}: {'won' if self.success else 'lost'} in {self.attempts}"
