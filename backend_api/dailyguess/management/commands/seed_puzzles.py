from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from dailyguess.seed_utils import ensure_daily_puzzles, ensure_seed_lexicon


class Command(BaseCommand):
    help = "Seed the lexicon and schedule one playable puzzle per domain for a day."

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Puzzle day as YYYY-MM-DD (defaults to today).")

    def handle(self, *args, **options):
        # PUBLIC_INTERFACE
        # This command is idempotent and safe to run multiple times.
        day = None
        if options.get("date"):
            try:
                day = date.fromisoformat(options["date"])
            except ValueError:
                raise CommandError(f"Invalid --date {options['date']!r}; expected YYYY-MM-DD.")

        entries = ensure_seed_lexicon()
        if entries:
            self.stdout.write(self.style.SUCCESS(f"Seeded {entries} lexicon entries."))
        else:
            self.stdout.write(self.style.WARNING("Lexicon already present. No entries added."))

        created = ensure_daily_puzzles(day)
        label = (day or timezone.localdate()).isoformat()
        if created:
            self.stdout.write(self.style.SUCCESS(f"Scheduled {created} puzzles for {label}."))
        else:
            self.stdout.write(self.style.WARNING(f"Puzzles for {label} already scheduled. No action taken."))
