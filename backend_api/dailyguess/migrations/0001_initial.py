from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DailyPuzzle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("domain", models.CharField(db_index=True, max_length=32)),
                ("puzzle_date", models.DateField(db_index=True)),
                ("answer", models.CharField(max_length=128)),
                ("display_fields", models.JSONField(blank=True, default=dict)),
                ("valid_aliases", models.JSONField(blank=True, default=list)),
                ("hint_fields", models.JSONField(blank=True, default=list)),
            ],
            options={
                "verbose_name": "Daily Puzzle",
                "verbose_name_plural": "Daily Puzzles",
                "ordering": ["-puzzle_date", "domain"],
                "unique_together": {("domain", "puzzle_date")},
            },
        ),
        migrations.CreateModel(
            name="LexiconEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("domain", models.CharField(db_index=True, max_length=32)),
                ("name", models.CharField(max_length=128)),
                ("normalized", models.CharField(db_index=True, max_length=128)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Lexicon Entry",
                "verbose_name_plural": "Lexicon Entries",
                "ordering": ["domain", "normalized"],
                "unique_together": {("domain", "normalized")},
            },
        ),
        migrations.CreateModel(
            name="StoredSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("owner", models.CharField(db_index=True, max_length=64)),
                ("key", models.CharField(max_length=128)),
                ("payload", models.JSONField(default=dict)),
            ],
            options={
                "verbose_name": "Stored Session",
                "verbose_name_plural": "Stored Sessions",
                "ordering": ["-updated_at"],
                "unique_together": {("owner", "key")},
            },
        ),
        migrations.CreateModel(
            name="PuzzleResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("domain", models.CharField(db_index=True, max_length=32)),
                ("success", models.BooleanField(default=False)),
                ("attempts", models.PositiveSmallIntegerField()),
            ],
            options={
                "verbose_name": "Puzzle Result",
                "verbose_name_plural": "Puzzle Results",
                "ordering": ["-created_at"],
            },
        ),
    ]
