from datetime import date
from unittest import mock

from django.test import override_settings
from django.urls import reverse
from rest_framework.test import APITestCase

from dailyguess.models import DailyPuzzle, LexiconEntry, PuzzleResult, StoredSession
from dailyguess.seed_utils import CAPITALS, ensure_daily_puzzles, ensure_seed_lexicon

DAY = "2024-02-12"


class DailyGuessApiTests(APITestCase):
    def setUp(self):
        ensure_seed_lexicon()
        DailyPuzzle.objects.create(
            domain="capital",
            puzzle_date=date(2024, 2, 12),
            answer="Paris",
            display_fields={"continent": "Europe", "country": "France", "latitude": 48.8566, "longitude": 2.3522},
            valid_aliases=["Paree"],
        )

    def guess(self, text, player="guest-1", **extra):
        payload = {"domain": "capital", "player_id": player, "guess": text, "date": DAY}
        payload.update(extra)
        return self.client.post(reverse("guess"), payload, format="json")

    def test_health(self):
        resp = self.client.get(reverse("Health"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Server is up!"})

    def test_domains(self):
        resp = self.client.get(reverse("domains"))
        self.assertEqual(resp.status_code, 200)
        by_name = {d["name"]: d for d in resp.json()}
        self.assertEqual(by_name["capital"]["title"], "Capitale")
        self.assertTrue(by_name["capital"]["uses_geo"])
        self.assertEqual(by_name["song"]["comparator"], "free_text")

    def test_today_puzzle_hides_answer(self):
        resp = self.client.get(reverse("today-puzzle", kwargs={"domain": "capital"}), {"date": DAY})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["puzzle_number"], 42)
        self.assertEqual(data["hint_count"], 2)
        self.assertNotIn("answer", data)

    def test_unavailable_puzzle(self):
        resp = self.client.get(reverse("today-puzzle", kwargs={"domain": "capital"}), {"date": "2030-01-01"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["status"], "UNAVAILABLE")

    def test_unknown_domain(self):
        resp = self.client.get(reverse("today-puzzle", kwargs={"domain": "planets"}), {"date": DAY})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "unknown_domain")

    def test_session_requires_player(self):
        resp = self.client.get(reverse("session-state", kwargs={"domain": "capital"}), {"date": DAY})
        self.assertEqual(resp.status_code, 400)

    def test_guess_and_win(self):
        resp = self.guess("Berlin")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertFalse(data["attempt"]["is_correct"])
        self.assertEqual(data["attempt"]["geo_hint"]["direction"], "W")
        self.assertEqual(data["session"]["status"], "playing")
        self.assertEqual(data["session"]["remaining_attempts"], 5)
        self.assertEqual(data["session"]["hints"], [{"label": "Continent", "value": "Europe"}])
        self.assertIsNone(data["session"]["answer"])

        resp = self.guess("paris")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["attempt"]["is_correct"])
        self.assertEqual(data["attempt"]["feedback"], ["correct"] * 5)
        self.assertEqual(data["session"]["status"], "won")
        self.assertEqual(data["session"]["answer"], "Paris")

        result = PuzzleResult.objects.get()
        self.assertEqual((result.domain, result.success, result.attempts), ("capital", True, 2))

    def test_rejected_guesses(self):
        self.guess("Berlin")
        resp = self.guess("Atlantis")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "unknown_entry")
        resp = self.guess("BERLIN")
        self.assertEqual(resp.json()["code"], "duplicate_guess")
        resp = self.guess("   ")
        self.assertEqual(resp.json()["code"], "empty_guess")

        state = self.client.get(
            reverse("session-state", kwargs={"domain": "capital"}), {"player_id": "guest-1", "date": DAY}
        ).json()
        self.assertEqual(state["attempts_used"], 1)

    def test_finished_session_rejects_guesses(self):
        self.guess("Paris")
        resp = self.guess("Rome")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "session_finished")

    def test_sessions_are_per_player(self):
        self.guess("Berlin", player="guest-1")
        self.guess("Rome", player="guest-2")
        self.assertEqual(StoredSession.objects.count(), 2)
        state = self.client.get(
            reverse("session-state", kwargs={"domain": "capital"}), {"player_id": "guest-2", "date": DAY}
        ).json()
        self.assertEqual([a["guess_raw"] for a in state["attempts"]], ["Rome"])

    def test_hard_mode_hint(self):
        self.client.get(
            reverse("session-state", kwargs={"domain": "capital"}),
            {"player_id": "guest-1", "date": DAY, "hard_mode": "true"},
        )
        data = self.guess("Berlin").json()
        self.assertTrue(data["session"]["hard_mode"])
        self.assertEqual(data["session"]["hints"], [])

        resp = self.client.post(
            reverse("request-hint"), {"domain": "capital", "player_id": "guest-1", "date": DAY}, format="json"
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["hint"], {"label": "Continent", "value": "Europe"})

        resp = self.client.post(
            reverse("request-hint"), {"domain": "capital", "player_id": "guest-1", "date": DAY}, format="json"
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "hint_unavailable")

    def test_share_text(self):
        resp = self.client.get(reverse("share", kwargs={"domain": "capital"}), {"player_id": "guest-1", "date": DAY})
        self.assertEqual(resp.status_code, 409)

        self.guess("Rome")
        self.guess("Paris")
        resp = self.client.get(reverse("share", kwargs={"domain": "capital"}), {"player_id": "guest-1", "date": DAY})
        self.assertEqual(resp.status_code, 200)
        text = resp.json()["text"]
        self.assertTrue(text.startswith("Capitale #42 2/6\n\n"))
        self.assertTrue(text.endswith("\n\nPlay daily at https://triviaah.com/brainwave/capitale"))

    @override_settings(DAILYGUESS={"SHARE_BASE_URL": "https://puzzles.example.com/", "PUZZLE_EPOCH": "2024-02-01"})
    def test_share_uses_configured_base_and_epoch(self):
        self.guess("Paris")
        text = self.client.get(
            reverse("share", kwargs={"domain": "capital"}), {"player_id": "guest-1", "date": DAY}
        ).json()["text"]
        self.assertTrue(text.startswith("Capitale #11 1/6"))
        self.assertTrue(text.endswith("Play daily at https://puzzles.example.com/brainwave/capitale"))

    def test_stats(self):
        self.guess("Paris", player="guest-1")
        for guess in ["Berlin", "Rome", "Madrid", "Lisbon", "Vienna", "Athens"]:
            self.guess(guess, player="guest-2")
        resp = self.client.get(reverse("domain-stats", kwargs={"domain": "capital"}))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"domain": "capital", "total_players": 2, "success_rate": 50, "average_attempts": 3.5},
        )

    @override_settings(DAILYGUESS={"RESULTS_SINK": "none"})
    def test_results_sink_can_be_disabled(self):
        self.guess("Paris")
        self.assertFalse(PuzzleResult.objects.exists())

    def test_puzzle_image(self):
        with mock.patch("dailyguess.services.puzzle_image", return_value="https://upload.wikimedia.org/paris.jpg"):
            resp = self.client.get(reverse("puzzle-image", kwargs={"domain": "capital"}), {"date": DAY})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["image_url"], "https://upload.wikimedia.org/paris.jpg")


class SeedTests(APITestCase):
    def test_seed_is_idempotent(self):
        self.assertEqual(ensure_seed_lexicon(), LexiconEntry.objects.count())
        self.assertEqual(ensure_seed_lexicon(), 0)
        self.assertEqual(ensure_daily_puzzles(date(2024, 3, 1)), 6)
        self.assertEqual(ensure_daily_puzzles(date(2024, 3, 1)), 0)

    def test_lexicon_entries_are_normalized(self):
        ensure_seed_lexicon()
        self.assertEqual(LexiconEntry.objects.filter(domain="capital").count(), len(CAPITALS))
        entry = LexiconEntry.objects.get(domain="city", name="Saint Petersburg")
        self.assertEqual(entry.normalized, "saint petersburg")

    def test_seeded_alias_wins(self):
        ensure_seed_lexicon()
        ensure_daily_puzzles(date(2024, 3, 1))
        resp = self.client.post(
            reverse("guess"),
            {"domain": "city", "player_id": "guest-1", "guess": "St. Petersburg", "date": "2024-03-01"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["attempt"]["is_correct"])
