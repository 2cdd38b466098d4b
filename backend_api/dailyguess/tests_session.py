import threading
from datetime import date
from unittest import mock

import requests
from django.test import SimpleTestCase

from dailyguess.puzzles import (
    AttemptLimitReached,
    Coordinate,
    DuplicateGuess,
    EmptyGuess,
    HintField,
    HintProgressionPolicy,
    HintUnavailable,
    HttpResultsSink,
    InMemoryLexicon,
    InMemoryPuzzleSource,
    InMemorySessionStore,
    MemoryResultsSink,
    Puzzle,
    PuzzleSession,
    SessionEvents,
    SessionFinished,
    UnknownEntry,
    build_hint_fields,
    get_domain,
    number_for_date,
    open_session,
    render,
)
from dailyguess.puzzles.enrichment import LatestOnlyGuard, WikimediaImageLookup
from dailyguess.puzzles.store import SCHEMA_VERSION, deserialize_session

GREEN = "\U0001F7E9"
YELLOW = "\U0001F7E8"
WHITE = "⬜"

CAPITAL = get_domain("capital")

LEXICON = InMemoryLexicon(
    {
        "capital": {
            "paris": Coordinate(48.8566, 2.3522),
            "berlin": Coordinate(52.52, 13.405),
            "rome": Coordinate(41.9028, 12.4964),
            "madrid": Coordinate(40.4168, -3.7038),
            "lisbon": Coordinate(38.7223, -9.1393),
            "vienna": Coordinate(48.2082, 16.3738),
            "athens": Coordinate(37.9838, 23.7275),
            "oslo": None,
        }
    }
)

LOSING_GUESSES = ["Berlin", "Rome", "Madrid", "Lisbon", "Vienna", "Athens"]


def make_puzzle(**overrides):
    fields = dict(
        id="p1",
        domain="capital",
        answer="Paris",
        display_fields={"latitude": 48.8566, "longitude": 2.3522},
        valid_aliases=frozenset({"Paree"}),
        hint_fields=(HintField("Continent", "Europe"), HintField("Country", "France"), HintField("Population", "2.1 million")),
        puzzle_date=date(2024, 2, 12),
    )
    fields.update(overrides)
    return Puzzle(**fields)


def make_session(**kwargs):
    kwargs.setdefault("lexicon", LEXICON)
    return PuzzleSession(make_puzzle(), CAPITAL, **kwargs)


class FailingSink:
    def report_result(self, domain, success, attempt_count):
        raise RuntimeError("results service down")


class FailingStore(InMemorySessionStore):
    def save(self, key, payload):
        raise IOError("disk full")


class FailingLexicon:
    def is_valid_entry(self, domain, normalized_guess):
        raise requests.ConnectionError("lexicon offline")

    def coordinate_for(self, domain, normalized_guess):
        raise requests.ConnectionError("lexicon offline")


class PuzzleSessionTests(SimpleTestCase):
    def test_six_misses_lose_and_seventh_is_rejected(self):
        session = make_session()
        for guess in LOSING_GUESSES:
            self.assertEqual(session.status, "playing")
            session.submit_guess(guess)
        self.assertEqual(session.status, "lost")
        self.assertEqual(len(session.attempts), 6)
        with self.assertRaises(SessionFinished):
            session.submit_guess("Oslo")
        self.assertEqual(len(session.attempts), 6)

    def test_win_is_terminal(self):
        session = make_session()
        session.submit_guess("Berlin")
        attempt = session.submit_guess("paris")
        self.assertTrue(attempt.is_correct)
        self.assertEqual(session.status, "won")
        self.assertEqual(session.remaining_attempts, 0)
        with self.assertRaises(SessionFinished):
            session.submit_guess("Rome")
        self.assertEqual(session.status, "won")

    def test_attempt_limit_guard(self):
        full = make_session()
        for guess in LOSING_GUESSES:
            full.submit_guess(guess)
        session = make_session(attempts=full.attempts)
        with self.assertRaises(AttemptLimitReached):
            session.submit_guess("Oslo")

    def test_constructor_rejects_bad_state(self):
        with self.assertRaises(ValueError):
            make_session(status="paused")

    def test_alias_is_correct_but_diff_uses_canonical_answer(self):
        session = make_session()
        attempt = session.submit_guess("Paree")
        self.assertTrue(attempt.is_correct)
        self.assertEqual("".join(r.letter for r in attempt.letters), "paree")
        self.assertEqual(attempt.letter_statuses, ["correct", "correct", "correct", "absent", "absent"])
        self.assertEqual(session.status, "won")

    def test_letter_statuses_match_normalized_length(self):
        attempt = make_session().submit_guess("  BERLIN ")
        self.assertEqual(attempt.guess_raw, "BERLIN")
        self.assertEqual(attempt.guess_normalized, "berlin")
        self.assertEqual(len(attempt.letter_statuses), 6)

    def test_empty_duplicate_and_unknown_leave_state_unchanged(self):
        session = make_session()
        session.submit_guess("Berlin")
        cases = [("   ", EmptyGuess), ("?!", EmptyGuess), ("berlin ", DuplicateGuess), ("Atlantis", UnknownEntry)]
        for raw, error in cases:
            with self.assertRaises(error):
                session.submit_guess(raw)
        self.assertEqual(len(session.attempts), 1)
        self.assertEqual(session.status, "playing")

    def test_rejection_codes(self):
        session = make_session()
        with self.assertRaises(UnknownEntry) as ctx:
            session.submit_guess("Atlantis")
        self.assertEqual(ctx.exception.code, "unknown_entry")

    def test_geo_hint_for_wrong_guess(self):
        attempt = make_session().submit_guess("Berlin")
        self.assertEqual(attempt.geo_hint.direction, "W")
        self.assertEqual(attempt.geo_hint.label, "Same country-scale")
        self.assertAlmostEqual(attempt.geo_hint.distance_km, 878, delta=10)

    def test_geo_hint_missing_coordinate_degrades(self):
        attempt = make_session().submit_guess("Oslo")
        self.assertIsNone(attempt.geo_hint)

    def test_failing_lexicon_accepts_guess(self):
        session = make_session(lexicon=FailingLexicon())
        with self.assertLogs("dailyguess.puzzles.session", level="WARNING"):
            attempt = session.submit_guess("Atlantis")
        self.assertFalse(attempt.is_correct)
        self.assertIsNone(attempt.geo_hint)
        self.assertEqual(len(session.attempts), 1)

    def test_sink_hears_about_terminal_state_once(self):
        sink = MemoryResultsSink()
        session = make_session(sink=sink)
        for guess in LOSING_GUESSES:
            session.submit_guess(guess)
        with self.assertRaises(SessionFinished):
            session.submit_guess("Oslo")
        self.assertEqual(sink.reports, [("capital", False, 6)])

    def test_failing_sink_and_store_are_logged_only(self):
        session = make_session(sink=FailingSink(), store=FailingStore())
        with self.assertLogs("dailyguess.puzzles.session", level="ERROR") as logs:
            session.submit_guess("Paris")
        self.assertEqual(session.status, "won")
        self.assertEqual(len(logs.records), 2)

    def test_events_are_emitted_on_transitions(self):
        seen = []
        events = SessionEvents()
        events.subscribe_all(lambda name, payload: seen.append(name))
        session = open_session(make_puzzle(), CAPITAL, lexicon=LEXICON, events=events)
        session.submit_guess("Berlin")
        session.submit_guess("Paris")
        self.assertEqual(seen, ["session_created", "guess_submitted", "guess_submitted", "session_finished"])

    def test_failing_listener_does_not_break_session(self):
        events = SessionEvents()
        events.subscribe("guess_submitted", mock.Mock(side_effect=RuntimeError("boom")))
        session = make_session(events=events)
        with self.assertLogs("dailyguess.puzzles.events", level="ERROR"):
            session.submit_guess("Berlin")
        self.assertEqual(len(session.attempts), 1)


class PersistenceTests(SimpleTestCase):
    def test_every_mutation_is_persisted_and_restored(self):
        store = InMemorySessionStore()
        session = open_session(make_puzzle(), CAPITAL, store=store, hard_mode=True, lexicon=LEXICON)
        self.assertEqual(store.load("capital-p1")["attempts"], [])
        session.submit_guess("Berlin")
        session.request_hint()
        payload = store.load("capital-p1")
        self.assertEqual(payload["version"], SCHEMA_VERSION)
        self.assertEqual(payload["hints_requested"], 1)

        restored = open_session(make_puzzle(), CAPITAL, store=store, lexicon=LEXICON)
        self.assertEqual(restored.attempts, session.attempts)
        self.assertTrue(restored.hard_mode)
        self.assertEqual(restored.hints_requested, 1)
        with self.assertRaises(DuplicateGuess):
            restored.submit_guess("Berlin")

    def test_store_is_read_once_on_open(self):
        store = mock.Mock()
        store.load.return_value = None
        open_session(make_puzzle(), CAPITAL, store=store, lexicon=LEXICON)
        store.load.assert_called_once_with("capital-p1")

    def test_legacy_browser_snapshot_is_migrated(self):
        store = InMemorySessionStore()
        store.save(
            "capital-p1",
            {
                "attempts": [
                    {
                        "guess": "Rome",
                        "letterFeedback": [
                            {"letter": "r", "status": "present"},
                            {"letter": "o", "status": "absent"},
                            {"letter": "m", "status": "absent"},
                            {"letter": "e", "status": "absent"},
                        ],
                        "isCorrect": False,
                    }
                ],
                "gameState": "playing",
                "hardMode": True,
            },
        )
        session = open_session(make_puzzle(), CAPITAL, store=store, lexicon=LEXICON)
        self.assertEqual(len(session.attempts), 1)
        self.assertEqual(session.attempts[0].guess_normalized, "rome")
        self.assertEqual(session.attempts[0].letter_statuses, ["present", "absent", "absent", "absent"])
        self.assertTrue(session.hard_mode)

    def test_legacy_status_list_uses_normalized_letters(self):
        state = deserialize_session(
            {"attempts": [{"guess": "Oslo", "letterStatuses": ["absent", "correct", "absent", "absent"]}], "gameState": "lost"},
            CAPITAL.normalize,
        )
        self.assertEqual(state["status"], "lost")
        self.assertEqual("".join(r.letter for r in state["attempts"][0].letters), "oslo")

    def test_unknown_schema_version_starts_fresh(self):
        store = InMemorySessionStore()
        store.save("capital-p1", {"version": 99, "attempts": []})
        with self.assertLogs("dailyguess.puzzles.session", level="WARNING"):
            session = open_session(make_puzzle(), CAPITAL, store=store, lexicon=LEXICON)
        self.assertEqual(session.attempts, ())
        self.assertEqual(session.status, "playing")

    def test_malformed_legacy_snapshots_start_fresh(self):
        payloads = [
            {"attempts": ["Rome"], "gameState": "playing"},
            {"attempts": [{"guess": "Rome", "letterFeedback": ["r", "o", "m", "e"]}]},
            {"attempts": [{"guess": "Rome", "letterStatuses": ["wrong", "absent", "absent", "absent"]}]},
            {"version": 2, "attempts": [{"guess_raw": "Rome", "guess_normalized": "rome", "letters": [{"letter": "r", "status": "maybe", "position": 0}]}]},
        ]
        for payload in payloads:
            store = InMemorySessionStore()
            store.save("capital-p1", payload)
            with self.assertLogs("dailyguess.puzzles.session", level="WARNING"):
                session = open_session(make_puzzle(), CAPITAL, store=store, lexicon=LEXICON)
            self.assertEqual(session.attempts, ())
            self.assertEqual(session.status, "playing")
            self.assertEqual(store.load("capital-p1")["version"], SCHEMA_VERSION)

    def test_unknown_letter_status_is_rejected(self):
        with self.assertRaises(ValueError):
            deserialize_session({"attempts": [{"guess": "Oslo", "letterStatuses": ["wrong"]}]}, CAPITAL.normalize)


class HintPolicyTests(SimpleTestCase):
    def test_one_field_per_attempt(self):
        policy = HintProgressionPolicy()
        puzzle = make_puzzle()
        self.assertEqual(policy.revealed_fields(puzzle, 0), [])
        self.assertEqual([f.label for f in policy.revealed_fields(puzzle, 2)], ["Continent", "Country"])
        self.assertEqual(len(policy.revealed_fields(puzzle, 5)), 3)

    def test_giveaway_after_last_attempt(self):
        labels = [f.label for f in HintProgressionPolicy().revealed_fields(make_puzzle(), 6)]
        self.assertEqual(labels, ["Continent", "Country", "Population", "First letter", "Length"])

    def test_lost_session_shows_first_letter_and_length(self):
        session = make_session()
        for guess in LOSING_GUESSES:
            session.submit_guess(guess)
        hints = {h.label: h.value for h in session.visible_hints()}
        self.assertEqual(hints["First letter"], "P")
        self.assertEqual(hints["Length"], "5 characters")

    def test_revealed_fields_never_shrink(self):
        session = make_session()
        previous = []
        for guess in LOSING_GUESSES:
            session.submit_guess(guess)
            current = session.revealed_hints()
            self.assertEqual(current[: len(previous)], previous)
            previous = current

    def test_hard_mode_requires_explicit_requests(self):
        session = make_session(hard_mode=True)
        session.submit_guess("Berlin")
        self.assertEqual(session.visible_hints(), [])
        self.assertEqual(session.request_hint(), HintField("Continent", "Europe"))
        self.assertEqual(session.visible_hints(), [HintField("Continent", "Europe")])
        with self.assertRaises(HintUnavailable):
            session.request_hint()

    def test_hint_requests_outside_hard_mode_are_refused(self):
        session = make_session()
        session.submit_guess("Berlin")
        with self.assertRaises(HintUnavailable):
            session.request_hint()

    def test_hint_fields_from_display_fields(self):
        fields = build_hint_fields(
            get_domain("plant"),
            {"category": "Tree", "family": "", "uses": ["Timber", "Shade"], "hint": None},
        )
        self.assertEqual(fields, (HintField("Category", "Tree"), HintField("Uses", "Timber, Shade")))


class FreeTextSessionTests(SimpleTestCase):
    def test_plant_near_miss_reports_warmth(self):
        plant = get_domain("plant")
        session = PuzzleSession(Puzzle(id="b1", domain="plant", answer="Sunflower"), plant)
        near = session.submit_guess("Sunflowr")
        self.assertGreater(near.similarity, 0.8)
        self.assertEqual(session.warmth(near), "Close!")
        far = session.submit_guess("Rose")
        self.assertLess(far.similarity, 0.5)
        self.assertEqual(session.warmth(far), "Keep guessing!")
        self.assertIsNone(near.geo_hint)
        won = session.submit_guess("sunflower")
        self.assertEqual(won.similarity, 1.0)
        self.assertIsNone(session.warmth(won))
        self.assertEqual(session.status, "won")

    def test_plant_genus_scores_partial_match(self):
        plant = get_domain("plant")
        puzzle = Puzzle(id="b2", domain="plant", answer="Sunflower", valid_aliases=frozenset({"Helianthus annuus"}))
        attempt = PuzzleSession(puzzle, plant).submit_guess("Helianthus")
        self.assertFalse(attempt.is_correct)
        self.assertEqual(attempt.similarity, 0.8)

    def test_city_miss_gets_geo_hint(self):
        city = get_domain("city")
        lexicon = InMemoryLexicon(
            {"city": {"munich": Coordinate(48.1351, 11.582), "saint petersburg": Coordinate(59.9311, 30.3609)}}
        )
        puzzle = Puzzle(
            id="c1",
            domain="city",
            answer="Saint Petersburg",
            display_fields={"latitude": 59.9311, "longitude": 30.3609},
        )
        session = PuzzleSession(puzzle, city, lexicon=lexicon)
        attempt = session.submit_guess("Munich")
        self.assertIsNotNone(attempt.similarity)
        self.assertEqual(attempt.geo_hint.direction, "E")
        self.assertEqual(attempt.geo_hint.label, "Same continent-scale")
        self.assertTrue(1500 < attempt.geo_hint.distance_km < 2000)
        won = session.submit_guess("St. Petersburg")
        self.assertTrue(won.is_correct)
        self.assertIsNone(won.geo_hint)


class ShareTextTests(SimpleTestCase):
    def test_golden_three_attempt_win(self):
        session = make_session()
        for guess in ["Berlin", "Rome", "Paris"]:
            session.submit_guess(guess)
        expected = (
            "Capitale #42 3/6\n"
            "\n"
            f"{WHITE}{WHITE}{GREEN}{WHITE}{YELLOW}{WHITE}\n"
            f"{YELLOW}{WHITE}{WHITE}{WHITE}\n"
            f"{GREEN}{GREEN}{GREEN}{GREEN}{GREEN}\n"
            "\n"
            "Play daily at https://triviaah.com/brainwave/capitale"
        )
        self.assertEqual(render(session, 42), expected)

    def test_loss_reveals_answer(self):
        session = make_session()
        for guess in LOSING_GUESSES:
            session.submit_guess(guess)
        lines = render(session, 42, footer_url="example.com/capitale").split("\n")
        self.assertEqual(lines[0], "Capitale #42 X/6")
        self.assertEqual(lines[-3], "Answer: Paris")
        self.assertEqual(lines[-1], "Play daily at example.com/capitale")
        self.assertEqual(len(lines), 2 + 6 + 1 + 2)

    def test_unfinished_session_cannot_be_shared(self):
        with self.assertRaises(ValueError):
            render(make_session(), 1)

    def test_puzzle_number_counts_days_from_epoch(self):
        self.assertEqual(number_for_date(date(2024, 2, 12)), 42)
        self.assertEqual(number_for_date(date(2024, 1, 1)), 0)

    def test_footer_links_to_each_game_page(self):
        trivia = get_domain("trivia-term")
        session = PuzzleSession(Puzzle(id="t1", domain="trivia-term", answer="fjord"), trivia)
        session.submit_guess("fjord")
        self.assertTrue(render(session, 7).endswith("\n\nPlay daily at https://triviaah.com/brainwave/trordle"))


class CollaboratorTests(SimpleTestCase):
    def test_puzzle_source_is_keyed_by_domain_and_day(self):
        source = InMemoryPuzzleSource([make_puzzle()])
        self.assertEqual(source.get_puzzle_for_date("capital", date(2024, 2, 12)).answer, "Paris")
        self.assertIsNone(source.get_puzzle_for_date("capital", date(2024, 2, 13)))
        self.assertIsNone(source.get_puzzle_for_date("city", date(2024, 2, 12)))
        with self.assertRaises(ValueError):
            source.add(make_puzzle(puzzle_date=None))

    def test_http_sink_posts_result_payload(self):
        http = mock.Mock()
        sink = HttpResultsSink("https://results.example.com/puzzle_results", timeout=2.0, session=http)
        sink.report_result("capital", True, 3).join(timeout=5)
        http.post.assert_called_once_with(
            "https://results.example.com/puzzle_results",
            json={"category": "capital", "success": True, "attempts": 3},
            timeout=2.0,
        )

    def test_http_sink_failure_is_logged(self):
        http = mock.Mock()
        http.post.side_effect = requests.ConnectionError("refused")
        sink = HttpResultsSink("https://results.example.com/puzzle_results", session=http)
        with self.assertLogs("dailyguess.puzzles.collaborators", level="WARNING"):
            sink.report_result("capital", False, 6).join(timeout=5)


class ImageLookupTests(SimpleTestCase):
    def _response(self, pages):
        response = mock.Mock()
        response.json.return_value = {"query": {"pages": pages}}
        return response

    def test_first_ranked_image_wins_and_is_cached(self):
        http = mock.Mock()
        http.get.return_value = self._response(
            {
                "10": {"index": 2, "imageinfo": [{"url": "https://upload.wikimedia.org/b.jpg"}]},
                "11": {"index": 1, "imageinfo": [{"url": "https://upload.wikimedia.org/a.jpg"}]},
            }
        )
        lookup = WikimediaImageLookup(session=http)
        self.assertEqual(lookup.fetch("Paris"), "https://upload.wikimedia.org/a.jpg")
        self.assertEqual(lookup.fetch("Paris"), "https://upload.wikimedia.org/a.jpg")
        self.assertEqual(http.get.call_count, 1)

    def test_failure_degrades_to_none(self):
        http = mock.Mock()
        http.get.side_effect = requests.Timeout("slow")
        self.assertIsNone(WikimediaImageLookup(session=http).image_for_puzzle("p1", "Paris"))

    def test_later_terms_are_tried(self):
        http = mock.Mock()
        http.get.side_effect = [self._response({}), self._response({"1": {"imageinfo": [{"url": "https://x/y.png"}]}})]
        lookup = WikimediaImageLookup(session=http)
        self.assertEqual(lookup.image_for_puzzle("p1", "Helianthus annuus", "Sunflower"), "https://x/y.png")

    def test_stale_results_are_discarded(self):
        guard = LatestOnlyGuard()
        guard.begin("p1")
        guard.begin("p2")
        self.assertFalse(guard.accept("p1"))
        self.assertTrue(guard.accept("p2"))

    def test_concurrent_players_keep_their_own_results(self):
        rome_done = threading.Event()

        def get(url, params=None, timeout=None):
            term = params["gsrsearch"]
            if term == "Paris":
                rome_done.wait(timeout=5)
            return self._response({"1": {"imageinfo": [{"url": f"https://x/{term}.jpg"}]}})

        http = mock.Mock()
        http.get.side_effect = get
        lookup = WikimediaImageLookup(session=http)
        results = {}

        def player_a():
            results["a"] = lookup.image_for_puzzle("capital-1", "Paris", guard=LatestOnlyGuard())

        thread = threading.Thread(target=player_a)
        thread.start()
        results["b"] = lookup.image_for_puzzle("city-7", "Rome", guard=LatestOnlyGuard())
        rome_done.set()
        thread.join(timeout=5)
        self.assertEqual(results, {"a": "https://x/Paris.jpg", "b": "https://x/Rome.jpg"})

    def test_player_who_moved_on_drops_the_older_result(self):
        paris_started = threading.Event()
        rome_done = threading.Event()

        def get(url, params=None, timeout=None):
            term = params["gsrsearch"]
            if term == "Paris":
                paris_started.set()
                rome_done.wait(timeout=5)
            return self._response({"1": {"imageinfo": [{"url": f"https://x/{term}.jpg"}]}})

        http = mock.Mock()
        http.get.side_effect = get
        lookup = WikimediaImageLookup(session=http)
        guard = LatestOnlyGuard()
        results = {}

        def first_puzzle():
            results["old"] = lookup.image_for_puzzle("capital-1", "Paris", guard=guard)

        thread = threading.Thread(target=first_puzzle)
        thread.start()
        paris_started.wait(timeout=5)
        results["new"] = lookup.image_for_puzzle("city-7", "Rome", guard=guard)
        rome_done.set()
        thread.join(timeout=5)
        self.assertEqual(results, {"old": None, "new": "https://x/Rome.jpg"})

    def test_cache_is_bounded(self):
        http = mock.Mock()
        http.get.return_value = self._response({"1": {"imageinfo": [{"url": "https://x/y.png"}]}})
        lookup = WikimediaImageLookup(session=http, cache_size=2)
        for term in ["Paris", "Rome", "Oslo"]:
            lookup.fetch(term)
        lookup.fetch("Oslo")
        self.assertEqual(http.get.call_count, 3)
        lookup.fetch("Paris")
        self.assertEqual(http.get.call_count, 4)
