from collections import Counter

from django.test import SimpleTestCase

from dailyguess.puzzles import (
    Coordinate,
    DomainRegistry,
    FreeTextEngine,
    LetterDiffEngine,
    diff,
    get_domain,
    get_engine,
    normalize,
    score_guess,
    similarity,
)
from dailyguess.puzzles.engines import Engine
from dailyguess.puzzles.geo import DistanceBands, compass_direction, haversine_km, hint
from dailyguess.puzzles.normalizer import PLACE_PROFILE, SONG_PROFILE, TITLE_PROFILE
from dailyguess.puzzles.similarity import SimilarityBands, edit_distance


class NormalizerTests(SimpleTestCase):
    def test_strips_diacritics_case_and_whitespace(self):
        self.assertEqual(normalize("  São Tomé "), "sao tome")
        self.assertEqual(normalize("REYKJAVÍK"), "reykjavik")

    def test_punctuation_becomes_space_and_apostrophes_vanish(self):
        self.assertEqual(normalize("Rock_and-Roll"), "rock and roll")
        self.assertEqual(normalize("N'Djamena"), "ndjamena")

    def test_place_abbreviations_expand(self):
        self.assertEqual(normalize("St. George's", PLACE_PROFILE), "saint georges")
        self.assertEqual(normalize("Ft. Worth", PLACE_PROFILE), "fort worth")
        self.assertEqual(normalize("Ste-Foy", PLACE_PROFILE), "sainte foy")

    def test_title_profile_drops_one_leading_article(self):
        self.assertEqual(normalize("The Moon Landing", TITLE_PROFILE), "moon landing")
        # a lone article is the whole title, keep it
        self.assertEqual(normalize("The", TITLE_PROFILE), "the")

    def test_song_profile_drops_articles_and_spaces(self):
        self.assertEqual(normalize("The Sound of Silence", SONG_PROFILE), "soundofsilence")
        self.assertEqual(normalize("Hey Jude", SONG_PROFILE), "heyjude")

    def test_empty_input(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize("?!"), "")


class LetterDiffTests(SimpleTestCase):
    def test_duplicate_letters_are_not_over_claimed(self):
        statuses = [r.status for r in diff("lease", "allee")]
        self.assertEqual(statuses, ["present", "present", "present", "absent", "correct"])

    def test_second_copy_of_a_letter_is_absent(self):
        statuses = [r.status for r in diff("speed", "abide")]
        self.assertEqual(statuses, ["absent", "absent", "present", "absent", "present"])

    def test_conservation_for_repeated_letters(self):
        pairs = [("lease", "allee"), ("eerie", "there"), ("llama", "hello"), ("aaaaa", "banal"), ("geese", "eagle")]
        for guess, target in pairs:
            results = diff(guess, target)
            flagged = Counter(r.letter for r in results if r.status != "absent")
            available = Counter(target)
            for letter, count in flagged.items():
                self.assertLessEqual(count, available[letter], f"{guess!r} vs {target!r} over-claims {letter!r}")

    def test_lengths_may_differ(self):
        self.assertEqual([r.status for r in diff("ab", "abc")], ["correct", "correct"])
        self.assertEqual([r.status for r in diff("abcd", "abc")], ["correct", "correct", "correct", "absent"])

    def test_positions_and_letters_follow_guess(self):
        results = diff("rome", "paris")
        self.assertEqual([r.position for r in results], [0, 1, 2, 3])
        self.assertEqual("".join(r.letter for r in results), "rome")

    def test_engine_accepts_aliases_but_diffs_against_target(self):
        result = LetterDiffEngine().evaluate("paris", "paree", accepted=["paree"])
        self.assertTrue(result["is_correct"])
        self.assertEqual([r.status for r in result["letters"]], ["correct", "correct", "correct", "absent", "absent"])
        self.assertIsNone(result["similarity"])


class SimilarityTests(SimpleTestCase):
    def test_edit_distance(self):
        self.assertEqual(edit_distance("kitten", "sitting"), 3)
        self.assertEqual(edit_distance("", "abc"), 3)

    def test_identity_and_empty(self):
        self.assertEqual(similarity("rosa", "rosa"), 1.0)
        self.assertEqual(similarity("", ""), 1.0)
        self.assertEqual(similarity("abc", ""), 0.0)

    def test_score_and_symmetry(self):
        self.assertAlmostEqual(similarity("kitten", "sitting"), 4 / 7)
        self.assertEqual(similarity("kitten", "sitting"), similarity("sitting", "kitten"))

    def test_partial_token_short_circuit(self):
        self.assertEqual(score_guess("rosa", ["rosa rubiginosa"]), 0.8)
        self.assertEqual(score_guess("rosa", ["rosa rubiginosa"], partial_match_score=0.7), 0.7)
        self.assertEqual(score_guess("rosa rubiginosa", ["rosa rubiginosa"]), 1.0)

    def test_short_tokens_fall_back_to_edit_distance(self):
        self.assertEqual(score_guess("ro", ["rosa"]), 0.5)

    def test_bands_are_exclusive_lower_bounds(self):
        bands = SimilarityBands()
        self.assertEqual(bands.label_for(0.95), "Very close! Check the spelling.")
        self.assertEqual(bands.label_for(0.9), "Close!")
        self.assertEqual(bands.label_for(0.6), "Getting warmer.")
        self.assertEqual(bands.label_for(0.5), "Keep guessing!")

    def test_free_text_engine_reports_similarity(self):
        result = FreeTextEngine().evaluate("rosa rubiginosa", "rosa")
        self.assertFalse(result["is_correct"])
        self.assertEqual(result["similarity"], 0.8)
        self.assertEqual(result["metadata"], {"engine": "free_text"})


class GeoTests(SimpleTestCase):
    def test_diagonal_tie_prefers_east_west(self):
        result = hint(Coordinate(0, 0), Coordinate(10, 10))
        self.assertEqual(result.direction, "E")
        self.assertAlmostEqual(result.distance_km, 1568.5, delta=1.0)
        self.assertEqual(result.label, "Same continent-scale")

    def test_larger_delta_wins(self):
        self.assertEqual(compass_direction(Coordinate(0, 0), Coordinate(10, 1)), "N")
        self.assertEqual(compass_direction(Coordinate(0, 0), Coordinate(-10, 1)), "S")
        self.assertEqual(compass_direction(Coordinate(0, 0), Coordinate(1, -10)), "W")

    def test_zero_delta_is_west(self):
        result = hint(Coordinate(5, 5), Coordinate(5, 5))
        self.assertEqual(result.distance_km, 0.0)
        self.assertEqual(result.direction, "W")
        self.assertEqual(result.label, "Very close")

    def test_berlin_to_paris(self):
        berlin, paris = Coordinate(52.52, 13.405), Coordinate(48.8566, 2.3522)
        self.assertAlmostEqual(haversine_km(berlin, paris), 878, delta=10)
        self.assertEqual(hint(berlin, paris).direction, "W")
        self.assertEqual(hint(berlin, paris).label, "Same country-scale")

    def test_distance_bands_upper_bound_is_exclusive(self):
        bands = DistanceBands()
        self.assertEqual(bands.label_for(49.9), "Very close")
        self.assertEqual(bands.label_for(50), "Close by")
        self.assertEqual(bands.label_for(5000), "Far away")


class DomainRegistryTests(SimpleTestCase):
    def test_builtin_domains(self):
        self.assertEqual(
            DomainRegistry.names(),
            sorted(["capital", "city", "plant", "song", "date-event", "trivia-term"]),
        )
        self.assertEqual(DomainRegistry.get(" Capital ").title, "Capitale")

    def test_unknown_domain(self):
        with self.assertRaises(KeyError):
            get_domain("planets")

    def test_engine_follows_domain_configuration(self):
        self.assertIsInstance(get_engine(get_domain("capital")), LetterDiffEngine)
        self.assertNotIsInstance(get_engine(get_domain("capital")), FreeTextEngine)
        plant = get_domain("plant").with_overrides(partial_match_score=0.7)
        engine = get_engine(plant)
        self.assertIsInstance(engine, FreeTextEngine)
        self.assertEqual(engine.partial_match_score, 0.7)

    def test_every_comparator_satisfies_engine_protocol(self):
        for name in DomainRegistry.names():
            self.assertIsInstance(get_engine(get_domain(name)), Engine)

    def test_overrides_accept_plain_band_lists(self):
        city = get_domain("city").with_overrides(distance_bands=[[100, "Near"]])
        self.assertEqual(city.distance_bands.label_for(10), "Near")
        self.assertEqual(city.distance_bands.label_for(150), "Far away")

    def test_domain_normalization(self):
        self.assertEqual(get_domain("song").normalize("The Bohemian Rhapsody"), "bohemianrhapsody")
        self.assertEqual(get_domain("capital").normalize("St. John's"), "saint johns")
