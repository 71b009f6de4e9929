"""Tests for genre detection.

Tests cover:
- The genre pattern catalog
- Extension-tolerant pattern matching
- Ranking and confidence
- Genre hints
- Windowing of long progressions
- Graceful failure
"""

import pytest
from pathlib import Path
import sys
import threading

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from progression_analyzer import (
    Genre,
    GenreClassifier,
    GenreConfig,
    GenreDetectionResult,
    detect_genre,
)
from progression_analyzer.core import parse_chords
from progression_analyzer.inference.genre import matches_pattern, unknown_result
from progression_analyzer.inference.genre_patterns import GENRE_PATTERNS, get_patterns_for_genre


# ============================================================================
# Catalog Tests
# ============================================================================

class TestGenreCatalog:
    """Tests for the genre pattern catalog."""

    def test_catalog_size(self):
        """Test the catalog has 50 patterns over six genres."""
        assert len(GENRE_PATTERNS) == 50
        genres = {p.genre for p in GENRE_PATTERNS}
        assert Genre.UNKNOWN not in genres
        assert len(genres) == 6

    def test_patterns_per_genre(self):
        """Test per-genre pattern counts."""
        counts = {g: len(get_patterns_for_genre(g)) for g in Genre if g is not Genre.UNKNOWN}
        assert counts[Genre.JAZZ] == 8
        assert counts[Genre.POP] == 8
        assert counts[Genre.CLASSICAL] == 8
        assert counts[Genre.BLUES] == 8
        assert counts[Genre.ROCK] == 9
        assert counts[Genre.EDM] == 9

    def test_weights_in_range(self):
        """Test weights are 1-10."""
        assert all(1 <= p.weight <= 10 for p in GENRE_PATTERNS)

    def test_ascii_accidentals(self):
        """Test patterns use ASCII flats."""
        assert not any("♭" in p.pattern or "♯" in p.pattern for p in GENRE_PATTERNS)

    def test_lookup_by_name(self):
        """Test genre lookup accepts names."""
        jazz = get_patterns_for_genre(" Jazz ")
        assert jazz[0].pattern == "ii-V-I"
        assert jazz[0].weight == 10
        with pytest.raises(ValueError):
            get_patterns_for_genre("polka")

    def test_to_dict(self):
        """Test JSON serialization."""
        data = GENRE_PATTERNS[0].to_dict()
        assert data["genre"] == "jazz"
        assert isinstance(data["examples"], list)


# ============================================================================
# Pattern Matching Tests
# ============================================================================

class TestMatchesPattern:
    """Tests for matches_pattern."""

    def test_exact(self):
        """Test an exact match."""
        assert matches_pattern("ii-V-I", "ii-V-I")

    def test_extensions_ignored(self):
        """Test progression extensions are stripped when the pattern lacks them."""
        assert matches_pattern("ii7-V7-Imaj7", "ii-V-I")
        assert matches_pattern("Isus4-V-I", "Isus4-V-I")
        assert matches_pattern("Iadd9-V-vi-IV", "I-V-vi-IV")

    def test_pattern_extensions_required(self):
        """Test extensions the pattern asks for must be present."""
        assert not matches_pattern("ii-V-I", "ii7-V7-I")
        assert matches_pattern("I7-IV7-I7", "I7-IV7-I7")

    def test_contiguous_anywhere(self):
        """Test the pattern may occur anywhere."""
        assert matches_pattern("vi-ii-V-I-IV", "ii-V-I")
        assert not matches_pattern("ii-IV-V-I", "ii-V-I")

    def test_unicode_accidentals(self):
        """Test unicode flats match ASCII patterns."""
        assert matches_pattern("♭VII-IV-I", "bVII-IV-I")

    def test_case_sensitive(self):
        """Test major and minor numerals differ."""
        assert not matches_pattern("i-iv-v", "I-IV-V")

    def test_pattern_longer_than_progression(self):
        """Test a longer pattern never matches."""
        assert not matches_pattern("I-V", "I-IV-V")


# ============================================================================
# Detection Tests
# ============================================================================

class TestGenreDetection:
    """Tests for detect_genre and GenreClassifier."""

    def test_jazz(self):
        """Test a ii-V-I is ranked jazz first."""
        results = detect_genre(["Dm7", "G7", "Cmaj7"])
        assert results[0].genre is Genre.JAZZ
        assert results[0].confidence == pytest.approx(1.0)
        assert results[0].matched_patterns[0].pattern == "ii-V-I"

    def test_pop(self):
        """Test the axis progression is ranked pop first."""
        results = detect_genre(["C", "G", "Am", "F"])
        assert results[0].genre is Genre.POP
        assert results[0].confidence == pytest.approx(1.0)
        assert any(p.pattern == "I-V-vi-IV" for p in results[0].matched_patterns)

    def test_sorted_by_confidence(self):
        """Test results are sorted, best first."""
        results = detect_genre(["C", "G", "Am", "F"])
        confidences = [r.confidence for r in results]
        assert confidences == sorted(confidences, reverse=True)
        assert all(0.0 <= c <= 1.0 for c in confidences)

    def test_genre_hint(self):
        """Test a hint restricts results to one genre."""
        results = detect_genre(["C", "G", "Am", "F"], genre="classical")
        assert {r.genre for r in results} == {Genre.CLASSICAL}

    def test_genre_hint_enum(self):
        """Test hints may be Genre values."""
        results = detect_genre(["Dm7", "G7", "Cmaj7"], genre=Genre.JAZZ)
        assert [r.genre for r in results] == [Genre.JAZZ]

    def test_empty_progression(self):
        """Test empty input gives the unknown sentinel."""
        results = detect_genre([])
        assert len(results) == 1
        assert results[0].genre is Genre.UNKNOWN
        assert results[0].confidence == 0.0
        assert results[0].matched_patterns == []

    def test_invalid_chord_gives_unknown(self):
        """Test unparsable chords give the unknown sentinel."""
        results = detect_genre(["Dm7", "nope", "G7", "Cmaj7"])
        assert [r.genre for r in results] == [Genre.UNKNOWN]

    def test_skip_invalid(self):
        """Test unparsable chords can be skipped."""
        classifier = GenreClassifier(GenreConfig(skip_invalid=True))
        results, stats = classifier.detect(["Dm7", "nope", "G7", "Cmaj7"], return_stats=True)
        assert results[0].genre is Genre.JAZZ
        assert stats.skipped_chords == 1
        assert stats.total_chords == 4

    def test_bad_hint_warns(self):
        """Test an unknown genre hint warns and gives the sentinel."""
        with pytest.warns(UserWarning, match="Genre detection failed"):
            results = detect_genre(["C", "G", "Am", "F"], genre="polka")
        assert [r.genre for r in results] == [Genre.UNKNOWN]

    def test_no_match(self):
        """Test a progression matching nothing gives the sentinel."""
        results = detect_genre(["C"])
        assert [r.genre for r in results] == [Genre.UNKNOWN]

    def test_stats(self):
        """Test statistics are returned on request."""
        classifier = GenreClassifier()
        results, stats = classifier.detect(["Dm7", "G7", "Cmaj7"], return_stats=True)
        assert results[0].genre is Genre.JAZZ
        assert stats.total_chords == 3
        assert stats.windows == 1
        assert stats.key_candidates > 0
        assert stats.readings > 0
        assert stats.matched_patterns > 0

    def test_stats_not_kept_on_classifier(self):
        """Test detection leaves no per-call state on the classifier."""
        classifier = GenreClassifier()
        classifier.detect(["Dm7", "G7", "Cmaj7"])
        assert not hasattr(classifier, "stats")

    def test_stats_per_call_under_threads(self):
        """Test concurrent calls on one classifier each get their own stats."""
        classifier = GenreClassifier()
        long_chords = ["C", "G", "Am", "F"] * 8
        short_chords = ["Dm7", "G7", "Cmaj7"]
        mismatches = []

        def worker(offset):
            for i in range(20):
                chords = long_chords if (i + offset) % 2 else short_chords
                _, stats = classifier.detect(chords, return_stats=True)
                expected_windows = 5 if chords is long_chords else 1
                if stats.total_chords != len(chords) or stats.windows != expected_windows:
                    mismatches.append((stats.total_chords, stats.windows))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert mismatches == []

    @pytest.mark.parametrize("chords", [
        ["Dm7", "G7", "Cmaj7"],
        ["C", "G", "Am", "F"],
        ["C", "G", "Am", "F"] * 7 + ["C", "G"],
    ])
    def test_repeated_calls_identical(self, chords):
        """Test the same input always gives the same ranking."""
        first = detect_genre(chords)
        second = detect_genre(chords)
        assert [r.to_dict() for r in first] == [r.to_dict() for r in second]
        assert [r.matched_patterns for r in first] == [r.matched_patterns for r in second]

    def test_result_to_dict(self):
        """Test JSON serialization."""
        data = detect_genre(["Dm7", "G7", "Cmaj7"])[0].to_dict()
        assert data["genre"] == "jazz"
        assert data["confidence"] == 1.0
        assert data["matched_patterns"][0]["pattern"] == "ii-V-I"

    def test_unknown_result(self):
        """Test the sentinel value."""
        result = unknown_result()
        assert len(result) == 1
        assert isinstance(result[0], GenreDetectionResult)
        assert result[0].genre is Genre.UNKNOWN


class TestScoring:
    """Tests for genre confidence."""

    def test_score_is_mean_weight(self):
        """Test confidence is the mean weight over 10."""
        jazz = get_patterns_for_genre("jazz")
        assert GenreClassifier.score(jazz[:1]) == pytest.approx(1.0)
        assert GenreClassifier.score(jazz[:2]) == pytest.approx((10 + 9) / 20)

    def test_empty_score(self):
        """Test no patterns score zero."""
        assert GenreClassifier.score([]) == 0.0


class TestKeyCandidates:
    """Tests for the keys a progression is read in."""

    def test_candidates_deduplicated(self):
        """Test each key appears once, detected key first."""
        classifier = GenreClassifier()
        tokens = parse_chords(["C", "F", "G7"])
        candidates = classifier.key_candidates(tokens)
        assert len(candidates) == len(set(candidates))
        assert candidates[0][0] == 0
        assert candidates[0][1].value == "major"

    def test_dominant_ending_adds_resolution(self):
        """Test a closing dominant seventh adds the key it resolves to."""
        classifier = GenreClassifier()
        tokens = parse_chords(["Em", "A7"])
        roots = {root for root, _ in classifier.key_candidates(tokens)}
        assert 2 in roots  # D, where A7 resolves


# ============================================================================
# Windowing Tests
# ============================================================================

class TestWindows:
    """Tests for progression windowing."""

    def test_short_progression_single_window(self):
        """Test progressions up to the limit are one window."""
        classifier = GenreClassifier()
        assert classifier.windows(list(range(16))) == [list(range(16))]

    @pytest.mark.parametrize("length,expected", [
        (17, 2),
        (20, 3),
        (30, 4),
    ])
    def test_window_counts(self, length, expected):
        """Test long progressions are split into overlapping windows."""
        windows = GenreClassifier().windows(list(range(length)))
        assert len(windows) == expected

    def test_windows_overlap_and_cover(self):
        """Test windows overlap by half and reach the last chord."""
        windows = GenreClassifier().windows(list(range(30)))
        assert windows[0] == list(range(0, 12))
        assert windows[1][0] == 6
        assert windows[-1][-1] == 29
        covered = {c for w in windows for c in w}
        assert covered == set(range(30))

    def test_short_tail_merged(self):
        """Test a tail shorter than the minimum joins the previous window."""
        config = GenreConfig(full_analysis_limit=4, window_size=4, window_step=4, min_window=3)
        windows = GenreClassifier(config).windows(list(range(9)))
        assert windows == [[0, 1, 2, 3], [4, 5, 6, 7, 8]]

    def test_invalid_config(self):
        """Test window settings are validated."""
        with pytest.raises(ValueError):
            GenreConfig(window_step=0)
        with pytest.raises(ValueError):
            GenreConfig(window_size=4, window_step=6)

    def test_long_progression_detected(self):
        """Test patterns are found in long progressions."""
        chords = ["C", "G", "Am", "F"] * 7 + ["C", "G"]
        assert len(chords) == 30
        results, stats = GenreClassifier().detect(chords, return_stats=True)
        assert stats.windows == 4
        assert results[0].genre is not Genre.UNKNOWN
        assert results[0].matched_patterns
