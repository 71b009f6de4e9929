"""Tests for Roman numeral analysis.

Tests cover:
- Case and quality marks per chord quality
- Extensions (7, maj7, 9, ...)
- Chromatic roots with accidentals
- Minor keys
- Optional-returning and raising variants
"""

import pytest
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from progression_analyzer import (
    ChordQuality,
    InvalidChordError,
    RomanNumeralConverter,
    RomanNumeralResult,
    parse_chord,
    get_roman_numeral,
    get_roman_numerals,
)
from progression_analyzer.inference.roman import extract_extension, format_numeral


class TestRomanNumerals:
    """Tests for chord to Roman numeral conversion."""

    def test_diatonic_triads_in_c_major(self):
        """Test the seven diatonic triads of C major."""
        chords = ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]
        results = get_roman_numerals(chords, "C", "major")
        assert [r.roman for r in results] == ["I", "ii", "iii", "IV", "V", "vi", "vii°"]
        assert [r.degree for r in results] == [1, 2, 3, 4, 5, 6, 7]

    def test_quality_preserved(self):
        """Test the result carries the chord quality."""
        result = get_roman_numeral("G7", "C", "major")
        assert isinstance(result, RomanNumeralResult)
        assert result.quality is ChordQuality.DOMINANT
        assert result.roman == "V7"

    def test_seventh_chords(self):
        """Test seventh chord extensions."""
        results = get_roman_numerals(["Dm7", "G7", "Cmaj7"], "C", "major")
        assert [r.roman for r in results] == ["ii7", "V7", "Imaj7"]

    def test_major_seventh_spellings(self):
        """Test all major seventh spellings read as maj7."""
        for symbol in ["Cmaj7", "CM7", "CΔ", "Cmajor7"]:
            assert get_roman_numeral(symbol, 0, "major").roman == "Imaj7", symbol

    def test_delta_ninth_is_not_major_seventh(self):
        """Test a delta followed by another extension reads that extension."""
        assert get_roman_numeral("CΔ9", "C", "major").roman == "I9"
        assert get_roman_numeral("CΔ7", "C", "major").roman == "Imaj7"

    def test_six_nine(self):
        """Test 6/9 chords are not read as slash chords."""
        result = get_roman_numeral("F6/9", "C", "major")
        assert result.roman == "IV9"
        assert result.degree == 4

    def test_minor_major_seventh(self):
        """Test CmM7 keeps its minor numeral with a maj7 extension."""
        assert get_roman_numeral("CmM7", "C", "major").roman == "imaj7"

    def test_extended_chords(self):
        """Test ninth, eleventh and thirteenth extensions."""
        assert get_roman_numeral("G9", "C", "major").roman == "V9"
        assert get_roman_numeral("G13", "C", "major").roman == "V13"
        assert get_roman_numeral("Dm11", "C", "major").roman == "ii11"
        assert get_roman_numeral("F6", "C", "major").roman == "IV6"

    def test_half_diminished(self):
        """Test half-diminished chords read as diminished sevenths."""
        assert get_roman_numeral("Bm7b5", "C", "major").roman == "vii°7"
        assert get_roman_numeral("Bø", "C", "major").roman == "vii°7"

    def test_augmented(self):
        """Test augmented chords get a plus sign."""
        result = get_roman_numeral("Eaug", "C", "major")
        assert result.roman == "III+"
        assert result.degree == 3

    def test_parallel_minor_tonic(self):
        """Test Cm in C major is lowercase i."""
        assert get_roman_numeral("Cm", "C", "major").roman == "i"

    def test_chromatic_roots(self):
        """Test roots outside the scale get accidentals."""
        assert get_roman_numeral("Ab", "C", "major").roman == "♭VI"
        assert get_roman_numeral("Bb", "C", "major").roman == "♭VII"
        assert get_roman_numeral("Eb", "C", "major").roman == "♭III"
        assert get_roman_numeral("Db7", "C", "major").roman == "♭II7"
        assert get_roman_numeral("F#dim", "C", "major").roman == "♭v°"

    def test_chromatic_degree(self):
        """Test chromatic roots report their table degree."""
        result = get_roman_numeral("Ab", "C", "major")
        assert result.degree == 6

    def test_minor_key(self):
        """Test numerals in a minor key."""
        results = get_roman_numerals(["Am", "Dm", "E", "F", "G", "C"], "A", "minor")
        assert [r.roman for r in results] == ["i", "iv", "V", "VI", "VII", "III"]

    def test_minor_key_descending(self):
        """Test Andalusian cadence numerals in D minor."""
        results = get_roman_numerals(["Dm", "C", "Bb", "A"], "D", "minor")
        assert [r.roman for r in results] == ["i", "VII", "VI", "V"]

    def test_raised_seventh_in_minor(self):
        """Test the raised 7th root in minor uses the chromatic table."""
        result = get_roman_numeral("G#dim", "A", "minor")
        assert result.roman == "vii°"
        assert result.degree == 7

    def test_root_as_pitch_class(self):
        """Test the key root may be a pitch class."""
        assert get_roman_numeral("A7", 2, "major").roman == "V7"

    def test_one_result_per_chord(self):
        """Test the result list matches the input length."""
        chords = ["C", "C", "G", "Am", "F"]
        assert len(get_roman_numerals(chords, "C", "major")) == len(chords)

    def test_invalid_chord_raises(self):
        """Test unparsable chords raise InvalidChordError."""
        with pytest.raises(InvalidChordError):
            get_roman_numeral("X", "C", "major")
        with pytest.raises(InvalidChordError):
            get_roman_numerals(["C", "X"], "C", "major")

    def test_convert_returns_none(self):
        """Test the optional-returning variant."""
        converter = RomanNumeralConverter()
        assert converter.convert("X", "C", "major") is None
        assert converter.convert("F", "C", "major").roman == "IV"

    def test_to_dict(self):
        """Test JSON serialization."""
        data = get_roman_numeral("Dm7", "C", "major").to_dict()
        assert data == {"roman": "ii7", "degree": 2, "quality": "minor"}


class TestExtensions:
    """Tests for extension extraction and numeral formatting."""

    def test_extract_extension(self):
        """Test extensions read from symbols."""
        assert extract_extension(parse_chord("C")) == ""
        assert extract_extension(parse_chord("Am7")) == "7"
        assert extract_extension(parse_chord("Cmaj7")) == "maj7"
        assert extract_extension(parse_chord("C7sus4")) == "7"
        assert extract_extension(parse_chord("Csus4")) == ""

    def test_kind_fallback(self):
        """Test symbols without digits fall back to the chord kind."""
        assert extract_extension(parse_chord("Cø")) == "7"

    def test_format_numeral(self):
        """Test case and marks."""
        assert format_numeral(5, ChordQuality.MAJOR) == "V"
        assert format_numeral(5, ChordQuality.DOMINANT) == "V"
        assert format_numeral(2, ChordQuality.MINOR) == "ii"
        assert format_numeral(7, ChordQuality.DIMINISHED) == "vii°"
        assert format_numeral(3, ChordQuality.AUGMENTED) == "III+"
