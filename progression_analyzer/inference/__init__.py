"""Inference layer - Musical understanding of chord progressions.

This layer builds a functional reading of a progression from chord symbols:
- Key detection (tonal center)
- Roman numeral analysis
- Harmony analysis (functions, cadences, secondary dominants, borrowed chords)
- Common progression patterns
- Genre classification

Pipeline: Chords → Key → Roman numerals → [Harmony, Patterns, Genre]
"""

from .key import KeyDetector, KeyDetection, KeyCandidate, detect_key
from .roman import (
    RomanNumeralConverter,
    RomanNumeralResult,
    get_roman_numeral,
    get_roman_numerals,
)
from .harmony import (
    HarmonicFunction,
    CadenceType,
    Cadence,
    CadenceDetector,
    SecondaryDominant,
    SecondaryDominantDetector,
    BorrowedChord,
    BorrowedChordDetector,
    get_harmonic_function,
    expected_resolution,
    detect_cadences,
    has_cadence,
    strongest_cadence,
    count_cadences_by_type,
    is_loopable,
)
from .patterns import (
    Pattern,
    GeneralPatternMatcher,
    COMMON_PATTERNS,
    detect_patterns,
    has_pattern,
    patterns_by_type,
    very_common_patterns,
)
from .genre_patterns import Genre, GenrePattern, GENRE_PATTERNS, get_patterns_for_genre
from .genre import (
    GenreClassifier,
    GenreConfig,
    GenreDetectionResult,
    GenreDetectionStats,
    detect_genre,
    matches_pattern,
)
from .progression import (
    ProgressionAnalyzer,
    ProgressionAnalysis,
    ChordAnalysis,
    analyze_progression,
)

__all__ = [
    # Key detection
    "KeyDetector",
    "KeyDetection",
    "KeyCandidate",
    "detect_key",
    # Roman numerals
    "RomanNumeralConverter",
    "RomanNumeralResult",
    "get_roman_numeral",
    "get_roman_numerals",
    # Harmony analysis
    "HarmonicFunction",
    "CadenceType",
    "Cadence",
    "CadenceDetector",
    "SecondaryDominant",
    "SecondaryDominantDetector",
    "BorrowedChord",
    "BorrowedChordDetector",
    "get_harmonic_function",
    "expected_resolution",
    "detect_cadences",
    "has_cadence",
    "strongest_cadence",
    "count_cadences_by_type",
    "is_loopable",
    # Patterns
    "Pattern",
    "GeneralPatternMatcher",
    "COMMON_PATTERNS",
    "detect_patterns",
    "has_pattern",
    "patterns_by_type",
    "very_common_patterns",
    # Genre
    "Genre",
    "GenrePattern",
    "GENRE_PATTERNS",
    "get_patterns_for_genre",
    "GenreClassifier",
    "GenreConfig",
    "GenreDetectionResult",
    "GenreDetectionStats",
    "detect_genre",
    "matches_pattern",
    # Progression analysis
    "ProgressionAnalyzer",
    "ProgressionAnalysis",
    "ChordAnalysis",
    "analyze_progression",
]
