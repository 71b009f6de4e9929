"""Progression Analyzer - Chord progression to key, harmony and genre.

Architecture Layers:
    1. core/      - Chord symbols, scales, constants and errors
    2. inference/ - Musical understanding (key, Roman numerals, harmony, patterns, genre)
    3. cli        - Command-line interface
"""

__version__ = "0.1.0"

# Core types
from .core import (
    ChordQuality,
    ChordToken,
    ScaleType,
    ScaleCache,
    parse_chord,
    ProgressionError,
    EmptyProgressionError,
    InvalidChordError,
    UnknownScaleDegreeError,
)

# Inference layer
from .inference import (
    KeyDetector,
    KeyDetection,
    RomanNumeralConverter,
    RomanNumeralResult,
    HarmonicFunction,
    CadenceType,
    Cadence,
    SecondaryDominant,
    BorrowedChord,
    Pattern,
    Genre,
    GenrePattern,
    GenreClassifier,
    GenreConfig,
    GenreDetectionResult,
    ProgressionAnalyzer,
    ProgressionAnalysis,
    ChordAnalysis,
    detect_key,
    get_roman_numeral,
    get_roman_numerals,
    analyze_progression,
    detect_genre,
    detect_cadences,
    detect_patterns,
    get_harmonic_function,
)

__all__ = [
    # Core
    "ChordQuality",
    "ChordToken",
    "ScaleType",
    "ScaleCache",
    "parse_chord",
    "ProgressionError",
    "EmptyProgressionError",
    "InvalidChordError",
    "UnknownScaleDegreeError",
    # Inference
    "KeyDetector",
    "KeyDetection",
    "RomanNumeralConverter",
    "RomanNumeralResult",
    "HarmonicFunction",
    "CadenceType",
    "Cadence",
    "SecondaryDominant",
    "BorrowedChord",
    "Pattern",
    "Genre",
    "GenrePattern",
    "GenreClassifier",
    "GenreConfig",
    "GenreDetectionResult",
    "ProgressionAnalyzer",
    "ProgressionAnalysis",
    "ChordAnalysis",
    # API
    "detect_key",
    "get_roman_numeral",
    "get_roman_numerals",
    "analyze_progression",
    "detect_genre",
    "detect_cadences",
    "detect_patterns",
    "get_harmonic_function",
]
