"""Progression analysis - Full functional and stylistic reading of a progression.

Pipeline: chords → key → Roman numerals → per-chord analysis
          → [cadences, patterns, genres, borrowed chords, secondary dominants]
          → enriched analysis + loopability
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..core.chord import ChordQuality
from ..core.scales import ScaleCache
from .genre import GenreClassifier, GenreConfig, GenreDetectionResult, GenreInput
from .genre_patterns import GenrePattern
from .harmony import (
    BorrowedChord,
    BorrowedChordDetector,
    Cadence,
    CadenceDetector,
    HarmonicFunction,
    SecondaryDominant,
    SecondaryDominantDetector,
    get_harmonic_function,
    is_loopable,
)
from .key import ChordInput, KeyDetector, to_tokens
from .patterns import GeneralPatternMatcher, Pattern
from .roman import RomanNumeralConverter


@dataclass
class ChordAnalysis:
    """Analysis of a single chord in its progression."""

    chord: str
    roman: str
    quality: ChordQuality
    degree: int
    function: HarmonicFunction
    borrowed: bool = False
    secondary_dominant: Optional[str] = None  # Target chord symbol

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chord": self.chord,
            "roman": self.roman,
            "quality": self.quality.value,
            "degree": self.degree,
            "function": self.function.value,
            "borrowed": self.borrowed,
            "secondary_dominant": self.secondary_dominant,
        }


@dataclass
class ProgressionAnalysis:
    """Container for progression analysis results."""

    key: str
    confidence: float
    analysis: List[ChordAnalysis] = field(default_factory=list)
    cadences: List[Cadence] = field(default_factory=list)
    secondary_dominants: List[SecondaryDominant] = field(default_factory=list)
    borrowed_chords: List[BorrowedChord] = field(default_factory=list)
    patterns: List[Pattern] = field(default_factory=list)
    genre_patterns: List[GenrePattern] = field(default_factory=list)
    suggested_genres: List[GenreDetectionResult] = field(default_factory=list)
    loopable: bool = False

    @property
    def roman_numerals(self) -> List[str]:
        """Get roman numeral analysis."""
        return [a.roman for a in self.analysis]

    @property
    def chord_symbols(self) -> List[str]:
        return [a.chord for a in self.analysis]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "key": self.key,
            "confidence": round(self.confidence, 3),
            "analysis": [a.to_dict() for a in self.analysis],
            "cadences": [c.to_dict() for c in self.cadences],
            "secondary_dominants": [s.to_dict() for s in self.secondary_dominants],
            "borrowed_chords": [b.to_dict() for b in self.borrowed_chords],
            "patterns": [p.to_dict() for p in self.patterns],
            "genre_patterns": [p.to_dict() for p in self.genre_patterns],
            "suggested_genres": [g.to_dict() for g in self.suggested_genres],
            "loopable": self.loopable,
        }


class ProgressionAnalyzer:
    """Analyze a chord progression end to end.

    All components share one scale cache, so a progression's scales are
    computed once per analyzer.
    """

    def __init__(
        self,
        genre_config: Optional[GenreConfig] = None,
        cache: Optional[ScaleCache] = None,
    ):
        """
        Initialize ProgressionAnalyzer.

        Args:
            genre_config: Windowing and input policy for genre detection
            cache: Scale cache shared by all components
        """
        self.cache = cache if cache is not None else ScaleCache()
        self.key_detector = KeyDetector(cache=self.cache)
        self.converter = RomanNumeralConverter(cache=self.cache)
        self.cadence_detector = CadenceDetector()
        self.pattern_matcher = GeneralPatternMatcher()
        self.genre_classifier = GenreClassifier(config=genre_config, cache=self.cache)
        self.borrowed_detector = BorrowedChordDetector(cache=self.cache)
        self.secondary_detector = SecondaryDominantDetector()

    def analyze(
        self,
        chords: Sequence[ChordInput],
        genre: Optional[GenreInput] = None,
    ) -> ProgressionAnalysis:
        """
        Perform full progression analysis.

        Args:
            chords: Chord symbols, in order
            genre: Restrict genre detection to this genre

        Returns:
            ProgressionAnalysis with key, per-chord analysis and detections

        Raises:
            EmptyProgressionError: If chords is empty
            InvalidChordError: If a symbol cannot be parsed
        """
        tokens = to_tokens(chords, "analyze")

        key = self.key_detector.detect(tokens)
        numerals = self.converter.get_roman_numerals(tokens, key.tonic, key.scale_type)

        analysis = [
            ChordAnalysis(
                chord=token.symbol,
                roman=numeral.roman,
                quality=numeral.quality,
                degree=numeral.degree,
                function=get_harmonic_function(numeral.degree),
            )
            for token, numeral in zip(tokens, numerals)
        ]

        cadences = self.cadence_detector.detect(tokens, numerals)
        patterns = self.pattern_matcher.detect(numerals)

        genres = self.genre_classifier.detect(tokens, genre)
        genre_patterns = [p for result in genres for p in result.matched_patterns]

        borrowed = self.borrowed_detector.detect(tokens, numerals, key.tonic, key.scale_type)
        secondary = self.secondary_detector.detect(tokens, numerals)

        for item in borrowed:
            analysis[item.index].borrowed = True
        for item in secondary:
            analysis[item.index].secondary_dominant = item.target_chord

        return ProgressionAnalysis(
            key=key.key,
            confidence=key.confidence,
            analysis=analysis,
            cadences=cadences,
            secondary_dominants=secondary,
            borrowed_chords=borrowed,
            patterns=patterns,
            genre_patterns=genre_patterns,
            suggested_genres=genres,
            loopable=is_loopable(numerals),
        )


_default_analyzer = ProgressionAnalyzer()


def analyze_progression(
    chords: Sequence[ChordInput],
    genre: Optional[GenreInput] = None,
) -> ProgressionAnalysis:
    """Analyze a chord progression with the shared default analyzer."""
    return _default_analyzer.analyze(chords, genre)
