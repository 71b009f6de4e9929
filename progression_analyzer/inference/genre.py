"""Genre detection - Rank genres by the signature progressions a song uses.

The progression is read in several candidate keys at once (the detected key,
the first and last chords as tonic, the resolution of a final dominant
seventh, plus the relative and parallel keys of each), because the same
chords spell different numerals in different keys and a genre pattern only
needs to appear in one reading.

Long progressions are scanned in overlapping windows so the work per call
stays bounded while patterns crossing a window edge are still found.
"""

import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.chord import ChordToken, parse_chord
from ..core.constants import (
    FULL_ANALYSIS_LIMIT,
    MAX_PATTERN_WEIGHT,
    MIN_WINDOW_SIZE,
    WINDOW_SIZE,
    WINDOW_STEP,
)
from ..core.scales import ScaleCache, ScaleType
from .genre_patterns import GENRE_PATTERNS, Genre, GenrePattern
from .key import ChordInput, KeyDetector
from .roman import RomanNumeralConverter

GenreInput = Union[str, Genre]

# Checked in order; each is stripped from the end of a progression token
# unless the pattern token itself carries it
FLEXIBLE_EXTENSIONS = ["maj7", "add9", "sus4", "sus2", "13", "11", "9", "7", "6"]


@dataclass
class GenreConfig:
    """Configuration for genre detection.

    Attributes:
        full_analysis_limit: Progressions up to this length are read whole (default: 16)
        window_size: Chords per window for longer progressions (default: 12)
        window_step: Chords the window advances each step (default: 6)
        min_window: Shortest window worth matching (default: 4)
        skip_invalid: Drop unparsable chords instead of giving up (default: False)
    """

    full_analysis_limit: int = FULL_ANALYSIS_LIMIT
    window_size: int = WINDOW_SIZE
    window_step: int = WINDOW_STEP
    min_window: int = MIN_WINDOW_SIZE
    skip_invalid: bool = False

    def __post_init__(self):
        if self.window_step < 1 or self.window_size < 1:
            raise ValueError("window_size and window_step must be positive")
        if self.window_step > self.window_size:
            raise ValueError("window_step cannot exceed window_size (windows would leave gaps)")


@dataclass
class GenreDetectionStats:
    """Statistics from one genre detection."""

    total_chords: int = 0
    skipped_chords: int = 0
    key_candidates: int = 0
    windows: int = 0
    readings: int = 0  # Roman numeral strings matched against the catalog
    matched_patterns: int = 0


@dataclass
class GenreDetectionResult:
    """A genre with its confidence and supporting patterns."""

    genre: Genre
    confidence: float  # 0.0 - 1.0
    matched_patterns: List[GenrePattern] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "genre": self.genre.value,
            "confidence": round(self.confidence, 3),
            "matched_patterns": [p.to_dict() for p in self.matched_patterns],
        }


def unknown_result() -> List[GenreDetectionResult]:
    return [GenreDetectionResult(Genre.UNKNOWN, 0.0, [])]


def _normalize_accidentals(roman: str) -> str:
    return roman.replace("♭", "b").replace("♯", "#").strip()


def _strip_extensions(progression_token: str, pattern_token: str) -> str:
    normalized = progression_token
    for extension in FLEXIBLE_EXTENSIONS:
        if extension not in pattern_token and normalized.endswith(extension):
            normalized = normalized[:-len(extension)]
    return normalized


def matches_pattern(progression_roman: str, pattern_roman: str) -> bool:
    """
    Check whether a genre pattern occurs in a Roman numeral string.

    Both are hyphen-joined numerals. Extensions on the progression side are
    ignored unless the pattern asks for them, so "ii7-V7-Imaj7" contains
    "ii-V-I" but "ii-V-I" does not contain "ii7-V7-I".
    """
    progression = _normalize_accidentals(progression_roman).split("-")
    pattern = _normalize_accidentals(pattern_roman).split("-")

    for offset in range(len(progression) - len(pattern) + 1):
        if all(
            _strip_extensions(progression[offset + i], token) == token
            for i, token in enumerate(pattern)
        ):
            return True
    return False


class GenreClassifier:
    """Classify a chord progression by genre.

    Features:
    - Multiple key readings per progression (key ambiguity resolution)
    - Adaptive windowing for long progressions
    - Extension-tolerant pattern matching
    - Optional genre hint to restrict the catalog
    """

    def __init__(
        self,
        config: Optional[GenreConfig] = None,
        patterns: Sequence[GenrePattern] = GENRE_PATTERNS,
        cache: Optional[ScaleCache] = None,
    ):
        self.config = config or GenreConfig()
        self.patterns = tuple(patterns)
        self.cache = cache if cache is not None else ScaleCache()
        self.key_detector = KeyDetector(cache=self.cache)
        self.converter = RomanNumeralConverter(cache=self.cache)

    def detect(
        self,
        chords: Sequence[ChordInput],
        genre: Optional[GenreInput] = None,
        return_stats: bool = False,
    ) -> Union[List[GenreDetectionResult], Tuple[List[GenreDetectionResult], GenreDetectionStats]]:
        """
        Rank genres for a progression.

        Args:
            chords: Chord symbols (or tokens), in order
            genre: Only consider patterns of this genre
            return_stats: Whether to return detection statistics

        Returns:
            Genres sorted by confidence (descending); a single "unknown"
            result with zero confidence when nothing can be matched.
            With return_stats, a (results, stats) tuple.
        """
        stats = GenreDetectionStats()
        try:
            stats.total_chords = len(chords)
            results = self._detect(chords, genre, stats)
        except Exception as e:
            warnings.warn(f"Genre detection failed: {e}")
            results = unknown_result()

        if return_stats:
            return results, stats
        return results

    def _detect(
        self,
        chords: Sequence[ChordInput],
        genre: Optional[GenreInput],
        stats: GenreDetectionStats,
    ) -> List[GenreDetectionResult]:
        hint = Genre(genre.strip().lower()) if isinstance(genre, str) else genre

        tokens = self._parse(chords, stats)
        if not tokens:
            return unknown_result()

        candidates = self.key_candidates(tokens)
        windows = self.windows(tokens)
        readings = self.readings(windows, candidates)

        stats.key_candidates = len(candidates)
        stats.windows = len(windows)
        stats.readings = len(readings)

        # Genres are kept in the order their first pattern matched
        matches: Dict[Genre, List[GenrePattern]] = {}
        for pattern in self.patterns:
            if hint is not None and pattern.genre is not hint:
                continue
            if any(matches_pattern(reading, pattern.pattern) for reading in readings):
                matches.setdefault(pattern.genre, []).append(pattern)
                stats.matched_patterns += 1

        results = [
            GenreDetectionResult(genre_, self.score(patterns), patterns)
            for genre_, patterns in matches.items()
        ]
        # sort() is stable, so equal confidences keep discovery order
        results.sort(key=lambda r: r.confidence, reverse=True)

        return results or unknown_result()

    def _parse(self, chords: Sequence[ChordInput], stats: GenreDetectionStats) -> List[ChordToken]:
        tokens = []
        for chord in chords:
            token = chord if isinstance(chord, ChordToken) else parse_chord(chord)
            if token is None:
                if not self.config.skip_invalid:
                    return []
                stats.skipped_chords += 1
                continue
            tokens.append(token)
        return tokens

    @staticmethod
    def score(patterns: Sequence[GenrePattern]) -> float:
        """Confidence of a genre: total weight over the maximum possible weight."""
        if not patterns:
            return 0.0
        total = sum(p.weight for p in patterns)
        return min(1.0, total / (len(patterns) * MAX_PATTERN_WEIGHT))

    def key_candidates(self, tokens: Sequence[ChordToken]) -> List[Tuple[int, ScaleType]]:
        """
        Keys to read the progression in, deduplicated, in discovery order.

        Each source root contributes its major key, that key's relative minor,
        its minor key and that key's relative major.
        """
        roots = [
            self.key_detector.detect(tokens).tonic,
            tokens[0].tonic,
            tokens[-1].tonic,
        ]
        # A closing dominant seventh points at the key a fourth above it
        if tokens[-1].is_dominant_seventh:
            roots.append((tokens[-1].tonic + 5) % 12)

        candidates: List[Tuple[int, ScaleType]] = []
        for root in roots:
            for candidate in (
                (root, ScaleType.MAJOR),
                ((root - 3) % 12, ScaleType.MINOR),
                (root, ScaleType.MINOR),
                ((root + 3) % 12, ScaleType.MAJOR),
            ):
                if candidate not in candidates:
                    candidates.append(candidate)
        return candidates

    def windows(self, chords: Sequence[Any]) -> List[List[Any]]:
        """
        Split a progression into overlapping analysis windows.

        Short progressions are one window. The last window always reaches the
        final chord; a tail too short to match is merged into the window
        before it.
        """
        config = self.config
        chords = list(chords)
        total = len(chords)
        if total <= config.full_analysis_limit:
            return [chords]

        spans: List[Tuple[int, int]] = []
        for start in range(0, total, config.window_step):
            end = min(start + config.window_size, total)
            if end - start >= config.min_window:
                spans.append((start, end))
            elif spans:
                spans[-1] = (spans[-1][0], total)
            if end == total:
                break

        return [chords[start:end] for start, end in spans]

    def readings(
        self,
        windows: Sequence[Sequence[ChordToken]],
        candidates: Sequence[Tuple[int, ScaleType]],
    ) -> List[str]:
        """Hyphen-joined Roman numerals of every window in every candidate key."""
        readings = []
        for window in windows:
            for root, scale_type in candidates:
                numerals = [self.converter.convert(t, root, scale_type) for t in window]
                if any(n is None for n in numerals):
                    continue
                readings.append("-".join(n.roman for n in numerals))
        return readings


_default_classifier = GenreClassifier()


def detect_genre(
    chords: Sequence[ChordInput],
    genre: Optional[GenreInput] = None,
) -> List[GenreDetectionResult]:
    """
    Detect the genres a progression resembles.

    Never raises: empty or unparsable input gives a single "unknown" result.

    Example:
        >>> detect_genre(["Dm7", "G7", "Cmaj7"])[0].genre
        <Genre.JAZZ: 'jazz'>
    """
    return _default_classifier.detect(chords, genre)
