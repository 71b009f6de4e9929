"""Harmony analysis - Functional reading of a progression in a known key.

Implements:
- Harmonic function per scale degree (tonic, subdominant, dominant, ...)
- Cadence detection (authentic, plagal, deceptive, half)
- Secondary dominant detection (V7/ii, V7/V, ...)
- Borrowed chord detection (modal mixture from the parallel key)
- Loopability check

All detectors work on parsed chords plus their Roman numerals, so a
progression is parsed and converted once and then shared.
"""

import numpy as np
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass
from collections import Counter
from enum import Enum

from ..core.chord import ChordQuality, ChordToken
from ..core.constants import DEFAULT_SCALE_CACHE_SIZE
from ..core.scales import (
    ScaleCache,
    ScaleType,
    key_root_name,
    parse_key_name,
    root_pitch_class,
    scale_template_mask,
)
from .key import ChordInput, detect_key, to_tokens
from .roman import RomanNumeralResult, get_roman_numerals


class HarmonicFunction(Enum):
    """Harmonic role of a scale degree."""
    TONIC = "tonic"
    SUBDOMINANT = "subdominant"
    DOMINANT = "dominant"
    DECEPTIVE = "deceptive"
    PASSING = "passing"


DEGREE_FUNCTIONS = {
    1: HarmonicFunction.TONIC,
    2: HarmonicFunction.SUBDOMINANT,
    3: HarmonicFunction.PASSING,
    4: HarmonicFunction.SUBDOMINANT,
    5: HarmonicFunction.DOMINANT,
    6: HarmonicFunction.DECEPTIVE,
    7: HarmonicFunction.PASSING,
}


def get_harmonic_function(degree: int) -> HarmonicFunction:
    """
    Get the harmonic function of a scale degree (1-7).

    Raises:
        ValueError: If degree is outside 1-7
    """
    if degree not in DEGREE_FUNCTIONS:
        raise ValueError(f"Scale degree must be 1-7, got {degree}")
    return DEGREE_FUNCTIONS[degree]


def expected_resolution(degree: int, quality: ChordQuality) -> Optional[int]:
    """
    Get the degree a chord tends to resolve to, if it has a tendency.

    Dominant chords (and any major V) resolve a fourth up; the leading-tone
    diminished chord resolves to the tonic.
    """
    get_harmonic_function(degree)
    if quality is ChordQuality.DOMINANT or (degree == 5 and quality.is_major_family):
        return (degree + 2) % 7 + 1
    if degree == 7 and quality is ChordQuality.DIMINISHED:
        return 1
    return None


def is_loopable(numerals: Sequence[RomanNumeralResult]) -> bool:
    """A progression loops when it ends on V or I and starts on I."""
    if len(numerals) < 2:
        return False
    first, last = numerals[0].degree, numerals[-1].degree
    return first == 1 and last in (1, 5)


# =============================================================================
# Cadences
# =============================================================================

class CadenceType(Enum):
    AUTHENTIC = "authentic"
    PLAGAL = "plagal"
    DECEPTIVE = "deceptive"
    HALF = "half"


@dataclass
class Cadence:
    """A cadence between two consecutive chords."""
    type: CadenceType
    chords: Tuple[str, str]
    strength: str  # "strong" or "weak"
    index: int  # Position of the arrival chord

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "chords": list(self.chords),
            "strength": self.strength,
            "index": self.index,
        }


class CadenceDetector:
    """Detect cadences from scale degrees of consecutive chords."""

    # (from degree, to degree) -> (type, strength); first match wins
    CADENCE_RULES = [
        ((5, 1), CadenceType.AUTHENTIC, "strong"),
        ((4, 1), CadenceType.PLAGAL, "weak"),
        ((5, 6), CadenceType.DECEPTIVE, "weak"),
    ]

    # Most conclusive first
    STRENGTH_ORDER = [
        CadenceType.AUTHENTIC,
        CadenceType.PLAGAL,
        CadenceType.DECEPTIVE,
        CadenceType.HALF,
    ]

    def detect(
        self,
        chords: Sequence[ChordInput],
        numerals: Sequence[RomanNumeralResult],
    ) -> List[Cadence]:
        """
        Identify cadences in a chord progression.

        Args:
            chords: Chord symbols (or tokens), in order
            numerals: Roman numerals of the same chords

        Returns:
            Cadences in progression order
        """
        symbols = [_symbol(c) for c in chords]
        cadences = []
        last_pair = len(numerals) - 1

        for i in range(1, len(numerals)):
            motion = (numerals[i - 1].degree, numerals[i].degree)
            pair = (symbols[i - 1], symbols[i])

            for degrees, cadence_type, strength in self.CADENCE_RULES:
                if motion == degrees:
                    cadences.append(Cadence(cadence_type, pair, strength, i))
                    break
            else:
                # Half cadence only closes the progression
                if i == last_pair and motion[1] == 5:
                    cadences.append(Cadence(CadenceType.HALF, pair, "weak", i))

        return cadences


def has_cadence(cadences: Sequence[Cadence], cadence_type: Union[str, CadenceType]) -> bool:
    cadence_type = CadenceType(cadence_type)
    return any(c.type is cadence_type for c in cadences)


def strongest_cadence(cadences: Sequence[Cadence]) -> Optional[Cadence]:
    """Most conclusive cadence (authentic > plagal > deceptive > half), earliest on ties."""
    if not cadences:
        return None
    return min(cadences, key=lambda c: CadenceDetector.STRENGTH_ORDER.index(c.type))


def count_cadences_by_type(cadences: Sequence[Cadence]) -> Dict[str, int]:
    counts = Counter(c.type.value for c in cadences)
    return {t.value: counts.get(t.value, 0) for t in CadenceType}


# =============================================================================
# Secondary dominants
# =============================================================================

@dataclass
class SecondaryDominant:
    """A dominant chord tonicizing a degree other than I."""
    chord: str
    target_chord: str
    roman_notation: str  # e.g. "V7/ii"
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chord": self.chord,
            "target_chord": self.target_chord,
            "roman_notation": self.roman_notation,
            "index": self.index,
        }


_EXTENSION_RE = re.compile(r"maj7|7|9|11|13|6")
_ACCIDENTAL_RE = re.compile(r"[♭♯#b]")
_NUMERAL_RE = re.compile(r"^[ivIV]+")


def target_numeral(roman: str) -> str:
    """Bare numeral of a target chord ("♭VImaj7" -> "VI", "vii°" -> "vii")."""
    bare = _ACCIDENTAL_RE.sub("", _EXTENSION_RE.sub("", roman))
    match = _NUMERAL_RE.match(bare)
    return match.group(0) if match else bare


class SecondaryDominantDetector:
    """Detect dominant chords resolving down a fifth to a degree other than I."""

    # Semitones from a dominant root up to its target root (a perfect fourth)
    RESOLUTION_INTERVAL = 5

    def detect(
        self,
        chords: Sequence[ChordInput],
        numerals: Sequence[RomanNumeralResult],
    ) -> List[SecondaryDominant]:
        if not chords:
            return []
        tokens = to_tokens(chords, "analyze")
        found = []

        for i in range(len(tokens) - 1):
            current, target = tokens[i], tokens[i + 1]
            if current.quality not in (ChordQuality.DOMINANT, ChordQuality.AUGMENTED):
                continue
            # Primary V -> I is not secondary
            if numerals[i].degree == 5 and numerals[i + 1].degree == 1:
                continue
            if (target.tonic - current.tonic) % 12 != self.RESOLUTION_INTERVAL:
                continue

            found.append(SecondaryDominant(
                chord=current.symbol,
                target_chord=target.symbol,
                roman_notation=f"V7/{target_numeral(numerals[i + 1].roman)}",
                index=i,
            ))

        return found


# =============================================================================
# Borrowed chords
# =============================================================================

@dataclass
class BorrowedChord:
    """A chord taken from the parallel major/minor key."""
    chord: str
    borrowed_from: str  # e.g. "C minor"
    function: HarmonicFunction
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chord": self.chord,
            "borrowed_from": self.borrowed_from,
            "function": self.function.value,
            "index": self.index,
        }


_MAJ = ChordQuality.MAJOR
_MIN = ChordQuality.MINOR
_DIM = ChordQuality.DIMINISHED


class BorrowedChordDetector:
    """Detect modal mixture: chords whose tones all belong to the parallel key."""

    # Expected triad quality per degree; None means no expectation
    EXPECTED_QUALITIES = {
        ScaleType.MAJOR: [_MAJ, _MIN, _MIN, _MAJ, _MAJ, _MIN, _DIM],
        ScaleType.MINOR: [_MIN, _DIM, _MAJ, _MIN, None, _MAJ, _MAJ],
    }

    def __init__(self, cache: Optional[ScaleCache] = None, cache_size: int = DEFAULT_SCALE_CACHE_SIZE):
        self.cache = cache if cache is not None else ScaleCache(cache_size)

    @staticmethod
    def qualities_equivalent(actual: ChordQuality, expected: ChordQuality) -> bool:
        """Dominant chords count as major."""
        if actual is expected:
            return True
        return actual.is_major_family and expected.is_major_family

    def detect(
        self,
        chords: Sequence[ChordInput],
        numerals: Sequence[RomanNumeralResult],
        root: Union[int, str],
        scale_type: Union[str, ScaleType],
    ) -> List[BorrowedChord]:
        """
        Find borrowed chords in a progression.

        Args:
            chords: Chord symbols (or tokens), in order
            numerals: Roman numerals of the same chords in the key
            root: Key root
            scale_type: Key scale type

        Returns:
            Borrowed chords in progression order
        """
        if not chords:
            return []
        tokens = to_tokens(chords, "analyze")
        tonic = root_pitch_class(root)
        scale_type = ScaleType.coerce(scale_type)
        parallel = scale_type.parallel

        scale_notes = self.cache.get_or_compute(tonic, scale_type)[:7]
        parallel_mask = scale_template_mask(tonic, parallel)
        parallel_key = f"{key_root_name(tonic, scale_type)} {parallel.value}"

        borrowed = []
        for i, (token, numeral) in enumerate(zip(tokens, numerals)):
            # V7 is diatonic in major keys
            if (
                scale_type is ScaleType.MAJOR
                and numeral.degree == 5
                and token.quality is ChordQuality.DOMINANT
            ):
                continue

            all_tones_in_parallel = bool(np.all(parallel_mask[list(token.notes)]))

            if token.tonic not in scale_notes:
                is_borrowed = bool(parallel_mask[token.tonic]) and all_tones_in_parallel
            else:
                expected = self.EXPECTED_QUALITIES[scale_type][numeral.degree - 1]
                is_borrowed = (
                    expected is not None
                    and not self.qualities_equivalent(token.quality, expected)
                    and all_tones_in_parallel
                )

            if is_borrowed:
                borrowed.append(BorrowedChord(
                    chord=token.symbol,
                    borrowed_from=parallel_key,
                    function=get_harmonic_function(numeral.degree),
                    index=i,
                ))

        return borrowed


def _symbol(chord: ChordInput) -> str:
    return chord.symbol if isinstance(chord, ChordToken) else chord.strip()


def detect_cadences(
    chords: Sequence[ChordInput],
    key: Optional[str] = None,
) -> List[Cadence]:
    """
    Detect cadences in a progression.

    Args:
        chords: Chord symbols
        key: Key name such as "C major"; detected when omitted

    Raises:
        EmptyProgressionError: If chords is empty
        InvalidChordError: If a symbol cannot be parsed
    """
    tokens = to_tokens(chords, "detect cadences in")
    root, scale_type = _resolve_key(tokens, key)
    numerals = get_roman_numerals(tokens, root, scale_type)
    return CadenceDetector().detect(tokens, numerals)


def _resolve_key(tokens: List[ChordToken], key: Optional[str]) -> Tuple[int, ScaleType]:
    if key is None:
        detection = detect_key(tokens)
        return detection.tonic, detection.scale_type
    return parse_key_name(key)
