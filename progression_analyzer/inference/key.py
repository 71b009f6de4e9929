"""Key detection - Identify the tonal center of a chord progression.

Every one of the 24 major/minor keys is scored against the progression:
- +2 for each chord diatonic to the key, -1 for each chord outside it
- +4 when the first chord is built on the key root, +2 for the last chord
- +3 for each V -> vi motion (major keys only)

Keys are enumerated in a fixed order (majors around the circle of fifths,
then minors), and ties go to the earliest key.
"""

import numpy as np
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

from ..core.chord import ChordQuality, ChordToken
from ..core.constants import DEFAULT_KEY_ALTERNATIVES, DEFAULT_SCALE_CACHE_SIZE
from ..core.errors import EmptyProgressionError
from ..core.scales import (
    ScaleCache,
    ScaleType,
    key_name,
    key_root_name,
    root_pitch_class,
    scale_mask,
)

ChordInput = Union[str, ChordToken]

_MAJ = ChordQuality.MAJOR
_MIN = ChordQuality.MINOR
_DIM = ChordQuality.DIMINISHED


@dataclass
class KeyCandidate:
    """A candidate key with its score."""
    root: str  # Key-signature spelling of the tonic
    tonic: int  # Tonic pitch class (0-11)
    scale_type: ScaleType
    score: int
    diatonic_count: int = 0

    @property
    def name(self) -> str:
        return f"{self.root} {self.scale_type.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.name,
            "score": self.score,
            "diatonic_count": self.diatonic_count,
        }


@dataclass
class KeyDetection:
    """Container for key detection results."""

    key: str  # e.g. "C major"
    confidence: float  # diatonic chords / total chords
    root: str  # Key root name (e.g., "C", "F#")
    tonic: int  # Root pitch class
    scale_type: ScaleType
    diatonic_count: int
    total_chords: int
    candidates: List[KeyCandidate] = field(default_factory=list)  # Runner-up keys

    @property
    def relative_key(self) -> str:
        return KeyDetector.get_relative_key(self.tonic, self.scale_type)

    @property
    def parallel_key(self) -> str:
        return KeyDetector.get_parallel_key(self.tonic, self.scale_type)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "key": self.key,
            "confidence": round(self.confidence, 3),
            "root": self.root,
            "scale_type": self.scale_type.value,
            "diatonic_count": self.diatonic_count,
            "total_chords": self.total_chords,
            "relative_key": self.relative_key,
            "parallel_key": self.parallel_key,
            "alternatives": [c.to_dict() for c in self.candidates],
        }


def to_tokens(chords: Sequence[ChordInput], operation: str = "analyze") -> List[ChordToken]:
    """
    Parse chord symbols, passing already-parsed tokens through.

    Raises:
        EmptyProgressionError: If no chords are given
        InvalidChordError: On the first unparsable symbol
    """
    if not chords:
        raise EmptyProgressionError(operation)
    return [c if isinstance(c, ChordToken) else ChordToken.parse(c) for c in chords]


class KeyDetector:
    """Detect the key of a chord progression.

    Scale notes are looked up through a bounded LRU cache owned by the
    detector, so repeated detections reuse the 24 computed scales.
    """

    # Search order: majors around the circle of fifths, then minors
    MAJOR_KEY_ORDER = [0, 7, 2, 9, 4, 11, 6, 1, 8, 3, 10, 5]
    MINOR_KEY_ORDER = [9, 4, 11, 6, 1, 8, 3, 10, 5, 0, 7, 2]

    # Expected triad quality per natural scale degree
    DEGREE_QUALITIES = {
        ScaleType.MAJOR: [_MAJ, _MIN, _MIN, _MAJ, _MAJ, _MIN, _DIM],
        ScaleType.MINOR: [_MIN, _DIM, _MAJ, _MIN, _MIN, _MAJ, _MAJ],
    }

    DIATONIC_SCORE = 2
    NON_DIATONIC_PENALTY = -1
    FIRST_CHORD_BONUS = 4
    LAST_CHORD_BONUS = 2
    DECEPTIVE_MOTION_BONUS = 3

    def __init__(
        self,
        cache: Optional[ScaleCache] = None,
        cache_size: int = DEFAULT_SCALE_CACHE_SIZE,
        alternatives: int = DEFAULT_KEY_ALTERNATIVES,
    ):
        """
        Initialize KeyDetector.

        Args:
            cache: Scale cache to use (a private one is created if omitted)
            cache_size: Capacity of the private cache
            alternatives: Number of runner-up keys kept in the result
        """
        self.cache = cache if cache is not None else ScaleCache(cache_size)
        self.alternatives = alternatives

    @classmethod
    def key_order(cls) -> List[Tuple[int, ScaleType]]:
        """All 24 keys in search order."""
        return (
            [(pc, ScaleType.MAJOR) for pc in cls.MAJOR_KEY_ORDER]
            + [(pc, ScaleType.MINOR) for pc in cls.MINOR_KEY_ORDER]
        )

    def scale_notes(self, root: Union[int, str], scale_type: Union[str, ScaleType]) -> List[int]:
        """Scale notes for a key; minor keys include their alterations."""
        return self.cache.get_or_compute(root_pitch_class(root), scale_type)

    def natural_scale(self, root: Union[int, str], scale_type: Union[str, ScaleType]) -> List[int]:
        return self.scale_notes(root, scale_type)[:7]

    def detect(self, chords: Sequence[ChordInput]) -> KeyDetection:
        """
        Detect the most likely key.

        Args:
            chords: Chord symbols or parsed tokens, in order

        Returns:
            KeyDetection with the best key and runner-up candidates

        Raises:
            EmptyProgressionError: If chords is empty
            InvalidChordError: If a symbol cannot be parsed
        """
        tokens = to_tokens(chords, "detect the key of")

        candidates = [
            self.score_key(tokens, root, scale_type)
            for root, scale_type in self.key_order()
        ]
        # sorted() is stable, so equal scores keep search order
        ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
        best = ranked[0]

        return KeyDetection(
            key=best.name,
            confidence=min(1.0, best.diatonic_count / len(tokens)),
            root=best.root,
            tonic=best.tonic,
            scale_type=best.scale_type,
            diatonic_count=best.diatonic_count,
            total_chords=len(tokens),
            candidates=ranked[1:1 + self.alternatives],
        )

    def score_key(
        self,
        chords: Sequence[ChordInput],
        root: Union[int, str],
        scale_type: Union[str, ScaleType],
    ) -> KeyCandidate:
        """Score one key against a progression."""
        tokens = to_tokens(chords, "score")
        tonic = root_pitch_class(root)
        scale_type = ScaleType.coerce(scale_type)

        diatonic = np.array([self.is_diatonic(t, tonic, scale_type) for t in tokens])
        diatonic_count = int(diatonic.sum())
        score = (
            self.DIATONIC_SCORE * diatonic_count
            + self.NON_DIATONIC_PENALTY * (len(tokens) - diatonic_count)
        )

        if tokens[0].tonic == tonic:
            score += self.FIRST_CHORD_BONUS
        if tokens[-1].tonic == tonic:
            score += self.LAST_CHORD_BONUS

        if scale_type is ScaleType.MAJOR:
            natural = self.natural_scale(tonic, scale_type)
            for current, following in zip(tokens, tokens[1:]):
                if (
                    current.tonic == natural[4]
                    and current.quality.is_major_family
                    and following.tonic == natural[5]
                    and following.quality is ChordQuality.MINOR
                ):
                    score += self.DECEPTIVE_MOTION_BONUS

        return KeyCandidate(
            root=key_root_name(tonic, scale_type),
            tonic=tonic,
            scale_type=scale_type,
            score=score,
            diatonic_count=diatonic_count,
        )

    def is_diatonic(
        self,
        chord: ChordInput,
        root: Union[int, str],
        scale_type: Union[str, ScaleType],
    ) -> bool:
        """
        Check whether a chord belongs to a key.

        The root must be a natural scale degree and the chord quality must
        match the triad built on that degree. In minor keys the major (or
        dominant) V of harmonic minor is accepted as well.
        """
        token = chord if isinstance(chord, ChordToken) else ChordToken.parse(chord)
        scale_type = ScaleType.coerce(scale_type)
        notes = self.scale_notes(root, scale_type)

        if not scale_mask(notes)[token.tonic]:
            return False
        natural = notes[:7]
        if token.tonic not in natural:
            # Raised 6th/7th roots have no diatonic triad
            return False
        if token.quality is ChordQuality.AUGMENTED:
            return False

        degree_index = natural.index(token.tonic)
        if scale_type is ScaleType.MINOR and degree_index == 4 and token.quality.is_major_family:
            return True

        expected = self.DEGREE_QUALITIES[scale_type][degree_index]
        if expected is ChordQuality.MAJOR:
            return token.quality.is_major_family
        return token.quality is expected

    @staticmethod
    def get_relative_key(root: Union[int, str], scale_type: Union[str, ScaleType]) -> str:
        """
        Get the relative major/minor key.

        Relative minor is 3 semitones down from major.
        Relative major is 3 semitones up from minor.
        """
        tonic = root_pitch_class(root)
        if ScaleType.coerce(scale_type) is ScaleType.MAJOR:
            return key_name((tonic - 3) % 12, ScaleType.MINOR)
        return key_name((tonic + 3) % 12, ScaleType.MAJOR)

    @staticmethod
    def get_parallel_key(root: Union[int, str], scale_type: Union[str, ScaleType]) -> str:
        """Get the parallel major/minor key (same root, different mode)."""
        return key_name(root_pitch_class(root), ScaleType.coerce(scale_type).parallel)


_default_detector = KeyDetector()


def detect_key(chords: Sequence[ChordInput]) -> KeyDetection:
    """Detect the key of a chord progression with the shared default detector."""
    return _default_detector.detect(chords)
