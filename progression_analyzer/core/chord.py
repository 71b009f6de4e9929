"""Chord symbol parsing - the boundary between chord-name text and analysis.

Turns a symbol such as "Dm7", "Bb", "F#m7b5" or "G7/B" into a ChordToken with:
- Root pitch class and spelled root name
- Closed chord quality (major, minor, dominant, diminished, augmented)
- Structural kind ("dominant seventh", "minor ninth", ...)
- Interval template and ordered pitch classes

Quality is decided here, once. Downstream analyzers switch over ChordQuality
instead of re-reading the symbol text.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, FrozenSet, List, Optional, Tuple

from .constants import ACCIDENTALS, NATURAL_PITCH_CLASSES, PITCH_NAMES, PITCH_NAMES_FLAT
from .errors import InvalidChordError


class ChordQuality(Enum):
    """Harmonic quality of a chord."""
    MAJOR = "major"
    MINOR = "minor"
    DOMINANT = "dominant"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"

    @property
    def is_major_family(self) -> bool:
        return self in (ChordQuality.MAJOR, ChordQuality.DOMINANT)


_MAJ = ChordQuality.MAJOR
_MIN = ChordQuality.MINOR
_DOM = ChordQuality.DOMINANT
_DIM = ChordQuality.DIMINISHED
_AUG = ChordQuality.AUGMENTED

# Chord templates: suffix -> (quality, kind, intervals from root in semitones)
# Suffixes are case sensitive ("M7" is major seventh, "m7" is minor seventh)
CHORD_TEMPLATES: Dict[str, Tuple[ChordQuality, str, Tuple[int, ...]]] = {}


def _register(suffixes: List[str], quality: ChordQuality, kind: str, intervals: Tuple[int, ...]):
    for suffix in suffixes:
        CHORD_TEMPLATES[suffix] = (quality, kind, intervals)


# Triads
_register(["", "M", "maj", "major"], _MAJ, "major", (0, 4, 7))
_register(["m", "min", "-", "minor"], _MIN, "minor", (0, 3, 7))
_register(["dim", "°", "o"], _DIM, "diminished", (0, 3, 6))
_register(["aug", "+"], _AUG, "augmented", (0, 4, 8))
_register(["sus4", "sus"], _MAJ, "suspended fourth", (0, 5, 7))
_register(["sus2"], _MAJ, "suspended second", (0, 2, 7))
_register(["5"], _MAJ, "fifth", (0, 7))
# Sixths and added tones
_register(["6", "M6", "maj6"], _MAJ, "sixth", (0, 4, 7, 9))
_register(["69", "6/9", "6add9"], _MAJ, "sixth added ninth", (0, 4, 7, 9, 14))
_register(["add9", "add2", "2"], _MAJ, "added ninth", (0, 4, 7, 14))
_register(["m6", "min6"], _MIN, "minor sixth", (0, 3, 7, 9))
_register(["madd9", "minadd9"], _MIN, "minor added ninth", (0, 3, 7, 14))
# Seventh chords
_register(["maj7", "M7", "Δ", "Δ7", "major7", "ma7"], _MAJ, "major seventh", (0, 4, 7, 11))
_register(["m7", "min7", "-7"], _MIN, "minor seventh", (0, 3, 7, 10))
_register(["mM7", "mMaj7", "mmaj7", "minmaj7", "-M7"], _MIN, "minor/major seventh", (0, 3, 7, 11))
_register(["7", "dom7"], _DOM, "dominant seventh", (0, 4, 7, 10))
_register(["dim7", "°7", "o7"], _DIM, "diminished seventh", (0, 3, 6, 9))
_register(["m7b5", "m7♭5", "min7b5", "-7b5", "ø", "ø7"], _DIM, "half-diminished seventh", (0, 3, 6, 10))
_register(["aug7", "+7", "7#5", "7♯5", "7+5"], _AUG, "augmented seventh", (0, 4, 8, 10))
_register(["7sus4", "7sus"], _DOM, "suspended fourth seventh", (0, 5, 7, 10))
# Extended chords
_register(["maj9", "M9", "Δ9"], _MAJ, "major ninth", (0, 4, 7, 11, 14))
_register(["maj13", "M13"], _MAJ, "major thirteenth", (0, 4, 7, 11, 14, 21))
_register(["m9", "min9"], _MIN, "minor ninth", (0, 3, 7, 10, 14))
_register(["m11", "min11"], _MIN, "minor eleventh", (0, 3, 7, 10, 14, 17))
_register(["9"], _DOM, "dominant ninth", (0, 4, 7, 10, 14))
_register(["11"], _DOM, "dominant eleventh", (0, 4, 7, 10, 14, 17))
_register(["13"], _DOM, "dominant thirteenth", (0, 4, 7, 10, 14, 21))
# Altered dominants
_register(["7b9", "7♭9"], _DOM, "dominant flat ninth", (0, 4, 7, 10, 13))
_register(["7#9", "7♯9"], _DOM, "dominant sharp ninth", (0, 4, 7, 10, 15))
_register(["7b5", "7♭5"], _DOM, "dominant flat fifth", (0, 4, 6, 10))
_register(["7#11", "7♯11"], _DOM, "lydian dominant seventh", (0, 4, 7, 10, 18))
_register(["7alt"], _DOM, "altered", (0, 4, 6, 10, 13))

_CHORD_RE = re.compile(r"^([A-G])([#b♯♭]{0,2})(.*?)(?:/([A-G][#b♯♭]{0,2}))?$")


def note_to_pitch_class(name: str) -> int:
    """
    Convert a note name to its pitch class.

    Enharmonic spellings map to the same pitch class ("C#" and "Db" -> 1).

    Raises:
        ValueError: If the name is not a valid note
    """
    name = name.strip() if name else ""
    if not name or name[0] not in NATURAL_PITCH_CLASSES:
        raise ValueError(f"Invalid note name: {name!r}")

    pc = NATURAL_PITCH_CLASSES[name[0]]
    for accidental in name[1:]:
        if accidental not in ACCIDENTALS:
            raise ValueError(f"Invalid note name: {name!r}")
        pc += ACCIDENTALS[accidental]
    return pc % 12


def pitch_class_to_name(pc: int, prefer_flats: bool = False) -> str:
    """Get a note name for a pitch class (0-11)."""
    names = PITCH_NAMES_FLAT if prefer_flats else PITCH_NAMES
    return names[pc % 12]


def normalize_note_name(name: str) -> str:
    """Replace unicode accidentals with their ASCII equivalents."""
    return name.replace("♯", "#").replace("♭", "b")


@dataclass(frozen=True)
class ChordToken:
    """A parsed chord symbol."""

    symbol: str  # Original symbol (stripped)
    root: str  # Spelled root name (e.g., "Bb", "F#")
    tonic: int  # Root pitch class (0-11)
    quality: ChordQuality
    kind: str  # Structural type (e.g., "dominant seventh")
    intervals: Tuple[int, ...]  # Semitones from root
    notes: Tuple[int, ...]  # Pitch classes in template order
    bass: Optional[int] = None  # Bass pitch class for slash chords

    @property
    def pitch_classes(self) -> FrozenSet[int]:
        """Get pitch classes in the chord."""
        return frozenset(self.notes)

    @property
    def is_dominant_seventh(self) -> bool:
        return self.kind == "dominant seventh"

    @classmethod
    def parse(cls, symbol: str) -> "ChordToken":
        """
        Parse a chord symbol, failing loudly.

        Raises:
            InvalidChordError: If the symbol cannot be parsed
        """
        token = parse_chord(symbol)
        if token is None:
            raise InvalidChordError(symbol)
        return token


@lru_cache(maxsize=1024)
def _parse(symbol: str) -> Optional[ChordToken]:
    match = _CHORD_RE.match(symbol)
    if not match:
        return None

    letter, accidentals, suffix, bass = match.groups()
    template = CHORD_TEMPLATES.get(suffix.replace("(", "").replace(")", ""))
    if template is None:
        return None

    quality, kind, intervals = template
    root = normalize_note_name(letter + accidentals)
    tonic = note_to_pitch_class(root)

    notes: List[int] = []
    for interval in intervals:
        pc = (tonic + interval) % 12
        if pc not in notes:
            notes.append(pc)

    return ChordToken(
        symbol=symbol,
        root=root,
        tonic=tonic,
        quality=quality,
        kind=kind,
        intervals=intervals,
        notes=tuple(notes),
        bass=note_to_pitch_class(bass) if bass else None,
    )


def parse_chord(symbol: str) -> Optional[ChordToken]:
    """
    Parse a chord symbol into a ChordToken.

    Args:
        symbol: Chord symbol (e.g., "Dm7", "Bb", "G7/B")

    Returns:
        ChordToken, or None if the symbol is not a recognized chord
    """
    if not isinstance(symbol, str):
        return None
    symbol = symbol.strip()
    if not symbol:
        return None
    return _parse(symbol)


def parse_chords(symbols: List[str]) -> List[ChordToken]:
    """
    Parse a list of chord symbols.

    Raises:
        InvalidChordError: On the first symbol that cannot be parsed
    """
    return [ChordToken.parse(symbol) for symbol in symbols]
