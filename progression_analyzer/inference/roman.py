"""Roman numeral analysis - Name each chord by its scale degree in a key.

Upper case for major-family chords, lower case for minor, lower case with
"°" for diminished and "+" for augmented. Roots outside the natural scale get
an accidental prefix from the chromatic degree table ("♭VI", "♭VII").
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.chord import ChordQuality, ChordToken, parse_chord
from ..core.constants import DEFAULT_SCALE_CACHE_SIZE, ROMAN_NUMERALS
from ..core.errors import UnknownScaleDegreeError
from ..core.scales import ScaleCache, ScaleType, root_pitch_class

ChordInput = Union[str, ChordToken]

# Chromatic distance from the key root -> (scale degree, accidental)
CHROMATIC_DEGREES: Dict[int, Tuple[int, str]] = {
    0: (1, ""),
    1: (2, "♭"),
    2: (2, ""),
    3: (3, "♭"),
    4: (3, ""),
    5: (4, ""),
    6: (5, "♭"),
    7: (5, ""),
    8: (6, "♭"),
    9: (6, ""),
    10: (7, "♭"),
    11: (7, ""),
}

_MAJOR_SEVENTH_RE = re.compile(r"maj7|major7|Δ7", re.IGNORECASE)
_MINOR_SEVENTH_RE = re.compile(r"m7", re.IGNORECASE)

# Checked in order; the first one found in the symbol wins
EXTENSION_MARKERS = ["13", "11", "9", "7", "6"]
KIND_EXTENSIONS = [
    ("thirteenth", "13"),
    ("eleventh", "11"),
    ("ninth", "9"),
    ("major seventh", "maj7"),
    ("seventh", "7"),
    ("sixth", "6"),
]


@dataclass
class RomanNumeralResult:
    """A chord's Roman numeral in a key."""
    roman: str  # e.g. "V7", "ii", "♭VII", "vii°"
    degree: int  # 1-7
    quality: ChordQuality

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roman": self.roman,
            "degree": self.degree,
            "quality": self.quality.value,
        }


def extract_extension(token: ChordToken) -> str:
    """
    Get the numeral extension for a chord ("maj7", "7", "9", ...).

    Symbol text is read first; the parsed chord kind is the fallback for
    symbols that carry no digits (e.g. "Cø").
    """
    symbol = token.symbol

    if _MAJOR_SEVENTH_RE.search(symbol):
        return "maj7"
    # "M7" must win over the generic m7 test so "CmM7" reads as maj7
    if "M7" in symbol:
        return "maj7"
    if _MINOR_SEVENTH_RE.search(symbol) and token.quality is ChordQuality.MINOR:
        return "7"

    for marker in EXTENSION_MARKERS:
        if marker in symbol:
            return marker

    for kind_word, extension in KIND_EXTENSIONS:
        if kind_word in token.kind:
            return extension

    return ""


def format_numeral(degree: int, quality: ChordQuality) -> str:
    """Base numeral with case and quality marks applied."""
    numeral = ROMAN_NUMERALS[degree - 1]
    if quality is ChordQuality.MINOR:
        return numeral.lower()
    if quality is ChordQuality.DIMINISHED:
        return numeral.lower() + "°"
    if quality is ChordQuality.AUGMENTED:
        return numeral + "+"
    return numeral


class RomanNumeralConverter:
    """Convert chords to Roman numerals relative to a key."""

    def __init__(self, cache: Optional[ScaleCache] = None, cache_size: int = DEFAULT_SCALE_CACHE_SIZE):
        self.cache = cache if cache is not None else ScaleCache(cache_size)

    def convert(
        self,
        chord: ChordInput,
        root: Union[int, str],
        scale_type: Union[str, ScaleType],
    ) -> Optional[RomanNumeralResult]:
        """
        Convert one chord, returning None if the symbol cannot be parsed.

        Args:
            chord: Chord symbol or parsed token
            root: Key root as pitch class or note name
            scale_type: "major" or "minor"
        """
        token = chord if isinstance(chord, ChordToken) else parse_chord(chord)
        if token is None:
            return None

        tonic = root_pitch_class(root)
        natural = self.cache.get_or_compute(tonic, scale_type)[:7]

        if token.tonic in natural:
            degree = natural.index(token.tonic) + 1
            accidental = ""
        else:
            distance = (token.tonic - tonic) % 12
            if distance not in CHROMATIC_DEGREES:
                raise UnknownScaleDegreeError(distance)
            degree, accidental = CHROMATIC_DEGREES[distance]

        roman = accidental + format_numeral(degree, token.quality) + extract_extension(token)
        return RomanNumeralResult(roman=roman, degree=degree, quality=token.quality)

    def get_roman_numeral(
        self,
        chord: ChordInput,
        root: Union[int, str],
        scale_type: Union[str, ScaleType],
    ) -> RomanNumeralResult:
        """
        Convert one chord.

        Raises:
            InvalidChordError: If the symbol cannot be parsed
        """
        token = chord if isinstance(chord, ChordToken) else ChordToken.parse(chord)
        return self.convert(token, root, scale_type)

    def get_roman_numerals(
        self,
        chords: Sequence[ChordInput],
        root: Union[int, str],
        scale_type: Union[str, ScaleType],
    ) -> List[RomanNumeralResult]:
        """Convert every chord; the result has one entry per chord."""
        return [self.get_roman_numeral(chord, root, scale_type) for chord in chords]


_default_converter = RomanNumeralConverter()


def get_roman_numeral(
    chord: ChordInput,
    root: Union[int, str],
    scale_type: Union[str, ScaleType],
) -> RomanNumeralResult:
    """Get the Roman numeral of a chord in a key (e.g. "G7" in C major -> "V7")."""
    return _default_converter.get_roman_numeral(chord, root, scale_type)


def get_roman_numerals(
    chords: Sequence[ChordInput],
    root: Union[int, str],
    scale_type: Union[str, ScaleType],
) -> List[RomanNumeralResult]:
    return _default_converter.get_roman_numerals(chords, root, scale_type)
