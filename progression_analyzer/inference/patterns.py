"""Common progression patterns - Named progressions found in any genre.

Numerals are compared with their extensions removed ("V7" matches "V",
"Imaj7" matches "I") but case is significant, so "I" never matches "i".
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple, Union

from .roman import RomanNumeralResult

NumeralInput = Union[str, RomanNumeralResult]


@dataclass(frozen=True)
class PatternDefinition:
    """A catalog entry: a named Roman numeral sequence."""
    name: str
    sequence: Tuple[str, ...]
    type: str
    popularity: str  # "very common" or "common"


@dataclass
class Pattern:
    """A catalog pattern found in a progression."""
    name: str
    type: str
    popularity: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "popularity": self.popularity}


def _define(name: str, type_: str, popularity: str) -> PatternDefinition:
    return PatternDefinition(name, tuple(name.split("-")), type_, popularity)


_AUTHENTIC = "authentic cadence progression"
_JAZZ = "jazz turnaround"
_POPULAR = "popular progression"
_MINOR = "minor key progression"

COMMON_PATTERNS: Tuple[PatternDefinition, ...] = (
    _define("I-IV-V-I", _AUTHENTIC, "very common"),
    _define("I-V-I", _AUTHENTIC, "very common"),
    _define("I-IV-I-V-I", _AUTHENTIC, "common"),
    _define("ii-V-I", _JAZZ, "very common"),
    _define("ii7-V7-I", _JAZZ, "very common"),
    _define("ii7-V7-Imaj7", _JAZZ, "very common"),
    _define("I-vi-ii-V", _JAZZ, "very common"),
    _define("iii-VI-ii-V", _JAZZ, "common"),
    _define("I-V-vi-IV", _POPULAR, "very common"),
    _define("vi-IV-I-V", _POPULAR, "very common"),
    _define("I-vi-IV-V", _POPULAR, "very common"),
    _define("I-IV-vi-V", _POPULAR, "common"),
    _define("i-iv-V", _MINOR, "very common"),
    _define("i-VI-III-VII", _MINOR, "very common"),
    _define("i-VII-VI-V", _MINOR, "common"),
    _define("I-ii-V-I", "classical progression", "common"),
    _define("I-IV-V-vi", "deceptive cadence progression", "common"),
)

_EXTENSION_RE = re.compile(r"maj7|7|9|11|13|6")


def normalize_numeral(roman: str) -> str:
    """Strip extensions and whitespace, keeping case and °/+ marks."""
    return re.sub(r"\s+", "", _EXTENSION_RE.sub("", roman))


class GeneralPatternMatcher:
    """Find catalog progressions anywhere inside a numeral sequence."""

    def __init__(self, patterns: Sequence[PatternDefinition] = COMMON_PATTERNS):
        self.patterns = tuple(patterns)

    def detect(self, numerals: Sequence[NumeralInput]) -> List[Pattern]:
        """
        Find all catalog patterns in a progression.

        Args:
            numerals: Roman numerals (strings or conversion results)

        Returns:
            Matched patterns in catalog order, each name at most once
        """
        normalized = [normalize_numeral(_roman(n)) for n in numerals]
        matches: List[Pattern] = []
        seen = set()

        for definition in self.patterns:
            if definition.name in seen:
                continue
            target = [normalize_numeral(step) for step in definition.sequence]
            size = len(target)

            for start in range(len(normalized) - size + 1):
                if normalized[start:start + size] == target:
                    matches.append(Pattern(definition.name, definition.type, definition.popularity))
                    seen.add(definition.name)
                    break

        return matches

    def patterns_by_type(self, pattern_type: str) -> List[PatternDefinition]:
        return [p for p in self.patterns if p.type == pattern_type]

    def very_common_patterns(self) -> List[PatternDefinition]:
        return [p for p in self.patterns if p.popularity == "very common"]


def _roman(numeral: NumeralInput) -> str:
    return numeral.roman if isinstance(numeral, RomanNumeralResult) else numeral


_default_matcher = GeneralPatternMatcher()


def detect_patterns(numerals: Sequence[NumeralInput]) -> List[Pattern]:
    """Detect common progressions, e.g. ["ii7", "V7", "Imaj7"] -> ii-V-I and friends."""
    return _default_matcher.detect(numerals)


def has_pattern(numerals: Sequence[NumeralInput], name: str) -> bool:
    return any(p.name == name for p in detect_patterns(numerals))


def patterns_by_type(pattern_type: str) -> List[PatternDefinition]:
    return _default_matcher.patterns_by_type(pattern_type)


def very_common_patterns() -> List[PatternDefinition]:
    return _default_matcher.very_common_patterns()
