"""Core types and constants for Progression Analyzer."""

from .chord import (
    ChordQuality,
    ChordToken,
    parse_chord,
    parse_chords,
    note_to_pitch_class,
    pitch_class_to_name,
)
from .scales import (
    ScaleType,
    ScaleCache,
    get_natural_scale,
    get_scale_notes,
    key_name,
    parse_key_name,
)
from .errors import (
    ProgressionError,
    EmptyProgressionError,
    InvalidChordError,
    UnknownScaleDegreeError,
)
from .constants import PITCH_NAMES, ROMAN_NUMERALS

__all__ = [
    # Chords
    "ChordQuality",
    "ChordToken",
    "parse_chord",
    "parse_chords",
    "note_to_pitch_class",
    "pitch_class_to_name",
    # Scales
    "ScaleType",
    "ScaleCache",
    "get_natural_scale",
    "get_scale_notes",
    "key_name",
    "parse_key_name",
    # Errors
    "ProgressionError",
    "EmptyProgressionError",
    "InvalidChordError",
    "UnknownScaleDegreeError",
    # Constants
    "PITCH_NAMES",
    "ROMAN_NUMERALS",
]
