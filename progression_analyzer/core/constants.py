"""Global constants for Progression Analyzer."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
PITCH_NAMES_FLAT = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Letter name -> pitch class
NATURAL_PITCH_CLASSES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

# Accidental -> semitone offset
ACCIDENTALS = {"#": 1, "♯": 1, "b": -1, "♭": -1}

# Conventional key-signature spelling of each tonic (index = pitch class)
MAJOR_KEY_NAMES = ["C", "Db", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]
MINOR_KEY_NAMES = ["C", "C#", "D", "Eb", "E", "F", "F#", "G", "G#", "A", "Bb", "B"]

# Scale formulas (semitones from root)
SCALE_INTERVALS = {
    "major": [0, 2, 4, 5, 7, 9, 11],
    "minor": [0, 2, 3, 5, 7, 8, 10],  # Natural minor
    "harmonic_minor": [0, 2, 3, 5, 7, 8, 11],
    "melodic_minor": [0, 2, 3, 5, 7, 9, 11],
}

# Roman numerals for scale degrees 1-7
ROMAN_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII"]

# Key detection defaults
DEFAULT_SCALE_CACHE_SIZE = 100
DEFAULT_KEY_ALTERNATIVES = 3

# Genre detection defaults
FULL_ANALYSIS_LIMIT = 16  # Chords analyzed whole
WINDOW_SIZE = 12
WINDOW_STEP = 6  # 50% overlap
MIN_WINDOW_SIZE = 4
MAX_PATTERN_WEIGHT = 10
