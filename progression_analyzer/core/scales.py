"""Scale catalog - note lists for major/minor keys, with a bounded cache.

Minor keys carry their harmonic and melodic alterations (raised 7th and 6th)
appended after the seven natural degrees, so a chord root can be tested for
membership while degree indices still follow the natural scale.
"""

import numpy as np
import threading
from typing import Callable, Dict, List, Optional, Tuple, Union
from collections import OrderedDict
from enum import Enum

from .chord import note_to_pitch_class
from .constants import (
    DEFAULT_SCALE_CACHE_SIZE,
    MAJOR_KEY_NAMES,
    MINOR_KEY_NAMES,
    SCALE_INTERVALS,
)


class ScaleType(Enum):
    """Key scale types."""
    MAJOR = "major"
    MINOR = "minor"

    @property
    def parallel(self) -> "ScaleType":
        return ScaleType.MINOR if self is ScaleType.MAJOR else ScaleType.MAJOR

    @classmethod
    def coerce(cls, value: Union[str, "ScaleType"]) -> "ScaleType":
        """Accept "major"/"minor" strings as well as enum members."""
        if isinstance(value, ScaleType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported scale type: {value!r} (expected 'major' or 'minor')")


def root_pitch_class(root: Union[int, str]) -> int:
    """Accept a key root as a pitch class or a note name ("Bb", "F#")."""
    if isinstance(root, str):
        return note_to_pitch_class(root)
    return int(root) % 12


def key_root_name(root: int, scale_type: Union[str, ScaleType]) -> str:
    """Conventional key-signature spelling of a tonic ("Db" major, "C#" minor)."""
    names = MAJOR_KEY_NAMES if ScaleType.coerce(scale_type) is ScaleType.MAJOR else MINOR_KEY_NAMES
    return names[root % 12]


def key_name(root: int, scale_type: Union[str, ScaleType]) -> str:
    """Full key name, e.g. "Bb major"."""
    scale_type = ScaleType.coerce(scale_type)
    return f"{key_root_name(root, scale_type)} {scale_type.value}"


def parse_key_name(name: str) -> Tuple[int, ScaleType]:
    """
    Parse a key name such as "C major", "f# minor" or "Bbm".

    Raises:
        ValueError: If the name is not a recognizable key
    """
    text = name.strip() if name else ""
    parts = text.split()
    if len(parts) == 2:
        root, scale = parts
    elif len(parts) == 1 and len(text) > 1 and text.endswith("m") and text[:-1]:
        root, scale = text[:-1], "minor"
    elif len(parts) == 1:
        root, scale = text, "major"
    else:
        raise ValueError(f"Invalid key name: {name!r}")
    root = root[0].upper() + root[1:]
    return note_to_pitch_class(root), ScaleType.coerce(scale)


def get_natural_scale(root: int, scale_type: Union[str, ScaleType]) -> List[int]:
    """
    Get the seven natural scale degrees as pitch classes.

    Args:
        root: Root pitch class (0-11)
        scale_type: "major" or "minor" (natural minor)

    Returns:
        Pitch classes in degree order
    """
    intervals = SCALE_INTERVALS[ScaleType.coerce(scale_type).value]
    return [(root + interval) % 12 for interval in intervals]


def get_scale_notes(root: int, scale_type: Union[str, ScaleType]) -> List[int]:
    """
    Get the scale notes used for key membership tests.

    For minor keys the unique harmonic/melodic minor notes are appended after
    the natural degrees.
    """
    scale_type = ScaleType.coerce(scale_type)
    notes = get_natural_scale(root, scale_type)

    if scale_type is ScaleType.MINOR:
        for variant in ("harmonic_minor", "melodic_minor"):
            for interval in SCALE_INTERVALS[variant]:
                pc = (root + interval) % 12
                if pc not in notes:
                    notes.append(pc)

    return notes


def scale_mask(notes: List[int]) -> np.ndarray:
    """Build a 12-element boolean membership mask from pitch classes."""
    mask = np.zeros(12, dtype=bool)
    mask[list(notes)] = True
    return mask


def scale_template_mask(root: int, scale_type: Union[str, ScaleType]) -> np.ndarray:
    """Membership mask of the natural scale, rotated to the given root."""
    template = scale_mask(SCALE_INTERVALS[ScaleType.coerce(scale_type).value])
    return np.roll(template, root)


class ScaleCache:
    """Bounded least-recently-used cache of scale notes.

    Keys are "{root}:{scale_type}". Access refreshes an entry; inserting past
    capacity evicts the least recently used one. Safe to share between threads.
    """

    def __init__(self, capacity: int = DEFAULT_SCALE_CACHE_SIZE):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: "OrderedDict[str, List[int]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(root: int, scale_type: Union[str, ScaleType]) -> str:
        return f"{root}:{ScaleType.coerce(scale_type).value}"

    def get(self, key: str) -> Optional[List[int]]:
        with self._lock:
            notes = self._entries.get(key)
            if notes is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return notes

    def put(self, key: str, notes: List[int]) -> None:
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.capacity:
                self._entries.popitem(last=False)
            self._entries[key] = notes

    def get_or_compute(
        self,
        root: int,
        scale_type: Union[str, ScaleType],
        compute: Callable[[int, ScaleType], List[int]] = get_scale_notes,
    ) -> List[int]:
        """Return cached scale notes, computing and storing them on a miss."""
        scale_type = ScaleType.coerce(scale_type)
        key = self.make_key(root, scale_type)
        notes = self.get(key)
        if notes is None:
            notes = compute(root, scale_type)
            self.put(key, notes)
        return list(notes)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def keys(self) -> List[str]:
        """Cached keys, least recently used first."""
        with self._lock:
            return list(self._entries.keys())

    def info(self) -> Dict[str, int]:
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "size": len(self._entries),
                "capacity": self.capacity,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
