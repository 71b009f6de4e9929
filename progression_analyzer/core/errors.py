"""Error taxonomy for progression analysis.

All user-facing errors derive from ProgressionError, which is a ValueError so
callers validating input can catch it the usual way.
"""

from typing import Any, Dict, Optional


class ProgressionError(ValueError):
    """Base error with a machine-readable code and a hint for the caller."""

    code = "PROGRESSION_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class EmptyProgressionError(ProgressionError):
    """Raised when at least one chord is required but none were given."""

    code = "EMPTY_PROGRESSION"

    def __init__(self, operation: str = "analyze"):
        super().__init__(
            f"Cannot {operation} an empty chord progression",
            details={"operation": operation},
            suggestion="Provide at least one chord symbol, e.g. ['C', 'F', 'G', 'C']",
        )


class InvalidChordError(ProgressionError):
    """Raised when a chord symbol cannot be parsed."""

    code = "INVALID_CHORD"

    def __init__(self, chord: str):
        super().__init__(
            f"Invalid chord: {chord!r}",
            details={"chord": chord},
            suggestion="Chord symbols start with A-G, an optional accidental and a "
                       "known suffix (e.g. 'Dm7', 'Bb', 'F#dim', 'Cmaj7')",
        )
        self.chord = chord


class UnknownScaleDegreeError(ProgressionError, RuntimeError):
    """Chromatic distance fell outside the 12-entry degree table.

    Unreachable for valid pitch classes; signals an internal invariant violation.
    """

    code = "UNKNOWN_SCALE_DEGREE"

    def __init__(self, distance: int):
        super().__init__(
            f"Cannot determine scale degree for chromatic distance {distance}",
            details={"distance": distance},
        )
        self.distance = distance
