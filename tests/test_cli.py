"""Tests for the command-line interface."""

import json
from pathlib import Path
import sys

from typer.testing import CliRunner

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from progression_analyzer.cli import app

runner = CliRunner()


class TestKeyCommand:
    """Tests for the key command."""

    def test_detects_key(self):
        """Test the key is printed with related keys."""
        result = runner.invoke(app, ["key", "C", "F", "G", "C"])
        assert result.exit_code == 0
        assert "Key: C major" in result.output
        assert "Relative: A minor" in result.output
        assert "Parallel: C minor" in result.output

    def test_json_output(self):
        """Test machine-readable output."""
        result = runner.invoke(app, ["key", "Am", "Dm", "E", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["key"] == "A minor"
        assert len(data["alternatives"]) == 3

    def test_invalid_chord(self):
        """Test unparsable chords exit with an error."""
        result = runner.invoke(app, ["key", "C", "H7"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_analyze(self):
        """Test the full report."""
        result = runner.invoke(app, ["analyze", "C", "F", "G", "C"])
        assert result.exit_code == 0
        assert "Key: C major" in result.output
        assert "I - IV - V - I" in result.output
        assert "authentic" in result.output
        assert "Loopable: yes" in result.output

    def test_unknown_genre(self):
        """Test an unknown genre hint exits with an error."""
        result = runner.invoke(app, ["analyze", "C", "G", "--genre", "polka"])
        assert result.exit_code == 1
        assert "Unknown genre" in result.output

    def test_invalid_chord(self):
        """Test unparsable chords exit with an error."""
        result = runner.invoke(app, ["analyze", "C", "Zz"])
        assert result.exit_code == 1


class TestRomanCommand:
    """Tests for the roman command."""

    def test_roman(self):
        """Test numerals in an explicit key."""
        result = runner.invoke(app, ["roman", "Dm7", "G7", "Cmaj7", "--key", "C major"])
        assert result.exit_code == 0
        assert "ii7" in result.output
        assert "Imaj7" in result.output

    def test_bad_key(self):
        """Test an unparsable key exits with an error."""
        result = runner.invoke(app, ["roman", "C", "--key", "C lydian"])
        assert result.exit_code == 1


class TestGenreCommands:
    """Tests for the genre and patterns commands."""

    def test_genre(self):
        """Test genre ranking output."""
        result = runner.invoke(app, ["genre", "Dm7", "G7", "Cmaj7"])
        assert result.exit_code == 0
        assert "jazz" in result.output

    def test_genre_unknown_input(self):
        """Test unparsable input reports the unknown genre."""
        result = runner.invoke(app, ["genre", "nope"])
        assert result.exit_code == 0
        assert "unknown" in result.output

    def test_patterns_for_genre(self):
        """Test listing one genre's patterns."""
        result = runner.invoke(app, ["patterns", "--genre", "blues"])
        assert result.exit_code == 0
        assert "8 patterns" in result.output

    def test_patterns_all(self):
        """Test listing the whole catalog."""
        result = runner.invoke(app, ["patterns"])
        assert result.exit_code == 0
        assert "50 patterns" in result.output
