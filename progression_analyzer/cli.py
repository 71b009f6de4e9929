"""Command-line interface for Progression Analyzer.

Provides commands for:
- analyze: Full progression analysis (key, numerals, cadences, genres)
- key: Detect the key of a progression
- roman: Roman numerals of chords in a given key
- genre: Rank the genres a progression resembles
- patterns: Show the genre pattern catalog
"""

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.errors import ProgressionError
from .core.scales import parse_key_name
from .inference import (
    GENRE_PATTERNS,
    Genre,
    KeyDetector,
    ProgressionAnalysis,
    RomanNumeralConverter,
    analyze_progression,
    detect_genre,
    get_patterns_for_genre,
)

app = typer.Typer(
    name="progression-analyzer",
    help="Chord progression analysis: key, harmony and genre",
    rich_markup_mode="markdown",
)
console = Console()


def _fail(message: str, suggestion: Optional[str] = None) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    if suggestion:
        console.print(f"  [dim]{escape(suggestion)}[/dim]")
    raise typer.Exit(1)


def _parse_genre(genre: Optional[str]) -> Optional[Genre]:
    if genre is None:
        return None
    try:
        return Genre(genre.strip().lower())
    except ValueError:
        known = ", ".join(g.value for g in Genre if g is not Genre.UNKNOWN)
        _fail(f"Unknown genre: {genre}", f"Choose one of: {known}")


@app.command()
def analyze(
    chords: List[str] = typer.Argument(..., help="Chord symbols, e.g. C Am F G"),
    genre: Optional[str] = typer.Option(
        None, "--genre", "-g", help="Only consider patterns of this genre"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Full progression analysis: key, Roman numerals, cadences and genres.

    **Examples:**

        progression-analyzer analyze C Am F G

        progression-analyzer analyze Dm7 G7 Cmaj7 --genre jazz --json
    """
    genre_hint = _parse_genre(genre)

    try:
        result = analyze_progression(chords, genre=genre_hint)
    except ProgressionError as e:
        _fail(e.message, e.suggestion)

    if json_output:
        console.print_json(data=result.to_dict())
        return

    console.print(f"\n[bold blue]Progression: {escape(' '.join(chords))}[/bold blue]\n")
    console.print(f"[green]Key: {result.key}[/green]")
    console.print(f"Confidence: {result.confidence:.2f}")

    _show_analysis_table(result)

    console.print(f"\n[green]Numerals: {' - '.join(result.roman_numerals)}[/green]")

    if result.cadences:
        console.print("\n[bold]Cadences:[/bold]")
        for cadence in result.cadences:
            console.print(
                f"  {cadence.type.value} ({cadence.strength}): "
                f"{escape(cadence.chords[0])} -> {escape(cadence.chords[1])}"
            )

    if result.secondary_dominants:
        console.print("\n[bold]Secondary dominants:[/bold]")
        for item in result.secondary_dominants:
            console.print(f"  {escape(item.chord)} = {item.roman_notation} (resolves to {escape(item.target_chord)})")

    if result.borrowed_chords:
        console.print("\n[bold]Borrowed chords:[/bold]")
        for item in result.borrowed_chords:
            console.print(f"  {escape(item.chord)} from {item.borrowed_from} ({item.function.value})")

    if result.patterns:
        console.print("\n[bold]Patterns:[/bold]")
        for pattern in result.patterns:
            console.print(f"  {pattern.name} - {pattern.type} ({pattern.popularity})")

    _show_genres_table(result.suggested_genres)

    console.print(f"\nLoopable: {'yes' if result.loopable else 'no'}")


@app.command()
def key(
    chords: List[str] = typer.Argument(..., help="Chord symbols, e.g. C F G C"),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Detect the key of a progression."""
    try:
        detection = KeyDetector().detect(chords)
    except ProgressionError as e:
        _fail(e.message, e.suggestion)

    if json_output:
        console.print_json(data=detection.to_dict())
        return

    console.print(f"[green]Key: {detection.key}[/green]")
    console.print(f"  Confidence: {detection.confidence:.2f} "
                  f"({detection.diatonic_count}/{detection.total_chords} chords diatonic)")
    console.print(f"  Relative: {detection.relative_key}")
    console.print(f"  Parallel: {detection.parallel_key}")

    if detection.candidates:
        console.print("  Alternatives:")
        for candidate in detection.candidates:
            console.print(f"    {candidate.name} (score {candidate.score})")


@app.command()
def roman(
    chords: List[str] = typer.Argument(..., help="Chord symbols"),
    key_name: str = typer.Option(
        ..., "--key", "-k", help='Key to analyze in, e.g. "C major" or "F#m"'
    ),
):
    """Show Roman numerals of chords in a given key.

    **Examples:**

        progression-analyzer roman Dm7 G7 Cmaj7 --key "C major"
    """
    try:
        root, scale_type = parse_key_name(key_name)
    except ValueError as e:
        _fail(str(e), 'Keys look like "C major", "Bb minor" or "F#m"')

    try:
        numerals = RomanNumeralConverter().get_roman_numerals(chords, root, scale_type)
    except ProgressionError as e:
        _fail(e.message, e.suggestion)

    table = Table(title=f"Roman Numerals in {escape(key_name)}")
    table.add_column("Chord", style="cyan")
    table.add_column("Roman", style="green")
    table.add_column("Degree", style="yellow")
    table.add_column("Quality", style="magenta")

    for chord, numeral in zip(chords, numerals):
        table.add_row(escape(chord), numeral.roman, str(numeral.degree), numeral.quality.value)

    console.print(table)


@app.command()
def genre(
    chords: List[str] = typer.Argument(..., help="Chord symbols"),
    genre_name: Optional[str] = typer.Option(
        None, "--genre", "-g", help="Only consider patterns of this genre"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Rank the genres a progression resembles."""
    genre_hint = _parse_genre(genre_name)
    results = detect_genre(chords, genre=genre_hint)

    if json_output:
        console.print_json(data=[r.to_dict() for r in results])
        return

    _show_genres_table(results)


@app.command()
def patterns(
    genre_name: Optional[str] = typer.Option(
        None, "--genre", "-g", help="Only list patterns of this genre"
    ),
):
    """List the genre pattern catalog."""
    genre_filter = _parse_genre(genre_name)
    catalog = get_patterns_for_genre(genre_filter) if genre_filter else list(GENRE_PATTERNS)

    table = Table(title="Genre Patterns")
    table.add_column("Pattern", style="cyan")
    table.add_column("Genre", style="green")
    table.add_column("Weight", style="yellow")
    table.add_column("Era", style="magenta")
    table.add_column("Description")

    for pattern in catalog:
        table.add_row(
            pattern.pattern,
            pattern.genre.value,
            str(pattern.weight),
            pattern.era,
            escape(pattern.description),
        )

    console.print(table)
    console.print(f"[dim]{len(catalog)} patterns[/dim]")


def _show_analysis_table(result: ProgressionAnalysis):
    """Display per-chord analysis in a table."""
    table = Table(title="Chord Analysis")
    table.add_column("#", style="dim")
    table.add_column("Chord", style="cyan")
    table.add_column("Roman", style="green")
    table.add_column("Function", style="yellow")
    table.add_column("Notes", style="magenta")

    for i, item in enumerate(result.analysis):
        notes = []
        if item.borrowed:
            notes.append("borrowed")
        if item.secondary_dominant:
            notes.append(f"-> {item.secondary_dominant}")
        table.add_row(
            str(i + 1),
            escape(item.chord),
            item.roman,
            item.function.value,
            escape(", ".join(notes)),
        )

    console.print(table)


def _show_genres_table(results):
    """Display ranked genres in a table."""
    table = Table(title="Suggested Genres")
    table.add_column("Genre", style="cyan")
    table.add_column("Confidence", style="magenta")
    table.add_column("Matched Patterns", style="green")

    for result in results:
        table.add_row(
            result.genre.value,
            f"{result.confidence:.2f}",
            ", ".join(p.pattern for p in result.matched_patterns) or "-",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
