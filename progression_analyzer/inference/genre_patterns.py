"""Genre pattern catalog - Signature progressions of each genre.

Each pattern is a hyphen-joined Roman numeral string with ASCII accidentals
("bVII", not "♭VII"), weighted 1-10 by how characteristic it is of the genre.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


class Genre(Enum):
    JAZZ = "jazz"
    POP = "pop"
    CLASSICAL = "classical"
    ROCK = "rock"
    EDM = "edm"
    BLUES = "blues"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class GenrePattern:
    """A progression characteristic of a genre."""
    pattern: str  # e.g. "ii-V-I"
    genre: Genre
    weight: int  # 1-10
    description: str
    examples: Tuple[str, ...]
    era: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "genre": self.genre.value,
            "weight": self.weight,
            "description": self.description,
            "examples": list(self.examples),
            "era": self.era,
        }


def _pattern(pattern, genre, weight, description, examples, era) -> GenrePattern:
    return GenrePattern(pattern, genre, weight, description, tuple(examples), era)


_JAZZ = Genre.JAZZ
_POP = Genre.POP
_CLASSICAL = Genre.CLASSICAL
_ROCK = Genre.ROCK
_EDM = Genre.EDM
_BLUES = Genre.BLUES

GENRE_PATTERNS: Tuple[GenrePattern, ...] = (
    # Jazz
    _pattern("ii-V-I", _JAZZ, 10,
             "Jazz turnaround - the most fundamental progression in jazz",
             ["Autumn Leaves - Cannonball Adderley",
              "All The Things You Are - Ella Fitzgerald",
              "Blue Bossa - Joe Henderson"],
             "bebop"),
    _pattern("iii-VI-ii-V", _JAZZ, 9,
             "Extended jazz turnaround with chromatic approach",
             ["Fly Me to the Moon - Frank Sinatra", "Satin Doll - Duke Ellington"],
             "swing"),
    _pattern("I-vi-ii-V", _JAZZ, 9,
             "Rhythm changes A-section progression",
             ["I Got Rhythm - George Gershwin", "Anthropology - Charlie Parker"],
             "bebop"),
    _pattern("bII7-I", _JAZZ, 8,
             "Tritone substitution - dominant replacement a tritone away",
             ["Satin Doll - Duke Ellington", "Have You Met Miss Jones - Chet Baker"],
             "bebop"),
    _pattern("im7-IV7-bVIImaj7", _JAZZ, 7,
             "Minor jazz progression with backdoor resolution",
             ["Softly As In A Morning Sunrise", "Beautiful Love"],
             "cool-jazz"),
    _pattern("Imaj7-bIIImaj7-bVImaj7-bIImaj7", _JAZZ, 8,
             "Coltrane changes - major thirds cycle modulation",
             ["Giant Steps - John Coltrane", "Countdown - John Coltrane"],
             "modal-jazz"),
    _pattern("IVmaj7-bVII7-Imaj7", _JAZZ, 7,
             "Backdoor progression - plagal resolution with bVII7",
             ["Ladybird - Tadd Dameron", "Body and Soul - Coleman Hawkins"],
             "bebop"),
    _pattern("i-IV7-i7-bVII7", _JAZZ, 6,
             "Jazz minor progression with mixolydian IV",
             ["Footprints - Wayne Shorter", "So What - Miles Davis"],
             "modal-jazz"),

    # Pop
    _pattern("I-V-vi-IV", _POP, 10,
             "Axis progression - the most popular progression in modern pop",
             ["Let It Be - Beatles", "No Woman No Cry - Bob Marley", "Someone Like You - Adele"],
             "modern"),
    _pattern("I-IV-V", _POP, 9,
             "Classic three-chord pop progression",
             ["Twist and Shout - Beatles", "La Bamba - Ritchie Valens", "Wild Thing - The Troggs"],
             "1960s"),
    _pattern("vi-IV-I-V", _POP, 9,
             "Sensitive female chord progression - emotional descent",
             ["Basket Case - Green Day", "Poker Face - Lady Gaga", "Grenade - Bruno Mars"],
             "2000s"),
    _pattern("I-vi-IV-V", _POP, 8,
             "Doo-wop progression - classic 1950s sound",
             ["Stand By Me - Ben E. King",
              "Every Breath You Take - The Police",
              "Earth Angel - The Penguins"],
             "1950s"),
    _pattern("IV-V-iii-vi", _POP, 7,
             "Royal road progression - popular in J-pop and K-pop",
             ["Kanashimi wo Yasashisa ni - Little by Little", "First Love - Utada Hikaru"],
             "2000s-jpop"),
    _pattern("I-IV-vi-V", _POP, 8,
             "Emotional arc progression - builds tension to resolution",
             ["Apologize - OneRepublic", "Viva La Vida - Coldplay"],
             "2000s"),
    _pattern("vi-V-IV-V", _POP, 6,
             "Emotional descent with emphasis on subdominant",
             ["Umbrella - Rihanna", "Party Rock Anthem - LMFAO"],
             "2010s"),
    _pattern("I-V-IV", _POP, 8,
             "Simplified axis - three-chord variation",
             ["All The Small Things - Blink-182", "She Will Be Loved - Maroon 5"],
             "2000s"),

    # Classical
    _pattern("I-IV-V-I", _CLASSICAL, 9,
             "Perfect authentic cadence with subdominant preparation",
             ["Symphony conclusions", "Hymn endings", "Classical period works"],
             "classical-period"),
    _pattern("ii-V-I", _CLASSICAL, 8,
             "Common practice cadence with supertonic preparation",
             ["Bach chorales", "Mozart sonata endings", "Haydn symphonies"],
             "baroque-classical"),
    _pattern("IV-I", _CLASSICAL, 7,
             'Plagal cadence - "Amen" resolution',
             ["Hymn endings", "Sacred music", "Handel's Messiah"],
             "baroque"),
    _pattern("I-V", _CLASSICAL, 6,
             "Half cadence - creates expectation and pause",
             ["Phrase endings", "Section transitions", "Question-answer phrases"],
             "common-practice"),
    _pattern("V-vi", _CLASSICAL, 7,
             "Deceptive cadence - surprising resolution",
             ["Beethoven symphonies", "Mozart operas", "Romantic period works"],
             "classical-romantic"),
    _pattern("I-IV-I-V-I", _CLASSICAL, 6,
             "Baroque sequence with tonic-dominant structure",
             ["Bach preludes", "Vivaldi concertos", "Handel suites"],
             "baroque"),
    _pattern("vi-ii-V-I", _CLASSICAL, 7,
             "Circle of fifths progression - descending fifths",
             ["Canon in D - Pachelbel", "Classical period transitions"],
             "baroque-classical"),
    _pattern("I-vi-ii-V-I", _CLASSICAL, 6,
             "Extended classical progression with deceptive movement",
             ["Romantic period works", "Extended cadential phrases"],
             "romantic"),

    # Rock
    _pattern("I-bVII-IV", _ROCK, 9,
             "Rock power progression with modal mixture from aeolian",
             ["Sweet Child O' Mine - Guns N' Roses", "Stairway to Heaven - Led Zeppelin"],
             "1970s-rock"),
    _pattern("I-IV-V", _ROCK, 9,
             "12-bar blues foundation adapted for rock",
             ["Johnny B. Goode - Chuck Berry", "Rock and Roll - Led Zeppelin"],
             "classic-rock"),
    _pattern("i-bVII-bVI-bVII", _ROCK, 8,
             "Minor rock progression with aeolian flavor",
             ["Stairway to Heaven intro - Led Zeppelin",
              "All Along The Watchtower - Jimi Hendrix"],
             "1960s-70s"),
    _pattern("I-bVII-bVI-IV", _ROCK, 7,
             "Descending rock progression with chromatic bass",
             ["Dream On - Aerosmith", "Hey Joe - Jimi Hendrix"],
             "1970s-rock"),
    _pattern("i-bVI-bVII", _ROCK, 8,
             "Grunge progression - minor with flat submediant",
             ["Smells Like Teen Spirit - Nirvana", "Come As You Are - Nirvana"],
             "grunge"),
    _pattern("I-V-bVII-IV", _ROCK, 7,
             "Punk rock progression with modal bVII",
             ["Should I Stay or Should I Go - The Clash", "Teenage Kicks - The Undertones"],
             "punk"),
    _pattern("i-iv-v", _ROCK, 6,
             "Power chord progression - all minor/suspended",
             ["Paranoid - Black Sabbath", "Iron Man - Black Sabbath"],
             "heavy-metal"),
    _pattern("I-III-IV", _ROCK, 6,
             "Alternative rock progression with major III",
             ["Creep - Radiohead", "Wonderwall - Oasis"],
             "alternative-rock"),

    # EDM
    _pattern("i-VII-VI-V", _EDM, 8,
             "EDM build tension - minor key descending progression",
             ["Levels - Avicii", "Titanium - David Guetta"],
             "2010s-edm"),
    _pattern("vi-IV-I-V", _EDM, 8,
             "Progressive house variation of axis progression",
             ["Wake Me Up - Avicii", "Don't You Worry Child - Swedish House Mafia"],
             "progressive-house"),
    _pattern("i-bVII-bVI-bVII", _EDM, 7,
             "Dubstep progression with aeolian modal interchange",
             ["Scary Monsters and Nice Sprites - Skrillex", "Bangarang - Skrillex"],
             "dubstep"),
    _pattern("I-V-vi-iii", _EDM, 7,
             "Trance progression - uplifting major key sequence",
             ["Adagio for Strings - Tiësto", "Silence - Delerium (Tiësto Remix)"],
             "trance"),
    _pattern("vi-I-V-IV", _EDM, 6,
             "House drop progression - relative minor start",
             ["Animals - Martin Garrix", "Tremor - Dimitri Vegas & Like Mike"],
             "big-room"),
    _pattern("I-bVII-IV", _EDM, 7,
             "EDM anthem progression with modal bVII",
             ["Clarity - Zedd", "Spectrum - Zedd"],
             "2010s-edm"),
    _pattern("i-v-bVII-bVI", _EDM, 6,
             "Future bass progression - minor with chromatic bVI",
             ["Say My Name - ODESZA", "Latch - Disclosure"],
             "future-bass"),
    _pattern("I-IV-bVII-IV", _EDM, 6,
             "Big room progression with oscillating IV-bVII",
             ["Epic - Sandro Silva & Quintino", "LRAD - Knife Party"],
             "big-room"),

    # Blues
    _pattern("I-IV-I-V", _BLUES, 10,
             "12-bar blues fundamental structure - simplified",
             ["Sweet Home Chicago - Robert Johnson", "The Thrill Is Gone - B.B. King"],
             "traditional-blues"),
    _pattern("I-IV-I-V-IV-I", _BLUES, 9,
             "Quick-change blues - IV chord in bar 2",
             ["Stormy Monday - T-Bone Walker", "Key to the Highway - Big Bill Broonzy"],
             "chicago-blues"),
    _pattern("I7-IV7-I7-V7", _BLUES, 9,
             "12-bar blues with dominant 7th voicings",
             ["Crossroads - Robert Johnson", "Pride and Joy - Stevie Ray Vaughan"],
             "electric-blues"),
    _pattern("I-I-I-I-IV-IV-I-I-V-IV-I-V", _BLUES, 8,
             "Full 12-bar blues progression with turnaround",
             ["Blues standard form", "Kansas City - Big Joe Turner"],
             "traditional-blues"),
    _pattern("i7-iv7-i7-V7", _BLUES, 7,
             "Minor blues with minor IV and dominant V",
             ["The Thrill Is Gone - B.B. King", "Red House - Jimi Hendrix"],
             "modern-blues"),
    _pattern("I-bVII-IV", _BLUES, 7,
             "Blues-rock hybrid with modal bVII",
             ["Born Under a Bad Sign - Albert King", "Sunshine of Your Love - Cream"],
             "blues-rock"),
    _pattern("I-IV-V-IV", _BLUES, 6,
             "Shuffle blues progression with emphasis on IV",
             ["Mustang Sally - Wilson Pickett", "Hard to Handle - Otis Redding"],
             "soul-blues"),
    _pattern("i7-IV7-bVIImaj7-i7", _BLUES, 6,
             "Jazz blues with sophisticated harmony",
             ["Bag's Groove - Milt Jackson", "Tenor Madness - Sonny Rollins"],
             "jazz-blues"),

    # Cross-genre additions
    _pattern("bVI-bVII-I", _ROCK, 7,
             "Mario cadence - chromatic approach to tonic",
             ["Clocks - Coldplay", "Don't Stop Believin' - Journey"],
             "classic-rock"),
    _pattern("i-bIII-bVII-iv", _EDM, 5,
             "Dark progressive house - minor with chromatic mediant",
             ["Strobe - Deadmau5", "Language - Porter Robinson"],
             "progressive-house"),
)


def get_patterns_for_genre(genre: Union[str, Genre]) -> List[GenrePattern]:
    """
    Get the catalog patterns of one genre, in catalog order.

    Raises:
        ValueError: If genre is not a known genre name
    """
    genre = Genre(genre.strip().lower()) if isinstance(genre, str) else genre
    return [p for p in GENRE_PATTERNS if p.genre is genre]
