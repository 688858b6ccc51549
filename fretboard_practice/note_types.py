"""Type definitions for pitch classes, notes and fretboard positions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List


class PitchClass(IntEnum):
    """One of the twelve equal-tempered pitch classes, C = 0 through B = 11."""

    C = 0
    C_SHARP = 1
    D = 2
    D_SHARP = 3
    E = 4
    F = 5
    F_SHARP = 6
    G = 7
    G_SHARP = 8
    A = 9
    A_SHARP = 10
    B = 11

    @classmethod
    def from_int(cls, value: int) -> "PitchClass":
        return pitch_class_from_ordinal(value)

    @classmethod
    def parse(cls, text: str) -> "PitchClass":
        """Parse a pitch class name such as 'C', 'F#' or 'Bb'.

        Raises:
            ValueError: If the text is not a recognised pitch class name
        """
        name = str(text).strip()
        if name[:1].islower():
            name = name[:1].upper() + name[1:]
        if name in SHARP_NAMES:
            return cls(SHARP_NAMES.index(name))
        if name in FLAT_NAMES:
            return cls(FLAT_NAMES.index(name))
        if name in ENHARMONIC_NAMES:
            return cls(ENHARMONIC_NAMES[name])
        raise ValueError(f"Unknown pitch class: {text!r}")

    @property
    def name_sharp(self) -> str:
        return SHARP_NAMES[self.value]

    @property
    def name_flat(self) -> str:
        return FLAT_NAMES[self.value]

    def __str__(self) -> str:
        return self.name_sharp


SHARP_NAMES: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]

FLAT_NAMES: List[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Spellings that live outside both tables above
ENHARMONIC_NAMES: Dict[str, int] = {"B#": 0, "E#": 5, "Cb": 11, "Fb": 4}

# Note name with optional accidental followed by an (optionally negative) octave
NOTE_PATTERN = re.compile(r"^\s*([A-Ga-g][#b]?)(-?[0-9]+)\s*$")


def pitch_class_from_ordinal(n: int) -> PitchClass:
    """Reduce any integer to its pitch class.

    Python's ``%`` is a floor modulo, so ``-1`` maps to B rather than to a
    negative class.
    """
    return PitchClass(n % 12)


@dataclass(frozen=True, eq=False)
class Note:
    """A pitch class qualified by its octave (scientific pitch notation).

    Comparison and hashing go through ``semitone_value`` only. A plain int
    pitch class outside 0..11 raises ``ValueError``; build such notes with
    ``note_from_semitone_value`` instead.
    """

    pitch_class: PitchClass
    octave: int

    def __post_init__(self):
        # Accept plain ints 0..11 for the pitch class, keep the enum internally
        object.__setattr__(self, "pitch_class", PitchClass(int(self.pitch_class)))

    @property
    def semitone_value(self) -> int:
        return semitone_value(self)

    @property
    def name(self) -> str:
        return f"{self.pitch_class.name_sharp}{self.octave}"

    def name_with(self, use_flats: bool = False) -> str:
        """Return the note name, spelled with flats if requested (e.g. 'Gb2')."""
        if use_flats:
            return f"{self.pitch_class.name_flat}{self.octave}"
        return self.name

    def transpose(self, semitones: int) -> "Note":
        return note_from_semitone_value(self.semitone_value + semitones)

    @classmethod
    def parse(cls, text: str) -> "Note":
        """Parse a note name such as 'E2', 'C#4', 'Bb3' or 'B-1'.

        Raises:
            ValueError: If the text is not a note name with an octave
        """
        match = NOTE_PATTERN.match(str(text))
        if not match:
            raise ValueError(f"Invalid note name: {text!r}")
        pitch_class = PitchClass.parse(match.group(1))
        octave = int(match.group(2))
        # Cb4 sounds a semitone below C4, B#3 a semitone above B3
        spelled = match.group(1)[:1].upper() + match.group(1)[1:]
        if spelled == "Cb":
            octave -= 1
        elif spelled == "B#":
            octave += 1
        return cls(pitch_class, octave)

    def __eq__(self, other):
        if not isinstance(other, Note):
            return NotImplemented
        return self.semitone_value == other.semitone_value

    def __lt__(self, other):
        if not isinstance(other, Note):
            return NotImplemented
        return self.semitone_value < other.semitone_value

    def __le__(self, other):
        if not isinstance(other, Note):
            return NotImplemented
        return self.semitone_value <= other.semitone_value

    def __gt__(self, other):
        if not isinstance(other, Note):
            return NotImplemented
        return self.semitone_value > other.semitone_value

    def __ge__(self, other):
        if not isinstance(other, Note):
            return NotImplemented
        return self.semitone_value >= other.semitone_value

    def __hash__(self):
        return hash(self.semitone_value)

    def __str__(self):
        return self.name


def semitone_value(note: Note) -> int:
    """Absolute semitone number of a note, C0 = 0."""
    return int(note.pitch_class) + 12 * note.octave


def note_from_semitone_value(n: int) -> Note:
    """Build the note for an absolute semitone number.

    Uses floor division and floor modulo, so negative values resolve to a
    valid pitch class with a negative octave (-1 is B-1).
    """
    octave, ordinal = divmod(n, 12)
    return Note(PitchClass(ordinal), octave)


@dataclass(frozen=True)
class FretPosition:
    """Represents a position on the fretboard."""

    string: int  # 0 is the lowest-pitched string
    fret: int  # 0 for the open string

    def __str__(self):
        return f"S{self.string}F{self.fret}"
