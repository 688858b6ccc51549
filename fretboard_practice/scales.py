"""Scale interval tables and scale membership."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Tuple

from .logger import get_logger
from .note_types import Note, PitchClass, note_from_semitone_value

logger = get_logger(__name__)


class ScaleType(Enum):
    """Supported scale types.

    The value is the small integer tag hosts use for selection widgets.
    """

    MAJOR = 1
    NATURAL_MINOR = 2
    MAJOR_PENTATONIC = 3
    MINOR_PENTATONIC = 4
    MAJOR_BLUES = 5
    MINOR_BLUES = 6

    @classmethod
    def from_int(cls, value: int) -> "ScaleType":
        """Map a selection tag to a scale type, falling back to MAJOR."""
        try:
            return cls(value)
        except ValueError:
            logger.debug(f"Unknown scale tag {value}, using Major")
            return cls.MAJOR

    def to_int(self) -> int:
        return self.value

    @property
    def display_name(self) -> str:
        return SCALE_NAMES[self]

    @property
    def intervals(self) -> Tuple[int, ...]:
        return SCALE_INTERVALS[self]

    @classmethod
    def parse(cls, text: str) -> "ScaleType":
        """Parse a scale name such as 'major', 'natural-minor' or 'Minor Blues'.

        Raises:
            ValueError: If the name does not match any scale type
        """
        key = str(text).strip().lower().replace("-", " ").replace("_", " ")
        for scale_type, name in SCALE_NAMES.items():
            if key == name.lower():
                return scale_type
        # "minor" alone means the natural minor
        if key == "minor":
            return cls.NATURAL_MINOR
        raise ValueError(f"Unknown scale: {text!r}")


SCALE_NAMES: Dict[ScaleType, str] = {
    ScaleType.MAJOR: "Major",
    ScaleType.NATURAL_MINOR: "Natural Minor",
    ScaleType.MAJOR_PENTATONIC: "Major Pentatonic",
    ScaleType.MINOR_PENTATONIC: "Minor Pentatonic",
    ScaleType.MAJOR_BLUES: "Major Blues",
    ScaleType.MINOR_BLUES: "Minor Blues",
}

# Semitone offsets from the root
SCALE_INTERVALS: Dict[ScaleType, Tuple[int, ...]] = {
    ScaleType.MAJOR: (0, 2, 4, 5, 7, 9, 11),  # W-W-H-W-W-W-H
    ScaleType.NATURAL_MINOR: (0, 2, 3, 5, 7, 8, 10),  # W-H-W-W-H-W-W
    ScaleType.MAJOR_PENTATONIC: (0, 2, 4, 7, 9),
    ScaleType.MINOR_PENTATONIC: (0, 3, 5, 7, 10),
    ScaleType.MAJOR_BLUES: (0, 3, 4, 7, 9),
    ScaleType.MINOR_BLUES: (0, 3, 5, 6, 7, 10),
}


def intervals_for(scale_type: ScaleType) -> Tuple[int, ...]:
    return SCALE_INTERVALS[scale_type]


def is_in_scale(note: Note, key: PitchClass, scale_type: ScaleType) -> bool:
    """Check whether a note belongs to the scale built on ``key``.

    Only the pitch class matters; the octave is ignored.

    Args:
        note: The note to test
        key: Root pitch class of the scale
        scale_type: Which scale to test against

    Returns:
        True if the note's distance above the root is one of the scale intervals
    """
    return (int(note.pitch_class) - int(key)) % 12 in SCALE_INTERVALS[scale_type]


def scale_pitch_classes(key: PitchClass, scale_type: ScaleType) -> List[PitchClass]:
    """Pitch classes of the scale in ascending order starting from the root."""
    return [PitchClass((int(key) + interval) % 12) for interval in intervals_for(scale_type)]


def notes_in_scale(
    key: PitchClass, scale_type: ScaleType, octaves: Iterable[int] = range(0, 8)
) -> List[Note]:
    """List every note of a scale across the given octaves, lowest first.

    The root of each octave is ``key`` in that octave; upper intervals may
    spill into the next octave number (e.g. B major reaches A#1 from B0).
    """
    notes = []
    for octave in octaves:
        for interval in intervals_for(scale_type):
            notes.append(note_from_semitone_value(int(key) + interval + 12 * octave))
    return sorted(notes)
