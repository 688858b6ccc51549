"""Fretboard Practice: fretboard pitch model and tone feedback for guitar practice."""

from .fretboard import (
    STANDARD_TUNING,
    FretCell,
    generate_fretboard_table,
    is_fret_marked,
    note_at,
)
from .note_types import FretPosition, Note, PitchClass
from .scales import ScaleType, intervals_for, is_in_scale
from .services.frequency import to_frequency_hz

__all__ = [
    "STANDARD_TUNING",
    "FretCell",
    "FretPosition",
    "Note",
    "PitchClass",
    "ScaleType",
    "generate_fretboard_table",
    "intervals_for",
    "is_fret_marked",
    "is_in_scale",
    "note_at",
    "to_frequency_hz",
]
