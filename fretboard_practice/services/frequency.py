"""Conversion between notes and equal-tempered frequencies."""

import math
import numbers
import sys
from typing import Optional

import numpy as np

from ..logger import get_logger
from ..note_types import Note, PitchClass, note_from_semitone_value

logger = get_logger(__name__)

# Standard reference: A4 = 440Hz
A4 = Note(PitchClass.A, 4)
REFERENCE_HZ = 440.0


def to_frequency_hz(
    note: Note, reference_note: Note = A4, reference_hz: float = REFERENCE_HZ
) -> float:
    """Convert a note to its frequency in 12-tone equal temperament.

    Args:
        note: The note to convert
        reference_note: The note tuned to ``reference_hz``
        reference_hz: Frequency of the reference note in Hz

    Returns:
        Frequency in Hz, always positive and finite. Notes far outside the
        audible range are clamped to the smallest or largest positive float.

    Examples:
        >>> to_frequency_hz(Note(PitchClass.A, 4))  # 440.0
        >>> to_frequency_hz(Note(PitchClass.C, 4))  # ~261.63
    """
    semitones_from_reference = note.semitone_value - reference_note.semitone_value
    try:
        frequency = reference_hz * (2.0 ** (semitones_from_reference / 12.0))
    except OverflowError:
        frequency = sys.float_info.max
    return min(max(frequency, sys.float_info.min), sys.float_info.max)


def frequency_to_note(
    frequency: float, reference_note: Note = A4, reference_hz: float = REFERENCE_HZ
) -> Optional[Note]:
    """Convert a frequency in Hz to the nearest note.

    Args:
        frequency: The frequency in Hz to convert
        reference_note: The note tuned to ``reference_hz``
        reference_hz: Frequency of the reference note in Hz

    Returns:
        The nearest equal-tempered note, or None if the frequency is not a
        positive finite number
    """
    if not isinstance(frequency, numbers.Real) or not np.isfinite(frequency):
        logger.warning(f"Invalid frequency value: {frequency}")
        return None

    if frequency <= 0:
        logger.debug(f"Non-positive frequency: {frequency}")
        return None

    # Calculate the number of half steps from the reference
    half_steps = round(12 * np.log2(frequency / reference_hz))
    return note_from_semitone_value(reference_note.semitone_value + int(half_steps))


def cents_offset(
    frequency: float, note: Note, reference_note: Note = A4, reference_hz: float = REFERENCE_HZ
) -> float:
    """How far a frequency lies from a note, in cents (100 cents per semitone).

    Raises:
        ValueError: If the frequency is not positive
    """
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")
    target = to_frequency_hz(note, reference_note, reference_hz)
    return 1200.0 * math.log2(frequency / target)
