"""Fretboard mapping: string/fret positions to notes and scale highlighting."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Iterator, Optional, Tuple

from .logger import get_logger
from .note_types import FretPosition, Note, PitchClass, note_from_semitone_value
from .scales import ScaleType, is_in_scale

logger = get_logger(__name__)

Tuning = Tuple[Note, ...]

# Index 0 is the lowest-pitched string (low E)
STANDARD_TUNING: Tuning = (
    Note(PitchClass.E, 2),
    Note(PitchClass.A, 2),
    Note(PitchClass.D, 3),
    Note(PitchClass.G, 3),
    Note(PitchClass.B, 3),
    Note(PitchClass.E, 4),
)

# Display modes
FRET_COUNT_COMPACT = 12
FRET_COUNT_FULL = 24

# Conventional inlay positions
MARKED_FRETS: FrozenSet[int] = frozenset({3, 5, 7, 9, 12, 15, 17, 19, 21})


def parse_tuning(names: Iterable[str]) -> Tuning:
    """Build a tuning from note names, lowest string first (e.g. ['E2', 'A2', ...]).

    Raises:
        ValueError: If a name is invalid or the tuning has no strings
    """
    tuning = tuple(Note.parse(name) for name in names)
    if not tuning:
        raise ValueError("A tuning needs at least one string")
    return tuning


def is_fret_marked(fret: int) -> bool:
    return fret in MARKED_FRETS


def note_at(tuning: Tuning, string_index: int, fret_index: int) -> Note:
    """Get the note sounding at a string and fret.

    Args:
        tuning: Open-string notes, lowest string first
        string_index: 0-based string index into ``tuning``
        fret_index: 0 for the open string; no upper bound is enforced

    Returns:
        The note at that position

    Raises:
        IndexError: If the string index is outside the tuning
        ValueError: If the fret index is negative
    """
    if not 0 <= string_index < len(tuning):
        raise IndexError(
            f"String index {string_index} out of range for {len(tuning)}-string tuning"
        )
    if fret_index < 0:
        raise ValueError(f"Fret index must be non-negative, got {fret_index}")
    return note_from_semitone_value(tuning[string_index].semitone_value + fret_index)


def note_at_position(tuning: Tuning, position: FretPosition) -> Note:
    return note_at(tuning, position.string, position.fret)


@dataclass(frozen=True)
class FretCell:
    """One cell of the rendered fretboard grid."""

    string: int
    fret: int
    note: Note
    is_in_scale: bool
    is_marked: bool

    @property
    def position(self) -> FretPosition:
        return FretPosition(self.string, self.fret)


FretboardTable = Tuple[Tuple[FretCell, ...], ...]


def generate_fretboard_table(
    tuning: Tuning, key: PitchClass, scale_type: ScaleType, fret_count: int
) -> FretboardTable:
    """Compute every cell of the fretboard for the given key and scale.

    The result is indexed ``[string][fret]`` with frets ``0 .. fret_count - 1``
    and is rebuilt from scratch on every call.

    Raises:
        ValueError: If fret_count is negative
    """
    if fret_count < 0:
        raise ValueError(f"Fret count must be non-negative, got {fret_count}")
    return tuple(
        tuple(
            _make_cell(tuning, string_index, fret, key, scale_type)
            for fret in range(fret_count)
        )
        for string_index in range(len(tuning))
    )


def _make_cell(
    tuning: Tuning, string_index: int, fret: int, key: PitchClass, scale_type: ScaleType
) -> FretCell:
    note = note_at(tuning, string_index, fret)
    return FretCell(
        string=string_index,
        fret=fret,
        note=note,
        is_in_scale=is_in_scale(note, key, scale_type),
        is_marked=is_fret_marked(fret),
    )


class FretboardRefresher:
    """Recomputes the fretboard table and hands it to a consumer.

    Only one refresh runs at a time. A refresh triggered while another is in
    flight (for example by the consumer reacting to the new table) is dropped,
    not queued.
    """

    def __init__(
        self,
        compute: Callable[[], FretboardTable],
        on_table: Callable[[FretboardTable], None],
    ) -> None:
        """Initialize the refresher.

        Args:
            compute: Returns a freshly generated table for the current selection
            on_table: Receives each new table
        """
        self._compute = compute
        self._on_table = on_table
        self._lock = threading.Lock()
        self._in_flight = False
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of tables delivered so far."""
        return self._generation

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @contextmanager
    def _single_flight(self) -> Iterator[bool]:
        with self._lock:
            acquired = not self._in_flight
            if acquired:
                self._in_flight = True
        try:
            yield acquired
        finally:
            if acquired:
                with self._lock:
                    self._in_flight = False

    def refresh(self) -> Optional[FretboardTable]:
        """Recompute and deliver the table.

        Returns:
            The new table, or None if the call was dropped because a refresh
            was already running
        """
        with self._single_flight() as acquired:
            if not acquired:
                logger.warning("Prevented re-entrant fretboard refresh")
                return None
            table = self._compute()
            self._on_table(table)
            self._generation += 1
            logger.debug(
                f"Fretboard table generation {self._generation}: "
                f"{len(table)} strings x {len(table[0]) if table else 0} frets"
            )
            return table
