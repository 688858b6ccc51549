"""Host-facing session tying the fretboard model to tone playback."""

from __future__ import annotations

from typing import Callable, Optional

from .audio.playback import PlaybackController
from .core.events import EventEmitter, FretboardEventType
from .fretboard import (
    FRET_COUNT_COMPACT,
    STANDARD_TUNING,
    FretboardRefresher,
    FretboardTable,
    Tuning,
    generate_fretboard_table,
    note_at,
)
from .logger import get_logger
from .note_types import Note, PitchClass
from .scales import ScaleType
from .services.frequency import to_frequency_hz

logger = get_logger(__name__)


class FretboardSession:
    """Current key/scale selection plus the audio feedback for one fretboard.

    A UI creates one session, listens for ``TABLE_UPDATED`` to redraw,
    forwards fret clicks to ``fret_clicked`` and calls ``close`` once on
    shutdown.
    """

    def __init__(
        self,
        playback: Optional[PlaybackController] = None,
        tuning: Tuning = STANDARD_TUNING,
        key: PitchClass = PitchClass.C,
        scale_type: ScaleType = ScaleType.MAJOR,
        fret_count: int = FRET_COUNT_COMPACT,
    ) -> None:
        if fret_count < 0:
            raise ValueError(f"Fret count must be non-negative, got {fret_count}")
        self._playback = playback or PlaybackController(None)
        self._tuning = tuple(tuning)
        self._key = key
        self._scale_type = scale_type
        self._fret_count = fret_count
        self._table: FretboardTable = ()
        self._closed = False

        self.events = EventEmitter()
        self._refresher = FretboardRefresher(self._compute_table, self._publish_table)

    @property
    def tuning(self) -> Tuning:
        return self._tuning

    @property
    def key(self) -> PitchClass:
        return self._key

    @property
    def scale_type(self) -> ScaleType:
        return self._scale_type

    @property
    def fret_count(self) -> int:
        return self._fret_count

    @property
    def table(self) -> FretboardTable:
        """The most recently published table (empty before the first refresh)."""
        return self._table

    @property
    def playback(self) -> PlaybackController:
        return self._playback

    def on_table_updated(self, callback: Callable[[FretboardTable], None]) -> None:
        self.events.on(FretboardEventType.TABLE_UPDATED, callback)

    def on_note_played(self, callback: Callable[[Note, float], None]) -> None:
        self.events.on(FretboardEventType.NOTE_PLAYED, callback)

    def _compute_table(self) -> FretboardTable:
        return generate_fretboard_table(
            self._tuning, self._key, self._scale_type, self._fret_count
        )

    def _publish_table(self, table: FretboardTable) -> None:
        self._table = table
        self.events.emit(FretboardEventType.TABLE_UPDATED, table)

    def refresh(self) -> Optional[FretboardTable]:
        """Rebuild the whole table; returns None if a refresh was already running."""
        return self._refresher.refresh()

    def select_key(self, key: PitchClass) -> bool:
        """Change the key, refreshing only if it differs. Returns True on change."""
        if key == self._key:
            return False
        logger.debug(f"Key changed: {self._key} -> {key}")
        self._key = key
        self.refresh()
        return True

    def select_scale(self, scale_type: ScaleType) -> bool:
        """Change the scale, refreshing only if it differs. Returns True on change."""
        if scale_type == self._scale_type:
            return False
        logger.debug(f"Scale changed: {self._scale_type.display_name} -> {scale_type.display_name}")
        self._scale_type = scale_type
        self.refresh()
        return True

    def set_fret_count(self, fret_count: int) -> bool:
        """Switch display range (e.g. 12 or 24 frets). Returns True on change."""
        if fret_count < 0:
            raise ValueError(f"Fret count must be non-negative, got {fret_count}")
        if fret_count == self._fret_count:
            return False
        self._fret_count = fret_count
        self.refresh()
        return True

    def fret_clicked(self, string_index: int, fret_index: int) -> Note:
        """Sound the note at a fret.

        Raises:
            IndexError: If the string index is outside the tuning
        """
        note = note_at(self._tuning, string_index, fret_index)
        frequency = to_frequency_hz(note)
        self._playback.play(frequency)
        logger.debug(f"Fret S{string_index}F{fret_index} -> {note.name} ({frequency:.2f}Hz)")
        self.events.emit(FretboardEventType.NOTE_PLAYED, note, frequency)
        return note

    def close(self) -> None:
        """Release audio; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        self._playback.cleanup()
        self.events.clear()

    def __enter__(self) -> "FretboardSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
