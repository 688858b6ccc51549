"""Monophonic playback of fret feedback tones."""

from __future__ import annotations

import threading
import time
from enum import Enum, auto
from typing import ClassVar, Optional

from ..core.interfaces import IAudioSink
from ..logger import get_logger
from .audio_output import AudioUnavailableError, SoundDeviceSink
from .synth import AMPLITUDE, TONE_DURATION, render_tone

logger = get_logger(__name__)


class PlaybackState(Enum):
    """Playback states."""

    IDLE = auto()
    PLAYING = auto()


class PlaybackController:
    """Plays one tone at a time on an exclusively owned audio sink.

    A new ``play`` always cuts off the tone before it. Without a sink the
    controller is a no-op that stays idle, so callers never need to check
    whether sound is available.
    """

    # Some backends keep the device busy briefly after a stop; reusing it
    # sooner can upset other drivers on Windows.
    RELEASE_GRACE: ClassVar[float] = 0.03  # seconds

    def __init__(
        self,
        sink: Optional[IAudioSink] = None,
        duration: float = TONE_DURATION,
        amplitude: float = AMPLITUDE,
        release_grace: Optional[float] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            sink: Audio sink to play through, or None for silent operation
            duration: Length of each tone in seconds
            amplitude: Peak amplitude as a fraction of full scale
            release_grace: Seconds to wait after releasing the device, or None
                for the default (30ms)
        """
        if duration < 0:
            raise ValueError(f"Tone duration must be non-negative, got {duration}")
        if release_grace is not None and release_grace < 0:
            raise ValueError(f"Release grace must be non-negative, got {release_grace}")

        self._sink = sink
        self._duration = duration
        self._amplitude = amplitude
        self._release_grace = self.RELEASE_GRACE if release_grace is None else release_grace

        # play() runs on the UI thread, cleanup() may run on another one
        self._lock = threading.RLock()
        self._state = PlaybackState.IDLE
        self._current_frequency: Optional[float] = None
        self._closed = False

    @property
    def available(self) -> bool:
        """True if tones will actually be heard."""
        return self._sink is not None

    @property
    def state(self) -> PlaybackState:
        with self._lock:
            if self._state is PlaybackState.PLAYING and self._sink is not None:
                try:
                    if self._sink.pending_frames == 0:
                        self._state = PlaybackState.IDLE
                        self._current_frequency = None
                except Exception as e:
                    logger.error(f"Error querying audio sink: {e}")
            return self._state

    @property
    def current_frequency(self) -> Optional[float]:
        """Frequency of the tone playing now, or None when idle."""
        if self.state is PlaybackState.IDLE:
            return None
        return self._current_frequency

    def play(self, frequency_hz: float) -> None:
        """Play a tone, replacing whatever is sounding.

        Backend failures are logged and swallowed.

        Args:
            frequency_hz: Tone frequency in Hz

        Raises:
            ValueError: If the frequency is not positive
        """
        if not frequency_hz > 0:
            raise ValueError(f"Frequency must be positive, got {frequency_hz}")

        with self._lock:
            if self._sink is None:
                return

            try:
                samples = render_tone(
                    frequency_hz,
                    duration=self._duration,
                    sample_rate=self._sink.sample_rate,
                    amplitude=self._amplitude,
                )
                # Clear any existing sound first, no overlap
                self._sink.clear()
                self._sink.append(samples)
                self._state = PlaybackState.PLAYING
                self._current_frequency = frequency_hz
                logger.debug(f"Playing {frequency_hz:.2f}Hz for {self._duration * 1000:.0f}ms")
            except Exception as e:
                logger.error(f"Error playing {frequency_hz:.2f}Hz tone: {e}", exc_info=True)
                self._state = PlaybackState.IDLE
                self._current_frequency = None

    def stop(self) -> None:
        """Silence the current tone immediately."""
        with self._lock:
            if self._sink is not None:
                try:
                    self._sink.clear()
                except Exception as e:
                    logger.error(f"Error stopping playback: {e}")
            self._state = PlaybackState.IDLE
            self._current_frequency = None

    def cleanup(self) -> None:
        """Stop playback and release the audio device.

        Waits ``release_grace`` seconds after closing the device so the
        backend has let go of it before anything else touches audio.
        Calling it again does nothing.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self.stop()

            sink, self._sink = self._sink, None
            if sink is None:
                return

            try:
                sink.close()
            except Exception as e:
                logger.error(f"Error releasing audio device: {e}")
            time.sleep(self._release_grace)
            logger.info("Audio device released")

    def __enter__(self) -> "PlaybackController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


def open_playback(
    device: Optional[int] = None,
    sample_rate: Optional[int] = None,
    duration: float = TONE_DURATION,
    amplitude: float = AMPLITUDE,
    release_grace: Optional[float] = None,
    enabled: bool = True,
) -> PlaybackController:
    """Create a playback controller on the default (or given) output device.

    Never fails because of audio: if the device cannot be opened the
    controller comes back silent and stays that way.

    Args:
        device: Output device ID, or None for the system default
        sample_rate: Sample rate in Hz, or None for default (44100)
        duration: Length of each tone in seconds
        amplitude: Peak amplitude as a fraction of full scale
        release_grace: Seconds to wait after releasing the device
        enabled: False skips opening the device altogether

    Returns:
        A PlaybackController, silent if audio is unavailable
    """
    sink = None
    if not enabled:
        logger.info("Audio disabled, tones will not be played")
    else:
        try:
            sink = SoundDeviceSink(device=device, sample_rate=sample_rate)
        except AudioUnavailableError as e:
            logger.warning(f"Audio unavailable, continuing without sound: {e}")

    return PlaybackController(
        sink, duration=duration, amplitude=amplitude, release_grace=release_grace
    )
