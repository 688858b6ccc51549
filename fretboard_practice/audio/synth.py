"""Pure tone synthesis for fret feedback."""

from __future__ import annotations

import math
from typing import ClassVar

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)

# Audio configuration
SAMPLE_RATE = 44100  # Hz
TONE_DURATION = 0.3  # seconds
AMPLITUDE = 0.3  # fraction of full scale, keeps the tone clear of clipping
CHANNELS = 1  # Mono audio


class SineWave:
    """Unbounded sine oscillator.

    Sample ``i`` is ``amplitude * sin(2 * pi * frequency * i / sample_rate)``.
    The only state is the index of the next sample, so a fresh instance
    always restarts at phase zero. Truncation to a duration is up to the
    caller (see ``take_duration``).
    """

    DTYPE: ClassVar[str] = "float32"

    def __init__(
        self,
        frequency_hz: float,
        sample_rate: int = SAMPLE_RATE,
        amplitude: float = AMPLITUDE,
    ) -> None:
        """Initialize the oscillator.

        Args:
            frequency_hz: Tone frequency in Hz, must be positive
            sample_rate: Samples per second, must be positive
            amplitude: Peak amplitude as a fraction of full scale

        Raises:
            ValueError: If frequency or sample rate is not positive
        """
        if not frequency_hz > 0 or not math.isfinite(frequency_hz):
            raise ValueError(f"Frequency must be a positive number, got {frequency_hz}")
        if sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {sample_rate}")

        self.frequency_hz = float(frequency_hz)
        self.sample_rate = int(sample_rate)
        self.amplitude = float(amplitude)
        self.channels = CHANNELS
        self._index = 0

    @property
    def position(self) -> int:
        """Index of the next sample to be generated."""
        return self._index

    def __iter__(self) -> "SineWave":
        return self

    def __next__(self) -> float:
        t = self._index / self.sample_rate
        self._index += 1
        return self.amplitude * math.sin(2.0 * math.pi * self.frequency_hz * t)

    def next_block(self, frames: int) -> np.ndarray:
        """Generate the next ``frames`` samples in one step.

        Returns:
            A 1-D float32 array; the oscillator advances by ``frames``
        """
        if frames < 0:
            raise ValueError(f"Frame count must be non-negative, got {frames}")
        indices = np.arange(self._index, self._index + frames, dtype=np.float64)
        self._index += frames
        block = self.amplitude * np.sin(
            2.0 * np.pi * self.frequency_hz * indices / self.sample_rate
        )
        return block.astype(self.DTYPE)


def duration_to_frames(seconds: float, sample_rate: int = SAMPLE_RATE) -> int:
    """Number of samples covering ``seconds`` at ``sample_rate``.

    Raises:
        ValueError: If the duration is negative or the sample rate not positive
    """
    if seconds < 0:
        raise ValueError(f"Duration must be non-negative, got {seconds}")
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    return int(round(seconds * sample_rate))


def take_duration(source: SineWave, seconds: float) -> np.ndarray:
    """Draw exactly ``seconds`` worth of samples from an oscillator."""
    return source.next_block(duration_to_frames(seconds, source.sample_rate))


def render_tone(
    frequency_hz: float,
    duration: float = TONE_DURATION,
    sample_rate: int = SAMPLE_RATE,
    amplitude: float = AMPLITUDE,
) -> np.ndarray:
    """Render a one-shot tone, ready to hand to an audio sink."""
    samples = take_duration(SineWave(frequency_hz, sample_rate, amplitude), duration)
    logger.debug(
        f"Rendered {frequency_hz:.2f}Hz tone: {len(samples)} samples at {sample_rate}Hz"
    )
    return samples
