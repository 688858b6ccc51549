"""Audio output handling for tone playback."""

from __future__ import annotations

import threading
from typing import Any, ClassVar, Dict, List, Optional

import numpy as np

from ..core.interfaces import IAudioSink
from ..logger import get_logger
from .synth import CHANNELS, SAMPLE_RATE

logger = get_logger(__name__)


class AudioUnavailableError(RuntimeError):
    """Raised when no audio output device can be opened."""


def _load_backend():
    """Import sounddevice, which fails with OSError when PortAudio is missing."""
    try:
        import sounddevice as sd
    except (ImportError, OSError) as e:
        raise AudioUnavailableError(f"sounddevice backend not available: {e}") from e
    return sd


def list_output_devices() -> List[Dict[str, Any]]:
    """List the audio devices that can play sound.

    Returns:
        One dict per output device with its id, name, channel count and
        default sample rate

    Raises:
        AudioUnavailableError: If the audio backend cannot be loaded or queried
    """
    sd = _load_backend()
    try:
        devices = sd.query_devices()
    except Exception as e:
        logger.error(f"Error querying audio devices: {e}")
        raise AudioUnavailableError(f"Could not query audio devices: {e}") from e

    outputs = []
    for device_id, device in enumerate(devices):
        if device["max_output_channels"] > 0:
            outputs.append(
                {
                    "id": device_id,
                    "name": device["name"],
                    "max_output_channels": device["max_output_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return outputs


class SoundDeviceSink(IAudioSink):
    """Audio sink backed by a sounddevice output stream.

    The stream runs for the lifetime of the sink and plays silence when
    nothing is queued. Samples are handed over through a lock-protected
    buffer that the PortAudio callback thread drains.
    """

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = SAMPLE_RATE
    CHANNELS: ClassVar[int] = CHANNELS
    DTYPE: ClassVar[str] = "float32"

    def __init__(
        self,
        device: Optional[int] = None,
        sample_rate: Optional[int] = None,
        channels: Optional[int] = None,
        blocksize: int = 0,
    ) -> None:
        """Open the output stream.

        Args:
            device: Output device ID, or None for the system default
            sample_rate: Sample rate in Hz, or None for default (44100)
            channels: Number of output channels, or None for default (1)
            blocksize: Frames per callback, 0 lets the backend choose

        Raises:
            AudioUnavailableError: If the backend or device cannot be opened
        """
        self._device = device
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._channels = channels or self.CHANNELS

        self._lock = threading.Lock()
        self._pending = np.zeros(0, dtype=self.DTYPE)
        self._position = 0
        self._closed = False

        sd = _load_backend()
        try:
            self._stream = sd.OutputStream(
                device=self._device,
                samplerate=self._sample_rate,
                channels=self._channels,
                blocksize=blocksize,
                dtype=self.DTYPE,
                callback=self._audio_callback,
            )
            self._stream.start()
        except Exception as e:
            raise AudioUnavailableError(
                f"Could not open audio output (device={self._device}, "
                f"rate={self._sample_rate}Hz): {e}"
            ) from e

        logger.info(
            f"Audio output initialized: device={self._device}, Rate={self._sample_rate}Hz"
        )

    def _audio_callback(
        self,
        outdata: np.ndarray,
        frames: int,
        _time_info: Any,
        status: Any,
    ) -> None:
        """Fill the output buffer from the pending samples.

        Note:
            This is called from PortAudio's audio thread, so it only copies
            samples and never blocks on anything but the hand-off lock.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        with self._lock:
            chunk = self._pending[self._position : self._position + frames]
            self._position += len(chunk)

        count = len(chunk)
        # Mono source is copied to every output channel
        outdata[:count] = chunk.reshape(-1, 1)
        outdata[count:] = 0

    def append(self, samples: np.ndarray) -> None:
        samples = np.asarray(samples, dtype=self.DTYPE).reshape(-1)
        with self._lock:
            remaining = self._pending[self._position :]
            self._pending = np.concatenate((remaining, samples))
            self._position = 0

    def clear(self) -> None:
        with self._lock:
            self._pending = np.zeros(0, dtype=self.DTYPE)
            self._position = 0

    def close(self) -> None:
        """Stop and close the output stream."""
        if self._closed:
            return
        self._closed = True
        self.clear()
        try:
            self._stream.stop()
            self._stream.close()
            logger.info("Audio output closed")
        except Exception as e:
            logger.error(f"Error closing audio output: {e}")

    @property
    def pending_frames(self) -> int:
        with self._lock:
            return len(self._pending) - self._position

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels
