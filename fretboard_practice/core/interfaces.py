"""Defines the core interfaces for the Fretboard Practice application."""

from __future__ import annotations
from abc import ABC, abstractmethod

import numpy as np


class IAudioSink(ABC):
    """Interface for audio output destinations.

    ``append`` and ``clear`` are hand-offs: they must return without waiting
    for the audio to be rendered.
    """

    @abstractmethod
    def append(self, samples: np.ndarray) -> None:
        """Queue samples after whatever is already pending."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop all pending audio immediately."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying device."""
        pass

    @property
    @abstractmethod
    def pending_frames(self) -> int:
        """Number of queued samples not yet rendered."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the output stream."""
        pass

    @property
    @abstractmethod
    def channels(self) -> int:
        """The number of channels in the output stream."""
        pass
