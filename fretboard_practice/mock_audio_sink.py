import numpy as np

from .core.interfaces import IAudioSink


class MockAudioSink(IAudioSink):
    """A recording sink for unit tests. Nothing is ever rendered, so appended
    audio stays pending until cleared."""

    def __init__(self, sample_rate=44100, fail_on_append=False):
        self.events = []
        self.appended = []
        self.closed = False
        self.fail_on_append = fail_on_append
        self._sample_rate = sample_rate
        self._pending = 0

    def append(self, samples):
        if self.fail_on_append:
            raise RuntimeError("mock audio backend failure")
        samples = np.asarray(samples)
        self.events.append(("append", len(samples)))
        self.appended.append(samples)
        self._pending += len(samples)

    def clear(self):
        self.events.append(("clear",))
        self._pending = 0

    def close(self):
        self.events.append(("close",))
        self.closed = True

    def finish(self):
        """Pretend the backend rendered everything queued."""
        self._pending = 0

    @property
    def pending_frames(self):
        return self._pending

    @property
    def sample_rate(self):
        return self._sample_rate

    @property
    def channels(self):
        return 1
