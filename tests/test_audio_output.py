import sys
import unittest
from unittest import mock

import numpy as np

from fretboard_practice.audio import synth
from fretboard_practice.audio.audio_output import (
    AudioUnavailableError,
    SoundDeviceSink,
    list_output_devices,
)


class FakeOutputStream:
    """Stands in for sounddevice.OutputStream; the test drives the callback."""

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.callback = kwargs["callback"]
        self.started = False
        self.stopped = False
        self.closed = False

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def close(self):
        self.closed = True

    def pull(self, frames, channels=1):
        outdata = np.full((frames, channels), 9.0, dtype=np.float32)
        self.callback(outdata, frames, None, None)
        return outdata


def make_fake_sounddevice(stream_error=None):
    fake_sd = mock.MagicMock()
    streams = []

    def output_stream(**kwargs):
        if stream_error is not None:
            raise stream_error
        stream = FakeOutputStream(**kwargs)
        streams.append(stream)
        return stream

    fake_sd.OutputStream.side_effect = output_stream
    fake_sd.streams = streams
    return fake_sd


class TestSoundDeviceSink(unittest.TestCase):
    def setUp(self):
        self.fake_sd = make_fake_sounddevice()
        patcher = mock.patch.dict(sys.modules, {"sounddevice": self.fake_sd})
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_opens_mono_float_stream(self):
        sink = SoundDeviceSink()
        stream = self.fake_sd.streams[0]
        self.assertTrue(stream.started)
        self.assertEqual(stream.kwargs["samplerate"], 44100)
        self.assertEqual(stream.kwargs["channels"], 1)
        self.assertEqual(stream.kwargs["dtype"], "float32")
        self.assertIsNone(stream.kwargs["device"])
        self.assertEqual(sink.sample_rate, 44100)
        self.assertEqual(sink.channels, 1)

    def test_defaults_match_synthesizer(self):
        sink = SoundDeviceSink()
        self.assertEqual(sink.sample_rate, synth.SAMPLE_RATE)
        self.assertEqual(sink.channels, synth.CHANNELS)
        self.assertEqual(self.fake_sd.streams[0].kwargs["samplerate"], synth.SAMPLE_RATE)

    def test_plays_silence_when_idle(self):
        SoundDeviceSink()
        out = self.fake_sd.streams[0].pull(8)
        np.testing.assert_array_equal(out, np.zeros((8, 1), dtype=np.float32))

    def test_callback_drains_pending_samples(self):
        sink = SoundDeviceSink()
        stream = self.fake_sd.streams[0]
        sink.append(np.arange(1, 11, dtype=np.float32))
        self.assertEqual(sink.pending_frames, 10)

        first = stream.pull(4)
        np.testing.assert_array_equal(first[:, 0], [1, 2, 3, 4])
        self.assertEqual(sink.pending_frames, 6)

        second = stream.pull(8)
        np.testing.assert_array_equal(second[:, 0], [5, 6, 7, 8, 9, 10, 0, 0])
        self.assertEqual(sink.pending_frames, 0)

    def test_append_queues_after_pending(self):
        sink = SoundDeviceSink()
        stream = self.fake_sd.streams[0]
        sink.append(np.ones(3, dtype=np.float32))
        stream.pull(2)
        sink.append(np.full(2, 2.0, dtype=np.float32))
        out = stream.pull(4)
        np.testing.assert_array_equal(out[:, 0], [1, 2, 2, 0])

    def test_clear_drops_pending(self):
        sink = SoundDeviceSink()
        sink.append(np.ones(100, dtype=np.float32))
        sink.clear()
        self.assertEqual(sink.pending_frames, 0)
        out = self.fake_sd.streams[0].pull(4)
        self.assertFalse(out.any())

    def test_stereo_output_duplicates_mono(self):
        sink = SoundDeviceSink(channels=2)
        sink.append(np.array([0.5, -0.5], dtype=np.float32))
        out = self.fake_sd.streams[0].pull(3, channels=2)
        np.testing.assert_array_equal(out, [[0.5, 0.5], [-0.5, -0.5], [0.0, 0.0]])

    def test_close_stops_stream_once(self):
        sink = SoundDeviceSink()
        sink.append(np.ones(10, dtype=np.float32))
        sink.close()
        sink.close()
        stream = self.fake_sd.streams[0]
        self.assertTrue(stream.stopped)
        self.assertTrue(stream.closed)
        self.assertEqual(sink.pending_frames, 0)

    def test_stream_error_is_reported_as_unavailable(self):
        self.fake_sd.OutputStream.side_effect = RuntimeError("PortAudio error")
        with self.assertRaises(AudioUnavailableError):
            SoundDeviceSink()


class TestMissingBackend(unittest.TestCase):
    def test_missing_portaudio(self):
        # A None entry makes the import fail
        with mock.patch.dict(sys.modules, {"sounddevice": None}):
            with self.assertRaises(AudioUnavailableError):
                SoundDeviceSink()
            with self.assertRaises(AudioUnavailableError):
                list_output_devices()


class TestListOutputDevices(unittest.TestCase):
    def test_only_output_devices(self):
        fake_sd = make_fake_sounddevice()
        fake_sd.query_devices.return_value = [
            {"name": "Mic", "max_input_channels": 1, "max_output_channels": 0, "default_samplerate": 48000.0},
            {"name": "Speakers", "max_input_channels": 0, "max_output_channels": 2, "default_samplerate": 44100.0},
        ]
        with mock.patch.dict(sys.modules, {"sounddevice": fake_sd}):
            devices = list_output_devices()
        self.assertEqual(len(devices), 1)
        self.assertEqual(devices[0]["id"], 1)
        self.assertEqual(devices[0]["name"], "Speakers")

    def test_query_failure(self):
        fake_sd = make_fake_sounddevice()
        fake_sd.query_devices.side_effect = RuntimeError("no host api")
        with mock.patch.dict(sys.modules, {"sounddevice": fake_sd}):
            with self.assertRaises(AudioUnavailableError):
                list_output_devices()


if __name__ == "__main__":
    unittest.main()
