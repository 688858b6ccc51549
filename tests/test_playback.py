import threading
import unittest
from unittest import mock

import numpy as np

from fretboard_practice.audio.audio_output import AudioUnavailableError
from fretboard_practice.audio.playback import (
    PlaybackController,
    PlaybackState,
    open_playback,
)
from fretboard_practice.mock_audio_sink import MockAudioSink


@mock.patch("fretboard_practice.audio.playback.time.sleep")
class TestPlaybackController(unittest.TestCase):
    def setUp(self):
        self.sink = MockAudioSink()
        self.controller = PlaybackController(self.sink)

    def test_starts_idle(self, _sleep):
        self.assertTrue(self.controller.available)
        self.assertIs(self.controller.state, PlaybackState.IDLE)
        self.assertIsNone(self.controller.current_frequency)

    def test_play_clears_then_appends_truncated_tone(self, _sleep):
        self.controller.play(440.0)
        self.assertEqual(self.sink.events, [("clear",), ("append", 13230)])
        self.assertIs(self.controller.state, PlaybackState.PLAYING)
        self.assertEqual(self.controller.current_frequency, 440.0)

        samples = self.sink.appended[0]
        self.assertEqual(samples.dtype, np.float32)
        self.assertLessEqual(float(np.max(np.abs(samples))), 0.3 + 1e-6)

    def test_second_play_replaces_first(self, _sleep):
        self.controller.play(440.0)
        self.controller.play(329.63)

        self.assertEqual(
            self.sink.events,
            [("clear",), ("append", 13230), ("clear",), ("append", 13230)],
        )
        # Only the second tone is left queued
        self.assertEqual(self.sink.pending_frames, 13230)
        self.assertEqual(self.controller.current_frequency, 329.63)

    def test_state_returns_to_idle_when_tone_finishes(self, _sleep):
        self.controller.play(440.0)
        self.sink.finish()
        self.assertIs(self.controller.state, PlaybackState.IDLE)
        self.assertIsNone(self.controller.current_frequency)

    def test_stop(self, _sleep):
        self.controller.play(440.0)
        self.controller.stop()
        self.assertEqual(self.sink.events[-1], ("clear",))
        self.assertEqual(self.sink.pending_frames, 0)
        self.assertIs(self.controller.state, PlaybackState.IDLE)

    def test_custom_duration_and_sample_rate(self, _sleep):
        sink = MockAudioSink(sample_rate=48000)
        controller = PlaybackController(sink, duration=0.5)
        controller.play(220.0)
        self.assertEqual(sink.events[-1], ("append", 24000))

    def test_invalid_frequency(self, _sleep):
        with self.assertRaises(ValueError):
            self.controller.play(0.0)
        with self.assertRaises(ValueError):
            self.controller.play(-1.0)
        self.assertEqual(self.sink.events, [])

    def test_invalid_construction(self, _sleep):
        with self.assertRaises(ValueError):
            PlaybackController(self.sink, duration=-0.3)
        with self.assertRaises(ValueError):
            PlaybackController(self.sink, release_grace=-1)

    def test_backend_failure_is_swallowed(self, _sleep):
        sink = MockAudioSink(fail_on_append=True)
        controller = PlaybackController(sink)
        with self.assertLogs("fretboard_practice.audio.playback", level="ERROR"):
            controller.play(440.0)
        self.assertIs(controller.state, PlaybackState.IDLE)

    def test_cleanup_releases_device_with_grace_delay(self, sleep):
        self.controller.play(440.0)
        self.controller.cleanup()

        self.assertEqual(self.sink.events[-2:], [("clear",), ("close",)])
        self.assertTrue(self.sink.closed)
        sleep.assert_called_once_with(PlaybackController.RELEASE_GRACE)
        self.assertFalse(self.controller.available)
        self.assertIs(self.controller.state, PlaybackState.IDLE)

    def test_cleanup_is_idempotent(self, sleep):
        self.controller.cleanup()
        self.controller.cleanup()
        self.assertEqual(self.sink.events.count(("close",)), 1)
        self.assertEqual(sleep.call_count, 1)

    def test_play_after_cleanup_is_silent(self, _sleep):
        self.controller.cleanup()
        events = list(self.sink.events)
        self.controller.play(440.0)
        self.assertEqual(self.sink.events, events)

    def test_cleanup_from_another_thread(self, sleep):
        self.controller.play(440.0)
        worker = threading.Thread(target=self.controller.cleanup)
        worker.start()
        worker.join(timeout=5)
        self.assertTrue(self.sink.closed)
        sleep.assert_called_once()

    def test_context_manager_cleans_up_on_error(self, sleep):
        with self.assertRaises(RuntimeError):
            with PlaybackController(self.sink, release_grace=0.05):
                raise RuntimeError("host crashed")
        self.assertTrue(self.sink.closed)
        sleep.assert_called_once_with(0.05)


@mock.patch("fretboard_practice.audio.playback.time.sleep")
class TestSilentController(unittest.TestCase):
    def test_no_sink_is_a_no_op(self, sleep):
        controller = PlaybackController(None)
        self.assertFalse(controller.available)
        controller.play(440.0)
        self.assertIs(controller.state, PlaybackState.IDLE)
        controller.stop()
        controller.cleanup()
        sleep.assert_not_called()


class TestOpenPlayback(unittest.TestCase):
    @mock.patch("fretboard_practice.audio.playback.SoundDeviceSink")
    def test_opens_sound_device_sink(self, sink_cls):
        sink_cls.return_value = MockAudioSink()
        controller = open_playback(device=3, sample_rate=48000)
        sink_cls.assert_called_once_with(device=3, sample_rate=48000)
        self.assertTrue(controller.available)

    @mock.patch("fretboard_practice.audio.playback.SoundDeviceSink")
    def test_degrades_when_device_unavailable(self, sink_cls):
        sink_cls.side_effect = AudioUnavailableError("no device")
        with self.assertLogs("fretboard_practice.audio.playback", level="WARNING"):
            controller = open_playback()
        self.assertFalse(controller.available)
        controller.play(440.0)
        self.assertIs(controller.state, PlaybackState.IDLE)

    @mock.patch("fretboard_practice.audio.playback.SoundDeviceSink")
    def test_disabled(self, sink_cls):
        controller = open_playback(enabled=False)
        sink_cls.assert_not_called()
        self.assertFalse(controller.available)


if __name__ == "__main__":
    unittest.main()
