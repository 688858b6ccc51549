"""Tone synthesis and playback."""

from .audio_output import AudioUnavailableError, SoundDeviceSink, list_output_devices
from .playback import PlaybackController, PlaybackState, open_playback
from .synth import SineWave, render_tone, take_duration

__all__ = [
    "AudioUnavailableError",
    "SoundDeviceSink",
    "list_output_devices",
    "PlaybackController",
    "PlaybackState",
    "open_playback",
    "SineWave",
    "render_tone",
    "take_duration",
]
