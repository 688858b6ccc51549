"""Factory for creating Fretboard Practice components."""

import os
from typing import Optional

from ..audio.playback import PlaybackController, open_playback
from ..audio.synth import SineWave
from ..fretboard import Tuning, parse_tuning
from ..logger import get_logger
from .config import ConfigManager

logger = get_logger(__name__)

# Set to any non-empty value to run without sound
DISABLE_AUDIO_ENV = "FRETBOARD_DISABLE_AUDIO"


class ComponentFactory:
    """Factory for creating Fretboard Practice components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def create_synthesizer(self, frequency_hz: float, **kwargs) -> SineWave:
        """Create an oscillator using the configured tone settings.

        Args:
            frequency_hz: Tone frequency in Hz
            **kwargs: Overrides for sample_rate and amplitude

        Returns:
            A SineWave starting at sample 0
        """
        config = self.config_manager.get_config("tone")
        config.update(kwargs)
        return SineWave(
            frequency_hz,
            sample_rate=config["sample_rate"],
            amplitude=config["amplitude"],
        )

    def create_playback_controller(self, **kwargs) -> PlaybackController:
        """Create a playback controller from the tone and playback settings.

        Audio is skipped when it is disabled in the configuration or via the
        FRETBOARD_DISABLE_AUDIO environment variable.

        Args:
            **kwargs: Overrides for any tone or playback setting

        Returns:
            A PlaybackController, silent if audio is disabled or unavailable
        """
        config = self.config_manager.get_config("tone")
        config.update(self.config_manager.get_config("playback"))
        config.update(kwargs)

        enabled = bool(config["enabled"]) and not os.environ.get(DISABLE_AUDIO_ENV)
        controller = open_playback(
            device=config["device"],
            sample_rate=config["sample_rate"],
            duration=config["duration_ms"] / 1000.0,
            amplitude=config["amplitude"],
            release_grace=config["release_grace_ms"] / 1000.0,
            enabled=enabled,
        )

        logger.info(
            f"Created playback controller ({'audio' if controller.available else 'silent'})"
        )
        return controller

    def create_tuning(self) -> Tuning:
        """Build the configured tuning.

        Raises:
            ValueError: If the configured note names are invalid
        """
        return parse_tuning(self.config_manager.get_config("fretboard")["tuning"])
