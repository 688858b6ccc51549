"""Core components for the Fretboard Practice application."""

# Import interfaces for easier access
from .interfaces import IAudioSink

__all__ = ["IAudioSink"]
