"""Command-line interface for Fretboard Practice."""

from .main import main as cli_main

__all__ = ["cli_main"]
