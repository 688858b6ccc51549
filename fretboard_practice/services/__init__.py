"""Pitch and frequency services for Fretboard Practice."""
