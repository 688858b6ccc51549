"""
Verify every module in the package imports cleanly, without an audio device.
"""

import importlib
import pkgutil

import pytest

import fretboard_practice


def find_modules():
    """Find all module names in the package."""
    return sorted(
        info.name
        for info in pkgutil.walk_packages(
            fretboard_practice.__path__, prefix="fretboard_practice."
        )
    )


def test_modules_found():
    modules = find_modules()
    assert "fretboard_practice.audio.playback" in modules
    assert "fretboard_practice.cli.main" in modules


@pytest.mark.parametrize("module_name", find_modules())
def test_import(module_name):
    importlib.import_module(module_name)
