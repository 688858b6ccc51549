"""Main entry point for the Fretboard Practice CLI."""

import time
from typing import Optional

import click
import soundfile as sf

from ..audio.audio_output import AudioUnavailableError, list_output_devices
from ..audio.synth import render_tone
from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..fretboard import FretboardTable, generate_fretboard_table, note_at
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import Note, PitchClass
from ..scales import ScaleType, scale_pitch_classes
from ..services.frequency import to_frequency_hz

logger = get_logger(__name__)


def _parse_key(ctx, param, value):
    if value is None:
        return None
    try:
        return PitchClass.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _parse_scale(ctx, param, value):
    if value is None:
        return None
    try:
        return ScaleType.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _parse_note(ctx, param, value):
    try:
        return Note.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def format_table(table: FretboardTable, use_flats: bool = False) -> str:
    """Render a fretboard table as text, highest string on top.

    In-scale notes are shown by name, other cells as '-'. Marked frets get a
    dot under the fret number.
    """
    if not table or not table[0]:
        return ""
    width = 5
    frets = [cell.fret for cell in table[0]]
    lines = ["    " + "".join(f"{fret:^{width}}" for fret in frets)]
    lines.append(
        "    " + "".join(f"{'.' if cell.is_marked else '':^{width}}" for cell in table[0])
    )
    for row in reversed(table):
        label = row[0].note.pitch_class.name_flat if use_flats else row[0].note.pitch_class.name_sharp
        cells = [
            f"{cell.note.name_with(use_flats) if cell.is_in_scale else '-':^{width}}"
            for cell in row
        ]
        lines.append(f"{label:<3}|" + "".join(cells))
    return "\n".join(lines)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--no-audio", is_flag=True, help="Run without opening an audio device")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Configuration directory (default: ~/.config/fretboard_practice)",
)
@click.pass_context
def main(ctx, debug, no_audio, config_dir):
    """Fretboard Practice - fretboard notes, scales and tones"""
    setup_logging(level="DEBUG" if debug else None)
    ctx.ensure_object(dict)
    ctx.obj["factory"] = ComponentFactory(ConfigManager(config_dir))
    ctx.obj["no_audio"] = no_audio


@main.command()
@click.option("--key", "-k", callback=_parse_key, default=None, help="Root of the scale (e.g. C, F#, Bb)")
@click.option("--scale", "-s", callback=_parse_scale, default=None, help="Scale name (e.g. major, minor-pentatonic)")
@click.option("--frets", "-f", type=click.IntRange(min=1), default=None, help="Number of frets to show")
@click.option("--flats", is_flag=True, help="Spell notes with flats")
@click.pass_context
def table(ctx, key: Optional[PitchClass], scale: Optional[ScaleType], frets: Optional[int], flats: bool):
    """Show which fretboard notes belong to a scale"""
    factory: ComponentFactory = ctx.obj["factory"]
    config = factory.config_manager.get_config("fretboard")
    key = key if key is not None else PitchClass.parse(config["key"])
    scale = scale if scale is not None else ScaleType.parse(config["scale"])
    frets = frets if frets is not None else int(config["fret_count"])

    grid = generate_fretboard_table(factory.create_tuning(), key, scale, frets)
    click.echo(f"{key.name_flat if flats else key.name_sharp} {scale.display_name}")
    click.echo(format_table(grid, use_flats=flats))


@main.command()
@click.option("--key", "-k", callback=_parse_key, default="C", help="Root of the scale")
@click.option("--scale", "-s", callback=_parse_scale, default="major", help="Scale name")
@click.option("--flats", is_flag=True, help="Spell notes with flats")
def notes(key: PitchClass, scale: ScaleType, flats: bool):
    """List the notes of a scale"""
    names = [pc.name_flat if flats else pc.name_sharp for pc in scale_pitch_classes(key, scale)]
    click.echo(" ".join(names))


@main.command()
@click.argument("note", callback=_parse_note)
def freq(note: Note):
    """Print the frequency of a note (e.g. A4)"""
    click.echo(f"{note.name}: {to_frequency_hz(note):.2f} Hz")


@main.command()
@click.argument("string", type=int)
@click.argument("fret", type=click.IntRange(min=0))
@click.pass_context
def play(ctx, string: int, fret: int):
    """Play the note at STRING (0 = lowest) and FRET"""
    factory: ComponentFactory = ctx.obj["factory"]
    tuning = factory.create_tuning()
    if not 0 <= string < len(tuning):
        raise click.BadParameter(
            f"must be between 0 and {len(tuning) - 1}", param_hint="STRING"
        )

    note = note_at(tuning, string, fret)
    frequency = to_frequency_hz(note)
    click.echo(f"{note.name}: {frequency:.2f} Hz")

    overrides = {"enabled": False} if ctx.obj["no_audio"] else {}
    with factory.create_playback_controller(**overrides) as controller:
        if not controller.available:
            logger.debug(f"No audio output, skipping {note.name}")
            click.echo("Audio unavailable, nothing played.", err=True)
            return
        controller.play(frequency)
        duration = factory.config_manager.get_config("tone")["duration_ms"] / 1000.0
        # Let the tone finish before the device is released
        time.sleep(duration + 0.05)


@main.command()
@click.argument("note", callback=_parse_note)
@click.argument("output", type=click.Path(dir_okay=False, writable=True))
@click.option("--duration", "-d", type=click.FloatRange(min=0.0), default=None, help="Tone length in seconds")
@click.pass_context
def render(ctx, note: Note, output: str, duration: Optional[float]):
    """Write the tone for NOTE to the audio file OUTPUT (e.g. tone.wav)"""
    factory: ComponentFactory = ctx.obj["factory"]
    config = factory.config_manager.get_config("tone")
    if duration is None:
        duration = config["duration_ms"] / 1000.0

    samples = render_tone(
        to_frequency_hz(note),
        duration=duration,
        sample_rate=config["sample_rate"],
        amplitude=config["amplitude"],
    )
    sf.write(output, samples, config["sample_rate"])
    click.echo(f"Wrote {len(samples)} samples of {note.name} to {output}")


@main.command()
def devices():
    """List audio output devices"""
    try:
        outputs = list_output_devices()
    except AudioUnavailableError as e:
        raise click.ClickException(str(e))

    if not outputs:
        click.echo("No audio output devices found.")
        return
    for device in outputs:
        click.echo(
            f"Device {device['id']}: {device['name']} "
            f"({device['max_output_channels']} ch, {device['default_samplerate']:.0f} Hz)"
        )


if __name__ == "__main__":
    main()
