"""
chip8run - CHIP-8 Program Runner
================================

This module implements the command-line interface that runs a CHIP-8
program in a window with keyboard input and tone output.

Usage Examples
--------------
Run a program at the default 500 Hz:
    $ chip8run pong.ch8

Slow it down, on a green phosphor:
    $ chip8run pong.ch8 --clock 250 --color green

Trace every instruction to stderr:
    $ chip8run pong.ch8 --verbose

Save the last frame when the window closes:
    $ chip8run maze.ch8 --screenshot maze.png

Keypad
------
The 4 x 4 keypad is mapped onto the keyboard:

    1 2 3 C        7 8 9 0
    4 5 6 D   ->   u i o p
    7 8 9 E        j k l ;
    A 0 B F        m , . /

Escape or closing the window quits.

Exit Codes
----------
0 - Window closed normally
1 - ROM, device or emulation error
2 - Invalid arguments or missing ROM file
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8vm import __version__
from chip8vm.cli.errors import handle_cli_exception
from chip8vm.emulator import Emulator, EmulatorConfig, list_colors
from chip8vm.emulator.display import render_image
from chip8vm.emulator.scheduler import MAX_CLOCK_HZ, MIN_CLOCK_HZ

logger = logging.getLogger(__name__)


LOG_FORMAT = "[%(asctime)s][%(name)s][%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d][%H:%M:%S"


def setup_logging(verbose: bool) -> None:
    """Log errors to stderr; with verbose, trace the VM at DEBUG."""
    logging.basicConfig(
        level=logging.ERROR,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    if verbose:
        logging.getLogger("chip8vm").setLevel(logging.DEBUG)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-c", "--clock",
    type=click.IntRange(MIN_CLOCK_HZ, MAX_CLOCK_HZ),
    default=MAX_CLOCK_HZ,
    show_default=True,
    help="Instruction clock in Hz",
)
@click.option(
    "--color",
    type=click.Choice(list_colors(), case_sensitive=False),
    default="white",
    show_default=True,
    help="Pixel color",
)
@click.option(
    "--mute",
    is_flag=True,
    help="Do not open the audio device",
)
@click.option(
    "--screenshot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the last frame as PNG when the program exits",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Log every executed instruction at DEBUG level",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom: Path,
    clock: int,
    color: str,
    mute: bool,
    screenshot: Optional[Path],
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program.

    ROM is the raw program image, loaded at 0x200.

    Examples:

        chip8run pong.ch8

        chip8run pong.ch8 --clock 250 --color amber
    """
    setup_logging(verbose)

    try:
        config = EmulatorConfig(clock_hz=clock, color=color.lower())
        emulator = Emulator.from_file(rom, config)

        # pygame is only needed once there is something to show
        from chip8vm.frontend import PygameFrontend

        frontend = PygameFrontend(emulator, audio=not mute)
        ticks = frontend.run()
        logger.debug(f"Stopped after {ticks} ticks")

        if screenshot:
            snapshot = emulator.framebuffer.snapshot()
            screenshot.write_bytes(
                render_image(snapshot, emulator.pixel_color, emulator.background_color)
            )
            if verbose:
                click.echo(f"Wrote last frame to {screenshot}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Emulation")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
