"""
chip8disasm - CHIP-8 Disassembler Command-Line Interface
========================================================

This module implements the command-line interface for the CHIP-8
disassembler. It lists a program image one instruction word at a time,
using the same decoder the VM executes with.

Usage Examples
--------------
Disassemble a ROM:
    $ chip8disasm pong.ch8

Limit number of instructions:
    $ chip8disasm pong.ch8 --count 20

Output to file:
    $ chip8disasm pong.ch8 -o pong.lst

Mnemonics only:
    $ chip8disasm pong.ch8 --no-bytes

Words that are not instructions (sprite data, padding) are listed as
`DW 0xNNNN`.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from chip8vm import __version__
from chip8vm.cli.errors import ExitCode, handle_cli_exception
from chip8vm.emulator.decoder import disassemble
from chip8vm.emulator.memory import MEMORY_SIZE, PROGRAM_START


def parse_address(text: str) -> int:
    """Parse a hex (0x or $ prefix) or decimal address."""
    if text.lower().startswith("0x"):
        return int(text, 16)
    if text.startswith("$"):
        return int(text[1:], 16)
    return int(text)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=str,
    default=f"0x{PROGRAM_START:X}",
    help="Load address of the first byte (hex with 0x prefix or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only the mnemonic)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    address: str,
    count: Optional[int],
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 program image.

    INPUT_FILE is the raw ROM to disassemble.

    Examples:

        # First 20 instructions
        chip8disasm pong.ch8 --count 20

        # Listing without raw bytes
        chip8disasm pong.ch8 --no-bytes -o pong.lst
    """
    try:
        base_address = parse_address(address)
    except ValueError:
        click.echo(f"Error: Invalid address '{address}'", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if not 0 <= base_address < MEMORY_SIZE:
        click.echo("Error: Address must be 0-4095 (0x000-0xFFF)", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    try:
        data = input_file.read_bytes()

        if len(data) == 0:
            click.echo(f"Error: {input_file} is empty", err=True)
            sys.exit(ExitCode.INVALID_ARGS)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Base address: ${base_address:03X}", err=True)

        output_lines = [
            f"; Disassembly of {input_file.name}",
            f"; Size: {len(data)} bytes",
            f"; Base address: ${base_address:03X}",
            "",
        ]

        instructions = list(disassemble(data, start_address=base_address, count=count))
        for instr in instructions:
            output_lines.append(instr.format(show_bytes=not no_bytes))

        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            data_words = sum(1 for instr in instructions if instr.is_data)
            click.echo(
                f"Instructions disassembled: {len(instructions)} ({data_words} data words)",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
