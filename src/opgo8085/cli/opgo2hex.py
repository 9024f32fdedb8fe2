"""
opgo2hex - 8085 Assembler Command-Line Interface
================================================

This module implements the command-line interface that assembles an .opgo
project into an Intel HEX file.

Usage Examples
--------------
Basic assembly (writes program.hex):
    $ opgo2hex program.opgo

With output file and origin:
    $ opgo2hex program.opgo -o out.hex --org 0x0100

Generate all output files:
    $ opgo2hex program.opgo -l program.lst -s program.sym -b program.bin

Verbose mode:
    $ opgo2hex -v program.opgo
"""

import logging
from pathlib import Path
from typing import Optional

import click

from opgo8085 import __version__
from opgo8085.assembler import Assembler
from opgo8085.assembler.numbers import parse_number
from opgo8085.cli.errors import handle_cli_exception
from opgo8085.config import AssemblerConfig
from opgo8085.errors import HexError, NumericLiteralError
from opgo8085.ihex import parse_intel_hex, records_to_bytes
from opgo8085.project import load_project


# =============================================================================
# Parameter Types
# =============================================================================

class OriginType(click.ParamType):
    """Load origin given as a hex (0x100, 100H) or decimal literal."""

    name = "address"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            origin = value
        else:
            try:
                origin = parse_number(value)
            except NumericLiteralError:
                self.fail(f"{value!r} is not a valid address (use 0x100, 100H or 256)", param, ctx)
        if not 0 <= origin <= 0xFFFF:
            self.fail(f"{value} is out of range (must be 0..65535)", param, ctx)
        return origin


ORIGIN = OriginType()


def _verify_hex(hex_text: str, code: bytes, origin: int) -> None:
    """Decode emitted HEX text and compare it with the assembled code."""
    decoded_origin, decoded = records_to_bytes(parse_intel_hex(hex_text))
    if decoded != code or (code and decoded_origin != origin):
        raise HexError("verification failed: HEX output does not match assembled code")


def _write_outputs(outputs: list[tuple[Path, str | bytes, str]]) -> None:
    """Write each output file, removing the ones already written if any write fails."""
    written: list[Path] = []
    try:
        for path, content, _ in outputs:
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)
            written.append(path)
    except OSError:
        for path in written:
            path.unlink(missing_ok=True)
        raise


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
    help="Output HEX file (default: input.hex)",
)
@click.option(
    "--org", "origin",
    type=ORIGIN,
    default=None,
    help="Load origin, hex or decimal (0..65535). Overrides the project origin.",
)
@click.option(
    "-r", "--record-size",
    type=click.IntRange(1, 255),
    default=None,
    help="Data bytes per HEX record (default: 16)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-b", "--binary",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write raw binary output (machine code only)",
)
@click.option(
    "--verify",
    is_flag=True,
    help="Decode the generated HEX and check it against the assembled code",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="opgo2hex")
def main(
    input_file: Path,
    output: Optional[Path],
    origin: Optional[int],
    record_size: Optional[int],
    listing: Optional[Path],
    symbols: Optional[Path],
    binary: Optional[Path],
    verify: bool,
    verbose: bool,
) -> None:
    """
    Assemble an OpGo!! 8085 project into Intel HEX.

    INPUT_FILE is the .opgo project (JSON with a sourceCode array).

    \b
    Examples:
        opgo2hex program.opgo              # Outputs program.hex
        opgo2hex program.opgo -o out.hex   # Specify output file
        opgo2hex program.opgo --org 100H   # Load at 0x0100
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    config = AssemblerConfig.from_env()
    if record_size is not None:
        config.record_size = record_size

    output_file = output if output is not None else input_file.with_suffix(config.output_suffix)

    asm = Assembler(origin=config.origin, record_size=config.record_size, verbose=verbose)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        project = load_project(input_file)
        code = asm.assemble_project(project, origin)
        resolved_origin = asm.get_origin()
        hex_text = asm.get_hex()

        if verify:
            _verify_hex(hex_text, code, resolved_origin)
            if verbose:
                click.echo("Verified HEX output against assembled code")

        # All outputs are rendered before any file is written
        outputs: list[tuple[Path, str | bytes, str]] = [(output_file, hex_text, "HEX")]
        if binary:
            outputs.append((binary, code, "raw binary"))
        if listing:
            outputs.append((listing, asm.get_listing(), "listing"))
        if symbols:
            outputs.append((symbols, asm.get_symbol_file(), "symbols"))

        _write_outputs(outputs)

        if verbose:
            for path, _, kind in outputs[1:]:
                click.echo(f"Wrote {kind} to {path}")

        click.echo(f"Wrote {len(code)} bytes to {output_file} (origin={resolved_origin:04X})")

        if verbose:
            sym_count = len(asm.get_symbols())
            record_count = hex_text.count("\n")
            click.echo(f"Defined {sym_count} labels, {record_count} HEX records")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
