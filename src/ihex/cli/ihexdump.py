"""
ihexdump - Intel HEX Listing Command-Line Interface
===================================================

This module implements the command-line interface for inspecting Intel HEX
files. It decodes every record, resolving extended segment and linear
addresses, and lists the resulting data records and entry points.

Usage Examples
--------------
List records:
    $ ihexdump firmware.hex

Hex dump of every record:
    $ ihexdump firmware.hex --hex

Narrower rows without the ASCII column:
    $ ihexdump firmware.hex --hex --width 8 --no-ascii

Output to file:
    $ ihexdump firmware.hex -o listing.txt

Environment
-----------
IHEXDUMP_WIDTH and IHEXDUMP_ASCII set the defaults for --width and
--ascii/--no-ascii.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ihex import __version__
from ihex.cli.config import DumpConfig
from ihex.cli.errors import handle_cli_exception
from ihex.parser import RecordParser
from ihex.records import Record

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def format_hex_rows(record: Record, config: DumpConfig) -> list[str]:
    """
    Format a record's bytes as hex dump rows.

    Each row starts with the absolute address of its first byte.
    """
    rows = []
    width = config.bytes_per_line
    for i in range(0, len(record.data), width):
        chunk = record.data[i:i + width]
        hex_str = " ".join(f"{b:02X}" for b in chunk)
        row = f"    {record.address + i:08X}: {hex_str:<{width * 3 - 1}}"
        if config.show_ascii:
            ascii_str = "".join(
                chr(b) if 0x20 <= b < 0x7F else "."
                for b in chunk
            )
            row += f"  {ascii_str}"
        rows.append(row.rstrip())
    return rows


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
    "--hex",
    "show_hex",
    is_flag=True,
    help="Include a hex dump of each record's bytes",
)
@click.option(
    "-w", "--width",
    type=click.IntRange(min=1),
    default=None,
    help="Bytes per hex dump row (default: 16, or IHEXDUMP_WIDTH)",
)
@click.option(
    "--ascii/--no-ascii",
    "show_ascii",
    default=None,
    help="Show the ASCII column in hex dumps (default: enabled)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="ihexdump")
def main(
    input_file: Path,
    output: Optional[Path],
    show_hex: bool,
    width: Optional[int],
    show_ascii: Optional[bool],
    verbose: bool,
) -> None:
    """
    List the data records in an Intel HEX file.

    INPUT_FILE is the HEX file to decode.

    Each data record is shown with its resolved 32-bit load address.
    Records that wrap at a 64K segment boundary are listed as two records.

    Examples:

        # List records
        ihexdump firmware.hex

        # Hex dump, 8 bytes per row
        ihexdump firmware.hex --hex -w 8
    """
    setup_logging(verbose)

    config = DumpConfig.from_env()
    if width is not None:
        config.bytes_per_line = width
    if show_ascii is not None:
        config.show_ascii = show_ascii

    try:
        parser = RecordParser.from_file(input_file)
    except OSError as e:
        handle_cli_exception(e, verbose)

    output_lines = [f"; Records in {input_file.name}", ""]
    record_count = 0
    byte_count = 0
    low: Optional[int] = None
    high: Optional[int] = None

    with parser:
        while parser.pull():
            record = parser.record
            record_count += 1
            byte_count += len(record.data)
            if record.data:
                low = record.address if low is None else min(low, record.address)
                high = record.end_address if high is None else max(high, record.end_address)

            output_lines.append(str(record))
            if show_hex:
                output_lines.extend(format_hex_rows(record, config))

    if parser.error is not None:
        handle_cli_exception(parser.error, verbose)

    output_lines.append("")
    if parser.csip is not None:
        output_lines.append(f"; Start CS:IP: {parser.csip}")
    if parser.eip is not None:
        output_lines.append(f"; Start EIP: 0x{parser.eip:08X}")

    record_word = "record" if record_count == 1 else "records"
    summary = f"; {record_count} {record_word}, {byte_count} bytes"
    if low is not None:
        summary += f", 0x{low:08X}-0x{high - 1:08X}"
    output_lines.append(summary)

    result = "\n".join(output_lines) + "\n"

    if output:
        try:
            output.write_text(result, encoding="utf-8")
        except OSError as e:
            handle_cli_exception(e, verbose)
        logger.debug(f"Output written to: {output}")
    else:
        click.echo(result, nl=False)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
