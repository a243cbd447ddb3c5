"""
ihex - Intel HEX Decoder
========================

This package decodes Intel HEX files, the ASCII format used to ship
firmware and EEPROM images for microcontrollers and EPROM programmers.

Main Components
---------------
- **parser**: RecordParser, a pull-based decoder that returns data records
    with their full 32-bit load addresses, plus whole-file helpers

- **records**: Record and entry point data structures, record type table

- **checksum**: Record checksum calculation and verification

- **cli**: The `ihexdump` command-line listing tool

Quick Start
-----------
Pull records one at a time:
    >>> from ihex import RecordParser
    >>> parser = RecordParser.from_file("firmware.hex")
    >>> while parser.pull():
    ...     print(parser.record)
    >>> parser.error is None
    True

Decode a whole file:
    >>> from ihex import parse_hex_file
    >>> image = parse_hex_file("firmware.hex")
    >>> image.address_range()
    (0, 32)

Or use the command-line tool:
    $ ihexdump firmware.hex --hex

Reference Documentation
-----------------------
- Intel Hexadecimal Object File Format Specification, Rev. A (1988)

Version History
---------------
1.0.0 - Initial release with record parser and ihexdump
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ihex.errors import (
    IHexError,
    HexParseError,
    MissingRecordMarkError,
    MalformedHexError,
    RecordTooShortError,
    InvalidRecordLengthError,
    InvalidChecksumError,
    TrailingDataError,
    MissingEndRecordError,
    RecordAfterEndError,
)
from ihex.records import (
    RecordType,
    Record,
    StartSegmentAddress,
    SegmentBase,
    LinearBase,
    EXPECTED_LENGTHS,
)
from ihex.checksum import calculate_checksum, verify_checksum
from ihex.parser import (
    RecordParser,
    HexFile,
    iter_records,
    parse_hex,
    parse_hex_file,
)

__all__ = [
    "__version__",
    # Errors
    "IHexError",
    "HexParseError",
    "MissingRecordMarkError",
    "MalformedHexError",
    "RecordTooShortError",
    "InvalidRecordLengthError",
    "InvalidChecksumError",
    "TrailingDataError",
    "MissingEndRecordError",
    "RecordAfterEndError",
    # Records
    "RecordType",
    "Record",
    "StartSegmentAddress",
    "SegmentBase",
    "LinearBase",
    "EXPECTED_LENGTHS",
    # Checksum
    "calculate_checksum",
    "verify_checksum",
    # Parser
    "RecordParser",
    "HexFile",
    "iter_records",
    "parse_hex",
    "parse_hex_file",
]
