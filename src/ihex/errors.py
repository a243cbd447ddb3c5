"""
Intel HEX Error Hierarchy
=========================

This module defines the exception hierarchy for the ihex package.
All exceptions inherit from IHexError, allowing callers to catch all
decoding errors with a single except clause if desired.

Exception Hierarchy
-------------------
IHexError (base)
└── HexParseError - a record line could not be decoded
    ├── MissingRecordMarkError - line does not start with ':'
    ├── MalformedHexError - odd digit count or non-hex character
    ├── RecordTooShortError - a field runs past the end of the line
    ├── InvalidRecordLengthError - wrong payload length for record type
    ├── InvalidChecksumError - record bytes do not sum to zero
    ├── TrailingDataError - bytes left over after the checksum
    ├── MissingEndRecordError - input ended without an EOF record
    └── RecordAfterEndError - a record follows the EOF record

Design Philosophy
-----------------
Every parse error is fatal for the stream it was found in. Each exception
records the 1-based line number where decoding stopped, so messages read:

    line 12: invalid checksum (expected 0xA7, got 0xA6)

Errors raised by the underlying stream (OSError, UnicodeDecodeError, ...)
are not part of this hierarchy; they are passed through untouched.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class IHexError(Exception):
    """
    Base exception for all ihex errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch every decoding error with a single except clause:

        try:
            image = parse_hex_file("firmware.hex")
        except IHexError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Parse Errors
# =============================================================================

class HexParseError(IHexError):
    """
    A record could not be decoded.

    Attributes:
        line: Line number where the error was detected (1-indexed, 0 when
            no line was read at all)
        reason: Short description of what went wrong
    """

    default_reason = "parse error"

    def __init__(self, line: int, reason: Optional[str] = None):
        self.line = line
        self.reason = reason or self.default_reason
        super().__init__(f"line {line}: {self.reason}")


class MissingRecordMarkError(HexParseError):
    """Line has content but does not start with the ':' record mark."""

    default_reason = "missing record mark"


class MalformedHexError(HexParseError):
    """
    Record body is not valid hexadecimal.

    Raised for an odd number of hex digits or a character outside
    0-9, A-F, a-f.
    """

    default_reason = "malformed hex"


class RecordTooShortError(HexParseError):
    """
    A declared field extends past the end of the line.

    Example:
        :0C0010006164647265737320676170A7   ; declares 12 bytes, holds 11
    """

    default_reason = "record too short"


class InvalidRecordLengthError(HexParseError):
    """
    Payload length does not match the fixed length for the record type.

    Only record types 1-5 have a fixed length; data records may carry
    anything from 0 to 255 bytes.
    """

    def __init__(self, line: int, record_type: int, length: int, expected: int):
        self.record_type = record_type
        self.length = length
        self.expected = expected
        super().__init__(
            line,
            f"invalid record length {length} for type {record_type} "
            f"(expected {expected})",
        )


class InvalidChecksumError(HexParseError):
    """
    Record bytes do not sum to zero modulo 256.

    When known, `expected` is the checksum byte that would have made the
    record valid and `actual` is the byte found on the line.
    """

    def __init__(
        self,
        line: int,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ):
        self.expected = expected
        self.actual = actual
        reason = "invalid checksum"
        if expected is not None and actual is not None:
            reason += f" (expected 0x{expected:02X}, got 0x{actual:02X})"
        super().__init__(line, reason)


class TrailingDataError(HexParseError):
    """Extra bytes remain on the line after the checksum byte."""

    default_reason = "trailing data"


class MissingEndRecordError(HexParseError):
    """Input ended before an end-of-file (type 1) record was seen."""

    default_reason = "missing end record"


class RecordAfterEndError(HexParseError):
    """A non-blank line appears after the end-of-file record."""

    default_reason = "record after end"
