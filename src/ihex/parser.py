"""
Intel HEX Record Parser
=======================

This module provides a pull-based parser for Intel HEX files.

RecordParser
------------
The RecordParser reads one line at a time from any iterable of text lines
(an open file, a list of strings, io.StringIO) and hands back data records
one by one. Extended address records, entry point records and blank lines
are consumed internally; only data records surface to the caller.

The parser tracks the extended segment or extended linear base currently
in effect, so each returned Record carries its full 32-bit load address.
In segment mode a data record whose bytes run past offset 0xFFFF wraps to
the start of the 64K segment window; the parser returns it as two records.

Errors are sticky: the first problem found is stored, pull() returns False
from then on and no more input is read.

Usage Examples
--------------
Pull style:
    >>> parser = RecordParser.from_file("firmware.hex")
    >>> while parser.pull():
    ...     rec = parser.record
    ...     print(f"{rec.address:08X} {len(rec.data)}")
    >>> if parser.error:
    ...     print(f"error: {parser.error}")

Iterator style (errors are raised):
    >>> for rec in RecordParser.from_string(text):
    ...     flash.write(rec.address, rec.data)

Whole file:
    >>> image = parse_hex_file("firmware.hex")
    >>> print(image.eip)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union
import logging

from ihex.checksum import calculate_checksum, running_sum
from ihex.errors import (
    HexParseError,
    InvalidChecksumError,
    InvalidRecordLengthError,
    MalformedHexError,
    MissingEndRecordError,
    MissingRecordMarkError,
    RecordAfterEndError,
    RecordTooShortError,
    TrailingDataError,
)
from ihex.records import (
    EXPECTED_LENGTHS,
    RECORD_MARK,
    SEGMENT_WINDOW,
    BaseAddress,
    LinearBase,
    Record,
    RecordType,
    SegmentBase,
    StartSegmentAddress,
)

# Logger for this module
logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

Line = Union[str, bytes]


# =============================================================================
# Field Reader
# =============================================================================

class _FieldReader:
    """
    Decodes fixed-size hex fields from the text of one record.

    Keeps the running mod-256 sum of everything read so far, so the sum
    is exactly zero once the checksum byte of a valid record is consumed.
    Characters left over after the last field count as trailing data.
    """

    def __init__(self, text: str, line: int):
        self.text = text
        self.line = line
        self.pos = 0
        self.sum = 0

    @property
    def remaining(self) -> int:
        return len(self.text) - self.pos

    def read(self, count: int) -> bytes:
        end = self.pos + count * 2
        if end > len(self.text):
            if self.remaining % 2:
                raise MalformedHexError(self.line)
            raise RecordTooShortError(self.line)
        digits = self.text[self.pos:end]
        if not _HEX_DIGITS.issuperset(digits):
            raise MalformedHexError(self.line)
        chunk = bytes.fromhex(digits)
        self.pos = end
        self.sum = running_sum(chunk, self.sum)
        return chunk

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_word(self) -> int:
        """Read a big-endian 16-bit field."""
        high, low = self.read(2)
        return (high << 8) | low


def _parse_word_pair(payload: bytes) -> tuple[int, int]:
    return (payload[0] << 8) | payload[1], (payload[2] << 8) | payload[3]


# =============================================================================
# Record Parser
# =============================================================================

class RecordParser:
    """
    Pull-based parser over the lines of an Intel HEX file.

    Attributes:
        line: Number of lines consumed so far
        ended: True once the end-of-file record has been read
        base: Extended address in effect (None, SegmentBase or LinearBase)

    Example:
        >>> parser = RecordParser(open("firmware.hex"))
        >>> while parser.pull():
        ...     print(parser.record)
    """

    def __init__(self, stream: Iterable[Line], name: Optional[str] = None):
        """
        Create a parser over a stream of lines.

        Args:
            stream: Any iterable of str or bytes lines; trailing CR/LF is
                ignored
            name: Optional input name used in log messages
        """
        self.name = name or "<input>"
        self.line = 0
        self.ended = False
        self.base: BaseAddress = None

        self._lines = iter(stream)
        self._owned: Optional[IO[str]] = None
        self._finished = False

        self._record: Optional[Record] = None
        self._pending: Optional[Record] = None
        self._error: Optional[Exception] = None
        self._csip: Optional[StartSegmentAddress] = None
        self._eip: Optional[int] = None

    @classmethod
    def from_string(cls, text: str, name: Optional[str] = None) -> "RecordParser":
        """Create a parser over the lines of a string."""
        return cls(text.splitlines(), name=name)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "RecordParser":
        """
        Create a parser that reads a HEX file from disk.

        The file is opened immediately and closed once the stream is
        exhausted, an error occurs, or close() is called. Non-ASCII bytes
        are not rejected at open time; they surface as MalformedHexError.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        filepath = Path(filepath)
        handle = filepath.open("r", encoding="ascii", errors="replace")
        parser = cls(handle, name=str(filepath))
        parser._owned = handle
        return parser

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def record(self) -> Optional[Record]:
        """The data record produced by the last successful pull()."""
        return self._record

    @property
    def error(self) -> Optional[Exception]:
        """The first error encountered, or None."""
        return self._error

    @property
    def csip(self) -> Optional[StartSegmentAddress]:
        """CS:IP from the last type 3 record, or None if there was none."""
        return self._csip

    @property
    def eip(self) -> Optional[int]:
        """EIP from the last type 5 record, or None if there was none."""
        return self._eip

    def pull(self) -> bool:
        """
        Advance to the next data record.

        Returns:
            True if a new record is available via `record`; False when
            the input is exhausted or an error occurred (see `error`)
        """
        if self._error is not None or self._finished:
            return False

        if self._pending is not None:
            self._record, self._pending = self._pending, None
            return True

        try:
            record = self._next_record()
        except HexParseError as e:
            self._fail(e)
            return False

        if record is None:
            self._close()
            return False

        self._record = record
        return True

    def close(self) -> None:
        """Stop parsing and close the input file if this parser opened it."""
        self._finished = True
        self._close()

    def __enter__(self) -> "RecordParser":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __iter__(self) -> Iterator[Record]:
        """
        Yield data records until the input is exhausted.

        Raises:
            HexParseError: Or the stream's own exception, once the records
                before it have been yielded
        """
        while self.pull():
            yield self._record
        if self._error is not None:
            raise self._error

    # =========================================================================
    # Line Processing
    # =========================================================================

    def _fail(self, error: Exception) -> None:
        self._error = error
        self._close()

    def _close(self) -> None:
        self._finished = True
        if self._owned is not None:
            self._owned.close()
            self._owned = None

    def _next_record(self) -> Optional[Record]:
        """
        Read lines until a data record is ready.

        Returns:
            The next Record, or None at a clean end of input or once a
            stream error has been stored
        """
        while True:
            try:
                raw = next(self._lines)
            except StopIteration:
                break
            except Exception as e:
                # Stream errors are stored unchanged
                self._fail(e)
                return None

            if isinstance(raw, bytes):
                raw = raw.decode("ascii", errors="replace")
            self.line += 1

            # Only the line terminator is dropped; other whitespace is part
            # of the record and fails validation
            text = raw.rstrip("\r\n")
            if not text.strip():
                continue
            if self.ended:
                raise RecordAfterEndError(self.line)

            record = self._parse_line(text)
            if record is not None:
                return record

        if not self.ended:
            raise MissingEndRecordError(self.line)
        logger.debug(f"{self.name}: {self.line} lines read")
        return None

    def _parse_line(self, text: str) -> Optional[Record]:
        """Decode and validate one record line, then apply it."""
        if not text.startswith(RECORD_MARK):
            raise MissingRecordMarkError(self.line)

        reader = _FieldReader(text[1:], self.line)

        length = reader.read_byte()
        offset = reader.read_word()
        record_type = reader.read_byte()

        expected = EXPECTED_LENGTHS.get(record_type)
        if expected is not None and length != expected:
            raise InvalidRecordLengthError(self.line, record_type, length, expected)

        payload = reader.read(length)
        body_sum = reader.sum
        checksum = reader.read_byte()

        if reader.sum != 0:
            raise InvalidChecksumError(
                self.line,
                expected=calculate_checksum([body_sum]),
                actual=checksum,
            )
        if reader.remaining:
            raise TrailingDataError(self.line)

        return self._apply(record_type, offset, payload)

    def _apply(self, record_type: int, offset: int, payload: bytes) -> Optional[Record]:
        """
        Act on a validated record.

        Returns:
            A Record for data records, None for everything else
        """
        if record_type == RecordType.DATA:
            return self._data_record(offset, payload)

        if record_type in EXPECTED_LENGTHS:
            logger.debug(
                f"{self.name}:{self.line}: "
                f"{RecordType(record_type).get_description()} record"
            )

        if record_type == RecordType.END_OF_FILE:
            self.ended = True

        elif record_type == RecordType.EXTENDED_SEGMENT_ADDRESS:
            segment = (payload[0] << 8) | payload[1]
            self.base = SegmentBase.from_segment(segment)
            logger.debug(f"{self.name}:{self.line}: segment base 0x{self.base.base:08X}")

        elif record_type == RecordType.START_SEGMENT_ADDRESS:
            self._csip = StartSegmentAddress(*_parse_word_pair(payload))
            logger.debug(f"{self.name}:{self.line}: start address CS:IP {self._csip}")

        elif record_type == RecordType.EXTENDED_LINEAR_ADDRESS:
            upper = (payload[0] << 8) | payload[1]
            self.base = LinearBase.from_upper(upper)
            logger.debug(f"{self.name}:{self.line}: linear base 0x{self.base.base:08X}")

        elif record_type == RecordType.START_LINEAR_ADDRESS:
            high, low = _parse_word_pair(payload)
            self._eip = (high << 16) | low
            logger.debug(f"{self.name}:{self.line}: start address EIP 0x{self._eip:08X}")

        else:
            logger.warning(
                f"{self.name}:{self.line}: ignoring unknown record type 0x{record_type:02X}"
            )

        return None

    def _data_record(self, offset: int, payload: bytes) -> Record:
        """
        Build the Record for a type 0 record.

        Outside linear mode a record that runs past offset 0xFFFF is split;
        the overflow is queued in _pending and starts again at the bottom
        of the segment window.
        """
        base = self.base
        address = base.resolve(offset) if base is not None else offset

        if isinstance(base, LinearBase):
            return Record(address, payload)

        keep = SEGMENT_WINDOW - offset
        if len(payload) > keep:
            segment = base.base if base is not None else 0
            self._pending = Record(segment, payload[keep:])
            payload = payload[:keep]
            logger.debug(
                f"{self.name}:{self.line}: record wraps at segment boundary, "
                f"{len(self._pending.data)} bytes continue at 0x{segment:08X}"
            )

        return Record(address, payload)


# =============================================================================
# Whole-File Parsing
# =============================================================================

@dataclass
class HexFile:
    """
    Everything decoded from one Intel HEX input.

    Attributes:
        records: Data records in file order (wrapped records split in two)
        csip: CS:IP from a type 3 record, if any
        eip: EIP from a type 5 record, if any
    """
    records: list[Record] = field(default_factory=list)
    csip: Optional[StartSegmentAddress] = None
    eip: Optional[int] = None

    def total_bytes(self) -> int:
        """Total number of data bytes across all records."""
        return sum(len(record.data) for record in self.records)

    def address_range(self) -> Optional[tuple[int, int]]:
        """
        Lowest address and one-past-highest address covered by data.

        Returns:
            (start, end) or None if there are no data bytes
        """
        populated = [record for record in self.records if record.data]
        if not populated:
            return None
        return (
            min(record.address for record in populated),
            max(record.end_address for record in populated),
        )


def iter_records(stream: Iterable[Line], name: Optional[str] = None) -> Iterator[Record]:
    """
    Iterate over the data records in a stream of lines.

    Raises:
        HexParseError: On the first malformed line
    """
    return iter(RecordParser(stream, name=name))


def _collect(parser: RecordParser) -> HexFile:
    with parser:
        records = list(parser)
    return HexFile(records=records, csip=parser.csip, eip=parser.eip)


def parse_hex(text: str) -> HexFile:
    """
    Decode Intel HEX text in one go.

    Raises:
        HexParseError: If any line is malformed
    """
    return _collect(RecordParser.from_string(text))


def parse_hex_file(filepath: Union[str, Path]) -> HexFile:
    """
    Read and decode an Intel HEX file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        HexParseError: If any line is malformed
    """
    return _collect(RecordParser.from_file(filepath))
