"""
Intel HEX Record Definitions
============================

This module defines the data structures produced by the decoder.

Record Format
-------------
Each line of an Intel HEX file holds one record:

    :LLOOOOTTDD...DDCC

    :     Record mark
    LL    Payload length (1 byte)
    OOOO  Load offset (2 bytes, big-endian)
    TT    Record type (1 byte)
    DD    Payload (LL bytes)
    CC    Checksum (1 byte, two's complement of the sum of all other bytes)

Record Types
------------
- 00: Data
- 01: End Of File
- 02: Extended Segment Address (segment << 4 added to later offsets)
- 03: Start Segment Address (CS:IP entry point)
- 04: Extended Linear Address (upper << 16 OR-ed into later offsets)
- 05: Start Linear Address (EIP entry point)

Reference
---------
- Intel Hexadecimal Object File Format Specification, Rev. A (1988)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final, Optional, Union


class RecordType(IntEnum):
    """Record type identifiers (the TT field)."""
    DATA = 0x00
    END_OF_FILE = 0x01
    EXTENDED_SEGMENT_ADDRESS = 0x02
    START_SEGMENT_ADDRESS = 0x03
    EXTENDED_LINEAR_ADDRESS = 0x04
    START_LINEAR_ADDRESS = 0x05

    def get_description(self) -> str:
        """Get a human-readable description of the record type."""
        return self.name.replace("_", " ").title()


# Fixed payload lengths for record types 1-5. Data records and unknown
# types are not length-checked.
EXPECTED_LENGTHS: Final[dict[int, int]] = {
    RecordType.END_OF_FILE: 0,
    RecordType.EXTENDED_SEGMENT_ADDRESS: 2,
    RecordType.START_SEGMENT_ADDRESS: 4,
    RecordType.EXTENDED_LINEAR_ADDRESS: 2,
    RecordType.START_LINEAR_ADDRESS: 4,
}

RECORD_MARK: Final[str] = ":"

# Size of the 16-bit offset window a segment base applies to
SEGMENT_WINDOW: Final[int] = 0x10000


@dataclass(frozen=True)
class Record:
    """
    A decoded data record.

    The address is the record's load offset combined with whatever
    extended segment or linear base was in effect when it was read.

    Attributes:
        address: 32-bit load address of the first byte
        data: Payload bytes (0-255 of them)
    """
    address: int
    data: bytes

    @property
    def end_address(self) -> int:
        """Address one past the last byte."""
        return self.address + len(self.data)

    def __str__(self) -> str:
        return f"{self.address:08X}  {len(self.data):3d} bytes"


@dataclass(frozen=True)
class StartSegmentAddress:
    """CS:IP entry point from a type 3 record."""
    cs: int
    ip: int

    def __iter__(self):
        # Allows `cs, ip = parser.csip`
        yield self.cs
        yield self.ip

    def __str__(self) -> str:
        return f"{self.cs:04X}:{self.ip:04X}"


# =============================================================================
# Base Address Modes
# =============================================================================
# At most one of these is in effect at any time; None means no extended
# address record has been seen (or the base was never set).

@dataclass(frozen=True)
class SegmentBase:
    """Base set by a type 2 record: segment << 4, added to offsets."""
    base: int

    @classmethod
    def from_segment(cls, segment: int) -> "SegmentBase":
        return cls(segment << 4)

    def resolve(self, offset: int) -> int:
        return self.base + offset


@dataclass(frozen=True)
class LinearBase:
    """Base set by a type 4 record: upper << 16, OR-ed with offsets."""
    base: int

    @classmethod
    def from_upper(cls, upper: int) -> "LinearBase":
        return cls(upper << 16)

    def resolve(self, offset: int) -> int:
        return self.base | offset


BaseAddress = Optional[Union[SegmentBase, LinearBase]]
