"""
Intel HEX Record Checksums
==========================

Every record ends with a one-byte checksum chosen so that the sum of all
decoded bytes in the record, from the length field through the checksum
itself, is zero modulo 256.

    :0B0010006164647265737320676170A7
     ^^                            ^^
     length ...................... checksum

    0x0B + 0x00 + 0x10 + 0x00 + 0x61 + ... + 0x70 + 0xA7 = 0x500 -> 0x00

Usage
-----
    from ihex.checksum import calculate_checksum, verify_checksum

    body = bytes.fromhex("0B0010006164647265737320676170")
    calculate_checksum(body)          # 0xA7
    verify_checksum(body + b"\\xa7")   # True
"""

from typing import Final, Iterable

CHECKSUM_MASK: Final[int] = 0xFF


def running_sum(data: Iterable[int], initial: int = 0) -> int:
    """
    Add bytes into a mod-256 running sum.

    Args:
        data: Bytes to add
        initial: Sum carried over from earlier fields

    Returns:
        The updated sum (0-255)
    """
    return (initial + sum(data)) & CHECKSUM_MASK


def calculate_checksum(data: Iterable[int]) -> int:
    """
    Calculate the checksum byte for a record body.

    Args:
        data: Length, offset, type and payload bytes (no checksum)

    Returns:
        The two's complement of the low byte of their sum
    """
    return (-running_sum(data)) & CHECKSUM_MASK


def verify_checksum(record: Iterable[int]) -> bool:
    """Return True if a full record, checksum byte included, sums to zero."""
    return running_sum(record) == 0
