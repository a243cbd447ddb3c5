#!/usr/bin/env python3
"""
Intel HEX to Memory Image Demo
==============================

This script demonstrates how to use the ihex RecordParser to:
1. Pull data records one at a time
2. Place them into a flat memory image
3. Report the entry point, if the file has one

Usage:
    python examples/hex_to_image.py firmware.hex firmware.bin
"""

import sys
from pathlib import Path

from ihex import RecordParser


def main():
    if len(sys.argv) != 3:
        print(__doc__)
        return 2

    hex_path, bin_path = Path(sys.argv[1]), Path(sys.argv[2])

    # ==========================================================================
    # 1. Pull records and place them into a sparse map
    # ==========================================================================
    # Records carry absolute addresses, so extended segment/linear
    # records never need handling here.

    chunks = {}
    with RecordParser.from_file(hex_path) as parser:
        while parser.pull():
            record = parser.record
            chunks[record.address] = record.data

    if parser.error is not None:
        print(f"{hex_path}: {parser.error}")
        return 1

    if not chunks:
        print(f"{hex_path}: no data records")
        return 0

    # ==========================================================================
    # 2. Flatten into an image, gaps filled with 0xFF (erased flash)
    # ==========================================================================

    start = min(chunks)
    end = max(address + len(data) for address, data in chunks.items())
    image = bytearray(b"\xff" * (end - start))
    for address, data in chunks.items():
        image[address - start:address - start + len(data)] = data

    bin_path.write_bytes(image)
    print(f"Wrote {len(image)} bytes (0x{start:08X}-0x{end - 1:08X}) to {bin_path}")

    # ==========================================================================
    # 3. Entry point
    # ==========================================================================

    if parser.eip is not None:
        print(f"Entry point (EIP): 0x{parser.eip:08X}")
    elif parser.csip is not None:
        print(f"Entry point (CS:IP): {parser.csip}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
