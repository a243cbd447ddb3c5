"""
Record Definition Unit Tests
============================

Tests for record types, the expected-length table and base address modes.
"""

import pytest

from ihex.records import (
    EXPECTED_LENGTHS,
    LinearBase,
    Record,
    RecordType,
    SegmentBase,
    StartSegmentAddress,
)


class TestRecordType:
    """Tests for the RecordType enum and length table."""

    def test_values(self):
        assert [int(t) for t in RecordType] == [0, 1, 2, 3, 4, 5]

    def test_description(self):
        assert RecordType.EXTENDED_LINEAR_ADDRESS.get_description() == "Extended Linear Address"

    @pytest.mark.parametrize("record_type,length", [
        (RecordType.END_OF_FILE, 0),
        (RecordType.EXTENDED_SEGMENT_ADDRESS, 2),
        (RecordType.START_SEGMENT_ADDRESS, 4),
        (RecordType.EXTENDED_LINEAR_ADDRESS, 2),
        (RecordType.START_LINEAR_ADDRESS, 4),
    ])
    def test_expected_lengths(self, record_type, length):
        assert EXPECTED_LENGTHS[record_type] == length

    def test_data_and_unknown_types_unchecked(self):
        assert RecordType.DATA not in EXPECTED_LENGTHS
        assert 0x06 not in EXPECTED_LENGTHS


class TestBaseAddress:
    """Tests for segment and linear base address resolution."""

    def test_segment_base(self):
        base = SegmentBase.from_segment(0x1200)
        assert base.base == 0x12000
        assert base.resolve(0x0010) == 0x12010

    def test_segment_base_adds(self):
        """Segment bases are not aligned to 64K, so offsets are added."""
        base = SegmentBase.from_segment(0x1234)
        assert base.resolve(0xFFFF) == 0x12340 + 0xFFFF

    def test_linear_base(self):
        base = LinearBase.from_upper(0xFFFF)
        assert base.base == 0xFFFF0000
        assert base.resolve(0x0010) == 0xFFFF0010


class TestRecord:
    """Tests for Record and StartSegmentAddress values."""

    def test_record_is_immutable(self):
        record = Record(0x100, b"\x01\x02")
        with pytest.raises(AttributeError):
            record.address = 0

    def test_end_address(self):
        assert Record(0x100, b"\x01\x02").end_address == 0x102

    def test_str(self):
        assert str(Record(0x10, bytes(16))) == "00000010   16 bytes"

    def test_csip_str(self):
        assert str(StartSegmentAddress(0x0000, 0x0100)) == "0000:0100"
