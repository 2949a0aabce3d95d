"""Tests for the cursor reader."""

import struct

import pytest

from imgmeta.byte_reader import ByteReader
from imgmeta.exceptions import TruncatedInputError


def test_reads_big_endian_by_default():
    """Integers follow the '>' prefix unless told otherwise."""
    reader = ByteReader(b'\x00\x01\x00\x00\x00\x02')
    assert reader.read_u16() == 1
    assert reader.read_u32() == 2
    assert reader.position == 6
    assert reader.remaining == 0


def test_endian_can_switch_mid_buffer():
    reader = ByteReader(b'\x01\x00\x01\x00')
    reader.endian = '<'
    assert reader.read_u16() == 1
    reader.endian = '>'
    assert reader.read_u16() == 0x0100


def test_signed_and_float_reads():
    data = struct.pack('<bhi', -1, -2, -3) + struct.pack('<fd', 1.5, -2.25)
    reader = ByteReader(data, '<')
    assert reader.read_i8() == -1
    assert reader.read_i16() == -2
    assert reader.read_i32() == -3
    assert reader.read_f32() == 1.5
    assert reader.read_f64() == -2.25


def test_read_past_end_raises_truncated():
    """A short read reports where it happened and what was missing."""
    reader = ByteReader(b'\x00\x01\x02')
    reader.skip(1)
    with pytest.raises(TruncatedInputError) as excinfo:
        reader.read_u32()
    assert excinfo.value.offset == 1
    assert excinfo.value.expected == 4
    assert excinfo.value.available == 2


def test_read_uint_width_zero_consumes_nothing():
    reader = ByteReader(b'\x00\x00\x00\x07')
    assert reader.read_uint(0) == 0
    assert reader.position == 0
    assert reader.read_uint(4) == 7
    assert reader.position == 4


def test_read_uint_rejects_odd_widths():
    with pytest.raises(ValueError):
        ByteReader(b'\x00' * 8).read_uint(3)


def test_seek_bounds():
    reader = ByteReader(b'abcd')
    reader.seek(4)
    assert reader.remaining == 0
    with pytest.raises(TruncatedInputError):
        reader.seek(5)
    with pytest.raises(TruncatedInputError):
        reader.seek(-1)


def test_sized_string_strips_trailing_nuls():
    reader = ByteReader(b'GIMP\x00\x00rest')
    assert reader.read_sized_string(6) == 'GIMP'
    assert reader.position == 6


def test_c_string_consumes_terminator():
    reader = ByteReader(b'name\x00type\x00')
    assert reader.read_c_string() == 'name'
    assert reader.position == 5
    assert reader.read_c_string() == 'type'
    assert reader.remaining == 0


def test_c_string_without_terminator_runs_to_limit():
    reader = ByteReader(b'abcdef')
    assert reader.read_c_string(limit=3) == 'abc'
    assert reader.position == 3
    assert reader.read_c_string() == 'def'


def test_invalid_utf8_is_replaced():
    reader = ByteReader(b'\xffok\x00')
    assert reader.read_c_string() == '�ok'


def test_slice_keeps_position():
    reader = ByteReader(b'0123456789')
    reader.skip(2)
    assert reader.slice(5, 3) == b'567'
    assert reader.position == 2
    with pytest.raises(TruncatedInputError):
        reader.slice(8, 5)
