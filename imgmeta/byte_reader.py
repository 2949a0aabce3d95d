# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Position-tracked reader over an in-memory buffer

All container decoders read through ByteReader so that every short read
is reported as a TruncatedInputError with the offset and the number of
bytes that were expected.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Optional

from imgmeta.exceptions import TruncatedInputError

BIG_ENDIAN = '>'
LITTLE_ENDIAN = '<'


class ByteReader:
    """
    Sequential reader with absolute seeks.

    Multi-byte integers are read with the reader's endian prefix
    ('>' or '<' in struct notation), which can be changed at any time.
    """

    def __init__(self, data: bytes, endian: str = BIG_ENDIAN):
        """
        Initialize the reader at position 0.

        Args:
            data: Buffer to read from
            endian: '>' for big-endian or '<' for little-endian
        """
        if endian not in (BIG_ENDIAN, LITTLE_ENDIAN):
            raise ValueError(f"Invalid endian prefix: {endian!r}")
        self.data = bytes(data)
        self.endian = endian
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self._pos

    def seek(self, position: int) -> None:
        """
        Move to an absolute position.

        Seeking to the end of the buffer is allowed; seeking beyond it
        raises TruncatedInputError.
        """
        if position < 0 or position > len(self.data):
            raise TruncatedInputError(position, 0, max(len(self.data) - max(position, 0), 0))
        self._pos = position

    def skip(self, count: int) -> None:
        """Advance by count bytes without decoding them."""
        self._require(count)
        self._pos += count

    def _require(self, count: int) -> None:
        if count < 0 or self._pos + count > len(self.data):
            raise TruncatedInputError(self._pos, count, len(self.data) - self._pos)

    def _unpack(self, fmt: str, size: int):
        self._require(size)
        value = struct.unpack_from(self.endian + fmt, self.data, self._pos)[0]
        self._pos += size
        return value

    def read_u8(self) -> int:
        return self._unpack('B', 1)

    def read_u16(self) -> int:
        return self._unpack('H', 2)

    def read_u32(self) -> int:
        return self._unpack('I', 4)

    def read_u64(self) -> int:
        return self._unpack('Q', 8)

    def read_i8(self) -> int:
        return self._unpack('b', 1)

    def read_i16(self) -> int:
        return self._unpack('h', 2)

    def read_i32(self) -> int:
        return self._unpack('i', 4)

    def read_f32(self) -> float:
        return self._unpack('f', 4)

    def read_f64(self) -> float:
        return self._unpack('d', 8)

    def read_uint(self, width: int) -> int:
        """
        Read an unsigned integer of 0, 1, 2, 4 or 8 bytes.

        A width of 0 yields 0 without consuming any bytes.
        """
        if width == 0:
            return 0
        if width == 1:
            return self.read_u8()
        if width == 2:
            return self.read_u16()
        if width == 4:
            return self.read_u32()
        if width == 8:
            return self.read_u64()
        raise ValueError(f"Unsupported integer width: {width}")

    def read_bytes(self, count: int) -> bytes:
        """Read exactly count raw bytes."""
        self._require(count)
        chunk = self.data[self._pos:self._pos + count]
        self._pos += count
        return chunk

    def read_sized_string(self, size: int) -> str:
        """Read a fixed-size string field, dropping trailing NUL padding."""
        raw = self.read_bytes(size)
        return raw.rstrip(b'\x00').decode('utf-8', errors='replace')

    def read_c_string(self, limit: Optional[int] = None) -> str:
        """
        Read a NUL-terminated string.

        The terminator is consumed but not returned. If no NUL is found the
        string runs to limit, or to the end of the buffer when limit is None.
        """
        if limit is None or limit > len(self.data):
            limit = len(self.data)
        end = self.data.find(b'\x00', self._pos, limit)
        if end == -1:
            raw = self.data[self._pos:limit]
            self._pos = max(limit, self._pos)
        else:
            raw = self.data[self._pos:end]
            self._pos = end + 1
        return raw.decode('utf-8', errors='replace')

    def slice(self, offset: int, length: int) -> bytes:
        """
        Return length bytes starting at an absolute offset.

        The current position is left untouched.
        """
        if offset < 0 or length < 0 or offset + length > len(self.data):
            raise TruncatedInputError(offset, length, max(len(self.data) - max(offset, 0), 0))
        return self.data[offset:offset + length]
