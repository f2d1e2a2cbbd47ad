"""
Byte Cursor
============

Bounds-checked fixed-width integer reads over an immutable buffer.

Every read validates ``offset + width <= len(buffer)`` before touching the
data and raises :class:`~elfsight.core.errors.OutOfBoundsError` otherwise,
so a truncated or adversarial image can never cause a read past the end.
"""

from __future__ import annotations

import struct
from typing import Union

from elfsight.core.errors import OutOfBoundsError
from elfsight.core.models import DataEncoding

Buffer = Union[bytes, bytearray, memoryview]


class ByteCursor:
    """Reads integers at absolute offsets in a given byte order.

    Usage::

        cursor = ByteCursor(data, DataEncoding.LSB)
        e_type = cursor.read_u16(0x10)
        fields = cursor.unpack("IIQQQQQQ", phoff)
    """

    __slots__ = ("_buffer", "_prefix")

    def __init__(
        self,
        buffer: Buffer,
        encoding: DataEncoding = DataEncoding.LSB,
    ) -> None:
        self._buffer = buffer
        self._prefix = encoding.struct_prefix

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def byte_order(self) -> str:
        return "big" if self._prefix == ">" else "little"

    def check(self, offset: int, width: int, field: str | None = None) -> None:
        """Raise :class:`OutOfBoundsError` unless ``[offset, offset+width)`` fits."""
        if offset < 0 or width < 0 or offset + width > len(self._buffer):
            raise OutOfBoundsError(offset, width, len(self._buffer), field=field)

    def _read(self, code: str, width: int, offset: int) -> int:
        self.check(offset, width)
        return struct.unpack_from(self._prefix + code, self._buffer, offset)[0]

    def read_u8(self, offset: int) -> int:
        return self._read("B", 1, offset)

    def read_u16(self, offset: int) -> int:
        return self._read("H", 2, offset)

    def read_u32(self, offset: int) -> int:
        return self._read("I", 4, offset)

    def read_u64(self, offset: int) -> int:
        return self._read("Q", 8, offset)

    def read_uint(self, offset: int, width: int) -> int:
        """Read an unsigned integer of *width* bytes (1, 2, 4 or 8)."""
        readers = {1: self.read_u8, 2: self.read_u16, 4: self.read_u32, 8: self.read_u64}
        return readers[width](offset)

    def unpack(
        self, fmt: str, offset: int, field: str | None = None
    ) -> tuple[int, ...]:
        """Unpack a whole record with a :mod:`struct` format (no prefix)."""
        full = self._prefix + fmt
        self.check(offset, struct.calcsize(full), field)
        return struct.unpack_from(full, self._buffer, offset)

    def slice(self, offset: int, size: int, field: str | None = None) -> bytes:
        """Copy ``size`` bytes starting at *offset*."""
        self.check(offset, size, field)
        return bytes(self._buffer[offset:offset + size])


# ---------------------------------------------------------------------------
# Module-level convenience wrappers
# ---------------------------------------------------------------------------

def read_u8(buffer: Buffer, offset: int) -> int:
    return ByteCursor(buffer).read_u8(offset)


def read_u16(
    buffer: Buffer, offset: int, encoding: DataEncoding = DataEncoding.LSB
) -> int:
    return ByteCursor(buffer, encoding).read_u16(offset)


def read_u32(
    buffer: Buffer, offset: int, encoding: DataEncoding = DataEncoding.LSB
) -> int:
    return ByteCursor(buffer, encoding).read_u32(offset)


def read_u64(
    buffer: Buffer, offset: int, encoding: DataEncoding = DataEncoding.LSB
) -> int:
    return ByteCursor(buffer, encoding).read_u64(offset)
