"""
Header Table Iteration
=======================

Shared lazy iteration over fixed-stride header tables (Elf64_Phdr,
Elf64_Shdr).  Each entry is bounds-checked before it is unpacked.
"""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

from elfsight.core.models import DataEncoding
from elfsight.parsers.cursor import Buffer, ByteCursor

EntryT = TypeVar("EntryT")


class HeaderTable(Generic[EntryT]):
    """A finite, restartable sequence of decoded table entries.

    Subclasses set :attr:`name` and :attr:`fmt` and implement
    :meth:`_build`.  Iterating twice decodes the entries twice, always in
    index-ascending order.
    """

    name: str = "table"
    fmt: str = ""

    def __init__(
        self,
        buffer: Buffer,
        table_offset: int,
        count: int,
        entry_size: int,
        encoding: DataEncoding,
    ) -> None:
        self._cursor = ByteCursor(buffer, encoding)
        self._table_offset = table_offset
        self._count = count
        self._entry_size = entry_size

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[EntryT]:
        for index in range(self._count):
            yield self._decode(index)

    def __getitem__(self, index: int) -> EntryT:
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError(f"{self.name} index {index} out of range")
        return self._decode(index)

    def entry_offset(self, index: int) -> int:
        return self._table_offset + index * self._entry_size

    def _decode(self, index: int) -> EntryT:
        offset = self.entry_offset(index)
        field = f"{self.name}[{index}]"
        self._cursor.check(offset, self._entry_size, field)
        return self._build(index, self._cursor.unpack(self.fmt, offset, field))

    def _build(self, index: int, fields: tuple[int, ...]) -> EntryT:
        raise NotImplementedError

    def decode_all(self) -> list[EntryT]:
        """Materialise every entry; fails on the first out-of-bounds entry."""
        # No length hint: an extended count may be far larger than the file.
        return [entry for entry in self]
