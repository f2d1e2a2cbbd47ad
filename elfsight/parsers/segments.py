"""
Program Header Table Decoder
=============================

Iterates the ``e_phnum`` Elf64_Phdr entries located at ``e_phoff``.

The table is exposed as a lazy, finite and restartable sequence (see
:class:`~elfsight.parsers.table.HeaderTable`); every entry is
bounds-checked *before* it is read, so a header whose ``e_phoff`` or
``e_phnum`` points past the end of a truncated file fails with
``OutOfBoundsError`` instead of reading garbage.
"""

from __future__ import annotations

from elfsight.core.models import (
    DataEncoding,
    FileHeader,
    IntegrityWarning,
    ProgramHeaderEntry,
    SegmentFlag,
    SegmentType,
)
from elfsight.parsers.constants import PHDR_FORMAT
from elfsight.parsers.cursor import Buffer
from elfsight.parsers.table import HeaderTable


class ProgramHeaderTable(HeaderTable[ProgramHeaderEntry]):
    """Lazy view over the Elf64_Phdr table.

    Usage::

        table = ProgramHeaderTable.from_header(data, header, ident.data_encoding)
        for segment in table:
            print(segment.type.name, segment.flags_string)
    """

    name = "phdr"
    fmt = PHDR_FORMAT

    @classmethod
    def from_header(
        cls, buffer: Buffer, header: FileHeader, encoding: DataEncoding
    ) -> ProgramHeaderTable:
        return cls(buffer, header.phoff, header.phnum, header.phentsize, encoding)

    def _build(self, index: int, fields: tuple[int, ...]) -> ProgramHeaderEntry:
        (
            p_type, p_flags, p_offset, p_vaddr,
            p_paddr, p_filesz, p_memsz, p_align,
        ) = fields
        return ProgramHeaderEntry(
            index=index,
            type=SegmentType(p_type),
            flags=SegmentFlag(p_flags),
            offset=p_offset,
            vaddr=p_vaddr,
            paddr=p_paddr,
            filesz=p_filesz,
            memsz=p_memsz,
            align=p_align,
        )


def decode_all(
    buffer: Buffer, header: FileHeader, encoding: DataEncoding
) -> list[ProgramHeaderEntry]:
    """Decode every program header entry in on-disk order.

    Raises:
        OutOfBoundsError: An entry extends past the end of *buffer*.
    """
    return ProgramHeaderTable.from_header(buffer, header, encoding).decode_all()


def segment_warnings(
    segments: list[ProgramHeaderEntry], length: int
) -> list[IntegrityWarning]:
    """Check per-segment invariants that do not prevent decoding."""
    warnings: list[IntegrityWarning] = []
    for seg in segments:
        if seg.type == SegmentType.NULL:
            continue
        if seg.end_offset > length:
            warnings.append(IntegrityWarning(
                code="segment_bounds",
                message=(
                    f"segment {seg.index} ({seg.type.name}) file range ends at "
                    f"0x{seg.end_offset:x}, past end of file 0x{length:x}"
                ),
                offset=seg.offset,
                field=f"phdr[{seg.index}]",
            ))
        if seg.type == SegmentType.LOAD and seg.filesz > seg.memsz:
            warnings.append(IntegrityWarning(
                code="load_filesz",
                message=(
                    f"LOAD segment {seg.index} has p_filesz 0x{seg.filesz:x} "
                    f"larger than p_memsz 0x{seg.memsz:x}"
                ),
                offset=seg.offset,
                field=f"phdr[{seg.index}]",
            ))
    return warnings
