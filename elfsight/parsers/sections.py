"""
Section Header Table Decoder
=============================

Iterates the Elf64_Shdr entries located at ``e_shoff``.  Section names
are left as raw ``sh_name`` offsets here; joining them against the
section-name string table is the caller's business
(:func:`elfsight.parsers.strtab.resolve_names`).

Extended section numbering (gABI 4+) is honoured: when ``e_shnum`` is 0
but ``e_shoff`` is not, the real count lives in ``sh_size`` of entry 0,
and an ``e_shstrndx`` of ``SHN_XINDEX`` defers to entry 0's ``sh_link``.
An extended count whose table would not fit in the file is rejected up
front.
"""

from __future__ import annotations

from typing import Optional

from elfsight.core.errors import OutOfBoundsError
from elfsight.core.models import (
    DataEncoding,
    FileHeader,
    IntegrityWarning,
    SectionFlag,
    SectionHeaderEntry,
    SectionType,
)
from elfsight.parsers.constants import SHDR_FORMAT, SHN_UNDEF, SHN_XINDEX
from elfsight.parsers.cursor import Buffer
from elfsight.parsers.table import HeaderTable


class SectionHeaderTable(HeaderTable[SectionHeaderEntry]):
    """Lazy view over the Elf64_Shdr table."""

    name = "shdr"
    fmt = SHDR_FORMAT

    @classmethod
    def from_header(
        cls, buffer: Buffer, header: FileHeader, encoding: DataEncoding
    ) -> SectionHeaderTable:
        table = cls(buffer, header.shoff, header.shnum, header.shentsize, encoding)
        if header.shnum == 0 and header.shoff != 0:
            # Extended numbering: entry 0 carries the real count.
            count = table._decode(0).size
            span = count * header.shentsize
            if header.shoff + span > len(buffer):
                raise OutOfBoundsError(
                    header.shoff, span, len(buffer), field="shdr[0].sh_size"
                )
            table._count = count
        return table

    def _build(self, index: int, fields: tuple[int, ...]) -> SectionHeaderEntry:
        (
            sh_name, sh_type, sh_flags, sh_addr, sh_offset,
            sh_size, sh_link, sh_info, sh_addralign, sh_entsize,
        ) = fields
        return SectionHeaderEntry(
            index=index,
            name=sh_name,
            type=SectionType(sh_type),
            flags=SectionFlag(sh_flags),
            addr=sh_addr,
            offset=sh_offset,
            size=sh_size,
            link=sh_link,
            info=sh_info,
            addralign=sh_addralign,
            entsize=sh_entsize,
        )


def decode_all(
    buffer: Buffer, header: FileHeader, encoding: DataEncoding
) -> list[SectionHeaderEntry]:
    """Decode every section header entry in on-disk order.

    Raises:
        OutOfBoundsError: An entry extends past the end of *buffer*.
    """
    return SectionHeaderTable.from_header(buffer, header, encoding).decode_all()


def string_table_index(
    header: FileHeader, sections: list[SectionHeaderEntry]
) -> Optional[int]:
    """Index of the section-name string table, or ``None`` if there is none."""
    index = header.shstrndx
    if index == SHN_UNDEF:
        return None
    if index == SHN_XINDEX:
        if not sections:
            return None
        index = sections[0].link
    if not 0 < index < len(sections):
        return None
    return index


def section_warnings(
    sections: list[SectionHeaderEntry], length: int
) -> list[IntegrityWarning]:
    """Check that every section holding file bytes lies inside the file."""
    warnings: list[IntegrityWarning] = []
    for sec in sections:
        if not sec.occupies_file or sec.type == SectionType.NULL:
            continue
        if sec.end_offset > length:
            warnings.append(IntegrityWarning(
                code="section_bounds",
                message=(
                    f"section {sec.index} ({sec.type.name}) ends at "
                    f"0x{sec.end_offset:x}, past end of file 0x{length:x}"
                ),
                offset=sec.offset,
                field=f"shdr[{sec.index}]",
            ))
    return warnings
