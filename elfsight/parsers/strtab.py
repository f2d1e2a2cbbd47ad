"""
String Table Extractor
=======================

Splits the contents of every SHT_STRTAB section into its NUL-terminated
strings, keyed by each string's starting offset within the section.

Reads never leave ``[sh_offset, sh_offset + sh_size)``.  A table whose
final byte is not NUL is rejected with
:class:`~elfsight.core.errors.MalformedStringTableError` rather than
returning a partial trailing entry.
"""

from __future__ import annotations

from typing import Optional

from elfsight.core.errors import MalformedStringTableError
from elfsight.core.models import SectionHeaderEntry, SectionType, StringTable
from elfsight.parsers.cursor import Buffer, ByteCursor


def split_strings(data: bytes) -> dict[int, str]:
    """Split NUL-terminated runs of *data* into ``{start: text}``.

    Raises:
        MalformedStringTableError: *data* is non-empty and does not end
            with a NUL byte.
    """
    if data and data[-1] != 0:
        raise MalformedStringTableError(
            "string data is not NUL-terminated", offset=len(data) - 1
        )
    strings: dict[int, str] = {}
    start = 0
    while start < len(data):
        end = data.index(b"\x00", start)
        strings[start] = data[start:end].decode("ascii", errors="replace")
        start = end + 1
    return strings


def extract_one(buffer: Buffer, section: SectionHeaderEntry) -> StringTable:
    """Decode a single STRTAB section.

    Raises:
        OutOfBoundsError: The section's file range exceeds the buffer.
        MalformedStringTableError: The contents are not NUL-terminated.
    """
    field = f"shdr[{section.index}]"
    data = ByteCursor(buffer).slice(section.offset, section.size, field)
    if data and data[-1] != 0:
        raise MalformedStringTableError(
            f"string table in section {section.index} is not NUL-terminated",
            offset=section.offset + section.size - 1,
            field=field,
        )
    return StringTable(
        section_index=section.index,
        offset=section.offset,
        size=section.size,
        strings=split_strings(data),
    )


def extract(
    buffer: Buffer, sections: list[SectionHeaderEntry]
) -> list[StringTable]:
    """Decode every STRTAB section, in section order.

    The first malformed or out-of-bounds table aborts the extraction; use
    :func:`extract_one` to handle tables individually.
    """
    return [
        extract_one(buffer, section)
        for section in sections
        if section.type == SectionType.STRTAB
    ]


def resolve_names(
    sections: list[SectionHeaderEntry], table: Optional[StringTable]
) -> dict[int, str]:
    """Join each section's ``sh_name`` against the section-name table.

    Sections whose offset cannot be resolved are omitted.
    """
    if table is None:
        return {}
    names: dict[int, str] = {}
    for section in sections:
        name = table.lookup(section.name)
        if name is not None:
            names[section.index] = name
    return names
