"""
ELF64 File Header Decoder
==========================

Decodes the 64-byte Elf64_Ehdr.  Each field is read individually at its
fixed offset (see :data:`~elfsight.parsers.constants.EHDR_FIELDS`) in the
byte order recorded in the identification.

Besides the structured :class:`~elfsight.core.models.FileHeader`, the module
can list every header field as an ``Offset / Name / Value / Meaning / Size /
Type`` row for display.
"""

from __future__ import annotations

from elfsight.core.errors import TruncatedHeaderError, UnsupportedLayoutError
from elfsight.core.models import (
    DataEncoding,
    ElfClass,
    FieldLayout,
    FileHeader,
    Identification,
    IntegrityWarning,
    Machine,
    ObjectType,
)
from elfsight.parsers.constants import (
    EHDR_FIELDS,
    EI_ABIVERSION,
    EI_CLASS,
    EI_DATA,
    EI_NIDENT,
    EI_OSABI,
    EI_PAD,
    EI_VERSION,
    ELF64_EHDR_SIZE,
    ELF64_PHDR_SIZE,
    ELF64_SHDR_SIZE,
    EV_CURRENT,
    SHN_LORESERVE,
    SHN_UNDEF,
    SHN_XINDEX,
)
from elfsight.parsers.cursor import Buffer, ByteCursor


def decode(buffer: Buffer, ident: Identification) -> FileHeader:
    """Decode the ELF64 file header.

    Args:
        buffer: The complete file image.
        ident: Result of a prior successful identification.

    Raises:
        UnsupportedLayoutError: Class is not ELFCLASS64, the encoding is
            neither LSB nor MSB, or a non-empty table declares an entry size
            other than 56 (program headers) / 64 (section headers).
        TruncatedHeaderError: Fewer than 64 bytes are available.
    """
    if ident.elf_class != ElfClass.ELF64:
        raise UnsupportedLayoutError(
            f"only the 64-bit layout is decoded, class is {ident.elf_class.label}",
            offset=EI_CLASS,
            field="EI_CLASS",
        )
    if ident.data_encoding not in (DataEncoding.LSB, DataEncoding.MSB):
        raise UnsupportedLayoutError(
            f"unsupported data encoding {ident.data_encoding.label}",
            offset=EI_DATA,
            field="EI_DATA",
        )
    if len(buffer) < ELF64_EHDR_SIZE:
        raise TruncatedHeaderError(
            f"buffer holds {len(buffer)} byte(s), ELF64 header needs "
            f"{ELF64_EHDR_SIZE}",
            offset=len(buffer),
            field="Elf64_Ehdr",
        )

    cursor = ByteCursor(buffer, ident.data_encoding)
    raw = {
        name: cursor.read_uint(offset, width)
        for name, offset, width, _ctype in EHDR_FIELDS
    }
    header = FileHeader(
        object_type=ObjectType(raw["e_type"]),
        machine=Machine(raw["e_machine"]),
        version=raw["e_version"],
        entry=raw["e_entry"],
        phoff=raw["e_phoff"],
        shoff=raw["e_shoff"],
        flags=raw["e_flags"],
        ehsize=raw["e_ehsize"],
        phentsize=raw["e_phentsize"],
        phnum=raw["e_phnum"],
        shentsize=raw["e_shentsize"],
        shnum=raw["e_shnum"],
        shstrndx=raw["e_shstrndx"],
    )
    _check_entry_sizes(header)
    return header


def _check_entry_sizes(header: FileHeader) -> None:
    # Objects without a table (e.g. relocatables) may leave the size at 0.
    if header.phnum and header.phentsize != ELF64_PHDR_SIZE:
        raise UnsupportedLayoutError(
            f"e_phentsize is {header.phentsize}, Elf64_Phdr is {ELF64_PHDR_SIZE}",
            offset=0x36,
            field="e_phentsize",
        )
    if (header.shnum or header.shoff) and header.shentsize != ELF64_SHDR_SIZE:
        raise UnsupportedLayoutError(
            f"e_shentsize is {header.shentsize}, Elf64_Shdr is {ELF64_SHDR_SIZE}",
            offset=0x3A,
            field="e_shentsize",
        )


def header_warnings(header: FileHeader) -> list[IntegrityWarning]:
    """Report suspicious-but-decodable header values."""
    warnings: list[IntegrityWarning] = []
    if header.ehsize != ELF64_EHDR_SIZE:
        warnings.append(IntegrityWarning(
            code="ehsize",
            message=f"e_ehsize is {header.ehsize}, expected {ELF64_EHDR_SIZE}",
            offset=0x34,
            field="e_ehsize",
        ))
    if header.version != EV_CURRENT:
        warnings.append(IntegrityWarning(
            code="header_version",
            message=f"e_version is {header.version}, expected {EV_CURRENT}",
            offset=0x14,
            field="e_version",
        ))
    if (
        header.shnum
        and header.shstrndx not in (SHN_UNDEF, SHN_XINDEX)
        and header.shstrndx >= header.shnum
    ):
        warnings.append(IntegrityWarning(
            code="shstrndx_range",
            message=(
                f"e_shstrndx {header.shstrndx} is outside the "
                f"{header.shnum}-entry section table"
            ),
            offset=0x3E,
            field="e_shstrndx",
        ))
    if header.shnum >= SHN_LORESERVE:
        warnings.append(IntegrityWarning(
            code="shnum_reserved",
            message=f"e_shnum {header.shnum} falls in the reserved index range",
            offset=0x3C,
            field="e_shnum",
        ))
    return warnings


# ---------------------------------------------------------------------------
# Field layout listing
# ---------------------------------------------------------------------------

def _shstrndx_meaning(value: int) -> str:
    if value == SHN_UNDEF:
        return "No section name table"
    if value == SHN_XINDEX:
        return "Index in section 0 sh_link"
    return f"Section {value}"


def describe_fields(ident: Identification, header: FileHeader) -> list[FieldLayout]:
    """List every identification byte and header field as a layout row."""
    rows: list[FieldLayout] = [
        FieldLayout(
            offset=i, name=f"EI_MAG{i}", value=byte,
            meaning=f"Magic number {i}" + (f" '{chr(byte)}'" if i else ""),
            size=1, ctype="unsigned char",
        )
        for i, byte in enumerate(ident.magic)
    ]
    rows += [
        FieldLayout(offset=EI_CLASS, name="EI_CLASS",
                    value=ident.elf_class.value, meaning=ident.elf_class.label,
                    size=1, ctype="unsigned char"),
        FieldLayout(offset=EI_DATA, name="EI_DATA",
                    value=ident.data_encoding.value,
                    meaning=ident.data_encoding.label,
                    size=1, ctype="unsigned char"),
        FieldLayout(offset=EI_VERSION, name="EI_VERSION",
                    value=ident.version.value, meaning=ident.version.label,
                    size=1, ctype="unsigned char"),
        FieldLayout(offset=EI_OSABI, name="EI_OSABI",
                    value=ident.os_abi.value, meaning=ident.os_abi.label,
                    size=1, ctype="unsigned char"),
        FieldLayout(offset=EI_ABIVERSION, name="EI_ABIVERSION",
                    value=ident.abi_version, meaning="ABI version",
                    size=1, ctype="unsigned char"),
        FieldLayout(offset=EI_PAD, name="EI_PAD",
                    value=ident.padding_sum,
                    meaning="Padding (sum)" if ident.padding_sum else "Padding",
                    size=EI_NIDENT - EI_PAD, ctype="unsigned char[7]"),
    ]

    meanings: dict[str, str] = {
        "e_type": header.object_type.label,
        "e_machine": header.machine.label,
        "e_version": "Current version" if header.version == EV_CURRENT else "Invalid version",
        "e_entry": "Entry point address",
        "e_phoff": "Program header offset",
        "e_shoff": "Section header offset",
        "e_flags": "Processor flags",
        "e_ehsize": "ELF header size",
        "e_phentsize": "Program header size",
        "e_phnum": "Program header count",
        "e_shentsize": "Section header size",
        "e_shnum": "Section header count",
        "e_shstrndx": _shstrndx_meaning(header.shstrndx),
    }
    values: dict[str, int] = {
        "e_type": header.object_type.value,
        "e_machine": header.machine.value,
        "e_version": header.version,
        "e_entry": header.entry,
        "e_phoff": header.phoff,
        "e_shoff": header.shoff,
        "e_flags": header.flags,
        "e_ehsize": header.ehsize,
        "e_phentsize": header.phentsize,
        "e_phnum": header.phnum,
        "e_shentsize": header.shentsize,
        "e_shnum": header.shnum,
        "e_shstrndx": header.shstrndx,
    }
    for name, offset, width, ctype in EHDR_FIELDS:
        rows.append(FieldLayout(
            offset=offset, name=name, value=values[name],
            meaning=meanings[name], size=width, ctype=ctype,
        ))
    return rows
