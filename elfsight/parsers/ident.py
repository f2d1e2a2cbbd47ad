"""
ELF Identification Validator
=============================

Checks the 16-byte ``e_ident`` array that opens every ELF file and
classifies its class, data encoding, version and OS/ABI bytes.  All reads
here are single bytes, so no byte order is assumed yet.

Validation gates every later decoder: if it fails, nothing else runs.
"""

from __future__ import annotations

from elfsight.core.errors import NotAnElfFileError
from elfsight.core.models import (
    DataEncoding,
    ElfClass,
    ElfVersion,
    Identification,
    IntegrityWarning,
    OsAbi,
)
from elfsight.parsers.constants import (
    EI_ABIVERSION,
    EI_CLASS,
    EI_DATA,
    EI_NIDENT,
    EI_OSABI,
    EI_PAD,
    EI_VERSION,
    ELF_MAGIC,
)
from elfsight.parsers.cursor import Buffer, ByteCursor


def validate(buffer: Buffer) -> tuple[Identification, list[IntegrityWarning]]:
    """Validate and decode ``e_ident``.

    Args:
        buffer: The complete file image.

    Returns:
        The decoded :class:`Identification` and any integrity warnings
        (non-zero padding, non-zero ABI version).

    Raises:
        NotAnElfFileError: Fewer than 16 bytes, or the magic is not
            ``7F 45 4C 46``.
    """
    if len(buffer) < EI_NIDENT:
        raise NotAnElfFileError(
            f"buffer holds {len(buffer)} byte(s), identification needs {EI_NIDENT}",
            offset=0,
            field="e_ident",
        )
    magic = bytes(buffer[:4])
    if magic != ELF_MAGIC:
        raise NotAnElfFileError(
            f"bad magic {magic.hex(' ')}, expected {ELF_MAGIC.hex(' ')}",
            offset=0,
            field="EI_MAG",
        )

    cursor = ByteCursor(buffer)
    ident = Identification(
        magic=magic,
        elf_class=ElfClass(cursor.read_u8(EI_CLASS)),
        data_encoding=DataEncoding(cursor.read_u8(EI_DATA)),
        version=ElfVersion(cursor.read_u8(EI_VERSION)),
        os_abi=OsAbi(cursor.read_u8(EI_OSABI)),
        abi_version=cursor.read_u8(EI_ABIVERSION),
        padding=cursor.slice(EI_PAD, EI_NIDENT - EI_PAD),
    )
    return ident, identification_warnings(ident)


def identification_warnings(ident: Identification) -> list[IntegrityWarning]:
    warnings: list[IntegrityWarning] = []
    if ident.padding_sum != 0:
        warnings.append(IntegrityWarning(
            code="nonzero_padding",
            message=f"e_ident padding bytes sum to {ident.padding_sum}, expected 0",
            offset=EI_PAD,
            field="EI_PAD",
        ))
    if ident.abi_version != 0:
        warnings.append(IntegrityWarning(
            code="nonzero_abi_version",
            message=f"EI_ABIVERSION is {ident.abi_version}, expected 0",
            offset=EI_ABIVERSION,
            field="EI_ABIVERSION",
        ))
    if ident.version != ElfVersion.CURRENT:
        warnings.append(IntegrityWarning(
            code="ident_version",
            message=f"EI_VERSION is {ident.version.value}, expected 1",
            offset=EI_VERSION,
            field="EI_VERSION",
        ))
    return warnings
