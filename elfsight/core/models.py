"""
ElfSight Data Models
=====================

Pydantic-based records for decoded ELF64 structures.  Every record is
frozen: it is built once from the raw image and never mutated afterwards.

Numeric fields with enumerated meanings in the ELF format are classified into
``IntEnum`` / ``IntFlag`` types.  Values that fall outside the fixed lookup
tables are *not* coerced to a default; they become pseudo-members that keep
the raw number (``SectionType(0x1234).value == 0x1234``) and report
``is_known == False``.

References:
    - System V Application Binary Interface, Edition 4.1 (1997).
    - System V ABI DRAFT, 24 April 2001 (gABI 4+).
    - Linux man page: elf(5).
"""

from __future__ import annotations

import bisect
import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# ---------------------------------------------------------------------------
# Reserved type ranges
# ---------------------------------------------------------------------------

LOOS: int = 0x60000000
HIOS: int = 0x6FFFFFFF
LOPROC: int = 0x70000000
HIPROC: int = 0x7FFFFFFF
LOUSER: int = 0x80000000
HIUSER: int = 0xFFFFFFFF


# ---------------------------------------------------------------------------
# Classification base
# ---------------------------------------------------------------------------

class _Classified(enum.IntEnum):
    """IntEnum whose out-of-table values become raw-preserving pseudo-members."""

    @classmethod
    def _missing_(cls, value: object) -> Optional[_Classified]:
        if not isinstance(value, int) or isinstance(value, bool):
            return None
        pseudo = int.__new__(cls, value)
        pseudo._name_ = cls._range_name(value)
        pseudo._value_ = value
        return pseudo

    @classmethod
    def _range_name(cls, value: int) -> str:
        return "UNKNOWN"

    @property
    def is_known(self) -> bool:
        """``True`` when the value comes from the fixed lookup table."""
        return self._name_ in type(self).__members__

    @property
    def label(self) -> str:
        """Human-readable meaning, e.g. ``"EXEC (Executable file)"``."""
        labels: dict[int, str] = _LABELS.get(type(self), {})
        if self.is_known:
            return labels.get(self._value_, self._name_)
        return f"{self._name_} (0x{self._value_:x})"


class _RangedType(_Classified):
    """Type enums with OS- and processor-specific reserved ranges."""

    @classmethod
    def _range_name(cls, value: int) -> str:
        if LOPROC <= value <= HIPROC:
            return "PROCESSOR_SPECIFIC"
        if LOOS <= value <= HIOS:
            return "OS_SPECIFIC"
        return "UNKNOWN"

    @property
    def is_processor_specific(self) -> bool:
        return LOPROC <= self._value_ <= HIPROC

    @property
    def is_os_specific(self) -> bool:
        return LOOS <= self._value_ <= HIOS


# ---------------------------------------------------------------------------
# Identification enumerations
# ---------------------------------------------------------------------------

class ElfClass(_Classified):
    """``e_ident[EI_CLASS]``."""
    NONE = 0
    ELF32 = 1
    ELF64 = 2


class DataEncoding(_Classified):
    """``e_ident[EI_DATA]``."""
    NONE = 0
    LSB = 1
    MSB = 2

    @property
    def struct_prefix(self) -> str:
        """:mod:`struct` byte-order prefix; anything but MSB reads little-endian."""
        return ">" if self is DataEncoding.MSB else "<"


class ElfVersion(_Classified):
    """``e_ident[EI_VERSION]``."""
    NONE = 0
    CURRENT = 1


class OsAbi(_Classified):
    """``e_ident[EI_OSABI]``."""
    SYSV = 0
    HPUX = 1
    NETBSD = 2
    GNU = 3
    SOLARIS = 6
    AIX = 7
    IRIX = 8
    FREEBSD = 9
    TRU64 = 10
    MODESTO = 11
    OPENBSD = 12
    ARM_AEABI = 64
    ARM = 97
    STANDALONE = 255


# ---------------------------------------------------------------------------
# File header enumerations
# ---------------------------------------------------------------------------

class ObjectType(_Classified):
    """``e_type``."""
    NONE = 0
    REL = 1
    EXEC = 2
    DYN = 3
    CORE = 4


class Machine(_Classified):
    """``e_machine``."""
    NONE = 0
    M32 = 1
    SPARC = 2
    I386 = 3
    M68K = 4
    M88K = 5
    I860 = 7
    MIPS = 8
    PARISC = 15
    SPARC32PLUS = 18
    PPC = 20
    PPC64 = 21
    S390 = 22
    ARM = 40
    SH = 42
    SPARCV9 = 43
    IA_64 = 50
    X86_64 = 62
    AMD64 = 62
    AVR = 83
    MSP430 = 105
    AARCH64 = 183
    RISCV = 243
    BPF = 247
    LOONGARCH = 258


# ---------------------------------------------------------------------------
# Program header enumerations
# ---------------------------------------------------------------------------

class SegmentType(_RangedType):
    """``p_type``."""
    NULL = 0
    LOAD = 1
    DYNAMIC = 2
    INTERP = 3
    NOTE = 4
    SHLIB = 5
    PHDR = 6
    TLS = 7
    GNU_EH_FRAME = 0x6474E550
    GNU_STACK = 0x6474E551
    GNU_RELRO = 0x6474E552
    GNU_PROPERTY = 0x6474E553


class SegmentFlag(enum.IntFlag):
    """``p_flags`` permission bits."""
    EXECUTE = 0x1
    WRITE = 0x2
    READ = 0x4


# ---------------------------------------------------------------------------
# Section header enumerations
# ---------------------------------------------------------------------------

class SectionType(_RangedType):
    """``sh_type``."""
    NULL = 0
    PROGBITS = 1
    SYMTAB = 2
    STRTAB = 3
    RELA = 4
    HASH = 5
    DYNAMIC = 6
    NOTE = 7
    NOBITS = 8
    REL = 9
    SHLIB = 10
    DYNSYM = 11
    INIT_ARRAY = 14
    FINI_ARRAY = 15
    PREINIT_ARRAY = 16
    GROUP = 17
    SYMTAB_SHNDX = 18
    GNU_HASH = 0x6FFFFFF6
    GNU_VERDEF = 0x6FFFFFFD
    GNU_VERNEED = 0x6FFFFFFE
    GNU_VERSYM = 0x6FFFFFFF

    @classmethod
    def _range_name(cls, value: int) -> str:
        if LOUSER <= value <= HIUSER:
            return "USER_SPECIFIC"
        return super()._range_name(value)


class SectionFlag(enum.IntFlag):
    """``sh_flags`` attribute bits."""
    WRITE = 0x1
    ALLOC = 0x2
    EXECINSTR = 0x4
    MERGE = 0x10
    STRINGS = 0x20
    INFO_LINK = 0x40
    LINK_ORDER = 0x80
    OS_NONCONFORMING = 0x100
    GROUP = 0x200
    TLS = 0x400
    COMPRESSED = 0x800


# ---------------------------------------------------------------------------
# Meaning tables
# ---------------------------------------------------------------------------

_LABELS: dict[type, dict[int, str]] = {
    ElfClass: {
        0: "No class",
        1: "32-bit architecture",
        2: "64-bit architecture",
    },
    DataEncoding: {
        0: "No encoding",
        1: "2's complement, little endian",
        2: "2's complement, big endian",
    },
    ElfVersion: {
        0: "Invalid version",
        1: "Current version",
    },
    OsAbi: {
        0: "UNIX System V",
        1: "HP-UX",
        2: "NetBSD",
        3: "GNU/Linux",
        6: "Sun Solaris",
        7: "IBM AIX",
        8: "SGI Irix",
        9: "FreeBSD",
        10: "Compaq TRU64 UNIX",
        11: "Novell Modesto",
        12: "OpenBSD",
        64: "ARM EABI",
        97: "ARM",
        255: "Standalone (embedded) application",
    },
    ObjectType: {
        0: "NONE (No file type)",
        1: "REL (Relocatable file)",
        2: "EXEC (Executable file)",
        3: "DYN (Shared object file)",
        4: "CORE (Core file)",
    },
    Machine: {
        0: "No machine",
        1: "AT&T WE 32100",
        2: "SPARC",
        3: "Intel 80386",
        4: "Motorola 68000",
        5: "Motorola 88000",
        7: "Intel 80860",
        8: "MIPS R3000",
        15: "HP PA-RISC",
        18: "SPARC v8plus",
        20: "PowerPC",
        21: "PowerPC64",
        22: "IBM S/390",
        40: "ARM",
        42: "Hitachi SH",
        43: "SPARC v9",
        50: "Intel IA-64",
        62: "Advanced Micro Devices X86-64",
        83: "Atmel AVR",
        105: "TI MSP430",
        183: "AArch64",
        243: "RISC-V",
        247: "Linux BPF",
        258: "LoongArch",
    },
}


def flag_string(flags: enum.IntFlag, letters: dict[enum.IntFlag, str]) -> str:
    """Render set bits as a compact letter string (``"RWE"``), ``"-"`` if none."""
    text = "".join(
        letter if flags & bit else " " for bit, letter in letters.items()
    ).rstrip()
    return text if text.strip() else "-"


_SEGMENT_LETTERS: dict[enum.IntFlag, str] = {
    SegmentFlag.READ: "R",
    SegmentFlag.WRITE: "W",
    SegmentFlag.EXECUTE: "E",
}

_SECTION_LETTERS: dict[enum.IntFlag, str] = {
    SectionFlag.WRITE: "W",
    SectionFlag.ALLOC: "A",
    SectionFlag.EXECINSTR: "X",
    SectionFlag.MERGE: "M",
    SectionFlag.STRINGS: "S",
    SectionFlag.INFO_LINK: "I",
    SectionFlag.LINK_ORDER: "L",
    SectionFlag.OS_NONCONFORMING: "O",
    SectionFlag.GROUP: "G",
    SectionFlag.TLS: "T",
    SectionFlag.COMPRESSED: "C",
}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class _Record(BaseModel):
    """Common configuration: immutable, no stray fields."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        use_enum_values=False,
    )


class IntegrityWarning(_Record):
    """A suspicious-but-plausible observation that does not stop decoding.

    Attributes:
        code: Stable identifier (``"nonzero_padding"``, ``"load_filesz"`` ...).
        message: Human-readable description.
        offset: File offset the warning refers to, if any.
        field: Field or entry name the warning refers to, if any.
    """
    code: str
    message: str
    offset: Optional[int] = None
    field: Optional[str] = None


class DecodeFailure(_Record):
    """A structural error that aborted decoding of a single table."""
    table: str
    kind: str
    message: str
    exit_code: int
    offset: Optional[int] = None
    field: Optional[str] = None


class Identification(_Record):
    """Decoded ``e_ident`` (the first 16 bytes of the file).

    Attributes:
        magic: ``b"\\x7fELF"``.
        elf_class: ELFCLASSNONE / ELFCLASS32 / ELFCLASS64 or unknown.
        data_encoding: ELFDATANONE / ELFDATA2LSB / ELFDATA2MSB or unknown.
        version: EV_NONE / EV_CURRENT or unknown.
        os_abi: Target operating system ABI.
        abi_version: ABI version, expected 0.
        padding: The seven reserved bytes ``e_ident[9:16]``.
    """
    magic: bytes
    elf_class: ElfClass
    data_encoding: DataEncoding
    version: ElfVersion
    os_abi: OsAbi
    abi_version: int
    padding: bytes

    @field_serializer("magic", "padding")
    def _hex_bytes(self, value: bytes) -> str:
        return value.hex()

    @property
    def padding_sum(self) -> int:
        return sum(self.padding)


class FileHeader(_Record):
    """Decoded Elf64_Ehdr fields following ``e_ident``."""
    object_type: ObjectType
    machine: Machine
    version: int
    entry: int
    phoff: int
    shoff: int
    flags: int
    ehsize: int
    phentsize: int
    phnum: int
    shentsize: int
    shnum: int
    shstrndx: int

    @property
    def has_section_name_table(self) -> bool:
        """``False`` when ``e_shstrndx`` is ``SHN_UNDEF``."""
        return self.shstrndx != 0

    @property
    def uses_extended_shstrndx(self) -> bool:
        """``True`` when the real index lives in section 0's ``sh_link``."""
        return self.shstrndx == 0xFFFF


class ProgramHeaderEntry(_Record):
    """One Elf64_Phdr."""
    index: int
    type: SegmentType
    flags: SegmentFlag
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    align: int

    @property
    def end_offset(self) -> int:
        return self.offset + self.filesz

    @property
    def flags_string(self) -> str:
        return flag_string(self.flags, _SEGMENT_LETTERS)


class SectionHeaderEntry(_Record):
    """One Elf64_Shdr; ``name`` is an unresolved string-table offset."""
    index: int
    name: int
    type: SectionType
    flags: SectionFlag
    addr: int
    offset: int
    size: int
    link: int
    info: int
    addralign: int
    entsize: int

    @property
    def occupies_file(self) -> bool:
        """NOBITS sections have a size but no bytes in the file."""
        return self.type != SectionType.NOBITS

    @property
    def end_offset(self) -> int:
        return self.offset + self.size

    @property
    def flags_string(self) -> str:
        return flag_string(self.flags, _SECTION_LETTERS).replace(" ", "")


class StringTable(_Record):
    """Decoded content of one STRTAB section.

    Attributes:
        section_index: Index of the STRTAB section in the section table.
        offset: File offset of the section contents.
        size: Section size in bytes.
        strings: Mapping of start offset (within the section) to text.
    """
    section_index: int
    offset: int
    size: int
    strings: dict[int, str] = Field(default_factory=dict)

    def lookup(self, offset: int) -> Optional[str]:
        """Return the string at *offset*, including suffixes of longer strings.

        ``sh_name`` values may point into the middle of an entry (linkers
        share tails such as ``.rela.text`` / ``.text``).
        """
        if offset in self.strings:
            return self.strings[offset]
        starts = sorted(self.strings)
        pos = bisect.bisect_right(starts, offset) - 1
        if pos < 0:
            return None
        start = starts[pos]
        text = self.strings[start]
        if offset - start <= len(text):
            return text[offset - start:]
        return None


class FieldLayout(_Record):
    """One row of the header field listing.

    Attributes:
        offset: Byte offset of the field in the file.
        name: Field name (``EI_CLASS``, ``e_entry`` ...).
        value: Raw numeric value.
        meaning: Human-readable interpretation.
        size: Field width in bytes.
        ctype: C type of the field.
    """
    offset: int
    name: str
    value: int
    meaning: str
    size: int
    ctype: str


class ElfAnalysis(_Record):
    """Complete result of one analysis run.

    Identification and file header are always present: failures there are
    raised, not recorded.  Table-level failures are listed in *errors*
    and leave the corresponding collection empty.
    """
    path: str = ""
    size: int = 0
    identification: Identification
    header: FileHeader
    segments: list[ProgramHeaderEntry] = Field(default_factory=list)
    sections: list[SectionHeaderEntry] = Field(default_factory=list)
    string_tables: list[StringTable] = Field(default_factory=list)
    section_names: dict[int, str] = Field(default_factory=dict)
    layout: list[FieldLayout] = Field(default_factory=list)
    warnings: list[IntegrityWarning] = Field(default_factory=list)
    errors: list[DecodeFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def exit_code(self) -> int:
        """Exit code of the first recorded failure, 0 when none."""
        return self.errors[0].exit_code if self.errors else 0

    def summary(self) -> dict[str, Any]:
        return {
            "class": self.identification.elf_class.name,
            "type": self.header.object_type.name,
            "machine": self.header.machine.name,
            "segments": len(self.segments),
            "sections": len(self.sections),
            "string_tables": len(self.string_tables),
            "warnings": len(self.warnings),
            "errors": len(self.errors),
        }
