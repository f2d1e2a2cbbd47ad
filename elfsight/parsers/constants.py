"""
ELF64 Layout Constants
=======================

Fixed sizes, field offsets and sentinel values of the ELF64 on-disk layout.

References:
    - System V Application Binary Interface, Edition 4.1, chapter 4.
    - Linux man page: elf(5).
"""

from __future__ import annotations

# Magic number
ELF_MAGIC: bytes = b"\x7fELF"

# e_ident indices
EI_MAG0: int = 0
EI_CLASS: int = 4
EI_DATA: int = 5
EI_VERSION: int = 6
EI_OSABI: int = 7
EI_ABIVERSION: int = 8
EI_PAD: int = 9
EI_NIDENT: int = 16

# Architecturally fixed ELF64 sizes
ELF64_EHDR_SIZE: int = 64
ELF64_PHDR_SIZE: int = 56
ELF64_SHDR_SIZE: int = 64

# Current object file version
EV_CURRENT: int = 1

# Special section indices
SHN_UNDEF: int = 0
SHN_LORESERVE: int = 0xFF00
SHN_XINDEX: int = 0xFFFF

# Elf64_Ehdr fields after e_ident: (name, offset, width, C type)
EHDR_FIELDS: tuple[tuple[str, int, int, str], ...] = (
    ("e_type", 0x10, 2, "Elf64_Half"),
    ("e_machine", 0x12, 2, "Elf64_Half"),
    ("e_version", 0x14, 4, "Elf64_Word"),
    ("e_entry", 0x18, 8, "Elf64_Addr"),
    ("e_phoff", 0x20, 8, "Elf64_Off"),
    ("e_shoff", 0x28, 8, "Elf64_Off"),
    ("e_flags", 0x30, 4, "Elf64_Word"),
    ("e_ehsize", 0x34, 2, "Elf64_Half"),
    ("e_phentsize", 0x36, 2, "Elf64_Half"),
    ("e_phnum", 0x38, 2, "Elf64_Half"),
    ("e_shentsize", 0x3A, 2, "Elf64_Half"),
    ("e_shnum", 0x3C, 2, "Elf64_Half"),
    ("e_shstrndx", 0x3E, 2, "Elf64_Half"),
)

# Elf64_Phdr: p_type, p_flags, p_offset, p_vaddr, p_paddr, p_filesz,
# p_memsz, p_align
PHDR_FORMAT: str = "IIQQQQQQ"

# Elf64_Shdr: sh_name, sh_type, sh_flags, sh_addr, sh_offset, sh_size,
# sh_link, sh_info, sh_addralign, sh_entsize
SHDR_FORMAT: str = "IIQQQQIIQQ"
