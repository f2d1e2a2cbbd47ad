"""Shared fixtures: synthetic ELF64 images assembled with :mod:`struct`."""

from __future__ import annotations

import struct
from typing import Any

import pytest

from shared.config import SightConfig
from shared.logger import SightLogger

from elfsight.core.engine import ElfEngine

PT_LOAD = 1
PT_GNU_STACK = 0x6474E551
PF_X, PF_W, PF_R = 1, 2, 4

SHT_PROGBITS = 1
SHT_STRTAB = 3
SHT_NOBITS = 8
SHF_WRITE, SHF_ALLOC, SHF_EXECINSTR = 1, 2, 4

SHSTRTAB = b"\x00.text\x00.bss\x00.strtab\x00.shstrtab\x00"
STRTAB = b"\x00main\x00_start\x00"
TEXT = b"\x90" * 16


def name_offset(name: str) -> int:
    return SHSTRTAB.index(name.encode() + b"\x00")


def pack_ident(
    *,
    elf_class: int = 2,
    data: int = 1,
    version: int = 1,
    osabi: int = 0,
    abiversion: int = 0,
    padding: bytes = b"\x00" * 7,
    magic: bytes = b"\x7fELF",
) -> bytes:
    return magic + bytes([elf_class, data, version, osabi, abiversion]) + padding


def pack_ehdr(order: str, **fields: int) -> bytes:
    values = {
        "e_type": 2, "e_machine": 62, "e_version": 1, "e_entry": 0x401000,
        "e_phoff": 0, "e_shoff": 0, "e_flags": 0, "e_ehsize": 64,
        "e_phentsize": 56, "e_phnum": 0, "e_shentsize": 64, "e_shnum": 0,
        "e_shstrndx": 0,
    }
    values.update(fields)
    return struct.pack(
        order + "HHIQQQIHHHHHH",
        values["e_type"], values["e_machine"], values["e_version"],
        values["e_entry"], values["e_phoff"], values["e_shoff"],
        values["e_flags"], values["e_ehsize"], values["e_phentsize"],
        values["e_phnum"], values["e_shentsize"], values["e_shnum"],
        values["e_shstrndx"],
    )


def pack_phdr(order: str, seg: dict[str, int]) -> bytes:
    return struct.pack(
        order + "IIQQQQQQ",
        seg.get("type", PT_LOAD), seg.get("flags", 0), seg.get("offset", 0),
        seg.get("vaddr", 0), seg.get("paddr", 0), seg.get("filesz", 0),
        seg.get("memsz", 0), seg.get("align", 0),
    )


def pack_shdr(order: str, sec: dict[str, int]) -> bytes:
    return struct.pack(
        order + "IIQQQQIIQQ",
        sec.get("name", 0), sec.get("type", 0), sec.get("flags", 0),
        sec.get("addr", 0), sec.get("offset", 0), sec.get("size", 0),
        sec.get("link", 0), sec.get("info", 0), sec.get("addralign", 0),
        sec.get("entsize", 0),
    )


def build_elf(
    *,
    order: str = "<",
    ident: dict[str, Any] | None = None,
    header: dict[str, int] | None = None,
    segments: list[dict[str, int]] | None = None,
    sections: list[dict[str, Any]] | None = None,
    shstrndx: int = 0,
) -> bytes:
    """Assemble an ELF64 image.

    Layout: file header, program header table, section contents (in
    section order), section header table.  The section header table is
    always the last thing in the file.  A section dict may carry ``data``
    bytes; its ``offset`` and ``size`` are then filled in.  Any header
    field can be forced through *header*.
    """
    segments = segments or []
    sections = [dict(s) for s in sections or []]
    ident_kwargs = dict(ident or {})
    ident_kwargs.setdefault("data", 1 if order == "<" else 2)

    phoff = 64 if segments else 0
    cursor = 64 + 56 * len(segments)
    blobs = b""
    for sec in sections:
        data = sec.pop("data", None)
        if data is None:
            continue
        sec.setdefault("offset", cursor + len(blobs))
        sec.setdefault("size", len(data))
        blobs += data
    while (cursor + len(blobs)) % 8:
        blobs += b"\x00"
    shoff = cursor + len(blobs) if sections else 0

    fields = {
        "e_phoff": phoff,
        "e_phnum": len(segments),
        "e_shoff": shoff,
        "e_shnum": len(sections),
        "e_shstrndx": shstrndx,
    }
    fields.update(header or {})

    image = pack_ident(**ident_kwargs) + pack_ehdr(order, **fields)
    image += b"".join(pack_phdr(order, seg) for seg in segments)
    image += blobs
    image += b"".join(pack_shdr(order, sec) for sec in sections)
    return image


def executable_sections() -> list[dict[str, Any]]:
    return [
        {},
        {
            "name": name_offset(".text"), "type": SHT_PROGBITS,
            "flags": SHF_ALLOC | SHF_EXECINSTR, "addr": 0x401000,
            "data": TEXT, "addralign": 16,
        },
        {
            "name": name_offset(".bss"), "type": SHT_NOBITS,
            "flags": SHF_WRITE | SHF_ALLOC, "addr": 0x402000,
            "offset": 0x1000, "size": 0x10000, "addralign": 32,
        },
        {
            "name": name_offset(".strtab"), "type": SHT_STRTAB,
            "data": STRTAB, "addralign": 1,
        },
        {
            "name": name_offset(".shstrtab"), "type": SHT_STRTAB,
            "data": SHSTRTAB, "addralign": 1,
        },
    ]


def executable_segments() -> list[dict[str, int]]:
    return [
        {
            "type": PT_LOAD, "flags": PF_R | PF_X, "offset": 0,
            "vaddr": 0x400000, "paddr": 0x400000,
            "filesz": 0xB0, "memsz": 0xB0, "align": 0x1000,
        },
        {"type": PT_GNU_STACK, "flags": PF_R | PF_W, "align": 16},
    ]


def build_executable(order: str = "<") -> bytes:
    """A small but complete executable: 2 segments, 5 sections."""
    return build_elf(
        order=order,
        segments=executable_segments(),
        sections=executable_sections(),
        shstrndx=4,
    )


@pytest.fixture
def executable() -> bytes:
    return build_executable("<")


@pytest.fixture(params=["<", ">"], ids=["lsb", "msb"])
def any_order_executable(request: pytest.FixtureRequest) -> tuple[str, bytes]:
    return request.param, build_executable(request.param)


@pytest.fixture
def engine() -> ElfEngine:
    return ElfEngine(
        config=SightConfig(),
        logger=SightLogger("test", log_level="DEBUG", console_output=False),
    )
