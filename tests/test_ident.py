"""Tests for identification validation."""

from __future__ import annotations

import pytest

from elfsight.core.errors import NotAnElfFileError
from elfsight.core.models import DataEncoding, ElfClass, ElfVersion, OsAbi
from elfsight.parsers import ident

from conftest import pack_ident


class TestValidate:
    def test_valid_identification(self) -> None:
        result, warnings = ident.validate(pack_ident(osabi=3))
        assert result.magic == b"\x7fELF"
        assert result.elf_class == ElfClass.ELF64
        assert result.data_encoding == DataEncoding.LSB
        assert result.version == ElfVersion.CURRENT
        assert result.os_abi == OsAbi.GNU
        assert result.abi_version == 0
        assert warnings == []

    def test_only_first_16_bytes_are_read(self) -> None:
        result, _ = ident.validate(pack_ident() + b"\xff" * 100)
        assert result.padding == b"\x00" * 7

    @pytest.mark.parametrize("length", [0, 1, 4, 15])
    def test_short_buffer(self, length: int) -> None:
        with pytest.raises(NotAnElfFileError) as exc_info:
            ident.validate(pack_ident()[:length])
        assert exc_info.value.exit_code == 2

    @pytest.mark.parametrize(
        "magic", [b"\x7fELG", b"MZ\x90\x00", b"\x00ELF", b"\x7felf"]
    )
    def test_bad_magic(self, magic: bytes) -> None:
        with pytest.raises(NotAnElfFileError) as exc_info:
            ident.validate(pack_ident(magic=magic))
        assert exc_info.value.field == "EI_MAG"
        assert exc_info.value.offset == 0


class TestUnknownValues:
    def test_unknown_class_keeps_raw_value(self) -> None:
        result, _ = ident.validate(pack_ident(elf_class=7))
        assert result.elf_class == 7
        assert not result.elf_class.is_known
        assert result.elf_class.name == "UNKNOWN"
        assert "0x7" in result.elf_class.label

    def test_unknown_osabi(self) -> None:
        result, _ = ident.validate(pack_ident(osabi=200))
        assert result.os_abi.value == 200
        assert not result.os_abi.is_known

    def test_known_value_label(self) -> None:
        result, _ = ident.validate(pack_ident())
        assert result.elf_class.is_known
        assert result.elf_class.label == "64-bit architecture"


class TestWarnings:
    def test_nonzero_padding(self) -> None:
        _, warnings = ident.validate(pack_ident(padding=b"\x00\x01\x00\x00\x00\x00\x02"))
        assert [w.code for w in warnings] == ["nonzero_padding"]
        assert warnings[0].offset == 9
        assert "3" in warnings[0].message

    def test_nonzero_abi_version(self) -> None:
        _, warnings = ident.validate(pack_ident(abiversion=1))
        assert [w.code for w in warnings] == ["nonzero_abi_version"]

    def test_bad_ident_version(self) -> None:
        _, warnings = ident.validate(pack_ident(version=0))
        assert [w.code for w in warnings] == ["ident_version"]
