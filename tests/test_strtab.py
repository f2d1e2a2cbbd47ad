"""Tests for string table extraction and section name resolution."""

from __future__ import annotations

import pytest

from elfsight.core.errors import MalformedStringTableError, OutOfBoundsError
from elfsight.core.models import (
    SectionFlag,
    SectionHeaderEntry,
    SectionType,
    StringTable,
)
from elfsight.parsers import header as header_decoder
from elfsight.parsers import ident as ident_validator
from elfsight.parsers import strtab
from elfsight.parsers.sections import decode_all as decode_sections

from conftest import SHT_STRTAB, build_elf


def strtab_section(offset: int, size: int, index: int = 1) -> SectionHeaderEntry:
    return SectionHeaderEntry(
        index=index, name=0, type=SectionType.STRTAB, flags=SectionFlag(0), addr=0,
        offset=offset, size=size, link=0, info=0, addralign=1, entsize=0,
    )


class TestSplit:
    def test_two_strings(self) -> None:
        assert strtab.split_strings(b"abc\x00def\x00") == {0: "abc", 4: "def"}

    def test_leading_empty_string(self) -> None:
        assert strtab.split_strings(b"\x00a\x00") == {0: "", 1: "a"}

    def test_consecutive_nuls(self) -> None:
        assert strtab.split_strings(b"\x00\x00x\x00") == {0: "", 1: "", 2: "x"}

    def test_empty(self) -> None:
        assert strtab.split_strings(b"") == {}

    def test_non_ascii_is_replaced(self) -> None:
        assert strtab.split_strings(b"a\xffb\x00") == {0: "a\ufffdb"}

    def test_unterminated_data(self) -> None:
        with pytest.raises(MalformedStringTableError) as exc_info:
            strtab.split_strings(b"abc\x00def")
        assert exc_info.value.offset == 6


class TestExtractOne:
    def test_section_at_offset_zero(self) -> None:
        buffer = b"abc\x00def\x00"
        table = strtab.extract_one(buffer, strtab_section(0, 8))
        assert table.strings == {0: "abc", 4: "def"}
        assert table.section_index == 1
        assert table.size == 8

    def test_reads_stay_inside_section(self) -> None:
        buffer = b"XXXXhello\x00world\x00YYYY"
        table = strtab.extract_one(buffer, strtab_section(4, 12))
        assert table.strings == {0: "hello", 6: "world"}

    def test_empty_section(self) -> None:
        table = strtab.extract_one(b"\x00" * 8, strtab_section(4, 0))
        assert table.strings == {}

    def test_not_nul_terminated(self) -> None:
        buffer = b"abc\x00def"
        with pytest.raises(MalformedStringTableError) as exc_info:
            strtab.extract_one(buffer, strtab_section(0, 7, index=3))
        err = exc_info.value
        assert err.exit_code == 6
        assert err.offset == 6
        assert err.field == "shdr[3]"

    def test_terminator_outside_section_does_not_count(self) -> None:
        buffer = b"abc\x00def\x00"
        with pytest.raises(MalformedStringTableError):
            strtab.extract_one(buffer, strtab_section(0, 7))

    def test_section_past_end_of_file(self) -> None:
        with pytest.raises(OutOfBoundsError):
            strtab.extract_one(b"abc\x00", strtab_section(0, 5))


class TestExtract:
    def test_only_strtab_sections(self) -> None:
        image = build_elf(
            sections=[
                {},
                {"type": 1, "data": b"code"},
                {"type": SHT_STRTAB, "data": b"\x00one\x00"},
                {"type": SHT_STRTAB, "data": b"\x00two\x00"},
            ]
        )
        ident, _ = ident_validator.validate(image)
        hdr = header_decoder.decode(image, ident)
        sections = decode_sections(image, hdr, ident.data_encoding)
        tables = strtab.extract(image, sections)
        assert [t.section_index for t in tables] == [2, 3]
        assert tables[0].strings == {0: "", 1: "one"}
        assert tables[1].strings == {0: "", 1: "two"}


class TestLookup:
    TABLE = StringTable(
        section_index=4,
        offset=0,
        size=21,
        strings={0: "", 1: ".rela.text", 12: ".data"},
    )

    def test_exact_start(self) -> None:
        assert self.TABLE.lookup(1) == ".rela.text"
        assert self.TABLE.lookup(0) == ""

    def test_shared_suffix(self) -> None:
        assert self.TABLE.lookup(6) == ".text"

    def test_terminator_offset_is_empty_string(self) -> None:
        assert self.TABLE.lookup(11) == ""

    def test_past_end(self) -> None:
        assert self.TABLE.lookup(100) is None


class TestResolveNames:
    def test_names_joined_by_offset(self) -> None:
        table = StringTable(
            section_index=2, offset=0, size=12, strings={0: "", 1: ".text", 7: ".bss"}
        )
        sections = [
            strtab_section(0, 0, index=0).model_copy(update={"name": 0}),
            strtab_section(0, 0, index=1).model_copy(update={"name": 1}),
            strtab_section(0, 0, index=2).model_copy(update={"name": 7}),
            strtab_section(0, 0, index=3).model_copy(update={"name": 500}),
        ]
        assert strtab.resolve_names(sections, table) == {0: "", 1: ".text", 2: ".bss"}

    def test_without_table(self) -> None:
        assert strtab.resolve_names([strtab_section(0, 0)], None) == {}
