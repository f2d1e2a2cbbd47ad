"""
ElfSight Console Output
========================

Rich-powered terminal display for :class:`~elfsight.core.models.ElfAnalysis`
results: the header field listing, file header summary, program and
section header tables, string tables, integrity warnings and table
failures.

Uses the SightConsole abstraction for consistent styling.
"""

from __future__ import annotations

from rich.markup import escape

from shared.console import SightConsole

from elfsight.core.models import (
    DecodeFailure,
    ElfAnalysis,
    FieldLayout,
    FileHeader,
    Identification,
    IntegrityWarning,
    ProgramHeaderEntry,
    SectionHeaderEntry,
    StringTable,
)


def _hex(value: int, width: int = 0) -> str:
    return f"0x{value:0{width}x}"


def _type_name(value: object) -> str:
    """Enum name, with the raw value for pseudo-members."""
    name = getattr(value, "name", str(value))
    if getattr(value, "is_known", True):
        return name
    return f"{name}(0x{int(value):x})"  # type: ignore[call-overload]


class ElfConsoleOutput:
    """Renders an analysis result to the terminal.

    Usage::

        output = ElfConsoleOutput()
        output.display(analysis)
    """

    def __init__(
        self,
        console: SightConsole | None = None,
        *,
        show_layout: bool = True,
        show_strings: bool = True,
        max_strings: int = 64,
    ) -> None:
        self._console: SightConsole = console or SightConsole()
        self._show_layout = show_layout
        self._show_strings = show_strings
        self._max_strings = max_strings

    def display(self, analysis: ElfAnalysis) -> None:
        """Display the complete analysis result."""
        self._console.banner(
            "ElfSight -- ELF64 Analyzer",
            escape(f"{analysis.path or '<buffer>'} ({analysis.size:,} bytes)"),
        )

        if self._show_layout:
            self.display_layout(analysis.layout)
        self.display_header(analysis.identification, analysis.header)
        self.display_segments(analysis.segments)
        self.display_sections(analysis.sections, analysis.section_names)
        if self._show_strings:
            for table in analysis.string_tables:
                self.display_string_table(table, analysis.section_names)
        if analysis.warnings:
            self.display_warnings(analysis.warnings)
        if analysis.errors:
            self.display_errors(analysis.errors)
        self._console.divider()

    def display_layout(self, rows: list[FieldLayout]) -> None:
        """Offset / Name / Value / Meaning / Size / Type listing."""
        self._console.section("ELF Header Fields")
        self._console.table(
            "Elf64_Ehdr",
            ["Offset", "Name", "Value", "Meaning", "Size", "Type"],
            [
                (_hex(r.offset, 4), r.name, _hex(r.value), r.meaning, r.size, r.ctype)
                for r in rows
            ],
            justify=["right", "left", "right", "left", "right", "left"],
        )

    def display_header(self, ident: Identification, header: FileHeader) -> None:
        self._console.section("ELF Header")
        self._console.panel(
            [
                f"[bold]Magic:[/bold]       {ident.magic.hex(' ')} {ident.padding.hex(' ')}",
                f"[bold]Class:[/bold]       {ident.elf_class.label}",
                f"[bold]Data:[/bold]        {ident.data_encoding.label}",
                f"[bold]OS/ABI:[/bold]      {ident.os_abi.label}",
                f"[bold]Type:[/bold]        {header.object_type.label}",
                f"[bold]Machine:[/bold]     {header.machine.label}",
                f"[bold]Entry point:[/bold] {_hex(header.entry)}",
                f"[bold]Flags:[/bold]       {_hex(header.flags)}",
                f"[bold]Program headers:[/bold] {header.phnum} x {header.phentsize} "
                f"bytes at {_hex(header.phoff)}",
                f"[bold]Section headers:[/bold] {header.shnum} x {header.shentsize} "
                f"bytes at {_hex(header.shoff)}",
                f"[bold]Section names index:[/bold] {header.shstrndx}",
            ],
            title="File Header",
        )

    def display_segments(self, segments: list[ProgramHeaderEntry]) -> None:
        self._console.section("Program Headers")
        if not segments:
            self._console.info("There are no program headers in this file.")
            return
        self._console.table(
            f"{len(segments)} segment(s)",
            ["#", "Type", "Offset", "VirtAddr", "PhysAddr",
             "FileSiz", "MemSiz", "Flags", "Align"],
            [
                (
                    seg.index, _type_name(seg.type), _hex(seg.offset, 6),
                    _hex(seg.vaddr, 16), _hex(seg.paddr, 16),
                    _hex(seg.filesz, 6), _hex(seg.memsz, 6),
                    seg.flags_string, _hex(seg.align),
                )
                for seg in segments
            ],
        )

    def display_sections(
        self, sections: list[SectionHeaderEntry], names: dict[int, str]
    ) -> None:
        self._console.section("Section Headers")
        if not sections:
            self._console.info("There are no sections in this file.")
            return
        self._console.table(
            f"{len(sections)} section(s)",
            ["#", "Name", "Type", "Address", "Offset", "Size",
             "EntSize", "Flags", "Link", "Info", "Align"],
            [
                (
                    sec.index,
                    names.get(sec.index, f"<{sec.name}>"),
                    _type_name(sec.type),
                    _hex(sec.addr, 16), _hex(sec.offset, 6), _hex(sec.size, 6),
                    _hex(sec.entsize), sec.flags_string,
                    sec.link, sec.info, sec.addralign,
                )
                for sec in sections
            ],
        )

    def display_string_table(
        self, table: StringTable, names: dict[int, str]
    ) -> None:
        title = names.get(table.section_index) or f"section {table.section_index}"
        entries = sorted(table.strings.items())
        shown = entries[: self._max_strings]
        caption = None
        if len(entries) > len(shown):
            caption = f"{len(entries) - len(shown)} more string(s) not shown"
        self._console.table(
            escape(f"String table {title} ({len(entries)} strings)"),
            ["Offset", "String"],
            [(_hex(offset), repr(text)) for offset, text in shown],
            caption=caption,
            justify=["right", "left"],
        )

    def display_warnings(self, warnings: list[IntegrityWarning]) -> None:
        self._console.section("Integrity Warnings")
        for warning in warnings:
            where = f" at {_hex(warning.offset)}" if warning.offset is not None else ""
            self._console.warning(escape(f"[{warning.code}] {warning.message}{where}"))

    def display_errors(self, errors: list[DecodeFailure]) -> None:
        self._console.section("Decoding Errors")
        for failure in errors:
            where = f" at {_hex(failure.offset)}" if failure.offset is not None else ""
            field = f" ({failure.field})" if failure.field else ""
            self._console.error(escape(
                f"{failure.table}: {failure.kind}{field}{where}: {failure.message}"
            ))
