"""
ElfSight Analysis Engine
=========================

Orchestrates the decoding pipeline over one immutable ELF64 image.

Analysis Pipeline:
    1. Validate the identification bytes (gates everything else)
    2. Decode the 64-byte file header
    3. Decode the program header table
    4. Decode the section header table
    5. Extract every STRTAB section
    6. Join section names against the section-name string table
    7. Build the header field layout listing

Stages 1-2 raise on failure: without a header there is nothing to decode.
Stages 3-5 are independent: a structural error aborts only the affected
table and is recorded as a :class:`~elfsight.core.models.DecodeFailure`
next to whatever else decoded successfully.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, TypeVar

from shared.config import SightConfig
from shared.logger import SightLogger

from elfsight.core.errors import ElfError, FileTooLargeError
from elfsight.core.models import (
    DecodeFailure,
    ElfAnalysis,
    IntegrityWarning,
    SectionType,
    StringTable,
)
from elfsight.parsers import header as header_decoder
from elfsight.parsers import ident as ident_validator
from elfsight.parsers import sections as section_decoder
from elfsight.parsers import segments as segment_decoder
from elfsight.parsers import strtab
from elfsight.parsers.cursor import Buffer

T = TypeVar("T")


def _failure(table: str, exc: ElfError) -> DecodeFailure:
    return DecodeFailure(
        table=table,
        kind=exc.kind,
        message=exc.message,
        exit_code=exc.exit_code,
        offset=exc.offset,
        field=exc.field,
    )


class ElfEngine:
    """Runs the complete ELF64 decoding pipeline.

    Usage::

        engine = ElfEngine()
        analysis = engine.analyze_file("/usr/bin/true")
        print(analysis.header.machine.name, len(analysis.sections))

    Or, with a buffer already in memory::

        analysis = engine.analyze_bytes(data)
    """

    def __init__(
        self,
        config: SightConfig | None = None,
        logger: SightLogger | None = None,
    ) -> None:
        self._config: SightConfig = config or SightConfig()
        self._logger: SightLogger = logger or SightLogger(
            "engine", console_output=False
        )

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def analyze_file(self, file_path: str | Path) -> ElfAnalysis:
        """Read *file_path* fully into memory and analyse it.

        Raises:
            FileNotFoundError: The file does not exist.
            FileTooLargeError: The file exceeds ``elfsight.max_file_size``.
            ElfError: Identification or file header decoding failed.
        """
        path = Path(file_path)
        file_size = path.stat().st_size
        max_size = self._config.elfsight.max_file_size
        if file_size > max_size:
            raise FileTooLargeError(
                f"File too large: {file_size:,} bytes (max: {max_size:,} bytes)"
            )
        data = path.read_bytes()
        self._logger.info("Analysing %s (%d bytes)", path, file_size)
        return self.analyze_bytes(data, path=str(path.resolve()))

    def analyze_bytes(self, data: Buffer, path: str = "") -> ElfAnalysis:
        """Decode every structure of an in-memory ELF64 image.

        Raises:
            NotAnElfFileError: Identification failed; nothing else ran.
            UnsupportedLayoutError: Not an ELF64 layout this engine decodes.
            TruncatedHeaderError: The file header is incomplete.
        """
        log = self._logger
        length = len(data)
        warnings: list[IntegrityWarning] = []
        errors: list[DecodeFailure] = []

        with log.operation("identification"):
            ident, ident_warnings = ident_validator.validate(data)
            warnings += ident_warnings
            log.debug(
                "class=%s encoding=%s osabi=%s",
                ident.elf_class.name,
                ident.data_encoding.name,
                ident.os_abi.name,
            )

        with log.operation("file_header"):
            header = header_decoder.decode(data, ident)
            warnings += header_decoder.header_warnings(header)
            log.debug(
                "type=%s machine=%s phnum=%d shnum=%d",
                header.object_type.name,
                header.machine.name,
                header.phnum,
                header.shnum,
            )

        encoding = ident.data_encoding

        segments = self._decode_table(
            "program_headers",
            errors,
            lambda: segment_decoder.decode_all(data, header, encoding),
            default=[],
        )
        warnings += segment_decoder.segment_warnings(segments, length)

        sections = self._decode_table(
            "section_headers",
            errors,
            lambda: section_decoder.decode_all(data, header, encoding),
            default=[],
        )
        warnings += section_decoder.section_warnings(sections, length)

        string_tables: list[StringTable] = []
        with log.operation("string_tables"):
            for section in sections:
                if section.type != SectionType.STRTAB:
                    continue
                table = self._decode_table(
                    f"strtab[{section.index}]",
                    errors,
                    lambda: strtab.extract_one(data, section),
                    default=None,
                )
                if table is not None:
                    string_tables.append(table)

        names_index = section_decoder.string_table_index(header, sections)
        names_table = next(
            (t for t in string_tables if t.section_index == names_index), None
        )
        section_names = strtab.resolve_names(sections, names_table)

        for warning in warnings:
            log.warning("%s", warning.message, code=warning.code, field=warning.field)

        analysis = ElfAnalysis(
            path=path,
            size=length,
            identification=ident,
            header=header,
            segments=segments,
            sections=sections,
            string_tables=string_tables,
            section_names=section_names,
            layout=header_decoder.describe_fields(ident, header),
            warnings=warnings,
            errors=errors,
        )
        log.info(
            "Decoded %d segment(s), %d section(s), %d string table(s); "
            "%d warning(s), %d error(s)",
            len(segments),
            len(sections),
            len(string_tables),
            len(warnings),
            len(errors),
        )
        return analysis

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    def _decode_table(
        self,
        table: str,
        errors: list[DecodeFailure],
        decode: Callable[[], T],
        default: T,
    ) -> T:
        """Run one table decoder, recording a structural error instead of raising."""
        with self._logger.operation(table):
            try:
                return decode()
            except ElfError as exc:
                errors.append(_failure(table, exc))
                self._logger.error(
                    "%s decoding aborted: %s", table, exc.describe(),
                    kind=exc.kind, offset=exc.offset,
                )
                return default
