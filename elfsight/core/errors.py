"""
ElfSight Error Taxonomy
========================

Typed exceptions raised by the ELF decoders.  Every structural failure is
surfaced as a subclass of :class:`ElfError` so callers can tell the
categories apart without parsing messages; the CLI maps each category to a
distinct process exit code.

Non-fatal observations are *not* exceptions -- see
:class:`elfsight.core.models.IntegrityWarning`.
"""

from __future__ import annotations

from typing import Optional


class ElfError(Exception):
    """Base class for all decoding failures.

    Attributes:
        kind: Stable category name (``"OutOfBounds"``, ...).
        exit_code: Process exit code the CLI uses for this category.
        offset: Offending file offset, when one is known.
        field: Offending header field or table entry, when one is known.
    """

    kind: str = "ElfError"
    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.field = field

    def describe(self) -> str:
        """Return ``"<kind>: <message> [field=..., offset=0x...]"``."""
        context: list[str] = []
        if self.field:
            context.append(f"field={self.field}")
        if self.offset is not None:
            context.append(f"offset=0x{self.offset:x}")
        suffix = f" [{', '.join(context)}]" if context else ""
        return f"{self.kind}: {self.message}{suffix}"


class NotAnElfFileError(ElfError):
    """Buffer shorter than ``EI_NIDENT`` or magic bytes do not match."""

    kind = "NotAnElfFile"
    exit_code = 2


class UnsupportedLayoutError(ElfError):
    """32-bit class, unknown encoding, or entry sizes that disagree with ELF64."""

    kind = "UnsupportedLayout"
    exit_code = 3


class TruncatedHeaderError(ElfError):
    """Buffer too short to hold the 64-byte ELF64 file header."""

    kind = "TruncatedHeader"
    exit_code = 4


class OutOfBoundsError(ElfError):
    """A computed offset/width would read past the end of the buffer."""

    kind = "OutOfBounds"
    exit_code = 5

    def __init__(
        self,
        offset: int,
        width: int,
        length: int,
        *,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"read of {width} byte(s) at 0x{offset:x} exceeds "
            f"buffer length 0x{length:x}",
            offset=offset,
            field=field,
        )
        self.width = width
        self.length = length


class MalformedStringTableError(ElfError):
    """A STRTAB section whose contents are not NUL-terminated."""

    kind = "MalformedStringTable"
    exit_code = 6


class FileTooLargeError(ElfError):
    """The input file exceeds the configured size limit; nothing was decoded."""

    kind = "FileTooLarge"
    exit_code = 1
