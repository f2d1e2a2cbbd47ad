"""
ElfSight Core Module
=====================

Contains the analysis engine, the decoded record models and the error
taxonomy.
"""

from elfsight.core.errors import (
    ElfError,
    FileTooLargeError,
    MalformedStringTableError,
    NotAnElfFileError,
    OutOfBoundsError,
    TruncatedHeaderError,
    UnsupportedLayoutError,
)
from elfsight.core.models import (
    DataEncoding,
    DecodeFailure,
    ElfAnalysis,
    ElfClass,
    ElfVersion,
    FieldLayout,
    FileHeader,
    Identification,
    IntegrityWarning,
    Machine,
    ObjectType,
    OsAbi,
    ProgramHeaderEntry,
    SectionFlag,
    SectionHeaderEntry,
    SectionType,
    SegmentFlag,
    SegmentType,
    StringTable,
)

__all__ = [
    "DataEncoding",
    "DecodeFailure",
    "ElfAnalysis",
    "ElfClass",
    "ElfError",
    "ElfVersion",
    "FieldLayout",
    "FileHeader",
    "FileTooLargeError",
    "Identification",
    "IntegrityWarning",
    "Machine",
    "MalformedStringTableError",
    "NotAnElfFileError",
    "ObjectType",
    "OsAbi",
    "OutOfBoundsError",
    "ProgramHeaderEntry",
    "SectionFlag",
    "SectionHeaderEntry",
    "SectionType",
    "SegmentFlag",
    "SegmentType",
    "StringTable",
    "TruncatedHeaderError",
    "UnsupportedLayoutError",
]
