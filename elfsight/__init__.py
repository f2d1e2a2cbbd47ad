"""
ElfSight -- ELF64 Binary Format Analyzer
=========================================

ElfSight is a read-only analyzer for 64-bit ELF object files.  Given the
bytes of an executable, shared object, relocatable or core file it
validates the identification, decodes the file header, the program and
section header tables and every string table, and reports non-fatal
integrity warnings alongside the decoded records.

Capabilities:
    - Identification validation (magic, class, encoding, OS/ABI)
    - ELF64 file header decoding for both byte orders
    - Program header (segment) and section header table decoding
    - String table extraction and section name resolution
    - Header field layout listing (offset / name / value / meaning)
    - Rich console output and JSON reports

References:
    - System V Application Binary Interface, Edition 4.1 (1997).
    - System V ABI AMD64 Architecture Processor Supplement, 0.99.6.
    - Linux man pages: elf(5), readelf(1).
"""

__version__ = "0.1.0"

from elfsight.core.engine import ElfEngine  # noqa: E402
from elfsight.core.models import ElfAnalysis  # noqa: E402
from elfsight.output.console import ElfConsoleOutput  # noqa: E402
from elfsight.output.report import ElfReportGenerator  # noqa: E402

__all__ = [
    "ElfEngine",
    "ElfAnalysis",
    "ElfConsoleOutput",
    "ElfReportGenerator",
]
