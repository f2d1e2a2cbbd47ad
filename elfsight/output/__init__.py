"""
ElfSight Output Module
=======================

Console rendering and JSON report generation for analysis results.
"""

from elfsight.output.console import ElfConsoleOutput
from elfsight.output.report import ElfReportGenerator

__all__ = ["ElfConsoleOutput", "ElfReportGenerator"]
