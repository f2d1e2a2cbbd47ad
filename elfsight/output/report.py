"""
ElfSight Report Generator
==========================

Writes :class:`~elfsight.core.models.ElfAnalysis` results as JSON for
machine consumption and downstream tooling.

Enum fields serialise to their raw numeric values; the report adds a
``labels`` block with the classified names next to them so the raw value
of an unknown type is never lost.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from elfsight import __version__
from elfsight.core.models import ElfAnalysis


class ElfReportGenerator:
    """Builds and writes JSON reports.

    Usage::

        generator = ElfReportGenerator()
        generator.generate_json(analysis, "report.json")
    """

    def build(self, analysis: ElfAnalysis) -> dict[str, Any]:
        """Return the report as a JSON-serialisable dictionary."""
        header = analysis.header
        ident = analysis.identification
        return {
            "report": {
                "tool": "elfsight",
                "version": __version__,
                "generated": datetime.now(timezone.utc).isoformat(),
            },
            "summary": analysis.summary(),
            "labels": {
                "class": ident.elf_class.name,
                "data_encoding": ident.data_encoding.name,
                "os_abi": ident.os_abi.name,
                "object_type": header.object_type.name,
                "machine": header.machine.name,
                "segments": [
                    {"index": s.index, "type": s.type.name, "flags": s.flags_string}
                    for s in analysis.segments
                ],
                "sections": [
                    {
                        "index": s.index,
                        "name": analysis.section_names.get(s.index),
                        "type": s.type.name,
                        "flags": s.flags_string,
                    }
                    for s in analysis.sections
                ],
            },
            "analysis": analysis.model_dump(mode="json"),
        }

    def to_json(self, analysis: ElfAnalysis, indent: int = 2) -> str:
        return json.dumps(self.build(analysis), indent=indent, ensure_ascii=False)

    def generate_json(self, analysis: ElfAnalysis, output_path: str | Path) -> Path:
        """Write the report to *output_path* and return the resolved path."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json(analysis))
            f.write("\n")
        return path.resolve()
