"""Tests for JSON report generation."""

from __future__ import annotations

import json
from pathlib import Path

from elfsight.core.engine import ElfEngine
from elfsight.output.report import ElfReportGenerator

from conftest import build_elf


def test_report_structure(engine: ElfEngine, executable: bytes) -> None:
    report = ElfReportGenerator().build(engine.analyze_bytes(executable, path="a.out"))

    assert report["report"]["tool"] == "elfsight"
    assert report["summary"]["sections"] == 5
    assert report["labels"]["class"] == "ELF64"
    assert report["labels"]["segments"][0] == {"index": 0, "type": "LOAD", "flags": "R E"}
    assert report["labels"]["sections"][2]["flags"] == "WA"

    analysis = report["analysis"]
    assert analysis["path"] == "a.out"
    assert analysis["identification"]["magic"] == "7f454c46"
    assert analysis["identification"]["padding"] == "00" * 7
    assert analysis["segments"][0]["flags"] == 5
    assert analysis["sections"][1]["type"] == 1


def test_unknown_values_keep_raw_numbers(engine: ElfEngine) -> None:
    image = build_elf(header={"e_machine": 0x9999}, segments=[{"type": 0x70000042}])
    report = ElfReportGenerator().build(engine.analyze_bytes(image))
    assert report["analysis"]["header"]["machine"] == 0x9999
    assert report["labels"]["machine"] == "UNKNOWN"
    assert report["analysis"]["segments"][0]["type"] == 0x70000042
    assert report["labels"]["segments"][0]["type"] == "PROCESSOR_SPECIFIC"


def test_generate_json(engine: ElfEngine, executable: bytes, tmp_path: Path) -> None:
    target = tmp_path / "out" / "report.json"
    written = ElfReportGenerator().generate_json(engine.analyze_bytes(executable), target)
    assert written == target.resolve()
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["analysis"]["string_tables"][1]["strings"]["1"] == ".text"
