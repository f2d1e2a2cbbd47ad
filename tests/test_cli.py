"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from elfsight import __version__
from elfsight.cli import elfsight_cli

from conftest import build_elf, build_executable, executable_sections, pack_ident


@pytest.fixture
def runner() -> CliRunner:
    # Wide terminal so table cells are not wrapped.
    return CliRunner(env={"COLUMNS": "200"})


def write(tmp_path: Path, data: bytes, name: str = "a.out") -> str:
    target = tmp_path / name
    target.write_bytes(data)
    return str(target)


class TestExitCodes:
    def test_valid_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(elfsight_cli, [write(tmp_path, build_executable())])
        assert result.exit_code == 0, result.output
        assert "Program Headers" in result.output
        assert "Section Headers" in result.output
        assert ".shstrtab" in result.output

    def test_not_an_elf(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(elfsight_cli, [write(tmp_path, b"plain text file\n")])
        assert result.exit_code == 2
        assert "NotAnElfFile" in result.output

    def test_elf32(self, runner: CliRunner, tmp_path: Path) -> None:
        image = pack_ident(elf_class=1) + b"\x00" * 48
        result = runner.invoke(elfsight_cli, [write(tmp_path, image)])
        assert result.exit_code == 3

    def test_truncated_header(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(elfsight_cli, [write(tmp_path, pack_ident() + b"\x00" * 4)])
        assert result.exit_code == 4
        assert "TruncatedHeader" in result.output

    def test_out_of_bounds_table(self, runner: CliRunner, tmp_path: Path) -> None:
        image = build_elf(header={"e_phoff": 0x7000, "e_phnum": 1})
        result = runner.invoke(elfsight_cli, [write(tmp_path, image)])
        assert result.exit_code == 5
        assert "OutOfBounds" in result.output

    def test_malformed_string_table(self, runner: CliRunner, tmp_path: Path) -> None:
        sections = executable_sections()
        sections[3] = dict(sections[3], data=b"\x00main")
        image = build_elf(sections=sections, shstrndx=4)
        result = runner.invoke(elfsight_cli, [write(tmp_path, image)])
        assert result.exit_code == 6

    def test_missing_path(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(elfsight_cli, [str(tmp_path / "nope")])
        assert result.exit_code != 0

    def test_exactly_one_path(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path, build_executable())
        result = runner.invoke(elfsight_cli, [path, path])
        assert result.exit_code != 0

    def test_file_too_large(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "config.toml"
        config.write_text("[elfsight]\nmax_file_size = 10\n")
        path = write(tmp_path, build_executable())
        result = runner.invoke(elfsight_cli, [path, "--config", str(config)])
        assert result.exit_code == 1
        assert "too large" in result.output


class TestOutput:
    def test_json_stdout(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path, build_executable())
        result = runner.invoke(elfsight_cli, [path, "--json"])
        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["summary"]["machine"] == "X86_64"
        assert report["analysis"]["header"]["machine"] == 62
        assert report["labels"]["sections"][1]["name"] == ".text"

    def test_json_report_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path, build_executable())
        out = tmp_path / "reports" / "report.json"
        result = runner.invoke(elfsight_cli, [path, "--no-layout", "-o", str(out)])
        assert result.exit_code == 0
        report = json.loads(out.read_text(encoding="utf-8"))
        assert report["report"]["version"] == __version__

    def test_no_layout_and_no_strings(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path, build_executable())
        full = runner.invoke(elfsight_cli, [path])
        trimmed = runner.invoke(elfsight_cli, [path, "--no-layout", "--no-strings"])
        assert "Elf64_Ehdr" in full.output
        assert "Elf64_Ehdr" not in trimmed.output
        assert "_start" in full.output
        assert "_start" not in trimmed.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(elfsight_cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_short_help(self, runner: CliRunner) -> None:
        result = runner.invoke(elfsight_cli, ["-h"])
        assert result.exit_code == 0
        assert "ELF64" in result.output
