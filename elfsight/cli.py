"""
ElfSight CLI -- ELF64 Binary Format Analyzer
=============================================

Click-based command-line interface for the ElfSight analyzer.  Takes
exactly one file, decodes it and renders the result to the terminal or
as JSON.

Usage::

    # Full analysis
    elfsight /usr/bin/true

    # Skip the header field listing and string tables
    elfsight /usr/bin/true --no-layout --no-strings

    # JSON to stdout
    elfsight /usr/bin/true --json

    # Write a JSON report
    elfsight /usr/bin/true --output report.json

Exit status:
    0  analysis completed without structural errors
    1  I/O error or file too large
    2  not an ELF file
    3  unsupported layout (not ELF64, bad encoding, bad entry size)
    4  truncated file header
    5  out-of-bounds table
    6  malformed string table

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys

import click
from rich.markup import escape

from shared.config import SightConfig
from shared.console import SightConsole
from shared.logger import SightLogger

from elfsight import __version__
from elfsight.core.engine import ElfEngine
from elfsight.core.errors import ElfError
from elfsight.output.console import ElfConsoleOutput
from elfsight.output.report import ElfReportGenerator


# ---------------------------------------------------------------------------
# CLI command
# ---------------------------------------------------------------------------

@click.command("elfsight", context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this path.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Output results as JSON to stdout.",
)
@click.option(
    "--no-layout",
    is_flag=True,
    default=False,
    help="Do not print the header field listing.",
)
@click.option(
    "--no-strings",
    is_flag=True,
    default=False,
    help="Do not print string table contents.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file (TOML).  Default: config.toml in the project root.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable verbose/debug output.",
)
@click.version_option(__version__, "--version", "-V", prog_name="elfsight")
def elfsight_cli(
    path: str,
    output_path: str | None,
    json_output: bool,
    no_layout: bool,
    no_strings: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """ElfSight -- ELF64 Binary Format Analyzer.

    Validate and decode the identification, file header, program headers,
    section headers and string tables of an ELF64 file.

    PATH is the path to the ELF file to analyse.

    Examples:

    \b
        # Full analysis
        elfsight /usr/bin/true

    \b
        # JSON report
        elfsight libc.so.6 --output report.json
    """
    err_console = SightConsole(stderr=True)

    try:
        config = SightConfig.load(config_path)
    except (OSError, ValueError) as exc:
        err_console.error(escape(f"Cannot load configuration: {exc}"))
        sys.exit(1)

    settings = config.global_settings
    log_options = {
        "log_level": "DEBUG" if verbose or settings.debug else settings.log_level,
        "log_file": settings.log_file,
        "json_logs": settings.log_json,
        # stderr logging only with --verbose
        "console_output": verbose,
    }
    logger = SightLogger("cli", **log_options)
    engine = ElfEngine(config=config, logger=SightLogger("engine", **log_options))

    try:
        with logger.timed(f"analysis of {path}"):
            analysis = engine.analyze_file(path)
    except ElfError as exc:
        logger.error("Analysis failed: %s", exc.describe(), kind=exc.kind)
        err_console.error(escape(exc.describe()))
        sys.exit(exc.exit_code)
    except OSError as exc:
        err_console.error(escape(f"Cannot read {path}: {exc}"))
        sys.exit(1)

    as_json = json_output or config.elfsight.output_format.lower() == "json"
    report_gen = ElfReportGenerator()

    if as_json:
        click.echo(report_gen.to_json(analysis))
    else:
        output_display = ElfConsoleOutput(
            console=SightConsole(),
            show_layout=config.elfsight.show_layout and not no_layout,
            show_strings=config.elfsight.show_strings and not no_strings,
            max_strings=config.elfsight.max_strings_per_table,
        )
        output_display.display(analysis)

    if output_path:
        report_path = report_gen.generate_json(analysis, output_path)
        err_console.success(escape(f"JSON report saved: {report_path}"))

    if not analysis.ok:
        sys.exit(analysis.exit_code)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfsight`` console script."""
    elfsight_cli()


if __name__ == "__main__":
    main()
