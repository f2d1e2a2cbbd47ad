"""
ElfSight Console Interface
===========================

Rich-powered console abstraction used by the presentation layer.

Wraps :class:`rich.console.Console` and adds helpers for banners, section
rules, severity-coloured messages, panels and tables, all with one
consistent theme.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

_SIGHT_THEME = Theme(
    {
        "sight.banner": "bold bright_cyan",
        "sight.section": "bold bright_magenta",
        "sight.success": "bold green",
        "sight.warning": "bold yellow",
        "sight.error": "bold red",
        "sight.info": "bold bright_blue",
        "sight.dim": "dim white",
        "sight.highlight": "bold bright_white",
    }
)


class SightConsole:
    """Unified console interface for ElfSight output.

    Usage::

        con = SightConsole()
        con.section("Program Headers")
        con.table("Segments", ["Type", "Flags"], rows)
        con.warning("padding bytes are not zero")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        stderr: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (library / test mode).
            record: Keep rendered output for :meth:`export_text`.
            stderr: Write to stderr instead of stdout.
            width:  Fixed terminal width (``None`` autodetects).
        """
        self._console = Console(
            theme=_SIGHT_THEME,
            quiet=quiet,
            record=record,
            stderr=stderr,
            width=width,
            highlight=False,
        )

    def banner(self, title: str, subtitle: str = "") -> None:
        """Display a framed title panel."""
        body = f"[sight.banner]{title}[/sight.banner]"
        if subtitle:
            body += f"\n[sight.dim]{subtitle}[/sight.dim]"
        self._console.print(Panel(body, border_style="bright_cyan", expand=False))

    def section(self, title: str) -> None:
        """Print a section rule."""
        self._console.rule(f"  {title}  ", style="sight.section", characters="─")
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(f"[sight.success][✔] SUCCESS:[/sight.success] {message}")

    def warning(self, message: str) -> None:
        self._console.print(f"[sight.warning][⚠] WARNING:[/sight.warning] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[sight.error][✘] ERROR:[/sight.error] {message}")

    def info(self, message: str) -> None:
        self._console.print(f"[sight.info][ℹ] INFO:[/sight.info] {message}")

    # ------------------------------------------------------------------ #
    #  Tables and panels
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        justify: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:   Table title.
            columns: Column header labels.
            rows:    Row tuples; each cell is stringified and markup-escaped.
            caption: Optional footer caption.
            justify: Optional per-column justification
                     (``"left"``, ``"right"``, ``"center"``).
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            just = justify[idx] if justify and idx < len(justify) else "left"
            tbl.add_column(col_name, justify=just)  # type: ignore[arg-type]

        for row in rows:
            tbl.add_row(*(escape(str(cell)) for cell in row))

        self._console.print(tbl)

    def panel(self, lines: Sequence[str], title: str) -> None:
        """Render *lines* in a titled panel."""
        self._console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold bright_cyan]{title}[/bold bright_cyan]",
                border_style="bright_cyan",
                expand=False,
            )
        )

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def divider(self, style: str = "dim") -> None:
        self._console.rule(style=style)

    def export_text(self) -> str:
        """Export recorded output as plain text (requires ``record=True``)."""
        return self._console.export_text()
