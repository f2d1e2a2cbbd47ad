"""
ElfSight Configuration Management
==================================

Configuration for the ElfSight toolkit using Python dataclasses and
TOML-based persistence.

Configuration is kept separate from code (Twelve-Factor App, Wiggins 2011):
defaults live in the dataclasses below and an optional ``config.toml``
overrides them per section.

Example ``config.toml``::

    [global]
    log_level = "DEBUG"
    log_file = "logs/elfsight.log"
    log_json = true

    [elfsight]
    max_file_size = 104857600
    show_layout = false

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Tool-Specific Config ===========================


@dataclass(frozen=False, slots=True)
class ElfsightConfig:
    """Configuration for the ELF64 analyzer.

    Controls the input size limit and which parts of an analysis the
    presentation layer renders.
    """

    max_file_size: int = 268_435_456  # 256 MiB
    show_layout: bool = True
    show_strings: bool = True
    max_strings_per_table: int = 64
    output_format: str = "console"


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging and general operational settings."""

    log_level: str = "INFO"
    log_file: str | None = None
    log_json: bool = False
    debug: bool = False
    version: str = "0.1.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class SightConfig:
    """Master configuration aggregating global and tool settings.

    Usage:
        >>> config = SightConfig.load()                  # from default path
        >>> config = SightConfig.load("custom.toml")     # from custom path
        >>> config.elfsight.show_layout
        True
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    elfsight: ElfsightConfig = field(default_factory=ElfsightConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> SightConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root and falls back to defaults when it is absent.  Missing
        keys fall back to dataclass defaults.

        Raises:
            FileNotFoundError: If *path* was given explicitly and does not
                exist.
            tomllib.TOMLDecodeError: If the file is not valid TOML.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            elfsight=cls._build_section(ElfsightConfig, raw.get("elfsight", {})),
        )

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate dataclass *cls* from the keys it declares.

        Unknown keys are ignored so newer config files keep loading.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

