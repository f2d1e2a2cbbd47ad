"""
ElfSight Shared Module
======================

Configuration, logging and console utilities shared by the ElfSight tool.
"""

from shared.config import SightConfig

__all__ = ["SightConfig"]
