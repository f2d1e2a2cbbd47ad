"""
ElfSight Module Entry Point
============================

Allows running the ElfSight CLI via: python -m elfsight
"""

from elfsight.cli import main

if __name__ == "__main__":
    main()
