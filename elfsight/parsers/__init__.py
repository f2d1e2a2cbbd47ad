"""
ElfSight Parsers
=================

Bounds-checked decoders for the ELF64 identification, file header,
program header table, section header table and string tables.
"""
