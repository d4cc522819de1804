"""Filename metadata decoding, converter flags, and symbol naming.

WHY: The core package is the pure half of the converter. Nothing in
here spawns a process or touches the file system beyond path math, so
every rule of the filename grammar can be tested in isolation.

HOW: descriptor.py defines the decoded metadata, metadata.py parses
it from a filename, flags.py maps it to converter arguments, and
symbols.py derives linker symbol names from the asset's logical path.

RULES:
- GfxDescriptor is the contract between parsing and everything else
- No module in core/ imports from toolchain/ or pipeline
"""
