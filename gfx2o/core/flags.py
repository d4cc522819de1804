"""Argument builder for the first-stage image converter (grit).

WHY: Every descriptor field maps to exactly one converter flag. Keeping
that mapping in one table-driven module makes the encoding auditable:
no flag is emitted twice, none is silently dropped.

HOW: build_converter_args() walks the three output groups (image, map,
palette) in a fixed order. Each group emits a disabling token when its
output is off, or an enabling token followed by its option tokens when
it is on. Fixed trailing tokens and the output base close the list.

RULES:
- The input path is always the first token
- Image group: -g, -gzl|-gz!, -gt|-gb, -gB<bpp>; or -g!
- Map group: -m, -mzl|-mz!, -mRtf|-mR!; or -m!
- Palette group: -p, -pzl|-pz!, -pn<colours>; or -p!
- -pn carries the effective colour count in plain decimal (no padding)
- Trailing: -ftb (raw binary blobs), -fh! (no header), -o<output_base>
- Total over any valid descriptor; never raises
"""

from __future__ import annotations

import os

from gfx2o.core.descriptor import GfxDescriptor, OutputKind

FIXED_TRAILING_FLAGS = ("-ftb", "-fh!")
"""Raw binary output, one blob per emitted kind; suppress the C header."""

BLOB_SUFFIXES = {
    OutputKind.IMAGE: ".img.bin",
    OutputKind.MAP: ".map.bin",
    OutputKind.PALETTE: ".pal.bin",
}
"""File suffixes the converter appends to the output base in -ftb mode."""


def _compression_flag(prefix: str, compressed: bool) -> str:
    return "-{}zl".format(prefix) if compressed else "-{}z!".format(prefix)


def _image_flags(desc: GfxDescriptor) -> list[str]:
    if not desc.emit_image:
        return ["-g!"]
    return [
        "-g",
        _compression_flag("g", desc.image_compressed),
        "-gt" if desc.is_tile_mode else "-gb",
        "-gB{}".format(desc.bpp),
    ]


def _map_flags(desc: GfxDescriptor) -> list[str]:
    if not desc.emit_map:
        return ["-m!"]
    return [
        "-m",
        _compression_flag("m", desc.map_compressed),
        "-mRtf" if desc.tile_reduction else "-mR!",
    ]


def _palette_flags(desc: GfxDescriptor) -> list[str]:
    if not desc.emit_palette:
        return ["-p!"]
    return [
        "-p",
        _compression_flag("p", desc.palette_compressed),
        "-pn{:d}".format(desc.palette_colors),
    ]


def build_converter_args(
    desc: GfxDescriptor,
    input_path: str | os.PathLike,
    output_base: str | os.PathLike,
) -> list[str]:
    """Map a descriptor to the converter's ordered argument list.

    Args:
        desc: Parsed filename metadata.
        input_path: Source PNG path, passed through unchanged.
        output_base: Path prefix for the converter's binary blobs.

    Returns:
        A new list of argument tokens (without the executable name).
    """
    args = [os.fspath(input_path)]
    args.extend(_image_flags(desc))
    args.extend(_map_flags(desc))
    args.extend(_palette_flags(desc))
    args.extend(FIXED_TRAILING_FLAGS)
    args.append("-o{}".format(os.fspath(output_base)))
    return args


def blob_path(output_base: str | os.PathLike, kind: OutputKind) -> str:
    """Path of the binary blob the converter writes for one output kind."""
    return os.fspath(output_base) + BLOB_SUFFIXES[kind]
