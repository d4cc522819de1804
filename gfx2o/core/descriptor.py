"""Descriptor dataclass for the metadata encoded in an asset filename.

WHY: The filename mini-language (``hero.8t.iml64.png``) is decoded once
and then consumed by the flag builder, the symbol deriver, and the
pipeline. A single immutable descriptor keeps those consumers from
re-parsing the name or disagreeing about defaults.

HOW: GfxDescriptor is a frozen dataclass holding the bit-flags, bit
depth, and palette size. OutputKind enumerates the three things the
converter can emit, in their fixed emission order.

RULES:
- bpp is always one of 1, 4, 8
- palette_size stores the literal requested colour count; 0 = unspecified
- An explicit palette_size is always in [1, 256]
- tile_reduction only has meaning when is_tile_mode is True
- outputs() always yields kinds in the order image → map → palette
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

VALID_BPP = (1, 4, 8)
MAX_PALETTE_SIZE = 256

DEFAULT_PALETTE_COLORS = {8: 256, 4: 16, 1: 2}
"""Full palette for each bit depth, used when no explicit size is given."""


class OutputKind(str, enum.Enum):
    """One kind of data the converter can emit for an asset.

    HOW: Inherits from str so values print and log cleanly.
    Declaration order is the emission order.
    """

    IMAGE = "image"
    MAP = "map"
    PALETTE = "palette"


@dataclass(frozen=True)
class GfxDescriptor:
    """Fully decoded filename metadata for one graphics asset.

    WHY: The flag builder needs every field to pick its tokens, and
    the pipeline needs to know which outputs exist and whether each
    is compressed.

    RULES:
    - Built only by parse_extension(); never partially populated
    - palette_colors resolves an unspecified size to the bpp default
    """

    bpp: int
    is_tile_mode: bool
    tile_reduction: bool = True
    emit_image: bool = False
    image_compressed: bool = False
    emit_map: bool = False
    map_compressed: bool = False
    emit_palette: bool = False
    palette_compressed: bool = False
    palette_size: int = 0

    @property
    def palette_colors(self) -> int:
        """Effective palette colour count (explicit size or bpp default)."""
        if self.palette_size:
            return self.palette_size
        return DEFAULT_PALETTE_COLORS[self.bpp]

    def outputs(self) -> list[tuple[OutputKind, bool]]:
        """Emitted kinds paired with their compression flag, in emission order."""
        selected = [
            (OutputKind.IMAGE, self.emit_image, self.image_compressed),
            (OutputKind.MAP, self.emit_map, self.map_compressed),
            (OutputKind.PALETTE, self.emit_palette, self.palette_compressed),
        ]
        return [(kind, compressed) for kind, emitted, compressed in selected if emitted]

    def describe(self) -> str:
        """Short human-readable summary, used in log lines."""
        layout = "tile" if self.is_tile_mode else "bitmap"
        if self.is_tile_mode and not self.tile_reduction:
            layout += " (no reduction)"
        parts = []
        for kind, compressed in self.outputs():
            parts.append(kind.value + ("+lz77" if compressed else ""))
        summary = "{}bpp {}, outputs: {}".format(self.bpp, layout, ", ".join(parts))
        if self.emit_palette:
            summary += ", {} colours".format(self.palette_colors)
        return summary
