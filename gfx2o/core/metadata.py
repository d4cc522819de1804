"""Parser for the graphics metadata encoded in an asset's filename.

WHY: Assets carry their conversion settings in the name itself, e.g.
``hero.8t.iml64.png``: 8bpp tiles; emit image, compressed map, and a
64-colour palette. The build needs one unambiguous decoder for that
mini-language so every asset converts the same way on every machine.

HOW: The base name is split on ``.``. The second-to-last segment is the
output selector, the third-to-last is the form field. Each field is
decoded by its own helper, and the results are combined into one
frozen GfxDescriptor at the end, so an error never leaks a half-built
descriptor.

RULES:
- Fewer than 3 dot-segments → TOO_FEW_SEGMENTS
- Output selector: letters from {i, m, p, l} followed by optional digits
  - ``l`` compresses the output named by the letter right before it
  - ``l`` without a preceding i/m/p, a repeated letter, an empty
    selection, or an unknown letter → INVALID_OUTPUT_SELECTOR
  - Trailing digits are the palette size; 0 or absent = unspecified;
    above 256 → INVALID_OUTPUT_SELECTOR
- Form field: bpp digit, layout letter, optional ``n``
  - length < 2, bad layout, or unexpected trailing text → INVALID_FORM
  - bpp not in {1, 4, 8} → INVALID_BIT_DEPTH
  - ``n`` disables tile reduction for tile layout only; it is accepted
    and ignored for bitmap layout
- Pure: only the name is inspected, never the file system
"""

from __future__ import annotations

import enum
import os
import re

from gfx2o.core.descriptor import MAX_PALETTE_SIZE, GfxDescriptor

_TRAILING_DIGITS = re.compile(r"^(?P<letters>.*?)(?P<digits>[0-9]*)$")

_BPP_CHARS = {"1": 1, "4": 4, "8": 8}
_LAYOUT_CHARS = {"b": False, "t": True}
_NO_REDUCTION_CHAR = "n"
_COMPRESS_CHAR = "l"
_EMIT_CHARS = ("i", "m", "p")


class ParseErrorKind(str, enum.Enum):
    """Sub-kinds of malformed extension metadata."""

    TOO_FEW_SEGMENTS = "too_few_segments"
    INVALID_OUTPUT_SELECTOR = "invalid_output_selector"
    INVALID_FORM = "invalid_form"
    INVALID_BIT_DEPTH = "invalid_bit_depth"


class ExtensionMetadataError(ValueError):
    """Raised when a filename's metadata extension cannot be decoded.

    WHY: The CLI maps every metadata problem to one exit code, but tests
    and log lines need to know exactly which rule was broken.

    RULES:
    - kind is always a ParseErrorKind
    - The message starts with the kind's value
    """

    def __init__(self, kind: ParseErrorKind, detail: str) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__("{}: {}".format(kind.value, detail))


def parse_extension(path: str | os.PathLike) -> GfxDescriptor:
    """Decode the metadata extension of an asset filename.

    Args:
        path: Asset path or bare filename, e.g.
              ``data/sprites/hero.8t.iml64.png``. Only the base name is
              inspected.

    Returns:
        A fully populated GfxDescriptor.

    Raises:
        ExtensionMetadataError: If the extension breaks the grammar.
    """
    name = os.path.basename(os.fspath(path))
    segments = name.split(".")
    if len(segments) < 3:
        raise ExtensionMetadataError(
            ParseErrorKind.TOO_FEW_SEGMENTS,
            "'{}' needs <form>.<outputs>.<ext> segments".format(name),
        )

    outputs = _parse_output_selector(segments[-2])
    bpp, is_tile, reduce = _parse_form(segments[-3])

    return GfxDescriptor(bpp=bpp, is_tile_mode=is_tile, tile_reduction=reduce, **outputs)


def _parse_output_selector(field: str) -> dict:
    """Decode the output selector into GfxDescriptor keyword arguments."""
    match = _TRAILING_DIGITS.match(field)
    letters = match.group("letters")
    digits = match.group("digits")

    emitted: dict[str, bool] = {}
    compressed: dict[str, bool] = {}
    previous = None

    for ch in letters:
        if ch in _EMIT_CHARS:
            if ch in emitted:
                raise ExtensionMetadataError(
                    ParseErrorKind.INVALID_OUTPUT_SELECTOR,
                    "output '{}' selected twice in '{}'".format(ch, field),
                )
            emitted[ch] = True
            previous = ch
        elif ch == _COMPRESS_CHAR:
            if previous is None:
                raise ExtensionMetadataError(
                    ParseErrorKind.INVALID_OUTPUT_SELECTOR,
                    "'l' must follow i, m or p in '{}'".format(field),
                )
            compressed[previous] = True
            previous = None
        else:
            raise ExtensionMetadataError(
                ParseErrorKind.INVALID_OUTPUT_SELECTOR,
                "invalid output selector '{}' in '{}'".format(ch, field),
            )

    if not emitted:
        raise ExtensionMetadataError(
            ParseErrorKind.INVALID_OUTPUT_SELECTOR,
            "no outputs selected in '{}'".format(field),
        )

    palette_size = int(digits) if digits else 0
    if palette_size > MAX_PALETTE_SIZE:
        raise ExtensionMetadataError(
            ParseErrorKind.INVALID_OUTPUT_SELECTOR,
            "palette size {} exceeds {}".format(palette_size, MAX_PALETTE_SIZE),
        )

    return {
        "emit_image": "i" in emitted,
        "image_compressed": "i" in compressed,
        "emit_map": "m" in emitted,
        "map_compressed": "m" in compressed,
        "emit_palette": "p" in emitted,
        "palette_compressed": "p" in compressed,
        "palette_size": palette_size,
    }


def _parse_form(field: str) -> tuple[int, bool, bool]:
    """Decode the form field into (bpp, is_tile_mode, tile_reduction)."""
    if len(field) < 2:
        raise ExtensionMetadataError(
            ParseErrorKind.INVALID_FORM,
            "invalid form field '{}'".format(field),
        )

    bpp = _BPP_CHARS.get(field[0])
    if bpp is None:
        raise ExtensionMetadataError(
            ParseErrorKind.INVALID_BIT_DEPTH,
            "invalid image bpp '{}'".format(field[0]),
        )

    is_tile = _LAYOUT_CHARS.get(field[1])
    if is_tile is None:
        raise ExtensionMetadataError(
            ParseErrorKind.INVALID_FORM,
            "invalid image form '{}'".format(field[1]),
        )

    rest = field[2:]
    if rest not in ("", _NO_REDUCTION_CHAR):
        raise ExtensionMetadataError(
            ParseErrorKind.INVALID_FORM,
            "unexpected '{}' after form '{}'".format(rest, field[:2]),
        )

    reduce = not (is_tile and rest == _NO_REDUCTION_CHAR)
    return bpp, is_tile, reduce
