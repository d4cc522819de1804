"""Logical-path anchoring and linker symbol derivation.

WHY: Each blob inside the final object file needs a linker-visible name
that game code can reference, e.g. ``sprites_hero_gfx``. The name must
come from where the asset lives in the data tree, not from where the
build happened to run, so builds are reproducible across machines.

HOW: resolve_logical_components() anchors the input path at the last
``data/`` segment (or, failing that, the working directory) and drops
the metadata extension. derive_symbol() sanitises the components, joins
them with ``_``, and appends a per-kind, per-compression suffix tag.

RULES:
- Anchor: components after the LAST data-root segment; else relative to
  cwd; else PathResolutionError
- The last component is cut at its first ``.``
- Characters outside [A-Za-z0-9_] become ``_``; a leading digit gets a
  ``_`` prefix
- Suffix tags are distinct for all six (kind, compressed) pairs
- No randomness, no timestamps, no temporary paths in any symbol
"""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePath
from typing import Sequence

from gfx2o.config import DEFAULT_DATA_ROOT
from gfx2o.core.descriptor import OutputKind

SYMBOL_JOINER = "_"

SYMBOL_SUFFIXES = {
    (OutputKind.IMAGE, False): "_gfx",
    (OutputKind.IMAGE, True): "_gfx_lz77",
    (OutputKind.MAP, False): "_map",
    (OutputKind.MAP, True): "_map_lz77",
    (OutputKind.PALETTE, False): "_pal",
    (OutputKind.PALETTE, True): "_pal_lz77",
}

_INVALID_SYMBOL_CHARS = re.compile(r"[^A-Za-z0-9_]")


class PathResolutionError(ValueError):
    """Raised when an input path cannot be anchored to the data root."""


def resolve_logical_components(
    input_path: str | os.PathLike,
    cwd: str | os.PathLike | None = None,
    data_root: str = DEFAULT_DATA_ROOT,
) -> list[str]:
    """Compute the asset's logical path components for symbol naming.

    Args:
        input_path: Path to the asset as given on the command line.
        cwd: Directory used as the fallback anchor (default: Path.cwd()).
        data_root: Directory segment name that anchors logical paths.

    Returns:
        Components below the anchor, with the last one stripped of every
        extension, e.g. ``["sprites", "hero"]``.

    Raises:
        PathResolutionError: If neither anchor applies, or nothing is left
            after anchoring.
    """
    parts = PurePath(input_path).parts

    anchored = None
    # Directory segments only; the file name itself never anchors.
    for index in range(len(parts) - 2, -1, -1):
        if parts[index] == data_root:
            anchored = list(parts[index + 1:])
            break

    if anchored is None:
        base = Path(cwd) if cwd is not None else Path.cwd()
        absolute = Path(os.path.abspath(os.fspath(input_path)))
        try:
            relative = absolute.relative_to(os.path.abspath(os.fspath(base)))
        except ValueError:
            raise PathResolutionError(
                "Cannot resolve '{}' against '{}/' or the working directory '{}'".format(
                    os.fspath(input_path), data_root, base
                )
            ) from None
        anchored = list(relative.parts)

    if anchored:
        anchored[-1] = anchored[-1].split(".", 1)[0]
    anchored = [part for part in anchored if part]

    if not anchored:
        raise PathResolutionError(
            "No symbolic name left for '{}' after anchoring".format(os.fspath(input_path))
        )
    return anchored


def sanitize_component(component: str) -> str:
    """Replace characters that are not valid in an assembler symbol."""
    return _INVALID_SYMBOL_CHARS.sub("_", component)


def symbol_base(components: Sequence[str]) -> str:
    """Join sanitised components into the shared symbol stem."""
    base = SYMBOL_JOINER.join(sanitize_component(c) for c in components)
    if base[:1].isdigit():
        base = "_" + base
    return base


def derive_symbol(components: Sequence[str], kind: OutputKind, compressed: bool) -> str:
    """Derive the linker symbol for one emitted output.

    >>> derive_symbol(["sprites", "hero"], OutputKind.MAP, True)
    'sprites_hero_map_lz77'
    """
    return symbol_base(components) + SYMBOL_SUFFIXES[(kind, compressed)]
