"""Argument lists for the second-stage converter and the assembler.

WHY: The exact argv of each external tool is a fixed wire contract.
Building it in small pure functions keeps the pipeline free of string
fiddling and lets tests assert the contract directly.

RULES:
- bin2asm: ``<blob> <fragment.s> <symbol>``
- assembler: ``<cpu flags...> -o <object> <fragment.s...>``
- Fragments are passed in the order given (image → map → palette)
"""

from __future__ import annotations

import os
from typing import Sequence

from gfx2o.config import ToolchainConfig


def bin2asm_args(blob: str | os.PathLike, fragment: str | os.PathLike, symbol: str) -> list[str]:
    return [os.fspath(blob), os.fspath(fragment), symbol]


def assembler_args(
    config: ToolchainConfig,
    object_path: str | os.PathLike,
    fragments: Sequence[str | os.PathLike],
) -> list[str]:
    args = list(config.assembler_flags)
    args.extend(["-o", os.fspath(object_path)])
    args.extend(os.fspath(f) for f in fragments)
    return args
