"""Configuration constants, toolchain names, and .env loading.

WHY: The converter drives three external executables whose names and
flags differ between installs (devkit prefixes, custom builds). Keeping
them as plain data, overridable from the environment, means nobody has
to touch pipeline code to point at a different toolchain.

HOW: python-dotenv loads the .env file on import. Defaults are defined
as module-level constants. load_toolchain_config() snapshots the
environment into an immutable ToolchainConfig that the pipeline
receives explicitly.

RULES:
- Every executable name and the assembler CPU flags can be overridden
  via GFX2O_* environment variables
- ToolchainConfig is frozen; a pipeline never mutates its config
- The data-root anchor is a single directory segment name, not a path
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env from the project root (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Toolchain defaults
# ---------------------------------------------------------------------------

DEFAULT_GRIT = "grit"
DEFAULT_BIN2ASM = "bin2asm"
DEFAULT_ASSEMBLER = "arm-none-eabi-as"
DEFAULT_ASSEMBLER_FLAGS = ("-mcpu=arm7tdmi", "-mthumb-interwork")
"""Fixed CPU/ISA pair for the target: ARM7TDMI with ARM/Thumb interworking."""

DEFAULT_DATA_ROOT = "data"
"""Directory segment that anchors an asset's logical (symbolic) path."""

GFX2O_LOG_LEVEL = os.getenv("GFX2O_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

# ---------------------------------------------------------------------------
# Input/output naming
# ---------------------------------------------------------------------------

INPUT_SUFFIX = ".png"
OUTPUT_SUFFIX = ".o"


@dataclass(frozen=True)
class ToolchainConfig:
    """Executable names and fixed flags for the three external stages.

    RULES:
    - converter: image/tileset/tilemap/palette converter (grit)
    - bin2asm: binary blob → assembly fragment converter
    - assembler: cross assembler for the fixed target CPU
    - assembler_flags: tokens passed before ``-o`` on every assembler run
    - data_root: directory segment name used for symbol anchoring
    """

    converter: str = DEFAULT_GRIT
    bin2asm: str = DEFAULT_BIN2ASM
    assembler: str = DEFAULT_ASSEMBLER
    assembler_flags: tuple[str, ...] = DEFAULT_ASSEMBLER_FLAGS
    data_root: str = DEFAULT_DATA_ROOT


def load_toolchain_config() -> ToolchainConfig:
    """Build a ToolchainConfig from the environment (populated by python-dotenv).

    RULES:
    - Reads os.environ at call time, so later overrides are honoured
    - Empty or whitespace-only overrides fall back to the defaults
    - GFX2O_AS_FLAGS is split with shell quoting rules
    """
    as_flags = os.getenv("GFX2O_AS_FLAGS")
    data_root = os.getenv("GFX2O_DATA_ROOT", "").strip().strip("/")

    return ToolchainConfig(
        converter=os.getenv("GFX2O_GRIT", "").strip() or DEFAULT_GRIT,
        bin2asm=os.getenv("GFX2O_BIN2ASM", "").strip() or DEFAULT_BIN2ASM,
        assembler=os.getenv("GFX2O_AS", "").strip() or DEFAULT_ASSEMBLER,
        assembler_flags=(
            tuple(shlex.split(as_flags)) if as_flags is not None
            else DEFAULT_ASSEMBLER_FLAGS
        ),
        data_root=data_root or DEFAULT_DATA_ROOT,
    )
