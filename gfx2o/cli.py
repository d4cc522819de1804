"""Command-line interface for the gfx2o converter.

WHY: Build systems invoke the converter once per asset, e.g. from a
make rule ``%.o: %.png``. The CLI validates the invocation, derives the
default output name, runs the pipeline, and maps every failure to a
stable exit code the build system can rely on.

HOW: Uses argparse to accept an input PNG, an optional output path,
and a verbosity flag. Leftover arguments are rejected with exit 127.
Gfx2oPipeline does the work; its exceptions are translated into
``Error: ...`` lines on stderr and an exit code.

RULES:
- No arguments, -h or --help: print usage (with the grammar) and exit 0
- Input ``-`` (stdin) is rejected, exit 2
- Input must end in .png, exit 2 otherwise
- Default output: input directory + name before the first dot + ``.o``
- More than one extra argument: exit 127
- Path-resolution errors: exit 2; metadata errors: exit 127;
  toolchain or file-system failures: exit 1
- Status and error output goes to stderr
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from gfx2o import __version__
from gfx2o.config import GFX2O_LOG_LEVEL, INPUT_SUFFIX, OUTPUT_SUFFIX
from gfx2o.core.metadata import ExtensionMetadataError
from gfx2o.core.symbols import PathResolutionError
from gfx2o.pipeline import Gfx2oPipeline
from gfx2o.toolchain.runner import ProcessFailedError

EXIT_OK = 0
EXIT_TOOL_FAILURE = 1
EXIT_USAGE = 2
EXIT_METADATA = 127

HELP_EPILOG = r"""
Takes a PNG file <input>, runs it through grit, tags every emitted blob
with a linker symbol, and assembles the result into one object file.

All conversion settings come from the file extension:

    <name>.<form>.<outputs>.png
    regex: \.[148](tn?|b)\.(il?)?(ml?)?(pl?)?([0-9]{1,3})?\.png$

form     bits per pixel (1, 4 or 8), then 't' for tiles or 'b' for a
         bitmap. 'tn' converts tiles without tile reduction.
outputs  which outputs to emit: 'i' image/tileset, 'm' tilemap,
         'p' palette. An 'l' right after a letter compresses that
         output with LZ77. Trailing digits give the exact palette size
         (1-256) instead of the maximum for the bit depth.

Symbols are named after the path below the last 'data/' directory (or
the working directory), e.g. data/sprites/hero.8t.iml64.png defines
sprites_hero_gfx, sprites_hero_map_lz77 and sprites_hero_pal.

Toolchain executables can be overridden with GFX2O_GRIT, GFX2O_BIN2ASM,
GFX2O_AS and GFX2O_AS_FLAGS (also read from a .env file).
"""


class UsageError(Exception):
    """Raised when the command line has the wrong shape."""


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str, code: int) -> None:
    print("Error: {}".format(msg), file=sys.stderr, flush=True)
    sys.exit(code)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, GFX2O_LOG_LEVEL, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def default_output_path(input_path: Path) -> Path:
    """Derive the default object path: strip every extension, add ``.o``.

    ``data/sprites/hero.8t.iml64.png`` → ``data/sprites/hero.o``
    """
    stem = input_path.name.split(".", 1)[0]
    return input_path.with_name(stem + OUTPUT_SUFFIX)


def resolve_paths(input_arg: str, output_arg: Optional[str]) -> Tuple[Path, Path]:
    """Validate the input/output arguments and return their paths.

    Raises:
        UsageError: For stdin input, a non-PNG input, a missing input
            file, or an output directory that does not exist.
    """
    if input_arg == "-":
        raise UsageError("Cannot read from standard input")

    if not input_arg.endswith(INPUT_SUFFIX):
        raise UsageError("Input '{}' is not a {} file".format(input_arg, INPUT_SUFFIX))

    input_path = Path(input_arg)
    if not input_path.is_file():
        raise UsageError("File not found: {}".format(input_path))

    output_path = Path(output_arg) if output_arg else default_output_path(input_path)
    if not output_path.parent.is_dir():
        raise UsageError("Output directory does not exist: {}".format(output_path.parent))

    return input_path, output_path


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: input_file (required), output_file (optional)
    - Optional: -v/--verbose, --version
    """
    parser = argparse.ArgumentParser(
        prog="gfx2o",
        description="PNG graphics to object code converter.",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "input_file",
        help="PNG asset whose name carries the conversion metadata.",
    )

    parser.add_argument(
        "output_file",
        nargs="?",
        default=None,
        help="Object file to write (default: input name up to the first dot + .o).",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every stage and command line to stderr.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Returns normally on success; exits via SystemExit otherwise
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    if not argv:
        parser.print_help()
        return

    args, extras = parser.parse_known_args(argv)
    _configure_logging(args.verbose)

    if extras:
        _fail("Too many arguments: {}".format(" ".join(extras)), EXIT_METADATA)

    try:
        input_path, output_path = resolve_paths(args.input_file, args.output_file)
    except UsageError as e:
        _fail(str(e), EXIT_USAGE)

    pipeline = Gfx2oPipeline()

    try:
        result = pipeline.run(input_path, output_path)
    except PathResolutionError as e:
        _fail(str(e), EXIT_USAGE)
    except ExtensionMetadataError as e:
        _fail("Parsing of gfx file extension metadata failed ({})".format(e), EXIT_METADATA)
    except ProcessFailedError as e:
        _fail(str(e), EXIT_TOOL_FAILURE)
    except OSError as e:
        _fail(str(e), EXIT_TOOL_FAILURE)

    _status("Wrote {} ({})".format(result.output_path, ", ".join(result.symbols)))


if __name__ == "__main__":
    main()
