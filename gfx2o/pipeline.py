"""Conversion pipeline: filename metadata → grit → bin2asm → assembler.

WHY: Turning one PNG into one object file takes three external tools
run in sequence, with symbol naming and intermediate-file bookkeeping
between them. Modelling that as an explicit state machine makes the
stage order testable and makes "any stage can fail" visible in one
table instead of scattered conditionals.

HOW: Gfx2oPipeline.run() walks the states
  parsing → converting → per_output (once per emitted kind) → assembling → done
with ``failed`` reachable from every non-terminal state. All
intermediates live in a TemporaryDirectory scoped to the run. The
assembler writes into that directory; the object is only published to
the requested path after the assembler succeeded, via a sibling
temporary file and os.replace().

RULES:
- Stages run strictly one after another; each blocks on its child
- Per-output order is always image → map → palette
- Any failure aborts all later stages and is re-raised unchanged
- The temporary directory is removed on every exit path
- No temporary path ends up in a symbol name or the output path
- A failed run never leaves a partial object file at the output path
- A pipeline instance holds only immutable configuration; concurrent
  runs (in separate processes) share nothing
"""

from __future__ import annotations

import enum
import logging
import os
import shutil
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from gfx2o.config import ToolchainConfig, load_toolchain_config
from gfx2o.core.descriptor import GfxDescriptor
from gfx2o.core.flags import blob_path, build_converter_args
from gfx2o.core.metadata import parse_extension
from gfx2o.core.symbols import derive_symbol, resolve_logical_components
from gfx2o.toolchain.commands import assembler_args, bin2asm_args
from gfx2o.toolchain.runner import ProcessRunner

logger = logging.getLogger(__name__)

# Name of the converter's output base and the staged object inside the
# run's temporary directory. Fixed, so nothing depends on the input name.
_INTERMEDIATE_STEM = "asset"


class PipelineState(str, enum.Enum):
    """States of a single conversion run.

    RULES:
    - parsing: decoding the filename metadata and anchoring the path
    - converting: running the image converter
    - per_output: turning one emitted blob into an assembly fragment
    - assembling: assembling all fragments into the object file
    - done / failed: terminal
    """

    PARSING = "parsing"
    CONVERTING = "converting"
    PER_OUTPUT = "per_output"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.PARSING: frozenset({PipelineState.CONVERTING, PipelineState.FAILED}),
    PipelineState.CONVERTING: frozenset({PipelineState.PER_OUTPUT, PipelineState.FAILED}),
    PipelineState.PER_OUTPUT: frozenset(
        {PipelineState.PER_OUTPUT, PipelineState.ASSEMBLING, PipelineState.FAILED}
    ),
    PipelineState.ASSEMBLING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}
"""Allowed state changes. A parsed descriptor always emits at least one
output, so converting never jumps straight to assembling."""


@dataclass
class PipelineResult:
    """Outcome of a successful run.

    RULES:
    - symbols: one per emitted output, in emission order
    - states: every state visited, starting with PARSING, ending with DONE
    """

    descriptor: GfxDescriptor
    symbols: list[str]
    output_path: Path
    states: list[PipelineState] = field(default_factory=list)


class _StateTracker:
    """Records and validates state changes for one run."""

    def __init__(self, on_state: Callable[[PipelineState], None] | None) -> None:
        self._on_state = on_state
        self.history: list[PipelineState] = []
        self._enter(PipelineState.PARSING)

    @property
    def current(self) -> PipelineState:
        return self.history[-1]

    def advance(self, new_state: PipelineState) -> None:
        if new_state not in TRANSITIONS[self.current]:
            raise RuntimeError(
                "Illegal pipeline transition {} → {}".format(
                    self.current.value, new_state.value
                )
            )
        self._enter(new_state)

    def fail(self) -> None:
        if TRANSITIONS[self.current]:
            self._enter(PipelineState.FAILED)

    def _enter(self, state: PipelineState) -> None:
        self.history.append(state)
        logger.info("Pipeline state: %s", state.value)
        if self._on_state:
            self._on_state(state)


class Gfx2oPipeline:
    """Convert one PNG asset into one object file via the external toolchain.

    Args:
        config: Toolchain names and flags (default: from the environment).
        runner: Process runner (default: a real ProcessRunner).
        cwd: Fallback anchor for symbol naming (default: Path.cwd()).
    """

    def __init__(
        self,
        config: ToolchainConfig | None = None,
        runner: ProcessRunner | None = None,
        cwd: str | os.PathLike | None = None,
    ) -> None:
        self.config = config or load_toolchain_config()
        self.runner = runner or ProcessRunner()
        self.cwd = cwd

    def run(
        self,
        input_path: str | os.PathLike,
        output_path: str | os.PathLike,
        on_state: Callable[[PipelineState], None] | None = None,
    ) -> PipelineResult:
        """Run every stage for one asset.

        Args:
            input_path: Source PNG carrying the metadata extension.
            output_path: Object file to produce.
            on_state: Optional callback invoked with each state entered.

        Returns:
            PipelineResult describing the finished run.

        Raises:
            PathResolutionError: Input cannot be anchored for naming.
            ExtensionMetadataError: Filename metadata is malformed.
            ProcessFailedError: Any external tool failed.
            OSError: Temporary or output files could not be written.
        """
        tracker = _StateTracker(on_state)
        output = Path(output_path)

        try:
            descriptor = parse_extension(input_path)
            components = resolve_logical_components(
                input_path, cwd=self.cwd, data_root=self.config.data_root
            )
            logger.info("%s: %s", os.fspath(input_path), descriptor.describe())

            symbols: list[str] = []
            with tempfile.TemporaryDirectory(prefix="gfx2o_") as tmp:
                output_base = os.path.join(tmp, _INTERMEDIATE_STEM)

                tracker.advance(PipelineState.CONVERTING)
                self.runner.run(
                    self.config.converter,
                    build_converter_args(descriptor, input_path, output_base),
                )

                fragments: list[str] = []
                for kind, compressed in descriptor.outputs():
                    tracker.advance(PipelineState.PER_OUTPUT)
                    symbol = derive_symbol(components, kind, compressed)
                    fragment = os.path.join(tmp, symbol + ".s")
                    self.runner.run(
                        self.config.bin2asm,
                        bin2asm_args(blob_path(output_base, kind), fragment, symbol),
                    )
                    logger.info("Emitted %s as %s", kind.value, symbol)
                    symbols.append(symbol)
                    fragments.append(fragment)

                tracker.advance(PipelineState.ASSEMBLING)
                staged = os.path.join(tmp, _INTERMEDIATE_STEM + ".o")
                self.runner.run(
                    self.config.assembler,
                    assembler_args(self.config, staged, fragments),
                )
                _publish(staged, output)

            tracker.advance(PipelineState.DONE)
        except Exception:
            logger.warning("Pipeline failed in state %s", tracker.current.value)
            tracker.fail()
            raise

        return PipelineResult(
            descriptor=descriptor,
            symbols=symbols,
            output_path=output,
            states=list(tracker.history),
        )


def _publish(staged: str, output: Path) -> None:
    """Move the finished object into place without exposing a partial file.

    HOW: Copy into a hidden temporary sibling of the output (same
    directory, so same file system), give it the staged file's
    permission bits (mkstemp creates it 0600), then os.replace() it
    over the output. The sibling is removed if anything goes wrong.
    """
    fd, partial = tempfile.mkstemp(
        dir=output.parent, prefix=".{}.".format(output.name), suffix=".part"
    )
    os.close(fd)
    try:
        shutil.copyfile(staged, partial)
        shutil.copymode(staged, partial)
        os.replace(partial, output)
    except BaseException:
        if os.path.exists(partial):
            os.remove(partial)
        raise
