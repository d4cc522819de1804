"""Shared test fixtures for the gfx2o test suite.

WHY: Pipeline and CLI tests must exercise the full stage sequence
without grit, bin2asm, or an ARM assembler installed. A recording fake
runner stands in for the toolchain and writes the files each tool
would produce, so the pipeline's bookkeeping is tested for real.

HOW: RecordingRunner implements ProcessRunner.run(). It records every
(executable, args) call, creates the converter's blobs, the fragment,
or the object file depending on which tool was "run", and raises
ProcessFailedError for executables listed in fail_on.

RULES:
- The fake never touches paths other than the ones in its arguments
- Tool names match the ToolchainConfig defaults
- Assets are created under tmp_path/data/... so symbol anchoring works
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

from gfx2o.config import ToolchainConfig
from gfx2o.toolchain.runner import ProcessFailedError

OBJECT_BYTES = b"\x7fELF fake object"


class RecordingRunner:
    """Fake ProcessRunner that records calls and simulates tool outputs."""

    def __init__(self, config: ToolchainConfig, fail_on: Sequence[str] = ()) -> None:
        self.config = config
        self.fail_on = set(fail_on)
        self.calls: List[Tuple[str, List[str]]] = []

    @property
    def executables(self) -> List[str]:
        return [exe for exe, _ in self.calls]

    def run(self, executable: str, args: Sequence[str]) -> int:
        args = list(args)
        self.calls.append((executable, args))
        if executable in self.fail_on:
            raise ProcessFailedError(executable, 1, "exited with status 1")

        if executable == self.config.converter:
            base = next(a[2:] for a in args if a.startswith("-o"))
            for flag, suffix in (("-g", ".img.bin"), ("-m", ".map.bin"), ("-p", ".pal.bin")):
                if flag in args:
                    Path(base + suffix).write_bytes(b"\x00" * 32)
        elif executable == self.config.bin2asm:
            blob, fragment, symbol = args
            assert os.path.isfile(blob), "blob missing: {}".format(blob)
            Path(fragment).write_text(".global {0}\n{0}:\n".format(symbol), encoding="utf-8")
        elif executable == self.config.assembler:
            out = args[args.index("-o") + 1]
            for fragment in args[args.index("-o") + 2:]:
                assert os.path.isfile(fragment), "fragment missing: {}".format(fragment)
            Path(out).write_bytes(OBJECT_BYTES)
        return 0


@pytest.fixture
def toolchain_config():
    """Default toolchain configuration, independent of the environment."""
    return ToolchainConfig()


@pytest.fixture
def recording_runner(toolchain_config):
    """A RecordingRunner that succeeds for every tool."""
    return RecordingRunner(toolchain_config)


@pytest.fixture
def runner_factory(toolchain_config):
    """Factory for RecordingRunners, optionally failing on given executables."""

    def _make(
        fail_on: Sequence[str] = (),
        config: Optional[ToolchainConfig] = None,
    ) -> RecordingRunner:
        return RecordingRunner(config or toolchain_config, fail_on=fail_on)

    return _make


@pytest.fixture
def make_asset(tmp_path):
    """Factory creating an (empty) asset file below tmp_path."""

    def _make(relative: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x89PNG\r\n\x1a\n")
        return path

    return _make
