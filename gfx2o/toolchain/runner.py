"""Synchronous runner for external toolchain executables.

WHY: All three pipeline stages are child processes. Spawning, waiting,
and deciding success should happen in exactly one place so no call
site re-derives that logic or treats failures differently.

HOW: ProcessRunner.run() calls subprocess.run() with the argument list
and waits for the child. Launch errors, signal termination, and nonzero
exits are all collapsed into ProcessFailedError.

RULES:
- Success only when the child launched AND exited with status 0
- Callers cannot tell "not found" from "ran and failed" by type; the
  returncode attribute is None when the child never launched
- No retries, no timeout; the call blocks until the child exits
- stdout/stderr are inherited, not captured
- The argument list is copied; the caller's list is never kept
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Sequence

logger = logging.getLogger(__name__)


class ProcessFailedError(RuntimeError):
    """Raised when an external executable fails to launch or to succeed.

    RULES:
    - executable: the program name that was run
    - returncode: exit status, negative signal number, or None if the
      process never launched
    """

    def __init__(self, executable: str, returncode: int | None, reason: str) -> None:
        self.executable = executable
        self.returncode = returncode
        self.reason = reason
        super().__init__("{} failed: {}".format(executable, reason))


class ProcessRunner:
    """Run one external executable to completion.

    The pipeline receives a runner instance so tests can substitute a
    recording fake without patching subprocess.
    """

    def run(self, executable: str, args: Sequence[str]) -> int:
        """Spawn ``executable`` with ``args`` and block until it exits.

        Args:
            executable: Program name, looked up on PATH.
            args: Argument tokens, not including the program name.

        Returns:
            0 (the only successful exit status).

        Raises:
            ProcessFailedError: On launch failure, signal, or nonzero exit.
        """
        argv = [executable, *args]
        logger.debug("Running: %s", shlex.join(argv))

        try:
            completed = subprocess.run(argv, check=False)
        except OSError as e:
            raise ProcessFailedError(executable, None, "could not launch ({})".format(e)) from e

        code = completed.returncode
        if code < 0:
            raise ProcessFailedError(executable, code, "terminated by signal {}".format(-code))
        if code != 0:
            raise ProcessFailedError(executable, code, "exited with status {}".format(code))
        return 0
