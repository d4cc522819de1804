"""External toolchain invocation.

WHY: Image conversion, blob-to-assembly conversion, and assembly are
delegated to external executables. This package is the only place that
knows how to spawn them and what their argument lists look like.

HOW: runner.py spawns and reaps one child process; commands.py builds
the argv for the second-stage converter and the assembler. The
first-stage converter's argv comes from gfx2o.core.flags.

RULES:
- All process spawning goes through ProcessRunner (no direct subprocess
  usage elsewhere)
"""
