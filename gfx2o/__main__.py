"""Package entry point for ``python -m gfx2o``.

WHY: Build scripts can run the converter as ``python -m gfx2o in.png``
without relying on the console script being on PATH.

HOW: Delegates to the CLI's main() function.
"""

from gfx2o.cli import main

if __name__ == "__main__":
    main()
