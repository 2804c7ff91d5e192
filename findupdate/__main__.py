"""
Executable module for findupdate.

Running:
    python -m findupdate

is equivalent to:
    findupdate
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entrypoint when executing `python -m findupdate`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from findupdate.cli import main as cli_main
    except ImportError as exc:
        sys.stderr.write(f"findupdate CLI could not be loaded: {exc}\n")
        sys.stderr.write(f"Python version : {sys.version}\n")
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
