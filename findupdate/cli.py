"""
Command-line interface for findupdate.

This module provides the main CLI entry point and handles global options,
settings loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from findupdate.config import load_config
from findupdate.__version__ import __version__
from findupdate.context import FindUpdateContext
from findupdate.exceptions import ConfigError, FindUpdateError
from findupdate.utils.logger import get_logger, setup_logging
from findupdate.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to settings file.",
    envvar="FINDUPDATE_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="FINDUPDATE_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="findupdate",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """findupdate: find the latest upstream versions of your packages.

    \b
    Available commands:
      findupdate probe             Check a single upstream
      findupdate check             Check every package in a list

    \b
    Examples:
      findupdate probe -t anitya -o id=1832
      findupdate -v check packages.toml
    """
    if not color:
        os.environ["NO_COLOR"] = "1"
    else:
        os.environ.pop("NO_COLOR", None)
    reconfigure_console()

    _configure_logging(verbose)

    try:
        settings = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    findupdate_ctx = FindUpdateContext()
    findupdate_ctx.config_path = settings.source_path
    findupdate_ctx.color = color
    findupdate_ctx.verbose = verbose
    findupdate_ctx.settings = settings
    ctx.obj = findupdate_ctx

    logger.debug("findupdate v%s", __version__)
    logger.debug("Settings: %s", settings.to_log_dict())


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose > 1)


# Register CLI subcommands
from findupdate.commands.check import check  # noqa: E402
from findupdate.commands.probe import probe  # noqa: E402

cli.add_command(check)
cli.add_command(probe)


def main() -> int:
    """Main entry point for the findupdate CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("Operation cancelled by user")
        return 130

    except FindUpdateError as exc:
        print_error(str(exc))
        logger.debug("FindUpdateError details: %s", exc.details or "<none>", exc_info=True)
        return 1

    except KeyboardInterrupt:
        print_warning("Operation cancelled by user")
        return 130

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
