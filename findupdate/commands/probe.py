"""Probe command implementation for findupdate.

Runs one checker against one upstream and prints the version it resolves.
Handy for trying out a package's check configuration before adding it to a
package list::

    $ findupdate probe -t anitya -o id=1832
    1.2.2

    $ findupdate probe -t git -o url=https://git.example.org/repo.git -o branch=master
    68e3802b238b964900acac9422a70e295482243f
"""

from __future__ import annotations

import os
import sys
from typing import Tuple

import click

from findupdate.config import build_config, parse_options
from findupdate.context import FindUpdateContext, pass_context
from findupdate.core import CHECKERS, check_update
from findupdate.exceptions import FindUpdateError
from findupdate.utils import HTTPClient, comply_with_aosc, get_logger, print_error, strip_v_prefix

logger = get_logger("commands.probe")


@click.command()
@click.option(
    "--type",
    "-t",
    "backend",
    required=True,
    type=click.Choice(sorted(CHECKERS)),
    help="Upstream type.",
)
@click.option(
    "--option",
    "-o",
    "options",
    multiple=True,
    metavar="KEY=VALUE",
    help="Checker option (repeatable), e.g. -o repo=owner/name.",
)
@click.option(
    "--raw",
    is_flag=True,
    help="Print the version exactly as resolved, keeping a leading 'v'.",
)
@pass_context
def probe(
    ctx: FindUpdateContext,
    backend: str,
    options: Tuple[str, ...],
    raw: bool,
) -> None:
    """Resolve the latest version of a single upstream."""
    settings = ctx.settings

    try:
        config = build_config(
            {**parse_options(options), "type": backend},
            github_token=os.environ.get(settings.token_env),
        )
        with HTTPClient(timeout=settings.timeout) as client:
            version = check_update(config, client)
    except FindUpdateError as exc:
        print_error(str(exc))
        logger.debug("probe failed", exc_info=True)
        sys.exit(1)

    if not raw:
        version = strip_v_prefix(version)
        if settings.comply:
            version = comply_with_aosc(version)

    click.echo(version)
