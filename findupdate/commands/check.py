"""Check command implementation for findupdate.

Reads a TOML package list, resolves the latest upstream version of every
package on a thread pool, and reports which packages have moved on::

    # Check everything, 8 workers
    $ findupdate check packages.toml --jobs 8

    # Only packages whose name matches a pattern
    $ findupdate check packages.toml --include '^lib'

    # Machine-readable output
    $ findupdate check packages.toml --format json > report.json

The command exits with 1 if any package could not be checked.
"""

from __future__ import annotations

import os
import re
import sys
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from rich.markup import escape

from findupdate.config import load_packages
from findupdate.context import FindUpdateContext, pass_context
from findupdate.core import CheckResult, UpdateRunner
from findupdate.exceptions import ConfigError, FindUpdateError
from findupdate.utils import (
    HTTPClient,
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.check")


@click.command()
@click.argument(
    "packages_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of parallel workers (default: one per CPU).",
)
@click.option(
    "--include",
    "-i",
    default=None,
    help="Only check packages whose name matches this regular expression.",
)
@click.option(
    "--comply/--no-comply",
    default=None,
    help="Rewrite versions in the AOSC versioning style.",
)
@click.option(
    "--outdated-only",
    is_flag=True,
    help="Show only packages with a new version or an error.",
)
@click.option(
    "--version-only",
    "-x",
    is_flag=True,
    help="Print only 'name version' lines, even for unchanged packages.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def check(
    ctx: FindUpdateContext,
    packages_file: Path,
    jobs: Optional[int],
    include: Optional[str],
    comply: Optional[bool],
    outdated_only: bool,
    version_only: bool,
    output_format: str,
) -> None:
    """Check every package listed in PACKAGES_FILE for upstream updates."""
    settings = ctx.settings

    try:
        packages = load_packages(
            packages_file,
            github_token=os.environ.get(settings.token_env),
        )
        if include is not None:
            try:
                name_filter = re.compile(include)
            except re.error as exc:
                raise ConfigError(f"Invalid --include pattern: {exc}", option="include") from exc
            packages = [pkg for pkg in packages if name_filter.search(pkg.name)]
    except FindUpdateError as exc:
        print_error(str(exc))
        sys.exit(1)

    if not packages:
        print_warning("No packages to check")
        sys.exit(0)

    runner = UpdateRunner(
        jobs=jobs or settings.jobs,
        client_factory=lambda: HTTPClient(timeout=settings.timeout),
        comply=settings.comply if comply is None else comply,
    )
    results = runner.run(packages)

    shown = [r for r in results if not outdated_only or not r.ok or r.has_update]
    if version_only:
        for result in shown:
            if result.ok:
                click.echo(f"{result.name} {result.version}")
    elif output_format == "json":
        click.echo(json.dumps([_result_to_json(r) for r in shown], indent=2))
    elif output_format == "simple":
        _display_simple(shown)
    else:
        _display_table(shown)

    failed = [r for r in results if not r.ok]
    if not version_only and output_format != "json":
        _display_summary(results, failed)

    sys.exit(1 if failed else 0)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _result_to_json(result: CheckResult) -> Dict[str, Any]:
    return {
        "name": result.name,
        "current": result.current,
        "latest": result.version,
        "has_update": result.has_update,
        "warnings": list(result.warnings),
        "error": str(result.error) if result.error is not None else None,
    }


def _status(result: CheckResult) -> str:
    if not result.ok:
        return "error"
    if result.current is None:
        return "found"
    return "update" if result.has_update else "up to date"


def _notes(result: CheckResult) -> str:
    if not result.ok:
        return str(result.error)
    return "; ".join(result.warnings)


def _display_table(results: List[CheckResult]) -> None:
    rows = [
        {
            "Package": r.name,
            "Current": r.current or "-",
            "Latest": r.version or "-",
            "Status": _status(r),
            "Notes": escape(_notes(r)),
        }
        for r in results
    ]

    def row_style(row: Dict[str, Any]) -> Optional[str]:
        return {"error": "red", "update": "yellow"}.get(row["Status"])

    print_table(
        rows,
        title="Upstream Versions",
        column_styles={"Package": {"style": "bold", "no_wrap": True}},
        row_styler=row_style,
    )


def _display_simple(results: List[CheckResult]) -> None:
    console = get_raw_console()
    for r in results:
        if not r.ok:
            console.print(r.describe_error(), style="red", markup=False, highlight=False)
            continue
        line = f"{r.name}: {r.current or '?'} -> {r.version}"
        console.print(line, markup=False, highlight=False)
        for warning in r.warnings:
            console.print(f"  ! {warning}", style="yellow", markup=False, highlight=False)


def _display_summary(results: List[CheckResult], failed: List[CheckResult]) -> None:
    updates = sum(1 for r in results if r.ok and r.current is not None and r.has_update)
    if failed:
        print_error(f"{len(failed)} of {len(results)} packages could not be checked")
    elif updates:
        print_warning(f"{updates} of {len(results)} packages have updates")
    else:
        print_success(f"Checked {len(results)} packages")
