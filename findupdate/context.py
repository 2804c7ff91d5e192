"""
Shared context object for findupdate CLI commands.

An instance is created once per CLI invocation and handed to subcommands
through Click's context mechanism.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from findupdate.config import FindUpdateSettings


class FindUpdateContext:
    """Global context object for findupdate CLI commands.

    Attributes:
        config_path: Path to the settings file, if one was loaded.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        settings: Loaded settings.
    """

    __slots__ = ("config_path", "verbose", "color", "settings")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.settings: FindUpdateSettings = FindUpdateSettings()


#: Click decorator for injecting :class:`FindUpdateContext` into commands.
pass_context = click.make_pass_decorator(FindUpdateContext, ensure=True)
