"""
Upstream checkers.

:data:`CHECKERS` maps each ``type`` discriminator to the class handling it.
The set is closed; adding a backend means adding it here.
"""

from __future__ import annotations

from typing import Dict, Type

from findupdate.core.checkers.anitya import AnityaChecker
from findupdate.core.checkers.base import Config, UpdateChecker
from findupdate.core.checkers.git import GitChecker
from findupdate.core.checkers.github import GitHubChecker
from findupdate.core.checkers.gitlab import GitLabChecker
from findupdate.core.checkers.gitweb import GitWebChecker
from findupdate.core.checkers.html_page import HTMLChecker

CHECKERS: Dict[str, Type[UpdateChecker]] = {
    checker.type_name: checker
    for checker in (
        AnityaChecker,
        GitHubChecker,
        GitLabChecker,
        GitWebChecker,
        GitChecker,
        HTMLChecker,
    )
}

__all__ = [
    "CHECKERS",
    "Config",
    "UpdateChecker",
    "AnityaChecker",
    "GitHubChecker",
    "GitLabChecker",
    "GitWebChecker",
    "GitChecker",
    "HTMLChecker",
]
