"""
Core functionality exports for findupdate.

    from findupdate.core import check_update, UpdateRunner
"""

from __future__ import annotations

from findupdate.core.checkers import CHECKERS, Config, UpdateChecker
from findupdate.core.dispatcher import build_checker, check_update
from findupdate.core.pktline import Branch, GitRef, Tag, decode_refs, parse_manifest
from findupdate.core.runner import CheckResult, PackageCheck, UpdateRunner

__all__ = [
    "CHECKERS",
    "Config",
    "UpdateChecker",
    "build_checker",
    "check_update",
    "Branch",
    "GitRef",
    "Tag",
    "decode_refs",
    "parse_manifest",
    "CheckResult",
    "PackageCheck",
    "UpdateRunner",
]
