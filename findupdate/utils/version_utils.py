"""
Version comparison and extraction utilities for findupdate.

Upstream sources return arbitrary strings: tag names, page fragments,
release labels. This module provides the single ordering used to rank them
and the pattern helpers used to filter or extract them.

Ordering rules (:func:`compare_versions`):

1. When both strings parse as PEP 440 versions (a leading ``v`` is
   accepted), they are ordered as versions: ``1.10`` > ``1.9``, pre-releases
   (``a``, ``b``, ``rc``, ``dev``) sort below the final release, and
   post-releases sort above it.
2. Versions that are equal under PEP 440 but spelled differently
   (``1.0`` / ``1.0.0``) are ordered by plain string comparison.
3. If either side is not a PEP 440 version, both are compared as plain
   strings (code-point order, identical to UTF-8 byte order).

Mixing the rules is not transitive: ``1.10`` > ``1.9`` (versions), but
``1.9`` > ``1.5x`` and ``1.5x`` > ``1.10`` (strings). The maximum of such
a mix depends on input order.
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Iterable, List, Optional, Pattern, Sequence

from packaging.version import InvalidVersion, Version

from findupdate.constants import VCS_VERSION_MARKERS
from findupdate.exceptions import InvalidPatternError


def _parse_version(value: str) -> Optional[Version]:
    """Parse a version string, returning ``None`` if it is not PEP 440."""
    try:
        return Version(value)
    except InvalidVersion:
        return None


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Returns:
        A negative number if ``a`` sorts before ``b``, zero if they are the
        same string, and a positive number otherwise.

    Examples:
        >>> compare_versions("1.10", "1.9")
        1
        >>> compare_versions("2.0rc1", "2.0")
        -1
        >>> compare_versions("snapshot", "1.0")
        1
    """
    if a == b:
        return 0

    parsed_a = _parse_version(a)
    parsed_b = _parse_version(b)

    if parsed_a is not None and parsed_b is not None:
        result = (parsed_a > parsed_b) - (parsed_a < parsed_b)
        if result:
            return result

    return (a > b) - (a < b)


#: Sort key implementing :func:`compare_versions`.
version_key = cmp_to_key(compare_versions)


def sort_versions(versions: Iterable[str], *, reverse: bool = False) -> List[str]:
    """Return ``versions`` sorted by :func:`compare_versions`."""
    return sorted(versions, key=version_key, reverse=reverse)


def max_version(versions: Sequence[str]) -> str:
    """Return the highest version of a non-empty sequence."""
    return max(versions, key=version_key)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a user supplied regular expression.

    Raises:
        InvalidPatternError: The pattern is not a valid regular expression.
    """
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


def extract_versions(pattern: str, collection: Iterable[str]) -> List[str]:
    """Filter or extract version strings from ``collection``.

    A pattern with at least one capture group extracts: the text of the
    first group is returned for every string the pattern matches. A pattern
    without groups filters: matching strings are returned unchanged.
    Non-matching strings are dropped either way.

    Examples:
        >>> extract_versions(r"^v(.+)$", ["v1.0", "beta", "v2.0"])
        ['1.0', '2.0']
        >>> extract_versions(r"^v", ["v1.0", "beta"])
        ['v1.0']
    """
    regex = compile_pattern(pattern)
    results: List[str] = []

    if regex.groups >= 1:
        for item in collection:
            match = regex.search(item)
            if match is not None and match.group(1) is not None:
                results.append(match.group(1))
    else:
        results = [item for item in collection if regex.search(item)]

    return results


def filter_versions(pattern: str, collection: Iterable[str]) -> List[str]:
    """Return the strings of ``collection`` that ``pattern`` matches."""
    regex = compile_pattern(pattern)
    return [item for item in collection if regex.search(item)]


# ---------------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------------


def strip_v_prefix(version: str) -> str:
    """Strip surrounding whitespace and a single leading ``v``."""
    version = version.strip()
    return version[1:] if version.startswith("v") else version


def update_warnings(current: str, new: str) -> List[str]:
    """Describe anything suspicious about moving from ``current`` to ``new``.

    Returns:
        Human-readable warnings; empty when the versions are identical or the
        update looks ordinary.
    """
    warnings: List[str] = []
    if current == new:
        return warnings

    if "+" in current:
        warnings.append(f"Compound version number '{current}'")
        for marker in VCS_VERSION_MARKERS:
            if marker in current:
                warnings.append(f"Version number indicates a snapshot ({marker}) is used")
                break

    parsed_current = _parse_version(current)
    parsed_new = _parse_version(new)
    if parsed_current is None or parsed_new is None:
        warnings.append(f"Versions not comparable: `{current}` and `{new}`")
    elif parsed_current > parsed_new:
        warnings.append(f"Possible downgrade from the current version ({current} -> {new})")

    return warnings


# ---------------------------------------------------------------------------
# AOSC versioning style
# ---------------------------------------------------------------------------

_RELEASE_TYPES = re.compile(r"^\d+(?:\.\d+)+[-_~^]*(?:rc|a|alpha|b|beta)\d*$")
_DASHES = re.compile(r"^\d+(?:-\d+)+$")
_UNDERSCORES = re.compile(r"^\d+(?:_[0-9a-zA-Z]+)+$")
_LETTER_NOTATION = re.compile(r"^\d+(?:\.\d+)+[-_~+^][a-z]\d+$")
_REVISION = re.compile(r"^\d+(?:\.\d+)+(?:-\d+)+$")


def comply_with_aosc(version: str) -> str:
    """Rewrite a version string in the AOSC package styling convention.

    Examples:
        >>> comply_with_aosc("2.16-rc1")
        '2.16~rc1'
        >>> comply_with_aosc("2023-07-18")
        '2023.07.18'
        >>> comply_with_aosc("5.3-56")
        '5.3+56'
    """
    version = version.lower()

    if _RELEASE_TYPES.match(version):
        return re.sub(r"[-+~^]*((?:rc|alpha|a|beta|b)\S+)", r"~\1", version)
    if _DASHES.match(version) or _UNDERSCORES.match(version):
        return re.sub(r"[-_]", ".", version)
    if _LETTER_NOTATION.match(version):
        return re.sub(r"[-_~+^]", "", version)
    if _REVISION.match(version):
        return re.sub(r"[-_~+^]", "+", version)

    return version
