"""
findupdate: find the latest upstream version of a software project.

findupdate queries one of several upstream sources and resolves a single
"latest known" version string:

    • Anitya (release-monitoring.org) projects
    • GitHub and GitLab repository tags or branch heads
    • GitWeb tag listings
    • Raw Git repositories over the smart-HTTP protocol
    • Arbitrary HTML pages matched with a regular expression

Typical usage::

    from findupdate import HTTPClient, check_update

    with HTTPClient() as client:
        print(check_update({"type": "anitya", "id": "1832"}, client))
"""

from __future__ import annotations

from findupdate.__version__ import __version__
from findupdate.core.dispatcher import check_update
from findupdate.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "findupdate Contributors"
__license__ = "MIT"
__description__ = "Find the latest upstream version of software projects."

__all__ = [
    "__version__",
    "HTTPClient",
    "check_update",
]
