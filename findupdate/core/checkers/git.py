"""Checker that talks to a Git smart-HTTP server directly.

The request impersonates a Git client so the server answers with its
reference advertisement, which :mod:`findupdate.core.pktline` decodes.
"""

from __future__ import annotations

from typing import List, Optional

from findupdate.constants import GIT_INFO_REFS_PATH, SIMULATED_GIT_VERSION
from findupdate.core.checkers.base import Config, UpdateChecker, must_have
from findupdate.core.pktline import Branch, Tag, decode_refs
from findupdate.exceptions import EmptyResultError
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger
from findupdate.utils.version_utils import compile_pattern, extract_versions, max_version

logger = get_logger("checkers.git")

GIT_HEADERS = {
    "User-Agent": f"git/{SIMULATED_GIT_VERSION}",
    "git-protocol": "version=2",
}


class GitChecker(UpdateChecker):
    """Return the highest tag, or a branch's head commit, of a Git repository.

    Config keys:
        url: Repository URL (required).
        branch: Return the object id this branch points at instead of a tag.
        pattern: Filter (no group) or extraction (one group) pattern applied
            to tag names.
    """

    type_name = "git"

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self.url = must_have(config, "url", "Repository URL").rstrip("/")
        self.branch: Optional[str] = config.get("branch")
        if self.pattern is not None:
            compile_pattern(self.pattern)

    def check(self, client: HTTPClient) -> str:
        body = client.get_bytes(self.url + GIT_INFO_REFS_PATH, headers=GIT_HEADERS)
        refs = decode_refs(body)

        if self.branch is not None:
            for ref in refs:
                if isinstance(ref, Branch) and ref.name == self.branch:
                    return ref.revision
            raise EmptyResultError(
                f"Git ({self.url}) has no branch named {self.branch!r}!",
                backend=self.type_name,
                source=self.url,
            )

        tags: List[str] = [ref.name for ref in refs if isinstance(ref, Tag)]
        if self.pattern is not None:
            tags = extract_versions(self.pattern, tags)
        if not tags:
            raise EmptyResultError(
                f"Git ({self.url}) didn't return any tags!",
                backend=self.type_name,
                source=self.url,
            )

        logger.debug("Git %s: %d candidate tags", self.url, len(tags))
        return max_version(tags)
