"""Checker for GitWeb (and compatible cgit-style) tag listings."""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup

from findupdate.constants import MAX_HTML_BODY_SIZE
from findupdate.core.checkers.base import Config, UpdateChecker, must_have
from findupdate.exceptions import EmptyResultError
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger
from findupdate.utils.version_utils import compile_pattern, extract_versions, max_version

logger = get_logger("checkers.gitweb")


class GitWebChecker(UpdateChecker):
    """Scrape ``<url>/tags`` and return the highest tag name.

    Tag names are the text of every element carrying the ``name`` class.

    Config keys:
        url: GitWeb project URL (required).
        pattern: Filter (no group) or extraction (one group) pattern.
    """

    type_name = "gitweb"

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self.url = must_have(config, "url", "GitWeb project URL").rstrip("/")
        if self.pattern is not None:
            compile_pattern(self.pattern)

    def check(self, client: HTTPClient) -> str:
        url = f"{self.url}/tags"
        body = client.get_text(url, max_size=MAX_HTML_BODY_SIZE)

        soup = BeautifulSoup(body, "html.parser")
        versions: List[str] = [node.get_text() for node in soup.select(".name")]

        if self.pattern is not None:
            versions = extract_versions(self.pattern, versions)

        if not versions:
            raise EmptyResultError("No tags found.", backend=self.type_name, source=url)
        if len(versions) == 1:
            return versions[0]

        logger.debug("GitWeb %s: %d candidate tags", self.url, len(versions))
        return max_version(versions)
