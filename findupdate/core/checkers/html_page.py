"""Checker that scrapes versions out of an arbitrary web page."""

from __future__ import annotations

from typing import List

from findupdate.constants import MAX_HTML_BODY_SIZE
from findupdate.core.checkers.base import Config, UpdateChecker, must_have
from findupdate.exceptions import EmptyResultError, InvalidPatternError
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger
from findupdate.utils.version_utils import compile_pattern, max_version

logger = get_logger("checkers.html")


class HTMLChecker(UpdateChecker):
    """Match a regular expression against a page and return the highest capture.

    Config keys:
        url: Page URL (required).
        pattern: Regular expression with at least one capture group
            (required); the first group is the version.
    """

    type_name = "html"

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self.url = must_have(config, "url", "HTML URL")
        self.pattern = must_have(config, "pattern", "Regex pattern for matching versions")

        self._regex = compile_pattern(self.pattern)
        if self._regex.groups < 1:
            raise InvalidPatternError(self.pattern, "pattern must contain a capture group")

    def __repr__(self) -> str:
        return f"HTMLChecker(url={self.url!r}, pattern={self.pattern!r})"

    def check(self, client: HTTPClient) -> str:
        body = client.get_text(self.url, max_size=MAX_HTML_BODY_SIZE)

        # Optional groups that did not take part in a match are skipped.
        versions: List[str] = [
            match.group(1)
            for match in self._regex.finditer(body)
            if match.group(1) is not None
        ]

        if not versions:
            raise EmptyResultError(
                "No version matches the pattern.",
                backend=self.type_name,
                source=self.url,
            )
        if len(versions) == 1:
            return versions[0]

        logger.debug("matched versions: %s", versions)
        return max_version(versions)
