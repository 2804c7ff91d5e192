"""Checker for GitLab projects on gitlab.com or a self-hosted instance."""

from __future__ import annotations

from typing import List
from urllib.parse import quote

from findupdate.constants import GITLAB_DEFAULT_INSTANCE, GITLAB_TAGS_PATH
from findupdate.core.checkers.base import Config, UpdateChecker, get_flag, must_have
from findupdate.exceptions import EmptyResultError, MalformedResponseError
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger
from findupdate.utils.version_utils import compile_pattern, filter_versions, max_version

logger = get_logger("checkers.gitlab")


class GitLabChecker(UpdateChecker):
    """Return the latest tag of a GitLab project.

    Config keys:
        repo: ``namespace/project`` slug or numeric project id (required).
        instance: Instance base URL, defaults to ``https://gitlab.com``.
        pattern: Regular expression tags must match.
        sort_version: ``"true"`` to pick the highest version instead of the
            first tag GitLab lists.
    """

    type_name = "gitlab"

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self.repo = must_have(config, "repo", "Repository slug or Project ID")
        self.instance = config.get("instance", GITLAB_DEFAULT_INSTANCE).rstrip("/")
        self.sort_version = get_flag(config, "sort_version", False)
        if self.pattern is not None:
            compile_pattern(self.pattern)

    @property
    def url(self) -> str:
        project = quote(self.repo, safe="")
        return self.instance + GITLAB_TAGS_PATH.format(project=project)

    def check(self, client: HTTPClient) -> str:
        url = self.url
        payload = client.get_json(url)

        try:
            tags: List[str] = [entry["name"] for entry in payload]
        except (KeyError, TypeError) as exc:
            raise MalformedResponseError(
                f"Unexpected GitLab response from {self.instance}",
                url=url,
            ) from exc

        if self.pattern is not None:
            tags = filter_versions(self.pattern, tags)
        if not tags:
            raise EmptyResultError(
                f"GitLab ({self.instance}) didn't return any tags!",
                backend=self.type_name,
                source=self.repo,
            )

        logger.debug("GitLab %s: %d candidate tags", self.repo, len(tags))
        if self.sort_version:
            return max_version(tags)
        return tags[0]
