"""Checker for GitHub repositories.

Tags are listed through the GraphQL API, newest tag commit first. With a
``branch`` option the REST ``commits`` endpoint is used instead and the id
of the branch's head commit is returned. Both paths require an API token,
passed in the package config under :data:`~findupdate.constants.GITHUB_TOKEN_KEY`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from findupdate.constants import (
    GITHUB_API,
    GITHUB_GRAPHQL_API,
    GITHUB_TAGS_PAGE_SIZE,
    GITHUB_TOKEN_KEY,
)
from findupdate.core.checkers.base import Config, UpdateChecker, get_flag, must_have
from findupdate.exceptions import (
    EmptyResultError,
    InvalidFieldError,
    MalformedResponseError,
    MissingCredentialError,
)
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger
from findupdate.utils.version_utils import compile_pattern, filter_versions, max_version

logger = get_logger("checkers.github")

TAGS_QUERY = """
query($owner: String!, $name: String!, $first: Int!) {
  repository(owner: $owner, name: $name) {
    refs(
      refPrefix: "refs/tags/"
      first: $first
      orderBy: {field: TAG_COMMIT_DATE, direction: DESC}
    ) {
      nodes {
        name
      }
    }
  }
}
"""


class GitHubChecker(UpdateChecker):
    """Return the latest tag (or branch head) of a GitHub repository.

    Config keys:
        repo: ``owner/name`` slug (required).
        pattern: Regular expression tags must match.
        sort_version: ``"true"`` to pick the highest version instead of the
            most recently committed tag.
        branch: Return the head commit id of this branch instead of a tag.
        github_token: API token (required).
    """

    type_name = "github"

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self.repo = must_have(config, "repo", "Repository slug")
        owner, _, name = self.repo.partition("/")
        if not owner or not name or "/" in name:
            raise InvalidFieldError("repo", self.repo, "expected 'owner/name'")
        self.owner, self.name = owner, name

        self.sort_version = get_flag(config, "sort_version", False)
        self.branch: Optional[str] = config.get("branch")
        if self.pattern is not None:
            compile_pattern(self.pattern)

        token = config.get(GITHUB_TOKEN_KEY)
        if not token:
            raise MissingCredentialError(GITHUB_TOKEN_KEY, "GitHub")
        self._token = token

    def __repr__(self) -> str:
        return (
            f"GitHubChecker(repo={self.repo!r}, pattern={self.pattern!r}, "
            f"sort_version={self.sort_version!r}, branch={self.branch!r})"
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
        }

    def check(self, client: HTTPClient) -> str:
        if self.branch is not None:
            return self._check_branch(client)
        return self._check_tags(client)

    def _check_tags(self, client: HTTPClient) -> str:
        payload = client.post_json(
            GITHUB_GRAPHQL_API,
            json={
                "query": TAGS_QUERY,
                "variables": {
                    "owner": self.owner,
                    "name": self.name,
                    "first": GITHUB_TAGS_PAGE_SIZE,
                },
            },
            headers=self._headers(),
        )
        tags = _tag_names(payload, self.repo)

        if self.pattern is not None:
            tags = filter_versions(self.pattern, tags)
        if not tags:
            raise EmptyResultError(
                "GitHub didn't return any tags!",
                backend=self.type_name,
                source=self.repo,
            )

        logger.debug("GitHub %s: %d candidate tags", self.repo, len(tags))
        if self.sort_version:
            return max_version(tags)
        return tags[0]

    def _check_branch(self, client: HTTPClient) -> str:
        url = f"{GITHUB_API}/repos/{self.repo}/commits"
        commits = client.get_json(
            url,
            params={"sha": self.branch, "per_page": 1},
            headers=self._headers(),
        )

        if not isinstance(commits, list):
            raise MalformedResponseError("Expected a JSON array of commits", url=url)
        if not commits:
            raise EmptyResultError(
                f"GitHub didn't return any commits on branch {self.branch!r}!",
                backend=self.type_name,
                source=self.repo,
            )

        sha = commits[0].get("sha") if isinstance(commits[0], dict) else None
        if not isinstance(sha, str) or not sha:
            raise MalformedResponseError("Commit entry has no 'sha'", url=url)
        return sha


def _tag_names(payload: Dict[str, Any], repo: str) -> List[str]:
    """Pull the tag names out of a GraphQL ``refs`` answer."""
    errors = payload.get("errors")
    if errors:
        messages = "; ".join(
            str(err.get("message", err)) if isinstance(err, dict) else str(err)
            for err in errors
        )
        raise MalformedResponseError(
            f"GitHub GraphQL query for {repo} failed: {messages}",
            url=GITHUB_GRAPHQL_API,
        )

    try:
        nodes = payload["data"]["repository"]["refs"]["nodes"]
        return [node["name"] for node in nodes]
    except (KeyError, TypeError) as exc:
        raise MalformedResponseError(
            f"Unexpected GitHub GraphQL response for {repo}",
            url=GITHUB_GRAPHQL_API,
        ) from exc
