"""
Centralized constants for findupdate.

This module defines immutable configuration values used across findupdate,
including upstream endpoints, network settings, response limits and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "findupdate/{version}"

# ---------------------------------------------------------------------------
# Upstream endpoints
# ---------------------------------------------------------------------------

#: Anitya project lookup, keyed by numeric project id.
ANITYA_API: Final[str] = "https://release-monitoring.org/api/project/{id}/"

#: GitHub REST API root.
GITHUB_API: Final[str] = "https://api.github.com"

#: GitHub GraphQL endpoint.
GITHUB_GRAPHQL_API: Final[str] = "https://api.github.com/graphql"

#: Default GitLab instance.
GITLAB_DEFAULT_INSTANCE: Final[str] = "https://gitlab.com"

#: GitLab project tags endpoint, relative to the instance base URL.
GITLAB_TAGS_PATH: Final[str] = "/api/v4/projects/{project}/repository/tags"

#: Git smart-HTTP reference advertisement, relative to the repository URL.
GIT_INFO_REFS_PATH: Final[str] = "/info/refs?service=git-upload-pack"

#: Git client version announced to smart-HTTP servers.
SIMULATED_GIT_VERSION: Final[str] = "2.31.1"

# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

#: Config key carrying the GitHub API token.
GITHUB_TOKEN_KEY: Final[str] = "github_token"

#: Environment variable the CLI reads the GitHub token from by default.
DEFAULT_TOKEN_ENV: Final[str] = "GITHUB_TOKEN"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum accepted size (in bytes) for HTML response bodies.
MAX_HTML_BODY_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MiB

#: Number of tag refs requested from the GitHub GraphQL API.
GITHUB_TAGS_PAGE_SIZE: Final[int] = 100

# ---------------------------------------------------------------------------
# Version reporting
# ---------------------------------------------------------------------------

#: Version suffixes that mark a VCS snapshot rather than a release.
VCS_VERSION_MARKERS: Final[Sequence[str]] = ("+git", "+hg", "+svn", "+bzr")

# ---------------------------------------------------------------------------
# Settings defaults
# ---------------------------------------------------------------------------

#: Whether resolved versions are rewritten to the AOSC versioning style.
DEFAULT_COMPLY: Final[bool] = False

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
