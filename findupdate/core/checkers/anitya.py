"""Checker for projects tracked by Anitya (release-monitoring.org)."""

from __future__ import annotations

from typing import Any, List

from findupdate.constants import ANITYA_API
from findupdate.core.checkers.base import Config, UpdateChecker, get_flag, must_have
from findupdate.exceptions import (
    EmptyResultError,
    InvalidFieldError,
    MalformedResponseError,
    MismatchError,
)
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger

logger = get_logger("checkers.anitya")


class AnityaChecker(UpdateChecker):
    """Return the newest version Anitya knows for a numeric project id.

    Config keys:
        id: Anitya project id (required).
        stable_only: ``"true"`` (default) to read ``stable_versions``,
            anything else to read ``versions``.
    """

    type_name = "anitya"

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        raw_id = must_have(config, "id", "Anitya project ID")
        try:
            self.id = int(raw_id)
        except ValueError as exc:
            raise InvalidFieldError("id", raw_id, "expected an integer") from exc
        if self.id < 0:
            raise InvalidFieldError("id", raw_id, "expected a non-negative integer")
        self.stable_only = get_flag(config, "stable_only", True)

    def check(self, client: HTTPClient) -> str:
        url = ANITYA_API.format(id=self.id)
        payload = client.get_json(url)

        try:
            received_id = payload["id"]
            versions: List[Any] = payload["stable_versions" if self.stable_only else "versions"]
        except (KeyError, TypeError) as exc:
            raise MalformedResponseError(
                f"Unexpected Anitya response: missing {exc}",
                url=url,
            ) from exc

        if received_id != self.id:
            raise MismatchError(
                "Requested and received Anitya project IDs mismatch",
                requested=self.id,
                received=received_id,
            )

        if not isinstance(versions, list):
            raise MalformedResponseError("Anitya version list is not an array", url=url)

        if not versions:
            kind = "stable versions" if self.stable_only else "versions"
            raise EmptyResultError(
                f"Anitya didn't return any {kind}!",
                backend=self.type_name,
                source=url,
            )

        logger.debug("Anitya project %d: %d candidates", self.id, len(versions))
        return str(versions[0])
