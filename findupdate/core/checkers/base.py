"""Shared plumbing for upstream checkers.

A checker is built once per package from that package's ``Config`` (a
read-only mapping of string keys to string values) and asked for the
latest version exactly once. Constructors validate the keys they need so
that configuration mistakes surface before any network traffic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Mapping, Optional

from findupdate.exceptions import MissingFieldError
from findupdate.utils.http import HTTPClient

#: Per-package checker configuration.
Config = Mapping[str, str]


def must_have(config: Config, key: str, description: str) -> str:
    """Return ``config[key]`` or fail with :class:`MissingFieldError`."""
    value = config.get(key)
    if value is None:
        raise MissingFieldError(key, description)
    return value


def get_flag(config: Config, key: str, default: bool) -> bool:
    """Read a boolean option; only the literal ``"true"`` counts as true."""
    value = config.get(key)
    if value is None:
        return default
    return value == "true"


class UpdateChecker(ABC):
    """Base class for all upstream checkers.

    Subclasses set :attr:`type_name` to the ``type`` value that selects
    them and implement :meth:`check`.
    """

    type_name: ClassVar[str]

    def __init__(self, config: Config) -> None:
        self.pattern: Optional[str] = config.get("pattern")

    @abstractmethod
    def check(self, client: HTTPClient) -> str:
        """Query the upstream and return the latest version string.

        Raises:
            FindUpdateError: The upstream could not be queried or yielded
                no usable version.
        """

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{self.__class__.__name__}({fields})"
