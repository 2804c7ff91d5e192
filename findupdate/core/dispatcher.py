"""Select and run the checker named by a package's ``type``.

This is the engine's single entry point::

    from findupdate.core.dispatcher import check_update
    from findupdate.utils.http import HTTPClient

    with HTTPClient() as client:
        version = check_update({"type": "git", "url": "https://example.org/repo.git"}, client)
"""

from __future__ import annotations

from findupdate.core.checkers import CHECKERS, Config, UpdateChecker
from findupdate.exceptions import EmptyResultError, MissingFieldError, UnknownBackendError
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger

logger = get_logger("dispatcher")


def build_checker(config: Config) -> UpdateChecker:
    """Construct the checker selected by ``config["type"]``.

    Raises:
        MissingFieldError: ``type`` is absent.
        UnknownBackendError: ``type`` names no known checker.
        ConfigError: The checker rejected the rest of the config.
    """
    backend = config.get("type")
    if backend is None:
        raise MissingFieldError("type", "upstream type")

    checker_cls = CHECKERS.get(backend)
    if checker_cls is None:
        raise UnknownBackendError(backend)

    checker = checker_cls(config)
    logger.debug("Using %r", checker)
    return checker


def check_update(config: Config, client: HTTPClient) -> str:
    """Resolve the latest upstream version described by ``config``.

    Returns:
        The version (or revision) string, stripped of surrounding
        whitespace. Never empty.
    """
    checker = build_checker(config)
    version = checker.check(client).strip()

    if not version:
        raise EmptyResultError(
            "Upstream returned an empty version",
            backend=checker.type_name,
        )

    return version
