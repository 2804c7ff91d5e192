"""
Custom exception hierarchy for findupdate.

This module defines structured exception types used across findupdate.
All exceptions inherit from :class:`FindUpdateError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

The hierarchy mirrors the ways a single package check can fail:

- :class:`ConfigError`: the package configuration cannot be used.
- :class:`FetchError`: the upstream could not be reached or refused us.
- :class:`ProtocolError`: the upstream answered with something unparseable.
- :class:`EmptyResultError`: nothing survived filtering.
- :class:`MismatchError`: the upstream answered about the wrong project.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class FindUpdateError(Exception):
    """Base exception for all findupdate errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class ConfigError(FindUpdateError):
    """Raised when configuration is missing, malformed or unusable.

    Args:
        message: Error description.
        config_path: Path of the settings file involved, if any.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class MissingFieldError(ConfigError):
    """Raised when a checker's required config key is absent."""

    __slots__ = ("field", "description")

    def __init__(self, field: str, description: str) -> None:
        super().__init__(f"Please specify {description}!", option=field)
        self.field = field
        self.description = description


class InvalidFieldError(ConfigError):
    """Raised when a config value cannot be interpreted (e.g. a non-numeric id)."""

    __slots__ = ("field", "value")

    def __init__(self, field: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid value {value!r} for '{field}': {reason}", option=field)
        self.field = field
        self.value = value


class UnknownBackendError(ConfigError):
    """Raised when the ``type`` discriminator names no known checker."""

    __slots__ = ("backend",)

    def __init__(self, backend: str) -> None:
        super().__init__(f"Unknown upstream type: {backend!r}", option="type")
        self.backend = backend


class InvalidPatternError(ConfigError):
    """Raised when a user supplied regular expression cannot be used."""

    __slots__ = ("pattern",)

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}", option="pattern")
        self.pattern = pattern


class MissingCredentialError(ConfigError):
    """Raised when a backend requires a credential that was not supplied."""

    __slots__ = ("credential",)

    def __init__(self, credential: str, backend: str) -> None:
        super().__init__(
            f"{backend} requires an API token but none was provided",
            option=credential,
        )
        self.credential = credential


# ---------------------------------------------------------------------------
# Network errors
# ---------------------------------------------------------------------------


class FetchError(FindUpdateError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class HttpStatusError(FetchError):
    """Raised when an upstream answers with a non-2xx status."""


class TransportError(FetchError):
    """Raised on DNS, connection, TLS or timeout failures."""


class BodyTooLargeError(FetchError):
    """Raised when a response body exceeds the accepted size.

    Args:
        message: Error description.
        limit: Maximum accepted body size in bytes.
        **kwargs: Additional arguments forwarded to ``FetchError``.
    """

    __slots__ = ("limit",)

    def __init__(self, message: str, *, limit: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.limit = limit
        self.details["limit"] = limit


# ---------------------------------------------------------------------------
# Protocol errors
# ---------------------------------------------------------------------------


class ProtocolError(FindUpdateError):
    """Raised when an upstream response cannot be decoded.

    Args:
        message: Error description.
        url: URL the response came from.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.response_body = response_body


class MalformedResponseError(ProtocolError):
    """Raised when a JSON or HTML payload does not have the expected shape."""


class MalformedPktLineError(ProtocolError):
    """Raised when a Git reference advertisement violates pkt-line framing.

    Args:
        message: Error description.
        offset: Byte offset at which decoding failed.
        **kwargs: Additional arguments forwarded to ``ProtocolError``.
    """

    __slots__ = ("offset",)

    def __init__(self, message: str, *, offset: int = 0, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.offset = offset
        self.details["offset"] = offset


# ---------------------------------------------------------------------------
# Result errors
# ---------------------------------------------------------------------------


class EmptyResultError(FindUpdateError):
    """Raised when a checker ends up with zero candidate versions.

    Args:
        message: Error description.
        backend: Checker type that produced no result.
        source: Upstream location (URL, instance, slug) for context.
    """

    __slots__ = ("backend", "source")

    def __init__(
        self,
        message: str,
        *,
        backend: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "backend", backend)
        _add_if(details, "source", source)

        super().__init__(message, details)

        self.backend = backend
        self.source = source


class MismatchError(FindUpdateError):
    """Raised when an upstream answers for a different project than requested."""

    __slots__ = ("requested", "received")

    def __init__(self, message: str, *, requested: Any, received: Any) -> None:
        super().__init__(message, {"requested": requested, "received": received})
        self.requested = requested
        self.received = received
