"""
HTTP client utilities for findupdate.

This module provides a small synchronous wrapper around :class:`httpx.Client`
that translates HTTP and transport failures into findupdate's exception
hierarchy. Checks never retry: a failed request fails that package's check
and the caller decides whether to run again.

Each worker thread owns its own :class:`HTTPClient`; an instance pools
connections for its own sequential requests but is never shared.
"""

from __future__ import annotations

import httpx
from typing import Any, Dict, Optional, cast

from findupdate.utils.logger import get_logger
from findupdate.__version__ import __version__
from findupdate.constants import DEFAULT_TIMEOUT, USER_AGENT_TEMPLATE
from findupdate.exceptions import (
    BodyTooLargeError,
    FindUpdateError,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)

logger = get_logger("http")


class HTTPClient:
    """Synchronous HTTP client with findupdate error handling.

    Args:
        timeout: Request timeout in seconds.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.
        transport: Optional ``httpx`` transport (used by tests).

    Example:
        >>> with HTTPClient() as client:
        ...     data = client.get_json("https://release-monitoring.org/api/project/1832/")
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.transport = transport

        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "HTTPClient":
        self._ensure_client()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def _ensure_client(self) -> httpx.Client:
        """Initialize the underlying httpx client if needed."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and return the fully read response.

        Raises:
            HttpStatusError: The server answered with a non-2xx status.
            TransportError: The request could not be completed.
            MalformedResponseError: The body could not be decoded.
        """
        client = self._ensure_client()
        logger.debug("%s %s", method, url)

        try:
            response = client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise _request_error(exc, url) from exc

        _raise_for_status(response, url)
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a POST request."""
        return self.request("POST", url, **kwargs)

    def get_json(self, url: str, **kwargs: Any) -> Any:
        """Fetch a URL and parse the response as JSON."""
        return _decode_json(self.get(url, **kwargs), url)

    def post_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """POST to a URL and parse the response as a JSON object."""
        data = _decode_json(self.post(url, **kwargs), url)

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected JSON object from {url}",
                url=url,
            )

        return cast(Dict[str, Any], data)

    def get_bytes(self, url: str, **kwargs: Any) -> bytes:
        """Fetch a URL and return the raw response body."""
        return self.get(url, **kwargs).content

    def get_text(
        self,
        url: str,
        *,
        max_size: Optional[int] = None,
        **kwargs: Any,
    ) -> str:
        """Fetch a URL as text, rejecting bodies larger than ``max_size`` bytes.

        The declared ``Content-Length`` is checked before the body is read;
        bodies without one are streamed and rejected as soon as they grow
        past the limit.

        Raises:
            BodyTooLargeError: The body exceeds ``max_size``.
            HttpStatusError: The server answered with a non-2xx status.
            TransportError: The request could not be completed.
            MalformedResponseError: The body could not be decoded.
        """
        if max_size is None:
            return self.get(url, **kwargs).text

        client = self._ensure_client()
        logger.debug("GET %s (limit %d bytes)", url, max_size)

        try:
            with client.stream("GET", url, **kwargs) as response:
                declared = response.headers.get("Content-Length")
                if declared is not None and declared.isdigit() and int(declared) > max_size:
                    raise BodyTooLargeError(
                        f"Response body from {url} is too large",
                        url=url,
                        limit=max_size,
                    )

                body = bytearray()
                for chunk in response.iter_bytes():
                    body.extend(chunk)
                    if len(body) > max_size:
                        raise BodyTooLargeError(
                            f"Response body from {url} is too large",
                            url=url,
                            limit=max_size,
                        )

                _raise_for_status(response, url, body=bytes(body))
                encoding = response.encoding or "utf-8"
        except httpx.RequestError as exc:
            raise _request_error(exc, url) from exc

        return bytes(body).decode(encoding, errors="replace")


def _request_error(exc: httpx.RequestError, url: str) -> FindUpdateError:
    """Map an httpx request failure onto findupdate's error types.

    Undecodable bodies (bad gzip, broken chunking) are protocol errors;
    everything else, redirect loops included, is a transport failure.
    """
    if isinstance(exc, httpx.DecodingError):
        return MalformedResponseError(f"Undecodable response from {url}: {exc}", url=url)
    return TransportError(f"Request to {url} failed: {exc}", url=url)


def _raise_for_status(
    response: httpx.Response,
    url: str,
    *,
    body: Optional[bytes] = None,
) -> None:
    """Translate a non-2xx response into :class:`HttpStatusError`."""
    if response.is_success:
        return

    if body is None:
        body = response.content

    raise HttpStatusError(
        f"HTTP {response.status_code} error for {url}",
        url=url,
        status_code=response.status_code,
        response_body=body.decode("utf-8", errors="replace"),
    )


def _decode_json(response: httpx.Response, url: str) -> Any:
    """Parse a response body as JSON."""
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            f"Invalid JSON response from {url}",
            url=url,
            response_body=response.text,
        ) from exc
