"""Unit tests for findupdate.utils.http.

Requests are served by ``httpx.MockTransport`` handlers; nothing touches
the network.
"""

from __future__ import annotations

import json
from typing import Callable, List

import httpx
import pytest

from findupdate.__version__ import __version__
from findupdate.core.dispatcher import check_update
from findupdate.exceptions import (
    BodyTooLargeError,
    FetchError,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)
from findupdate.utils.http import HTTPClient


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> HTTPClient:
    return HTTPClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestHTTPClientLifecycle:
    """Tests for client creation and cleanup."""

    def test_defaults(self) -> None:
        client = HTTPClient()

        assert client.timeout == 30
        assert client.verify_ssl is True
        assert client.user_agent == f"findupdate/{__version__}"
        assert client._client is None

    def test_context_manager_closes(self) -> None:
        with _client(lambda request: httpx.Response(200)) as client:
            assert client._client is not None

        assert client._client is None

    def test_close_is_idempotent(self) -> None:
        client = HTTPClient()
        client.close()
        client.close()

    def test_user_agent_sent(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        with _client(handler) as client:
            client.get_json("https://example.org/api")

        assert seen[0].headers["User-Agent"] == f"findupdate/{__version__}"

    def test_per_request_headers_override(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"ok")

        with _client(handler) as client:
            client.get_bytes("https://example.org/", headers={"User-Agent": "git/2.31.1"})

        assert seen[0].headers["User-Agent"] == "git/2.31.1"


@pytest.mark.unit
class TestHTTPClientErrors:
    """Tests for error translation."""

    @pytest.mark.parametrize("status", [301, 404, 429, 500, 503])
    def test_non_success_status(self, status: int) -> None:
        handler = lambda request: httpx.Response(status, text="nope")  # noqa: E731

        with _client(handler) as client:
            with pytest.raises(HttpStatusError) as exc_info:
                client.get("https://example.org/missing")

        assert exc_info.value.status_code == status
        assert exc_info.value.url == "https://example.org/missing"
        assert exc_info.value.response_body == "nope"

    def test_redirects_are_followed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "https://example.org/new"})
            return httpx.Response(200, text="moved")

        with _client(handler) as client:
            assert client.get_text("https://example.org/old") == "moved"

    def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(TransportError, match="connection refused") as exc_info:
                client.get("https://example.org/")

        assert isinstance(exc_info.value, FetchError)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_is_a_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with _client(handler) as client:
            with pytest.raises(TransportError):
                client.get_text("https://example.org/", max_size=10)

    def test_redirect_loop_is_a_transport_failure(self) -> None:
        """Test an endless redirect chain surfaces as a findupdate error."""
        handler = lambda request: httpx.Response(  # noqa: E731
            302, headers={"Location": str(request.url)}
        )

        with _client(handler) as client:
            with pytest.raises(TransportError) as exc_info:
                client.get_json("https://example.org/loop")

        assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)

    def test_redirect_loop_through_check_update(self) -> None:
        handler = lambda request: httpx.Response(  # noqa: E731
            302, headers={"Location": str(request.url)}
        )

        with _client(handler) as client:
            with pytest.raises(FetchError):
                check_update({"type": "anitya", "id": "1"}, client)

    def test_undecodable_body(self) -> None:
        """Test a body that fails content decoding is a malformed response."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                content=iter([b"this is not gzip"]),
            )

        with _client(handler) as client:
            with pytest.raises(MalformedResponseError, match="Undecodable"):
                client.get_bytes("https://example.org/")

            with pytest.raises(MalformedResponseError, match="Undecodable"):
                client.get_text("https://example.org/", max_size=1024)

    def test_invalid_json(self) -> None:
        with _client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(MalformedResponseError):
                client.get_json("https://example.org/api")

    def test_post_json_requires_object(self) -> None:
        with _client(lambda request: httpx.Response(200, json=[1, 2])) as client:
            with pytest.raises(MalformedResponseError):
                client.post_json("https://example.org/graphql", json={})


@pytest.mark.unit
class TestHTTPClientBodies:
    """Tests for body helpers."""

    def test_get_json(self) -> None:
        with _client(lambda request: httpx.Response(200, json=[{"name": "v1"}])) as client:
            assert client.get_json("https://example.org/tags") == [{"name": "v1"}]

    def test_post_json_sends_body(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {}})

        with _client(handler) as client:
            result = client.post_json("https://example.org/graphql", json={"query": "q"})

        assert result == {"data": {}}
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"query": "q"}

    def test_get_bytes(self) -> None:
        with _client(lambda request: httpx.Response(200, content=b"\x00\xffraw")) as client:
            assert client.get_bytes("https://example.org/") == b"\x00\xffraw"

    def test_get_text_within_limit(self) -> None:
        with _client(lambda request: httpx.Response(200, text="héllo")) as client:
            assert client.get_text("https://example.org/", max_size=1024) == "héllo"

    def test_get_text_declared_length_too_large(self) -> None:
        handler = lambda request: httpx.Response(200, content=b"x" * 20)  # noqa: E731

        with _client(handler) as client:
            with pytest.raises(BodyTooLargeError) as exc_info:
                client.get_text("https://example.org/", max_size=10)

        assert exc_info.value.limit == 10

    def test_get_text_streamed_body_too_large(self) -> None:
        """Test bodies without Content-Length are cut off while streaming."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=iter([b"a" * 8, b"b" * 8, b"c" * 8]))

        with _client(handler) as client:
            with pytest.raises(BodyTooLargeError):
                client.get_text("https://example.org/", max_size=10)

    def test_get_text_exact_limit(self) -> None:
        with _client(lambda request: httpx.Response(200, content=b"x" * 10)) as client:
            assert client.get_text("https://example.org/", max_size=10) == "x" * 10

    def test_get_text_error_status_with_limit(self) -> None:
        with _client(lambda request: httpx.Response(404, text="gone")) as client:
            with pytest.raises(HttpStatusError) as exc_info:
                client.get_text("https://example.org/", max_size=100)

        assert exc_info.value.response_body == "gone"
