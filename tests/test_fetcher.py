"""Tests for the HTTP content fetcher.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.
- The invalid-URL case runs without a mock: httpx rejects it before any
  connection is attempted.
"""

from __future__ import annotations

import itertools
from unittest.mock import patch

import httpx
import pytest
import respx

from urltext.pipeline.fetcher import ContentFetcher
from urltext.pipeline.models import ErrorKind, ExtractionError, FetchedContent

_URL = "https://example.com/doc"


@pytest.fixture()
def fetcher():
    with ContentFetcher(user_agent="urltext-test/1.0", timeout_seconds=5.0) as f:
        yield f


def _assert_fetch_error(result) -> None:
    assert isinstance(result, ExtractionError)
    assert result.kind is ErrorKind.FETCH
    assert result.status_code == 400
    assert result.message == "Failed to download content from URL"


class TestSuccessfulFetch:
    def test_returns_body_and_length(self, fetcher) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, content=b"hello bytes"))
            result = fetcher.fetch(_URL)

        assert isinstance(result, FetchedContent)
        assert result.data == b"hello bytes"
        assert result.length == 11

    def test_sends_user_agent(self, fetcher) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, content=b"x"))
            fetcher.fetch(_URL)

        request = route.calls.last.request
        assert request.headers["User-Agent"] == "urltext-test/1.0"
        assert request.method == "GET"
        assert request.content == b""

    def test_any_2xx_is_success(self, fetcher) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(203, content=b"partial"))
            result = fetcher.fetch(_URL)
        assert isinstance(result, FetchedContent)

    def test_empty_body(self, fetcher) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(204))
            result = fetcher.fetch(_URL)
        assert isinstance(result, FetchedContent)
        assert result.length == 0

    def test_follows_redirects(self, fetcher) -> None:
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"Location": _URL})
            )
            respx.get(_URL).mock(return_value=httpx.Response(200, content=b"moved"))
            result = fetcher.fetch("https://example.com/old")

        assert isinstance(result, FetchedContent)
        assert result.data == b"moved"


class TestFailedFetch:
    @pytest.mark.parametrize("status", [301, 400, 403, 404, 500, 503])
    def test_non_2xx_status(self, status: int) -> None:
        with ContentFetcher(follow_redirects=False) as fetcher, respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(status, text="nope"))
            _assert_fetch_error(fetcher.fetch(_URL))

    def test_status_code_not_reported(self, fetcher) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(404))
            result = fetcher.fetch(_URL)
        assert "404" not in result.message

    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("read timed out"),
            httpx.ConnectTimeout("connect timed out"),
            httpx.RemoteProtocolError("peer closed connection"),
        ],
    )
    def test_transport_errors(self, fetcher, exc: Exception) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=exc)
            _assert_fetch_error(fetcher.fetch(_URL))

    def test_url_without_scheme(self, fetcher) -> None:
        _assert_fetch_error(fetcher.fetch("example.com/no-scheme"))


class TestLimits:
    def test_declared_length_over_limit(self) -> None:
        with ContentFetcher(max_content_bytes=10) as fetcher, respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, content=b"x" * 11))
            _assert_fetch_error(fetcher.fetch(_URL))

    def test_body_at_limit_is_accepted(self) -> None:
        with ContentFetcher(max_content_bytes=10) as fetcher, respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, content=b"x" * 10))
            result = fetcher.fetch(_URL)
        assert isinstance(result, FetchedContent)

    def test_streamed_body_over_limit(self) -> None:
        chunks = [b"a" * 8, b"b" * 8, b"c" * 8]
        with ContentFetcher(max_content_bytes=12) as fetcher, respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, content=iter(chunks)))
            _assert_fetch_error(fetcher.fetch(_URL))

    def test_declared_length_rejected_before_reading(self) -> None:
        """A Content-Length over the limit fails even if the body sent is small."""
        with ContentFetcher(max_content_bytes=10) as fetcher, respx.mock:
            respx.get(_URL).mock(
                return_value=httpx.Response(200, headers={"Content-Length": "999"}, content=b"abc")
            )
            _assert_fetch_error(fetcher.fetch(_URL))

    def test_deadline_reached_mid_download(self, fetcher) -> None:
        chunks = [b"a" * 4 for _ in range(5)]
        # Each clock read jumps 20s, so the first chunk already overruns the 10s budget.
        ticks = itertools.count(0.0, 20.0)
        with respx.mock, patch("urltext.pipeline.fetcher.time") as fake_time:
            fake_time.monotonic.side_effect = lambda: next(ticks)
            respx.get(_URL).mock(return_value=httpx.Response(200, content=iter(chunks)))
            _assert_fetch_error(fetcher.fetch(_URL, deadline=10.0))

    def test_expired_deadline_skips_request(self, fetcher) -> None:
        with respx.mock(assert_all_called=False):
            route = respx.get(_URL).mock(return_value=httpx.Response(200, content=b"x"))
            _assert_fetch_error(fetcher.fetch(_URL, deadline=0))
        assert not route.called

    def test_deadline_within_budget(self, fetcher) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, content=b"fast"))
            result = fetcher.fetch(_URL, deadline=10.0)
        assert isinstance(result, FetchedContent)


class TestLifecycle:
    def test_context_manager_closes_client(self) -> None:
        client = httpx.Client()
        with ContentFetcher(client=client):
            assert not client.is_closed
        assert client.is_closed
