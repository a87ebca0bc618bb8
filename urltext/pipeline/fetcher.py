"""HTTP fetcher: downloads the target resource into memory, within limits."""

from __future__ import annotations

import logging
import time
from typing import Optional, Union

import httpx

from urltext.config import settings
from urltext.pipeline.models import ExtractionError, FetchedContent

logger = logging.getLogger(__name__)


class ContentFetcher:
    """
    Thin wrapper around one shared ``httpx.Client``.
    - One GET per call, no retries
    - Timeout and maximum body size come from settings
    - The client is built once and never reconfigured, so concurrent
      callers can share an instance
    """

    def __init__(
        self,
        *,
        user_agent: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_content_bytes: Optional[int] = None,
        follow_redirects: Optional[bool] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._timeout = timeout_seconds if timeout_seconds is not None else settings.request_timeout
        self._max_bytes = max_content_bytes if max_content_bytes is not None else settings.max_content_bytes
        if follow_redirects is None:
            follow_redirects = settings.follow_redirects
        self._client = client or httpx.Client(
            headers={"User-Agent": user_agent or settings.user_agent},
            timeout=self._timeout,
            follow_redirects=follow_redirects,
        )

    def __enter__(self) -> "ContentFetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(
        self, url: str, deadline: Optional[float] = None
    ) -> Union[FetchedContent, ExtractionError]:
        """Download *url* and return its body.

        Args:
            url: Target URL, used as given.
            deadline: Seconds the caller can still wait, if it has a limit.
                It shortens the configured timeout and bounds the whole
                download, not just each network operation.

        Returns:
            :class:`FetchedContent` on a 2xx response, otherwise a FETCH
            :class:`ExtractionError`.  The upstream status is logged but
            not reported.
        """
        timeout = self._timeout
        if deadline is not None:
            if deadline <= 0:
                logger.error("No time left to download URL: %s", url)
                return ExtractionError.fetch()
            timeout = min(timeout, deadline)

        started = time.monotonic()
        try:
            with self._client.stream("GET", url, timeout=timeout) as response:
                status = response.status_code
                if not 200 <= status < 300:
                    logger.error("HTTP error downloading URL: %s - Status: %d", url, status)
                    return ExtractionError.fetch()

                declared = response.headers.get("Content-Length", "")
                if declared.isdigit() and int(declared) > self._max_bytes:
                    logger.error(
                        "Refusing to download URL: %s - declared size %s exceeds %d bytes",
                        url, declared, self._max_bytes,
                    )
                    return ExtractionError.fetch()

                buffer = bytearray()
                for chunk in response.iter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) > self._max_bytes:
                        logger.error(
                            "Aborted download of URL: %s - body exceeds %d bytes",
                            url, self._max_bytes,
                        )
                        return ExtractionError.fetch()
                    if deadline is not None and time.monotonic() - started > deadline:
                        logger.error("Aborted download of URL: %s - deadline reached", url)
                        return ExtractionError.fetch()
        except httpx.TimeoutException:
            logger.error("Timed out downloading URL: %s", url)
            return ExtractionError.fetch()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Error downloading content from URL: %s - %s", url, exc)
            return ExtractionError.fetch()

        logger.debug("Downloaded %d bytes from %s", len(buffer), url)
        return FetchedContent(data=bytes(buffer))
