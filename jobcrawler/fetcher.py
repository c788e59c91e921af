"""jobcrawler.fetcher - turn a URL into a :class:`~jobcrawler.page.Page`.

Uses only the stdlib (``urllib``) for HTTP.  Any object with a matching
``fetch(url)`` method can stand in for :class:`PageFetcher`; the spider only
relies on the :class:`Fetcher` protocol.

Usage::

    from jobcrawler.fetcher import PageFetcher

    page = PageFetcher(timeout=10).fetch("https://example.com/jobs")
    print(page.uri, page.title)
"""

from __future__ import annotations

import gzip
import logging
import random
import time
import urllib.error
import urllib.request
import zlib
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from jobcrawler.config import REQUEST_TIMEOUT
from jobcrawler.errors import FetchError, NotFoundError
from jobcrawler.page import Page

logger = logging.getLogger(__name__)

_DEFAULT_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

_RETRY_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


@runtime_checkable
class Fetcher(Protocol):
    """Anything that can fetch a URL and return a parsed page."""

    def fetch(self, url: str) -> Page:
        """Return the page at *url* or raise :class:`FetchError`."""
        ...


def _decode_response_body(raw: bytes, headers: object | None) -> str:
    encoding = ""
    if headers is not None:
        try:
            encoding = str(headers.get("Content-Encoding", "")).lower().strip()
        except AttributeError:
            encoding = ""

    if encoding == "gzip":
        raw = gzip.decompress(raw)
    elif encoding in ("deflate", "zlib"):
        raw = zlib.decompress(raw)

    charset = "utf-8"
    if headers is not None:
        try:
            charset = headers.get_content_charset("utf-8") or "utf-8"
        except AttributeError:
            charset = "utf-8"
    try:
        return raw.decode(charset, errors="replace")
    except (LookupError, ValueError):
        return raw.decode("utf-8", errors="replace")


class PageFetcher:
    """Blocking HTTP fetcher returning :class:`Page` objects.

    Args:
        timeout:     Per-request network timeout in seconds (default 30).
        user_agent:  Override the default browser User-Agent string.
        max_retries: Retries for transient failures (429, 5xx, network
                     errors).  ``0`` (default) means a failure is final.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        user_agent: str | None = None,
        max_retries: int = 0,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent or _DEFAULT_UA
        self.max_retries = max_retries

    def _request(self, url: str) -> urllib.request.Request:
        return urllib.request.Request(
            url,
            headers={
                "User-Agent": self.user_agent,
                "Accept": (
                    "text/html,application/xhtml+xml,application/xml;"
                    "q=0.9,*/*;q=0.8"
                ),
                "Accept-Language": "en-US,en;q=0.9",
                "Accept-Encoding": "gzip, deflate",
            },
        )

    def fetch(self, url: str) -> Page:
        """Fetch *url* and parse it into a :class:`Page`.

        Raises:
            NotFoundError: The server answered HTTP 404.
            FetchError:    Any other HTTP error, connection failure, body
                           decoding failure, or an unsupported URL scheme.
        """
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            raise FetchError(f"Unsupported URL scheme: {parsed.scheme!r}", url=url)

        req = self._request(url)
        last_exc: FetchError | None = None
        for attempt in range(self.max_retries + 1):
            try:
                with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                    raw: bytes = resp.read()
                    final_url = resp.geturl() or url
                    try:
                        html = _decode_response_body(raw, resp.headers)
                    except (OSError, zlib.error) as exc:
                        raise FetchError(
                            f"Could not decode response from {url}: {exc}", url=url,
                        ) from exc
                return Page.from_html(html, uri=final_url)

            except urllib.error.HTTPError as exc:
                if exc.code == 404:
                    raise NotFoundError(f"HTTP 404 fetching {url}", url=url) from exc
                last_exc = FetchError(
                    f"HTTP {exc.code} fetching {url}: {exc.reason}",
                    url=url,
                    status=exc.code,
                )
                if exc.code in _RETRY_CODES and attempt < self.max_retries:
                    self._backoff(url, attempt, f"HTTP {exc.code}")
                    continue
                raise last_exc from exc

            except urllib.error.URLError as exc:
                last_exc = FetchError(f"URL error fetching {url}: {exc.reason}", url=url)
                if attempt < self.max_retries:
                    self._backoff(url, attempt, str(exc.reason))
                    continue
                raise last_exc from exc

            except OSError as exc:
                last_exc = FetchError(f"Network error fetching {url}: {exc}", url=url)
                if attempt < self.max_retries:
                    self._backoff(url, attempt, str(exc))
                    continue
                raise last_exc from exc

        raise last_exc or FetchError(f"All retries exhausted for {url}", url=url)

    def _backoff(self, url: str, attempt: int, reason: str) -> None:
        delay = (2 ** attempt) + random.uniform(0, 1)
        logger.debug(
            "%s for %s, retrying in %.1fs (attempt %d/%d)",
            reason, url, delay, attempt + 1, self.max_retries,
        )
        time.sleep(delay)
