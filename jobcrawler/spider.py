"""jobcrawler.spider - the crawl engine.

A :class:`Spider` owns the URL queue, the visited set, the pacing and the
results buffer.  Handlers look at each fetched page and call
:meth:`Spider.enqueue` / :meth:`Spider.record`; callers pull records out of
:meth:`Spider.results`, which only fetches pages as it is consumed::

    spider = Spider("https://example.com/", handle_page, interval=0.5)
    first_five = list(itertools.islice(spider.results(), 5))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from jobcrawler.config import MAX_URLS, REQUEST_INTERVAL, SpiderConfig
from jobcrawler.errors import ConfigurationError, NotFoundError
from jobcrawler.fetcher import Fetcher, PageFetcher
from jobcrawler.page import Page
from jobcrawler.rate_limit import RequestPacer

logger = logging.getLogger(__name__)

Handler = Callable[[Page, dict[str, Any]], None]


@dataclass(frozen=True)
class QueueEntry:
    """One URL scheduled for fetch, plus the handler and data to process it."""

    url: str
    handler: Handler
    data: dict[str, Any] = field(default_factory=dict)


def _log(label: str, info: str, level: int = logging.ERROR) -> None:
    logger.log(level, "%-10s: %s", label, info)


class Spider:
    """Single-threaded, pull-driven crawler.

    Args:
        root:     Root URL, or a sequence whose first element is the root and
                  whose remaining URLs are queued right after it.
        handler:  Callable ``(page, data)`` invoked for the root URL(s).
        interval: Seconds to pause between processed queue entries.
        max_urls: Index of the last queue position the loop will visit, so at
                  most ``max_urls + 1`` pages are fetched.  Enqueueing past the
                  cap is allowed; those entries are never processed.
        fetcher:  Object implementing :class:`~jobcrawler.fetcher.Fetcher`.
                  Defaults to a :class:`~jobcrawler.fetcher.PageFetcher`
                  created on first use.

    Raises:
        ConfigurationError: Empty root, non-callable handler, or invalid
            *interval* / *max_urls*.
    """

    def __init__(
        self,
        root: str | Sequence[str],
        handler: Handler,
        *,
        interval: float = REQUEST_INTERVAL,
        max_urls: int = MAX_URLS,
        fetcher: Fetcher | None = None,
    ) -> None:
        if not callable(handler):
            raise ConfigurationError(f"handler must be callable; got {handler!r}")

        roots = [root] if isinstance(root, str) else list(root or [])
        if not roots or not isinstance(roots[0], str) or not roots[0].strip():
            raise ConfigurationError(f"root URL must be a non-empty string; got {root!r}")

        self.config = SpiderConfig.build(interval=interval, max_urls=max_urls)

        self._queue: list[QueueEntry | None] = []
        self._entries: dict[str, QueueEntry] = {}
        self._results: list[dict[str, Any]] = []
        self._failures: list[tuple[str, Exception]] = []
        # next queue position the crawl loop will visit
        self._cursor = 0
        self._pause_pending = False

        self._fetcher = fetcher
        self._pacer = RequestPacer(self.config.interval)

        for url in roots:
            self.enqueue(url, handler)

    # ------------------------------------------------------------------
    # Handler API
    # ------------------------------------------------------------------

    def enqueue(self, url: str, handler: Handler, data: dict[str, Any] | None = None) -> None:
        """Schedule *url* for processing by *handler*.

        Does nothing for an empty URL or one that is already queued; the first
        handler/data assigned to a URL wins.
        """
        if not url or url in self._entries:
            return
        entry = QueueEntry(url=url, handler=handler, data=dict(data or {}))
        self._entries[url] = entry
        self._queue.append(entry)

    def record(self, data: dict[str, Any] | None = None) -> None:
        """Append *data* to the results buffer."""
        self._results.append(data if data is not None else {})

    # ------------------------------------------------------------------
    # Consumer API
    # ------------------------------------------------------------------

    def results(self) -> ResultStream:
        """Return a lazy iterator over recorded results.

        No page is fetched until the iterator is advanced.  Every call returns
        a fresh stream that starts from the first recorded result; pages that
        were already crawled are not fetched again.
        """
        return ResultStream(self)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def fetcher(self) -> Fetcher:
        if self._fetcher is None:
            self._fetcher = PageFetcher()
        return self._fetcher

    @property
    def queue(self) -> tuple[QueueEntry | None, ...]:
        return tuple(self._queue)

    @property
    def recorded(self) -> tuple[dict[str, Any], ...]:
        return tuple(self._results)

    @property
    def processed(self) -> int:
        """Number of queue positions consumed by the crawl loop so far."""
        return self._cursor

    @property
    def failures(self) -> tuple[tuple[str, Exception], ...]:
        """``(url, error)`` for every entry whose fetch or handler failed."""
        return tuple(self._failures)

    def visited(self, url: str) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._queue)

    # ------------------------------------------------------------------
    # Crawl loop
    # ------------------------------------------------------------------

    def _exhausted(self) -> bool:
        return not (
            self._cursor < len(self._queue) and self._cursor <= self.config.max_urls
        )

    def _advance(self) -> bool:
        """Process the next queue entry.  Return ``False`` once the queue is done."""
        while not self._exhausted():
            entry = self._queue[self._cursor]
            self._cursor += 1
            if entry is None:
                continue
            # pause owed by the previous entry, taken only if more work follows
            if self._pause_pending:
                self._pacer.wait()
            self._process(entry)
            self._pause_pending = self._pacer.interval > 0
            return True
        return False

    def _process(self, entry: QueueEntry) -> None:
        _log("Handling", repr(entry.url), logging.INFO)
        try:
            page = self.fetcher.fetch(entry.url)
            entry.handler(page, entry.data)
        except NotFoundError as exc:
            self._failures.append((entry.url, exc))
            _log("Error", f"Page not found: {entry.url!r}")
        except Exception as exc:
            self._failures.append((entry.url, exc))
            _log("Error", f"{entry.url!r}, {exc}")
            logger.debug("Traceback for %s", entry.url, exc_info=True)


class ResultStream(Iterator[dict[str, Any]]):
    """Iterator state for :meth:`Spider.results`.

    Holds how many records this stream has yielded; the queue position lives
    on the spider so that several streams share one crawl.
    """

    def __init__(self, spider: Spider) -> None:
        self._spider = spider
        self.emitted = 0

    def __iter__(self) -> ResultStream:
        return self

    def __next__(self) -> dict[str, Any]:
        spider = self._spider
        while self.emitted >= len(spider._results):
            if not spider._advance():
                raise StopIteration
        record = spider._results[self.emitted]
        self.emitted += 1
        return record
