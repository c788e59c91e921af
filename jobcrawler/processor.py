"""jobcrawler.processor - handler objects that drive a :class:`Spider`.

A processor names its root URL(s) and the method that handles them, and owns
the spider it feeds::

    class Careers(Processor):
        def process_index(self, page, data):
            for link in page.links_with(text=r"careers?|jobs?"):
                self.spider.enqueue(link.href, self.process_posting)

        def process_posting(self, page, data):
            self.spider.record({page.uri: page.title})

    for result in Careers("https://example.com/", interval=2).results():
        print(result)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import urlparse

from jobcrawler.errors import ConfigurationError
from jobcrawler.page import Page
from jobcrawler.spider import ResultStream, Spider

logger = logging.getLogger(__name__)


class Processor:
    """Base class for crawl handlers.

    Args:
        root:     Root URL or list of URLs.  Extra URLs are queued with the
                  same handler as the root.
        handler:  Name of the method that processes the root URL(s).
        **options: Forwarded to :class:`Spider` (``interval``, ``max_urls``,
                  ``fetcher``).
    """

    def __init__(
        self,
        root: str | Sequence[str],
        handler: str = "process_index",
        **options: Any,
    ) -> None:
        method = getattr(self, handler, None)
        if not callable(method):
            raise ConfigurationError(
                f"{type(self).__name__} has no handler method {handler!r}",
            )
        if getattr(type(self), handler, None) is Processor.process_index:
            raise ConfigurationError(
                f"{type(self).__name__} must override {handler!r}",
            )
        self.root = root
        self.handler = method
        self._options = options
        self._spider: Spider | None = None

    @property
    def spider(self) -> Spider:
        if self._spider is None:
            self._spider = Spider(self.root, self.handler, **self._options)
        return self._spider

    def process_index(self, page: Page, data: dict[str, Any]) -> None:
        raise NotImplementedError(f"{type(self).__name__}.process_index is not implemented")

    def results(self) -> ResultStream:
        return self.spider.results()


class SiteMapProcessor(Processor):
    """Record ``{uri: title}`` for every page and follow every link.

    With *same_host* (the default) only links on the root URL's host are
    followed.
    """

    def __init__(
        self,
        root: str | Sequence[str],
        *,
        same_host: bool = True,
        **options: Any,
    ) -> None:
        super().__init__(root, "process_index", **options)
        self.same_host = same_host
        urls = [root] if isinstance(root, str) else list(root or [])
        self._hosts = {urlparse(u).netloc.lower() for u in urls if u}

    def process_index(self, page: Page, data: dict[str, Any]) -> None:
        if page.title:
            self.spider.record({page.uri: page.title})
        logger.debug("%d links on %s", len(page.links), page.uri)
        for link in page.links_with():
            if self.same_host and urlparse(link.href).netloc.lower() not in self._hosts:
                continue
            self.spider.enqueue(link.href, self.process_index, {"referrer": page.uri})
