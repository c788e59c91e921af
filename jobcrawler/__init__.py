"""jobcrawler - a small pull-driven web crawling engine.

Quick usage::

    import itertools
    from jobcrawler import Spider

    def handle(page, data):
        spider.record({page.uri: page.title})
        for link in page.links_with(text=r"jobs?|careers?"):
            spider.enqueue(link.href, handle)

    spider = Spider("https://example.com/", handle, interval=1, max_urls=200)
    for result in itertools.islice(spider.results(), 10):
        print(result)

Handler classes::

    from jobcrawler import SiteMapProcessor

    for result in SiteMapProcessor("https://example.com/").results():
        print(result)
"""

from jobcrawler.config import CrawlConfig, SpiderConfig, load_config
from jobcrawler.errors import ConfigurationError, FetchError, NotFoundError
from jobcrawler.fetcher import Fetcher, PageFetcher
from jobcrawler.page import Link, Page
from jobcrawler.processor import Processor, SiteMapProcessor
from jobcrawler.spider import QueueEntry, ResultStream, Spider

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "CrawlConfig",
    "FetchError",
    "Fetcher",
    "Link",
    "NotFoundError",
    "Page",
    "PageFetcher",
    "Processor",
    "QueueEntry",
    "ResultStream",
    "SiteMapProcessor",
    "Spider",
    "SpiderConfig",
    "load_config",
]
