"""Tests for jobcrawler.processor (Processor base class and SiteMapProcessor)."""

from __future__ import annotations

import pytest

from jobcrawler.errors import ConfigurationError
from jobcrawler.processor import Processor, SiteMapProcessor

ROOT = "https://example.com/"


class CareersProcessor(Processor):
    def process_index(self, page, data):
        for link in page.links_with(text=r"(job|career|opportunities|employment)"):
            self.spider.enqueue(link.href, self.process_posting, {"label": link.text})

    def process_posting(self, page, data):
        self.spider.record({"uri": page.uri, "label": data["label"]})


class TestProcessor:
    def test_unknown_handler_raises(self):
        with pytest.raises(ConfigurationError):
            CareersProcessor(ROOT, handler="process_missing")

    def test_spider_is_lazy(self, make_fetcher):
        fetcher = make_fetcher()
        processor = CareersProcessor(ROOT, fetcher=fetcher, interval=0)
        assert processor._spider is None
        stream = processor.results()
        assert processor.spider.queue[0].handler == processor.process_index
        assert fetcher.calls == []
        del stream

    def test_empty_root_raises_on_spider_build(self):
        processor = CareersProcessor("")
        with pytest.raises(ConfigurationError):
            processor.spider

    def test_handlers_dispatched_by_reference(self, make_fetcher, listing_html):
        fetcher = make_fetcher({
            ROOT: listing_html,
            "https://example.com/employment": "<title>Employment</title>",
            "https://careers.example.org/openings": "<title>Openings</title>",
        })
        processor = CareersProcessor(ROOT, fetcher=fetcher, interval=0)
        assert list(processor.results()) == [
            {"uri": "https://example.com/employment", "label": "Employment Opportunities"},
            {"uri": "https://careers.example.org/openings", "label": "Careers"},
        ]

    def test_list_root_uses_designated_handler(self, make_fetcher):
        urls = [ROOT, "https://example.org/"]
        processor = CareersProcessor(urls, fetcher=make_fetcher(), interval=0)
        assert [e.url for e in processor.spider.queue] == urls
        assert all(e.handler == processor.process_index for e in processor.spider.queue)

    def test_base_processor_rejected(self):
        with pytest.raises(ConfigurationError, match="must override 'process_index'"):
            Processor(ROOT)

    def test_subclass_without_override_rejected(self):
        class Bare(Processor):
            pass

        with pytest.raises(ConfigurationError, match="Bare must override"):
            Bare(ROOT)

    def test_other_handler_on_bare_subclass_allowed(self, make_fetcher):
        class Postings(Processor):
            def process_posting(self, page, data):
                self.spider.record({"title": page.title})

        fetcher = make_fetcher({ROOT: "<title>Opening</title>"})
        processor = Postings(ROOT, handler="process_posting", fetcher=fetcher, interval=0)
        assert list(processor.results()) == [{"title": "Opening"}]


class TestSiteMapProcessor:
    def test_records_titles_and_stays_on_host(self, make_fetcher, listing_html):
        fetcher = make_fetcher({
            ROOT: listing_html,
            "https://example.com/about": "<title>About</title>",
            "https://example.com/employment": "<title>Jobs</title>",
        })
        processor = SiteMapProcessor(ROOT, fetcher=fetcher, interval=0)
        results = list(processor.results())
        assert results == [
            {ROOT: "Westfield School District"},
            {"https://example.com/about": "About"},
            {"https://example.com/employment": "Jobs"},
        ]
        assert "https://careers.example.org/openings" not in fetcher.calls
        # calendar page is missing from the fake site and answers 404
        assert [url for url, _ in processor.spider.failures] == [
            "https://example.com/calendar?year=2024",
        ]

    def test_any_host_follows_external_links(self, make_fetcher, listing_html):
        fetcher = make_fetcher({ROOT: listing_html})
        processor = SiteMapProcessor(ROOT, same_host=False, fetcher=fetcher, interval=0)
        list(processor.results())
        assert "https://careers.example.org/openings" in fetcher.calls

    def test_referrer_passed_as_data(self, make_fetcher, listing_html):
        processor = SiteMapProcessor(ROOT, fetcher=make_fetcher({ROOT: listing_html}), interval=0)
        list(processor.results())
        about = next(e for e in processor.spider.queue if e.url.endswith("/about"))
        assert about.data == {"referrer": ROOT}

    def test_max_urls_respected(self, make_fetcher, listing_html):
        fetcher = make_fetcher({ROOT: listing_html})
        processor = SiteMapProcessor(ROOT, fetcher=fetcher, interval=0, max_urls=1)
        list(processor.results())
        assert len(fetcher.calls) == 2
