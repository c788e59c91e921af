"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from jobcrawler.errors import NotFoundError
from jobcrawler.page import Page

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class FakeFetcher:
    """In-memory fetcher: HTML strings become pages, exceptions are raised.

    URLs missing from *pages* answer like a 404.
    """

    def __init__(self, pages: dict[str, str | Exception] | None = None) -> None:
        self.pages = dict(pages or {})
        self.calls: list[str] = []

    def fetch(self, url: str) -> Page:
        self.calls.append(url)
        value = self.pages.get(url)
        if value is None:
            raise NotFoundError(f"HTTP 404 fetching {url}", url=url)
        if isinstance(value, Exception):
            raise value
        return Page.from_html(value, uri=url)


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def listing_html() -> str:
    return _read_fixture("listing.html")


@pytest.fixture
def config_yaml() -> str:
    return _read_fixture("config.yml")
