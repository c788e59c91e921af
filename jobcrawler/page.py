"""jobcrawler.page - fetched page model handed to handlers.

Usage::

    from jobcrawler.page import Page

    page = Page.from_html(html, uri="https://example.com/")
    print(page.title)
    for link in page.links_with(text=r"careers?"):
        print(link.href, link.text)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup, Tag

_SKIP_PREFIXES: tuple[str, ...] = ("#", "mailto:", "javascript:", "tel:", "data:", "sms:")


@dataclass(frozen=True)
class Link:
    href: str
    text: str = ""


@dataclass
class Page:
    """A fetched page.

    Attributes:
        uri:   Final URL of the page, after redirects.
        body:  Raw decoded response body.
        title: Stripped ``<title>`` text, empty when absent.
        links: Absolute, de-duplicated hyperlinks in document order.
    """

    uri: str
    body: str
    title: str = ""
    links: list[Link] = field(default_factory=list)

    @classmethod
    def from_html(cls, html: str, uri: str) -> Page:
        soup = BeautifulSoup(html, "lxml")
        title = ""
        t = soup.find("title")
        if t:
            title = t.get_text().strip()
        return cls(uri=uri, body=html, title=title, links=_extract_links(soup, uri))

    def links_with(
        self,
        text: str | re.Pattern[str] | None = None,
        href: str | re.Pattern[str] | None = None,
    ) -> list[Link]:
        """Return links whose text and/or href match the given patterns.

        Plain string patterns are compiled case-insensitively and matched with
        ``re.search``.  With no filters every link is returned.
        """
        text_re = _compile(text)
        href_re = _compile(href)
        return [
            link for link in self.links
            if (text_re is None or text_re.search(link.text))
            and (href_re is None or href_re.search(link.href))
        ]


def _compile(pattern: str | re.Pattern[str] | None) -> re.Pattern[str] | None:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, re.IGNORECASE)


def _extract_links(soup: BeautifulSoup, base_url: str) -> list[Link]:
    links: list[Link] = []
    seen: set[str] = set()

    for a in soup.find_all("a"):
        if not isinstance(a, Tag):
            continue
        href = str(a.get("href") or "").strip()
        if not href or href.lower().startswith(_SKIP_PREFIXES):
            continue

        if base_url:
            href = urljoin(base_url, href)
        href = urldefrag(href).url
        scheme = urlparse(href).scheme
        if scheme and scheme not in ("http", "https"):
            continue

        if href in seen:
            continue
        seen.add(href)
        links.append(Link(href=href, text=" ".join(a.get_text().split())))

    return links
