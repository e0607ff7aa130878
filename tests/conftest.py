"""Shared fixtures: an in-memory site and a fetcher that serves it."""

import asyncio

import pytest

from sitegraph.exceptions import FetchError
from sitegraph.models import FetchResult

ROOT = "https://example.com/"


class FakeFetcher:
    """Serves pages from a dict of canonical URL -> (hrefs, text)."""

    def __init__(self, site, failing=(), delay=0.0, on_fetch=None):
        self.site = site
        self.failing = set(failing)
        self.delay = delay
        self.on_fetch = on_fetch
        self.calls = []

    async def fetch(self, url, timeout):
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.on_fetch is not None:
            self.on_fetch(url)
        if url in self.failing:
            raise FetchError("HTTP 500", url=url, status_code=500)
        if url not in self.site:
            raise FetchError("HTTP 404", url=url, status_code=404)
        links, text = self.site[url]
        return FetchResult(outbound_urls=list(links), page_text=text)


@pytest.fixture
def site():
    """A -> {B, C}, B -> {D}, C -> {E, F}, E -> {G}."""
    return {
        ROOT: (
            ["/b", "/c", "https://other.org/elsewhere", "#top"],
            "Welcome to the Python developer documentation for the Acme Platform",
        ),
        ROOT + "b": (["/d"], "Python tutorials and database guides"),
        ROOT + "c": (["/e", "f"], "Business services for enterprise customers"),
        ROOT + "d": ([], "Deep page about kubernetes deployments"),
        ROOT + "e": (["/g"], "Security and privacy overview"),
        ROOT + "f": ([], "Frequently asked questions"),
        ROOT + "g": ([], "Leaf page that is never fetched at depth three"),
    }


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def fetcher(site):
    """FakeFetcher over the fixture site."""
    return FakeFetcher(site)
