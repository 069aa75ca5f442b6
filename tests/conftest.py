"""Shared fixtures: a scripted fetcher standing in for HTTP + HTML parsing."""

import threading
import time

import pytest

from linkhop.config import CrawlConfig
from linkhop.extractors import Link
from linkhop.fetcher import FetchError, Page

ORIGIN = "https://example.org"
SEED = ORIGIN + "/wiki/Seed"


class ScriptedFetcher:
    """
    Maps absolute URL -> list of hrefs (or an exception to raise). Unknown URLs
    return a page with no anchors. Records every call so tests can check fan-out
    and phase ordering.
    """

    def __init__(self, pages=None, *, default=(), delay=None):
        self.pages = dict(pages or {})
        self.default = list(default)
        self.delay = delay
        self.calls: list[str] = []
        self.events: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def __call__(self, url: str, selector: str) -> Page:
        with self._lock:
            self.calls.append(url)
            self.events.append(("start", url))
        try:
            if self.delay is not None:
                time.sleep(self.delay(url))
            entry = self.pages.get(url, self.default)
            if isinstance(entry, Exception):
                raise entry
            anchors = [h if isinstance(h, Link) else Link(h, h.rsplit("/", 1)[-1]) for h in entry]
            return Page(url=url, title=f"Title of {url}", anchors=anchors)
        finally:
            with self._lock:
                self.events.append(("end", url))


def fail(url: str) -> FetchError:
    return FetchError(url, "HTTP 500 Internal Server Error")


@pytest.fixture
def make_config():
    def _make(**overrides):
        values = {"seed_url": SEED, "origin_prefix": ORIGIN, "drain_timeout": 5.0}
        values.update(overrides)
        return CrawlConfig(**values)

    return _make
