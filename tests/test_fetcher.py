import httpx
import pytest

from linkhop import pipeline
from linkhop.extractors import Link
from linkhop.fetcher import FetchError, Fetcher, fetch_and_select

SELECTOR = "div.mw-body-content a[href]"

PAGE = b"""<html><head><title>Start</title></head><body>
<a href="/wiki/Outside">outside</a>
<div class="mw-body-content"><a href="/wiki/One">One</a><a href="/wiki/Two">Two</a></div>
</body></html>"""


def _fetcher(handler) -> Fetcher:
    return Fetcher(transport=httpx.MockTransport(handler))


def test_fetch_page_returns_title_and_scoped_anchors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=PAGE, headers={"Content-Type": "text/html; charset=utf-8"})

    with _fetcher(handler) as f:
        page = f.fetch_page("https://example.org/wiki/Start", SELECTOR)
    assert page.title == "Start"
    assert page.anchors == [Link("/wiki/One", "One"), Link("/wiki/Two", "Two")]


def test_fetch_page_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/wiki/Old":
            return httpx.Response(301, headers={"Location": "https://example.org/wiki/New"})
        return httpx.Response(200, content=PAGE)

    with _fetcher(handler) as f:
        page = f.fetch_page("https://example.org/wiki/Old", SELECTOR)
    assert page.title == "Start"


def test_non_success_status_is_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with _fetcher(handler) as f:
        with pytest.raises(FetchError) as exc_info:
            f.fetch_page("https://example.org/wiki/Missing", SELECTOR)
    assert exc_info.value.url == "https://example.org/wiki/Missing"
    assert "404" in exc_info.value.cause


def test_network_error_is_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _fetcher(handler) as f:
        with pytest.raises(FetchError, match="connection refused"):
            f.fetch_page("https://example.org/wiki/Down", SELECTOR)


def test_sends_browser_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200, content=PAGE)

    with _fetcher(handler) as f:
        f.fetch_page("https://example.org/wiki/Start", SELECTOR)
    assert seen["user-agent"].startswith("Mozilla/5.0")
    assert "text/html" in seen["accept"]


def test_fetch_and_select_standalone():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=PAGE)

    page = fetch_and_select(
        "https://example.org/wiki/Start", SELECTOR, transport=httpx.MockTransport(handler)
    )
    assert page.url == "https://example.org/wiki/Start"
    assert page.title == "Start"
    assert [a.href for a in page.anchors] == ["/wiki/One", "/wiki/Two"]


def test_fetch_and_select_wraps_failures():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(FetchError, match="503"):
        fetch_and_select("https://example.org/wiki/Busy", SELECTOR, transport=httpx.MockTransport(handler))


def test_crawl_sends_configured_user_agent(monkeypatch, make_config):
    agents = []

    def handler(request: httpx.Request) -> httpx.Response:
        agents.append(request.headers["user-agent"])
        return httpx.Response(200, content=b"<html><body><p>no links</p></body></html>")

    transport = httpx.MockTransport(handler)
    real_fetcher = pipeline.Fetcher
    monkeypatch.setattr(pipeline, "Fetcher", lambda **kwargs: real_fetcher(transport=transport, **kwargs))

    result = pipeline.crawl(make_config(user_agent="linkhop-test/1.0"))
    assert result.total == 0
    assert agents == ["linkhop-test/1.0"]
