"""HTTP fetching and anchor selection. One GET per page, no retries."""

from dataclasses import dataclass, field

import httpx
from bs4 import BeautifulSoup

from linkhop.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, DEFAULT_WORKERS
from linkhop.extractors import Link, page_title, select_anchors

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class FetchError(Exception):
    """A page could not be fetched or parsed. Carries the URL and a readable cause."""

    def __init__(self, url: str, cause: str) -> None:
        super().__init__(cause)
        self.url = url
        self.cause = cause


@dataclass
class Page:
    """Parsed page: title and the anchors matched by the selector, in document order."""

    url: str
    title: str = ""
    anchors: list[Link] = field(default_factory=list)


def _describe(e: BaseException) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        return f"HTTP {e.response.status_code} {e.response.reason_phrase}".strip()
    return str(e) or type(e).__name__


class Fetcher:
    """HTTP fetcher with connection pooling. One instance is safe to share across threads."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        max_connections: int = DEFAULT_WORKERS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
        )
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                follow_redirects=True,
                timeout=self._timeout,
                headers=self._headers,
                limits=self._limits,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def fetch_html(self, url: str) -> tuple[bytes, str]:
        """GET url; returns (raw_bytes, charset). Raises FetchError on network error or non-2xx."""
        try:
            resp = self._get_client().get(url)
            resp.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            raise FetchError(url, _describe(e)) from e
        except httpx.InvalidURL as e:
            raise FetchError(url, f"invalid URL: {e}") from e
        return resp.content, resp.charset_encoding or "utf-8"

    def fetch_page(self, url: str, selector: str) -> Page:
        """Fetch url, parse it, and return its title and the anchors matching selector."""
        raw, charset = self.fetch_html(url)
        try:
            html_str = raw.decode(charset, errors="replace")
        except LookupError:
            html_str = raw.decode("utf-8", errors="replace")
        try:
            soup = BeautifulSoup(html_str, "lxml")
            return Page(url=url, title=page_title(soup), anchors=select_anchors(soup, selector))
        except Exception as e:
            raise FetchError(url, f"parse error: {_describe(e)}") from e


def fetch_and_select(
    url: str,
    selector: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> Page:
    """Standalone fetch (creates temporary client). Prefer Fetcher for multiple requests."""
    with Fetcher(timeout=timeout, max_connections=1, transport=transport) as f:
        return f.fetch_page(url, selector)
