"""Extract anchors from parsed HTML and decide which links to follow."""

from dataclasses import dataclass
from itertools import islice
from typing import Iterable

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class Link:
    """One anchor as it appeared in the page: raw href and visible text."""

    href: str
    text: str


def _normalize_text(s: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    return " ".join(s.split())


def page_title(soup: BeautifulSoup) -> str:
    """Stripped <head> <title> text, or "" if the page has none."""
    tag = soup.head.find("title") if soup.head is not None else None
    if tag is None:
        return ""
    return _normalize_text(tag.get_text())


def select_anchors(soup: BeautifulSoup, selector: str) -> list[Link]:
    """Anchors matching selector inside <body>, in document order."""
    root = soup.body if soup.body is not None else soup
    links: list[Link] = []
    for tag in root.select(selector):
        href = tag.get("href")
        if isinstance(href, list):
            href = " ".join(href)
        links.append(Link(href or "", _normalize_text(tag.get_text())))
    return links


def normalize_url(href: str, origin_prefix: str) -> str:
    """
    Make href absolute by prefixing origin_prefix unless it already starts with "http".
    No parsing or trimming: "https" passes through since it also starts with "http".
    """
    return href if href.startswith("http") else origin_prefix + href


def is_image_href(href: str, image_extensions: Iterable[str]) -> bool:
    """True if the lower-cased href ends with any of the given extensions."""
    lower = href.lower()
    return any(lower.endswith(ext) for ext in image_extensions)


def keep_link(link: Link, keep_substring: str, image_extensions: Iterable[str]) -> bool:
    """Follow only links whose href contains keep_substring and is not an image."""
    return keep_substring in link.href and not is_image_href(link.href, image_extensions)


def filter_links(
    links: Iterable[Link],
    keep_substring: str,
    image_extensions: Iterable[str],
    cap: int | None = None,
) -> list[Link]:
    """Kept links in input order, truncated to the first cap (all if cap is None)."""
    exts = tuple(image_extensions)
    kept = (link for link in links if keep_link(link, keep_substring, exts))
    return list(kept if cap is None else islice(kept, cap))
