"""Final report: every scraped link with a running index, then the total."""

from typing import Iterator

from linkhop.pipeline import CrawlResult


def report_lines(result: CrawlResult) -> Iterator[str]:
    yield ""
    yield "All scraped links:"
    n = 0
    for n, link in enumerate(result.links(), start=1):
        yield f"{n}: {link.href} - {link.text}"
    yield ""
    yield f"Total number of links scraped: {n}"


def print_report(result: CrawlResult) -> None:
    for line in report_lines(result):
        print(line)
