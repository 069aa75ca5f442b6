"""Three-phase crawl: seed page, then two fan-outs over a bounded thread pool."""

import sys
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence, TypeVar

from tqdm import tqdm

from linkhop.config import CrawlConfig, format_caps
from linkhop.extractors import Link, filter_links, normalize_url
from linkhop.fetcher import FetchError, Fetcher, Page

T = TypeVar("T")
R = TypeVar("R")

# fetch(url, selector) -> Page, raising FetchError on any failure
FetchFn = Callable[[str, str], Page]

PHASE_NAMES = {1: "First", 2: "Second", 3: "Third"}


class SeedFetchError(FetchError):
    """The seed page failed; nothing else can be crawled."""


@dataclass(frozen=True)
class PhaseResult:
    """Kept links from one source page in one phase, in document order."""

    phase: int
    source_url: str
    links: tuple[Link, ...]

    def __len__(self) -> int:
        return len(self.links)


@dataclass
class CrawlResult:
    """Append-only record of every PhaseResult, in deterministic phase/source order."""

    title: str = ""
    results: list[PhaseResult] = field(default_factory=list)

    def append(self, result: PhaseResult) -> None:
        self.results.append(result)

    def extend(self, results: Sequence[PhaseResult]) -> None:
        self.results.extend(results)

    def phase(self, n: int) -> list[PhaseResult]:
        return [r for r in self.results if r.phase == n]

    def phase_total(self, n: int) -> int:
        return sum(len(r) for r in self.results if r.phase == n)

    def links(self) -> Iterator[Link]:
        for r in self.results:
            yield from r.links

    @property
    def total(self) -> int:
        return sum(len(r) for r in self.results)


class WorkerPool:
    """
    Fixed-width thread pool with a per-phase barrier.

    map_ordered() blocks until every submitted unit has finished and returns results in
    submission order, whatever order the workers completed in. close() gives running
    units drain_timeout seconds, then cancels whatever has not started.
    """

    def __init__(self, workers: int, *, drain_timeout: float) -> None:
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="linkhop")
        self._drain_timeout = drain_timeout
        self._outstanding: set[Future] = set()

    def map_ordered(
        self,
        fn: Callable[[T], R],
        items: Sequence[T],
        *,
        pbar: tqdm | None = None,
    ) -> list[R]:
        slots: list[R | None] = [None] * len(items)
        futures = {self._executor.submit(fn, item): i for i, item in enumerate(items)}
        self._outstanding.update(futures)
        for fut in as_completed(futures):
            self._outstanding.discard(fut)
            # Units report fetch failures as None; anything raised here is a bug.
            slots[futures[fut]] = fut.result()
            if pbar is not None:
                pbar.update(1)
        return slots  # type: ignore[return-value]

    def close(self, *, cancel: bool = False) -> bool:
        """Shut down the pool. Returns False if units were still running after the drain window."""
        drained = True
        if self._outstanding and not cancel:
            _, not_done = wait(self._outstanding, timeout=self._drain_timeout)
            drained = not not_done
        if cancel or not drained:
            self._executor.shutdown(wait=False, cancel_futures=True)
        else:
            self._executor.shutdown(wait=True)
        self._outstanding.clear()
        return drained

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        interrupted = exc_type is not None and issubclass(exc_type, KeyboardInterrupt)
        if not self.close(cancel=interrupted) and not interrupted:
            print(
                f"Worker pool did not drain within {self._drain_timeout:g}s; cancelled remaining work",
                file=sys.stderr,
            )


def extract_phase(url: str, fetch: FetchFn, config: CrawlConfig, phase: int) -> tuple[Page, PhaseResult]:
    """Fetch url, filter its anchors, keep the phase cap. Raises FetchError."""
    page = fetch(url, config.selector)
    links = filter_links(page.anchors, config.keep_substring, config.image_extensions, config.cap(phase))
    return page, PhaseResult(phase=phase, source_url=url, links=tuple(links))


def try_extract_phase(link: Link, fetch: FetchFn, config: CrawlConfig, phase: int) -> PhaseResult | None:
    """Work unit for phases 2 and 3: a failed fetch is reported and contributes nothing."""
    url = normalize_url(link.href, config.origin_prefix)
    try:
        _, result = extract_phase(url, fetch, config, phase)
    except FetchError as e:
        print(f"Error in {PHASE_NAMES[phase].lower()} phase for URL {link.href}: {e.cause}", file=sys.stderr)
        return None
    return result


def run_phase(
    pool: WorkerPool,
    sources: Sequence[Link],
    fetch: FetchFn,
    config: CrawlConfig,
    phase: int,
    *,
    use_progress: bool = False,
) -> list[PhaseResult]:
    """Fan one unit per source link out to the pool; return non-failed results in source order."""
    pbar = None
    if use_progress and sources:
        pbar = tqdm(total=len(sources), desc=f"Phase {phase}", unit=" page", file=sys.stderr)
    try:
        results = pool.map_ordered(
            lambda link: try_extract_phase(link, fetch, config, phase),
            sources,
            pbar=pbar,
        )
    finally:
        if pbar is not None:
            pbar.close()
    return [r for r in results if r is not None]


def _summary(phase: int, count: int) -> str:
    return f"{PHASE_NAMES[phase]} phase completed. Found {count} links"


def crawl(
    config: CrawlConfig,
    fetch: FetchFn | None = None,
    *,
    use_progress: bool = False,
) -> CrawlResult:
    """
    Run phase 1 on the seed, then phase 2 over its links, then phase 3 over every
    phase-2 link. Each phase starts only after the previous one has fully finished.
    Prints the title and per-phase summaries to stdout. Raises SeedFetchError if the
    seed cannot be fetched.
    """
    print(
        f"Crawl started ({config.workers} workers, caps {format_caps(config.caps)})",
        file=sys.stderr,
    )
    if fetch is not None:
        return _crawl(config, fetch, use_progress)
    with Fetcher(
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
        max_connections=config.workers,
    ) as fetcher:
        return _crawl(config, fetcher.fetch_page, use_progress)


def _crawl(config: CrawlConfig, fetch: FetchFn, use_progress: bool) -> CrawlResult:
    result = CrawlResult()
    try:
        page, first = extract_phase(config.seed_url, fetch, config, 1)
    except FetchError as e:
        raise SeedFetchError(e.url, e.cause) from e
    result.title = page.title
    print(f"Page title: {page.title}")
    result.append(first)
    print(_summary(1, len(first)))

    with WorkerPool(config.workers, drain_timeout=config.drain_timeout) as pool:
        second = run_phase(pool, first.links, fetch, config, 2, use_progress=use_progress)
        result.extend(second)
        print(_summary(2, result.phase_total(2)))

        sources = [link for r in second for link in r.links]
        third = run_phase(pool, sources, fetch, config, 3, use_progress=use_progress)
        result.extend(third)
        print(_summary(3, result.phase_total(3)))
    return result
