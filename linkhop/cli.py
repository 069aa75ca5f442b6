"""Linkhop CLI. Invoked as `linkhop` when installed with pip install -e ."""

import argparse
import sys

from linkhop import __version__
from linkhop._deps import check_required
from linkhop.config import (
    DEFAULT_CAPS,
    DEFAULT_KEEP_SUBSTRING,
    DEFAULT_ORIGIN_PREFIX,
    DEFAULT_SEED_URL,
    DEFAULT_SELECTOR,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    DEFAULT_WORKERS,
    DRAIN_TIMEOUT,
    CrawlConfig,
    format_caps,
    parse_caps,
)

EXIT_SEED_FAILED = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkhop",
        description="Collect links three hops deep from a seed page using a bounded worker pool.",
    )
    parser.add_argument("--seed", default=DEFAULT_SEED_URL, metavar="URL", help=f"Seed page (default: {DEFAULT_SEED_URL})")
    parser.add_argument(
        "--origin",
        default=DEFAULT_ORIGIN_PREFIX,
        metavar="PREFIX",
        help="Prefix for hrefs that do not start with http (default: %(default)s)",
    )
    parser.add_argument("--selector", default=DEFAULT_SELECTOR, metavar="CSS", help="Anchor selector within <body> (default: %(default)s)")
    parser.add_argument(
        "--keep",
        default=DEFAULT_KEEP_SUBSTRING,
        metavar="SUBSTRING",
        help="Follow only hrefs containing this substring (default: %(default)s)",
    )
    parser.add_argument("--pool", type=int, default=DEFAULT_WORKERS, metavar="N", help="Worker pool size (default: %(default)s)")
    parser.add_argument(
        "--caps",
        default=format_caps(DEFAULT_CAPS),
        metavar="P1,P2,P3",
        help="Links kept per page in each phase; 0 means no limit (default: %(default)s)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Fetch one page at a time. Equivalent to --pool 1.",
    )
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, metavar="SECS", help="Per-request timeout (default: %(default)s)")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, metavar="UA", help="User-Agent header sent with every request")
    parser.add_argument(
        "--drain-timeout",
        type=float,
        default=DRAIN_TIMEOUT,
        metavar="SECS",
        help="Time the worker pool may take to finish at shutdown (default: %(default)s)",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bars (e.g. for scripting)")
    parser.add_argument("--version", action="version", version=f"linkhop {__version__}")
    return parser


def config_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> CrawlConfig:
    try:
        caps = parse_caps(args.caps)
    except ValueError as e:
        parser.error(f"--caps: {e}")
    try:
        return CrawlConfig(
            seed_url=args.seed,
            origin_prefix=args.origin,
            selector=args.selector,
            keep_substring=args.keep,
            caps=caps,
            workers=1 if args.sequential else args.pool,
            drain_timeout=args.drain_timeout,
            timeout=args.timeout,
            user_agent=args.user_agent,
        )
    except ValueError as e:
        parser.error(str(e))


def main(argv: list[str] | None = None) -> None:
    check_required()

    from linkhop.pipeline import SeedFetchError, crawl
    from linkhop.report import print_report

    parser = build_parser()
    args = parser.parse_args(argv)
    config = config_from_args(parser, args)

    try:
        result = crawl(config, use_progress=not args.no_progress)
    except SeedFetchError as e:
        print(f"Error during scraping: {e.cause}", file=sys.stderr)
        sys.exit(EXIT_SEED_FAILED)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    print_report(result)


if __name__ == "__main__":
    main()
