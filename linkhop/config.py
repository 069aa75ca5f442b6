"""Crawl configuration: compiled-in baseline plus CLI overrides."""

from dataclasses import dataclass, field

DEFAULT_SEED_URL = "https://pl.wikipedia.org/wiki/Java"
DEFAULT_ORIGIN_PREFIX = "https://pl.wikipedia.org"
DEFAULT_SELECTOR = "div.mw-body-content a[href]"
DEFAULT_KEEP_SUBSTRING = "wiki"
# Matched as plain suffixes of the lower-cased href (no leading dot).
DEFAULT_IMAGE_EXTENSIONS = frozenset({"jpg", "png", "svg", "jpeg", "webp"})

PHASE_COUNT = 3
DEFAULT_CAPS: tuple[int | None, ...] = (50, 10, None)  # None = uncapped
DEFAULT_WORKERS = 50
DRAIN_TIMEOUT = 60.0  # seconds the pool may take to drain at shutdown
DEFAULT_TIMEOUT = 30.0
# Browser-like UA to reduce 403 from sites that block scrapers
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def parse_caps(s: str) -> tuple[int | None, ...]:
    """Parse "50,10,0" into per-phase caps; 0 means uncapped (None)."""
    parts = [p.strip() for p in s.split(",")]
    if len(parts) != PHASE_COUNT:
        raise ValueError(f"expected {PHASE_COUNT} comma-separated caps, got {s!r}")
    caps: list[int | None] = []
    for p in parts:
        if not p.isdigit():
            raise ValueError(f"cap must be a non-negative integer, got {p!r}")
        n = int(p)
        caps.append(n if n > 0 else None)
    return tuple(caps)


def format_caps(caps: tuple[int | None, ...]) -> str:
    """Inverse of parse_caps, for display."""
    return ",".join(str(c) if c is not None else "0" for c in caps)


@dataclass(frozen=True)
class CrawlConfig:
    """Everything the orchestrator needs; built once at startup and never mutated."""

    seed_url: str = DEFAULT_SEED_URL
    origin_prefix: str = DEFAULT_ORIGIN_PREFIX
    selector: str = DEFAULT_SELECTOR
    keep_substring: str = DEFAULT_KEEP_SUBSTRING
    image_extensions: frozenset[str] = field(default=DEFAULT_IMAGE_EXTENSIONS)
    caps: tuple[int | None, ...] = DEFAULT_CAPS
    workers: int = DEFAULT_WORKERS
    drain_timeout: float = DRAIN_TIMEOUT
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        for name in ("seed_url", "origin_prefix", "selector", "user_agent"):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")
        if len(self.caps) != PHASE_COUNT:
            raise ValueError(f"expected {PHASE_COUNT} caps, got {len(self.caps)}")
        if any(c is not None and c < 0 for c in self.caps):
            raise ValueError("caps must be non-negative")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.drain_timeout <= 0:
            raise ValueError("drain timeout must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def cap(self, phase: int) -> int | None:
        """Cap for a 1-based phase number."""
        return self.caps[phase - 1]
