"""Linkhop: three-hop link crawler with a bounded worker pool."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("linkhop")
except PackageNotFoundError:
    __version__ = "0.0.0+dev"
