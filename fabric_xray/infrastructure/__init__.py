"""Infrastructure helpers for fetching, caching and encoding images."""

from .cache import CACHE, ResponseCache, cache_key
from .network import FETCHER, SourceFetcher
from .responses import encode_png, send_png

__all__ = [
    "CACHE",
    "ResponseCache",
    "cache_key",
    "FETCHER",
    "SourceFetcher",
    "encode_png",
    "send_png",
]
