"""Client-side content loading."""

from .links import rewrite_internal_links, route_from_hash, route_from_href
from .loader import (
    ContentLoader,
    LoaderState,
    MemoryContainer,
    MemoryHistory,
    NavigationOutcome,
    NavigationToken,
)
from .runtime import render_runtime
from .sources import ContentSource, HttpContentSource, IndexContentSource

__all__ = [
    "ContentLoader",
    "ContentSource",
    "HttpContentSource",
    "IndexContentSource",
    "LoaderState",
    "MemoryContainer",
    "MemoryHistory",
    "NavigationOutcome",
    "NavigationToken",
    "render_runtime",
    "rewrite_internal_links",
    "route_from_hash",
    "route_from_href",
]
