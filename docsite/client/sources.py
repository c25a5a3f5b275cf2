"""Content lookups used by the loader: in-memory index or HTTP fetches."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import AbstractSet, Callable, Mapping, Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..manifest import content_index_from_json
from ..models import ContentIndexEntry


class ContentSource(Protocol):
    """Anything able to look up the content of a route id."""

    async def fetch(self, route_id: str) -> Optional[ContentIndexEntry]:
        ...

    def known_routes(self) -> Optional[AbstractSet[str]]:
        ...


class IndexContentSource:
    """Serves lookups from an already loaded content index."""

    def __init__(self, index: Mapping[str, ContentIndexEntry]) -> None:
        self._index = dict(index)

    @classmethod
    def from_file(cls, path: Path) -> "IndexContentSource":
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(content_index_from_json(payload))

    async def fetch(self, route_id: str) -> Optional[ContentIndexEntry]:
        return self._index.get(route_id)

    def known_routes(self) -> AbstractSet[str]:
        return self._index.keys()


class HttpContentSource:
    """Fetches ``{base_url}/{route_id}.html`` per navigation.

    Requests run in the default executor so the event loop stays free; a 404
    maps to a missing route, any other failure propagates.
    """

    def __init__(
        self,
        base_url: str,
        *,
        home_route: str = "home",
        timeout: Optional[float] = 30.0,
        opener: Callable[..., object] = urlopen,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.home_route = home_route
        self.timeout = timeout
        self._opener = opener

    async def fetch(self, route_id: str) -> Optional[ContentIndexEntry]:
        loop = asyncio.get_running_loop()
        html = await loop.run_in_executor(None, self._get, route_id)
        if html is None:
            return None
        path = "/" if route_id == self.home_route else f"/{route_id}"
        return ContentIndexEntry(html=html, path=path)

    def known_routes(self) -> None:
        return None

    def _get(self, route_id: str) -> Optional[str]:
        url = f"{self.base_url}/{quote(route_id)}.html"
        request = Request(url, headers={"Accept": "text/html"})
        try:
            with self._opener(request, timeout=self.timeout) as response:  # type: ignore[attr-defined]
                return response.read().decode("utf-8")
        except HTTPError as exc:
            if exc.code == 404:
                return None
            raise RuntimeError(f"Fetching {url} failed with HTTP {exc.code}") from exc
        except URLError as exc:
            raise RuntimeError(f"Unable to reach {url}: {exc.reason}") from exc


__all__ = ["ContentSource", "HttpContentSource", "IndexContentSource"]
