"""Client-side content loading state machine.

Each navigation carries an immutable :class:`NavigationToken`. The loader only
applies a result when the token's generation is still the latest one, so a
slow earlier navigation can never overwrite a faster later one. Superseded
work is ignored on completion, never cancelled or retried.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from ..errors import RouteNotFound
from ..logging import get_logger
from ..models import ContentIndexEntry
from .links import rewrite_internal_links, route_from_hash
from .sources import ContentSource

NOT_FOUND_HTML = (
    '<div class="error-container">'
    "<h2>Content Not Found</h2>"
    "<p>Sorry, the requested content could not be loaded.</p>"
    '<p><a href="#/{home}" data-route="{home}">Go to Home</a></p>'
    "</div>"
)


class LoaderState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYED = "displayed"
    ERROR = "error"


@dataclass(frozen=True)
class NavigationToken:
    generation: int
    route_id: str
    record_history: bool = True


@dataclass(frozen=True)
class NavigationOutcome:
    """What a single navigation ended up doing."""

    token: NavigationToken
    state: LoaderState
    displayed_route: Optional[str] = None
    stale: bool = False
    error: Optional[Exception] = None


class Container(Protocol):
    def render(self, html: str) -> None:
        ...


class History(Protocol):
    @property
    def current(self) -> Optional[str]:
        ...

    def push(self, route_id: str) -> None:
        ...

    def replace(self, route_id: str) -> None:
        ...


class MemoryContainer:
    """Container that keeps the injected HTML in memory (headless hosts, tests)."""

    def __init__(self) -> None:
        self.html = ""
        self.renders: List[str] = []

    def render(self, html: str) -> None:
        self.html = html
        self.renders.append(html)


class MemoryHistory:
    """Browser-like history stack of route ids."""

    def __init__(self) -> None:
        self.entries: List[str] = []
        self.position = -1

    @property
    def current(self) -> Optional[str]:
        return self.entries[self.position] if self.position >= 0 else None

    def push(self, route_id: str) -> None:
        del self.entries[self.position + 1 :]
        self.entries.append(route_id)
        self.position = len(self.entries) - 1

    def replace(self, route_id: str) -> None:
        if self.position < 0:
            self.push(route_id)
            return
        self.entries[self.position] = route_id

    def back(self) -> Optional[str]:
        """Move back one entry and return the new location hash, like ``popstate``."""
        if self.position <= 0:
            return None
        self.position -= 1
        return f"#/{self.entries[self.position]}"

    def forward(self) -> Optional[str]:
        if self.position >= len(self.entries) - 1:
            return None
        self.position += 1
        return f"#/{self.entries[self.position]}"


class ContentLoader:
    """Fetches route content, injects it and keeps history in step."""

    def __init__(
        self,
        source: ContentSource,
        container: Container,
        history: History,
        *,
        home_route: str = "home",
    ) -> None:
        self.source = source
        self.container = container
        self.history = history
        self.home_route = home_route
        self.state = LoaderState.IDLE
        self.current_route: Optional[str] = None
        self.last_error: Optional[Exception] = None
        self._generation = 0
        self.logger = get_logger("client.loader")

    @property
    def generation(self) -> int:
        return self._generation

    def dispatch(
        self, route_id: str, *, record_history: bool = True
    ) -> "asyncio.Task[NavigationOutcome]":
        """Start a navigation; must be called from within a running event loop."""
        self._generation += 1
        token = NavigationToken(self._generation, route_id, record_history)
        self.state = LoaderState.LOADING
        self.logger.debug("Navigation %d -> %s", token.generation, route_id)
        return asyncio.get_running_loop().create_task(self._load(token))

    async def navigate(self, route_id: str, *, record_history: bool = True) -> NavigationOutcome:
        return await self.dispatch(route_id, record_history=record_history)

    def handle_history_change(self, location_hash: str) -> "asyncio.Task[NavigationOutcome]":
        """React to back/forward: the browser already moved, so history is left alone."""
        route_id = route_from_hash(location_hash, home_route=self.home_route)
        return self.dispatch(route_id, record_history=False)

    async def _load(self, token: NavigationToken) -> NavigationOutcome:
        entry, error = await self._fetch(token.route_id)
        if self._is_stale(token):
            return NavigationOutcome(token, self.state, stale=True)

        if entry is not None:
            self._display(token.route_id, entry, push=token.record_history)
            return NavigationOutcome(token, self.state, displayed_route=token.route_id)

        self.state = LoaderState.ERROR
        self.last_error = error or RouteNotFound(token.route_id)
        self.logger.warning("Falling back to %s: %s", self.home_route, self.last_error)

        if token.route_id != self.home_route:
            home_entry, _ = await self._fetch(self.home_route)
            if self._is_stale(token):
                return NavigationOutcome(token, self.state, stale=True, error=self.last_error)
            if home_entry is not None:
                self._display(self.home_route, home_entry, push=token.record_history)
                if not token.record_history:
                    # The browser already moved to the missing entry.
                    self.history.replace(self.home_route)
                return NavigationOutcome(
                    token,
                    self.state,
                    displayed_route=self.home_route,
                    error=self.last_error,
                )

        self.container.render(NOT_FOUND_HTML.format(home=self.home_route))
        self.current_route = None
        return NavigationOutcome(token, self.state, error=self.last_error)

    async def _fetch(
        self, route_id: str
    ) -> tuple[Optional[ContentIndexEntry], Optional[Exception]]:
        try:
            return await self.source.fetch(route_id), None
        except Exception as exc:  # any fetch failure must end in a visible fallback
            self.logger.error("Failed to load %s: %s", route_id, exc)
            return None, exc

    def _is_stale(self, token: NavigationToken) -> bool:
        stale = token.generation != self._generation
        if stale:
            self.logger.debug(
                "Discarding navigation %d to %s (current %d)",
                token.generation,
                token.route_id,
                self._generation,
            )
        return stale

    def _display(self, route_id: str, entry: ContentIndexEntry, *, push: bool) -> None:
        html = rewrite_internal_links(
            entry.html,
            self.source.known_routes(),
            home_route=self.home_route,
            current_route=route_id,
        )
        self.container.render(html)
        if push:
            if self.history.current == route_id:
                self.history.replace(route_id)
            else:
                self.history.push(route_id)
        self.current_route = route_id
        self.state = LoaderState.DISPLAYED


__all__ = [
    "Container",
    "ContentLoader",
    "History",
    "LoaderState",
    "MemoryContainer",
    "MemoryHistory",
    "NOT_FOUND_HTML",
    "NavigationOutcome",
    "NavigationToken",
]
