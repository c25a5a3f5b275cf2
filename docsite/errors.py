"""Error taxonomy shared by the build pipeline and the content loader."""

from __future__ import annotations

from pathlib import Path


class DocsiteError(RuntimeError):
    """Base class for docsite failures."""


class BuildError(DocsiteError):
    """Raised when a build cannot produce a site at all."""


class DirectoryNotFound(DocsiteError):
    """A configured source root does not exist."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"Source directory not found: {root}")
        self.root = root


class SourceFileUnreadable(DocsiteError):
    """An individual source document could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to read {path}: {reason}")
        self.path = path
        self.reason = reason


class InvalidRouteId(DocsiteError):
    """A document resolved to an id that cannot be used as a route."""

    def __init__(self, route_id: str, source: str) -> None:
        super().__init__(f"Invalid route id {route_id!r} for {source}")
        self.route_id = route_id
        self.source = source


class RouteIdCollision(BuildError):
    """Two distinct source documents resolved to the same route id."""

    def __init__(self, route_id: str, first: Path, second: Path) -> None:
        super().__init__(
            f"Route id {route_id!r} is produced by both {first} and {second}"
        )
        self.route_id = route_id
        self.first = first
        self.second = second


class RouteNotFound(DocsiteError):
    """The requested route id is absent from the content index."""

    def __init__(self, route_id: str) -> None:
        super().__init__(f"Route not found: {route_id}")
        self.route_id = route_id


__all__ = [
    "BuildError",
    "DirectoryNotFound",
    "DocsiteError",
    "InvalidRouteId",
    "RouteIdCollision",
    "RouteNotFound",
    "SourceFileUnreadable",
]
