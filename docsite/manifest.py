"""Navigation manifest and content index assembly."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .config import Category
from .models import ContentArtifact, ContentIndexEntry, RouteEntry


class ManifestBuilder:
    """Aggregates resolved routes into ``routes.json`` and ``content.json`` shapes."""

    def __init__(
        self,
        categories: Sequence[Category] = (),
        *,
        home_route: str = "home",
        home_title: str = "Home",
    ) -> None:
        self.categories = list(categories)
        self.home_route = home_route
        self.home_title = home_title

    def build_manifest(self, entries: Iterable[RouteEntry]) -> List[RouteEntry]:
        """Return the ordered manifest: home first, then each non-empty category."""
        by_id = {entry.id: entry for entry in entries}
        manifest: List[RouteEntry] = [RouteEntry(id=self.home_route, title=self.home_title)]
        placed = {self.home_route}

        for category in self.categories:
            members: List[RouteEntry] = []
            for route_id in category.routes:
                entry = by_id.get(route_id)
                if entry is None or route_id in placed:
                    continue
                placed.add(route_id)
                members.append(RouteEntry(id=entry.id, title=entry.title, category=category.name))
            if not members:
                # No header for a group with nothing to link to.
                continue
            manifest.append(RouteEntry(id="", title=category.name, category=category.name))
            manifest.extend(members)
        return manifest

    def build_content_index(
        self, artifacts: Iterable[ContentArtifact]
    ) -> Dict[str, ContentIndexEntry]:
        """Map every route id to its HTML and public path, sorted by id."""
        index: Dict[str, ContentIndexEntry] = {}
        for artifact in sorted(artifacts, key=lambda item: item.route_id):
            index[artifact.route_id] = ContentIndexEntry(
                html=artifact.html, path=self.public_path(artifact.route_id)
            )
        return index

    def public_path(self, route_id: str) -> str:
        return "/" if route_id == self.home_route else f"/{route_id}"


def manifest_to_json(manifest: Sequence[RouteEntry]) -> List[Dict[str, str]]:
    return [entry.to_dict() for entry in manifest]


def content_index_to_json(index: Dict[str, ContentIndexEntry]) -> Dict[str, Dict[str, str]]:
    return {route_id: entry.to_dict() for route_id, entry in index.items()}


def content_index_from_json(payload: object) -> Dict[str, ContentIndexEntry]:
    """Parse a ``content.json`` payload, skipping malformed entries."""
    if not isinstance(payload, dict):
        return {}
    index: Dict[str, ContentIndexEntry] = {}
    for route_id, raw in payload.items():
        if not isinstance(route_id, str) or not isinstance(raw, dict):
            continue
        html = raw.get("html")
        path = raw.get("path")
        if isinstance(html, str) and isinstance(path, str):
            index[route_id] = ContentIndexEntry(html=html, path=path)
    return index


__all__ = [
    "ManifestBuilder",
    "content_index_from_json",
    "content_index_to_json",
    "manifest_to_json",
]
