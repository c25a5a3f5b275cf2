"""Core data models shared across docsite components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SourceDocument:
    """A markdown file discovered under a source root."""

    absolute_path: Path
    directory_prefix: str
    raw_text: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.absolute_path.name


@dataclass(frozen=True)
class RouteEntry:
    """Navigable page (or category header when ``id`` is empty)."""

    id: str
    title: str
    category: Optional[str] = None

    @property
    def is_header(self) -> bool:
        return self.id == ""

    def to_dict(self) -> Dict[str, str]:
        data = {"id": self.id, "title": self.title}
        if self.category is not None:
            data["category"] = self.category
        return data


@dataclass(frozen=True)
class ContentArtifact:
    """Rendered HTML fragment for one route."""

    route_id: str
    html: str


@dataclass(frozen=True)
class ContentIndexEntry:
    """Value stored in the content index for a route."""

    html: str
    path: str

    def to_dict(self) -> Dict[str, str]:
        return {"html": self.html, "path": self.path}


@dataclass(frozen=True)
class BuildItem:
    """Pairing of a resolved route with its rendered content."""

    entry: RouteEntry
    artifact: ContentArtifact
    source: Path


@dataclass
class BuildResult:
    """Outcome of a full pipeline run."""

    output_dir: Path
    items: List[BuildItem]
    manifest: List[RouteEntry]
    content_index: Dict[str, ContentIndexEntry]
    errors: List[Exception] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)

    @property
    def route_ids(self) -> List[str]:
        return [item.entry.id for item in self.items]

    def summary(self) -> Dict[str, Any]:
        return {
            "routes": len(self.items),
            "output_dir": str(self.output_dir),
            "errors": [str(error) for error in self.errors],
        }
