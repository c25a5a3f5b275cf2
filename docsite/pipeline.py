"""Build pipeline orchestration: walk, read, transform, persist."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .client.runtime import render_runtime
from .config import SiteConfig, load_config
from .errors import (
    BuildError,
    DirectoryNotFound,
    InvalidRouteId,
    RouteIdCollision,
    SourceFileUnreadable,
)
from .logging import get_logger
from .manifest import ManifestBuilder, content_index_to_json, manifest_to_json
from .models import BuildItem, BuildResult, ContentArtifact, RouteEntry, SourceDocument
from .render.renderer import ContentRenderer
from .render.standardizer import DocumentStandardizer
from .routing.resolver import RouteResolver
from .routing.titles import derive_title
from .source_walker import SourceWalker
from .stores.artifacts import ArtifactStore


class SitePipeline:
    """Coordinates a full documentation build for one configuration."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        walker: SourceWalker | None = None,
        resolver: RouteResolver | None = None,
        renderer: ContentRenderer | None = None,
        standardizer: DocumentStandardizer | None = None,
        manifest_builder: ManifestBuilder | None = None,
        store: ArtifactStore | None = None,
    ) -> None:
        self.config = config
        self.walker = walker or SourceWalker(
            extension=config.extension, exclude_paths=config.exclude_paths
        )
        self.resolver = resolver or RouteResolver(config.overrides, extension=config.extension)
        self.renderer = renderer or ContentRenderer(diagram_language=config.diagram_language)
        self.standardizer = standardizer or DocumentStandardizer()
        self.manifest_builder = manifest_builder or ManifestBuilder(
            config.categories,
            home_route=config.home_route,
            home_title=config.home_title,
        )
        self.store = store or ArtifactStore(config.output_dir)
        self.logger = get_logger("pipeline")

    @classmethod
    def from_path(cls, path: str | Path) -> "SitePipeline":
        return cls(load_config(Path(path)))

    # ------------------------------------------------------------------
    # Entry points

    def build(self, *, migrate: bool = False, clean: bool = False) -> BuildResult:
        return asyncio.run(self.build_async(migrate=migrate, clean=clean))

    async def build_async(self, *, migrate: bool = False, clean: bool = False) -> BuildResult:
        """Run the full pipeline; the manifest is written only after every page settles."""
        if migrate:
            self.migrate()

        errors: List[Exception] = []
        documents = self.collect(errors)
        self.logger.info("Discovered %d source documents", len(documents))

        documents = await self.read_documents(documents, errors)
        items = self.transform(documents, errors)

        pages = await self.store.write_pages(item.artifact for item in items)

        manifest = self.manifest_builder.build_manifest(item.entry for item in items)
        content_index = self.manifest_builder.build_content_index(item.artifact for item in items)
        written = list(pages)
        written.append(self.store.write_manifest(manifest_to_json(manifest)))
        written.append(self.store.write_content_index(content_index_to_json(content_index)))
        if self.config.client.emit_runtime:
            script = render_runtime(self.config.client, home_route=self.config.home_route)
            written.append(self.store.write_runtime(script))
        if clean:
            self.store.remove_stale_pages(set(pages))

        for error in errors:
            self.logger.warning("%s", error)
        self.logger.info(
            "Built %d routes into %s (%d warnings)", len(items), self.store.output_dir, len(errors)
        )
        return BuildResult(
            output_dir=self.store.output_dir,
            items=items,
            manifest=manifest,
            content_index=content_index,
            errors=errors,
            written=written,
        )

    # ------------------------------------------------------------------
    # Stages

    def collect(self, errors: List[Exception]) -> List[SourceDocument]:
        """Walk every source root; fail only when none of them exist."""
        documents: List[SourceDocument] = []
        superseded = self.superseded_sources()
        missing = 0
        for root in self.config.source_roots:
            try:
                walked = self.walker.walk(root)
            except DirectoryNotFound as exc:
                missing += 1
                errors.append(exc)
                continue
            for document in walked:
                if document.absolute_path.resolve() in superseded:
                    self.logger.debug("Skipping migrated legacy source %s", document.absolute_path)
                    continue
                documents.append(document)
        if self.config.source_roots and missing == len(self.config.source_roots):
            raise BuildError(
                "No source directory found: "
                + ", ".join(str(root) for root in self.config.source_roots)
            )
        return documents

    async def read_documents(
        self, documents: Sequence[SourceDocument], errors: List[Exception]
    ) -> List[SourceDocument]:
        loop = asyncio.get_running_loop()
        texts = await asyncio.gather(
            *(loop.run_in_executor(None, _read_text, doc.absolute_path) for doc in documents)
        )
        loaded: List[SourceDocument] = []
        for document, text in zip(documents, texts):
            if isinstance(text, SourceFileUnreadable):
                errors.append(text)
                text = None
            loaded.append(replace(document, raw_text=text))
        return loaded

    def transform(
        self, documents: Iterable[SourceDocument], errors: Optional[List[Exception]] = None
    ) -> List[BuildItem]:
        """Resolve and render documents without touching the filesystem.

        Raises ``RouteIdCollision`` when two documents map to the same id.
        """
        items: Dict[str, BuildItem] = {}
        for document in documents:
            try:
                route_id = self.resolver.resolve(document.filename, document.directory_prefix)
            except InvalidRouteId as exc:
                if errors is None:
                    raise
                errors.append(exc)
                continue

            existing = items.get(route_id)
            if existing is not None:
                raise RouteIdCollision(route_id, existing.source, document.absolute_path)

            title = derive_title(
                document.filename,
                extension=self.config.extension,
                strip_suffixes=self.config.titles.strip_suffixes,
                acronyms=self.config.titles.acronyms,
            )
            html = self.renderer.render(document.raw_text)
            items[route_id] = BuildItem(
                entry=RouteEntry(id=route_id, title=title),
                artifact=ContentArtifact(route_id=route_id, html=html),
                source=document.absolute_path,
            )
        return [items[key] for key in sorted(items)]

    def migrate(self) -> List[Path]:
        """Standardise configured legacy documents into their new locations."""
        legacy_root = self.config.legacy.root
        created: List[Path] = []
        if legacy_root is None:
            return created
        for source_name, destination_name in sorted(self.config.legacy.files.items()):
            source = legacy_root / source_name
            destination = legacy_root / destination_name
            if not source.is_file():
                self.logger.info("Legacy source not found: %s", source)
                continue
            content = source.read_text(encoding="utf-8")
            hint = Path(destination_name).stem
            standardized = self.standardizer.standardize(content, hint)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(standardized, encoding="utf-8")
            self.logger.info("Migrated %s -> %s", source, destination)
            created.append(destination)
        return created

    def superseded_sources(self) -> Set[Path]:
        """Legacy sources whose migrated copy exists; the copy owns the route."""
        legacy_root = self.config.legacy.root
        if legacy_root is None:
            return set()
        superseded: Set[Path] = set()
        for source_name, destination_name in self.config.legacy.files.items():
            source = (legacy_root / source_name).resolve()
            destination = (legacy_root / destination_name).resolve()
            if source != destination and destination.is_file():
                superseded.add(source)
        return superseded


def _read_text(path: Path) -> str | SourceFileUnreadable:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return SourceFileUnreadable(path, str(exc))


__all__ = ["SitePipeline"]
