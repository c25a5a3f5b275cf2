"""End-to-end tests for the build pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docsite.errors import BuildError, DirectoryNotFound, InvalidRouteId, RouteIdCollision, SourceFileUnreadable
from docsite.models import SourceDocument
from docsite.render import ERROR_FRAGMENT

CONFIG = {
    "overrides": {"P2P-spec.md": "core/p2p", "index.md": "home"},
    "categories": [
        {"name": "Getting Started", "routes": ["getting-started/overview"]},
        {"name": "Core", "routes": ["core/p2p", "core/architecture"]},
    ],
}


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def sample_site(docs_builder):
    docs_builder.configure(CONFIG)
    docs_builder.write(
        {
            "index.md": "# Welcome\n\nStart with the [overview](getting-started/overview).\n",
            "getting-started/overview.md": "# Overview\n\nRead about [P2P](../core/p2p).\n",
            "legacy/P2P-spec.md": "# P2P\n\n```mermaid\ngraph LR\nA-->B\n```\n",
            "core/architecture.md": "# Architecture\n",
            "my-new-feature.md": "# My new feature\n",
        }
    )
    return docs_builder


def test_build_writes_pages_manifest_and_index(sample_site) -> None:
    result = sample_site.pipeline().build()
    output = sample_site.output

    assert sorted(result.route_ids) == [
        "core/architecture",
        "core/p2p",
        "getting-started/overview",
        "home",
        "my-new-feature",
    ]
    assert (output / "core" / "p2p.html").exists()
    assert (output / "getting-started" / "overview.html").exists()
    assert (output / "docsite-loader.js").exists()
    assert result.errors == []

    content = json.loads((output / "content.json").read_text(encoding="utf-8"))
    assert set(content) == set(result.route_ids)
    assert content["core/p2p"]["path"] == "/core/p2p"
    assert content["home"]["path"] == "/"
    assert content["my-new-feature"]["path"] == "/my-new-feature"
    assert '<div class="mermaid">' in content["core/p2p"]["html"]
    assert content["core/p2p"]["html"] == (output / "core" / "p2p.html").read_text(encoding="utf-8")

    routes = json.loads((output / "routes.json").read_text(encoding="utf-8"))
    assert routes == [
        {"id": "home", "title": "Home"},
        {"id": "", "title": "Getting Started", "category": "Getting Started"},
        {"id": "getting-started/overview", "title": "Overview", "category": "Getting Started"},
        {"id": "", "title": "Core", "category": "Core"},
        {"id": "core/p2p", "title": "P2P", "category": "Core"},
        {"id": "core/architecture", "title": "Architecture", "category": "Core"},
    ]


def test_rebuild_is_byte_identical(sample_site) -> None:
    pipeline = sample_site.pipeline()
    pipeline.build()
    first = _snapshot(sample_site.output)

    sample_site.pipeline().build()

    assert _snapshot(sample_site.output) == first


def test_missing_root_is_skipped_when_another_exists(sample_site) -> None:
    sample_site.configure({**CONFIG, "source_roots": ["docs", "missing"]})

    result = sample_site.pipeline().build()

    assert len(result.items) == 5
    assert [type(error) for error in result.errors] == [DirectoryNotFound]


def test_build_fails_when_every_root_is_missing(docs_builder) -> None:
    docs_builder.configure({"source_roots": ["nope"]})

    with pytest.raises(BuildError):
        docs_builder.pipeline().build()


def test_unreadable_file_gets_placeholder(sample_site) -> None:
    (sample_site.docs / "broken.md").write_bytes(b"\xff\xfe\xfa not utf-8")

    result = sample_site.pipeline().build()

    assert result.content_index["broken"].html == ERROR_FRAGMENT
    assert any(isinstance(error, SourceFileUnreadable) for error in result.errors)


def test_collision_fails_the_build(sample_site) -> None:
    sample_site.write({"My New Feature.md": "# Duplicate\n"})

    with pytest.raises(RouteIdCollision) as excinfo:
        sample_site.pipeline().build()

    assert excinfo.value.route_id == "my-new-feature"
    assert not (sample_site.output / "routes.json").exists()


def test_transform_is_pure_and_sorted(docs_builder) -> None:
    pipeline = docs_builder.pipeline()
    documents = [
        SourceDocument(Path("/virtual/zeta.md"), "", "# Zeta\n"),
        SourceDocument(Path("/virtual/api.md"), "services", "# API\n"),
    ]

    items = pipeline.transform(documents)

    assert [item.entry.id for item in items] == ["services/api", "zeta"]
    assert items[0].entry.title == "API"
    assert items[1].artifact.html == '<h1 id="zeta">Zeta</h1>'
    assert not docs_builder.output.exists()


def test_transform_records_invalid_ids(docs_builder) -> None:
    pipeline = docs_builder.pipeline()
    documents = [SourceDocument(Path("/virtual/!!!.md"), "", "x")]
    errors: list[Exception] = []

    assert pipeline.transform(documents, errors) == []
    assert isinstance(errors[0], InvalidRouteId)


def test_clean_removes_stale_pages(sample_site) -> None:
    stale = sample_site.output / "old" / "page.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("<p>old</p>", encoding="utf-8")

    sample_site.pipeline().build(clean=True)

    assert not stale.exists()
    assert (sample_site.output / "core" / "p2p.html").exists()


def test_migrate_standardizes_legacy_documents(docs_builder) -> None:
    docs_builder.configure({"legacy": {"files": {"Metrics-spec.md": "features/metrics.md", "Gone.md": "x/gone.md"}}})
    docs_builder.write({"Metrics-spec.md": "Counters and gauges.\n\n## Counters\n"})

    created = docs_builder.pipeline().migrate()

    target = docs_builder.docs / "features" / "metrics.md"
    assert created == [target]
    text = target.read_text(encoding="utf-8")
    assert text.startswith("# Metrics\n")
    assert "## Table of Contents" in text
    assert "## Examples" in text
    assert (docs_builder.docs / "Metrics-spec.md").exists()


def test_build_with_migrate_includes_migrated_routes(docs_builder) -> None:
    docs_builder.configure({"legacy": {"files": {"Caching.md": "features/caching.md"}}})
    docs_builder.write({"Caching.md": "# Caching\n"})

    result = docs_builder.pipeline().build(migrate=True)

    assert "features/caching" in result.route_ids
    assert "caching" not in result.route_ids
    assert (docs_builder.docs / "Caching.md").exists()


def test_build_with_migrate_keeps_override_on_legacy_name(docs_builder) -> None:
    docs_builder.configure(
        {
            "overrides": {"p2p-spec.md": "core/p2p"},
            "legacy": {"files": {"P2P-spec.md": "core/p2p.md"}},
        }
    )
    docs_builder.write({"P2P-spec.md": "Peer discovery.\n\n## Discovery\n"})

    result = docs_builder.pipeline().build(migrate=True)
    rebuilt = docs_builder.pipeline().build()

    assert result.route_ids.count("core/p2p") == 1
    item = next(item for item in result.items if item.entry.id == "core/p2p")
    assert item.source == (docs_builder.docs / "core" / "p2p.md").resolve()
    assert "Table of Contents" in item.artifact.html
    assert rebuilt.route_ids == result.route_ids


def test_unmigrated_legacy_source_is_still_built(docs_builder) -> None:
    docs_builder.configure({"legacy": {"files": {"Caching.md": "features/caching.md"}}})
    docs_builder.write({"Caching.md": "# Caching\n"})

    result = docs_builder.pipeline().build()

    assert "caching" in result.route_ids
    assert "features/caching" not in result.route_ids
