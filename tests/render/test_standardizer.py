"""Tests for the legacy document standardizer."""

from __future__ import annotations

from docsite.render import ContentRenderer, DocumentStandardizer


def test_synthesises_title_from_hint() -> None:
    result = DocumentStandardizer().standardize("Intro text.\n\n## Usage\n\nRun it.\n", "keys-management")

    assert result.startswith("# Keys Management\n\nIntro text.")


def test_keeps_existing_title() -> None:
    result = DocumentStandardizer().standardize("# P2P Spec\n\n## Usage\n", "p2p")

    assert result.startswith("# P2P Spec\n")
    assert result.count("\n# ") == 0


def test_inserts_table_of_contents_before_first_section() -> None:
    source = "# Caching\n\nIntro.\n\n## Strategies\n\n### LRU\n\n## Examples\n\nSee below.\n"
    result = DocumentStandardizer().standardize(source, "caching")

    toc_at = result.index("## Table of Contents")
    assert toc_at < result.index("## Strategies")
    assert result.index("Intro.") < toc_at
    assert "- [Strategies](#strategies)" in result
    assert "  - [LRU](#lru)" in result
    assert "- [Examples](#examples)" in result


def test_existing_contents_heading_prevents_insertion() -> None:
    source = "# Doc\n\n## Contents\n\n- [A](#a)\n\n## A\n\n## Example\n"
    result = DocumentStandardizer().standardize(source, "doc")

    assert "Table of Contents" not in result
    assert result == source


def test_appends_examples_placeholder() -> None:
    result = DocumentStandardizer().standardize("# Metrics\n\n## Counters\n", "metrics")

    assert result.rstrip().endswith("This section will be expanded with practical examples.")
    assert "- [Examples](#examples)" in result


def test_standardize_is_idempotent() -> None:
    standardizer = DocumentStandardizer()
    once = standardizer.standardize("Body only.\n\n## Setup\n", "mobile")

    assert standardizer.standardize(once, "mobile") == once


def test_toc_anchors_match_rendered_heading_ids() -> None:
    source = "# Gateway\n\n## Routing\n\n## Routing\n\n## Table Setup\n"
    standardized = DocumentStandardizer().standardize(source, "gateway")
    html = ContentRenderer().render(standardized)

    assert "- [Routing](#routing)" in standardized
    assert "- [Routing](#routing_1)" in standardized
    assert '<h2 id="routing">Routing</h2>' in html
    assert '<h2 id="routing_1">Routing</h2>' in html
    assert '<h2 id="table-of-contents">Table of Contents</h2>' in html


def test_headings_inside_code_fences_are_ignored() -> None:
    source = "# Doc\n\n```bash\n## not a heading\n```\n\n## Real\n"
    result = DocumentStandardizer().standardize(source, "doc")

    assert "not-a-heading" not in result
    assert "- [Real](#real)" in result
