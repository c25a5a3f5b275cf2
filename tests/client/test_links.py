"""Tests for in-content link rewriting."""

from __future__ import annotations

import pytest

from docsite.client.links import rewrite_internal_links, route_from_hash, route_from_href

KNOWN = {"home", "core/p2p", "core/architecture", "services/api"}


@pytest.mark.parametrize(
    ("href", "expected"),
    [
        ("core/p2p", "core/p2p"),
        ("../core/architecture", "core/architecture"),
        ("./services/api.md", "services/api"),
        ("/core/p2p.html", "core/p2p"),
        ("#/core/p2p", "core/p2p"),
        ("services/api#event-system", "services/api"),
        ("/", "home"),
        ("core/unknown", None),
        ("#section", None),
        ("https://example.com/core/p2p", None),
        ("mailto:team@example.com", None),
    ],
)
def test_route_from_href_with_known_routes(href: str, expected) -> None:
    assert route_from_href(href, KNOWN) == expected


def test_route_from_href_falls_back_to_pattern() -> None:
    assert route_from_href("guides/new-page") == "guides/new-page"
    assert route_from_href("Guides/New Page") is None
    assert route_from_href("image.png") is None


def test_route_from_hash() -> None:
    assert route_from_hash("#/core/p2p") == "core/p2p"
    assert route_from_hash("#") == "home"
    assert route_from_hash("") == "home"
    assert route_from_hash("#core/p2p") == "core/p2p"


def test_rewrite_internal_links_keeps_other_attributes() -> None:
    html = '<p><a title="P2P" href="../core/p2p" class="x">P2P</a> and <a href="#top">top</a></p>'

    rewritten = rewrite_internal_links(html, KNOWN)

    assert '<a title="P2P" href="#/core/p2p" data-route="core/p2p" class="x">P2P</a>' in rewritten
    assert '<a href="#top">top</a>' in rewritten


def test_rewrite_internal_links_is_idempotent() -> None:
    html = '<a href="core/p2p">P2P</a>'
    once = rewrite_internal_links(html, KNOWN)

    assert rewrite_internal_links(once, KNOWN) == once


KNOWN_NESTED = KNOWN | {"core/discovery", "guides/setup"}


@pytest.mark.parametrize(
    ("href", "expected"),
    [
        ("./discovery.md", "core/discovery"),
        ("discovery", "core/discovery"),
        ("../guides/setup.md", "guides/setup"),
        ("../../guides/setup", "guides/setup"),
        ("/services/api", "services/api"),
        ("#/services/api", "services/api"),
        ("core/architecture", "core/architecture"),
        ("missing.md", None),
    ],
)
def test_route_from_href_resolves_against_current_route(href: str, expected) -> None:
    assert route_from_href(href, KNOWN_NESTED, current_route="core/p2p") == expected


def test_relative_href_without_known_routes_uses_current_directory() -> None:
    assert route_from_href("./discovery.md", current_route="core/p2p") == "core/discovery"
    assert route_from_href("../index.md", current_route="core/p2p") == "index"


def test_rewrite_internal_links_uses_current_route() -> None:
    html = '<a href="./discovery.md">Discovery</a>'

    rewritten = rewrite_internal_links(html, KNOWN_NESTED, current_route="core/p2p")

    assert rewritten == '<a href="#/core/discovery" data-route="core/discovery">Discovery</a>'
