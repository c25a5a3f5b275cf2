"""Rewrites in-content links into hash navigation targets."""

from __future__ import annotations

import re
from typing import AbstractSet, List, Optional

_ANCHOR = re.compile(r'<a\b([^>]*?)\bhref="([^"]*)"([^>]*)>', re.IGNORECASE)
_ROUTE_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*(?:/[a-z0-9]+(?:-[a-z0-9]+)*)*$")
_EXTERNAL_PREFIXES = ("http://", "https://", "//", "mailto:", "tel:", "data:", "javascript:")
_PAGE_SUFFIXES = (".html", ".md")


def route_from_href(
    href: str,
    known_routes: Optional[AbstractSet[str]] = None,
    *,
    home_route: str = "home",
    current_route: Optional[str] = None,
) -> Optional[str]:
    """Return the route id an ``href`` points at, or ``None`` for non-route links.

    Relative targets resolve against the directory of ``current_route``, the
    way a browser resolves them against the page URL. With ``known_routes``
    a target that does not resolve that way is also tried from the site root,
    and must be one of them; without, it only has to look like a route id.
    """
    target = href.strip()
    if not target or target.lower().startswith(_EXTERNAL_PREFIXES):
        return None
    base: List[str] = []
    if target.startswith("#/"):
        target = target[2:]
    elif target.startswith("#"):
        return None
    elif not target.startswith("/") and current_route:
        base = current_route.split("/")[:-1]
    target = target.split("#", 1)[0].split("?", 1)[0]

    candidates = [_join(base, target, home_route)]
    if base:
        candidates.append(_join([], target, home_route))
    if known_routes is not None:
        return next((route for route in candidates if route in known_routes), None)
    return candidates[0] if _ROUTE_PATTERN.match(candidates[0]) else None


def _join(base: List[str], target: str, home_route: str) -> str:
    parts = list(base)
    for part in target.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    candidate = "/".join(parts)
    for suffix in _PAGE_SUFFIXES:
        if candidate.lower().endswith(suffix):
            candidate = candidate[: -len(suffix)]
            break
    return candidate or home_route


def route_from_hash(location_hash: str, *, home_route: str = "home") -> str:
    """Extract the route id from ``#/route`` style hashes; empty means home."""
    route = location_hash.strip()
    if route.startswith("#"):
        route = route[1:]
    route = route.lstrip("/")
    return route or home_route


def rewrite_internal_links(
    html: str,
    known_routes: Optional[AbstractSet[str]] = None,
    *,
    home_route: str = "home",
    current_route: Optional[str] = None,
) -> str:
    """Point internal anchors at ``#/route`` and tag them with ``data-route``."""

    def _replace(match: re.Match[str]) -> str:
        before, href, after = match.groups()
        if "data-route=" in before or "data-route=" in after:
            return match.group(0)
        route = route_from_href(
            href, known_routes, home_route=home_route, current_route=current_route
        )
        if route is None:
            return match.group(0)
        return f'<a{before}href="#/{route}" data-route="{route}"{after}>'

    return _ANCHOR.sub(_replace, html)


__all__ = ["rewrite_internal_links", "route_from_hash", "route_from_href"]
