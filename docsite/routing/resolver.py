"""Route identifier resolution for source documents."""

from __future__ import annotations

import re
from typing import Mapping

from ..errors import InvalidRouteId

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase ``value`` and collapse every run of other characters into one hyphen."""
    return _NON_SLUG.sub("-", value.lower()).strip("-")


def validate_route_id(route_id: str, *, source: str = "<unknown>") -> str:
    """Reject ids that cannot be used as a relative output path."""
    if not route_id or route_id.startswith("/") or route_id.endswith("/"):
        raise InvalidRouteId(route_id, source)
    segments = route_id.split("/")
    if any(segment in {"", ".", ".."} for segment in segments):
        raise InvalidRouteId(route_id, source)
    return route_id


class RouteResolver:
    """Maps ``(filename, directory_prefix)`` pairs to canonical route ids."""

    def __init__(self, overrides: Mapping[str, str] | None = None, *, extension: str = ".md") -> None:
        self.overrides = {key.lower(): value for key, value in (overrides or {}).items()}
        self.extension = extension.lower()

    def resolve(self, filename: str, directory_prefix: str = "") -> str:
        lowered = filename.lower()
        override = self.overrides.get(lowered)
        if override is not None:
            return validate_route_id(override, source=filename)

        stem = filename[: -len(self.extension)] if lowered.endswith(self.extension) else filename
        slug = slugify(stem)
        if not slug:
            raise InvalidRouteId(slug, filename)

        prefix = self._prefix(directory_prefix)
        route_id = f"{prefix}/{slug}" if prefix else slug
        return validate_route_id(route_id, source=filename)

    @staticmethod
    def _prefix(directory_prefix: str) -> str:
        segments = [slugify(part) for part in directory_prefix.split("/")]
        return "/".join(segment for segment in segments if segment)

    def is_override(self, filename: str) -> bool:
        return filename.lower() in self.overrides


__all__ = ["RouteResolver", "slugify", "validate_route_id"]
