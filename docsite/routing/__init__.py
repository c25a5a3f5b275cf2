"""Route id and title resolution."""

from .resolver import RouteResolver, slugify, validate_route_id
from .titles import derive_title, title_case

__all__ = ["RouteResolver", "derive_title", "slugify", "title_case", "validate_route_id"]
