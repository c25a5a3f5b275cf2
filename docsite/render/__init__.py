"""Rendering and pre-render normalisation of markdown sources."""

from .renderer import ERROR_FRAGMENT, ContentRenderer, rewrite_diagrams
from .standardizer import DocumentStandardizer

__all__ = ["ContentRenderer", "DocumentStandardizer", "ERROR_FRAGMENT", "rewrite_diagrams"]
